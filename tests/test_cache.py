import pytest

from asset_compass.app import db
from asset_compass.app.cache import INVALIDATION_RULES, CollectionCache, get_cache
from asset_compass.app.models import Asset, Employee
from asset_compass.app.services.assignments import assign_asset
from asset_compass.app.services.store import load_assets, load_locations


def test_get_loads_once_within_ttl():
    cache = CollectionCache(ttl=60)
    calls = []

    def loader():
        calls.append(1)
        return ['a']

    assert cache.get('assets', loader) == ['a']
    assert cache.get('assets', loader) == ['a']
    assert len(calls) == 1


def test_expired_entries_reload():
    cache = CollectionCache(ttl=0)
    calls = []
    cache.get('assets', lambda: calls.append(1))
    cache.get('assets', lambda: calls.append(1))
    assert len(calls) == 2


def test_invalidate_drops_declared_collections_only():
    cache = CollectionCache(ttl=60)
    for key in ('assets', 'alerts', 'settings', 'locations'):
        cache.get(key, lambda: [])

    cache.invalidate('asset_return')

    assert 'assets' not in cache
    assert 'locations' in cache
    assert 'alerts' in cache
    assert 'settings' in cache


def test_unknown_mutation_kind():
    with pytest.raises(ValueError):
        CollectionCache().invalidate('spaceship')


def test_every_rule_names_known_collections():
    known = {'assets', 'employees', 'locations', 'assignments', 'alerts', 'settings', 'dashboard'}
    for keys in INVALIDATION_RULES.values():
        assert set(keys) <= known


def test_snapshots_are_detached(ctx, sample):
    assets = load_assets()
    db.session.remove()
    assert {a.asset_tag for a in assets} == {'AST-0001', 'AST-0002', 'AST-0003'}


def test_assignment_invalidates_cached_assets(ctx, sample):
    before = {a.id: a.status for a in load_assets()}
    load_locations()

    assign_asset(db.session.get(Asset, sample.laptop_id), db.session.get(Employee, sample.alice_id))

    assert 'assets' not in get_cache()
    assert 'locations' in get_cache()
    after = {a.id: a.status for a in load_assets()}
    assert before[sample.laptop_id] == 'available'
    assert after[sample.laptop_id] == 'assigned'


def test_clear_empties_cache():
    cache = CollectionCache(ttl=60)
    cache.get('assets', lambda: [])
    cache.clear()
    assert 'assets' not in cache


def test_load_overlapping_invalidation_is_not_stored():
    cache = CollectionCache(ttl=60)
    store = {'assets': 'old'}

    def slow_loader():
        value = store['assets']
        # a mutation commits and invalidates while this load is in flight
        store['assets'] = 'new'
        cache.invalidate('asset')
        return value

    assert cache.get('assets', slow_loader) == 'old'
    assert 'assets' not in cache
    assert cache.get('assets', lambda: store['assets']) == 'new'


def test_load_overlapping_clear_is_not_stored():
    cache = CollectionCache(ttl=60)

    def loader():
        cache.clear()
        return 'stale'

    cache.get('alerts', loader)
    assert 'alerts' not in cache
