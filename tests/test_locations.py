from types import SimpleNamespace

import pytest

from asset_compass.app import db
from asset_compass.app.errors import ConflictError
from asset_compass.app.models import Asset, Employee, Location
from asset_compass.app.services import inventory
from asset_compass.app.services.locations import (backfill_location_ids, belongs_to_location,
                                                  display_location_name, location_counts,
                                                  location_detail, location_names_match,
                                                  members_of, resolve_location_id)


def loc(id, name):
    return SimpleNamespace(id=id, name=name)


def rec(location=None, location_id=None, status='available', category='Laptop', created_at=None):
    return SimpleNamespace(location=location, location_id=location_id, status=status,
                           category=category, created_at=created_at)


def test_matching_id_wins_over_name():
    assert belongs_to_location(rec(location='Somewhere Else', location_id=7), loc(7, 'Head Office'))


def test_name_match_ignores_case_and_whitespace():
    assert belongs_to_location(rec(location='  head OFFICE '), loc(1, 'Head Office'))


def test_name_match_applies_when_id_points_elsewhere():
    assert belongs_to_location(rec(location='Head Office', location_id=99), loc(1, 'Head Office'))


@pytest.mark.parametrize('record_name, location_name', [
    ('Warehouse', 'Central Warehouse'),
    ('Central Warehouse', 'Warehouse'),
    ('central warehouse ', 'WAREHOUSE'),
])
def test_warehouse_alias_is_symmetric(record_name, location_name):
    assert belongs_to_location(rec(location=record_name), loc(1, location_name))


def test_alias_does_not_extend_to_other_names():
    assert not location_names_match('Warehouse', 'North Warehouse')
    assert not location_names_match('Central Warehouse', 'Central')


@pytest.mark.parametrize('name', [None, '', '   '])
def test_empty_names_never_match(name):
    assert not belongs_to_location(rec(location=name), loc(1, name))


def test_members_of_returns_empty_list_without_matches():
    records = [rec(location='Head Office', location_id=1)]
    assert members_of(loc(2, 'Remote'), records) == []


def test_location_counts_uses_resolver():
    warehouse, office = loc(1, 'Central Warehouse'), loc(2, 'Head Office')
    assets = [rec(location='Central Warehouse', location_id=1), rec(location='Warehouse'),
              rec(location='Head Office', location_id=2)]
    employees = [rec(location='warehouse'), rec(location='Head Office', location_id=2)]

    assert location_counts([warehouse, office], assets, employees) == {1: (2, 1), 2: (1, 1)}


def test_location_detail_statistics():
    warehouse = loc(1, 'Central Warehouse')
    assets = [
        rec(location_id=1, status='assigned', category='laptop', created_at=3),
        rec(location='Warehouse', status='available', category='Laptop', created_at=2),
        rec(location_id=1, status='repair', category='Monitor', created_at=1),
        rec(location_id=1, status='assigned', category='Phone', created_at=4),
        rec(location_id=2, location='Head Office', status='assigned'),
    ]
    detail = location_detail(warehouse, assets, [])

    assert detail['total_assets'] == 4
    assert detail['by_status']['assigned'] == 2
    assert detail['by_status']['lost'] == 0
    assert detail['utilization_rate'] == 50.0
    assert [(c['name'], c['value']) for c in detail['categories']][0] == ('Laptop', 2)
    assert [a.created_at for a in detail['recent_assets']] == [4, 3, 2, 1]


def test_location_detail_without_assets_has_zero_utilization():
    detail = location_detail(loc(1, 'Empty'), [], [])
    assert detail['total_assets'] == 0
    assert detail['utilization_rate'] == 0


def test_resolve_location_id():
    locations = [loc(1, 'Head Office'), loc(2, 'Central Warehouse')]
    assert resolve_location_id('warehouse', locations) == 2
    assert resolve_location_id('HEAD OFFICE', locations) == 1
    assert resolve_location_id('Mars', locations) is None
    assert resolve_location_id('', locations) is None


def test_display_location_name():
    assert display_location_name('Warehouse') == 'Central Warehouse'
    assert display_location_name('Head Office') == 'Head Office'
    assert display_location_name(None) == ''


def test_backfill_location_ids(ctx, sample):
    db.session.add(Asset(name='Lost Cable', asset_tag='AST-0099', location='Nowhere'))
    db.session.commit()

    result = backfill_location_ids()

    assert result == {'fixed': 2, 'unresolved': 1, 'total': 6}
    assert db.session.get(Asset, sample.monitor_id).location_id == sample.warehouse_id
    assert db.session.get(Employee, sample.bob_id).location_id == sample.warehouse_id


def test_delete_location_refused_while_members_resolve(ctx, sample):
    # Only the legacy "Warehouse" name points here once the id-linked laptop is gone
    inventory.delete_asset(db.session.get(Asset, sample.laptop_id))
    warehouse = db.session.get(Location, sample.warehouse_id)

    with pytest.raises(ConflictError) as excinfo:
        inventory.delete_location(warehouse)
    assert 'may still be linked' in excinfo.value.message


def test_delete_empty_location(ctx, sample):
    spare = inventory.create_location({'name': 'Spare Room', 'type': 'office'})
    inventory.delete_location(spare)
    assert Location.query.filter_by(name='Spare Room').first() is None


def test_rename_location_propagates_to_linked_records(ctx, sample):
    office = db.session.get(Location, sample.office_id)
    inventory.update_location(office, {'name': 'HQ'})

    assert db.session.get(Asset, sample.phone_id).location == 'HQ'
    assert db.session.get(Employee, sample.alice_id).location == 'HQ'


def test_location_pages(admin_client, sample):
    response = admin_client.get('/locations/')
    assert response.status_code == 200
    assert b'Central Warehouse' in response.data
    assert b'3 assets' not in response.data
    assert b'2 assets' in response.data

    response = admin_client.get(f'/locations/{sample.warehouse_id}')
    assert response.status_code == 200
    assert b'Old Monitor' in response.data
    assert b'Bob Jones' in response.data


def test_delete_location_route_flashes_conflict(admin_client, sample):
    response = admin_client.post(f'/locations/{sample.warehouse_id}/delete', follow_redirects=True)
    assert b'Failed to delete location. It may still be linked to assets or employees.' in response.data


def test_delete_location_requires_admin(user_client, app, sample):
    response = user_client.post(f'/locations/{sample.office_id}/delete', follow_redirects=True)
    assert b'You do not have permission to perform this action.' in response.data
    with app.app_context():
        assert db.session.get(Location, sample.office_id) is not None
