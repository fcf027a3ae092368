from asset_compass.app import db
from asset_compass.app.models import Asset, Employee, Location
from asset_compass.app.services.search import search


def test_blank_query_returns_nothing(ctx, sample):
    assert search('   ') == {'assets': [], 'employees': [], 'locations': []}


def test_search_matches_across_collections(ctx, sample):
    results = search('warehouse')
    assert [loc.name for loc in results['locations']] == ['Central Warehouse']
    assert results['assets'] == []

    results = search('APPLE')
    assert [a.asset_tag for a in results['assets']] == ['AST-0002']

    results = search('sn-100')
    assert len(results['assets']) == 3

    results = search('alice@')
    assert [e.name for e in results['employees']] == ['Alice Smith']


def test_search_limits(ctx, sample):
    for i in range(5):
        db.session.add(Employee(name=f'Sam {i}', email=f'sam{i}@example.com'))
        db.session.add(Location(name=f'Sam Site {i}'))
    for i in range(60):
        db.session.add(Asset(name=f'Sampler {i}', asset_tag=f'SMP-{i:04d}'))
    db.session.commit()

    results = search('sam')
    assert len(results['assets']) == 50
    assert len(results['employees']) == 3
    assert len(results['locations']) == 3


def test_search_page_and_partial(admin_client, sample):
    response = admin_client.get('/dashboard/search?q=thinkpad')
    assert response.status_code == 200
    assert b'AST-0001' in response.data

    response = admin_client.get('/dashboard/search?q=zzz', headers={'HX-Request': 'true'})
    assert b'No results for' in response.data
    assert b'<nav' not in response.data
