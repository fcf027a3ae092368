import pytest
from sqlalchemy.exc import IntegrityError

from asset_compass.app import db, mail
from asset_compass.app.errors import ConflictError, ValidationError
from asset_compass.app.models import Asset, Assignment, Employee, Location
from asset_compass.app.services import assignments, inventory
from asset_compass.app.services.assignments import assign_asset, return_asset
from asset_compass.app.services.settings import get_settings, update_settings


def test_assign_available_asset(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    alice = db.session.get(Employee, sample.alice_id)

    assignment = assign_asset(asset, alice, notes='Onboarding')

    assert asset.status == 'assigned'
    assert asset.assigned_to == 'Alice Smith'
    assert asset.assigned_to_id == alice.id
    assert assignment.return_date is None
    assert assignment.asset_tag == 'AST-0001'
    assert assignment.employee_name == 'Alice Smith'
    assert assignment.condition == asset.condition
    assert Assignment.query.filter_by(asset_id=asset.id).count() == 1


def test_assign_rejects_unavailable_asset(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    alice = db.session.get(Employee, sample.alice_id)
    bob = db.session.get(Employee, sample.bob_id)
    assign_asset(asset, alice)

    with pytest.raises(ConflictError):
        assign_asset(asset, bob)
    assert Assignment.query.filter_by(asset_id=asset.id).count() == 1


def test_assign_rejects_asset_in_repair(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    inventory.update_asset(asset, {'status': 'repair'})

    with pytest.raises(ConflictError):
        assign_asset(asset, db.session.get(Employee, sample.alice_id))


def test_return_closes_assignment_and_moves_asset(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    assign_asset(asset, db.session.get(Employee, sample.alice_id))
    office = db.session.get(Location, sample.office_id)

    assignment = return_asset(asset, location=office)

    assert assignment.return_date is not None
    assert asset.status == 'available'
    assert asset.assigned_to is None
    assert asset.assigned_to_id is None
    assert asset.location_id == office.id
    assert asset.location == 'Head Office'


def test_return_without_open_assignment_conflicts(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    with pytest.raises(ConflictError):
        return_asset(asset)


def test_reassign_after_return_keeps_history(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    assign_asset(asset, db.session.get(Employee, sample.alice_id))
    return_asset(asset)
    assign_asset(asset, db.session.get(Employee, sample.bob_id))

    rows = Assignment.query.filter_by(asset_id=asset.id).all()
    assert len(rows) == 2
    assert sum(1 for row in rows if row.return_date is None) == 1


def test_edit_cannot_set_assigned(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    with pytest.raises(ValidationError):
        inventory.update_asset(asset, {'status': 'assigned'})


def test_edit_away_from_assigned_closes_assignment(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    assign_asset(asset, db.session.get(Employee, sample.alice_id))

    inventory.update_asset(asset, {'status': 'lost'})

    assert asset.status == 'lost'
    assert asset.assigned_to_id is None
    assert Assignment.query.filter_by(asset_id=asset.id, return_date=None).count() == 0


def test_edit_assigned_asset_without_status_change_keeps_assignment(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    assign_asset(asset, db.session.get(Employee, sample.alice_id))

    inventory.update_asset(asset, {'status': 'assigned', 'notes': 'Charger missing'})

    assert asset.status == 'assigned'
    assert Assignment.query.filter_by(asset_id=asset.id, return_date=None).count() == 1


def test_assignment_email_sent_when_mail_configured(ctx, sample):
    ctx.config['MAIL_SERVER'] = 'smtp.example.com'
    asset = db.session.get(Asset, sample.laptop_id)

    with mail.record_messages() as outbox:
        assign_asset(asset, db.session.get(Employee, sample.alice_id))

    assert len(outbox) == 1
    assert outbox[0].recipients == ['alice@example.com']
    assert 'AST-0001' in outbox[0].body


def test_assignment_email_respects_notification_setting(ctx, sample):
    ctx.config['MAIL_SERVER'] = 'smtp.example.com'
    config = get_settings()
    config['notifications'] = dict(config['notifications'], assignmentNotifications=False)
    update_settings(config)

    with mail.record_messages() as outbox:
        assign_asset(db.session.get(Asset, sample.laptop_id), db.session.get(Employee, sample.alice_id))

    assert outbox == []


def test_assign_and_return_routes(admin_client, app, sample):
    response = admin_client.post('/assignments/add', data={
        'asset_id': sample.laptop_id,
        'employee_id': sample.alice_id,
        'notes': 'Desk 4',
    }, follow_redirects=True)
    assert response.status_code == 200
    assert b'AST-0001 assigned to Alice Smith.' in response.data

    with app.app_context():
        assignment = Assignment.query.filter_by(asset_id=sample.laptop_id).one()
        assignment_id = assignment.id

    response = admin_client.post(f'/assignments/{assignment_id}/return',
                                 data={'location_id': sample.office_id}, follow_redirects=True)
    assert b'AST-0001 returned by Alice Smith.' in response.data

    with app.app_context():
        asset = db.session.get(Asset, sample.laptop_id)
        assert asset.status == 'available'
        assert asset.location == 'Head Office'


def test_assign_route_rejects_unavailable_asset(admin_client, app, sample):
    with app.app_context():
        inventory.update_asset(db.session.get(Asset, sample.laptop_id), {'status': 'repair'})

    response = admin_client.post('/assignments/add', data={
        'asset_id': sample.laptop_id,
        'employee_id': sample.alice_id,
    }, follow_redirects=True)
    # Only available assets are offered, so the form rejects the choice
    assert b'Not a valid choice' in response.data
    with app.app_context():
        assert Assignment.query.count() == 0


def test_assignments_list(admin_client, app, sample):
    with app.app_context():
        assign_asset(db.session.get(Asset, sample.phone_id), db.session.get(Employee, sample.bob_id))

    response = admin_client.get('/assignments/?show=open')
    assert response.status_code == 200
    assert b'Bob Jones' in response.data

    response = admin_client.get('/assignments/?show=returned', headers={'HX-Request': 'true'})
    assert b'No assignments.' in response.data


def test_store_rejects_second_open_assignment(ctx, sample):
    for name in ('Alice Smith', 'Bob Jones'):
        db.session.add(Assignment(asset_id=sample.laptop_id, asset_tag='AST-0001',
                                  employee_name=name))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
    assert Assignment.query.filter_by(asset_id=sample.laptop_id, return_date=None).count() == 0


def test_concurrent_assign_reports_conflict(ctx, sample, monkeypatch):
    asset = db.session.get(Asset, sample.laptop_id)
    db.session.add(Assignment(asset_id=asset.id, asset_tag=asset.asset_tag,
                              employee_name='Bob Jones'))
    db.session.commit()
    # the other request's open row is not visible to the availability check
    monkeypatch.setattr(assignments, 'open_assignments_for', lambda asset: [])

    with pytest.raises(ConflictError):
        assign_asset(asset, db.session.get(Employee, sample.alice_id))

    assert asset.status == 'available'
    assert Assignment.query.filter_by(asset_id=asset.id, return_date=None).count() == 1


def test_reassign_after_return_is_allowed(ctx, sample):
    asset = db.session.get(Asset, sample.laptop_id)
    assign_asset(asset, db.session.get(Employee, sample.alice_id))
    return_asset(asset)
    assign_asset(asset, db.session.get(Employee, sample.bob_id))
    assert Assignment.query.filter_by(asset_id=asset.id).count() == 2
