"""
Pytest fixtures: a fresh in-memory application per test, test clients and a
small inventory to work against.
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from asset_compass.app import create_app, db as _db
from asset_compass.app.models import Asset, Employee, Location, User, UserRole
from asset_compass.config import TestConfig


@pytest.fixture
def app():
    """Create Flask application for testing"""
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def ctx(app):
    """Application context for tests that call services directly"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create Flask test client"""
    return app.test_client()


def create_user(app, username, email, role=UserRole.SUPPORT.value, password='password'):
    with app.app_context():
        user = User(username=username, email=email, role=role)
        user.set_password(password)
        _db.session.add(user)
        _db.session.commit()
        return user.id


def login_user(client, email, password='password'):
    """Helper function to login a user"""
    return client.post('/login', data={'email': email, 'password': password},
                       follow_redirects=True)


@pytest.fixture
def admin_client(app, client):
    create_user(app, 'admin', 'admin@example.com', role=UserRole.ADMIN.value)
    login_user(client, 'admin@example.com')
    return client


@pytest.fixture
def user_client(app, client):
    create_user(app, 'support', 'support@example.com')
    login_user(client, 'support@example.com')
    return client


@pytest.fixture
def sample(app):
    """
    Two locations, two employees and three assets.

    The "Old Monitor" row predates location ids and still says "Warehouse".
    """
    with app.app_context():
        warehouse = Location(name='Central Warehouse', type='warehouse', address='12 Dock Road')
        office = Location(name='Head Office', type='office', address='1 Market Street')
        _db.session.add_all([warehouse, office])
        _db.session.flush()

        alice = Employee(name='Alice Smith', email='alice@example.com', department='Engineering',
                         location=office.name, location_id=office.id)
        bob = Employee(name='Bob Jones', email='bob@example.com', department='Finance',
                       location='warehouse', location_id=None)
        laptop = Asset(name='ThinkPad T14', asset_tag='AST-0001', category='Laptop',
                       serial_number='SN-1001', brand='Lenovo', model='T14',
                       location=warehouse.name, location_id=warehouse.id,
                       purchase_date=date(2023, 1, 10), purchase_cost=Decimal('1299.00'),
                       warranty_end=date(2026, 1, 10))
        phone = Asset(name='iPhone 15', asset_tag='AST-0002', category='phone',
                      serial_number='SN-1002', brand='Apple',
                      location=office.name, location_id=office.id)
        monitor = Asset(name='Old Monitor', asset_tag='AST-0003', category='monitor',
                        serial_number='SN-1003', brand='Dell', location='Warehouse')
        _db.session.add_all([alice, bob, laptop, phone, monitor])
        _db.session.commit()
        # The rows above bypass the service layer, so drop anything cached
        # before they existed (e.g. by a login that landed on the dashboard).
        app.extensions['collection_cache'].clear()

        return SimpleNamespace(
            warehouse_id=warehouse.id, office_id=office.id,
            alice_id=alice.id, bob_id=bob.id,
            laptop_id=laptop.id, phone_id=phone.id, monitor_id=monitor.id,
        )
