# app/cli.py
"""`flask` commands for maintenance and demo data."""

import logging
from datetime import date, timedelta
from decimal import Decimal

import click

from asset_compass.app import db
from asset_compass.app.models import Asset, Employee, Location, User, UserRole
from asset_compass.app.services.assignments import assign_asset
from asset_compass.app.services.locations import backfill_location_ids

logger = logging.getLogger(__name__)

DEMO_LOCATIONS = [
    ('Central Warehouse', 'warehouse', '12 Dock Road'),
    ('Head Office', 'office', '1 Market Street'),
    ('Remote', 'remote', None),
]

DEMO_EMPLOYEES = [
    ('Priya Sharma', 'priya.sharma@example.com', 'Engineering', 'Developer', 'Head Office'),
    ('Daniel Okafor', 'daniel.okafor@example.com', 'Finance', 'Analyst', 'Head Office'),
    ('Mei Lin', 'mei.lin@example.com', 'Support', 'Technician', 'Remote'),
]

DEMO_ASSETS = [
    ('MacBook Pro 14', 'Laptop', 'Apple', 'A2442', 'Central Warehouse', 1899, 400),
    ('ThinkPad T14', 'laptop', 'Lenovo', 'Gen 3', 'Head Office', 1299, 900),
    ('Dell U2723QE', 'Monitor', 'Dell', 'U2723QE', 'Head Office', 579, 1500),
    ('iPhone 15', 'Phone', 'Apple', 'A3090', 'Remote', 899, 120),
    # Legacy row recorded against the old warehouse name, without an id
    ('Logitech MX Keys', 'Accessory', 'Logitech', 'MX Keys', 'Warehouse', 119, 2100),
]


def register_commands(app):

    @app.cli.command('backfill-location-ids')
    def backfill_location_ids_command():
        """Set missing location ids from location names."""
        result = backfill_location_ids()
        click.echo(f"Fixed {result['fixed']} of {result['total']} records; "
                   f"{result['unresolved']} could not be resolved.")

    @app.cli.command('create-admin')
    @click.option('--username', prompt=True)
    @click.option('--email', prompt=True)
    @click.password_option()
    def create_admin(username, email, password):
        """Create an ADMIN login."""
        if User.query.filter((User.username == username) | (User.email == email.lower())).first():
            raise click.ClickException('A user with that username or email already exists.')
        user = User(username=username, email=email.lower(), role=UserRole.ADMIN.value)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f'Admin {username} created.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Load a small demo inventory into an empty database."""
        if Asset.query.first() or Location.query.first():
            raise click.ClickException('Database already has data; refusing to seed.')

        locations = {}
        for name, kind, address in DEMO_LOCATIONS:
            locations[name] = Location(name=name, type=kind, address=address)
            db.session.add(locations[name])
        db.session.flush()

        employees = []
        for name, email, department, position, location_name in DEMO_EMPLOYEES:
            location = locations[location_name]
            employee = Employee(name=name, email=email, department=department, position=position,
                                location=location.name, location_id=location.id,
                                join_date=date.today() - timedelta(days=365))
            db.session.add(employee)
            employees.append(employee)

        today = date.today()
        assets = []
        for index, (name, category, brand, model, location_name, cost, age_days) in enumerate(DEMO_ASSETS, 1):
            location = locations.get(location_name)
            asset = Asset(name=name, asset_tag=f'AST-{index:04d}', category=category,
                          brand=brand, model=model, serial_number=f'SN{index:06d}',
                          location=location_name,
                          location_id=location.id if location else None,
                          purchase_date=today - timedelta(days=age_days),
                          purchase_cost=Decimal(cost), vendor='Demo Supplies',
                          warranty_start=today - timedelta(days=age_days),
                          warranty_end=today - timedelta(days=age_days) + timedelta(days=3 * 365))
            db.session.add(asset)
            assets.append(asset)
        db.session.commit()

        assign_asset(assets[1], employees[0], notes='Onboarding laptop')
        assign_asset(assets[3], employees[2])
        logger.info("Seeded demo data")
        click.echo(f'Seeded {len(locations)} locations, {len(employees)} employees, '
                   f'{len(assets)} assets.')
