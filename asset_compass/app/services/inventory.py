# app/services/inventory.py
"""Create, update and delete assets, employees and locations."""

import csv
import io
import logging
import re
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from asset_compass.app import db
from asset_compass.app.cache import get_cache
from asset_compass.app.errors import (ConflictError, NotFoundError, ValidationError,
                                      get_safe_error_message, log_data_error)
from asset_compass.app.models import (Asset, AssetCondition, AssetStatus, Employee,
                                      EmployeeStatus, Location, LocationType)
from asset_compass.app.models.asset import match_enum
from asset_compass.app.services.assignments import close_open_assignment
from asset_compass.app.services.dashboard import normalize_category
from asset_compass.app.services.locations import members_of, resolve_location_id
from asset_compass.app.services.settings import get_settings

logger = logging.getLogger(__name__)

ASSET_FIELDS = ('name', 'brand', 'model', 'serial_number', 'asset_tag', 'category', 'status',
                'condition', 'purchase_date', 'purchase_cost', 'vendor', 'warranty_start',
                'warranty_end', 'notes')
EMPLOYEE_FIELDS = ('name', 'email', 'department', 'position', 'avatar_url', 'status', 'join_date')
LOCATION_FIELDS = ('name', 'type', 'address')

LOCATION_DELETE_ERROR = 'Failed to delete location. It may still be linked to assets or employees.'


def get_or_404(model, record_id):
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(f"{model.__name__} {record_id} not found")
    return record


def _commit(operation, mutation, context=None, message=None):
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        log_data_error(operation, e, context)
        raise ConflictError(message or get_safe_error_message(e)) from e
    get_cache().invalidate(mutation)


def _location_for(location_id):
    location = db.session.get(Location, location_id) if location_id else None
    if location is None:
        raise ValidationError('Please select a valid location')
    return location


def _clean(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# ==================== Assets ====================

def next_asset_tag(prefix=None):
    """Next free tag for `prefix`, e.g. AST-0007 after AST-0006."""
    prefix = (prefix if prefix is not None else get_settings().get('tagPrefix', 'AST-')).strip().upper()
    pattern = re.compile(rf'^{re.escape(prefix)}(\d+)$')
    highest = 0
    for (tag,) in db.session.query(Asset.asset_tag).filter(Asset.asset_tag.like(f'{prefix}%')):
        match = pattern.match(tag)
        if match:
            highest = max(highest, int(match.group(1)))
    return f'{prefix}{highest + 1:04d}'


def filter_assets(q='', category='', status='', location_id=None):
    query = Asset.query
    if q:
        like = f'%{q.strip()}%'
        query = query.filter(Asset.asset_tag.ilike(like) | Asset.name.ilike(like) |
                             Asset.serial_number.ilike(like) | Asset.brand.ilike(like) |
                             Asset.model.ilike(like))
    if status:
        query = query.filter_by(status=status)

    assets = query.order_by(Asset.created_at.desc(), Asset.id.desc()).all()
    if category:
        wanted = normalize_category(category)
        assets = [a for a in assets if normalize_category(a.category) == wanted]
    if location_id:
        location = db.session.get(Location, location_id)
        assets = members_of(location, assets) if location else []
    return assets


def create_asset(data):
    """
    Create an asset from form data.

    The location name is copied from the chosen location, and a tag is
    generated from the settings prefix when none is given.
    """
    location = _location_for(data.get('location_id'))
    values = {field: _clean(data.get(field)) for field in ASSET_FIELDS}

    status = values.pop('status') or AssetStatus.AVAILABLE.value
    if status == AssetStatus.ASSIGNED.value:
        raise ValidationError('New assets cannot be created as assigned; assign them after creation')

    asset_tag = values.pop('asset_tag') or next_asset_tag()
    if Asset.query.filter(Asset.asset_tag == asset_tag.strip().upper()).first():
        raise ConflictError(f'Asset tag {asset_tag.upper()} is already in use')

    try:
        asset = Asset(
            name=values.pop('name'),
            asset_tag=asset_tag,
            category=values.pop('category'),
            status=status,
            condition=values.pop('condition'),
            location=location.name,
            location_id=location.id,
            **values,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    db.session.add(asset)
    _commit('create_asset', 'asset', {'asset_tag': asset.asset_tag})
    logger.info("Asset %s created at %s", asset.asset_tag, location.name)
    return asset


def update_asset(asset, data):
    """
    Apply form data to an asset.

    Status can not be set to "assigned" here. Moving an assigned asset to any
    other status closes its open assignment.
    """
    values = {field: _clean(data[field]) for field in ASSET_FIELDS if field in data}

    if 'status' in values:
        try:
            new_status = match_enum(AssetStatus, values.pop('status'), 'status')
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if new_status != asset.status:
            if new_status == AssetStatus.ASSIGNED.value:
                raise ValidationError('Use the assign action to assign an asset')
            if asset.status == AssetStatus.ASSIGNED.value:
                assignment = close_open_assignment(asset)
                logger.info("Closed assignment %s of %s on status change to %s",
                            assignment.id, asset.asset_tag, new_status)
            asset.status = new_status

    if 'condition' in values:
        try:
            asset.condition = match_enum(AssetCondition, values.pop('condition'), 'condition')
        except ValueError as e:
            raise ValidationError(str(e)) from e

    if 'asset_tag' in values:
        tag = (values.pop('asset_tag') or asset.asset_tag).strip().upper()
        clash = Asset.query.filter(Asset.asset_tag == tag, Asset.id != asset.id).first()
        if clash:
            raise ConflictError(f'Asset tag {tag} is already in use')
        asset.asset_tag = tag

    if 'name' in values and not values['name']:
        raise ValidationError('Name is required')

    for field, value in values.items():
        setattr(asset, field, value)

    if data.get('location_id'):
        location = _location_for(data['location_id'])
        asset.location_id = location.id
        asset.location = location.name

    _commit('update_asset', 'asset', {'asset_id': asset.id})
    logger.info("Asset %s updated", asset.asset_tag)
    return asset


def delete_asset(asset):
    tag = asset.asset_tag
    db.session.delete(asset)
    _commit('delete_asset', 'asset', {'asset_tag': tag})
    logger.info("Asset %s deleted", tag)


def bulk_import_assets(text):
    """
    Create assets from CSV text.

    Columns: name, category, serial number, status, location. The first line
    is a header. Rows with an unknown location or status are skipped and
    reported.

    Returns:
        (created assets, list of "line N: reason" strings)
    """
    rows = list(csv.reader(io.StringIO(text)))
    locations = Location.query.all()
    prefix = get_settings().get('tagPrefix', 'AST-')
    created, errors = [], []

    for line_number, row in enumerate(rows[1:], start=2):
        values = [value.strip() for value in row]
        if not any(values):
            continue
        if len(values) < 5:
            errors.append(f'line {line_number}: expected at least 5 columns')
            continue
        name, category, serial_number, status, location_name = values[:5]

        location_id = resolve_location_id(location_name, locations)
        if location_id is None:
            errors.append(f'line {line_number}: invalid location "{location_name}"')
            continue
        try:
            status = match_enum(AssetStatus, status or AssetStatus.AVAILABLE.value, 'status')
        except ValueError as e:
            errors.append(f'line {line_number}: {e}')
            continue
        if status == AssetStatus.ASSIGNED.value:
            errors.append(f'line {line_number}: assign assets after importing them')
            continue

        location = next(loc for loc in locations if loc.id == location_id)
        asset = Asset(
            name=name,
            asset_tag=next_asset_tag(prefix),
            category=category,
            status=status,
            condition=AssetCondition.GOOD.value,
            serial_number=serial_number,
            brand='Unknown',
            model='Unknown',
            location=location.name,
            location_id=location.id,
            purchase_date=date.today(),
            purchase_cost=Decimal('0'),
            vendor='Bulk Import',
            notes='Added via bulk import',
        )
        db.session.add(asset)
        # Flush so the next generated tag sees this one
        db.session.flush()
        created.append(asset)

    _commit('bulk_import_assets', 'asset', {'rows': len(rows)})
    logger.info("Bulk import created %d assets, skipped %d rows", len(created), len(errors))
    return created, errors


# ==================== Employees ====================

def create_employee(data):
    location = _location_for(data.get('location_id'))
    values = {field: _clean(data.get(field)) for field in EMPLOYEE_FIELDS}
    values['status'] = values['status'] or EmployeeStatus.ACTIVE.value
    try:
        values['status'] = match_enum(EmployeeStatus, values['status'], 'status')
    except ValueError as e:
        raise ValidationError(str(e)) from e
    values['email'] = (values['email'] or '').lower()

    employee = Employee(location=location.name, location_id=location.id, **values)
    db.session.add(employee)
    _commit('create_employee', 'employee', {'email': employee.email},
            message=f'An employee with email {employee.email} already exists')
    logger.info("Employee %s created", employee.email)
    return employee


def update_employee(employee, data):
    values = {field: _clean(data[field]) for field in EMPLOYEE_FIELDS if field in data}
    if 'status' in values:
        try:
            values['status'] = match_enum(EmployeeStatus, values['status'], 'status')
        except ValueError as e:
            raise ValidationError(str(e)) from e
    if values.get('email'):
        values['email'] = values['email'].lower()

    renamed = 'name' in values and values['name'] != employee.name
    for field, value in values.items():
        setattr(employee, field, value)

    if data.get('location_id'):
        location = _location_for(data['location_id'])
        employee.location_id = location.id
        employee.location = location.name

    if renamed:
        Asset.query.filter_by(assigned_to_id=employee.id).update({'assigned_to': employee.name})

    _commit('update_employee', 'employee', {'employee_id': employee.id},
            message=f'An employee with email {employee.email} already exists')
    logger.info("Employee %s updated", employee.email)
    return employee


def assigned_assets(employee):
    return Asset.query.filter_by(assigned_to_id=employee.id).all()


def delete_employee(employee):
    """Offboard an employee. Their assets must be returned first."""
    holding = assigned_assets(employee)
    if holding:
        raise ConflictError(
            f'{employee.name} still holds {len(holding)} asset(s). Return them before offboarding.'
        )
    email = employee.email
    db.session.delete(employee)
    _commit('delete_employee', 'employee', {'email': email})
    logger.info("Employee %s offboarded", email)


# ==================== Locations ====================

def create_location(data):
    values = {field: _clean(data.get(field)) for field in LOCATION_FIELDS}
    if not values['name']:
        raise ValidationError('Name is required')
    try:
        values['type'] = match_enum(LocationType, values['type'] or LocationType.OFFICE.value, 'type')
    except ValueError as e:
        raise ValidationError(str(e)) from e

    location = Location(**values)
    db.session.add(location)
    _commit('create_location', 'location', {'name': location.name})
    logger.info("Location %s created", location.name)
    return location


def update_location(location, data):
    """Update a location; a new name is copied to records that reference it by id."""
    values = {field: _clean(data[field]) for field in LOCATION_FIELDS if field in data}
    if 'name' in values and not values['name']:
        raise ValidationError('Name is required')
    if 'type' in values:
        try:
            values['type'] = match_enum(LocationType, values['type'], 'type')
        except ValueError as e:
            raise ValidationError(str(e)) from e

    renamed = 'name' in values and values['name'] != location.name
    for field, value in values.items():
        setattr(location, field, value)

    if renamed:
        Asset.query.filter_by(location_id=location.id).update({'location': location.name})
        Employee.query.filter_by(location_id=location.id).update({'location': location.name})

    _commit('update_location', 'location', {'location_id': location.id})
    logger.info("Location %s updated", location.name)
    return location


def delete_location(location):
    """
    Delete a location nobody belongs to any more.

    Raises:
        ConflictError: If assets or employees still resolve to it, or the
            store refuses the delete
    """
    if members_of(location, Asset.query.all()) or members_of(location, Employee.query.all()):
        logger.warning("Refusing to delete location %s: still referenced", location.name)
        raise ConflictError(LOCATION_DELETE_ERROR)

    name = location.name
    db.session.delete(location)
    _commit('delete_location', 'location', {'name': name}, message=LOCATION_DELETE_ERROR)
    logger.info("Location %s deleted", name)
