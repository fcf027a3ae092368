# app/services/assignments.py
"""
Assigning assets to employees and taking them back.

An asset with status "assigned" has exactly one open assignment (no return
date); any other status has none. The asset update and the assignment row are
written in one transaction so the two cannot drift apart.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from asset_compass.app import db
from asset_compass.app.cache import get_cache
from asset_compass.app.errors import ConflictError, log_data_error
from asset_compass.app.models import Assignment, AssetStatus
from asset_compass.app.models.mixins import utcnow
from asset_compass.app.services.notifications import send_assignment_email

logger = logging.getLogger(__name__)


def open_assignments_for(asset):
    return Assignment.query.filter_by(asset_id=asset.id, return_date=None).all()


def close_open_assignment(asset, when=None):
    """Close the asset's open assignment and clear its assignee. Does not commit.

    Raises:
        ConflictError: If the asset does not have exactly one open assignment
    """
    open_rows = open_assignments_for(asset)
    if len(open_rows) != 1:
        raise ConflictError(
            f"Asset {asset.asset_tag} has {len(open_rows)} open assignments; expected exactly one"
        )
    assignment = open_rows[0]
    assignment.return_date = when or utcnow()
    asset.assigned_to = None
    asset.assigned_to_id = None
    return assignment


def _commit(operation, context):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        log_data_error(operation, e, context)
        raise


def assign_asset(asset, employee, notes=''):
    """
    Hand an available asset to an employee.

    Returns:
        The new open Assignment

    Raises:
        ConflictError: If the asset is not available or already has an open assignment
    """
    if asset.status != AssetStatus.AVAILABLE.value:
        raise ConflictError(f"Asset {asset.asset_tag} is not available")
    if open_assignments_for(asset):
        raise ConflictError(f"Asset {asset.asset_tag} already has an open assignment")

    assignment = Assignment(
        asset_id=asset.id,
        asset_tag=asset.asset_tag,
        asset_name=asset.name,
        employee_id=employee.id,
        employee_name=employee.name,
        assigned_date=utcnow(),
        condition=asset.condition,
        notes=notes or '',
    )
    db.session.add(assignment)
    asset.status = AssetStatus.ASSIGNED.value
    asset.assigned_to = employee.name
    asset.assigned_to_id = employee.id
    try:
        _commit('assign_asset', {'asset_id': asset.id, 'employee_id': employee.id})
    except IntegrityError:
        raise ConflictError(f"Asset {asset.asset_tag} already has an open assignment")

    get_cache().invalidate('assignment')
    logger.info("Asset %s assigned to %s", asset.asset_tag, employee.name)

    send_assignment_email(assignment)
    return assignment


def return_asset(asset, location=None):
    """
    Take an assigned asset back, optionally moving it to `location`.

    Returns:
        The closed Assignment

    Raises:
        ConflictError: If the asset has no open assignment
    """
    assignment = close_open_assignment(asset)
    asset.status = AssetStatus.AVAILABLE.value
    if location is not None:
        asset.location_id = location.id
        asset.location = location.name
    _commit('return_asset', {'asset_id': asset.id})

    get_cache().invalidate('asset_return')
    logger.info("Asset %s returned by %s", asset.asset_tag, assignment.employee_name)
    return assignment
