# app/services/store.py
"""Cached read access to whole collections, as detached snapshots."""

from asset_compass.app.cache import get_cache
from asset_compass.app.models import Alert, Asset, Assignment, Employee, Location


def _snapshots(query):
    return [row.snapshot() for row in query.all()]


def load_assets():
    return get_cache().get('assets', lambda: _snapshots(
        Asset.query.order_by(Asset.created_at.desc(), Asset.id.desc())))


def load_employees():
    return get_cache().get('employees', lambda: _snapshots(
        Employee.query.order_by(Employee.name.asc())))


def load_locations():
    return get_cache().get('locations', lambda: _snapshots(
        Location.query.order_by(Location.name.asc())))


def load_assignments():
    return get_cache().get('assignments', lambda: _snapshots(
        Assignment.query.order_by(Assignment.assigned_date.desc(), Assignment.id.desc())))


def load_alerts():
    return get_cache().get('alerts', lambda: _snapshots(
        Alert.query.filter_by(is_resolved=False).order_by(Alert.created_at.desc(), Alert.id.desc())))
