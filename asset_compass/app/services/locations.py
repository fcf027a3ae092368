# app/services/locations.py
"""
Location membership.

Assets and employees reference their location twice: by `location_id` and by
the free-text `location` name. Older rows may carry only the name, and one
site was historically recorded both as "Warehouse" and "Central Warehouse".
Every view that groups records by location goes through `belongs_to_location`
so counts agree across screens.
"""

import logging

from asset_compass.app import db
from asset_compass.app.cache import get_cache
from asset_compass.app.models import Asset, AssetStatus, Employee, Location
from asset_compass.app.services.dashboard import category_breakdown

logger = logging.getLogger(__name__)

WAREHOUSE_ALIASES = frozenset({'warehouse', 'central warehouse'})
LEGACY_WAREHOUSE_NAME = 'Warehouse'
WAREHOUSE_DISPLAY_NAME = 'Central Warehouse'


def normalize_location_name(name):
    return (name or '').strip().lower()


def location_names_match(first, second):
    """Case/whitespace-insensitive name equality with the warehouse alias."""
    first = normalize_location_name(first)
    second = normalize_location_name(second)
    if not first or not second:
        return False
    if first == second:
        return True
    return {first, second} == WAREHOUSE_ALIASES


def belongs_to_location(record, location):
    """True when `record` (asset or employee) belongs to `location`.

    A matching `location_id` wins; otherwise the names are compared.
    """
    location_id = getattr(record, 'location_id', None)
    if location_id is not None and location_id == location.id:
        return True
    return location_names_match(getattr(record, 'location', None), location.name)


def members_of(location, records):
    return [record for record in records if belongs_to_location(record, location)]


def display_location_name(name):
    if name and name.strip() == LEGACY_WAREHOUSE_NAME:
        return WAREHOUSE_DISPLAY_NAME
    return name or ''


def location_counts(locations, assets, employees):
    """Map location id -> (asset count, employee count)."""
    return {
        location.id: (len(members_of(location, assets)), len(members_of(location, employees)))
        for location in locations
    }


def utilization_rate(assets):
    if not assets:
        return 0.0
    assigned = sum(1 for a in assets if a.status == AssetStatus.ASSIGNED.value)
    return assigned / len(assets) * 100


def location_detail(location, assets, employees):
    """Everything the location detail screen shows."""
    location_assets = members_of(location, assets)
    by_status = {status.value: 0 for status in AssetStatus}
    for asset in location_assets:
        by_status[asset.status] = by_status.get(asset.status, 0) + 1

    recent = sorted(location_assets, key=lambda a: (a.created_at is not None, a.created_at), reverse=True)
    return {
        'location': location,
        'assets': location_assets,
        'employees': members_of(location, employees),
        'total_assets': len(location_assets),
        'by_status': by_status,
        'utilization_rate': utilization_rate(location_assets),
        'categories': category_breakdown(location_assets),
        'recent_assets': recent[:10],
    }


def resolve_location_id(name, locations):
    """Id of the first location whose name matches `name`, or None."""
    for location in locations:
        if location_names_match(name, location.name):
            return location.id
    return None


def backfill_location_ids():
    """
    Fill in `location_id` for assets and employees that only carry a name,
    or whose id points at a location that no longer exists.

    Returns:
        dict with the number of rows fixed, left unresolved, and inspected
    """
    locations = Location.query.all()
    known_ids = {location.id for location in locations}
    fixed = unresolved = total = 0

    for model in (Asset, Employee):
        for record in model.query.all():
            total += 1
            if record.location_id is not None and record.location_id in known_ids:
                continue
            location_id = resolve_location_id(record.location, locations)
            if location_id is None:
                unresolved += 1
                logger.warning("No location found for %s %s with location %r",
                               model.__name__, record.id, record.location)
                continue
            logger.info("Fixing %s %s: location_id %s -> %s",
                        model.__name__, record.id, record.location_id, location_id)
            record.location_id = location_id
            fixed += 1

    db.session.commit()
    get_cache().invalidate('location')
    return {'fixed': fixed, 'unresolved': unresolved, 'total': total}
