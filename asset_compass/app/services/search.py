# app/services/search.py
from sqlalchemy import or_

from asset_compass.app.models import Asset, Employee, Location

ASSET_LIMIT = 50
EMPLOYEE_LIMIT = 3
LOCATION_LIMIT = 3


def search(q):
    """Case-insensitive substring search across assets, employees and locations."""
    q = (q or '').strip()
    if not q:
        return {'assets': [], 'employees': [], 'locations': []}

    like = f'%{q}%'
    assets = (Asset.query
              .filter(or_(Asset.asset_tag.ilike(like), Asset.name.ilike(like),
                          Asset.serial_number.ilike(like), Asset.brand.ilike(like)))
              .order_by(Asset.asset_tag)
              .limit(ASSET_LIMIT).all())
    employees = (Employee.query
                 .filter(or_(Employee.name.ilike(like), Employee.email.ilike(like)))
                 .order_by(Employee.name)
                 .limit(EMPLOYEE_LIMIT).all())
    locations = (Location.query
                 .filter(Location.name.ilike(like))
                 .order_by(Location.name)
                 .limit(LOCATION_LIMIT).all())
    return {'assets': assets, 'employees': employees, 'locations': locations}
