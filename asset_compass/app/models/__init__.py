# app/models/__init__.py
from asset_compass.app import db

# Import models after db
from .location import Location, LocationType
from .employee import Employee, EmployeeStatus
from .asset import Asset, AssetStatus, AssetCondition, DEFAULT_CATEGORY
from .assignment import Assignment
from .alert import Alert, AlertType, AlertSeverity
from .settings import AppSettings, DEFAULT_SETTINGS
from .user import User, UserRole

__all__ = ['db', 'Location', 'LocationType', 'Employee', 'EmployeeStatus', 'Asset', 'AssetStatus',
    'AssetCondition', 'DEFAULT_CATEGORY', 'Assignment', 'Alert', 'AlertType', 'AlertSeverity',
    'AppSettings', 'DEFAULT_SETTINGS', 'User', 'UserRole']
