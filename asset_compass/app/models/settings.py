# app/models/settings.py
import copy

from asset_compass.app import db
from .mixins import utcnow

DEFAULT_SETTINGS = {
    "orgName": "Asset Compass",
    "tagPrefix": "AST-",
    "currency": "INR",
    "timezone": "UTC",
    "notifications": {
        "warrantyAlerts": True,
        "assignmentNotifications": True,
        "lowStockAlerts": False,
        "emailDigest": True,
    },
    "categories": ["Laptops", "Desktops", "Phones", "Tablets", "Monitors", "Accessories"],
    "roles": [
        {"name": "Super Admin", "description": "Full access to all features"},
        {"name": "IT Admin", "description": "Manage assets, assignments, and reports"},
        {"name": "Warehouse Operator", "description": "Issue/receive assets, update status"},
        {"name": "Employee", "description": "View own assigned assets"},
        {"name": "Auditor", "description": "Read-only access to reports"},
    ],
}


def default_settings():
    return copy.deepcopy(DEFAULT_SETTINGS)


class AppSettings(db.Model):
    """Singleton row holding the organisation settings as JSON."""
    __tablename__ = 'app_settings'

    id = db.Column(db.Integer, primary_key=True)
    config = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
