# app/models/location.py
from enum import Enum

from asset_compass.app import db
from .mixins import SnapshotMixin, utcnow


class LocationType(Enum):
    OFFICE = "office"
    WAREHOUSE = "warehouse"
    REMOTE = "remote"
    OUTLET = "outlet"


class Location(SnapshotMixin, db.Model):
    """A site assets and employees belong to.

    Asset and employee counts are not stored: they are derived through the
    location membership resolver whenever they are shown.
    """
    __tablename__ = 'locations'

    FIELD_MAP = {
        'id': 'id',
        'name': 'name',
        'type': 'type',
        'address': 'address',
    }

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False, default=LocationType.OFFICE.value)
    address = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Location {self.name} ({self.type})>'
