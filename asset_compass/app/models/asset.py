# app/models/asset.py
from enum import Enum

from asset_compass.app import db
from .mixins import SnapshotMixin, utcnow


class AssetStatus(Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    REPAIR = "repair"
    LOST = "lost"
    RETIRED = "retired"


class AssetCondition(Enum):
    NEW = "new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


# used when an asset is saved without a category
DEFAULT_CATEGORY = "Other"


def match_enum(enum_cls, value, label):
    """Return the enum value matching `value` case-insensitively."""
    if isinstance(value, enum_cls):
        return value.value
    try:
        return next(member.value for member in enum_cls
                    if member.value.lower() == str(value).strip().lower())
    except StopIteration:
        raise ValueError(f"Invalid {label}: {value}")


class Asset(SnapshotMixin, db.Model):
    __tablename__ = 'assets'

    FIELD_MAP = {
        'id': 'id',
        'asset_tag': 'assetTag',
        'serial_number': 'serialNumber',
        'name': 'name',
        'brand': 'brand',
        'model': 'model',
        'category': 'category',
        'status': 'status',
        'condition': 'condition',
        'location': 'location',
        'location_id': 'locationId',
        'assigned_to': 'assignedTo',
        'assigned_to_id': 'assignedToId',
        'purchase_date': 'purchaseDate',
        'purchase_cost': 'purchaseCost',
        'vendor': 'vendor',
        'warranty_start': 'warrantyStart',
        'warranty_end': 'warrantyEnd',
        'notes': 'notes',
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }

    id = db.Column(db.Integer, primary_key=True)
    asset_tag = db.Column(db.String(50), unique=True, nullable=False)
    serial_number = db.Column(db.String(100))
    name = db.Column(db.String(200), nullable=False)
    brand = db.Column(db.String(100))
    model = db.Column(db.String(100))
    category = db.Column(db.String(50), nullable=False, default=DEFAULT_CATEGORY)
    status = db.Column(db.String(20), nullable=False, default=AssetStatus.AVAILABLE.value)
    condition = db.Column(db.String(20), nullable=False, default=AssetCondition.GOOD.value)
    location = db.Column(db.String(200))
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'))
    assigned_to = db.Column(db.String(100))
    assigned_to_id = db.Column(db.Integer, db.ForeignKey('employees.id'))
    purchase_date = db.Column(db.Date)
    purchase_cost = db.Column(db.Numeric(10, 2))
    vendor = db.Column(db.String(100))
    warranty_start = db.Column(db.Date)
    warranty_end = db.Column(db.Date)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    assignments = db.relationship('Assignment', backref='asset', lazy=True,
                                  cascade='all, delete-orphan',
                                  order_by='Assignment.assigned_date.desc()')

    def __init__(self, name, asset_tag, category=None, status=None, condition=None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        # Standardize asset tag (e.g., uppercase, remove extra spaces)
        self.asset_tag = str(asset_tag).strip().upper()
        self.category = (category or DEFAULT_CATEGORY).strip()
        self.status = match_enum(AssetStatus, status, 'status') if status else AssetStatus.AVAILABLE.value
        self.condition = match_enum(AssetCondition, condition, 'condition') if condition else AssetCondition.GOOD.value

    @property
    def open_assignment(self):
        return next((a for a in self.assignments if a.return_date is None), None)

    def __repr__(self):
        return f'<Asset {self.asset_tag}: {self.name} ({self.status})>'
