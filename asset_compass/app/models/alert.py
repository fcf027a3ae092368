# app/models/alert.py
from enum import Enum

from asset_compass.app import db
from .mixins import SnapshotMixin, utcnow


class AlertType(Enum):
    WARRANTY = "warranty"
    OVERDUE = "overdue"
    MISSING = "missing"
    APPROVAL = "approval"
    OTHER = "other"


class AlertSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Alert(SnapshotMixin, db.Model):
    __tablename__ = 'alerts'

    FIELD_MAP = {
        'id': 'id',
        'type': 'type',
        'title': 'title',
        'description': 'description',
        'asset_id': 'assetId',
        'severity': 'severity',
        'is_resolved': 'isResolved',
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(20), nullable=False, default=AlertType.OTHER.value)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    # Loose reference: alerts outlive the asset they mention
    asset_id = db.Column(db.Integer)
    severity = db.Column(db.String(10), nullable=False, default=AlertSeverity.MEDIUM.value)
    is_resolved = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"Alert('{self.title}', '{self.severity}')"
