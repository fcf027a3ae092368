# app/models/assignment.py
from asset_compass.app import db
from .mixins import SnapshotMixin, utcnow


class Assignment(SnapshotMixin, db.Model):
    __tablename__ = 'assignments'
    __table_args__ = (
        # at most one open assignment per asset
        db.Index('uq_assignments_open_asset', 'asset_id', unique=True,
                 sqlite_where=db.text('return_date IS NULL'),
                 postgresql_where=db.text('return_date IS NULL')),
    )

    FIELD_MAP = {
        'id': 'id',
        'asset_id': 'assetId',
        'asset_tag': 'assetTag',
        'asset_name': 'assetName',
        'employee_id': 'employeeId',
        'employee_name': 'employeeName',
        'assigned_date': 'assignedDate',
        'return_date': 'returnDate',
        'condition': 'condition',
        'notes': 'notes',
    }

    id = db.Column(db.Integer, primary_key=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False)
    asset_tag = db.Column(db.String(50))
    asset_name = db.Column(db.String(200))
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=True)
    employee_name = db.Column(db.String(100))
    assigned_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    return_date = db.Column(db.DateTime)
    condition = db.Column(db.String(20))
    notes = db.Column(db.Text)

    @property
    def is_open(self):
        return self.return_date is None

    def __repr__(self):
        return f'<Assignment {self.asset_tag} -> {self.employee_name}>'
