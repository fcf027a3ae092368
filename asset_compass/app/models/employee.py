# app/models/employee.py
from enum import Enum

from asset_compass.app import db
from .mixins import SnapshotMixin, utcnow


class EmployeeStatus(Enum):
    ACTIVE = "active"
    ON_LEAVE = "on-leave"
    REMOTE = "remote"
    TERMINATED = "terminated"


class Employee(SnapshotMixin, db.Model):
    __tablename__ = 'employees'

    FIELD_MAP = {
        'id': 'id',
        'name': 'name',
        'email': 'email',
        'department': 'department',
        'position': 'position',
        'location': 'location',
        'location_id': 'locationId',
        'avatar_url': 'avatarUrl',
        'status': 'status',
        'join_date': 'joinDate',
        'created_at': 'createdAt',
    }

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    department = db.Column(db.String(50))
    position = db.Column(db.String(100))
    location = db.Column(db.String(200))
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'))
    avatar_url = db.Column(db.String(500))
    status = db.Column(db.String(20), nullable=False, default=EmployeeStatus.ACTIVE.value)
    join_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # History rows keep employee_name when the employee is removed
    assignments = db.relationship('Assignment', backref='employee', lazy=True,
                                  order_by='Assignment.assigned_date.desc()')

    def __repr__(self):
        return f'<Employee {self.email}>'
