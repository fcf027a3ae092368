# app/models/mixins.py
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace


def utcnow():
    """Naive UTC timestamp, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def record_to_dict(record, field_map):
    """Map storage attribute names to application (camelCase) keys."""
    return {key: serialize(getattr(record, attr, None)) for attr, key in field_map.items()}


class SnapshotMixin:
    # storage attribute -> application key
    FIELD_MAP = {}

    def snapshot(self):
        """Detached, read-only copy of the row for the collection cache."""
        return SimpleNamespace(**{column.key: getattr(self, column.key)
                                  for column in self.__table__.columns})

    def to_dict(self):
        return record_to_dict(self, self.FIELD_MAP)
