# app/services/alerts.py
import logging

from asset_compass.app import db
from asset_compass.app.cache import get_cache
from asset_compass.app.errors import ValidationError
from asset_compass.app.models import Alert, AlertSeverity, AlertType
from asset_compass.app.models.asset import match_enum

logger = logging.getLogger(__name__)


def _apply(alert, data):
    try:
        if 'type' in data:
            alert.type = match_enum(AlertType, data['type'] or AlertType.OTHER.value, 'type')
        if 'severity' in data:
            alert.severity = match_enum(AlertSeverity, data['severity'] or AlertSeverity.MEDIUM.value,
                                        'severity')
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if 'title' in data:
        if not (data['title'] or '').strip():
            raise ValidationError('Title is required')
        alert.title = data['title'].strip()
    if 'description' in data:
        alert.description = data['description']
    if 'asset_id' in data:
        alert.asset_id = data['asset_id'] or None


def create_alert(data):
    alert = Alert(title='')
    _apply(alert, {'type': None, 'severity': None, **data})
    db.session.add(alert)
    db.session.commit()
    get_cache().invalidate('alert')
    logger.info("Alert '%s' raised (%s)", alert.title, alert.severity)
    return alert


def update_alert(alert, data):
    _apply(alert, data)
    db.session.commit()
    get_cache().invalidate('alert')
    return alert


def resolve_alert(alert):
    alert.is_resolved = True
    db.session.commit()
    get_cache().invalidate('alert')
    logger.info("Alert %s resolved", alert.id)
    return alert


def delete_alert(alert):
    alert_id = alert.id
    db.session.delete(alert)
    db.session.commit()
    get_cache().invalidate('alert')
    logger.info("Alert %s deleted", alert_id)
