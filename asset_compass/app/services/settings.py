# app/services/settings.py
import logging

from asset_compass.app import db
from asset_compass.app.cache import get_cache
from asset_compass.app.models import AppSettings
from asset_compass.app.models.settings import default_settings
from asset_compass.app.services.dashboard import normalize_category

logger = logging.getLogger(__name__)


def _load_settings():
    row = AppSettings.query.order_by(AppSettings.id).first()
    if row is None:
        return default_settings()
    merged = default_settings()
    merged.update(row.config or {})
    return merged


def get_settings():
    """Organisation settings, falling back to the defaults when none were saved."""
    return get_cache().get('settings', _load_settings)


def update_settings(config):
    """Insert the settings row on first save, update it afterwards."""
    row = AppSettings.query.order_by(AppSettings.id).first()
    if row is None:
        row = AppSettings(config=config)
        db.session.add(row)
    else:
        row.config = config
    db.session.commit()
    get_cache().invalidate('settings')
    logger.info("Settings updated")
    return row.config


def notification_enabled(name):
    return bool(get_settings().get('notifications', {}).get(name))


def category_options(assets):
    """Settings categories plus those already in use, merged case-insensitively."""
    names = list(get_settings().get('categories', [])) + [a.category for a in assets if a.category]
    return sorted({normalize_category(name) for name in names})
