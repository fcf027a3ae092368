# app/routes/__init__.py
from functools import wraps

from flask import Blueprint, flash, redirect, request, url_for
from flask_login import current_user

from asset_compass.app.errors import AuthorizationError

# Create blueprints
assets_bp = Blueprint('assets', __name__, url_prefix='/assets')
employees_bp = Blueprint('employees', __name__, url_prefix='/employees')
locations_bp = Blueprint('locations', __name__, url_prefix='/locations')
assignments_bp = Blueprint('assignments', __name__, url_prefix='/assignments')
alerts_bp = Blueprint('alerts', __name__, url_prefix='/alerts')


def admin_required(view):
    """Only ADMIN users may continue; others are sent back with a message."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            if request.path.startswith('/api/'):
                raise AuthorizationError('Administrator role required')
            flash('You do not have permission to perform this action.', 'danger')
            return redirect(request.referrer or url_for('index'))
        return view(*args, **kwargs)
    return wrapped


def is_htmx():
    return bool(request.headers.get('HX-Request'))


# Import views after blueprints are created
from . import assets, employees, locations, assignments, alerts  # noqa: E402,F401
