"""
JSON views of the collections, keyed in camelCase.

Every endpoint needs a logged-in session; anonymous calls get a JSON 401.
POST endpoints are CSRF protected like the forms: send the page's
`<meta name="csrf-token">` value in an `X-CSRFToken` header.
"""

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user

from asset_compass.app.models import Alert, Asset, Assignment, Employee, Location
from asset_compass.app.models.mixins import record_to_dict
from asset_compass.app.routes import admin_required
from asset_compass.app.routes.employees import assets_per_employee
from asset_compass.app.services.dashboard import category_breakdown, get_dashboard_stats
from asset_compass.app.services.locations import location_counts
from asset_compass.app.services.notifications import send_asset_summary
from asset_compass.app.services.search import search
from asset_compass.app.services.settings import get_settings
from asset_compass.app.services.store import (load_alerts, load_assets, load_assignments,
                                              load_employees, load_locations)

api_bp = Blueprint('api', __name__)


@api_bp.before_request
def require_login():
    if not current_user.is_authenticated:
        abort(401)


def _dicts(records, model):
    return [record_to_dict(record, model.FIELD_MAP) for record in records]


@api_bp.route('/assets')
def assets():
    return jsonify(_dicts(load_assets(), Asset))


@api_bp.route('/employees')
def employees():
    counts = assets_per_employee(load_assets())
    rows = []
    for employee in load_employees():
        row = record_to_dict(employee, Employee.FIELD_MAP)
        row['assetsCount'] = counts.get(employee.id, 0)
        rows.append(row)
    return jsonify(rows)


@api_bp.route('/locations')
def locations():
    locations = load_locations()
    counts = location_counts(locations, load_assets(), load_employees())
    rows = []
    for location in locations:
        row = record_to_dict(location, Location.FIELD_MAP)
        row['assetsCount'], row['employeesCount'] = counts[location.id]
        rows.append(row)
    return jsonify(rows)


@api_bp.route('/assignments')
def assignments():
    return jsonify(_dicts(load_assignments(), Assignment))


@api_bp.route('/alerts')
def alerts():
    return jsonify(_dicts(load_alerts(), Alert))


@api_bp.route('/dashboard')
def dashboard():
    return jsonify({
        'stats': get_dashboard_stats(),
        'categories': category_breakdown(load_assets()),
    })


@api_bp.route('/settings')
@admin_required
def settings():
    return jsonify(get_settings())


@api_bp.route('/search')
def search_all():
    results = search(request.args.get('q', ''))
    return jsonify({
        'assets': [asset.to_dict() for asset in results['assets']],
        'employees': [employee.to_dict() for employee in results['employees']],
        'locations': [location.to_dict() for location in results['locations']],
    })


@api_bp.route('/employees/<int:id>/send-asset-email', methods=['POST'])
def send_asset_email(id):
    return jsonify(send_asset_summary(id))
