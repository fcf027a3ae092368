from datetime import date

from flask import Blueprint, abort, render_template
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.models import Asset, Employee, Location
from asset_compass.app.services.locations import members_of
from asset_compass.app.services.settings import get_settings

handover_bp = Blueprint('handover', __name__)


@handover_bp.route('/<kind>/<int:id>')
@login_required
def handover_form(kind, id):
    """Printable custody form for an employee's or a location's assets."""
    if kind == 'employee':
        holder = db.get_or_404(Employee, id)
        assets = Asset.query.filter_by(assigned_to_id=holder.id).order_by(Asset.asset_tag).all()
    elif kind == 'location':
        holder = db.get_or_404(Location, id)
        assets = members_of(holder, Asset.query.order_by(Asset.asset_tag).all())
    else:
        abort(404)

    return render_template('handover/form.html', title='Asset Handover Form', kind=kind,
                           holder=holder, assets=assets, today=date.today(),
                           org_name=get_settings().get('orgName'))
