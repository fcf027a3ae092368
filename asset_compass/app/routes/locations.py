# app/routes/locations.py
from flask import flash, redirect, render_template, url_for
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.errors import AppError
from asset_compass.app.forms import LocationForm
from asset_compass.app.models import Location
from asset_compass.app.routes import admin_required, locations_bp as bp
from asset_compass.app.services import inventory
from asset_compass.app.services.locations import location_counts, location_detail
from asset_compass.app.services.store import load_assets, load_employees, load_locations


@bp.route('/')
@login_required
def list_locations():
    locations = load_locations()
    counts = location_counts(locations, load_assets(), load_employees())
    return render_template('locations/list.html', title='Locations',
                           locations=locations, counts=counts)


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_location():
    form = LocationForm()
    if form.validate_on_submit():
        try:
            location = inventory.create_location(form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'Location {location.name} added.', 'success')
            return redirect(url_for('locations.list_locations'))
    return render_template('locations/form.html', title='Add Location', form=form, location=None)


@bp.route('/<int:id>')
@login_required
def view_location(id):
    location = db.get_or_404(Location, id)
    detail = location_detail(location, load_assets(), load_employees())
    return render_template('locations/detail.html', title=location.name, **detail)


@bp.route('/<int:id>/edit', methods=['GET', 'POST'])
@login_required
def edit_location(id):
    location = db.get_or_404(Location, id)
    form = LocationForm(obj=location)
    if form.validate_on_submit():
        try:
            inventory.update_location(location, form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'Location {location.name} updated.', 'success')
            return redirect(url_for('locations.view_location', id=location.id))
    return render_template('locations/form.html', title='Edit Location', form=form, location=location)


@bp.route('/<int:id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_location(id):
    location = db.get_or_404(Location, id)
    name = location.name
    try:
        inventory.delete_location(location)
    except AppError as e:
        db.session.rollback()
        flash(e.message, 'danger')
        return redirect(url_for('locations.view_location', id=id))
    flash(f'Location {name} deleted.', 'success')
    return redirect(url_for('locations.list_locations'))
