# app/routes/assets.py
import base64
import logging
from io import BytesIO

import qrcode
from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.errors import AppError
from asset_compass.app.forms import AssetForm, AssignmentForm, BulkImportForm, ReturnForm
from asset_compass.app.models import Asset, AssetStatus, Employee, EmployeeStatus
from asset_compass.app.routes import admin_required, assets_bp as bp, is_htmx
from asset_compass.app.services import inventory
from asset_compass.app.services.dashboard import normalize_category
from asset_compass.app.services.locations import display_location_name
from asset_compass.app.services.settings import category_options
from asset_compass.app.services.store import load_assets, load_locations

logger = logging.getLogger(__name__)


def get_asset_or_404(asset_tag):
    return Asset.query.filter_by(asset_tag=asset_tag.strip().upper()).first_or_404()


def location_choices():
    return [(loc.id, display_location_name(loc.name)) for loc in load_locations()]


def _prepare_form(form, asset=None):
    categories = category_options(load_assets())
    form.category.choices = [(name, name) for name in categories]
    form.location_id.choices = location_choices()
    if asset is not None and asset.status == AssetStatus.ASSIGNED.value:
        form.status.choices = [(s.value, s.value.title()) for s in AssetStatus]
    return form


@bp.route('/')
@login_required
def list_assets():
    query = request.args.get('q', '')
    category = request.args.get('category', '')
    status = request.args.get('status', '')
    location_id = request.args.get('location_id', type=int)

    assets = inventory.filter_assets(q=query, category=category, status=status,
                                     location_id=location_id)

    if is_htmx():
        return render_template('assets/_table.html', assets=assets)

    return render_template('assets/list.html', title='Assets', assets=assets,
                           categories=category_options(load_assets()),
                           statuses=[s.value for s in AssetStatus],
                           locations=load_locations(),
                           filters={'q': query, 'category': category, 'status': status,
                                    'location_id': location_id})


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_asset():
    form = _prepare_form(AssetForm())

    if request.method == 'GET' and request.args.get('clone'):
        # Prefill from an existing asset; tag and serial stay blank
        source = get_asset_or_404(request.args['clone'])
        form.process(obj=source)
        form.category.data = normalize_category(source.category)
        form.status.data = AssetStatus.AVAILABLE.value
        form.asset_tag.data = ''
        form.serial_number.data = ''
        form.name.data = f'{source.name} (Copy)'

    if form.validate_on_submit():
        try:
            asset = inventory.create_asset(form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'Asset {asset.asset_tag} created.', 'success')
            return redirect(url_for('assets.view_asset', asset_tag=asset.asset_tag))

    return render_template('assets/form.html', title='Add Asset', form=form, asset=None)


@bp.route('/bulk', methods=['GET', 'POST'])
@login_required
def bulk_import():
    form = BulkImportForm()
    if form.validate_on_submit():
        try:
            text = form.csv_file.data.read().decode('utf-8-sig')
            created, errors = inventory.bulk_import_assets(text)
        except UnicodeDecodeError:
            flash('File must be UTF-8 encoded.', 'danger')
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'Imported {len(created)} assets.', 'success' if created else 'warning')
            for error in errors:
                flash(f'Skipped {error}', 'warning')
            return redirect(url_for('assets.list_assets'))
    return render_template('assets/bulk.html', title='Bulk Import', form=form)


@bp.route('/<asset_tag>/qr')
@login_required
def get_asset_qr(asset_tag):
    asset = get_asset_or_404(asset_tag)

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(url_for('assets.view_asset', asset_tag=asset.asset_tag, _external=True))
    qr.make(fit=True)

    img_buffer = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(img_buffer, format='PNG')
    img_str = base64.b64encode(img_buffer.getvalue()).decode()

    return render_template('assets/qr_label.html', asset=asset, qr_code=img_str)


@bp.route('/<asset_tag>')
@login_required
def view_asset(asset_tag):
    asset = get_asset_or_404(asset_tag)

    assign_form = AssignmentForm()
    assign_form.asset_id.choices = [(asset.id, asset.asset_tag)]
    assign_form.asset_id.data = asset.id
    assign_form.employee_id.choices = [
        (e.id, e.name) for e in Employee.query.filter(Employee.status != EmployeeStatus.TERMINATED.value)
        .order_by(Employee.name)
    ]
    return_form = ReturnForm()
    return_form.location_id.choices = [(0, 'Keep current location')] + location_choices()

    return render_template('assets/detail.html', title=asset.name, asset=asset,
                           history=asset.assignments, assign_form=assign_form,
                           return_form=return_form)


@bp.route('/<asset_tag>/edit', methods=['GET', 'POST'])
@login_required
def edit_asset(asset_tag):
    asset = get_asset_or_404(asset_tag)
    form = _prepare_form(AssetForm(obj=asset), asset)
    if request.method == 'GET':
        form.category.data = normalize_category(asset.category)

    if form.validate_on_submit():
        try:
            inventory.update_asset(asset, form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'Asset {asset.asset_tag} updated.', 'success')
            return redirect(url_for('assets.view_asset', asset_tag=asset.asset_tag))

    return render_template('assets/form.html', title='Edit Asset', form=form, asset=asset)


@bp.route('/<asset_tag>/delete', methods=['POST'])
@login_required
@admin_required
def delete_asset(asset_tag):
    asset = get_asset_or_404(asset_tag)
    try:
        inventory.delete_asset(asset)
    except AppError as e:
        db.session.rollback()
        flash(e.message, 'danger')
        return redirect(url_for('assets.view_asset', asset_tag=asset_tag))
    flash(f'Asset {asset_tag.upper()} deleted.', 'success')
    return redirect(url_for('assets.list_assets'))
