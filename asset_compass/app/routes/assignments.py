# app/routes/assignments.py
from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.errors import AppError
from asset_compass.app.forms import AssignmentForm, ReturnForm
from asset_compass.app.models import Asset, AssetStatus, Assignment, Employee, EmployeeStatus, Location
from asset_compass.app.routes import assignments_bp as bp, is_htmx
from asset_compass.app.services.assignments import assign_asset, return_asset
from asset_compass.app.services.store import load_assignments


@bp.route('/')
@login_required
def list_assignments():
    show = request.args.get('show', 'all')
    assignments = load_assignments()
    if show == 'open':
        assignments = [a for a in assignments if a.return_date is None]
    elif show == 'returned':
        assignments = [a for a in assignments if a.return_date is not None]

    if is_htmx():
        return render_template('assignments/_table.html', assignments=assignments)
    return render_template('assignments/list.html', title='Assignments',
                           assignments=assignments, show=show)


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_assignment():
    form = AssignmentForm()
    form.asset_id.choices = [
        (a.id, f'{a.asset_tag} - {a.name}')
        for a in Asset.query.filter_by(status=AssetStatus.AVAILABLE.value).order_by(Asset.asset_tag)
    ]
    form.employee_id.choices = [
        (e.id, e.name)
        for e in Employee.query.filter(Employee.status != EmployeeStatus.TERMINATED.value)
        .order_by(Employee.name)
    ]
    if request.method == 'GET' and request.args.get('asset_id', type=int):
        form.asset_id.data = request.args.get('asset_id', type=int)

    if form.validate_on_submit():
        asset = db.get_or_404(Asset, form.asset_id.data)
        employee = db.get_or_404(Employee, form.employee_id.data)
        try:
            assign_asset(asset, employee, notes=form.notes.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'{asset.asset_tag} assigned to {employee.name}.', 'success')
            return redirect(url_for('assets.view_asset', asset_tag=asset.asset_tag))

    return render_template('assignments/form.html', title='Assign Asset', form=form)


@bp.route('/<int:id>/return', methods=['POST'])
@login_required
def return_assignment(id):
    assignment = db.get_or_404(Assignment, id)
    asset = assignment.asset

    form = ReturnForm()
    form.location_id.choices = [(0, 'Keep current location')] + [
        (loc.id, loc.name) for loc in Location.query.order_by(Location.name)
    ]
    location = None
    if form.validate_on_submit() and form.location_id.data:
        location = db.session.get(Location, form.location_id.data)

    if not assignment.is_open:
        flash('This assignment has already been closed.', 'warning')
    else:
        try:
            return_asset(asset, location=location)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'{asset.asset_tag} returned by {assignment.employee_name}.', 'success')
    return redirect(url_for('assets.view_asset', asset_tag=asset.asset_tag))
