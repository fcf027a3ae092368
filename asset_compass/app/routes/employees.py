# app/routes/employees.py
from collections import Counter

from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.errors import AppError
from asset_compass.app.forms import EmployeeForm
from asset_compass.app.models import Employee, EmployeeStatus
from asset_compass.app.routes import admin_required, employees_bp as bp, is_htmx
from asset_compass.app.routes.assets import location_choices
from asset_compass.app.services import inventory
from asset_compass.app.services.notifications import send_asset_summary
from asset_compass.app.services.store import load_assets, load_employees


def assets_per_employee(assets):
    return Counter(a.assigned_to_id for a in assets if a.assigned_to_id is not None)


@bp.route('/')
@login_required
def list_employees():
    query = request.args.get('q', '').strip().lower()
    department = request.args.get('department', '')
    status = request.args.get('status', '')

    all_employees = load_employees()
    employees = all_employees
    if query:
        employees = [e for e in employees
                     if query in (e.name or '').lower() or query in (e.email or '').lower()]
    if department:
        employees = [e for e in employees if e.department == department]
    if status:
        employees = [e for e in employees if e.status == status]

    counts = assets_per_employee(load_assets())
    if is_htmx():
        return render_template('employees/_table.html', employees=employees, counts=counts)

    departments = sorted({e.department for e in all_employees if e.department})
    return render_template('employees/list.html', title='People', employees=employees,
                           counts=counts, departments=departments,
                           statuses=[s.value for s in EmployeeStatus],
                           filters={'q': query, 'department': department, 'status': status})


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_employee():
    form = EmployeeForm()
    form.location_id.choices = location_choices()
    if form.validate_on_submit():
        try:
            employee = inventory.create_employee(form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'{employee.name} added.', 'success')
            return redirect(url_for('employees.view_employee', id=employee.id))
    return render_template('employees/form.html', title='Add Employee', form=form, employee=None)


@bp.route('/<int:id>')
@login_required
def view_employee(id):
    employee = db.get_or_404(Employee, id)
    return render_template('employees/detail.html', title=employee.name, employee=employee,
                           assets=inventory.assigned_assets(employee),
                           history=employee.assignments)


@bp.route('/<int:id>/edit', methods=['GET', 'POST'])
@login_required
def edit_employee(id):
    employee = db.get_or_404(Employee, id)
    form = EmployeeForm(obj=employee)
    form.location_id.choices = location_choices()
    if form.validate_on_submit():
        try:
            inventory.update_employee(employee, form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash(f'{employee.name} updated.', 'success')
            return redirect(url_for('employees.view_employee', id=employee.id))
    return render_template('employees/form.html', title='Edit Employee', form=form, employee=employee)


@bp.route('/<int:id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_employee(id):
    employee = db.get_or_404(Employee, id)
    name = employee.name
    try:
        inventory.delete_employee(employee)
    except AppError as e:
        db.session.rollback()
        flash(e.message, 'danger')
        return redirect(url_for('employees.view_employee', id=id))
    flash(f'{name} has been offboarded.', 'success')
    return redirect(url_for('employees.list_employees'))


@bp.route('/<int:id>/email-assets', methods=['POST'])
@login_required
def email_assets(id):
    try:
        result = send_asset_summary(id)
    except AppError as e:
        flash(e.message, 'danger')
    else:
        flash(result['message'], 'info' if result['mock'] else 'success')
    return redirect(url_for('employees.view_employee', id=id))
