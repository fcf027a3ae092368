# app/routes/alerts.py
from flask import flash, redirect, render_template, url_for
from flask_login import login_required

from asset_compass.app import db
from asset_compass.app.errors import AppError
from asset_compass.app.forms import AlertForm
from asset_compass.app.models import Alert
from asset_compass.app.routes import admin_required, alerts_bp as bp
from asset_compass.app.services import alerts as alert_service
from asset_compass.app.services.store import load_alerts


@bp.route('/')
@login_required
def list_alerts():
    return render_template('alerts/list.html', title='Alerts', alerts=load_alerts())


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_alert():
    form = AlertForm()
    if form.validate_on_submit():
        try:
            alert_service.create_alert(form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash('Alert created.', 'success')
            return redirect(url_for('alerts.list_alerts'))
    return render_template('alerts/form.html', title='New Alert', form=form, alert=None)


@bp.route('/<int:id>/edit', methods=['GET', 'POST'])
@login_required
def edit_alert(id):
    alert = db.get_or_404(Alert, id)
    form = AlertForm(obj=alert)
    if form.validate_on_submit():
        try:
            alert_service.update_alert(alert, form.data)
        except AppError as e:
            db.session.rollback()
            flash(e.message, 'danger')
        else:
            flash('Alert updated.', 'success')
            return redirect(url_for('alerts.list_alerts'))
    return render_template('alerts/form.html', title='Edit Alert', form=form, alert=alert)


@bp.route('/<int:id>/resolve', methods=['POST'])
@login_required
def resolve_alert(id):
    alert_service.resolve_alert(db.get_or_404(Alert, id))
    flash('Alert resolved.', 'success')
    return redirect(url_for('alerts.list_alerts'))


@bp.route('/<int:id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_alert(id):
    alert_service.delete_alert(db.get_or_404(Alert, id))
    flash('Alert deleted.', 'success')
    return redirect(url_for('alerts.list_alerts'))
