from flask import render_template, request, flash, Blueprint, redirect, url_for
from flask_login import login_required

from asset_compass.app.forms import SettingsForm
from asset_compass.app.routes import admin_required
from asset_compass.app.services.settings import get_settings, update_settings

settings_bp = Blueprint('settings', __name__)

NOTIFICATION_FIELDS = {
    'warrantyAlerts': 'warranty_alerts',
    'assignmentNotifications': 'assignment_notifications',
    'lowStockAlerts': 'low_stock_alerts',
    'emailDigest': 'email_digest',
}


@settings_bp.route('/', methods=['GET', 'POST'])
@login_required
@admin_required
def settings():
    current = get_settings()
    form = SettingsForm()

    if form.validate_on_submit():
        config = dict(current)
        config.update({
            'orgName': form.org_name.data.strip(),
            'tagPrefix': form.tag_prefix.data.strip().upper(),
            'currency': form.currency.data.strip().upper(),
            'timezone': form.timezone.data.strip(),
            'categories': [line.strip() for line in (form.categories.data or '').splitlines()
                           if line.strip()],
            'notifications': {key: getattr(form, field).data
                              for key, field in NOTIFICATION_FIELDS.items()},
        })
        update_settings(config)
        flash('Settings saved.', 'success')
        return redirect(url_for('settings.settings'))

    if request.method == 'GET':
        form.org_name.data = current['orgName']
        form.tag_prefix.data = current['tagPrefix']
        form.currency.data = current['currency']
        form.timezone.data = current['timezone']
        form.categories.data = '\n'.join(current.get('categories', []))
        for key, field in NOTIFICATION_FIELDS.items():
            getattr(form, field).data = bool(current.get('notifications', {}).get(key))

    return render_template('settings.html', title='Settings', form=form, roles=current.get('roles', []))
