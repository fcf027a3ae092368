import logging

from flask import Blueprint, abort, flash, make_response, redirect, render_template, url_for
from flask_login import login_required

from asset_compass.app.services.exports import export_filename, rows_to_csv
from asset_compass.app.services.reports import REPORTS, get_report

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)


@reports_bp.route('/')
@login_required
def list_reports():
    return render_template('reports/list.html', title='Reports', reports=REPORTS)


@reports_bp.route('/<slug>.csv')
@login_required
def download_report(slug):
    report = get_report(slug)
    if report is None:
        abort(404)

    rows = report.builder()
    try:
        content = rows_to_csv(rows)
    except ValueError as e:
        flash(f'{report.name}: {e}', 'warning')
        return redirect(url_for('reports.list_reports'))

    logger.info("Generated %s with %d rows", report.name, len(rows))
    response = make_response(content)
    response.headers['Content-Disposition'] = f'attachment; filename={export_filename(report.filename)}'
    response.headers['Content-type'] = 'text/csv; charset=utf-8'
    return response
