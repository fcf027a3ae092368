# app/services/notifications.py
import logging
import smtplib

from flask import current_app, render_template
from flask_mail import Message

from asset_compass.app import db, mail
from asset_compass.app.errors import AppError, NotFoundError, ValidationError
from asset_compass.app.models import Asset, AssetStatus, Employee
from asset_compass.app.services.settings import get_settings, notification_enabled

logger = logging.getLogger(__name__)


def mail_configured():
    return bool(current_app.config.get('MAIL_SERVER'))


def send_assignment_email(assignment):
    """Tell an employee about a newly assigned asset, when notifications are on."""
    employee = assignment.employee
    if employee is None or not employee.email:
        return False
    if not notification_enabled('assignmentNotifications'):
        return False
    if not mail_configured():
        logger.info("Mail not configured, skipping assignment email to %s", employee.email)
        return False

    org_name = get_settings().get('orgName')
    msg = Message(f'New Asset Assignment - {org_name}', recipients=[employee.email])
    msg.body = render_template('email/assignment.txt', assignment=assignment,
                               employee=employee, org_name=org_name)
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError):
        logger.error("Assignment email to %s failed", employee.email, exc_info=True)
        return False
    logger.info("Assignment email sent to %s for %s", employee.email, assignment.asset_tag)
    return True


def send_asset_summary(employee_id):
    """
    Email an employee the list of assets currently assigned to them.

    Without a configured mail server the message is only logged.

    Returns:
        dict with a human readable message and whether the send was simulated

    Raises:
        ValidationError: If no employee id is given or the employee has no email
        NotFoundError: If the employee does not exist
    """
    if not employee_id:
        raise ValidationError("Employee ID is required")

    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError(f"Employee not found: {employee_id}")
    if not employee.email:
        raise ValidationError("Employee has no email address registered")

    assets = Asset.query.filter_by(assigned_to_id=employee.id,
                                   status=AssetStatus.ASSIGNED.value).all()
    org_name = get_settings().get('orgName')
    html = render_template('email/asset_summary.html', employee=employee,
                           assets=assets, org_name=org_name)

    if not mail_configured():
        logger.info("Mocking email send (no mail server configured):\n%s", html)
        return {'message': 'Email simulation successful (See logs)', 'mock': True}

    msg = Message(f'Your Assigned Company Assets - {org_name}',
                  recipients=[employee.email], html=html)
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Asset summary to %s failed", employee.email, exc_info=True)
        raise AppError(f"Failed to send email: {e}", status_code=502) from e
    logger.info("Asset summary sent to %s (%d assets)", employee.email, len(assets))
    return {'message': f'Email sent to {employee.email}', 'mock': False}
