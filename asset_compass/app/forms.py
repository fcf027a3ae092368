# app/forms.py
from flask_login import current_user
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import (BooleanField, DateField, DecimalField, PasswordField, SelectField,
                     StringField, SubmitField, TextAreaField)
from wtforms.validators import (DataRequired, Email, EqualTo, Length, NumberRange, Optional,
                                ValidationError)

from asset_compass.app.models import (AlertSeverity, AlertType, AssetCondition, AssetStatus,
                                      EmployeeStatus, LocationType, User)


def _choices(enum_cls, exclude=()):
    return [(member.value, member.value.replace('-', ' ').title())
            for member in enum_cls if member not in exclude]


class RegistrationForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=2, max=50)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=6)])
    confirm_password = PasswordField('Confirm Password',
                                     validators=[DataRequired(), EqualTo('password')])
    submit = SubmitField('Sign Up')

    def validate_username(self, username):
        if User.query.filter_by(username=username.data).first():
            raise ValidationError('That username is taken. Please choose a different one.')

    def validate_email(self, email):
        if User.query.filter_by(email=email.data.lower()).first():
            raise ValidationError('That email is taken. Please choose a different one.')


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember = BooleanField('Remember Me')
    submit = SubmitField('Login')


class UpdateAccountForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(), Length(min=2, max=50)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    update_submit = SubmitField('Update')

    def validate_username(self, username):
        if username.data != current_user.username:
            if User.query.filter_by(username=username.data).first():
                raise ValidationError('That username is taken. Please choose a different one.')

    def validate_email(self, email):
        if email.data.lower() != current_user.email:
            if User.query.filter_by(email=email.data.lower()).first():
                raise ValidationError('That email is taken. Please choose a different one.')


class ChangePasswordForm(FlaskForm):
    old_password = PasswordField('Current Password', validators=[DataRequired()])
    new_password = PasswordField('New Password', validators=[DataRequired(), Length(min=6)])
    confirm_password = PasswordField('Confirm New Password',
                                     validators=[DataRequired(), EqualTo('new_password')])
    password_submit = SubmitField('Change Password')


class AssetForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    asset_tag = StringField('Asset Tag', validators=[Optional(), Length(max=50)],
                            description='Leave blank to generate one')
    serial_number = StringField('Serial Number', validators=[Optional(), Length(max=100)])
    brand = StringField('Brand', validators=[Optional(), Length(max=100)])
    model = StringField('Model', validators=[Optional(), Length(max=100)])
    category = SelectField('Category', validators=[DataRequired()])
    # "assigned" is reached through the assign action only
    status = SelectField('Status', choices=_choices(AssetStatus, exclude=(AssetStatus.ASSIGNED,)),
                         default=AssetStatus.AVAILABLE.value)
    condition = SelectField('Condition', choices=_choices(AssetCondition),
                            default=AssetCondition.GOOD.value)
    location_id = SelectField('Location', coerce=int, validators=[DataRequired()])
    purchase_date = DateField('Purchase Date', validators=[Optional()])
    purchase_cost = DecimalField('Purchase Cost', places=2,
                                 validators=[Optional(), NumberRange(min=0)])
    vendor = StringField('Vendor', validators=[Optional(), Length(max=100)])
    warranty_start = DateField('Warranty Start', validators=[Optional()])
    warranty_end = DateField('Warranty End', validators=[Optional()])
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Save Asset')

    def validate_warranty_end(self, warranty_end):
        if warranty_end.data and self.warranty_start.data and warranty_end.data < self.warranty_start.data:
            raise ValidationError('Warranty end must be after warranty start.')


class BulkImportForm(FlaskForm):
    csv_file = FileField('CSV File', validators=[FileRequired(), FileAllowed(['csv'], 'CSV files only')])
    submit = SubmitField('Import')


class EmployeeForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    department = StringField('Department', validators=[Optional(), Length(max=50)])
    position = StringField('Position', validators=[Optional(), Length(max=100)])
    location_id = SelectField('Location', coerce=int, validators=[DataRequired()])
    status = SelectField('Status', choices=_choices(EmployeeStatus),
                         default=EmployeeStatus.ACTIVE.value)
    join_date = DateField('Join Date', validators=[Optional()])
    avatar_url = StringField('Avatar URL', validators=[Optional(), Length(max=500)])
    submit = SubmitField('Save Employee')


class LocationForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=200)])
    type = SelectField('Type', choices=_choices(LocationType), default=LocationType.OFFICE.value)
    address = StringField('Address', validators=[Optional(), Length(max=500)])
    submit = SubmitField('Save Location')


class AssignmentForm(FlaskForm):
    asset_id = SelectField('Asset', coerce=int, validators=[DataRequired()])
    employee_id = SelectField('Employee', coerce=int, validators=[DataRequired()])
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Assign')


class ReturnForm(FlaskForm):
    location_id = SelectField('Return to Location', coerce=int, validators=[Optional()])
    submit = SubmitField('Return Asset')


class AlertForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(), Length(max=200)])
    type = SelectField('Type', choices=_choices(AlertType), default=AlertType.OTHER.value)
    severity = SelectField('Severity', choices=_choices(AlertSeverity),
                           default=AlertSeverity.MEDIUM.value)
    description = TextAreaField('Description', validators=[Optional()])
    submit = SubmitField('Save Alert')


class SettingsForm(FlaskForm):
    org_name = StringField('Organization Name', validators=[DataRequired(), Length(max=100)])
    tag_prefix = StringField('Asset Tag Prefix', validators=[DataRequired(), Length(max=10)])
    currency = StringField('Currency', validators=[DataRequired(), Length(max=10)])
    timezone = StringField('Timezone', validators=[DataRequired(), Length(max=50)])
    categories = TextAreaField('Categories', description='One per line')
    warranty_alerts = BooleanField('Warranty alerts')
    assignment_notifications = BooleanField('Assignment notifications')
    low_stock_alerts = BooleanField('Low stock alerts')
    email_digest = BooleanField('Email digest')
    submit = SubmitField('Save Settings')
