import logging

from flask import render_template, url_for, flash, redirect, request, Blueprint
from flask_login import login_user, current_user, logout_user, login_required

from asset_compass.app import db
from asset_compass.app.models import User, UserRole
from asset_compass.app.forms import (RegistrationForm, LoginForm, UpdateAccountForm,
                                     ChangePasswordForm)

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


@users_bp.route("/register", methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('index'))
    form = RegistrationForm()
    if form.validate_on_submit():
        # The first account administers the installation
        role = UserRole.SUPPORT.value if User.query.first() else UserRole.ADMIN.value
        user = User(username=form.username.data, email=form.email.data.lower(), role=role)
        user.set_password(form.password.data)
        db.session.add(user)
        db.session.commit()
        logger.info("User %s registered with role %s", user.username, role)
        flash('Your account has been created! You are now able to log in', 'success')
        return redirect(url_for('users.login'))
    return render_template('users/register.html', title='Register', form=form)


@users_bp.route("/login", methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('index'))
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.lower()).first()
        if user and user.check_password(form.password.data):
            login_user(user, remember=form.remember.data)
            next_page = request.args.get('next')
            # Only follow local redirects
            if next_page and next_page.startswith('/') and not next_page.startswith('//'):
                return redirect(next_page)
            return redirect(url_for('index'))
        logger.warning("Failed login for %s", form.email.data)
        flash('Login Unsuccessful. Please check email and password', 'danger')
    return render_template('users/login.html', title='Login', form=form)


@users_bp.route("/logout")
def logout():
    logout_user()
    return redirect(url_for('index'))


@users_bp.route("/profile", methods=['GET', 'POST'])
@login_required
def profile():
    update_form = UpdateAccountForm()
    password_form = ChangePasswordForm()

    if 'update_submit' in request.form and update_form.validate_on_submit():
        current_user.username = update_form.username.data
        current_user.email = update_form.email.data.lower()
        db.session.commit()
        flash('Your account has been updated!', 'success')
        return redirect(url_for('users.profile'))

    if 'password_submit' in request.form and password_form.validate_on_submit():
        if current_user.check_password(password_form.old_password.data):
            current_user.set_password(password_form.new_password.data)
            db.session.commit()
            flash('Your password has been updated!', 'success')
            return redirect(url_for('users.profile'))
        flash('Incorrect old password.', 'danger')

    if request.method == 'GET':
        update_form.username.data = current_user.username
        update_form.email.data = current_user.email

    return render_template('users/profile.html', title='Profile',
                           update_form=update_form, password_form=password_form)
