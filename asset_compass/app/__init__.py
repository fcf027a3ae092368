import sqlite3
from pathlib import Path

from flask import Flask, redirect, url_for
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, current_user
from flask_bcrypt import Bcrypt
from flask_mail import Mail
from flask_wtf.csrf import CSRFProtect
from sqlalchemy import event
from sqlalchemy.engine import Engine

from asset_compass.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
mail = Mail()
csrf = CSRFProtect()
login_manager.login_view = 'users.login'
login_manager.login_message_category = 'info'


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    from asset_compass.app.logging_config import setup_logging
    setup_logging(app)

    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///'):
        Path(uri[len('sqlite:///'):]).parent.mkdir(parents=True, exist_ok=True)

    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    mail.init_app(app)
    csrf.init_app(app)

    from asset_compass.app.cache import CollectionCache
    app.extensions['collection_cache'] = CollectionCache(ttl=app.config['CACHE_TTL_SECONDS'])

    from asset_compass.app.models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from asset_compass.app.errors import register_error_handlers
    register_error_handlers(app)

    from asset_compass.app.services.locations import display_location_name
    app.jinja_env.filters['location_display'] = display_location_name

    with app.app_context():
        @app.route('/')
        def index():
            if current_user.is_authenticated:
                return redirect(url_for('dashboard.dashboard'))
            return redirect(url_for('users.login'))

        # Import blueprints inside context
        from asset_compass.app.routes import (assets_bp, employees_bp, locations_bp,
                                              assignments_bp, alerts_bp)
        from asset_compass.app.routes.users import users_bp
        from asset_compass.app.routes.settings import settings_bp
        from asset_compass.app.routes.dashboard import dashboard_bp
        from asset_compass.app.routes.reports import reports_bp
        from asset_compass.app.routes.handover import handover_bp
        from asset_compass.app.routes.api import api_bp

        # Register blueprints
        app.register_blueprint(assets_bp)
        app.register_blueprint(employees_bp)
        app.register_blueprint(locations_bp)
        app.register_blueprint(assignments_bp)
        app.register_blueprint(alerts_bp)
        app.register_blueprint(users_bp)
        app.register_blueprint(settings_bp, url_prefix='/settings')
        app.register_blueprint(dashboard_bp, url_prefix='/dashboard')
        app.register_blueprint(reports_bp, url_prefix='/reports')
        app.register_blueprint(handover_bp, url_prefix='/handover')
        app.register_blueprint(api_bp, url_prefix='/api')

        from asset_compass.app.cli import register_commands
        register_commands(app)

        # Create all database tables
        db.create_all()

    return app
