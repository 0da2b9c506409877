from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from pathlib import Path
from rigasset.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def create_app(test_config=None):
    """
    Build the RigAsset API application.

    Settings come from the environment and are then overridden by
    ``test_config`` when given.
    """
    app = Flask(__name__)

    logger = get_logger("rigasset")
    logger.info("Initializing Flask application")

    base_dir = Path(__file__).parent.parent
    instance_dir = base_dir / 'instance'

    # SECURITY: Require SECRET_KEY - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    database_url = os.environ.get('DATABASE_URL')
    if not database_url:
        instance_dir.mkdir(parents=True, exist_ok=True)
        database_url = f"sqlite:///{(instance_dir / 'rigasset.db').resolve()}"
    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '200 per day;50 per hour')
    app.config['RATELIMIT_ENABLED'] = os.environ.get('RATELIMIT_ENABLED', 'True').lower() in ('true', '1', 'yes', 'on')
    app.config['JSON_SORT_KEYS'] = False

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    from rigasset.business.core.clock import SystemClock, CLOCK_EXTENSION_KEY
    app.extensions.setdefault(CLOCK_EXTENSION_KEY, app.config.get('CLOCK') or SystemClock())

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from rigasset.data.core.user import User
    from rigasset.data.core.company import Company
    from rigasset.data.core.rig import Rig
    from rigasset.data.core.asset import Asset
    from rigasset.data.core.asset_history import AssetHistory
    from rigasset.data.core.notification import Notification
    from rigasset.data.transfers.transfer import Transfer
    from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
    from rigasset.data.maintenance.maintenance_log import MaintenanceLog

    logger.debug("Models imported and registered")

    from rigasset.auth import register_request_loader
    from rigasset.presentation.routes import init_app as init_routes

    register_request_loader(login_manager)
    init_routes(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Cache-Control'] = 'no-store'
        return response

    logger.info("Flask application initialization complete")

    return app
