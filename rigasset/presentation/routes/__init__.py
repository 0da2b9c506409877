"""
Routes package for the RigAsset API
One blueprint per area, mounted under /api
"""

from flask import jsonify
from rigasset.logger import get_logger

logger = get_logger("rigasset.routes")


def init_app(app):
    """Initialize all route blueprints and error handlers with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .assets import assets_bp
    from .dashboard import dashboard_bp
    from .errors import register_error_handlers
    from .maintenance import maintenance_bp
    from .notifications import notifications_bp
    from .transfers import transfers_bp

    app.register_blueprint(transfers_bp, url_prefix='/api/transfers')
    app.register_blueprint(maintenance_bp, url_prefix='/api/maintenance')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(assets_bp, url_prefix='/api/assets')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    register_error_handlers(app)

    @app.get('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    logger.info("Registered API blueprints")
