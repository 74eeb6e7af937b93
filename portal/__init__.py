"""
Member Portal
Flask application factory
"""
import os
import logging
from flask import Flask, send_from_directory
from flask_cors import CORS

from .extensions import db, migrate
from .config import get_config, validate_config
from .utils.logging_config import setup_logging
from .utils.errors import portal_error_response, internal_error
from .utils.exceptions import PortalError, ValidationError

logger = logging.getLogger(__name__)


def create_app(config_name: str = None, config_overrides: dict = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)
        config_overrides: Extra config values applied after the config class

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()

    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    if config_overrides:
        app.config.update(config_overrides)

    app.config['MAX_CONTENT_LENGTH'] = app.config['MAX_UPLOAD_BYTES'] + 1024 * 1024

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    CORS(
        app,
        origins=app.config['CORS_ORIGINS'],
        supports_credentials=True,
        allow_headers=['Content-Type', 'Authorization'],
    )

    register_blueprints(app)
    register_upload_route(app)

    from .commands import init_app as init_commands
    init_commands(app)

    from .utils.scheduler import init_scheduler
    init_scheduler(app)

    register_error_handlers(app)

    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'member-portal'}

    logger.info(f'Member portal created ({config_name})')
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    from .api.auth import auth_bp
    from .api.profile import profile_bp
    from .api.admin import admin_bp
    from .api.email import email_bp
    from .api.members import members_bp
    from .api.scheduled_tasks import scheduled_tasks_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(profile_bp, url_prefix='/api/profile')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(scheduled_tasks_bp, url_prefix='/api/scheduled')

    # Historical top-level paths (/api/send-birthday-email, /api/delete-member)
    app.register_blueprint(email_bp, url_prefix='/api')
    app.register_blueprint(members_bp, url_prefix='/api')


def register_upload_route(app: Flask) -> None:
    """Serve uploaded profile pictures."""

    @app.route('/uploads/<bucket>/<path:filename>')
    def uploaded_file(bucket, filename):
        folder = os.path.join(app.config['UPLOAD_FOLDER'], bucket)
        response = send_from_directory(folder, filename)
        response.headers['Cache-Control'] = 'public, max-age=86400'  # 1 day
        return response


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""

    @app.errorhandler(PortalError)
    def handle_portal_error(error):
        return portal_error_response(error)

    @app.errorhandler(400)
    def bad_request(error):
        return {'error': 'Bad request', 'message': str(error)}, 400

    @app.errorhandler(404)
    def not_found(error):
        return {'error': 'Not found', 'message': str(error)}, 404

    @app.errorhandler(413)
    def too_large(error):
        # Same 400 body as the upload size check in storage_service
        max_mb = app.config['MAX_UPLOAD_BYTES'] // (1024 * 1024)
        return portal_error_response(
            ValidationError(f'File too large. Maximum size: {max_mb}MB', field='profile_picture')
        )

    @app.errorhandler(500)
    def server_error(error):
        db.session.rollback()
        return internal_error(details={'error': str(error)})
