from flask import Flask, current_app, jsonify, request
from config import get_config
from extensions import db, migrate, bcrypt, mail
import logging
from logging.handlers import RotatingFileHandler
import os
import sys


def configure_logging(app):
    if app.debug or app.testing:
        return

    formatter = logging.Formatter('%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)

    if app.config.get('LOG_TO_STDOUT'):
        handler = logging.StreamHandler(sys.stdout)
    else:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        handler = RotatingFileHandler('logs/daycare_directory.log', maxBytes=10240, backupCount=10)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    app.logger.addHandler(handler)
    app.logger.setLevel(level)
    app.logger.info('Daycare directory startup')


def allow_credentialed_origins(response):
    """Let the configured frontends send the auth cookies cross-origin."""
    origin = request.headers.get('Origin')
    if origin and origin in current_app.config.get('CORS_ALLOWED_ORIGINS', []):
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Access-Control-Allow-Credentials'] = 'true'
        if request.method == 'OPTIONS':
            response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
            response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
    response.vary.add('Origin')
    return response


def create_app(config_name=None):
    app = Flask(__name__)

    # Get configuration based on environment or passed parameter
    if config_name:
        from config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    mail.init_app(app)

    # Import models to register them with SQLAlchemy
    from models import User, Daycare, DaycareAgeGroup, DaycareFeature  # noqa: F401

    configure_logging(app)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.daycares import daycares_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(daycares_bp, url_prefix='/api/daycares')
    app.after_request(allow_credentialed_origins)

    @app.route('/health')
    def health():
        return jsonify({'success': True, 'status': 'ok'})

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'success': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f'Unhandled error: {error}')
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    return app
