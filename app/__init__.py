"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
import importlib

from flask import Flask


def create_app():
    """Create and configure the Flask application."""
    from app.logging_config import configure_logging

    app = Flask(__name__)

    configure_logging(app)

    # Register blueprints
    from app.routes.health import bp as health_bp
    from app.routes.intake import bp as intake_bp
    from app.routes.jobs import bp as jobs_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(intake_bp)
    app.register_blueprint(jobs_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic; no create_all() call.
    importlib.import_module('app.models.referral')
    importlib.import_module('app.models.scout')
    importlib.import_module('app.models.candidate')

    return app
