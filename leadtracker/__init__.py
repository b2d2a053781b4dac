"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
from datetime import timedelta
from flask import Flask


def create_app():
    """Create and configure the Flask application."""
    from leadtracker.logging_config import configure_logging
    from leadtracker.config import SECRET_KEY, SESSION_LIFETIME_HOURS, AUTO_CREATE_SCHEMA

    app = Flask(__name__)

    configure_logging(app)

    # Secret key signs the session cookie that carries the principal
    app.secret_key = SECRET_KEY
    app.config.update(
        PERMANENT_SESSION_LIFETIME=timedelta(hours=SESSION_LIFETIME_HOURS),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
    )

    from leadtracker.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from leadtracker.routes.health import bp as health_bp
    from leadtracker.routes.auth import bp as auth_bp
    from leadtracker.routes.leads import bp as leads_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(leads_bp)

    # No migration tooling; tables are created if missing.
    if AUTO_CREATE_SCHEMA:
        from leadtracker.database import init_db
        init_db()

    return app
