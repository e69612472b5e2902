"""
Application factory for the Student Roster API.

This module provides create_app() which initializes Flask, extensions,
logging, the admission ledger, and registers blueprints.
"""

import os
import logging
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, request
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# Validate required environment variables
required_env_vars = ["SECRET_KEY", "DATABASE_URL", "FLASK_ENV", "STUDENT_API_KEY", "MASTER_TOKEN_KEY"]
missing_vars = [var for var in required_env_vars if not os.getenv(var)]
if missing_vars:
    raise RuntimeError(
        "Missing required environment variables: " + ", ".join(missing_vars)
    )


from roster.config import CORS_ALLOWED_ORIGINS, TIMESTAMP_MAX_AGE_MINUTES, TIMESTAMP_TOKEN_HEADER


def _env_flag(name):
    return os.getenv(name, "").lower() in {"1", "true", "yes", "on"}


# -------------------- APPLICATION FACTORY --------------------

def create_app():
    """
    Application factory function.

    Creates and configures the Flask application, initializes extensions,
    sets up logging, creates the registration ledger, and registers blueprints.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # -------------------- CONFIGURATION --------------------
    app.config.from_mapping(
        DEBUG=False,
        ENV=os.environ["FLASK_ENV"],
        SECRET_KEY=os.environ["SECRET_KEY"],
        SQLALCHEMY_DATABASE_URI=os.environ["DATABASE_URL"],
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SQLALCHEMY_ENGINE_OPTIONS={"pool_pre_ping": True},
        STUDENT_API_KEY=os.environ["STUDENT_API_KEY"],
        MASTER_TOKEN_KEY=os.environ["MASTER_TOKEN_KEY"],
        TIMESTAMP_MAX_AGE_MINUTES=TIMESTAMP_MAX_AGE_MINUTES,
    )
    app.json.sort_keys = False

    # -------------------- EXTENSIONS --------------------
    from roster.extensions import db, migrate, limiter
    from roster.admission import LEDGER_EXTENSION_KEY, RegistrationLedger

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Per-app attempt ledger; tests get a fresh one with every app instance
    app.extensions[LEDGER_EXTENSION_KEY] = RegistrationLedger()

    # -------------------- LOGGING --------------------
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    log_format = os.getenv(
        "LOG_FORMAT",
        "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(logging.Formatter(log_format))

    app.logger.setLevel(log_level)
    # Prevent duplicate log entries by clearing handlers first
    app.logger.handlers.clear()
    app.logger.addHandler(stream_handler)

    if os.getenv("FLASK_ENV", app.config.get("ENV")) == "production":
        log_file = os.getenv("LOG_FILE", "app.log")
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        app.logger.addHandler(file_handler)

    # -------------------- MAINTENANCE MODE --------------------
    @app.before_request
    def maintenance_gate():
        """Answer 503 while maintenance mode is enabled via environment variable."""
        if not _env_flag("MAINTENANCE_MODE"):
            return None

        # Always allow health checks so uptime monitors keep working.
        if request.endpoint in {"main.health_check"}:
            return None

        # A matching ?maintenance_bypass=<token> lets operators verify a deploy.
        bypass_token = os.getenv("MAINTENANCE_BYPASS_TOKEN", "")
        provided_token = request.args.get("maintenance_bypass")
        if bypass_token and provided_token and provided_token == bypass_token:
            app.logger.debug("Maintenance bypass granted (token).")
            return None

        message = os.getenv(
            "MAINTENANCE_MESSAGE",
            "The roster service is undergoing scheduled maintenance.",
        )
        return jsonify(message=message, maintenance=True), 503

    # -------------------- REGISTER BLUEPRINTS --------------------
    from roster.routes.main import main_bp
    from roster.routes.students import student_bp
    from roster.routes.masters import master_bp
    from roster.routes.settings import settings_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(master_bp)
    app.register_blueprint(settings_bp)

    # -------------------- ERROR HANDLERS --------------------
    from roster.errors import register_error_handlers
    register_error_handlers(app)

    # -------------------- SECURITY & CORS HEADERS --------------------
    @app.after_request
    def set_response_headers(response):
        """
        Add security and CORS headers to all HTTP responses.

        - HSTS: Force HTTPS connections
        - X-Frame-Options / CSP frame-ancestors: JSON is never framed
        - X-Content-Type-Options: Prevent MIME sniffing attacks
        - Referrer-Policy: Control referrer information leakage
        - Access-Control-*: browser frontends are served from other origins
        """
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

        origin = request.headers.get('Origin')
        if "*" in CORS_ALLOWED_ORIGINS:
            response.headers['Access-Control-Allow-Origin'] = '*'
        elif origin and origin in CORS_ALLOWED_ORIGINS:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers.add('Vary', 'Origin')
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = (
            f'Authorization, Content-Type, {TIMESTAMP_TOKEN_HEADER}'
        )
        return response

    # -------------------- CLI COMMANDS --------------------
    from roster import cli_commands
    cli_commands.init_app(app)

    # -------------------- SCHEDULED TASKS --------------------
    if not app.config.get("TESTING") and app.config.get("ENV") != "testing":
        from roster.scheduled_tasks import init_scheduled_tasks
        init_scheduled_tasks(app)

    return app


# Create a default application instance for compatibility with wsgi imports
app = create_app()

# Re-export commonly used objects for convenience
from roster.extensions import db  # noqa: E402
from roster.models import Master, Settings, Student  # noqa: E402

__all__ = [
    "app",
    "create_app",
    "db",
    "Master",
    "Settings",
    "Student",
]
