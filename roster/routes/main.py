"""
Main routes for the Student Roster API.

Public utility routes: service banner and health checks (no authentication).
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from roster.extensions import db, limiter
from roster.utils.helpers import format_utc_iso

# Create blueprint
main_bp = Blueprint('main', __name__)


def _database_connected():
    try:
        db.session.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError:
        current_app.logger.exception('Health check failed')
        db.session.rollback()
        return False


@main_bp.route('/')
def home():
    """Service banner."""
    return jsonify({
        "message": "Student Roster API is running!",
        "status": "ok",
        "timestamp": format_utc_iso(datetime.now(timezone.utc)),
    })


@main_bp.route('/health')
@main_bp.route('/apis/health')
@limiter.exempt
def health_check():
    """Liveness plus database connectivity, for uptime monitoring."""
    connected = _database_connected()
    return jsonify({
        "message": "Student Roster API Health Check",
        "status": "operational",
        "database": "connected" if connected else "disconnected",
        "timestamp": format_utc_iso(datetime.now(timezone.utc)),
    }), 200
