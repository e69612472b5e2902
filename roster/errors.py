"""
Error types and JSON error handlers for the Student Roster API.

Record operations raise RosterError subclasses; the handler registered here
turns them into {"message": ...} responses with the matching status code.
Admission gates short-circuit with their own responses before any store
access, so they never reach these handlers.
"""

from flask import jsonify, request
from flask_limiter.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from roster.extensions import db


class RosterError(Exception):
    """Base class for expected, client-visible failures."""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(RosterError):
    """Malformed identity key, out-of-range cohort, bad name characters, missing fields."""
    status_code = 400


class DuplicateStudentId(RosterError):
    """The student_id is already registered (unique constraint violation)."""
    status_code = 400

    def __init__(self, message="Duplicate student_id"):
        super().__init__(message)


class DuplicateUsername(RosterError):
    status_code = 400

    def __init__(self, message="Username already exists"):
        super().__init__(message)


class StudentNotFound(RosterError):
    status_code = 404

    def __init__(self, message="Student not found"):
        super().__init__(message)


def register_error_handlers(app):
    """Register JSON error handlers on the application."""

    @app.errorhandler(RosterError)
    def roster_error(error):
        app.logger.info(f"{error.status_code} {type(error).__name__}: {request.path} - {error.message}")
        return jsonify(message=error.message), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        app.logger.exception(f"Database error on {request.method} {request.path}")
        db.session.rollback()
        return jsonify(message=str(error)), 500

    @app.errorhandler(RateLimitExceeded)
    def rate_limited(error):
        app.logger.warning(f"429 Rate limit exceeded: {request.path} ({error.description})")
        return jsonify(message=f"Too many requests: {error.description}"), 429

    @app.errorhandler(400)
    def bad_request_error(error):
        error_msg = str(error.description) if hasattr(error, 'description') else str(error)
        app.logger.warning(f"400 Bad Request: {request.url} - {error_msg}")
        return jsonify(message=error_msg), 400

    @app.errorhandler(404)
    def not_found_error(error):
        app.logger.warning(f"404 Not Found: {request.url}")
        return jsonify(message="Not found"), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify(message="Method not allowed"), 405

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.exception("500 Internal Server Error occurred")
        original = getattr(error, 'original_exception', None) or error
        return jsonify(message=str(original)), 500
