"""
Student routes for the Student Roster API.

Listing, search and statistics need the student API key. Writes and login
additionally need a fresh timestamp token; registration also goes through the
automation heuristic and the per-client cooldown.
"""

from flask import Blueprint, current_app, jsonify, request

from roster.admission import freshness_required, registration_cooldown, reject_automated_clients
from roster.auth import student_key_required
from roster.records import (
    build_search_filter,
    count_by_program_and_year,
    create_student,
    delete_student,
    find_paginated,
    find_student_for_login,
    get_settings,
    pagination_envelope,
    update_student,
)
from roster.utils.helpers import json_body, pagination_args

# Create blueprint
student_bp = Blueprint('students', __name__, url_prefix='/apis/students')


def _page_response(criteria):
    page, limit = pagination_args()
    result = find_paginated(criteria, page, limit)
    return jsonify({
        'data': [student.to_dict() for student in result.items],
        'pagination': pagination_envelope(page, limit, result.total),
    })


# -------------------- READS --------------------

@student_bp.route('', methods=['GET'])
@student_key_required
def list_students():
    """All students, newest first, paginated."""
    return _page_response([])


@student_bp.route('/stats', methods=['GET'])
@student_key_required
def student_stats():
    """Dashboard counters by program and year level."""
    return jsonify(count_by_program_and_year())


@student_bp.route('/search', methods=['GET'])
@student_key_required
def search_students():
    criteria = build_search_filter(
        request.args.get('search', ''),
        request.args.get('program', ''),
        request.args.get('yearLevel', ''),
    )
    return _page_response(criteria)


# -------------------- WRITES --------------------

@student_bp.route('', methods=['POST'])
@student_key_required
@reject_automated_clients
@registration_cooldown
@freshness_required
def register_student():
    settings = get_settings()
    if not settings.register_enabled:
        return jsonify({
            'message': settings.register_message or "Registration is currently disabled.",
            'registrationDisabled': True,
        }), 403

    student = create_student(json_body())
    current_app.logger.info(f"Registered student {student.student_id}")
    return jsonify(student.to_dict()), 201


@student_bp.route('/<string:student_id>', methods=['PUT'])
@student_key_required
@freshness_required
def edit_student(student_id):
    student = update_student(student_id, json_body())
    current_app.logger.info(f"Updated student {student.student_id}")
    return jsonify(student.to_dict())


@student_bp.route('/<string:student_id>', methods=['DELETE'])
@student_key_required
@freshness_required
def remove_student(student_id):
    delete_student(student_id)
    current_app.logger.info(f"Deleted student {student_id}")
    return jsonify(message="Student deleted successfully.")


# -------------------- LOGIN --------------------

@student_bp.route('/login', methods=['POST'])
@student_key_required
@freshness_required
def student_login():
    """Look up a student by student_id and last name (case-insensitive)."""
    settings = get_settings()
    if not settings.login_enabled:
        return jsonify({
            'message': settings.login_message or "Login is currently disabled.",
            'loginDisabled': True,
        }), 403

    data = json_body()
    student_id = data.get('student_id')
    last_name = data.get('last_name')
    if not student_id or not last_name:
        return jsonify(message="Student ID and Last Name required"), 400
    if not isinstance(student_id, str) or not isinstance(last_name, str):
        return jsonify(message="Invalid Student ID or Last Name"), 400

    student = find_student_for_login(student_id, last_name)
    if student is None:
        return jsonify(message="Invalid Student ID or Last Name"), 400

    return jsonify({
        'message': "Login successful",
        'student': student.to_dict(),
    })
