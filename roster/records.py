"""
Record access for students, masters and settings.

Route handlers call these functions instead of querying models directly.
Expected failures raise RosterError subclasses (see roster.errors); anything
else from the database propagates and is reported as a 500.
"""

import math
from collections import namedtuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from roster.config import PROGRAMS, SETTINGS_SINGLETON_ID, YEAR_LEVELS
from roster.errors import DuplicateStudentId, DuplicateUsername, StudentNotFound, ValidationFailed
from roster.extensions import db
from roster.models import Master, Settings, Student
from roster.utils.helpers import build_full_name
from roster.utils.validators import is_valid_name, student_id_error

Page = namedtuple('Page', ['items', 'total'])

SEARCHABLE_COLUMNS = (
    Student.student_id,
    Student.first_name,
    Student.last_name,
    Student.email,
    Student.rfid_code,
)


# -------------------- SEARCH & PAGINATION --------------------

def _escape_like(text):
    return text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def build_search_filter(search='', program='', year_level=''):
    """
    Build query criteria for the student search endpoint.

    Non-blank search text matches, case-insensitively, as a substring of any
    searchable column. program and year_level add exact constraints. An empty
    list matches every student.
    """
    criteria = []

    search = (search or '').strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        criteria.append(or_(*[column.ilike(pattern, escape='\\') for column in SEARCHABLE_COLUMNS]))

    if program:
        criteria.append(Student.program == program)

    if year_level:
        criteria.append(Student.year_level == year_level)

    return criteria


def find_paginated(criteria, page, limit):
    """Return one page of students (newest first) and the total match count."""
    query = Student.query.filter(*criteria)
    total = query.order_by(None).count()
    items = (
        query.order_by(Student.created_date.desc(), Student.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=items, total=total)


def pagination_envelope(page, limit, total):
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'currentPage': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNextPage': page < total_pages,
        'hasPrevPage': page > 1,
    }


# -------------------- STATISTICS --------------------

def count_all():
    return Student.query.count()


def count_by_program_and_year():
    """
    Count students per program and year level for the dashboard.

    Only the known programs and year levels get buckets; students with any
    other value are left out of the buckets but still counted in
    totalStudents.
    """
    stats = {
        program: {**{level: 0 for level in YEAR_LEVELS}, 'total': 0}
        for program in PROGRAMS
    }

    rows = (
        db.session.query(Student.program, Student.year_level, func.count(Student.id))
        .group_by(Student.program, Student.year_level)
        .all()
    )
    for program, year_level, count in rows:
        bucket = stats.get(program)
        if bucket is None or year_level not in YEAR_LEVELS:
            continue
        bucket[year_level] += count
        bucket['total'] += count

    return {'stats': stats, 'totalStudents': count_all()}


# -------------------- STUDENT CRUD --------------------

def _missing_required(values):
    return [field for field in Student.REQUIRED_FIELDS if not values.get(field)]


# Columns a partial update may clear by sending null
CLEARABLE_FIELDS = ('middle_name', 'suffix', 'photo', 'email')


def _check_text_fields(values, clearable=()):
    for field, value in values.items():
        if value is None and field in clearable:
            continue
        if not isinstance(value, str):
            raise ValidationFailed(f"Invalid {field}")


def _check_optional_name(field, value):
    # Empty middle names are allowed; non-empty ones follow the name rules
    if value and not is_valid_name(value):
        raise ValidationFailed(f"Invalid {field}")


def create_student(data):
    """
    Register a new student.

    Raises:
        ValidationFailed: bad student_id, cohort, names or missing fields
        DuplicateStudentId: the student_id already exists
    """
    student_id = data.get('student_id')
    error = student_id_error(student_id)
    if error:
        raise ValidationFailed(error)

    if not is_valid_name(data.get('first_name')) or not is_valid_name(data.get('last_name')):
        raise ValidationFailed("Names must contain letters only")

    values = {field: data[field] for field in Student.WRITABLE_FIELDS if data.get(field) is not None}
    _check_text_fields(values)

    missing = _missing_required(values)
    if missing:
        raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")
    _check_optional_name('middle_name', values.get('middle_name'))

    student = Student(**values)
    student.full_name = build_full_name(
        values.get('first_name'), values.get('middle_name'),
        values.get('last_name'), values.get('suffix'),
    )

    db.session.add(student)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateStudentId()
    return student


def get_student(student_id):
    return Student.query.filter_by(student_id=student_id).first()


def update_student(student_id, updates):
    """
    Apply a partial update to a student.

    Only the supplied fields are validated. The identity key never changes.
    full_name is rebuilt from the merged record when any name part changes.

    Raises:
        ValidationFailed: a supplied field is invalid
        StudentNotFound: no student has this student_id
    """
    changes = {
        field: updates[field]
        for field in Student.WRITABLE_FIELDS
        if field in updates and field != 'student_id'
    }
    _check_text_fields(changes, clearable=CLEARABLE_FIELDS)

    for field in ('first_name', 'middle_name', 'last_name'):
        if isinstance(changes.get(field), str):
            changes[field] = changes[field].strip()

    for field in ('first_name', 'last_name'):
        if field in changes and not is_valid_name(changes[field]):
            raise ValidationFailed(f"Invalid {field}")
    _check_optional_name('middle_name', changes.get('middle_name'))

    emptied = [field for field in Student.REQUIRED_FIELDS if field in changes and not changes[field]]
    if emptied:
        raise ValidationFailed(f"Missing required fields: {', '.join(emptied)}")

    student = get_student(student_id)
    if student is None:
        raise StudentNotFound()

    for field, value in changes.items():
        setattr(student, field, value)

    if any(field in changes for field in Student.NAME_FIELDS):
        student.full_name = build_full_name(
            student.first_name, student.middle_name, student.last_name, student.suffix,
        )

    db.session.commit()
    return student


def delete_student(student_id):
    student = get_student(student_id)
    if student is None:
        raise StudentNotFound("Student not found.")
    db.session.delete(student)
    db.session.commit()


def find_student_for_login(student_id, last_name):
    """Return the student whose id matches and whose last name matches ignoring case."""
    student = get_student(student_id)
    if student is None or not isinstance(last_name, str):
        return None
    if (student.last_name or '').casefold() != last_name.casefold():
        return None
    return student


# -------------------- SETTINGS --------------------

def get_settings():
    """
    Return the settings singleton, creating it with defaults if absent.

    The row has a fixed primary key, so two requests racing to create it
    cannot both succeed; the loser rolls back and reads the winner's row.
    """
    settings = db.session.get(Settings, SETTINGS_SINGLETON_ID)
    if settings is not None:
        return settings

    db.session.add(Settings.new_singleton())
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
    return db.session.get(Settings, SETTINGS_SINGLETON_ID)


def _coerce_flag(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {'true', 'false'}:
        return value.strip().lower() == 'true'
    raise ValidationFailed(f"{name} must be a boolean")


def _toggle_values(toggle, flag_key, label):
    if not isinstance(toggle, dict):
        raise ValidationFailed(f"{label} must be an object")
    enabled = _coerce_flag(toggle.get(flag_key, True), f"{label}.{flag_key}")
    message = toggle.get('message') or ""
    if not isinstance(message, str):
        raise ValidationFailed(f"{label}.message must be a string")
    return enabled, message


def update_settings(user_register=None, user_login=None):
    """
    Replace the supplied toggles on the settings singleton.

    A toggle that is None is left unchanged; a supplied toggle is replaced as
    a whole, with missing keys taking their defaults.
    """
    register = _toggle_values(user_register, 'register', 'userRegister') if user_register is not None else None
    login = _toggle_values(user_login, 'login', 'userLogin') if user_login is not None else None

    settings = get_settings()
    if register is not None:
        settings.register_enabled, settings.register_message = register
    if login is not None:
        settings.login_enabled, settings.login_message = login
    db.session.commit()
    return settings


# -------------------- MASTERS --------------------

def create_master(username, password):
    if Master.query.filter_by(username=username).first():
        raise DuplicateUsername()

    master = Master(username=username, password_hash=generate_password_hash(password))
    db.session.add(master)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateUsername()
    return master


def authenticate_master(username, password):
    """Return the master for valid credentials, otherwise None."""
    master = Master.query.filter_by(username=username).first()
    if master is None or not check_password_hash(master.password_hash, password):
        return None
    return master


def list_masters():
    return Master.query.order_by(Master.created_at.asc(), Master.id.asc()).all()
