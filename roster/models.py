"""
Database models for the Student Roster API.

All SQLAlchemy models are defined here. Times are stored as UTC in the database.
"""

from datetime import datetime, timezone

from roster.config import RFID_NOT_ASSIGNED, SETTINGS_SINGLETON_ID
from roster.extensions import db
from roster.utils.helpers import format_utc_iso


def _utc_now():
    """Helper function for timezone-aware datetime defaults in SQLAlchemy models."""
    return datetime.now(timezone.utc)


# -------------------- MODELS --------------------

class Student(db.Model):
    """
    A student in the university roster.

    student_id is the public identity key (e.g. 21-A-12345) and is immutable
    once the record exists; the integer id is internal only.
    """
    __tablename__ = 'students'

    # Fields a client may supply when registering or updating a student
    WRITABLE_FIELDS = (
        'student_id', 'rfid_code', 'first_name', 'middle_name', 'last_name',
        'suffix', 'year_level', 'school_year', 'program', 'photo', 'semester', 'email',
    )
    REQUIRED_FIELDS = (
        'first_name', 'last_name', 'year_level', 'school_year', 'program', 'semester',
    )
    NAME_FIELDS = ('first_name', 'middle_name', 'last_name', 'suffix')

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.String(16), unique=True, nullable=False)
    rfid_code = db.Column(db.String(64), default=RFID_NOT_ASSIGNED, nullable=False)
    full_name = db.Column(db.String(255), nullable=True)
    first_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100), default="", nullable=True)
    last_name = db.Column(db.String(100), nullable=False)
    suffix = db.Column(db.String(20), nullable=True)
    year_level = db.Column(db.String(20), nullable=False)
    school_year = db.Column(db.String(20), nullable=False)
    program = db.Column(db.String(20), nullable=False)
    photo = db.Column(db.Text, nullable=True)
    semester = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    created_date = db.Column(db.DateTime, default=_utc_now, nullable=False)

    __table_args__ = (
        db.Index('ix_students_created_date', 'created_date'),
        db.Index('ix_students_program_year_level', 'program', 'year_level'),
    )

    def to_dict(self):
        return {
            'student_id': self.student_id,
            'rfid_code': self.rfid_code,
            'full_name': self.full_name,
            'first_name': self.first_name,
            'middle_name': self.middle_name,
            'last_name': self.last_name,
            'suffix': self.suffix,
            'year_level': self.year_level,
            'school_year': self.school_year,
            'program': self.program,
            'photo': self.photo,
            'semester': self.semester,
            'email': self.email,
            'created_date': format_utc_iso(self.created_date),
        }

    def __repr__(self):
        return f'<Student {self.student_id} {self.full_name}>'


# ---- Master (admin) Model ----
class Master(db.Model):
    __tablename__ = 'masters'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=_utc_now, nullable=False)

    def to_dict(self):
        """Public representation; the password hash is never included."""
        return {
            'id': self.id,
            'username': self.username,
            'created_at': format_utc_iso(self.created_at),
        }

    def __repr__(self):
        return f'<Master {self.username}>'


# -------------------- SETTINGS MODEL --------------------
class Settings(db.Model):
    """
    Global feature toggles for the student-facing app.

    Exactly one row exists, with id SETTINGS_SINGLETON_ID. Each toggle has a
    message shown to students while the feature is disabled.
    """
    __tablename__ = 'settings'
    id = db.Column(db.Integer, primary_key=True)

    register_enabled = db.Column(db.Boolean, default=True, nullable=False)
    register_message = db.Column(db.Text, default="", nullable=False)
    login_enabled = db.Column(db.Boolean, default=True, nullable=False)
    login_message = db.Column(db.Text, default="", nullable=False)

    updated_at = db.Column(db.DateTime, default=_utc_now, onupdate=_utc_now)

    def __repr__(self):
        return f'<Settings register={self.register_enabled} login={self.login_enabled}>'

    def to_dict(self):
        """Return settings in the nested shape the frontend consumes."""
        return {
            'userRegister': {
                'register': self.register_enabled,
                'message': self.register_message or "",
            },
            'userLogin': {
                'login': self.login_enabled,
                'message': self.login_message or "",
            },
        }

    @classmethod
    def get_defaults(cls):
        """Return default settings dictionary."""
        return {
            'userRegister': {'register': True, 'message': ""},
            'userLogin': {'login': True, 'message': ""},
        }

    @classmethod
    def new_singleton(cls):
        return cls(
            id=SETTINGS_SINGLETON_ID,
            register_enabled=True,
            register_message="",
            login_enabled=True,
            login_message="",
        )
