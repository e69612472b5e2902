"""
Configuration constants for the Student Roster API.

Values are read from the environment (optionally via a .env file) so the same
build can run locally, in CI, and in production. Secrets that have no safe
default are validated in roster/__init__.py instead.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


# -------------------- ADMISSION --------------------

# Shared XOR key for freshness tokens. Obfuscation only, not a secret.
TIMESTAMP_CRYPTO_KEY: str = os.getenv("TIMESTAMP_CRYPTO_KEY", "SSAAM2025CCS")

# How old a freshness token may be before it is rejected
TIMESTAMP_MAX_AGE_MINUTES: float = float(os.getenv("TIMESTAMP_MAX_AGE_MINUTES", "1"))

# Tolerated client clock drift into the future, in minutes
TIMESTAMP_FUTURE_SKEW_MINUTES: float = 0.5

# Field/header names used by the frontend to carry the freshness token
TIMESTAMP_TOKEN_FIELD = "_ssaam_access_token"
TIMESTAMP_TOKEN_HEADER = "X-SSAAM-TS"

REGISTRATION_COOLDOWN_SECONDS: int = int(os.getenv("REGISTRATION_COOLDOWN_SECONDS", "60"))

MIN_USER_AGENT_LENGTH = 10

MASTER_TOKEN_TTL_DAYS: int = int(os.getenv("MASTER_TOKEN_TTL_DAYS", "7"))
MASTER_TOKEN_ALGORITHM = "HS256"


# -------------------- STUDENT RECORDS --------------------

# Acceptable cohort years (the two leading digits of a student_id)
COHORT_YEAR_MIN: int = int(os.getenv("COHORT_YEAR_MIN", "21"))
COHORT_YEAR_MAX: int = int(os.getenv("COHORT_YEAR_MAX", "25"))

PROGRAMS = ("BSCS", "BSIS", "BSIT")
YEAR_LEVELS = ("1st year", "2nd year", "3rd year", "4th year")

RFID_NOT_ASSIGNED = "N/A"

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10

# Primary key of the one and only settings row
SETTINGS_SINGLETON_ID = 1


# -------------------- HTTP --------------------

# CORS allowed origins (comma-separated list, "*" for any)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]
