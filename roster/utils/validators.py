"""
Field validation for student records.
"""

import re
import unicodedata

from roster.config import COHORT_YEAR_MIN, COHORT_YEAR_MAX

# Two-digit cohort year, section letter, five-digit serial: 21-A-12345
STUDENT_ID_REGEX = re.compile(r'^[0-9]{2}-[A-Z]-[0-9]{5}$')

# Besides Unicode letters, names may contain whitespace, apostrophes and hyphens
NAME_PUNCTUATION = "'-"


def is_valid_student_id_format(student_id):
    return isinstance(student_id, str) and bool(STUDENT_ID_REGEX.fullmatch(student_id))


def cohort_year(student_id):
    """Return the enrollment cohort encoded in a well-formed student_id."""
    return int(student_id[:2])


def is_cohort_in_range(student_id, minimum=COHORT_YEAR_MIN, maximum=COHORT_YEAR_MAX):
    return minimum <= cohort_year(student_id) <= maximum


def _is_name_char(ch):
    # Letter categories only (Lu, Ll, Lt, Lm, Lo); numerals like '²' or 'Ⅻ' are not letters
    return ch.isspace() or ch in NAME_PUNCTUATION or unicodedata.category(ch).startswith('L')


def is_valid_name(value):
    return isinstance(value, str) and bool(value) and all(_is_name_char(ch) for ch in value)


def student_id_error(student_id):
    """
    Return the rejection message for a student_id, or None when it is acceptable.
    """
    if not is_valid_student_id_format(student_id):
        return "Invalid student_id format. Use 21-A-12345"
    if not is_cohort_in_range(student_id):
        return (
            f"Student ID must start with {COHORT_YEAR_MIN} to {COHORT_YEAR_MAX} "
            f"(e.g., {COHORT_YEAR_MIN}-A-12345 to {COHORT_YEAR_MAX}-A-12345)"
        )
    return None
