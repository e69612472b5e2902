"""
Utility modules for the Student Roster API.

This package contains reusable helpers:
- helpers: Common utility functions (date formatting, request body, pagination)
- ip_handler: Proxy-aware client address resolution
- timestamp_codec: Freshness token encoding and validation
- validators: Student field validation
"""

from roster.utils.helpers import format_utc_iso, build_full_name
from roster.utils.timestamp_codec import encode_timestamp, decode_timestamp, is_valid_timestamp

__all__ = [
    'format_utc_iso',
    'build_full_name',
    'encode_timestamp',
    'decode_timestamp',
    'is_valid_timestamp',
]
