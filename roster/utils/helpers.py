"""
Common utility functions for the Student Roster API.

This module provides reusable helper functions for:
- Date/time formatting (ISO-8601 with UTC)
- Reading the (possibly gate-modified) JSON body of a request
- Parsing pagination query parameters
- Building derived student names
"""

import re
from datetime import timezone

from flask import g, request

from roster.config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT

_WHITESPACE_RUN = re.compile(r'\s+')


def format_utc_iso(dt):
    """Return a UTC ISO-8601 string (with trailing Z) for a datetime or None."""
    if not dt:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def json_body():
    """
    Return the request's JSON object body, shared across gates and the view.

    Gates may remove fields (the freshness token) before the handler runs, so
    every consumer reads the body through here rather than request.get_json().
    Non-object bodies are treated as empty.
    """
    if 'json_body' not in g:
        data = request.get_json(silent=True)
        g.json_body = data if isinstance(data, dict) else {}
    return g.json_body


def parse_positive_int(value, default):
    """Parse a query parameter as a positive int, falling back to default."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


def pagination_args():
    """Return (page, limit) from the query string."""
    page = parse_positive_int(request.args.get('page'), DEFAULT_PAGE)
    limit = parse_positive_int(request.args.get('limit'), DEFAULT_PAGE_LIMIT)
    return page, limit


def build_full_name(first_name, middle_name=None, last_name=None, suffix=None):
    """
    Join name parts with single spaces.

    Examples:
        ("Ana", "", "Cruz", None) -> "Ana Cruz"
        ("Juan", "Dela", "Cruz", "Jr.") -> "Juan Dela Cruz Jr."
    """
    parts = [first_name or "", middle_name or "", last_name or "", suffix or ""]
    return _WHITESPACE_RUN.sub(" ", " ".join(parts)).strip()
