"""
Admission gates for student write endpoints.

Each gate is a view decorator that either calls through or short-circuits
with a JSON rejection, so they compose by stacking:

    @student_key_required
    @reject_automated_clients
    @registration_cooldown
    @freshness_required
    def create_student(): ...

None of these touch the database.
"""

import math
import re
import threading
import time
from functools import wraps

from flask import current_app, jsonify, request

from roster.config import (
    MIN_USER_AGENT_LENGTH,
    REGISTRATION_COOLDOWN_SECONDS,
    TIMESTAMP_MAX_AGE_MINUTES,
    TIMESTAMP_TOKEN_FIELD,
    TIMESTAMP_TOKEN_HEADER,
)
from roster.utils.helpers import json_body
from roster.utils.ip_handler import get_client_ip
from roster.utils.timestamp_codec import is_valid_timestamp

# User agents of common HTTP clients, crawlers and API tools
AUTOMATION_UA_PATTERN = re.compile(
    r'bot|crawler|spider|scraper|curl|wget|python-requests|postman|insomnia|httpie',
    re.IGNORECASE,
)

LEDGER_EXTENSION_KEY = 'registration_ledger'


# -------------------- REGISTRATION LEDGER --------------------

class RegistrationLedger:
    """
    Last registration attempt per (client, student_id) key.

    Lives for the lifetime of the process; entries older than the cooldown
    are dropped by sweep(), which the scheduler calls once per window.
    Requests and the sweep run on different threads, hence the lock.

    Counts are per process. Several workers or instances each keep their
    own ledger, so the effective cooldown is per worker.
    """

    def __init__(self, cooldown_seconds=REGISTRATION_COOLDOWN_SECONDS, clock=time.time):
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._attempts = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(client_ip, student_id):
        return f"{client_ip}:{student_id or 'unknown'}"

    def check_and_record(self, key):
        """
        Record an attempt under key unless one happened within the cooldown.

        Returns:
            int | None: seconds left in the cooldown (rounded up) when the
            attempt is refused, None when it was recorded
        """
        now = self._clock()
        with self._lock:
            last_attempt = self._attempts.get(key)
            if last_attempt is not None:
                elapsed = now - last_attempt
                if elapsed < self.cooldown_seconds:
                    return max(1, math.ceil(self.cooldown_seconds - elapsed))
            self._attempts[key] = now
        return None

    def sweep(self):
        """Drop entries older than the cooldown. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [key for key, ts in self._attempts.items() if now - ts > self.cooldown_seconds]
            for key in stale:
                del self._attempts[key]
        return len(stale)

    def clear(self):
        with self._lock:
            self._attempts.clear()

    def __len__(self):
        with self._lock:
            return len(self._attempts)

    def __contains__(self, key):
        with self._lock:
            return key in self._attempts


def get_registration_ledger(app=None):
    app = app or current_app
    return app.extensions[LEDGER_EXTENSION_KEY]


# -------------------- GATES --------------------

def _reject(status, message, **headers):
    current_app.logger.warning(
        f"Admission rejected ({status}): {request.method} {request.path} "
        f"from {get_client_ip()} - {message}"
    )
    response = jsonify(message=message)
    response.status_code = status
    for name, value in headers.items():
        response.headers[name.replace('_', '-')] = str(value)
    return response


def reject_automated_clients(f):
    """
    Decorator rejecting requests whose User-Agent looks scripted.

    A heuristic only; any client can send a browser User-Agent.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user_agent = request.headers.get('User-Agent') or ''
        if len(user_agent) < MIN_USER_AGENT_LENGTH:
            return _reject(403, "Forbidden: Invalid request source")
        if AUTOMATION_UA_PATTERN.search(user_agent):
            return _reject(403, "Forbidden: Automated requests not allowed")
        return f(*args, **kwargs)
    return decorated_function


def registration_cooldown(f):
    """
    Decorator allowing one registration attempt per client and student_id per cooldown window.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        ledger = get_registration_ledger()
        key = RegistrationLedger.make_key(get_client_ip(), json_body().get('student_id'))

        remaining = ledger.check_and_record(key)
        if remaining is not None:
            return _reject(
                429,
                f"Too many registration attempts. Please wait {remaining} seconds before trying again.",
                Retry_After=remaining,
            )
        return f(*args, **kwargs)
    return decorated_function


def get_freshness_token():
    """Find the freshness token in the body, then the query string, then the header."""
    return (
        json_body().get(TIMESTAMP_TOKEN_FIELD)
        or request.args.get(TIMESTAMP_TOKEN_FIELD)
        or request.headers.get(TIMESTAMP_TOKEN_HEADER)
    )


def freshness_required(f):
    """
    Decorator requiring a recent freshness token.

    The token field is removed from the body before the view runs so it is
    never persisted.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_freshness_token()
        if not token:
            return _reject(401, "Unauthorized: Missing timestamp")

        max_age = current_app.config.get('TIMESTAMP_MAX_AGE_MINUTES', TIMESTAMP_MAX_AGE_MINUTES)
        if not is_valid_timestamp(token, max_age_minutes=max_age):
            return _reject(401, "Unauthorized: Invalid or expired timestamp")

        json_body().pop(TIMESTAMP_TOKEN_FIELD, None)
        return f(*args, **kwargs)
    return decorated_function
