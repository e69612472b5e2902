"""
Credential gates for the Student Roster API.

Two independently keyed bearer schemes:
- student_key_required: a static pre-shared key used by the student-facing app
- master_token_required: a signed, expiring JWT issued to admin (master) accounts
"""

import hmac
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, jsonify, request

from roster.config import MASTER_TOKEN_ALGORITHM, MASTER_TOKEN_TTL_DAYS
from roster.utils.ip_handler import get_client_ip


def get_bearer_token():
    """
    Return the credential from the Authorization header, or None.

    The value after the first space is used ("Bearer <token>").
    """
    header = request.headers.get('Authorization', '')
    parts = header.split(' ')
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


# -------------------- TOKENS --------------------

def issue_master_token(master, now=None):
    """Sign a master token valid for MASTER_TOKEN_TTL_DAYS."""
    now = now or datetime.now(timezone.utc)
    payload = {
        'id': master.id,
        'username': master.username,
        'iat': now,
        'exp': now + timedelta(days=MASTER_TOKEN_TTL_DAYS),
    }
    return jwt.encode(payload, current_app.config['MASTER_TOKEN_KEY'], algorithm=MASTER_TOKEN_ALGORITHM)


def decode_master_token(token):
    """
    Verify a master token and return its claims.

    Raises:
        jwt.InvalidTokenError: bad signature, malformed or expired token
    """
    return jwt.decode(token, current_app.config['MASTER_TOKEN_KEY'], algorithms=[MASTER_TOKEN_ALGORITHM])


# -------------------- AUTHENTICATION DECORATORS --------------------

def student_key_required(f):
    """
    Decorator to require the student API key.

    Rejects with 401 when the key is absent or does not match STUDENT_API_KEY.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_bearer_token()
        expected = current_app.config['STUDENT_API_KEY']
        if not token or not expected or not hmac.compare_digest(token.encode('utf-8'), expected.encode('utf-8')):
            current_app.logger.warning(
                f"Student key rejected: {request.method} {request.path} from {get_client_ip()}"
            )
            return jsonify(message="Unauthorized: Invalid key"), 401
        return f(*args, **kwargs)
    return decorated_function


def master_token_required(f):
    """
    Decorator to require a valid master token.

    The decoded claims are stored on g.master for the view.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_bearer_token()
        if not token:
            return jsonify(message="Access denied. No token provided."), 401

        try:
            g.master = decode_master_token(token)
        except jwt.InvalidTokenError as e:
            current_app.logger.warning(
                f"Master token rejected ({type(e).__name__}): {request.method} {request.path} from {get_client_ip()}"
            )
            return jsonify(message="Invalid token."), 401
        return f(*args, **kwargs)
    return decorated_function
