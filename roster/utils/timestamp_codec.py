"""
Freshness tokens for mutating requests.

The frontend sends the current UTC time, XOR-ed against a shared key and
base64-encoded, with every write request. The server decodes it and only
accepts requests whose embedded time is recent.

This is request-freshness hinting, not authentication: the key ships with the
frontend, tokens are not bound to a request or identity, and a captured token
can be replayed until it ages out of the window. Authentication is handled by
the credential gates in roster.auth.
"""

import base64
import binascii
from datetime import datetime, timezone

from roster.config import (
    TIMESTAMP_CRYPTO_KEY,
    TIMESTAMP_FUTURE_SKEW_MINUTES,
    TIMESTAMP_MAX_AGE_MINUTES,
)


def format_timestamp(instant):
    """Return the fixed UTC text form, e.g. 2025-01-31T08:15:02.123Z."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    instant = instant.astimezone(timezone.utc)
    millis = instant.microsecond // 1000
    return instant.strftime('%Y-%m-%dT%H:%M:%S.') + f'{millis:03d}Z'


def _xor_with_key(text, key):
    return ''.join(
        chr(ord(ch) ^ ord(key[i % len(key)]))
        for i, ch in enumerate(text)
    )


def encode_timestamp(instant=None, key=TIMESTAMP_CRYPTO_KEY):
    """
    Encode an instant as an opaque freshness token.

    Args:
        instant: datetime to encode, defaults to now (UTC)
        key: shared XOR key, cycled over the text

    Returns:
        str: base64 token safe for headers, query strings and JSON bodies
    """
    if instant is None:
        instant = datetime.now(timezone.utc)
    obfuscated = _xor_with_key(format_timestamp(instant), key)
    return base64.b64encode(obfuscated.encode('latin-1')).decode('ascii')


def decode_timestamp(token, key=TIMESTAMP_CRYPTO_KEY):
    """
    Decode a freshness token back to its timestamp text.

    Returns None for anything that is not a well-formed token; tokens come
    straight from clients, so this never raises.
    """
    if not isinstance(token, str) or not token:
        return None
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError):
        return None
    return _xor_with_key(raw.decode('latin-1'), key)


def parse_timestamp(text):
    """Parse decoded timestamp text into an aware UTC datetime, or None."""
    if not text:
        return None
    value = text.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Offsets near datetime.min/max push the UTC value out of range
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def is_valid_timestamp(token, max_age_minutes=TIMESTAMP_MAX_AGE_MINUTES, now=None, key=TIMESTAMP_CRYPTO_KEY):
    """
    Check that a freshness token encodes a recent instant.

    Valid when the token's age lies in [-0.5, max_age_minutes] minutes:
    up to 30 seconds of client clock drift into the future is tolerated.
    """
    instant = parse_timestamp(decode_timestamp(token, key=key))
    if instant is None:
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    try:
        age_minutes = (now - instant).total_seconds() / 60
    except OverflowError:
        return False
    return -TIMESTAMP_FUTURE_SKEW_MINUTES <= age_minutes <= max_age_minutes
