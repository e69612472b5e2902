"""Freshness token encoding and window checks."""

import base64
from datetime import datetime, timedelta, timezone

import pytest

from roster.config import TIMESTAMP_CRYPTO_KEY
from roster.utils.timestamp_codec import (
    _xor_with_key,
    decode_timestamp,
    encode_timestamp,
    format_timestamp,
    is_valid_timestamp,
    parse_timestamp,
)


NOW = datetime(2025, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc)


def test_format_uses_millisecond_utc_text():
    assert format_timestamp(NOW) == "2025-03-14T09:26:53.589Z"


def test_format_treats_naive_as_utc():
    naive = datetime(2025, 3, 14, 9, 26, 53, 589999)
    assert format_timestamp(naive) == "2025-03-14T09:26:53.589Z"


@pytest.mark.parametrize("instant", [
    NOW,
    datetime(2021, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
    datetime(2099, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc),
])
def test_decode_returns_encoded_text(instant):
    assert decode_timestamp(encode_timestamp(instant)) == format_timestamp(instant)


def test_token_is_not_plain_base64_of_text():
    token = encode_timestamp(NOW)
    assert base64.b64decode(token) != format_timestamp(NOW).encode()


def test_different_key_does_not_decode():
    token = encode_timestamp(NOW, key="another-key")
    assert decode_timestamp(token) != format_timestamp(NOW)
    assert decode_timestamp(token, key="another-key") == format_timestamp(NOW)


def test_parse_timestamp_round_trip():
    assert parse_timestamp(format_timestamp(NOW)) == NOW


def test_token_for_now_is_valid():
    assert is_valid_timestamp(encode_timestamp(NOW), now=NOW)
    assert is_valid_timestamp(encode_timestamp())


def test_two_minutes_old_is_invalid():
    token = encode_timestamp(NOW - timedelta(minutes=2))
    assert not is_valid_timestamp(token, max_age_minutes=1, now=NOW)


def test_one_minute_old_is_still_valid():
    token = encode_timestamp(NOW - timedelta(minutes=1))
    assert is_valid_timestamp(token, max_age_minutes=1, now=NOW)


def test_small_future_skew_is_tolerated():
    token = encode_timestamp(NOW + timedelta(seconds=10))
    assert is_valid_timestamp(token, now=NOW)


def test_one_minute_in_future_is_invalid():
    token = encode_timestamp(NOW + timedelta(minutes=1))
    assert not is_valid_timestamp(token, now=NOW)


def test_wider_window_accepts_older_tokens():
    token = encode_timestamp(NOW - timedelta(minutes=4))
    assert is_valid_timestamp(token, max_age_minutes=5, now=NOW)


@pytest.mark.parametrize("token", [
    None,
    "",
    12345,
    "not base64 !!",
    "====",
    base64.b64encode(b"hello world").decode(),
    base64.b64encode("2025-13-45T99:99:99.000Z".encode()).decode(),
])
def test_malformed_tokens_are_invalid(token):
    assert is_valid_timestamp(token, now=NOW) is False


def _token_for_text(text):
    return base64.b64encode(_xor_with_key(text, TIMESTAMP_CRYPTO_KEY).encode('latin-1')).decode('ascii')


@pytest.mark.parametrize("text", [
    "0001-01-01T00:00:00+01:00",
    "9999-12-31T23:59:59-01:00",
])
def test_out_of_range_instants_are_invalid(text):
    assert decode_timestamp(_token_for_text(text)) == text
    assert parse_timestamp(text) is None
    assert is_valid_timestamp(_token_for_text(text), now=NOW) is False
