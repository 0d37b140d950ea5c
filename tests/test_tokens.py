import re
from datetime import datetime, timedelta, timezone

from app.core.tokens import (
    generate_confirmation_token,
    generate_reset_code,
    get_token_expiration,
    is_token_expired,
)


def test_confirmation_token_is_64_hex_chars():
    token = generate_confirmation_token()
    assert re.fullmatch(r"[0-9a-f]{64}", token)
    assert generate_confirmation_token() != token


def test_reset_code_has_six_digits():
    for _ in range(200):
        code = generate_reset_code()
        assert re.fullmatch(r"[1-9]\d{5}", code)


def test_expiration_window():
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert get_token_expiration(24, now=now) == now + timedelta(hours=24)
    assert get_token_expiration(1, now=now) == datetime(2026, 1, 1, 13, 0, tzinfo=timezone.utc)


class TestIsTokenExpired:

    def test_future_expiration_is_valid(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert is_token_expired(now + timedelta(minutes=1), now=now) is False

    def test_past_expiration_is_expired(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert is_token_expired(now - timedelta(seconds=1), now=now) is True

    def test_naive_expiration_is_utc(self):
        now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert is_token_expired(datetime(2026, 1, 1, 11, 59), now=now) is True
        assert is_token_expired(datetime(2026, 1, 1, 12, 1), now=now) is False

    def test_missing_expiration(self):
        assert is_token_expired(None) is False
