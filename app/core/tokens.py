"""One-time tokens for email confirmation and password reset."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_confirmation_token() -> str:
    return secrets.token_hex(32)


def generate_reset_code() -> str:
    # 6 dígitos, 100000..999999
    return str(100000 + secrets.randbelow(900000))


def get_token_expiration(hours: float, now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(hours=hours)


def is_token_expired(expiration: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if expiration is None:
        return False
    if expiration.tzinfo is None:
        # SQLite hands back naive datetimes; they were stored as UTC
        expiration = expiration.replace(tzinfo=timezone.utc)
    return (now or utcnow()) > expiration
