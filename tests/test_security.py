from unittest.mock import patch
from datetime import datetime, timedelta, timezone

import pytest


# ── Hashing de senha ──────────────────────────────────────────────────────

def test_hash_and_verify_password():
    from app.core.security import get_password_hash, verify_password
    hashed = get_password_hash("minha_senha_123")
    assert hashed != "minha_senha_123"
    assert verify_password("minha_senha_123", hashed)


def test_verify_wrong_password():
    from app.core.security import get_password_hash, verify_password
    hashed = get_password_hash("senha_correta")
    assert not verify_password("senha_errada", hashed)


def test_verify_empty_or_corrupt_hash():
    from app.core.security import verify_password
    assert not verify_password("qualquer", "")
    assert not verify_password("qualquer", "nao-e-um-hash")


def test_hash_generates_different_salts():
    from app.core.security import get_password_hash
    h1 = get_password_hash("mesma_senha")
    h2 = get_password_hash("mesma_senha")
    assert h1 != h2  # bcrypt gera salt diferente a cada chamada


# ── JWT ───────────────────────────────────────────────────────────────────

def test_create_and_decode_admin_token():
    from app.core.security import TOKEN_TYPE_ADMIN, create_access_token, decode_access_token, subject_id
    token = create_access_token(7, "super@loja.com", "SUPERADMIN", TOKEN_TYPE_ADMIN)
    payload = decode_access_token(token, expected_type=TOKEN_TYPE_ADMIN)
    assert subject_id(payload) == 7
    assert payload["role"] == "SUPERADMIN"
    assert payload["email"] == "super@loja.com"
    assert payload["type"] == "admin"


def test_token_lasts_seven_days():
    from app.core.security import TOKEN_TYPE_CUSTOMER, create_access_token, decode_access_token
    token = create_access_token(3, "ana@x.com", None, TOKEN_TYPE_CUSTOMER)
    payload = decode_access_token(token)
    lifetime = payload["exp"] - payload["iat"]
    assert timedelta(days=7) - timedelta(seconds=2) <= timedelta(seconds=lifetime) <= timedelta(days=7)


def test_decode_expired_token():
    from app.core.security import TOKEN_TYPE_ADMIN, TokenError, create_access_token, decode_access_token
    token = create_access_token(1, "a@b.com", "EDITOR", TOKEN_TYPE_ADMIN, expires_delta=timedelta(seconds=-1))
    with pytest.raises(TokenError) as exc:
        decode_access_token(token)
    assert exc.value.reason == TokenError.EXPIRED


def test_decode_malformed_token():
    from app.core.security import TokenError, decode_access_token
    with pytest.raises(TokenError) as exc:
        decode_access_token("token.invalido.aqui")
    assert exc.value.reason == TokenError.MALFORMED


def test_decode_token_signed_with_other_secret():
    from jose import jwt
    from app.core.security import TokenError, decode_access_token
    forged = jwt.encode({"sub": "1", "type": "admin", "role": "SUPERADMIN"}, "outro-segredo", algorithm="HS256")
    with pytest.raises(TokenError) as exc:
        decode_access_token(forged)
    assert exc.value.reason == TokenError.INVALID_SIGNATURE


def test_customer_token_rejected_where_admin_expected():
    from app.core.security import (
        TOKEN_TYPE_ADMIN,
        TOKEN_TYPE_CUSTOMER,
        TokenError,
        create_access_token,
        decode_access_token,
    )
    token = create_access_token(1, "ana@x.com", None, TOKEN_TYPE_CUSTOMER)
    with pytest.raises(TokenError) as exc:
        decode_access_token(token, expected_type=TOKEN_TYPE_ADMIN)
    assert exc.value.reason == TokenError.WRONG_TYPE


def test_subject_id_must_be_numeric():
    from app.core.security import TokenError, subject_id
    with pytest.raises(TokenError):
        subject_id({"sub": "abc"})
    with pytest.raises(TokenError):
        subject_id({})


# ── Revogação por logout ──────────────────────────────────────────────────

def test_issued_before_logout():
    from app.core.security import issued_before
    now = datetime.now(timezone.utc)
    payload = {"iat": now.timestamp()}
    assert issued_before(payload, now + timedelta(seconds=1))
    assert not issued_before(payload, now - timedelta(seconds=1))
    assert not issued_before(payload, None)


def test_issued_before_accepts_naive_utc():
    from app.core.security import issued_before
    now = datetime.now(timezone.utc)
    payload = {"iat": now.timestamp()}
    naive_later = (now + timedelta(minutes=5)).replace(tzinfo=None)
    assert issued_before(payload, naive_later)


def test_token_without_iat_counts_as_old():
    from app.core.security import issued_before
    assert issued_before({}, datetime.now(timezone.utc))


# ── Segredo de assinatura ─────────────────────────────────────────────────

@patch("app.core.security.settings")
def test_production_requires_secret_key(mock_settings):
    mock_settings.SECRET_KEY = None
    mock_settings.IS_PRODUCTION = True
    from app.core.security import get_secret_key
    with pytest.raises(RuntimeError):
        get_secret_key()


@patch("app.core.security._ephemeral_secret", None)
@patch("app.core.security.settings")
def test_development_uses_stable_ephemeral_secret(mock_settings):
    mock_settings.SECRET_KEY = None
    mock_settings.IS_PRODUCTION = False
    from app.core.security import get_secret_key
    first = get_secret_key()
    assert len(first) > 40
    assert get_secret_key() == first


@patch("app.core.security.settings")
def test_configured_secret_key_wins(mock_settings):
    mock_settings.SECRET_KEY = "segredo-configurado"
    from app.core.security import get_secret_key
    assert get_secret_key() == "segredo-configurado"


# ── Rate limiting ─────────────────────────────────────────────────────────

RATE_ENABLED = {
    "auth": {
        "rate_limit": {
            "enabled": True,
            "login_per_minute": 10,
            "register_per_hour": 50,
            "password_reset_per_hour": 5,
        }
    }
}
RATE_DISABLED = {"auth": {"rate_limit": {"enabled": False}}}


@patch("app.core.rate_limit.load_auth_config", return_value=RATE_ENABLED)
def test_rate_limits_enabled(mock_config):
    from app.core.rate_limit import get_login_rate_limit, get_password_reset_rate_limit, get_register_rate_limit
    assert get_login_rate_limit() == "10/minute"
    assert get_register_rate_limit() == "50/hour"
    assert get_password_reset_rate_limit() == "5/hour"


@patch("app.core.rate_limit.load_auth_config", return_value=RATE_DISABLED)
def test_rate_limits_disabled(mock_config):
    from app.core.rate_limit import get_login_rate_limit, get_password_reset_rate_limit, get_register_rate_limit
    assert get_login_rate_limit() == "1000/minute"
    assert get_register_rate_limit() == "1000/hour"
    assert get_password_reset_rate_limit() == "1000/hour"


@patch("app.core.rate_limit.load_auth_config", return_value={})
def test_rate_limits_defaults(mock_config):
    from app.core.rate_limit import get_login_rate_limit, get_register_rate_limit
    assert get_login_rate_limit() == "10/minute"
    assert get_register_rate_limit() == "30/hour"
