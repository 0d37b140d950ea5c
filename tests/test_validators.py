from decimal import Decimal

import pytest

from app.core.validators import (
    format_price,
    normalize_email,
    normalize_interaction_type,
    validate_name,
    validate_password,
)


# ── Email ─────────────────────────────────────────────────────────────────

def test_email_is_trimmed_and_lowercased():
    assert normalize_email("  Ana@X.COM ") == "ana@x.com"


@pytest.mark.parametrize("value", ["", "ana", "ana@x", "ana @x.com", "@x.com"])
def test_invalid_emails(value):
    with pytest.raises(ValueError):
        normalize_email(value)


# ── Senha e nome ──────────────────────────────────────────────────────────

def test_password_minimum_length():
    assert validate_password("123456") == "123456"
    with pytest.raises(ValueError, match="pelo menos 6"):
        validate_password("12345")


def test_password_bcrypt_byte_limit():
    with pytest.raises(ValueError):
        validate_password("ç" * 40)  # 80 bytes


def test_custom_password_label():
    with pytest.raises(ValueError, match="^Nova senha"):
        validate_password("123", label="Nova senha")


def test_name_is_trimmed():
    assert validate_name("  Ana Silva ") == "Ana Silva"
    with pytest.raises(ValueError):
        validate_name(" Al ")
    assert validate_name("Al", min_length=2) == "Al"


# ── Interações e preço ────────────────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("Comentário", "COMENTARIO"),
    ("avaliação", "AVALIACAO"),
    (" curtida ", "CURTIDA"),
    ("VISUALIZAÇÃO", "VISUALIZACAO"),
    (None, ""),
])
def test_normalize_interaction_type(raw, expected):
    assert normalize_interaction_type(raw) == expected


def test_format_price():
    assert format_price(Decimal("149.90")) == "R$ 149,90"
    assert format_price(1234.5) == "R$ 1.234,50"
    assert format_price(1000000) == "R$ 1.000.000,00"
