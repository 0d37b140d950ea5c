import re
import unicodedata
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72
MIN_NAME_LENGTH = 3


def normalize_email(value: str) -> str:
    """Trim, lower-case and check the email format."""
    email = (value or "").strip().lower()
    if not email:
        raise ValueError("Email é obrigatório")
    if not EMAIL_REGEX.match(email):
        raise ValueError("Formato de email inválido")
    return email


def validate_password(value: str, label: str = "A senha") -> str:
    if value is None or len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"{label} deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"{label} deve ter no máximo {MAX_PASSWORD_BYTES} bytes")
    return value


def validate_name(value: str, min_length: int = MIN_NAME_LENGTH) -> str:
    name = (value or "").strip()
    if len(name) < min_length:
        raise ValueError(f"O nome deve ter pelo menos {min_length} caracteres")
    return name


def strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_interaction_type(value: Optional[str]) -> str:
    """'Comentário' -> 'COMENTARIO'."""
    return strip_accents((value or "").strip()).upper()


def format_price(price: Decimal | float | int) -> str:
    """Brazilian currency format, e.g. 'R$ 1.234,50'."""
    amount = Decimal(str(price)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    grouped = f"{amount:,.2f}"
    return "R$ " + grouped.replace(",", "_").replace(".", ",").replace("_", ".")
