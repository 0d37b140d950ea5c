from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
import bcrypt
import logging
import secrets
from app.core.config import settings
from app.core.auth_config import get_auth_setting

logger = logging.getLogger(__name__)

TOKEN_TYPE_ADMIN = "admin"
TOKEN_TYPE_CUSTOMER = "customer"

_ephemeral_secret: Optional[str] = None


class TokenError(Exception):
    """Raised when a bearer token cannot be accepted."""

    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    WRONG_TYPE = "wrong_type"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


def get_secret_key() -> str:
    """Signing secret from SECRET_KEY.

    Production refuses to run without it. Elsewhere a random per-process secret
    is used, so tokens do not survive a restart.
    """
    global _ephemeral_secret
    if settings.SECRET_KEY:
        return settings.SECRET_KEY
    if settings.IS_PRODUCTION:
        raise RuntimeError("SECRET_KEY must be set in production")
    if _ephemeral_secret is None:
        _ephemeral_secret = secrets.token_urlsafe(48)
        logger.warning("SECRET_KEY not set, using an ephemeral signing secret for this process")
    return _ephemeral_secret


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify plain password against bcrypt hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Generate bcrypt hash for password."""
    salt = bcrypt.gensalt(rounds=get_auth_setting("bcrypt_rounds", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def create_access_token(
    subject_id: int,
    email: str,
    role: Optional[str],
    token_type: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT identifying an admin or a customer."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=get_auth_setting("access_token_expire_days", 7))

    to_encode: Dict[str, Any] = {
        "sub": str(subject_id),
        "email": email,
        "role": role,
        "type": token_type,
        "iat": now.timestamp(),
        "exp": int((now + expires_delta).timestamp()),
    }
    algorithm = get_auth_setting("algorithm", "HS256")
    return jwt.encode(to_encode, get_secret_key(), algorithm=algorithm)


def decode_access_token(token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """Decode and validate a JWT, raising TokenError with the failure kind."""
    try:
        jwt.get_unverified_claims(token)
    except JWTError:
        raise TokenError(TokenError.MALFORMED, "Token malformado")

    algorithm = get_auth_setting("algorithm", "HS256")
    try:
        payload = jwt.decode(token, get_secret_key(), algorithms=[algorithm])
    except ExpiredSignatureError:
        raise TokenError(TokenError.EXPIRED, "Token expirado")
    except JWTError:
        raise TokenError(TokenError.INVALID_SIGNATURE, "Token inválido")

    if expected_type is not None and payload.get("type") != expected_type:
        raise TokenError(TokenError.WRONG_TYPE, "Token inválido")

    return payload


def subject_id(payload: Dict[str, Any]) -> int:
    """Numeric identity carried in `sub`."""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise TokenError(TokenError.MALFORMED, "Token malformado")


def issued_before(payload: Dict[str, Any], moment: Optional[datetime]) -> bool:
    """True when the token was issued before `moment`."""
    if moment is None:
        return False
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    issued_at = payload.get("iat")
    if issued_at is None:
        return True
    return float(issued_at) < moment.timestamp()
