import logging
from typing import Callable, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import forbidden, unauthorized
from app.core.permissions import check_level
from app.core.security import (
    TOKEN_TYPE_ADMIN,
    TOKEN_TYPE_CUSTOMER,
    TokenError,
    decode_access_token,
    issued_before,
    subject_id,
)
from app.models.admin import Admin, AccessLevel, AccountStatus
from app.models.customer import Customer

logger = logging.getLogger(__name__)


def get_bearer_token(request: Request) -> str:
    """Extract the token from `Authorization: Bearer <token>`."""
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise unauthorized("Token de autorização necessário", code="TOKEN_MISSING")

    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise unauthorized("Token de autorização necessário", code="TOKEN_MISSING")
    return token


def _decode_or_401(token: str, expected_type: str) -> dict:
    try:
        return decode_access_token(token, expected_type=expected_type)
    except TokenError as e:
        code = "TOKEN_EXPIRED" if e.reason == TokenError.EXPIRED else "TOKEN_INVALID"
        logger.info("rejected %s token: %s", expected_type, e.reason)
        raise unauthorized(e.message, code=code)


async def get_current_admin(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> Admin:
    """Authenticate an admin: verify the token, then re-read the admin row."""
    payload = _decode_or_401(token, TOKEN_TYPE_ADMIN)
    try:
        admin_id = subject_id(payload)
    except TokenError as e:
        raise unauthorized(e.message, code="TOKEN_INVALID")

    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if admin is None:
        raise unauthorized("Administrador não encontrado", code="ADMIN_NOT_FOUND")

    if issued_before(payload, admin.last_logout):
        raise unauthorized("Sessão encerrada. Faça login novamente.", code="TOKEN_REVOKED")

    if admin.status != AccountStatus.ACTIVE:
        raise forbidden(
            f"Conta de administrador não está ativa (Status: {admin.status.value})",
            code="ACCOUNT_INACTIVE",
        )

    return admin


def require_level(level: AccessLevel) -> Callable:
    """Dependency factory: authenticated admin ranking at least `level`."""

    async def _require_level(admin: Admin = Depends(get_current_admin)) -> Admin:
        if not check_level(admin.access_level, level):
            raise forbidden("Acesso negado - Nível insuficiente", code="INSUFFICIENT_LEVEL")
        return admin

    return _require_level


async def get_current_customer(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> Customer:
    payload = _decode_or_401(token, TOKEN_TYPE_CUSTOMER)
    try:
        customer_id = subject_id(payload)
    except TokenError as e:
        raise unauthorized(e.message, code="TOKEN_INVALID")

    customer: Optional[Customer] = db.query(Customer).filter(Customer.id == customer_id).first()
    if customer is None:
        raise unauthorized("Cliente não encontrado", code="CUSTOMER_NOT_FOUND")
    return customer
