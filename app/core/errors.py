"""Error envelope shared by every endpoint.

Every failure leaves the service as

    {"success": false, "error": "<mensagem>", "code": "<CODIGO>"?, ...extra}

Services raise ``ApiError``; the handlers registered by
``register_exception_handlers`` translate it, plain ``HTTPException``s,
request validation errors, integrity violations and unexpected exceptions.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """HTTPException carrying a machine-readable code and extra envelope fields."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.extra = extra or {}


def bad_request(detail: str, code: Optional[str] = "VALIDATION_ERROR", **extra) -> ApiError:
    return ApiError(status.HTTP_400_BAD_REQUEST, detail, code, extra)


def unauthorized(detail: str, code: Optional[str] = "UNAUTHORIZED") -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        detail,
        code,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: str, code: Optional[str] = "FORBIDDEN", **extra) -> ApiError:
    return ApiError(status.HTTP_403_FORBIDDEN, detail, code, extra)


def not_found(detail: str, code: Optional[str] = "NOT_FOUND") -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, detail, code)


def conflict(detail: str, code: Optional[str] = "CONFLICT", **extra) -> ApiError:
    return ApiError(status.HTTP_409_CONFLICT, detail, code, extra)


def error_body(message: str, code: Optional[str] = None, **extra) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message}
    if code:
        body["code"] = code
    body.update(extra)
    return body


def parse_id(raw: str, entity: str = "ID") -> int:
    """Parse a path id; non-numeric or non-positive ids are a 400."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise bad_request(f"{entity} deve ser um número válido", code="INVALID_ID")
    if value <= 0:
        raise bad_request(f"{entity} deve ser um número positivo", code="INVALID_ID")
    return value


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = getattr(exc, "code", None)
    extra = getattr(exc, "extra", {}) or {}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code, **extra),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "").removeprefix("Value error, ")
        if err.get("type") == "missing":
            msg = f"Campo obrigatório: {field}"
        elif err.get("type") == "json_invalid":
            msg = "JSON inválido"
        details.append({"campo": field, "mensagem": msg})

    message = "Dados inválidos"
    if details:
        message = details[0]["mensagem"]

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message, "VALIDATION_ERROR", details=details),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # unique constraints raced past the service-level checks
    logger.warning("integrity violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("Registro duplicado ou em uso", "CONFLICT"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Erro interno do servidor", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
