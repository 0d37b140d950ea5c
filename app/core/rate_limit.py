from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from app.core.auth_config import load_auth_config
from app.core.errors import error_body

limiter = Limiter(key_func=get_remote_address)


def _rate_limit_config() -> dict:
    config = load_auth_config()
    return config.get("auth", {}).get("rate_limit", {})


def get_login_rate_limit():
    rate_limit_config = _rate_limit_config()
    enabled = rate_limit_config.get("enabled", True)
    if enabled:
        per_minute = rate_limit_config.get("login_per_minute", 10)
        return f"{per_minute}/minute"
    return "1000/minute"


def get_register_rate_limit():
    rate_limit_config = _rate_limit_config()
    enabled = rate_limit_config.get("enabled", True)
    if enabled:
        per_hour = rate_limit_config.get("register_per_hour", 30)
        return f"{per_hour}/hour"
    return "1000/hour"


def get_password_reset_rate_limit():
    rate_limit_config = _rate_limit_config()
    enabled = rate_limit_config.get("enabled", True)
    if enabled:
        per_hour = rate_limit_config.get("password_reset_per_hour", 10)
        return f"{per_hour}/hour"
    return "1000/hour"


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = JSONResponse(
        error_body("Muitas tentativas. Tente novamente mais tarde.", "RATE_LIMITED"),
        status_code=429,
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
