import contextlib
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.rate_limit import limiter, rate_limit_handler
from app.core.security import get_secret_key
from app.routes.admin import router as admin_router
from app.routes.customers import router as customers_router
from app.routes.interactions import router as interactions_router
from app.routes.products import router as products_router
from app.services.admin_service import AdminService

setup_logging(level=settings.LOG_LEVEL, structured=settings.LOG_FORMAT == "json")
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # fails fast in production without SECRET_KEY
    get_secret_key()

    db = SessionLocal()
    try:
        AdminService.bootstrap_superadmin(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("could not check bootstrap SUPERADMIN: %s", e)
    finally:
        db.close()

    yield

    logger.info("Shutting down %s...", settings.SERVICE_NAME)


app = FastAPI(
    title="Storefront Service",
    description="Storefront catalog, customer accounts and admin back-office API",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
app.include_router(customers_router, prefix="/api/clientes", tags=["clientes"])
app.include_router(products_router, prefix="/api/produtos", tags=["produtos"])
app.include_router(interactions_router, prefix="/api/interacoes", tags=["interacoes"])

Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/metrics", "/health", "/api/health"],
).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME}


@app.get("/")
async def root():
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "status": "running",
    }
