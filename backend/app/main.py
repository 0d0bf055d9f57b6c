from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import DirectoryError, directory_error_handler
from app.core.logging_config import (
    setup_logging,
    CorrelationIdMiddleware,
    log_audit_event,
)
from app.api.endpoints import auth, browse, categories, feedback, services, submissions
from app import models  # noqa: F401  (registers tables on Base.metadata)
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging

# Configure structured JSON logging
audit_logger = setup_logging()
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if settings.ENABLE_HSTS and settings.is_production:
            hsts_value = f"max-age={settings.HSTS_MAX_AGE}"
            if settings.HSTS_INCLUDE_SUBDOMAINS:
                hsts_value += "; includeSubDomains"
            response.headers["Strict-Transport-Security"] = hsts_value

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting campus directory...")

    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set; admin login is disabled")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down campus directory...")


def register_handlers(app: FastAPI) -> None:
    """Error and rate-limit handlers shared by the real and test apps."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(DirectoryError, directory_error_handler)


def include_routers(app: FastAPI) -> None:
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(services.router, prefix="/api/services", tags=["services"])
    app.include_router(browse.router, prefix="/api/browse", tags=["browse"])
    app.include_router(submissions.router, prefix="/api/submissions", tags=["submissions"])
    app.include_router(feedback.router, prefix="/api/feedback", tags=["feedback"])


app = FastAPI(
    title="Campus Directory",
    description="Campus resource directory with a two-level category hierarchy",
    version="1.0.0",
    lifespan=lifespan,
)

# Add correlation ID middleware (first, so all logs have correlation IDs)
app.add_middleware(CorrelationIdMiddleware)

register_handlers(app)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(SecurityHeadersMiddleware)

log_audit_event(
    event_type="app.startup",
    message=f"Campus directory starting (production={settings.is_production})",
    event_category="system",
    production=settings.is_production,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

include_routers(app)


@app.get("/")
def root():
    return {
        "name": "Campus Directory",
        "version": "1.0.0",
        "description": "Campus resource directory",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
