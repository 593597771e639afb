"""FastAPI application entry point."""
import logging
import os
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from stowline.core.config import settings
from stowline.core.errors import register_exception_handlers
from stowline.core.structured_logging import configure_logging
from stowline.db.session import engine

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

def _init_sentry() -> None:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        release=f"stowline-api@{settings.VERSION}",
        integrations=[FastApiIntegration(transaction_style="endpoint"), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        # Customer phone numbers and addresses must never leave the API
        send_default_pii=False,
    )
    logger.info("Sentry enabled (env=%s)", settings.ENV)


if settings.SENTRY_DSN and settings.ENV not in ("dev", "test"):
    _init_sentry()

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from stowline.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Stowline API",
    description="Storage and moving logistics API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Routers
# ============================================================================

from stowline.routers import (
    admin_appointments,
    admin_audit,
    admin_partners,
    admin_storage_units,
    appointments,
    auth,
    notifications,
    reviews,
    storage_units,
    uploads,
    users,
)

# Auth router (always mounted)
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# Customer-facing
app.include_router(appointments.router, prefix="/api/appointments", tags=["appointments"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(storage_units.router, prefix="/api/storage-units", tags=["storage-units"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["reviews"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(uploads.router, prefix="/api/uploads", tags=["uploads"])

# Admin (re-verified against the admins table on every request)
app.include_router(
    admin_appointments.router, prefix="/api/admin/appointments", tags=["admin"]
)
app.include_router(
    admin_storage_units.router, prefix="/api/admin/storage-units", tags=["admin"]
)
app.include_router(admin_partners.router, prefix="/api/admin", tags=["admin"])
app.include_router(admin_audit.router, prefix="/api/admin/audit-logs", tags=["admin"])

# Dev router and locally stored uploads (ONLY mounted in dev mode)
if settings.ENV == "dev":
    from fastapi.staticfiles import StaticFiles

    from stowline.routers import dev

    app.include_router(dev.router, prefix="/dev", tags=["dev"])
    if settings.STORAGE_BACKEND == "local":
        os.makedirs(settings.LOCAL_STORAGE_PATH, exist_ok=True)
        app.mount("/uploads", StaticFiles(directory=settings.LOCAL_STORAGE_PATH), name="uploads")


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
