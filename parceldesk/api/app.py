"""
FastAPI application factory.

* Registers routes for parcels, payments, riders, users and admin.
* Creates tables on startup (when enabled) via lifespan events.
* Maps domain errors to JSON responses and applies rate limiting.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from parceldesk.api.errors import register_exception_handlers
from parceldesk.api.middleware import limiter
from parceldesk.api.routes import admin, parcels, payments, riders, users
from parceldesk.config import settings
from parceldesk.infrastructure.database import create_tables

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    if settings.create_tables_on_startup:
        await create_tables()
        logger.info("Database tables ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="ParcelDesk API",
        description=(
            "Parcel-delivery coordination: parcel submission, payment "
            "recording, rider applications and dispatch, delivery tracking "
            "and an admin dashboard."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Routers
    app.include_router(parcels.router, prefix="/api/v1")
    app.include_router(payments.router, prefix="/api/v1")
    app.include_router(riders.router, prefix="/api/v1")
    app.include_router(users.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
