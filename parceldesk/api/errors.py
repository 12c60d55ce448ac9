"""Maps domain errors and store failures onto JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from parceldesk.domain.errors import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateTransition,
    LifecycleError,
    NotFoundError,
    UnauthenticatedError,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[LifecycleError], int] = {
    UnauthenticatedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    InvalidArgumentError: 400,
    InvalidStateTransition: 409,
    UpstreamFailure: 502,
}


def _status_for(exc: LifecycleError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


async def lifecycle_error_handler(request: Request, exc: LifecycleError) -> JSONResponse:
    status_code = _status_for(exc)
    if isinstance(exc, UpstreamFailure):
        logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
        detail = "Upstream service failed"
    else:
        detail = exc.message
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error": exc.code},
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report a failed store call as 503 ``storage_unavailable``.

    The store is our own dependency and the request can be retried once it is
    back, unlike ``upstream_failure`` (502) where a third-party call failed.
    """
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage unavailable", "error": "storage_unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LifecycleError, lifecycle_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
