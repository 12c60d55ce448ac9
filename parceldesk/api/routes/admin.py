"""
Admin / observability endpoints
===============================

GET /api/v1/admin/dashboard -- parcel, rider and user counts
GET /api/v1/admin/health    -- simple health check
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.api.dependencies import get_db
from parceldesk.api.middleware import limiter
from parceldesk.api.schemas import DashboardResponse, HealthResponse
from parceldesk.config import settings
from parceldesk.services.dashboard import DashboardService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Point-in-time summary statistics",
)
@limiter.limit(settings.rate_limit)
async def dashboard(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).summary()


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
