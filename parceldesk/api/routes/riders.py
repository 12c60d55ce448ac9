"""
Rider endpoints
===============

POST   /api/v1/riders                      -- apply as a rider (201, status pending)
GET    /api/v1/riders                      -- pending applications
GET    /api/v1/riders/accepted             -- accepted riders
GET    /api/v1/riders/available?region=&warehouse=
GET    /api/v1/riders/{rider_id}
PATCH  /api/v1/riders/{rider_id}/accept    -- accept, promote the linked user
DELETE /api/v1/riders/{rider_id}
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.api.dependencies import get_db
from parceldesk.api.middleware import limiter
from parceldesk.api.schemas import (
    MessageResponse,
    RiderAcceptResponse,
    RiderCreateRequest,
    RiderResponse,
)
from parceldesk.config import settings
from parceldesk.domain.enums import RiderStatus
from parceldesk.domain.validation import parse_id
from parceldesk.services.lifecycle import LifecycleService

router = APIRouter(prefix="/riders", tags=["riders"])


@router.post(
    "",
    status_code=201,
    response_model=RiderResponse,
    summary="Submit a rider application",
)
@limiter.limit(settings.rate_limit)
async def create_rider(
    request: Request,
    body: RiderCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).register_rider(body.model_dump())


@router.get(
    "",
    response_model=list[RiderResponse],
    summary="List pending rider applications",
)
@limiter.limit(settings.rate_limit)
async def pending_riders(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_riders(RiderStatus.PENDING)


@router.get(
    "/accepted",
    response_model=list[RiderResponse],
    summary="List accepted riders",
)
@limiter.limit(settings.rate_limit)
async def accepted_riders(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_riders(RiderStatus.ACCEPTED)


@router.get(
    "/available",
    response_model=list[RiderResponse],
    summary="List riders by region and warehouse",
)
@limiter.limit(settings.rate_limit)
async def riders_by_location(
    request: Request,
    region: Optional[str] = None,
    warehouse: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).find_riders(region, warehouse)


@router.get(
    "/{rider_id}",
    response_model=RiderResponse,
    summary="Get a rider",
)
@limiter.limit(settings.rate_limit)
async def get_rider(
    request: Request,
    rider_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).get_rider(parse_id(rider_id, "rider id"))


@router.patch(
    "/{rider_id}/accept",
    response_model=RiderAcceptResponse,
    summary="Accept a rider application",
    description=(
        "Sets the rider to ``accepted`` and promotes the user with the same "
        "e-mail to the ``rider`` role (an admin keeps admin and will demote "
        "to rider)."
    ),
)
@limiter.limit(settings.rate_limit)
async def accept_rider(
    request: Request,
    rider_id: str,
    db: AsyncSession = Depends(get_db),
):
    result = await LifecycleService(db).accept_rider(parse_id(rider_id, "rider id"))
    return RiderAcceptResponse(
        rider=RiderResponse.model_validate(result.rider),
        user_matched=result.user_matched,
        user_role=result.user_role,
    )


@router.delete(
    "/{rider_id}",
    response_model=MessageResponse,
    summary="Delete a rider",
)
@limiter.limit(settings.rate_limit)
async def delete_rider(
    request: Request,
    rider_id: str,
    db: AsyncSession = Depends(get_db),
):
    await LifecycleService(db).delete_rider(parse_id(rider_id, "rider id"))
    return MessageResponse(message="Rider deleted successfully")
