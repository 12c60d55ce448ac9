"""
Parcel endpoints
================

POST   /api/v1/parcels                       -- submit a parcel (201)
GET    /api/v1/parcels/mine?email=           -- the caller's parcels (bearer)
GET    /api/v1/parcels                       -- filter by payment / coarse / delivery status
GET    /api/v1/parcels/rider?email=          -- parcels dispatched to a rider
GET    /api/v1/parcels/{parcel_id}           -- one parcel
DELETE /api/v1/parcels/{parcel_id}           -- delete a parcel
PATCH  /api/v1/parcels/{parcel_id}/assign    -- coarse rider assignment
PATCH  /api/v1/parcels/{parcel_id}/dispatch  -- hand to a rider (snapshot)
PATCH  /api/v1/parcels/{parcel_id}/pickup | /in-transit | /deliver
PATCH  /api/v1/parcels/{parcel_id}/delivery-status
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.api.dependencies import Principal, get_db, get_principal
from parceldesk.api.middleware import limiter
from parceldesk.api.schemas import (
    AssignRiderRequest,
    DeliveryStatusRequest,
    DispatchRequest,
    MessageResponse,
    ParcelCreateRequest,
    ParcelResponse,
)
from parceldesk.config import settings
from parceldesk.domain.enums import DeliveryStatus, ParcelStatus, PaymentStatus
from parceldesk.domain.validation import parse_id
from parceldesk.services.lifecycle import LifecycleService

router = APIRouter(prefix="/parcels", tags=["parcels"])


@router.post(
    "",
    status_code=201,
    response_model=ParcelResponse,
    summary="Submit a parcel",
)
@limiter.limit(settings.rate_limit)
async def submit_parcel(
    request: Request,
    body: ParcelCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    details = body.model_dump(exclude={"user_email"})
    return await LifecycleService(db).submit_parcel(body.user_email, details)


@router.get(
    "/mine",
    response_model=list[ParcelResponse],
    summary="List the caller's own parcels",
)
@limiter.limit(settings.rate_limit)
async def my_parcels(
    request: Request,
    email: str = Query(...),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_owner_parcels(principal.email, email)


@router.get(
    "",
    response_model=list[ParcelResponse],
    summary="List parcels by status filters",
    description=(
        "All filters are optional and combined with AND.  ``status`` is the "
        "coarse assignment state; ``delivery_status`` is the rider pipeline."
    ),
)
@limiter.limit(settings.rate_limit)
async def list_parcels(
    request: Request,
    payment_status: Optional[PaymentStatus] = None,
    status: Optional[ParcelStatus] = None,
    delivery_status: Optional[DeliveryStatus] = None,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_parcels(payment_status, status, delivery_status)


@router.get(
    "/rider",
    response_model=list[ParcelResponse],
    summary="List parcels dispatched to a rider",
)
@limiter.limit(settings.rate_limit)
async def rider_parcels(
    request: Request,
    email: str = Query(...),
    delivery_status: Optional[list[DeliveryStatus]] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).list_rider_parcels(email, delivery_status)


@router.get(
    "/{parcel_id}",
    response_model=ParcelResponse,
    summary="Get a parcel",
)
@limiter.limit(settings.rate_limit)
async def get_parcel(
    request: Request,
    parcel_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).get_parcel(parse_id(parcel_id, "parcel id"))


@router.delete(
    "/{parcel_id}",
    response_model=MessageResponse,
    summary="Delete a parcel",
)
@limiter.limit(settings.rate_limit)
async def delete_parcel(
    request: Request,
    parcel_id: str,
    db: AsyncSession = Depends(get_db),
):
    await LifecycleService(db).delete_parcel(parse_id(parcel_id, "parcel id"))
    return MessageResponse(message="Parcel deleted successfully")


@router.patch(
    "/{parcel_id}/assign",
    response_model=ParcelResponse,
    summary="Assign a rider to a parcel",
)
@limiter.limit(settings.rate_limit)
async def assign_rider(
    request: Request,
    parcel_id: str,
    body: AssignRiderRequest,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).assign_rider(
        parse_id(parcel_id, "parcel id"), body.rider_id
    )


@router.patch(
    "/{parcel_id}/dispatch",
    response_model=ParcelResponse,
    summary="Dispatch a parcel to a rider",
    description=(
        "Records the rider snapshot and moves delivery to ``rider_assign``. "
        "Allowed until the parcel has been picked up."
    ),
)
@limiter.limit(settings.rate_limit)
async def dispatch_parcel(
    request: Request,
    parcel_id: str,
    body: DispatchRequest,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).dispatch_to_rider(
        parse_id(parcel_id, "parcel id"),
        body.rider_id,
        body.rider_name,
        body.rider_email,
    )


async def _advance(db: AsyncSession, parcel_id: str, status: DeliveryStatus):
    return await LifecycleService(db).advance_delivery(
        parse_id(parcel_id, "parcel id"), status
    )


@router.patch(
    "/{parcel_id}/pickup",
    response_model=ParcelResponse,
    summary="Mark a parcel as picked up",
)
@limiter.limit(settings.rate_limit)
async def pickup_parcel(
    request: Request,
    parcel_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await _advance(db, parcel_id, DeliveryStatus.PICKED_UP)


@router.patch(
    "/{parcel_id}/in-transit",
    response_model=ParcelResponse,
    summary="Mark a parcel as in transit",
)
@limiter.limit(settings.rate_limit)
async def parcel_in_transit(
    request: Request,
    parcel_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await _advance(db, parcel_id, DeliveryStatus.IN_TRANSIT)


@router.patch(
    "/{parcel_id}/deliver",
    response_model=ParcelResponse,
    summary="Mark a parcel as delivered",
)
@limiter.limit(settings.rate_limit)
async def deliver_parcel(
    request: Request,
    parcel_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await _advance(db, parcel_id, DeliveryStatus.DELIVERED)


@router.patch(
    "/{parcel_id}/delivery-status",
    response_model=ParcelResponse,
    summary="Advance delivery to an explicit status",
    responses={409: {"description": "Status is not ahead of the current one."}},
)
@limiter.limit(settings.rate_limit)
async def update_delivery_status(
    request: Request,
    parcel_id: str,
    body: DeliveryStatusRequest,
    db: AsyncSession = Depends(get_db),
):
    return await _advance(db, parcel_id, body.delivery_status)
