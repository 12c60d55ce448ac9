"""
Payment endpoints
=================

POST /api/v1/payments/intent -- create a card charge, return its client secret
POST /api/v1/payments        -- record a completed payment (201)
GET  /api/v1/payments?email= -- payment history, newest first (bearer)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.api.dependencies import (
    Principal,
    get_charge_service,
    get_db,
    get_principal,
)
from parceldesk.api.middleware import limiter
from parceldesk.api.schemas import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentRecordRequest,
    PaymentResponse,
)
from parceldesk.config import settings
from parceldesk.infrastructure.payment_gateway import StripeChargeClient
from parceldesk.services.lifecycle import LifecycleService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post(
    "/intent",
    response_model=PaymentIntentResponse,
    summary="Create a payment intent",
    responses={502: {"description": "Payment provider failed."}},
)
@limiter.limit(settings.rate_limit)
async def create_payment_intent(
    request: Request,
    body: PaymentIntentRequest,
    charges: StripeChargeClient = Depends(get_charge_service),
):
    secret = await charges.create_charge(body.amount_in_cents, settings.payment_currency)
    return PaymentIntentResponse(client_secret=secret)


@router.post(
    "",
    status_code=201,
    response_model=PaymentResponse,
    summary="Record a completed payment",
    description=(
        "Marks the parcel paid and appends a ledger row in one transaction. "
        "Replaying the same ``transaction_id`` returns the existing row."
    ),
)
@limiter.limit(settings.rate_limit)
async def record_payment(
    request: Request,
    body: PaymentRecordRequest,
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).record_payment(
        body.parcel_id, body.transaction_id, body.amount, body.user_email
    )


@router.get(
    "",
    response_model=list[PaymentResponse],
    summary="Payment history of the caller",
)
@limiter.limit(settings.rate_limit)
async def payment_history(
    request: Request,
    email: str = Query(...),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await LifecycleService(db).payment_history(principal.email, email)
