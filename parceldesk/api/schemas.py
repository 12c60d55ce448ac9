"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    ParcelType,
    PaymentStatus,
    RiderStatus,
    UserRole,
    WorkStatus,
)


# ── Requests ──────────────────────────────────────────────────────────


class ParcelCreateRequest(BaseModel):
    user_email: EmailStr
    title: str = Field(..., min_length=1, max_length=200)
    parcel_type: ParcelType = ParcelType.DOCUMENT
    weight: Optional[float] = Field(None, gt=0)
    sender_name: str = Field(..., min_length=1, max_length=120)
    sender_region: str = Field(..., min_length=1, max_length=120)
    sender_center: str = Field(..., min_length=1, max_length=120)
    receiver_name: str = Field(..., min_length=1, max_length=120)
    receiver_contact: str = Field(..., min_length=1, max_length=40)
    receiver_region: str = Field(..., min_length=1, max_length=120)
    receiver_center: str = Field(..., min_length=1, max_length=120)
    cost: float = Field(..., ge=0)


class AssignRiderRequest(BaseModel):
    rider_id: uuid.UUID


class DispatchRequest(BaseModel):
    rider_id: uuid.UUID
    rider_name: str = Field(..., min_length=1, max_length=120)
    rider_email: EmailStr


class DeliveryStatusRequest(BaseModel):
    delivery_status: DeliveryStatus


class PaymentIntentRequest(BaseModel):
    amount_in_cents: int = Field(..., gt=0)


class PaymentRecordRequest(BaseModel):
    parcel_id: uuid.UUID
    transaction_id: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0)
    user_email: EmailStr


class RiderCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=40)
    region: str = Field(..., min_length=1, max_length=120)
    warehouse: str = Field(..., min_length=1, max_length=120)
    bike_brand: Optional[str] = Field(None, max_length=80)
    bike_registration: Optional[str] = Field(None, max_length=40)


class UserCreateRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=120)
    photo_url: Optional[str] = Field(None, max_length=512)


# ── Responses ─────────────────────────────────────────────────────────


class ParcelResponse(BaseModel):
    id: uuid.UUID
    user_email: str
    title: str
    parcel_type: ParcelType
    weight: Optional[float] = None
    sender_name: str
    sender_region: str
    sender_center: str
    receiver_name: str
    receiver_contact: str
    receiver_region: str
    receiver_center: str
    cost: float
    payment_status: PaymentStatus
    status: ParcelStatus
    delivery_status: DeliveryStatus
    transaction_id: Optional[str] = None
    assigned_rider_id: Optional[uuid.UUID] = None
    rider_id: Optional[uuid.UUID] = None
    rider_name: Optional[str] = None
    rider_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    id: uuid.UUID
    parcel_id: uuid.UUID
    transaction_id: str
    user_email: str
    amount: float
    payment_status: PaymentStatus
    paid_at: datetime
    paid_at_string: str

    model_config = {"from_attributes": True}


class PaymentIntentResponse(BaseModel):
    client_secret: str


class RiderResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    region: str
    warehouse: str
    bike_brand: Optional[str] = None
    bike_registration: Optional[str] = None
    status: RiderStatus
    work_status: WorkStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RiderAcceptResponse(BaseModel):
    rider: RiderResponse
    user_matched: bool
    user_role: Optional[UserRole] = None


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole
    prev_role: Optional[UserRole] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserRegisterResponse(BaseModel):
    message: str
    id: uuid.UUID


class RoleResponse(BaseModel):
    role: UserRole


class RoleToggleResponse(BaseModel):
    new_role: UserRole
    modified: bool


class ParcelSummaryResponse(BaseModel):
    total: int
    pending: int
    delivered: int
    paid: int
    total_income: float


class RiderSummaryResponse(BaseModel):
    total: int
    free: int
    accepted: int


class UserSummaryResponse(BaseModel):
    total: int
    admin: int
    rider: int
    user: int


class DashboardResponse(BaseModel):
    parcels: ParcelSummaryResponse
    riders: RiderSummaryResponse
    users: UserSummaryResponse


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
    error: str
