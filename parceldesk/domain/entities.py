"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Parcel``: payment (UNPAID -> PAID) and delivery
  (NONE -> RIDER_ASSIGN -> PICKED_UP -> IN_TRANSIT -> DELIVERED) only move
  forward.
- ``Rider.accept`` guards the PENDING -> ACCEPTED application flow.
- ``User.apply_role_trigger`` is the single writer of ``User.role``; both the
  admin toggle and the rider promotion go through it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import (
    DELIVERY_TRANSITIONS,
    DISPATCHABLE_STATES,
    PAYMENT_TRANSITIONS,
    RIDER_TRANSITIONS,
    ROLE_TRANSITIONS,
    DeliveryStatus,
    ParcelStatus,
    ParcelType,
    PaymentStatus,
    RiderStatus,
    RoleTrigger,
    UserRole,
    WorkStatus,
)
from .errors import InvalidStateTransition


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Parcel:
    id: Optional[uuid.UUID] = None
    user_email: str = ""
    title: str = ""
    parcel_type: ParcelType = ParcelType.DOCUMENT
    weight: Optional[float] = None
    sender_name: str = ""
    sender_region: str = ""
    sender_center: str = ""
    receiver_name: str = ""
    receiver_contact: str = ""
    receiver_region: str = ""
    receiver_center: str = ""
    cost: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    status: ParcelStatus = ParcelStatus.PENDING
    delivery_status: DeliveryStatus = DeliveryStatus.NONE
    transaction_id: Optional[str] = None
    assigned_rider_id: Optional[uuid.UUID] = None
    rider_id: Optional[uuid.UUID] = None
    rider_name: Optional[str] = None
    rider_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def mark_paid(self, transaction_id: str) -> None:
        allowed = PAYMENT_TRANSITIONS.get(self.payment_status, set())
        if PaymentStatus.PAID not in allowed:
            raise InvalidStateTransition(f"Parcel {self.id} is already paid")
        self.payment_status = PaymentStatus.PAID
        self.transaction_id = transaction_id

    def assign_rider(self, rider_id: uuid.UUID) -> None:
        """Coarse assignment; re-assigning an assigned parcel is allowed."""
        self.assigned_rider_id = rider_id
        self.status = ParcelStatus.ASSIGNED

    def dispatch(
        self, rider_id: uuid.UUID, rider_name: str, rider_email: str
    ) -> None:
        if self.delivery_status not in DISPATCHABLE_STATES:
            raise InvalidStateTransition(
                f"Cannot dispatch parcel in delivery status {self.delivery_status.value}"
            )
        self.rider_id = rider_id
        self.rider_name = rider_name
        self.rider_email = rider_email
        self.delivery_status = DeliveryStatus.RIDER_ASSIGN

    def advance_delivery(self, new_status: DeliveryStatus) -> None:
        """Move to *new_status* if it lies ahead of the current stage, else raise."""
        if new_status == DeliveryStatus.RIDER_ASSIGN:
            raise InvalidStateTransition("Use dispatch to hand a parcel to a rider")
        allowed = DELIVERY_TRANSITIONS.get(self.delivery_status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.delivery_status.value} "
                f"to {new_status.value}"
            )
        self.delivery_status = new_status


@dataclass
class Payment:
    id: Optional[uuid.UUID] = None
    parcel_id: Optional[uuid.UUID] = None
    transaction_id: str = ""
    user_email: str = ""
    amount: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PAID
    paid_at: Optional[datetime] = None
    paid_at_string: str = ""


@dataclass
class Rider:
    id: Optional[uuid.UUID] = None
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    region: str = ""
    warehouse: str = ""
    bike_brand: Optional[str] = None
    bike_registration: Optional[str] = None
    status: RiderStatus = RiderStatus.PENDING
    work_status: WorkStatus = WorkStatus.FREE
    created_at: Optional[datetime] = None

    def accept(self) -> None:
        allowed = RIDER_TRANSITIONS.get(self.status, set())
        if RiderStatus.ACCEPTED not in allowed:
            raise InvalidStateTransition(f"Rider {self.id} is already accepted")
        self.status = RiderStatus.ACCEPTED


@dataclass
class User:
    id: Optional[uuid.UUID] = None
    email: str = ""
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole = UserRole.USER
    prev_role: Optional[UserRole] = None
    created_at: Optional[datetime] = None

    def apply_role_trigger(self, trigger: RoleTrigger) -> UserRole:
        """Apply *trigger* to the role and return the resulting role.

        Keeps ``prev_role`` set exactly while the user is an admin.
        """
        if trigger == RoleTrigger.ADMIN_TOGGLE and self.role == UserRole.ADMIN:
            restored = self.prev_role
            if restored in (None, UserRole.ADMIN):
                restored = UserRole.USER
            self.role = restored
            self.prev_role = None
            return self.role

        target = ROLE_TRANSITIONS[trigger].get(self.role)
        if target is None:
            raise InvalidStateTransition(
                f"No {trigger.value} transition from role {self.role.value}"
            )
        if target == UserRole.ADMIN and self.role != UserRole.ADMIN:
            self.prev_role = self.role
        elif trigger == RoleTrigger.RIDER_PROMOTION and self.role == UserRole.ADMIN:
            # Demotion will now land on rider.
            self.prev_role = UserRole.RIDER
        self.role = target
        return self.role
