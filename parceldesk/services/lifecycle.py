"""
Lifecycle Service
=================

Every change to a parcel, rider, payment or user role goes through this
class.  Each operation:

1. loads the entities it needs (``NotFoundError`` if an id does not resolve),
2. asks the entity to perform the transition (``InvalidStateTransition`` if
   the state machine forbids it),
3. writes the result back through the repositories.

Atomicity
---------
The service never commits.  All writes of one operation share the caller's
``AsyncSession``, so the parcel update and ledger insert of
``record_payment`` (and the rider + user writes of ``accept_rider``) commit or
roll back together when the request's unit of work ends.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.domain.entities import Parcel, Payment, Rider, User
from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    ParcelType,
    PaymentStatus,
    RiderStatus,
    RoleTrigger,
    UserRole,
)
from parceldesk.domain.errors import InvalidArgumentError, NotFoundError
from parceldesk.domain.validation import ensure_principal, normalize_email
from parceldesk.infrastructure.repositories import (
    ParcelRepository,
    PaymentRepository,
    RiderRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class AcceptedRider:
    rider: Rider
    user_matched: bool
    user_role: Optional[UserRole] = None


@dataclass
class RoleChange:
    user: User
    new_role: UserRole
    modified: bool


class LifecycleService:
    def __init__(self, session: AsyncSession):
        self.parcels = ParcelRepository(session)
        self.payments = PaymentRepository(session)
        self.riders = RiderRepository(session)
        self.users = UserRepository(session)

    # ── Parcels ───────────────────────────────────────────────────────

    async def submit_parcel(self, owner_email: str, details: dict) -> Parcel:
        parcel = Parcel(**details)
        parcel.parcel_type = ParcelType(parcel.parcel_type)
        parcel.user_email = normalize_email(owner_email, "user_email")
        parcel.payment_status = PaymentStatus.UNPAID
        parcel.status = ParcelStatus.PENDING
        parcel.delivery_status = DeliveryStatus.NONE
        created = await self.parcels.create(parcel)
        logger.info("Parcel %s submitted by %s", created.id, created.user_email)
        return created

    async def get_parcel(self, parcel_id: uuid.UUID) -> Parcel:
        parcel = await self.parcels.get_by_id(parcel_id)
        if parcel is None:
            raise NotFoundError("Parcel", parcel_id)
        return parcel

    async def delete_parcel(self, parcel_id: uuid.UUID) -> None:
        if not await self.parcels.delete(parcel_id):
            raise NotFoundError("Parcel", parcel_id)
        logger.info("Parcel %s deleted", parcel_id)

    async def list_owner_parcels(
        self, principal_email: str, owner_email: str
    ) -> list[Parcel]:
        owner = ensure_principal(principal_email, owner_email)
        return await self.parcels.list_by_owner(owner)

    async def list_parcels(
        self,
        payment_status: PaymentStatus | None = None,
        status: ParcelStatus | None = None,
        delivery_status: DeliveryStatus | None = None,
    ) -> list[Parcel]:
        return await self.parcels.list_filtered(payment_status, status, delivery_status)

    async def list_rider_parcels(
        self,
        rider_email: str,
        delivery_statuses: list[DeliveryStatus] | None = None,
    ) -> list[Parcel]:
        email = normalize_email(rider_email, "rider_email")
        return await self.parcels.list_for_rider(email, delivery_statuses)

    async def assign_rider(self, parcel_id: uuid.UUID, rider_id: uuid.UUID) -> Parcel:
        parcel = await self.get_parcel(parcel_id)
        parcel.assign_rider(rider_id)
        saved = await self.parcels.save(parcel)
        logger.info("Parcel %s assigned to rider %s", parcel_id, rider_id)
        return saved

    async def dispatch_to_rider(
        self,
        parcel_id: uuid.UUID,
        rider_id: uuid.UUID,
        rider_name: str,
        rider_email: str,
    ) -> Parcel:
        parcel = await self.get_parcel(parcel_id)
        parcel.dispatch(rider_id, rider_name, normalize_email(rider_email, "rider_email"))
        saved = await self.parcels.save(parcel)
        logger.info("Parcel %s dispatched to rider %s", parcel_id, rider_id)
        return saved

    async def advance_delivery(
        self, parcel_id: uuid.UUID, new_status: DeliveryStatus
    ) -> Parcel:
        parcel = await self.get_parcel(parcel_id)
        previous = parcel.delivery_status
        parcel.advance_delivery(new_status)
        saved = await self.parcels.save(parcel)
        logger.info(
            "Parcel %s delivery %s -> %s", parcel_id, previous.value, new_status.value
        )
        return saved

    # ── Payments ──────────────────────────────────────────────────────

    async def record_payment(
        self,
        parcel_id: uuid.UUID,
        transaction_id: str,
        amount: float,
        payer_email: str,
    ) -> Payment:
        if not transaction_id or not transaction_id.strip():
            raise InvalidArgumentError("transaction_id is required")
        transaction_id = transaction_id.strip()
        payer = normalize_email(payer_email, "user_email")

        existing = await self.payments.get_by_transaction_id(transaction_id)
        if existing is not None:
            if existing.parcel_id != parcel_id:
                raise InvalidArgumentError(
                    f"Transaction {transaction_id} was recorded for another parcel"
                )
            logger.info("Payment %s replayed; returning ledger row", transaction_id)
            return existing

        parcel = await self.get_parcel(parcel_id)
        parcel.mark_paid(transaction_id)
        await self.parcels.save(parcel)

        now = datetime.now(timezone.utc)
        payment = await self.payments.create(
            Payment(
                parcel_id=parcel_id,
                transaction_id=transaction_id,
                user_email=payer,
                amount=amount,
                payment_status=PaymentStatus.PAID,
                paid_at=now,
                paid_at_string=now.isoformat(),
            )
        )
        logger.info("Parcel %s paid (transaction %s)", parcel_id, transaction_id)
        return payment

    async def payment_history(
        self, principal_email: str, owner_email: str
    ) -> list[Payment]:
        owner = ensure_principal(principal_email, owner_email)
        return await self.payments.list_by_owner(owner)

    # ── Riders ────────────────────────────────────────────────────────

    async def register_rider(self, details: dict) -> Rider:
        rider = Rider(**details)
        rider.email = normalize_email(rider.email)
        rider.status = RiderStatus.PENDING
        created = await self.riders.create(rider)
        logger.info("Rider application %s received from %s", created.id, created.email)
        return created

    async def get_rider(self, rider_id: uuid.UUID) -> Rider:
        rider = await self.riders.get_by_id(rider_id)
        if rider is None:
            raise NotFoundError("Rider", rider_id)
        return rider

    async def list_riders(self, status: RiderStatus) -> list[Rider]:
        return await self.riders.list_by_status(status)

    async def find_riders(
        self, region: str | None = None, warehouse: str | None = None
    ) -> list[Rider]:
        return await self.riders.list_by_location(region, warehouse)

    async def accept_rider(self, rider_id: uuid.UUID) -> AcceptedRider:
        rider = await self.get_rider(rider_id)
        rider.accept()

        user = await self.users.get_by_email(rider.email)
        rider = await self.riders.save(rider)
        if user is None:
            logger.warning("Rider %s accepted but no user has email %s", rider_id, rider.email)
            return AcceptedRider(rider=rider, user_matched=False)

        user.apply_role_trigger(RoleTrigger.RIDER_PROMOTION)
        user = await self.users.save(user)
        logger.info("Rider %s accepted; user %s role is %s", rider_id, user.email, user.role.value)
        return AcceptedRider(rider=rider, user_matched=True, user_role=user.role)

    async def delete_rider(self, rider_id: uuid.UUID) -> None:
        if not await self.riders.delete(rider_id):
            raise NotFoundError("Rider", rider_id)
        logger.info("Rider %s deleted", rider_id)

    # ── Users ─────────────────────────────────────────────────────────

    async def register_user(
        self, email: str, name: str | None = None, photo_url: str | None = None
    ) -> tuple[User, bool]:
        """Return ``(user, created)``; an existing email is returned unchanged."""
        email = normalize_email(email)
        existing = await self.users.get_by_email(email)
        if existing is not None:
            return existing, False
        user = await self.users.create(
            User(email=email, name=name, photo_url=photo_url, role=UserRole.USER)
        )
        logger.info("User %s registered", email)
        return user, True

    async def list_users(self) -> list[User]:
        return await self.users.list_all()

    async def get_role(self, email: str) -> UserRole:
        user = await self.users.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("User", email)
        return user.role

    async def toggle_admin_role(self, user_id: uuid.UUID) -> RoleChange:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        before = user.role
        new_role = user.apply_role_trigger(RoleTrigger.ADMIN_TOGGLE)
        user = await self.users.save(user)
        logger.info("User %s role %s -> %s", user.email, before.value, new_role.value)
        return RoleChange(user=user, new_role=new_role, modified=before != new_role)
