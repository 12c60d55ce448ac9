"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work), hands out
domain entities, and writes them back with ``save``.  Nothing here decides
whether a state change is legal; that belongs to the entities.
"""

from __future__ import annotations

import dataclasses
import uuid
from typing import Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ParcelModel, PaymentModel, RiderModel, UserModel
from parceldesk.domain.entities import Parcel, Payment, Rider, User
from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    PaymentStatus,
    RiderStatus,
)

E = TypeVar("E")

# Columns a lifecycle operation may rewrite on an existing row.
_PARCEL_MUTABLE = (
    "payment_status",
    "transaction_id",
    "status",
    "assigned_rider_id",
    "delivery_status",
    "rider_id",
    "rider_name",
    "rider_email",
)
_RIDER_MUTABLE = ("status", "work_status")
_USER_MUTABLE = ("role", "prev_role")


def _to_entity(entity_cls: type[E], row) -> E:
    return entity_cls(
        **{f.name: getattr(row, f.name) for f in dataclasses.fields(entity_cls)}
    )


def _new_row(model_cls, entity) -> object:
    values = dataclasses.asdict(entity)
    # Let column defaults fill id / timestamps.
    return model_cls(**{k: v for k, v in values.items() if v is not None})


class ParcelRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, parcel: Parcel) -> Parcel:
        row = _new_row(ParcelModel, parcel)
        self.session.add(row)
        await self.session.flush()
        return _to_entity(Parcel, row)

    async def get_by_id(self, parcel_id: uuid.UUID) -> Optional[Parcel]:
        row = await self.session.get(ParcelModel, parcel_id)
        return _to_entity(Parcel, row) if row else None

    async def save(self, parcel: Parcel) -> Parcel:
        row = await self.session.get(ParcelModel, parcel.id)
        for name in _PARCEL_MUTABLE:
            setattr(row, name, getattr(parcel, name))
        await self.session.flush()
        return _to_entity(Parcel, row)

    async def delete(self, parcel_id: uuid.UUID) -> bool:
        row = await self.session.get(ParcelModel, parcel_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def list_by_owner(self, email: str) -> list[Parcel]:
        result = await self.session.execute(
            select(ParcelModel)
            .where(ParcelModel.user_email == email)
            .order_by(ParcelModel.created_at.desc())
        )
        return [_to_entity(Parcel, r) for r in result.scalars().all()]

    async def list_filtered(
        self,
        payment_status: PaymentStatus | None = None,
        status: ParcelStatus | None = None,
        delivery_status: DeliveryStatus | None = None,
    ) -> list[Parcel]:
        query = select(ParcelModel).order_by(ParcelModel.created_at)
        if payment_status:
            query = query.where(ParcelModel.payment_status == payment_status)
        if status:
            query = query.where(ParcelModel.status == status)
        if delivery_status:
            query = query.where(ParcelModel.delivery_status == delivery_status)
        result = await self.session.execute(query)
        return [_to_entity(Parcel, r) for r in result.scalars().all()]

    async def list_for_rider(
        self,
        rider_email: str,
        delivery_statuses: list[DeliveryStatus] | None = None,
    ) -> list[Parcel]:
        query = (
            select(ParcelModel)
            .where(ParcelModel.rider_email == rider_email)
            .order_by(ParcelModel.updated_at.desc())
        )
        if delivery_statuses:
            query = query.where(ParcelModel.delivery_status.in_(delivery_statuses))
        result = await self.session.execute(query)
        return [_to_entity(Parcel, r) for r in result.scalars().all()]


class PaymentRepository:
    """Append-only: there is no update or delete."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        row = _new_row(PaymentModel, payment)
        self.session.add(row)
        await self.session.flush()
        return _to_entity(Payment, row)

    async def get_by_transaction_id(self, transaction_id: str) -> Optional[Payment]:
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.transaction_id == transaction_id)
        )
        row = result.scalar_one_or_none()
        return _to_entity(Payment, row) if row else None

    async def list_by_owner(self, email: str) -> list[Payment]:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.user_email == email)
            .order_by(PaymentModel.paid_at.desc())
        )
        return [_to_entity(Payment, r) for r in result.scalars().all()]

    async def list_for_parcel(self, parcel_id: uuid.UUID) -> list[Payment]:
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.parcel_id == parcel_id)
        )
        return [_to_entity(Payment, r) for r in result.scalars().all()]


class RiderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, rider: Rider) -> Rider:
        row = _new_row(RiderModel, rider)
        self.session.add(row)
        await self.session.flush()
        return _to_entity(Rider, row)

    async def get_by_id(self, rider_id: uuid.UUID) -> Optional[Rider]:
        row = await self.session.get(RiderModel, rider_id)
        return _to_entity(Rider, row) if row else None

    async def save(self, rider: Rider) -> Rider:
        row = await self.session.get(RiderModel, rider.id)
        for name in _RIDER_MUTABLE:
            setattr(row, name, getattr(rider, name))
        await self.session.flush()
        return _to_entity(Rider, row)

    async def delete(self, rider_id: uuid.UUID) -> bool:
        row = await self.session.get(RiderModel, rider_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def list_by_status(self, status: RiderStatus) -> list[Rider]:
        result = await self.session.execute(
            select(RiderModel)
            .where(RiderModel.status == status)
            .order_by(RiderModel.created_at)
        )
        return [_to_entity(Rider, r) for r in result.scalars().all()]

    async def list_by_location(
        self, region: str | None = None, warehouse: str | None = None
    ) -> list[Rider]:
        query = select(RiderModel).order_by(RiderModel.created_at)
        if region:
            query = query.where(RiderModel.region == region)
        if warehouse:
            query = query.where(RiderModel.warehouse == warehouse)
        result = await self.session.execute(query)
        return [_to_entity(Rider, r) for r in result.scalars().all()]


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        row = _new_row(UserModel, user)
        self.session.add(row)
        await self.session.flush()
        return _to_entity(User, row)

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        row = await self.session.get(UserModel, user_id)
        return _to_entity(User, row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        row = result.scalar_one_or_none()
        return _to_entity(User, row) if row else None

    async def save(self, user: User) -> User:
        row = await self.session.get(UserModel, user.id)
        for name in _USER_MUTABLE:
            setattr(row, name, getattr(user, name))
        await self.session.flush()
        return _to_entity(User, row)

    async def list_all(self) -> list[User]:
        result = await self.session.execute(
            select(UserModel).order_by(UserModel.created_at)
        )
        return [_to_entity(User, r) for r in result.scalars().all()]
