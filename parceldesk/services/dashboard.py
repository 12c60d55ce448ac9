"""
Dashboard aggregation.

Read-only.  Each summary is one grouped aggregate query over a single table;
``COALESCE`` keeps empty tables at zero instead of NULL.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    PaymentStatus,
    RiderStatus,
    UserRole,
    WorkStatus,
)
from parceldesk.infrastructure.models import ParcelModel, RiderModel, UserModel


@dataclass
class ParcelSummary:
    total: int = 0
    pending: int = 0
    delivered: int = 0
    paid: int = 0
    total_income: float = 0.0


@dataclass
class RiderSummary:
    total: int = 0
    free: int = 0
    accepted: int = 0


@dataclass
class UserSummary:
    total: int = 0
    admin: int = 0
    rider: int = 0
    user: int = 0


@dataclass
class DashboardSummary:
    parcels: ParcelSummary = field(default_factory=ParcelSummary)
    riders: RiderSummary = field(default_factory=RiderSummary)
    users: UserSummary = field(default_factory=UserSummary)


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def parcel_summary(self) -> ParcelSummary:
        paid = ParcelModel.payment_status == PaymentStatus.PAID
        result = await self.session.execute(
            select(
                func.count(ParcelModel.id),
                _count_where(ParcelModel.status == ParcelStatus.PENDING),
                _count_where(ParcelModel.delivery_status == DeliveryStatus.DELIVERED),
                _count_where(paid),
                func.coalesce(func.sum(case((paid, ParcelModel.cost), else_=0.0)), 0.0),
            )
        )
        total, pending, delivered, paid_count, income = result.one()
        return ParcelSummary(
            total=int(total or 0),
            pending=int(pending or 0),
            delivered=int(delivered or 0),
            paid=int(paid_count or 0),
            total_income=float(income or 0.0),
        )

    async def rider_summary(self) -> RiderSummary:
        result = await self.session.execute(
            select(
                func.count(RiderModel.id),
                _count_where(RiderModel.work_status == WorkStatus.FREE),
                _count_where(RiderModel.status == RiderStatus.ACCEPTED),
            )
        )
        total, free, accepted = result.one()
        return RiderSummary(
            total=int(total or 0), free=int(free or 0), accepted=int(accepted or 0)
        )

    async def user_summary(self) -> UserSummary:
        result = await self.session.execute(
            select(UserModel.role, func.count(UserModel.id)).group_by(UserModel.role)
        )
        counts = {role: int(n) for role, n in result.all()}
        return UserSummary(
            total=sum(counts.values()),
            admin=counts.get(UserRole.ADMIN, 0),
            rider=counts.get(UserRole.RIDER, 0),
            user=counts.get(UserRole.USER, 0),
        )

    async def summary(self) -> DashboardSummary:
        return DashboardSummary(
            parcels=await self.parcel_summary(),
            riders=await self.rider_summary(),
            users=await self.user_summary(),
        )
