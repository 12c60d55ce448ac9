"""
Lifecycle service tests against an in-memory SQLite database.

Covers the operations that touch more than one row and the
typed-error contract (NotFound / InvalidStateTransition / Forbidden).
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    ParcelType,
    PaymentStatus,
    RiderStatus,
    UserRole,
)
from parceldesk.domain.errors import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateTransition,
    NotFoundError,
)
from parceldesk.infrastructure.models import PaymentModel, RiderModel, UserModel
from tests.conftest import parcel_details, rider_details


async def _submit(service, owner="a@x.com", **overrides):
    details = parcel_details(parcel_type=ParcelType.NON_DOCUMENT, **overrides)
    return await service.submit_parcel(owner, details)


async def _count(session, model, *where) -> int:
    result = await session.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar() or 0


class TestSubmitAndPay:
    @pytest.mark.asyncio
    async def test_submit_starts_unpaid_pending(self, service):
        parcel = await _submit(service, owner=" A@X.com ")
        assert parcel.id is not None
        assert parcel.user_email == "a@x.com"
        assert parcel.payment_status == PaymentStatus.UNPAID
        assert parcel.status == ParcelStatus.PENDING
        assert parcel.delivery_status == DeliveryStatus.NONE

    @pytest.mark.asyncio
    async def test_submit_rejects_bad_owner(self, service):
        with pytest.raises(InvalidArgumentError):
            await _submit(service, owner="nobody")

    @pytest.mark.asyncio
    async def test_record_payment_marks_paid_and_appends_ledger(
        self, service, db_session
    ):
        parcel = await _submit(service, cost=100.0)
        payment = await service.record_payment(parcel.id, "tx1", 100.0, "a@x.com")

        stored = await service.get_parcel(parcel.id)
        assert stored.payment_status == PaymentStatus.PAID
        assert stored.transaction_id == "tx1"

        rows = await service.payments.list_for_parcel(parcel.id)
        assert len(rows) == 1
        assert rows[0].amount == 100.0
        assert rows[0].parcel_id == parcel.id
        assert payment.paid_at_string

    @pytest.mark.asyncio
    async def test_record_payment_unknown_parcel(self, service, db_session):
        with pytest.raises(NotFoundError):
            await service.record_payment(uuid.uuid4(), "tx1", 10.0, "a@x.com")
        assert await _count(db_session, PaymentModel) == 0

    @pytest.mark.asyncio
    async def test_second_payment_rejected(self, service, db_session):
        parcel = await _submit(service)
        await service.record_payment(parcel.id, "tx1", 100.0, "a@x.com")
        with pytest.raises(InvalidStateTransition):
            await service.record_payment(parcel.id, "tx2", 100.0, "a@x.com")

        stored = await service.get_parcel(parcel.id)
        assert stored.payment_status == PaymentStatus.PAID
        assert stored.transaction_id == "tx1"
        assert await _count(db_session, PaymentModel) == 1

    @pytest.mark.asyncio
    async def test_replayed_transaction_returns_same_row(self, service, db_session):
        parcel = await _submit(service)
        first = await service.record_payment(parcel.id, "tx1", 100.0, "a@x.com")
        again = await service.record_payment(parcel.id, "tx1", 100.0, "a@x.com")
        assert again.id == first.id
        assert await _count(db_session, PaymentModel) == 1

    @pytest.mark.asyncio
    async def test_transaction_reused_for_other_parcel(self, service):
        one = await _submit(service)
        two = await _submit(service)
        await service.record_payment(one.id, "tx1", 100.0, "a@x.com")
        with pytest.raises(InvalidArgumentError):
            await service.record_payment(two.id, "tx1", 100.0, "a@x.com")

    @pytest.mark.asyncio
    async def test_payment_history_is_principal_checked(self, service):
        parcel = await _submit(service)
        await service.record_payment(parcel.id, "tx1", 100.0, "a@x.com")

        history = await service.payment_history("a@x.com", "a@x.com")
        assert [p.transaction_id for p in history] == ["tx1"]
        with pytest.raises(ForbiddenError):
            await service.payment_history("b@x.com", "a@x.com")


class TestDelivery:
    @pytest.mark.asyncio
    async def test_full_delivery_flow(self, service):
        parcel = await _submit(service)
        rider_id = uuid.uuid4()

        assigned = await service.assign_rider(parcel.id, rider_id)
        assert assigned.status == ParcelStatus.ASSIGNED
        assert assigned.assigned_rider_id == rider_id

        dispatched = await service.dispatch_to_rider(
            parcel.id, rider_id, "R1", "R1@example.com"
        )
        assert dispatched.delivery_status == DeliveryStatus.RIDER_ASSIGN
        assert dispatched.rider_email == "r1@example.com"

        for status in (
            DeliveryStatus.PICKED_UP,
            DeliveryStatus.IN_TRANSIT,
            DeliveryStatus.DELIVERED,
        ):
            parcel = await service.advance_delivery(parcel.id, status)
            assert parcel.delivery_status == status

    @pytest.mark.asyncio
    async def test_regression_rejected_and_state_kept(self, service):
        parcel = await _submit(service)
        await service.dispatch_to_rider(parcel.id, uuid.uuid4(), "R1", "r1@example.com")
        await service.advance_delivery(parcel.id, DeliveryStatus.IN_TRANSIT)

        with pytest.raises(InvalidStateTransition):
            await service.advance_delivery(parcel.id, DeliveryStatus.PICKED_UP)
        stored = await service.get_parcel(parcel.id)
        assert stored.delivery_status == DeliveryStatus.IN_TRANSIT

    @pytest.mark.asyncio
    async def test_missing_parcel_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.assign_rider(uuid.uuid4(), uuid.uuid4())
        with pytest.raises(NotFoundError):
            await service.advance_delivery(uuid.uuid4(), DeliveryStatus.DELIVERED)

    @pytest.mark.asyncio
    async def test_rider_parcel_list(self, service):
        mine = await _submit(service, title="Mine")
        other = await _submit(service, title="Other")
        await service.dispatch_to_rider(mine.id, uuid.uuid4(), "R1", "r1@example.com")
        await service.dispatch_to_rider(other.id, uuid.uuid4(), "R2", "r2@example.com")
        await service.advance_delivery(mine.id, DeliveryStatus.DELIVERED)

        all_mine = await service.list_rider_parcels("r1@example.com")
        assert [p.title for p in all_mine] == ["Mine"]
        open_only = await service.list_rider_parcels(
            "r1@example.com", [DeliveryStatus.RIDER_ASSIGN, DeliveryStatus.PICKED_UP]
        )
        assert open_only == []

    @pytest.mark.asyncio
    async def test_delete_parcel(self, service):
        parcel = await _submit(service)
        await service.delete_parcel(parcel.id)
        with pytest.raises(NotFoundError):
            await service.get_parcel(parcel.id)
        with pytest.raises(NotFoundError):
            await service.delete_parcel(parcel.id)


class TestRiders:
    @pytest.mark.asyncio
    async def test_accept_rider_promotes_user(self, service):
        user, _ = await service.register_user("r1@example.com", name="R1")
        rider = await service.register_rider(rider_details())
        assert rider.status == RiderStatus.PENDING

        result = await service.accept_rider(rider.id)
        assert result.rider.status == RiderStatus.ACCEPTED
        assert result.user_matched is True
        assert result.user_role == UserRole.RIDER
        assert await service.get_role("r1@example.com") == UserRole.RIDER

    @pytest.mark.asyncio
    async def test_accept_rider_admin_keeps_admin(self, service):
        user, _ = await service.register_user("r1@example.com")
        await service.toggle_admin_role(user.id)
        rider = await service.register_rider(rider_details())

        result = await service.accept_rider(rider.id)
        assert result.user_role == UserRole.ADMIN
        change = await service.toggle_admin_role(user.id)
        assert change.new_role == UserRole.RIDER

    @pytest.mark.asyncio
    async def test_accept_rider_without_user(self, service):
        rider = await service.register_rider(rider_details())
        result = await service.accept_rider(rider.id)
        assert result.rider.status == RiderStatus.ACCEPTED
        assert result.user_matched is False
        assert result.user_role is None

    @pytest.mark.asyncio
    async def test_accept_unknown_rider_writes_nothing(self, service, db_session):
        await service.register_user("r1@example.com")
        with pytest.raises(NotFoundError):
            await service.accept_rider(uuid.uuid4())
        assert await _count(db_session, UserModel, UserModel.role == UserRole.RIDER) == 0
        assert await _count(db_session, RiderModel) == 0

    @pytest.mark.asyncio
    async def test_accept_twice_rejected(self, service):
        rider = await service.register_rider(rider_details())
        await service.accept_rider(rider.id)
        with pytest.raises(InvalidStateTransition):
            await service.accept_rider(rider.id)

    @pytest.mark.asyncio
    async def test_lists_by_status_and_location(self, service):
        r1 = await service.register_rider(rider_details(name="R1"))
        r2 = await service.register_rider(
            rider_details(name="R2", email="r2@example.com", warehouse="Uttara")
        )
        await service.accept_rider(r2.id)

        assert [r.name for r in await service.list_riders(RiderStatus.PENDING)] == ["R1"]
        assert [r.name for r in await service.list_riders(RiderStatus.ACCEPTED)] == ["R2"]
        found = await service.find_riders(region="Dhaka", warehouse="Mirpur")
        assert [r.id for r in found] == [r1.id]
        assert len(await service.find_riders()) == 2

    @pytest.mark.asyncio
    async def test_delete_rider(self, service):
        rider = await service.register_rider(rider_details())
        await service.delete_rider(rider.id)
        with pytest.raises(NotFoundError):
            await service.get_rider(rider.id)
        with pytest.raises(NotFoundError):
            await service.delete_rider(rider.id)


class TestUsers:
    @pytest.mark.asyncio
    async def test_register_is_idempotent_on_email(self, service):
        first, created = await service.register_user("A@x.com", name="A")
        again, created_again = await service.register_user("a@x.com", name="Other")
        assert created is True
        assert created_again is False
        assert again.id == first.id
        assert again.name == "A"
        assert first.role == UserRole.USER

    @pytest.mark.asyncio
    async def test_toggle_admin_role_twice(self, service):
        user, _ = await service.register_user("a@x.com")

        change = await service.toggle_admin_role(user.id)
        assert change.new_role == UserRole.ADMIN
        assert change.user.prev_role == UserRole.USER

        change = await service.toggle_admin_role(user.id)
        assert change.new_role == UserRole.USER
        assert change.user.prev_role is None
        assert change.modified is True

    @pytest.mark.asyncio
    async def test_toggle_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            await service.toggle_admin_role(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_get_role_unknown_email(self, service):
        with pytest.raises(NotFoundError):
            await service.get_role("ghost@example.com")
