"""
SQLAlchemy ORM models.

Tables
------
* ``users``     -- accounts and their role (``prev_role`` while admin)
* ``parcels``   -- shipment requests with payment / delivery state
* ``payments``  -- append-only payment ledger
* ``riders``    -- rider applications and accepted riders

References between tables (``parcels.assigned_rider_id``,
``payments.parcel_id``) are deliberately not foreign keys: each table's rows
are created and deleted independently.

Indexes
-------
* **B-Tree** on the status columns, owner e-mail and rider e-mail used by the
  list endpoints, and on ``payments.transaction_id`` (unique) for replay
  detection.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    String,
    Uuid,
)

from .database import Base
from parceldesk.domain.enums import (
    DeliveryStatus,
    ParcelStatus,
    ParcelType,
    PaymentStatus,
    RiderStatus,
    UserRole,
    WorkStatus,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum(enum_cls):
    """Store enum *values* as plain strings (no native DB enum types)."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(120), nullable=True)
    photo_url = Column(String(512), nullable=True)
    role = Column(_enum(UserRole), default=UserRole.USER, nullable=False)
    prev_role = Column(_enum(UserRole), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("idx_users_role", "role"),)


class ParcelModel(Base):
    __tablename__ = "parcels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_email = Column(String(255), nullable=False)

    # Shipment details
    title = Column(String(200), nullable=False)
    parcel_type = Column(_enum(ParcelType), default=ParcelType.DOCUMENT, nullable=False)
    weight = Column(Float, nullable=True)
    sender_name = Column(String(120), nullable=False)
    sender_region = Column(String(120), nullable=False)
    sender_center = Column(String(120), nullable=False)
    receiver_name = Column(String(120), nullable=False)
    receiver_contact = Column(String(40), nullable=False)
    receiver_region = Column(String(120), nullable=False)
    receiver_center = Column(String(120), nullable=False)
    cost = Column(Float, nullable=False, default=0.0)

    # Lifecycle
    payment_status = Column(
        _enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False
    )
    status = Column(_enum(ParcelStatus), default=ParcelStatus.PENDING, nullable=False)
    delivery_status = Column(
        _enum(DeliveryStatus), default=DeliveryStatus.NONE, nullable=False
    )
    transaction_id = Column(String(255), nullable=True)
    assigned_rider_id = Column(Uuid, nullable=True)

    # Rider snapshot taken at dispatch
    rider_id = Column(Uuid, nullable=True)
    rider_name = Column(String(120), nullable=True)
    rider_email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("idx_parcels_owner", "user_email"),
        Index("idx_parcels_payment_status", "payment_status"),
        Index("idx_parcels_status", "status"),
        Index("idx_parcels_delivery_status", "delivery_status"),
        Index("idx_parcels_rider_email", "rider_email"),
    )


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    parcel_id = Column(Uuid, nullable=False)
    transaction_id = Column(String(255), unique=True, nullable=False)
    user_email = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    payment_status = Column(
        _enum(PaymentStatus), default=PaymentStatus.PAID, nullable=False
    )
    paid_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    paid_at_string = Column(String(40), nullable=False)

    __table_args__ = (
        Index("idx_payments_user_paid_at", "user_email", "paid_at"),
        Index("idx_payments_parcel", "parcel_id"),
    )


class RiderModel(Base):
    __tablename__ = "riders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(40), nullable=True)
    region = Column(String(120), nullable=False)
    warehouse = Column(String(120), nullable=False)
    bike_brand = Column(String(80), nullable=True)
    bike_registration = Column(String(40), nullable=True)
    status = Column(_enum(RiderStatus), default=RiderStatus.PENDING, nullable=False)
    work_status = Column(_enum(WorkStatus), default=WorkStatus.FREE, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("idx_riders_status", "status"),
        Index("idx_riders_region_warehouse", "region", "warehouse"),
        Index("idx_riders_email", "email"),
    )
