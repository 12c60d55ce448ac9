"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  ``StaticPool`` keeps every session on the one
connection that owns the in-memory database.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from parceldesk.api.middleware import limiter
from parceldesk.infrastructure import models  # noqa: F401  (registers tables)
from parceldesk.infrastructure.database import Base
from parceldesk.infrastructure.identity import TokenVerifier
from parceldesk.services.lifecycle import LifecycleService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET = "test-secret"


class FakeChargeService:
    """Stands in for the Stripe client; records every call."""

    def __init__(self, secret: str = "pi_test_secret_123"):
        self.secret = secret
        self.calls: list[tuple[int, str]] = []

    async def create_charge(self, amount_minor_units: int, currency: str) -> str:
        self.calls.append((amount_minor_units, currency))
        return self.secret


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables on a fresh in-memory database, drop them afterwards."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def service(db_session) -> LifecycleService:
    return LifecycleService(db_session)


@pytest.fixture
def verifier() -> TokenVerifier:
    return TokenVerifier(secret_key=TEST_SECRET, algorithm="HS256")


@pytest.fixture
def auth_header():
    def _header(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(email)}"}

    return _header


@pytest.fixture
def charge_service() -> FakeChargeService:
    return FakeChargeService()


@pytest_asyncio.fixture
async def client(session_factory, verifier, charge_service):
    """AsyncClient backed by SQLite, a test token key and a fake charge service."""
    from parceldesk.api.app import create_app
    from parceldesk.api.dependencies import (
        get_charge_service,
        get_db,
        get_token_verifier,
    )

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    app.dependency_overrides[get_charge_service] = lambda: charge_service
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ── Sample payloads ───────────────────────────────────────────────────


def parcel_details(**overrides) -> dict:
    details = {
        "title": "Books",
        "parcel_type": "non_document",
        "weight": 2.0,
        "sender_name": "Alice",
        "sender_region": "Dhaka",
        "sender_center": "Mirpur",
        "receiver_name": "Bob",
        "receiver_contact": "01700000000",
        "receiver_region": "Dhaka",
        "receiver_center": "Uttara",
        "cost": 100.0,
    }
    details.update(overrides)
    return details


def rider_details(**overrides) -> dict:
    details = {
        "name": "R1",
        "email": "r1@example.com",
        "phone": "01800000000",
        "region": "Dhaka",
        "warehouse": "Mirpur",
    }
    details.update(overrides)
    return details


def issue_token(email: str, secret: str = TEST_SECRET, **claims) -> str:
    return jwt.encode({"email": email, **claims}, secret, algorithm="HS256")
