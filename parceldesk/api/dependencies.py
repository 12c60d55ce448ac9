"""FastAPI dependency injection helpers."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from parceldesk.domain.errors import UnauthenticatedError
from parceldesk.infrastructure.database import async_session_factory
from parceldesk.infrastructure.identity import TokenVerifier
from parceldesk.infrastructure.payment_gateway import StripeChargeClient

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    email: str


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_token_verifier() -> TokenVerifier:
    return TokenVerifier()


def get_charge_service() -> StripeChargeClient:
    return StripeChargeClient()


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Principal:
    if credentials is None:
        raise UnauthenticatedError("Unauthorized: no bearer token")
    return Principal(email=verifier.verify(credentials.credentials))
