"""Tests for the Stripe charge client (mocked transport)."""

from __future__ import annotations

import httpx
import pytest

from parceldesk.domain.errors import ChargeError, UpstreamFailure
from parceldesk.infrastructure.payment_gateway import StripeChargeClient


def _client(handler) -> StripeChargeClient:
    return StripeChargeClient(
        api_key="sk_test_123",
        base_url="https://stripe.test",
        transport=httpx.MockTransport(handler),
    )


class TestStripeChargeClient:
    @pytest.mark.asyncio
    async def test_returns_client_secret(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "pi_1", "client_secret": "pi_1_secret"})

        secret = await _client(handler).create_charge(1250, "usd")

        assert secret == "pi_1_secret"
        request = seen[0]
        assert request.url.path == "/v1/payment_intents"
        assert request.headers["Authorization"] == "Bearer sk_test_123"
        body = request.content.decode()
        assert "amount=1250" in body
        assert "currency=usd" in body

    @pytest.mark.asyncio
    async def test_provider_rejection_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(402, json={"error": {"message": "card declined"}})

        with pytest.raises(ChargeError):
            await _client(handler).create_charge(1250, "usd")

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFailure):
            await _client(handler).create_charge(1250, "usd")

    @pytest.mark.asyncio
    async def test_missing_client_secret_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "pi_1"})

        with pytest.raises(ChargeError, match="client secret"):
            await _client(handler).create_charge(1250, "usd")

    @pytest.mark.asyncio
    async def test_non_positive_amount_rejected_without_call(self):
        def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
            raise AssertionError("provider must not be called")

        with pytest.raises(ChargeError):
            await _client(handler).create_charge(0, "usd")
