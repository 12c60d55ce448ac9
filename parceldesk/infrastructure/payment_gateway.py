"""
Stripe PaymentIntents client.

Only one call is needed: create an intent for an amount in minor units and
hand its ``client_secret`` back to the browser, which confirms the card
payment directly with Stripe.  The result is never interpreted here.
"""

from __future__ import annotations

import logging

import httpx

from parceldesk.config import settings
from parceldesk.domain.errors import ChargeError

logger = logging.getLogger(__name__)


class StripeChargeClient:
    def __init__(
        self,
        api_key: str = settings.stripe_secret_key,
        base_url: str = settings.stripe_api_base,
        timeout: float = settings.payment_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def create_charge(self, amount_minor_units: int, currency: str) -> str:
        """Create a card PaymentIntent and return its client secret."""
        if amount_minor_units <= 0:
            raise ChargeError("Charge amount must be positive")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/v1/payment_intents",
                    data={
                        "amount": str(amount_minor_units),
                        "currency": currency,
                        "payment_method_types[]": "card",
                    },
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "PaymentIntent creation rejected with status %d",
                exc.response.status_code,
            )
            raise ChargeError("Payment provider rejected the charge") from exc
        except httpx.RequestError as exc:
            logger.error("PaymentIntent request failed: %s", exc)
            raise ChargeError("Payment provider unreachable") from exc

        client_secret = response.json().get("client_secret")
        if not client_secret:
            raise ChargeError("Payment provider returned no client secret")
        return client_secret
