"""Stripe Payment Gateway — PaymentIntents over Stripe's REST API with error mapping.

Invariants:
    - Requests are form-encoded and authenticated with the secret key (Bearer)
    - Timeouts, connection errors and non-2xx responses raise PaymentProviderError
    - No retries: a failed payment call is terminal for the request
    - Returned dicts are Stripe's JSON objects, unmodified

Design Decisions:
    - httpx.AsyncClient over the stripe SDK: async-native, one dependency shared with
      the test client, and only two endpoints are needed
    - Client injectable for tests (httpx.MockTransport)
"""

import logging

import httpx

from devconnect.core.errors import PaymentProviderError

logger = logging.getLogger(__name__)


def _flatten_metadata(metadata: dict[str, str]) -> dict[str, str]:
    """Stripe expects nested params as metadata[key]=value."""
    return {f"metadata[{key}]": value for key, value in metadata.items()}


class StripePaymentGateway:
    """Create and inspect Stripe PaymentIntents."""

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=api_base,
            timeout=timeout_seconds,
            headers={"Authorization": f"Bearer {secret_key}"},
        )

    async def create_intent(
        self, amount_cents: int, currency: str, metadata: dict[str, str],
    ) -> dict:
        data = {
            "amount": str(amount_cents),
            "currency": currency,
            "payment_method_types[]": "card",
            **_flatten_metadata(metadata),
        }
        return await self._request("POST", "/v1/payment_intents", data=data)

    async def retrieve_intent(self, intent_id: str) -> dict:
        return await self._request("GET", f"/v1/payment_intents/{intent_id}")

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self, method: str, path: str, data: dict[str, str] | None = None,
    ) -> dict:
        try:
            response = await self.client.request(method, path, data=data)
        except httpx.TimeoutException:
            raise PaymentProviderError("Payment provider timed out", "timeout")
        except httpx.HTTPError as e:
            logger.error(f"Stripe connection error on {path}: {e}")
            raise PaymentProviderError("Payment provider unreachable", "connection")

        if response.status_code >= 400:
            raise PaymentProviderError(
                _error_message(response), f"http_{response.status_code}",
            )
        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Extract Stripe's error.message when present."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or "Unknown error"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "Unknown error"
