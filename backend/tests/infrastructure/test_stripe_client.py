"""Stripe Payment Gateway — request shape and error mapping via httpx.MockTransport."""

from urllib.parse import parse_qs

import httpx
import pytest

from devconnect.core.errors import PaymentProviderError
from devconnect.infrastructure.stripe_client import StripePaymentGateway


def _gateway(handler) -> StripePaymentGateway:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://stripe.test",
        headers={"Authorization": "Bearer sk_test"},
    )
    return StripePaymentGateway("sk_test", client=client)


async def test_create_intent_sends_form_encoded_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "pi_1", "client_secret": "s"})

    gateway = _gateway(handler)
    intent = await gateway.create_intent(1500, "usd", {"email": "a@x.com"})
    await gateway.aclose()

    assert intent == {"id": "pi_1", "client_secret": "s"}
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/payment_intents"
    assert seen["auth"] == "Bearer sk_test"
    assert seen["form"]["amount"] == ["1500"]
    assert seen["form"]["currency"] == ["usd"]
    assert seen["form"]["payment_method_types[]"] == ["card"]
    assert seen["form"]["metadata[email]"] == ["a@x.com"]


async def test_retrieve_intent_gets_by_id():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/v1/payment_intents/pi_9"
        return httpx.Response(200, json={"id": "pi_9", "status": "succeeded"})

    intent = await _gateway(handler).retrieve_intent("pi_9")
    assert intent["status"] == "succeeded"


async def test_provider_error_message_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": {"message": "Card declined"}})

    with pytest.raises(PaymentProviderError) as exc:
        await _gateway(handler).retrieve_intent("pi_1")
    assert exc.value.provider_error_type == "http_402"
    assert "Card declined" in exc.value.message
    assert exc.value.http_status == 502


async def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    with pytest.raises(PaymentProviderError) as exc:
        await _gateway(handler).retrieve_intent("pi_1")
    assert exc.value.provider_error_type == "http_503"
    assert "upstream down" in exc.value.message


async def test_timeout_mapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(PaymentProviderError) as exc:
        await _gateway(handler).create_intent(100, "usd", {})
    assert exc.value.provider_error_type == "timeout"


async def test_connection_error_mapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PaymentProviderError) as exc:
        await _gateway(handler).create_intent(100, "usd", {})
    assert exc.value.provider_error_type == "connection"
