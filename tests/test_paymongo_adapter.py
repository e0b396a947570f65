"""Test PayMongo adapter: checkout payloads, errors and webhook signatures."""

import base64
import hashlib
import hmac
import json

import httpx
import pytest

from goldsignal.application.ports.errors import PaymentGatewayError
from goldsignal.application.ports.payment_gateway import CheckoutRequest
from goldsignal.infrastructure.external.paymongo_adapter import PayMongoAdapter


def _adapter(settings, handler, **overrides):
    if overrides:
        settings = settings.model_copy(update=overrides)
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url=settings.paymongo_base_url,
    )
    return PayMongoAdapter(settings, client=client)


def _checkout_request(**overrides):
    data = dict(
        plan_id="premium",
        user_id="user-1",
        name="Gold Signal Premium Plan",
        description="Premium trading signals",
        amount=145000,
        currency="PHP",
        success_url="https://app.test/payment-success?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="https://app.test/pricing",
        payment_method_types=["card", "gcash"],
        metadata={"plan": "premium", "user_id": "user-1"},
        customer_email="user1@goldsignal.test",
    )
    data.update(overrides)
    return CheckoutRequest(**data)


def _sign(secret, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


async def test_create_checkout_session(settings):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"data": {
            "id": "cs_123",
            "attributes": {"checkout_url": "https://checkout.paymongo.com/cs_123",
                           "status": "active"},
        }})

    adapter = _adapter(settings, handler)
    session = await adapter.create_checkout_session(_checkout_request())

    request = captured["request"]
    assert request.method == "POST"
    assert request.url.path == "/v1/checkout_sessions"
    expected = base64.b64encode(b"sk_test_123:").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"

    attributes = json.loads(request.content)["data"]["attributes"]
    assert attributes["line_items"] == [{
        "name": "Gold Signal Premium Plan", "amount": 145000, "currency": "PHP",
        "quantity": 1, "description": "Premium trading signals",
    }]
    assert attributes["payment_method_types"] == ["card", "gcash"]
    assert attributes["description"] == "Gold Signal Premium Plan subscription"
    assert attributes["billing"] == {"email": "user1@goldsignal.test"}
    assert attributes["metadata"]["plan"] == "premium"

    assert session.session_id == "cs_123"
    assert session.checkout_url == "https://checkout.paymongo.com/cs_123"
    assert not session.paid


async def test_api_error_detail_is_surfaced(settings):
    def handler(request):
        return httpx.Response(400, json={"errors": [{"detail": "amount is invalid"}]})

    adapter = _adapter(settings, handler)
    with pytest.raises(PaymentGatewayError, match="PayMongo API error: amount is invalid") as exc_info:
        await adapter.create_checkout_session(_checkout_request())
    assert exc_info.value.status_code == 400


async def test_incomplete_session_is_an_error(settings):
    def handler(request):
        return httpx.Response(200, json={"data": {"id": "cs_1", "attributes": {}}})

    with pytest.raises(PaymentGatewayError):
        await _adapter(settings, handler).create_checkout_session(_checkout_request())


async def test_non_json_body_is_a_gateway_error(settings):
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(PaymentGatewayError, match="no JSON"):
        await _adapter(settings, handler).retrieve_checkout_session("cs_1")


async def test_missing_secret_key(settings):
    def handler(request):
        raise AssertionError("no debe llamarse")

    adapter = _adapter(settings, handler, paymongo_secret_key="")
    with pytest.raises(PaymentGatewayError, match="secret key not configured"):
        await adapter.retrieve_checkout_session("cs_1")


@pytest.mark.parametrize("attributes", [
    {"status": "paid"},
    {"status": "active", "payments": [{"attributes": {"status": "paid"}}]},
    {"status": "active", "payment_intent": {"attributes": {"status": "succeeded"}}},
])
async def test_retrieve_detects_payment(settings, attributes):
    def handler(request):
        assert request.url.path == "/v1/checkout_sessions/cs_9"
        return httpx.Response(200, json={"data": {"id": "cs_9", "attributes": {
            **attributes, "metadata": {"plan": "vip", "user_id": "u9"},
        }}})

    session = await _adapter(settings, handler).retrieve_checkout_session("cs_9")
    assert session.paid
    assert session.metadata == {"plan": "vip", "user_id": "u9"}


async def test_retrieve_unpaid(settings):
    def handler(request):
        return httpx.Response(200, json={"data": {"id": "cs_9", "attributes": {
            "status": "active", "payments": [],
        }}})

    session = await _adapter(settings, handler).retrieve_checkout_session("cs_9")
    assert not session.paid


# ─── Webhooks ───────────────────────────────────────────────────────────

def test_webhook_signature_formats(settings):
    adapter = _adapter(settings, lambda r: httpx.Response(200))
    body = b'{"data": {}}'
    secret = settings.paymongo_webhook_secret

    assert adapter.verify_webhook_signature(body, _sign(secret, body))
    assert not adapter.verify_webhook_signature(body, _sign("other", body))
    assert not adapter.verify_webhook_signature(body, None)

    signed = _sign(secret, b"1700000000." + body)
    assert adapter.verify_webhook_signature(body, f"t=1700000000,te={signed},li=")
    assert adapter.verify_webhook_signature(body, f"t=1700000000,te=,li={signed}")
    assert not adapter.verify_webhook_signature(body, f"t=1700000001,te={signed},li=")
    assert not adapter.verify_webhook_signature(body, f"te={signed}")


def test_webhook_without_secret_is_accepted(settings):
    adapter = _adapter(settings, lambda r: httpx.Response(200), paymongo_webhook_secret="")
    assert adapter.verify_webhook_signature(b"{}", None)


def test_parse_webhook_shapes(settings):
    adapter = _adapter(settings, lambda r: httpx.Response(200))

    nested = adapter.parse_webhook({"data": {"id": "evt_1", "attributes": {
        "type": "checkout_session.payment.paid",
        "data": {"id": "cs_1", "attributes": {
            "status": "active", "metadata": {"plan": "premium", "user_id": "u1"},
            "payments": [{"attributes": {"status": "paid"}}],
        }},
    }}})
    assert nested.event_id == "evt_1"
    assert nested.event_type == "checkout_session.payment.paid"
    assert nested.session.session_id == "cs_1"
    assert nested.session.paid
    assert nested.session.metadata["user_id"] == "u1"

    flat = adapter.parse_webhook({"data": {
        "id": "cs_2", "type": "checkout_session.payment.failed",
        "attributes": {"metadata": {"plan": "vip", "user_id": "u2"}},
    }})
    assert flat.event_type == "checkout_session.payment.failed"
    assert flat.session.session_id == "cs_2"

    with pytest.raises(PaymentGatewayError):
        adapter.parse_webhook({"data": {"attributes": {}}})
