"""
GoldSignal – PayMongo Adapter
===============================
Implementa IPaymentGateway sobre la API de PayMongo (checkout alojado).

AUTENTICACIÓN:
  Basic base64(secret_key + ":")

FIRMA DE WEBHOOK (header Paymongo-Signature):
  Formato oficial   t=<timestamp>,te=<hmac test>,li=<hmac live>
                    HMAC-SHA256(webhook_secret, "<t>.<body>")
  Formato simple    <hmac hex> = HMAC-SHA256(webhook_secret, body)

FORMAS DE PAYLOAD ACEPTADAS:
  {"data": {"attributes": {"type": "...", "data": {<checkout_session>}}}}
  {"data": {"type": "...", "attributes": {<checkout_session attrs>}}}
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Any, Dict, Optional

import httpx

from goldsignal.application.ports.errors import PaymentGatewayError
from goldsignal.application.ports.payment_gateway import (
    CheckoutRequest,
    CheckoutSession,
    IPaymentGateway,
    WebhookEvent,
)
from goldsignal.shared.config.settings import Settings
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("paymongo")


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def _is_paid(attributes: Dict[str, Any]) -> bool:
    if attributes.get("status") == "paid":
        return True
    for payment in attributes.get("payments") or []:
        if (payment.get("attributes") or {}).get("status") == "paid":
            return True
    intent = (attributes.get("payment_intent") or {}).get("attributes") or {}
    return intent.get("status") == "succeeded"


def _session_from(resource: Dict[str, Any]) -> CheckoutSession:
    attributes = resource.get("attributes") or {}
    return CheckoutSession(
        session_id=resource.get("id") or attributes.get("id") or "",
        checkout_url=attributes.get("checkout_url"),
        status=attributes.get("status") or "active",
        paid=_is_paid(attributes),
        metadata=dict(attributes.get("metadata") or {}),
    )


class PayMongoAdapter(IPaymentGateway):
    """
    Cliente async de PayMongo.

    Args:
        settings: Claves y URL base de PayMongo
        client: httpx.AsyncClient a usar; None = se crea uno propio
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self._settings = settings
        self._client = client or httpx.AsyncClient(base_url=settings.paymongo_base_url)
        self._owns_client = client is None
        if not settings.paymongo_webhook_secret:
            logger.warning("⚠️ PAYMONGO_WEBHOOK_SECRET no configurado: webhooks sin verificar")

    # ─── Checkout ───────────────────────────────────────────────────────

    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        attributes: Dict[str, Any] = {
            "line_items": [{
                "name": request.name,
                "amount": request.amount,
                "currency": request.currency,
                "quantity": 1,
                "description": request.description,
            }],
            "payment_method_types": list(request.payment_method_types),
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "description": f"{request.name} subscription",
            "metadata": dict(request.metadata),
        }
        if request.customer_email:
            attributes["billing"] = {"email": request.customer_email}

        body = await self._call("POST", "/checkout_sessions", json={"data": {"attributes": attributes}})
        session = _session_from(body.get("data") or {})
        if not session.session_id or not session.checkout_url:
            raise PaymentGatewayError("PayMongo API error: incomplete checkout session")
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        body = await self._call("GET", f"/checkout_sessions/{session_id}")
        return _session_from(body.get("data") or {})

    # ─── Webhooks ───────────────────────────────────────────────────────

    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        secret = self._settings.paymongo_webhook_secret
        if not secret:
            logger.warning("Webhook aceptado sin verificar firma (sin secreto configurado)")
            return True
        if not signature:
            return False

        if "=" not in signature:
            return hmac.compare_digest(_hmac_hex(secret, payload), signature.strip())

        parts: Dict[str, str] = {}
        for item in signature.split(","):
            key, _, value = item.strip().partition("=")
            parts[key] = value
        timestamp = parts.get("t")
        if not timestamp:
            return False
        expected = _hmac_hex(secret, timestamp.encode() + b"." + payload)
        return any(
            hmac.compare_digest(expected, parts[key])
            for key in ("te", "li") if parts.get(key)
        )

    def parse_webhook(self, payload: Dict[str, Any]) -> WebhookEvent:
        data = payload.get("data") or {}
        attributes = data.get("attributes") or {}

        if "data" in attributes:
            event_type = attributes.get("type") or ""
            resource = attributes.get("data") or {}
        else:
            event_type = data.get("type") or ""
            resource = {"id": attributes.get("id") or data.get("id"), "attributes": attributes}

        if not event_type:
            raise PaymentGatewayError("Webhook sin tipo de evento")
        return WebhookEvent(
            event_id=data.get("id") or "",
            event_type=event_type,
            session=_session_from(resource),
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ─── HTTP ───────────────────────────────────────────────────────────

    def _auth_header(self) -> str:
        token = base64.b64encode(f"{self._settings.paymongo_secret_key}:".encode()).decode()
        return f"Basic {token}"

    async def _call(self, method: str, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        if not self._settings.paymongo_secret_key:
            raise PaymentGatewayError("PayMongo secret key not configured")
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                headers={"Authorization": self._auth_header(), "Accept": "application/json"},
                timeout=self._settings.paymongo_timeout,
            )
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(f"PayMongo no disponible: {exc.__class__.__name__}") from exc

        if response.status_code >= 400:
            raise PaymentGatewayError(
                f"PayMongo API error: {self._error_detail(response)}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise PaymentGatewayError("Respuesta no JSON de PayMongo") from exc

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}: {response.text[:200]}"
        errors = body.get("errors") or []
        if errors and errors[0].get("detail"):
            return errors[0]["detail"]
        return body.get("message") or "Unknown error"
