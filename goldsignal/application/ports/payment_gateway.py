"""
GoldSignal – Application Port: Payment Gateway
================================================
Interfaz para checkouts alojados y webhooks de la pasarela de pago.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CheckoutRequest:
    plan_id: str
    user_id: str
    name: str
    description: str
    amount: int             # centavos
    currency: str
    success_url: str
    cancel_url: str
    payment_method_types: List[str]
    metadata: Dict[str, str] = field(default_factory=dict)
    customer_email: Optional[str] = None


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    checkout_url: Optional[str] = None
    status: str = "active"
    paid: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "checkout_url": self.checkout_url,
            "status": self.status,
            "paid": self.paid,
        }


@dataclass(frozen=True)
class WebhookEvent:
    event_id: str
    event_type: str                 # checkout_session.payment.paid | ...failed
    session: CheckoutSession


class IPaymentGateway(ABC):

    @abstractmethod
    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        pass

    @abstractmethod
    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        pass

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        pass

    @abstractmethod
    def parse_webhook(self, payload: Dict[str, Any]) -> WebhookEvent:
        pass

    async def close(self) -> None:
        return None
