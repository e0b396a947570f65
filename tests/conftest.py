"""Fixtures compartidas: settings de test, SQLite en memoria y fakes de puertos."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from goldsignal.application.ports.errors import PaymentGatewayError
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.application.ports.payment_gateway import (
    CheckoutRequest,
    CheckoutSession,
    IPaymentGateway,
    WebhookEvent,
)
from goldsignal.application.use_cases import (
    ManageSignalsUseCase,
    NotificationUseCase,
    SubscriptionUseCase,
)
from goldsignal.domain.entities.user import (
    SubscriptionTier,
    User,
    UserRole,
    UserSubscriptionStatus,
)
from goldsignal.domain.events.domain_events import DomainEvent
from goldsignal.domain.services.feature_access import FeatureAccessPolicy
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.domain.value_objects.market_quote import MarketQuote, PriceBar
from goldsignal.infrastructure.persistence.database import DatabaseManager
from goldsignal.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from goldsignal.shared.config.settings import Settings


# ─── Fakes ──────────────────────────────────────────────────────────────

class FakeMarketData(IMarketDataProvider):
    """Proveedor de precios controlado por el test."""

    def __init__(self, price: Optional[float] = 2650.0):
        self.price = price
        self.error: Optional[Exception] = None
        self.calls = 0
        self._last: Optional[float] = None

    @property
    def last_price(self) -> Optional[float]:
        return self._last

    async def get_gold_price(self) -> float:
        self.calls += 1
        if self.error is not None:
            raise self.error
        self._last = self.price
        return self.price

    async def get_quote(self) -> MarketQuote:
        price = await self.get_gold_price()
        return MarketQuote(
            symbol="XAUUSD", price=price, change=1.5, change_percent=0.06,
            high=price + 5, low=price - 5, volume=0.0,
            timestamp=datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc),
        )

    async def get_historical_data(self, interval: str = "1h", outputsize: int = 24) -> List[PriceBar]:
        return []


class RecordingPublisher(IEventPublisher):
    def __init__(self):
        self.events: List[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def topics(self) -> List[str]:
        return [e.topic for e in self.events]


class FakePaymentGateway(IPaymentGateway):
    """Pasarela en memoria; la firma válida es la cadena "valid"."""

    def __init__(self):
        self.requests: List[CheckoutRequest] = []
        self.sessions: Dict[str, CheckoutSession] = {}

    async def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        self.requests.append(request)
        session_id = f"cs_test_{len(self.requests)}"
        session = CheckoutSession(
            session_id=session_id,
            checkout_url=f"https://checkout.test/{session_id}",
            metadata=dict(request.metadata),
        )
        self.sessions[session_id] = session
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            return self.sessions[session_id]
        except KeyError:
            raise PaymentGatewayError("PayMongo API error: No such checkout_session", 404)

    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        return signature == "valid"

    def parse_webhook(self, payload: Dict[str, Any]) -> WebhookEvent:
        attributes = payload["data"]["attributes"]
        resource = attributes.get("data") or {}
        return WebhookEvent(
            event_id=payload["data"].get("id", ""),
            event_type=attributes["type"],
            session=CheckoutSession(
                session_id=resource.get("id", ""),
                metadata=(resource.get("attributes") or {}).get("metadata") or {},
                paid=True,
                status="paid",
            ),
        )


def webhook_payload(event_type: str, session_id: str, user_id: str, plan: str) -> Dict[str, Any]:
    return {
        "data": {
            "id": "evt_test",
            "type": "event",
            "attributes": {
                "type": event_type,
                "data": {
                    "id": session_id,
                    "type": "checkout_session",
                    "attributes": {
                        "status": "active",
                        "metadata": {"plan": plan, "user_id": user_id},
                    },
                },
            },
        },
    }


# ─── Infraestructura ────────────────────────────────────────────────────

@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        twelve_data_api_key="td-test-key",
        paymongo_secret_key="sk_test_123",
        paymongo_webhook_secret="whsk_test_123",
        signal_monitor_enabled=False,
        auto_trade_enabled=False,
        admin_emails=["admin@goldsignal.test"],
    )


@pytest.fixture
async def database(settings):
    db = DatabaseManager(settings)
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
async def uow(database):
    async with SqlAlchemyUnitOfWork(database.get_session) as unit:
        yield unit


@pytest.fixture
def market() -> FakeMarketData:
    return FakeMarketData()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def calculator() -> SignalStatusCalculator:
    return SignalStatusCalculator(pip_size=0.1)


@pytest.fixture
def make_user(uow):
    """Crea y confirma un perfil con el tier indicado."""

    async def _make(
        user_id: str,
        tier: SubscriptionTier = SubscriptionTier.FREE,
        role: UserRole = UserRole.USER,
        status: UserSubscriptionStatus = UserSubscriptionStatus.ACTIVE,
        end_date: Optional[datetime] = None,
    ) -> User:
        user = User(
            id=user_id,
            email=f"{user_id}@goldsignal.test",
            subscription_tier=tier,
            subscription_status=status,
            subscription_end_date=end_date,
            role=role,
        )
        await uow.users.add(user)
        await uow.commit()
        return user

    return _make


@pytest.fixture
def manage_signals(uow, publisher, calculator, market) -> ManageSignalsUseCase:
    return ManageSignalsUseCase(
        uow=uow,
        event_publisher=publisher,
        status_calculator=calculator,
        notifications=NotificationUseCase(uow),
        access_policy=FeatureAccessPolicy(free_signal_limit=5),
        market_data=market,
    )


@pytest.fixture
def subscriptions(uow, gateway, publisher) -> SubscriptionUseCase:
    return SubscriptionUseCase(
        uow=uow,
        payment_gateway=gateway,
        event_publisher=publisher,
        notifications=NotificationUseCase(uow),
        app_url="https://app.goldsignal.test/",
    )
