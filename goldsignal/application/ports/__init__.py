"""Application ports - Interfaces hacia el mundo exterior."""
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.application.ports.payment_gateway import (
    IPaymentGateway,
    CheckoutRequest,
    CheckoutSession,
    WebhookEvent,
)
from goldsignal.application.ports.broker_api import IBrokerAPI
from goldsignal.application.ports.errors import (
    ExternalServiceError,
    MarketDataError,
    PaymentGatewayError,
    WebhookSignatureError,
    BrokerError,
)

__all__ = [
    "IEventPublisher",
    "IMarketDataProvider",
    "IPaymentGateway",
    "CheckoutRequest",
    "CheckoutSession",
    "WebhookEvent",
    "IBrokerAPI",
    "ExternalServiceError",
    "MarketDataError",
    "PaymentGatewayError",
    "WebhookSignatureError",
    "BrokerError",
]
