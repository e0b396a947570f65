"""Domain events."""
from goldsignal.domain.events.domain_events import (
    DomainEvent,
    SignalPublished,
    SignalUpdated,
    SignalClosed,
    PriceUpdated,
    TradeExecuted,
    SubscriptionActivated,
)

__all__ = [
    "DomainEvent",
    "SignalPublished",
    "SignalUpdated",
    "SignalClosed",
    "PriceUpdated",
    "TradeExecuted",
    "SubscriptionActivated",
]
