"""Mappers ORM ↔ dominio."""
from goldsignal.infrastructure.persistence.mappers.signal_mapper import SignalMapper
from goldsignal.infrastructure.persistence.mappers.user_mapper import (
    UserMapper,
    SubscriptionMapper,
    NotificationMapper,
)
from goldsignal.infrastructure.persistence.mappers.trading_mapper import (
    TradingAccountMapper,
    AutoTradeSettingsMapper,
    TradeExecutionMapper,
)

__all__ = [
    "SignalMapper",
    "UserMapper",
    "SubscriptionMapper",
    "NotificationMapper",
    "TradingAccountMapper",
    "AutoTradeSettingsMapper",
    "TradeExecutionMapper",
]
