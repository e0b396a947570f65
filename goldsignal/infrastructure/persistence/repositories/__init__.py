"""Implementaciones SQLAlchemy de los repositorios del dominio."""

from goldsignal.infrastructure.persistence.repositories.notification_repository_impl import (
    NotificationRepositoryImpl,
)
from goldsignal.infrastructure.persistence.repositories.signal_repository_impl import (
    SignalRepositoryImpl,
)
from goldsignal.infrastructure.persistence.repositories.subscription_repository_impl import (
    SubscriptionRepositoryImpl,
)
from goldsignal.infrastructure.persistence.repositories.trading_repository_impl import (
    AutoTradeSettingsRepositoryImpl,
    TradeExecutionRepositoryImpl,
    TradingAccountRepositoryImpl,
)
from goldsignal.infrastructure.persistence.repositories.user_repository_impl import (
    UserRepositoryImpl,
)

__all__ = [
    "SignalRepositoryImpl",
    "UserRepositoryImpl",
    "SubscriptionRepositoryImpl",
    "TradingAccountRepositoryImpl",
    "AutoTradeSettingsRepositoryImpl",
    "TradeExecutionRepositoryImpl",
    "NotificationRepositoryImpl",
]
