"""Repository interfaces (ABCs)."""
from goldsignal.domain.repositories.signal_repository import ISignalRepository
from goldsignal.domain.repositories.user_repository import IUserRepository
from goldsignal.domain.repositories.subscription_repository import ISubscriptionRepository
from goldsignal.domain.repositories.trading_repository import (
    ITradingAccountRepository,
    IAutoTradeSettingsRepository,
    ITradeExecutionRepository,
)
from goldsignal.domain.repositories.notification_repository import INotificationRepository
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork

__all__ = [
    "ISignalRepository",
    "IUserRepository",
    "ISubscriptionRepository",
    "ITradingAccountRepository",
    "IAutoTradeSettingsRepository",
    "ITradeExecutionRepository",
    "INotificationRepository",
    "IUnitOfWork",
]
