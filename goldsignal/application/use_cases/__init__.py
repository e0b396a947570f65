"""Application use cases."""
from goldsignal.application.use_cases.notification_usecase import NotificationUseCase
from goldsignal.application.use_cases.manage_signals_usecase import (
    ManageSignalsUseCase,
    CloseSignalResult,
)
from goldsignal.application.use_cases.monitor_signals_usecase import (
    MonitorSignalsUseCase,
    MonitorResult,
)
from goldsignal.application.use_cases.subscription_usecase import (
    SubscriptionUseCase,
    WebhookResult,
)
from goldsignal.application.use_cases.auto_trade_usecase import AutoTradeUseCase
from goldsignal.application.use_cases.user_usecase import UserUseCase
from goldsignal.application.use_cases.stats_usecase import StatsUseCase

__all__ = [
    "NotificationUseCase",
    "ManageSignalsUseCase",
    "CloseSignalResult",
    "MonitorSignalsUseCase",
    "MonitorResult",
    "SubscriptionUseCase",
    "WebhookResult",
    "AutoTradeUseCase",
    "UserUseCase",
    "StatsUseCase",
]
