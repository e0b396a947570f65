"""Domain entities."""
from goldsignal.domain.entities.signal import (
    Signal,
    SignalType,
    SignalLifecycle,
    SignalResult,
    utcnow,
)
from goldsignal.domain.entities.user import (
    User,
    SubscriptionTier,
    UserSubscriptionStatus,
    UserRole,
)
from goldsignal.domain.entities.subscription import Subscription, SubscriptionStatus
from goldsignal.domain.entities.notification import Notification, NotificationType
from goldsignal.domain.entities.trading_account import (
    TradingAccount,
    AutoTradeSettings,
    BrokerName,
    AccountCurrency,
    AccountStatus,
    PriceMode,
)
from goldsignal.domain.entities.trade_execution import TradeExecution, ExecutionStatus

__all__ = [
    "Signal",
    "SignalType",
    "SignalLifecycle",
    "SignalResult",
    "utcnow",
    "User",
    "SubscriptionTier",
    "UserSubscriptionStatus",
    "UserRole",
    "Subscription",
    "SubscriptionStatus",
    "Notification",
    "NotificationType",
    "TradingAccount",
    "AutoTradeSettings",
    "BrokerName",
    "AccountCurrency",
    "AccountStatus",
    "PriceMode",
    "TradeExecution",
    "ExecutionStatus",
]
