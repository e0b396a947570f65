"""ORM models - importar este paquete registra todas las tablas en Base.metadata."""
from goldsignal.infrastructure.persistence.models.signal import SignalModel
from goldsignal.infrastructure.persistence.models.user import UserModel, SubscriptionModel
from goldsignal.infrastructure.persistence.models.notification import NotificationModel
from goldsignal.infrastructure.persistence.models.trading import (
    TradingAccountModel,
    AutoTradeSettingsModel,
    TradeExecutionModel,
)

__all__ = [
    "SignalModel",
    "UserModel",
    "SubscriptionModel",
    "NotificationModel",
    "TradingAccountModel",
    "AutoTradeSettingsModel",
    "TradeExecutionModel",
]
