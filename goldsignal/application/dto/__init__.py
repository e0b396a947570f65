"""Application DTOs."""
from goldsignal.application.dto.signal_dto import (
    CreateSignalDTO,
    SignalViewDTO,
    SignalFeedDTO,
    PageDTO,
)
from goldsignal.application.dto.subscription_dto import SubscriptionAnalyticsDTO
from goldsignal.application.dto.trading_dto import (
    ConnectAccountDTO,
    AccountSummaryDTO,
    AutoTradeRunDTO,
)

__all__ = [
    "CreateSignalDTO",
    "SignalViewDTO",
    "SignalFeedDTO",
    "PageDTO",
    "SubscriptionAnalyticsDTO",
    "ConnectAccountDTO",
    "AccountSummaryDTO",
    "AutoTradeRunDTO",
]
