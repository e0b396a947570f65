"""Domain value objects."""
from goldsignal.domain.value_objects.signal_status import SignalStatus, SignalStatusInfo
from goldsignal.domain.value_objects.broker_types import (
    BrokerCredentials,
    SymbolInfo,
    AccountInfo,
    OrderRequest,
    OrderResult,
    CloseResult,
    Position,
    HistoryEntry,
)
from goldsignal.domain.value_objects.market_quote import MarketQuote, PriceBar
from goldsignal.domain.value_objects.signal_performance import SignalPerformance

__all__ = [
    "SignalStatus",
    "SignalStatusInfo",
    "BrokerCredentials",
    "SymbolInfo",
    "AccountInfo",
    "OrderRequest",
    "OrderResult",
    "CloseResult",
    "Position",
    "HistoryEntry",
    "MarketQuote",
    "PriceBar",
    "SignalPerformance",
]
