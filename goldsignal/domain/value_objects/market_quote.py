"""
GoldSignal – Market Quote (Value Object)
===========================================
Cotización del oro normalizada desde el proveedor de market data.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass(frozen=True, slots=True)
class MarketQuote:
    symbol: str
    price: float
    change: float
    change_percent: float
    high: float
    low: float
    volume: float
    timestamp: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True, slots=True)
class PriceBar:
    """Vela OHLC de /time_series."""
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data
