"""
GoldSignal – Broker Value Objects
====================================
Estructuras inmutables intercambiadas con un broker (real o demo).

SymbolInfo es la entrada del cálculo de lotaje:
  point      → incremento mínimo de precio
  tick_value → valor monetario de un tick por lote
  tick_size  → tamaño del tick
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class BrokerCredentials:
    account_id: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    server: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SymbolInfo:
    symbol: str
    digits: int
    point: float
    contract_size: float
    min_lot: float
    max_lot: float
    lot_step: float
    tick_value: float
    tick_size: float
    margin_required: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class AccountInfo:
    account_id: str
    balance: float
    equity: float
    margin: float
    free_margin: float
    margin_level: float
    currency: str
    leverage: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class OrderRequest:
    symbol: str
    order_type: str          # "buy" | "sell"
    volume: float
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    comment: Optional[str] = None


@dataclass(frozen=True, slots=True)
class OrderResult:
    success: bool
    order_id: Optional[str] = None
    price: Optional[float] = None
    volume: Optional[float] = None
    commission: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CloseResult:
    success: bool
    price: Optional[float] = None
    profit: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Position:
    position_id: str
    symbol: str
    order_type: str
    volume: float
    open_price: float
    current_price: float
    stop_loss: Optional[float]
    take_profit: Optional[float]
    profit: float
    swap: float
    commission: float
    open_time: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["open_time"] = self.open_time.isoformat()
        return data


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    order_id: str
    symbol: str
    order_type: str
    volume: float
    open_price: float
    close_price: float
    profit: float
    commission: float
    open_time: datetime
    close_time: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["open_time"] = self.open_time.isoformat()
        data["close_time"] = self.close_time.isoformat()
        return data
