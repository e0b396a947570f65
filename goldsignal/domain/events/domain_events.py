"""
GoldSignal – Domain Events
============================
Eventos de dominio para arquitectura event-driven.

Los eventos de dominio representan HECHOS que ocurrieron
en el sistema. Son inmutables y llevan timestamp.

CONSUMIDORES:
- AutoTradeListener: SignalPublished, SignalClosed
- WebSocketManager:  todos (broadcast al dashboard)
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass(frozen=True)
class DomainEvent:
    """Evento base de dominio."""

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)

    # Tópico del EventBus por el que viaja el evento
    topic = "event"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.__class__.__name__,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class SignalPublished(DomainEvent):
    """Evento: un analista publicó una señal nueva."""

    topic = "signal_published"

    signal_id: str = ""
    symbol: str = ""
    signal_type: str = ""  # buy | sell
    entry_price: float = 0.0
    stop_loss: float = 0.0
    take_profit: float = 0.0
    confidence: int = 0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "signal_id": self.signal_id,
            "symbol": self.symbol,
            "signal_type": self.signal_type,
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "confidence": self.confidence,
        })
        return base


@dataclass(frozen=True)
class SignalUpdated(DomainEvent):
    topic = "signal_updated"

    signal_id: str = ""
    changes: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({"signal_id": self.signal_id, "changes": list(self.changes)})
        return base


@dataclass(frozen=True)
class SignalClosed(DomainEvent):
    """Evento: una señal se cerró (manual o por TP/SL)."""

    topic = "signal_closed"

    signal_id: str = ""
    symbol: str = ""
    result: str = ""       # win | loss | breakeven
    pips_result: float = 0.0
    exit_price: float = 0.0
    automatic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "signal_id": self.signal_id,
            "symbol": self.symbol,
            "result": self.result,
            "pips_result": self.pips_result,
            "exit_price": self.exit_price,
            "automatic": self.automatic,
        })
        return base


@dataclass(frozen=True)
class PriceUpdated(DomainEvent):
    topic = "price"

    symbol: str = ""
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({"symbol": self.symbol, "price": self.price})
        return base


@dataclass(frozen=True)
class TradeExecuted(DomainEvent):
    topic = "trade_executed"

    execution_id: str = ""
    signal_id: str = ""
    user_id: str = ""
    lot_size: float = 0.0
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "execution_id": self.execution_id,
            "signal_id": self.signal_id,
            "user_id": self.user_id,
            "lot_size": self.lot_size,
            "price": self.price,
        })
        return base


@dataclass(frozen=True)
class SubscriptionActivated(DomainEvent):
    topic = "subscription_activated"

    user_id: str = ""
    plan_id: str = ""
    period_end: str = ""

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "period_end": self.period_end,
        })
        return base
