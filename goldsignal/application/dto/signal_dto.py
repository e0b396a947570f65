"""
GoldSignal – Application DTO: Signal
======================================
Data Transfer Objects para señales.

Los DTOs sirven como contratos entre capas.
Son estructuras simples sin lógica de negocio.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from goldsignal.domain.entities.signal import Signal
from goldsignal.domain.value_objects.signal_status import SignalStatusInfo

T = TypeVar("T")


@dataclass
class CreateSignalDTO:
    """DTO para publicar una señal."""

    signal_type: str
    entry_price: float
    stop_loss: float
    take_profit: float
    symbol: str = "XAUUSD"
    confidence: int = 50
    description: Optional[str] = None
    status: str = "active"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreateSignalDTO":
        return cls(
            signal_type=data.get("type") or data["signal_type"],
            entry_price=data["entry_price"],
            stop_loss=data["stop_loss"],
            take_profit=data["take_profit"],
            symbol=data.get("symbol") or "XAUUSD",
            confidence=data.get("confidence", 50),
            description=data.get("description"),
            status=data.get("status") or "active",
        )


@dataclass
class SignalViewDTO:
    """Señal + estado calculado al último precio."""

    signal: Signal
    calculated_status: Optional[SignalStatusInfo] = None
    current_price: Optional[float] = None

    @classmethod
    def from_entity(
        cls,
        signal: Signal,
        status: Optional[SignalStatusInfo] = None,
        current_price: Optional[float] = None,
    ) -> "SignalViewDTO":
        return cls(signal=signal, calculated_status=status, current_price=current_price)

    def to_dict(self) -> Dict[str, Any]:
        data = self.signal.to_dict()
        data["calculated_status"] = (
            self.calculated_status.to_dict() if self.calculated_status else None
        )
        data["current_price"] = self.current_price
        return data


@dataclass
class PageDTO(Generic[T]):
    """Página de resultados con total para paginación."""

    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
        }


@dataclass
class SignalFeedDTO:
    """Feed visible para un usuario según su cuota de tier."""

    signals: List[SignalViewDTO]
    quota: int                      # -1 = ilimitado
    used: int
    current_price: Optional[float] = None
    upgrade_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signals": [s.to_dict() for s in self.signals],
            "quota": self.quota,
            "used": self.used,
            "current_price": self.current_price,
            "upgrade_message": self.upgrade_message,
        }
