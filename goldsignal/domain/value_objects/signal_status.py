"""
GoldSignal – Signal Status (Value Object)
============================================
Resultado de clasificar una señal contra el precio actual.

No se persiste: se recalcula en cada lectura con el último precio.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SignalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    HIT_TP = "hit_tp"
    HIT_SL = "hit_sl"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class SignalStatusInfo:
    status: SignalStatus
    pnl: float
    pnl_percentage: float
    is_profit: bool
    status_text: str

    @property
    def is_terminal(self) -> bool:
        """TP o SL alcanzado: la señal debe cerrarse."""
        return self.status in (SignalStatus.HIT_TP, SignalStatus.HIT_SL)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "pnl": round(self.pnl, 2),
            "pnl_percentage": round(self.pnl_percentage, 2),
            "is_profit": self.is_profit,
            "status_text": self.status_text,
        }
