"""
GoldSignal – Signal Performance (Value Object)
=================================================
Métricas sobre señales cerradas en una ventana de días.

  win_rate      = wins / total × 100
  avg_pips      = total_pips / total
  profit_factor = pips ganados / |pips perdidos|
                  (pips ganados si no hubo pérdidas)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SignalPerformance:
    total_signals: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    win_rate: float = 0.0
    avg_pips: float = 0.0
    total_pips: float = 0.0
    profit_factor: float = 0.0
    period_days: int = 30

    def to_dict(self) -> dict:
        return {
            "total_signals": self.total_signals,
            "wins": self.wins,
            "losses": self.losses,
            "breakevens": self.breakevens,
            "win_rate": round(self.win_rate, 2),
            "avg_pips": round(self.avg_pips, 2),
            "total_pips": round(self.total_pips, 2),
            "profit_factor": round(self.profit_factor, 2),
            "period_days": self.period_days,
        }
