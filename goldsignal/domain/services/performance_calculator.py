"""
GoldSignal – Domain Service: Performance Calculator
======================================================
Agrega resultados de señales cerradas en SignalPerformance.

Una señal cuenta como ganadora por su campo ``result`` (no por el
signo de los pips) para respetar cierres manuales del analista.
Señales sin pips_result suman 0 pips.
"""

from __future__ import annotations

from typing import Iterable

from goldsignal.domain.entities.signal import Signal, SignalResult
from goldsignal.domain.value_objects.signal_performance import SignalPerformance


class PerformanceCalculator:

    @staticmethod
    def calculate(signals: Iterable[Signal], period_days: int = 30) -> SignalPerformance:
        closed = [s for s in signals if s.is_closed]
        total = len(closed)
        if total == 0:
            return SignalPerformance(period_days=period_days)

        wins = [s for s in closed if s.result == SignalResult.WIN]
        losses = [s for s in closed if s.result == SignalResult.LOSS]
        breakevens = total - len(wins) - len(losses)

        total_pips = sum(s.pips_result or 0.0 for s in closed)
        winning_pips = sum(s.pips_result or 0.0 for s in wins)
        losing_pips = abs(sum(s.pips_result or 0.0 for s in losses))

        profit_factor = winning_pips / losing_pips if losing_pips > 0 else winning_pips

        return SignalPerformance(
            total_signals=total,
            wins=len(wins),
            losses=len(losses),
            breakevens=breakevens,
            win_rate=round(len(wins) / total * 100.0, 2),
            avg_pips=round(total_pips / total, 2),
            total_pips=round(total_pips, 2),
            profit_factor=round(profit_factor, 2),
            period_days=period_days,
        )
