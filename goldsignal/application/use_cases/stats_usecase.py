"""
Stats Use Case.

Caso de uso para calcular el rendimiento de las señales publicadas.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.performance_calculator import PerformanceCalculator
from goldsignal.domain.value_objects.signal_performance import SignalPerformance


class StatsUseCase:
    """
    Caso de uso: métricas de señales cerradas en los últimos N días.
    """

    def __init__(self, uow: IUnitOfWork):
        self._uow = uow

    async def signal_performance(
        self, days: int = 30, now: Optional[datetime] = None,
    ) -> SignalPerformance:
        """
        Args:
            days: Ventana hacia atrás sobre closed_at

        Returns:
            SignalPerformance redondeado a 2 decimales
        """
        now = now or datetime.now(timezone.utc)
        closed = await self._uow.signals.find_closed_since(now - timedelta(days=days))
        return PerformanceCalculator.calculate(closed, period_days=days)
