"""
GoldSignal – Monitor Signals Use Case
========================================
Una pasada del monitor de precios.

FLUJO:
  1. Precio del oro (consume 1 request de cuota salvo cache)
  2. Publica PriceUpdated para el dashboard
  3. Clasifica cada señal abierta
  4. Las que tocaron TP/SL se cierran al nivel alcanzado
     (no al precio actual: un gap no debe inflar el resultado)

El loop que llama a run_once() vive en infraestructura
(SignalMonitorWorker); aquí no hay sleeps ni tareas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.application.use_cases.manage_signals_usecase import ManageSignalsUseCase
from goldsignal.domain.entities.signal import SignalLifecycle
from goldsignal.domain.events.domain_events import PriceUpdated
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.domain.value_objects.signal_status import SignalStatus
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.monitor")


@dataclass
class MonitorResult:
    price: Optional[float] = None
    checked: int = 0
    activated: List[str] = field(default_factory=list)
    closed: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "checked": self.checked,
            "activated": list(self.activated),
            "closed": list(self.closed),
        }


class MonitorSignalsUseCase:

    def __init__(
        self,
        uow: IUnitOfWork,
        market_data: IMarketDataProvider,
        event_publisher: IEventPublisher,
        status_calculator: SignalStatusCalculator,
        manage_signals: ManageSignalsUseCase,
        symbol: str = "XAUUSD",
    ):
        self._uow = uow
        self._market_data = market_data
        self._publisher = event_publisher
        self._calculator = status_calculator
        self._signals = manage_signals
        self._symbol = symbol

    async def run_once(self, price: Optional[float] = None) -> MonitorResult:
        """
        Evalúa las señales abiertas contra el precio.

        Args:
            price: Precio a usar; None = consultar al proveedor

        Raises:
            MarketDataError: si el proveedor falla
        """
        if price is None:
            price = await self._market_data.get_gold_price()
        result = MonitorResult(price=price)

        await self._publisher.publish(PriceUpdated(symbol=self._symbol, price=price))

        open_signals = await self._uow.signals.find_open()
        result.checked = len(open_signals)

        for signal in open_signals:
            info = self._calculator.calculate(signal, price)

            if signal.status == SignalLifecycle.PENDING:
                # Solo se cierran señales que llegaron a estar activas
                if info.status == SignalStatus.ACTIVE:
                    signal.activate()
                    await self._uow.signals.update(signal)
                    await self._uow.commit()
                    result.activated.append(signal.id)
                continue

            if not info.is_terminal:
                continue

            exit_price = (
                signal.take_profit if info.status == SignalStatus.HIT_TP else signal.stop_loss
            )
            await self._signals.close(
                signal.id,
                result=self._calculator.result_for(info),
                exit_price=exit_price,
                automatic=True,
            )
            result.closed.append(signal.id)
            logger.info("🎯 %s → %s @ %.2f", signal.id, info.status_text, price)

        return result
