"""
GoldSignal – Signal Monitor Worker
====================================
Loop en segundo plano que vigila precio y suscripciones.

  cada signal_monitor_interval s     → MonitorSignalsUseCase.run_once()
  cada subscription_check_interval s → SubscriptionUseCase.check_expired()

Cada iteración abre su propia unidad de trabajo. Un fallo del
proveedor de precios (cuota agotada, timeout) se registra y el loop
sigue; con la cuota agotada no se vuelve a consultar hasta el día
siguiente (el adaptador lo rechaza sin hacer la llamada).
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from goldsignal.application.ports.errors import MarketDataError
from goldsignal.application.use_cases.monitor_signals_usecase import (
    MonitorResult,
    MonitorSignalsUseCase,
)
from goldsignal.application.use_cases.subscription_usecase import SubscriptionUseCase
from goldsignal.domain.exceptions.domain_errors import DomainError
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("worker.signal_monitor")


class SignalMonitorWorker:

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        monitor_factory: Callable[[IUnitOfWork], MonitorSignalsUseCase],
        subscription_factory: Callable[[IUnitOfWork], SubscriptionUseCase],
        interval: float = 30.0,
        subscription_interval: float = 3600.0,
    ):
        self._uow_factory = uow_factory
        self._monitor_factory = monitor_factory
        self._subscription_factory = subscription_factory
        self._interval = interval
        self._subscription_interval = subscription_interval
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._last_subscription_check = 0.0
        self.last_result: Optional[MonitorResult] = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="signal-monitor")
        logger.info(
            "SignalMonitor activo (precio cada %.0fs, suscripciones cada %.0fs)",
            self._interval, self._subscription_interval,
        )

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        logger.info("SignalMonitor detenido")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.check_signals()
                if time.monotonic() - self._last_subscription_check >= self._subscription_interval:
                    await self.check_subscriptions()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error en loop del monitor")
            try:
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break

    async def check_signals(self) -> Optional[MonitorResult]:
        async with self._uow_factory() as uow:
            try:
                result = await self._monitor_factory(uow).run_once()
            except MarketDataError as exc:
                if exc.quota_exhausted:
                    logger.warning("Monitor en pausa: %s", exc.message)
                else:
                    logger.error("Monitor sin precio: %s", exc.message)
                return None
            except DomainError as exc:
                logger.error("Error en monitor de señales: %s", exc.message)
                return None
        self.last_result = result
        if result.activated or result.closed:
            logger.info(
                "Monitor @ %.2f: %d revisadas, %d activadas, %d cerradas",
                result.price, result.checked, len(result.activated), len(result.closed),
            )
        return result

    async def check_subscriptions(self) -> int:
        self._last_subscription_check = time.monotonic()
        async with self._uow_factory() as uow:
            try:
                return await self._subscription_factory(uow).check_expired()
            except DomainError as exc:
                logger.error("Error revisando suscripciones: %s", exc.message)
                return 0
