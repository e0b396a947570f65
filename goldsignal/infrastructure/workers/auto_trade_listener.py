"""
GoldSignal – Auto Trade Listener
==================================
Escucha eventos del EventBus y dispara el auto-trading.

  EventBus                      AutoTradeListener
  ┌────────────────┐              ┌─────────────┐
  │signal_published│ ───Queue───▸ │ _consume()  │──▸ execute_signal()
  └────────────────┘              │   loop      │
  ┌─────────────┐                 │             │
  │signal_closed│ ──────Queue───▸ │ _consume()  │──▸ close_signal_executions()
  └─────────────┘                 └─────────────┘

El caso de uso no conoce el bus; este listener es el pegamento.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List

from goldsignal.application.use_cases.auto_trade_usecase import AutoTradeUseCase
from goldsignal.domain.events.domain_events import DomainEvent, SignalClosed, SignalPublished
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.infrastructure.external.event_bus import EventBus
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("worker.auto_trade")


class AutoTradeListener:

    def __init__(
        self,
        event_bus: EventBus,
        uow_factory: Callable[[], IUnitOfWork],
        auto_trade_factory: Callable[[IUnitOfWork], AutoTradeUseCase],
    ):
        self._event_bus = event_bus
        self._uow_factory = uow_factory
        self._auto_trade_factory = auto_trade_factory
        self._running = False
        self._tasks: List[asyncio.Task] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        logger.info("Iniciando AutoTradeListener...")
        self._running = True

        published_queue = await self._event_bus.subscribe(
            SignalPublished.topic, consumer_name="auto_trade_published",
        )
        closed_queue = await self._event_bus.subscribe(
            SignalClosed.topic, consumer_name="auto_trade_closed",
        )
        self._tasks.append(asyncio.create_task(
            self._consume_loop(published_queue, self._on_signal_published, SignalPublished.topic)
        ))
        self._tasks.append(asyncio.create_task(
            self._consume_loop(closed_queue, self._on_signal_closed, SignalClosed.topic)
        ))
        logger.info("AutoTradeListener activo – escuchando signal_published, signal_closed")

    async def stop(self) -> None:
        self._running = False
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("AutoTradeListener detenido")

    async def _consume_loop(
        self,
        queue: asyncio.Queue,
        handler: Callable[[DomainEvent], Awaitable[None]],
        topic: str,
    ) -> None:
        while self._running:
            try:
                event = await asyncio.wait_for(queue.get(), timeout=1.0)
                await handler(event)
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error en consume_loop (%s)", topic)

    # ════════════════════════════════════════════════════════════════
    #  Event Handlers
    # ════════════════════════════════════════════════════════════════

    async def _on_signal_published(self, event: SignalPublished) -> None:
        async with self._uow_factory() as uow:
            await self._auto_trade_factory(uow).execute_signal(event.signal_id)

    async def _on_signal_closed(self, event: SignalClosed) -> None:
        async with self._uow_factory() as uow:
            await self._auto_trade_factory(uow).close_signal_executions(event.signal_id)
