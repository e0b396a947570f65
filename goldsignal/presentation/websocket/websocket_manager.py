"""
GoldSignal – WebSocket Manager (broadcast al dashboard)
=========================================================
Gestiona conexiones WebSocket del frontend y reenvía eventos del bus.

ARQUITECTURA:
  EventBus ──(price)────────────▸ WSManager._broadcast_loop()
  EventBus ──(signal_published)─▸ WSManager._broadcast_loop()
  EventBus ──(signal_closed)────▸ WSManager._broadcast_loop()
       │
       ▼
  [Cliente WS 1, Cliente WS 2, ...]

Mensaje enviado: {"type": <tópico>, "data": event.to_dict()}

Un cliente lento o caído se descarta sin afectar al resto
(envío con timeout de 5 s).
"""

from __future__ import annotations

import asyncio
import json
from typing import List, Sequence, Set

from fastapi import WebSocket, WebSocketDisconnect

from goldsignal.domain.events.domain_events import (
    PriceUpdated,
    SignalClosed,
    SignalPublished,
    SignalUpdated,
)
from goldsignal.infrastructure.external.event_bus import EventBus
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("ws_manager")

BROADCAST_TOPICS = (
    PriceUpdated.topic,
    SignalPublished.topic,
    SignalUpdated.topic,
    SignalClosed.topic,
)


class WebSocketManager:
    """Gestiona conexiones frontend y broadcast de eventos."""

    def __init__(self, event_bus: EventBus, topics: Sequence[str] = BROADCAST_TOPICS) -> None:
        self._event_bus = event_bus
        self._topics = tuple(topics)
        self._clients: Set[WebSocket] = set()
        self._broadcast_tasks: List[asyncio.Task] = []

    async def start(self) -> None:
        """Lanzar un loop de broadcast por tópico."""
        for topic in self._topics:
            queue = await self._event_bus.subscribe(topic, f"ws_broadcast_{topic}")
            self._broadcast_tasks.append(asyncio.create_task(
                self._broadcast_loop(queue, topic), name=f"ws-broadcast-{topic}",
            ))
        logger.info("WebSocketManager iniciado – broadcast de %s", ", ".join(self._topics))

    async def stop(self) -> None:
        for task in self._broadcast_tasks:
            task.cancel()
        if self._broadcast_tasks:
            await asyncio.gather(*self._broadcast_tasks, return_exceptions=True)
        self._broadcast_tasks.clear()

        for ws in list(self._clients):
            try:
                await ws.close()
            except (RuntimeError, WebSocketDisconnect):
                pass
        self._clients.clear()
        logger.info("WebSocketManager detenido")

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Cliente WS conectado. Total: %d", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        self._clients.discard(websocket)
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    async def broadcast(self, event_type: str, data: dict) -> int:
        """Envía un mensaje a todos los clientes; devuelve cuántos lo recibieron."""
        if not self._clients:
            return 0
        payload = json.dumps({"type": event_type, "data": data}, default=str)

        disconnected: List[WebSocket] = []
        clients = list(self._clients)
        await asyncio.gather(*(self._safe_send(ws, payload, disconnected) for ws in clients))
        for ws in disconnected:
            self._clients.discard(ws)
        return len(clients) - len(disconnected)

    async def _broadcast_loop(self, queue: asyncio.Queue, event_type: str) -> None:
        try:
            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue
                data = event.to_dict() if hasattr(event, "to_dict") else event
                await self.broadcast(event_type, data)
        except asyncio.CancelledError:
            pass

    async def _safe_send(
        self, ws: WebSocket, payload: str, disconnected: List[WebSocket],
    ) -> None:
        try:
            await asyncio.wait_for(ws.send_text(payload), timeout=5.0)
        except (WebSocketDisconnect, asyncio.TimeoutError, RuntimeError, OSError):
            disconnected.append(ws)

    @property
    def client_count(self) -> int:
        return len(self._clients)
