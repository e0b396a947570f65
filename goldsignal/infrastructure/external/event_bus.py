"""
GoldSignal – Event Bus
========================
Bus de eventos en memoria: un asyncio.Queue por consumidor y tópico.

  publish(event) ──▸ tópico = event.topic ──▸ cola de cada consumidor

Si la cola de un consumidor está llena se descarta el evento más
antiguo (drop-oldest): un consumidor lento nunca bloquea al publicador.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Tuple

from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.domain.events.domain_events import DomainEvent
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("event_bus")


class EventBus(IEventPublisher):
    """
    Implementación de IEventPublisher con fan-out por asyncio.Queue.

    Las colas reciben el DomainEvent tal cual; cada consumidor decide
    si necesita to_dict().
    """

    def __init__(self, max_queue_size: int = 10_000):
        self._max_queue_size = max_queue_size
        self._subscribers: Dict[str, List[Tuple[asyncio.Queue, str]]] = {}
        self._lock = asyncio.Lock()
        self._published = 0
        self._dropped = 0

    async def publish(self, event: DomainEvent) -> None:
        topic = event.topic
        self._published += 1
        logger.debug("Evento %s → '%s'", event.__class__.__name__, topic)

        for queue, consumer_name in self._subscribers.get(topic, []):
            if queue.full():
                try:
                    queue.get_nowait()
                    self._dropped += 1
                    logger.warning(
                        "Cola llena para '%s' en '%s': evento antiguo descartado",
                        consumer_name, topic,
                    )
                except asyncio.QueueEmpty:
                    pass
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                self._dropped += 1
                logger.error("No se pudo encolar evento para '%s'", consumer_name)

    async def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """Registra un consumidor y devuelve su cola exclusiva."""
        async with self._lock:
            queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
            self._subscribers.setdefault(topic, []).append((queue, consumer_name))
            logger.info("Consumidor '%s' suscrito a '%s'", consumer_name, topic)
            return queue

    async def unsubscribe(self, topic: str, queue: asyncio.Queue) -> None:
        async with self._lock:
            remaining = [(q, n) for q, n in self._subscribers.get(topic, []) if q is not queue]
            if remaining:
                self._subscribers[topic] = remaining
            else:
                self._subscribers.pop(topic, None)

    async def unsubscribe_all(self, topic: Optional[str] = None) -> None:
        async with self._lock:
            if topic:
                self._subscribers.pop(topic, None)
            else:
                self._subscribers.clear()

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    @property
    def stats(self) -> dict:
        return {
            "published": self._published,
            "dropped": self._dropped,
            "topics": {t: len(subs) for t, subs in self._subscribers.items()},
        }
