"""
GoldSignal – Application Port: Event Publisher
================================================
Interfaz para publicar eventos a sistemas externos.

Los use cases publican eventos; la infraestructura
decide CÓMO entregar esos eventos (EventBus en memoria,
WebSocket, etc.)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from goldsignal.domain.events.domain_events import DomainEvent


class IEventPublisher(ABC):
    """
    Interfaz para publicar eventos del sistema.

    IMPLEMENTACIONES:
    - EventBus (memoria/async)
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publica un evento en el tópico event.topic.

        Args:
            event: Evento de dominio (serializable vía to_dict)
        """
        pass
