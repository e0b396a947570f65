"""
GoldSignal – Notification Use Case
=====================================
Bandeja de notificaciones in-app.

Los métodos ``queue_*`` solo agregan filas a la unidad de trabajo
actual; los usa otro caso de uso que luego hace commit. El resto de
operaciones hacen commit propio.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from goldsignal.application.dto.signal_dto import PageDTO
from goldsignal.domain.entities.notification import Notification, NotificationType
from goldsignal.domain.exceptions.domain_errors import EntityNotFoundError
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.notifications")


class NotificationUseCase:

    def __init__(self, uow: IUnitOfWork):
        self._uow = uow

    # ─── Operaciones del usuario ────────────────────────────────────────

    async def create(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.SYSTEM,
        signal_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=NotificationType(type),
            signal_id=signal_id,
        )
        await self._uow.notifications.add(notification)
        await self._uow.commit()
        return notification

    async def list_for_user(
        self, user_id: str, page: int = 1, limit: int = 20, unread_only: bool = False,
    ) -> PageDTO[Notification]:
        items, total = await self._uow.notifications.list_for_user(
            user_id, page=page, limit=limit, unread_only=unread_only,
        )
        return PageDTO(items=items, total=total, page=page, limit=limit)

    async def mark_read(self, notification_id: str, user_id: str) -> None:
        if not await self._uow.notifications.mark_read(notification_id, user_id):
            raise EntityNotFoundError("Notification", notification_id)
        await self._uow.commit()

    async def mark_all_read(self, user_id: str) -> int:
        updated = await self._uow.notifications.mark_all_read(user_id)
        await self._uow.commit()
        return updated

    async def delete(self, notification_id: str, user_id: str) -> None:
        if not await self._uow.notifications.delete(notification_id, user_id):
            raise EntityNotFoundError("Notification", notification_id)
        await self._uow.commit()

    async def unread_count(self, user_id: str) -> int:
        return await self._uow.notifications.unread_count(user_id)

    # ─── Envíos masivos ─────────────────────────────────────────────────

    async def send_bulk(self, notifications: Sequence[Notification]) -> int:
        sent = await self._uow.notifications.add_many(notifications)
        await self._uow.commit()
        logger.info("Notificaciones enviadas: %d", sent)
        return sent

    async def send_system_notification(
        self,
        title: str,
        message: str,
        tiers: Optional[Sequence[str]] = None,
    ) -> int:
        """
        Anuncio de sistema a usuarios con suscripción activa.

        Args:
            tiers: Tiers destinatarios; None o vacío = todos los usuarios activos
        """
        if not tiers:
            tiers = ("free", "basic", "premium", "vip")
        users = await self._uow.users.find_active_subscribers(tiers=tiers)
        sent = await self._uow.notifications.add_many([
            Notification(user_id=u.id, title=title, message=message,
                         type=NotificationType.SYSTEM)
            for u in users
        ])
        await self._uow.commit()
        logger.info("Anuncio de sistema '%s' enviado a %d usuarios", title, sent)
        return sent

    # ─── Helpers para otros casos de uso (sin commit) ───────────────────

    async def queue_for_subscribers(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.SIGNAL,
        signal_id: Optional[str] = None,
        tiers: Optional[Sequence[str]] = None,
    ) -> int:
        """Encola la notificación para suscriptores activos (no free por defecto)."""
        users = await self._uow.users.find_active_subscribers(tiers=tiers)
        notifications: List[Notification] = [
            Notification(
                user_id=u.id,
                title=title,
                message=message,
                type=NotificationType(type),
                signal_id=signal_id,
            )
            for u in users
        ]
        if not notifications:
            return 0
        return await self._uow.notifications.add_many(notifications)

    async def queue(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType,
    ) -> Notification:
        notification = Notification(
            user_id=user_id, title=title, message=message, type=NotificationType(type),
        )
        await self._uow.notifications.add(notification)
        return notification
