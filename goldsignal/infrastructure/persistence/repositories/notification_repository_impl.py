"""
Notification Repository Implementation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, desc, func, select, update

from goldsignal.domain.entities.notification import Notification
from goldsignal.domain.repositories.notification_repository import INotificationRepository
from goldsignal.infrastructure.persistence.mappers.user_mapper import NotificationMapper
from goldsignal.infrastructure.persistence.models.notification import NotificationModel
from goldsignal.infrastructure.persistence.repositories.base import SqlAlchemyRepository


class NotificationRepositoryImpl(SqlAlchemyRepository, INotificationRepository):

    _mapper = NotificationMapper

    async def add(self, notification: Notification) -> None:
        await self._insert(NotificationModel, self._mapper.to_model(notification))

    async def add_many(self, notifications: Sequence[Notification]) -> int:
        if not notifications:
            return 0
        self._session.add_all([NotificationModel(**self._mapper.to_model(n)) for n in notifications])
        await self._session.flush()
        return len(notifications)

    async def get(self, notification_id: str) -> Optional[Notification]:
        model = await self._session.get(NotificationModel, notification_id)
        return self._mapper.to_entity(model) if model else None

    async def list_for_user(
        self, user_id: str, page: int = 1, limit: int = 20, unread_only: bool = False,
    ) -> Tuple[List[Notification], int]:
        filters = [NotificationModel.user_id == user_id]
        if unread_only:
            filters.append(NotificationModel.read.is_(False))

        total = await self._session.scalar(
            select(func.count()).select_from(NotificationModel).where(*filters)
        )
        result = await self._session.execute(
            select(NotificationModel)
            .where(*filters)
            .order_by(desc(NotificationModel.created_at))
            .limit(limit)
            .offset(self._offset(page, limit))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()], int(total or 0)

    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            update(NotificationModel)
            .where(NotificationModel.id == notification_id, NotificationModel.user_id == user_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def mark_all_read(self, user_id: str) -> int:
        result = await self._session.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete(self, notification_id: str, user_id: str) -> bool:
        result = await self._session.execute(
            delete(NotificationModel)
            .where(NotificationModel.id == notification_id, NotificationModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def unread_count(self, user_id: str) -> int:
        total = await self._session.scalar(
            select(func.count())
            .select_from(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.read.is_(False))
        )
        return int(total or 0)
