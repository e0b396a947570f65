"""
GoldSignal – Domain Repository Interface: Notification
========================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from goldsignal.domain.entities.notification import Notification


class INotificationRepository(ABC):

    @abstractmethod
    async def add(self, notification: Notification) -> None:
        pass

    @abstractmethod
    async def add_many(self, notifications: Sequence[Notification]) -> int:
        pass

    @abstractmethod
    async def get(self, notification_id: str) -> Optional[Notification]:
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: str, page: int = 1, limit: int = 20, unread_only: bool = False,
    ) -> Tuple[List[Notification], int]:
        pass

    @abstractmethod
    async def mark_read(self, notification_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        pass

    @abstractmethod
    async def delete(self, notification_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    async def unread_count(self, user_id: str) -> int:
        pass
