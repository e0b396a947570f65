"""
GoldSignal – Domain Repository Interface: User
================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from goldsignal.domain.entities.user import User


class IUserRepository(ABC):

    @abstractmethod
    async def add(self, user: User) -> None:
        pass

    @abstractmethod
    async def get(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update(self, user: User) -> None:
        pass

    @abstractmethod
    async def list(self, page: int = 1, limit: int = 20) -> Tuple[List[User], int]:
        pass

    @abstractmethod
    async def find_active_subscribers(
        self, tiers: Optional[Sequence[str]] = None,
    ) -> List[User]:
        """
        Usuarios con subscription_status active.

        Args:
            tiers: Si se indica, solo esos tiers; si no, todos menos free
        """
        pass
