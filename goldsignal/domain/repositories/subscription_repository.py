"""
GoldSignal – Domain Repository Interface: Subscription
========================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from goldsignal.domain.entities.subscription import Subscription


class ISubscriptionRepository(ABC):

    @abstractmethod
    async def add(self, subscription: Subscription) -> None:
        pass

    @abstractmethod
    async def get(self, subscription_id: str) -> Optional[Subscription]:
        pass

    @abstractmethod
    async def get_by_payment_reference(self, reference: str) -> Optional[Subscription]:
        pass

    @abstractmethod
    async def find_active_for_user(self, user_id: str) -> Optional[Subscription]:
        """Suscripción activa más reciente del usuario."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[Subscription]:
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> None:
        pass

    @abstractmethod
    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> Tuple[List[Subscription], int]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Subscription]:
        pass

    @abstractmethod
    async def find_expired(self, now: datetime) -> List[Subscription]:
        """Suscripciones ACTIVE con current_period_end < now."""
        pass
