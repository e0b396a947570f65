"""
Subscription Repository Implementation.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import desc, func, select

from goldsignal.domain.entities.subscription import Subscription
from goldsignal.domain.repositories.subscription_repository import ISubscriptionRepository
from goldsignal.infrastructure.persistence.mappers.user_mapper import SubscriptionMapper
from goldsignal.infrastructure.persistence.models.user import SubscriptionModel
from goldsignal.infrastructure.persistence.repositories.base import SqlAlchemyRepository


class SubscriptionRepositoryImpl(SqlAlchemyRepository, ISubscriptionRepository):

    _mapper = SubscriptionMapper

    async def add(self, subscription: Subscription) -> None:
        await self._insert(SubscriptionModel, self._mapper.to_model(subscription))

    async def get(self, subscription_id: str) -> Optional[Subscription]:
        model = await self._session.get(SubscriptionModel, subscription_id)
        return self._mapper.to_entity(model) if model else None

    async def get_by_payment_reference(self, reference: str) -> Optional[Subscription]:
        model = await self._session.scalar(
            select(SubscriptionModel).where(SubscriptionModel.payment_reference == reference)
        )
        return self._mapper.to_entity(model) if model else None

    async def find_active_for_user(self, user_id: str) -> Optional[Subscription]:
        model = await self._session.scalar(
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id, SubscriptionModel.status == "active")
            .order_by(desc(SubscriptionModel.current_period_end))
            .limit(1)
        )
        return self._mapper.to_entity(model) if model else None

    async def list_for_user(self, user_id: str) -> List[Subscription]:
        result = await self._session.execute(
            select(SubscriptionModel)
            .where(SubscriptionModel.user_id == user_id)
            .order_by(desc(SubscriptionModel.created_at))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def update(self, subscription: Subscription) -> None:
        await self._update(SubscriptionModel, "Subscription", self._mapper.to_model(subscription))

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> Tuple[List[Subscription], int]:
        filters = []
        if status:
            filters.append(SubscriptionModel.status == status)
        if plan_id:
            filters.append(SubscriptionModel.plan_id == plan_id)

        total = await self._session.scalar(
            select(func.count()).select_from(SubscriptionModel).where(*filters)
        )
        result = await self._session.execute(
            select(SubscriptionModel)
            .where(*filters)
            .order_by(desc(SubscriptionModel.created_at))
            .limit(limit)
            .offset(self._offset(page, limit))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()], int(total or 0)

    async def list_all(self) -> List[Subscription]:
        result = await self._session.execute(select(SubscriptionModel))
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_expired(self, now: datetime) -> List[Subscription]:
        result = await self._session.execute(
            select(SubscriptionModel).where(
                SubscriptionModel.status == "active",
                SubscriptionModel.current_period_end < now,
            )
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]
