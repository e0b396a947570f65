"""
User Repository Implementation.

Perfiles (tabla `profiles`) sobre SQLAlchemy async.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import desc, func, select

from goldsignal.domain.entities.user import User
from goldsignal.domain.repositories.user_repository import IUserRepository
from goldsignal.infrastructure.persistence.mappers.user_mapper import UserMapper
from goldsignal.infrastructure.persistence.models.user import UserModel
from goldsignal.infrastructure.persistence.repositories.base import SqlAlchemyRepository


class UserRepositoryImpl(SqlAlchemyRepository, IUserRepository):

    _mapper = UserMapper

    async def add(self, user: User) -> None:
        await self._insert(UserModel, self._mapper.to_model(user))

    async def get(self, user_id: str) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return self._mapper.to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        model = await self._session.scalar(
            select(UserModel).where(UserModel.email == email.lower())
        )
        return self._mapper.to_entity(model) if model else None

    async def update(self, user: User) -> None:
        await self._update(UserModel, "User", self._mapper.to_model(user))

    async def list(self, page: int = 1, limit: int = 20) -> Tuple[List[User], int]:
        total = await self._session.scalar(select(func.count()).select_from(UserModel))
        result = await self._session.execute(
            select(UserModel)
            .order_by(desc(UserModel.created_at))
            .limit(limit)
            .offset(self._offset(page, limit))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()], int(total or 0)

    async def find_active_subscribers(
        self, tiers: Optional[Sequence[str]] = None,
    ) -> List[User]:
        query = select(UserModel).where(UserModel.subscription_status == "active")
        if tiers is None:
            query = query.where(UserModel.subscription_tier != "free")
        else:
            query = query.where(UserModel.subscription_tier.in_(list(tiers)))
        result = await self._session.execute(query)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]
