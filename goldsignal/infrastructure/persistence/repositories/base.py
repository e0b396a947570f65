"""Helpers comunes a los repositorios SQLAlchemy."""

from __future__ import annotations

from typing import Any, Dict, Type

from sqlalchemy.ext.asyncio import AsyncSession

from goldsignal.domain.exceptions.domain_errors import EntityNotFoundError
from goldsignal.infrastructure.persistence.database import Base


class SqlAlchemyRepository:

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _insert(self, model_cls: Type[Base], data: Dict[str, Any]) -> None:
        self._session.add(model_cls(**data))
        await self._session.flush()

    async def _update(self, model_cls: Type[Base], entity: str, data: Dict[str, Any]) -> None:
        model = await self._session.get(model_cls, data["id"])
        if model is None:
            raise EntityNotFoundError(entity, data["id"])
        for name, value in data.items():
            if name != "id":
                setattr(model, name, value)
        await self._session.flush()

    @staticmethod
    def _offset(page: int, limit: int) -> int:
        return max(page - 1, 0) * limit
