"""
Signal Repository Implementation.

Implementación concreta del repositorio de señales usando SQLAlchemy.
Implementa la interfaz ISignalRepository del dominio.

Clean Architecture: Esta clase está en infrastructure y depende de domain.
El dominio NO conoce esta implementación.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, func, select

from goldsignal.domain.entities.signal import Signal
from goldsignal.domain.repositories.signal_repository import ISignalRepository
from goldsignal.infrastructure.persistence.mappers.signal_mapper import SignalMapper
from goldsignal.infrastructure.persistence.models.signal import SignalModel
from goldsignal.infrastructure.persistence.repositories.base import SqlAlchemyRepository
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("infrastructure.signal_repository")


class SignalRepositoryImpl(SqlAlchemyRepository, ISignalRepository):
    """
    Implementación async del repositorio de señales.
    """

    _mapper = SignalMapper

    async def add(self, signal: Signal) -> None:
        await self._insert(SignalModel, self._mapper.to_model(signal))
        logger.debug("Signal guardada: id=%s symbol=%s", signal.id, signal.symbol)

    async def get(self, signal_id: str) -> Optional[Signal]:
        model = await self._session.get(SignalModel, signal_id)
        return self._mapper.to_entity(model) if model else None

    async def update(self, signal: Signal) -> None:
        await self._update(SignalModel, "Signal", self._mapper.to_model(signal))

    async def delete(self, signal_id: str) -> bool:
        result = await self._session.execute(
            delete(SignalModel).where(SignalModel.id == signal_id)
        )
        await self._session.flush()
        return result.rowcount > 0

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        symbol: Optional[str] = None,
        status: Optional[str] = None,
        signal_type: Optional[str] = None,
    ) -> Tuple[List[Signal], int]:
        filters = []
        if symbol:
            filters.append(SignalModel.symbol == symbol.upper())
        if status:
            filters.append(SignalModel.status == status)
        if signal_type:
            filters.append(SignalModel.signal_type == signal_type.lower())

        total = await self._session.scalar(
            select(func.count()).select_from(SignalModel).where(*filters)
        )
        result = await self._session.execute(
            select(SignalModel)
            .where(*filters)
            .order_by(desc(SignalModel.created_at))
            .limit(limit)
            .offset(self._offset(page, limit))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()], int(total or 0)

    async def find_open(self) -> List[Signal]:
        result = await self._session.execute(
            select(SignalModel)
            .where(SignalModel.status.in_(("active", "pending")))
            .order_by(SignalModel.created_at)
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_active(self) -> List[Signal]:
        result = await self._session.execute(
            select(SignalModel)
            .where(SignalModel.status == "active")
            .order_by(desc(SignalModel.created_at))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_by_symbol(self, symbol: str, limit: int = 50) -> List[Signal]:
        result = await self._session.execute(
            select(SignalModel)
            .where(SignalModel.symbol == symbol)
            .order_by(desc(SignalModel.created_at))
            .limit(limit)
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_closed_since(self, since: datetime) -> List[Signal]:
        result = await self._session.execute(
            select(SignalModel)
            .where(SignalModel.status == "closed", SignalModel.closed_at >= since)
            .order_by(desc(SignalModel.closed_at))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_recent(self, since: datetime, limit: Optional[int] = None) -> List[Signal]:
        query = (
            select(SignalModel)
            .where(SignalModel.created_at >= since)
            .order_by(desc(SignalModel.created_at))
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]
