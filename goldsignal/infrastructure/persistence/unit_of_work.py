"""
GoldSignal – SQLAlchemy Unit of Work
======================================
Una AsyncSession compartida por todos los repositorios.

USO (por request o por iteración de un worker):
    async with SqlAlchemyUnitOfWork(db.get_session) as uow:
        ...
        await uow.commit()

Al salir se hace rollback de lo no confirmado y se cierra la sesión
si la abrió el propio UoW.
"""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.infrastructure.persistence.repositories import (
    AutoTradeSettingsRepositoryImpl,
    NotificationRepositoryImpl,
    SignalRepositoryImpl,
    SubscriptionRepositoryImpl,
    TradeExecutionRepositoryImpl,
    TradingAccountRepositoryImpl,
    UserRepositoryImpl,
)


class SqlAlchemyUnitOfWork(IUnitOfWork):

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        session: Optional[AsyncSession] = None,
    ):
        if session is None and session_factory is None:
            raise ValueError("Se requiere session o session_factory")
        self._owns_session = session is None
        self._session = session if session is not None else session_factory()
        self._bind_repositories()

    def _bind_repositories(self) -> None:
        s = self._session
        self.signals = SignalRepositoryImpl(s)
        self.users = UserRepositoryImpl(s)
        self.subscriptions = SubscriptionRepositoryImpl(s)
        self.accounts = TradingAccountRepositoryImpl(s)
        self.auto_trade_settings = AutoTradeSettingsRepositoryImpl(s)
        self.executions = TradeExecutionRepositoryImpl(s)
        self.notifications = NotificationRepositoryImpl(s)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()
        if self._owns_session:
            await self._session.close()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
