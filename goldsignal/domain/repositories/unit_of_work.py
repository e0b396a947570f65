"""
GoldSignal – Unit of Work Interface
=====================================
Agrupa los repositorios que comparten una transacción.

USO:
    async with uow:
        signal = await uow.signals.get(signal_id)
        ...
        await uow.commit()

Salir del bloque sin commit() descarta los cambios.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from goldsignal.domain.repositories.notification_repository import INotificationRepository
from goldsignal.domain.repositories.signal_repository import ISignalRepository
from goldsignal.domain.repositories.subscription_repository import ISubscriptionRepository
from goldsignal.domain.repositories.trading_repository import (
    IAutoTradeSettingsRepository,
    ITradeExecutionRepository,
    ITradingAccountRepository,
)
from goldsignal.domain.repositories.user_repository import IUserRepository


class IUnitOfWork(ABC):
    signals: ISignalRepository
    users: IUserRepository
    subscriptions: ISubscriptionRepository
    accounts: ITradingAccountRepository
    auto_trade_settings: IAutoTradeSettingsRepository
    executions: ITradeExecutionRepository
    notifications: INotificationRepository

    async def __aenter__(self) -> "IUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
