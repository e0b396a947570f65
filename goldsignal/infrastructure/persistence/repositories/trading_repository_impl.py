"""
Trading Repository Implementations.

Cuentas de broker, settings de auto-trading y ejecuciones.

Una ejecución "abierta" es la que está FILLED en el broker; las
PENDING/CANCELLED no ocupan hueco de trades concurrentes. Los trades
del día sí cuentan cualquier intento excepto los cancelados.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc, func, select

from goldsignal.domain.entities.trade_execution import TradeExecution
from goldsignal.domain.entities.trading_account import AutoTradeSettings, TradingAccount
from goldsignal.domain.repositories.trading_repository import (
    IAutoTradeSettingsRepository,
    ITradeExecutionRepository,
    ITradingAccountRepository,
)
from goldsignal.infrastructure.persistence.mappers.trading_mapper import (
    AutoTradeSettingsMapper,
    TradeExecutionMapper,
    TradingAccountMapper,
)
from goldsignal.infrastructure.persistence.models.trading import (
    AutoTradeSettingsModel,
    TradeExecutionModel,
    TradingAccountModel,
)
from goldsignal.infrastructure.persistence.repositories.base import SqlAlchemyRepository


class TradingAccountRepositoryImpl(SqlAlchemyRepository, ITradingAccountRepository):

    _mapper = TradingAccountMapper

    async def add(self, account: TradingAccount) -> None:
        await self._insert(TradingAccountModel, self._mapper.to_model(account))

    async def get(self, account_id: str) -> Optional[TradingAccount]:
        model = await self._session.get(TradingAccountModel, account_id)
        return self._mapper.to_entity(model) if model else None

    async def find_by_user(self, user_id: str) -> List[TradingAccount]:
        result = await self._session.execute(
            select(TradingAccountModel)
            .where(TradingAccountModel.user_id == user_id)
            .order_by(desc(TradingAccountModel.created_at))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_by_broker_account(
        self, user_id: str, broker_name: str, broker_account_id: str,
    ) -> Optional[TradingAccount]:
        model = await self._session.scalar(
            select(TradingAccountModel).where(
                TradingAccountModel.user_id == user_id,
                TradingAccountModel.broker_name == broker_name,
                TradingAccountModel.account_id == broker_account_id,
            )
        )
        return self._mapper.to_entity(model) if model else None

    async def find_active(self) -> List[TradingAccount]:
        result = await self._session.execute(
            select(TradingAccountModel)
            .where(TradingAccountModel.status == "active")
            .order_by(TradingAccountModel.created_at)
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def update(self, account: TradingAccount) -> None:
        await self._update(TradingAccountModel, "TradingAccount", self._mapper.to_model(account))


class AutoTradeSettingsRepositoryImpl(SqlAlchemyRepository, IAutoTradeSettingsRepository):

    _mapper = AutoTradeSettingsMapper

    async def add(self, settings: AutoTradeSettings) -> None:
        await self._insert(AutoTradeSettingsModel, self._mapper.to_model(settings))

    async def get_for_account(self, trading_account_id: str) -> Optional[AutoTradeSettings]:
        model = await self._session.scalar(
            select(AutoTradeSettingsModel)
            .where(AutoTradeSettingsModel.trading_account_id == trading_account_id)
        )
        return self._mapper.to_entity(model) if model else None

    async def update(self, settings: AutoTradeSettings) -> None:
        await self._update(AutoTradeSettingsModel, "AutoTradeSettings", self._mapper.to_model(settings))


class TradeExecutionRepositoryImpl(SqlAlchemyRepository, ITradeExecutionRepository):

    _mapper = TradeExecutionMapper

    async def add(self, execution: TradeExecution) -> None:
        await self._insert(TradeExecutionModel, self._mapper.to_model(execution))

    async def update(self, execution: TradeExecution) -> None:
        await self._update(TradeExecutionModel, "TradeExecution", self._mapper.to_model(execution))

    async def find_by_user(
        self, user_id: str, limit: int = 50, trading_account_id: Optional[str] = None,
    ) -> List[TradeExecution]:
        query = select(TradeExecutionModel).where(TradeExecutionModel.user_id == user_id)
        if trading_account_id:
            query = query.where(TradeExecutionModel.trading_account_id == trading_account_id)
        result = await self._session.execute(
            query.order_by(desc(TradeExecutionModel.created_at)).limit(limit)
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_open_for_signal(self, signal_id: str) -> List[TradeExecution]:
        result = await self._session.execute(
            select(TradeExecutionModel).where(
                TradeExecutionModel.signal_id == signal_id,
                TradeExecutionModel.status == "filled",
            )
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def find_for_signal_and_account(
        self, signal_id: str, trading_account_id: str,
    ) -> Optional[TradeExecution]:
        model = await self._session.scalar(
            select(TradeExecutionModel).where(
                TradeExecutionModel.signal_id == signal_id,
                TradeExecutionModel.trading_account_id == trading_account_id,
            )
        )
        return self._mapper.to_entity(model) if model else None

    async def count_open(self, trading_account_id: str) -> int:
        total = await self._session.scalar(
            select(func.count())
            .select_from(TradeExecutionModel)
            .where(
                TradeExecutionModel.trading_account_id == trading_account_id,
                TradeExecutionModel.status == "filled",
            )
        )
        return int(total or 0)

    async def count_since(self, trading_account_id: str, since: datetime) -> int:
        total = await self._session.scalar(
            select(func.count())
            .select_from(TradeExecutionModel)
            .where(
                TradeExecutionModel.trading_account_id == trading_account_id,
                TradeExecutionModel.status != "cancelled",
                TradeExecutionModel.created_at >= since,
            )
        )
        return int(total or 0)

    async def find_by_account(self, trading_account_id: str) -> List[TradeExecution]:
        result = await self._session.execute(
            select(TradeExecutionModel)
            .where(TradeExecutionModel.trading_account_id == trading_account_id)
            .order_by(desc(TradeExecutionModel.created_at))
        )
        return [self._mapper.to_entity(m) for m in result.scalars().all()]
