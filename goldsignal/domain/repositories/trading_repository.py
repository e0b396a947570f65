"""
GoldSignal – Domain Repository Interfaces: Trading
====================================================
Cuentas de broker, configuración de auto-trading y ejecuciones.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from goldsignal.domain.entities.trade_execution import TradeExecution
from goldsignal.domain.entities.trading_account import AutoTradeSettings, TradingAccount


class ITradingAccountRepository(ABC):

    @abstractmethod
    async def add(self, account: TradingAccount) -> None:
        pass

    @abstractmethod
    async def get(self, account_id: str) -> Optional[TradingAccount]:
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[TradingAccount]:
        pass

    @abstractmethod
    async def find_by_broker_account(
        self, user_id: str, broker_name: str, broker_account_id: str,
    ) -> Optional[TradingAccount]:
        pass

    @abstractmethod
    async def find_active(self) -> List[TradingAccount]:
        pass

    @abstractmethod
    async def update(self, account: TradingAccount) -> None:
        pass


class IAutoTradeSettingsRepository(ABC):

    @abstractmethod
    async def add(self, settings: AutoTradeSettings) -> None:
        pass

    @abstractmethod
    async def get_for_account(self, trading_account_id: str) -> Optional[AutoTradeSettings]:
        pass

    @abstractmethod
    async def update(self, settings: AutoTradeSettings) -> None:
        pass


class ITradeExecutionRepository(ABC):

    @abstractmethod
    async def add(self, execution: TradeExecution) -> None:
        pass

    @abstractmethod
    async def update(self, execution: TradeExecution) -> None:
        pass

    @abstractmethod
    async def find_by_user(
        self, user_id: str, limit: int = 50, trading_account_id: Optional[str] = None,
    ) -> List[TradeExecution]:
        pass

    @abstractmethod
    async def find_open_for_signal(self, signal_id: str) -> List[TradeExecution]:
        pass

    @abstractmethod
    async def find_for_signal_and_account(
        self, signal_id: str, trading_account_id: str,
    ) -> Optional[TradeExecution]:
        pass

    @abstractmethod
    async def count_open(self, trading_account_id: str) -> int:
        pass

    @abstractmethod
    async def count_since(self, trading_account_id: str, since: datetime) -> int:
        pass

    @abstractmethod
    async def find_by_account(self, trading_account_id: str) -> List[TradeExecution]:
        pass
