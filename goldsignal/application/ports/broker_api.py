"""
GoldSignal – Application Port: Broker API
===========================================
Interfaz común de brokers para el auto-trading.

Los errores operativos (orden rechazada, sin conexión) se devuelven
en OrderResult/CloseResult; credenciales inválidas lanzan BrokerError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from goldsignal.domain.value_objects.broker_types import (
    AccountInfo,
    BrokerCredentials,
    CloseResult,
    HistoryEntry,
    OrderRequest,
    OrderResult,
    Position,
    SymbolInfo,
)


class IBrokerAPI(ABC):

    name: str = "broker"

    @abstractmethod
    async def get_account_info(self, credentials: BrokerCredentials) -> AccountInfo:
        pass

    @abstractmethod
    async def get_symbol_info(self, symbol: str) -> SymbolInfo:
        pass

    @abstractmethod
    async def get_current_price(self, symbol: str) -> tuple[float, float]:
        """(bid, ask)"""
        pass

    @abstractmethod
    async def place_order(
        self, credentials: BrokerCredentials, order: OrderRequest,
    ) -> OrderResult:
        pass

    @abstractmethod
    async def close_order(self, credentials: BrokerCredentials, order_id: str) -> CloseResult:
        pass

    @abstractmethod
    async def modify_order(
        self,
        credentials: BrokerCredentials,
        order_id: str,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
    ) -> bool:
        pass

    @abstractmethod
    async def get_open_positions(self, credentials: BrokerCredentials) -> List[Position]:
        pass

    @abstractmethod
    async def get_trade_history(
        self,
        credentials: BrokerCredentials,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> List[HistoryEntry]:
        pass
