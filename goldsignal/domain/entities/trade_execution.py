"""
GoldSignal – Domain Entity: Trade Execution
==============================================
Orden real (o demo) colocada en el broker a partir de una señal.

CICLO DE VIDA:
  PENDING ──(broker confirma)──▸ FILLED ──(señal cierra)──▸ CLOSED
     └──(broker rechaza)──▸ CANCELLED

CÁLCULO DE PnL:
  Lo informa el broker al cerrar (incluye comisión); aquí solo
  se registra.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from goldsignal.domain.entities.signal import SignalType, utcnow
from goldsignal.domain.exceptions.domain_errors import InvalidTradeError


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    FILLED = "filled"
    CANCELLED = "cancelled"
    CLOSED = "closed"


@dataclass(slots=True)
class TradeExecution:
    signal_id: str
    user_id: str
    trading_account_id: str
    symbol: str
    trade_type: SignalType
    lot_size: float
    entry_price: float
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    status: ExecutionStatus = ExecutionStatus.PENDING
    broker_order_id: Optional[str] = None
    actual_entry_price: Optional[float] = None
    actual_exit_price: Optional[float] = None
    profit_loss: float = 0.0
    commission: float = 0.0
    swap: float = 0.0
    execution_time: Optional[datetime] = None
    close_time: Optional[datetime] = None
    error_message: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)

    # ════════════════════════════════════════════════════════════════
    #  TRANSICIONES DE ESTADO
    # ════════════════════════════════════════════════════════════════

    def fill(self, broker_order_id: str, price: float, commission: float = 0.0,
             at: Optional[datetime] = None) -> None:
        if self.status != ExecutionStatus.PENDING:
            raise InvalidTradeError(
                f"fill() solo desde PENDING, actual={self.status.value}", trade_id=self.id,
            )
        self.broker_order_id = broker_order_id
        self.actual_entry_price = price
        self.commission = commission
        self.execution_time = at or utcnow()
        self.status = ExecutionStatus.FILLED

    def cancel(self, reason: str) -> None:
        if self.status != ExecutionStatus.PENDING:
            raise InvalidTradeError(
                f"cancel() solo desde PENDING, actual={self.status.value}", trade_id=self.id,
            )
        self.error_message = reason
        self.status = ExecutionStatus.CANCELLED

    def close(self, exit_price: float, profit_loss: float,
              at: Optional[datetime] = None) -> None:
        if self.status != ExecutionStatus.FILLED:
            raise InvalidTradeError(
                f"close() solo desde FILLED, actual={self.status.value}", trade_id=self.id,
            )
        self.actual_exit_price = exit_price
        self.profit_loss = profit_loss
        self.close_time = at or utcnow()
        self.status = ExecutionStatus.CLOSED

    @property
    def is_open(self) -> bool:
        return self.status == ExecutionStatus.FILLED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "signal_id": self.signal_id,
            "user_id": self.user_id,
            "trading_account_id": self.trading_account_id,
            "symbol": self.symbol,
            "trade_type": self.trade_type.value,
            "lot_size": self.lot_size,
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "status": self.status.value,
            "broker_order_id": self.broker_order_id,
            "actual_entry_price": self.actual_entry_price,
            "actual_exit_price": self.actual_exit_price,
            "profit_loss": round(self.profit_loss, 2),
            "commission": round(self.commission, 2),
            "swap": round(self.swap, 2),
            "execution_time": self.execution_time.isoformat() if self.execution_time else None,
            "close_time": self.close_time.isoformat() if self.close_time else None,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat(),
        }
