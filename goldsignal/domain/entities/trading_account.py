"""
GoldSignal – Domain Entity: Trading Account
==============================================
Cuenta de broker conectada por el usuario y su configuración de
auto-trading.

DECISIONES DE DISEÑO:
- peak_balance guarda el máximo balance observado en cada sync;
  el drawdown se mide contra ese pico.
- Las credenciales viajan solo hacia el adaptador de broker, nunca
  se serializan en to_dict().
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from goldsignal.domain.entities.signal import utcnow
from goldsignal.domain.exceptions.domain_errors import ValidationError


class BrokerName(str, Enum):
    IC_MARKETS = "ic_markets"
    PEPPERSTONE = "pepperstone"
    XM = "xm"
    FXTM = "fxtm"
    DEMO = "demo"


class AccountCurrency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AUD = "AUD"
    PHP = "PHP"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class PriceMode(str, Enum):
    """Origen de SL/TP de la orden. Solo SIGNAL se aplica en la ejecución."""
    SIGNAL = "signal"
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(slots=True)
class TradingAccount:
    user_id: str
    broker_name: BrokerName
    account_id: str
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    account_balance: float = 0.0
    peak_balance: float = 0.0
    currency: AccountCurrency = AccountCurrency.USD
    leverage: int = 100
    status: AccountStatus = AccountStatus.ACTIVE
    last_sync: Optional[datetime] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def record_balance(self, balance: float, at: Optional[datetime] = None) -> None:
        """Actualiza balance y pico tras un sync con el broker."""
        self.account_balance = float(balance)
        self.peak_balance = max(self.peak_balance, self.account_balance)
        self.last_sync = at or utcnow()
        self.updated_at = self.last_sync

    def drawdown_percentage(self) -> float:
        if self.peak_balance <= 0:
            return 0.0
        return max(0.0, (self.peak_balance - self.account_balance) / self.peak_balance * 100.0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "broker_name": self.broker_name.value,
            "account_id": self.account_id,
            "account_balance": round(self.account_balance, 2),
            "peak_balance": round(self.peak_balance, 2),
            "currency": self.currency.value,
            "leverage": self.leverage,
            "status": self.status.value,
            "last_sync": self.last_sync.isoformat() if self.last_sync else None,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class AutoTradeSettings:
    user_id: str
    trading_account_id: str
    enabled: bool = False
    risk_per_trade: float = 2.0
    max_concurrent_trades: int = 3
    max_daily_trades: int = 10
    stop_loss_mode: PriceMode = PriceMode.SIGNAL
    take_profit_mode: PriceMode = PriceMode.SIGNAL
    trading_hours_start: str = "09:00"
    trading_hours_end: str = "17:00"
    max_drawdown_percentage: float = 20.0
    emergency_stop: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    UPDATABLE = (
        "enabled", "risk_per_trade", "max_concurrent_trades", "max_daily_trades",
        "stop_loss_mode", "take_profit_mode", "trading_hours_start",
        "trading_hours_end", "max_drawdown_percentage", "emergency_stop",
    )

    def validate(self) -> None:
        if not 0 <= self.risk_per_trade <= 10:
            raise ValidationError(
                "risk_per_trade debe estar entre 0 y 10",
                field="risk_per_trade", value=self.risk_per_trade,
            )
        if self.max_concurrent_trades < 1:
            raise ValidationError(
                "max_concurrent_trades debe ser >= 1",
                field="max_concurrent_trades", value=self.max_concurrent_trades,
            )
        if self.max_daily_trades < 1:
            raise ValidationError(
                "max_daily_trades debe ser >= 1",
                field="max_daily_trades", value=self.max_daily_trades,
            )
        if not 0 < self.max_drawdown_percentage <= 100:
            raise ValidationError(
                "max_drawdown_percentage debe estar entre 0 y 100",
                field="max_drawdown_percentage", value=self.max_drawdown_percentage,
            )
        for name in ("trading_hours_start", "trading_hours_end"):
            value = getattr(self, name)
            if not _HHMM.match(value or ""):
                raise ValidationError(f"{name} debe tener formato HH:MM", field=name, value=value)

    def apply(self, **changes) -> None:
        for name, value in changes.items():
            if name not in self.UPDATABLE:
                raise ValidationError(f"Campo no editable: {name}", field=name)
            if value is None:
                continue
            if name in ("stop_loss_mode", "take_profit_mode"):
                value = PriceMode(value)
            setattr(self, name, value)
        self.validate()
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "trading_account_id": self.trading_account_id,
            "enabled": self.enabled,
            "risk_per_trade": self.risk_per_trade,
            "max_concurrent_trades": self.max_concurrent_trades,
            "max_daily_trades": self.max_daily_trades,
            "stop_loss_mode": self.stop_loss_mode.value,
            "take_profit_mode": self.take_profit_mode.value,
            "trading_hours_start": self.trading_hours_start,
            "trading_hours_end": self.trading_hours_end,
            "max_drawdown_percentage": self.max_drawdown_percentage,
            "emergency_stop": self.emergency_stop,
            "updated_at": self.updated_at.isoformat(),
        }
