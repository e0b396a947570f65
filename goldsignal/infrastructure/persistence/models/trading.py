"""
GoldSignal – Trading ORM Models
=================================
Tablas `trading_accounts`, `auto_trade_settings` y `trade_executions`.

DECISIONES DE DISEÑO:
- UNIQUE(user_id, broker_name, account_id): una cuenta de broker se
  conecta una sola vez por usuario.
- UNIQUE(trading_account_id) en settings: 1:1 con la cuenta.
- UNIQUE(signal_id, trading_account_id) en ejecuciones: una señal no
  se ejecuta dos veces en la misma cuenta aunque el evento se repita.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer,
    Numeric, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from goldsignal.infrastructure.persistence.database import Base


class TradingAccountModel(Base):
    __tablename__ = "trading_accounts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    broker_name: Mapped[str] = mapped_column(
        SQLEnum("ic_markets", "pepperstone", "xm", "fxtm", "demo", name="broker_name_enum"),
        nullable=False,
    )
    account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    api_key: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    api_secret: Mapped[Optional[str]] = mapped_column(String(255), default=None)

    account_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0)
    peak_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0)
    currency: Mapped[str] = mapped_column(
        SQLEnum("USD", "EUR", "GBP", "AUD", "PHP", name="account_currency_enum"),
        nullable=False, default="USD",
    )
    leverage: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    status: Mapped[str] = mapped_column(
        SQLEnum("active", "inactive", "error", name="account_status_enum"),
        nullable=False, default="active",
    )
    last_sync: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "broker_name", "account_id", name="uq_trading_accounts_broker"),
    )


class AutoTradeSettingsModel(Base):
    __tablename__ = "auto_trade_settings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False,
    )
    trading_account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("trading_accounts.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    risk_per_trade: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=2.0)
    max_concurrent_trades: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    max_daily_trades: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    stop_loss_mode: Mapped[str] = mapped_column(
        SQLEnum("signal", "percentage", "fixed_amount", name="stop_loss_mode_enum"),
        nullable=False, default="signal",
    )
    take_profit_mode: Mapped[str] = mapped_column(
        SQLEnum("signal", "percentage", "fixed_amount", name="take_profit_mode_enum"),
        nullable=False, default="signal",
    )
    trading_hours_start: Mapped[str] = mapped_column(String(5), nullable=False, default="09:00")
    trading_hours_end: Mapped[str] = mapped_column(String(5), nullable=False, default="17:00")
    max_drawdown_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=20.0,
    )
    emergency_stop: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class TradeExecutionModel(Base):
    __tablename__ = "trade_executions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    signal_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("signals.id", ondelete="CASCADE"), nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    trading_account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("trading_accounts.id", ondelete="CASCADE"), nullable=False,
    )
    symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    trade_type: Mapped[str] = mapped_column(
        SQLEnum("buy", "sell", name="trade_type_enum"), nullable=False,
    )
    lot_size: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    entry_price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    stop_loss: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 8), default=None)
    take_profit: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 8), default=None)

    status: Mapped[str] = mapped_column(
        SQLEnum("pending", "filled", "cancelled", "closed", name="execution_status_enum"),
        nullable=False, default="pending",
    )
    broker_order_id: Mapped[Optional[str]] = mapped_column(String(64), default=None)
    actual_entry_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 8), default=None)
    actual_exit_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 8), default=None)
    profit_loss: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0)
    commission: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    swap: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    error_message: Mapped[Optional[str]] = mapped_column(Text, default=None)

    execution_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)
    close_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("signal_id", "trading_account_id", name="uq_trade_executions_signal_account"),
        Index("ix_trade_executions_account_status", "trading_account_id", "status"),
        Index("ix_trade_executions_account_created", "trading_account_id", "created_at"),
    )
