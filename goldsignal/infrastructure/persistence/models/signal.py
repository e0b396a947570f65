"""
GoldSignal – Signal ORM Model
==============================
Modelo para la tabla `signals`.

DECISIONES DE DISEÑO:
- id CHAR(12): ID corto generado por el dominio (Signal.generate_id).
- DECIMAL(20,8) para precios.
- Índices para el monitor (status) y el listado (created_at desc).

RELACIÓN CON ENTIDAD DE DOMINIO:
- La conversión se hace en mappers/signal_mapper.py (no aquí).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from goldsignal.infrastructure.persistence.database import Base


class SignalModel(Base):
    __tablename__ = "signals"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    symbol: Mapped[str] = mapped_column(String(16), nullable=False, default="XAUUSD")
    signal_type: Mapped[str] = mapped_column(
        SQLEnum("buy", "sell", name="signal_type_enum"), nullable=False,
    )

    # ─── Precios ──────────────────────────────────────────────────────
    entry_price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    stop_loss: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    take_profit: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    confidence: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)

    # ─── Ciclo de vida ────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        SQLEnum("pending", "active", "closed", name="signal_status_enum"),
        nullable=False, default="active",
    )
    result: Mapped[Optional[str]] = mapped_column(
        SQLEnum("win", "loss", "breakeven", name="signal_result_enum"), default=None,
    )
    pips_result: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), default=None)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), default=None)

    __table_args__ = (
        Index("ix_signals_status_created", "status", "created_at"),
        Index("ix_signals_symbol_created", "symbol", "created_at"),
        Index("ix_signals_closed_at", "closed_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<SignalModel(id={self.id}, {self.signal_type} {self.symbol} "
            f"@ {self.entry_price}, status={self.status})>"
        )
