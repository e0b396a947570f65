"""
GoldSignal – Domain Entity: Signal
=====================================
Señal de trading publicada por un analista (admin) para XAUUSD.

═══════════════════════════════════════════════════════════════
            CICLO DE VIDA DE LA SEÑAL
═══════════════════════════════════════════════════════════════

  Admin publica señal ──▸ ACTIVE (o PENDING si se programa)
       │
       ├── Monitor de precio detecta TP ──▸ CLOSED (result=win)
       ├── Monitor de precio detecta SL ──▸ CLOSED (result=loss)
       └── Admin cierra manualmente    ──▸ CLOSED (win|loss|breakeven)

DECISIONES DE DISEÑO:

POR QUÉ NO frozen=True:
  La señal se edita mientras está abierta y se cierra una sola vez.
  Se usa una clase con transiciones controladas; una vez cerrada
  cualquier modificación lanza InvalidSignalError.

GEOMETRÍA DE PRECIOS:
  BUY:  stop_loss < entry_price < take_profit
  SELL: take_profit < entry_price < stop_loss
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from goldsignal.domain.exceptions.domain_errors import InvalidSignalError


class SignalType(str, Enum):
    BUY = "buy"
    SELL = "sell"


class SignalLifecycle(str, Enum):
    """Estado persistido de la señal (no confundir con SignalStatus calculado)."""
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


class SignalResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Signal:
    """
    Señal de trading con ciclo de vida completo.

    Métodos controlados para transición de estado:
      - activate()  → PENDING → ACTIVE
      - update()    → modifica precios/descripción si no está cerrada
      - close()     → PENDING|ACTIVE → CLOSED
    """

    __slots__ = (
        "id", "symbol", "signal_type",
        "entry_price", "stop_loss", "take_profit",
        "confidence", "description", "status",
        "created_at", "updated_at", "closed_at",
        "result", "pips_result",
    )

    EDITABLE_FIELDS = (
        "symbol", "signal_type", "entry_price", "stop_loss",
        "take_profit", "confidence", "description",
    )

    def __init__(
        self,
        id: str,
        symbol: str,
        signal_type: SignalType,
        entry_price: float,
        stop_loss: float,
        take_profit: float,
        confidence: int = 50,
        description: Optional[str] = None,
        status: SignalLifecycle = SignalLifecycle.ACTIVE,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        closed_at: Optional[datetime] = None,
        result: Optional[SignalResult] = None,
        pips_result: Optional[float] = None,
    ) -> None:
        now = utcnow()
        self.id = id
        self.symbol = symbol
        self.signal_type = SignalType(signal_type)
        self.entry_price = float(entry_price)
        self.stop_loss = float(stop_loss)
        self.take_profit = float(take_profit)
        self.confidence = int(confidence)
        self.description = description
        self.status = SignalLifecycle(status)
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at
        self.closed_at = closed_at
        self.result = SignalResult(result) if result else None
        self.pips_result = pips_result

    # ════════════════════════════════════════════════════════════════
    #  CONSTRUCCIÓN
    # ════════════════════════════════════════════════════════════════

    @classmethod
    def create(
        cls,
        symbol: str,
        signal_type: str,
        entry_price: float,
        stop_loss: float,
        take_profit: float,
        confidence: int = 50,
        description: Optional[str] = None,
        status: SignalLifecycle = SignalLifecycle.ACTIVE,
    ) -> "Signal":
        """Construye una señal nueva validando su geometría de precios."""
        try:
            kind = SignalType(str(signal_type).lower())
        except ValueError:
            raise InvalidSignalError(
                f"Tipo de señal inválido: {signal_type}", reason="signal_type",
            )
        status = SignalLifecycle(status)
        if status == SignalLifecycle.CLOSED:
            raise InvalidSignalError(
                "Una señal nueva no puede nacer cerrada", reason="status",
            )
        signal = cls(
            id=cls.generate_id(),
            symbol=symbol.upper(),
            signal_type=kind,
            entry_price=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            confidence=confidence,
            description=description,
            status=status,
        )
        signal.validate()
        return signal

    @staticmethod
    def generate_id() -> str:
        """ID compacto único (12 chars hex de UUID4)."""
        return uuid.uuid4().hex[:12]

    def validate(self) -> None:
        """Verifica precios positivos, geometría SL/TP y confianza 0..100."""
        for name in ("entry_price", "stop_loss", "take_profit"):
            if getattr(self, name) <= 0:
                raise InvalidSignalError(f"{name} debe ser positivo", reason=name)

        if self.signal_type == SignalType.BUY:
            if not self.stop_loss < self.entry_price < self.take_profit:
                raise InvalidSignalError(
                    "BUY requiere stop_loss < entry_price < take_profit",
                    reason="price_geometry",
                )
        elif not self.take_profit < self.entry_price < self.stop_loss:
            raise InvalidSignalError(
                "SELL requiere take_profit < entry_price < stop_loss",
                reason="price_geometry",
            )

        if not 0 <= self.confidence <= 100:
            raise InvalidSignalError(
                "confidence debe estar entre 0 y 100", reason="confidence",
            )

    # ════════════════════════════════════════════════════════════════
    #  TRANSICIONES DE ESTADO
    # ════════════════════════════════════════════════════════════════

    def activate(self) -> None:
        if self.status != SignalLifecycle.PENDING:
            raise InvalidSignalError(
                f"activate() solo desde PENDING, actual={self.status.value}",
                reason="status",
            )
        self.status = SignalLifecycle.ACTIVE
        self.updated_at = utcnow()

    def update(self, **fields) -> None:
        """
        Modifica campos editables y revalida.

        Si la validación falla se restaura el estado previo.
        """
        if self.is_closed:
            raise InvalidSignalError("No se puede editar una señal cerrada", reason="status")

        unknown = set(fields) - set(self.EDITABLE_FIELDS) - {"status"}
        if unknown:
            raise InvalidSignalError(
                f"Campos no editables: {', '.join(sorted(unknown))}", reason="fields",
            )

        snapshot = {name: getattr(self, name) for name in self.EDITABLE_FIELDS}
        snapshot["status"] = self.status
        try:
            for name, value in fields.items():
                if value is None and name != "description":
                    continue
                if name == "signal_type":
                    value = SignalType(str(value).lower())
                elif name == "status":
                    value = SignalLifecycle(value)
                    if value == SignalLifecycle.CLOSED:
                        raise InvalidSignalError(
                            "Usa close() para cerrar una señal", reason="status",
                        )
                elif name == "symbol":
                    value = value.upper()
                elif name in ("entry_price", "stop_loss", "take_profit"):
                    value = float(value)
                elif name == "confidence":
                    value = int(value)
                setattr(self, name, value)
            self.validate()
        except (InvalidSignalError, ValueError) as exc:
            for name, value in snapshot.items():
                setattr(self, name, value)
            if isinstance(exc, InvalidSignalError):
                raise
            raise InvalidSignalError(str(exc), reason="value")

        self.updated_at = utcnow()

    def close(
        self,
        result: SignalResult,
        pips_result: Optional[float] = None,
        closed_at: Optional[datetime] = None,
    ) -> None:
        """
        Transición PENDING|ACTIVE → CLOSED.

        PROTECCIÓN: una señal se cierra una sola vez.
        """
        if self.is_closed:
            raise InvalidSignalError(f"La señal {self.id} ya está cerrada", reason="status")

        self.result = SignalResult(result)
        self.pips_result = pips_result
        self.closed_at = closed_at or utcnow()
        self.updated_at = self.closed_at
        self.status = SignalLifecycle.CLOSED

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def is_closed(self) -> bool:
        return self.status == SignalLifecycle.CLOSED

    @property
    def is_buy(self) -> bool:
        return self.signal_type == SignalType.BUY

    @property
    def risk_reward(self) -> float:
        risk = abs(self.entry_price - self.stop_loss)
        if risk == 0:
            return 0.0
        return abs(self.take_profit - self.entry_price) / risk

    def to_dict(self) -> dict:
        """Serialización para API / WebSocket."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "type": self.signal_type.value,
            "entry_price": round(self.entry_price, 2),
            "stop_loss": round(self.stop_loss, 2),
            "take_profit": round(self.take_profit, 2),
            "confidence": self.confidence,
            "description": self.description,
            "status": self.status.value,
            "risk_reward": round(self.risk_reward, 2),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "result": self.result.value if self.result else None,
            "pips_result": self.pips_result,
        }

    def __repr__(self) -> str:
        return (
            f"Signal(id={self.id}, {self.signal_type.value.upper()} {self.symbol} "
            f"@ {self.entry_price}, status={self.status.value})"
        )
