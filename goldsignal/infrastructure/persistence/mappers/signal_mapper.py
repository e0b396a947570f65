"""
GoldSignal – Signal Mapper
============================
Mapea entre Signal (domain entity) y SignalModel (ORM).

Este mapper es CRÍTICO para Clean Architecture:
- El domain NO conoce SQLAlchemy
- El ORM Model NO tiene lógica de negocio
- El mapper traduce entre ambos mundos
"""

from __future__ import annotations

from typing import Any, Dict

from goldsignal.domain.entities.signal import Signal
from goldsignal.infrastructure.persistence.mappers._conversions import (
    aware,
    to_decimal,
    to_float,
)
from goldsignal.infrastructure.persistence.models.signal import SignalModel


class SignalMapper:
    """
    Mapper bidireccional Signal ↔ SignalModel.

    USO:
        model = SignalModel(**SignalMapper.to_model(signal))
        entity = SignalMapper.to_entity(model)
    """

    @staticmethod
    def to_model(signal: Signal) -> Dict[str, Any]:
        return {
            "id": signal.id,
            "symbol": signal.symbol,
            "signal_type": signal.signal_type.value,
            "entry_price": to_decimal(signal.entry_price),
            "stop_loss": to_decimal(signal.stop_loss),
            "take_profit": to_decimal(signal.take_profit),
            "confidence": signal.confidence,
            "description": signal.description,
            "status": signal.status.value,
            "result": signal.result.value if signal.result else None,
            "pips_result": to_decimal(signal.pips_result, 2),
            "created_at": signal.created_at,
            "updated_at": signal.updated_at,
            "closed_at": signal.closed_at,
        }

    @staticmethod
    def to_entity(model: SignalModel) -> Signal:
        return Signal(
            id=model.id,
            symbol=model.symbol,
            signal_type=model.signal_type,
            entry_price=float(model.entry_price),
            stop_loss=float(model.stop_loss),
            take_profit=float(model.take_profit),
            confidence=model.confidence,
            description=model.description,
            status=model.status,
            created_at=aware(model.created_at),
            updated_at=aware(model.updated_at),
            closed_at=aware(model.closed_at),
            result=model.result,
            pips_result=to_float(model.pips_result),
        )
