"""
GoldSignal – Domain Entity: Subscription
==========================================
Periodo pagado de un plan. Cada pago confirmado por la pasarela crea
una fila; ``payment_reference`` guarda el id del checkout session para
que un webhook repetido no active dos veces el mismo pago.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from goldsignal.domain.entities.signal import utcnow


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"


@dataclass(slots=True)
class Subscription:
    user_id: str
    plan_id: str
    current_period_start: datetime
    current_period_end: datetime
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    payment_reference: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.is_active and self.current_period_end < (now or utcnow())

    def change_status(self, status: SubscriptionStatus) -> None:
        self.status = SubscriptionStatus(status)
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "status": self.status.value,
            "current_period_start": self.current_period_start.isoformat(),
            "current_period_end": self.current_period_end.isoformat(),
            "payment_reference": self.payment_reference,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
