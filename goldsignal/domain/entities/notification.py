"""
GoldSignal – Domain Entity: Notification
===========================================
Notificación in-app mostrada en el dashboard del usuario.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from goldsignal.domain.entities.signal import utcnow


class NotificationType(str, Enum):
    SIGNAL = "signal"
    SUBSCRIPTION = "subscription"
    SYSTEM = "system"
    PAYMENT = "payment"


@dataclass(slots=True)
class Notification:
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    signal_id: Optional[str] = None
    read: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "signal_id": self.signal_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
        }
