"""
GoldSignal – Domain Entity: User
===================================
Perfil del usuario autenticado por el proveedor de identidad externo.

El id lo asigna el proveedor de auth; este servicio solo guarda el
perfil y el estado de suscripción que gobierna el acceso a features.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from goldsignal.domain.entities.signal import utcnow


class SubscriptionTier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    VIP = "vip"


class UserSubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(slots=True)
class User:
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_status: UserSubscriptionStatus = UserSubscriptionStatus.ACTIVE
    subscription_end_date: Optional[datetime] = None
    role: UserRole = UserRole.USER
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_paying(self) -> bool:
        """Suscriptor activo de un tier de pago."""
        return (
            self.subscription_status == UserSubscriptionStatus.ACTIVE
            and self.subscription_tier != SubscriptionTier.FREE
        )

    def effective_tier(self, now: Optional[datetime] = None) -> SubscriptionTier:
        """
        Tier que realmente aplica: un periodo vencido o una suscripción
        no activa degrada a FREE aunque el expiry job no haya corrido.
        """
        if self.subscription_status != UserSubscriptionStatus.ACTIVE:
            return SubscriptionTier.FREE
        if self.subscription_end_date and self.subscription_end_date < (now or utcnow()):
            return SubscriptionTier.FREE
        return self.subscription_tier

    def apply_subscription(
        self,
        tier: SubscriptionTier,
        status: UserSubscriptionStatus,
        end_date: Optional[datetime],
    ) -> None:
        self.subscription_tier = SubscriptionTier(tier)
        self.subscription_status = UserSubscriptionStatus(status)
        self.subscription_end_date = end_date
        self.updated_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "subscription_tier": self.subscription_tier.value,
            "subscription_status": self.subscription_status.value,
            "subscription_end_date": (
                self.subscription_end_date.isoformat() if self.subscription_end_date else None
            ),
            "role": self.role.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
