"""
GoldSignal – Domain Service: Subscription Rules
==================================================
Catálogo de planes y reglas de transición de suscripciones.

CATÁLOGO (PHP, montos de checkout en centavos):
  premium : 1,450 PHP  (145000)
  vip     : 4,950 PHP  (495000)

MAPEO suscripción → usuario:
  status active            → tier del plan, usuario active
  status canceled          → free, usuario canceled
  status past_due / unpaid → free, usuario past_due
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from goldsignal.domain.entities.subscription import SubscriptionStatus
from goldsignal.domain.entities.user import SubscriptionTier, UserSubscriptionStatus
from goldsignal.domain.exceptions.domain_errors import ValidationError


@dataclass(frozen=True)
class Plan:
    id: str
    tier: SubscriptionTier
    name: str               # nombre comercial
    checkout_name: str      # nombre del line item en la pasarela
    description: str
    amount: int             # centavos
    currency: str = "PHP"
    features: Tuple[str, ...] = field(default_factory=tuple)
    popular: bool = False

    @property
    def price(self) -> float:
        return self.amount / 100

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tier": self.tier.value,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "currency": self.currency,
            "features": list(self.features),
            "popular": self.popular,
        }


PLAN_CATALOG: Dict[str, Plan] = {
    "premium": Plan(
        id="premium",
        tier=SubscriptionTier.PREMIUM,
        name="Premium Plan",
        checkout_name="Gold Signal Premium Plan",
        description="Premium trading signals for XAUUSD with 24/7 support",
        amount=145000,
        features=(
            "Up to 5 premium signals daily",
            "Entry, SL, and TP levels",
            "Email notifications",
            "Basic analytics",
            "24/7 support",
        ),
        popular=True,
    ),
    "vip": Plan(
        id="vip",
        tier=SubscriptionTier.VIP,
        name="VIP Plan",
        checkout_name="Gold Signal VIP Plan",
        description="VIP trading signals with priority support and advanced analytics",
        amount=495000,
        features=(
            "Unlimited premium signals",
            "Advanced market analysis",
            "Priority email & SMS alerts",
            "Detailed performance analytics",
            "Copy trading signals",
            "VIP Discord access",
            "Priority support",
        ),
    ),
}


def get_plan(plan_id: str) -> Plan:
    try:
        return PLAN_CATALOG[plan_id]
    except KeyError:
        raise ValidationError(f"Invalid plan selected: {plan_id}", field="plan", value=plan_id)


def plan_price(plan_id: str) -> float:
    """Precio mensual en PHP; 0 para planes fuera del catálogo (free/basic)."""
    plan = PLAN_CATALOG.get(plan_id)
    return plan.price if plan else 0.0


def tier_for(plan_id: str, status: SubscriptionStatus) -> SubscriptionTier:
    if SubscriptionStatus(status) != SubscriptionStatus.ACTIVE:
        return SubscriptionTier.FREE
    try:
        return SubscriptionTier(plan_id)
    except ValueError:
        return SubscriptionTier.FREE


def user_status_for(status: SubscriptionStatus) -> UserSubscriptionStatus:
    status = SubscriptionStatus(status)
    if status == SubscriptionStatus.ACTIVE:
        return UserSubscriptionStatus.ACTIVE
    if status == SubscriptionStatus.CANCELED:
        return UserSubscriptionStatus.CANCELED
    return UserSubscriptionStatus.PAST_DUE


def period_bounds(start: datetime, days: int = 30,
                  current_end: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Periodo pagado que arranca en ``start``.

    Si el usuario renueva antes de que venza el periodo vigente,
    el nuevo periodo se encadena al final del anterior.
    """
    if current_end and current_end > start:
        start = current_end
    return start, start + timedelta(days=days)
