"""
GoldSignal – Application DTO: Subscription
============================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class SubscriptionAnalyticsDTO:
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    canceled_subscriptions: int = 0
    past_due_subscriptions: int = 0
    monthly_revenue: float = 0.0
    currency: str = "PHP"
    plan_breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_subscriptions": self.total_subscriptions,
            "active_subscriptions": self.active_subscriptions,
            "canceled_subscriptions": self.canceled_subscriptions,
            "past_due_subscriptions": self.past_due_subscriptions,
            "monthly_revenue": round(self.monthly_revenue, 2),
            "currency": self.currency,
            "plan_breakdown": dict(self.plan_breakdown),
        }
