"""
GoldSignal – Domain Service: Feature Access
==============================================
Matriz tier → features y cuotas de señales.

  free / basic : basic_signals
  premium      : + unlimited_signals, analytics, real_time_alerts
  vip          : + subscriber_management, custom_signals, consultation,
                   whatsapp_alerts, api_access, course_access

Los administradores no pasan por esta matriz (ver User.is_admin).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from goldsignal.domain.entities.user import SubscriptionTier, User
from goldsignal.domain.exceptions.domain_errors import FeatureAccessDenied


class Feature(str, Enum):
    BASIC_SIGNALS = "basic_signals"
    UNLIMITED_SIGNALS = "unlimited_signals"
    ANALYTICS = "analytics"
    REAL_TIME_ALERTS = "real_time_alerts"
    SUBSCRIBER_MANAGEMENT = "subscriber_management"
    CUSTOM_SIGNALS = "custom_signals"
    CONSULTATION = "consultation"
    WHATSAPP_ALERTS = "whatsapp_alerts"
    API_ACCESS = "api_access"
    COURSE_ACCESS = "course_access"


_PREMIUM = frozenset({
    Feature.BASIC_SIGNALS,
    Feature.UNLIMITED_SIGNALS,
    Feature.ANALYTICS,
    Feature.REAL_TIME_ALERTS,
})

# Orden de inserción = orden de búsqueda en required_tier()
TIER_FEATURES: Dict[SubscriptionTier, FrozenSet[Feature]] = {
    SubscriptionTier.FREE: frozenset({Feature.BASIC_SIGNALS}),
    SubscriptionTier.BASIC: frozenset({Feature.BASIC_SIGNALS}),
    SubscriptionTier.PREMIUM: _PREMIUM,
    SubscriptionTier.VIP: _PREMIUM | {
        Feature.SUBSCRIBER_MANAGEMENT,
        Feature.CUSTOM_SIGNALS,
        Feature.CONSULTATION,
        Feature.WHATSAPP_ALERTS,
        Feature.API_ACCESS,
        Feature.COURSE_ACCESS,
    },
}

FEATURE_LABELS: Dict[Feature, str] = {
    Feature.BASIC_SIGNALS: "Basic signals",
    Feature.UNLIMITED_SIGNALS: "Unlimited signals",
    Feature.ANALYTICS: "Advanced analytics and performance tracking",
    Feature.REAL_TIME_ALERTS: "Real-time email and SMS notifications",
    Feature.SUBSCRIBER_MANAGEMENT: "Subscriber management dashboard",
    Feature.CUSTOM_SIGNALS: "Custom signal requests",
    Feature.CONSULTATION: "1-on-1 monthly consultation calls",
    Feature.WHATSAPP_ALERTS: "WhatsApp and Telegram alerts",
    Feature.API_ACCESS: "API access for automation",
    Feature.COURSE_ACCESS: "Premium trading course access",
}

UNLIMITED = -1


class FeatureAccessPolicy:
    """Consulta de permisos por tier."""

    def __init__(self, free_signal_limit: int = 5):
        self._free_signal_limit = free_signal_limit

    @staticmethod
    def has_access(tier: SubscriptionTier, feature: Feature) -> bool:
        return Feature(feature) in TIER_FEATURES.get(SubscriptionTier(tier), frozenset())

    @staticmethod
    def required_tier(feature: Feature) -> SubscriptionTier:
        """Primer tier que concede la feature (PREMIUM si ninguno)."""
        for tier, features in TIER_FEATURES.items():
            if Feature(feature) in features:
                return tier
        return SubscriptionTier.PREMIUM

    def upgrade_message(self, feature: Feature) -> str:
        feature = Feature(feature)
        label = FEATURE_LABELS.get(feature, "This feature")
        tier = self.required_tier(feature)
        return f"{label} requires the {tier.value.upper()} plan. Upgrade to unlock it."

    def signal_quota(self, tier: SubscriptionTier) -> int:
        """Señales visibles por mes; UNLIMITED (-1) sin límite."""
        tier = SubscriptionTier(tier)
        if tier in (SubscriptionTier.FREE, SubscriptionTier.BASIC):
            return self._free_signal_limit
        return UNLIMITED

    def user_can(self, user: User, feature: Feature) -> bool:
        return user.is_admin or self.has_access(user.effective_tier(), feature)

    def ensure(self, user: User, feature: Feature) -> None:
        """Lanza FeatureAccessDenied si el usuario no tiene la feature."""
        if not self.user_can(user, feature):
            feature = Feature(feature)
            raise FeatureAccessDenied(
                feature=feature.value,
                required_tier=self.required_tier(feature).value,
                message=self.upgrade_message(feature),
            )

    def available_features(self, user: User) -> list[str]:
        if user.is_admin:
            return [f.value for f in Feature]
        granted = TIER_FEATURES[user.effective_tier()]
        return [f.value for f in Feature if f in granted]
