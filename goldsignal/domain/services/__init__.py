"""Domain services - Pure business logic with no external dependencies."""
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.domain.services.risk_calculator import RiskCalculator, RiskConfig, TradeValidation
from goldsignal.domain.services.feature_access import (
    Feature,
    FeatureAccessPolicy,
    TIER_FEATURES,
    UNLIMITED,
)
from goldsignal.domain.services.performance_calculator import PerformanceCalculator
from goldsignal.domain.services.subscription_rules import (
    Plan,
    PLAN_CATALOG,
    get_plan,
    plan_price,
    tier_for,
    user_status_for,
    period_bounds,
)

__all__ = [
    "SignalStatusCalculator",
    "RiskCalculator",
    "RiskConfig",
    "TradeValidation",
    "Feature",
    "FeatureAccessPolicy",
    "TIER_FEATURES",
    "UNLIMITED",
    "PerformanceCalculator",
    "Plan",
    "PLAN_CATALOG",
    "get_plan",
    "plan_price",
    "tier_for",
    "user_status_for",
    "period_bounds",
]
