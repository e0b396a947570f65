"""Test plan catalog and subscription → user mapping."""

from datetime import datetime, timedelta, timezone

import pytest

from goldsignal.domain.entities.subscription import Subscription, SubscriptionStatus
from goldsignal.domain.entities.user import SubscriptionTier, UserSubscriptionStatus
from goldsignal.domain.exceptions.domain_errors import ValidationError
from goldsignal.domain.services.subscription_rules import (
    get_plan,
    period_bounds,
    plan_price,
    tier_for,
    user_status_for,
)


def test_catalog_prices_in_centavos():
    premium = get_plan("premium")
    vip = get_plan("vip")
    assert premium.amount == 145000 and premium.price == 1450.0
    assert vip.amount == 495000 and vip.price == 4950.0
    assert premium.currency == "PHP"
    assert premium.to_dict()["popular"] is True


def test_unknown_plan():
    with pytest.raises(ValidationError):
        get_plan("platinum")
    assert plan_price("basic") == 0.0


@pytest.mark.parametrize("plan, status, tier", [
    ("premium", SubscriptionStatus.ACTIVE, SubscriptionTier.PREMIUM),
    ("vip", SubscriptionStatus.ACTIVE, SubscriptionTier.VIP),
    ("vip", SubscriptionStatus.CANCELED, SubscriptionTier.FREE),
    ("premium", SubscriptionStatus.PAST_DUE, SubscriptionTier.FREE),
    ("gold", SubscriptionStatus.ACTIVE, SubscriptionTier.FREE),
])
def test_tier_for(plan, status, tier):
    assert tier_for(plan, status) == tier


def test_user_status_for():
    assert user_status_for(SubscriptionStatus.ACTIVE) == UserSubscriptionStatus.ACTIVE
    assert user_status_for(SubscriptionStatus.CANCELED) == UserSubscriptionStatus.CANCELED
    assert user_status_for(SubscriptionStatus.UNPAID) == UserSubscriptionStatus.PAST_DUE


def test_period_bounds_chains_early_renewal():
    now = datetime(2026, 5, 1, tzinfo=timezone.utc)
    assert period_bounds(now, 30) == (now, now + timedelta(days=30))

    current_end = now + timedelta(days=10)
    start, end = period_bounds(now, 30, current_end)
    assert start == current_end
    assert end == current_end + timedelta(days=30)

    start, _ = period_bounds(now, 30, now - timedelta(days=2))
    assert start == now


def test_subscription_expiry():
    now = datetime(2026, 4, 1, tzinfo=timezone.utc)
    subscription = Subscription(
        user_id="u1", plan_id="premium",
        current_period_start=now - timedelta(days=31),
        current_period_end=now - timedelta(days=1),
    )
    assert subscription.is_expired(now)
    subscription.change_status(SubscriptionStatus.CANCELED)
    assert not subscription.is_expired(now)
