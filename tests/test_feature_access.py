"""Test tier → feature matrix, quotas and upgrade messages."""

from datetime import datetime, timedelta, timezone

import pytest

from goldsignal.domain.entities.user import (
    SubscriptionTier,
    User,
    UserRole,
    UserSubscriptionStatus,
)
from goldsignal.domain.exceptions.domain_errors import FeatureAccessDenied
from goldsignal.domain.services.feature_access import UNLIMITED, Feature, FeatureAccessPolicy


def _user(tier=SubscriptionTier.FREE, **kwargs):
    return User(id="u1", email="u1@goldsignal.test", subscription_tier=tier, **kwargs)


@pytest.mark.parametrize("tier, feature, allowed", [
    (SubscriptionTier.FREE, Feature.BASIC_SIGNALS, True),
    (SubscriptionTier.FREE, Feature.ANALYTICS, False),
    (SubscriptionTier.BASIC, Feature.UNLIMITED_SIGNALS, False),
    (SubscriptionTier.PREMIUM, Feature.ANALYTICS, True),
    (SubscriptionTier.PREMIUM, Feature.API_ACCESS, False),
    (SubscriptionTier.VIP, Feature.API_ACCESS, True),
    (SubscriptionTier.VIP, Feature.REAL_TIME_ALERTS, True),
])
def test_has_access(tier, feature, allowed):
    assert FeatureAccessPolicy.has_access(tier, feature) is allowed


def test_required_tier_is_first_granting_tier():
    assert FeatureAccessPolicy.required_tier(Feature.BASIC_SIGNALS) == SubscriptionTier.FREE
    assert FeatureAccessPolicy.required_tier(Feature.ANALYTICS) == SubscriptionTier.PREMIUM
    assert FeatureAccessPolicy.required_tier(Feature.COURSE_ACCESS) == SubscriptionTier.VIP


def test_signal_quota():
    policy = FeatureAccessPolicy(free_signal_limit=5)
    assert policy.signal_quota(SubscriptionTier.FREE) == 5
    assert policy.signal_quota(SubscriptionTier.BASIC) == 5
    assert policy.signal_quota(SubscriptionTier.PREMIUM) == UNLIMITED
    assert policy.signal_quota(SubscriptionTier.VIP) == UNLIMITED


def test_ensure_raises_with_upgrade_message():
    policy = FeatureAccessPolicy()
    with pytest.raises(FeatureAccessDenied) as exc_info:
        policy.ensure(_user(SubscriptionTier.PREMIUM), Feature.API_ACCESS)
    error = exc_info.value
    assert error.code == "UPGRADE_REQUIRED"
    assert error.required_tier == "vip"
    assert error.message == "API access for automation requires the VIP plan. Upgrade to unlock it."
    assert error.to_dict()["feature"] == "api_access"


def test_admin_bypasses_matrix():
    policy = FeatureAccessPolicy()
    admin = _user(role=UserRole.ADMIN)
    policy.ensure(admin, Feature.API_ACCESS)
    assert policy.available_features(admin) == [f.value for f in Feature]


def test_expired_or_inactive_subscription_degrades_to_free():
    past = datetime.now(timezone.utc) - timedelta(days=1)
    expired = _user(SubscriptionTier.VIP, subscription_end_date=past)
    past_due = _user(SubscriptionTier.VIP, subscription_status=UserSubscriptionStatus.PAST_DUE)
    policy = FeatureAccessPolicy()

    assert expired.effective_tier() == SubscriptionTier.FREE
    assert past_due.effective_tier() == SubscriptionTier.FREE
    assert not past_due.is_paying
    assert _user(SubscriptionTier.VIP).is_paying
    assert not policy.user_can(expired, Feature.ANALYTICS)
    assert policy.available_features(past_due) == ["basic_signals"]


def test_premium_features_listing():
    features = FeatureAccessPolicy().available_features(_user(SubscriptionTier.PREMIUM))
    assert features == ["basic_signals", "unlimited_signals", "analytics", "real_time_alerts"]
