"""Test checkout, payment webhooks and the subscription lifecycle."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from conftest import webhook_payload
from goldsignal.application.ports.errors import WebhookSignatureError
from goldsignal.application.use_cases.subscription_usecase import PAYMENT_FAILED, PAYMENT_PAID
from goldsignal.domain.entities.subscription import SubscriptionStatus
from goldsignal.domain.entities.user import SubscriptionTier, UserSubscriptionStatus
from goldsignal.domain.exceptions.domain_errors import ValidationError


async def test_checkout_request(subscriptions, gateway, make_user):
    user = await make_user("u1")
    session = await subscriptions.create_checkout(user, "premium")

    assert session.session_id == "cs_test_1"
    request = gateway.requests[0]
    assert request.amount == 145000
    assert request.currency == "PHP"
    assert request.name == "Gold Signal Premium Plan"
    assert request.success_url == (
        "https://app.goldsignal.test/payment-success"
        "?session_id={CHECKOUT_SESSION_ID}&plan=premium"
    )
    assert request.cancel_url == "https://app.goldsignal.test/pricing"
    assert request.metadata == {"plan": "premium", "user_id": "u1", "service": "gold_signal_service"}
    assert request.customer_email == "u1@goldsignal.test"

    with pytest.raises(ValidationError):
        await subscriptions.create_checkout(user, "platinum")


async def test_paid_webhook_activates_once(uow, subscriptions, publisher, make_user):
    await make_user("u1")
    data = webhook_payload(PAYMENT_PAID, "cs_paid", "u1", "vip")

    outcome = await subscriptions.handle_webhook(b"{}", "valid", data)
    assert outcome.processed
    assert outcome.to_dict()["subscription_id"] == outcome.subscription.id

    user = await uow.users.get("u1")
    assert user.subscription_tier == SubscriptionTier.VIP
    assert user.subscription_status == UserSubscriptionStatus.ACTIVE
    assert user.subscription_end_date > datetime.now(timezone.utc) + timedelta(days=29)

    notifications, _ = await uow.notifications.list_for_user("u1")
    assert notifications[0].title == "Welcome to VIP!"

    again = await subscriptions.handle_webhook(b"{}", "valid", data)
    assert again.subscription.id == outcome.subscription.id
    assert publisher.topics() == ["subscription_activated"]
    assert len(await uow.subscriptions.list_for_user("u1")) == 1


async def test_webhook_signature_and_other_events(uow, subscriptions, make_user):
    await make_user("u1")

    with pytest.raises(WebhookSignatureError) as info:
        await subscriptions.handle_webhook(
            b"{}", "forged", webhook_payload(PAYMENT_PAID, "cs_x", "u1", "vip"),
        )
    assert info.value.code == "INVALID_SIGNATURE"

    failed = await subscriptions.handle_webhook(
        b"{}", "valid", webhook_payload(PAYMENT_FAILED, "cs_y", "u1", "premium"),
    )
    assert failed.processed and failed.subscription is None
    notifications, _ = await uow.notifications.list_for_user("u1")
    assert notifications[0].title == "Payment Failed"

    ignored = await subscriptions.handle_webhook(
        b"{}", "valid", webhook_payload("payment.refunded", "cs_z", "u1", "premium"),
    )
    assert not ignored.processed
    assert (await uow.users.get("u1")).subscription_tier == SubscriptionTier.FREE


async def test_verify_session(subscriptions, gateway, make_user):
    owner = await make_user("u1")
    other = await make_user("u2")
    session = await subscriptions.create_checkout(owner, "premium")

    pending = await subscriptions.verify_session(owner, session.session_id)
    assert pending == {"paid": False, "status": "active", "plan": "premium", "subscription": None}

    with pytest.raises(ValidationError):
        await subscriptions.verify_session(other, session.session_id)

    gateway.sessions[session.session_id] = replace(session, paid=True, status="paid")
    verified = await subscriptions.verify_session(owner, session.session_id)
    assert verified["paid"]
    assert verified["subscription"]["plan_id"] == "premium"


async def test_renewal_extends_current_period(uow, subscriptions, make_user):
    await make_user("u1")
    t0 = datetime(2026, 3, 1, tzinfo=timezone.utc)

    first = await subscriptions.activate("u1", "premium", "ref_1", now=t0)
    second = await subscriptions.activate("u1", "premium", "ref_2", now=t0 + timedelta(days=10))

    assert second.current_period_start == t0 + timedelta(days=30)
    assert second.current_period_end == t0 + timedelta(days=60)
    assert (await uow.subscriptions.get(first.id)).status == SubscriptionStatus.CANCELED

    upgrade = await subscriptions.activate("u1", "vip", "ref_3", now=t0 + timedelta(days=12))
    assert upgrade.current_period_start == t0 + timedelta(days=12)
    assert (await uow.users.get("u1")).subscription_tier == SubscriptionTier.VIP


async def test_analytics(subscriptions, make_user):
    for user_id in ("a", "b", "c"):
        await make_user(user_id)
    await subscriptions.create("a", "premium")
    await subscriptions.create("b", "vip")
    cancelled = await subscriptions.create("c", "premium")
    await subscriptions.cancel(cancelled.id)

    stats = (await subscriptions.analytics()).to_dict()
    assert stats["total_subscriptions"] == 3
    assert stats["active_subscriptions"] == 2
    assert stats["canceled_subscriptions"] == 1
    assert stats["monthly_revenue"] == 6400.0
    assert stats["plan_breakdown"] == {"premium": 1, "vip": 1}


async def test_check_expired_downgrades_user(uow, subscriptions, make_user):
    await make_user("u1")
    past = datetime.now(timezone.utc) - timedelta(days=1)
    subscription = await subscriptions.create("u1", "premium", period_end=past)
    assert (await uow.users.get("u1")).subscription_tier == SubscriptionTier.PREMIUM

    assert await subscriptions.check_expired() == 1
    assert (await subscriptions.get(subscription.id)).status == SubscriptionStatus.PAST_DUE
    user = await uow.users.get("u1")
    assert user.subscription_tier == SubscriptionTier.FREE
    assert user.subscription_status == UserSubscriptionStatus.PAST_DUE
    assert await subscriptions.check_expired() == 0


async def test_cancel_keeps_other_active_plan(uow, subscriptions, make_user):
    await make_user("u1")
    old = await subscriptions.create("u1", "premium")
    current = await subscriptions.activate("u1", "vip", "ref_vip")

    await subscriptions.cancel(old.id)
    user = await uow.users.get("u1")
    assert user.subscription_tier == SubscriptionTier.VIP
    assert current.is_active
