"""Test signal publishing, editing, closing and the per-tier feed."""

from datetime import datetime, timedelta, timezone

import pytest

from goldsignal.application.dto.signal_dto import CreateSignalDTO
from goldsignal.domain.entities.signal import Signal, SignalLifecycle, SignalResult
from goldsignal.domain.entities.user import SubscriptionTier, UserRole
from goldsignal.domain.exceptions.domain_errors import InvalidSignalError, SignalNotFoundError


def _dto(**overrides):
    data = dict(signal_type="buy", entry_price=2650.0, stop_loss=2640.0, take_profit=2670.0)
    data.update(overrides)
    return CreateSignalDTO(**data)


@pytest.fixture
async def audience(make_user):
    await make_user("vip1", SubscriptionTier.VIP)
    await make_user("prem1", SubscriptionTier.PREMIUM)
    await make_user("free1", SubscriptionTier.FREE)


async def test_create_persists_notifies_and_publishes(uow, manage_signals, publisher, audience):
    signal = await manage_signals.create(_dto(description="Rebote en soporte"))

    stored = await uow.signals.get(signal.id)
    assert stored.entry_price == 2650.0
    assert stored.description == "Rebote en soporte"

    notifications, total = await uow.notifications.list_for_user("vip1")
    assert total == 1
    assert notifications[0].title == "New BUY Signal - XAUUSD"
    assert notifications[0].message == "Entry: 2650, SL: 2640, TP: 2670"
    assert notifications[0].signal_id == signal.id
    assert (await uow.notifications.list_for_user("free1"))[1] == 0

    assert publisher.topics() == ["signal_published"]
    assert publisher.events[0].signal_id == signal.id
    assert publisher.events[0].signal_type == "buy"


async def test_invalid_signal_publishes_nothing(uow, manage_signals, publisher):
    with pytest.raises(InvalidSignalError):
        await manage_signals.create(_dto(stop_loss=2660.0))
    assert publisher.events == []
    assert (await uow.signals.list())[1] == 0


async def test_update_and_get_view(manage_signals, market, publisher):
    signal = await manage_signals.create(_dto())
    updated = await manage_signals.update(signal.id, take_profit=2680.0, description=None)
    assert updated.take_profit == 2680.0
    assert publisher.events[-1].topic == "signal_updated"
    assert publisher.events[-1].changes == ("take_profit",)

    view = await manage_signals.get_view(signal.id)
    assert view.calculated_status is None

    await market.get_gold_price()
    view = await manage_signals.get_view(signal.id)
    assert view.current_price == 2650.0
    assert view.to_dict()["calculated_status"]["status"] == "active"


async def test_manual_close(uow, manage_signals, publisher, audience):
    signal = await manage_signals.create(_dto())
    outcome = await manage_signals.close(signal.id, SignalResult.WIN, pips_result=150.0)

    assert outcome.notified == 2
    assert outcome.signal.status == SignalLifecycle.CLOSED
    notifications, _ = await uow.notifications.list_for_user("prem1")
    assert notifications[0].title == "Signal Closed - XAUUSD ✅"
    assert notifications[0].message == "Result: WIN (+150 pips)"

    closed_event = publisher.events[-1]
    assert closed_event.topic == "signal_closed"
    assert closed_event.result == "win"
    assert not closed_event.automatic

    with pytest.raises(InvalidSignalError):
        await manage_signals.close(signal.id, SignalResult.LOSS)


async def test_automatic_close_derives_pips(uow, manage_signals, audience):
    signal = await manage_signals.create(_dto())
    outcome = await manage_signals.close(
        signal.id, SignalResult.WIN, exit_price=2670.0, automatic=True,
    )
    assert outcome.signal.pips_result == 200.0

    notifications, _ = await uow.notifications.list_for_user("vip1")
    assert notifications[0].title == "✅ Signal WIN: XAUUSD"
    assert notifications[0].message == "BUY signal closed with +0.8% result"


async def test_delete_and_missing(manage_signals):
    signal = await manage_signals.create(_dto())
    await manage_signals.delete(signal.id)
    with pytest.raises(SignalNotFoundError):
        await manage_signals.get(signal.id)
    with pytest.raises(SignalNotFoundError):
        await manage_signals.delete(signal.id)


async def test_list_filters_and_active(manage_signals):
    await manage_signals.create(_dto())
    await manage_signals.create(_dto(signal_type="sell", stop_loss=2660.0, take_profit=2630.0))
    pending = await manage_signals.create(_dto(status="pending"))

    page = await manage_signals.list(page=1, limit=10, signal_type="SELL")
    assert page.total == 1
    assert page.items[0].signal.signal_type.value == "sell"

    page = await manage_signals.list(page=1, limit=2)
    assert page.total == 3 and len(page.items) == 2 and page.total_pages == 2

    active = await manage_signals.active()
    assert pending.id not in [v.signal.id for v in active]
    assert len(await manage_signals.by_symbol("xauusd")) == 3


async def test_feed_respects_monthly_quota(uow, manage_signals, make_user):
    free = await make_user("free2", SubscriptionTier.FREE)
    vip = await make_user("vip2", SubscriptionTier.VIP)
    admin = await make_user("boss", role=UserRole.ADMIN)

    now = datetime.now(timezone.utc)
    old = Signal.create("XAUUSD", "buy", 2600.0, 2590.0, 2620.0)
    old.created_at = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0) - timedelta(days=1)
    await uow.signals.add(old)
    await uow.commit()
    for _ in range(7):
        await manage_signals.create(_dto())

    feed = await manage_signals.feed(free, now=now + timedelta(seconds=1))
    assert feed.quota == 5
    assert feed.used == 5
    assert old.id not in [v.signal.id for v in feed.signals]
    assert feed.upgrade_message == (
        "Unlimited signals requires the PREMIUM plan. Upgrade to unlock it."
    )

    vip_feed = await manage_signals.feed(vip, limit=20)
    assert vip_feed.quota == -1
    assert vip_feed.used == 8
    assert vip_feed.upgrade_message is None

    assert (await manage_signals.feed(admin, limit=3)).used == 3
