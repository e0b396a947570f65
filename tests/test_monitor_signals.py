"""Test the price monitor pass and its background worker."""

import asyncio

import pytest

from goldsignal.application.dto.signal_dto import CreateSignalDTO
from goldsignal.application.ports.errors import MarketDataError
from goldsignal.application.use_cases import MonitorSignalsUseCase
from goldsignal.domain.entities.signal import SignalLifecycle, SignalResult
from goldsignal.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from goldsignal.infrastructure.workers.signal_monitor import SignalMonitorWorker


@pytest.fixture
def monitor(uow, market, publisher, calculator, manage_signals):
    return MonitorSignalsUseCase(
        uow=uow,
        market_data=market,
        event_publisher=publisher,
        status_calculator=calculator,
        manage_signals=manage_signals,
    )


async def _signal(manage_signals, signal_type, entry, sl, tp, status="active"):
    return await manage_signals.create(CreateSignalDTO(
        signal_type=signal_type, entry_price=entry, stop_loss=sl, take_profit=tp, status=status,
    ))


async def test_run_once_activates_and_closes(uow, monitor, manage_signals, publisher):
    pending = await _signal(manage_signals, "buy", 2650.0, 2640.0, 2670.0, status="pending")
    winner = await _signal(manage_signals, "buy", 2600.0, 2590.0, 2640.0)
    waiting = await _signal(manage_signals, "sell", 2650.0, 2660.0, 2630.0)
    publisher.events.clear()

    result = await monitor.run_once(price=2645.0)

    assert result.price == 2645.0
    assert result.checked == 3
    assert result.activated == [pending.id]
    assert result.closed == [winner.id]

    assert (await uow.signals.get(pending.id)).status == SignalLifecycle.ACTIVE
    closed = await uow.signals.get(winner.id)
    assert closed.status == SignalLifecycle.CLOSED
    assert closed.result == SignalResult.WIN
    assert closed.pips_result == 400.0
    assert (await uow.signals.get(waiting.id)).status == SignalLifecycle.ACTIVE

    assert publisher.topics() == ["price", "signal_closed"]
    closed_event = publisher.events[1]
    assert closed_event.automatic
    assert closed_event.exit_price == 2640.0


async def test_stop_loss_closes_at_level(uow, monitor, manage_signals):
    sell = await _signal(manage_signals, "sell", 2650.0, 2660.0, 2630.0)

    result = await monitor.run_once(price=2675.0)

    assert result.closed == [sell.id]
    closed = await uow.signals.get(sell.id)
    assert closed.result == SignalResult.LOSS
    assert closed.pips_result == -100.0


async def test_run_once_uses_provider_price(monitor, market):
    market.price = 2701.5
    result = await monitor.run_once()
    assert result.price == 2701.5
    assert result.checked == 0
    assert market.calls == 1


async def test_provider_errors_propagate(monitor, market):
    market.error = MarketDataError("limit", status_code=429, quota_exhausted=True)
    with pytest.raises(MarketDataError):
        await monitor.run_once()


async def test_worker_survives_provider_failure(uow, monitor, market, subscriptions):
    worker = SignalMonitorWorker(
        uow_factory=lambda: SqlAlchemyUnitOfWork(session=uow.session),
        monitor_factory=lambda _uow: monitor,
        subscription_factory=lambda _uow: subscriptions,
        interval=60.0,
    )

    result = await worker.check_signals()
    assert result is not None and result.price == 2650.0
    assert worker.last_result is result

    market.error = MarketDataError("Daily API limit reached", quota_exhausted=True)
    assert await worker.check_signals() is None
    assert worker.last_result is result

    assert await worker.check_subscriptions() == 0


async def test_pending_signal_is_not_closed_before_entry(uow, monitor, manage_signals, publisher):
    pending = await _signal(manage_signals, "buy", 2650.0, 2640.0, 2670.0, status="pending")
    publisher.events.clear()

    result = await monitor.run_once(price=2675.0)

    assert result.checked == 1
    assert result.closed == [] and result.activated == []
    stored = await uow.signals.get(pending.id)
    assert stored.status == SignalLifecycle.PENDING
    assert stored.result is None
    assert publisher.topics() == ["price"]


class _LostConnectionUoW:
    async def __aenter__(self):
        raise RuntimeError("db connection lost")

    async def __aexit__(self, *exc_info):
        return False


async def test_worker_keeps_running_after_unexpected_error(monitor, subscriptions):
    attempts = []

    def uow_factory():
        attempts.append(1)
        return _LostConnectionUoW()

    worker = SignalMonitorWorker(
        uow_factory=uow_factory,
        monitor_factory=lambda _uow: monitor,
        subscription_factory=lambda _uow: subscriptions,
        interval=0.01,
    )
    await worker.start()
    try:
        await asyncio.sleep(0.2)
        assert worker.is_running
    finally:
        await worker.stop()

    assert len(attempts) > 1
