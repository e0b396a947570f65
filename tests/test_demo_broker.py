"""Test the in-memory demo broker."""

from datetime import datetime, timedelta, timezone

import pytest

from goldsignal.application.ports.errors import BrokerError
from goldsignal.domain.value_objects.broker_types import OrderRequest
from goldsignal.infrastructure.external.demo_broker import DemoBrokerAPI


class FixedRandom:
    """random() = 0.5 → precio medio sin variación."""

    def random(self):
        return 0.5


@pytest.fixture
def prices():
    return {"mid": 2650.0}


@pytest.fixture
def broker(prices):
    return DemoBrokerAPI(price_source=lambda: prices["mid"], rng=FixedRandom())


@pytest.fixture
def creds():
    return DemoBrokerAPI.create_demo_credentials("demo123")


async def test_demo_accounts(broker, creds):
    info = await broker.get_account_info(creds)
    assert info.balance == 10_000.0 and info.leverage == 100 and info.currency == "USD"
    other = await broker.get_account_info(DemoBrokerAPI.create_demo_credentials("demo456"))
    assert other.balance == 5_000.0 and other.leverage == 50

    with pytest.raises(BrokerError, match="Demo account nope not found"):
        await broker.get_account_info(DemoBrokerAPI.create_demo_credentials("nope"))


async def test_symbol_and_price(broker):
    info = await broker.get_symbol_info("XAUUSD")
    assert info.contract_size == 100 and info.lot_step == 0.01
    assert await broker.get_current_price("XAUUSD") == (2649.85, 2650.15)

    with pytest.raises(BrokerError):
        await broker.get_symbol_info("EURUSD")


async def test_falls_back_to_base_price():
    broker = DemoBrokerAPI(price_source=lambda: None, base_price=2000.0, rng=FixedRandom())
    assert await broker.get_current_price("XAUUSD") == (1999.85, 2000.15)


async def test_buy_round_trip(broker, creds, prices):
    result = await broker.place_order(creds, OrderRequest("XAUUSD", "buy", 0.5, 2640.0, 2670.0))
    assert result.success
    assert result.order_id == "DEMO_1000"
    assert result.price == 2650.15
    assert result.commission == 3.5

    prices["mid"] = 2660.0
    positions = await broker.get_open_positions(creds)
    assert len(positions) == 1
    # (2659.85 - 2650.15) × 0.5 × 100 - 3.5
    assert positions[0].profit == pytest.approx(481.5)

    closed = await broker.close_order(creds, "DEMO_1000")
    assert closed.success
    assert closed.price == 2659.85
    assert closed.profit == pytest.approx(481.5)

    info = await broker.get_account_info(creds)
    assert info.balance == pytest.approx(10_481.5)
    assert info.equity == info.balance == info.free_margin
    assert await broker.get_open_positions(creds) == []


async def test_sell_fills_at_bid(broker, creds):
    result = await broker.place_order(creds, OrderRequest("XAUUSD", "sell", 1.0))
    assert result.price == 2649.85
    second = await broker.place_order(creds, OrderRequest("XAUUSD", "sell", 1.0))
    assert second.order_id == "DEMO_1001"


@pytest.mark.parametrize("account, order, error", [
    ("ghost", OrderRequest("XAUUSD", "buy", 0.1), "Demo account ghost not found"),
    ("demo123", OrderRequest("XAUUSD", "hold", 0.1), "Unknown order type: hold"),
    ("demo123", OrderRequest("XAUUSD", "buy", 0.001), "Invalid volume: 0.001"),
    ("demo123", OrderRequest("XAUUSD", "buy", 150), "Invalid volume: 150"),
    ("demo123", OrderRequest("BTCUSD", "buy", 0.1), "Price for BTCUSD not available in demo"),
])
async def test_rejected_orders(broker, account, order, error):
    result = await broker.place_order(DemoBrokerAPI.create_demo_credentials(account), order)
    assert not result.success
    assert result.error == error


async def test_modify_and_close_unknown(broker, creds):
    await broker.place_order(creds, OrderRequest("XAUUSD", "buy", 0.1))
    assert await broker.modify_order(creds, "DEMO_1000", stop_loss=2645.0)
    positions = await broker.get_open_positions(creds)
    assert positions[0].stop_loss == 2645.0
    assert not await broker.modify_order(creds, "DEMO_9999", take_profit=2700.0)

    missing = await broker.close_order(creds, "DEMO_9999")
    assert not missing.success


async def test_trade_history_filter(broker, creds):
    history = await broker.get_trade_history(creds)
    assert [h.profit for h in history] == [46.30, 28.15]

    since = datetime.now(timezone.utc) - timedelta(hours=30)
    recent = await broker.get_trade_history(creds, from_date=since)
    assert [h.order_id for h in recent] == ["DEMO_HIST_001"]


async def test_reset_account(broker, creds):
    await broker.place_order(creds, OrderRequest("XAUUSD", "buy", 0.1))
    info = broker.reset_account("demo123", balance=2_500.0)
    assert info.balance == 2_500.0
    assert await broker.get_open_positions(creds) == []

    broker.reset()
    assert (await broker.get_account_info(creds)).balance == 10_000.0
