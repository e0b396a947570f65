"""Test position sizing and auto-trade risk rules."""

from datetime import datetime, timezone

import pytest

from goldsignal.domain.entities.trading_account import (
    AccountStatus,
    AutoTradeSettings,
    BrokerName,
    TradingAccount,
)
from goldsignal.domain.exceptions.domain_errors import RiskManagementError
from goldsignal.domain.services.risk_calculator import RiskCalculator, RiskConfig
from goldsignal.infrastructure.external.demo_broker import XAUUSD_INFO


def _account(balance=10_000.0, peak=None, status=AccountStatus.ACTIVE):
    account = TradingAccount(user_id="u1", broker_name=BrokerName.DEMO, account_id="demo123",
                             status=status)
    account.record_balance(peak or balance)
    account.record_balance(balance)
    return account


def _settings(**overrides):
    settings = AutoTradeSettings(user_id="u1", trading_account_id="acc1", enabled=True)
    for name, value in overrides.items():
        setattr(settings, name, value)
    return settings


def test_lot_size_reference_example():
    """10k de balance, 2% de riesgo y 10 USD de stop → 0.20 lotes."""
    lot = RiskCalculator().calculate_lot_size(10_000, 2.0, 2650.0, 2640.0, XAUUSD_INFO)
    assert lot == pytest.approx(0.20)


def test_lot_size_is_clamped_and_stepped():
    calc = RiskCalculator()
    assert calc.calculate_lot_size(100, 1.0, 2650.0, 2600.0, XAUUSD_INFO) == XAUUSD_INFO.min_lot
    assert calc.calculate_lot_size(10_000_000, 10.0, 2650.0, 2649.99, XAUUSD_INFO) == XAUUSD_INFO.max_lot
    assert calc.calculate_lot_size(10_000, 1.5, 2650.0, 2643.0, XAUUSD_INFO) == pytest.approx(0.21)


def test_lot_size_zero_stop_distance():
    with pytest.raises(RiskManagementError):
        RiskCalculator().calculate_lot_size(10_000, 2.0, 2650.0, 2650.0, XAUUSD_INFO)


def test_zero_balance_returns_min_lot():
    assert RiskCalculator().calculate_lot_size(0, 2.0, 2650.0, 2640.0, XAUUSD_INFO) == 0.01


@pytest.mark.parametrize("account_kwargs, settings_kwargs, counts, reason", [
    ({"status": AccountStatus.INACTIVE}, {}, (0, 0), "Trading account not active"),
    ({}, {"emergency_stop": True}, (0, 0), "Emergency stop activated"),
    ({}, {"risk_per_trade": 6.0}, (0, 0), "Risk per trade too high (max 5%)"),
    ({"balance": 50.0}, {}, (0, 0), "Insufficient account balance"),
    ({"balance": 7_000.0, "peak": 10_000.0}, {"max_drawdown_percentage": 20.0}, (0, 0),
     "Maximum drawdown exceeded"),
    ({}, {"max_concurrent_trades": 2}, (2, 0), "Maximum concurrent trades reached"),
    ({}, {"max_daily_trades": 3}, (0, 3), "Daily trade limit reached"),
])
def test_validate_trade_rules(account_kwargs, settings_kwargs, counts, reason):
    validation = RiskCalculator().validate_trade(
        _account(**account_kwargs), _settings(**settings_kwargs),
        open_trades=counts[0], trades_today=counts[1],
    )
    assert not validation.valid
    assert validation.reason == reason


def test_validate_trade_ok():
    validation = RiskCalculator().validate_trade(_account(), _settings(), 1, 1)
    assert validation.valid
    assert validation.reason is None


def test_drawdown_within_limit():
    account = _account(balance=9_000.0, peak=10_000.0)
    assert account.drawdown_percentage() == pytest.approx(10.0)
    assert RiskCalculator.check_drawdown_limits(account, _settings(max_drawdown_percentage=10.0))


def test_trading_hours_window():
    calc = RiskCalculator()
    settings = _settings(trading_hours_start="09:00", trading_hours_end="17:00")
    assert calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
    assert calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 17, 0, 59, tzinfo=timezone.utc))
    assert not calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 17, 1, tzinfo=timezone.utc))


def test_trading_hours_across_midnight():
    calc = RiskCalculator()
    settings = _settings(trading_hours_start="22:00", trading_hours_end="02:00")
    assert calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc))
    assert calc.is_within_trading_hours(settings, datetime(2026, 3, 3, 1, 15, tzinfo=timezone.utc))
    assert not calc.is_within_trading_hours(settings, datetime(2026, 3, 3, 12, 0, tzinfo=timezone.utc))


def test_trading_hours_in_configured_timezone():
    calc = RiskCalculator(RiskConfig(timezone="Asia/Manila"))
    settings = _settings(trading_hours_start="09:00", trading_hours_end="17:00")
    # 02:00 UTC = 10:00 en Manila
    assert calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 2, 0, tzinfo=timezone.utc))
    assert not calc.is_within_trading_hours(settings, datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))
