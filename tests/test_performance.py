"""Test aggregation of closed signals into performance metrics."""

import pytest

from goldsignal.domain.entities.signal import Signal, SignalResult
from goldsignal.domain.services.performance_calculator import PerformanceCalculator


def _closed(result, pips):
    signal = Signal.create("XAUUSD", "buy", 2650.0, 2640.0, 2670.0)
    signal.close(result, pips)
    return signal


def test_empty_window():
    performance = PerformanceCalculator.calculate([], period_days=7)
    assert performance.total_signals == 0
    assert performance.win_rate == 0.0
    assert performance.period_days == 7


def test_metrics():
    signals = [
        _closed(SignalResult.WIN, 200.0),
        _closed(SignalResult.WIN, 100.0),
        _closed(SignalResult.LOSS, -100.0),
        _closed(SignalResult.BREAKEVEN, None),
        Signal.create("XAUUSD", "buy", 2650.0, 2640.0, 2670.0),   # abierta: se ignora
    ]
    performance = PerformanceCalculator.calculate(signals)
    assert performance.total_signals == 4
    assert (performance.wins, performance.losses, performance.breakevens) == (2, 1, 1)
    assert performance.win_rate == 50.0
    assert performance.total_pips == 200.0
    assert performance.avg_pips == 50.0
    assert performance.profit_factor == 3.0


def test_profit_factor_without_losses_is_winning_pips():
    performance = PerformanceCalculator.calculate([_closed(SignalResult.WIN, 150.0)])
    assert performance.profit_factor == pytest.approx(150.0)
    assert performance.to_dict()["win_rate"] == 100.0
