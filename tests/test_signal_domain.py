"""Test Signal entity lifecycle and status classification."""

import pytest

from goldsignal.domain.entities.signal import Signal, SignalLifecycle, SignalResult, SignalType
from goldsignal.domain.exceptions.domain_errors import InvalidSignalError
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.domain.value_objects.signal_status import SignalStatus


def _buy(**overrides):
    data = dict(symbol="xauusd", signal_type="buy", entry_price=2650.0,
                stop_loss=2640.0, take_profit=2670.0)
    data.update(overrides)
    return Signal.create(**data)


def _sell(**overrides):
    data = dict(symbol="XAUUSD", signal_type="SELL", entry_price=2650.0,
                stop_loss=2660.0, take_profit=2630.0)
    data.update(overrides)
    return Signal.create(**data)


# ─── Entidad ────────────────────────────────────────────────────────────

def test_create_normalizes_symbol_and_type():
    signal = _buy()
    assert signal.symbol == "XAUUSD"
    assert signal.signal_type == SignalType.BUY
    assert signal.status == SignalLifecycle.ACTIVE
    assert len(signal.id) == 12
    assert signal.risk_reward == pytest.approx(2.0)


@pytest.mark.parametrize("overrides", [
    {"stop_loss": 2655.0},             # SL por encima de la entrada
    {"take_profit": 2645.0},           # TP por debajo de la entrada
    {"entry_price": 0},
    {"confidence": 101},
    {"signal_type": "hold"},
    {"status": "closed"},
])
def test_create_rejects_invalid_buy(overrides):
    with pytest.raises(InvalidSignalError):
        _buy(**overrides)


def test_sell_geometry_is_mirrored():
    _sell()
    with pytest.raises(InvalidSignalError):
        _sell(stop_loss=2640.0)


def test_update_restores_state_when_geometry_breaks():
    signal = _buy()
    with pytest.raises(InvalidSignalError):
        signal.update(stop_loss=2660.0)
    assert signal.stop_loss == 2640.0

    signal.update(take_profit=2680.0, description="Ruptura de resistencia")
    assert signal.take_profit == 2680.0
    assert signal.description == "Ruptura de resistencia"


def test_update_rejects_unknown_fields_and_closing():
    signal = _buy()
    with pytest.raises(InvalidSignalError):
        signal.update(result="win")
    with pytest.raises(InvalidSignalError):
        signal.update(status="closed")


def test_close_is_one_shot():
    signal = _buy()
    signal.close(SignalResult.WIN, 200.0)
    assert signal.is_closed
    assert signal.closed_at is not None
    assert signal.to_dict()["result"] == "win"

    with pytest.raises(InvalidSignalError):
        signal.close(SignalResult.LOSS)
    with pytest.raises(InvalidSignalError):
        signal.update(description="tarde")


def test_activate_only_from_pending():
    signal = _buy(status="pending")
    signal.activate()
    assert signal.status == SignalLifecycle.ACTIVE
    with pytest.raises(InvalidSignalError):
        signal.activate()


# ─── Calculadora de estado ──────────────────────────────────────────────

@pytest.mark.parametrize("price, status, pnl", [
    (2675.0, SignalStatus.HIT_TP, 20.0),
    (2670.0, SignalStatus.HIT_TP, 20.0),
    (2635.0, SignalStatus.HIT_SL, -10.0),
    (2645.0, SignalStatus.ACTIVE, -5.0),
    (2650.0, SignalStatus.ACTIVE, 0.0),
    (2655.0, SignalStatus.PENDING, 0.0),
])
def test_buy_classification(price, status, pnl):
    info = SignalStatusCalculator().calculate(_buy(), price)
    assert info.status == status
    assert info.pnl == pytest.approx(pnl)


@pytest.mark.parametrize("price, status, pnl", [
    (2625.0, SignalStatus.HIT_TP, 20.0),
    (2665.0, SignalStatus.HIT_SL, -10.0),
    (2655.0, SignalStatus.ACTIVE, -5.0),
    (2640.0, SignalStatus.PENDING, 0.0),
])
def test_sell_classification(price, status, pnl):
    info = SignalStatusCalculator().calculate(_sell(), price)
    assert info.status == status
    assert info.pnl == pytest.approx(pnl)


def test_status_text_and_percentage():
    calc = SignalStatusCalculator()
    tp = calc.calculate(_buy(), 2680.0)
    assert tp.status_text == "TP HIT (+0.8%)"
    assert tp.is_profit and tp.is_terminal
    assert tp.pnl_percentage == pytest.approx(20.0 / 2650.0 * 100)

    active = calc.calculate(_buy(), 2645.0)
    assert active.status_text == "ACTIVE (-0.2%)"
    assert not active.is_profit and not active.is_terminal


def test_closed_signal_reports_stored_result():
    signal = _buy()
    signal.close(SignalResult.WIN, 200.0)
    info = SignalStatusCalculator(pip_size=0.1).calculate(signal, 1000.0)
    assert info.status == SignalStatus.CLOSED
    assert info.status_text == "CLOSED (WIN)"
    assert info.pnl == pytest.approx(20.0)


def test_pips_and_result_mapping():
    calc = SignalStatusCalculator(pip_size=0.1)
    assert calc.pips_between(_buy(), 2670.0) == 200.0
    assert calc.pips_between(_sell(), 2660.0) == -100.0
    assert calc.result_for(calc.calculate(_buy(), 2690.0)) == SignalResult.WIN
    assert calc.result_for(calc.calculate(_buy(), 2600.0)) == SignalResult.LOSS
    with pytest.raises(ValueError):
        calc.result_for(calc.calculate(_buy(), 2648.0))


def test_enhance_pairs_each_signal():
    signals = [_buy(), _sell()]
    pairs = SignalStatusCalculator().enhance(signals, 2650.0)
    assert [s for s, _ in pairs] == signals
    assert all(info.status == SignalStatus.ACTIVE for _, info in pairs)


def test_invalid_pip_size():
    with pytest.raises(ValueError):
        SignalStatusCalculator(pip_size=0)
