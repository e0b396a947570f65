"""
GoldSignal – Domain Service: Signal Status Calculator
========================================================
Clasifica una señal contra el precio actual y calcula su P&L.

REGLAS (BUY):
  1. precio >= TP      → HIT_TP   pnl = TP - entry
  2. precio <= SL      → HIT_SL   pnl = SL - entry
  3. precio <= entry   → ACTIVE   pnl = precio - entry
  4. resto             → PENDING  (el precio aún no tocó la entrada)

REGLAS (SELL, espejo):
  1. precio <= TP      → HIT_TP   pnl = entry - TP
  2. precio >= SL      → HIT_SL   pnl = entry - SL
  3. precio >= entry   → ACTIVE   pnl = entry - precio
  4. resto             → PENDING

  pnl% = pnl / entry × 100

El orden importa: TP se evalúa antes que SL y ambos antes que la
entrada, así un gap que atraviesa varios niveles reporta el primero
que aplica en esa secuencia.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from goldsignal.domain.entities.signal import Signal, SignalResult
from goldsignal.domain.value_objects.signal_status import SignalStatus, SignalStatusInfo


class SignalStatusCalculator:
    """
    Clasificador de estado/P&L de señales.

    NO tiene dependencias externas. pip_size solo se usa para
    convertir movimientos de precio a pips.
    """

    def __init__(self, pip_size: float = 0.1):
        if pip_size <= 0:
            raise ValueError("pip_size debe ser positivo")
        self._pip_size = pip_size

    @property
    def pip_size(self) -> float:
        return self._pip_size

    def calculate(self, signal: Signal, current_price: float) -> SignalStatusInfo:
        """
        Calcula el estado de la señal al precio dado.

        Args:
            signal: Señal a evaluar
            current_price: Último precio conocido del instrumento

        Returns:
            SignalStatusInfo con estado, P&L absoluto y porcentual
        """
        if signal.is_closed:
            return self._closed_status(signal)

        entry = signal.entry_price
        tp = signal.take_profit
        sl = signal.stop_loss

        if signal.is_buy:
            if current_price >= tp:
                return self._hit_tp(tp - entry, entry)
            if current_price <= sl:
                return self._hit_sl(sl - entry, entry)
            if current_price <= entry:
                return self._active(current_price - entry, entry)
        else:
            if current_price <= tp:
                return self._hit_tp(entry - tp, entry)
            if current_price >= sl:
                return self._hit_sl(entry - sl, entry)
            if current_price >= entry:
                return self._active(entry - current_price, entry)

        return SignalStatusInfo(
            status=SignalStatus.PENDING,
            pnl=0.0,
            pnl_percentage=0.0,
            is_profit=False,
            status_text="PENDING",
        )

    def enhance(
        self, signals: Iterable[Signal], current_price: float,
    ) -> List[Tuple[Signal, SignalStatusInfo]]:
        """Aplica calculate() a cada señal de la lista."""
        return [(signal, self.calculate(signal, current_price)) for signal in signals]

    def pips_between(self, signal: Signal, exit_price: float) -> float:
        """Pips a favor (positivo) o en contra (negativo) de la señal."""
        move = exit_price - signal.entry_price
        if not signal.is_buy:
            move = -move
        return round(move / self._pip_size, 1)

    def result_for(self, info: SignalStatusInfo) -> SignalResult:
        """Resultado de cierre correspondiente a un estado terminal."""
        if info.status == SignalStatus.HIT_TP:
            return SignalResult.WIN
        if info.status == SignalStatus.HIT_SL:
            return SignalResult.LOSS
        raise ValueError(f"Estado no terminal: {info.status.value}")

    # ─── Helpers ────────────────────────────────────────────────────────

    @staticmethod
    def _pct(pnl: float, entry: float) -> float:
        return (pnl / entry) * 100.0 if entry else 0.0

    def _hit_tp(self, pnl: float, entry: float) -> SignalStatusInfo:
        pct = self._pct(pnl, entry)
        return SignalStatusInfo(
            status=SignalStatus.HIT_TP,
            pnl=pnl,
            pnl_percentage=pct,
            is_profit=True,
            status_text=f"TP HIT (+{pct:.1f}%)",
        )

    def _hit_sl(self, pnl: float, entry: float) -> SignalStatusInfo:
        pct = self._pct(pnl, entry)
        return SignalStatusInfo(
            status=SignalStatus.HIT_SL,
            pnl=pnl,
            pnl_percentage=pct,
            is_profit=False,
            status_text=f"SL HIT ({pct:.1f}%)",
        )

    def _active(self, pnl: float, entry: float) -> SignalStatusInfo:
        pct = self._pct(pnl, entry)
        sign = "+" if pct >= 0 else ""
        return SignalStatusInfo(
            status=SignalStatus.ACTIVE,
            pnl=pnl,
            pnl_percentage=pct,
            is_profit=pnl >= 0,
            status_text=f"ACTIVE ({sign}{pct:.1f}%)",
        )

    def _closed_status(self, signal: Signal) -> SignalStatusInfo:
        pnl = (signal.pips_result or 0.0) * self._pip_size
        pct = self._pct(pnl, signal.entry_price)
        result = signal.result.value.upper() if signal.result else "CLOSED"
        return SignalStatusInfo(
            status=SignalStatus.CLOSED,
            pnl=pnl,
            pnl_percentage=pct,
            is_profit=signal.result == SignalResult.WIN,
            status_text=f"CLOSED ({result})",
        )
