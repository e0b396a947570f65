"""
GoldSignal – Domain Service: Risk Calculator
===============================================
Dimensionamiento de posición y validaciones de riesgo del auto-trading.

FÓRMULA DE LOTAJE:
    riskAmount  = balance × riesgo% / 100
    pipDistance = |entry - SL| / point
    pipValue    = tick_value × (point / tick_size)
    lot         = riskAmount / (pipDistance × pipValue)

  Luego se redondea al múltiplo más cercano de lot_step (half-up)
  y se limita a [min_lot, max_lot].

  Ejemplo XAUUSD demo: balance=10000, riesgo=2%, entry=2650, SL=2640
      riskAmount  = 200
      pipDistance = 10 / 0.01 = 1000
      pipValue    = 1 × (0.01 / 0.01) = 1
      lot         = 200 / 1000 = 0.20

VALIDACIONES (en orden, la primera que falla gana):
  cuenta inactiva → emergency stop → riesgo > máximo → balance mínimo
  → drawdown → trades concurrentes → trades diarios
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from goldsignal.domain.entities.trading_account import AutoTradeSettings, TradingAccount
from goldsignal.domain.exceptions.domain_errors import RiskManagementError
from goldsignal.domain.value_objects.broker_types import SymbolInfo


@dataclass
class RiskConfig:
    """Configuración de gestión de riesgo."""

    max_risk_per_trade: float = 5.0     # % máximo por operación
    min_account_balance: float = 100.0  # balance mínimo para operar
    timezone: str = "UTC"               # zona de las ventanas HH:MM


@dataclass
class TradeValidation:
    """Resultado de validate_trade()."""

    valid: bool
    reason: Optional[str] = None


class RiskCalculator:
    """
    Calculadora de lotaje y guardián de reglas de riesgo.

    NO tiene dependencias externas.
    """

    def __init__(self, config: Optional[RiskConfig] = None):
        self._config = config or RiskConfig()
        self._tz = ZoneInfo(self._config.timezone)

    @property
    def config(self) -> RiskConfig:
        return self._config

    # ════════════════════════════════════════════════════════════════
    #  LOTAJE
    # ════════════════════════════════════════════════════════════════

    def calculate_lot_size(
        self,
        account_balance: float,
        risk_percentage: float,
        entry_price: float,
        stop_loss: float,
        symbol_info: SymbolInfo,
    ) -> float:
        """
        Calcula el volumen en lotes para arriesgar risk_percentage del balance.

        Args:
            account_balance: Balance actual de la cuenta
            risk_percentage: Riesgo por operación en %
            entry_price: Precio de entrada de la señal
            stop_loss: Stop loss de la señal
            symbol_info: Especificación del símbolo en el broker

        Returns:
            Lotes redondeados a lot_step y limitados a [min_lot, max_lot]

        Raises:
            RiskManagementError: distancia SL nula o símbolo mal especificado
        """
        if symbol_info.point <= 0 or symbol_info.tick_size <= 0 or symbol_info.lot_step <= 0:
            raise RiskManagementError(
                f"Especificación inválida para {symbol_info.symbol}", rule="symbol_info",
            )
        if account_balance <= 0 or risk_percentage <= 0:
            return symbol_info.min_lot

        risk_amount = account_balance * (risk_percentage / 100.0)
        pip_distance = abs(entry_price - stop_loss) / symbol_info.point
        if pip_distance == 0:
            raise RiskManagementError("Distancia a stop loss nula", rule="stop_distance")

        pip_value = symbol_info.tick_value * (symbol_info.point / symbol_info.tick_size)
        if pip_value <= 0:
            raise RiskManagementError(
                f"Valor de pip inválido para {symbol_info.symbol}", rule="symbol_info",
            )

        raw_lot = risk_amount / (pip_distance * pip_value)
        return self._normalize_lot(raw_lot, symbol_info)

    @staticmethod
    def _normalize_lot(raw_lot: float, symbol_info: SymbolInfo) -> float:
        step = symbol_info.lot_step
        steps = math.floor(raw_lot / step + 0.5)
        decimals = max(0, -int(math.floor(math.log10(step)))) if step < 1 else 0
        lot = round(steps * step, decimals)
        return min(max(lot, symbol_info.min_lot), symbol_info.max_lot)

    # ════════════════════════════════════════════════════════════════
    #  VALIDACIONES
    # ════════════════════════════════════════════════════════════════

    def validate_trade(
        self,
        account: TradingAccount,
        settings: AutoTradeSettings,
        open_trades: int = 0,
        trades_today: int = 0,
    ) -> TradeValidation:
        """Aplica las reglas de riesgo en orden y devuelve la primera violación."""
        if not account.is_active:
            return TradeValidation(False, "Trading account not active")

        if settings.emergency_stop:
            return TradeValidation(False, "Emergency stop activated")

        max_risk = self._config.max_risk_per_trade
        if settings.risk_per_trade > max_risk:
            return TradeValidation(False, f"Risk per trade too high (max {max_risk:g}%)")

        if account.account_balance < self._config.min_account_balance:
            return TradeValidation(False, "Insufficient account balance")

        if not self.check_drawdown_limits(account, settings):
            return TradeValidation(False, "Maximum drawdown exceeded")

        if open_trades >= settings.max_concurrent_trades:
            return TradeValidation(False, "Maximum concurrent trades reached")

        if trades_today >= settings.max_daily_trades:
            return TradeValidation(False, "Daily trade limit reached")

        return TradeValidation(True)

    @staticmethod
    def check_drawdown_limits(account: TradingAccount, settings: AutoTradeSettings) -> bool:
        """
        True mientras el drawdown desde el pico no supere el máximo.

        drawdown% = (peak - balance) / peak × 100
        """
        return account.drawdown_percentage() <= settings.max_drawdown_percentage

    def is_within_trading_hours(
        self,
        settings: AutoTradeSettings,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Comprueba la ventana HH:MM (inclusiva en ambos extremos).

        Una ventana con start > end cruza medianoche: 22:00–02:00
        acepta 23:30 y 01:15.
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        local = now.astimezone(self._tz).time().replace(second=0, microsecond=0)

        start = self._parse_hhmm(settings.trading_hours_start)
        end = self._parse_hhmm(settings.trading_hours_end)

        if start <= end:
            return start <= local <= end
        return local >= start or local <= end

    @staticmethod
    def _parse_hhmm(value: str) -> time:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
