"""
GoldSignal – Trading Mappers
==============================
TradingAccount / AutoTradeSettings / TradeExecution ↔ ORM.
"""

from __future__ import annotations

from typing import Any, Dict

from goldsignal.domain.entities.signal import SignalType
from goldsignal.domain.entities.trade_execution import ExecutionStatus, TradeExecution
from goldsignal.domain.entities.trading_account import (
    AccountCurrency,
    AccountStatus,
    AutoTradeSettings,
    BrokerName,
    PriceMode,
    TradingAccount,
)
from goldsignal.infrastructure.persistence.mappers._conversions import (
    aware,
    to_decimal,
    to_float,
)
from goldsignal.infrastructure.persistence.models.trading import (
    AutoTradeSettingsModel,
    TradeExecutionModel,
    TradingAccountModel,
)


class TradingAccountMapper:

    @staticmethod
    def to_model(account: TradingAccount) -> Dict[str, Any]:
        return {
            "id": account.id,
            "user_id": account.user_id,
            "broker_name": account.broker_name.value,
            "account_id": account.account_id,
            "api_key": account.api_key,
            "api_secret": account.api_secret,
            "account_balance": to_decimal(account.account_balance, 2),
            "peak_balance": to_decimal(account.peak_balance, 2),
            "currency": account.currency.value,
            "leverage": account.leverage,
            "status": account.status.value,
            "last_sync": account.last_sync,
            "created_at": account.created_at,
            "updated_at": account.updated_at,
        }

    @staticmethod
    def to_entity(model: TradingAccountModel) -> TradingAccount:
        return TradingAccount(
            id=model.id,
            user_id=model.user_id,
            broker_name=BrokerName(model.broker_name),
            account_id=model.account_id,
            api_key=model.api_key,
            api_secret=model.api_secret,
            account_balance=float(model.account_balance),
            peak_balance=float(model.peak_balance),
            currency=AccountCurrency(model.currency),
            leverage=model.leverage,
            status=AccountStatus(model.status),
            last_sync=aware(model.last_sync),
            created_at=aware(model.created_at),
            updated_at=aware(model.updated_at),
        )


class AutoTradeSettingsMapper:

    @staticmethod
    def to_model(settings: AutoTradeSettings) -> Dict[str, Any]:
        return {
            "id": settings.id,
            "user_id": settings.user_id,
            "trading_account_id": settings.trading_account_id,
            "enabled": settings.enabled,
            "risk_per_trade": to_decimal(settings.risk_per_trade, 2),
            "max_concurrent_trades": settings.max_concurrent_trades,
            "max_daily_trades": settings.max_daily_trades,
            "stop_loss_mode": settings.stop_loss_mode.value,
            "take_profit_mode": settings.take_profit_mode.value,
            "trading_hours_start": settings.trading_hours_start,
            "trading_hours_end": settings.trading_hours_end,
            "max_drawdown_percentage": to_decimal(settings.max_drawdown_percentage, 2),
            "emergency_stop": settings.emergency_stop,
            "created_at": settings.created_at,
            "updated_at": settings.updated_at,
        }

    @staticmethod
    def to_entity(model: AutoTradeSettingsModel) -> AutoTradeSettings:
        return AutoTradeSettings(
            id=model.id,
            user_id=model.user_id,
            trading_account_id=model.trading_account_id,
            enabled=bool(model.enabled),
            risk_per_trade=float(model.risk_per_trade),
            max_concurrent_trades=model.max_concurrent_trades,
            max_daily_trades=model.max_daily_trades,
            stop_loss_mode=PriceMode(model.stop_loss_mode),
            take_profit_mode=PriceMode(model.take_profit_mode),
            trading_hours_start=model.trading_hours_start,
            trading_hours_end=model.trading_hours_end,
            max_drawdown_percentage=float(model.max_drawdown_percentage),
            emergency_stop=bool(model.emergency_stop),
            created_at=aware(model.created_at),
            updated_at=aware(model.updated_at),
        )


class TradeExecutionMapper:

    @staticmethod
    def to_model(execution: TradeExecution) -> Dict[str, Any]:
        return {
            "id": execution.id,
            "signal_id": execution.signal_id,
            "user_id": execution.user_id,
            "trading_account_id": execution.trading_account_id,
            "symbol": execution.symbol,
            "trade_type": execution.trade_type.value,
            "lot_size": to_decimal(execution.lot_size, 2),
            "entry_price": to_decimal(execution.entry_price),
            "stop_loss": to_decimal(execution.stop_loss),
            "take_profit": to_decimal(execution.take_profit),
            "status": execution.status.value,
            "broker_order_id": execution.broker_order_id,
            "actual_entry_price": to_decimal(execution.actual_entry_price),
            "actual_exit_price": to_decimal(execution.actual_exit_price),
            "profit_loss": to_decimal(execution.profit_loss, 2),
            "commission": to_decimal(execution.commission, 2),
            "swap": to_decimal(execution.swap, 2),
            "error_message": execution.error_message,
            "execution_time": execution.execution_time,
            "close_time": execution.close_time,
            "created_at": execution.created_at,
        }

    @staticmethod
    def to_entity(model: TradeExecutionModel) -> TradeExecution:
        return TradeExecution(
            id=model.id,
            signal_id=model.signal_id,
            user_id=model.user_id,
            trading_account_id=model.trading_account_id,
            symbol=model.symbol,
            trade_type=SignalType(model.trade_type),
            lot_size=float(model.lot_size),
            entry_price=float(model.entry_price),
            stop_loss=to_float(model.stop_loss),
            take_profit=to_float(model.take_profit),
            status=ExecutionStatus(model.status),
            broker_order_id=model.broker_order_id,
            actual_entry_price=to_float(model.actual_entry_price),
            actual_exit_price=to_float(model.actual_exit_price),
            profit_loss=float(model.profit_loss or 0),
            commission=float(model.commission or 0),
            swap=float(model.swap or 0),
            error_message=model.error_message,
            execution_time=aware(model.execution_time),
            close_time=aware(model.close_time),
            created_at=aware(model.created_at),
        )
