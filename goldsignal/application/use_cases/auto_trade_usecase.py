"""
GoldSignal – Auto Trade Use Case
===================================
Conexión de cuentas de broker y ejecución automática de señales.

═══════════════════════════════════════════════════════════════
            EJECUCIÓN DE UNA SEÑAL
═══════════════════════════════════════════════════════════════

  SignalPublished
       │
       ▼
  Para cada cuenta ACTIVE:
       ├── sin settings / auto-trade apagado   → skip
       ├── ya ejecutada para esta señal        → skip
       ├── RiskCalculator.validate_trade()     → skip con motivo
       ├── fuera de horario                    → skip
       └── symbol info → lotaje → orden de mercado
                 ├── broker OK   → TradeExecution FILLED
                 └── broker FAIL → TradeExecution CANCELLED

  Un fallo en una cuenta NUNCA detiene las demás; cada cuenta
  se confirma en su propio commit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from goldsignal.application.dto.trading_dto import (
    AccountSummaryDTO,
    AutoTradeRunDTO,
    ConnectAccountDTO,
)
from goldsignal.application.ports.broker_api import IBrokerAPI
from goldsignal.application.ports.errors import BrokerError
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.domain.entities.signal import Signal
from goldsignal.domain.entities.trade_execution import ExecutionStatus, TradeExecution
from goldsignal.domain.entities.trading_account import (
    AccountCurrency,
    AutoTradeSettings,
    BrokerName,
    TradingAccount,
)
from goldsignal.domain.events.domain_events import TradeExecuted
from goldsignal.domain.exceptions.domain_errors import (
    DomainError,
    EntityNotFoundError,
    ValidationError,
)
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.risk_calculator import RiskCalculator
from goldsignal.domain.value_objects.broker_types import (
    BrokerCredentials,
    HistoryEntry,
    OrderRequest,
    Position,
)
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.autotrade")


class AutoTradeUseCase:

    def __init__(
        self,
        uow: IUnitOfWork,
        brokers: Dict[str, IBrokerAPI],
        risk_calculator: RiskCalculator,
        event_publisher: IEventPublisher,
    ):
        self._uow = uow
        self._brokers = brokers
        self._risk = risk_calculator
        self._publisher = event_publisher

    # ════════════════════════════════════════════════════════════════
    #  CUENTAS
    # ════════════════════════════════════════════════════════════════

    async def connect_account(self, user_id: str, dto: ConnectAccountDTO) -> TradingAccount:
        """
        Valida credenciales contra el broker y guarda la cuenta.

        Crea además la configuración de auto-trading por defecto
        (deshabilitada hasta que el usuario la active).
        """
        try:
            broker_name = BrokerName(dto.broker_name)
        except ValueError:
            raise ValidationError(
                f"Broker desconocido: {dto.broker_name}", field="broker_name",
                value=dto.broker_name,
            )
        broker = self._broker(broker_name.value)

        existing = await self._uow.accounts.find_by_broker_account(
            user_id, broker_name.value, dto.account_id,
        )
        if existing is not None:
            raise ValidationError(
                "Trading account already connected", field="account_id", value=dto.account_id,
            )

        credentials = BrokerCredentials(
            account_id=dto.account_id, api_key=dto.api_key, api_secret=dto.api_secret,
        )
        info = await broker.get_account_info(credentials)

        try:
            currency = AccountCurrency(info.currency)
        except ValueError:
            raise ValidationError(
                f"Divisa no soportada: {info.currency}", field="currency", value=info.currency,
            )

        account = TradingAccount(
            user_id=user_id,
            broker_name=broker_name,
            account_id=dto.account_id,
            api_key=dto.api_key,
            api_secret=dto.api_secret,
            currency=currency,
            leverage=info.leverage,
        )
        account.record_balance(info.balance)
        await self._uow.accounts.add(account)

        settings = AutoTradeSettings(user_id=user_id, trading_account_id=account.id)
        await self._uow.auto_trade_settings.add(settings)
        await self._uow.commit()

        logger.info(
            "🔗 Cuenta %s/%s conectada para usuario %s (balance=%.2f %s)",
            broker_name.value, dto.account_id, user_id, info.balance, currency.value,
        )
        return account

    async def list_accounts(self, user_id: str) -> List[AccountSummaryDTO]:
        accounts = await self._uow.accounts.find_by_user(user_id)
        return [await self._summary(account) for account in accounts]

    async def account_summary(self, user_id: str, account_id: str) -> AccountSummaryDTO:
        return await self._summary(await self._owned_account(user_id, account_id))

    async def sync_balance(self, user_id: str, account_id: str) -> TradingAccount:
        account = await self._owned_account(user_id, account_id)
        await self._sync(account)
        await self._uow.commit()
        return account

    async def trade_history(
        self, user_id: str, limit: int = 50, account_id: Optional[str] = None,
    ) -> List[TradeExecution]:
        if account_id is not None:
            await self._owned_account(user_id, account_id)
        return await self._uow.executions.find_by_user(
            user_id, limit=limit, trading_account_id=account_id,
        )

    async def open_positions(self, user_id: str, account_id: str) -> List[Position]:
        account = await self._owned_account(user_id, account_id)
        broker = self._broker(account.broker_name.value)
        return await broker.get_open_positions(self._credentials(account))

    async def broker_history(
        self,
        user_id: str,
        account_id: str,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> List[HistoryEntry]:
        account = await self._owned_account(user_id, account_id)
        broker = self._broker(account.broker_name.value)
        return await broker.get_trade_history(self._credentials(account), from_date, to_date)

    # ════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ════════════════════════════════════════════════════════════════

    async def get_settings(self, user_id: str, account_id: str) -> AutoTradeSettings:
        account = await self._owned_account(user_id, account_id)
        settings = await self._uow.auto_trade_settings.get_for_account(account.id)
        if settings is None:
            settings = AutoTradeSettings(user_id=user_id, trading_account_id=account.id)
            await self._uow.auto_trade_settings.add(settings)
            await self._uow.commit()
        return settings

    async def update_settings(self, user_id: str, account_id: str, **changes) -> AutoTradeSettings:
        settings = await self.get_settings(user_id, account_id)
        settings.apply(**changes)
        await self._uow.auto_trade_settings.update(settings)
        await self._uow.commit()
        logger.info(
            "⚙️ Auto-trade cuenta %s: enabled=%s riesgo=%.1f%%",
            account_id, settings.enabled, settings.risk_per_trade,
        )
        return settings

    # ════════════════════════════════════════════════════════════════
    #  EJECUCIÓN
    # ════════════════════════════════════════════════════════════════

    async def execute_signal(
        self, signal_id: str, now: Optional[datetime] = None,
    ) -> AutoTradeRunDTO:
        """Ejecuta la señal en todas las cuentas habilitadas."""
        run = AutoTradeRunDTO(signal_id=signal_id)
        signal = await self._uow.signals.get(signal_id)
        if signal is None or signal.is_closed:
            logger.warning("Auto-trade: señal %s inexistente o cerrada", signal_id)
            return run

        now = now or datetime.now(timezone.utc)
        for account in await self._uow.accounts.find_active():
            try:
                reason = await self._execute_for_account(signal, account, now, run)
            except DomainError as exc:
                await self._uow.rollback()
                run.failed[account.id] = exc.message
                logger.error(
                    "Auto-trade falló en cuenta %s para señal %s: %s",
                    account.id, signal.id, exc.message,
                )
                continue
            except Exception as exc:
                await self._uow.rollback()
                run.failed[account.id] = str(exc) or type(exc).__name__
                logger.exception(
                    "Auto-trade falló en cuenta %s para señal %s", account.id, signal.id,
                )
                continue
            if reason is not None:
                run.skipped[account.id] = reason

        logger.info(
            "🤖 Auto-trade señal %s: %d ejecutadas, %d omitidas, %d fallidas",
            signal_id, len(run.executed), len(run.skipped), len(run.failed),
        )
        return run

    async def _execute_for_account(
        self,
        signal: Signal,
        account: TradingAccount,
        now: datetime,
        run: AutoTradeRunDTO,
    ) -> Optional[str]:
        """Devuelve el motivo de omisión, o None si se colocó la orden."""
        settings = await self._uow.auto_trade_settings.get_for_account(account.id)
        if settings is None or not settings.enabled:
            return "Auto-trading disabled"

        if await self._uow.executions.find_for_signal_and_account(signal.id, account.id):
            return "Signal already executed on this account"

        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        validation = self._risk.validate_trade(
            account,
            settings,
            open_trades=await self._uow.executions.count_open(account.id),
            trades_today=await self._uow.executions.count_since(account.id, start_of_day),
        )
        if not validation.valid:
            logger.info("Auto-trade cuenta %s omitida: %s", account.id, validation.reason)
            return validation.reason

        if not self._risk.is_within_trading_hours(settings, now):
            return "Outside trading hours"

        broker = self._broker(account.broker_name.value)
        symbol_info = await broker.get_symbol_info(signal.symbol)
        lot_size = self._risk.calculate_lot_size(
            account.account_balance,
            settings.risk_per_trade,
            signal.entry_price,
            signal.stop_loss,
            symbol_info,
        )

        execution = TradeExecution(
            signal_id=signal.id,
            user_id=account.user_id,
            trading_account_id=account.id,
            symbol=signal.symbol,
            trade_type=signal.signal_type,
            lot_size=lot_size,
            entry_price=signal.entry_price,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
        )
        result = await broker.place_order(self._credentials(account), OrderRequest(
            symbol=signal.symbol,
            order_type=signal.signal_type.value,
            volume=lot_size,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
            comment=f"signal:{signal.id}",
        ))

        if not result.success:
            execution.cancel(result.error or "Order rejected")
            await self._uow.executions.add(execution)
            await self._uow.commit()
            run.failed[account.id] = execution.error_message
            logger.warning("Orden rechazada en cuenta %s: %s", account.id, result.error)
            return None

        execution.fill(result.order_id, result.price, result.commission, at=now)
        await self._uow.executions.add(execution)
        await self._uow.commit()
        run.executed.append(execution.id)

        logger.info(
            "✅ Orden %s %s %.2f lotes @ %.2f en cuenta %s",
            result.order_id, signal.signal_type.value.upper(), lot_size,
            result.price, account.id,
        )
        await self._publisher.publish(TradeExecuted(
            execution_id=execution.id,
            signal_id=signal.id,
            user_id=account.user_id,
            lot_size=lot_size,
            price=result.price,
        ))
        return None

    async def close_signal_executions(self, signal_id: str) -> int:
        """
        Cierra en el broker las ejecuciones abiertas de una señal.

        Returns:
            Número de ejecuciones cerradas
        """
        closed = 0
        for execution in await self._uow.executions.find_open_for_signal(signal_id):
            account = await self._uow.accounts.get(execution.trading_account_id)
            if account is None:
                continue
            try:
                broker = self._broker(account.broker_name.value)
                result = await broker.close_order(
                    self._credentials(account), execution.broker_order_id,
                )
                if not result.success:
                    logger.warning(
                        "No se pudo cerrar orden %s: %s", execution.broker_order_id, result.error,
                    )
                    continue
                execution.close(result.price, result.profit)
                await self._uow.executions.update(execution)
                await self._sync(account)
                await self._uow.commit()
                closed += 1
            except DomainError as exc:
                await self._uow.rollback()
                logger.error("Error cerrando ejecución %s: %s", execution.id, exc.message)
        if closed:
            logger.info("🏁 %d ejecuciones cerradas para señal %s", closed, signal_id)
        return closed

    # ─── Helpers ────────────────────────────────────────────────────────

    def _broker(self, name: str) -> IBrokerAPI:
        broker = self._brokers.get(name)
        if broker is None:
            raise BrokerError(f"Broker {name} is not supported yet", broker=name)
        return broker

    @staticmethod
    def _credentials(account: TradingAccount) -> BrokerCredentials:
        return BrokerCredentials(
            account_id=account.account_id,
            api_key=account.api_key,
            api_secret=account.api_secret,
        )

    async def _owned_account(self, user_id: str, account_id: str) -> TradingAccount:
        account = await self._uow.accounts.get(account_id)
        if account is None or account.user_id != user_id:
            raise EntityNotFoundError("TradingAccount", account_id)
        return account

    async def _sync(self, account: TradingAccount) -> None:
        broker = self._broker(account.broker_name.value)
        info = await broker.get_account_info(self._credentials(account))
        account.record_balance(info.balance)
        await self._uow.accounts.update(account)

    async def _summary(self, account: TradingAccount) -> AccountSummaryDTO:
        executions = await self._uow.executions.find_by_account(account.id)
        closed = [e for e in executions if e.status == ExecutionStatus.CLOSED]
        wins = [e for e in closed if e.profit_loss > 0]
        return AccountSummaryDTO(
            account=account,
            settings=await self._uow.auto_trade_settings.get_for_account(account.id),
            total_trades=len(executions),
            open_trades=sum(1 for e in executions if e.is_open),
            total_profit_loss=sum(e.profit_loss for e in closed),
            win_rate=(len(wins) / len(closed) * 100.0) if closed else 0.0,
        )
