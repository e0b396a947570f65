"""
GoldSignal – Demo Broker
==========================
Broker simulado en memoria para probar el auto-trading sin dinero real.

CUENTAS:
  demo123 → 10,000 USD, apalancamiento 1:100
  demo456 →  5,000 USD, apalancamiento 1:50

PRECIOS:
  mid = último precio de mercado (o demo_base_price) ± 5 aleatorio
  bid/ask = mid ∓ spread/2 (spread 0.30)
  BUY se llena al ask, SELL al bid; el cierre al lado contrario.

PnL:
  (diferencia de precio a favor) × lotes × contract_size − comisión
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from goldsignal.application.ports.broker_api import IBrokerAPI
from goldsignal.application.ports.errors import BrokerError
from goldsignal.domain.value_objects.broker_types import (
    AccountInfo,
    BrokerCredentials,
    CloseResult,
    HistoryEntry,
    OrderRequest,
    OrderResult,
    Position,
    SymbolInfo,
)
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("demo_broker")

SPREAD = 0.30
VARIATION = 10.0
COMMISSION_PER_LOT = 7.0

XAUUSD_INFO = SymbolInfo(
    symbol="XAUUSD",
    digits=2,
    point=0.01,
    contract_size=100,
    min_lot=0.01,
    max_lot=100,
    lot_step=0.01,
    tick_value=1,
    tick_size=0.01,
    margin_required=100,
)


@dataclass
class _OpenPosition:
    position_id: str
    symbol: str
    order_type: str
    volume: float
    open_price: float
    stop_loss: Optional[float]
    take_profit: Optional[float]
    commission: float
    open_time: datetime


def _new_account(account_id: str, balance: float, leverage: int) -> AccountInfo:
    return AccountInfo(
        account_id=account_id,
        balance=balance,
        equity=balance,
        margin=0.0,
        free_margin=balance,
        margin_level=0.0,
        currency="USD",
        leverage=leverage,
    )


class DemoBrokerAPI(IBrokerAPI):
    """
    Broker demo.

    Args:
        price_source: Devuelve el último precio de mercado conocido (o None)
        base_price: Precio medio cuando no hay precio de mercado
        rng: Generador aleatorio (inyectable para tests deterministas)
    """

    name = "demo"

    def __init__(
        self,
        price_source: Optional[Callable[[], Optional[float]]] = None,
        base_price: float = 2650.0,
        rng: Optional[random.Random] = None,
    ):
        self._price_source = price_source
        self._base_price = base_price
        self._rng = rng or random.Random()
        self._order_counter = 1000
        self._accounts: Dict[str, AccountInfo] = {}
        self._positions: Dict[str, List[_OpenPosition]] = {}
        self.reset()

    def reset(self) -> None:
        """Restaura las cuentas demo iniciales y borra posiciones."""
        self._accounts = {
            "demo123": _new_account("demo123", 10_000.0, 100),
            "demo456": _new_account("demo456", 5_000.0, 50),
        }
        self._positions = {}

    def reset_account(self, account_id: str, balance: float = 10_000.0) -> AccountInfo:
        self._accounts[account_id] = _new_account(account_id, balance, 100)
        self._positions[account_id] = []
        logger.info("🔄 Cuenta demo %s reiniciada con $%.2f", account_id, balance)
        return self._accounts[account_id]

    @staticmethod
    def create_demo_credentials(account_id: str) -> BrokerCredentials:
        return BrokerCredentials(
            account_id=account_id,
            api_key=f"demo_key_{account_id}",
            api_secret=f"demo_secret_{account_id}",
        )

    # ════════════════════════════════════════════════════════════════
    #  IBrokerAPI
    # ════════════════════════════════════════════════════════════════

    async def get_account_info(self, credentials: BrokerCredentials) -> AccountInfo:
        return self._account(credentials.account_id)

    async def get_symbol_info(self, symbol: str) -> SymbolInfo:
        if symbol != XAUUSD_INFO.symbol:
            raise BrokerError(f"Symbol {symbol} not supported in demo", broker=self.name)
        return XAUUSD_INFO

    async def get_current_price(self, symbol: str) -> tuple[float, float]:
        if symbol != XAUUSD_INFO.symbol:
            raise BrokerError(f"Price for {symbol} not available in demo", broker=self.name)
        market = self._price_source() if self._price_source else None
        mid = (market or self._base_price) + (self._rng.random() - 0.5) * VARIATION
        return round(mid - SPREAD / 2, 2), round(mid + SPREAD / 2, 2)

    async def place_order(
        self, credentials: BrokerCredentials, order: OrderRequest,
    ) -> OrderResult:
        if credentials.account_id not in self._accounts:
            return OrderResult(success=False, error=f"Demo account {credentials.account_id} not found")
        if order.order_type not in ("buy", "sell"):
            return OrderResult(success=False, error=f"Unknown order type: {order.order_type}")
        if not XAUUSD_INFO.min_lot <= order.volume <= XAUUSD_INFO.max_lot:
            return OrderResult(success=False, error=f"Invalid volume: {order.volume}")
        try:
            bid, ask = await self.get_current_price(order.symbol)
        except BrokerError as exc:
            return OrderResult(success=False, error=exc.message)

        price = ask if order.order_type == "buy" else bid
        order_id = f"DEMO_{self._order_counter}"
        self._order_counter += 1
        commission = round(order.volume * COMMISSION_PER_LOT, 2)

        self._positions.setdefault(credentials.account_id, []).append(_OpenPosition(
            position_id=order_id,
            symbol=order.symbol,
            order_type=order.order_type,
            volume=order.volume,
            open_price=price,
            stop_loss=order.stop_loss,
            take_profit=order.take_profit,
            commission=commission,
            open_time=datetime.now(timezone.utc),
        ))
        logger.info(
            "📈 Demo %s %.2f lotes %s @ %.2f (%s)",
            order.order_type.upper(), order.volume, order.symbol, price, order_id,
        )
        return OrderResult(
            success=True, order_id=order_id, price=price,
            volume=order.volume, commission=commission,
        )

    async def close_order(self, credentials: BrokerCredentials, order_id: str) -> CloseResult:
        positions = self._positions.get(credentials.account_id, [])
        position = next((p for p in positions if p.position_id == order_id), None)
        if position is None:
            return CloseResult(success=False, error=f"Position {order_id} not found")

        bid, ask = await self.get_current_price(position.symbol)
        close_price = bid if position.order_type == "buy" else ask
        profit = self._profit(position, close_price)

        positions.remove(position)
        account = self._account(credentials.account_id)
        balance = round(account.balance + profit, 2)
        self._accounts[credentials.account_id] = replace(
            account, balance=balance, equity=balance, free_margin=balance,
        )
        logger.info("✅ Demo posición %s cerrada: %+.2f", order_id, profit)
        return CloseResult(success=True, price=close_price, profit=profit)

    async def modify_order(
        self,
        credentials: BrokerCredentials,
        order_id: str,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
    ) -> bool:
        for position in self._positions.get(credentials.account_id, []):
            if position.position_id == order_id:
                if stop_loss is not None:
                    position.stop_loss = stop_loss
                if take_profit is not None:
                    position.take_profit = take_profit
                logger.info("🔄 Demo posición %s: SL=%s TP=%s", order_id, stop_loss, take_profit)
                return True
        return False

    async def get_open_positions(self, credentials: BrokerCredentials) -> List[Position]:
        result = []
        for position in self._positions.get(credentials.account_id, []):
            bid, ask = await self.get_current_price(position.symbol)
            current = bid if position.order_type == "buy" else ask
            result.append(Position(
                position_id=position.position_id,
                symbol=position.symbol,
                order_type=position.order_type,
                volume=position.volume,
                open_price=position.open_price,
                current_price=current,
                stop_loss=position.stop_loss,
                take_profit=position.take_profit,
                profit=self._profit(position, current),
                swap=0.0,
                commission=position.commission,
                open_time=position.open_time,
            ))
        return result

    async def get_trade_history(
        self,
        credentials: BrokerCredentials,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> List[HistoryEntry]:
        self._account(credentials.account_id)
        now = datetime.now(timezone.utc)
        history = [
            HistoryEntry(
                order_id="DEMO_HIST_001", symbol="XAUUSD", order_type="buy", volume=0.1,
                open_price=2640.50, close_price=2645.20, profit=46.30, commission=0.70,
                open_time=now - timedelta(hours=24), close_time=now - timedelta(hours=22),
            ),
            HistoryEntry(
                order_id="DEMO_HIST_002", symbol="XAUUSD", order_type="sell", volume=0.05,
                open_price=2655.80, close_price=2650.10, profit=28.15, commission=0.35,
                open_time=now - timedelta(hours=48), close_time=now - timedelta(hours=46),
            ),
        ]
        return [
            entry for entry in history
            if (from_date is None or entry.close_time >= from_date)
            and (to_date is None or entry.close_time <= to_date)
        ]

    # ─── Helpers ────────────────────────────────────────────────────────

    def _account(self, account_id: str) -> AccountInfo:
        account = self._accounts.get(account_id)
        if account is None:
            raise BrokerError(f"Demo account {account_id} not found", broker=self.name)
        return account

    @staticmethod
    def _profit(position: _OpenPosition, price: float) -> float:
        diff = price - position.open_price
        if position.order_type == "sell":
            diff = -diff
        return round(diff * position.volume * XAUUSD_INFO.contract_size - position.commission, 2)
