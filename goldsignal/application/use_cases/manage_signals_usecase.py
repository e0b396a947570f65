"""
GoldSignal – Manage Signals Use Case
=======================================
CRUD de señales y feed por usuario.

FLUJO DE PUBLICACIÓN:
  1. Signal.create() valida geometría de precios
  2. Se persiste en la unidad de trabajo
  3. Se encolan notificaciones para suscriptores de pago
  4. commit
  5. Se publica SignalPublished → AutoTradeListener / WebSocket

Los eventos se publican DESPUÉS del commit: un consumidor nunca ve
una señal que luego se revierte.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from goldsignal.application.dto.signal_dto import (
    CreateSignalDTO,
    PageDTO,
    SignalFeedDTO,
    SignalViewDTO,
)
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.application.use_cases.notification_usecase import NotificationUseCase
from goldsignal.domain.entities.notification import NotificationType
from goldsignal.domain.entities.signal import Signal, SignalResult
from goldsignal.domain.entities.user import User
from goldsignal.domain.events.domain_events import SignalClosed, SignalPublished, SignalUpdated
from goldsignal.domain.exceptions.domain_errors import SignalNotFoundError
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.feature_access import UNLIMITED, Feature, FeatureAccessPolicy
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.signals")

_RESULT_EMOJI = {
    SignalResult.WIN: "✅",
    SignalResult.LOSS: "❌",
    SignalResult.BREAKEVEN: "⚖️",
}


@dataclass
class CloseSignalResult:
    signal: Signal
    notified: int = 0


class ManageSignalsUseCase:
    """
    Caso de uso: publicar, consultar, editar y cerrar señales.

    El precio para el estado calculado sale de ``last_price`` del
    proveedor (sin consumir cuota); si no hay precio se omite.
    """

    def __init__(
        self,
        uow: IUnitOfWork,
        event_publisher: IEventPublisher,
        status_calculator: SignalStatusCalculator,
        notifications: NotificationUseCase,
        access_policy: FeatureAccessPolicy,
        market_data: Optional[IMarketDataProvider] = None,
    ):
        self._uow = uow
        self._publisher = event_publisher
        self._calculator = status_calculator
        self._notifications = notifications
        self._policy = access_policy
        self._market_data = market_data

    # ════════════════════════════════════════════════════════════════
    #  ESCRITURA
    # ════════════════════════════════════════════════════════════════

    async def create(self, dto: CreateSignalDTO) -> Signal:
        signal = Signal.create(
            symbol=dto.symbol,
            signal_type=dto.signal_type,
            entry_price=dto.entry_price,
            stop_loss=dto.stop_loss,
            take_profit=dto.take_profit,
            confidence=dto.confidence,
            description=dto.description,
            status=dto.status,
        )
        await self._uow.signals.add(signal)

        notified = await self._notifications.queue_for_subscribers(
            title=f"New {signal.signal_type.value.upper()} Signal - {signal.symbol}",
            message=(
                f"Entry: {signal.entry_price:g}, SL: {signal.stop_loss:g}, "
                f"TP: {signal.take_profit:g}"
            ),
            type=NotificationType.SIGNAL,
            signal_id=signal.id,
        )
        await self._uow.commit()

        logger.info(
            "📡 Señal publicada %s %s @ %.2f (SL=%.2f TP=%.2f) → %d suscriptores",
            signal.signal_type.value.upper(), signal.symbol, signal.entry_price,
            signal.stop_loss, signal.take_profit, notified,
        )
        await self._publisher.publish(SignalPublished(
            signal_id=signal.id,
            symbol=signal.symbol,
            signal_type=signal.signal_type.value,
            entry_price=signal.entry_price,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
            confidence=signal.confidence,
        ))
        return signal

    async def update(self, signal_id: str, **changes) -> Signal:
        signal = await self.get(signal_id)
        signal.update(**changes)
        await self._uow.signals.update(signal)
        await self._uow.commit()

        await self._publisher.publish(SignalUpdated(
            signal_id=signal.id,
            changes=tuple(sorted(k for k, v in changes.items() if v is not None)),
        ))
        return signal

    async def close(
        self,
        signal_id: str,
        result: SignalResult,
        pips_result: Optional[float] = None,
        exit_price: Optional[float] = None,
        automatic: bool = False,
    ) -> CloseSignalResult:
        """
        Cierra la señal y avisa a los suscriptores.

        Args:
            result: win | loss | breakeven
            pips_result: Pips obtenidos; si falta se calcula desde exit_price
            exit_price: Precio de salida (nivel TP/SL en cierres automáticos)
            automatic: True si lo cerró el monitor de precios
        """
        signal = await self.get(signal_id)
        result = SignalResult(result)
        if pips_result is None and exit_price is not None:
            pips_result = self._calculator.pips_between(signal, exit_price)

        signal.close(result, pips_result)
        await self._uow.signals.update(signal)

        title, message = self._closing_texts(signal, exit_price, automatic)
        notified = await self._notifications.queue_for_subscribers(
            title=title, message=message,
            type=NotificationType.SIGNAL, signal_id=signal.id,
        )
        await self._uow.commit()

        logger.info(
            "🏁 Señal %s cerrada: %s (%s pips)%s",
            signal.id, result.value.upper(), pips_result,
            " [auto]" if automatic else "",
        )
        await self._publisher.publish(SignalClosed(
            signal_id=signal.id,
            symbol=signal.symbol,
            result=result.value,
            pips_result=pips_result or 0.0,
            exit_price=exit_price or 0.0,
            automatic=automatic,
        ))
        return CloseSignalResult(signal=signal, notified=notified)

    async def delete(self, signal_id: str) -> None:
        if not await self._uow.signals.delete(signal_id):
            raise SignalNotFoundError(signal_id)
        await self._uow.commit()
        logger.info("Señal %s eliminada", signal_id)

    # ════════════════════════════════════════════════════════════════
    #  LECTURA
    # ════════════════════════════════════════════════════════════════

    async def get(self, signal_id: str) -> Signal:
        signal = await self._uow.signals.get(signal_id)
        if signal is None:
            raise SignalNotFoundError(signal_id)
        return signal

    async def get_view(self, signal_id: str) -> SignalViewDTO:
        signal = await self.get(signal_id)
        return self._views([signal])[0]

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        symbol: Optional[str] = None,
        status: Optional[str] = None,
        signal_type: Optional[str] = None,
    ) -> PageDTO[SignalViewDTO]:
        signals, total = await self._uow.signals.list(
            page=page, limit=limit, symbol=symbol, status=status, signal_type=signal_type,
        )
        return PageDTO(items=self._views(signals), total=total, page=page, limit=limit)

    async def active(self) -> List[SignalViewDTO]:
        return self._views(await self._uow.signals.find_active())

    async def by_symbol(self, symbol: str, limit: int = 50) -> List[SignalViewDTO]:
        return self._views(await self._uow.signals.find_by_symbol(symbol.upper(), limit))

    async def feed(self, user: User, limit: int = 20, now: Optional[datetime] = None) -> SignalFeedDTO:
        """
        Señales visibles para el usuario.

        Tiers con cuota ven solo las más recientes del mes en curso
        hasta agotar la cuota; tiers ilimitados ven las últimas ``limit``.
        """
        now = now or datetime.now(timezone.utc)
        quota = UNLIMITED if user.is_admin else self._policy.signal_quota(user.effective_tier(now))

        if quota == UNLIMITED:
            signals, _ = await self._uow.signals.list(page=1, limit=limit)
            views = self._views(signals)
            return SignalFeedDTO(
                signals=views, quota=quota, used=len(views), current_price=self._price(),
            )

        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        month_signals = await self._uow.signals.find_recent(since=month_start)
        visible = month_signals[:quota]
        upgrade = None
        if len(month_signals) > quota:
            upgrade = self._policy.upgrade_message(Feature.UNLIMITED_SIGNALS)
        return SignalFeedDTO(
            signals=self._views(visible),
            quota=quota,
            used=len(visible),
            current_price=self._price(),
            upgrade_message=upgrade,
        )

    # ─── Helpers ────────────────────────────────────────────────────────

    def _price(self) -> Optional[float]:
        return self._market_data.last_price if self._market_data else None

    def _views(self, signals: List[Signal]) -> List[SignalViewDTO]:
        price = self._price()
        if price is None:
            return [SignalViewDTO.from_entity(s) for s in signals]
        return [
            SignalViewDTO.from_entity(s, info, price)
            for s, info in self._calculator.enhance(signals, price)
        ]

    def _closing_texts(self, signal: Signal, exit_price: Optional[float],
                       automatic: bool) -> tuple[str, str]:
        emoji = _RESULT_EMOJI[signal.result]
        if automatic and exit_price is not None:
            move = exit_price - signal.entry_price
            if not signal.is_buy:
                move = -move
            pct = move / signal.entry_price * 100.0
            pct_text = f"+{pct:.1f}%" if pct >= 0 else f"{pct:.1f}%"
            return (
                f"{emoji} Signal {signal.result.value.upper()}: {signal.symbol}",
                f"{signal.signal_type.value.upper()} signal closed with {pct_text} result",
            )

        pips_text = ""
        if signal.pips_result:
            sign = "+" if signal.pips_result > 0 else ""
            pips_text = f" ({sign}{signal.pips_result:g} pips)"
        return (
            f"Signal Closed - {signal.symbol} {emoji}",
            f"Result: {signal.result.value.upper()}{pips_text}",
        )

