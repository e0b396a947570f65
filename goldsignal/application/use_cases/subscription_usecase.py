"""
GoldSignal – Subscription Use Case
=====================================
Checkout, activación por pago y ciclo de vida de suscripciones.

FLUJO DE PAGO:
  1. create_checkout()  → sesión de checkout en la pasarela
  2. Usuario paga en la página alojada
  3a. Webhook checkout_session.payment.paid → activate()
  3b. Redirect a /payment-success → verify_session() → activate()

  3a y 3b pueden llegar ambos: activate() es idempotente por
  payment_reference (id del checkout session).

REGLA DE TIER:
  El tier del usuario siempre se deriva de la suscripción que
  cambió (ver subscription_rules.tier_for / user_status_for).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from goldsignal.application.dto.signal_dto import PageDTO
from goldsignal.application.dto.subscription_dto import SubscriptionAnalyticsDTO
from goldsignal.application.ports.event_publisher import IEventPublisher
from goldsignal.application.ports.payment_gateway import (
    CheckoutRequest,
    CheckoutSession,
    IPaymentGateway,
)
from goldsignal.application.ports.errors import WebhookSignatureError
from goldsignal.application.use_cases.notification_usecase import NotificationUseCase
from goldsignal.domain.entities.notification import NotificationType
from goldsignal.domain.entities.subscription import Subscription, SubscriptionStatus
from goldsignal.domain.entities.user import User
from goldsignal.domain.events.domain_events import SubscriptionActivated
from goldsignal.domain.exceptions.domain_errors import EntityNotFoundError, ValidationError
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.subscription_rules import (
    PLAN_CATALOG,
    Plan,
    get_plan,
    period_bounds,
    plan_price,
    tier_for,
    user_status_for,
)
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.subscriptions")

PAYMENT_PAID = "checkout_session.payment.paid"
PAYMENT_FAILED = "checkout_session.payment.failed"
SERVICE_TAG = "gold_signal_service"


@dataclass
class WebhookResult:
    event_type: str
    processed: bool
    subscription: Optional[Subscription] = None

    def to_dict(self) -> dict:
        return {
            "received": True,
            "event_type": self.event_type,
            "processed": self.processed,
            "subscription_id": self.subscription.id if self.subscription else None,
        }


class SubscriptionUseCase:

    def __init__(
        self,
        uow: IUnitOfWork,
        payment_gateway: IPaymentGateway,
        event_publisher: IEventPublisher,
        notifications: NotificationUseCase,
        app_url: str,
        payment_methods: Sequence[str] = ("card", "gcash", "grab_pay", "paymaya"),
        period_days: int = 30,
    ):
        self._uow = uow
        self._gateway = payment_gateway
        self._publisher = event_publisher
        self._notifications = notifications
        self._app_url = app_url.rstrip("/")
        self._payment_methods = list(payment_methods)
        self._period_days = period_days

    # ════════════════════════════════════════════════════════════════
    #  CATÁLOGO
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def plans() -> List[Plan]:
        return list(PLAN_CATALOG.values())

    def payment_methods(self) -> List[str]:
        return list(self._payment_methods)

    # ════════════════════════════════════════════════════════════════
    #  CHECKOUT / PAGO
    # ════════════════════════════════════════════════════════════════

    async def create_checkout(self, user: User, plan_id: str) -> CheckoutSession:
        plan = get_plan(plan_id)
        request = CheckoutRequest(
            plan_id=plan.id,
            user_id=user.id,
            name=plan.checkout_name,
            description=plan.description,
            amount=plan.amount,
            currency=plan.currency,
            success_url=(
                f"{self._app_url}/payment-success"
                f"?session_id={{CHECKOUT_SESSION_ID}}&plan={plan.id}"
            ),
            cancel_url=f"{self._app_url}/pricing",
            payment_method_types=self._payment_methods,
            metadata={"plan": plan.id, "user_id": user.id, "service": SERVICE_TAG},
            customer_email=user.email,
        )
        session = await self._gateway.create_checkout_session(request)
        logger.info(
            "💳 Checkout %s creado para usuario %s (plan=%s)",
            session.session_id, user.id, plan.id,
        )
        return session

    async def handle_webhook(self, payload: bytes, signature: Optional[str],
                             data: Dict[str, Any]) -> WebhookResult:
        """
        Procesa un webhook de la pasarela.

        Args:
            payload: Cuerpo crudo (para la firma)
            signature: Header de firma
            data: Cuerpo ya decodificado

        Raises:
            WebhookSignatureError: firma inválida
        """
        if not self._gateway.verify_webhook_signature(payload, signature):
            logger.warning("Webhook rechazado: firma inválida")
            raise WebhookSignatureError()

        event = self._gateway.parse_webhook(data)
        metadata = event.session.metadata or {}
        user_id = metadata.get("user_id")
        plan_id = metadata.get("plan")

        if event.event_type == PAYMENT_PAID and user_id and plan_id:
            subscription = await self.activate(
                user_id, plan_id, payment_reference=event.session.session_id,
            )
            return WebhookResult(event.event_type, True, subscription)

        if event.event_type == PAYMENT_FAILED and user_id:
            await self._notifications.queue(
                user_id,
                title="Payment Failed",
                message=(
                    f"Your payment for the {plan_id or 'selected'} plan could not be "
                    "processed. Please try again or contact support."
                ),
                type=NotificationType.PAYMENT,
            )
            await self._uow.commit()
            logger.warning("Pago fallido para usuario %s (plan=%s)", user_id, plan_id)
            return WebhookResult(event.event_type, True)

        logger.info("Webhook ignorado: %s", event.event_type)
        return WebhookResult(event.event_type, False)

    async def verify_session(self, user: User, session_id: str) -> Dict[str, Any]:
        """Verifica un checkout tras el redirect y activa si está pagado."""
        session = await self._gateway.retrieve_checkout_session(session_id)
        owner = (session.metadata or {}).get("user_id")
        if owner and owner != user.id:
            raise ValidationError("Checkout session belongs to another user", field="session_id")

        subscription = None
        plan_id = (session.metadata or {}).get("plan")
        if session.paid and plan_id:
            subscription = await self.activate(user.id, plan_id, payment_reference=session_id)
        return {
            "paid": session.paid,
            "status": session.status,
            "plan": plan_id,
            "subscription": subscription.to_dict() if subscription else None,
        }

    async def activate(
        self,
        user_id: str,
        plan_id: str,
        payment_reference: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Activa (o renueva) el plan por un periodo.

        Idempotente por payment_reference.
        """
        if payment_reference:
            existing = await self._uow.subscriptions.get_by_payment_reference(payment_reference)
            if existing is not None:
                logger.info("Pago %s ya procesado, se ignora", payment_reference)
                return existing

        plan = get_plan(plan_id)
        user = await self._get_user(user_id)
        now = now or datetime.now(timezone.utc)

        current = await self._uow.subscriptions.find_active_for_user(user_id)
        carry_over = None
        if current is not None:
            if current.plan_id == plan.id:
                carry_over = current.current_period_end
            current.change_status(SubscriptionStatus.CANCELED)
            await self._uow.subscriptions.update(current)

        start, end = period_bounds(now, self._period_days, carry_over)
        subscription = Subscription(
            user_id=user_id,
            plan_id=plan.id,
            current_period_start=start,
            current_period_end=end,
            status=SubscriptionStatus.ACTIVE,
            payment_reference=payment_reference,
        )
        await self._uow.subscriptions.add(subscription)

        user.apply_subscription(plan.tier, user_status_for(SubscriptionStatus.ACTIVE), end)
        await self._uow.users.update(user)

        await self._notifications.queue(
            user_id,
            title=f"Welcome to {plan.name.replace(' Plan', '')}!",
            message=(
                f"Your {plan.id} subscription is now active. You'll receive premium "
                f"trading signals for the next {self._period_days} days."
            ),
            type=NotificationType.SUBSCRIPTION,
        )
        await self._uow.commit()

        logger.info(
            "✅ Suscripción %s activada: usuario=%s plan=%s hasta %s",
            subscription.id, user_id, plan.id, end.isoformat(),
        )
        await self._publisher.publish(SubscriptionActivated(
            user_id=user_id, plan_id=plan.id, period_end=end.isoformat(),
        ))
        return subscription

    # ════════════════════════════════════════════════════════════════
    #  CRUD
    # ════════════════════════════════════════════════════════════════

    async def get(self, subscription_id: str) -> Subscription:
        subscription = await self._uow.subscriptions.get(subscription_id)
        if subscription is None:
            raise EntityNotFoundError("Subscription", subscription_id)
        return subscription

    async def active_for_user(self, user_id: str) -> Optional[Subscription]:
        return await self._uow.subscriptions.find_active_for_user(user_id)

    async def history(self, user_id: str) -> List[Subscription]:
        return await self._uow.subscriptions.list_for_user(user_id)

    async def create(
        self,
        user_id: str,
        plan_id: str,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        period_end: Optional[datetime] = None,
    ) -> Subscription:
        """Alta manual (admin), sin pasar por la pasarela."""
        now = datetime.now(timezone.utc)
        start, end = period_bounds(now, self._period_days)
        subscription = Subscription(
            user_id=user_id,
            plan_id=get_plan(plan_id).id,
            current_period_start=start,
            current_period_end=period_end or end,
            status=SubscriptionStatus(status),
        )
        await self._uow.subscriptions.add(subscription)
        await self._sync_user(subscription)
        await self._uow.commit()
        return subscription

    async def update(
        self,
        subscription_id: str,
        status: Optional[SubscriptionStatus] = None,
        plan_id: Optional[str] = None,
        current_period_end: Optional[datetime] = None,
    ) -> Subscription:
        subscription = await self.get(subscription_id)
        if plan_id is not None:
            subscription.plan_id = get_plan(plan_id).id
        if current_period_end is not None:
            subscription.current_period_end = current_period_end
        if status is not None:
            subscription.change_status(status)
        await self._uow.subscriptions.update(subscription)
        await self._sync_user(subscription)
        await self._uow.commit()
        return subscription

    async def cancel(self, subscription_id: str) -> Subscription:
        subscription = await self.update(subscription_id, status=SubscriptionStatus.CANCELED)
        logger.info("Suscripción %s cancelada", subscription_id)
        return subscription

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> PageDTO[Subscription]:
        items, total = await self._uow.subscriptions.list(
            page=page, limit=limit, status=status, plan_id=plan_id,
        )
        return PageDTO(items=items, total=total, page=page, limit=limit)

    async def analytics(self) -> SubscriptionAnalyticsDTO:
        subscriptions = await self._uow.subscriptions.list_all()
        statuses = Counter(s.status for s in subscriptions)
        active = [s for s in subscriptions if s.is_active]
        return SubscriptionAnalyticsDTO(
            total_subscriptions=len(subscriptions),
            active_subscriptions=statuses[SubscriptionStatus.ACTIVE],
            canceled_subscriptions=statuses[SubscriptionStatus.CANCELED],
            past_due_subscriptions=(
                statuses[SubscriptionStatus.PAST_DUE] + statuses[SubscriptionStatus.UNPAID]
            ),
            monthly_revenue=sum(plan_price(s.plan_id) for s in active),
            plan_breakdown=dict(Counter(s.plan_id for s in active)),
        )

    async def check_expired(self, now: Optional[datetime] = None) -> int:
        """Pasa a PAST_DUE las suscripciones activas con periodo vencido."""
        now = now or datetime.now(timezone.utc)
        expired = await self._uow.subscriptions.find_expired(now)
        for subscription in expired:
            subscription.change_status(SubscriptionStatus.PAST_DUE)
            await self._uow.subscriptions.update(subscription)
            await self._sync_user(subscription)
        if expired:
            await self._uow.commit()
            logger.info("⏰ %d suscripciones vencidas → past_due", len(expired))
        return len(expired)

    # ─── Helpers ────────────────────────────────────────────────────────

    async def _get_user(self, user_id: str) -> User:
        user = await self._uow.users.get(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def _sync_user(self, subscription: Subscription) -> None:
        user = await self._get_user(subscription.user_id)
        if not subscription.is_active:
            other = await self._uow.subscriptions.find_active_for_user(subscription.user_id)
            if other is not None and other.id != subscription.id:
                return
        end = subscription.current_period_end if subscription.is_active else None
        user.apply_subscription(
            tier_for(subscription.plan_id, subscription.status),
            user_status_for(subscription.status),
            end,
        )
        await self._uow.users.update(user)
