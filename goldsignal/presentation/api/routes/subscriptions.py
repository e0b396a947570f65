"""
Plans, checkout & subscription endpoints.

  GET   /api/plans                          → catálogo de planes
  GET   /api/plans/{plan_id}
  GET   /api/payment-methods
  POST  /api/subscriptions/checkout         → sesión de checkout PayMongo
  POST  /api/subscriptions/verify           → verificación tras el redirect
  GET   /api/subscriptions/me               → suscripción activa + historial
  POST  /api/webhooks/paymongo              → webhook (firma en paymongo-signature)

  Admin:
  GET   /api/subscriptions                  → listado paginado
  GET   /api/subscriptions/analytics
  POST  /api/subscriptions/check-expired
  POST  /api/subscriptions                  → alta manual
  GET   /api/subscriptions/{id}
  PATCH /api/subscriptions/{id}
  POST  /api/subscriptions/{id}/cancel
"""

from __future__ import annotations

import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from goldsignal.application.use_cases import SubscriptionUseCase
from goldsignal.domain.entities.user import User
from goldsignal.domain.services.subscription_rules import get_plan
from goldsignal.presentation.api.dependencies import (
    get_current_user,
    get_subscriptions,
    require_admin,
)
from goldsignal.presentation.api.schemas import (
    CheckoutRequestBody,
    CreateSubscriptionRequest,
    UpdateSubscriptionRequest,
    VerifySessionRequest,
)
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("api.subscriptions")

router = APIRouter(prefix="/api", tags=["subscriptions"])


# ─── Catálogo ───────────────────────────────────────────────────────────

@router.get("/plans")
async def list_plans() -> dict:
    return {"plans": [plan.to_dict() for plan in SubscriptionUseCase.plans()]}


@router.get("/plans/{plan_id}")
async def plan_detail(plan_id: str) -> dict:
    return get_plan(plan_id).to_dict()


@router.get("/payment-methods")
async def payment_methods(
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    return {"payment_methods": subscriptions.payment_methods()}


# ─── Checkout ───────────────────────────────────────────────────────────

@router.post("/subscriptions/checkout", status_code=status.HTTP_201_CREATED)
async def create_checkout(
    body: CheckoutRequestBody,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    session = await subscriptions.create_checkout(user, body.plan)
    return session.to_dict()


@router.post("/subscriptions/verify")
async def verify_checkout(
    body: VerifySessionRequest,
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    return await subscriptions.verify_session(user, body.session_id)


@router.get("/subscriptions/me")
async def my_subscription(
    user: User = Depends(get_current_user),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    active = await subscriptions.active_for_user(user.id)
    history = await subscriptions.history(user.id)
    return {
        "tier": user.effective_tier().value,
        "subscription": active.to_dict() if active else None,
        "history": [s.to_dict() for s in history],
    }


@router.post("/webhooks/paymongo")
async def paymongo_webhook(
    request: Request,
    signature: Optional[str] = Header(None, alias="paymongo-signature"),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    payload = await request.body()
    try:
        data = json.loads(payload)
    except ValueError:
        logger.warning("Webhook con cuerpo no JSON (%d bytes)", len(payload))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")
    if not isinstance(data, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload")

    result = await subscriptions.handle_webhook(payload, signature, data)
    return result.to_dict()


# ─── Administración ─────────────────────────────────────────────────────

@router.get("/subscriptions")
async def list_subscriptions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    plan: Optional[str] = None,
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    result = await subscriptions.list(page=page, limit=limit, status=status_filter, plan_id=plan)
    return result.to_dict()


@router.get("/subscriptions/analytics")
async def subscription_analytics(
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    analytics = await subscriptions.analytics()
    return analytics.to_dict()


@router.post("/subscriptions/check-expired")
async def check_expired(
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    return {"expired": await subscriptions.check_expired()}


@router.post("/subscriptions", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    body: CreateSubscriptionRequest,
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    subscription = await subscriptions.create(
        body.user_id, body.plan_id, status=body.status, period_end=body.current_period_end,
    )
    return subscription.to_dict()


@router.get("/subscriptions/{subscription_id}")
async def subscription_detail(
    subscription_id: str,
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    subscription = await subscriptions.get(subscription_id)
    return subscription.to_dict()


@router.patch("/subscriptions/{subscription_id}")
async def update_subscription(
    subscription_id: str,
    body: UpdateSubscriptionRequest,
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    subscription = await subscriptions.update(
        subscription_id, **body.model_dump(exclude_unset=True),
    )
    return subscription.to_dict()


@router.post("/subscriptions/{subscription_id}/cancel")
async def cancel_subscription(
    subscription_id: str,
    _admin: User = Depends(require_admin),
    subscriptions: SubscriptionUseCase = Depends(get_subscriptions),
) -> dict:
    subscription = await subscriptions.cancel(subscription_id)
    return subscription.to_dict()
