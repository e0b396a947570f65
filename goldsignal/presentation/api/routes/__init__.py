"""
GoldSignal – API Routes
=========================
Agrupa los routers REST y el canal WebSocket en un único ``router``.
"""

from fastapi import APIRouter

from goldsignal.presentation.api.routes import (
    market,
    notifications,
    signals,
    subscriptions,
    system,
    trading,
    users,
)

router = APIRouter()
router.include_router(system.router)
router.include_router(signals.router)
router.include_router(market.router)
router.include_router(users.router)
router.include_router(notifications.router)
router.include_router(subscriptions.router)
router.include_router(trading.router)

__all__ = ["router"]
