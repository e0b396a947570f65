"""
GoldSignal – API Dependencies
===============================
Dependencias FastAPI: contenedor, unidad de trabajo, usuario y permisos.

AUTENTICACIÓN:
  El proveedor de identidad (gateway) autentica al usuario y reenvía
  su id en el header X-User-Id. Aquí solo se carga el perfil.
"""

from __future__ import annotations

from typing import AsyncIterator, Callable

from fastapi import Depends, Header, HTTPException, Request, status

from goldsignal.application.use_cases import (
    AutoTradeUseCase,
    ManageSignalsUseCase,
    MonitorSignalsUseCase,
    NotificationUseCase,
    StatsUseCase,
    SubscriptionUseCase,
    UserUseCase,
)
from goldsignal.container import Container
from goldsignal.domain.entities.user import User
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.domain.services.feature_access import Feature


def get_app_container(request: Request) -> Container:
    return request.app.state.container


async def get_uow(container: Container = Depends(get_app_container)) -> AsyncIterator[IUnitOfWork]:
    """Una unidad de trabajo por request; lo no confirmado se revierte."""
    async with container.uow() as uow:
        yield uow


# ─── Usuario ────────────────────────────────────────────────────────────

def get_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> str:
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id")
    return user_id


async def get_current_user(
    user_id: str = Depends(get_user_id),
    uow: IUnitOfWork = Depends(get_uow),
) -> User:
    user = await uow.users.get(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Profile not found. Create it with POST /api/users/profile",
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def require_feature(feature: Feature) -> Callable[..., User]:
    """Dependencia que exige una feature del tier (admins pasan siempre)."""

    def dependency(
        user: User = Depends(get_current_user),
        container: Container = Depends(get_app_container),
    ) -> User:
        container.access_policy.ensure(user, feature)
        return user

    return dependency


# ─── Casos de uso ───────────────────────────────────────────────────────

def get_manage_signals(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> ManageSignalsUseCase:
    return container.manage_signals(uow)


def get_monitor_signals(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> MonitorSignalsUseCase:
    return container.monitor_signals(uow)


def get_subscriptions(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> SubscriptionUseCase:
    return container.subscriptions(uow)


def get_auto_trade(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> AutoTradeUseCase:
    return container.auto_trade(uow)


def get_notifications(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> NotificationUseCase:
    return container.notifications(uow)


def get_users(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> UserUseCase:
    return container.users(uow)


def get_stats(
    uow: IUnitOfWork = Depends(get_uow),
    container: Container = Depends(get_app_container),
) -> StatsUseCase:
    return container.stats(uow)
