"""
Notification endpoints.

  GET    /api/notifications               → bandeja paginada
  GET    /api/notifications/unread-count  → contador de no leídas
  POST   /api/notifications/read-all      → marcar todas como leídas
  POST   /api/notifications/system        → anuncio de sistema (admin)
  POST   /api/notifications/{id}/read     → marcar como leída
  DELETE /api/notifications/{id}          → eliminar
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from goldsignal.application.use_cases import NotificationUseCase
from goldsignal.domain.entities.user import User
from goldsignal.presentation.api.dependencies import (
    get_current_user,
    get_notifications,
    require_admin,
)
from goldsignal.presentation.api.schemas import SystemNotificationRequest

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    user: User = Depends(get_current_user),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> dict:
    result = await notifications.list_for_user(
        user.id, page=page, limit=limit, unread_only=unread_only,
    )
    return result.to_dict()


@router.get("/unread-count")
async def unread_count(
    user: User = Depends(get_current_user),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> dict:
    return {"unread": await notifications.unread_count(user.id)}


@router.post("/read-all")
async def mark_all_read(
    user: User = Depends(get_current_user),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> dict:
    return {"updated": await notifications.mark_all_read(user.id)}


@router.post("/system", status_code=status.HTTP_201_CREATED)
async def system_announcement(
    body: SystemNotificationRequest,
    _admin: User = Depends(require_admin),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> dict:
    sent = await notifications.send_system_notification(
        title=body.title, message=body.message, tiers=body.tiers,
    )
    return {"sent": sent}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> dict:
    await notifications.mark_read(notification_id, user.id)
    return {"id": notification_id, "read": True}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    notifications: NotificationUseCase = Depends(get_notifications),
) -> Response:
    await notifications.delete(notification_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
