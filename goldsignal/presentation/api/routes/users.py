"""
User profile endpoints.

  POST  /api/users/profile      → crear perfil del usuario autenticado
  GET   /api/users/me           → perfil + tier efectivo + features
  PATCH /api/users/me           → editar nombre / avatar
  GET   /api/users              → listado (admin)
  PUT   /api/users/{id}/role    → cambiar rol (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from goldsignal.application.use_cases import UserUseCase
from goldsignal.container import Container
from goldsignal.domain.entities.user import User
from goldsignal.presentation.api.dependencies import (
    get_app_container,
    get_current_user,
    get_user_id,
    get_users,
    require_admin,
)
from goldsignal.presentation.api.schemas import (
    CreateProfileRequest,
    SetRoleRequest,
    UpdateProfileRequest,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/profile", status_code=status.HTTP_201_CREATED)
async def create_profile(
    body: CreateProfileRequest,
    user_id: str = Depends(get_user_id),
    users: UserUseCase = Depends(get_users),
) -> dict:
    user = await users.create_profile(
        user_id, email=body.email, full_name=body.full_name, avatar_url=body.avatar_url,
    )
    return user.to_dict()


@router.get("/me")
async def my_profile(
    user: User = Depends(get_current_user),
    container: Container = Depends(get_app_container),
) -> dict:
    policy = container.access_policy
    data = user.to_dict()
    data.update({
        "effective_tier": user.effective_tier().value,
        "features": policy.available_features(user),
        "signal_quota": policy.signal_quota(user.effective_tier()),
    })
    return data


@router.patch("/me")
async def update_my_profile(
    body: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    users: UserUseCase = Depends(get_users),
) -> dict:
    updated = await users.update_profile(user.id, **body.model_dump(exclude_unset=True))
    return updated.to_dict()


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _admin: User = Depends(require_admin),
    users: UserUseCase = Depends(get_users),
) -> dict:
    result = await users.list(page=page, limit=limit)
    return result.to_dict()


@router.put("/{user_id}/role")
async def set_user_role(
    user_id: str,
    body: SetRoleRequest,
    _admin: User = Depends(require_admin),
    users: UserUseCase = Depends(get_users),
) -> dict:
    user = await users.set_role(user_id, body.role)
    return user.to_dict()
