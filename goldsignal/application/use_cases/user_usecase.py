"""
GoldSignal – User Use Case
=============================
Perfiles de usuario. La autenticación la resuelve el proveedor
externo; aquí solo se crea el perfil ligado a su id.
"""

from __future__ import annotations

from typing import Optional, Sequence

from goldsignal.application.dto.signal_dto import PageDTO
from goldsignal.domain.entities.user import User, UserRole
from goldsignal.domain.exceptions.domain_errors import EntityNotFoundError, ValidationError
from goldsignal.domain.repositories.unit_of_work import IUnitOfWork
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("usecase.users")


class UserUseCase:

    PROFILE_FIELDS = ("full_name", "avatar_url")

    def __init__(self, uow: IUnitOfWork, admin_emails: Sequence[str] = ()):
        self._uow = uow
        self._admin_emails = {e.strip().lower() for e in admin_emails}

    async def create_profile(
        self,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        if await self._uow.users.get(user_id) is not None:
            raise ValidationError("Profile already exists", field="id", value=user_id)
        email = email.strip().lower()
        if await self._uow.users.get_by_email(email) is not None:
            raise ValidationError("Email already registered", field="email", value=email)

        user = User(
            id=user_id,
            email=email,
            full_name=full_name,
            avatar_url=avatar_url,
            role=UserRole.ADMIN if email in self._admin_emails else UserRole.USER,
        )
        await self._uow.users.add(user)
        await self._uow.commit()
        logger.info("👤 Perfil creado %s (%s, rol=%s)", user.id, email, user.role.value)
        return user

    async def get(self, user_id: str) -> User:
        user = await self._uow.users.get(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def update_profile(self, user_id: str, **changes) -> User:
        user = await self.get(user_id)
        for name, value in changes.items():
            if name not in self.PROFILE_FIELDS:
                raise ValidationError(f"Campo no editable: {name}", field=name)
            if value is not None:
                setattr(user, name, value)
        await self._uow.users.update(user)
        await self._uow.commit()
        return user

    async def set_role(self, user_id: str, role: UserRole) -> User:
        user = await self.get(user_id)
        user.role = UserRole(role)
        await self._uow.users.update(user)
        await self._uow.commit()
        logger.info("Rol de %s → %s", user_id, user.role.value)
        return user

    async def list(self, page: int = 1, limit: int = 20) -> PageDTO[User]:
        items, total = await self._uow.users.list(page=page, limit=limit)
        return PageDTO(items=items, total=total, page=page, limit=limit)
