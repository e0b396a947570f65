"""
GoldSignal – User / Subscription / Notification Mappers
=========================================================
"""

from __future__ import annotations

from typing import Any, Dict

from goldsignal.domain.entities.notification import Notification, NotificationType
from goldsignal.domain.entities.subscription import Subscription, SubscriptionStatus
from goldsignal.domain.entities.user import (
    SubscriptionTier,
    User,
    UserRole,
    UserSubscriptionStatus,
)
from goldsignal.infrastructure.persistence.mappers._conversions import aware
from goldsignal.infrastructure.persistence.models.notification import NotificationModel
from goldsignal.infrastructure.persistence.models.user import SubscriptionModel, UserModel


class UserMapper:

    @staticmethod
    def to_model(user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "avatar_url": user.avatar_url,
            "subscription_tier": user.subscription_tier.value,
            "subscription_status": user.subscription_status.value,
            "subscription_end_date": user.subscription_end_date,
            "user_role": user.role.value,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }

    @staticmethod
    def to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            avatar_url=model.avatar_url,
            subscription_tier=SubscriptionTier(model.subscription_tier),
            subscription_status=UserSubscriptionStatus(model.subscription_status),
            subscription_end_date=aware(model.subscription_end_date),
            role=UserRole(model.user_role),
            created_at=aware(model.created_at),
            updated_at=aware(model.updated_at),
        )


class SubscriptionMapper:

    @staticmethod
    def to_model(subscription: Subscription) -> Dict[str, Any]:
        return {
            "id": subscription.id,
            "user_id": subscription.user_id,
            "plan_id": subscription.plan_id,
            "status": subscription.status.value,
            "current_period_start": subscription.current_period_start,
            "current_period_end": subscription.current_period_end,
            "payment_reference": subscription.payment_reference,
            "created_at": subscription.created_at,
            "updated_at": subscription.updated_at,
        }

    @staticmethod
    def to_entity(model: SubscriptionModel) -> Subscription:
        return Subscription(
            id=model.id,
            user_id=model.user_id,
            plan_id=model.plan_id,
            status=SubscriptionStatus(model.status),
            current_period_start=aware(model.current_period_start),
            current_period_end=aware(model.current_period_end),
            payment_reference=model.payment_reference,
            created_at=aware(model.created_at),
            updated_at=aware(model.updated_at),
        )


class NotificationMapper:

    @staticmethod
    def to_model(notification: Notification) -> Dict[str, Any]:
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "signal_id": notification.signal_id,
            "type": notification.type.value,
            "title": notification.title,
            "message": notification.message,
            "read": notification.read,
            "created_at": notification.created_at,
        }

    @staticmethod
    def to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            signal_id=model.signal_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            read=bool(model.read),
            created_at=aware(model.created_at),
        )
