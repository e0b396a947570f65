"""
GoldSignal – User / Subscription ORM Models
=============================================
Tablas `profiles` y `subscriptions`.

El id de profiles lo emite el proveedor de autenticación externo,
por eso es VARCHAR(64) y no autoincremental.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from goldsignal.infrastructure.persistence.database import Base


class UserModel(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(512), default=None)

    subscription_tier: Mapped[str] = mapped_column(
        SQLEnum("free", "basic", "premium", "vip", name="subscription_tier_enum"),
        nullable=False, default="free",
    )
    subscription_status: Mapped[str] = mapped_column(
        SQLEnum("active", "canceled", "past_due", name="profile_subscription_status_enum"),
        nullable=False, default="active",
    )
    subscription_end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=None,
    )
    user_role: Mapped[str] = mapped_column(
        SQLEnum("user", "admin", name="user_role_enum"), nullable=False, default="user",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_profiles_tier_status", "subscription_tier", "subscription_status"),
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, tier={self.subscription_tier})>"


class SubscriptionModel(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    plan_id: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        SQLEnum("active", "canceled", "past_due", "unpaid", name="subscription_status_enum"),
        nullable=False, default="active",
    )
    current_period_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    current_period_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(128), unique=True, default=None,
        comment="ID del checkout session que originó el periodo",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_subscriptions_status_end", "status", "current_period_end"),
    )

    def __repr__(self) -> str:
        return (
            f"<SubscriptionModel(id={self.id}, user={self.user_id}, "
            f"plan={self.plan_id}, status={self.status})>"
        )
