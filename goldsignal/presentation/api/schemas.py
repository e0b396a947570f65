"""
GoldSignal – API Schemas
==========================
Bodies de request validados con pydantic.

Las respuestas se construyen con to_dict() de entidades y DTOs.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# ─── Señales ────────────────────────────────────────────────────────────

class CreateSignalRequest(BaseModel):
    type: Literal["buy", "sell"]
    entry_price: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    take_profit: float = Field(gt=0)
    symbol: str = "XAUUSD"
    confidence: int = Field(default=50, ge=0, le=100)
    description: Optional[str] = None
    status: Literal["pending", "active"] = "active"


class UpdateSignalRequest(BaseModel):
    type: Optional[Literal["buy", "sell"]] = None
    entry_price: Optional[float] = Field(default=None, gt=0)
    stop_loss: Optional[float] = Field(default=None, gt=0)
    take_profit: Optional[float] = Field(default=None, gt=0)
    symbol: Optional[str] = None
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    description: Optional[str] = None
    status: Optional[Literal["pending", "active"]] = None


class CloseSignalRequest(BaseModel):
    result: Literal["win", "loss", "breakeven"]
    pips_result: Optional[float] = None
    exit_price: Optional[float] = Field(default=None, gt=0)


# ─── Usuarios ───────────────────────────────────────────────────────────

class CreateProfileRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class SetRoleRequest(BaseModel):
    role: Literal["user", "admin"]


# ─── Notificaciones ─────────────────────────────────────────────────────

class SystemNotificationRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    tiers: Optional[List[Literal["free", "basic", "premium", "vip"]]] = None


# ─── Suscripciones ──────────────────────────────────────────────────────

class CheckoutRequestBody(BaseModel):
    plan: str


class VerifySessionRequest(BaseModel):
    session_id: str


class CreateSubscriptionRequest(BaseModel):
    user_id: str
    plan_id: str
    status: Literal["active", "canceled", "past_due", "unpaid"] = "active"
    current_period_end: Optional[datetime] = None


class UpdateSubscriptionRequest(BaseModel):
    status: Optional[Literal["active", "canceled", "past_due", "unpaid"]] = None
    plan_id: Optional[str] = None
    current_period_end: Optional[datetime] = None


# ─── Trading ────────────────────────────────────────────────────────────

class ConnectAccountRequest(BaseModel):
    broker_name: str
    account_id: str = Field(min_length=1, max_length=64)
    api_key: Optional[str] = None
    api_secret: Optional[str] = None


class AutoTradeSettingsRequest(BaseModel):
    enabled: Optional[bool] = None
    risk_per_trade: Optional[float] = None
    max_concurrent_trades: Optional[int] = None
    max_daily_trades: Optional[int] = None
    stop_loss_mode: Optional[Literal["signal", "percentage", "fixed_amount"]] = None
    take_profit_mode: Optional[Literal["signal", "percentage", "fixed_amount"]] = None
    trading_hours_start: Optional[str] = None
    trading_hours_end: Optional[str] = None
    max_drawdown_percentage: Optional[float] = None
    emergency_stop: Optional[bool] = None
