"""Conversiones compartidas por los mappers."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional


def to_decimal(value: Optional[float], places: int = 8) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(round(float(value), places)))


def to_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def aware(value: Optional[datetime]) -> Optional[datetime]:
    """Algunos drivers (SQLite) devuelven datetimes naive; se asumen UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
