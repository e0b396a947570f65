"""
GoldSignal – Domain Exceptions
================================
Excepciones específicas del dominio de negocio.

Estas excepciones capturan errores de lógica de negocio,
NO errores técnicos (esos van en application/ports/errors.py).

JERARQUÍA:
    DomainError (base)
    ├── InvalidSignalError
    ├── InvalidTradeError
    ├── RiskManagementError
    ├── ValidationError
    ├── EntityNotFoundError
    │   └── SignalNotFoundError
    └── FeatureAccessDenied
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class InvalidSignalError(DomainError):
    """Error cuando una señal no cumple los requisitos de negocio."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, code="INVALID_SIGNAL")
        self.reason = reason


class InvalidTradeError(DomainError):
    """Error cuando una ejecución tiene datos inválidos o transición ilegal."""

    def __init__(self, message: str, trade_id: Optional[str] = None):
        super().__init__(message, code="INVALID_TRADE")
        self.trade_id = trade_id


class RiskManagementError(DomainError):
    """Error cuando se viola una regla de gestión de riesgo."""

    def __init__(self, message: str, rule: Optional[str] = None):
        super().__init__(message, code="RISK_VIOLATION")
        self.rule = rule


class ValidationError(DomainError):
    """Error de validación general de datos de dominio."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.value = value


class EntityNotFoundError(DomainError):
    """Error cuando una entidad solicitada no existe."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}", code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["entity"] = self.entity
        return data


class SignalNotFoundError(EntityNotFoundError):
    def __init__(self, signal_id: str):
        super().__init__("Signal", signal_id)


class FeatureAccessDenied(DomainError):
    """El tier del usuario no incluye la feature solicitada."""

    def __init__(self, feature: str, required_tier: str, message: str):
        super().__init__(message, code="UPGRADE_REQUIRED")
        self.feature = feature
        self.required_tier = required_tier

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["feature"] = self.feature
        data["required_tier"] = self.required_tier
        return data
