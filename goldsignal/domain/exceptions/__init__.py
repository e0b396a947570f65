"""Domain exceptions."""
from goldsignal.domain.exceptions.domain_errors import (
    DomainError,
    InvalidSignalError,
    InvalidTradeError,
    RiskManagementError,
    ValidationError,
    EntityNotFoundError,
    SignalNotFoundError,
    FeatureAccessDenied,
)

__all__ = [
    "DomainError",
    "InvalidSignalError",
    "InvalidTradeError",
    "RiskManagementError",
    "ValidationError",
    "EntityNotFoundError",
    "SignalNotFoundError",
    "FeatureAccessDenied",
]
