"""
GoldSignal – Application Port Errors
======================================
Errores técnicos de proveedores externos.

Heredan de DomainError para compartir el formato {"error", "message"}
en la API, pero representan fallos de integración, no de negocio.
"""

from __future__ import annotations

from typing import Optional

from goldsignal.domain.exceptions.domain_errors import DomainError


class ExternalServiceError(DomainError):
    """Fallo al hablar con un proveedor externo."""

    def __init__(self, message: str, code: str = "EXTERNAL_SERVICE_ERROR",
                 status_code: Optional[int] = None):
        super().__init__(message, code=code)
        self.status_code = status_code


class MarketDataError(ExternalServiceError):
    def __init__(self, message: str, status_code: Optional[int] = None,
                 quota_exhausted: bool = False):
        super().__init__(message, code="MARKET_DATA_ERROR", status_code=status_code)
        self.quota_exhausted = quota_exhausted


class PaymentGatewayError(ExternalServiceError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, code="PAYMENT_GATEWAY_ERROR", status_code=status_code)


class WebhookSignatureError(PaymentGatewayError):
    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message, status_code=401)
        self.code = "INVALID_SIGNATURE"


class BrokerError(ExternalServiceError):
    def __init__(self, message: str, broker: Optional[str] = None):
        super().__init__(message, code="BROKER_ERROR")
        self.broker = broker
