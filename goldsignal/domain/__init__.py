"""
GoldSignal – Domain Layer
===========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Entidades de negocio (Signal, User, Subscription, ...)
- value_objects/: Objetos inmutables (SignalStatusInfo, SymbolInfo, ...)
- services/: Servicios de dominio puros (SignalStatusCalculator, RiskCalculator)
- repositories/: Interfaces abstractas (ABCs)
- events/: Eventos de dominio
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (SQLAlchemy, FastAPI, etc.)
"""

from goldsignal.domain.entities.signal import Signal
from goldsignal.domain.value_objects.signal_status import SignalStatus, SignalStatusInfo
from goldsignal.domain.services.signal_status_calculator import SignalStatusCalculator
from goldsignal.domain.services.risk_calculator import RiskCalculator

__all__ = [
    "Signal",
    "SignalStatus",
    "SignalStatusInfo",
    "SignalStatusCalculator",
    "RiskCalculator",
]
