"""
GoldSignal – Domain Repository Interface: Signal
==================================================
Interfaz abstracta para persistencia de señales.

REGLA DE CLEAN ARCHITECTURE:
- Esta interfaz vive en domain/ (capa interna)
- Las implementaciones viven en infrastructure/ (capa externa)
- El domain NO conoce CÓMO se implementa, solo QUÉ métodos existen
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from goldsignal.domain.entities.signal import Signal


class ISignalRepository(ABC):
    """
    Interfaz abstracta para repositorio de señales.

    TRANSACCIONES:
    El repositorio no hace commit automático.
    El caller (use case, vía unit of work) controla las transacciones.
    """

    @abstractmethod
    async def add(self, signal: Signal) -> None:
        pass

    @abstractmethod
    async def get(self, signal_id: str) -> Optional[Signal]:
        pass

    @abstractmethod
    async def update(self, signal: Signal) -> None:
        pass

    @abstractmethod
    async def delete(self, signal_id: str) -> bool:
        """True si la señal existía."""
        pass

    @abstractmethod
    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        symbol: Optional[str] = None,
        status: Optional[str] = None,
        signal_type: Optional[str] = None,
    ) -> Tuple[List[Signal], int]:
        """
        Página de señales, más recientes primero.

        Returns:
            (señales de la página, total que cumple los filtros)
        """
        pass

    @abstractmethod
    async def find_open(self) -> List[Signal]:
        """Señales ACTIVE o PENDING (las que monitorea el precio)."""
        pass

    @abstractmethod
    async def find_active(self) -> List[Signal]:
        pass

    @abstractmethod
    async def find_by_symbol(self, symbol: str, limit: int = 50) -> List[Signal]:
        pass

    @abstractmethod
    async def find_closed_since(self, since: datetime) -> List[Signal]:
        pass

    @abstractmethod
    async def find_recent(self, since: datetime, limit: Optional[int] = None) -> List[Signal]:
        """Señales creadas desde ``since``, más recientes primero."""
        pass
