"""
GoldSignal – Application Port: Market Data Provider
=====================================================
Interfaz para obtener datos de mercado del oro.

Los use cases solicitan precios; la infraestructura
decide CÓMO obtenerlos (Twelve Data REST, fixture en tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from goldsignal.domain.value_objects.market_quote import MarketQuote, PriceBar


class IMarketDataProvider(ABC):
    """
    Interfaz para proveer datos de mercado.

    Las implementaciones lanzan MarketDataError ante fallos del proveedor.
    """

    @abstractmethod
    async def get_gold_price(self) -> float:
        pass

    @abstractmethod
    async def get_quote(self) -> MarketQuote:
        pass

    @abstractmethod
    async def get_historical_data(
        self, interval: str = "1h", outputsize: int = 24,
    ) -> List[PriceBar]:
        pass

    @property
    @abstractmethod
    def last_price(self) -> Optional[float]:
        """Último precio conocido sin consumir cuota (None si nunca se obtuvo)."""
        pass

    def usage_stats(self) -> Dict[str, Any]:
        return {}

    async def close(self) -> None:
        return None
