"""
GoldSignal – Twelve Data Adapter
==================================
Implementa IMarketDataProvider sobre la API REST de Twelve Data.

ENDPOINTS:
  /price        → precio spot de XAU/USD
  /quote        → cambio diario, máximo, mínimo, volumen
  /time_series  → velas OHLC

CUOTA:
  El plan gratuito permite 800 requests/día. El contador se reinicia
  al cambiar el día UTC. Un 429 o un mensaje de "run out of API
  credits"/"daily limit" marca la cuota como agotada hasta mañana y
  no se vuelve a llamar al proveedor.

Twelve Data responde HTTP 200 con {"status": "error", "code": ...}
ante la mayoría de errores; ambos casos se tratan igual.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from goldsignal.application.ports.errors import MarketDataError
from goldsignal.application.ports.market_data_provider import IMarketDataProvider
from goldsignal.domain.value_objects.market_quote import MarketQuote, PriceBar
from goldsignal.shared.config.settings import Settings
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("twelve_data")

_QUOTA_MARKERS = ("run out of api credits", "daily limit")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Optional[str]) -> datetime:
    if not value:
        return _utcnow()
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return _utcnow()


def _num(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class TwelveDataAdapter(IMarketDataProvider):
    """
    Cliente async de Twelve Data con cuota diaria y cache de precio.

    Args:
        settings: Configuración (API key, URL, límites)
        client: httpx.AsyncClient a usar; None = se crea uno propio
        clock: Fuente de tiempo UTC (inyectable en tests)
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._settings = settings
        self._client = client or httpx.AsyncClient(base_url=settings.twelve_data_base_url)
        self._owns_client = client is None
        self._clock = clock

        self._daily_limit = settings.twelve_data_daily_limit
        self._request_count = 0
        self._quota_exhausted = False
        self._quota_day: date = clock().date()

        self._last_price: Optional[float] = None
        self._last_price_at: float = 0.0

        if not settings.twelve_data_api_key:
            logger.warning("⚠️ TWELVE_DATA_API_KEY no configurada: sin precios de mercado")

    # ════════════════════════════════════════════════════════════════
    #  IMarketDataProvider
    # ════════════════════════════════════════════════════════════════

    @property
    def last_price(self) -> Optional[float]:
        return self._last_price

    async def get_gold_price(self) -> float:
        """Precio spot; dentro de price_cache_seconds devuelve el cacheado."""
        age = time.monotonic() - self._last_price_at
        if self._last_price is not None and age < self._settings.price_cache_seconds:
            return self._last_price

        data = await self._request("/price", timeout=self._settings.twelve_data_timeout)
        price = _num(data.get("price"), default=-1.0)
        if price <= 0:
            raise MarketDataError(f"Respuesta de precio inválida: {data!r}")

        self._remember(price)
        logger.debug("XAU/USD %.2f (%d/%d requests hoy)", price, self._request_count, self._daily_limit)
        return price

    async def get_quote(self) -> MarketQuote:
        data = await self._request("/quote", timeout=self._settings.twelve_data_timeout)
        price = _num(data.get("close"), default=-1.0)
        if price <= 0:
            raise MarketDataError(f"Respuesta de quote inválida: {data!r}")
        self._remember(price)

        return MarketQuote(
            symbol=self._settings.instrument_symbol,
            price=price,
            change=_num(data.get("change")),
            change_percent=_num(data.get("percent_change")),
            high=_num(data.get("high"), price),
            low=_num(data.get("low"), price),
            volume=_num(data.get("volume")),
            timestamp=_parse_datetime(data.get("datetime")),
        )

    async def get_historical_data(
        self, interval: str = "1h", outputsize: int = 24,
    ) -> List[PriceBar]:
        data = await self._request(
            "/time_series",
            timeout=self._settings.twelve_data_history_timeout,
            interval=interval,
            outputsize=outputsize,
        )
        bars = [
            PriceBar(
                timestamp=_parse_datetime(row.get("datetime")),
                open=_num(row.get("open")),
                high=_num(row.get("high")),
                low=_num(row.get("low")),
                close=_num(row.get("close")),
                volume=_num(row.get("volume")),
            )
            for row in data.get("values") or []
        ]
        logger.info("📊 %d velas XAU/USD (%s)", len(bars), interval)
        return bars

    def usage_stats(self) -> Dict[str, Any]:
        return {
            "requests_today": self._request_count,
            "daily_limit": self._daily_limit,
            "remaining": self.remaining_requests(),
            "quota_exhausted": self._quota_exhausted,
            "quota_day": self._quota_day.isoformat(),
        }

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ─── Cuota ──────────────────────────────────────────────────────────

    @property
    def quota_exhausted(self) -> bool:
        self._roll_day()
        return self._quota_exhausted

    def remaining_requests(self) -> int:
        self._roll_day()
        if self._quota_exhausted:
            return 0
        return max(0, self._daily_limit - self._request_count)

    def reset_quota(self) -> None:
        self._request_count = 0
        self._quota_exhausted = False
        self._quota_day = self._clock().date()
        logger.info("🔄 Cuota de Twelve Data reiniciada manualmente")

    def _roll_day(self) -> None:
        today = self._clock().date()
        if today != self._quota_day:
            self._request_count = 0
            self._quota_exhausted = False
            self._quota_day = today
            logger.info("🔄 Nuevo día: cuota de Twelve Data reiniciada")

    def _mark_exhausted(self) -> MarketDataError:
        self._quota_exhausted = True
        logger.error("🛑 Cuota de Twelve Data agotada por hoy")
        return MarketDataError(
            "Twelve Data API quota exhausted for today", status_code=429, quota_exhausted=True,
        )

    # ─── HTTP ───────────────────────────────────────────────────────────

    def _remember(self, price: float) -> None:
        self._last_price = price
        self._last_price_at = time.monotonic()

    async def _request(self, path: str, timeout: float, **params: Any) -> Dict[str, Any]:
        if not self._settings.twelve_data_api_key:
            raise MarketDataError("Twelve Data API key not configured")
        if self.remaining_requests() <= 0:
            raise MarketDataError(
                "Twelve Data daily API limit reached", status_code=429, quota_exhausted=True,
            )

        self._request_count += 1
        query = {
            "symbol": self._settings.twelve_data_symbol,
            "apikey": self._settings.twelve_data_api_key,
            **params,
        }
        try:
            response = await self._client.get(path, params=query, timeout=timeout)
        except httpx.HTTPError as exc:
            raise MarketDataError(f"Twelve Data no disponible: {exc.__class__.__name__}") from exc

        if response.status_code == 429:
            raise self._mark_exhausted()
        if response.status_code >= 400:
            raise MarketDataError(
                f"Twelve Data HTTP {response.status_code}", status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise MarketDataError("Respuesta no JSON de Twelve Data") from exc

        if isinstance(data, dict) and data.get("status") == "error":
            message = str(data.get("message") or "Unknown API error")
            if data.get("code") == 429 or any(m in message.lower() for m in _QUOTA_MARKERS):
                raise self._mark_exhausted()
            raise MarketDataError(f"Twelve Data API error: {message}", status_code=data.get("code"))
        return data
