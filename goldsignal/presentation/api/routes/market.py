"""
Market data, stats & monitor endpoints.

  GET  /api/market/price       → precio XAU/USD (cacheado)
  GET  /api/market/quote       → cotización con cambio diario
  GET  /api/market/history     → velas OHLC (analytics)
  GET  /api/market/usage       → consumo de cuota de Twelve Data (admin)
  GET  /api/stats/performance  → rendimiento de señales (analytics)
  POST /api/monitor/run        → una pasada del monitor de señales (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from goldsignal.application.use_cases import MonitorSignalsUseCase, StatsUseCase
from goldsignal.container import Container
from goldsignal.domain.entities.user import User
from goldsignal.domain.services.feature_access import Feature
from goldsignal.presentation.api.dependencies import (
    get_app_container,
    get_current_user,
    get_monitor_signals,
    get_stats,
    require_admin,
    require_feature,
)

router = APIRouter(prefix="/api", tags=["market"])

_analytics = require_feature(Feature.ANALYTICS)


@router.get("/market/price")
async def gold_price(
    _user: User = Depends(get_current_user),
    container: Container = Depends(get_app_container),
) -> dict:
    price = await container.market_data.get_gold_price()
    return {"symbol": container.settings.instrument_symbol, "price": price}


@router.get("/market/quote")
async def gold_quote(
    _user: User = Depends(get_current_user),
    container: Container = Depends(get_app_container),
) -> dict:
    quote = await container.market_data.get_quote()
    return quote.to_dict()


@router.get("/market/history")
async def gold_history(
    interval: str = Query("1h", pattern=r"^(1min|5min|15min|30min|45min|1h|2h|4h|1day|1week)$"),
    outputsize: int = Query(24, ge=1, le=500),
    _user: User = Depends(_analytics),
    container: Container = Depends(get_app_container),
) -> dict:
    bars = await container.market_data.get_historical_data(interval=interval, outputsize=outputsize)
    return {"interval": interval, "count": len(bars), "values": [b.to_dict() for b in bars]}


@router.get("/market/usage")
async def market_usage(
    _admin: User = Depends(require_admin),
    container: Container = Depends(get_app_container),
) -> dict:
    return container.market_data.usage_stats()


@router.get("/stats/performance")
async def signal_performance(
    days: int = Query(30, ge=1, le=365),
    _user: User = Depends(_analytics),
    stats: StatsUseCase = Depends(get_stats),
) -> dict:
    performance = await stats.signal_performance(days=days)
    return performance.to_dict()


@router.post("/monitor/run")
async def run_monitor(
    _admin: User = Depends(require_admin),
    monitor: MonitorSignalsUseCase = Depends(get_monitor_signals),
) -> dict:
    result = await monitor.run_once()
    return result.to_dict()
