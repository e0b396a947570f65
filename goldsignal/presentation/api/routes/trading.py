"""
Auto-trading endpoints (feature api_access, plan VIP).

  POST /api/trading/accounts                         → conectar cuenta de broker
  GET  /api/trading/accounts                         → cuentas + resumen
  GET  /api/trading/accounts/{id}
  POST /api/trading/accounts/{id}/sync               → refrescar balance
  GET  /api/trading/accounts/{id}/settings
  PUT  /api/trading/accounts/{id}/settings
  GET  /api/trading/accounts/{id}/positions          → posiciones abiertas en el broker
  GET  /api/trading/accounts/{id}/broker-history     → historial del broker
  GET  /api/trading/history                          → ejecuciones propias
  POST /api/trading/signals/{signal_id}/execute      → ejecución manual (admin)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from goldsignal.application.dto.trading_dto import ConnectAccountDTO
from goldsignal.application.use_cases import AutoTradeUseCase
from goldsignal.domain.entities.user import User
from goldsignal.domain.services.feature_access import Feature
from goldsignal.presentation.api.dependencies import (
    get_auto_trade,
    require_admin,
    require_feature,
)
from goldsignal.presentation.api.schemas import AutoTradeSettingsRequest, ConnectAccountRequest

router = APIRouter(prefix="/api/trading", tags=["trading"])

_trader = require_feature(Feature.API_ACCESS)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Cuentas ────────────────────────────────────────────────────────────

@router.post("/accounts", status_code=status.HTTP_201_CREATED)
async def connect_account(
    body: ConnectAccountRequest,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    account = await auto_trade.connect_account(
        user.id, ConnectAccountDTO.from_dict(body.model_dump()),
    )
    return account.to_dict()


@router.get("/accounts")
async def list_accounts(
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    accounts = await auto_trade.list_accounts(user.id)
    return {"accounts": [a.to_dict() for a in accounts], "count": len(accounts)}


@router.get("/accounts/{account_id}")
async def account_detail(
    account_id: str,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    summary = await auto_trade.account_summary(user.id, account_id)
    return summary.to_dict()


@router.post("/accounts/{account_id}/sync")
async def sync_account(
    account_id: str,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    account = await auto_trade.sync_balance(user.id, account_id)
    return account.to_dict()


# ─── Settings ───────────────────────────────────────────────────────────

@router.get("/accounts/{account_id}/settings")
async def get_settings(
    account_id: str,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    settings = await auto_trade.get_settings(user.id, account_id)
    return settings.to_dict()


@router.put("/accounts/{account_id}/settings")
async def update_settings(
    account_id: str,
    body: AutoTradeSettingsRequest,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    settings = await auto_trade.update_settings(
        user.id, account_id, **body.model_dump(exclude_unset=True),
    )
    return settings.to_dict()


# ─── Broker ─────────────────────────────────────────────────────────────

@router.get("/accounts/{account_id}/positions")
async def open_positions(
    account_id: str,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    positions = await auto_trade.open_positions(user.id, account_id)
    return {"positions": [p.to_dict() for p in positions], "count": len(positions)}


@router.get("/accounts/{account_id}/broker-history")
async def broker_history(
    account_id: str,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    entries = await auto_trade.broker_history(
        user.id, account_id, _aware(from_date), _aware(to_date),
    )
    return {"history": [e.to_dict() for e in entries], "count": len(entries)}


# ─── Ejecuciones ────────────────────────────────────────────────────────

@router.get("/history")
async def trade_history(
    limit: int = Query(50, ge=1, le=200),
    account_id: Optional[str] = None,
    user: User = Depends(_trader),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    executions = await auto_trade.trade_history(user.id, limit=limit, account_id=account_id)
    return {"executions": [e.to_dict() for e in executions], "count": len(executions)}


@router.post("/signals/{signal_id}/execute")
async def execute_signal(
    signal_id: str,
    _admin: User = Depends(require_admin),
    auto_trade: AutoTradeUseCase = Depends(get_auto_trade),
) -> dict:
    run = await auto_trade.execute_signal(signal_id)
    return run.to_dict()
