"""
Signal endpoints.

  GET    /api/signals/feed            → feed del usuario según su cuota
  GET    /api/signals                 → listado paginado (premium)
  GET    /api/signals/active          → señales activas (premium)
  GET    /api/signals/symbol/{symbol} → por símbolo (premium)
  GET    /api/signals/{id}            → detalle (premium)
  POST   /api/signals                 → publicar (admin)
  PUT    /api/signals/{id}            → editar (admin)
  POST   /api/signals/{id}/close      → cerrar con resultado (admin)
  DELETE /api/signals/{id}            → eliminar (admin)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from goldsignal.application.dto.signal_dto import CreateSignalDTO
from goldsignal.application.use_cases import ManageSignalsUseCase
from goldsignal.domain.entities.user import User
from goldsignal.domain.services.feature_access import Feature
from goldsignal.presentation.api.dependencies import (
    get_current_user,
    get_manage_signals,
    require_admin,
    require_feature,
)
from goldsignal.presentation.api.schemas import (
    CloseSignalRequest,
    CreateSignalRequest,
    UpdateSignalRequest,
)

router = APIRouter(prefix="/api/signals", tags=["signals"])

_premium = require_feature(Feature.UNLIMITED_SIGNALS)


@router.get("/feed")
async def signal_feed(
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    feed = await signals.feed(user, limit=limit)
    return feed.to_dict()


@router.get("")
async def list_signals(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    symbol: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    signal_type: Optional[str] = Query(None, alias="type"),
    _user: User = Depends(_premium),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    result = await signals.list(
        page=page, limit=limit, symbol=symbol, status=status_filter, signal_type=signal_type,
    )
    return result.to_dict()


@router.get("/active")
async def active_signals(
    _user: User = Depends(_premium),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    views = await signals.active()
    return {"signals": [v.to_dict() for v in views], "count": len(views)}


@router.get("/symbol/{symbol}")
async def signals_by_symbol(
    symbol: str,
    limit: int = Query(50, ge=1, le=200),
    _user: User = Depends(_premium),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    views = await signals.by_symbol(symbol, limit=limit)
    return {"symbol": symbol.upper(), "signals": [v.to_dict() for v in views]}


@router.get("/{signal_id}")
async def get_signal(
    signal_id: str,
    _user: User = Depends(_premium),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    view = await signals.get_view(signal_id)
    return view.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_signal(
    body: CreateSignalRequest,
    _admin: User = Depends(require_admin),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    signal = await signals.create(CreateSignalDTO.from_dict(body.model_dump()))
    return signal.to_dict()


@router.put("/{signal_id}")
async def update_signal(
    signal_id: str,
    body: UpdateSignalRequest,
    _admin: User = Depends(require_admin),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    changes = body.model_dump(exclude_unset=True)
    if "type" in changes:
        changes["signal_type"] = changes.pop("type")
    signal = await signals.update(signal_id, **changes)
    return signal.to_dict()


@router.post("/{signal_id}/close")
async def close_signal(
    signal_id: str,
    body: CloseSignalRequest,
    _admin: User = Depends(require_admin),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> dict:
    closed = await signals.close(
        signal_id,
        result=body.result,
        pips_result=body.pips_result,
        exit_price=body.exit_price,
    )
    return {"signal": closed.signal.to_dict(), "notified": closed.notified}


@router.delete("/{signal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_signal(
    signal_id: str,
    _admin: User = Depends(require_admin),
    signals: ManageSignalsUseCase = Depends(get_manage_signals),
) -> Response:
    await signals.delete(signal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
