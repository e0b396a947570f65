"""
Health check y canal WebSocket.

  GET /api/health  → estado del servicio y workers
  WS  /ws          → stream de precio y señales en tiempo real
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from goldsignal.container import Container
from goldsignal.presentation.api.dependencies import get_app_container

router = APIRouter(tags=["system"])


@router.get("/api/health")
async def health(container: Container = Depends(get_app_container)) -> dict:
    return {
        "status": "ok",
        "service": container.settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": container.database.is_initialized,
        "last_price": container.market_data.last_price,
        "signal_monitor": container.signal_monitor.is_running,
        "auto_trade": container.auto_trade_listener.is_running,
        "ws_clients": container.ws_manager.client_count,
    }


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    manager = websocket.app.state.container.ws_manager
    await manager.connect(websocket)
    try:
        while True:
            # Los mensajes del cliente solo mantienen viva la conexión
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
