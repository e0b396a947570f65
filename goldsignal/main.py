"""
GoldSignal – Main Application Entry Point
============================================
Backend del dashboard de señales XAU/USD.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear el contenedor (settings + adaptadores perezosos)
  3. Lifespan startup:
     a. Inicializar base de datos (crea tablas si falta alguna)
     b. Iniciar WebSocketManager (broadcast a frontend)
     c. Iniciar AutoTradeListener (si auto_trade_enabled)
     d. Iniciar SignalMonitorWorker (si signal_monitor_enabled)
  4. Lifespan shutdown:
     a. Detener todo en orden inverso y cerrar clientes HTTP / DB

FLUJO DE DATOS:
  Twelve Data → SignalMonitorWorker → MonitorSignalsUseCase
       → EventBus(price | signal_closed) → WebSocketManager → Frontend
  Admin POST /api/signals → ManageSignalsUseCase
       → EventBus(signal_published) → AutoTradeListener → Broker
                                    → WebSocketManager → Frontend

  uvicorn goldsignal.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from goldsignal.application.ports.errors import ExternalServiceError
from goldsignal.container import Container, init_container
from goldsignal.domain.exceptions.domain_errors import DomainError
from goldsignal.presentation.api.routes import router
from goldsignal.shared.config.settings import Settings, settings as default_settings
from goldsignal.shared.logging.logger import get_logger, setup_logging

logger = get_logger("main")

_ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "UPGRADE_REQUIRED": status.HTTP_403_FORBIDDEN,
    "INVALID_SIGNATURE": status.HTTP_401_UNAUTHORIZED,
}


# ─── FastAPI Lifespan ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown de base de datos, broadcaster y workers."""
    container: Container = app.state.container
    settings = container.settings

    logger.info("=" * 60)
    logger.info("  %s - XAU/USD signal dashboard", settings.app_name)
    logger.info("  Instrumento: %s (pip=%.2f)", settings.instrument_symbol, settings.pip_size)
    logger.info("  Monitor: %s cada %.0fs",
                "ON" if settings.signal_monitor_enabled else "OFF",
                settings.signal_monitor_interval)
    logger.info("  Auto-trading: %s", "ON" if settings.auto_trade_enabled else "OFF")
    logger.info("=" * 60)

    await container.database.initialize()
    await container.ws_manager.start()
    if settings.auto_trade_enabled:
        await container.auto_trade_listener.start()
    if settings.signal_monitor_enabled:
        await container.signal_monitor.start()

    logger.info("✓ Todos los componentes iniciados correctamente")

    yield  # ← La app está corriendo aquí

    # ── SHUTDOWN ──
    logger.info("Iniciando shutdown...")
    if settings.signal_monitor_enabled:
        await container.signal_monitor.stop()
    if settings.auto_trade_enabled:
        await container.auto_trade_listener.stop()
    await container.ws_manager.stop()
    await container.event_bus.unsubscribe_all()
    await container.aclose()
    logger.info("✓ Shutdown completo")


# ─── Exception Handlers ─────────────────────────────────────────────────

async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, ExternalServiceError) and exc.code not in _ERROR_STATUS:
        logger.warning("Proveedor externo falló en %s: %s", request.url.path, exc.message)
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = _ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=code, content=exc.to_dict())


# ─── FastAPI App ────────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construye la aplicación con su propio contenedor.

    Args:
        settings: Configuración; None = variables de entorno / .env
    """
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = FastAPI(
        title="GoldSignal API",
        description="Señales XAU/USD con monitor TP/SL, suscripciones y auto-trading",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = init_container(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DomainError, domain_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Arranca uvicorn con host/puerto de la configuración."""
    import uvicorn

    settings = app.state.container.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
