"""
GoldSignal – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Los proveedores externos (Twelve Data, PayMongo, base de datos) se
configuran aquí; sin credenciales el servicio arranca igual pero las
integraciones correspondientes responden con error.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    # ─── Aplicación ─────────────────────────────────────────────────────
    app_name: str = Field(default="GoldSignal", description="Nombre del servicio")
    app_url: str = Field(
        default="http://localhost:5173",
        description="URL pública del frontend (redirecciones de checkout)",
    )
    log_level: str = Field(default="INFO", description="Nivel de logging raíz")
    cors_origins: List[str] = Field(
        default=["*"], description="Orígenes permitidos por CORS",
    )
    admin_emails: List[str] = Field(
        default=[],
        description="Emails que reciben rol admin al crear su perfil",
    )

    # ─── Instrumento ────────────────────────────────────────────────────
    instrument_symbol: str = Field(default="XAUUSD", description="Símbolo operado")
    pip_size: float = Field(
        default=0.1, description="Tamaño de pip para expresar resultados de señales",
    )

    # ─── Twelve Data ────────────────────────────────────────────────────
    twelve_data_api_key: str = Field(default="", description="API key de Twelve Data")
    twelve_data_base_url: str = Field(
        default="https://api.twelvedata.com",
        description="Endpoint REST de Twelve Data",
    )
    twelve_data_symbol: str = Field(
        default="XAU/USD", description="Símbolo del oro en Twelve Data",
    )
    twelve_data_daily_limit: int = Field(
        default=800, description="Cuota diaria de requests del plan gratuito",
    )
    twelve_data_timeout: float = Field(
        default=10.0, description="Timeout (seg) para /price y /quote",
    )
    twelve_data_history_timeout: float = Field(
        default=15.0, description="Timeout (seg) para /time_series",
    )
    price_cache_seconds: float = Field(
        default=20.0, description="Segundos que se reutiliza el último precio",
    )

    # ─── PayMongo ───────────────────────────────────────────────────────
    paymongo_secret_key: str = Field(default="", description="Secret key de PayMongo")
    paymongo_webhook_secret: str = Field(
        default="", description="Secreto para verificar firmas de webhook",
    )
    paymongo_base_url: str = Field(
        default="https://api.paymongo.com/v1",
        description="Endpoint REST de PayMongo",
    )
    paymongo_timeout: float = Field(default=15.0, description="Timeout (seg) PayMongo")
    payment_methods: List[str] = Field(
        default=["card", "gcash", "grab_pay", "paymaya"],
        description="Métodos de pago ofrecidos en el checkout",
    )
    subscription_period_days: int = Field(
        default=30, description="Duración del periodo pagado",
    )

    # ─── Signal Monitor ─────────────────────────────────────────────────
    signal_monitor_enabled: bool = Field(
        default=True, description="Habilitar monitor de TP/SL en background",
    )
    signal_monitor_interval: float = Field(
        default=30.0, description="Intervalo (seg) entre chequeos de precio",
    )
    subscription_check_interval: float = Field(
        default=3600.0, description="Intervalo (seg) entre chequeos de expiración",
    )
    free_signal_limit: int = Field(
        default=5, description="Señales visibles por mes en tiers free/basic",
    )

    # ─── Auto-trading ───────────────────────────────────────────────────
    auto_trade_enabled: bool = Field(
        default=True, description="Ejecutar señales nuevas en cuentas conectadas",
    )
    max_risk_per_trade: float = Field(
        default=5.0, description="Riesgo máximo (%) permitido por operación",
    )
    min_account_balance: float = Field(
        default=100.0, description="Balance mínimo para operar",
    )
    trading_timezone: str = Field(
        default="UTC", description="Zona horaria de las ventanas de trading",
    )
    demo_base_price: float = Field(
        default=2650.0, description="Precio base del broker demo sin market data",
    )

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=10_000,
        description="Tamaño máximo de cola del Event Bus para contrapresión",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    # ─── MySQL Database ─────────────────────────────────────────────────
    database_url: Optional[str] = Field(
        default=None, description="URL completa; si se define ignora db_*",
    )
    db_host: str = Field(default="localhost", description="MySQL host")
    db_port: int = Field(default=3306, description="MySQL port")
    db_user: str = Field(default="goldsignal", description="MySQL username")
    db_password: str = Field(default="goldsignal_secret", description="MySQL password")
    db_name: str = Field(default="goldsignal", description="MySQL database name")
    db_echo: bool = Field(default=False, description="Loguear queries SQL (debug)")
    db_pool_size: int = Field(default=5, description="Conexiones en el pool")
    db_max_overflow: int = Field(default=10, description="Conexiones extra en picos")
    db_create_tables: bool = Field(
        default=True, description="Crear tablas faltantes al arranque",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+aiomysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
            "?charset=utf8mb4"
        )


# Singleton global – se importa donde se necesite
settings = Settings()
