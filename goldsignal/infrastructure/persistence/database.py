"""
GoldSignal – SQLAlchemy ORM Base Configuration
================================================
Configuración base para todos los modelos ORM.

Clean Architecture: Esta es la implementación concreta de la infraestructura
de base de datos. Los repositorios dependen de interfaces, no de esta clase.

MOTORES:
- Producción: MySQL vía aiomysql (URL armada desde db_*)
- Tests / local: SQLite en memoria vía aiosqlite (database_url)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from goldsignal.shared.config.settings import Settings
from goldsignal.shared.logging.logger import get_logger

logger = get_logger("database")

# ─── Naming Convention (para migraciones consistentes) ─────────────────────
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base declarativa para todos los modelos ORM."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class DatabaseManager:
    """
    Manager de conexión async.

    USO:
        db = DatabaseManager(settings)
        await db.initialize()  # En startup de FastAPI

        async with db.session() as session:
            result = await session.execute(...)

        await db.close()  # En shutdown de FastAPI
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def database_url(self) -> str:
        return self._settings.sqlalchemy_url

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("DatabaseManager no inicializado. Llama a initialize() primero.")
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> None:
        """
        Inicializa el engine async y session factory.

        Con db_create_tables=True crea las tablas que falten
        (entornos sin migraciones, tests).
        """
        if self._engine is not None:
            return

        s = self._settings
        url = self.database_url
        if url.startswith("sqlite"):
            # Una sola conexión compartida: la BD en memoria vive mientras viva el pool
            self._engine = create_async_engine(
                url,
                echo=s.db_echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self._engine = create_async_engine(
                url,
                echo=s.db_echo,
                pool_size=s.db_pool_size,
                max_overflow=s.db_max_overflow,
                pool_recycle=3600,
                pool_pre_ping=True,
            )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if s.db_create_tables:
            await self.create_tables()

        logger.info("🗄️  Base de datos inicializada (%s)", self._engine.url.render_as_string(hide_password=True))

    async def create_tables(self) -> None:
        # Registrar todos los modelos en Base.metadata
        from goldsignal.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Cierra el engine y todas las conexiones del pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Base de datos cerrada")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Context manager async para sesiones."""
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager no inicializado. Llama a initialize() primero.")

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    def get_session(self) -> AsyncSession:
        """Obtiene una sesión sin context manager."""
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager no inicializado.")
        return self._session_factory()
