"""Persistencia: SQLAlchemy async (MySQL en producción, SQLite en tests)."""

from goldsignal.infrastructure.persistence.database import Base, DatabaseManager
from goldsignal.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

__all__ = ["Base", "DatabaseManager", "SqlAlchemyUnitOfWork"]
