from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session as DbSession
from sqlalchemy.orm import sessionmaker

from ..config import get_settings

_SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA busy_timeout=30000;",
)


def _apply_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in _SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def _build_engine(url: str) -> Engine:
    is_sqlite = url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": 30} if is_sqlite else {}
    engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True, future=True)
    if is_sqlite:
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine


class Database:
    """Engine plus session factory for the option table."""

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url or get_settings().database_url
        self.engine = _build_engine(self.url)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, future=True)

    def session(self) -> DbSession:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


_database: Optional[Database] = None


def get_database() -> Database:
    global _database
    if _database is None:
        _database = Database()
    return _database


def reset_database() -> None:
    """Drop the cached database so the next call picks up a new DATABASE_URL."""
    global _database
    if _database is not None:
        _database.dispose()
    _database = None


__all__ = ["Database", "get_database", "reset_database"]
