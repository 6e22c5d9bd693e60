from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy.orm import Session as DbSession

from .database import Database, get_database

logger = logging.getLogger(__name__)


@contextmanager
def get_db(database: Optional[Database] = None) -> Generator[DbSession, None, None]:
    """Session whose commit is left to the caller (API routes commit per request)."""
    session = (database or get_database()).session()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def transaction_scope(database: Optional[Database] = None) -> Generator[DbSession, None, None]:
    """Session committed on clean exit and rolled back if the block raises."""
    with get_db(database) as session:
        try:
            yield session
            session.commit()
        except Exception:
            logger.warning("transaction_rolled_back", exc_info=True)
            session.rollback()
            raise


__all__ = ["get_db", "transaction_scope"]
