from __future__ import annotations

import logging

from sqlalchemy import inspect

from . import models  # noqa: F401  registers tables on Base.metadata
from .base import Base
from .database import Database, get_database

logger = logging.getLogger(__name__)


def init_db(database: Database | None = None) -> None:
    """Create the option table if it does not exist yet."""
    db_instance = database or get_database()
    missing = [
        name for name in Base.metadata.tables if not inspect(db_instance.engine).has_table(name)
    ]
    Base.metadata.create_all(bind=db_instance.engine)
    if missing:
        logger.info("tables_created", extra={"data": {"tables": missing}})


__all__ = ["init_db"]
