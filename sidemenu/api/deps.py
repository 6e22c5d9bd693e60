from __future__ import annotations

from typing import Generator

from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session as DbSession

from ..db.utils import get_db
from ..exceptions import TrackedError
from ..services.option_store import SqlOptionStore
from ..services.revision_store import RevisionStore


def get_db_session() -> Generator[DbSession, None, None]:
    with get_db() as session:
        yield session


def revision_store(db: DbSession) -> RevisionStore:
    return RevisionStore(SqlOptionStore(db))


def tracked_error(exc: TrackedError, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=exc.to_payload())


__all__ = ["get_db_session", "revision_store", "tracked_error"]
