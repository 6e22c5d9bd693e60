from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session as DbSession

from ..exceptions import NotFoundError, PersistenceError
from ..schemas.revision import Revision
from .deps import get_db_session, revision_store, tracked_error
from .menu import state_payload

router = APIRouter(prefix="/api/menu/history", tags=["history"])


class RollbackRequest(BaseModel):
    as_draft: bool = False


def _entry_summary(entry: Revision, live_id: str | None) -> dict:
    return {
        "id": entry.id,
        "type": entry.type.value,
        "timestamp": entry.timestamp,
        "label": entry.label,
        "items_count": entry.items_count,
        "is_live": entry.id == live_id,
    }


@router.get("")
def list_history(db: DbSession = Depends(get_db_session)) -> dict:
    state = revision_store(db).load_state()
    live_id = state.live_revision_id
    return {
        "history": [_entry_summary(entry, live_id) for entry in state.history],
        "total": len(state.history),
        "live_revision_id": live_id,
    }


@router.get("/{revision_id}")
def get_history_entry(revision_id: str, db: DbSession = Depends(get_db_session)):
    try:
        entry = revision_store(db).get_entry(revision_id)
    except NotFoundError as exc:
        return tracked_error(exc, 404)
    return entry.to_payload()


@router.post("/{revision_id}/rollback")
def rollback(revision_id: str, payload: RollbackRequest, db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        state = store.rollback(revision_id, as_draft=payload.as_draft)
    except NotFoundError as exc:
        db.rollback()
        return tracked_error(exc, 404)
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    message = "Restored as draft" if payload.as_draft else "Restored and published"
    return {"message": message, "state": state_payload(state)}


@router.delete("/{revision_id}")
def delete_entry(revision_id: str, db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        state = store.delete_entry(revision_id)
    except NotFoundError as exc:
        db.rollback()
        return tracked_error(exc, 404)
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    return {"message": "Entry deleted", "total": len(state.history)}


@router.delete("")
def clear_history(db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        store.clear_all()
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    return {"message": "History cleared", "total": 0}


__all__ = ["router"]
