from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session as DbSession

from ..exceptions import PersistenceError
from ..schemas.menu_item import MenuItem, ensure_unique_ids
from ..schemas.revision import PublicationState
from ..schemas.settings_tree import normalize_settings
from .deps import get_db_session, revision_store, tracked_error

router = APIRouter(prefix="/api/menu", tags=["menu"])


class MenuPayload(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)
    items: List[MenuItem] = Field(default_factory=list)
    label: Optional[str] = Field(default=None, max_length=255)

    @field_validator("items")
    @classmethod
    def _unique_ids(cls, items: List[MenuItem]) -> List[MenuItem]:
        return ensure_unique_ids(items)


def state_payload(state: PublicationState) -> dict:
    return {
        "status": state.status.value,
        "has_draft": state.has_draft,
        "settings": state.working_settings,
        "items": [item.to_payload() for item in state.working_items],
        "published": {
            "settings": state.published_settings,
            "items": [item.to_payload() for item in state.published_items],
        },
        "live_revision_id": state.live_revision_id,
        "version_timestamp": state.version_timestamp,
        "draft_timestamp": state.draft_timestamp,
        "history_count": len(state.history),
    }


@router.get("")
def get_menu(db: DbSession = Depends(get_db_session)) -> dict:
    return state_payload(revision_store(db).load_state())


@router.post("/draft")
def save_draft(payload: MenuPayload, db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        state = store.save_draft(normalize_settings(payload.settings), payload.items, label=payload.label)
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    return {"message": "Draft saved", "state": state_payload(state)}


@router.post("/publish")
def publish(payload: MenuPayload, db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        state = store.publish(normalize_settings(payload.settings), payload.items, label=payload.label)
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    return {"message": "Published", "state": state_payload(state)}


@router.post("/discard")
def discard_draft(db: DbSession = Depends(get_db_session)):
    store = revision_store(db)
    try:
        state = store.discard_draft()
    except PersistenceError as exc:
        db.rollback()
        return tracked_error(exc, 503)
    db.commit()
    return {"message": "Draft discarded", "state": state_payload(state)}


__all__ = ["router", "state_payload", "MenuPayload"]
