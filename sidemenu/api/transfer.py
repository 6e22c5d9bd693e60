from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session as DbSession

from ..config import get_settings
from ..exceptions import MalformedImportError
from ..schemas.settings_tree import SettingsTree
from ..services.transfer import export_payload, import_payload
from .deps import get_db_session, revision_store, tracked_error

router = APIRouter(prefix="/api/menu", tags=["transfer"])


@router.get("/export")
def export_menu(db: DbSession = Depends(get_db_session)) -> dict:
    state = revision_store(db).load_state()
    return export_payload(SettingsTree.from_payload(state.working_settings), state.working_items)


@router.post("/import")
def import_menu(document: Any = Body(...), db: DbSession = Depends(get_db_session)):
    state = revision_store(db).load_state()
    try:
        result = import_payload(
            document,
            current_settings=SettingsTree.from_payload(state.working_settings),
            current_items=state.working_items,
            site_url=get_settings().site_url,
        )
    except MalformedImportError as exc:
        return tracked_error(exc, 400)
    return result.to_payload()


__all__ = ["router"]
