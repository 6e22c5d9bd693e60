from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session as DbSession

from ..renderer.markup import render_menu
from ..renderer.stylesheet import StyleCompiler
from ..schemas.settings_tree import SettingsTree, normalize_settings
from .deps import get_db_session, revision_store
from .menu import MenuPayload

router = APIRouter(prefix="/api/menu", tags=["stylesheet"])


@router.get("/stylesheet.css")
def published_stylesheet(db: DbSession = Depends(get_db_session)) -> Response:
    state = revision_store(db).load_state()
    css = StyleCompiler().compile(SettingsTree.from_payload(state.published_settings), state.published_items)
    return Response(content=css, media_type="text/css")


@router.get("/markup")
def published_markup(db: DbSession = Depends(get_db_session)) -> HTMLResponse:
    state = revision_store(db).load_state()
    tree = SettingsTree.from_payload(state.published_settings)
    return HTMLResponse(render_menu(tree, state.published_items, version_timestamp=state.version_timestamp))


@router.post("/preview")
def preview(payload: MenuPayload) -> dict:
    tree = normalize_settings(payload.settings)
    return {
        "css": StyleCompiler().compile(tree, payload.items),
        "markup": render_menu(tree, payload.items),
    }


__all__ = ["router"]
