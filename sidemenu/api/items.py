from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import NotFoundError
from ..schemas.menu_item import MenuItem, ensure_unique_ids
from ..services.items import ItemListEditor
from .deps import tracked_error

router = APIRouter(prefix="/api/menu/items", tags=["items"])


class ItemListRequest(BaseModel):
    items: List[MenuItem] = Field(default_factory=list)
    high_water: int = Field(default=0, ge=0)

    @field_validator("items")
    @classmethod
    def _unique_ids(cls, items: List[MenuItem]) -> List[MenuItem]:
        return ensure_unique_ids(items)


class AddItemRequest(ItemListRequest):
    fields: dict[str, Any] = Field(default_factory=dict)


class UpdateItemRequest(ItemListRequest):
    item_id: int
    changes: dict[str, Any] = Field(default_factory=dict)


class RemoveItemRequest(ItemListRequest):
    item_id: int


class MoveItemRequest(ItemListRequest):
    item_id: int
    position: int


def _editor(payload: ItemListRequest) -> ItemListEditor:
    return ItemListEditor(payload.items, high_water=payload.high_water)


def _list_payload(editor: ItemListEditor, **extra: Any) -> dict:
    return {
        "items": [item.to_payload() for item in editor.items],
        "high_water": editor.next_id() - 1,
        **extra,
    }


def _invalid_item(exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "invalid_item", "detail": exc.errors(include_url=False, include_context=False)},
    )


@router.post("/add")
def add_item(payload: AddItemRequest):
    editor = _editor(payload)
    fields = {key: value for key, value in payload.fields.items() if key != "id"}
    try:
        item = editor.add(**fields)
    except ValidationError as exc:
        return _invalid_item(exc)
    return _list_payload(editor, item=item.to_payload())


@router.post("/update")
def update_item(payload: UpdateItemRequest):
    editor = _editor(payload)
    try:
        item = editor.update(payload.item_id, **payload.changes)
    except NotFoundError as exc:
        return tracked_error(exc, 404)
    except ValidationError as exc:
        return _invalid_item(exc)
    return _list_payload(editor, item=item.to_payload())


@router.post("/remove")
def remove_item(payload: RemoveItemRequest):
    editor = _editor(payload)
    try:
        editor.remove(payload.item_id)
    except NotFoundError as exc:
        return tracked_error(exc, 404)
    return _list_payload(editor)


@router.post("/move")
def move_item(payload: MoveItemRequest):
    editor = _editor(payload)
    try:
        editor.move(payload.item_id, payload.position)
    except NotFoundError as exc:
        return tracked_error(exc, 404)
    return _list_payload(editor)


__all__ = ["router"]
