from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..exceptions import InvalidPathError, InvalidValueError
from ..schemas.settings import Breakpoint
from ..schemas.settings_tree import normalize_settings
from ..services.cascade import CascadeResolver
from .deps import tracked_error

router = APIRouter(prefix="/api/menu/cascade", tags=["cascade"])

_resolver = CascadeResolver()


class CascadeRequest(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)
    path: str = Field(min_length=1)
    breakpoint: Breakpoint = Breakpoint.desktop
    value: Any = None


@router.post("/resolve")
def resolve_value(payload: CascadeRequest):
    tree = normalize_settings(payload.settings)
    try:
        value = _resolver.get(tree, payload.path, payload.breakpoint)
        source = _resolver.inheritance_source(tree, payload.path, payload.breakpoint)
        overridden = _resolver.has_override(tree, payload.path, payload.breakpoint)
    except InvalidPathError as exc:
        return tracked_error(exc, 400)
    return {
        "path": payload.path,
        "breakpoint": payload.breakpoint.value,
        "value": value,
        "has_override": overridden,
        "inherited_from": source.value if source else None,
    }


@router.post("/set")
def set_value(payload: CascadeRequest):
    tree = normalize_settings(payload.settings)
    try:
        updated = _resolver.set(tree, payload.path, payload.breakpoint, payload.value)
    except (InvalidPathError, InvalidValueError) as exc:
        return tracked_error(exc, 400)
    return {"settings": updated.to_payload()}


@router.post("/remove")
def remove_override(payload: CascadeRequest):
    tree = normalize_settings(payload.settings)
    try:
        updated = _resolver.remove_override(tree, payload.path, payload.breakpoint)
    except InvalidPathError as exc:
        return tracked_error(exc, 400)
    return {"settings": updated.to_payload()}


__all__ = ["router"]
