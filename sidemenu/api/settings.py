from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..config import get_runtime_overrides, get_settings, update_runtime_overrides

router = APIRouter(prefix="/api/settings", tags=["settings"])


class ServiceSettingsPayload(BaseModel):
    site_url: str | None = Field(default=None, min_length=1)
    history_limit: int | None = Field(default=None, ge=1, le=500)


def _resolve_settings() -> dict:
    settings = get_settings()
    return {
        "site_url": settings.site_url,
        "history_limit": settings.history_limit,
        "overridden": sorted(get_runtime_overrides()),
    }


@router.get("")
def get_service_settings() -> dict:
    return _resolve_settings()


@router.put("")
def update_service_settings(payload: ServiceSettingsPayload) -> dict:
    overrides = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "site_url" in overrides:
        overrides["site_url"] = overrides["site_url"].rstrip("/")
    update_runtime_overrides(overrides)
    return _resolve_settings()


__all__ = ["router"]
