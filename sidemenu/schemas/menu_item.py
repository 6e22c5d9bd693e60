from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IconType(str, Enum):
    fontawesome = "fontawesome"
    dashicons = "dashicons"
    image = "image"


class MenuItem(BaseModel):
    id: int = Field(gt=0)
    label: str = ""
    url: str = "#"
    icon_type: IconType = IconType.fontawesome
    icon: str = ""
    icon_url: str = ""
    icon_size: Optional[int] = Field(default=None, gt=0)
    target: Literal["_self", "_blank"] = "_self"

    model_config = ConfigDict(extra="ignore")

    @field_validator("icon_size", mode="before")
    @classmethod
    def _blank_size_is_unset(cls, value):
        if value == "" or value == 0:
            return None
        return value

    @field_validator("icon_url", "icon", mode="before")
    @classmethod
    def _none_is_blank(cls, value):
        return "" if value is None else value

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


def ensure_unique_ids(items: List[MenuItem]) -> List[MenuItem]:
    seen: set[int] = set()
    duplicates: list[int] = []
    for item in items:
        if item.id in seen and item.id not in duplicates:
            duplicates.append(item.id)
        seen.add(item.id)
    if duplicates:
        raise ValueError("Duplicate menu item ids: " + ", ".join(str(item_id) for item_id in duplicates))
    return items


__all__ = ["IconType", "MenuItem", "ensure_unique_ids"]
