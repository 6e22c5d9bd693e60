from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .menu_item import MenuItem
from .settings_tree import SettingsTree

DRAFT_LABEL = "Draft saved"
PUBLISH_LABEL = "Published"


class RevisionType(str, Enum):
    draft = "draft"
    publish = "publish"


class PublicationStatus(str, Enum):
    draft = "draft"
    published = "published"


class Revision(BaseModel):
    """Immutable history entry; ``settings`` holds the tree in payload form."""

    id: str
    type: RevisionType
    timestamp: int
    label: str
    settings: dict[str, Any]
    items: List[MenuItem] = Field(default_factory=list)
    items_count: int = 0

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def tree(self) -> SettingsTree:
        return SettingsTree.from_payload(self.settings)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


class PublicationState(BaseModel):
    status: PublicationStatus = PublicationStatus.published
    has_draft: bool = False
    published_settings: dict[str, Any]
    published_items: List[MenuItem] = Field(default_factory=list)
    draft_settings: Optional[dict[str, Any]] = None
    draft_items: Optional[List[MenuItem]] = None
    history: List[Revision] = Field(default_factory=list)
    version_timestamp: Optional[int] = None
    draft_timestamp: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @property
    def working_settings(self) -> dict[str, Any]:
        if self.has_draft and self.draft_settings is not None:
            return self.draft_settings
        return self.published_settings

    @property
    def working_items(self) -> List[MenuItem]:
        if self.has_draft and self.draft_items is not None:
            return self.draft_items
        return self.published_items

    @property
    def live_revision_id(self) -> Optional[str]:
        for entry in self.history:
            if entry.type == RevisionType.publish:
                return entry.id
        return None

    def find(self, revision_id: str) -> Optional[Revision]:
        for entry in self.history:
            if entry.id == revision_id:
                return entry
        return None


__all__ = [
    "DRAFT_LABEL",
    "PUBLISH_LABEL",
    "RevisionType",
    "PublicationStatus",
    "Revision",
    "PublicationState",
]
