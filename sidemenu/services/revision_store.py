"""Draft/published state machine with a bounded rollback history.

Each operation loads the current :class:`PublicationState`, derives the next
one with a pure transition, then writes every aggregate in a single atomic
``OptionStore.write``. Nothing is cached between calls, so there is no
in-memory state to corrupt when a write fails. Concurrent editors race
last-write-wins.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Sequence
from uuid import uuid4

from pydantic import ValidationError

from ..config import get_settings
from ..exceptions import NotFoundError
from ..schemas.menu_item import MenuItem
from ..schemas.revision import (
    DRAFT_LABEL,
    PUBLISH_LABEL,
    PublicationState,
    PublicationStatus,
    Revision,
    RevisionType,
)
from ..schemas.settings_tree import SettingsTree, normalize_settings
from .option_store import OptionStore

logger = logging.getLogger(__name__)

OPT_SETTINGS = "settings"
OPT_ITEMS = "items"
OPT_SETTINGS_DRAFT = "settings_draft"
OPT_ITEMS_DRAFT = "items_draft"
OPT_HAS_DRAFT = "has_draft"
OPT_STATUS = "status"
OPT_HISTORY = "history"
OPT_VERSION_TIMESTAMP = "version_timestamp"
OPT_DRAFT_TIMESTAMP = "draft_timestamp"

OPTION_NAMES = (
    OPT_SETTINGS,
    OPT_ITEMS,
    OPT_SETTINGS_DRAFT,
    OPT_ITEMS_DRAFT,
    OPT_HAS_DRAFT,
    OPT_STATUS,
    OPT_HISTORY,
    OPT_VERSION_TIMESTAMP,
    OPT_DRAFT_TIMESTAMP,
)

DEFAULT_HISTORY_LIMIT = 20


def new_revision_id() -> str:
    return f"fsm_{uuid4().hex[:13]}"


def rollback_label(timestamp: int) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return f"Rollback from {moment:%b} {moment.day}, {moment:%H:%M}"


def parse_items(raw: Any) -> list[MenuItem]:
    if not isinstance(raw, list):
        return []
    items: list[MenuItem] = []
    for entry in raw:
        try:
            items.append(MenuItem.model_validate(entry))
        except ValidationError as exc:
            logger.warning("menu_item_dropped", extra={"data": {"item": entry, "errors": exc.error_count()}})
    return items


def _parse_history(raw: Any) -> list[Revision]:
    if not isinstance(raw, list):
        return []
    history: list[Revision] = []
    for entry in raw:
        try:
            history.append(Revision.model_validate(entry))
        except ValidationError:
            entry_id = entry.get("id") if isinstance(entry, dict) else None
            logger.warning("history_entry_dropped", extra={"data": {"id": entry_id}})
    return history


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def state_from_options(raw: dict[str, Any]) -> PublicationState:
    has_draft = bool(raw.get(OPT_HAS_DRAFT)) and OPT_SETTINGS_DRAFT in raw
    try:
        status = PublicationStatus(raw.get(OPT_STATUS) or PublicationStatus.published.value)
    except ValueError:
        status = PublicationStatus.published
    if not has_draft:
        status = PublicationStatus.published
    return PublicationState(
        status=status,
        has_draft=has_draft,
        published_settings=normalize_settings(raw.get(OPT_SETTINGS)).to_payload(),
        published_items=parse_items(raw.get(OPT_ITEMS)),
        draft_settings=normalize_settings(raw.get(OPT_SETTINGS_DRAFT)).to_payload() if has_draft else None,
        draft_items=parse_items(raw.get(OPT_ITEMS_DRAFT)) if has_draft else None,
        history=_parse_history(raw.get(OPT_HISTORY)),
        version_timestamp=_optional_int(raw.get(OPT_VERSION_TIMESTAMP)),
        draft_timestamp=_optional_int(raw.get(OPT_DRAFT_TIMESTAMP)),
    )


def state_to_options(state: PublicationState) -> tuple[dict[str, Any], list[str]]:
    values: dict[str, Any] = {
        OPT_SETTINGS: state.published_settings,
        OPT_ITEMS: [item.to_payload() for item in state.published_items],
        OPT_HAS_DRAFT: state.has_draft,
        OPT_STATUS: state.status.value,
        OPT_HISTORY: [entry.to_payload() for entry in state.history],
        OPT_VERSION_TIMESTAMP: state.version_timestamp,
        OPT_DRAFT_TIMESTAMP: state.draft_timestamp,
    }
    deleted: list[str] = []
    if state.has_draft:
        values[OPT_SETTINGS_DRAFT] = state.draft_settings
        values[OPT_ITEMS_DRAFT] = [item.to_payload() for item in state.draft_items or []]
    else:
        deleted = [OPT_SETTINGS_DRAFT, OPT_ITEMS_DRAFT]
    return values, deleted


def _entry(
    kind: RevisionType,
    tree: SettingsTree,
    items: Sequence[MenuItem],
    *,
    now: int,
    label: Optional[str],
) -> Revision:
    default_label = PUBLISH_LABEL if kind == RevisionType.publish else DRAFT_LABEL
    return Revision(
        id=new_revision_id(),
        type=kind,
        timestamp=now,
        label=label or default_label,
        settings=tree.to_payload(),
        items=list(items),
        items_count=len(items),
    )


def _push(history: Iterable[Revision], entry: Revision, limit: int) -> list[Revision]:
    return ([entry] + list(history))[: max(limit, 1)]


def apply_save_draft(
    state: PublicationState,
    tree: SettingsTree,
    items: Sequence[MenuItem],
    *,
    now: int,
    limit: int,
    label: Optional[str] = None,
) -> PublicationState:
    entry = _entry(RevisionType.draft, tree, items, now=now, label=label)
    return state.model_copy(
        update={
            "draft_settings": tree.to_payload(),
            "draft_items": list(items),
            "has_draft": True,
            "status": PublicationStatus.draft,
            "draft_timestamp": now,
            "history": _push(state.history, entry, limit),
        }
    )


def apply_publish(
    state: PublicationState,
    tree: SettingsTree,
    items: Sequence[MenuItem],
    *,
    now: int,
    limit: int,
    label: Optional[str] = None,
) -> PublicationState:
    entry = _entry(RevisionType.publish, tree, items, now=now, label=label)
    return state.model_copy(
        update={
            "published_settings": tree.to_payload(),
            "published_items": list(items),
            "draft_settings": None,
            "draft_items": None,
            "has_draft": False,
            "status": PublicationStatus.published,
            "version_timestamp": now,
            "history": _push(state.history, entry, limit),
        }
    )


def apply_discard_draft(state: PublicationState) -> PublicationState:
    return state.model_copy(
        update={
            "draft_settings": None,
            "draft_items": None,
            "has_draft": False,
            "status": PublicationStatus.published,
        }
    )


def apply_delete_entry(state: PublicationState, revision_id: str) -> PublicationState:
    if state.find(revision_id) is None:
        raise NotFoundError(f"History entry '{revision_id}' not found")
    return state.model_copy(update={"history": [entry for entry in state.history if entry.id != revision_id]})


def apply_clear_history(state: PublicationState) -> PublicationState:
    return state.model_copy(update={"history": []})


class RevisionStore:
    def __init__(
        self,
        store: OptionStore,
        *,
        history_limit: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.store = store
        self.history_limit = history_limit or get_settings().history_limit or DEFAULT_HISTORY_LIMIT
        self.clock = clock or time.time

    def _now(self) -> int:
        return int(self.clock())

    def load_state(self) -> PublicationState:
        return state_from_options(self.store.read(OPTION_NAMES))

    def _commit(self, state: PublicationState, event: str, **data: Any) -> PublicationState:
        values, deleted = state_to_options(state)
        self.store.write(values, delete=deleted)
        logger.info(
            event,
            extra={"data": {"status": state.status.value, "history": len(state.history), **data}},
        )
        return state

    def history(self) -> list[Revision]:
        return list(self.load_state().history)

    def get_entry(self, revision_id: str) -> Revision:
        entry = self.load_state().find(revision_id)
        if entry is None:
            raise NotFoundError(f"History entry '{revision_id}' not found")
        return entry

    def save_draft(
        self,
        tree: SettingsTree,
        items: Sequence[MenuItem],
        *,
        label: Optional[str] = None,
    ) -> PublicationState:
        state = apply_save_draft(
            self.load_state(), tree, items, now=self._now(), limit=self.history_limit, label=label
        )
        return self._commit(state, "draft_saved", revision_id=state.history[0].id)

    def publish(
        self,
        tree: SettingsTree,
        items: Sequence[MenuItem],
        *,
        label: Optional[str] = None,
    ) -> PublicationState:
        state = apply_publish(self.load_state(), tree, items, now=self._now(), limit=self.history_limit, label=label)
        return self._commit(state, "published", revision_id=state.history[0].id)

    def discard_draft(self) -> PublicationState:
        return self._commit(apply_discard_draft(self.load_state()), "draft_discarded")

    def rollback(self, revision_id: str, *, as_draft: bool = False) -> PublicationState:
        """Replay a history entry as a new draft or publish; past entries are left untouched."""
        current = self.load_state()
        entry = current.find(revision_id)
        if entry is None:
            raise NotFoundError(f"History entry '{revision_id}' not found")
        tree = entry.tree
        if as_draft:
            state = apply_save_draft(current, tree, entry.items, now=self._now(), limit=self.history_limit)
        else:
            state = apply_publish(
                current,
                tree,
                entry.items,
                now=self._now(),
                limit=self.history_limit,
                label=rollback_label(entry.timestamp),
            )
        return self._commit(state, "rolled_back", source=revision_id, as_draft=as_draft)

    def delete_entry(self, revision_id: str) -> PublicationState:
        state = apply_delete_entry(self.load_state(), revision_id)
        return self._commit(state, "history_entry_deleted", revision_id=revision_id)

    def clear_all(self) -> PublicationState:
        return self._commit(apply_clear_history(self.load_state()), "history_cleared")


__all__ = [
    "OPTION_NAMES",
    "DEFAULT_HISTORY_LIMIT",
    "RevisionStore",
    "new_revision_id",
    "rollback_label",
    "parse_items",
    "state_from_options",
    "state_to_options",
    "apply_save_draft",
    "apply_publish",
    "apply_discard_draft",
    "apply_delete_entry",
    "apply_clear_history",
]
