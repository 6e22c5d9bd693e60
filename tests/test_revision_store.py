import re

import pytest

from sidemenu.config import clear_runtime_overrides, refresh_settings
from sidemenu.exceptions import NotFoundError, PersistenceError
from sidemenu.schemas.menu_item import MenuItem
from sidemenu.schemas.revision import PublicationStatus, RevisionType
from sidemenu.schemas.settings_tree import SettingsTree
from sidemenu.services.cascade import CascadeResolver
from sidemenu.services.option_store import MemoryOptionStore
from sidemenu.services.revision_store import (
    RevisionStore,
    new_revision_id,
    rollback_label,
    state_from_options,
)


class FakeClock:
    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 60
        return float(self.now)


def _store(limit: int = 20):
    options = MemoryOptionStore()
    return options, RevisionStore(options, history_limit=limit, clock=FakeClock())


def _tree(width: int) -> SettingsTree:
    return CascadeResolver().set(SettingsTree.defaults(), "container.width", "desktop", width)


ITEMS = [MenuItem(id=1, label="Home", url="/"), MenuItem(id=2, label="Blog", url="/blog")]


def test_empty_store_loads_published_defaults():
    _, revisions = _store()
    state = revisions.load_state()

    assert state.status == PublicationStatus.published
    assert state.has_draft is False
    assert state.published_settings == SettingsTree.defaults().to_payload()
    assert state.history == []
    assert state.live_revision_id is None


def test_save_draft_keeps_published_copy():
    options, revisions = _store()
    state = revisions.save_draft(_tree(150), ITEMS)

    assert state.status == PublicationStatus.draft
    assert state.has_draft is True
    assert state.draft_settings["container"]["width"] == 150
    assert state.published_settings["container"]["width"] == 120
    assert state.history[0].type == RevisionType.draft
    assert state.history[0].label == "Draft saved"
    assert state.history[0].items_count == 2
    assert options.snapshot()["settings_draft"]["container"]["width"] == 150
    assert revisions.load_state().working_settings["container"]["width"] == 150


def test_publish_clears_draft_and_bumps_version():
    options, revisions = _store()
    revisions.save_draft(_tree(150), ITEMS)
    state = revisions.publish(_tree(160), ITEMS[:1], label="Launch")

    assert state.status == PublicationStatus.published
    assert state.has_draft is False
    assert state.published_settings["container"]["width"] == 160
    assert [item.id for item in state.published_items] == [1]
    assert state.version_timestamp == state.history[0].timestamp
    assert state.history[0].label == "Launch"
    assert state.live_revision_id == state.history[0].id
    assert "settings_draft" not in options.snapshot()
    assert "items_draft" not in options.snapshot()


def test_version_timestamp_changes_on_every_publish():
    _, revisions = _store()
    first = revisions.publish(_tree(130), ITEMS).version_timestamp
    second = revisions.publish(_tree(140), ITEMS).version_timestamp

    assert second > first


def test_history_is_capped_newest_first():
    _, revisions = _store(limit=3)
    for width in (101, 102, 103, 104, 105):
        revisions.publish(_tree(width), ITEMS)

    history = revisions.history()
    assert len(history) == 3
    assert [entry.settings["container"]["width"] for entry in history] == [105, 104, 103]


def test_default_cap_keeps_twenty_newest_drafts(monkeypatch):
    monkeypatch.delenv("HISTORY_LIMIT", raising=False)
    clear_runtime_overrides()
    refresh_settings()
    revisions = RevisionStore(MemoryOptionStore(), clock=FakeClock())
    assert revisions.history_limit == 20

    for width in range(101, 126):
        revisions.save_draft(_tree(width), ITEMS)

    widths = [entry.settings["container"]["width"] for entry in revisions.history()]
    assert widths == list(range(125, 105, -1))
    assert not set(range(101, 106)) & set(widths)


def test_discard_draft_restores_published_working_copy():
    _, revisions = _store()
    revisions.publish(_tree(130), ITEMS)
    revisions.save_draft(_tree(170), [])
    state = revisions.discard_draft()

    assert state.has_draft is False
    assert state.status == PublicationStatus.published
    assert state.working_settings["container"]["width"] == 130
    assert len(state.working_items) == 2
    assert len(state.history) == 2


def test_live_revision_skips_later_drafts():
    _, revisions = _store()
    published = revisions.publish(_tree(130), ITEMS).history[0]
    state = revisions.save_draft(_tree(131), ITEMS)

    assert state.history[0].type == RevisionType.draft
    assert state.live_revision_id == published.id


def test_rollback_publishes_old_entry_as_new_revision():
    _, revisions = _store()
    first = revisions.publish(_tree(130), ITEMS).history[0]
    revisions.publish(_tree(140), ITEMS[:1])

    state = revisions.rollback(first.id)

    assert state.published_settings["container"]["width"] == 130
    assert len(state.published_items) == 2
    assert len(state.history) == 3
    assert state.history[0].id != first.id
    assert state.history[0].type == RevisionType.publish
    assert state.history[0].label == rollback_label(first.timestamp)
    assert state.history[2] == first


def test_rollback_as_draft_leaves_live_menu_alone():
    _, revisions = _store()
    first = revisions.publish(_tree(130), ITEMS).history[0]
    revisions.publish(_tree(140), ITEMS)

    state = revisions.rollback(first.id, as_draft=True)

    assert state.status == PublicationStatus.draft
    assert state.published_settings["container"]["width"] == 140
    assert state.draft_settings["container"]["width"] == 130
    assert state.history[0].type == RevisionType.draft


def test_rollback_of_draft_entry_publishes():
    _, revisions = _store()
    revisions.publish(_tree(130), ITEMS)
    draft = revisions.save_draft(_tree(135), ITEMS[:1]).history[0]
    revisions.save_draft(_tree(136), ITEMS)

    state = revisions.rollback(draft.id)

    assert state.status == PublicationStatus.published
    assert state.has_draft is False
    assert state.published_settings["container"]["width"] == 135
    assert [item.id for item in state.published_items] == [1]
    assert state.history[0].type == RevisionType.publish
    assert state.history[0].id not in {entry.id for entry in state.history[1:]}
    assert state.history[0].label == rollback_label(draft.timestamp)
    assert state.live_revision_id == state.history[0].id
    assert state.history[2] == draft


def test_rollback_unknown_entry():
    _, revisions = _store()
    with pytest.raises(NotFoundError):
        revisions.rollback("fsm_missing")


def test_delete_and_clear_history():
    _, revisions = _store()
    first = revisions.publish(_tree(130), ITEMS).history[0]
    revisions.publish(_tree(140), ITEMS)

    state = revisions.delete_entry(first.id)
    assert first.id not in [entry.id for entry in state.history]
    assert len(state.history) == 1

    with pytest.raises(NotFoundError):
        revisions.delete_entry(first.id)

    state = revisions.clear_all()
    assert state.history == []
    assert state.published_settings["container"]["width"] == 140


def test_get_entry():
    _, revisions = _store()
    entry = revisions.save_draft(_tree(150), ITEMS).history[0]

    assert revisions.get_entry(entry.id).tree.base["container"]["width"] == 150
    with pytest.raises(NotFoundError):
        revisions.get_entry("fsm_nope")


def test_failed_write_leaves_state_untouched(monkeypatch):
    options, revisions = _store()
    revisions.publish(_tree(130), ITEMS)
    before = options.snapshot()

    def fail(values, *, delete=()):
        raise PersistenceError("disk full")

    monkeypatch.setattr(options, "write", fail)

    with pytest.raises(PersistenceError):
        revisions.save_draft(_tree(150), ITEMS)
    assert options.snapshot() == before


def test_draft_flag_without_draft_settings_is_ignored():
    state = state_from_options({"has_draft": True, "status": "draft"})

    assert state.has_draft is False
    assert state.status == PublicationStatus.published


def test_corrupt_history_entries_are_dropped():
    state = state_from_options({"history": [{"id": "fsm_x"}, "junk", None]})
    assert state.history == []


def test_revision_ids_and_labels():
    assert re.fullmatch(r"fsm_[0-9a-f]{13}", new_revision_id())
    assert new_revision_id() != new_revision_id()
    assert rollback_label(0) == "Rollback from Jan 1, 00:00"
    assert rollback_label(1_700_000_000) == "Rollback from Nov 14, 22:13"
