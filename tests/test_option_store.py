import pytest

from sidemenu.db import Database, init_db
from sidemenu.exceptions import PersistenceError
from sidemenu.schemas.menu_item import MenuItem
from sidemenu.schemas.settings_tree import SettingsTree
from sidemenu.services.activation import activate
from sidemenu.services.option_store import MemoryOptionStore, SqlOptionStore
from sidemenu.services.revision_store import RevisionStore


@pytest.fixture()
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'options.db'}")
    init_db(db)
    yield db
    db.dispose()


def test_sql_store_round_trip(database):
    session = database.session()
    try:
        SqlOptionStore(session).write({"settings": {"z_index": 5}, "history": []})
        session.commit()
    finally:
        session.close()

    session = database.session()
    try:
        values = SqlOptionStore(session).read(["settings", "history", "missing"])
    finally:
        session.close()

    assert values == {"settings": {"z_index": 5}, "history": []}


def test_sql_store_overwrites_and_deletes(database):
    session = database.session()
    try:
        store = SqlOptionStore(session)
        store.write({"settings_draft": {"a": 1}, "has_draft": True})
        store.write({"has_draft": False}, delete=["settings_draft"])
        session.commit()
        assert store.read(["settings_draft", "has_draft"]) == {"has_draft": False}
        assert store.read([]) == {}
    finally:
        session.close()


def test_sql_store_wraps_database_errors(database):
    session = database.session()
    try:
        with pytest.raises(PersistenceError):
            SqlOptionStore(session).write({"settings": object()})
    finally:
        session.rollback()
        session.close()


def test_revision_store_on_sql_options(database):
    session = database.session()
    try:
        RevisionStore(SqlOptionStore(session), history_limit=5).publish(
            SettingsTree.defaults(), [MenuItem(id=4, label="Shop")]
        )
        session.commit()
    finally:
        session.close()

    session = database.session()
    try:
        state = RevisionStore(SqlOptionStore(session)).load_state()
    finally:
        session.close()

    assert [item.label for item in state.published_items] == ["Shop"]
    assert len(state.history) == 1
    assert state.version_timestamp is not None


def test_memory_store_copies_values():
    store = MemoryOptionStore({"items": [1]})
    values = store.read(["items"])
    values["items"].append(2)

    assert store.read(["items"]) == {"items": [1]}


def test_activation_seeds_only_missing_options():
    store = MemoryOptionStore({"settings": {"z_index": 1}})

    written = activate(store, home_url="https://example.com")

    assert written == ["has_draft", "history", "items", "status"]
    snapshot = store.snapshot()
    assert snapshot["settings"] == {"z_index": 1}
    assert [item["label"] for item in snapshot["items"]] == ["Home", "About", "Contact"]
    assert snapshot["items"][0]["url"] == "https://example.com/"
    assert activate(store, home_url="https://example.com") == []
