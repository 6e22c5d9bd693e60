import pytest

from sidemenu.exceptions import InvalidPathError, InvalidValueError, MissingPathError
from sidemenu.schemas.settings import Breakpoint
from sidemenu.schemas.settings_tree import SettingsTree
from sidemenu.services.cascade import CascadeResolver


def _tree() -> SettingsTree:
    return SettingsTree.defaults()


def test_desktop_reads_base_layer():
    resolver = CascadeResolver()
    assert resolver.get(_tree(), "container.width", "desktop") == 120
    assert resolver.get(_tree(), "z_index", Breakpoint.desktop) == 9999


def test_tablet_override_is_inherited_by_mobile():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.width", "tablet", 100)

    assert resolver.get(tree, "container.width", "desktop") == 120
    assert resolver.get(tree, "container.width", "tablet") == 100
    assert resolver.get(tree, "container.width", "mobile") == 100


def test_mobile_override_wins_over_tablet():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.width", "tablet", 100)
    tree = resolver.set(tree, "container.width", "mobile", 80)

    assert resolver.get(tree, "container.width", "tablet") == 100
    assert resolver.get(tree, "container.width", "mobile") == 80


def test_resolution_is_per_leaf():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.padding.top", "tablet", 4)

    assert resolver.get(tree, "container.padding.top", "tablet") == 4
    assert resolver.get(tree, "container.padding.left", "tablet") == 14
    assert tree.tablet == {"container": {"padding": {"top": 4}}}


def test_set_is_copy_on_write():
    resolver = CascadeResolver()
    original = _tree()
    updated = resolver.set(original, "container.width", "tablet", 100)

    assert original.tablet == {}
    assert updated.tablet == {"container": {"width": 100}}
    assert updated.base is original.base


def test_desktop_set_never_touches_overrides():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.width", "tablet", 100)
    tree = resolver.set(tree, "container.width", "desktop", 150)

    assert tree.base["container"]["width"] == 150
    assert resolver.get(tree, "container.width", "tablet") == 100


def test_has_override():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "icon.size", "tablet", 18)

    assert resolver.has_override(tree, "icon.size", "tablet")
    assert not resolver.has_override(tree, "icon.size", "mobile")
    assert not resolver.has_override(tree, "icon.size", "desktop")


def test_undefined_override_values_fall_through():
    tree = SettingsTree(base=SettingsTree.defaults().base, tablet={"container": {"width": None, "gap": ""}})
    resolver = CascadeResolver()

    assert resolver.get(tree, "container.width", "tablet") == 120
    assert resolver.get(tree, "container.gap", "tablet") == 0
    assert not resolver.has_override(tree, "container.width", "tablet")


def test_remove_override_prunes_empty_ancestors():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.padding.top", "tablet", 4)
    tree = resolver.remove_override(tree, "container.padding.top", "tablet")

    assert tree.tablet == {}
    assert not resolver.has_override(tree, "container.padding.top", "tablet")


def test_remove_override_stops_at_first_non_empty_ancestor():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "container.padding.top", "tablet", 4)
    tree = resolver.set(tree, "container.padding.left", "tablet", 2)
    tree = resolver.remove_override(tree, "container.padding.top", "tablet")

    assert tree.tablet == {"container": {"padding": {"left": 2}}}


def test_remove_absent_override_is_a_noop():
    resolver = CascadeResolver()
    tree = _tree()
    assert resolver.remove_override(tree, "container.width", "tablet") is tree
    assert resolver.remove_override(tree, "container.width", "desktop") is tree


def test_unknown_and_group_paths_are_rejected():
    resolver = CascadeResolver()
    with pytest.raises(InvalidPathError):
        resolver.get(_tree(), "container.nope", "desktop")
    with pytest.raises(InvalidPathError):
        resolver.get(_tree(), "container.padding", "tablet")
    with pytest.raises(InvalidPathError):
        resolver.set(_tree(), "hide", "tablet", True)


def test_incomplete_desktop_layer_raises_missing_path():
    with pytest.raises(MissingPathError):
        CascadeResolver().get(SettingsTree(base={}), "container.width", "desktop")


def test_set_validates_and_coerces_values():
    resolver = CascadeResolver()
    with pytest.raises(InvalidValueError):
        resolver.set(_tree(), "position.side", "tablet", "up")

    tree = resolver.set(_tree(), "typography.font_size", "mobile", "13")
    assert tree.mobile == {"typography": {"font_size": 13}}


def test_inheritance_source():
    resolver = CascadeResolver()
    tree = resolver.set(_tree(), "icon.size", "tablet", 18)

    assert resolver.inheritance_source(tree, "icon.size", "tablet") is None
    assert resolver.inheritance_source(tree, "icon.size", "mobile") == Breakpoint.tablet
    assert resolver.inheritance_source(tree, "icon.color", "mobile") == Breakpoint.desktop
    assert resolver.inheritance_source(tree, "icon.size", "desktop") is None
