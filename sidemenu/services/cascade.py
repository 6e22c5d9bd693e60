"""Desktop -> tablet -> mobile inheritance over a :class:`SettingsTree`.

Resolution is per leaf: a tablet override of ``container.padding.top`` does
not hide the desktop value of ``container.padding.left``.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Optional, Sequence

from ..exceptions import MissingPathError
from ..schemas.settings import Breakpoint, leaf_parts, validate_leaf
from ..schemas.settings_tree import SettingsTree
from ..utils.tree import assign, discard, is_defined, lookup

_MISSING = object()

# Layers consulted for each breakpoint, most specific first
_CHAINS: dict[Breakpoint, tuple[Breakpoint, ...]] = {
    Breakpoint.desktop: (Breakpoint.desktop,),
    Breakpoint.tablet: (Breakpoint.tablet, Breakpoint.desktop),
    Breakpoint.mobile: (Breakpoint.mobile, Breakpoint.tablet, Breakpoint.desktop),
}


class CascadeResolver:
    def __init__(self, *, validate_values: bool = True) -> None:
        self.validate_values = validate_values

    def get(self, tree: SettingsTree, path: str | Sequence[str], breakpoint: Breakpoint | str) -> Any:
        parts = leaf_parts(path)
        bp = Breakpoint(breakpoint)
        for layer_bp in _CHAINS[bp][:-1]:
            value = lookup(tree.layer(layer_bp), parts, _MISSING)
            if value is not _MISSING and is_defined(value):
                return value
        value = lookup(tree.base, parts, _MISSING)
        if value is _MISSING:
            raise MissingPathError(".".join(parts))
        return value

    def set(
        self,
        tree: SettingsTree,
        path: str | Sequence[str],
        breakpoint: Breakpoint | str,
        value: Any,
    ) -> SettingsTree:
        parts = leaf_parts(path)
        bp = Breakpoint(breakpoint)
        if self.validate_values:
            value = validate_leaf(parts, value)
        layer = deepcopy(tree.layer(bp))
        assign(layer, parts, value)
        return tree.with_layer(bp, layer)

    def has_override(self, tree: SettingsTree, path: str | Sequence[str], breakpoint: Breakpoint | str) -> bool:
        parts = leaf_parts(path)
        bp = Breakpoint(breakpoint)
        if bp is Breakpoint.desktop:
            return False
        value = lookup(tree.layer(bp), parts, _MISSING)
        return value is not _MISSING and is_defined(value)

    def remove_override(
        self,
        tree: SettingsTree,
        path: str | Sequence[str],
        breakpoint: Breakpoint | str,
    ) -> SettingsTree:
        parts = leaf_parts(path)
        bp = Breakpoint(breakpoint)
        if bp is Breakpoint.desktop:
            return tree
        layer = deepcopy(tree.layer(bp))
        if not discard(layer, parts):
            return tree
        return tree.with_layer(bp, layer)

    def inheritance_source(
        self,
        tree: SettingsTree,
        path: str | Sequence[str],
        breakpoint: Breakpoint | str,
    ) -> Optional[Breakpoint]:
        """Layer the value is inherited from, or None when ``breakpoint`` sets it itself."""
        parts = leaf_parts(path)
        bp = Breakpoint(breakpoint)
        if bp is Breakpoint.desktop or self.has_override(tree, parts, bp):
            return None
        for layer_bp in _CHAINS[bp][1:-1]:
            if self.has_override(tree, parts, layer_bp):
                return layer_bp
        return Breakpoint.desktop


__all__ = ["CascadeResolver"]
