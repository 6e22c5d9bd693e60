from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..exceptions import InvalidPathError, InvalidValueError
from ..utils.tree import assign, deep_merge, is_defined, iter_leaves, lookup
from .settings import Breakpoint, LEAF_TYPES, OVERRIDE_BREAKPOINTS, default_settings, validate_leaf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsTree:
    """Desktop settings plus sparse tablet and mobile override layers.

    Trees are treated as values: operations that change a tree return a new
    one, and the layer dicts are never mutated after construction.
    """

    base: dict[str, Any]
    tablet: dict[str, Any] = field(default_factory=dict)
    mobile: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls) -> "SettingsTree":
        return cls(base=default_settings())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "SettingsTree":
        return normalize_settings(payload)

    def layer(self, breakpoint: Breakpoint | str) -> dict[str, Any]:
        resolved = Breakpoint(breakpoint)
        if resolved is Breakpoint.desktop:
            return self.base
        if resolved is Breakpoint.tablet:
            return self.tablet
        return self.mobile

    def with_layer(self, breakpoint: Breakpoint | str, data: dict[str, Any]) -> "SettingsTree":
        resolved = Breakpoint(breakpoint)
        if resolved is Breakpoint.desktop:
            return SettingsTree(base=data, tablet=self.tablet, mobile=self.mobile)
        if resolved is Breakpoint.tablet:
            return SettingsTree(base=self.base, tablet=data, mobile=self.mobile)
        return SettingsTree(base=self.base, tablet=self.tablet, mobile=data)

    def to_payload(self) -> dict[str, Any]:
        payload = deepcopy(self.base)
        payload["tablet"] = deepcopy(self.tablet)
        payload["mobile"] = deepcopy(self.mobile)
        return payload


def _normalize_desktop(raw: Mapping[str, Any]) -> dict[str, Any]:
    defaults = default_settings()
    merged = deep_merge(defaults, raw)
    desktop: dict[str, Any] = {}
    for parts in LEAF_TYPES:
        fallback = lookup(defaults, parts)
        value = lookup(merged, parts, fallback)
        try:
            value = validate_leaf(parts, value)
        except InvalidValueError as exc:
            logger.warning(
                "settings_leaf_reset",
                extra={"data": {"path": exc.path, "value": value, "reason": exc.message}},
            )
            value = fallback
        assign(desktop, parts, value)
    return desktop


def _normalize_override(raw: Any, breakpoint: Breakpoint) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        # Older stores serialised an empty override layer as a list
        return {}
    layer: dict[str, Any] = {}
    for parts, value in iter_leaves(raw):
        if not is_defined(value):
            continue
        try:
            coerced = validate_leaf(parts, value)
        except (InvalidPathError, InvalidValueError) as exc:
            logger.warning(
                "settings_override_dropped",
                extra={"data": {"breakpoint": breakpoint.value, "path": ".".join(parts), "reason": exc.message}},
            )
            continue
        assign(layer, parts, coerced)
    return layer


def normalize_settings(raw: Mapping[str, Any] | None) -> SettingsTree:
    """Build a complete, validated tree from persisted or imported data.

    Desktop values are merged over the defaults and invalid leaves fall back
    to their default. Override layers keep only defined, valid schema leaves.
    """
    data = dict(raw or {})
    overrides = {bp: data.pop(bp.value, None) for bp in OVERRIDE_BREAKPOINTS}
    desktop = _normalize_desktop({key: value for key, value in data.items() if key in _TOP_LEVEL})
    return SettingsTree(
        base=desktop,
        tablet=_normalize_override(overrides[Breakpoint.tablet], Breakpoint.tablet),
        mobile=_normalize_override(overrides[Breakpoint.mobile], Breakpoint.mobile),
    )


_TOP_LEVEL = frozenset(parts[0] for parts in LEAF_TYPES)


__all__ = ["SettingsTree", "normalize_settings"]
