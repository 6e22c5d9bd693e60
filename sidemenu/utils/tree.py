from __future__ import annotations

from copy import deepcopy
from typing import Any, Iterator, Mapping, Sequence

_MISSING = object()


def split_path(path: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(path, str):
        parts = tuple(part for part in path.split(".") if part)
    else:
        parts = tuple(path)
    if not parts:
        raise ValueError("Path must not be empty")
    return parts


def is_defined(value: Any) -> bool:
    """A leaf counts as set unless it is ``None`` or an empty string."""
    return value is not None and value != ""


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new mapping with ``override`` merged over ``base``, recursing into mappings."""
    merged: dict[str, Any] = deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def lookup(tree: Mapping[str, Any], parts: Sequence[str], default: Any = _MISSING) -> Any:
    node: Any = tree
    for part in parts:
        if not isinstance(node, Mapping) or part not in node:
            if default is _MISSING:
                raise KeyError(".".join(parts))
            return default
        node = node[part]
    return node


def assign(tree: dict[str, Any], parts: Sequence[str], value: Any) -> None:
    node = tree
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def discard(tree: dict[str, Any], parts: Sequence[str]) -> bool:
    """Delete the leaf at ``parts`` and prune ancestors left empty.

    Pruning walks from the deepest ancestor upward and stops at the first
    one that still has other keys. Returns False when there was no leaf.
    """
    chain: list[dict[str, Any]] = [tree]
    node: Any = tree
    for part in parts[:-1]:
        node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            return False
        chain.append(node)
    if parts[-1] not in node:
        return False
    del node[parts[-1]]

    for depth in range(len(parts) - 1, 0, -1):
        parent = chain[depth - 1]
        child = chain[depth]
        if child:
            break
        del parent[parts[depth - 1]]
    return True


def iter_leaves(tree: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Any]]:
    for key, value in tree.items():
        parts = prefix + (str(key),)
        if isinstance(value, Mapping):
            yield from iter_leaves(value, parts)
        else:
            yield parts, value


def has_defined_leaf(tree: Any) -> bool:
    if isinstance(tree, Mapping):
        return any(has_defined_leaf(value) for value in tree.values())
    return is_defined(tree)


__all__ = [
    "split_path",
    "is_defined",
    "deep_merge",
    "lookup",
    "assign",
    "discard",
    "iter_leaves",
    "has_defined_leaf",
]
