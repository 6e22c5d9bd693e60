from __future__ import annotations

from typing import Any, Iterable, Optional

from ..exceptions import NotFoundError
from ..schemas.menu_item import MenuItem


class ItemListEditor:
    """Ordered item list with stable ids.

    New ids are one past the highest id seen during this editor's lifetime,
    so deleting the last item and adding another never reuses its id.
    Stateless callers carry the mark between requests via ``high_water``.
    """

    def __init__(self, items: Iterable[MenuItem] = (), *, high_water: int = 0) -> None:
        self._items: list[MenuItem] = list(items)
        self._high_water = max([high_water] + [item.id for item in self._items])

    @property
    def items(self) -> list[MenuItem]:
        return list(self._items)

    def next_id(self) -> int:
        return self._high_water + 1

    def _index(self, item_id: int) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise NotFoundError(f"Menu item {item_id} not found")

    def add(self, *, label: str = "New Item", url: str = "#", **fields: Any) -> MenuItem:
        item = MenuItem(id=self.next_id(), label=label, url=url, **fields)
        self._high_water = item.id
        self._items.append(item)
        return item

    def update(self, item_id: int, **changes: Any) -> MenuItem:
        index = self._index(item_id)
        changes.pop("id", None)
        updated = MenuItem.model_validate({**self._items[index].model_dump(), **changes})
        self._items[index] = updated
        return updated

    def remove(self, item_id: int) -> MenuItem:
        return self._items.pop(self._index(item_id))

    def move(self, item_id: int, position: int) -> None:
        item = self._items.pop(self._index(item_id))
        position = max(0, min(position, len(self._items)))
        self._items.insert(position, item)

    def get(self, item_id: int) -> Optional[MenuItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None


__all__ = ["ItemListEditor"]
