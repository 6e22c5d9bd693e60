"""Export and import of a settings tree plus item list as a JSON document."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence
from urllib.parse import urlsplit

from pydantic import ValidationError

from .. import __version__
from ..exceptions import MalformedImportError
from ..schemas.menu_item import IconType, MenuItem
from ..schemas.settings_tree import SettingsTree, normalize_settings

logger = logging.getLogger(__name__)

EXPORT_VERSION = __version__


@dataclass
class ImportResult:
    settings: SettingsTree
    items: list[MenuItem]
    warnings: list[str] = field(default_factory=list)
    scrubbed_item_ids: list[int] = field(default_factory=list)
    settings_imported: bool = True
    items_imported: bool = True

    def to_payload(self) -> dict:
        return {
            "settings": self.settings.to_payload(),
            "items": [item.to_payload() for item in self.items],
            "warnings": list(self.warnings),
            "scrubbed_item_ids": list(self.scrubbed_item_ids),
            "settings_imported": self.settings_imported,
            "items_imported": self.items_imported,
        }


def export_payload(tree: SettingsTree, items: Sequence[MenuItem]) -> dict[str, Any]:
    return {
        "settings": tree.to_payload(),
        "items": [item.to_payload() for item in items],
        "version": EXPORT_VERSION,
    }


def export_json(tree: SettingsTree, items: Sequence[MenuItem]) -> str:
    return json.dumps(export_payload(tree, items), indent=2, ensure_ascii=False)


def _origin(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    return parts.scheme.lower(), parts.netloc.lower()


def is_same_origin(url: str, site_url: str) -> bool:
    """Relative URLs belong to the site; absolute ones must match scheme, host and port."""
    scheme, netloc = _origin(url)
    if not netloc:
        return not scheme
    site_scheme, site_netloc = _origin(site_url)
    return netloc == site_netloc and (not scheme or scheme == site_scheme)


def _coerce_document(data: Any) -> Mapping[str, Any]:
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise MalformedImportError(f"Import is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise MalformedImportError("Import must be a JSON object")
    if "settings" not in data and "items" not in data:
        raise MalformedImportError("Import contains neither settings nor items")
    return data


def _import_items(raw: list, result: ImportResult, site_url: str) -> list[MenuItem]:
    items: list[MenuItem] = []
    seen: set[int] = set()
    for index, entry in enumerate(raw):
        try:
            item = MenuItem.model_validate(entry)
        except ValidationError:
            result.warnings.append(f"Skipped invalid menu item at position {index + 1}")
            continue
        if item.id in seen:
            result.warnings.append(f"Skipped duplicate menu item id {item.id}")
            continue
        seen.add(item.id)
        if item.icon_type == IconType.image and item.icon_url and not is_same_origin(item.icon_url, site_url):
            item = item.model_copy(update={"icon_url": ""})
            result.scrubbed_item_ids.append(item.id)
        items.append(item)
    if result.scrubbed_item_ids:
        result.warnings.append(
            "Custom image icons from another site were removed; re-upload them for items "
            + ", ".join(str(item_id) for item_id in result.scrubbed_item_ids)
        )
        logger.warning("import_icons_scrubbed", extra={"data": {"item_ids": result.scrubbed_item_ids}})
    return items


def import_payload(
    data: Any,
    *,
    current_settings: SettingsTree,
    current_items: Sequence[MenuItem],
    site_url: str,
) -> ImportResult:
    """Validate an exported document against the current state.

    A missing or unusable half (settings that are not an object, items that
    are not a list) keeps the current value for that half. The import fails
    only when neither half is usable. Nothing is persisted here; callers save
    the result as a draft or publish.
    """
    document = _coerce_document(data)
    result = ImportResult(settings=current_settings, items=list(current_items))
    settings = document.get("settings")
    raw_items = document.get("items")

    if not isinstance(settings, Mapping) and not isinstance(raw_items, list):
        raise MalformedImportError("Import contains neither usable settings nor items")

    if isinstance(settings, Mapping):
        result.settings = normalize_settings(settings)
    else:
        result.settings_imported = False
        result.warnings.append("Import has no settings; current settings were kept")

    if isinstance(raw_items, list):
        result.items = _import_items(raw_items, result, site_url)
    else:
        result.items_imported = False
        result.warnings.append("Import has no items; current items were kept")

    return result


__all__ = [
    "EXPORT_VERSION",
    "ImportResult",
    "export_payload",
    "export_json",
    "import_payload",
    "is_same_origin",
]
