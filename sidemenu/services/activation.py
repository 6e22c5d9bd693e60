from __future__ import annotations

import logging

from ..schemas.menu_item import IconType, MenuItem
from ..schemas.settings import default_settings
from ..schemas.revision import PublicationStatus
from .option_store import OptionStore
from .revision_store import OPT_HAS_DRAFT, OPT_HISTORY, OPT_ITEMS, OPT_SETTINGS, OPT_STATUS, OPTION_NAMES

logger = logging.getLogger(__name__)


def default_items(home_url: str) -> list[MenuItem]:
    home = home_url.rstrip("/") + "/"
    return [
        MenuItem(id=1, label="Home", url=home, icon_type=IconType.fontawesome, icon="fa-home"),
        MenuItem(id=2, label="About", url="#", icon_type=IconType.fontawesome, icon="fa-info-circle"),
        MenuItem(id=3, label="Contact", url="#", icon_type=IconType.fontawesome, icon="fa-envelope"),
    ]


def activate(store: OptionStore, *, home_url: str) -> list[str]:
    """Seed default settings and items on first run; returns the names written."""
    existing = store.read(OPTION_NAMES)
    seed = {
        OPT_SETTINGS: default_settings() | {"tablet": {}, "mobile": {}},
        OPT_ITEMS: [item.to_payload() for item in default_items(home_url)],
        OPT_HAS_DRAFT: False,
        OPT_STATUS: PublicationStatus.published.value,
        OPT_HISTORY: [],
    }
    missing = {name: value for name, value in seed.items() if name not in existing}
    if missing:
        store.write(missing)
        logger.info("defaults_seeded", extra={"data": {"names": sorted(missing)}})
    return sorted(missing)


__all__ = ["default_items", "activate"]
