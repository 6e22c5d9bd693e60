from __future__ import annotations

import re
from html import escape
from typing import Literal, Optional, Sequence

from .. import __version__
from ..schemas.menu_item import IconType, MenuItem
from ..schemas.settings import Breakpoint
from ..schemas.settings_tree import SettingsTree
from ..services.cascade import CascadeResolver

PageKind = Literal["home", "archive", "single", "page"]

_PAGE_FLAGS = {
    "home": "visibility.show_on_home",
    "archive": "visibility.show_on_archive",
    "single": "visibility.show_on_single",
}

_resolver = CascadeResolver(validate_values=False)

SAFE_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

_SCHEME = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.IGNORECASE)
_IGNORED = re.compile(r"[\x00-\x20\x7f]")


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


def _is_svg(url: str) -> bool:
    return ".svg" in url or "image/svg" in url


def safe_url(url: str) -> str:
    """Return the link target, or ``#`` when it uses a scheme other than web, mail or phone."""
    if not url or not url.strip():
        return "#"
    # Browsers drop control characters and whitespace before reading the scheme.
    match = _SCHEME.match(_IGNORED.sub("", url))
    if match and match.group(1).lower() not in SAFE_SCHEMES:
        return "#"
    return url.strip()


def should_display(tree: SettingsTree, page_kind: PageKind) -> bool:
    """Visibility rules only restrict anything in ``all`` mode."""
    if _resolver.get(tree, "visibility.mode", Breakpoint.desktop) != "all":
        return True
    flag = _PAGE_FLAGS.get(page_kind)
    if flag is None:
        return True
    return bool(_resolver.get(tree, flag, Breakpoint.desktop))


def render_icon(item: MenuItem) -> str:
    if item.icon_type == IconType.image and item.icon_url:
        classes = "fsm-icon-img fsm-icon-svg" if _is_svg(item.icon_url) else "fsm-icon-img"
        return f'<img src="{_attr(item.icon_url)}" alt="" class="{classes}">'
    if item.icon_type == IconType.dashicons and item.icon:
        return f'<span class="dashicons {_attr(item.icon)}"></span>'
    if item.icon:
        classes = f"fas {item.icon}" if item.icon.startswith("fa-") else item.icon
        return f'<i class="{_attr(classes)}"></i>'
    return '<i class="fas fa-link"></i>'


def _toggle_visible_anywhere(tree: SettingsTree) -> bool:
    return any(
        _resolver.get(tree, "toggle.enabled", breakpoint)
        for breakpoint in (Breakpoint.desktop, Breakpoint.tablet, Breakpoint.mobile)
    )


def render_menu(tree: SettingsTree, items: Sequence[MenuItem], *, version_timestamp: Optional[int] = None) -> str:
    side = _resolver.get(tree, "position.side", Breakpoint.desktop)
    icon_position = _resolver.get(tree, "icon.position", Breakpoint.desktop)
    icon_open = _resolver.get(tree, "toggle.icon_open", Breakpoint.desktop)
    icon_closed = _resolver.get(tree, "toggle.icon_closed", Breakpoint.desktop)

    parts = [f"<!-- FSM v{__version__} t:{version_timestamp or 0} -->"]
    parts.append(f'<div class="fsm-menu fsm-side-{_attr(side)}" id="fsm-menu">')
    if _toggle_visible_anywhere(tree):
        parts.append(
            f'<button class="fsm-toggle" id="fsm-toggle" aria-label="Toggle menu" '
            f'data-icon-open="{_attr(icon_open)}" data-icon-closed="{_attr(icon_closed)}">'
            f'<i class="fas {_attr(icon_open)}"></i></button>'
        )
    parts.append('<nav class="fsm-nav" id="fsm-nav">')
    for item in items:
        style = f' style="--fsm-icon-size: {item.icon_size}px;"' if item.icon_size else ""
        parts.append(
            f'<a href="{_attr(safe_url(item.url))}" class="fsm-item fsm-icon-{_attr(icon_position)}" '
            f'data-item-id="{item.id}" target="{_attr(item.target)}"{style}>'
            f'<span class="fsm-icon">{render_icon(item)}</span>'
            f'<span class="fsm-label">{escape(item.label)}</span></a>'
        )
    parts.append("</nav>")
    parts.append("</div>")
    return "\n".join(parts)


__all__ = ["PageKind", "SAFE_SCHEMES", "safe_url", "should_display", "render_icon", "render_menu"]
