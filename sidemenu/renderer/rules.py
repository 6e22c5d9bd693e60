from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from .css import Declaration, box, ms, px

MENU = "#fsm-menu.fsm-menu"
COLLAPSED = "#fsm-menu.fsm-collapsed"
NAV = ("#fsm-menu .fsm-nav",)
COLLAPSED_NAV = ("#fsm-menu.fsm-collapsed .fsm-nav",)
TOGGLE = ("#fsm-menu .fsm-toggle", "#fsm-menu button.fsm-toggle")
TOGGLE_ICON = ("#fsm-menu .fsm-toggle i",)
ITEM = ("#fsm-menu .fsm-item", "#fsm-menu a.fsm-item")
LABEL = ("#fsm-menu .fsm-label",)
FONT_GLYPHS = ("i", ".fas", ".far", ".fab")
ALL_GLYPHS = FONT_GLYPHS + (".dashicons",)

INHERITED_FONT_STACK = "var(--e-global-typography-primary-font-family, var(--wp--preset--font-family--body, inherit))"

_ALIGN = {"left": "flex-start", "right": "flex-end"}
_TOGGLE_ALIGN = {"top": "flex-start", "bottom": "flex-end"}
RADIUS_MODES = ("container", "item", "none")
ANIMATION_TYPES = ("slide", "fade", "scale")

Resolve = Callable[[str], Any]


def item_state(state: str, suffix: str = "") -> tuple[str, ...]:
    return (f"#fsm-menu .fsm-item{state}{suffix}", f"#fsm-menu a.fsm-item{state}{suffix}")


ITEM_HOVER = item_state(":hover")
ITEM_ACTIVE = item_state(":active") + item_state(".active")


def glyphs(scope: str, tags: Sequence[str] = ALL_GLYPHS) -> tuple[str, ...]:
    return tuple(f"{scope} .fsm-icon {tag}" for tag in tags)


HOVER_SCOPE = "#fsm-menu .fsm-item:hover"
ACTIVE_SCOPES = ("#fsm-menu .fsm-item:active", "#fsm-menu .fsm-item.active")


def active_selectors(suffix: str) -> tuple[str, ...]:
    return tuple(f"{scope}{suffix}" for scope in ACTIVE_SCOPES)


def active_glyphs() -> tuple[str, ...]:
    return tuple(selector for scope in ACTIVE_SCOPES for selector in glyphs(scope))


def boosted(selectors: Iterable[str]) -> tuple[str, ...]:
    """Prefix each selector with the menu class as well, for media-query specificity."""
    plain = tuple(selectors)
    strong = tuple(selector.replace("#fsm-menu", MENU, 1) for selector in plain if not selector.startswith(MENU))
    return strong + plain


def flex_align(value: Any) -> str:
    return _ALIGN.get(str(value), "center")


def toggle_align(value: Any) -> str:
    return _TOGGLE_ALIGN.get(str(value), "center")


def font_stack(family: Any) -> str:
    family = str(family).strip()
    if not family or family == "inherit":
        return INHERITED_FONT_STACK
    return family


def toggle_radius(radius: Any, side: str) -> str:
    value = px(radius)
    if side == "left":
        return f"0 {value} {value} 0"
    return f"{value} 0 0 {value}"


def padding_value(resolve: Resolve, group: str) -> str:
    return box(resolve(f"{group}.padding.{edge}") for edge in ("top", "right", "bottom", "left"))


def container_radius(resolve: Resolve) -> str:
    corners = ("top_left", "top_right", "bottom_right", "bottom_left")
    return box(resolve(f"container.border_radius.{corner}") for corner in corners)


def box_shadow(resolve: Resolve, clean: Callable[[Any], str]) -> str:
    offsets = box(resolve(f"container.box_shadow.{part}") for part in ("x", "y", "blur", "spread"))
    return f"{offsets} {clean(resolve('container.box_shadow.color'))}"


def radius_mode(value: Any) -> str:
    return value if value in RADIUS_MODES else "container"


def animation_type(value: Any) -> str:
    return value if value in ANIMATION_TYPES else "slide"


def first_last_radius(resolve: Resolve) -> list[tuple[tuple[str, ...], str, str]]:
    """(selectors, border-radius, comment) triples for the first/last/only item."""
    mode = radius_mode(resolve("item.first_last_radius"))
    first = item_state(":first-child")
    last = item_state(":last-child")
    if mode == "none":
        return [
            (first, "0", "First item - no special radius"),
            (last, "0", "Last item - no special radius"),
        ]
    if mode == "item":
        return []
    inner = px(resolve("item.border_radius"))
    tl, tr, br, bl = (
        px(resolve(f"container.border_radius.{corner}"))
        for corner in ("top_left", "top_right", "bottom_right", "bottom_left")
    )
    return [
        (first, f"{tl} {tr} {inner} {inner}", "First item - match container top corners"),
        (last, f"{inner} {inner} {br} {bl}", "Last item - match container bottom corners"),
        (item_state(":only-child"), f"{tl} {tr} {br} {bl}", "Only one item - match all container corners"),
    ]


def menu_transition(resolve: Resolve, side: str, clean: Callable[[Any], str]) -> str:
    duration = ms(resolve("animation.duration"))
    easing = clean(resolve("animation.easing"))
    kind = animation_type(resolve("animation.type"))
    if kind == "fade":
        return f"opacity {duration} {easing}"
    if kind == "scale":
        return f"transform {duration} {easing}"
    return f"{side} {duration} {easing}"


def collapsed_menu(resolve: Resolve, side: str) -> list[Declaration]:
    if animation_type(resolve("animation.type")) != "slide":
        return []
    return [Declaration(side, f"-{px(resolve('container.width'))}")]


def open_nav(resolve: Resolve) -> list[Declaration]:
    kind = animation_type(resolve("animation.type"))
    visible = [Declaration("opacity", "1"), Declaration("visibility", "visible")]
    if kind == "fade":
        return visible
    if kind == "scale":
        return [Declaration("transform", "scale(1)")] + visible
    return [Declaration("transform", "translateX(0)")] + visible


def collapsed_nav(resolve: Resolve) -> list[Declaration]:
    kind = animation_type(resolve("animation.type"))
    hidden = [Declaration("opacity", "0"), Declaration("visibility", "hidden")]
    if kind == "fade":
        return hidden
    if kind == "scale":
        return [Declaration("transform", "scale(0.8)")] + hidden
    return []


__all__ = [
    "MENU",
    "COLLAPSED",
    "NAV",
    "COLLAPSED_NAV",
    "TOGGLE",
    "TOGGLE_ICON",
    "ITEM",
    "LABEL",
    "ITEM_HOVER",
    "ITEM_ACTIVE",
    "HOVER_SCOPE",
    "FONT_GLYPHS",
    "ALL_GLYPHS",
    "INHERITED_FONT_STACK",
    "item_state",
    "glyphs",
    "active_selectors",
    "active_glyphs",
    "boosted",
    "flex_align",
    "toggle_align",
    "font_stack",
    "toggle_radius",
    "padding_value",
    "container_radius",
    "box_shadow",
    "radius_mode",
    "animation_type",
    "first_last_radius",
    "menu_transition",
    "collapsed_menu",
    "open_nav",
    "collapsed_nav",
]
