"""Per-breakpoint override blocks.

Only declarations whose leaf is overridden at the breakpoint are emitted.
Shorthands whose parts are only partly overridden (padding, corners,
shadow) take the missing parts from the cascade, and every hover
declaration is followed by its active counterpart so a media-query hover
rule never wins over the active state. A base background or color
override re-emits the hover and active states after it, since the boosted
base selector ties with the unboosted state selectors.
"""

from __future__ import annotations

from typing import Any

from ..schemas.settings import Breakpoint
from ..schemas.settings_tree import SettingsTree
from ..services.cascade import CascadeResolver
from ..utils.color_filter import color_to_filter
from ..utils.numbers import format_number
from ..utils.tree import deep_merge, has_defined_leaf, is_defined, lookup, split_path
from .css import MediaBlock, Stylesheet, css_text, ms, px
from .rules import (
    COLLAPSED,
    COLLAPSED_NAV,
    FONT_GLYPHS,
    HOVER_SCOPE,
    ITEM,
    ITEM_ACTIVE,
    ITEM_HOVER,
    LABEL,
    MENU,
    NAV,
    TOGGLE,
    TOGGLE_ICON,
    active_glyphs,
    active_selectors,
    boosted,
    box_shadow,
    collapsed_menu,
    collapsed_nav,
    container_radius,
    first_last_radius,
    flex_align,
    font_stack,
    glyphs,
    item_state,
    menu_transition,
    open_nav,
    padding_value,
    toggle_radius,
)

_MISSING = object()


class _Overrides:
    """Override layer for one breakpoint plus cascade lookups at that breakpoint."""

    def __init__(self, resolver: CascadeResolver, tree: SettingsTree, layer: dict, breakpoint: Breakpoint) -> None:
        self.resolver = resolver
        self.tree = tree
        self.layer = layer
        self.breakpoint = breakpoint

    def has(self, *paths: str) -> bool:
        for path in paths:
            node = lookup(self.layer, split_path(path), _MISSING)
            if node is _MISSING:
                continue
            if has_defined_leaf(node) if isinstance(node, dict) else is_defined(node):
                return True
        return False

    def __call__(self, path: str) -> Any:
        return self.resolver.get(self.tree, path, self.breakpoint)


class ResponsiveCompiler:
    def __init__(self, resolver: CascadeResolver) -> None:
        self.resolver = resolver

    def extend(self, sheet: Stylesheet, tree: SettingsTree) -> None:
        def base(path: str) -> Any:
            return self.resolver.get(tree, path, Breakpoint.desktop)

        if has_defined_leaf(tree.tablet):
            width = px(base("breakpoints.tablet"))
            block = sheet.media(f"(max-width: {width})", comment=f"Tablet Responsive (max-width: {width})")
            self.fill(block, _Overrides(self.resolver, tree, tree.tablet, Breakpoint.tablet), base)
        if has_defined_leaf(tree.mobile):
            width = px(base("breakpoints.mobile"))
            block = sheet.media(f"(max-width: {width})", comment=f"Mobile Responsive (max-width: {width})")
            merged = deep_merge(tree.tablet, tree.mobile)
            self.fill(block, _Overrides(self.resolver, tree, merged, Breakpoint.mobile), base)

    def fill(self, block: MediaBlock, o: _Overrides, base) -> None:
        self._container(block, o)
        self._typography(block, o)
        self._icon(block, o)
        self._toggle(block, o, base)
        self._item(block, o)
        self._first_last(block, o)
        self._position(block, o, base)
        self._animation(block, o)

    def _container(self, block: MediaBlock, o: _Overrides) -> None:
        nav = block.rule(*boosted(NAV))
        if o.has("container.width"):
            nav.add("width", px(o("container.width")))
        if o.has("container.background_color"):
            nav.add("background", css_text(o("container.background_color")))
        if o.has("container.gap"):
            nav.add("gap", px(o("container.gap")))
        if o.has("container.padding"):
            nav.add("padding", padding_value(o, "container"))
        if o.has("container.border_radius"):
            nav.add("border-radius", container_radius(o))
        if o.has("container.box_shadow"):
            nav.add("box-shadow", box_shadow(o, css_text))

    def _typography(self, block: MediaBlock, o: _Overrides) -> None:
        item = block.rule(*boosted(ITEM))
        label = block.rule(*boosted(LABEL))
        if o.has("typography.font_family"):
            family = font_stack(o("typography.font_family"))
            block.rule(MENU).add("font-family", family)
            item.add("font-family", family)
            label.add("font-family", family)
        if o.has("typography.font_size"):
            item.add("font-size", px(o("typography.font_size")))
            label.add("font-size", px(o("typography.font_size")))
        if o.has("typography.font_weight"):
            item.add("font-weight", format_number(o("typography.font_weight")))
            label.add("font-weight", format_number(o("typography.font_weight")))
        if o.has("typography.text_color"):
            item.add("color", css_text(o("typography.text_color")))
            label.add("color", css_text(o("typography.text_color")))
        if o.has("typography.line_height"):
            label.add("line-height", format_number(o("typography.line_height")))
        if o.has("typography.text_align"):
            item.add("text-align", o("typography.text_align"))
            label.add("text-align", o("typography.text_align"))

        if o.has("typography.text_color", "typography.hover_text_color"):
            hover = css_text(o("typography.hover_text_color"))
            block.rule(*boosted(ITEM_HOVER)).add("color", hover)
            block.rule(*boosted(item_state(":hover", " .fsm-label"))).add("color", hover)
        if o.has("typography.text_color", "typography.hover_text_color", "typography.active_text_color"):
            active = css_text(o("typography.active_text_color"))
            block.rule(*boosted(ITEM_ACTIVE)).add("color", active)
            block.rule(*boosted(item_state(":active", " .fsm-label") + item_state(".active", " .fsm-label"))).add(
                "color", active
            )

    def _icon(self, block: MediaBlock, o: _Overrides) -> None:
        if o.has("icon.size"):
            size = px(o("icon.size"))
            block.rule(*boosted(glyphs("#fsm-menu", FONT_GLYPHS))).add("font-size", size)
            block.rule(*boosted(glyphs("#fsm-menu", (".dashicons",)))).add("font-size", size).add(
                "width", size
            ).add("height", size)
            block.rule(*boosted(("#fsm-menu .fsm-icon-img",))).add("width", size).add("height", size)
            block.rule(*boosted(("#fsm-menu .fsm-icon-svg-inline svg",))).add("width", size).add("height", size)
        if o.has("icon.color"):
            color = o("icon.color")
            block.rule(*boosted(glyphs("#fsm-menu"))).add("color", css_text(color))
            block.rule(*boosted(("#fsm-menu .fsm-icon-svg-inline",))).add("color", css_text(color))
            block.rule(*boosted(("#fsm-menu .fsm-icon-svg",))).add("filter", color_to_filter(color))
        if o.has("icon.color", "icon.hover_color"):
            hover = o("icon.hover_color")
            block.rule(*boosted(glyphs(HOVER_SCOPE))).add("color", css_text(hover))
            block.rule(*boosted((f"{HOVER_SCOPE} .fsm-icon-svg-inline",))).add("color", css_text(hover))
            block.rule(*boosted((f"{HOVER_SCOPE} .fsm-icon-svg",))).add("filter", color_to_filter(hover))
        if o.has("icon.color", "icon.hover_color", "icon.active_color"):
            active = o("icon.active_color")
            block.rule(*boosted(active_glyphs())).add("color", css_text(active))
            block.rule(*boosted(active_selectors(" .fsm-icon-svg-inline"))).add("color", css_text(active))
            block.rule(*boosted(active_selectors(" .fsm-icon-svg"))).add("filter", color_to_filter(active))

        item = block.rule(*boosted(ITEM))
        if o.has("icon.spacing"):
            item.add("gap", px(o("icon.spacing")))
        if o.has("icon.position"):
            item.add("flex-direction", "column" if o("icon.position") == "top" else "row")
        if o.has("icon.align"):
            align = flex_align(o("icon.align"))
            item.add("align-items", align).add("justify-content", align)

    def _toggle(self, block: MediaBlock, o: _Overrides, base) -> None:
        toggle = block.rule(*boosted(TOGGLE))
        if o.has("toggle.enabled") and not o("toggle.enabled"):
            toggle.add("display", "none")
            return
        if o.has("toggle.enabled") and not base("toggle.enabled"):
            toggle.add("display", "flex")
        if o.has("toggle.width"):
            toggle.add("width", px(o("toggle.width")))
        if o.has("toggle.size"):
            toggle.add("height", px(o("toggle.size")))
        if o.has("toggle.background_color"):
            toggle.add("background", css_text(o("toggle.background_color")))
        if o.has("toggle.icon_color"):
            toggle.add("color", css_text(o("toggle.icon_color")))
        if o.has("toggle.border_radius", "position.side"):
            toggle.add("border-radius", toggle_radius(o("toggle.border_radius"), o("position.side")))
        if o.has("position.side"):
            toggle.add("order", "2" if o("position.side") == "left" else "1")

        icon = block.rule(*boosted(TOGGLE_ICON))
        if o.has("toggle.icon_color"):
            icon.add("color", css_text(o("toggle.icon_color")))
        if o.has("toggle.icon_size"):
            icon.add("font-size", px(o("toggle.icon_size")))
        if o.has("toggle.icon_rotate"):
            icon.add("transform", f"rotate({format_number(o('toggle.icon_rotate'))}deg)")

        if o.has("toggle.background_color", "toggle.hover_background"):
            block.rule(*boosted(("#fsm-menu .fsm-toggle:hover", "#fsm-menu .fsm-toggle:focus"))).add(
                "background", css_text(o("toggle.hover_background"))
            )
        if o.has("toggle.icon_color", "toggle.hover_icon_color"):
            block.rule(*boosted(("#fsm-menu .fsm-toggle:hover i", "#fsm-menu .fsm-toggle:focus i"))).add(
                "color", css_text(o("toggle.hover_icon_color"))
            )
        if o.has("toggle.background_color", "toggle.hover_background", "toggle.active_background"):
            block.rule(*boosted(("#fsm-menu .fsm-toggle:active",))).add(
                "background", css_text(o("toggle.active_background"))
            )
        if o.has("toggle.icon_color", "toggle.hover_icon_color", "toggle.active_icon_color"):
            block.rule(*boosted(("#fsm-menu .fsm-toggle:active i",))).add(
                "color", css_text(o("toggle.active_icon_color"))
            )

    def _item(self, block: MediaBlock, o: _Overrides) -> None:
        item = block.rule(*boosted(ITEM))
        if o.has("item.padding"):
            item.add("padding", padding_value(o, "item"))
        if o.has("item.border_radius"):
            item.add("border-radius", px(o("item.border_radius")))
        if o.has("item.background_color"):
            item.add("background", css_text(o("item.background_color")))
        if o.has("item.transition_duration"):
            item.add("transition", f"all {ms(o('item.transition_duration'))} ease")
        if o.has("item.background_color", "item.hover_background"):
            block.rule(*boosted(ITEM_HOVER)).add("background", css_text(o("item.hover_background")))
        if o.has("item.background_color", "item.hover_background", "item.active_background"):
            block.rule(*boosted(ITEM_ACTIVE)).add("background", css_text(o("item.active_background")))

    def _first_last(self, block: MediaBlock, o: _Overrides) -> None:
        if not o.has("container.border_radius", "item.border_radius", "item.first_last_radius"):
            return
        rules = first_last_radius(o)
        if not rules:
            # "item" mode: undo the desktop first/last corners
            inner = px(o("item.border_radius"))
            for state in (":first-child", ":last-child", ":only-child"):
                block.rule(*boosted(item_state(state))).add("border-radius", inner)
            return
        for selectors, radius, _comment in rules:
            block.rule(*boosted(selectors)).add("border-radius", radius)

    def _position(self, block: MediaBlock, o: _Overrides, base) -> None:
        menu = block.rule(MENU)
        desktop_side = base("position.side")
        side = o("position.side")
        if o.has("position.vertical", "position.vertical_unit"):
            menu.add("top", f"{format_number(o('position.vertical'))}{o('position.vertical_unit')}")
        if o.has("position.margin", "position.side"):
            if side != desktop_side:
                menu.add(desktop_side, "auto")
            menu.add(side, px(o("position.margin")))
        if o.has("z_index"):
            menu.add("z-index", format_number(o("z_index")))
        if o.has("position.side"):
            block.rule(*boosted(NAV)).add("order", "1" if side == "left" else "2")

    def _animation(self, block: MediaBlock, o: _Overrides) -> None:
        side = o("position.side")
        if o.has("animation", "position.side"):
            block.rule(MENU).add("transition", menu_transition(o, side, css_text))
        if o.has("animation", "position.side", "position.margin", "container.width"):
            collapsed = block.rule(COLLAPSED)
            desktop_side = self.resolver.get(o.tree, "position.side", Breakpoint.desktop)
            if side != desktop_side and collapsed_menu(o, side):
                collapsed.add(desktop_side, "auto")
            collapsed.extend(collapsed_menu(o, side))
        if o.has("animation"):
            block.rule(*boosted(NAV)).extend(open_nav(o))
            block.rule(*boosted(COLLAPSED_NAV)).extend(collapsed_nav(o))


__all__ = ["ResponsiveCompiler"]
