"""Compile a settings tree into the menu stylesheet.

Output order is fixed: reset, positioning, container, toggle, items,
first/last radius, hover then active states, icons, labels, animation,
the optional hide-on-mobile query and finally the tablet and mobile
override blocks. The same tree always yields the same text.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ..schemas.menu_item import MenuItem
from ..schemas.settings import Breakpoint
from ..schemas.settings_tree import SettingsTree
from ..services.cascade import CascadeResolver
from ..utils.color_filter import color_to_filter
from ..utils.numbers import format_number
from .css import Rule, Stylesheet, css_text, ms, px
from .responsive import ResponsiveCompiler
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
    toggle_align,
    toggle_radius,
)

_RESET = (
    ("margin", "0"),
    ("padding", "0"),
    ("border", "none"),
    ("border-width", "0"),
    ("border-style", "none"),
    ("outline", "none"),
    ("box-sizing", "border-box"),
    ("text-decoration", "none"),
    ("list-style", "none"),
    ("background", "transparent"),
    ("background-image", "none"),
    ("box-shadow", "none"),
    ("text-shadow", "none"),
    ("text-transform", "none"),
    ("gap", "0"),
    ("letter-spacing", "normal"),
    ("word-spacing", "normal"),
    ("line-height", "1.4"),
    ("vertical-align", "baseline"),
    ("float", "none"),
    ("clear", "none"),
    ("text-indent", "0"),
    ("white-space", "normal"),
    ("visibility", "visible"),
    ("opacity", "1"),
    ("min-width", "0"),
    ("min-height", "0"),
    ("max-width", "none"),
    ("max-height", "none"),
    ("overflow", "visible"),
    ("clip", "auto"),
    ("filter", "none"),
    ("transform", "none"),
    ("animation", "none"),
    ("transition", "none"),
    ("-webkit-text-fill-color", "initial"),
    ("-webkit-text-stroke", "initial"),
    ("position", "static"),
    ("top", "auto"),
    ("right", "auto"),
    ("bottom", "auto"),
    ("left", "auto"),
    ("z-index", "auto"),
)

_FONT_SMOOTHING = (
    ("text-rendering", "auto"),
    ("-webkit-font-smoothing", "antialiased"),
    ("-moz-osx-font-smoothing", "grayscale"),
    ("display", "inline-block"),
)


def _add_all(rule: Rule, pairs: Iterable[tuple[str, str]]) -> Rule:
    for prop, value in pairs:
        rule.add(prop, value)
    return rule


class StyleCompiler:
    def __init__(self, resolver: CascadeResolver | None = None) -> None:
        self.resolver = resolver or CascadeResolver(validate_values=False)
        self.responsive = ResponsiveCompiler(self.resolver)

    def compile(self, tree: SettingsTree, items: Sequence[MenuItem] = ()) -> str:
        return self.build(tree, items).render()

    def build(self, tree: SettingsTree, items: Sequence[MenuItem] = ()) -> Stylesheet:
        def resolve(path: str) -> Any:
            return self.resolver.get(tree, path, Breakpoint.desktop)

        sheet = Stylesheet()
        self._reset(sheet)
        self._layout(sheet, resolve)
        self._toggle(sheet, resolve)
        self._items(sheet, resolve)
        self._states(sheet, resolve)
        self._icons(sheet, resolve, items)
        self._labels(sheet, resolve)
        self._animation(sheet, resolve)
        self._hide_on_mobile(sheet, resolve)
        self.responsive.extend(sheet, tree)
        return sheet

    def _reset(self, sheet: Stylesheet) -> None:
        _add_all(
            sheet.rule(
                "#fsm-menu",
                "#fsm-menu *",
                "#fsm-menu *::before",
                "#fsm-menu *::after",
                comment="FSM Complete Reset - Override theme styles but preserve icon fonts",
            ),
            _RESET,
        )
        fa = sheet.rule(
            "#fsm-menu .fas",
            "#fsm-menu .far",
            "#fsm-menu .fab",
            "#fsm-menu .fa",
            "#fsm-menu i[class*='fa-']",
            comment="Restore Font Awesome font-family",
        )
        fa.add("font-family", "'Font Awesome 6 Free'").add("font-style", "normal").add("font-variant", "normal")
        _add_all(fa, _FONT_SMOOTHING)
        sheet.rule("#fsm-menu .fas", "#fsm-menu i.fas").add("font-weight", "900")
        sheet.rule("#fsm-menu .far").add("font-weight", "400")
        sheet.rule("#fsm-menu .fab").add("font-family", "'Font Awesome 6 Brands'").add("font-weight", "400")
        dashicons = sheet.rule(
            "#fsm-menu .dashicons",
            "#fsm-menu [class*='dashicons-']",
            comment="Restore Dashicons font-family",
        )
        _add_all(
            dashicons,
            (
                ("font-family", "dashicons"),
                ("font-style", "normal"),
                ("font-weight", "normal"),
                ("font-variant", "normal"),
                ("text-transform", "none"),
            ),
        )
        _add_all(dashicons, _FONT_SMOOTHING)
        dashicons.add("speak", "never")

    def _layout(self, sheet: Stylesheet, resolve) -> None:
        side = resolve("position.side")
        menu = sheet.rule(MENU, comment="Menu Container")
        menu.add("position", "fixed")
        menu.add(side, px(resolve("position.margin")))
        menu.add("top", f"{format_number(resolve('position.vertical'))}{resolve('position.vertical_unit')}")
        menu.add("transform", "translateY(-50%)")
        menu.add("z-index", format_number(resolve("z_index")))
        menu.add("display", "flex").add("align-items", "center").add("gap", "0")
        menu.add("font-family", font_stack(resolve("typography.font_family")))

        nav = sheet.rule(*NAV, comment="Navigation")
        nav.add("display", "flex").add("flex-direction", "column")
        nav.add("gap", px(resolve("container.gap")))
        nav.add("background", css_text(resolve("container.background_color")))
        nav.add("width", px(resolve("container.width")))
        nav.add("padding", padding_value(resolve, "container"))
        nav.add("border-radius", container_radius(resolve))
        nav.add("box-shadow", box_shadow(resolve, css_text))
        nav.add("order", "1" if side == "left" else "2")

    def _toggle(self, sheet: Stylesheet, resolve) -> None:
        side = resolve("position.side")
        toggle = sheet.rule(*TOGGLE, comment="Toggle Button")
        toggle.add("display", "flex" if resolve("toggle.enabled") else "none")
        toggle.add("align-items", "center").add("justify-content", "center")
        toggle.add("background", css_text(resolve("toggle.background_color")))
        toggle.add("color", css_text(resolve("toggle.icon_color")))
        toggle.add("width", px(resolve("toggle.width")))
        toggle.add("height", px(resolve("toggle.size")))
        toggle.add("border-radius", toggle_radius(resolve("toggle.border_radius"), side))
        toggle.add("cursor", "pointer")
        toggle.add("order", "2" if side == "left" else "1")
        toggle.add("align-self", toggle_align(resolve("toggle.align")))
        toggle.add("transition", "all 0.2s ease")
        toggle.add("outline", "none").add("border", "none").add("box-shadow", "none")
        toggle.add("margin", "0").add("padding", "0")

        sheet.rule("#fsm-menu .fsm-toggle:hover", "#fsm-menu .fsm-toggle:focus").add(
            "background", css_text(resolve("toggle.hover_background"))
        ).add("outline", "none").add("box-shadow", "none")
        sheet.rule("#fsm-menu .fsm-toggle:focus-visible").add("outline", "none").add("box-shadow", "none")
        sheet.rule("#fsm-menu .fsm-toggle:hover i", "#fsm-menu .fsm-toggle:focus i").add(
            "color", css_text(resolve("toggle.hover_icon_color"))
        )
        sheet.rule("#fsm-menu .fsm-toggle:active").add("background", css_text(resolve("toggle.active_background")))
        sheet.rule("#fsm-menu .fsm-toggle:active i").add("color", css_text(resolve("toggle.active_icon_color")))

        icon = sheet.rule(*TOGGLE_ICON)
        icon.add("color", css_text(resolve("toggle.icon_color")))
        icon.add("font-size", px(resolve("toggle.icon_size")))
        icon.add("transform", f"rotate({format_number(resolve('toggle.icon_rotate'))}deg)")
        icon.add("transition", "transform 0.2s ease")

    def _items(self, sheet: Stylesheet, resolve) -> None:
        align = flex_align(resolve("icon.align"))
        item = sheet.rule(*ITEM, comment="Menu Items")
        item.add("display", "flex")
        item.add("flex-direction", "column" if resolve("icon.position") == "top" else "row")
        item.add("align-items", align).add("justify-content", align)
        item.add("text-align", resolve("typography.text_align"))
        item.add("gap", px(resolve("icon.spacing")))
        item.add("padding", padding_value(resolve, "item"))
        item.add("background", css_text(resolve("item.background_color")))
        item.add("color", css_text(resolve("typography.text_color")))
        item.add("font-family", font_stack(resolve("typography.font_family")))
        item.add("font-size", px(resolve("typography.font_size")))
        item.add("font-weight", format_number(resolve("typography.font_weight")))
        item.add("border-radius", px(resolve("item.border_radius")))
        item.add("transition", f"all {ms(resolve('item.transition_duration'))} ease")
        item.add("cursor", "pointer")

        for selectors, radius, comment in first_last_radius(resolve):
            sheet.rule(*selectors, comment=comment).add("border-radius", radius)

    def _states(self, sheet: Stylesheet, resolve) -> None:
        hover_text = css_text(resolve("typography.hover_text_color"))
        hover_icon = resolve("icon.hover_color")
        active_icon = resolve("icon.active_color")

        sheet.rule(*ITEM_HOVER).add("background", css_text(resolve("item.hover_background"))).add("color", hover_text)
        sheet.rule(*glyphs(HOVER_SCOPE)).add("color", css_text(hover_icon))
        sheet.rule(f"{HOVER_SCOPE} .fsm-icon-svg").add("filter", color_to_filter(hover_icon))

        sheet.rule(*ITEM_ACTIVE).add("background", css_text(resolve("item.active_background"))).add(
            "color", css_text(resolve("typography.active_text_color"))
        )
        sheet.rule(*active_glyphs()).add("color", css_text(active_icon))
        sheet.rule(*active_selectors(" .fsm-icon-svg")).add("filter", color_to_filter(active_icon))

    def _icons(self, sheet: Stylesheet, resolve, items: Sequence[MenuItem]) -> None:
        size = px(resolve("icon.size"))
        color = resolve("icon.color")

        sheet.rule("#fsm-menu .fsm-icon", comment="Icon Container").add("display", "flex").add(
            "align-items", "center"
        ).add("justify-content", "center").add("line-height", "1")
        sheet.rule(*glyphs("#fsm-menu", FONT_GLYPHS)).add("font-size", size).add("color", css_text(color)).add(
            "width", "auto"
        ).add("height", "auto")
        sheet.rule("#fsm-menu .fsm-icon .dashicons").add("font-size", size).add("color", css_text(color)).add(
            "width", size
        ).add("height", size)
        sheet.rule("#fsm-menu .fsm-icon-img").add("width", size).add("height", size).add(
            "object-fit", "contain"
        ).add("border-radius", "4px")
        sheet.rule("#fsm-menu .fsm-icon-svg").add("filter", color_to_filter(color))

        sheet.rule(
            "#fsm-menu .fsm-icon-svg-inline",
            comment="Inline SVG - uses color instead of filter for accuracy",
        ).add("display", "flex").add("align-items", "center").add("justify-content", "center").add(
            "color", css_text(color)
        )
        sheet.rule("#fsm-menu .fsm-icon-svg-inline svg", "#fsm-menu .fsm-icon-svg-inline .fsm-svg").add(
            "width", size
        ).add("height", size).add("fill", "currentColor").add("stroke", "currentColor")
        sheet.rule(f"{HOVER_SCOPE} .fsm-icon-svg-inline").add("color", css_text(resolve("icon.hover_color")))
        sheet.rule(*active_selectors(" .fsm-icon-svg-inline")).add("color", css_text(resolve("icon.active_color")))

        for item in items:
            if not item.icon_size:
                continue
            self._item_icon_size(sheet, item)

    def _item_icon_size(self, sheet: Stylesheet, item: MenuItem) -> None:
        scope = f'#fsm-menu .fsm-item[data-item-id="{item.id}"]'
        size = px(item.icon_size)
        sheet.rule(*glyphs(scope, FONT_GLYPHS), comment=f"Item {item.id} icon size").add("font-size", size)
        sheet.rule(*glyphs(scope, (".dashicons",))).add("font-size", size).add("width", size).add("height", size)
        sheet.rule(f"{scope} .fsm-icon-img", f"{scope} .fsm-icon-svg-inline svg").add("width", size).add(
            "height", size
        )

    def _labels(self, sheet: Stylesheet, resolve) -> None:
        label = sheet.rule(*LABEL, comment="Label")
        label.add("color", css_text(resolve("typography.text_color")))
        label.add("font-family", font_stack(resolve("typography.font_family")))
        label.add("font-size", px(resolve("typography.font_size")))
        label.add("font-weight", format_number(resolve("typography.font_weight")))
        label.add("line-height", format_number(resolve("typography.line_height")))
        label.add("text-align", resolve("typography.text_align"))
        label.add("white-space", "normal").add("word-wrap", "break-word").add("overflow-wrap", "break-word")
        label.add("width", "100%")

        sheet.rule(*item_state(":hover", " .fsm-label"), comment="Hover state for label").add(
            "color", css_text(resolve("typography.hover_text_color"))
        )
        sheet.rule(
            *item_state(":active", " .fsm-label"),
            *item_state(".active", " .fsm-label"),
            comment="Active state",
        ).add("color", css_text(resolve("typography.active_text_color")))

    def _animation(self, sheet: Stylesheet, resolve) -> None:
        side = resolve("position.side")
        sheet.rule(MENU, comment="Animation - Menu Container").add(
            "transition", menu_transition(resolve, side, css_text)
        )
        sheet.rule(COLLAPSED, comment="Collapsed State - Move entire menu").extend(collapsed_menu(resolve, side))
        sheet.rule(*NAV, comment="Nav always visible, animation handled by parent").extend(open_nav(resolve))
        sheet.rule(*COLLAPSED_NAV).extend(collapsed_nav(resolve))

    def _hide_on_mobile(self, sheet: Stylesheet, resolve) -> None:
        if not resolve("responsive.hide_on_mobile"):
            return
        block = sheet.media(f"(max-width: {px(resolve('responsive.breakpoint'))})")
        block.rule(MENU).add("display", "none")


def compile_stylesheet(tree: SettingsTree, items: Sequence[MenuItem] = ()) -> str:
    return StyleCompiler().compile(tree, items)


__all__ = ["StyleCompiler", "compile_stylesheet"]
