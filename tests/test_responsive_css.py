from typing import Any

from sidemenu.renderer.stylesheet import StyleCompiler, compile_stylesheet
from sidemenu.schemas.settings_tree import SettingsTree
from sidemenu.services.cascade import CascadeResolver


def _tree(*overrides: tuple[str, str, Any]) -> SettingsTree:
    resolver = CascadeResolver()
    tree = SettingsTree.defaults()
    for path, breakpoint, value in overrides:
        tree = resolver.set(tree, path, breakpoint, value)
    return tree


def _blocks(tree: SettingsTree) -> dict:
    return {block.query: block for block in StyleCompiler().build(tree).media_blocks()}


def _declarations(block, selector: str) -> dict[str, str]:
    found: dict[str, str] = {}
    for rule in block.rules:
        if selector in rule.selectors:
            for declaration in rule.declarations:
                found[declaration.prop] = declaration.value
    return found


def test_tablet_override_emits_only_tablet_block():
    tree = _tree(("container.width", "tablet", 100))
    css = compile_stylesheet(tree)

    assert "/* Tablet Responsive (max-width: 1024px) */" in css
    assert "@media (max-width: 1024px) {" in css
    assert "        width: 100px !important;" in css
    assert "(max-width: 768px)" not in css


def test_mobile_only_override():
    blocks = _blocks(_tree(("icon.size", "mobile", 18)))

    assert list(blocks) == ["(max-width: 768px)"]
    glyph = _declarations(blocks["(max-width: 768px)"], "#fsm-menu .fsm-icon i")
    assert glyph["font-size"] == "18px"


def test_mobile_block_includes_tablet_overrides():
    blocks = _blocks(_tree(("container.width", "tablet", 100), ("container.gap", "mobile", 4)))

    mobile = _declarations(blocks["(max-width: 768px)"], "#fsm-menu .fsm-nav")
    assert mobile["width"] == "100px"
    assert mobile["gap"] == "4px"
    assert "gap" not in _declarations(blocks["(max-width: 1024px)"], "#fsm-menu .fsm-nav")


def test_breakpoint_widths_come_from_settings():
    tree = _tree(("breakpoints.tablet", "desktop", 900), ("z_index", "tablet", 10))
    assert list(_blocks(tree)) == ["(max-width: 900px)"]


def test_partial_padding_takes_missing_sides_from_cascade():
    blocks = _blocks(_tree(("container.padding.top", "tablet", 4)))

    nav = _declarations(blocks["(max-width: 1024px)"], "#fsm-menu .fsm-nav")
    assert nav == {"padding": "4px 14px 14px 14px"}


def test_override_selectors_are_boosted():
    blocks = _blocks(_tree(("container.width", "tablet", 100)))

    nav_rule = next(rule for rule in blocks["(max-width: 1024px)"].rules if rule.declarations)
    assert nav_rule.selectors == ("#fsm-menu.fsm-menu .fsm-nav", "#fsm-menu .fsm-nav")


def test_hover_override_is_followed_by_active_state():
    css = compile_stylesheet(_tree(("item.hover_background", "tablet", "#000000")))
    media = css[css.index("@media") :]

    hover = media.index("#fsm-menu.fsm-menu .fsm-item:hover,")
    active = media.index("#fsm-menu.fsm-menu .fsm-item:active,")
    assert hover < active
    assert "background: #ffffff26 !important;" in media[active:]


def test_disabled_toggle_at_breakpoint():
    blocks = _blocks(_tree(("toggle.enabled", "mobile", False), ("toggle.width", "mobile", 50)))

    toggle = _declarations(blocks["(max-width: 768px)"], "#fsm-menu .fsm-toggle")
    assert toggle == {"display": "none"}


def test_toggle_enabled_only_at_breakpoint_is_shown():
    tree = _tree(("toggle.enabled", "desktop", False), ("toggle.enabled", "tablet", True))
    blocks = _blocks(tree)

    assert _declarations(blocks["(max-width: 1024px)"], "#fsm-menu .fsm-toggle")["display"] == "flex"


def test_side_change_resets_desktop_side():
    blocks = _blocks(_tree(("position.side", "tablet", "left")))
    block = blocks["(max-width: 1024px)"]

    menu = _declarations(block, "#fsm-menu.fsm-menu")
    assert menu["right"] == "auto"
    assert menu["left"] == "0px"
    assert menu["transition"] == "left 300ms ease-out"
    assert _declarations(block, "#fsm-menu.fsm-collapsed") == {"right": "auto", "left": "-120px"}
    assert _declarations(block, "#fsm-menu .fsm-toggle")["border-radius"] == "0 8px 8px 0"
    assert _declarations(block, "#fsm-menu .fsm-nav")["order"] == "1"


def test_container_corner_override_reemits_first_last():
    blocks = _blocks(_tree(("container.border_radius.top_left", "tablet", 20)))
    block = blocks["(max-width: 1024px)"]

    assert _declarations(block, "#fsm-menu .fsm-item:first-child")["border-radius"] == "20px 0px 8px 8px"
    assert _declarations(block, "#fsm-menu .fsm-item:only-child")["border-radius"] == "20px 0px 0px 16px"
    assert _declarations(block, "#fsm-menu .fsm-nav")["border-radius"] == "20px 0px 0px 16px"


def test_item_radius_mode_at_breakpoint_resets_corners():
    blocks = _blocks(_tree(("item.first_last_radius", "tablet", "item")))
    block = blocks["(max-width: 1024px)"]

    for state in ("first-child", "last-child", "only-child"):
        assert _declarations(block, f"#fsm-menu .fsm-item:{state}")["border-radius"] == "8px"


def test_empty_string_overrides_do_not_emit_blocks():
    tree = SettingsTree(base=SettingsTree.defaults().base, tablet={"container": {"width": ""}})
    assert StyleCompiler().build(tree).media_blocks() == []


def _index(block, selector: str, prop: str) -> int:
    return next(
        index
        for index, rule in enumerate(block.rules)
        if selector in rule.selectors and rule.get(prop) is not None
    )


def test_item_background_override_keeps_hover_and_active_states():
    block = _blocks(_tree(("item.background_color", "tablet", "#123456")))["(max-width: 1024px)"]

    base = _index(block, "#fsm-menu .fsm-item", "background")
    hover = _index(block, "#fsm-menu .fsm-item:hover", "background")
    active = _index(block, "#fsm-menu .fsm-item:active", "background")
    assert base < hover < active
    assert block.rules[hover].get("background") == "#ffffff1a"
    assert block.rules[active].get("background") == "#ffffff26"
    assert "#fsm-menu .fsm-item.active" in block.rules[active].selectors


def test_toggle_color_overrides_keep_hover_and_active_states():
    tree = _tree(("toggle.background_color", "mobile", "#222222"), ("toggle.icon_color", "mobile", "#333333"))
    block = _blocks(tree)["(max-width: 768px)"]

    base = _index(block, "#fsm-menu .fsm-toggle", "background")
    icon = _index(block, "#fsm-menu .fsm-toggle i", "color")
    hover = _index(block, "#fsm-menu .fsm-toggle:hover", "background")
    hover_icon = _index(block, "#fsm-menu .fsm-toggle:hover i", "color")
    active = _index(block, "#fsm-menu .fsm-toggle:active", "background")
    active_icon = _index(block, "#fsm-menu .fsm-toggle:active i", "color")
    assert base < hover < active
    assert icon < hover_icon < active_icon
    assert block.rules[active].get("background") == "#ffffff26"
    assert block.rules[active_icon].get("color") == "#ffffff"


def test_text_color_override_keeps_hover_state():
    block = _blocks(_tree(("typography.text_color", "tablet", "#999999")))["(max-width: 1024px)"]

    base = _index(block, "#fsm-menu .fsm-item", "color")
    hover = _index(block, "#fsm-menu .fsm-item:hover", "color")
    active = _index(block, "#fsm-menu .fsm-item:active", "color")
    assert base < hover < active
    assert block.rules[hover].get("color") == "#ffffff"
