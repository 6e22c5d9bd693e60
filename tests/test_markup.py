import pytest

from sidemenu.renderer.markup import render_icon, render_menu, safe_url, should_display
from sidemenu.schemas.menu_item import MenuItem
from sidemenu.schemas.settings_tree import SettingsTree
from sidemenu.services.cascade import CascadeResolver


def _set(tree: SettingsTree, path: str, breakpoint: str, value) -> SettingsTree:
    return CascadeResolver().set(tree, path, breakpoint, value)


def test_menu_markup_structure():
    items = [
        MenuItem(id=1, label="Home", url="/", icon="fa-home"),
        MenuItem(id=2, label="Docs", url="/docs", icon="fa-book", icon_size=30, target="_blank"),
    ]
    html = render_menu(SettingsTree.defaults(), items, version_timestamp=1700000000)

    assert html.startswith("<!-- FSM v2.0.0 t:1700000000 -->")
    assert '<div class="fsm-menu fsm-side-right" id="fsm-menu">' in html
    assert 'data-icon-open="fa-chevron-left"' in html
    assert '<a href="/" class="fsm-item fsm-icon-top" data-item-id="1" target="_self">' in html
    assert 'target="_blank" style="--fsm-icon-size: 30px;"' in html
    assert '<i class="fas fa-book"></i>' in html
    assert html.endswith("</nav>\n</div>")


def test_labels_and_urls_are_escaped():
    items = [MenuItem(id=1, label="<b>Tom & Jerry</b>", url='/x"onmouseover="alert(1)')]
    html = render_menu(SettingsTree.defaults(), items)

    assert "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;" in html
    assert 'href="/x&quot;onmouseover=&quot;alert(1)"' in html
    assert "t:0 -->" in html


def test_script_urls_fall_back_to_hash():
    items = [
        MenuItem(id=1, label="Bad", url="javascript:alert(document.cookie)"),
        MenuItem(id=2, label="Sneaky", url=" Java\tScript:alert(1)"),
        MenuItem(id=3, label="Mail", url="mailto:hi@example.com"),
    ]
    html = render_menu(SettingsTree.defaults(), items)

    assert "javascript" not in html.lower()
    assert '<a href="#" class="fsm-item fsm-icon-top" data-item-id="1"' in html
    assert '<a href="#" class="fsm-item fsm-icon-top" data-item-id="2"' in html
    assert 'href="mailto:hi@example.com"' in html


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/a", "https://example.com/a"),
        ("HTTP://example.com", "HTTP://example.com"),
        ("tel:+15550100", "tel:+15550100"),
        ("/about", "/about"),
        ("#section", "#section"),
        ("//cdn.example/x", "//cdn.example/x"),
        ("", "#"),
        ("   ", "#"),
        ("data:text/html,<script>", "#"),
        ("vbscript:msgbox(1)", "#"),
        ("\x01javascript:alert(1)", "#"),
    ],
)
def test_safe_url(url, expected):
    assert safe_url(url) == expected


def test_toggle_is_omitted_only_when_disabled_everywhere():
    disabled = _set(SettingsTree.defaults(), "toggle.enabled", "desktop", False)
    assert "fsm-toggle" not in render_menu(disabled, [])

    mobile_only = _set(disabled, "toggle.enabled", "mobile", True)
    assert 'id="fsm-toggle"' in render_menu(mobile_only, [])


def test_icon_variants():
    assert render_icon(MenuItem(id=1, icon_type="dashicons", icon="dashicons-admin-home")) == (
        '<span class="dashicons dashicons-admin-home"></span>'
    )
    assert render_icon(MenuItem(id=1, icon_type="image", icon_url="/icons/a.svg")) == (
        '<img src="/icons/a.svg" alt="" class="fsm-icon-img fsm-icon-svg">'
    )
    assert render_icon(MenuItem(id=1, icon_type="image", icon_url="/icons/a.png")) == (
        '<img src="/icons/a.png" alt="" class="fsm-icon-img">'
    )
    assert render_icon(MenuItem(id=1, icon="fab fa-github")) == '<i class="fab fa-github"></i>'
    assert render_icon(MenuItem(id=1)) == '<i class="fas fa-link"></i>'


def test_visibility_flags_apply_in_all_mode():
    tree = _set(SettingsTree.defaults(), "visibility.show_on_archive", "desktop", False)

    assert should_display(tree, "home") is True
    assert should_display(tree, "archive") is False
    assert should_display(tree, "page") is True

    include_mode = _set(tree, "visibility.mode", "desktop", "include")
    assert should_display(include_mode, "archive") is True
