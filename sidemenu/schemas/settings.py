"""Typed leaf schema for the menu settings tree.

Each desktop group is a pydantic model whose field defaults are the factory
defaults. The models are used two ways: ``MenuSettings().model_dump()`` is
the complete default desktop layer, and the field annotations give every
leaf path its type so a single value can be validated at the boundary.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Literal, Sequence, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..exceptions import InvalidPathError, InvalidValueError
from ..utils.tree import split_path

_COLOR_PATTERN = re.compile(
    r"^(#[0-9A-Fa-f]{3,8}|(rgb|rgba|hsl|hsla)\([0-9.,%\s/+-]*\)|[A-Za-z]+)$"
)
_UNSAFE_TEXT = re.compile(r"[;{}<>]")


def _check_color(value: str) -> str:
    text = value.strip()
    if not _COLOR_PATTERN.match(text):
        raise ValueError("expected a hex, rgb(a), hsl(a) or keyword color")
    return text


def _check_css_text(value: str) -> str:
    if _UNSAFE_TEXT.search(value):
        raise ValueError("must not contain ; { } < or >")
    return value.strip()


Number = Union[int, float]
Color = Annotated[str, AfterValidator(_check_color)]
CssText = Annotated[str, AfterValidator(_check_css_text)]


class Breakpoint(str, Enum):
    desktop = "desktop"
    tablet = "tablet"
    mobile = "mobile"


OVERRIDE_BREAKPOINTS = (Breakpoint.tablet, Breakpoint.mobile)


class _Group(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Position(_Group):
    side: Literal["left", "right"] = "right"
    vertical: Number = 50
    vertical_unit: Literal["%", "px"] = "%"
    margin: Number = 0


class BoxSides(_Group):
    top: Number = 14
    right: Number = 14
    bottom: Number = 14
    left: Number = 14


class ItemPadding(BoxSides):
    top: Number = 12
    right: Number = 12
    bottom: Number = 12
    left: Number = 12


class Corners(_Group):
    top_left: Number = 16
    top_right: Number = 0
    bottom_right: Number = 0
    bottom_left: Number = 16


class BoxShadow(_Group):
    x: Number = -8
    y: Number = 0
    blur: Number = 32
    spread: Number = 0
    color: Color = "#00000026"


class Container(_Group):
    background_color: Color = "#1A1A18"
    width: Number = 120
    gap: Number = 0
    padding: BoxSides = Field(default_factory=BoxSides)
    border_radius: Corners = Field(default_factory=Corners)
    box_shadow: BoxShadow = Field(default_factory=BoxShadow)


class Typography(_Group):
    font_family: CssText = "inherit"
    font_size: Number = 11
    font_weight: int = 500
    line_height: Number = 1.4
    text_color: Color = "#ffffffe6"
    hover_text_color: Color = "#ffffff"
    active_text_color: Color = "#ffffff"
    text_align: Literal["left", "center", "right"] = "center"


class Icon(_Group):
    size: Number = 22
    color: Color = "#ffffffd9"
    hover_color: Color = "#ffffff"
    active_color: Color = "#ffffff"
    spacing: Number = 8
    position: Literal["top", "left"] = "top"
    align: Literal["left", "center", "right"] = "center"


class Item(_Group):
    padding: ItemPadding = Field(default_factory=ItemPadding)
    border_radius: Number = 8
    first_last_radius: Literal["container", "item", "none"] = "container"
    background_color: Color = "transparent"
    hover_background: Color = "#ffffff1a"
    active_background: Color = "#ffffff26"
    transition_duration: Number = 200


class Toggle(_Group):
    enabled: bool = True
    icon_open: CssText = "fa-chevron-left"
    icon_closed: CssText = "fa-chevron-right"
    icon_size: Number = 14
    icon_rotate: Number = 0
    background_color: Color = "#1A1A18"
    icon_color: Color = "#ffffff"
    hover_background: Color = "#ffffff1a"
    hover_icon_color: Color = "#ffffff"
    active_background: Color = "#ffffff26"
    active_icon_color: Color = "#ffffff"
    size: Number = 40
    width: Number = 28
    border_radius: Number = 8
    align: Literal["top", "middle", "bottom"] = "middle"


class Animation(_Group):
    duration: Number = 300
    easing: Literal["ease", "ease-in", "ease-out", "linear"] = "ease-out"
    type: Literal["slide", "fade", "scale"] = "slide"


class LegacyHover(_Group):
    background_color: Color = "#ffffff1a"
    text_color: Color = "#ffffff"
    scale: Number = 1.0
    transition_duration: Number = 200


class Responsive(_Group):
    hide_on_mobile: bool = False
    breakpoint: Number = 768
    auto_collapse_mobile: bool = True


class Visibility(_Group):
    mode: Literal["all", "include", "exclude"] = "all"
    show_on_home: bool = True
    show_on_archive: bool = True
    show_on_single: bool = True


class Breakpoints(_Group):
    tablet: Number = 1024
    mobile: Number = 768


class MenuSettings(_Group):
    position: Position = Field(default_factory=Position)
    container: Container = Field(default_factory=Container)
    typography: Typography = Field(default_factory=Typography)
    icon: Icon = Field(default_factory=Icon)
    item: Item = Field(default_factory=Item)
    toggle: Toggle = Field(default_factory=Toggle)
    animation: Animation = Field(default_factory=Animation)
    hover: LegacyHover = Field(default_factory=LegacyHover)
    responsive: Responsive = Field(default_factory=Responsive)
    visibility: Visibility = Field(default_factory=Visibility)
    z_index: int = 9999
    breakpoints: Breakpoints = Field(default_factory=Breakpoints)


def _collect(model: type[BaseModel], prefix: tuple[str, ...] = ()) -> tuple[dict, set]:
    leaves: dict[tuple[str, ...], Any] = {}
    groups: set[tuple[str, ...]] = set()
    for name, info in model.model_fields.items():
        parts = prefix + (name,)
        annotation = info.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            groups.add(parts)
            child_leaves, child_groups = _collect(annotation, parts)
            leaves.update(child_leaves)
            groups.update(child_groups)
        else:
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            leaves[parts] = annotation
    return leaves, groups


LEAF_TYPES, GROUP_PATHS = _collect(MenuSettings)


def default_settings() -> dict[str, Any]:
    """Complete desktop layer with factory defaults (a fresh copy every call)."""
    return MenuSettings().model_dump()


def leaf_parts(path: str | Sequence[str]) -> tuple[str, ...]:
    """Resolve ``path`` to its parts, raising if it is not a schema leaf."""
    try:
        parts = split_path(path)
    except ValueError:
        raise InvalidPathError(str(path), reason="empty path") from None
    if parts not in LEAF_TYPES:
        dotted = ".".join(parts)
        if parts in GROUP_PATHS:
            raise InvalidPathError(dotted, reason="addresses a group, not a leaf")
        raise InvalidPathError(dotted)
    return parts


@lru_cache(maxsize=None)
def _adapter(parts: tuple[str, ...]) -> TypeAdapter:
    return TypeAdapter(LEAF_TYPES[parts])


def validate_leaf(path: str | Sequence[str], value: Any) -> Any:
    """Validate and coerce one leaf value; returns the coerced value."""
    parts = leaf_parts(path)
    try:
        return _adapter(parts).validate_python(value)
    except ValidationError as exc:
        errors = exc.errors()
        reason = errors[0]["msg"] if errors else str(exc)
        raise InvalidValueError(".".join(parts), value, reason=reason) from None


__all__ = [
    "Breakpoint",
    "OVERRIDE_BREAKPOINTS",
    "Number",
    "Color",
    "CssText",
    "MenuSettings",
    "Position",
    "Container",
    "Typography",
    "Icon",
    "Item",
    "Toggle",
    "Animation",
    "LegacyHover",
    "Responsive",
    "Visibility",
    "Breakpoints",
    "LEAF_TYPES",
    "GROUP_PATHS",
    "default_settings",
    "leaf_parts",
    "validate_leaf",
]
