"""Approximate a target color as a CSS ``filter`` chain.

Monochrome SVG icons are rendered as ``<img>`` tags, so their fill cannot be
set with ``color``. Starting from pure black, the chain
``invert -> sepia -> saturate -> hue-rotate -> brightness`` lands close to
the requested color. The mapping is deterministic and cheap, not a
perceptual solver.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from ..exceptions import MalformedColorError
from .numbers import format_number, round_half_up

WHITE_FILTER = "brightness(0) saturate(100%) invert(1)"
BLACK_FILTER = "brightness(0) saturate(100%)"
FALLBACK_FILTER = WHITE_FILTER

_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")
_RGB_PATTERN = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)")


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    h: int
    s: int
    l: int  # noqa: E741


def _parse_hex(value: str) -> RGB:
    digits = value[1:]
    if not digits or not _HEX_DIGITS.match(digits):
        raise MalformedColorError(f"Not a hex color: {value!r}")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) >= 6:
        # 8-digit colors carry alpha in the last two digits; only RGB matters here
        digits = digits[:6]
    else:
        raise MalformedColorError(f"Unsupported hex length: {value!r}")
    return RGB(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def parse_color(color: str) -> RGB:
    if not isinstance(color, str):
        raise MalformedColorError(f"Color must be a string, got {type(color).__name__}")
    value = color.strip()
    if value.startswith("#"):
        return _parse_hex(value)
    match = _RGB_PATTERN.search(value)
    if match is None:
        raise MalformedColorError(f"Unrecognized color: {color!r}")
    r, g, b = (min(int(channel), 255) for channel in match.groups())
    return RGB(r, g, b)


def rgb_to_hsl(rgb: RGB) -> HSL:
    r, g, b = rgb.r / 255, rgb.g / 255, rgb.b / 255
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    if high == low:
        hue = saturation = 0.0
    else:
        delta = high - low
        saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            hue = (g - b) / delta + (6 if g < b else 0)
        elif high == g:
            hue = (b - r) / delta + 2
        else:
            hue = (r - g) / delta + 4
        hue /= 6

    return HSL(
        round_half_up(hue * 360),
        round_half_up(saturation * 100),
        round_half_up(lightness * 100),
    )


def hsl_to_filter(hsl: HSL) -> str:
    h, s, l = hsl  # noqa: E741
    if s == 0:
        return f"brightness(0) saturate(100%) invert({l}%) brightness({format_number(l / 100)})"

    invert = round_half_up((1 - l / 100) * 100) if l > 50 else l
    saturate = min(round_half_up(s * 20), 2000)
    hue_rotate = (h - 30 + 360) % 360
    brightness = 0.5 + l / 200 if l > 50 else l / 50
    brightness = max(0.5, min(2.0, brightness))
    return (
        f"brightness(0) saturate(100%) invert({invert}%) sepia(100%) "
        f"saturate({saturate}%) hue-rotate({hue_rotate}deg) brightness({format_number(brightness)})"
    )


def color_to_filter(color: str) -> str:
    """Return a filter chain for ``color``; unparseable input yields the white filter."""
    try:
        rgb = parse_color(color)
    except MalformedColorError:
        return FALLBACK_FILTER

    if rgb.r > 250 and rgb.g > 250 and rgb.b > 250:
        return WHITE_FILTER
    if rgb.r < 10 and rgb.g < 10 and rgb.b < 10:
        return BLACK_FILTER
    return hsl_to_filter(rgb_to_hsl(rgb))


__all__ = [
    "RGB",
    "HSL",
    "WHITE_FILTER",
    "BLACK_FILTER",
    "FALLBACK_FILTER",
    "parse_color",
    "rgb_to_hsl",
    "hsl_to_filter",
    "color_to_filter",
]
