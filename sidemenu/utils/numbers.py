from __future__ import annotations

import math
from typing import Any, Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round halves away from zero (``round(2.5) == 3``), unlike :func:`round`."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def coerce_number(value: Any, default: Number = 0) -> Number:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default
    return default


def format_number(value: Any) -> str:
    """Print a number the way CSS authors write it: ``1.0 -> "1"``, ``0.5 -> "0.5"``."""
    number = coerce_number(value)
    if isinstance(number, int):
        return str(number)
    if number.is_integer():
        return str(int(number))
    return f"{number:.14g}"


__all__ = ["Number", "round_half_up", "coerce_number", "format_number"]
