"""CSS value formatting helpers"""

import math
from typing import Optional, Sequence

from protoplay.models.enums import FillType
from protoplay.models.snapshot import Fill


def format_number(value: float) -> str:
    """
    Render a number the way a browser stringifies it.

    Integral values drop the fractional part (100.0 -> "100").
    """
    if value == 0:
        return "0"  # also folds -0.0
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def px(value: float) -> str:
    return f"{format_number(value)}px"


def round_half_up(value: float) -> int:
    """Math.round semantics (0.5 rounds toward +inf)"""
    return int(math.floor(value + 0.5))


def fill_to_rgba(fill: Fill) -> Optional[str]:
    """
    rgba() string of a SOLID fill with color.

    Alpha is the fill opacity; absent or zero opacity renders as 1.
    Returns None for any other fill.
    """
    if fill.type != FillType.SOLID or fill.color is None:
        return None
    r = round_half_up(fill.color.r * 255)
    g = round_half_up(fill.color.g * 255)
    b = round_half_up(fill.color.b * 255)
    alpha = fill.opacity or 1
    return f"rgba({r}, {g}, {b}, {format_number(alpha)})"


def first_fill_rgba(fills: Optional[Sequence[Fill]]) -> Optional[str]:
    if not fills:
        return None
    return fill_to_rgba(fills[0])


def translate(dx: float, dy: float) -> str:
    return f"translate({px(dx)}, {px(dy)})"
