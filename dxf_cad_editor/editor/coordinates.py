"""
Coordinate grammar of the command line.

    x,y            absolute
    @dx,dy         relative to the base point
    @dist<angle    polar, relative to the base point (angle in degrees)

Whitespace anywhere in the input is ignored. A relative entry without a base
point is taken relative to the origin.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from ezdxf.math import Vec2

_NUMBER = r"([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
_POLAR = re.compile(rf"^@{_NUMBER}<{_NUMBER}$")
_RELATIVE = re.compile(rf"^@{_NUMBER},{_NUMBER}$")
_ABSOLUTE = re.compile(rf"^{_NUMBER},{_NUMBER}$")
_BARE_NUMBER = re.compile(rf"^{_NUMBER}$")


class CoordinateError(ValueError):
    """Typed text is not a valid coordinate."""


def _compact(text: str) -> str:
    return re.sub(r"\s+", "", text)


def parse_coordinate(text: str, base_point: Optional[Vec2] = None) -> Vec2:
    """
    Parse typed coordinate input into a world point.

    Args:
        text: User input, e.g. ``"10,5"``, ``"@3,4"`` or ``"@5<90"``
        base_point: Point relative and polar input is measured from

    Returns:
        The resulting point

    Raises:
        CoordinateError: text matches none of the three forms

    Example:
        parse_coordinate("@10<90", Vec2(1, 1))  # Vec2(1, 11)
    """
    s = _compact(text)
    base = base_point if base_point is not None else Vec2()

    m = _POLAR.match(s)
    if m:
        distance = float(m.group(1))
        angle = math.radians(float(m.group(2)))
        return Vec2(base.x + distance * math.cos(angle), base.y + distance * math.sin(angle))

    m = _RELATIVE.match(s)
    if m:
        return Vec2(base.x + float(m.group(1)), base.y + float(m.group(2)))

    m = _ABSOLUTE.match(s)
    if m:
        return Vec2(float(m.group(1)), float(m.group(2)))

    raise CoordinateError(f"not a coordinate: {text!r}")


def is_coordinate_input(text: str) -> bool:
    s = _compact(text)
    return any(p.match(s) for p in (_POLAR, _RELATIVE, _ABSOLUTE))


def parse_number(text: str) -> Optional[float]:
    """A bare decimal number, or None."""
    m = _BARE_NUMBER.match(_compact(text))
    return float(m.group(1)) if m else None


def format_point(point: Vec2, decimals: int = 4) -> str:
    return f"{point.x:.{decimals}f}, {point.y:.{decimals}f}"


def angle_degrees(start: Vec2, end: Vec2) -> float:
    """Direction of start -> end in degrees, in [0, 360)."""
    angle = math.degrees(math.atan2(end.y - start.y, end.x - start.x))
    return angle + 360.0 if angle < 0 else angle
