"""
Hit-test geometry shared by template drawing and pointer interaction.
"""

import math


def is_between(value: float, low: float, high: float) -> bool:
    return low <= value <= high


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((x1 - x2) ** 2 + (y1 - y2) ** 2)


def is_in_rectangle(
    x: float, y: float, rx: float, ry: float, rw: float, rh: float
) -> bool:
    """
    Check whether a point lies in an axis-aligned rectangle.

    Both intervals are closed: points on the border count as inside.
    """
    return is_between(x, rx, rx + rw) and is_between(y, ry, ry + rh)


def is_in_circle(x: float, y: float, cx: float, cy: float, cr: float) -> bool:
    """
    Check whether a point lies in a circle.

    The interval is open: a point exactly ``cr`` away from the center is
    outside.
    """
    return distance(x, y, cx, cy) < cr


__all__ = [
    "distance",
    "is_between",
    "is_in_circle",
    "is_in_rectangle",
]
