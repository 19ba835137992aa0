"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

H = TypeVar("H", bound=Sequence[Sequence[float]])


def point_in_polygon(point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
    """Even-odd ray casting. The polygon is implicitly closed."""
    px, py = point[0], point[1]
    n = len(polygon)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def hole_contains_hole(outer: Sequence[Sequence[float]], inner: Sequence[Sequence[float]]) -> bool:
    """True when ``inner``'s first vertex lies inside ``outer``."""
    return point_in_polygon(inner[0], outer)


def filter_nested_holes(holes: Sequence[H]) -> list[H]:
    """Keep only top-level holes.

    Under even-odd filling a hole inside another hole is filled back in,
    so any hole contained in another one is dropped.
    """
    if len(holes) <= 1:
        return list(holes)
    return [
        hole
        for hole in holes
        if not any(other is not hole and other != hole and hole_contains_hole(other, hole) for other in holes)
    ]
