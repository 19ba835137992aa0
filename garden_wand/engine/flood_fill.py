"""Tolerance flood fill — the pixel mask behind every wand click.

4-connected fill from a seed pixel, comparing every candidate against the
seed's color. Uses an explicit LIFO stack so large contiguous regions
never hit the interpreter's recursion limit.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from garden_wand.engine.mask import PixelMask
from garden_wand.engine.raster import RasterAccessor
from garden_wand.engine.result import Failure, FailureKind

logger = logging.getLogger(__name__)

MAX_TOLERANCE = 255


def colors_similar(
    a: tuple[int, ...],
    b: tuple[int, ...],
    tolerance: int,
) -> bool:
    """Per-channel RGB match within ``tolerance``. Alpha is ignored."""
    return (
        abs(a[0] - b[0]) <= tolerance
        and abs(a[1] - b[1]) <= tolerance
        and abs(a[2] - b[2]) <= tolerance
    )


def check_fill_params(tolerance: int, max_pixels: int) -> None:
    if not 0 <= tolerance <= MAX_TOLERANCE:
        raise ValueError(f"tolerance must be in [0, {MAX_TOLERANCE}], got {tolerance}")
    if max_pixels < 1:
        raise ValueError(f"max_pixels must be positive, got {max_pixels}")


def seed_in_bounds(raster: RasterAccessor, x: int, y: int) -> bool:
    return 0 <= x < raster.width and 0 <= y < raster.height


def flood_fill(
    raster: RasterAccessor,
    seed_x: int,
    seed_y: int,
    tolerance: int,
    max_pixels: int,
    exclusion_mask: NDArray[np.bool_] | None = None,
) -> PixelMask | Failure:
    """Fill from (seed_x, seed_y) over pixels similar to the seed color.

    Stops after ``max_pixels`` pixels. When similar pixels were still
    waiting, the mask is a valid but partial region flagged ``truncated``;
    a region that fills the budget exactly is complete. Neighbors are pushed
    left, right, up, down, so for a given input the retained subset is
    always the same.
    """
    if raster is None:
        raise TypeError("flood_fill requires a raster")
    check_fill_params(tolerance, max_pixels)

    w, h = raster.width, raster.height
    if not seed_in_bounds(raster, seed_x, seed_y):
        return Failure(FailureKind.OUT_OF_BOUNDS, f"Seed ({seed_x}, {seed_y}) is outside the {w}x{h} image")
    if exclusion_mask is not None and exclusion_mask[seed_y, seed_x]:
        return Failure(FailureKind.OUT_OF_BOUNDS, f"Seed ({seed_x}, {seed_y}) lies inside an existing area")

    target = raster.pixel_at(seed_x, seed_y)
    stack: list[tuple[int, int]] = [(seed_x, seed_y)]
    visited: set[int] = set()
    filled: set[int] = set()

    while stack and len(filled) < max_pixels:
        x, y = stack.pop()
        if x < 0 or x >= w or y < 0 or y >= h:
            continue
        k = x + y * w
        if k in visited:
            continue
        visited.add(k)

        if exclusion_mask is not None and exclusion_mask[y, x]:
            continue
        if not colors_similar(raster.pixel_at(x, y), target, tolerance):
            continue

        filled.add(k)
        stack.append((x - 1, y))
        stack.append((x + 1, y))
        stack.append((x, y - 1))
        stack.append((x, y + 1))

    truncated = len(filled) >= max_pixels and any(
        0 <= x < w
        and 0 <= y < h
        and (x + y * w) not in visited
        and not (exclusion_mask is not None and exclusion_mask[y, x])
        and colors_similar(raster.pixel_at(x, y), target, tolerance)
        for x, y in stack
    )
    if truncated:
        logger.warning(
            "Flood fill from (%d, %d) hit the %d pixel budget; region is partial",
            seed_x,
            seed_y,
            max_pixels,
        )
    return PixelMask(w, h, frozenset(filled), truncated=truncated)
