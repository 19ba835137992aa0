"""Moore-Neighbor boundary tracing — pixel mask to ordered closed contour."""

from __future__ import annotations

import logging

from garden_wand.engine.mask import PixelMask
from garden_wand.engine.result import Failure, FailureKind, GridPoint

logger = logging.getLogger(__name__)

# Clockwise in image coordinates (y grows downward), starting east.
MOORE_OFFSETS: tuple[GridPoint, ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

# Added to the direction a neighbor was found in: resume the scan just
# past the pixel we arrived from.
_BACKTRACK = 5


def find_start_pixel(mask: PixelMask) -> GridPoint | None:
    """Topmost-leftmost pixel whose upper neighbor is not filled.

    With flat indices ``x + y * width`` that is simply the smallest index:
    anything above it has a smaller index and so cannot be in the mask.
    """
    if not mask.indices:
        return None
    return mask.point(min(mask.indices))


def trace_boundary(mask: PixelMask, step_factor: int = 4) -> list[GridPoint] | Failure:
    """Trace the outer boundary of ``mask`` clockwise from its start pixel.

    Returns the contour without repeating the start point. An isolated
    pixel yields a one-point contour. Tracing stops after
    ``step_factor * len(mask)`` steps; the partial contour is returned.
    """
    start = find_start_pixel(mask)
    if start is None:
        return Failure(FailureKind.EMPTY_MASK, "Cannot trace an empty mask")

    contour: list[GridPoint] = [start]
    current = start
    direction = 0
    max_steps = step_factor * len(mask)

    for _ in range(max_steps):
        cx, cy = current
        found: GridPoint | None = None
        for i in range(8):
            d = (direction + i) % 8
            dx, dy = MOORE_OFFSETS[d]
            if mask.contains_point(cx + dx, cy + dy):
                found = (cx + dx, cy + dy)
                direction = (d + _BACKTRACK) % 8
                break

        if found is None:
            # Isolated pixel
            return contour
        if found == start and len(contour) >= 2:
            return contour

        contour.append(found)
        current = found

    logger.warning(
        "Boundary trace stopped at the %d step cap with %d points",
        max_steps,
        len(contour),
    )
    return contour
