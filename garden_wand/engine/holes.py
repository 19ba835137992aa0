"""Hole detection — enclosed unfilled regions inside a flood-filled mask.

Islands in a pond, a patio inside a lawn: pixels the fill did not claim
but which the filled region surrounds on every side.

Steps:
1. Candidates — unfilled pixels 4-adjacent to the mask.
2. Exterior marking — flood from the four image corners, stopping at the
   mask. Candidates reached this way border the open background.
3. Remaining candidates are grouped into 4-connected components; tiny
   components are boundary noise.
4. Each surviving component is expanded into its whole unfilled region.
   Regions that reach the image border or exceed the expansion cap are
   not enclosed holes.
5. Survivors above the size floor are traced, simplified and
   deduplicated by first vertex.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from garden_wand.engine.config import ExtractionConfig
from garden_wand.engine.mask import PixelMask
from garden_wand.engine.result import Failure, GridPoint
from garden_wand.engine.tracing import trace_boundary
from garden_wand.utils.contour import simplify_closed

logger = logging.getLogger(__name__)


class Expansion(enum.Enum):
    ENCLOSED = "enclosed"
    TOUCHES_BORDER = "touches_border"
    TOO_LARGE = "too_large"


@dataclass
class HoleReport:
    """Hole contours found in one mask, before nested-hole filtering."""

    holes: list[list[GridPoint]] = field(default_factory=list)
    # An enclosed region was dropped because it outgrew the expansion cap
    budget_exceeded: bool = False
    # Corner flood stopped at its cap before reaching every candidate
    exterior_capped: bool = False


def _neighbors4(k: int, w: int, h: int) -> list[int]:
    x, y = k % w, k // w
    out = []
    if x > 0:
        out.append(k - 1)
    if x < w - 1:
        out.append(k + 1)
    if y > 0:
        out.append(k - w)
    if y < h - 1:
        out.append(k + w)
    return out


def collect_hole_candidates(mask: PixelMask) -> set[int]:
    """Unfilled pixels sharing an edge with a filled pixel."""
    w, h = mask.width, mask.height
    filled = mask.indices
    candidates: set[int] = set()
    for k in filled:
        for n in _neighbors4(k, w, h):
            if n not in filled:
                candidates.add(n)
    return candidates


def mark_exterior(
    candidates: set[int],
    mask: PixelMask,
    max_pixels: int,
) -> tuple[set[int], bool]:
    """Candidates reachable from the image corners without crossing the mask.

    Returns the exterior candidates and whether the corner flood hit
    ``max_pixels`` with work left.
    """
    w, h = mask.width, mask.height
    filled = mask.indices
    corners = {0, w - 1, (h - 1) * w, (h - 1) * w + w - 1}
    stack = sorted(corners)
    visited: set[int] = set()
    exterior: set[int] = set()
    n = 0

    while stack and n < max_pixels and len(exterior) < len(candidates):
        k = stack.pop()
        if k in visited or k in filled:
            continue
        visited.add(k)
        n += 1
        if k in candidates:
            exterior.add(k)
        stack.extend(_neighbors4(k, w, h))

    capped = n >= max_pixels and bool(stack)
    return exterior, capped


def group_components(pixels: set[int], w: int, h: int) -> list[set[int]]:
    """4-connected components of ``pixels``, ordered by smallest index."""
    remaining = set(pixels)
    components: list[set[int]] = []

    for start in sorted(pixels):
        if start not in remaining:
            continue
        component: set[int] = set()
        stack = [start]
        while stack:
            k = stack.pop()
            if k not in remaining:
                continue
            remaining.discard(k)
            component.add(k)
            stack.extend(_neighbors4(k, w, h))
        components.append(component)

    return components


def expand_region(mask: PixelMask, start: int, max_pixels: int) -> tuple[set[int], Expansion]:
    """Flood every unfilled pixel 4-connected to ``start``.

    Stops early once the region grows past ``max_pixels``; the returned
    pixels are then partial. A capped region that already reached the
    border reports TOUCHES_BORDER, since it is exterior either way.
    """
    w, h = mask.width, mask.height
    filled = mask.indices
    region: set[int] = set()
    stack = [start]
    touches_border = False

    while stack:
        if len(region) > max_pixels:
            return region, Expansion.TOUCHES_BORDER if touches_border else Expansion.TOO_LARGE
        k = stack.pop()
        if k in region or k in filled:
            continue
        region.add(k)
        x, y = k % w, k // w
        if x == 0 or y == 0 or x == w - 1 or y == h - 1:
            touches_border = True
        stack.extend(_neighbors4(k, w, h))

    if len(region) > max_pixels and not touches_border:
        return region, Expansion.TOO_LARGE
    return region, Expansion.TOUCHES_BORDER if touches_border else Expansion.ENCLOSED


def detect_holes(mask: PixelMask, config: ExtractionConfig | None = None) -> HoleReport:
    """Find, trace and simplify the enclosed holes of ``mask``."""
    config = config or ExtractionConfig()
    w, h = mask.width, mask.height
    report = HoleReport()

    candidates = collect_hole_candidates(mask)
    if not candidates:
        return report

    exterior_cap = min(config.exterior_pixel_cap, (w * h) // 2)
    exterior, report.exterior_capped = mark_exterior(candidates, mask, exterior_cap)
    interior = candidates - exterior
    components = group_components(interior, w, h)

    logger.debug(
        "Holes: %d candidates, %d exterior, %d interior components",
        len(candidates),
        len(exterior),
        len(components),
    )

    claimed: set[int] = set()
    seen_starts: set[GridPoint] = set()

    for component in components:
        if len(component) < config.min_component_pixels:
            continue
        if not claimed.isdisjoint(component):
            continue

        region, status = expand_region(mask, min(component), config.max_hole_pixels)
        claimed |= region

        if status is Expansion.TOO_LARGE:
            report.budget_exceeded = True
            logger.warning("Hole expansion exceeded %d pixels; dropped", config.max_hole_pixels)
            continue
        if status is Expansion.TOUCHES_BORDER:
            continue
        if len(region) < config.min_hole_pixels:
            continue

        hole_mask = PixelMask(w, h, frozenset(region))
        contour = trace_boundary(hole_mask, config.trace_step_factor)
        if isinstance(contour, Failure):
            continue
        simplified = simplify_closed(contour, config.hole_epsilon, config.max_simplify_points)
        if len(simplified) < 3:
            continue
        if simplified[0] in seen_starts:
            continue
        seen_starts.add(simplified[0])
        report.holes.append(simplified)

    logger.debug("Holes: %d kept", len(report.holes))
    return report
