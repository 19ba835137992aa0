"""Extraction results — a Region on success, a Failure value otherwise."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import Polygon

Point = tuple[float, float]
GridPoint = tuple[int, int]


class FailureKind(str, enum.Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NO_REGION_FOUND = "no_region_found"
    DEGENERATE_REGION = "degenerate_region"
    # Raised by the boundary tracer only; the extractor never lets it escape.
    EMPTY_MASK = "empty_mask"


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class Region:
    """Outer boundary plus top-level holes, in raster pixel coordinates.

    ``budget_exceeded`` marks a best-effort result: the flood fill or a
    hole expansion hit its pixel cap, so the region is likely incomplete.
    """

    outer: tuple[Point, ...]
    holes: tuple[tuple[Point, ...], ...] = field(default_factory=tuple)
    budget_exceeded: bool = False
    pixel_count: int = 0

    def to_shapely(self) -> Polygon:
        return Polygon(self.outer, [list(h) for h in self.holes])

    @property
    def area(self) -> float:
        return float(self.to_shapely().area)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outer": [list(p) for p in self.outer],
            "holes": [[list(p) for p in hole] for hole in self.holes],
            "budget_exceeded": self.budget_exceeded,
            "pixel_count": self.pixel_count,
        }


ExtractionResult = Region | Failure

