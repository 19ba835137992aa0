"""Extraction configuration — every threshold the wand engine uses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionConfig:
    """Tunable thresholds for one extraction.

    Defaults are sized for full-resolution reference images. Tests and
    small rasters override the hole thresholds.
    """

    # RDP simplification epsilon, pixel units
    outer_epsilon: float = 2.0
    hole_epsilon: float = 2.0

    # Contours longer than this are pre-sampled before RDP
    max_simplify_points: int = 2000

    # Tracing safety cap: factor × mask size steps
    trace_step_factor: int = 4

    # Hole detection
    detect_holes: bool = True
    min_component_pixels: int = 20  # boundary-candidate component, noise floor
    min_hole_pixels: int = 500  # expanded hole region
    max_hole_pixels: int = 200_000  # expansion cap, larger = not a hole
    exterior_pixel_cap: int = 500_000  # corner flood, also capped at half the raster

    def __post_init__(self) -> None:
        if self.outer_epsilon < 0 or self.hole_epsilon < 0:
            raise ValueError("Simplification epsilon must be non-negative")
        if self.max_simplify_points < 3:
            raise ValueError("max_simplify_points must be at least 3")
        if self.trace_step_factor < 1:
            raise ValueError("trace_step_factor must be at least 1")


DEFAULT_MAX_PIXELS = 200_000
