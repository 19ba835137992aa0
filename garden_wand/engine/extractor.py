"""Region extractor — raster + seed + tolerance → Region or Failure.

Composes the wand stages in a fixed order:
exclusion mask → flood fill → boundary trace → simplify → holes → nested filter.
Every stage reports failures as values; this is the one place they become
the public result.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

import numpy as np
from numpy.typing import NDArray

from garden_wand.engine.cache import CacheKey, ExtractionCache
from garden_wand.engine.config import DEFAULT_MAX_PIXELS, ExtractionConfig
from garden_wand.engine.exclusion import build_exclusion_mask, exclusion_digest
from garden_wand.engine.flood_fill import check_fill_params, flood_fill, seed_in_bounds
from garden_wand.engine.holes import detect_holes
from garden_wand.engine.raster import RasterAccessor
from garden_wand.engine.result import ExtractionResult, Failure, FailureKind, Point, Region
from garden_wand.engine.tracing import trace_boundary
from garden_wand.utils.contour import simplify_closed
from garden_wand.utils.geometry import filter_nested_holes

logger = logging.getLogger(__name__)

# Fewer filled pixels than this cannot enclose an area
MIN_REGION_PIXELS = 3


@contextmanager
def _stage(name: str, timings: dict[str, float]) -> Iterator[None]:
    t0 = time.perf_counter()
    yield
    elapsed = (time.perf_counter() - t0) * 1000
    timings[name] = elapsed
    logger.debug("  %s completed in %.1fms", name, elapsed)


def _to_polygon(points: Sequence[tuple[int, int]]) -> tuple[Point, ...]:
    return tuple((float(x), float(y)) for x, y in points)


class RegionExtractor:
    """Runs wand extractions with one configuration and an optional cache."""

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        cache: ExtractionCache | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.cache = cache

    def extract(
        self,
        raster: RasterAccessor,
        seed: Sequence[float],
        tolerance: int,
        max_pixels: int = DEFAULT_MAX_PIXELS,
        existing_areas: Sequence[Sequence[Sequence[float]]] | None = None,
        respect_existing: bool = False,
        exclusion_mask: NDArray[np.bool_] | None = None,
    ) -> ExtractionResult:
        """Extract the region around ``seed``.

        ``existing_areas`` are polygons in raster pixel coordinates; they
        are rasterized into an exclusion mask when ``respect_existing`` is
        set. A prebuilt ``exclusion_mask`` takes precedence.
        """
        if raster is None:
            raise TypeError("extract requires a raster")
        check_fill_params(tolerance, max_pixels)

        if not (math.isfinite(seed[0]) and math.isfinite(seed[1])):
            return Failure(FailureKind.OUT_OF_BOUNDS, f"Seed ({seed[0]}, {seed[1]}) is not a finite point")
        seed_x, seed_y = math.floor(seed[0]), math.floor(seed[1])
        if not seed_in_bounds(raster, seed_x, seed_y):
            return Failure(
                FailureKind.OUT_OF_BOUNDS,
                f"Seed ({seed_x}, {seed_y}) is outside the {raster.width}x{raster.height} image",
            )

        if exclusion_mask is None and respect_existing and existing_areas:
            exclusion_mask = build_exclusion_mask(raster.width, raster.height, existing_areas)
        if exclusion_mask is not None and exclusion_mask.shape != (raster.height, raster.width):
            raise ValueError(
                f"Exclusion mask shape {exclusion_mask.shape} does not match the "
                f"{raster.width}x{raster.height} image"
            )

        key = self._cache_key(raster, (seed_x, seed_y), tolerance, max_pixels, exclusion_mask)
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Extraction at (%d, %d) served from cache", seed_x, seed_y)
                return cached

        result = self._run(raster, seed_x, seed_y, tolerance, max_pixels, exclusion_mask)

        if key is not None:
            self.cache.put(key, result)
        return result

    def _cache_key(
        self,
        raster: RasterAccessor,
        seed: tuple[int, int],
        tolerance: int,
        max_pixels: int,
        exclusion_mask: NDArray[np.bool_] | None,
    ) -> CacheKey | None:
        digest = getattr(raster, "digest", None)
        if self.cache is None or digest is None:
            return None
        return CacheKey(digest(), seed, tolerance, max_pixels, exclusion_digest(exclusion_mask))

    def _run(
        self,
        raster: RasterAccessor,
        seed_x: int,
        seed_y: int,
        tolerance: int,
        max_pixels: int,
        exclusion_mask: NDArray[np.bool_] | None,
    ) -> ExtractionResult:
        start = time.perf_counter()
        timings: dict[str, float] = {}
        config = self.config

        with _stage("flood_fill", timings):
            mask = flood_fill(raster, seed_x, seed_y, tolerance, max_pixels, exclusion_mask)
        if isinstance(mask, Failure):
            logger.info("Extraction at (%d, %d) failed: %s", seed_x, seed_y, mask.message)
            return mask
        if len(mask) < MIN_REGION_PIXELS:
            logger.info("Extraction at (%d, %d) filled only %d pixels", seed_x, seed_y, len(mask))
            return Failure(
                FailureKind.NO_REGION_FOUND,
                f"Only {len(mask)} similar pixel(s) around the seed; try a higher tolerance",
            )

        with _stage("trace", timings):
            contour = trace_boundary(mask, config.trace_step_factor)
        if isinstance(contour, Failure):
            return Failure(FailureKind.DEGENERATE_REGION, contour.message)

        with _stage("simplify", timings):
            outer = simplify_closed(contour, config.outer_epsilon, config.max_simplify_points)
        if len(outer) < 3:
            outer = contour
        if len(outer) < 3:
            return Failure(
                FailureKind.DEGENERATE_REGION,
                f"Boundary of the filled region has only {len(outer)} point(s)",
            )

        holes: list[list[tuple[int, int]]] = []
        holes_over_budget = False
        if config.detect_holes:
            with _stage("holes", timings):
                report = detect_holes(mask, config)
                holes = filter_nested_holes(report.holes)
            holes_over_budget = report.budget_exceeded
            if report.exterior_capped:
                logger.info(
                    "Exterior scan at (%d, %d) stopped at its cap; border-touching regions were rejected on expansion",
                    seed_x,
                    seed_y,
                )

        region = Region(
            outer=_to_polygon(outer),
            holes=tuple(_to_polygon(h) for h in holes),
            budget_exceeded=mask.truncated or holes_over_budget,
            pixel_count=len(mask),
        )

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Extracted region at (%d, %d): %d pixels, %d vertices, %d holes in %.0fms",
            seed_x,
            seed_y,
            region.pixel_count,
            len(region.outer),
            len(region.holes),
            total,
        )
        return region


def extract_region(
    raster: RasterAccessor,
    seed: Sequence[float],
    tolerance: int,
    max_pixels: int = DEFAULT_MAX_PIXELS,
    existing_areas: Sequence[Sequence[Sequence[float]]] | None = None,
    respect_existing: bool = False,
    exclusion_mask: NDArray[np.bool_] | None = None,
    config: ExtractionConfig | None = None,
) -> ExtractionResult:
    """Functional shortcut for a one-off extraction without a cache."""
    return RegionExtractor(config).extract(
        raster,
        seed,
        tolerance,
        max_pixels=max_pixels,
        existing_areas=existing_areas,
        respect_existing=respect_existing,
        exclusion_mask=exclusion_mask,
    )
