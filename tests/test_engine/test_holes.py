"""Tests for hole detection inside flood-filled masks."""

from __future__ import annotations

import numpy as np
import pytest

from garden_wand.engine.config import ExtractionConfig
from garden_wand.engine.flood_fill import flood_fill
from garden_wand.engine.holes import (
    Expansion,
    collect_hole_candidates,
    detect_holes,
    expand_region,
    group_components,
    mark_exterior,
)
from garden_wand.engine.mask import PixelMask
from garden_wand.engine.raster import ArrayRaster
from garden_wand.utils.geometry import point_in_polygon
from tests.conftest import ISLAND, WATER, paint_rect, ring_raster, solid

# Thresholds scaled down for rasters of a few thousand pixels
SMALL = ExtractionConfig(min_component_pixels=4, min_hole_pixels=100)


def _pond_with_island(island: int = 30) -> PixelMask:
    """100×100: water [10, 90)², island of side ``island`` centred."""
    pixels = solid(100, 100)
    paint_rect(pixels, 10, 10, 90, 90, WATER)
    lo = 50 - island // 2
    paint_rect(pixels, lo, lo, lo + island, lo + island, ISLAND)
    return flood_fill(ArrayRaster(pixels), 20, 20, 0, 200_000)


class TestRing:
    @pytest.fixture
    def mask(self, ring):
        mask = flood_fill(ring, 59, 39, 0, 200_000)
        assert isinstance(mask, PixelMask)
        return mask

    def test_single_hole(self, mask):
        report = detect_holes(mask, SMALL)
        assert len(report.holes) == 1

    def test_hole_surrounds_island_center(self, mask):
        hole = detect_holes(mask, SMALL).holes[0]
        assert len(hole) >= 3
        assert point_in_polygon((39.5, 39.5), hole)

    def test_exterior_never_reported(self, mask):
        for hole in detect_holes(mask, SMALL).holes:
            assert not point_in_polygon((1, 1), hole)
            xs = [p[0] for p in hole]
            assert min(xs) > 0 and max(xs) < 79

    def test_default_thresholds_drop_small_island(self, mask):
        # The island covers about 300 pixels, under the 500 pixel floor
        assert detect_holes(mask).holes == []

    def test_larger_ring_with_small_raster_cap(self):
        # Exterior larger than half the raster: the corner flood is capped
        pixels = ring_raster(size=90, outer=28, inner=12)
        mask = flood_fill(ArrayRaster(pixels), 45 + 20, 45, 0, 200_000)
        report = detect_holes(mask, SMALL)
        assert len(report.holes) == 1
        assert point_in_polygon((44.5, 44.5), report.holes[0])
        assert report.exterior_capped


class TestRectangularIsland:
    def test_hole_is_traced_to_its_corners(self):
        report = detect_holes(_pond_with_island(30))
        assert report.holes == [[(35, 35), (64, 35), (64, 64), (35, 64)]]
        assert not report.budget_exceeded

    def test_small_island_is_dropped(self):
        # 10×10 = 100 pixels < 500
        assert detect_holes(_pond_with_island(10)).holes == []

    def test_threshold_override_keeps_small_island(self):
        config = ExtractionConfig(min_hole_pixels=50)
        report = detect_holes(_pond_with_island(10), config)
        assert report.holes == [[(45, 45), (54, 45), (54, 54), (45, 54)]]

    def test_expansion_cap_drops_hole_and_flags_budget(self):
        config = ExtractionConfig(max_hole_pixels=400)
        report = detect_holes(_pond_with_island(30), config)
        assert report.holes == []
        assert report.budget_exceeded


class TestBorderContact:
    def test_bay_open_to_the_image_edge_is_not_a_hole(self):
        # Water fills the whole raster except a channel running to the right edge
        pixels = solid(60, 60, WATER)
        paint_rect(pixels, 20, 20, 40, 40, ISLAND)
        paint_rect(pixels, 40, 28, 60, 32, ISLAND)
        mask = flood_fill(ArrayRaster(pixels), 5, 5, 0, 200_000)
        assert detect_holes(mask, SMALL).holes == []

    def test_mask_covering_corners_still_finds_enclosed_island(self):
        pixels = solid(60, 60, WATER)
        paint_rect(pixels, 20, 20, 40, 40, ISLAND)
        mask = flood_fill(ArrayRaster(pixels), 5, 5, 0, 200_000)
        report = detect_holes(mask, SMALL)
        assert report.holes == [[(20, 20), (39, 20), (39, 39), (20, 39)]]


class TestSteps:
    def test_candidates_are_unfilled_four_neighbors(self):
        mask = PixelMask.from_points([(2, 2)], 5, 5)
        assert collect_hole_candidates(mask) == {7, 11, 13, 17}

    def test_candidates_clip_at_raster_edge(self):
        mask = PixelMask.from_points([(0, 0)], 3, 3)
        assert collect_hole_candidates(mask) == {1, 3}

    def test_exterior_marking_stops_at_mask(self):
        grid = np.zeros((7, 7), dtype=bool)
        grid[1:6, 1:6] = True
        grid[3, 3] = False
        mask = PixelMask.from_array(grid)
        candidates = collect_hole_candidates(mask)
        exterior, capped = mark_exterior(candidates, mask, 1000)
        assert 3 * 7 + 3 not in exterior
        assert exterior == candidates - {3 * 7 + 3}
        assert not capped

    def test_components_are_four_connected(self):
        # (0,0) and (1,1) touch only diagonally
        assert len(group_components({0, 6}, 5, 5)) == 2
        assert len(group_components({0, 1, 6}, 5, 5)) == 1

    def test_expand_region_classifies(self):
        grid = np.zeros((7, 7), dtype=bool)
        grid[1:6, 1:6] = True
        grid[2:5, 2:5] = False
        mask = PixelMask.from_array(grid)
        region, status = expand_region(mask, 3 * 7 + 3, 100)
        assert status is Expansion.ENCLOSED
        assert len(region) == 9

        _, status = expand_region(mask, 0, 100)
        assert status is Expansion.TOUCHES_BORDER

        _, status = expand_region(mask, 3 * 7 + 3, 5)
        assert status is Expansion.TOO_LARGE
