"""Shared test fixtures — small synthetic rasters."""

from __future__ import annotations

import base64
import io

import numpy as np
import pytest
from PIL import Image

from garden_wand.engine.raster import ArrayRaster

BACKGROUND = (240, 240, 240)
WATER = (40, 90, 200)
ISLAND = (30, 160, 40)
BED = (140, 100, 20)


def solid(width: int, height: int, color: tuple[int, int, int] = BACKGROUND) -> np.ndarray:
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def paint_rect(pixels: np.ndarray, x0: int, y0: int, x1: int, y1: int, color) -> np.ndarray:
    """Fill the inclusive-exclusive box [x0, x1) × [y0, y1)."""
    pixels[y0:y1, x0:x1] = color
    return pixels


def paint_disc(pixels: np.ndarray, cx: float, cy: float, radius: float, color) -> np.ndarray:
    h, w = pixels.shape[:2]
    yy, xx = np.mgrid[0:h, 0:w]
    inside = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius**2
    pixels[inside] = color
    return pixels


def ring_raster(size: int = 80, outer: float = 30, inner: float = 10) -> np.ndarray:
    """Water ring around a contrasting island, padded with background."""
    pixels = solid(size, size, BACKGROUND)
    c = (size - 1) / 2
    paint_disc(pixels, c, c, outer, WATER)
    paint_disc(pixels, c, c, inner, ISLAND)
    return pixels


def to_png_base64(pixels: np.ndarray) -> str:
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def square_raster() -> ArrayRaster:
    """10×10 block of bed color on a 20×20 background, at (5, 5)."""
    pixels = solid(20, 20)
    paint_rect(pixels, 5, 5, 15, 15, BED)
    return ArrayRaster(pixels)


@pytest.fixture
def ring() -> ArrayRaster:
    return ArrayRaster(ring_raster())


@pytest.fixture
def png_ring() -> str:
    return to_png_base64(ring_raster())
