"""Exclusion mask — rasterizes existing areas so the wand does not re-claim them."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from skimage.draw import polygon as draw_polygon

Polygonish = Sequence[Sequence[float]]


def build_exclusion_mask(
    width: int,
    height: int,
    polygons: Sequence[Polygonish],
) -> NDArray[np.bool_]:
    """Scanline-fill every polygon into an H×W boolean mask.

    Polygons are in the raster's pixel coordinate space. Polygons with
    fewer than 3 points cover nothing and are skipped.
    """
    mask = np.zeros((height, width), dtype=bool)

    for poly in polygons:
        if len(poly) < 3:
            continue
        coords = np.asarray(poly, dtype=np.float64)
        rr, cc = draw_polygon(coords[:, 1], coords[:, 0], shape=(height, width))
        mask[rr, cc] = True

    return mask


def exclusion_digest(mask: NDArray[np.bool_] | None) -> str:
    """Short content hash for cache keys; ``""`` when there is no mask."""
    if mask is None or not mask.any():
        return ""
    h = hashlib.sha256(f"{mask.shape[1]}x{mask.shape[0]}".encode())
    h.update(np.packbits(mask, axis=None).tobytes())
    return h.hexdigest()[:16]
