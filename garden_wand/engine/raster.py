"""Raster access — the read-only pixel source a wand extraction runs against.

Anything with ``width``, ``height`` and ``pixel_at(x, y) -> (r, g, b, a)``
satisfies :class:`RasterAccessor`. :class:`ArrayRaster` is the stock
implementation over a numpy array.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from PIL import Image

RGBA = tuple[int, int, int, int]


@runtime_checkable
class RasterAccessor(Protocol):
    """Per-pixel RGBA source. Must not change during one extraction."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def pixel_at(self, x: int, y: int) -> RGBA: ...


class ArrayRaster:
    """RasterAccessor backed by an H×W×4 uint8 array.

    H×W×3 input gets an opaque alpha channel, H×W grayscale input is
    expanded to RGB. The array is copied and frozen so callers cannot
    mutate it mid-extraction.
    """

    def __init__(self, pixels: NDArray[np.uint8]) -> None:
        arr = np.asarray(pixels)
        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=-1)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected H×W, H×W×3 or H×W×4 pixels, got shape {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr.astype(np.uint8), alpha], axis=2)
        self._pixels = np.ascontiguousarray(arr, dtype=np.uint8).copy()
        self._pixels.setflags(write=False)

    @classmethod
    def from_image(cls, image: Image.Image) -> ArrayRaster:
        return cls(np.asarray(image.convert("RGBA")))

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def pixels(self) -> NDArray[np.uint8]:
        return self._pixels

    def pixel_at(self, x: int, y: int) -> RGBA:
        r, g, b, a = self._pixels[y, x]
        return (int(r), int(g), int(b), int(a))

    def digest(self) -> str:
        """Content hash of the raster, stable across processes."""
        h = hashlib.sha256()
        h.update(f"{self.width}x{self.height}".encode())
        h.update(self._pixels.tobytes())
        return h.hexdigest()

    def __repr__(self) -> str:
        return f"ArrayRaster({self.width}x{self.height})"
