"""PixelMask — the set of filled pixels produced by one flood fill."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PixelMask:
    """Filled pixels as flat indices ``x + y * width``.

    ``truncated`` is set when the fill that built the mask stopped at its
    pixel budget with work still pending.
    """

    width: int
    height: int
    indices: frozenset[int]
    truncated: bool = False

    def __post_init__(self) -> None:
        size = self.width * self.height
        if self.indices and (min(self.indices) < 0 or max(self.indices) >= size):
            raise ValueError(f"Mask index outside [0, {size})")

    @classmethod
    def from_points(
        cls,
        points: Iterable[tuple[int, int]],
        width: int,
        height: int,
    ) -> PixelMask:
        return cls(width, height, frozenset(x + y * width for x, y in points))

    @classmethod
    def from_array(cls, grid: NDArray[np.bool_]) -> PixelMask:
        """Build from an H×W boolean/0-1 array."""
        height, width = grid.shape
        flat = np.flatnonzero(np.asarray(grid).ravel())
        return cls(width, height, frozenset(int(k) for k in flat))

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, key: object) -> bool:
        return key in self.indices

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def contains_point(self, x: int, y: int) -> bool:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return (x + y * self.width) in self.indices

    def point(self, key: int) -> tuple[int, int]:
        return (key % self.width, key // self.width)

    def to_array(self) -> NDArray[np.bool_]:
        grid = np.zeros(self.width * self.height, dtype=bool)
        if self.indices:
            grid[np.fromiter(self.indices, dtype=np.int64)] = True
        return grid.reshape(self.height, self.width)
