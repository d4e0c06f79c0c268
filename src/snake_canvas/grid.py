"""Square play-field geometry derived from the canvas size."""

from __future__ import annotations

import enum

import numpy as np

DEFAULT_CANVAS_SIZE = 500
DEFAULT_SCALE = 20


class CellType(enum.IntEnum):
    """Integer codes used when rasterising a game snapshot."""

    EMPTY = 0
    BODY = 1
    HEAD = 2
    FOOD = 3


class Grid:
    """Square game grid of ``size`` × ``size`` cells.

    Coordinates use (x, y) ordering: x is the column, y is the row.
    """

    def __init__(self, size: int = DEFAULT_CANVAS_SIZE // DEFAULT_SCALE) -> None:
        if size < 1:
            raise ValueError("Grid size must be at least 1.")
        self.size = size

    @classmethod
    def from_canvas(
        cls, canvas_size: int = DEFAULT_CANVAS_SIZE, scale: int = DEFAULT_SCALE,
    ) -> Grid:
        """Build a grid from a canvas extent and a per-cell scale."""
        if scale < 1:
            raise ValueError("scale must be at least 1.")
        return cls(canvas_size // scale)

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.size and 0 <= y < self.size

    def random_cell(self, rng: np.random.Generator) -> tuple[int, int]:
        """Draw a cell uniformly from the whole grid."""
        x, y = rng.integers(0, self.size, size=2)
        return int(x), int(y)

    def blank(self) -> np.ndarray:
        """Return an empty ``(size, size)`` array indexed ``[y, x]``."""
        return np.full((self.size, self.size), CellType.EMPTY, dtype=np.int8)
