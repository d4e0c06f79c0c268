"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_canvas.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places the single food cell on the grid.

    Uses a seeded NumPy RNG for reproducible placement. Cells under the
    snake are not excluded, so food may land on the body.
    """

    def __init__(
        self,
        grid: Grid,
        start: tuple[int, int],
        rng: np.random.Generator | None = None,
    ) -> None:
        if not grid.in_bounds(*start):
            raise ValueError(f"Food start {start} lies outside the grid.")
        self.grid = grid
        self.start = start
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: tuple[int, int] = start

    def respawn(self) -> tuple[int, int]:
        """Move the food to a uniformly random cell and return it."""
        self.position = self.grid.random_cell(self.rng)
        logger.debug("Food respawned at %s.", self.position)
        return self.position

    def reset(self) -> None:
        """Put the food back on its start cell."""
        self.position = self.start

    def is_at(self, cell: tuple[int, int]) -> bool:
        return cell == self.position
