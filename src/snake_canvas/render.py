"""Rasterise engine snapshots for display."""

from __future__ import annotations

import numpy as np

from snake_canvas.engine import Snapshot
from snake_canvas.grid import CellType, Grid

_GLYPHS: dict[CellType, str] = {
    CellType.EMPTY: ".",
    CellType.BODY: "o",
    CellType.HEAD: "@",
    CellType.FOOD: "*",
}


def render_array(snapshot: Snapshot) -> np.ndarray:
    """Return an ``int8`` array indexed ``[y, x]`` holding :class:`CellType` codes.

    Body is painted first, then the head, then the food, the same order the
    browser canvas draws in.
    """
    grid = Grid(snapshot.grid_size)
    cells = grid.blank()
    for x, y in snapshot.snake[1:]:
        cells[y, x] = CellType.BODY
    head_x, head_y = snapshot.head
    cells[head_y, head_x] = CellType.HEAD
    food_x, food_y = snapshot.food
    cells[food_y, food_x] = CellType.FOOD
    return cells


def render_text(snapshot: Snapshot) -> str:
    """Render the board as ASCII with a score line and game-over banner."""
    cells = render_array(snapshot)
    lines = [
        "".join(_GLYPHS[CellType(code)] for code in row.tolist())
        for row in cells
    ]
    lines.append(f"Score: {snapshot.score}")
    if snapshot.game_over:
        lines.append("Game Over!")
    return "\n".join(lines)
