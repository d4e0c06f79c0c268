"""Snake Canvas: core game engine."""

from snake_canvas.config import GameConfig, SpeedPreset
from snake_canvas.engine import (
    APPLE_START,
    SNAKE_START,
    GameEngine,
    GameStatus,
    Snapshot,
)
from snake_canvas.grid import CellType, Grid
from snake_canvas.loop import LoopHandle, Scheduler, start_loop, stop_loop
from snake_canvas.snake import Direction, Snake

__all__ = [
    "APPLE_START",
    "CellType",
    "Direction",
    "GameConfig",
    "GameEngine",
    "GameStatus",
    "Grid",
    "LoopHandle",
    "SNAKE_START",
    "Scheduler",
    "Snake",
    "Snapshot",
    "SpeedPreset",
    "start_loop",
    "stop_loop",
]
