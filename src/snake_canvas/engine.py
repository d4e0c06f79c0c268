"""Tick-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from snake_canvas.config import SpeedPreset, resolve_speed
from snake_canvas.food import FoodSpawner
from snake_canvas.grid import Grid
from snake_canvas.snake import Direction, Snake

if TYPE_CHECKING:
    from snake_canvas.config import GameConfig

logger = logging.getLogger(__name__)

SNAKE_START: tuple[tuple[int, int], ...] = ((8, 8), (8, 9))
APPLE_START: tuple[int, int] = (8, 3)
DIRECTION_START = Direction.UP


class GameStatus(str, enum.Enum):
    """Lifecycle states of a single game."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the engine state handed to renderers."""

    snake: tuple[tuple[int, int], ...]
    food: tuple[int, int]
    direction: Direction
    score: int
    status: GameStatus
    tick_speed: int | None
    grid_size: int

    @property
    def head(self) -> tuple[int, int]:
        return self.snake[0]

    @property
    def game_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict."""
        return {
            "snake": [list(seg) for seg in self.snake],
            "food": list(self.food),
            "direction": list(self.direction.value),
            "score": self.score,
            "status": self.status.value,
            "tick_speed": self.tick_speed,
            "grid_size": self.grid_size,
        }


Listener = Callable[[Snapshot], None]


class GameEngine:
    """Single-snake, tick-based game engine.

    The engine owns the snake, food, direction, score, status and tick
    speed. An external scheduler calls :meth:`tick` every ``tick_speed``
    milliseconds while the game is running; input handlers call
    :meth:`set_direction`, :meth:`restart` and :meth:`set_speed`.
    """

    def __init__(
        self,
        grid_size: int = 25,
        seed: int | None = None,
        tick_speed: int | str | SpeedPreset | None = None,
    ) -> None:
        self.grid = Grid(grid_size)
        for cell in (*SNAKE_START, APPLE_START):
            if not self.grid.in_bounds(*cell):
                raise ValueError(
                    f"grid_size {grid_size} is too small for the start layout.",
                )
        self.rng = np.random.default_rng(seed)
        self.food = FoodSpawner(self.grid, APPLE_START, rng=self.rng)
        self.tick_speed = resolve_speed(tick_speed)
        self._listeners: list[Listener] = []
        self._reset_entities()

    @classmethod
    def from_config(cls, config: GameConfig) -> GameEngine:
        return cls(
            grid_size=config.grid_size,
            seed=config.seed,
            tick_speed=config.tick_speed_ms,
        )

    def _reset_entities(self) -> None:
        self.snake = Snake(SNAKE_START)
        self.food.reset()
        self.direction = DIRECTION_START
        self.score = 0
        self.status = GameStatus.NOT_STARTED

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked with a snapshot on each state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> Snapshot:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin a game that has not started yet."""
        if self.status != GameStatus.NOT_STARTED:
            return
        self.status = GameStatus.RUNNING
        logger.info("Game started (tick_speed=%s).", self.tick_speed)
        self._notify()

    def set_direction(self, direction: Direction) -> None:
        """Steer the snake, ignoring 180° reversals.

        The first direction intent also starts the game. The new direction
        is applied on the next tick.
        """
        if direction != self.direction.opposite:
            if direction != self.direction:
                logger.debug("Direction %s -> %s.", self.direction.name, direction.name)
            self.direction = direction
        self.start()

    def restart(self) -> None:
        """Reset every entity except the tick speed."""
        self._reset_entities()
        logger.info("Game restarted.")
        self._notify()

    def set_speed(self, value: int | str | SpeedPreset | None) -> None:
        """Select a tick speed; changing difficulty always starts over."""
        self.tick_speed = resolve_speed(value)
        logger.info("Tick speed set to %s ms.", self.tick_speed)
        self.restart()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    @property
    def can_advance(self) -> bool:
        return self.status == GameStatus.RUNNING and self.tick_speed is not None

    def tick(self) -> Snapshot:
        """Advance the game by one step and return the new snapshot.

        Calls made while the game is not running, or without a tick speed,
        leave the state untouched.
        """
        if not self.can_advance:
            return self.snapshot()

        candidate = self.snake.next_head(self.direction)

        # Border first, then self; the first hit ends the game.
        if not self.grid.in_bounds(*candidate):
            return self._end_game("wall")
        if self.snake.occupies(*candidate):
            return self._end_game("self")

        ate = self.food.is_at(candidate)
        self.snake.advance(candidate, grow=ate)
        if ate:
            self.score += 1
            self.food.respawn()

        return self._notify()

    def _end_game(self, cause: str) -> Snapshot:
        self.status = GameStatus.GAME_OVER
        logger.info(
            "Game over (%s collision) with score %d and length %d.",
            cause, self.score, len(self.snake),
        )
        return self._notify()

    def snapshot(self) -> Snapshot:
        return Snapshot(
            snake=self.snake.cells(),
            food=self.food.position,
            direction=self.direction,
            score=self.score,
            status=self.status,
            tick_speed=self.tick_speed,
            grid_size=self.grid.size,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return self.snapshot().to_dict()
