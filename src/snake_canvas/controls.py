"""Translate keyboard and touch events into engine intents."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from snake_canvas.snake import Direction

if TYPE_CHECKING:
    from snake_canvas.engine import GameEngine

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}

_DIRECTION_NAMES: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def parse_direction(name: str) -> Direction:
    """Map ``up``/``down``/``left``/``right`` (any case) to a direction."""
    direction = _DIRECTION_NAMES.get(name.strip().lower())
    if direction is None:
        raise ValueError(f"Unknown direction '{name}'.")
    return direction


def dispatch_key(engine: GameEngine, key: str) -> bool:
    """Apply a key press to the engine.

    Any key wakes up a game that has not started; bound keys also steer.
    Returns True if the key was a direction key.
    """
    direction = KEY_BINDINGS.get(key)
    if direction is None:
        engine.start()
        return False
    engine.set_direction(direction)
    return True


def dispatch_touch(engine: GameEngine, vector: Iterable[int]) -> None:
    """Apply an on-screen arrow button press given as a ``(dx, dy)`` vector."""
    engine.set_direction(Direction.from_vector(vector))
