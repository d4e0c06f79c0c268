"""Snake body representation and direction vectors."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values.

    The y axis grows downwards, like a canvas.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def from_vector(cls, vector: Iterable[int]) -> Direction:
        """Convert a raw ``(dx, dy)`` unit vector into a direction.

        Raises ``ValueError`` for anything that is not one of the four
        cardinal unit vectors.
        """
        dx, dy = (int(v) for v in vector)
        try:
            return cls((dx, dy))
        except ValueError:
            raise ValueError(
                f"({dx}, {dy}) is not a cardinal unit vector.",
            ) from None


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(self, cells: Iterable[tuple[int, int]]) -> None:
        self.body: deque[tuple[int, int]] = deque(
            (int(x), int(y)) for x, y in cells
        )
        if not self.body:
            raise ValueError("Snake length must be at least 1.")

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> tuple[int, int]:
        """Return the head coordinate."""
        return self.body[0]

    def next_head(self, direction: Direction) -> tuple[int, int]:
        """Compute the next head position without moving."""
        dx, dy = direction.value
        x, y = self.head
        return x + dx, y + dy

    def occupies(self, x: int, y: int) -> bool:
        """Check whether any segment, tail included, covers a cell."""
        return (x, y) in self.body

    def advance(
        self, new_head: tuple[int, int], grow: bool = False,
    ) -> tuple[int, int] | None:
        """Prepend *new_head* and drop the tail unless growing.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        if grow:
            return None
        return self.body.pop()

    def cells(self) -> tuple[tuple[int, int], ...]:
        return tuple(self.body)
