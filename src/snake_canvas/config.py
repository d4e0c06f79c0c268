"""Game configuration and difficulty presets."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from snake_canvas.grid import DEFAULT_CANVAS_SIZE, DEFAULT_SCALE

logger = logging.getLogger(__name__)


class SpeedPreset(enum.Enum):
    """Named difficulty levels, in milliseconds per tick."""

    BEGINNER = 150
    INTERMEDIATE = 100
    ADVANCED = 50

    @classmethod
    def from_name(cls, name: str) -> SpeedPreset:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(p.name.lower() for p in cls)
            raise ValueError(
                f"Unknown speed preset '{name}'; expected one of {choices}.",
            ) from None


def resolve_speed(value: int | str | SpeedPreset | None) -> int | None:
    """Normalise a speed selection to milliseconds per tick.

    ``None`` is passed through and means the game must not advance.
    """
    if value is None:
        return None
    if isinstance(value, SpeedPreset):
        return value.value
    if isinstance(value, str):
        return SpeedPreset.from_name(value).value
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Tick speed must be an integer, got {value!r}.")
    if value <= 0:
        raise ValueError("Tick speed must be a positive number of milliseconds.")
    return value


@dataclass(frozen=True)
class GameConfig:
    """Engine and server settings.

    Supports JSON serialization so a setup can be shared between runs.
    """

    canvas_size: int = DEFAULT_CANVAS_SIZE
    scale: int = DEFAULT_SCALE
    tick_speed_ms: int | None = None
    seed: int | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.scale < 1:
            raise ValueError("scale must be at least 1.")
        if self.canvas_size < self.scale:
            raise ValueError("canvas_size must be at least one cell wide.")
        resolve_speed(self.tick_speed_ms)
        if not 0 < self.port < 65536:
            raise ValueError("port must be between 1 and 65535.")

    @property
    def grid_size(self) -> int:
        return self.canvas_size // self.scale

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
