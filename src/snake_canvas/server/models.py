"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from snake_canvas.engine import GameStatus


class SpeedSelection(BaseModel):
    """A preset name or an explicit tick period; at most one may be given."""

    speed: Literal["beginner", "intermediate", "advanced"] | None = None
    tick_speed_ms: int | None = Field(default=None, ge=10, le=2000)

    @model_validator(mode="after")
    def _one_speed(self) -> SpeedSelection:
        if self.speed is not None and self.tick_speed_ms is not None:
            raise ValueError("Give either speed or tick_speed_ms, not both.")
        return self

    def selected(self) -> int | str | None:
        if self.tick_speed_ms is not None:
            return self.tick_speed_ms
        return self.speed


class CreateSessionRequest(SpeedSelection):
    """Request body for POST /sessions."""

    seed: int | None = None
    grid_size: int | None = Field(default=None, ge=10, le=100)


class SpeedRequest(SpeedSelection):
    """Request body for POST /sessions/{session_id}/speed."""


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: Literal["up", "down", "left", "right"]


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: GameStatus
    score: int
    tick_speed_ms: int | None
    grid_size: int
    viewers: int = 0


class SessionDetail(SessionSummary):
    """Session info plus the full game snapshot."""

    state: dict


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
