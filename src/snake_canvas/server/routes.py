"""REST API route handlers for session lifecycle and game intents."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_canvas.controls import parse_direction
from snake_canvas.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    ErrorResponse,
    SessionDetail,
    SessionSummary,
    SpeedRequest,
)
from snake_canvas.server.session_manager import RateLimitExceeded, SessionManager

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={404: {"model": ErrorResponse}},
)


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new single-player session."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        session = manager.create_session(
            speed=body.selected(),
            seed=body.seed,
            grid_size=body.grid_size,
            client_ip=client_ip,
        )
    except RateLimitExceeded as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List open sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> SessionDetail:
    """Get session metadata and the current game snapshot."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return session.detail()


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> None:
    """Stop the game loop and close the session."""
    try:
        await _get_manager(request).close_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{session_id}/direction")
async def set_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> SessionDetail:
    """Steer the snake; the first direction also starts the game."""
    try:
        session = _get_manager(request).set_direction(
            session_id, parse_direction(body.direction),
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.detail()


@router.post("/{session_id}/start")
async def start_game(session_id: str, request: Request) -> SessionDetail:
    """Start a game that has not started yet."""
    try:
        session = _get_manager(request).start(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.detail()


@router.post("/{session_id}/restart")
async def restart_game(session_id: str, request: Request) -> SessionDetail:
    """Reset the game, keeping the selected speed."""
    try:
        session = _get_manager(request).restart(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.detail()


@router.post("/{session_id}/speed")
async def set_speed(
    session_id: str, body: SpeedRequest, request: Request,
) -> SessionDetail:
    """Change difficulty; this always starts a fresh game."""
    try:
        session = _get_manager(request).set_speed(session_id, body.selected())
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.detail()
