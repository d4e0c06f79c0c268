"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_canvas.controls import parse_direction
from snake_canvas.server.models import SpeedRequest
from snake_canvas.server.session_manager import GameSession, SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _apply_message(manager: SessionManager, session: GameSession, msg: dict) -> None:
    """Apply one client message; unknown or malformed fields are ignored."""
    sid = session.session_id

    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        try:
            manager.set_direction(sid, parse_direction(direction_str))
        except ValueError:
            logger.debug("Ignoring direction %r in session %s.", direction_str, sid)
        return

    action = msg.get("action")
    if action == "start":
        manager.start(sid)
        return
    if action == "restart":
        manager.restart(sid)
        return

    if "speed" in msg:
        value = msg["speed"]
        try:
            if isinstance(value, str):
                body = SpeedRequest(speed=value.strip().lower())
            else:
                body = SpeedRequest(tick_speed_ms=value)
        except ValueError:
            logger.debug("Ignoring speed %r in session %s.", value, sid)
            return
        manager.set_speed(sid, body.selected())


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send intents, receive a snapshot on every state change."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    await manager.attach(session, websocket)
    logger.info("Viewer connected to session %s.", session_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            if manager.get_session(session_id) is not session:
                break
            _apply_message(manager, session, msg)
    except WebSocketDisconnect:
        logger.info("Viewer disconnected from session %s.", session_id)
    finally:
        manager.detach(session, websocket)
