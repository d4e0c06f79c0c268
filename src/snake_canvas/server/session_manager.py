"""In-memory session registry, per-session tick scheduling and broadcasting."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snake_canvas.config import GameConfig, SpeedPreset
from snake_canvas.engine import GameEngine, GameStatus, Snapshot
from snake_canvas.loop import Scheduler
from snake_canvas.server.models import SessionDetail, SessionSummary
from snake_canvas.snake import Direction

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_SESSIONS = 100
_IDLE_SESSION_TTL = 600.0  # seconds before an unwatched session may be evicted


class RateLimitExceeded(Exception):
    """Raised when a client creates sessions too quickly."""


@dataclass
class GameSession:
    """All state for one single-player game and its viewers."""

    session_id: str
    engine: GameEngine
    scheduler: Scheduler
    sockets: list[WebSocket] = field(default_factory=list)
    updates: asyncio.Queue = field(default_factory=asyncio.Queue)
    created_at: float = field(default_factory=time.monotonic)
    _broadcaster: asyncio.Task | None = field(default=None, repr=False)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.engine.status,
            score=self.engine.score,
            tick_speed_ms=self.engine.tick_speed,
            grid_size=self.engine.grid.size,
            viewers=len(self.sockets),
        )

    def detail(self) -> SessionDetail:
        return SessionDetail(
            **self.summary().model_dump(), state=self.engine.get_state(),
        )

    def _enqueue(self, snapshot: Snapshot) -> None:
        if self.sockets:
            self.updates.put_nowait((snapshot, None))


class SessionManager:
    """Central registry managing all game sessions."""

    def __init__(
        self,
        config: GameConfig | None = None,
        max_sessions: int = _MAX_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self.config = config if config is not None else GameConfig()
        self._sessions: dict[str, GameSession] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_sessions = max_sessions

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = [
            t for t in self._rate_limits.get(client_ip, [])
            if now - t < _RATE_LIMIT_WINDOW
        ]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        speed: int | str | SpeedPreset | None = None,
        seed: int | None = None,
        grid_size: int | None = None,
        client_ip: str = "unknown",
    ) -> GameSession:
        """Create a new session with a fresh, not yet started game."""
        if not self._check_rate_limit(client_ip):
            raise RateLimitExceeded("Rate limit exceeded. Try again later.")
        if len(self._sessions) >= self._max_sessions:
            self._prune_sessions()
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Too many open sessions.")

        engine = GameEngine(
            grid_size=grid_size if grid_size is not None else self.config.grid_size,
            seed=seed if seed is not None else self.config.seed,
            tick_speed=speed if speed is not None else self.config.tick_speed_ms,
        )
        session = GameSession(
            session_id=uuid.uuid4().hex[:12],
            engine=engine,
            scheduler=Scheduler(engine),
        )
        engine.add_listener(session._enqueue)
        self._sessions[session.session_id] = session
        self._record_creation(client_ip)
        logger.info(
            "Session %s created (tick_speed=%s).",
            session.session_id, engine.tick_speed,
        )
        return session

    def _prune_sessions(self) -> None:
        """Evict unwatched sessions that are finished or idle, oldest first."""
        now = time.monotonic()
        evictable = [
            s for s in self._sessions.values()
            if not s.sockets and (
                s.engine.status == GameStatus.GAME_OVER
                or now - s.created_at >= _IDLE_SESSION_TTL
            )
        ]
        overflow = len(self._sessions) - self._max_sessions + 1
        if overflow <= 0 or not evictable:
            return

        evictable.sort(key=lambda s: s.created_at)
        for stale in evictable[:overflow]:
            self._sessions.pop(stale.session_id, None)
            self._release(stale)
        logger.info(
            "Pruned %d sessions (retaining up to %d).",
            min(overflow, len(evictable)),
            self._max_sessions,
        )

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    # --- intents -----------------------------------------------------------

    def set_direction(self, session_id: str, direction: Direction) -> GameSession:
        session = self._require(session_id)
        session.engine.set_direction(direction)
        return session

    def start(self, session_id: str) -> GameSession:
        session = self._require(session_id)
        session.engine.start()
        return session

    def restart(self, session_id: str) -> GameSession:
        session = self._require(session_id)
        session.engine.restart()
        return session

    def set_speed(
        self, session_id: str, speed: int | str | SpeedPreset | None,
    ) -> GameSession:
        session = self._require(session_id)
        session.engine.set_speed(speed)
        return session

    # --- viewers -----------------------------------------------------------

    async def attach(self, session: GameSession, websocket: WebSocket) -> None:
        """Subscribe *websocket* and queue the current snapshot for it.

        The socket is registered before anything is sent, so no state change
        between the two is lost.
        """
        session.sockets.append(websocket)
        session.updates.put_nowait((session.engine.snapshot(), websocket))
        if session._broadcaster is None or session._broadcaster.done():
            session._broadcaster = asyncio.create_task(
                self._broadcast_loop(session),
            )

    def detach(self, session: GameSession, websocket: WebSocket) -> None:
        if websocket in session.sockets:
            session.sockets.remove(websocket)

    async def _broadcast_loop(self, session: GameSession) -> None:
        """Forward queued snapshots to every connected viewer, in order."""
        try:
            while True:
                snapshot, target = await session.updates.get()
                payload = _encode(snapshot)
                if target is None:
                    await self._broadcast(session, payload)
                elif target in session.sockets:
                    await self._send(session, target, payload)
        except asyncio.CancelledError:
            logger.info("Broadcaster cancelled for session %s.", session.session_id)

    async def _broadcast(self, session: GameSession, payload: str) -> None:
        dead: list[WebSocket] = []
        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.detach(session, ws)

    async def _send(
        self, session: GameSession, websocket: WebSocket, payload: str,
    ) -> None:
        try:
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.send_text(payload)
        except Exception:
            self.detach(session, websocket)

    # --- teardown ----------------------------------------------------------

    async def close_session(self, session_id: str) -> None:
        """Stop ticking, close viewers and forget the session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._teardown(session)
        logger.info("Session %s closed.", session_id)

    def _release(self, session: GameSession) -> list[asyncio.Task]:
        """Stop ticking and cancel the session's tasks; return them."""
        handle = session.scheduler.handle
        session.scheduler.close()
        session.engine.remove_listener(session._enqueue)
        loop_task = handle.task if handle is not None else None
        tasks = [
            t for t in (loop_task, session._broadcaster)
            if t is not None and not t.done()
        ]
        for task in tasks:
            task.cancel()
        return tasks

    async def _teardown(self, session: GameSession) -> None:
        tasks = self._release(session)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing viewer socket in session %s.",
                    session.session_id,
                )
        session.sockets.clear()

    async def cleanup(self) -> None:
        """Tear down every session and release rate-limit state."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await self._teardown(session)
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")


def _encode(snapshot: Snapshot) -> str:
    return json.dumps(snapshot.to_dict(), separators=(",", ":"))
