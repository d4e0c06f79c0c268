"""Async fixed-interval tick loop and the scheduler that drives it."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from snake_canvas.engine import GameEngine, GameStatus, Snapshot

logger = logging.getLogger(__name__)

TickCallback = Callable[[Snapshot], "Awaitable[None] | None"]


@dataclass
class LoopHandle:
    """Handle to a running tick loop, returned by :func:`start_loop`."""

    period_ms: int
    task: asyncio.Task | None = field(default=None, repr=False)
    stopped: bool = False

    @property
    def active(self) -> bool:
        return (
            not self.stopped
            and self.task is not None
            and not self.task.done()
        )


async def _tick_loop(
    engine: GameEngine, handle: LoopHandle, on_tick: TickCallback | None,
) -> None:
    """Tick the engine every ``period_ms`` while it keeps running."""
    interval = handle.period_ms / 1000.0
    try:
        while not handle.stopped and engine.status == GameStatus.RUNNING:
            await asyncio.sleep(interval)
            if handle.stopped or not engine.can_advance:
                break
            snapshot = engine.tick()
            if on_tick is not None:
                result = on_tick(snapshot)
                if inspect.isawaitable(result):
                    await result
    except asyncio.CancelledError:
        logger.debug("Tick loop (%d ms) cancelled.", handle.period_ms)
    except Exception:
        logger.exception("Tick loop (%d ms) failed.", handle.period_ms)
    finally:
        handle.stopped = True


def start_loop(
    engine: GameEngine,
    period_ms: int,
    on_tick: TickCallback | None = None,
) -> LoopHandle:
    """Start ticking *engine* every *period_ms* milliseconds.

    Must be called from within a running event loop. *on_tick* receives the
    snapshot produced by every tick and may be a coroutine function.
    """
    if period_ms <= 0:
        raise ValueError("period_ms must be positive.")
    handle = LoopHandle(period_ms=period_ms)
    handle.task = asyncio.get_running_loop().create_task(
        _tick_loop(engine, handle, on_tick),
    )
    logger.info("Tick loop started at %d ms.", period_ms)
    return handle


def stop_loop(handle: LoopHandle | None) -> None:
    """Stop a tick loop. Safe to call more than once."""
    if handle is None or handle.stopped:
        return
    handle.stopped = True
    task = handle.task
    # A loop stopping itself from inside a tick exits on its own.
    if task is not None and not task.done() and task is not asyncio.current_task():
        task.cancel()
    logger.info("Tick loop at %d ms stopped.", handle.period_ms)


class Scheduler:
    """Keeps exactly one tick loop in step with an engine.

    The scheduler listens to the engine: a loop runs while the game is
    running with a tick speed, is replaced whenever the speed changes, and
    is stopped as soon as the game leaves the running state.
    """

    def __init__(
        self, engine: GameEngine, on_tick: TickCallback | None = None,
    ) -> None:
        self.engine = engine
        self.on_tick = on_tick
        self.handle: LoopHandle | None = None
        self._closed = False
        engine.add_listener(self._on_state_change)
        self.sync()

    @property
    def running(self) -> bool:
        return self.handle is not None and self.handle.active

    def _on_state_change(self, _snapshot: Snapshot) -> None:
        self.sync()

    def sync(self) -> None:
        """Reconcile the loop with the engine's status and tick speed."""
        if self._closed:
            return
        engine = self.engine
        if not engine.can_advance:
            self._stop()
            return
        if self.running and self.handle.period_ms == engine.tick_speed:
            return
        self._stop()
        self.handle = start_loop(engine, engine.tick_speed, self.on_tick)

    def _stop(self) -> None:
        stop_loop(self.handle)
        self.handle = None

    async def wait(self) -> None:
        """Wait until the current loop, if any, has finished."""
        handle = self.handle
        if handle is not None and handle.task is not None:
            await asyncio.gather(handle.task, return_exceptions=True)

    def close(self) -> None:
        """Stop ticking and detach from the engine."""
        self._closed = True
        self._stop()
        self.engine.remove_listener(self._on_state_change)
