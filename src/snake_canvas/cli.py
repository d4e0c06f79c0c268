"""Command-line entry point: serve the game or run a headless simulation."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_canvas.engine import Snapshot

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-canvas",
        description="Snake Canvas game server and simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket game server.")
    serve_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override it).",
    )
    serve_p.add_argument("--host", type=str, default=None)
    serve_p.add_argument("--port", type=int, default=None)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a headless game with random moves.",
    )
    sim_p.add_argument(
        "--speed", type=str, default="advanced",
        help="Preset name or milliseconds per tick.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--ticks", type=int, default=200)
    sim_p.add_argument("--grid-size", type=int, default=25)
    sim_p.add_argument(
        "--turn-chance", type=float, default=0.2,
        help="Probability of picking a new direction after each tick.",
    )
    sim_p.add_argument(
        "--show", action="store_true", help="Print the board after every tick.",
    )

    return parser


def _parse_speed(raw: str) -> int | str:
    return int(raw) if raw.isdigit() else raw


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from snake_canvas.config import GameConfig
    from snake_canvas.server.app import create_app

    config = GameConfig.load(args.config) if args.config else GameConfig()
    overrides = {
        k: v for k, v in (("host", args.host), ("port", args.port))
        if v is not None
    }
    if overrides:
        config = GameConfig(**{**config.to_dict(), **overrides})

    uvicorn.run(create_app(config), host=config.host, port=config.port)
    return 0


async def simulate(
    speed: int | str = "advanced",
    seed: int | None = None,
    max_ticks: int = 200,
    grid_size: int = 25,
    turn_chance: float = 0.2,
    show: bool = False,
) -> Snapshot:
    """Drive a game through the real scheduler with random steering.

    Returns the final snapshot once the game ends or *max_ticks* pass.
    """
    import numpy as np

    from snake_canvas.engine import GameEngine
    from snake_canvas.loop import Scheduler
    from snake_canvas.render import render_text
    from snake_canvas.snake import Direction

    engine = GameEngine(grid_size=grid_size, seed=seed)
    engine.set_speed(speed)
    rng = np.random.default_rng(seed)
    directions = list(Direction)
    finished = asyncio.Event()
    ticks = 0

    def on_tick(snapshot: Snapshot) -> None:
        nonlocal ticks
        ticks += 1
        if show:
            print(render_text(snapshot), end="\n\n")  # noqa: T201
        if snapshot.game_over or ticks >= max_ticks:
            scheduler.close()
            finished.set()
            return
        if rng.random() < turn_chance:
            choices = [d for d in directions if d != engine.direction.opposite]
            engine.set_direction(choices[int(rng.integers(len(choices)))])

    scheduler = Scheduler(engine, on_tick=on_tick)
    try:
        engine.set_direction(engine.direction)
        await finished.wait()
    finally:
        scheduler.close()
    logger.info("Simulation finished after %d ticks.", ticks)
    return engine.snapshot()


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_canvas.render import render_text

    snapshot = asyncio.run(simulate(
        speed=_parse_speed(args.speed),
        seed=args.seed,
        max_ticks=args.ticks,
        grid_size=args.grid_size,
        turn_chance=args.turn_chance,
        show=args.show,
    ))
    print(render_text(snapshot))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-canvas`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
