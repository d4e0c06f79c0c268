"""Tests for the command-line entry point."""

from __future__ import annotations

from unittest.mock import patch

from snake_canvas.cli import _build_parser, main
from snake_canvas.config import GameConfig


class TestParser:
    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.speed == "advanced"
        assert args.ticks == 200
        assert args.grid_size == 25

    def test_serve_flags(self):
        args = _build_parser().parse_args(["serve", "--port", "9001"])
        assert args.port == 9001
        assert args.host is None


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_simulate_prints_final_board(self, capsys):
        code = main([
            "simulate", "--speed", "5", "--seed", "1", "--ticks", "4",
            "--turn-chance", "0",
        ])
        assert code == 0
        out = capsys.readouterr().out
        lines = out.strip().splitlines()
        assert lines[-1] == "Score: 0"
        # Four ticks straight up from (8, 8), stopping short of the food.
        assert lines[4][8] == "@"
        assert lines[3][8] == "*"

    def test_serve_uses_config(self, tmp_path):
        path = tmp_path / "config.json"
        GameConfig(host="0.0.0.0", port=8123).save(path)
        with patch("uvicorn.run") as run:
            assert main(["serve", "--config", str(path), "--port", "9000"]) == 0
        _, kwargs = run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
