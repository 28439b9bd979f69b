"""
Unit tests for the terminal host helpers in main.py.
"""
import json
import logging
import sys

import pytest
from shieldsweeper import BoardEngine

from main import HostClock, main, parse_command


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestParseCommand:
    """Test terminal input parsing."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("r 3 4", ("r", 3, 4)),
            ("  F 1 2 ", ("f", 1, 2)),
            ("n", ("n", None, None)),
            ("Q", ("q", None, None)),
        ],
    )
    def test_valid_commands(self, line, expected) -> None:
        assert parse_command(line) == expected

    @pytest.mark.parametrize("line", ["", "x", "r 1", "r a b", "f 1 2 3"])
    def test_invalid_commands_raise(self, line) -> None:
        with pytest.raises(ValueError):
            parse_command(line)


class TestHostClock:
    """Test the wall-clock driver for advance_time."""

    def test_no_ticks_before_first_command(self, engine: BoardEngine) -> None:
        fake = FakeClock()
        clock = HostClock(engine, now=fake)
        fake.now += 5
        assert clock.sync() == 0
        assert engine.state.elapsed_seconds == 0

    def test_whole_seconds_are_forwarded(self, engine: BoardEngine) -> None:
        fake = FakeClock()
        clock = HostClock(engine, now=fake)
        engine.reveal(1, 1)
        clock.sync()
        fake.now += 2.5
        assert clock.sync() == 2
        fake.now += 0.6
        assert clock.sync() == 1
        assert engine.state.elapsed_seconds == 3

    def test_clock_stops_after_game_over(self, engine: BoardEngine) -> None:
        fake = FakeClock()
        clock = HostClock(engine, now=fake)
        engine.reveal(1, 1)
        clock.sync()
        engine.reveal(0, 0)
        fake.now += 10
        assert clock.sync() == 0
        assert engine.state.elapsed_seconds == 0


class TestMainErrors:
    """Test that the CLI reports bad input without a traceback."""

    @pytest.fixture
    def layout_file(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"grid_size": 3, "bombs": [[0, 0]]}))
        return path

    def test_bad_layout_exits_with_message(
        self, tmp_path, monkeypatch, caplog
    ) -> None:
        path = tmp_path / "layout.json"
        path.write_bytes(b"\xff")
        monkeypatch.setattr(sys, "argv", ["main.py", "--layout", str(path), "play"])
        with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2
        assert "Cannot load layout" in caplog.text

    def test_unwritable_output_is_not_a_layout_error(
        self, layout_file, tmp_path, monkeypatch, caplog
    ) -> None:
        argv = [
            "main.py", "--layout", str(layout_file),
            "compare", "--games", "1", "--output", str(tmp_path),
        ]
        monkeypatch.setattr(sys, "argv", argv)
        with caplog.at_level(logging.ERROR), pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 2
        assert "Cannot write results" in caplog.text
        assert "Cannot load layout" not in caplog.text
