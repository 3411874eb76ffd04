"""
Tests for the snake entry point.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from game_loop import Outcome
from snake import main, parse_args, play_terminal
from snake_core import PlatformIOError


class TestParseArgs:
    def test_defaults_play_in_terminal(self):
        args = parse_args([])
        assert args.backend == "terminal"
        assert args.seed is None
        assert args.log_file is None
        assert args.verbose is False

    def test_options(self):
        args = parse_args(["--backend", "pygame", "--seed", "7", "--log-file", "snake.log", "--verbose"])
        assert args.backend == "pygame"
        assert args.seed == 7
        assert args.log_file == Path("snake.log")
        assert args.verbose is True


class TestMain:
    def test_terminal_backend_runs_under_curses_wrapper(self):
        with patch("snake.curses.wrapper", return_value=Outcome.DEAD) as wrapper:
            main(["--seed", "5"])
        wrapper.assert_called_once_with(play_terminal, 5)

    def test_platform_failure_exits_with_message(self):
        with patch("snake.curses.wrapper", side_effect=PlatformIOError("Failed to write to console")):
            with pytest.raises(SystemExit) as excinfo:
                main([])
        assert "Failed to write to console" in str(excinfo.value.code)


class TestPlayTerminal:
    def test_rejects_small_terminal(self):
        stdscr = MagicMock()
        stdscr.getmaxyx.return_value = (10, 20)
        with pytest.raises(PlatformIOError, match="Terminal too small"):
            play_terminal(stdscr, None)

    def test_restores_cursor_after_game(self):
        stdscr = MagicMock()
        stdscr.getmaxyx.return_value = (24, 80)
        with patch("snake.Game") as game_cls, patch("snake.curses.curs_set") as curs_set:
            game_cls.return_value.run.return_value = Outcome.QUIT
            assert play_terminal(stdscr, 1) is Outcome.QUIT
        assert [c.args[0] for c in curs_set.call_args_list] == [0, 1]
