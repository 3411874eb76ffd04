from __future__ import annotations

import argparse
import curses
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from game_loop import FrameTimer, Game, GameState, Outcome
from snake_core import ARENA_X, ARENA_Y, FRAMES_PER_SECOND, PlatformIOError
from terminal_view import TerminalInput, TerminalRenderer


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake in the terminal.")
    parser.add_argument(
        "--backend", choices=("terminal", "pygame"), default="terminal", help="Where to draw the game."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for food placement.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages.")
    return parser.parse_args(argv)


def configure_logging(log_file: Optional[Path], verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if log_file is None:
        # Anything on stderr would scribble over the curses screen.
        logging.basicConfig(level=level, handlers=[logging.NullHandler()])
        return
    logging.basicConfig(
        level=level,
        filename=log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def play_terminal(stdscr: Any, seed: Optional[int]) -> Outcome:
    rows, cols = stdscr.getmaxyx()
    if rows < ARENA_Y + 1 or cols < ARENA_X * 2:
        raise PlatformIOError(f"Terminal too small: need {ARENA_X * 2}x{ARENA_Y + 1}, got {cols}x{rows}")
    renderer = TerminalRenderer(stdscr)
    input_source = TerminalInput(stdscr)
    renderer.set_cursor_visible(False)
    try:
        game = Game(renderer, input_source, FrameTimer(FRAMES_PER_SECOND), GameState.initial(seed))
        return game.run()
    finally:
        renderer.set_cursor_visible(True)


def play_pygame(seed: Optional[int]) -> Outcome:
    import pygame

    from pygame_view import ClockPacer, open_window

    renderer, input_source = open_window()
    try:
        game = Game(renderer, input_source, ClockPacer(FRAMES_PER_SECOND), GameState.initial(seed))
        return game.run()
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_file, args.verbose)
    logger.info("Starting game backend=%s seed=%s", args.backend, args.seed)
    try:
        if args.backend == "pygame":
            outcome = play_pygame(args.seed)
        else:
            outcome = curses.wrapper(play_terminal, args.seed)
    except PlatformIOError as exc:
        logger.error("Fatal I/O failure: %s", exc)
        sys.exit(f"snake: {exc}")
    logger.info("Exited after %s", outcome.value)


if __name__ == "__main__":
    main()
