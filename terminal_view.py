from __future__ import annotations

import curses
import logging
from typing import Any

import numpy as np

from snake_core import ARENA_X, ARENA_Y, Cell, Key, PlatformIOError


logger = logging.getLogger(__name__)

GLYPHS = {
    Cell.HEAD: "1",
    Cell.BODY: "2",
    Cell.FOOD: "3",
    Cell.EMPTY: ".",
}
PAUSED_CAPTION = "P A U S E D "
ESCAPE = 27

KEY_BINDINGS = {
    ord("w"): Key.UP,
    ord("W"): Key.UP,
    curses.KEY_UP: Key.UP,
    ord("s"): Key.DOWN,
    ord("S"): Key.DOWN,
    curses.KEY_DOWN: Key.DOWN,
    ord("a"): Key.LEFT,
    ord("A"): Key.LEFT,
    curses.KEY_LEFT: Key.LEFT,
    ord("d"): Key.RIGHT,
    ord("D"): Key.RIGHT,
    curses.KEY_RIGHT: Key.RIGHT,
    ord(" "): Key.PAUSE,
    ESCAPE: Key.QUIT,
    ord("q"): Key.QUIT,
}


class TerminalRenderer:
    """Draws the arena as text, two columns per cell."""

    def __init__(self, window: Any, width: int = ARENA_X, height: int = ARENA_Y):
        self.window = window
        self.width = width
        self.height = height

    def render_grid(self, arena: np.ndarray) -> None:
        for row, cells in enumerate(arena):
            for col, cell in enumerate(cells):
                self._write(row, col * 2, GLYPHS[Cell(int(cell))] + " ")
        self._refresh()

    def render_score(self, text: str) -> None:
        self._write(self.height, 0, text)
        self.window.clrtoeol()
        self._refresh()

    def render_paused_banner(self) -> None:
        self._write(self.height // 3, self.width - 6, PAUSED_CAPTION)
        self._refresh()

    def set_cursor_visible(self, visible: bool) -> None:
        # Not every terminal supports hiding the cursor.
        try:
            curses.curs_set(1 if visible else 0)
        except curses.error:
            logger.debug("Terminal refused cursor visibility change to %s", visible)

    def _write(self, y: int, x: int, text: str) -> None:
        try:
            self.window.addstr(y, x, text)
        except curses.error as exc:
            raise PlatformIOError(f"Failed to write to console at ({x}, {y})") from exc

    def _refresh(self) -> None:
        try:
            self.window.refresh()
        except curses.error as exc:
            raise PlatformIOError("Failed to refresh console") from exc


class TerminalInput:
    """Reads queued keypresses without blocking and keeps only the recognized ones."""

    def __init__(self, window: Any):
        self.window = window
        try:
            window.nodelay(True)
            window.keypad(True)
            # A lone Esc is otherwise held back waiting for an escape sequence.
            curses.set_escdelay(25)
        except curses.error as exc:
            raise PlatformIOError("Failed to configure console input") from exc

    def poll(self) -> list[Key]:
        keys = []
        while True:
            code = self.window.getch()
            if code == -1:
                return keys
            key = KEY_BINDINGS.get(code)
            if key is not None:
                keys.append(key)

    def drain(self) -> None:
        try:
            curses.flushinp()
        except curses.error as exc:
            raise PlatformIOError("Failed to flush console input") from exc
