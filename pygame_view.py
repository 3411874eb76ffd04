from __future__ import annotations

from typing import Iterable

import numpy as np
import pygame

from snake_core import ARENA_X, ARENA_Y, FRAMES_PER_SECOND, Cell, Key, PlatformIOError


CELL_SIZE = 20
STATUS_HEIGHT = 32
SCREEN_WIDTH = ARENA_X * CELL_SIZE
SCREEN_HEIGHT = ARENA_Y * CELL_SIZE + STATUS_HEIGHT
FONT_NAME = "arial"
BACKGROUND = (24, 24, 24)

CELL_COLORS = {
    Cell.HEAD: "lime",
    Cell.BODY: "green3",
    Cell.FOOD: "red",
    Cell.EMPTY: "gray20",
}

KEY_BINDINGS = {
    pygame.K_w: Key.UP,
    pygame.K_UP: Key.UP,
    pygame.K_s: Key.DOWN,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_a: Key.LEFT,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_d: Key.RIGHT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_SPACE: Key.PAUSE,
    pygame.K_ESCAPE: Key.QUIT,
    pygame.K_q: Key.QUIT,
}


def draw_block(surface: pygame.Surface, color: pygame.Color, position: tuple[int, int]) -> None:
    rect = pygame.Rect(position[0] * CELL_SIZE, position[1] * CELL_SIZE, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(surface, color, rect)


def cell_center(position: tuple[int, int]) -> tuple[int, int]:
    x = position[0] * CELL_SIZE + CELL_SIZE // 2
    y = position[1] * CELL_SIZE + CELL_SIZE // 2
    return x, y


def keys_from_events(events: Iterable[pygame.event.Event]) -> list[Key]:
    keys = []
    for event in events:
        if event.type == pygame.QUIT:
            keys.append(Key.QUIT)
        elif event.type == pygame.KEYDOWN and event.key in KEY_BINDINGS:
            keys.append(KEY_BINDINGS[event.key])
    return keys


class PygameRenderer:
    """Window rendering: one colored block per cell, score below the grid."""

    def __init__(self, screen: pygame.Surface, font: pygame.font.Font):
        self.screen = screen
        self.font = font

    def render_grid(self, arena: np.ndarray) -> None:
        self.screen.fill(BACKGROUND)
        for (y, x), cell in np.ndenumerate(arena):
            cell = Cell(int(cell))
            color = pygame.Color(CELL_COLORS[cell])
            if cell in (Cell.HEAD, Cell.BODY):
                radius = max(2, CELL_SIZE // 2 - 2)
                pygame.draw.circle(self.screen, color, cell_center((x, y)), radius)
            else:
                draw_block(self.screen, color, (x, y))

    def render_score(self, text: str) -> None:
        # Shown together with the grid drawn just before it.
        status = pygame.Rect(0, ARENA_Y * CELL_SIZE, SCREEN_WIDTH, STATUS_HEIGHT)
        self.screen.fill(BACKGROUND, status)
        score_text = self.font.render(text, True, pygame.Color("white"))
        self.screen.blit(score_text, (10, ARENA_Y * CELL_SIZE + 4))
        self._flip()

    def render_paused_banner(self) -> None:
        msg = self.font.render("Paused", True, pygame.Color("white"))
        rect = msg.get_rect(center=(SCREEN_WIDTH // 2, (ARENA_Y // 3) * CELL_SIZE))
        self.screen.blit(msg, rect)
        self._flip()

    def set_cursor_visible(self, visible: bool) -> None:
        pygame.mouse.set_visible(visible)

    def _flip(self) -> None:
        try:
            pygame.display.flip()
        except pygame.error as exc:
            raise PlatformIOError("Failed to update display") from exc


class PygameInput:
    def poll(self) -> list[Key]:
        try:
            events = pygame.event.get()
        except pygame.error as exc:
            raise PlatformIOError("Failed to read window events") from exc
        return keys_from_events(events)

    def drain(self) -> None:
        pygame.event.clear()


class ClockPacer:
    """Frame pacing through ``pygame.time.Clock``."""

    def __init__(self, fps: int = FRAMES_PER_SECOND):
        self.fps = fps
        self.clock = pygame.time.Clock()

    def __call__(self) -> None:
        self.clock.tick(self.fps)


def open_window() -> tuple[PygameRenderer, PygameInput]:
    try:
        pygame.init()
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    except pygame.error as exc:
        raise PlatformIOError("Failed to open game window") from exc
    pygame.display.set_caption("Snake")
    font = pygame.font.SysFont(FONT_NAME, 24)
    return PygameRenderer(screen, font), PygameInput()
