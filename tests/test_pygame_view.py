"""
Tests for pygame_view - the window renderer and event adapter.
"""

from unittest.mock import MagicMock, patch

import pygame
import pytest

from pygame_view import (
    CELL_COLORS,
    CELL_SIZE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    ClockPacer,
    PygameRenderer,
    cell_center,
    keys_from_events,
)
from snake_core import Cell, Key, PlatformIOError, new_arena


def key_event(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


class TestKeysFromEvents:
    def test_maps_bound_keys(self):
        events = [key_event(pygame.K_w), key_event(pygame.K_LEFT), key_event(pygame.K_SPACE)]
        assert keys_from_events(events) == [Key.UP, Key.LEFT, Key.PAUSE]

    def test_window_close_quits(self):
        assert keys_from_events([pygame.event.Event(pygame.QUIT)]) == [Key.QUIT]

    def test_ignores_unbound_keys_and_key_release(self):
        events = [key_event(pygame.K_x), pygame.event.Event(pygame.KEYUP, key=pygame.K_w)]
        assert keys_from_events(events) == []


class TestPygameRenderer:
    def test_render_grid_colors_cells(self):
        screen = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), 0, 32)
        renderer = PygameRenderer(screen, MagicMock())
        arena = new_arena(food=[(0, 0)])
        arena[0, 1] = Cell.HEAD

        with patch("pygame_view.pygame.display.flip"):
            renderer.render_grid(arena)

        assert screen.get_at((1, 1)) == pygame.Color(CELL_COLORS[Cell.FOOD])
        assert screen.get_at(cell_center((1, 0))) == pygame.Color(CELL_COLORS[Cell.HEAD])
        assert screen.get_at((CELL_SIZE * 5 + 1, CELL_SIZE * 5 + 1)) == pygame.Color(CELL_COLORS[Cell.EMPTY])

    def test_render_score_uses_font(self):
        screen = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), 0, 32)
        font = MagicMock()
        font.render.return_value = pygame.Surface((10, 10))
        renderer = PygameRenderer(screen, font)

        with patch("pygame_view.pygame.display.flip"):
            renderer.render_score("7")

        assert font.render.call_args.args[0] == "7"

    def test_display_failure_is_fatal(self):
        screen = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), 0, 32)
        font = MagicMock()
        font.render.return_value = pygame.Surface((10, 10))
        renderer = PygameRenderer(screen, font)

        with patch("pygame_view.pygame.display.flip", side_effect=pygame.error("no video")):
            with pytest.raises(PlatformIOError, match="Failed to update display"):
                renderer.render_score("3")

    def test_grid_and_score_reach_the_screen_in_one_flip(self):
        screen = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), 0, 32)
        font = MagicMock()
        font.render.return_value = pygame.Surface((10, 10))
        renderer = PygameRenderer(screen, font)

        with patch("pygame_view.pygame.display.flip") as flip:
            renderer.render_grid(new_arena())
            flip.assert_not_called()
            renderer.render_score("3")

        flip.assert_called_once()


class TestClockPacer:
    def test_ticks_at_frame_rate(self):
        pacer = ClockPacer(fps=20)
        pacer.clock = MagicMock()
        pacer()
        pacer.clock.tick.assert_called_once_with(20)
