from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence

import numpy as np

from snake_core import (
    ARENA_X,
    ARENA_Y,
    FRAMES_PER_ADVANCE,
    FRAMES_PER_SECOND,
    START_BODY,
    START_FOOD,
    Cell,
    Direction,
    Key,
    Snake,
    arena_full,
    food_cells,
    new_arena,
    spawn_food,
    update_arena,
)


logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    QUIT = "quit"
    DEAD = "dead"
    WON = "won"


class Renderer(Protocol):
    def render_grid(self, arena: np.ndarray) -> None: ...

    def render_score(self, text: str) -> None: ...

    def render_paused_banner(self) -> None: ...

    def set_cursor_visible(self, visible: bool) -> None: ...


class InputSource(Protocol):
    def poll(self) -> Sequence[Key]: ...

    def drain(self) -> None: ...


@dataclass
class GameState:
    """Everything the loop owns between frames."""

    snake: Snake
    arena: np.ndarray
    rng: random.Random = field(default_factory=random.Random)
    paused: bool = False
    direction_latched: bool = False
    frame: int = 0
    outcome: Optional[Outcome] = None

    @classmethod
    def initial(cls, seed: int | None = None, width: int = ARENA_X, height: int = ARENA_Y) -> GameState:
        snake = Snake(START_BODY, Direction.LEFT, width=width, height=height)
        arena = new_arena(width, height, food=START_FOOD)
        update_arena(arena, snake)
        return cls(snake=snake, arena=arena, rng=random.Random(seed))

    @property
    def ended(self) -> bool:
        return self.outcome is not None

    @property
    def score(self) -> int:
        return len(self.snake)


class FrameTimer:
    """Sleeps until the next frame boundary, absorbing time spent in the frame."""

    def __init__(self, fps: float = FRAMES_PER_SECOND, clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.period = 1.0 / fps
        self._clock = clock
        self._sleep = sleep
        self._deadline: float | None = None

    def __call__(self) -> None:
        now = self._clock()
        if self._deadline is None:
            self._deadline = now
        self._deadline += self.period
        remaining = self._deadline - now
        if remaining > 0:
            self._sleep(remaining)
        else:
            # Fell behind; restart the schedule instead of bursting frames.
            self._deadline = now


class Game:
    """Fixed-rate loop: input every frame, game logic every ``frames_per_advance`` frames."""

    def __init__(
        self,
        renderer: Renderer,
        input_source: InputSource,
        wait_frame: Callable[[], None],
        state: GameState | None = None,
        frames_per_advance: int = FRAMES_PER_ADVANCE,
    ):
        if frames_per_advance < 1:
            raise ValueError("frames_per_advance must be at least 1")
        self.renderer = renderer
        self.input_source = input_source
        self.wait_frame = wait_frame
        self.state = state or GameState.initial()
        self.frames_per_advance = frames_per_advance

    def run(self) -> Outcome:
        self.input_source.drain()
        self.render()
        while not self.state.ended:
            self.frame()
            if self.state.ended:
                break
            self.wait_frame()
        logger.info("Game over: %s with length %d", self.state.outcome.value, self.state.score)
        return self.state.outcome

    def frame(self) -> None:
        state = self.state
        for key in self.input_source.poll():
            self.handle_key(key)
            if state.ended:
                return
        if state.frame % self.frames_per_advance == self.frames_per_advance - 1 and not state.paused:
            self.advance()
        state.frame += 1

    def handle_key(self, key: Key) -> None:
        state = self.state
        # One key per advance cycle may steer; a held key is not read twice.
        if not state.direction_latched:
            state.direction_latched = True
            state.snake.update_direction(key)
        if key is Key.PAUSE:
            state.paused = not state.paused
            logger.debug("Paused" if state.paused else "Resumed")
            if state.paused:
                self.renderer.render_paused_banner()
        elif key is Key.QUIT:
            state.outcome = Outcome.QUIT

    def advance(self) -> None:
        state = self.state
        snake = state.snake
        x, y = snake.next_head()
        if state.arena[y, x] == Cell.FOOD:
            snake.add_new_head()
            update_arena(state.arena, snake)
            # Check before spawning; spawn_food never returns on a full board.
            if arena_full(state.arena):
                state.outcome = Outcome.WON
            else:
                spawn_food(state.arena, state.rng)
            logger.debug("Length %d, food at %s", len(snake), food_cells(state.arena))
        else:
            snake.move_once()
            update_arena(state.arena, snake)

        self.render()

        # The lethal frame stays on screen.
        if state.outcome is None and snake.should_be_dead():
            state.outcome = Outcome.DEAD
        state.direction_latched = False

    def render(self) -> None:
        self.renderer.render_grid(self.state.arena)
        self.renderer.render_score(str(self.state.score))
