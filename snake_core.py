from __future__ import annotations

import enum
import logging
import random
from collections import deque
from typing import Deque, Iterable, Tuple

import numpy as np


logger = logging.getLogger(__name__)

ARENA_X = 17
ARENA_Y = 15
FRAMES_PER_SECOND = 20
MOVE_SPEED = 8
FRAMES_PER_ADVANCE = max(1, FRAMES_PER_SECOND // MOVE_SPEED)

Position = Tuple[int, int]

START_BODY: Tuple[Position, ...] = ((4, 4), (4, 5), (5, 5))
START_FOOD: Tuple[Position, ...] = ((10, 12), (5, 12))


class SnakeError(Exception):
    """Base class for game errors."""


class InvalidKey(SnakeError):
    """Key is not one of the directional controls."""


class PlatformIOError(SnakeError):
    """A renderer or input operation could not be completed."""


class Cell(enum.IntEnum):
    EMPTY = 0
    HEAD = 1
    BODY = 2
    FOOD = 3


class Key(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAUSE = "pause"
    QUIT = "quit"


class Direction(enum.Enum):
    # y grows downward, matching terminal rows.
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    @classmethod
    def from_key(cls, key: Key) -> Direction:
        try:
            return _KEY_DIRECTIONS[key]
        except KeyError:
            raise InvalidKey(f"Invalid key: {key!r}") from None


_KEY_DIRECTIONS = {
    Key.UP: Direction.UP,
    Key.DOWN: Direction.DOWN,
    Key.LEFT: Direction.LEFT,
    Key.RIGHT: Direction.RIGHT,
}


def wrap(value: int, low: int, high: int) -> int:
    """Wrap a single out-of-range step to the opposite bound.

    Only a displacement of one unit past a bound lands on the right cell;
    larger jumps end up on the far edge rather than wrapping modulo the range.
    """
    if value < low:
        return high
    if value > high:
        return low
    return value


def next_pos(pos: Position, direction: Direction, width: int = ARENA_X, height: int = ARENA_Y) -> Position:
    dx, dy = direction.value
    x = wrap(pos[0] + dx, 0, width - 1)
    y = wrap(pos[1] + dy, 0, height - 1)
    return x, y


def update_direction(current: Direction, key: Key) -> Direction:
    try:
        candidate = Direction.from_key(key)
    except InvalidKey:
        return current
    # Reversing straight into the neck is ignored.
    if candidate is current.opposite:
        return current
    return candidate


class Snake:
    """Ordered body segments (head first) plus the current heading."""

    def __init__(
        self,
        body: Iterable[Position],
        direction: Direction = Direction.LEFT,
        width: int = ARENA_X,
        height: int = ARENA_Y,
    ):
        self.body: Deque[Position] = deque(tuple(pos) for pos in body)
        if not self.body:
            raise SnakeError("Snake body must have at least one segment")
        self.direction = direction
        self.width = width
        self.height = height

    def __len__(self) -> int:
        return len(self.body)

    def __repr__(self) -> str:
        return f"<Snake direction={self.direction.name} body={list(self.body)}>"

    def head_pos(self) -> Position:
        if not self.body:
            raise SnakeError("Snake is empty")
        return self.body[0]

    def next_head(self) -> Position:
        return next_pos(self.head_pos(), self.direction, self.width, self.height)

    def move_once(self) -> None:
        # Every segment takes the place of the one ahead of it.
        self.body.appendleft(self.next_head())
        self.body.pop()

    def add_new_head(self) -> None:
        self.body.appendleft(self.next_head())

    def update_direction(self, key: Key) -> None:
        self.direction = update_direction(self.direction, key)

    def should_be_dead(self) -> bool:
        head = self.head_pos()
        return any(pos == head for pos in list(self.body)[1:])


def new_arena(width: int = ARENA_X, height: int = ARENA_Y, food: Iterable[Position] = ()) -> np.ndarray:
    arena = np.full((height, width), Cell.EMPTY, dtype=np.int8)
    for x, y in food:
        arena[y, x] = Cell.FOOD
    return arena


def update_arena(arena: np.ndarray, snake: Snake) -> None:
    """Repaint the snake onto the arena, keeping food cells in place."""
    arena[arena != Cell.FOOD] = Cell.EMPTY
    # Tail first so the head is written last and wins any overlap.
    for idx in reversed(range(len(snake.body))):
        x, y = snake.body[idx]
        arena[y, x] = Cell.HEAD if idx == 0 else Cell.BODY


def arena_full(arena: np.ndarray) -> bool:
    return not bool((arena == Cell.EMPTY).any())


def food_cells(arena: np.ndarray) -> list[Position]:
    ys, xs = np.nonzero(arena == Cell.FOOD)
    return [(int(x), int(y)) for x, y in zip(xs, ys)]


def spawn_food(arena: np.ndarray, rng: random.Random) -> Position:
    """Mark a uniformly random empty cell as food.

    Loops until an empty cell is drawn, so callers must check ``arena_full``
    first.
    """
    height, width = arena.shape
    while True:
        cell = (rng.randrange(width), rng.randrange(height))
        if arena[cell[1], cell[0]] == Cell.EMPTY:
            arena[cell[1], cell[0]] = Cell.FOOD
            logger.debug("Spawned food at %s", cell)
            return cell
