"""Snake movement, turn queue and collision checks."""

from typing import Sequence

from .constants import DIRECTIONS, OPPOSITES, TURN_QUEUE_CAPACITY
from .models import Point, Walls


def opposite(direction: str) -> str:
    return OPPOSITES[direction]


def next_head(head: Point, direction: str) -> Point:
    dx, dy = DIRECTIONS[direction]
    return head[0] + dx, head[1] + dy


def starting_snake(grid_size: int, length: int = 3) -> tuple[Point, ...]:
    mid = grid_size // 2
    return tuple((mid - i, mid) for i in range(length))


def runway(head: Point, direction: str, length: int) -> list[Point]:
    """Cells directly ahead of *head*, nearest first."""
    cells = []
    point = head
    for _ in range(length):
        point = next_head(point, direction)
        cells.append(point)
    return cells


def can_queue_turn(direction: str, pending: Sequence[str], turn: str) -> bool:
    """A turn is accepted while the queue has room and it does not reverse
    the direction that will be active once the queued turns have run."""
    if len(pending) >= TURN_QUEUE_CAPACITY:
        return False
    effective = pending[-1] if pending else direction
    return turn != opposite(effective)


def resolve_direction(direction: str, pending: Sequence[str]) -> tuple[str, tuple[str, ...]]:
    if pending:
        return pending[0], tuple(pending[1:])
    return direction, tuple(pending)


def out_of_bounds(point: Point, grid_size: int) -> bool:
    x, y = point
    return not (0 <= x < grid_size and 0 <= y < grid_size)


def hits_wall(walls: Walls, point: Point) -> bool:
    return walls[point[0]][point[1]]


def hits_body(snake: Sequence[Point], head: Point, growing: bool) -> bool:
    # The tail moves out of the way unless the snake grows this tick.
    body = snake if growing else snake[:-1]
    return head in body


def advance(snake: Sequence[Point], head: Point, growing: bool) -> tuple[Point, ...]:
    moved = (head,) + tuple(snake)
    return moved if growing else moved[:-1]
