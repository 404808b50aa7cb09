"""Wall grid generation, shifting and density upkeep."""

from typing import Callable, Iterable

from .constants import (
    BORDER_CLEARANCE, SHIFT_DELTAS, SHIFT_ORDER,
    WALL_DENSITY_BY_LENGTH, WALL_MAX_DENSITY, WALL_START_DENSITY,
)
from .models import Point, Walls

Rng = Callable[[], float]


def empty_walls(grid_size: int) -> Walls:
    return tuple((False,) * grid_size for _ in range(grid_size))


def _freeze(cols: list[list[bool]]) -> Walls:
    return tuple(tuple(col) for col in cols)


def _thaw(walls: Walls) -> list[list[bool]]:
    return [list(col) for col in walls]


def _inside_clearance(x: int, y: int, size: int) -> bool:
    return (BORDER_CLEARANCE <= x < size - BORDER_CLEARANCE
            and BORDER_CLEARANCE <= y < size - BORDER_CLEARANCE)


def wall_cells(walls: Walls) -> list[Point]:
    return [(x, y) for x, col in enumerate(walls) for y, cell in enumerate(col) if cell]


def count_walls(walls: Walls) -> int:
    return sum(sum(col) for col in walls)


def init_walls(grid_size: int, rng: Rng, snake: Iterable[Point],
               runway: Iterable[Point] = ()) -> Walls:
    """Scatter the opening walls, keeping the snake and its runway clear."""
    blocked = set(snake) | set(runway)
    cols = [[False] * grid_size for _ in range(grid_size)]
    for x in range(BORDER_CLEARANCE, grid_size - BORDER_CLEARANCE):
        for y in range(BORDER_CLEARANCE, grid_size - BORDER_CLEARANCE):
            if (x, y) in blocked:
                continue
            if rng() < WALL_START_DENSITY:
                cols[x][y] = True
    return _freeze(cols)


def plan_shift(rng: Rng) -> str:
    return SHIFT_ORDER[min(int(rng() * 4), 3)]


def _shifted(x: int, y: int, size: int, direction: str) -> Point:
    dx, dy = SHIFT_DELTAS[direction]
    return (x + dx) % size, (y + dy) % size


def apply_shift(walls: Walls, direction: str) -> Walls:
    """Translate every wall one cell, wrapping around the grid edge."""
    size = len(walls)
    cols = [[False] * size for _ in range(size)]
    for x, y in wall_cells(walls):
        nx, ny = _shifted(x, y, size, direction)
        cols[nx][ny] = True
    return _freeze(cols)


def is_safe_shift(walls: Walls, snake: Iterable[Point], direction: str) -> bool:
    size = len(walls)
    body = set(snake)
    return not any(_shifted(x, y, size, direction) in body for x, y in wall_cells(walls))


def target_wall_count(grid_size: int, snake_length: int) -> int:
    density = WALL_START_DENSITY + WALL_DENSITY_BY_LENGTH * (snake_length - 3)
    density = min(WALL_MAX_DENSITY, max(WALL_START_DENSITY, density))
    return int(grid_size * grid_size * density)


def add_walls(walls: Walls, rng: Rng, snake: Iterable[Point], anchor: Point,
              target_count: int, limit: int, blocked: Iterable[Point] = ()) -> Walls:
    """Grow walls toward *target_count*, at most *limit* per call.

    Sampling gives up after ``limit * 10`` draws so a crowded grid cannot
    stall a tick.
    """
    size = len(walls)
    cols = _thaw(walls)
    occupied = set(snake) | set(blocked)
    occupied.add(anchor)

    current = count_walls(walls)
    added = 0
    attempts = 0
    while current < target_count and added < limit and attempts < limit * 10:
        attempts += 1
        x = int(rng() * size)
        y = int(rng() * size)
        if cols[x][y] or (x, y) in occupied or not _inside_clearance(x, y, size):
            continue
        cols[x][y] = True
        current += 1
        added += 1
    return _freeze(cols)


def remove_walls(walls: Walls, rng: Rng, count: int) -> Walls:
    size = len(walls)
    cols = _thaw(walls)
    removed = 0
    attempts = 0
    while removed < count and attempts < count * 20:
        attempts += 1
        x = int(rng() * size)
        y = int(rng() * size)
        if not cols[x][y]:
            continue
        cols[x][y] = False
        removed += 1
    return _freeze(cols)


def clear_cell(walls: Walls, point: Point) -> Walls:
    x, y = point
    if not walls[x][y]:
        return walls
    cols = _thaw(walls)
    cols[x][y] = False
    return _freeze(cols)


def clear_radius(walls: Walls, center: Point, radius: int) -> Walls:
    """Clear every wall within Chebyshev *radius* of *center*."""
    size = len(walls)
    cx, cy = center
    cols = _thaw(walls)
    for x in range(max(0, cx - radius), min(size, cx + radius + 1)):
        for y in range(max(0, cy - radius), min(size, cy + radius + 1)):
            cols[x][y] = False
    return _freeze(cols)
