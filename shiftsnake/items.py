"""Collectible items: spawning, population upkeep and movers."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, Optional

from .constants import DIRECTIONS, ITEM_SCORES, ITEM_TARGETS, MOVER_STEP_CHANCE
from .models import Item, ItemKind, Point, Walls

Rng = Callable[[], float]

DIRECTION_ORDER = ("up", "down", "left", "right")


class Effect(Enum):
    NONE = "none"
    SLOW = "slow"
    PHASE_CHARGE = "phase_charge"
    CLEAR_WALLS = "clear_walls"
    BURST_CHARGE = "burst_charge"


@dataclass(frozen=True)
class ItemRule:
    score: int
    target: int
    mobile: bool = False
    effect: Effect = Effect.NONE


def _rule(kind: ItemKind, **kw) -> ItemRule:
    return ItemRule(score=ITEM_SCORES[kind.name], target=ITEM_TARGETS[kind.name], **kw)


ITEM_RULES = {
    ItemKind.RED_APPLE: _rule(ItemKind.RED_APPLE),
    ItemKind.BLUE_BIRD: _rule(ItemKind.BLUE_BIRD, mobile=True),
    ItemKind.YELLOW_BANANA: _rule(ItemKind.YELLOW_BANANA, effect=Effect.SLOW),
    ItemKind.PINK_STRAWBERRY: _rule(ItemKind.PINK_STRAWBERRY),
    ItemKind.GREEN_CLOVER: _rule(ItemKind.GREEN_CLOVER, effect=Effect.PHASE_CHARGE),
    ItemKind.GOLD_ACORN: _rule(ItemKind.GOLD_ACORN, effect=Effect.CLEAR_WALLS),
    ItemKind.PURPLE_PLUM: _rule(ItemKind.PURPLE_PLUM, effect=Effect.BURST_CHARGE),
}

# Refill order follows the ItemKind declaration, apples first.
SPAWN_PRIORITY = tuple(ItemKind)


def item_at(items: Iterable[Item], point: Point) -> Optional[Item]:
    for item in items:
        if item.position == point:
            return item
    return None


def spawn_item(grid_size: int, rng: Rng, snake: Iterable[Point], walls: Walls,
               items: Iterable[Item], kind: ItemKind = ItemKind.RED_APPLE) -> Optional[Item]:
    """Place one *kind* item on a free cell.

    Random sampling runs for ``2 * area`` draws, then the grid is scanned
    row by row.  Returns None only when no free cell is left.
    """
    occupied = set(snake)
    occupied.update(item.position for item in items)

    def free(x, y):
        return not walls[x][y] and (x, y) not in occupied

    total = grid_size * grid_size
    for _ in range(total * 2):
        x = int(rng() * grid_size)
        y = int(rng() * grid_size)
        if free(x, y):
            return Item((x, y), kind)

    for y in range(grid_size):
        for x in range(grid_size):
            if free(x, y):
                return Item((x, y), kind)
    return None


def ensure_population_targets(grid_size: int, rng: Rng, snake: Iterable[Point],
                              walls: Walls, items: Iterable[Item]) -> tuple[Item, ...]:
    snake = tuple(snake)
    result = list(items)
    for kind in SPAWN_PRIORITY:
        have = sum(1 for item in result if item.kind is kind)
        while have < ITEM_RULES[kind].target:
            item = spawn_item(grid_size, rng, snake, walls, result, kind)
            if item is None:
                return tuple(result)
            result.append(item)
            have += 1
    return tuple(result)


def move_mobile_items(items: Iterable[Item], rng: Rng, snake: Iterable[Point],
                      walls: Walls, grid_size: int) -> tuple[Item, ...]:
    """Let each mobile item try one random step; blocked steps stay put."""
    result = list(items)
    body = set(snake)
    for i, item in enumerate(result):
        if not ITEM_RULES[item.kind].mobile:
            continue
        if rng() >= MOVER_STEP_CHANCE:
            continue
        facing = DIRECTION_ORDER[min(int(rng() * 4), 3)]
        dx, dy = DIRECTIONS[facing]
        nx, ny = item.position[0] + dx, item.position[1] + dy
        if not (0 <= nx < grid_size and 0 <= ny < grid_size):
            continue
        if walls[nx][ny] or (nx, ny) in body:
            continue
        if any(other.position == (nx, ny) for other in result):
            continue
        result[i] = replace(item, position=(nx, ny), facing=facing)
    return tuple(result)


def drop_buried_items(items: Iterable[Item], walls: Walls) -> tuple[Item, ...]:
    return tuple(item for item in items if not walls[item.position[0]][item.position[1]])
