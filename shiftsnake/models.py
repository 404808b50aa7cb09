"""Data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    BASE_TICK_MS, FLOW_MULTIPLIERS, SHIFT_INTERVAL_MS,
)

Point = tuple[int, int]
Walls = tuple[tuple[bool, ...], ...]


class ItemKind(Enum):
    RED_APPLE = "red_apple"
    BLUE_BIRD = "blue_bird"
    YELLOW_BANANA = "yellow_banana"
    PINK_STRAWBERRY = "pink_strawberry"
    GREEN_CLOVER = "green_clover"
    GOLD_ACORN = "gold_acorn"
    PURPLE_PLUM = "purple_plum"


@dataclass(frozen=True)
class Item:
    position: Point
    kind: ItemKind
    facing: Optional[str] = None


@dataclass(frozen=True)
class GameState:
    """One immutable snapshot of a game.

    Every transition builds a fresh instance with ``dataclasses.replace``;
    ``last_eaten_kind`` and ``last_burst_used`` only describe the most
    recent tick or action.
    """

    snake: tuple[Point, ...]
    direction: str
    walls: Walls
    items: tuple[Item, ...] = ()
    pending_directions: tuple[str, ...] = ()
    score: float = 0.0
    tick_ms: float = BASE_TICK_MS
    elapsed_ms: float = 0.0
    shift_timer_ms: float = SHIFT_INTERVAL_MS
    shift_warning_ms: float = 0.0
    pending_shift: Optional[str] = None
    items_since_shift: int = 0
    flow_timer_ms: float = 0.0
    flow_multiplier: float = FLOW_MULTIPLIERS[0]
    items_since_phase: int = 0
    phase_charges: int = 0
    phase_window_moves: int = 0
    slow_timer_ms: float = 0.0
    burst_charges: int = 0
    last_eaten_kind: Optional[ItemKind] = None
    last_burst_used: bool = False
    is_game_over: bool = False

    def head(self) -> Point:
        return self.snake[0]
