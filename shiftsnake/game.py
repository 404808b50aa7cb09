"""Core game state and logic.

Every function here is pure: it takes a ``GameState`` and returns a new
one built with ``dataclasses.replace``.  Randomness is injected as a
zero-argument callable returning floats in ``[0, 1)``; ``init_game``
defaults to a ``SeededRandom`` so the opening layout is reproducible,
while ``step`` defaults to the module-level ``random.random``.  Hosts
that want a reproducible run pass the same generator to both.
"""

import logging
import random
from dataclasses import replace
from typing import Callable, Optional

from .constants import (
    ACORN_CLEAR_COUNT, BURST_CHARGES_MAX, BURST_RADIUS, DIRECTIONS,
    FLOW_WINDOW_MS, GRID_SIZE, ITEMS_PER_PHASE_CHARGE, ITEMS_PER_SHIFT,
    MIN_GRID_SIZE, PHASE_CHARGE_BONUS, PHASE_CHARGES_MAX, PHASE_CLEAR_COUNT,
    PHASE_WINDOW_MOVES, SHIFT_INTERVAL_MS, SHIFT_RETRY_MS, SHIFT_WALL_SPAWN,
    SHIFT_WARNING_MS, SLOW_DURATION_MS, SPAWN_RUNWAY,
)
from .input import Action, Burst, Turn
from .items import (
    ITEM_RULES, Effect, drop_buried_items, ensure_population_targets,
    item_at, move_mobile_items,
)
from .models import GameState, Item
from .rng import SeededRandom
from .snake import (
    advance, can_queue_turn, hits_body, hits_wall, next_head, out_of_bounds,
    resolve_direction, runway, starting_snake,
)
from .terrain import (
    add_walls, apply_shift, clear_cell, clear_radius, init_walls,
    is_safe_shift, plan_shift, remove_walls, target_wall_count,
)
from .timers import countdown, decay_flow, escalate_flow, tick_duration

logger = logging.getLogger(__name__)

Rng = Callable[[], float]


def init_game(grid_size: int = GRID_SIZE, seed: int = 0, rng: Optional[Rng] = None) -> GameState:
    if grid_size < MIN_GRID_SIZE:
        raise ValueError(f"grid_size must be at least {MIN_GRID_SIZE}, got {grid_size}")
    if rng is None:
        rng = SeededRandom(seed)

    snake = starting_snake(grid_size)
    walls = init_walls(grid_size, rng, snake, runway(snake[0], "right", SPAWN_RUNWAY))
    items = ensure_population_targets(grid_size, rng, snake, walls, ())
    return GameState(snake=snake, direction="right", walls=walls, items=items)


def apply_action(state: GameState, action: Action) -> GameState:
    """Queue a turn or fire a burst.  Rejected actions return *state* itself."""
    if state.is_game_over:
        return state

    if isinstance(action, Turn):
        if action.direction not in DIRECTIONS:
            return state
        if not can_queue_turn(state.direction, state.pending_directions, action.direction):
            return state
        return replace(
            state,
            pending_directions=state.pending_directions + (action.direction,),
            last_eaten_kind=None,
            last_burst_used=False,
        )

    if isinstance(action, Burst):
        if state.burst_charges <= 0:
            return state
        logger.debug("burst at %s, %d charges left", state.head(), state.burst_charges - 1)
        return replace(
            state,
            walls=clear_radius(state.walls, state.head(), BURST_RADIUS),
            burst_charges=state.burst_charges - 1,
            last_eaten_kind=None,
            last_burst_used=True,
        )

    return state


def step(state: GameState, grid_size: int = GRID_SIZE, rng: Rng = random.random) -> GameState:
    if state.is_game_over:
        return state

    dt = state.tick_ms
    elapsed = state.elapsed_ms + dt
    flow_timer, flow_multiplier = decay_flow(state.flow_timer_ms, state.flow_multiplier, dt)
    state = replace(
        state,
        elapsed_ms=elapsed,
        tick_ms=tick_duration(elapsed, state.slow_timer_ms > 0),
        flow_timer_ms=flow_timer,
        flow_multiplier=flow_multiplier,
        last_eaten_kind=None,
        last_burst_used=False,
    )
    state = _run_shift_cycle(state, grid_size, rng, dt)
    state = replace(state, slow_timer_ms=countdown(state.slow_timer_ms, dt))

    items = move_mobile_items(state.items, rng, state.snake, state.walls, grid_size)
    direction, pending = resolve_direction(state.direction, state.pending_directions)
    head = next_head(state.head(), direction)
    state = replace(state, items=items, direction=direction, pending_directions=pending)

    if out_of_bounds(head, grid_size):
        return _game_over(state, "boundary")

    walls = state.walls
    charges = state.phase_charges
    window = state.phase_window_moves
    opened = False
    if hits_wall(walls, head):
        if window == 0:
            if charges == 0:
                return _game_over(state, "wall")
            charges -= 1
            window = PHASE_WINDOW_MOVES - 1
            opened = True
        logger.debug("phased through wall at %s", head)
        walls = clear_cell(walls, head)

    eaten = item_at(items, head)
    if hits_body(state.snake, head, eaten is not None):
        return _game_over(state, "self")

    if window > 0 and not opened:
        window -= 1
    state = replace(
        state,
        snake=advance(state.snake, head, eaten is not None),
        walls=walls,
        phase_charges=charges,
        phase_window_moves=window,
    )
    if eaten is not None:
        state = _consume(state, eaten, rng)

    items = drop_buried_items(state.items, state.walls)
    items = ensure_population_targets(grid_size, rng, state.snake, state.walls, items)
    return replace(state, items=items)


def _game_over(state: GameState, cause: str) -> GameState:
    logger.debug("game over (%s) at %s, score %.1f", cause, state.head(), state.score)
    return replace(state, is_game_over=True)


def _run_shift_cycle(state: GameState, grid_size: int, rng: Rng, dt: float) -> GameState:
    """Advance IDLE -> WARNING -> IDLE.

    IDLE counts ``shift_timer_ms`` down and plans a shift when it runs out
    or enough items were eaten.  WARNING counts ``shift_warning_ms`` down
    and then executes or discards the planned shift.
    """
    if state.shift_warning_ms > 0:
        warning = countdown(state.shift_warning_ms, dt)
        if warning > 0:
            return replace(state, shift_warning_ms=warning)
        return _execute_shift(replace(state, shift_warning_ms=0.0), grid_size, rng)

    timer = countdown(state.shift_timer_ms, dt)
    if timer > 0 and state.items_since_shift < ITEMS_PER_SHIFT:
        return replace(state, shift_timer_ms=timer)

    planned = plan_shift(rng)
    logger.debug("shift %s planned", planned)
    return replace(
        state,
        pending_shift=planned,
        shift_warning_ms=SHIFT_WARNING_MS,
        shift_timer_ms=SHIFT_INTERVAL_MS,
        items_since_shift=0,
    )


def _execute_shift(state: GameState, grid_size: int, rng: Rng) -> GameState:
    planned = state.pending_shift
    if planned is None or not is_safe_shift(state.walls, state.snake, planned):
        logger.debug("shift %s discarded, retrying in %dms", planned, SHIFT_RETRY_MS)
        return replace(state, pending_shift=None, shift_timer_ms=SHIFT_RETRY_MS)

    walls = apply_shift(state.walls, planned)
    heading, _ = resolve_direction(state.direction, state.pending_directions)
    walls = add_walls(
        walls,
        rng,
        state.snake,
        next_head(state.head(), heading),
        target_wall_count(grid_size, len(state.snake)),
        SHIFT_WALL_SPAWN,
        blocked=[item.position for item in state.items],
    )
    logger.debug("shift %s executed", planned)
    return replace(state, walls=walls, pending_shift=None)


def _consume(state: GameState, item: Item, rng: Rng) -> GameState:
    rule = ITEM_RULES[item.kind]
    multiplier = escalate_flow(state.flow_timer_ms, state.flow_multiplier)
    score = state.score + rule.score * multiplier
    walls = state.walls
    slow_timer = state.slow_timer_ms
    phase_charges = state.phase_charges
    burst_charges = state.burst_charges

    if rule.effect is Effect.SLOW:
        slow_timer = SLOW_DURATION_MS
    elif rule.effect is Effect.PHASE_CHARGE:
        phase_charges = min(PHASE_CHARGES_MAX, phase_charges + 1)
    elif rule.effect is Effect.CLEAR_WALLS:
        walls = remove_walls(walls, rng, ACORN_CLEAR_COUNT)
    elif rule.effect is Effect.BURST_CHARGE:
        burst_charges = min(BURST_CHARGES_MAX, burst_charges + 1)

    since_phase = state.items_since_phase + 1
    if since_phase >= ITEMS_PER_PHASE_CHARGE:
        since_phase = 0
        phase_charges = min(PHASE_CHARGES_MAX, phase_charges + 1)
        score += PHASE_CHARGE_BONUS
        walls = remove_walls(walls, rng, PHASE_CLEAR_COUNT)

    return replace(
        state,
        items=tuple(other for other in state.items if other.position != item.position),
        score=score,
        walls=walls,
        tick_ms=tick_duration(state.elapsed_ms, slow_timer > 0),
        flow_timer_ms=FLOW_WINDOW_MS,
        flow_multiplier=multiplier,
        slow_timer_ms=slow_timer,
        phase_charges=phase_charges,
        burst_charges=burst_charges,
        items_since_shift=state.items_since_shift + 1,
        items_since_phase=since_phase,
        last_eaten_kind=item.kind,
    )
