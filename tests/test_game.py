import random
from dataclasses import replace

import pytest

from shiftsnake.constants import (
    ACORN_CLEAR_COUNT, BASE_TICK_MS, BURST_CHARGES_MAX, FLOW_MULTIPLIERS,
    FLOW_WINDOW_MS, ITEMS_PER_PHASE_CHARGE, ITEMS_PER_SHIFT, PHASE_CHARGE_BONUS,
    PHASE_WINDOW_MOVES, SHIFT_INTERVAL_MS, SHIFT_RETRY_MS, SHIFT_WARNING_MS,
    SLOW_DURATION_MS, SPAWN_RUNWAY,
)
from shiftsnake.game import apply_action, init_game, step
from shiftsnake.input import Burst, Turn
from shiftsnake.items import ITEM_RULES
from shiftsnake.models import Item, ItemKind
from shiftsnake.terrain import count_walls

from helpers import apple, make_state, scripted, walls_with


def test_init_is_deterministic_per_seed():
    assert init_game(20, seed=42) == init_game(20, seed=42)
    a, b = init_game(20, seed=1), init_game(20, seed=2)
    assert (a.walls, a.items) != (b.walls, b.items)


def test_init_layout():
    state = init_game(20, seed=3)
    assert state.snake == ((10, 10), (9, 10), (8, 10))
    assert state.direction == "right"
    for i in range(1, SPAWN_RUNWAY + 1):
        assert not state.walls[10 + i][10]
    for x, y in state.snake:
        assert not state.walls[x][y]
    for kind, rule in ITEM_RULES.items():
        assert sum(1 for item in state.items if item.kind is kind) == rule.target
    assert state.score == 0
    assert state.flow_multiplier == FLOW_MULTIPLIERS[0]
    assert state.shift_timer_ms == SHIFT_INTERVAL_MS
    assert not state.is_game_over


def test_init_rejects_tiny_grid():
    with pytest.raises(ValueError):
        init_game(3)


def test_step_moves_head_forward():
    state = make_state()
    nxt = step(state, 10, scripted())
    assert nxt.snake == ((3, 2), (2, 2), (1, 2))
    assert not nxt.is_game_over
    assert state.snake == ((2, 2), (1, 2), (0, 2))


def test_step_advances_clock():
    nxt = step(make_state(), 10, scripted())
    assert nxt.elapsed_ms == BASE_TICK_MS
    assert nxt.tick_ms < BASE_TICK_MS


def test_reverse_turn_is_rejected():
    state = make_state()
    assert apply_action(state, Turn("left")) is state

    queued = apply_action(state, Turn("up"))
    assert queued.pending_directions == ("up",)
    assert apply_action(queued, Turn("down")) is queued


def test_turn_queue_is_capped():
    state = apply_action(apply_action(make_state(), Turn("up")), Turn("left"))
    assert state.pending_directions == ("up", "left")
    assert apply_action(state, Turn("down")) is state


def test_unknown_direction_is_ignored():
    state = make_state()
    assert apply_action(state, Turn("sideways")) is state


def test_queued_turns_resolve_in_order():
    state = make_state(snake=((5, 5), (4, 5), (3, 5)))
    state = apply_action(apply_action(state, Turn("up")), Turn("left"))
    state = step(state, 10, scripted())
    assert state.snake[0] == (5, 4)
    assert state.direction == "up"
    assert state.pending_directions == ("left",)
    state = step(state, 10, scripted())
    assert state.snake[0] == (4, 4)
    assert state.pending_directions == ()


def test_boundary_collision_ends_game():
    state = make_state(snake=((9, 0), (8, 0), (7, 0)))
    assert step(state, 10, scripted()).is_game_over


def test_wall_collision_without_charge_ends_game():
    state = make_state(walls=[(3, 2)])
    assert step(state, 10, scripted()).is_game_over


def test_self_collision_ends_game():
    state = make_state(snake=((2, 2), (2, 3), (3, 3), (3, 2), (3, 1)), direction="up")
    state = apply_action(state, Turn("right"))
    assert step(state, 10, scripted()).is_game_over


def test_moving_into_vacating_tail_is_allowed():
    state = make_state(snake=((2, 2), (2, 3), (3, 3), (3, 2)), direction="up")
    state = apply_action(state, Turn("right"))
    nxt = step(state, 10, scripted())
    assert not nxt.is_game_over
    assert nxt.snake[0] == (3, 2)


def test_moving_into_tail_while_eating_ends_game():
    state = make_state(snake=((2, 2), (2, 3), (3, 3), (3, 2)), direction="up",
                       items=[apple(3, 2)])
    state = apply_action(state, Turn("right"))
    assert step(state, 10, scripted()).is_game_over


def test_turn_clears_tick_scoped_flags():
    state = make_state(last_eaten_kind=ItemKind.RED_APPLE, last_burst_used=True)
    nxt = apply_action(state, Turn("up"))
    assert nxt.last_eaten_kind is None
    assert not nxt.last_burst_used


def test_game_over_is_terminal():
    over = step(make_state(snake=((9, 0), (8, 0), (7, 0))), 10, scripted())
    assert step(over, 10, scripted()) is over
    assert apply_action(over, Turn("down")) is over
    assert apply_action(replace(over, burst_charges=1), Burst()).walls == over.walls


def test_eating_grows_and_scores():
    state = make_state(items=[apple(3, 2)])
    nxt = step(state, 10, scripted())
    assert len(nxt.snake) == 4
    assert nxt.snake[-1] == (0, 2)
    assert nxt.score == ITEM_RULES[ItemKind.RED_APPLE].score * 1.0
    assert nxt.last_eaten_kind is ItemKind.RED_APPLE
    assert nxt.flow_timer_ms == FLOW_WINDOW_MS
    assert nxt.items_since_shift == 1
    assert (3, 2) not in [item.position for item in nxt.items]


def test_last_eaten_kind_is_tick_scoped():
    state = step(make_state(items=[apple(3, 2)]), 10, scripted())
    assert step(state, 10, scripted()).last_eaten_kind is None


def test_flow_multiplier_escalates_within_window():
    state = make_state(items=[apple(3, 2)], flow_timer_ms=3000, flow_multiplier=1.0)
    nxt = step(state, 10, scripted())
    assert nxt.flow_multiplier == FLOW_MULTIPLIERS[1]
    assert nxt.score == ITEM_RULES[ItemKind.RED_APPLE].score * FLOW_MULTIPLIERS[1]


def test_flow_multiplier_caps_at_top():
    top = FLOW_MULTIPLIERS[-1]
    state = make_state(items=[apple(3, 2)], flow_timer_ms=3000, flow_multiplier=top)
    assert step(state, 10, scripted()).flow_multiplier == top


def test_flow_resets_when_timer_lapses():
    state = make_state(flow_timer_ms=0, flow_multiplier=2.0)
    assert step(state, 10, scripted()).flow_multiplier == FLOW_MULTIPLIERS[0]

    state = make_state(items=[apple(3, 2)], flow_timer_ms=50, flow_multiplier=2.0)
    nxt = step(state, 10, scripted())
    assert nxt.flow_multiplier == FLOW_MULTIPLIERS[0]
    assert nxt.score == ITEM_RULES[ItemKind.RED_APPLE].score


def test_phase_charge_passes_through_wall():
    state = make_state(walls=[(3, 2), (4, 2), (5, 2)], phase_charges=1)
    nxt = step(state, 10, scripted())
    assert not nxt.is_game_over
    assert nxt.phase_charges == 0
    assert nxt.phase_window_moves == PHASE_WINDOW_MOVES - 1
    assert not nxt.walls[3][2]

    nxt = step(nxt, 10, scripted())
    assert not nxt.is_game_over
    assert nxt.phase_window_moves == 0

    assert step(nxt, 10, scripted()).is_game_over


def test_phase_window_lapses_on_open_ground():
    state = make_state(phase_window_moves=1)
    assert step(state, 10, scripted()).phase_window_moves == 0


def test_burst_without_charges_changes_nothing():
    state = make_state(walls=[(3, 2)])
    assert apply_action(state, Burst()) is state


def test_burst_clears_walls_near_head():
    state = make_state(snake=((5, 5), (4, 5), (3, 5)), walls=[(6, 5), (7, 7), (8, 5)],
                       burst_charges=1)
    nxt = apply_action(state, Burst())
    assert nxt.burst_charges == 0
    assert nxt.last_burst_used
    assert not nxt.walls[6][5] and not nxt.walls[7][7]
    assert nxt.walls[8][5]
    assert not step(nxt, 10, scripted()).last_burst_used


def test_banana_slows_the_game():
    state = make_state(items=[Item((3, 2), ItemKind.YELLOW_BANANA)])
    nxt = step(state, 10, scripted())
    assert nxt.slow_timer_ms == SLOW_DURATION_MS
    assert nxt.tick_ms > BASE_TICK_MS
    later = step(nxt, 10, scripted())
    assert later.slow_timer_ms == SLOW_DURATION_MS - nxt.tick_ms


def test_clover_and_plum_grant_capped_charges():
    clover = make_state(items=[Item((3, 2), ItemKind.GREEN_CLOVER)])
    assert step(clover, 10, scripted()).phase_charges == 1

    plum = make_state(items=[Item((3, 2), ItemKind.PURPLE_PLUM)])
    assert step(plum, 10, scripted()).burst_charges == 1

    full = make_state(items=[Item((3, 2), ItemKind.PURPLE_PLUM)], burst_charges=BURST_CHARGES_MAX)
    assert step(full, 10, scripted()).burst_charges == BURST_CHARGES_MAX


def test_acorn_clears_walls():
    dense = [(x, y) for x in range(10) for y in range(5, 10)]
    state = make_state(walls=dense, items=[Item((3, 2), ItemKind.GOLD_ACORN)])
    nxt = step(state, 10, random.Random(0).random)
    assert count_walls(nxt.walls) == len(dense) - ACORN_CLEAR_COUNT


def test_every_nth_item_grants_phase_bonus():
    state = make_state(items=[apple(3, 2)], items_since_phase=ITEMS_PER_PHASE_CHARGE - 1)
    nxt = step(state, 10, scripted())
    assert nxt.phase_charges == 1
    assert nxt.items_since_phase == 0
    assert nxt.score == ITEM_RULES[ItemKind.RED_APPLE].score + PHASE_CHARGE_BONUS


def test_population_restored_after_eating():
    state = init_game(20, seed=5)
    target = next(i for i in state.items if i.kind is ItemKind.RED_APPLE)
    x, y = target.position
    state = replace(
        state,
        snake=((x - 1, y), (x - 2, y), (x - 3, y)) if x >= 3 else ((x + 1, y), (x + 2, y), (x + 3, y)),
        direction="right" if x >= 3 else "left",
        walls=walls_with(20, []),
    )
    nxt = step(state, 20, random.Random(5).random)
    assert nxt.last_eaten_kind is ItemKind.RED_APPLE
    for kind, rule in ITEM_RULES.items():
        assert sum(1 for item in nxt.items if item.kind is kind) >= rule.target


def test_shift_timer_expiry_starts_warning():
    state = make_state(shift_timer_ms=100)
    nxt = step(state, 10, scripted())
    assert nxt.pending_shift == "LEFT"
    assert nxt.shift_warning_ms == SHIFT_WARNING_MS
    assert nxt.shift_timer_ms == SHIFT_INTERVAL_MS


def test_item_threshold_starts_warning():
    state = make_state(items_since_shift=ITEMS_PER_SHIFT)
    nxt = step(state, 10, scripted())
    assert nxt.pending_shift is not None
    assert nxt.items_since_shift == 0
    assert nxt.shift_warning_ms == SHIFT_WARNING_MS


def test_warning_counts_down_before_shift():
    state = make_state(walls=[(7, 7)], shift_warning_ms=500, pending_shift="LEFT")
    nxt = step(state, 10, scripted())
    assert nxt.shift_warning_ms == 500 - BASE_TICK_MS
    assert nxt.pending_shift == "LEFT"
    assert nxt.walls[7][7]


def test_safe_shift_executes():
    state = make_state(walls=[(7, 7)], shift_warning_ms=50, pending_shift="LEFT")
    nxt = step(state, 10, scripted())
    assert nxt.pending_shift is None
    assert nxt.shift_warning_ms == 0
    assert nxt.walls[6][7]
    assert not nxt.walls[7][7]
    for x, y in nxt.snake:
        assert not nxt.walls[x][y]


def test_unsafe_shift_is_discarded_and_retried_sooner():
    state = make_state(walls=[(1, 1)], shift_warning_ms=50, pending_shift="DOWN")
    nxt = step(state, 10, scripted())
    assert not nxt.is_game_over
    assert nxt.pending_shift is None
    assert nxt.walls == state.walls
    assert nxt.shift_timer_ms == SHIFT_RETRY_MS


def test_shift_buries_and_replaces_items():
    state = make_state(walls=[(6, 6)], items=[apple(5, 6)], shift_warning_ms=50,
                       pending_shift="LEFT")
    nxt = step(state, 10, scripted())
    assert nxt.walls[5][6]
    assert (5, 6) not in [item.position for item in nxt.items]
    apples = [item for item in nxt.items if item.kind is ItemKind.RED_APPLE]
    assert len(apples) == ITEM_RULES[ItemKind.RED_APPLE].target


def test_birds_wander_during_step():
    state = make_state(items=[Item((7, 7), ItemKind.BLUE_BIRD)])
    nxt = step(state, 10, scripted(0.0, 0.99))
    assert Item((8, 7), ItemKind.BLUE_BIRD, facing="right") in nxt.items


def test_step_returns_new_state_without_touching_old():
    state = make_state(items=[apple(3, 2)])
    snapshot = replace(state)
    step(state, 10, scripted())
    assert state == snapshot
