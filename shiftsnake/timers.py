"""Per-tick timers and the quantities derived from them."""

from .constants import (
    BASE_TICK_MS, FLOW_MULTIPLIERS, MIN_TICK_MS,
    SLOW_TICK_MULTIPLIER, SPEED_RAMP_MS,
)


def countdown(timer_ms: float, dt: float) -> float:
    return max(0.0, timer_ms - dt)


def tick_duration(elapsed_ms: float, slowed: bool) -> float:
    """Linear ramp from BASE_TICK_MS down to MIN_TICK_MS, stretched while slowed."""
    ramp = min(1.0, elapsed_ms / SPEED_RAMP_MS)
    tick = BASE_TICK_MS - (BASE_TICK_MS - MIN_TICK_MS) * ramp
    if slowed:
        tick *= SLOW_TICK_MULTIPLIER
    return tick


def decay_flow(flow_timer_ms: float, multiplier: float, dt: float) -> tuple[float, float]:
    timer = countdown(flow_timer_ms, dt)
    if timer == 0:
        multiplier = FLOW_MULTIPLIERS[0]
    return timer, multiplier


def escalate_flow(flow_timer_ms: float, multiplier: float) -> float:
    """Multiplier after eating: one step up while the window is open, base otherwise."""
    if flow_timer_ms <= 0:
        return FLOW_MULTIPLIERS[0]
    higher = [m for m in FLOW_MULTIPLIERS if m > multiplier]
    return higher[0] if higher else FLOW_MULTIPLIERS[-1]
