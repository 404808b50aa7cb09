"""Host-side session, edge cues and state serialization."""

import json
import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from fastapi import WebSocket

from .constants import GRID_SIZE, RECENT_RUNS_KEPT
from .game import apply_action, init_game, step
from .input import key_to_action
from .models import GameState, Walls
from .rng import SeededRandom
from .terrain import wall_cells

logger = logging.getLogger(__name__)

EAT_SOUNDS = {
    "red_apple": "eat",
    "blue_bird": "bird",
    "yellow_banana": "banana",
}


class ConnectionManager:
    def __init__(self):
        self.connections: set[WebSocket] = set()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def broadcast(self, message: str):
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_text(message)
            except Exception:
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)


@dataclass
class RunRecord:
    score: float
    elapsed_ms: float


@dataclass
class RunRecords:
    best_score: float = 0.0
    recent: list = field(default_factory=list)

    def record(self, score: float, elapsed_ms: float):
        self.best_score = max(self.best_score, score)
        self.recent.insert(0, RunRecord(score, elapsed_ms))
        del self.recent[RECENT_RUNS_KEPT:]

    def to_dict(self) -> dict:
        return {
            "best_score": self.best_score,
            "recent": [{"score": r.score, "elapsed_ms": r.elapsed_ms} for r in self.recent],
        }


def detect_cues(prev: GameState, nxt: GameState) -> list[str]:
    """Edge-triggered signals between two consecutive snapshots."""
    cues = []
    if nxt.is_game_over and not prev.is_game_over:
        cues.append("gameover")
    if nxt.shift_warning_ms > 0 and prev.shift_warning_ms == 0:
        cues.append("shift")
    if nxt.last_eaten_kind is not None:
        cues.append(f"eat:{nxt.last_eaten_kind.value}")
    if nxt.phase_charges > prev.phase_charges:
        cues.append("phase")
    if nxt.last_burst_used:
        cues.append("burst")
    return cues


def cue_sound(cue: str) -> str:
    """Name of the sound effect a renderer should play for *cue*."""
    if cue.startswith("eat:"):
        return EAT_SOUNDS.get(cue[4:], "bonus")
    return cue


class GameSession:
    """A single local game plus the bookkeeping a host needs around it.

    The same ``SeededRandom`` feeds ``init_game`` and every ``step`` so a
    run is reproducible from its seed and input timing.
    """

    def __init__(self, grid_size: int = GRID_SIZE, seed: Optional[int] = None):
        self.grid_size = grid_size
        self.records = RunRecords()
        self.cues: list[str] = []
        self.restart(seed)

    def restart(self, seed: Optional[int] = None):
        self.seed = random.getrandbits(32) if seed is None else seed
        self.rng = SeededRandom(self.seed)
        self.state = init_game(self.grid_size, rng=self.rng)
        self.cues = []
        logger.info("new game, seed %d", self.seed)

    @property
    def running(self) -> bool:
        return not self.state.is_game_over

    def handle_key(self, key: str) -> bool:
        """Apply the action bound to *key*; False if nothing changed."""
        action = key_to_action(key)
        if action is None:
            return False
        return self._advance(apply_action(self.state, action))

    def tick(self) -> bool:
        return self._advance(step(self.state, self.grid_size, self.rng))

    def _advance(self, nxt: GameState) -> bool:
        prev = self.state
        if nxt is prev:
            return False
        self.cues = detect_cues(prev, nxt)
        self.state = nxt
        if "gameover" in self.cues:
            self.records.record(nxt.score, nxt.elapsed_ms)
            logger.info("game over, score %.1f after %.1fs", nxt.score, nxt.elapsed_ms / 1000)
        return True


def walls_to_list(walls: Walls) -> list[list[int]]:
    return [[x, y] for x, y in wall_cells(walls)]


def snapshot(session: GameSession) -> dict:
    s = session.state
    return {
        "type": "state",
        "seed": session.seed,
        "snake": [list(p) for p in s.snake],
        "direction": s.direction,
        "pending_directions": list(s.pending_directions),
        "items": [
            {"pos": list(item.position), "type": item.kind.value, "facing": item.facing}
            for item in s.items
        ],
        "walls": walls_to_list(s.walls),
        "score": s.score,
        "tick_ms": s.tick_ms,
        "elapsed_ms": s.elapsed_ms,
        "shift_warning": s.shift_warning_ms > 0,
        "pending_shift": s.pending_shift,
        "flow_multiplier": s.flow_multiplier,
        "flow_timer_ms": s.flow_timer_ms,
        "phase_charges": s.phase_charges,
        "phase_window_moves": s.phase_window_moves,
        "slow_timer_ms": s.slow_timer_ms,
        "burst_charges": s.burst_charges,
        "game_over": s.is_game_over,
        "cues": session.cues,
        "sounds": [cue_sound(c) for c in session.cues],
        "best_score": session.records.best_score,
    }


def build_state_msg(session: GameSession) -> str:
    return json.dumps(snapshot(session))
