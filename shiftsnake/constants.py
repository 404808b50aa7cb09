"""Game constants."""

GRID_SIZE = 20
CELL_SIZE = 20
MIN_GRID_SIZE = 5

BASE_TICK_MS = 120
MIN_TICK_MS = 95
SPEED_RAMP_MS = 8 * 60 * 1000

SHIFT_INTERVAL_MS = 12_000
SHIFT_WARNING_MS = 600
SHIFT_RETRY_MS = 2_000
ITEMS_PER_SHIFT = 4

FLOW_WINDOW_MS = 5_000
FLOW_MULTIPLIERS = (1.0, 1.5, 2.0)

PHASE_CHARGES_MAX = 2
PHASE_WINDOW_MOVES = 2
ITEMS_PER_PHASE_CHARGE = 3
PHASE_CHARGE_BONUS = 25
PHASE_CLEAR_COUNT = 4

BURST_CHARGES_MAX = 2
BURST_RADIUS = 2

SLOW_DURATION_MS = 4_000
SLOW_TICK_MULTIPLIER = 1.5

MOVER_STEP_CHANCE = 0.35
ACORN_CLEAR_COUNT = 6

TURN_QUEUE_CAPACITY = 2
SPAWN_RUNWAY = 3

# Wall density is a fraction of the whole grid area.
WALL_START_DENSITY = 0.08
WALL_MAX_DENSITY = 0.18
WALL_DENSITY_BY_LENGTH = 0.004
SHIFT_WALL_SPAWN = 6
BORDER_CLEARANCE = 1

# Keyed by ItemKind.name so this module stays free of model imports.
ITEM_SCORES = {
    "RED_APPLE": 10,
    "BLUE_BIRD": 25,
    "YELLOW_BANANA": 5,
    "PINK_STRAWBERRY": 50,
    "GREEN_CLOVER": 15,
    "GOLD_ACORN": 20,
    "PURPLE_PLUM": 15,
}
ITEM_TARGETS = {
    "RED_APPLE": 2,
    "BLUE_BIRD": 1,
    "YELLOW_BANANA": 1,
    "PINK_STRAWBERRY": 1,
    "GREEN_CLOVER": 1,
    "GOLD_ACORN": 1,
    "PURPLE_PLUM": 1,
}

RECENT_RUNS_KEPT = 5

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
OPPOSITES = {"up": "down", "down": "up", "left": "right", "right": "left"}

SHIFT_ORDER = ("LEFT", "RIGHT", "UP", "DOWN")
SHIFT_DELTAS = {
    "LEFT": (-1, 0),
    "RIGHT": (1, 0),
    "UP": (0, -1),
    "DOWN": (0, 1),
}

ITEM_COLORS = {
    "RED_APPLE": "#d65235",
    "BLUE_BIRD": "#3d7fd6",
    "YELLOW_BANANA": "#f2c641",
    "PINK_STRAWBERRY": "#ff6fa8",
    "GREEN_CLOVER": "#3fbf6a",
    "GOLD_ACORN": "#c99a2e",
    "PURPLE_PLUM": "#8b4fd1",
}
