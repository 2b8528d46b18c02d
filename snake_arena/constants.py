"""Gameplay constants shared across the server modules."""

BOARD_WIDTH: int = 400
BOARD_HEIGHT: int = 400
CELL_SIZE: int = 20

START_TICK_INTERVAL_MS: int = 100
MIN_TICK_INTERVAL_MS: int = 50
SPEED_STEP_MS: int = 10
MILESTONE_SCORE: int = 5

GOLDEN_LIFETIME_MS: int = 5_000
POISON_SHRINK: int = 2
GOLDEN_EXTRA_GROWTH: int = 2
FREE_CELL_RETRIES: int = 2_000

DEFAULT_HEADING: str = "RIGHT"
NAME_MAX_LENGTH: int = 16

# (type, color, score delta, spawn weight, lifetime in ms or None)
FOOD_TYPES = (
    ("normal", "red", 1, 0.7, None),
    ("golden", "yellow", 3, 0.2, GOLDEN_LIFETIME_MS),
    ("poison", "purple", -2, 0.1, None),
)

PLAYER_COLORS = ("#22c55e", "#3b82f6", "#eab308", "#ef4444", "#a855f7", "#14b8a6")
