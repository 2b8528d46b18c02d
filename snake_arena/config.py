"""Overridable game configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import List, Optional, Tuple

from . import constants
from .grid import Cell, Direction


@dataclass(frozen=True)
class FoodType:
    """One row of the food table."""

    name: str
    color: str
    score: int
    weight: float
    lifetime_ms: Optional[int] = None


def default_food_types() -> Tuple[FoodType, ...]:
    return tuple(FoodType(*row) for row in constants.FOOD_TYPES)


@dataclass
class GameConfig:
    """Every tunable of the simulation, defaulting to ``constants``."""

    width: int = constants.BOARD_WIDTH
    height: int = constants.BOARD_HEIGHT
    cell_size: int = constants.CELL_SIZE
    start_tick_interval_ms: int = constants.START_TICK_INTERVAL_MS
    min_tick_interval_ms: int = constants.MIN_TICK_INTERVAL_MS
    speed_step_ms: int = constants.SPEED_STEP_MS
    milestone_score: int = constants.MILESTONE_SCORE
    golden_lifetime_ms: int = constants.GOLDEN_LIFETIME_MS
    poison_shrink: int = constants.POISON_SHRINK
    golden_extra_growth: int = constants.GOLDEN_EXTRA_GROWTH
    free_cell_retries: int = constants.FREE_CELL_RETRIES
    default_heading: Direction = Direction(constants.DEFAULT_HEADING)
    name_max_length: int = constants.NAME_MAX_LENGTH
    food_types: Tuple[FoodType, ...] = field(default_factory=default_food_types)
    player_colors: Tuple[str, ...] = constants.PLAYER_COLORS

    @property
    def cols(self) -> int:
        return self.width // self.cell_size

    @property
    def rows(self) -> int:
        return self.height // self.cell_size

    def food_type(self, name: str) -> FoodType:
        """Return the food table entry called ``name``."""

        for food_type in self.food_types:
            if food_type.name == name:
                return food_type
        raise KeyError(name)

    def lifetime_for(self, food_type: FoodType) -> Optional[int]:
        """Return the lifetime of ``food_type`` in milliseconds.

        Golden food always lives for ``golden_lifetime_ms`` so the command
        line override applies even when the table is left untouched.
        """

        if food_type.name == "golden":
            return self.golden_lifetime_ms
        return food_type.lifetime_ms

    def spawn_slots(self) -> List[Cell]:
        """Return the fixed spawn cells near the corners and edges."""

        cols, rows = self.cols, self.rows
        return [
            Cell(2, 2),
            Cell(cols - 3, rows - 3),
            Cell(2, rows - 3),
            Cell(cols - 3, 2),
            Cell(cols // 2, 2),
            Cell(cols // 2, rows - 3),
        ]

    def validate(self) -> "GameConfig":
        """Raise ``ValueError`` if the configuration cannot drive a game."""

        positive = {
            "width": self.width,
            "height": self.height,
            "cell_size": self.cell_size,
            "start_tick_interval_ms": self.start_tick_interval_ms,
            "min_tick_interval_ms": self.min_tick_interval_ms,
            "milestone_score": self.milestone_score,
            "golden_lifetime_ms": self.golden_lifetime_ms,
            "free_cell_retries": self.free_cell_retries,
            "name_max_length": self.name_max_length,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        for name in ("speed_step_ms", "poison_shrink", "golden_extra_growth"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.width % self.cell_size or self.height % self.cell_size:
            raise ValueError("Board dimensions must be a whole number of cells")
        if self.cols < 6 or self.rows < 6:
            raise ValueError("Board must be at least 6x6 cells")
        if self.min_tick_interval_ms > self.start_tick_interval_ms:
            raise ValueError("min_tick_interval_ms exceeds start_tick_interval_ms")
        if not self.food_types:
            raise ValueError("At least one food type is required")
        if any(food_type.weight < 0 for food_type in self.food_types):
            raise ValueError("Food weights must not be negative")
        total = sum(food_type.weight for food_type in self.food_types)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Food weights must sum to 1, got {total}")
        if not self.player_colors:
            raise ValueError("At least one player color is required")
        return self
