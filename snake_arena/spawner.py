"""Food and obstacle placement."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from .config import FoodType, GameConfig
from .food import Food
from .grid import Cell
from .registry import EntityRegistry


def pick_weighted_food_type(rng: random.Random, food_types: Sequence[FoodType]) -> FoodType:
    """Draw a food type according to the cumulative table weights.

    Each type owns the half-open range ``[acc, acc + weight)``. If rounding
    leaves the draw past the last range the last type is returned.
    """

    draw = rng.random()
    accumulated = 0.0
    for food_type in food_types:
        accumulated += food_type.weight
        if draw < accumulated:
            return food_type
    return food_types[-1]


class Spawner:
    """Places new food and obstacles on free cells of the registry."""

    def __init__(
        self,
        config: GameConfig,
        registry: EntityRegistry,
        rng: random.Random,
        clock: Callable[[], int],
    ) -> None:
        self.config = config
        self.registry = registry
        self.rng = rng
        self.clock = clock

    def free_cell(self) -> Cell:
        return self.registry.find_random_free_cell(
            self.rng, self.config.cols, self.config.rows, self.config.free_cell_retries
        )

    def spawn_food(self) -> Food:
        """Create a new food item; the caller installs it in the registry."""

        food_type = pick_weighted_food_type(self.rng, self.config.food_types)
        cell = self.free_cell()
        lifetime = self.config.lifetime_for(food_type)
        expires_at = self.clock() + lifetime if lifetime is not None else None
        return Food(cell=cell, type=food_type, expires_at=expires_at)

    def add_obstacle(self) -> Cell:
        cell = self.free_cell()
        self.registry.add_obstacle(cell)
        return cell
