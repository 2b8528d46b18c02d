"""Live entity storage and occupancy queries."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Set

from .food import Food
from .grid import Cell
from .snake import Snake

FALLBACK_CELL = Cell(0, 0)


class EntityRegistry:
    """Holds every snake, every obstacle and the active food item."""

    def __init__(self) -> None:
        self.snakes: Dict[str, Snake] = {}
        self.obstacles: List[Cell] = []
        self._obstacle_cells: Set[Cell] = set()
        self.food: Optional[Food] = None

    def add_obstacle(self, cell: Cell) -> None:
        self.obstacles.append(cell)
        self._obstacle_cells.add(cell)

    def obstacle_at(self, cell: Cell) -> bool:
        return cell in self._obstacle_cells

    def clear(self) -> None:
        """Drop obstacles and food; snakes are managed by their sessions."""

        self.obstacles.clear()
        self._obstacle_cells.clear()
        self.food = None

    def occupied_cells(self) -> Set[Cell]:
        """Return every cell covered by a snake, an obstacle or the food."""

        occupied: Set[Cell] = set(self._obstacle_cells)
        for snake in self.snakes.values():
            occupied.update(snake.body)
        if self.food is not None:
            occupied.add(self.food.cell)
        return occupied

    def find_random_free_cell(
        self, rng: random.Random, cols: int, rows: int, retries: int
    ) -> Cell:
        """Probe random cells until a free one turns up.

        After ``retries`` misses the origin is returned even if it is taken;
        on a crowded board an entity may therefore land on an occupied cell.
        """

        occupied = self.occupied_cells()
        for _ in range(retries):
            cell = Cell(rng.randrange(cols), rng.randrange(rows))
            if cell not in occupied:
                return cell
        return FALLBACK_CELL
