"""Collision helpers for the game server."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Set

from .grid import Cell, in_bounds
from .registry import EntityRegistry
from .snake import Snake


def detect_head_collisions(candidate_heads: Mapping[str, Cell]) -> Set[str]:
    """Return the ids of all snakes whose next head cell is shared.

    There is no survivor: every snake moving into a contested cell is hit.
    """

    by_cell: Dict[Cell, List[str]] = defaultdict(list)
    for snake_id, cell in candidate_heads.items():
        by_cell[cell].append(snake_id)
    return {
        snake_id
        for snake_ids in by_cell.values()
        if len(snake_ids) > 1
        for snake_id in snake_ids
    }


def hits_wall(cell: Cell, cols: int, rows: int) -> bool:
    return not in_bounds(cell, cols, rows)


def hits_obstacle(registry: EntityRegistry, cell: Cell) -> bool:
    return registry.obstacle_at(cell)


def hits_any_body(cell: Cell, snakes: Iterable[Snake]) -> bool:
    """Return ``True`` if ``cell`` is covered by any snake's current body.

    Bodies are checked as they were before this tick's moves, the moving
    snake's own body and tail cell included.
    """

    return any(cell in snake.body for snake in snakes)


def is_fatal(cell: Cell, registry: EntityRegistry, cols: int, rows: int) -> bool:
    """Combine the wall, obstacle and body checks for one candidate head."""

    return (
        hits_wall(cell, cols, rows)
        or hits_obstacle(registry, cell)
        or hits_any_body(cell, registry.snakes.values())
    )
