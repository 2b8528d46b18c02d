import itertools
import random

import pytest

from snake_arena.config import GameConfig
from snake_arena.grid import Cell
from snake_arena.world import World


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def world(config, clock):
    return World(config, rng=random.Random(1234), clock=clock)


@pytest.fixture
def bottom_row_spawns(world, monkeypatch):
    """Send every spawned food and obstacle to the bottom row, left to right."""

    counter = itertools.count()
    cols, rows = world.config.cols, world.config.rows

    def next_cell():
        return Cell(next(counter) % cols, rows - 1)

    monkeypatch.setattr(world.spawner, "free_cell", next_cell)
    return next_cell
