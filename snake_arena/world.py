"""World state and tick update logic."""

from __future__ import annotations

import itertools
import logging
import random
import time
from typing import Callable, List, Optional

from . import collision, protocol
from .config import GameConfig
from .grid import Cell, Direction, step
from .registry import EntityRegistry
from .snake import Snake
from .spawner import Spawner


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class World:
    """Holds all entities and advances the simulation on every tick.

    The world is the single owner of game state. Connections only refer to
    their snake by id and every mutation goes through the methods below,
    all of which run to completion on the caller's thread.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self.config = (config or GameConfig()).validate()
        self.rng = rng or random.Random()
        self.clock = clock
        self.tick: int = 0
        self.tick_interval_ms: int = self.config.start_tick_interval_ms
        self.registry = EntityRegistry()
        self.spawner = Spawner(self.config, self.registry, self.rng, clock)
        self._slots = itertools.count()

    @property
    def snakes(self):
        return self.registry.snakes

    # -- sessions -----------------------------------------------------------

    def add_snake(self, snake_id: str) -> Snake:
        slot = next(self._slots)
        colors = self.config.player_colors
        spawns = self.config.spawn_slots()
        snake = Snake(
            id=snake_id,
            color=colors[slot % len(colors)],
            slot=slot,
            spawn=spawns[slot % len(spawns)],
            heading=self.config.default_heading,
        )
        self.registry.snakes[snake_id] = snake
        if self.registry.food is None:
            self.registry.food = self.spawner.spawn_food()
        return snake

    def rename_snake(self, snake_id: str, name: str) -> None:
        snake = self.registry.snakes.get(snake_id)
        if snake is None:
            return
        name = name.strip()[: self.config.name_max_length]
        snake.name = name or snake.id

    def set_player_input(self, snake_id: str, direction: Direction) -> None:
        snake = self.registry.snakes.get(snake_id)
        if snake is not None:
            snake.queue_heading(direction)

    def remove_snake(self, snake_id: str) -> None:
        if self.registry.snakes.pop(snake_id, None) is None:
            return
        if not self.registry.snakes:
            self.reset()

    def reset(self) -> None:
        """Clear obstacles and food and restore the starting speed."""

        self.registry.clear()
        self.tick_interval_ms = self.config.start_tick_interval_ms
        self._slots = itertools.count()
        logging.info("World reset, all players left")

    # -- simulation ---------------------------------------------------------

    def update(self) -> None:
        self.tick += 1
        config = self.config
        registry = self.registry

        food = registry.food
        if food is not None and food.is_expired(self.clock()):
            logging.debug("%s food at %s expired", food.type.name, food.cell)
            registry.food = self.spawner.spawn_food()

        snakes = list(registry.snakes.values())
        for snake in snakes:
            snake.commit_heading()

        candidates = {snake.id: step(snake.head, snake.heading) for snake in snakes}
        doomed = collision.detect_head_collisions(candidates)
        for snake in snakes:
            if snake.id in doomed:
                continue
            if collision.is_fatal(candidates[snake.id], registry, config.cols, config.rows):
                doomed.add(snake.id)

        survivors = [snake for snake in snakes if snake.id not in doomed]
        for snake in survivors:
            snake.advance(candidates[snake.id])

        for snake in survivors:
            if not self._consume_food(snake):
                snake.trim_tail()
            if snake.reach_milestone(config.milestone_score):
                self._escalate(snake)

        for snake in snakes:
            if snake.id in doomed:
                snake.reset(self._respawn_cell(snake), config.default_heading)
                logging.debug("Snake %s collided and was reset", snake.id)

    def _consume_food(self, snake: Snake) -> bool:
        food = self.registry.food
        if food is None or snake.head != food.cell:
            return False
        snake.add_score(food.score)
        if food.type.name == "golden":
            snake.extra_growth += self.config.golden_extra_growth
        elif food.type.name == "poison":
            snake.shrink(self.config.poison_shrink)
        self.registry.food = self.spawner.spawn_food()
        return True

    def _escalate(self, snake: Snake) -> None:
        self.spawner.add_obstacle()
        self.tick_interval_ms = max(
            self.config.min_tick_interval_ms,
            self.tick_interval_ms - self.config.speed_step_ms,
        )
        logging.debug(
            "Snake %s reached milestone %s, tick interval now %sms",
            snake.id,
            snake.milestone,
            self.tick_interval_ms,
        )

    def _respawn_cell(self, snake: Snake) -> Cell:
        occupied = self.registry.occupied_cells().difference(snake.body)
        if snake.spawn not in occupied:
            return snake.spawn
        return self.spawner.free_cell()

    # -- broadcast ----------------------------------------------------------

    def leaderboard(self) -> List[dict]:
        entries = sorted(self.registry.snakes.values(), key=lambda s: s.score, reverse=True)
        return [{"id": snake.id, "name": snake.name, "score": snake.score} for snake in entries]

    def snapshot(self) -> str:
        config = self.config
        return protocol.encode_state(
            tick=self.tick,
            width=config.width,
            height=config.height,
            cell_size=config.cell_size,
            tick_interval_ms=self.tick_interval_ms,
            food=self.registry.food,
            obstacles=self.registry.obstacles,
            snakes=self.registry.snakes.values(),
            leaderboard=self.leaderboard(),
        )
