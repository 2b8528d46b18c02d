"""
Tests for the websocket server: a live client session and the tick schedule.
"""

import asyncio
import contextlib
import random

import pytest

from snake_arena.client import NetworkClient
from snake_arena.config import GameConfig
from snake_arena.food import Food
from snake_arena.grid import Cell, Direction
from snake_arena.main import GameServer, build_parser, config_from_args, main
from snake_arena.world import World


async def wait_for_state(client, predicate, timeout=5.0):
    async def _loop():
        while True:
            payload = await client.next_state()
            assert payload is not None, "server closed the connection"
            if predicate(payload):
                return payload

    return await asyncio.wait_for(_loop(), timeout)


async def play_session():
    world = World(GameConfig(start_tick_interval_ms=20, min_tick_interval_ms=10), rng=random.Random(3))
    server = GameServer("127.0.0.1", 0, world)
    server_task = asyncio.create_task(server.start())
    try:
        await asyncio.wait_for(server.ready.wait(), 5.0)
        client = NetworkClient(f"ws://127.0.0.1:{server.port}", "  Alice  ")
        init = await client.connect()

        state = await wait_for_state(
            client, lambda s: any(snake["name"] == "Alice" for snake in s["snakes"])
        )
        await client.send_move(Direction.DOWN)
        await asyncio.wait_for(_until(lambda: world.snakes[init["id"]].heading is Direction.DOWN), 5.0)

        await client.close()
        await asyncio.wait_for(_until(lambda: not world.snakes), 5.0)
        return init, state, world
    finally:
        server_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await server_task


async def _until(predicate):
    while not predicate():
        await asyncio.sleep(0.01)


def test_client_session_round_trip():
    init, state, world = asyncio.run(play_session())

    assert init["type"] == "init"
    assert (init["width"], init["height"], init["cellSize"]) == (400, 400, 20)
    assert [snake["id"] for snake in state["snakes"]] == [init["id"]]
    assert state["food"] is not None
    assert state["tickIntervalMs"] == 20
    # Last player left, so the world went back to its starting state.
    assert world.registry.food is None
    assert world.registry.obstacles == []


def test_command_line_overrides_reach_the_config():
    args = build_parser().parse_args(
        ["--width", "600", "--height", "390", "--cell-size", "30", "--min-interval", "40"]
    )
    config = config_from_args(args)
    assert (config.cols, config.rows) == (20, 13)
    assert config.min_tick_interval_ms == 40


def test_invalid_command_line_config_exits():
    with pytest.raises(SystemExit) as excinfo:
        main(["--width", "410"])
    assert excinfo.value.code == 2


class StopLoop(Exception):
    pass


class SteppedClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def run_ticks(server, clock, ticks, monkeypatch):
    """Run the game loop for ``ticks`` ticks and return every sleep delay."""

    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)
        clock.now += delay
        if len(sleeps) >= ticks:
            raise StopLoop

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    with pytest.raises(StopLoop):
        asyncio.run(server._run_game_loop())
    return sleeps


class TestGameLoop:
    def test_milestone_rearms_the_next_sleep(self, monkeypatch):
        config = GameConfig(start_tick_interval_ms=100, speed_step_ms=10, milestone_score=1)
        world = World(config, rng=random.Random(3))
        world.add_snake("a")
        world.registry.food = Food(cell=Cell(4, 2), type=config.food_type("normal"))
        clock = SteppedClock()

        sleeps = run_ticks(GameServer("127.0.0.1", 0, world, clock=clock), clock, 3, monkeypatch)

        assert len(world.registry.obstacles) == 1
        assert sleeps == pytest.approx([0.1, 0.09, 0.09])

    @pytest.mark.parametrize(
        "tick_cost, expected",
        [
            (0.03, [0.07, 0.07, 0.07]),
            (0.25, [0.0, 0.0, 0.0]),
        ],
    )
    def test_tick_cost_does_not_stretch_the_period(self, tick_cost, expected, monkeypatch):
        world = World(GameConfig(), rng=random.Random(3))
        clock = SteppedClock()
        update = world.update

        def slow_update():
            update()
            clock.now += tick_cost

        monkeypatch.setattr(world, "update", slow_update)

        sleeps = run_ticks(GameServer("127.0.0.1", 0, world, clock=clock), clock, 3, monkeypatch)

        assert sleeps == pytest.approx(expected)
