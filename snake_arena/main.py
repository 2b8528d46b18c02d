"""Entry point for the asyncio based game server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
import time
from typing import Callable, Dict, Optional, Sequence

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from . import constants, protocol
from .config import GameConfig
from .world import World


class GameServer:
    """High level orchestration of the world simulation and websocket IO.

    Everything runs on one event loop. ``World.update`` never awaits, so a
    tick is finished before any client message is handled.
    """

    def __init__(
        self,
        host: str,
        port: int,
        world: Optional[World] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.host = host
        self.port = port
        self.world = world or World()
        self.clock = clock
        self.clients: Dict[str, ServerConnection] = {}
        self.ready = asyncio.Event()
        self._broadcast_lock = asyncio.Lock()

    async def start(self) -> None:
        """Start the websocket server and the world update loop."""

        async with serve(self._handle_client, self.host, self.port) as server:
            self.port = server.sockets[0].getsockname()[1]
            logging.info("Server listening on %s:%s", self.host, self.port)
            self.ready.set()
            await self._run_game_loop()

    async def _run_game_loop(self) -> None:
        next_tick = self.clock()
        while True:
            self.world.update()
            await self._broadcast(self.world.snapshot())
            # Deadlines advance from the previous deadline, not from now. The
            # interval is re-read each tick so a milestone applies to the next one.
            next_tick += self.world.tick_interval_ms / 1000
            now = self.clock()
            if next_tick < now:
                next_tick = now
            await asyncio.sleep(next_tick - now)

    async def _broadcast(self, payload: str) -> None:
        if not self.clients:
            return
        async with self._broadcast_lock:
            disconnected = []
            for snake_id, ws in list(self.clients.items()):
                try:
                    await ws.send(payload)
                except ConnectionClosed:
                    disconnected.append(snake_id)
                except Exception:  # pragma: no cover - we simply drop failed clients
                    logging.exception("Failed to send state to client %s", snake_id)
                    disconnected.append(snake_id)
            for snake_id in disconnected:
                ws = self.clients.pop(snake_id, None)
                if ws:
                    await ws.close()
                self.world.remove_snake(snake_id)

    async def _handle_client(self, websocket: ServerConnection) -> None:
        snake_id = websocket.id.hex
        self.world.add_snake(snake_id)
        logging.info("Player connected as snake %s", snake_id)
        config = self.world.config
        try:
            await websocket.send(
                protocol.encode_init(snake_id, config.width, config.height, config.cell_size)
            )
            self.clients[snake_id] = websocket
            async for message in websocket:
                try:
                    payload = protocol.parse_client_message(message)
                except ValueError:
                    continue
                self._dispatch(snake_id, payload)
        except ConnectionClosed:
            pass
        finally:
            self.clients.pop(snake_id, None)
            self.world.remove_snake(snake_id)
            logging.info("Client %s disconnected", snake_id)

    def _dispatch(self, snake_id: str, payload: dict) -> None:
        if payload["type"] == "move":
            self.world.set_player_input(snake_id, payload["direction"])
        elif payload["type"] == "newPlayer":
            self.world.rename_snake(snake_id, payload["name"])
            snake = self.world.snakes.get(snake_id)
            if snake is not None:
                logging.info("Snake %s is now called %s", snake_id, snake.name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the multiplayer snake server")
    parser.add_argument("--host", default="0.0.0.0", help="Host interface to bind to")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", 8765)),
        help="Port to listen on (defaults to $PORT)",
    )
    parser.add_argument("--width", type=int, default=constants.BOARD_WIDTH, help="Board width in pixels")
    parser.add_argument("--height", type=int, default=constants.BOARD_HEIGHT, help="Board height in pixels")
    parser.add_argument("--cell-size", type=int, default=constants.CELL_SIZE, help="Cell size in pixels")
    parser.add_argument(
        "--start-interval", type=int, default=constants.START_TICK_INTERVAL_MS, help="Initial tick interval (ms)"
    )
    parser.add_argument(
        "--min-interval", type=int, default=constants.MIN_TICK_INTERVAL_MS, help="Fastest tick interval (ms)"
    )
    parser.add_argument(
        "--speed-step", type=int, default=constants.SPEED_STEP_MS, help="Interval decrease per milestone (ms)"
    )
    parser.add_argument(
        "--milestone", type=int, default=constants.MILESTONE_SCORE, help="Score between difficulty milestones"
    )
    parser.add_argument(
        "--golden-lifetime", type=int, default=constants.GOLDEN_LIFETIME_MS, help="Golden food lifetime (ms)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the world random generator")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        width=args.width,
        height=args.height,
        cell_size=args.cell_size,
        start_tick_interval_ms=args.start_interval,
        min_tick_interval_ms=args.min_interval,
        speed_step_ms=args.speed_step,
        milestone_score=args.milestone,
        golden_lifetime_ms=args.golden_lifetime,
    ).validate()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(message)s")
    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))
    world = World(config, rng=random.Random(args.seed))
    server = GameServer(args.host, args.port, world)
    asyncio.run(server.start())


if __name__ == "__main__":
    main()
