"""A random bot that joins a running server, handy for smoke and load tests."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
from typing import Any, Dict, Optional, Sequence

from .client import NetworkClient
from .grid import Cell, Direction, in_bounds, step


def choose_direction(
    state: Dict[str, Any],
    snake_id: str,
    rng: random.Random,
    heading: Optional[Direction] = None,
) -> Optional[Direction]:
    """Pick a random direction that avoids walls, obstacles and bodies.

    Returns ``None`` when the snake is not part of ``state``. If every move
    is blocked a random direction is returned; the snake is lost anyway.
    """

    cell_size = state["cellSize"]
    cols = state["width"] // cell_size
    rows = state["height"] // cell_size

    def to_cell(point: Dict[str, int]) -> Cell:
        return Cell(point["x"] // cell_size, point["y"] // cell_size)

    me = next((snake for snake in state["snakes"] if snake["id"] == snake_id), None)
    if me is None or not me["body"]:
        return None
    head = to_cell(me["body"][0])

    blocked = {to_cell(point) for point in state["obstacles"]}
    for snake in state["snakes"]:
        blocked.update(to_cell(point) for point in snake["body"])

    valid_moves = []
    for direction in Direction:
        if heading is not None and direction is heading.opposite:
            continue
        target = step(head, direction)
        if in_bounds(target, cols, rows) and target not in blocked:
            valid_moves.append(direction)

    if not valid_moves:
        return rng.choice(list(Direction))
    return rng.choice(valid_moves)


async def run_bot(uri: str, name: str, seed: Optional[int] = None) -> None:
    rng = random.Random(seed)
    client = NetworkClient(uri, name)
    init = await client.connect()
    snake_id = client.snake_id
    logging.info(
        "Bot %s joined as snake %s on a %sx%s board", name, snake_id, init["width"], init["height"]
    )
    heading: Optional[Direction] = None
    try:
        while True:
            payload = await client.next_state()
            if payload is None:
                break
            direction = choose_direction(payload, snake_id, rng, heading)
            if direction is not None:
                heading = direction
                await client.send_move(direction)
    finally:
        await client.close()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a random snake bot")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=8765, help="Server port")
    parser.add_argument("--name", default="Bot", help="Player nickname")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    asyncio.run(run_bot(f"ws://{args.host}:{args.port}", args.name, args.seed))


if __name__ == "__main__":
    main()
