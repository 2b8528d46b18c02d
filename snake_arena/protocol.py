"""JSON protocol helpers for the websocket transport."""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

from .food import Food
from .grid import Cell, Direction
from .snake import Snake

CLIENT_MESSAGE_TYPES = ("newPlayer", "move")
SERVER_MESSAGE_TYPES = ("init", "state")


def parse_client_message(message: str | bytes) -> dict:
    """Parse a raw client ``message`` into a validated dictionary.

    ``move`` payloads come back with ``direction`` converted to a
    :class:`Direction`. Anything malformed raises ``ValueError``.
    """

    try:
        payload = json.loads(message)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid client message") from exc
    if not isinstance(payload, dict):
        raise ValueError("Client message must be a JSON object")
    message_type = payload.get("type")
    if message_type not in CLIENT_MESSAGE_TYPES:
        raise ValueError(f"Unknown message type: {message_type!r}")
    if message_type == "move":
        payload["direction"] = Direction.parse(payload.get("direction"))
    elif message_type == "newPlayer":
        name = payload.get("name")
        if not isinstance(name, str):
            # null, false and 0 count as "no name", like an empty string.
            name = str(name) if name else ""
        payload["name"] = name
    return payload


def encode_init(snake_id: str, width: int, height: int, cell_size: int) -> str:
    """Encode the greeting sent once upon connection."""

    return json.dumps(
        {
            "type": "init",
            "id": snake_id,
            "width": width,
            "height": height,
            "cellSize": cell_size,
        }
    )


def state_payload(
    tick: int,
    width: int,
    height: int,
    cell_size: int,
    tick_interval_ms: int,
    food: Optional[Food],
    obstacles: Iterable[Cell],
    snakes: Iterable[Snake],
    leaderboard: List[dict],
) -> dict:
    """Project the world into the per-tick state payload.

    Only reads from the entities passed in.
    """

    return {
        "type": "state",
        "tick": tick,
        "width": width,
        "height": height,
        "cellSize": cell_size,
        "tickIntervalMs": tick_interval_ms,
        "food": food.to_dict(cell_size) if food is not None else None,
        "obstacles": [cell.to_pixels(cell_size) for cell in obstacles],
        "snakes": [snake.to_snapshot(cell_size) for snake in snakes],
        "leaderboard": leaderboard,
    }


def encode_state(**fields) -> str:
    """Encode a world snapshot for broadcasting to clients."""

    return json.dumps(state_payload(**fields))


def parse_server_message(message: str | bytes) -> dict:
    """Parse an ``init`` or ``state`` frame received by a client."""

    try:
        payload = json.loads(message)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid server message") from exc
    if not isinstance(payload, dict) or payload.get("type") not in SERVER_MESSAGE_TYPES:
        raise ValueError("Server message must be an init or state object")
    return payload


def encode_client_message(message_type: str, **fields) -> str:
    """Encode a client to server message."""

    if message_type not in CLIENT_MESSAGE_TYPES:
        raise ValueError(f"Unknown message type: {message_type!r}")
    return json.dumps({"type": message_type, **fields})
