"""Websocket networking client."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from websockets.asyncio.client import ClientConnection, connect

from . import protocol
from .grid import Direction


class NetworkClient:
    """Joins a game server, forwards moves and queues incoming states.

    ``next_state`` yields ``None`` once the server has gone away.
    """

    def __init__(self, uri: str, name: str) -> None:
        self.uri = uri
        self.name = name
        self.snake_id: Optional[str] = None
        self.websocket: Optional[ClientConnection] = None
        self._states: asyncio.Queue[Optional[Dict[str, Any]]] = asyncio.Queue()
        self._receiver_task: Optional[asyncio.Task[None]] = None

    async def connect(self) -> Dict[str, Any]:
        """Connect, announce the player name and return the ``init`` payload."""

        self.websocket = await connect(self.uri)
        init = protocol.parse_server_message(await self.websocket.recv())
        if init["type"] != "init":
            await self.websocket.close()
            raise ValueError("Expected init as the first server message")
        self.snake_id = init["id"]
        await self.rename(self.name)
        self._receiver_task = asyncio.create_task(self._collect_states())
        return init

    async def _collect_states(self) -> None:
        try:
            async for message in self._connection():
                try:
                    payload = protocol.parse_server_message(message)
                except ValueError:
                    continue
                if payload["type"] == "state":
                    await self._states.put(payload)
        finally:
            await self._states.put(None)

    def _connection(self) -> ClientConnection:
        if self.websocket is None:
            raise RuntimeError("Client is not connected")
        return self.websocket

    async def rename(self, name: str) -> None:
        self.name = name
        await self._connection().send(protocol.encode_client_message("newPlayer", name=name))

    async def send_move(self, direction: Direction) -> None:
        await self._connection().send(
            protocol.encode_client_message("move", direction=direction.value)
        )

    async def next_state(self) -> Optional[Dict[str, Any]]:
        return await self._states.get()

    async def close(self) -> None:
        if self.websocket is not None:
            await self.websocket.close()
        if self._receiver_task is not None:
            await self._receiver_task
