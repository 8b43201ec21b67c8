"""Live socket registry. Moderators get queue updates pushed here."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


@dataclass
class _Client:
    is_moderator: bool = False
    sockets: set[WebSocket] = field(default_factory=set)


class ConnectionManager:
    """Open sockets per user id, with the moderator subset tracked separately."""

    def __init__(self) -> None:
        self._clients: dict[int, _Client] = {}

    async def connect(self, websocket: WebSocket, user_id: int, is_moderator: bool = False) -> None:
        await websocket.accept()
        client = self._clients.setdefault(user_id, _Client())
        client.is_moderator = client.is_moderator or is_moderator
        client.sockets.add(websocket)
        logger.info("WS open user=%s moderator=%s sockets=%s", user_id, is_moderator, self.total_connections)

    def disconnect(self, websocket: WebSocket, user_id: int) -> None:
        client = self._clients.get(user_id)
        if client is not None:
            client.sockets.discard(websocket)
            if not client.sockets:
                self._clients.pop(user_id)
        logger.info("WS closed user=%s sockets=%s", user_id, self.total_connections)

    async def _deliver(self, user_id: int, message: str) -> None:
        client = self._clients.get(user_id)
        if client is None:
            return
        stale = []
        for socket in list(client.sockets):
            try:
                await socket.send_text(message)
            except Exception as exc:
                logger.warning("WS send to user=%s failed, dropping socket: %s", user_id, exc)
                stale.append(socket)
        client.sockets.difference_update(stale)

    @staticmethod
    def _encode(event: str, data: Any) -> str:
        return json.dumps({"event": event, "data": data}, default=str)

    async def send_to_user(self, user_id: int, event: str, data: Any) -> None:
        await self._deliver(user_id, self._encode(event, data))

    async def send_to_moderators(self, event: str, data: Any) -> None:
        message = self._encode(event, data)
        for user_id in self.connected_moderators:
            await self._deliver(user_id, message)

    @property
    def connected_moderators(self) -> set[int]:
        return {uid for uid, client in self._clients.items() if client.is_moderator and client.sockets}

    @property
    def total_connections(self) -> int:
        return sum(len(client.sockets) for client in self._clients.values())


ws_manager = ConnectionManager()
