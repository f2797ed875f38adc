"""Real-time broadcast channel.

Publishers call ``publish(event, payload, room=None)`` from any thread; it
never blocks and never raises. ``room=None`` targets every connection, a room
name such as ``user_<id>`` targets the sockets that joined it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger("puttybox.broadcast")

GLOBAL_ROOM = "all"


def user_room(user_id) -> str:
    return f"user_{user_id}"


class Broadcaster(ABC):
    """Interface for fire-and-forget event publishing"""

    @abstractmethod
    def publish(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        ...


class NullBroadcaster(Broadcaster):
    """Drops every event; used when no real-time transport is wired"""

    def publish(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        logger.debug("broadcast_dropped event=%s room=%s", event, room or GLOBAL_ROOM)


class WebSocketHub(Broadcaster):
    """WebSocket connections grouped into rooms"""

    def __init__(self):
        self._connections: Set[WebSocket] = set()
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    # ------------------ Connection management ------------------
    async def connect(self, websocket: WebSocket, user_id: Optional[str] = None) -> None:
        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        self._connections.add(websocket)
        if user_id:
            self.join(websocket, user_room(user_id))
        logger.info("ws_connected total=%d user_id=%s", len(self._connections), user_id)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        for members in self._rooms.values():
            members.discard(websocket)
        self._rooms = {name: members for name, members in self._rooms.items() if members}
        logger.info("ws_disconnected total=%d", len(self._connections))

    def join(self, websocket: WebSocket, room: str) -> None:
        self._rooms.setdefault(room, set()).add(websocket)

    def leave(self, websocket: WebSocket, room: str) -> None:
        members = self._rooms.get(room)
        if members:
            members.discard(websocket)
            if not members:
                del self._rooms[room]

    def connection_count(self, room: Optional[str] = None) -> int:
        if room is None:
            return len(self._connections)
        return len(self._rooms.get(room, ()))

    # ------------------ Publishing ------------------
    def publish(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        targets = list(self._connections if room is None else self._rooms.get(room, ()))
        if not targets or self._loop is None or self._loop.is_closed():
            return
        message = {"event": event, "data": payload}
        try:
            asyncio.run_coroutine_threadsafe(self._send_all(targets, message), self._loop)
        except RuntimeError as exc:
            logger.warning("broadcast_schedule_failed event=%s error=%s", event, exc)

    async def broadcast(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        """Awaitable variant for callers already on the event loop"""
        targets = list(self._connections if room is None else self._rooms.get(room, ()))
        await self._send_all(targets, {"event": event, "data": payload})

    async def _send_all(self, targets, message: dict) -> None:
        for websocket in targets:
            try:
                await websocket.send_json(message)
            except Exception as exc:
                logger.warning("ws_send_failed event=%s error=%s", message.get("event"), exc)
                self.disconnect(websocket)
