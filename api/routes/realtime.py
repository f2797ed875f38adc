"""Real-time WebSocket channel"""

from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

from adapters.broadcast import user_room

router = APIRouter(tags=["Realtime"])
logger = logging.getLogger("puttybox.api.realtime")


@router.websocket("/ws")
async def events(websocket: WebSocket, user_id: Optional[str] = None):
    """
    Event stream.

    Every connection receives global events. Passing ``user_id`` (or sending
    ``{"action": "join", "user_id": ...}``) also subscribes to that user's
    room; ``{"action": "leave", "user_id": ...}`` unsubscribes.
    """
    hub = websocket.app.state.broadcaster
    await hub.connect(websocket, user_id)
    try:
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict) or not message.get("user_id"):
                await websocket.send_json({"event": "error", "data": "user_id required"})
                continue
            room = user_room(message["user_id"])
            action = message.get("action")
            if action == "join":
                hub.join(websocket, room)
            elif action == "leave":
                hub.leave(websocket, room)
            else:
                await websocket.send_json({"event": "error", "data": f"unknown action {action}"})
                continue
            await websocket.send_json({"event": action, "data": {"room": room}})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)
