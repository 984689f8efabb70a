"""
WebSocket broadcast of match events.

Spectators connect to ``/ws`` and receive every arena event as
``{"event": name, "data": {...}}``. The socket is read only for keep-alive
pings; matches are started over HTTP.
"""

from __future__ import annotations
from typing import Any, Dict, List
import logging

from fastapi import WebSocket, WebSocketDisconnect

from pokerarena.server.schemas import WSEventMessage


logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Tracks spectator connections and fans events out to them.

    Usage:
        manager = ConnectionManager()
        await manager.connect(websocket)
        await manager.broadcast("hand_end", history)
        manager.disconnect(websocket)
    """

    def __init__(self):
        self.connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.append(websocket)
        logger.info(f"Spectator connected ({len(self.connections)} total)")

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"Spectator disconnected ({len(self.connections)} total)")

    async def broadcast(self, event: str, data: Dict[str, Any]) -> None:
        """Send an event to every connected client."""
        message = WSEventMessage(event=event, data=data).model_dump()
        for ws in list(self.connections):
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.error(f"Error sending {event} to spectator: {e}")
                self.disconnect(ws)


# Global connection manager instance
manager = ConnectionManager()


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for spectators.

    Protocol:
    1. Client connects
    2. Server pushes {"event": ..., "data": ...} for every arena event
    3. Client may send "ping"; server answers {"event": "pong", "data": {}}
    """
    await manager.connect(websocket)
    try:
        while True:
            text = await websocket.receive_text()
            if text.strip().lower() == "ping":
                await websocket.send_json(WSEventMessage(event="pong").model_dump())
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    finally:
        manager.disconnect(websocket)
