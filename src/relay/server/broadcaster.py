# src/relay/server/broadcaster.py
import json
import logging
from typing import Any, Dict, Set

from aiohttp import web

logger = logging.getLogger(__name__)


class Broadcaster:
    """Tracks connected viewers and fans messages out to all of them."""

    def __init__(self):
        self.clients: Set[web.WebSocketResponse] = set()

    def register(self, ws: web.WebSocketResponse) -> None:
        self.clients.add(ws)
        logger.info(f"New client connected ({len(self.clients)} total)")

    def unregister(self, ws: web.WebSocketResponse) -> None:
        self.clients.discard(ws)
        logger.info(f"Client disconnected ({len(self.clients)} total)")

    async def send(self, ws: web.WebSocketResponse, message: Dict[str, Any]) -> bool:
        if ws.closed:
            return False
        try:
            await ws.send_str(json.dumps(message))
            return True
        except (ConnectionResetError, RuntimeError) as e:
            logger.warning(f"Could not deliver message to client: {e}")
            return False

    async def broadcast(self, message: Dict[str, Any]) -> int:
        """Sends the message to every open client; returns the number of deliveries."""
        delivered = 0
        for ws in list(self.clients):
            if await self.send(ws, message):
                delivered += 1
        return delivered

    async def close_all(self) -> None:
        for ws in list(self.clients):
            await ws.close(code=1001, message=b"Server shutdown")
        self.clients.clear()
