import asyncio
import json
import logging
from typing import Any, Dict, List

from aiohttp import WSMsgType, web

from relay.managers.element_history_manager import ElementHistoryManager
from relay.server.app_keys import BROADCASTER, HISTORY_LIMIT, HISTORY_MANAGER

logger = logging.getLogger(__name__)

realtime_router = web.RouteTableDef()


def _store_and_read(history: ElementHistoryManager, element: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
    history.save_element(element)
    return history.get_recent_elements(limit)


async def websocket_handler(request: web.Request) -> web.WebSocketResponse:
    """
    Viewer/inspector channel.

    New clients get the current history ('initialHistory'). Each inbound
    'elementSelected' message is stored, then the refreshed history is
    broadcast to everyone ('historyUpdate').
    """
    ws = web.WebSocketResponse()
    await ws.prepare(request)

    history = request.app[HISTORY_MANAGER]
    broadcaster = request.app[BROADCASTER]
    limit = request.app[HISTORY_LIMIT]
    loop = asyncio.get_running_loop()
    broadcaster.register(ws)

    try:
        await broadcaster.send(ws, {
            "type": "initialHistory",
            "data": await loop.run_in_executor(None, history.get_recent_elements, limit),
        })

        async for msg in ws:
            if msg.type == WSMsgType.ERROR:
                logger.error(f"WebSocket connection closed with exception {ws.exception()}")
                break
            if msg.type != WSMsgType.TEXT:
                continue

            try:
                data = json.loads(msg.data)
            except json.JSONDecodeError as e:
                logger.error(f"Error processing message: {e}")
                continue
            if not isinstance(data, dict):
                continue

            logger.info(f"Received message: {data.get('action')}")
            if data.get("action") != "elementSelected":
                continue
            try:
                # sqlite work stays off the event loop
                recent = await loop.run_in_executor(None, _store_and_read, history, data.get("data") or {}, limit)
                await broadcaster.broadcast({"type": "historyUpdate", "data": recent})
            except Exception as e:
                logger.error(f"Error storing selected element: {e}", exc_info=True)
    finally:
        broadcaster.unregister(ws)

    return ws


@realtime_router.get('/ws')
async def ws_endpoint(request: web.Request) -> web.StreamResponse:
    return await websocket_handler(request)
