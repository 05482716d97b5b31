import logging
from pathlib import Path

from aiohttp import web

from relay.server.routers.realtime_router import websocket_handler

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

page_router = web.RouteTableDef()


@page_router.get('/')
async def index(request: web.Request) -> web.StreamResponse:
    """
    Serves the history dashboard. WebSocket upgrades on the root path are
    handed to the realtime channel, so clients can connect to ws://host:port.
    """
    if request.headers.get('Upgrade', '').lower() == 'websocket':
        return await websocket_handler(request)

    index_file = STATIC_DIR / "index.html"
    if not index_file.exists():
        logger.error(f"Dashboard not found at {index_file}")
        return web.Response(text="Error: dashboard is not installed.", status=500)
    return web.FileResponse(index_file)
