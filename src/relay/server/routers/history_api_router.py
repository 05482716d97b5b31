import asyncio
import logging

from aiohttp import web

from relay.managers.element_history_manager import normalize_limit
from relay.server.app_keys import HISTORY_LIMIT, HISTORY_MANAGER

logger = logging.getLogger(__name__)

history_api_router = web.RouteTableDef()


@history_api_router.get('/api/history')
async def get_history(request: web.Request) -> web.Response:
    """Returns the N most recent stored elements (?limit=N, default from config)."""
    try:
        default_limit = request.app[HISTORY_LIMIT]
        limit = normalize_limit(request.query.get('limit'), default_limit)
        history = request.app[HISTORY_MANAGER]
        elements = await asyncio.get_running_loop().run_in_executor(None, history.get_recent_elements, limit)
        return web.json_response(elements)
    except Exception as e:
        logger.error(f"Error fetching history: {e}", exc_info=True)
        return web.json_response({"error": "Failed to fetch history"}, status=500)


@history_api_router.post('/api/connect')
async def connect(request: web.Request) -> web.Response:
    """Connectivity check used by inspector clients."""
    try:
        body = await request.json() if request.can_read_body else {}
    except ValueError:
        body = {}
    logger.info(f"Extension connected: {body}")
    return web.json_response({"success": True})
