"""
ElementScope - Relay Server
Stores selected elements and rebroadcasts the recent history to connected viewers.
"""

import logging
from pathlib import Path
from typing import Optional

from aiohttp import web

from elementscope.core.managers.config_manager import config_manager
from elementscope.core.managers.database_manager import DatabaseManager
from elementscope.core.utils.path_utils import PathUtils
from relay.managers.element_history_manager import DEFAULT_LIMIT, ElementHistoryManager
from relay.server.app_keys import BROADCASTER, HISTORY_LIMIT, HISTORY_MANAGER
from relay.server.broadcaster import Broadcaster
from relay.server.routers.history_api_router import history_api_router
from relay.server.routers.page_router import STATIC_DIR, page_router
from relay.server.routers.realtime_router import realtime_router

logger = logging.getLogger(__name__)


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Allows the dashboard and inspector clients to call the API from any origin."""
    if request.method == "OPTIONS":
        response = web.Response()
    else:
        response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


async def _on_shutdown(app: web.Application) -> None:
    await app[BROADCASTER].close_all()
    app[HISTORY_MANAGER].db.close()


def create_app(
        db_path: Optional[Path] = None,
        history_limit: Optional[int] = None,
        retention: Optional[int] = None
) -> web.Application:
    """
    Application factory wiring the history store, the broadcaster and the routers.
    Unset arguments are taken from settings.json.
    """
    app = web.Application(middlewares=[cors_middleware])

    # 1. Initialize Data Layer
    if db_path is None:
        db_path = PathUtils.resolve_db_path(config_manager.get_nested("server.db_path"))
    if retention is None:
        retention = config_manager.get_int("history.retention", 0)
    db_manager = DatabaseManager(db_path)
    app[HISTORY_MANAGER] = ElementHistoryManager(db_manager, retention=retention)

    # 2. Realtime fan-out
    app[BROADCASTER] = Broadcaster()
    app[HISTORY_LIMIT] = history_limit or config_manager.get_int("history.default_limit", DEFAULT_LIMIT)

    # 3. Register Routes
    app.add_routes(history_api_router)
    app.add_routes(realtime_router)
    app.add_routes(page_router)
    app.router.add_static('/static', STATIC_DIR)

    app.on_shutdown.append(_on_shutdown)
    logger.debug(f"Relay app created (db: {db_path}, retention: {retention})")
    return app


def run_server(host: str, port: int, db_path: Optional[Path] = None) -> None:
    """Runs the relay server until interrupted."""
    app = create_app(db_path)

    print("\n" + "=" * 50)
    print("🚀  ELEMENTSCOPE RELAY")
    print("=" * 50)
    print(f"📡  Dashboard:  http://{host}:{port}")
    print(f"🔌  WebSocket:  ws://{host}:{port}")
    print("-" * 50)
    print("\n🔍 ROUTE MAPPING:")
    for resource in app.router.resources():
        print(f"   ✅ {resource.canonical}")
    print("-" * 50 + "\n")

    web.run_app(app, host=host, port=port, print=None)
