# src/elementscope/core/handlers/serve_handler.py
import argparse
import logging
from pathlib import Path
from typing import List

from elementscope.core.managers.config_manager import config_manager
from elementscope.core.utils.path_utils import PathUtils
from relay.server.app import run_server

logger = logging.getLogger(__name__)

serve_help_text = """
  serve [--host <host>] [--port <port>] [--db-path <file>]
                      Starts the relay server: history REST API, WebSocket
                      fan-out and the dashboard.
""".strip()


def handle_serve(args: List[str]) -> int:
    parser = argparse.ArgumentParser(prog="serve", description="Run the element relay server.")
    parser.add_argument("--host", default=config_manager.get_nested("server.host", "127.0.0.1"),
                        help="Host interface to bind to (use 0.0.0.0 for Docker/External access)")
    parser.add_argument("--port", type=int, default=config_manager.get_int("server.port", 3000),
                        help="Port to bind the server to")
    parser.add_argument("--db-path", default=None, help="SQLite database file for the element history")

    try:
        parsed = parser.parse_args(args)
    except SystemExit:
        return 1

    db_path: Path = PathUtils.resolve_db_path(parsed.db_path or config_manager.get_nested("server.db_path"))
    logger.info(f"Using history database at {db_path}")
    try:
        run_server(parsed.host, parsed.port, db_path)
    except OSError as e:
        logger.error(f"Could not start server on {parsed.host}:{parsed.port}: {e}")
        return 1
    return 0
