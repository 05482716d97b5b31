# src/elementscope/core/handlers/history_handler.py
import argparse
import json
from pathlib import Path
from typing import List

from elementscope.core.managers.config_manager import config_manager
from elementscope.core.managers.database_manager import DatabaseManager
from elementscope.core.services.dataframe_service import DataFrameService
from elementscope.core.utils.path_utils import PathUtils
from relay.managers.element_history_manager import DEFAULT_LIMIT, ElementHistoryManager

history_help_text = """
HISTORY:
  history list [--limit N] [--db-path <file>]     Shows the most recent selected elements.
  history export -o <file> [--limit N]            Exports the history to CSV (or JSON for *.json).
""".strip()

USAGE = """
Usage:
  history list [--limit N] [--db-path <file>]
  history export -o <file> [--limit N] [--db-path <file>]
"""


def _open_db(db_path: str) -> DatabaseManager:
    db_manager = DatabaseManager(PathUtils.resolve_db_path(db_path or config_manager.get_nested("server.db_path")))
    db_manager.init_schema()
    return db_manager


def handle_history(args: List[str]) -> int:
    """Handles the 'history' command: reading and exporting stored elements."""
    if not args or args[0] not in ("list", "export"):
        print(USAGE)
        return 1

    subcommand = args[0]
    parser = argparse.ArgumentParser(prog=f"history {subcommand}", usage=USAGE)
    parser.add_argument("--db-path", default=None)
    if subcommand == "list":
        parser.add_argument("--limit", type=int,
                            default=config_manager.get_int("history.default_limit", DEFAULT_LIMIT))
    else:
        parser.add_argument("--output", "-o", required=True, help="Output file (.csv or .json)")
        parser.add_argument("--limit", type=int, default=0, help="Only export the N newest elements")

    try:
        parsed = parser.parse_args(args[1:])
    except SystemExit:
        return 1

    db_manager = _open_db(parsed.db_path)
    try:
        if subcommand == "list":
            manager = ElementHistoryManager(db_manager)
            elements = manager.get_recent_elements(parsed.limit)
            if not elements:
                print("🤷 No elements stored yet.")
                return 0
            for row in elements:
                label = f"<{row['tagName']}>" + (f" #{row['elementId']}" if row['elementId'] else "")
                print(f"[{row['id']}] {row['timestamp']}  {label}  {row['cssSelector']}")
            return 0

        count = DataFrameService(db_manager).export_history(Path(parsed.output), parsed.limit)
        if count == 0:
            print("🤷 No data available to export.")
        else:
            print(json.dumps({"exported": count, "file": str(Path(parsed.output).resolve())}))
        return 0
    finally:
        db_manager.close()
