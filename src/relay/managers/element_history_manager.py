# src/relay/managers/element_history_manager.py
import json
import logging
from typing import Any, Dict, List, Optional

from elementscope.core.managers.database_manager import DatabaseManager

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def normalize_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """Parses a caller-supplied limit; anything that is not a positive integer falls back to the default."""
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default


class ElementHistoryManager:
    """
    Append-only store of selected elements with a rolling retention limit.

    Contains the SQL for the 'elements' table; connection handling stays in
    the DatabaseManager.
    """

    INSERT_SQL = """
        INSERT INTO elements (
            tagName, elementId, className, url, xpath,
            cssSelector, attributes, elementText, timestamp, fullData
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, COALESCE(?, CURRENT_TIMESTAMP), ?)
    """

    def __init__(self, db_manager: DatabaseManager, retention: int = 0):
        self.db = db_manager
        self.retention = retention
        self.db.init_schema()

    def save_element(self, element_data: Dict[str, Any]) -> Optional[int]:
        """
        Stores one 'elementSelected' payload. Returns the new row id, or None
        when the payload could not be stored.
        """
        if not isinstance(element_data, dict):
            logger.error("Refusing to store non-object element payload")
            return None

        try:
            params = (
                element_data.get("tagName") or "",
                element_data.get("id") or "",
                element_data.get("className") or "",
                element_data.get("url") or "",
                element_data.get("xpath") or "",
                element_data.get("cssSelector") or "",
                json.dumps(element_data.get("attributes") or []),
                element_data.get("text") or "",
                element_data.get("timestamp"),
                json.dumps(element_data),
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Error serializing element: {e}")
            return None

        row_id = self.db.execute_insert(self.INSERT_SQL, params)
        if row_id < 0:
            return None

        if self.retention > 0:
            self.prune(self.retention)
        return row_id

    def get_recent_elements(self, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        """Most recent rows first."""
        rows = self.db.fetch_all(
            "SELECT * FROM elements ORDER BY id DESC LIMIT ?",
            (normalize_limit(limit),)
        )
        return [dict(row) for row in rows]

    def count(self) -> int:
        row = self.db.fetch_one("SELECT COUNT(*) FROM elements")
        return row[0] if row else 0

    def prune(self, keep: int) -> None:
        """Deletes everything but the `keep` newest rows."""
        self.db.execute_query(
            "DELETE FROM elements WHERE id NOT IN (SELECT id FROM elements ORDER BY id DESC LIMIT ?)",
            (keep,)
        )
