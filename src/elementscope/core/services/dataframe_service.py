# src/elementscope/core/services/dataframe_service.py
import json
import logging
from pathlib import Path
from typing import Any, Tuple

import pandas as pd

from elementscope.core.managers.database_manager import DatabaseManager

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "id", "timestamp", "tagName", "elementId", "className",
    "url", "cssSelector", "xpath", "elementText", "attributes",
]


class DataFrameService:
    """
    Pandas layer over the element history database.
    Keeps the DatabaseManager free of pandas.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def fetch_dataframe(self, query: str, params: Tuple[Any, ...] = ()) -> pd.DataFrame:
        """
        Executes a SQL query and returns the results as a DataFrame.
        Returns an empty DataFrame if the query fails or matches nothing.
        """
        rows = self.db.fetch_all(query, params)
        return pd.DataFrame([dict(row) for row in rows])

    def load_history(self, limit: int = 0) -> pd.DataFrame:
        """Loads stored elements newest-first; `limit` <= 0 loads everything."""
        sql = "SELECT * FROM elements ORDER BY id DESC"
        if limit > 0:
            return self.fetch_dataframe(sql + " LIMIT ?", (limit,))
        return self.fetch_dataframe(sql)

    def export_history(self, output_file: Path, limit: int = 0) -> int:
        """
        Writes the history to CSV or JSON (chosen by file suffix).
        Returns the number of exported rows.
        """
        df = self.load_history(limit)
        if df.empty:
            return 0

        columns = [c for c in EXPORT_COLUMNS if c in df.columns]
        df = df[columns].copy()
        if "attributes" in df.columns:
            # Flatten [{name, value}] into 'name=value; ...' for spreadsheet use
            df["attributes"] = df["attributes"].map(_flatten_attributes)

        output_file.parent.mkdir(parents=True, exist_ok=True)
        if output_file.suffix.lower() == ".json":
            df.to_json(output_file, orient="records", indent=2)
        else:
            df.to_csv(output_file, index=False)
        logger.info(f"Exported {len(df)} elements to {output_file}")
        return len(df)


def _flatten_attributes(raw: Any) -> str:
    try:
        attrs = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        return str(raw)
    if isinstance(attrs, list):
        return "; ".join(f"{a.get('name')}={a.get('value')}" for a in attrs if isinstance(a, dict))
    if isinstance(attrs, dict):
        return "; ".join(f"{k}={v}" for k, v in attrs.items())
    return ""
