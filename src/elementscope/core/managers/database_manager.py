# src/elementscope/core/managers/database_manager.py
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from elementscope.core.utils.path_utils import PathUtils
from elementscope.database_schema import DEFAULT_SCHEMA_SCRIPT

logger = logging.getLogger(__name__)

CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
)


class DatabaseManager:
    """
    Connection and statement layer for the element history database.

    Each thread gets its own sqlite3 connection (the relay's event loop and the
    CLI never share one). Business SQL lives in ElementHistoryManager; this
    class only runs statements and owns the schema script.

    Failure conventions: schema and write queries raise, inserts return -1,
    reads return an empty result.
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else PathUtils.resolve_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._all_connections: List[sqlite3.Connection] = []
        self._registry_lock = threading.Lock()
        logger.debug("History database: %s", self.db_path)

    # --- CONNECTIONS ---

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self.db_path), isolation_level=None, check_same_thread=False)
        except sqlite3.Error as e:
            logger.error(f"Cannot open history database {self.db_path}: {e}", exc_info=True)
            raise
        conn.row_factory = sqlite3.Row
        for pragma in CONNECTION_PRAGMAS:
            conn.execute(pragma)
        with self._registry_lock:
            self._all_connections.append(conn)
        return conn

    def get_connection(self) -> sqlite3.Connection:
        """This thread's connection; a connection closed underneath us is replaced."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            try:
                conn.execute("SELECT 1;")
                return conn
            except sqlite3.ProgrammingError:
                self._local.conn = None
        self._local.conn = self._open()
        return self._local.conn

    def close(self) -> None:
        """Checkpoints the WAL and closes every connection opened by this manager."""
        with self._registry_lock:
            connections, self._all_connections = self._all_connections, []
        for conn in connections:
            try:
                conn.execute("PRAGMA wal_checkpoint(TRUNCATE);")
                conn.close()
            except sqlite3.Error as e:
                logger.debug(f"Closing history connection failed: {e}")
        self._local.conn = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Runs the enclosed statements atomically on this thread's connection."""
        conn = self.get_connection()
        with conn:
            yield conn

    # --- STATEMENTS ---

    def execute_query(self, query: str, params: tuple = ()) -> None:
        """Runs a write statement (UPDATE/DELETE); errors propagate."""
        try:
            with self.transaction() as conn:
                conn.execute(query, params)
        except sqlite3.Error as e:
            logger.error(f"Statement failed: {e} | {query.strip()}")
            raise

    def execute_insert(self, query: str, params: tuple = ()) -> int:
        """Runs an INSERT and returns the new rowid, or -1 when it failed."""
        try:
            with self.transaction() as conn:
                return conn.execute(query, params).lastrowid
        except sqlite3.Error as e:
            logger.error(f"Could not store row: {e}")
            return -1

    def execute_script(self, script: str) -> None:
        try:
            with self.transaction() as conn:
                conn.executescript(script)
        except sqlite3.Error as e:
            logger.error(f"SQL script failed: {e}")
            raise

    def fetch_all(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            return self.get_connection().execute(query, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Read failed: {e}")
            return []

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        try:
            return self.get_connection().execute(query, params).fetchone()
        except sqlite3.Error as e:
            logger.debug(f"Read failed: {e}")
            return None

    def init_schema(self) -> None:
        """Creates the 'elements' table and its index when missing."""
        self.execute_script(DEFAULT_SCHEMA_SCRIPT)
