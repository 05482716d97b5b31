# src/elementscope/core/utils/path_utils.py
import os
from pathlib import Path
from typing import Optional

ROOT_MARKERS = ("pyproject.toml", "src")
CACHE_DIR_NAME = ".elementscope_cache"
HOME_ENV = "ELEMENTSCOPE_HOME"
DEFAULT_DB_NAME = "elements.db"


class PathUtils:
    """Where elementscope keeps its settings and its runtime data."""

    @staticmethod
    def get_project_root() -> Path:
        """
        First ancestor of this file that looks like a source checkout
        (holds both pyproject.toml and src/).
        """
        for candidate in Path(__file__).resolve().parents:
            if all((candidate / marker).exists() for marker in ROOT_MARKERS):
                return candidate
        raise FileNotFoundError("elementscope is not running from a source checkout (no pyproject.toml + src/).")

    @staticmethod
    def get_package_root() -> Path:
        """Directory of the elementscope package (holds settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_cache_root() -> Path:
        """
        Runtime data directory. $ELEMENTSCOPE_HOME wins; otherwise the checkout's
        .elementscope_cache, or the working directory's for installed copies.
        """
        home = os.environ.get(HOME_ENV)
        if home:
            return Path(home).expanduser()
        try:
            base = PathUtils.get_project_root()
        except FileNotFoundError:
            base = Path.cwd()
        return base / CACHE_DIR_NAME

    @staticmethod
    def resolve_db_path(db_path: Optional[str] = None) -> Path:
        """Absolute location of the history database; relative names live in the cache root."""
        path = Path(db_path or DEFAULT_DB_NAME).expanduser()
        if not path.is_absolute():
            path = PathUtils.get_cache_root() / path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
