# src/elementscope/core/utils/configure_logging.py
import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

LevelSpec = Union[str, int]

# Third-party loggers that flood the console at INFO
DEFAULT_QUIET_LOGGERS: Dict[str, LevelSpec] = {
    "aiohttp.access": "WARNING",
    "asyncio": "WARNING",
}


class LogWithTqdm(logging.Handler):
    """
    Logging handler that writes through `tqdm.write()`, so log lines do not
    tear the progress bar of a batch inspection (`inspect --all`).
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: LevelSpec, fallback: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level


def configure_logger(level: LevelSpec = 'INFO', quiet_loggers: Optional[Dict[str, LevelSpec]] = None) -> None:
    """
    Installs the tqdm-aware handler on the root logger and raises the level of
    chatty library loggers.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(level, logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, quiet_level in {**DEFAULT_QUIET_LOGGERS, **(quiet_loggers or {})}.items():
        logging.getLogger(name).setLevel(_to_level(quiet_level, logging.CRITICAL))
