"""File logging for hnclient.

The TUI owns the terminal, so log records only go to a rotating file under
the XDG state directory. Environment overrides:

    HNCLIENT_LOG_LEVEL  level name (default INFO)
    HNCLIENT_LOG_FILE   exact log file path
    HNCLIENT_LOG_DIR    directory for the default per-run file name

// [LAW:single-enforcer] Handler wiring for the "hnclient" logger happens here only.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

import hnclient.io.paths

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
MAX_LOG_BYTES = 20 * 1024 * 1024
LOG_BACKUPS = 5


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str


_RUNTIME: LoggingRuntime | None = None


def _level_from_env() -> int:
    name = os.environ.get("HNCLIENT_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    # getLevelName returns "Level X" strings for unknown names.
    return level if isinstance(level, int) else logging.INFO


def _log_file() -> Path:
    explicit = os.environ.get("HNCLIENT_LOG_FILE")
    if explicit:
        return Path(explicit)
    directory = os.environ.get("HNCLIENT_LOG_DIR")
    log_dir = Path(directory) if directory else hnclient.io.paths.state_dir() / "logs"
    return log_dir / time.strftime("hnclient-%Y%m%d-%H%M%S.log")


def configure() -> LoggingRuntime:
    """Attach the file handler to the "hnclient" logger; later calls are no-ops."""
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level = _level_from_env()
    path = _log_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("hnclient")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _RUNTIME = LoggingRuntime(level_name=logging.getLevelName(level), level=level, file_path=str(path))
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME
