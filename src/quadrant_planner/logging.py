from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .core import LOG_FILE, ensure_data_dir

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# HTTP client chatter drowns out pipeline logs at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "hypercorn.access")

_configured = False


def _handlers(log_file: Path) -> List[logging.Handler]:
    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    return [file_handler, logging.StreamHandler()]


def configure_logging(level: Optional[str] = None, *, log_path: Optional[Path] = None) -> None:
    """Send planner logs to a rotating file in the data directory and to stderr.

    ``level`` falls back to ``QUADRANT_LOG_LEVEL`` and then ``INFO``. Only the
    first call has an effect.
    """

    global _configured
    if _configured:
        return

    log_file = log_path or LOG_FILE
    ensure_data_dir(log_file.parent)
    level_name = (level or os.getenv("QUADRANT_LOG_LEVEL") or "INFO").upper()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    root = logging.getLogger()
    for handler in _handlers(log_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    resolved = logging.getLevelName(level_name)
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).debug("Writing logs to %s at %s", log_file, level_name)


__all__ = ["configure_logging"]
