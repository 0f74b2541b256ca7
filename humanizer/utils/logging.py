"""Logger factory shared by every module of the package."""

import logging
import os
from typing import Optional

ROOT_LOGGER_NAME = "humanizer"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stream handler to the package root logger.

    Args:
        level: Level name (e.g. "DEBUG"). Falls back to HUMANIZER_LOG_LEVEL, then INFO.
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level_name = (level or os.environ.get("HUMANIZER_LOG_LEVEL") or "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
