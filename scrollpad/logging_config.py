"""Logging setup.

The terminal belongs to the editor while it runs, so log records go to a
rotating file in the user log directory and never to the console.
"""

import logging
import logging.handlers
import os
import tempfile
from pathlib import Path
from typing import Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger("scrollpad")


def default_log_path() -> Path:
    return Path(platformdirs.user_log_dir("scrollpad")) / EditorConstants.LOG_FILENAME


def setup_logging(level: str = "WARNING", log_path: Optional[Path] = None) -> Path:
    """Attach a rotating file handler to the ``scrollpad`` logger.

    Calling it again replaces the handler instead of stacking another one.

    Args:
        level: Logging level name
        log_path: Log file; defaults to the platform log directory

    Returns:
        The path actually logged to
    """
    path = log_path or default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        path = Path(tempfile.gettempdir()) / EditorConstants.LOG_FILENAME

    handler = logging.handlers.RotatingFileHandler(
        os.fspath(path),
        maxBytes=EditorConstants.LOG_MAX_BYTES,
        backupCount=EditorConstants.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"
    ))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    # Records stay out of the root logger so nothing reaches the screen
    logger.propagate = False
    return path
