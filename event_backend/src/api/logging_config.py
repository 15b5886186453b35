"""
Logging for the service.

The handlers are attached to the ``src.api`` package logger, not the root
logger, so uvicorn keeps its own access/error log configuration. Records
still propagate to the root, which is where pytest's ``caplog`` listens.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

APP_LOGGER = "src.api"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONSOLE_HANDLER = "event-calendar-console"
_FILE_HANDLER = "event-calendar-file"


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.set_name(_CONSOLE_HANDLER)
    handlers: List[logging.Handler] = [console]

    if logfile:
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.set_name(_FILE_HANDLER)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: str = "INFO", logfile: Optional[str] = None, logger_name: str = APP_LOGGER
) -> logging.Logger:
    """Attach the service handlers to ``logger_name`` and set its level.

    Calling it again only updates the level: the test client imports the app
    once per session but reloaders may import it several times.

    Parameters
    ----------
    level : str
        LOG_LEVEL value, case insensitive. Unknown names fall back to INFO
        with a warning.
    logfile : Optional[str]
        LOG_FILE value. When set, records are also appended to this file;
        missing parent directories are created.
    """
    logger = logging.getLogger(logger_name)
    numeric_level = logging.getLevelName(level.upper())
    known = isinstance(numeric_level, int)
    logger.setLevel(numeric_level if known else logging.INFO)

    installed = {h.get_name() for h in logger.handlers}
    if _CONSOLE_HANDLER not in installed:
        for handler in _build_handlers(logfile):
            logger.addHandler(handler)

    if not known:
        logger.warning("Unknown LOG_LEVEL %r, using INFO", level)
    return logger
