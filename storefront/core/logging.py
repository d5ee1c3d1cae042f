# storefront/core/logging.py
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Server loggers follow the app level; SQL echo is controlled by DB_ECHO instead.
_FOLLOW_APP_LEVEL = ("storefront", "uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO") -> None:
    """
    One stdout handler on the root logger. Calling it again (app factory in
    tests, uvicorn reload) only adjusts the level.
    """
    level = level.upper()
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
        root.addHandler(handler)
    for name in _FOLLOW_APP_LEVEL:
        logging.getLogger(name).setLevel(level)
