"""Root logger setup shared by the API server and the terminal client"""
from __future__ import annotations
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
# Driver and HTTP-pool loggers that drown out our own at INFO
QUIET_LOGGERS = ("pymongo", "urllib3")


def configure_logging(level: int | str | None = None) -> None:
    """Attach one stdout handler to the root logger.

    Without an explicit level, LOG_LEVEL decides (INFO when unset).
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
