# app/utils/logger.py
"""
Logging setup shared by every module.
Call get_logger(__name__) at the top of a module; the root handler is
installed once, on first use.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Install the console handler on the root logger (idempotent)."""
    global _configured
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return
    _configured = True

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger."""
    configure_logging()
    return logging.getLogger(name)
