"""Logging setup for the ledger service."""

import logging
import sys
from typing import Optional

from cryptosim.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
STDOUT_HANDLER_NAME = "cryptosim-stdout"

# Library loggers and the level they are held at
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send cryptosim.* records to stdout at the configured level.

    Runs on every app startup; the stdout handler is attached only once.
    Returns the package logger.
    """
    level_name = (level or get_settings().log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    package_logger = logging.getLogger("cryptosim")
    package_logger.setLevel(numeric_level)
    if not any(h.get_name() == STDOUT_HANDLER_NAME for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(STDOUT_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    for name, library_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)
    return package_logger
