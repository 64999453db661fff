"""Logging setup for spandiag.

Library modules only obtain loggers through ``get_logger`` and log at DEBUG.
Handlers are installed by the driver (``setup_logging``), never on import.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

from yachalk import chalk

LOG_LEVEL_ENV = "SPANDIAG_LOG_LEVEL"

LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"


class ChalkFormatter(logging.Formatter):
    """Formatter that colors whole records by level."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        level = record.levelno
        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        return chalk.gray(message)


def parse_log_level(value: str | None) -> int | None:
    """Turn "DEBUG", "warn", "10" etc. into a logging level, or None."""
    if not value:
        return None
    v = value.strip().upper()
    if v.isdigit():
        return int(v)
    name_to_level = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
        "NOTSET": logging.NOTSET,
    }
    return name_to_level.get(v)


def resolve_env_log_level() -> int | None:
    return parse_log_level(os.environ.get(LOG_LEVEL_ENV))


def setup_logging(level: int | None = None, *, stream: TextIO | None = None) -> None:
    """Configure the ``spandiag`` logger with a colored stream handler.

    ``level`` falls back to $SPANDIAG_LOG_LEVEL, then WARNING.
    """
    if level is None:
        level = resolve_env_log_level() or logging.WARNING

    logger = logging.getLogger("spandiag")
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
