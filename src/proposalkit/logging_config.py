"""Logging setup for applications embedding proposalkit.

The library itself only creates module loggers under ``proposalkit``; it
never installs handlers on import.  Call :func:`setup_logging` from an
entry point (the CLI does) to see them.
"""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = ["LOG_FORMAT", "setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROOT = "proposalkit"


def setup_logging(
    level: int | str = logging.WARNING,
    console_output: bool = True,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the ``proposalkit`` logger.

    Args:
        level: Logging level (number or name such as ``"info"``).
        console_output: Whether to log to stderr.
        log_file: Optional file to append log records to.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level {level!r}")
        level = resolved

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)

    # Repeated calls replace handlers instead of stacking them.
    logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
