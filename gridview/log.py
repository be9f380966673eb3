"""Logging utilities for gridview.

Rendering problems that are isolated to a single cell are logged here
instead of aborting the whole table.
"""

from __future__ import annotations

import logging
import sys

from typing import Any


class _LoggerHolder:
    """Holder for the global logger instance."""

    instance: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get the gridview logger instance.

    The level and format come from ``LogSettings`` the first time the
    logger is created.

    Returns
    -------
    logging.Logger
        The gridview logger configured with a stream handler.
    """
    if _LoggerHolder.instance is None:
        from .config import get_settings  # pylint: disable=import-outside-toplevel

        log_settings = get_settings().log
        logger = logging.getLogger("gridview")
        logger.setLevel(log_settings.level)

        # Only add handler if none exists
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(log_settings.format))
            logger.addHandler(handler)

        _LoggerHolder.instance = logger

    return _LoggerHolder.instance


def debug(msg: str) -> None:
    """Log a debug message.

    Parameters
    ----------
    msg : str
        The message to log.
    """
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message.

    Parameters
    ----------
    msg : str
        The message to log.
    """
    get_logger().info(msg)


def warn(msg: str) -> None:
    """Log a warning message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The warning message to log.
    """
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message. Never raises exceptions.

    Parameters
    ----------
    msg : str
        The error message to log.
    """
    get_logger().error(msg)


def set_level(level: int | str) -> None:
    """Set the logging level.

    Parameters
    ----------
    level : int or str
        The logging level (e.g., logging.DEBUG, "DEBUG").
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    get_logger().setLevel(level)


def exception(msg: str) -> None:
    """Log an exception with full traceback.

    Call this from within an except block.

    Parameters
    ----------
    msg : str
        The error message to log alongside the traceback.
    """
    get_logger().exception(msg)


def log_cell_error(column: str, key: Any, index: int, exc: BaseException) -> None:
    """Log a cell rendering error with standardized format.

    Parameters
    ----------
    column : str
        Name of the column whose cell failed (attribute or type).
    key : Any
        The row key.
    index : int
        The zero-based row index on the current page.
    exc : BaseException
        The exception that was raised.
    """
    get_logger().warning(f"Cell error in column '{column}' for row {key!r} (index {index}): {exc}")


def enable_debug() -> None:
    """Enable debug mode for verbose rendering logs.

    This will show inferred columns and page fallbacks.
    """
    set_level(logging.DEBUG)
