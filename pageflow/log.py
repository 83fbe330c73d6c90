"""Logging helpers built on loguru."""

from __future__ import annotations

from loguru import logger

from .constants import DEBUG_LAYOUT


def get_logger():
    """Return the loguru logger bound to the pageflow context."""

    return logger.bind(name="pageflow")


def _debug(*, msg: str) -> None:
    """Log layout debug output when enabled.

    Args:
        msg: Message to log.
    Returns:
        None.
    """

    if DEBUG_LAYOUT:
        get_logger().debug(msg)
