"""Define utility functions to simplify logging to the CLI."""

import logging

from rich.console import Console

logger = logging.getLogger("mobility_teleop")
console = Console(highlight=False)


def log_info(message: str) -> None:
    """Log the given string at the INFO level."""
    logger.info(message)


def log_warning(message: str) -> None:
    """Log the given string at the WARNING level."""
    logger.warning(message)


def log_error(message: str) -> None:
    """Log the given string at the ERROR level."""
    logger.error(message)
