"""
Logging setup for RiverFlow.

The package logs through the ``riverflow`` logger hierarchy and stays silent
unless the application configures logging.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "riverflow"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a RiverFlow subsystem, e.g. ``get_logger("hashing")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str | int = "warning") -> logging.Logger:
    """
    Configure RiverFlow logging.

    Args:
        level: Level name ("debug", "info", "warning", "error") or a logging constant

    Returns:
        The package root logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger
