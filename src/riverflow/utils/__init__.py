"""
RiverFlow Utilities Package.

Errors, logging setup and small function combinators.
"""

from riverflow.utils.errors import InvalidArgument, RiverFlowError
from riverflow.utils.functional import ascend, compose, descend, identity, pipe, tap
from riverflow.utils.log import configure_logging, get_logger

__all__ = [
    # Errors
    "RiverFlowError",
    "InvalidArgument",
    # Logging
    "configure_logging",
    "get_logger",
    # Combinators
    "identity",
    "tap",
    "compose",
    "pipe",
    "ascend",
    "descend",
]
