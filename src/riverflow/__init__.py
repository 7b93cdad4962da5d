"""
RiverFlow - Functional collection transformations for Python.

Operators over lists, dicts and (possibly infinite) generators, each callable
directly or in curried form for pipeline chaining:

    from riverflow import filter, map, pipe, take, to_list

    pipe(range(0, 100), filter(lambda v: v % 3 == 0), map(lambda v: v * v), take(3), to_list)
    # -> [0, 9, 36]

Lazy operators return a ``Stream`` that preserves source keys; aggregations
return plain lists, dicts or scalars.
"""

import logging

from riverflow.pipes import *  # noqa: F403
from riverflow.pipes import __all__ as _pipes_all
from riverflow.runtime.sequence import Stream
from riverflow.utils import (
    InvalidArgument,
    RiverFlowError,
    ascend,
    compose,
    configure_logging,
    descend,
    identity,
    pipe,
    tap,
)

logging.getLogger("riverflow").addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    *_pipes_all,
    "Stream",
    "RiverFlowError",
    "InvalidArgument",
    "configure_logging",
    "identity",
    "tap",
    "compose",
    "pipe",
    "ascend",
    "descend",
]
