"""
RiverFlow Source Generators.

Lazy producers that start a pipeline instead of consuming one. Arguments are
checked when the generator is created; values are only computed when pulled.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator
from typing import Any

from riverflow.runtime.dispatch import optional_callback, require_int
from riverflow.runtime.sequence import Stream
from riverflow.utils.errors import InvalidArgument


def range(start: int | float, end: int | float, step: int | float = 1) -> Stream:
    """
    End-exclusive arithmetic progression from ``start`` towards ``end``.

    Values are computed as ``start + i * step`` so float steps do not drift.

    Example:
        to_list(range(5, 0, -2)) -> [5, 3, 1]
        to_list(range(0.0, 1.0, 0.25)) -> [0.0, 0.25, 0.5, 0.75]
    """
    for role, value in (("start", start), ("end", end), ("step", step)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgument("range", f"{role} must be an int or float, got {type(value).__name__}")
    if step == 0:
        raise InvalidArgument("range", "step must not be 0")
    if step > 0 and start > end:
        raise InvalidArgument("range", f"positive step cannot reach {end} from {start}")
    if step < 0 and start < end:
        raise InvalidArgument("range", f"negative step cannot reach {end} from {start}")

    def produce() -> Iterator[int | float]:
        for index in itertools.count():
            value = start + index * step
            if (step > 0 and value >= end) or (step < 0 and value <= end):
                return
            yield value

    return Stream(enumerate(produce()))


def repeat(value: Any, count: int | None = None) -> Stream:
    """
    Emit ``value`` ``count`` times, or forever when ``count`` is None.

    Example:
        to_list(repeat("x", 3)) -> ["x", "x", "x"]
        to_list(take(repeat(7), 2)) -> [7, 7]
    """
    if count is not None:
        require_int("repeat", "count", count)
        if count < 0:
            raise InvalidArgument("repeat", f"count must be >= 0, got {count}")
        return Stream(enumerate(itertools.repeat(value, count)))
    return Stream(enumerate(itertools.repeat(value)))


def times(count: int, producer: Callable[[int], Any] | None = None) -> Stream:
    """
    Emit ``producer(i)`` for ``i`` in ``0 .. count - 1``, or ``i`` itself.

    Example:
        to_list(times(5, lambda i: i * 2)) -> [0, 2, 4, 6, 8]
    """
    require_int("times", "count", count)
    if count < 0:
        raise InvalidArgument("times", f"count must be >= 0, got {count}")
    produce = optional_callback("times", "producer", producer, max_args=1)

    def indices() -> Iterator[Any]:
        for index in itertools.count():
            if index >= count:
                return
            yield produce(index) if produce else index

    return Stream(enumerate(indices()))
