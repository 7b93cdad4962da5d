"""
RiverFlow Windowing Operators.

Operators that look backwards or forwards over a bounded buffer. Every call
owns its own ``deque``; memory is bounded by the window size, except for
``take_last`` which bounds it by ``n`` but has to read the whole input
before it knows which elements are last.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from typing import Any

from riverflow.runtime.dispatch import pipeable, require_int
from riverflow.runtime.sequence import Stream, pairs
from riverflow.utils.errors import InvalidArgument


def _require_positive(operation: str, size: Any) -> int:
    require_int(operation, "size", size)
    if size <= 0:
        raise InvalidArgument(operation, f"size must be > 0, got {size}")
    return size


@pipeable
def aperture(data: Iterable[Any], size: int) -> Stream:
    """
    Sliding windows of exactly ``size`` consecutive values. Keys are discarded.

    Example:
        to_list(aperture([1, 2, 3, 4], 2)) -> [[1, 2], [2, 3], [3, 4]]
    """
    _require_positive("aperture", size)

    def produce() -> Iterator[list[Any]]:
        window: deque[Any] = deque(maxlen=size)
        for _, value in pairs(data):
            window.append(value)
            if len(window) == size:
                yield list(window)

    return Stream(enumerate(produce()))


@pipeable
def pairwise(data: Iterable[Any]) -> Stream:
    """
    Consecutive ``[previous, current]`` pairs. Keys are discarded.

    Example:
        to_list(pairwise([1, 2, 3])) -> [[1, 2], [2, 3]]
    """
    return aperture(data, 2)


@pipeable
def chunk(data: Iterable[Any], size: int) -> Stream:
    """
    Fixed-size lists of values; the last one may be shorter. Keys are discarded.

    Example:
        to_list(chunk([1, 2, 3, 4, 5], 2)) -> [[1, 2], [3, 4], [5]]
    """
    _require_positive("chunk", size)

    def produce() -> Iterator[list[Any]]:
        batch: list[Any] = []
        for _, value in pairs(data):
            batch.append(value)
            if len(batch) == size:
                yield batch
                batch = []
        if batch:
            yield batch

    return Stream(enumerate(produce()))


@pipeable
def drop_last(data: Iterable[Any], count: int) -> Stream:
    """
    Everything except the last ``count`` elements, keeping keys.

    Streams with a lookahead of ``count + 1``: the first element is emitted
    once ``count + 1`` elements have been read.

    Example:
        to_array(drop_last({"a": 1, "b": 2, "c": 3}, 2)) -> {"a": 1}
    """
    require_int("drop_last", "count", count)

    def produce() -> Iterator[tuple[Any, Any]]:
        if count <= 0:
            yield from pairs(data)
            return
        buffer: deque[tuple[Any, Any]] = deque()
        for pair in pairs(data):
            buffer.append(pair)
            if len(buffer) > count:
                yield buffer.popleft()

    return Stream(produce())


@pipeable
def take_last(data: Iterable[Any], count: int) -> Stream:
    """
    The last ``count`` elements in their original order, keeping keys.

    The whole input is consumed before the first element is emitted, for any
    ``count``; non-positive counts emit nothing.

    Example:
        to_array(take_last({"a": 1, "b": 2, "c": 3}, 2)) -> {"b": 2, "c": 3}
    """
    require_int("take_last", "count", count)

    def produce() -> Iterator[tuple[Any, Any]]:
        buffer: deque[tuple[Any, Any]] = deque(maxlen=max(count, 0))
        buffer.extend(pairs(data))
        yield from buffer

    return Stream(produce())
