"""
RiverFlow Lazy Operators.

Single-source operators that return a ``Stream``. Building one validates its
arguments and nothing else: the source is not touched until the stream is
pulled, and each pull advances the source only as far as needed.

Unless stated otherwise the operators preserve source keys.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator, Mapping
from collections.abc import Sequence as SequenceABC
from typing import Any

from riverflow.runtime.dispatch import (
    callback,
    optional_callback,
    pipeable,
    require_int,
)
from riverflow.runtime.hashing import strict_equals
from riverflow.runtime.sequence import Stream, is_sequence, pairs
from riverflow.utils.errors import InvalidArgument
from riverflow.utils.log import get_logger

logger = get_logger("pipes")

_MISSING = object()


# =============================================================================
# Filtering and Mapping
# =============================================================================


@pipeable
def filter(data: Iterable[Any], predicate: Callable[..., Any]) -> Stream:
    """
    Keep elements for which ``predicate(value, key)`` is truthy.

    Example:
        to_array(filter({"a": 1, "b": 2}, lambda v: v % 2)) -> {"a": 1}
    """
    test = callback("filter", "predicate", predicate)

    def produce() -> Iterator[tuple[Any, Any]]:
        for key, value in pairs(data):
            if test(value, key):
                yield key, value

    return Stream(produce())


@pipeable
def reject(data: Iterable[Any], predicate: Callable[..., Any]) -> Stream:
    """
    Drop elements for which ``predicate(value, key)`` is truthy.

    Example:
        to_array(reject({"a": 1, "b": 2}, lambda v: v % 2)) -> {"b": 2}
    """
    test = callback("reject", "predicate", predicate)

    def produce() -> Iterator[tuple[Any, Any]]:
        for key, value in pairs(data):
            if not test(value, key):
                yield key, value

    return Stream(produce())


@pipeable
def map(data: Iterable[Any], transformer: Callable[..., Any]) -> Stream:
    """
    Replace each value with ``transformer(value, key)``.

    Example:
        to_array(map({"x": 1}, lambda v: v * 10)) -> {"x": 10}
    """
    transform = callback("map", "transformer", transformer)

    def produce() -> Iterator[tuple[Any, Any]]:
        for key, value in pairs(data):
            yield key, transform(value, key)

    return Stream(produce())


def _pluck_one(item: Any, key: Any, default: Any) -> Any:
    if isinstance(item, Mapping):
        return item[key] if key in item else default
    if isinstance(item, SequenceABC) and not isinstance(item, str) and isinstance(key, int):
        try:
            return item[key]
        except IndexError:
            return default
    if isinstance(key, str) and not key.startswith("_"):
        return getattr(item, key, default)
    return default


@pipeable
def pluck(data: Iterable[Any], key: str | int, default: Any = None) -> Stream:
    """
    Read one field from every element: a mapping key, a sequence index or a
    public attribute. Missing fields produce ``default``.

    Example:
        to_list(pluck([{"id": 1}, {"name": "x"}], "id", -1)) -> [1, -1]
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        for outer_key, item in pairs(data):
            yield outer_key, _pluck_one(item, key, default)

    return Stream(produce())


@pipeable
def keys(data: Iterable[Any]) -> Stream:
    """
    Emit the keys of a sequence as values (keys discarded).

    Example:
        to_list(keys({"a": 1, "b": 2})) -> ["a", "b"]
    """
    return Stream(enumerate(key for key, _ in pairs(data)))


@pipeable
def values(data: Iterable[Any]) -> Stream:
    """Emit the values of a sequence under fresh sequential keys."""
    return Stream(enumerate(value for _, value in pairs(data)))


# =============================================================================
# Slicing
# =============================================================================


@pipeable
def take(data: Iterable[Any], count: int) -> Stream:
    """
    Emit at most ``count`` elements; non-positive counts emit nothing.

    Only ``count`` elements are pulled from the source.

    Example:
        to_array(take({"x": 1, "y": 2, "z": 3}, 2)) -> {"x": 1, "y": 2}
    """
    require_int("take", "count", count)

    def produce() -> Iterator[tuple[Any, Any]]:
        if count <= 0:
            return
        yield from itertools.islice(pairs(data), count)

    return Stream(produce())


@pipeable
def drop(data: Iterable[Any], count: int) -> Stream:
    """
    Skip the first ``count`` elements; non-positive counts skip nothing.

    Example:
        to_array(drop({"a": 1, "b": 2, "c": 3}, 2)) -> {"c": 3}
    """
    require_int("drop", "count", count)

    def produce() -> Iterator[tuple[Any, Any]]:
        yield from itertools.islice(pairs(data), max(count, 0), None)

    return Stream(produce())


@pipeable
def take_while(data: Iterable[Any], predicate: Callable[..., Any]) -> Stream:
    """
    Emit elements until ``predicate(value, key)`` first fails.

    Example:
        to_list(take_while([10, 20, 30, 15], lambda v: v < 25)) -> [10, 20]
    """
    test = callback("take_while", "predicate", predicate)

    def produce() -> Iterator[tuple[Any, Any]]:
        for key, value in pairs(data):
            if not test(value, key):
                return
            yield key, value

    return Stream(produce())


@pipeable
def drop_while(data: Iterable[Any], predicate: Callable[..., Any]) -> Stream:
    """
    Skip elements while ``predicate(value, key)`` holds, then emit the rest.

    Example:
        to_array(drop_while([2, 4, 5, 8], lambda v: v % 2 == 0)) -> {2: 5, 3: 8}
    """
    test = callback("drop_while", "predicate", predicate)

    def produce() -> Iterator[tuple[Any, Any]]:
        source = pairs(data)
        for key, value in source:
            if not test(value, key):
                yield key, value
                break
        yield from source

    return Stream(produce())


@pipeable
def tail(data: Iterable[Any]) -> Stream:
    """All elements except the first."""

    def produce() -> Iterator[tuple[Any, Any]]:
        yield from itertools.islice(pairs(data), 1, None)

    return Stream(produce())


@pipeable
def init(data: Iterable[Any]) -> Stream:
    """
    All elements except the last, holding back one element of lookahead.

    Example:
        to_array(init({5: "x", 7: "y", 2: "z"})) -> {5: "x", 7: "y"}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        previous = _MISSING
        for pair in pairs(data):
            if previous is not _MISSING:
                yield previous
            previous = pair

    return Stream(produce())


# =============================================================================
# Flattening
# =============================================================================


def _flatten_values(items: Iterable[Any], depth: int) -> Iterator[Any]:
    for item in items:
        if depth > 0 and is_sequence(item):
            yield from _flatten_values((value for _, value in pairs(item)), depth - 1)
        else:
            yield item


@pipeable
def flatten(data: Iterable[Any], depth: int = 1) -> Stream:
    """
    Inline nested sequences up to ``depth`` levels. Keys are discarded, since
    the key spaces of inner sequences cannot be merged.

    Example:
        to_list(flatten([1, [2, [3]], 4], 1)) -> [1, 2, [3], 4]
        to_list(flatten([1, [2, [3]], 4], 2)) -> [1, 2, 3, 4]
    """
    require_int("flatten", "depth", depth)
    if depth < 0:
        raise InvalidArgument("flatten", f"depth must be >= 0, got {depth}")

    def produce() -> Iterator[Any]:
        yield from _flatten_values((value for _, value in pairs(data)), depth)

    return Stream(enumerate(produce()))


@pipeable
def flat_map(data: Iterable[Any], transformer: Callable[..., Any]) -> Stream:
    """
    Map each element, then flatten one level. Non-sequence results are
    emitted as single elements. Keys are discarded.

    Example:
        to_list(flat_map([1, 2], lambda v: [v, v * 2])) -> [1, 2, 2, 4]
    """
    transform = callback("flat_map", "transformer", transformer)

    def produce() -> Iterator[Any]:
        for key, value in pairs(data):
            result = transform(value, key)
            if is_sequence(result):
                yield from (inner for _, inner in pairs(result))
            else:
                yield result

    return Stream(enumerate(produce()))


@pipeable
def intersperse(data: Iterable[Any], separator: Any) -> Stream:
    """
    Insert ``separator`` between consecutive elements. Keys are discarded.

    Example:
        to_list(intersperse([1, 2, 3], 0)) -> [1, 0, 2, 0, 3]
    """

    def produce() -> Iterator[Any]:
        for index, (_, value) in enumerate(pairs(data)):
            if index:
                yield separator
            yield value

    return Stream(enumerate(produce()))


# =============================================================================
# Run-based Operators
# =============================================================================


@pipeable
def distinct_until_changed(data: Iterable[Any], selector: Callable[..., Any] | None = None) -> Stream:
    """
    Drop consecutive duplicates, keeping the first element (and key) of each
    run. Runs are defined by strict equality of ``selector(value, key)``, or
    of the value itself when no selector is given.

    Only the previous classifier is retained.

    Example:
        to_array(distinct_until_changed({"a": 1, "b": 1, "c": 2})) -> {"a": 1, "c": 2}
    """
    select = optional_callback("distinct_until_changed", "selector", selector)

    def produce() -> Iterator[tuple[Any, Any]]:
        previous = _MISSING
        for key, value in pairs(data):
            marker = select(value, key) if select else value
            if previous is _MISSING or not strict_equals(previous, marker):
                yield key, value
            previous = marker

    return Stream(produce())


@pipeable
def partition_by(data: Iterable[Any], discriminator: Callable[..., Any]) -> Stream:
    """
    Split the sequence into contiguous runs sharing a discriminator value.

    Each run is a dict keeping the source keys; a run is emitted as soon as
    the discriminator changes. Unlike ``group_by``, equal discriminators that
    are not adjacent end up in separate runs.

    Example:
        to_list(partition_by(["ant", "apple", "bear"], lambda s: s[0]))
            -> [{0: "ant", 1: "apple"}, {2: "bear"}]
    """
    classify = callback("partition_by", "discriminator", discriminator)

    def produce() -> Iterator[dict[Any, Any]]:
        chunk: dict[Any, Any] = {}
        current = _MISSING
        for key, value in pairs(data):
            marker = classify(value, key)
            if chunk and not strict_equals(current, marker):
                yield chunk
                chunk = {}
            chunk[key] = value
            current = marker
        if chunk:
            yield chunk

    return Stream(enumerate(produce()))


# =============================================================================
# Running Folds
# =============================================================================


@pipeable
def scan(data: Iterable[Any], reducer: Callable[..., Any], seed: Any = None) -> Stream:
    """
    Emit every intermediate accumulator of a left fold, under the key of the
    element that produced it. ``reducer`` receives ``(carry, value, key)``.

    Example:
        to_list(scan([1, 2, 3], lambda acc, v: acc + v, 0)) -> [1, 3, 6]
    """
    step = callback("scan", "reducer", reducer, max_args=3)

    def produce() -> Iterator[tuple[Any, Any]]:
        carry = seed
        for key, value in pairs(data):
            carry = step(carry, value, key)
            yield key, carry

    return Stream(produce())


@pipeable
def scan_right(data: Iterable[Any], reducer: Callable[..., Any], seed: Any = None) -> Stream:
    """
    Emit the accumulators of a right fold in the original left-to-right
    order. The whole input is buffered before anything is emitted.

    Example:
        to_list(scan_right([1, 2, 3], lambda acc, v: acc + v, 0)) -> [6, 5, 3]
    """
    step = callback("scan_right", "reducer", reducer, max_args=3)

    def produce() -> Iterator[tuple[Any, Any]]:
        buffered = list(pairs(data))
        logger.debug("scan_right buffered %d elements", len(buffered))
        folded = [None] * len(buffered)
        carry = seed
        for index in reversed(range(len(buffered))):
            key, value = buffered[index]
            carry = step(carry, value, key)
            folded[index] = carry
        for (key, _), result in zip(buffered, folded):
            yield key, result

    return Stream(produce())
