"""
RiverFlow Multi-Source Combinators.

Operators over several sources at once. Each source is wrapped in a
``Cursor`` and rewound before combination starts, then the cursors are
advanced round-robin in argument order. Output keys are always sequential.

Variadic operators cannot tell a curried call from a direct one by shape,
so each has an explicit curried twin (``zip_with``, ``concat_with``, ...).
"""

from __future__ import annotations

import builtins
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from riverflow.runtime.dispatch import pipeable
from riverflow.runtime.sequence import Cursor, Stream, is_sequence, pairs
from riverflow.utils.errors import InvalidArgument

_MISSING = object()


def _require_sources(operation: str, sources: Iterable[Any]) -> list[Any]:
    checked = []
    for position, source in enumerate(sources):
        if not is_sequence(source):
            raise InvalidArgument(
                operation, f"argument {position} must be a sequence, got {type(source).__name__}"
            )
        checked.append(source)
    return checked


def _cursors(sources: list[Any]) -> list[Cursor]:
    cursors = [Cursor(source) for source in sources]
    for cursor in cursors:
        cursor.rewind()
    return cursors


# =============================================================================
# Zipping
# =============================================================================


def zip(*sources: Iterable[Any]) -> Stream:
    """
    Rows of one value per source, stopping at the shortest source.

    Example:
        to_list(zip([1, 2, 3], [10, 20])) -> [[1, 10], [2, 20]]
    """
    checked = _require_sources("zip", sources)

    def produce() -> Iterator[list[Any]]:
        if not checked:
            return
        cursors = _cursors(checked)
        while builtins.all(cursor.valid() for cursor in cursors):
            yield [cursor.current() for cursor in cursors]
            for cursor in cursors:
                cursor.next()

    return Stream(enumerate(produce()))


def zip_with(*others: Iterable[Any]) -> Callable[[Iterable[Any]], Stream]:
    """Curried ``zip``: ``zip_with(b, c)(a) == zip(a, b, c)``."""
    checked = _require_sources("zip_with", others)
    return lambda data: zip(data, *checked)


def zip_longest(first: Any = _MISSING, fill: Any = _MISSING, *others: Iterable[Any]) -> Stream:
    """
    Rows of one value per source until the longest source is exhausted;
    exhausted sources contribute ``fill``.

    Example:
        to_list(zip_longest([1, 2, 3], "x", ["a"])) -> [[1, "a"], [2, "x"], [3, "x"]]
    """
    if first is _MISSING or fill is _MISSING:
        raise InvalidArgument("zip_longest", "expected (first, fill, *others)")
    checked = _require_sources("zip_longest", (first, *others))

    def produce() -> Iterator[list[Any]]:
        cursors = _cursors(checked)
        while builtins.any(cursor.valid() for cursor in cursors):
            row = []
            for cursor in cursors:
                if cursor.valid():
                    row.append(cursor.current())
                    cursor.next()
                else:
                    row.append(fill)
            yield row

    return Stream(enumerate(produce()))


def zip_longest_with(fill: Any = _MISSING, *others: Iterable[Any]) -> Callable[[Iterable[Any]], Stream]:
    """Curried ``zip_longest``: ``zip_longest_with("x", b)(a) == zip_longest(a, "x", b)``."""
    if fill is _MISSING:
        raise InvalidArgument("zip_longest_with", "expected (fill, *others)")
    checked = _require_sources("zip_longest_with", others)
    return lambda data: zip_longest(data, fill, *checked)


# =============================================================================
# Interleaving and Concatenation
# =============================================================================


def interleave(*sources: Iterable[Any]) -> Stream:
    """
    One value from each source per round, stopping as soon as a round finds
    any source exhausted.

    Example:
        to_list(interleave([1, 2, 3], ["a", "b"])) -> [1, "a", 2, "b"]
    """
    checked = _require_sources("interleave", sources)

    def produce() -> Iterator[Any]:
        if not checked:
            return
        cursors = _cursors(checked)
        while builtins.all(cursor.valid() for cursor in cursors):
            for cursor in cursors:
                yield cursor.current()
                cursor.next()

    return Stream(enumerate(produce()))


def interleave_with(*others: Iterable[Any]) -> Callable[[Iterable[Any]], Stream]:
    """Curried ``interleave``."""
    checked = _require_sources("interleave_with", others)
    return lambda data: interleave(data, *checked)


def concat(*sources: Iterable[Any]) -> Stream:
    """
    Drain each source in turn. Keys are discarded.

    Example:
        to_list(concat({"a": 1}, [2], (3,))) -> [1, 2, 3]
    """
    checked = _require_sources("concat", sources)

    def produce() -> Iterator[Any]:
        for cursor in _cursors(checked):
            while cursor.valid():
                yield cursor.current()
                cursor.next()

    return Stream(enumerate(produce()))


def concat_with(*others: Iterable[Any]) -> Callable[[Iterable[Any]], Stream]:
    """Curried ``concat``: ``concat_with(b)(a) == concat(a, b)``."""
    checked = _require_sources("concat_with", others)
    return lambda data: concat(data, *checked)


@pipeable
def append(data: Iterable[Any], *items: Any) -> Stream:
    """
    The sequence followed by ``items``. Keys are discarded.

    A leading sequence always selects the direct form, so ``append([3])`` is
    the sequence ``[3]`` itself. Use ``concat_with([[3]])`` to append a
    sequence item in curried form.

    Example:
        to_list(append([1, 2], 3, 4)) -> [1, 2, 3, 4]
        to_list(append(3, 4)([1, 2])) -> [1, 2, 3, 4]
    """
    return concat(data, items)


@pipeable
def prepend(data: Iterable[Any], *items: Any) -> Stream:
    """
    ``items`` followed by the sequence. Keys are discarded. Like ``append``,
    a leading sequence selects the direct form.

    Example:
        to_list(prepend([1, 2], 3, 4)) -> [3, 4, 1, 2]
    """
    return concat(items, data)


# =============================================================================
# Transposition
# =============================================================================


def _rows(operation: str, rows: Iterable[Any]) -> list[list[Any]]:
    materialized = []
    for _, row in pairs(rows):
        if not is_sequence(row):
            raise InvalidArgument(operation, f"every row must be a sequence, got {type(row).__name__}")
        cursor = Cursor(row)
        cursor.rewind()
        values = []
        while cursor.valid():
            values.append(cursor.current())
            cursor.next()
        materialized.append(values)
    return materialized


@pipeable
def transpose(rows: Iterable[Iterable[Any]]) -> list[list[Any]]:
    """
    Turn rows into columns, aligned to the shortest row; the extra values of
    longer rows are dropped and row keys are discarded.

    Example:
        transpose([[1, 2, 3], [4, 5]]) -> [[1, 4], [2, 5]]
    """
    materialized = _rows("transpose", rows)
    if not materialized:
        return []
    width = builtins.min(len(row) for row in materialized)
    return [[row[column] for row in materialized] for column in range(width)]


@pipeable
def unzip(rows: Iterable[Iterable[Any]]) -> list[list[Any]]:
    """
    Split a sequence of tuples into one list per position, aligned to the
    shortest tuple.

    Example:
        unzip([[1, "a"], [2, "b"]]) -> [[1, 2], ["a", "b"]]
    """
    materialized = _rows("unzip", rows)
    if not materialized:
        return []
    width = builtins.min(len(row) for row in materialized)
    return [[row[column] for row in materialized] for column in range(width)]
