"""
RiverFlow Eager Aggregations.

Terminal operators that drain their input and return a materialized result:
scalars, lists, or dicts that keep the source keys. Each one makes a single
pass, so they work on one-shot generators, and the short-circuiting ones
stop pulling as soon as the answer is known.
"""

from __future__ import annotations

import builtins
import functools
from collections.abc import Callable, Iterable
from typing import Any

from riverflow.runtime.dispatch import callback, pipeable, require_int
from riverflow.runtime.hashing import strict_equals
from riverflow.runtime.ordering import compare, to_number
from riverflow.runtime.sequence import is_sequence, pairs
from riverflow.utils.errors import InvalidArgument

_MISSING = object()

# Values a classifier may return to be used as a result key.
MAP_KEY_TYPES = (str, int, float, bytes, type(None))


def _require_map_key(operation: str, role: str, value: Any) -> Any:
    if not isinstance(value, MAP_KEY_TYPES):
        raise InvalidArgument(
            operation, f"{role} must return a str, int, float, bytes or None, got {type(value).__name__}"
        )
    return value


# =============================================================================
# Conversion
# =============================================================================


@pipeable
def to_list(data: Iterable[Any]) -> list[Any]:
    """
    Collect the values into a list, discarding keys.

    Example:
        to_list({"a": 1, "b": 2}) -> [1, 2]
    """
    return [value for _, value in pairs(data)]


@pipeable
def to_array(data: Iterable[Any]) -> dict[Any, Any]:
    """
    Collect the (key, value) pairs into a dict. A repeated key keeps the last
    value.

    Example:
        to_array(take({"x": 1, "y": 2}, 1)) -> {"x": 1}
    """
    return dict(pairs(data))


# =============================================================================
# Folding
# =============================================================================


@pipeable
def reduce(data: Iterable[Any], reducer: Callable[..., Any], initial: Any = None) -> Any:
    """
    Fold the sequence with ``reducer(carry, value, key)`` starting at ``initial``.

    Example:
        reduce([1, 2, 3, 4], lambda acc, v: acc + v, 0) -> 10
    """
    step = callback("reduce", "reducer", reducer, max_args=3)
    carry = initial
    for key, value in pairs(data):
        carry = step(carry, value, key)
    return carry


@pipeable
def sum(data: Iterable[Any]) -> int | float:
    """
    Add up the values with numeric coercion: True counts as 1, False/None as
    0, numeric strings are parsed and anything else is ignored.

    Example:
        sum([1, 2.5, "3", True, False, None, "x"]) -> 7.5
    """
    total: int | float = 0
    for _, value in pairs(data):
        total += to_number(value)
    return total


@pipeable
def average(data: Iterable[Any]) -> float:
    """
    Mean of the coerced values. Ignored elements still count towards the
    denominator; an empty sequence averages to 0.0. Integer totals too large
    for a float average to their floored integer mean.

    Example:
        average([1, "3", True, None]) -> 1.25
    """
    total: int | float = 0
    count = 0
    for _, value in pairs(data):
        total += to_number(value)
        count += 1
    if count == 0:
        return 0.0
    try:
        return total / count
    except OverflowError:
        return total // count


@pipeable
def count(data: Iterable[Any]) -> int:
    """Number of elements."""
    return builtins.sum(1 for _ in pairs(data))


@pipeable
def is_empty(data: Iterable[Any]) -> bool:
    """True when the sequence has no element. Pulls at most one element."""
    for _ in pairs(data):
        return False
    return True


# =============================================================================
# Searching
# =============================================================================


def _contains(data: Iterable[Any], needle: Any) -> bool:
    return builtins.any(strict_equals(value, needle) for _, value in pairs(data))


def contains(*args: Any) -> Any:
    """
    Check for a strictly equal value, stopping at the first match.

    A needle can itself be a sequence, so the frame follows the call shape:
    ``contains(data, needle)`` is direct and ``contains(needle)`` is curried.

    Example:
        contains([1, 2], "1") -> False
        contains([1, "1", 2], "1") -> True
        contains("x")(["a", "x"]) -> True
    """
    if len(args) == 1:
        needle = args[0]

        def contains_curried(data: Iterable[Any]) -> bool:
            if not is_sequence(data):
                raise InvalidArgument("contains", f"expected a sequence, got {type(data).__name__}")
            return _contains(data, needle)

        return contains_curried
    if len(args) != 2:
        raise InvalidArgument("contains", f"expected (data, needle) or (needle), got {len(args)} arguments")

    data, needle = args
    if not is_sequence(data):
        raise InvalidArgument("contains", f"expected a sequence, got {type(data).__name__}")
    return _contains(data, needle)


@pipeable
def every(data: Iterable[Any], predicate: Callable[..., Any]) -> bool:
    """True when ``predicate(value, key)`` holds for all elements (and for none)."""
    test = callback("every", "predicate", predicate)
    return builtins.all(test(value, key) for key, value in pairs(data))


@pipeable
def some(data: Iterable[Any], predicate: Callable[..., Any]) -> bool:
    """True when ``predicate(value, key)`` holds for at least one element."""
    test = callback("some", "predicate", predicate)
    return builtins.any(test(value, key) for key, value in pairs(data))


@pipeable
def find(data: Iterable[Any], predicate: Callable[..., Any], default: Any = None) -> Any:
    """
    First value satisfying the predicate, or ``default``.

    Example:
        find([1, 3, 6, 8], lambda v: v % 2 == 0) -> 6
    """
    test = callback("find", "predicate", predicate)
    for key, value in pairs(data):
        if test(value, key):
            return value
    return default


@pipeable
def first(data: Iterable[Any], default: Any = None) -> Any:
    """First value, or ``default`` when empty."""
    for _, value in pairs(data):
        return value
    return default


@pipeable
def last(data: Iterable[Any], default: Any = None) -> Any:
    """Last value, or ``default`` when empty."""
    result = default
    for _, value in pairs(data):
        result = value
    return result


def _extreme(data: Iterable[Any], wanted: int) -> Any:
    best = _MISSING
    for _, value in pairs(data):
        if best is _MISSING or compare(value, best) == wanted:
            best = value
    return None if best is _MISSING else best


@pipeable
def min(data: Iterable[Any]) -> Any:
    """
    Smallest element under the default comparison, or None when empty.

    The element itself is returned, even when it was compared numerically.

    Example:
        min(["pear", "apple", "banana"]) -> "apple"
    """
    return _extreme(data, -1)


@pipeable
def max(data: Iterable[Any]) -> Any:
    """
    Largest element under the default comparison, or None when empty.

    Example:
        max([5, "10", 9]) -> "10"
    """
    return _extreme(data, 1)


# =============================================================================
# Reshaping
# =============================================================================


@pipeable(flexible=True)
def group_by(data: Iterable[Any], grouper: Callable[..., Any]) -> dict[Any, dict[Any, Any]]:
    """
    Bucket elements by ``grouper(value, key)``; buckets keep the source keys.

    Example:
        group_by({"k1": "apple", "k2": "avocado", "k3": "banana"}, lambda v: v[0])
            -> {"a": {"k1": "apple", "k2": "avocado"}, "b": {"k3": "banana"}}
    """
    classify = callback("group_by", "grouper", grouper)
    groups: dict[Any, dict[Any, Any]] = {}
    for key, value in pairs(data):
        group = _require_map_key("group_by", "grouper", classify(value, key))
        groups.setdefault(group, {})[key] = value
    return groups


@pipeable(flexible=True)
def key_by(data: Iterable[Any], keyer: Callable[..., Any]) -> dict[Any, Any]:
    """
    Re-key elements by ``keyer(value, key)``; on collisions the last one wins.

    Example:
        key_by([{"id": "a", "v": 1}, {"id": "a", "v": 3}], lambda r: r["id"])
            -> {"a": {"id": "a", "v": 3}}
    """
    select = callback("key_by", "keyer", keyer)
    result: dict[Any, Any] = {}
    for key, value in pairs(data):
        result[_require_map_key("key_by", "keyer", select(value, key))] = value
    return result


@pipeable(flexible=True)
def count_by(data: Iterable[Any], classifier: Callable[..., Any]) -> dict[Any, int]:
    """
    Tally elements per ``classifier(value, key)``.

    Example:
        count_by(["apple", "apricot", "banana"], lambda s: s[0]) -> {"a": 2, "b": 1}
    """
    classify = callback("count_by", "classifier", classifier)
    counts: dict[Any, int] = {}
    for key, value in pairs(data):
        bucket = _require_map_key("count_by", "classifier", classify(value, key))
        counts[bucket] = counts.get(bucket, 0) + 1
    return counts


@pipeable
def partition(data: Iterable[Any], predicate: Callable[..., Any]) -> tuple[dict[Any, Any], dict[Any, Any]]:
    """
    Split into ``(passing, failing)`` dicts, both keeping the source keys.

    Example:
        partition({"a": 1, "c": 2}, lambda v: v % 2 == 0) -> ({"c": 2}, {"a": 1})
    """
    test = callback("partition", "predicate", predicate)
    passing: dict[Any, Any] = {}
    failing: dict[Any, Any] = {}
    for key, value in pairs(data):
        (passing if test(value, key) else failing)[key] = value
    return passing, failing


@pipeable
def split_at(data: Iterable[Any], index: int) -> tuple[list[Any], list[Any]]:
    """
    Split the values into ``(before, from_index)``; keys are discarded and a
    negative index behaves like 0.

    Example:
        split_at([1, 2, 3, 4], 2) -> ([1, 2], [3, 4])
    """
    require_int("split_at", "index", index)
    left: list[Any] = []
    right: list[Any] = []
    for position, (_, value) in enumerate(pairs(data)):
        (left if position < index else right).append(value)
    return left, right


@pipeable
def split_when(data: Iterable[Any], predicate: Callable[..., Any]) -> tuple[list[Any], list[Any]]:
    """
    Split the values at the first element matching ``predicate(value, key)``;
    the matching element starts the second list.

    Example:
        split_when([1, 2, 3, 4], lambda v: v >= 3) -> ([1, 2], [3, 4])
    """
    test = callback("split_when", "predicate", predicate)
    before: list[Any] = []
    after: list[Any] = []
    matched = False
    for key, value in pairs(data):
        if not matched and test(value, key):
            matched = True
        (after if matched else before).append(value)
    return before, after


# =============================================================================
# Ordering
# =============================================================================


def _sorted_pairs(data: Iterable[Any], comparator: Callable[[Any, Any], int]) -> dict[Any, Any]:
    return dict(builtins.sorted(pairs(data), key=functools.cmp_to_key(comparator)))


@pipeable
def sort(data: Iterable[Any]) -> dict[Any, Any]:
    """
    Sort values ascending under the default comparison, keeping keys.

    Example:
        sort({"b": 2, "c": 3, "a": 1}) -> {"a": 1, "b": 2, "c": 3}
    """
    return _sorted_pairs(data, lambda left, right: compare(left[1], right[1]))


@pipeable
def sort_by(data: Iterable[Any], comparable: Callable[..., Any]) -> dict[Any, Any]:
    """
    Stable sort by ``comparable(value, key)``, keeping keys. The comparable is
    computed once per element and must be a map key type.

    Example:
        sort_by({"u3": 40, "u1": 30}, lambda age: age) -> {"u1": 30, "u3": 40}
    """
    select = callback("sort_by", "comparable", comparable)
    decorated = [
        (_require_map_key("sort_by", "comparable", select(value, key)), key, value)
        for key, value in pairs(data)
    ]
    decorated.sort(key=functools.cmp_to_key(lambda left, right: compare(left[0], right[0])))
    return {key: value for _, key, value in decorated}


@pipeable
def sort_with(data: Iterable[Any], *comparators: Callable[[Any, Any], int]) -> dict[Any, Any]:
    """
    Stable sort by a chain of comparators, keeping keys. The first comparator
    that returns non-zero decides; later ones only break ties.

    Example:
        sort_with(rows, ascend(lambda r: len(r["name"])), ascend(lambda r: r["name"]))
    """
    if not comparators:
        raise InvalidArgument("sort_with", "at least one comparator is required")
    chain = [callback("sort_with", "comparator", comparator) for comparator in comparators]

    def compare_chain(left: tuple[Any, Any], right: tuple[Any, Any]) -> int:
        for comparator in chain:
            result = comparator(left[1], right[1])
            if result:
                return result
        return 0

    return _sorted_pairs(data, compare_chain)
