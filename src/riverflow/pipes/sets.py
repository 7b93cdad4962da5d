"""
RiverFlow Uniqueness and Set Operations.

Elements are compared by their canonical hash (see ``riverflow.runtime.hashing``),
so equality is strict: ``1`` and ``"1"`` are different elements, and objects
match only when they are the same instance. Elements that cannot be hashed
are skipped rather than reported.

Every operator here is lazy and keeps the key under which an element first
appeared. For binary operations the right-hand side is read into a hash set
on the first pull.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

from riverflow.runtime.dispatch import callback, pipeable
from riverflow.runtime.hashing import Hasher
from riverflow.runtime.sequence import Stream, is_sequence, pairs
from riverflow.utils.errors import InvalidArgument

_MISSING = object()


def _hashed(data: Iterable[Any], hasher: Hasher) -> Iterator[tuple[Any, Any, str]]:
    """Yield (key, value, identifier) for every hashable element."""
    for key, value in pairs(data):
        identifier = hasher.hash(value)
        if identifier is not None:
            yield key, value, identifier


def _hash_set(data: Iterable[Any], hasher: Hasher) -> set[str]:
    return {identifier for _, _, identifier in _hashed(data, hasher)}


def _binary(operation: str, build: Callable[[Iterable[Any], Iterable[Any]], Stream]) -> Callable[..., Any]:
    """
    Give a set operation its two calling conventions.

    ``op(left, right)`` runs directly, ``op(right)`` returns ``lambda left: ...``.
    Both arguments are sequences, so the frame cannot be told apart by shape.
    """

    def check(value: Any, role: str) -> None:
        if not is_sequence(value):
            raise InvalidArgument(operation, f"{role} must be a sequence, got {type(value).__name__}")
        if callable(value):
            raise InvalidArgument(operation, f"ambiguous {role} of type {type(value).__name__}")

    def dispatcher(left: Any, right: Any = _MISSING) -> Any:
        if right is _MISSING:
            check(left, "right-hand side")
            other = left

            def apply(data: Iterable[Any]) -> Stream:
                check(data, "left-hand side")
                return build(data, other)

            apply.__name__ = f"{operation}_curried"
            return apply

        check(left, "left-hand side")
        check(right, "right-hand side")
        return build(left, right)

    dispatcher.__name__ = operation
    dispatcher.__qualname__ = operation
    dispatcher.__doc__ = build.__doc__
    return dispatcher


# =============================================================================
# Uniqueness
# =============================================================================


@pipeable
def uniq(data: Iterable[Any]) -> Stream:
    """
    Keep the first occurrence of every strictly-equal value.

    Example:
        to_array(uniq([1, 2, "2", 1])) -> {0: 1, 1: 2, 2: "2"}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        seen: set[str] = set()
        for key, value, identifier in _hashed(data, hasher):
            if identifier not in seen:
                seen.add(identifier)
                yield key, value

    return Stream(produce())


@pipeable(flexible=True)
def uniq_by(data: Iterable[Any], identifier: Callable[..., Any]) -> Stream:
    """
    Keep the first element for every distinct ``identifier(value, key)``.
    Elements whose identifier cannot be hashed are skipped.

    Example:
        to_list(uniq_by([{"id": 1}, {"id": 1}, {"id": 2}], lambda r: r["id"]))
            -> [{"id": 1}, {"id": 2}]
    """
    identify = callback("uniq_by", "identifier", identifier)

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        seen: set[str] = set()
        for key, value in pairs(data):
            marker = hasher.hash(identify(value, key))
            if marker is not None and marker not in seen:
                seen.add(marker)
                yield key, value

    return Stream(produce())


# =============================================================================
# Set Algebra
# =============================================================================


def _union(left: Iterable[Any], right: Iterable[Any]) -> Stream:
    """
    Unique elements of ``left`` followed by the new ones from ``right``, each
    under the key of its first occurrence.

    Example:
        to_array(union({"a": 1, "b": 2}, {"b1": 2, "c": 3})) -> {"a": 1, "b": 2, "c": 3}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        seen: set[str] = set()
        for source in (left, right):
            for key, value, identifier in _hashed(source, hasher):
                if identifier not in seen:
                    seen.add(identifier)
                    yield key, value

    return Stream(produce())


def _intersection(left: Iterable[Any], right: Iterable[Any]) -> Stream:
    """
    Elements of ``left`` that also occur in ``right``, first occurrence only,
    under ``left``'s keys.

    Example:
        to_array(intersection([1, 2, "2"], [2, 3])) -> {1: 2}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        wanted = _hash_set(right, hasher)
        emitted: set[str] = set()
        for key, value, identifier in _hashed(left, hasher):
            if identifier in wanted and identifier not in emitted:
                emitted.add(identifier)
                yield key, value

    return Stream(produce())


def _difference(left: Iterable[Any], right: Iterable[Any]) -> Stream:
    """
    Elements of ``left`` that do not occur in ``right``. Duplicates within
    ``left`` collapse to their first occurrence.

    Example:
        to_array(difference([1, 2, 3, 3], [2])) -> {0: 1, 2: 3}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        excluded = _hash_set(right, hasher)
        for key, value, identifier in _hashed(left, hasher):
            if identifier not in excluded:
                excluded.add(identifier)
                yield key, value

    return Stream(produce())


def _symmetric_difference(left: Iterable[Any], right: Iterable[Any]) -> Stream:
    """
    Elements found in exactly one side: ``left``-only elements in ``left``'s
    order, then ``right``-only elements in ``right``'s order, each under its
    own key.

    Example:
        to_array(symmetric_difference({0: 1, 1: 2}, {"a": 2, "b": 5})) -> {0: 1, "b": 5}
    """

    def produce() -> Iterator[tuple[Any, Any]]:
        hasher = Hasher()
        right_items = list(_hashed(right, hasher))
        right_ids = {identifier for _, _, identifier in right_items}

        left_ids: set[str] = set()
        for key, value, identifier in _hashed(left, hasher):
            if identifier in left_ids:
                continue
            left_ids.add(identifier)
            if identifier not in right_ids:
                yield key, value

        emitted: set[str] = set()
        for key, value, identifier in right_items:
            if identifier not in left_ids and identifier not in emitted:
                emitted.add(identifier)
                yield key, value

    return Stream(produce())


union = _binary("union", _union)
intersection = _binary("intersection", _intersection)
difference = _binary("difference", _difference)
symmetric_difference = _binary("symmetric_difference", _symmetric_difference)
