"""
RiverFlow Function Combinators.

Small helpers for building callbacks and pipelines out of plain functions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from riverflow.runtime.ordering import compare
from riverflow.utils.errors import InvalidArgument


T = TypeVar("T")


def identity(value: T) -> T:
    """Return the argument unchanged."""
    return value


def tap(*args: Any) -> Any:
    """
    Call ``callback(value)`` for its side effect and return ``value`` itself.

    ``tap(callback)`` returns the curried form, handy inside ``pipe``.

    Example:
        tap([1, 2], print) -> [1, 2]
        pipe(5, tap(seen.append), lambda x: x + 1) -> 6
    """
    if len(args) == 1:
        callback = args[0]
        if not callable(callback):
            raise InvalidArgument("tap", f"callback must be callable, got {type(callback).__name__}")
        return lambda value: tap(value, callback)
    if len(args) != 2:
        raise InvalidArgument("tap", f"expected (value, callback) or (callback), got {len(args)} arguments")

    value, callback = args
    if not callable(callback):
        raise InvalidArgument("tap", f"callback must be callable, got {type(callback).__name__}")
    callback(value)
    return value


def compose(*fns: Callable[..., Any]) -> Callable[..., Any]:
    """
    Right-to-left composition. The right-most function receives every
    argument; each one to its left receives the previous result.

    Example:
        compose(double, inc, add)(3, 4) -> 16
    """
    for fn in fns:
        if not callable(fn):
            raise InvalidArgument("compose", f"every function must be callable, got {type(fn).__name__}")
    if not fns:
        return identity

    *outer, innermost = fns

    def composed(*args: Any, **kwargs: Any) -> Any:
        result = innermost(*args, **kwargs)
        for fn in reversed(outer):
            result = fn(result)
        return result

    return composed


def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any:
    """
    Thread ``value`` through ``fns`` left to right.

    Example:
        pipe([1, 2, 3], map(lambda v: v * 2), to_list) -> [2, 4, 6]
    """
    for fn in fns:
        if not callable(fn):
            raise InvalidArgument("pipe", f"every function must be callable, got {type(fn).__name__}")
    for fn in fns:
        value = fn(value)
    return value


# =============================================================================
# Comparator Builders
# =============================================================================


def ascend(selector: Callable[[Any], Any]) -> Callable[[Any, Any], int]:
    """
    Build an ascending comparator from a selector, for ``sort_with``.

    Example:
        sort_with(people, ascend(lambda p: p["age"]))
    """
    if not callable(selector):
        raise InvalidArgument("ascend", f"selector must be callable, got {type(selector).__name__}")
    return lambda left, right: compare(selector(left), selector(right))


def descend(selector: Callable[[Any], Any]) -> Callable[[Any, Any], int]:
    """Descending counterpart of ``ascend``."""
    if not callable(selector):
        raise InvalidArgument("descend", f"selector must be callable, got {type(selector).__name__}")
    return lambda left, right: compare(selector(right), selector(left))
