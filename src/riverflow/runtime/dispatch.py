"""
RiverFlow Argument Resolution Protocol.

Every pipe operation can be called three ways:

    map([1, 2, 3], double)      # direct: sequence first, immediate result
    map(double)([1, 2, 3])      # curried: returns a unary continuation
    group_by(parity, [1, 2])    # flexible: selector first (opt-in operations)

The frame is chosen by looking at what the first argument *is*, never by how
many arguments were passed, because several operations have optional
trailing parameters.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Sequence
from enum import Enum, auto
from typing import Any

from riverflow.runtime.sequence import is_sequence
from riverflow.utils.errors import InvalidArgument
from riverflow.utils.log import get_logger

logger = get_logger("dispatch")


class CallFrame(Enum):
    """Resolved shape of a pipe invocation."""

    DIRECT = auto()
    CURRIED = auto()
    FLEXIBLE = auto()


def resolve_frame(operation: str, args: Sequence[Any], flexible: bool = False) -> CallFrame:
    """
    Decide how an invocation should be interpreted.

    Args:
        operation: Operation name used in error messages
        args: Positional arguments of the call
        flexible: Whether ``(selector, sequence)`` order is accepted

    Returns:
        The resolved CallFrame

    Raises:
        InvalidArgument: If the first argument is both iterable and callable
    """
    if not args:
        return CallFrame.CURRIED

    head = args[0]
    head_is_sequence = is_sequence(head)
    if head_is_sequence and callable(head):
        raise InvalidArgument(
            operation,
            f"ambiguous first argument of type {type(head).__name__}: "
            "it is both a sequence and a callable",
        )
    if head_is_sequence:
        return CallFrame.DIRECT
    if flexible and callable(head) and len(args) > 1 and is_sequence(args[1]):
        return CallFrame.FLEXIBLE
    return CallFrame.CURRIED


def pipeable(func: Callable[..., Any] | None = None, *, flexible: bool = False) -> Any:
    """
    Give a direct ``op(data, ...)`` implementation its curried (and optionally
    flexible) calling conventions.

    The decorated function's first parameter must be the data sequence.

    Example:
        @pipeable
        def take(data, count): ...

        take([1, 2, 3], 2)    # direct
        take(2)([1, 2, 3])    # curried
    """

    def decorate(impl: Callable[..., Any]) -> Callable[..., Any]:
        operation = impl.__name__
        signature = inspect.signature(impl)
        curried_signature = signature.replace(parameters=list(signature.parameters.values())[1:])

        def bind(sig: inspect.Signature, args: tuple, kwargs: dict, form: str) -> None:
            try:
                sig.bind(*args, **kwargs)
            except TypeError as exc:
                raise InvalidArgument(operation, f"arguments do not fit the {form} form: {exc}") from exc

        @functools.wraps(impl)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            frame = resolve_frame(operation, args, flexible=flexible)
            logger.debug("%s resolved as %s", operation, frame.name)

            if frame is CallFrame.FLEXIBLE:
                args = (args[1], args[0], *args[2:])
                frame = CallFrame.DIRECT

            if frame is CallFrame.DIRECT:
                bind(signature, args, kwargs, "direct")
                return impl(*args, **kwargs)

            bind(curried_signature, args, kwargs, "curried")

            def continuation(data: Any) -> Any:
                if not is_sequence(data):
                    raise InvalidArgument(
                        operation, f"expected a sequence, got {type(data).__name__}"
                    )
                return impl(data, *args, **kwargs)

            continuation.__name__ = f"{operation}_curried"
            continuation.__qualname__ = continuation.__name__
            return continuation

        wrapper.call_frames = (  # type: ignore[attr-defined]
            (CallFrame.DIRECT, CallFrame.CURRIED, CallFrame.FLEXIBLE)
            if flexible
            else (CallFrame.DIRECT, CallFrame.CURRIED)
        )
        return wrapper

    if func is None:
        return decorate
    return decorate(func)


# =============================================================================
# Callback Adaptation
# =============================================================================


def positional_arity(fn: Callable[..., Any]) -> int | None:
    """
    Count how many positional arguments a callable accepts.

    Returns None when it takes ``*args``. Callables without an introspectable
    signature (most builtins and classes) are treated as unary.
    """
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return 1

    count = 0
    for param in parameters:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def callback(operation: str, role: str, fn: Any, max_args: int = 2) -> Callable[..., Any]:
    """
    Validate a user callback and adapt it to be called with up to ``max_args``
    positional arguments, e.g. ``(value, key)`` for predicates.

    Raises:
        InvalidArgument: If ``fn`` is not callable
    """
    if not callable(fn):
        raise InvalidArgument(operation, f"{role} must be callable, got {type(fn).__name__}")

    arity = positional_arity(fn)
    if arity is None or arity >= max_args:
        return fn
    return lambda *args: fn(*args[:arity])


def optional_callback(
    operation: str, role: str, fn: Any, max_args: int = 2
) -> Callable[..., Any] | None:
    """Same as ``callback`` but lets ``None`` through."""
    if fn is None:
        return None
    return callback(operation, role, fn, max_args)


def require_int(operation: str, role: str, value: Any) -> int:
    """
    Validate an integer argument such as a count, size or depth.

    Raises:
        InvalidArgument: If ``value`` is not an int (bools are rejected)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(operation, f"{role} must be an int, got {type(value).__name__}")
    return value
