"""
RiverFlow Hashing Subsystem.

Canonicalizes values into string identifiers so that uniqueness and set
operations can compare heterogeneous values under strict equality:
``1``, ``1.0``, ``True`` and ``"1"`` are four different classes, two lists
are equal when their members are, and two objects are equal only when they
are the same instance.

Values that cannot be canonicalized (functions, handles, iterators, cycles)
hash to ``None`` and are skipped by callers instead of raising.
"""

from __future__ import annotations

import io
import math
import numbers
import types
from collections.abc import Iterator, Mapping
from enum import Enum, auto
from typing import Any

import numpy as np

from riverflow.utils.log import get_logger

logger = get_logger("hashing")

NULL_ID = "n"
TRUE_ID = "b:1"
FALSE_ID = "b:0"
NAN_ID = "f:nan"
POS_INF_ID = "f:+inf"
NEG_INF_ID = "f:-inf"


class ValueKind(Enum):
    """Closed set of value kinds understood by the hasher."""

    NULL = auto()
    BOOL = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    OBJECT_REF = auto()
    COMPOSITE = auto()
    UNSUPPORTED = auto()


_UNSUPPORTED_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
    types.ModuleType,
    types.CoroutineType,
    io.IOBase,
    Iterator,
)

_COMPOSITE_TYPES = (list, tuple, dict, set, frozenset, np.ndarray, Mapping)


def classify(value: Any) -> ValueKind:
    """
    Map a value onto its ValueKind.

    Example:
        classify(True) -> ValueKind.BOOL
        classify([1, 2]) -> ValueKind.COMPOSITE
        classify(len) -> ValueKind.UNSUPPORTED
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOL
    if isinstance(value, numbers.Integral):
        return ValueKind.INT
    if isinstance(value, numbers.Real):
        return ValueKind.FLOAT
    if isinstance(value, (str, bytes, bytearray)):
        return ValueKind.STRING
    if isinstance(value, _COMPOSITE_TYPES):
        return ValueKind.COMPOSITE
    if isinstance(value, _UNSUPPORTED_TYPES) or callable(value):
        return ValueKind.UNSUPPORTED
    return ValueKind.OBJECT_REF


def _float_id(value: float) -> str:
    if math.isnan(value):
        return NAN_ID
    if math.isinf(value):
        return POS_INF_ID if value > 0 else NEG_INF_ID
    if value == 0.0:
        value = 0.0  # -0.0 is strictly equal to 0.0
    return f"f:{float(value)!r}"


class Hasher:
    """
    Produces canonical identifiers for one operator invocation.

    Identity tokens for object references are ``id()`` values. The hasher
    keeps every tokenized object alive, so no token can be recycled by the
    garbage collector while the invocation that owns the hasher runs.
    """

    __slots__ = ("_pinned",)

    def __init__(self) -> None:
        self._pinned: dict[int, Any] = {}

    def hash(self, value: Any) -> str | None:
        """Return the canonical identifier of ``value``, or None if unhashable."""
        identifier = self._canonical(value, set())
        if identifier is None:
            logger.debug("skipping unhashable value of type %s", type(value).__name__)
        return identifier

    def _canonical(self, value: Any, active: set[int]) -> str | None:
        kind = classify(value)

        if kind is ValueKind.NULL:
            return NULL_ID
        if kind is ValueKind.BOOL:
            return TRUE_ID if value else FALSE_ID
        if kind is ValueKind.INT:
            return f"i:{int(value)}"
        if kind is ValueKind.FLOAT:
            return _float_id(float(value))
        if kind is ValueKind.STRING:
            if isinstance(value, str):
                return f"s:{len(value)}:{value}"
            return f"y:{len(value)}:{bytes(value).hex()}"
        if kind is ValueKind.OBJECT_REF:
            token = id(value)
            self._pinned[token] = value
            return f"o:{token}"
        if kind is ValueKind.COMPOSITE:
            return self._composite(value, active)
        return None

    def _composite(self, value: Any, active: set[int]) -> str | None:
        marker = id(value)
        if marker in active:
            return None  # self-referencing structure
        active.add(marker)
        try:
            if isinstance(value, np.ndarray):
                return self._ndarray(value, active)
            if isinstance(value, Mapping):
                parts = []
                for key, item in value.items():
                    key_id = self._canonical(key, active)
                    item_id = self._canonical(item, active)
                    if key_id is None or item_id is None:
                        return None
                    parts.append(f"{key_id}=>{item_id}")
                tag = "d" if isinstance(value, dict) else f"m<{type(value).__qualname__}>"
                return f"{tag}{{{len(parts)}|{';'.join(parts)}}}"

            members = []
            for item in value:
                item_id = self._canonical(item, active)
                if item_id is None:
                    return None
                members.append(item_id)
            if isinstance(value, (set, frozenset)):
                members.sort()
                tag = "S" if isinstance(value, set) else "F"
            else:
                tag = "l" if isinstance(value, list) else "t"
            return f"{tag}[{len(members)}|{';'.join(members)}]"
        finally:
            active.discard(marker)

    def _ndarray(self, value: np.ndarray, active: set[int]) -> str | None:
        if value.dtype == object:
            members = []
            for item in value.ravel().tolist():
                item_id = self._canonical(item, active)
                if item_id is None:
                    return None
                members.append(item_id)
            body = ";".join(members)
        elif value.dtype.kind == "f":
            # same signed-zero and NaN folding as scalar floats
            body = ";".join(_float_id(item) for item in value.ravel().tolist())
        else:
            body = value.tobytes().hex()
        return f"nd<{value.dtype.str}|{value.shape}>[{body}]"


def canonical_hash(value: Any) -> str | None:
    """
    Canonical identifier of a single value, with a throwaway hasher.

    Example:
        canonical_hash(1) -> "i:1"
        canonical_hash(float("nan")) -> "f:nan"
        canonical_hash(lambda: 1) -> None
    """
    return Hasher().hash(value)


def strict_equals(left: Any, right: Any, hasher: Hasher | None = None) -> bool:
    """
    Strict equality: same kind and same canonical identifier.

    Unhashable values are only equal to themselves.

    Example:
        strict_equals(1, 1) -> True
        strict_equals(1, True) -> False
        strict_equals("1", 1) -> False
    """
    if left is right:
        return True
    hasher = hasher or Hasher()
    left_id = hasher.hash(left)
    if left_id is None:
        return False
    return left_id == hasher.hash(right)
