"""
RiverFlow default ordering and numeric coercion.

``compare`` gives every pair of values a deterministic order so that sort,
min and max work on mixed input, comparing numeric strings as numbers.
``to_number`` is the coercion table shared by sum and average.
"""

from __future__ import annotations

import numbers
import re
from typing import Any

import numpy as np

_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGRAL_STRING = re.compile(r"^\s*[+-]?\d+\s*$")

# Rank used when two values have no natural order between them.
_KIND_RANK = {
    "none": 0,
    "bool": 1,
    "number": 2,
    "string": 3,
    "bytes": 4,
    "composite": 5,
    "other": 6,
}


def is_numeric_string(value: Any) -> bool:
    """
    Check whether a string looks like a number.

    Example:
        is_numeric_string("4.0") -> True
        is_numeric_string(" 12 ") -> True
        is_numeric_string("0x1A") -> False
    """
    return isinstance(value, str) and _NUMERIC_STRING.match(value) is not None


def parse_numeric_string(value: str) -> int | float:
    """
    Parse a numeric string into an int when it is written as one, else a float.

    Integral strings past the interpreter's int conversion limit parse as a float.
    """
    if _INTEGRAL_STRING.match(value):
        try:
            return int(value)
        except ValueError:
            pass
    return float(value)


def to_number(value: Any) -> int | float:
    """
    Coerce a value for summation.

    True counts as 1, False and None as 0, real numbers are used as-is,
    numeric strings are parsed and everything else counts as 0.

    Example:
        to_number("3") -> 3
        to_number(True) -> 1
        to_number("x") -> 0
    """
    if value is None or value is False:
        return 0
    if value is True:
        return 1
    if isinstance(value, np.bool_):
        return int(value)
    if isinstance(value, numbers.Real):
        return value
    if is_numeric_string(value):
        return parse_numeric_string(value)
    return 0


def _kind(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, (bool, np.bool_)):
        return "bool"
    if isinstance(value, numbers.Real):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return "composite"
    return "other"


def _numeric_like(value: Any, kind: str) -> bool:
    return kind in ("bool", "number") or (kind == "string" and is_numeric_string(value))


def _sign(left: Any, right: Any) -> int:
    return int(left > right) - int(left < right)


def compare(left: Any, right: Any) -> int:
    """
    Three-way comparison used as the default total order.

    Returns -1, 0 or 1.

    Example:
        compare(2, "10") -> -1     # numeric string compared as a number
        compare("pear", "apple") -> 1
        compare(None, 0) -> -1
    """
    left_kind = _kind(left)
    right_kind = _kind(right)

    if _numeric_like(left, left_kind) and _numeric_like(right, right_kind):
        if left_kind == "string" or right_kind == "string":
            return _sign(to_number(left), to_number(right))
        return _sign(left, right)

    if left_kind != right_kind:
        return _sign(_KIND_RANK[left_kind], _KIND_RANK[right_kind])

    if left_kind == "none":
        return 0

    try:
        return _sign(left, right)
    except (TypeError, ValueError):
        return _sign(type(left).__qualname__, type(right).__qualname__)
