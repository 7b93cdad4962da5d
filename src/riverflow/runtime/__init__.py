"""
RiverFlow Runtime Package.

The machinery shared by every operator: the keyed sequence model, call-frame
dispatch, canonical hashing and the default ordering.
"""

from riverflow.runtime.dispatch import CallFrame, pipeable, resolve_frame
from riverflow.runtime.hashing import Hasher, ValueKind, canonical_hash, classify, strict_equals
from riverflow.runtime.ordering import compare, to_number
from riverflow.runtime.sequence import Cursor, Stream, is_sequence, pairs

__all__ = [
    "CallFrame",
    "pipeable",
    "resolve_frame",
    "Hasher",
    "ValueKind",
    "canonical_hash",
    "classify",
    "strict_equals",
    "compare",
    "to_number",
    "Cursor",
    "Stream",
    "is_sequence",
    "pairs",
]
