"""
RiverFlow Sequence Abstraction.

Every operator sees its input as an ordered stream of (key, value) pairs:

- a ``Mapping`` contributes its items
- a ``Stream`` contributes the pairs it was built from
- any other iterable (except ``str``/``bytes``) contributes ``(index, value)``

Lazy operators return a ``Stream``. Iterating a stream yields values, while
``Stream.items()`` yields the underlying pairs so that keys survive a chain of
operators. Streams are one-shot, like the generators they wrap.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")

# Iterable in Python, but scalars for the purposes of a pipe.
SCALAR_ITERABLES = (str, bytes, bytearray)

_EXHAUSTED = object()


def is_sequence(value: Any) -> bool:
    """
    Check whether a value structurally satisfies "is a sequence".

    Example:
        is_sequence([1, 2]) -> True
        is_sequence("ab") -> False
    """
    return isinstance(value, Iterable) and not isinstance(value, SCALAR_ITERABLES)


class Stream(Iterator[V], Generic[K, V]):
    """
    A one-shot producer of (key, value) pairs.

    Wrapping a generator does not start it: nothing is pulled from the
    underlying source until the stream itself is iterated.

    Example:
        s = Stream((k, v * 2) for k, v in {"a": 1}.items())
        list(s.items()) -> [("a", 2)]
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[tuple[K, V]]) -> None:
        self._pairs = iter(pairs)

    def __iter__(self) -> Stream[K, V]:
        return self

    def __next__(self) -> V:
        return next(self._pairs)[1]

    def items(self) -> Iterator[tuple[K, V]]:
        """Return the iterator of (key, value) pairs backing this stream."""
        return self._pairs

    def __repr__(self) -> str:
        return f"Stream({self._pairs!r})"


def pairs(data: Iterable[Any]) -> Iterator[tuple[Any, Any]]:
    """
    Return a (key, value) iterator over any supported source.

    Example:
        list(pairs(["a", "b"])) -> [(0, "a"), (1, "b")]
        list(pairs({"x": 1})) -> [("x", 1)]
    """
    if isinstance(data, Stream):
        return data.items()
    if isinstance(data, Mapping):
        return iter(data.items())
    return enumerate(data)


class Cursor:
    """
    A uniform pull cursor over one source, used by multi-source combinators.

    ``rewind()`` restarts replayable containers (lists, dicts, tuples, ...)
    from their first element. One-shot iterators cannot be restarted, so a
    rewound iterator continues from wherever its owner left it.

    Example:
        c = Cursor([1, 2])
        c.rewind()
        while c.valid():
            print(c.key(), c.current())
            c.next()
    """

    __slots__ = ("_source", "_pairs", "_head")

    def __init__(self, source: Iterable[Any]) -> None:
        self._source = source
        self._pairs: Iterator[tuple[Any, Any]] | None = None
        self._head: Any = _EXHAUSTED

    @property
    def replayable(self) -> bool:
        return not isinstance(self._source, Iterator)

    def rewind(self) -> None:
        """Position the cursor on the first available element."""
        if self._pairs is not None and not self.replayable:
            return
        self._pairs = pairs(self._source)
        self._head = next(self._pairs, _EXHAUSTED)

    def next(self) -> None:
        """Advance to the next element."""
        if self._pairs is None:
            self.rewind()
            return
        self._head = next(self._pairs, _EXHAUSTED)

    def valid(self) -> bool:
        return self._pairs is not None and self._head is not _EXHAUSTED

    def key(self) -> Any:
        return self._head[0]

    def current(self) -> Any:
        return self._head[1]
