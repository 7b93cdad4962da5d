"""
Pytest configuration and shared fixtures for RiverFlow tests.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class TracedSource:
    """
    A one-shot generator that records how far it has been pulled.

    ``pulled`` counts the elements handed out; ``exhausted`` turns True once
    a consumer asked for an element past the end.
    """

    items: list[tuple[Any, Any]]
    pulled: int = 0
    exhausted: bool = False
    _iterator: Iterator[tuple[Any, Any]] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._iterator = self._produce()

    def _produce(self) -> Iterator[Any]:
        for _, value in self.items:
            self.pulled += 1
            yield value
        self.exhausted = True

    def __iter__(self) -> Iterator[Any]:
        return self._iterator

    def __next__(self) -> Any:
        return next(self._iterator)


@pytest.fixture
def traced():
    """Factory fixture for traced one-shot sources."""

    def _create(values: Iterable[Any]) -> TracedSource:
        return TracedSource(items=list(enumerate(values)))

    return _create


@pytest.fixture
def keyed_generator():
    """Factory fixture for generators yielding explicit (key, value) pairs as a Stream."""
    from riverflow.runtime.sequence import Stream

    def _create(items: Iterable[tuple[Any, Any]]) -> Stream:
        return Stream(iter(list(items)))

    return _create


@pytest.fixture
def infinite():
    """Factory fixture for infinite counting generators."""

    def _create(start: int = 0) -> Iterator[int]:
        value = start
        while True:
            yield value
            value += 1

    return _create


@pytest.fixture
def people():
    """Keyed records used by sorting and grouping tests."""
    return {
        "u3": {"name": "Cara", "age": 40},
        "u1": {"name": "Alice", "age": 30},
        "u2": {"name": "Bob", "age": 35},
    }
