"""
Unit tests for the RiverFlow sequence model.

Covers what counts as a sequence, the (key, value) view every operator
relies on, Streams and the rewindable Cursor used by combinators.
"""

from riverflow.runtime.sequence import Cursor, Stream, is_sequence, pairs


class TestIsSequence:
    """Tests for the structural sequence check."""

    def test_containers_are_sequences(self):
        """Test lists, tuples, dicts and sets."""
        assert is_sequence([1])
        assert is_sequence((1,))
        assert is_sequence({"a": 1})
        assert is_sequence({1})

    def test_generators_are_sequences(self):
        """Test that one-shot iterators qualify."""
        assert is_sequence(x for x in [1])
        assert is_sequence(iter([1]))

    def test_strings_are_scalars(self):
        """Test that text and bytes are never treated as sequences."""
        assert not is_sequence("abc")
        assert not is_sequence(b"abc")
        assert not is_sequence(bytearray(b"abc"))

    def test_scalars(self):
        """Test numbers, None and callables."""
        assert not is_sequence(1)
        assert not is_sequence(None)
        assert not is_sequence(len)


class TestPairs:
    """Tests for the uniform (key, value) view."""

    def test_list_is_enumerated(self):
        """Test that lists contribute their indices."""
        assert list(pairs(["a", "b"])) == [(0, "a"), (1, "b")]

    def test_mapping_keeps_keys(self):
        """Test that mappings contribute their items in order."""
        assert list(pairs({"x": 1, 5: 2})) == [("x", 1), (5, 2)]

    def test_stream_keeps_keys(self):
        """Test that streams contribute the pairs they were built from."""
        stream = Stream([("k", 1), ("j", 2)])
        assert list(pairs(stream)) == [("k", 1), ("j", 2)]

    def test_generator_is_enumerated(self):
        """Test that plain generators get sequential keys."""
        assert list(pairs(v * 2 for v in [1, 2])) == [(0, 2), (1, 4)]


class TestStream:
    """Tests for the one-shot keyed Stream."""

    def test_iterating_yields_values(self):
        """Test that plain iteration drops the keys."""
        assert list(Stream([("a", 1), ("b", 2)])) == [1, 2]

    def test_items_yields_pairs(self):
        """Test the keyed view."""
        assert list(Stream([("a", 1)]).items()) == [("a", 1)]

    def test_is_one_shot(self):
        """Test that a consumed stream stays empty."""
        stream = Stream([("a", 1)])
        assert list(stream) == [1]
        assert list(stream) == []

    def test_does_not_start_source(self, traced):
        """Test that wrapping a generator pulls nothing."""
        source = traced([1, 2])
        Stream(enumerate(source))
        assert source.pulled == 0


class TestCursor:
    """Tests for the pull cursor used by multi-source combinators."""

    def test_walks_keys_and_values(self):
        """Test valid/key/current/next over a mapping."""
        cursor = Cursor({"a": 1, "b": 2})
        cursor.rewind()
        seen = []
        while cursor.valid():
            seen.append((cursor.key(), cursor.current()))
            cursor.next()
        assert seen == [("a", 1), ("b", 2)]

    def test_invalid_before_rewind(self):
        """Test that a fresh cursor is not positioned."""
        assert not Cursor([1]).valid()

    def test_next_on_fresh_cursor_rewinds(self):
        """Test that advancing an unpositioned cursor positions it on the first element."""
        cursor = Cursor([1, 2])
        cursor.next()
        assert cursor.current() == 1

    def test_rewind_restarts_containers(self):
        """Test that replayable sources restart from the beginning."""
        cursor = Cursor([1, 2, 3])
        cursor.rewind()
        cursor.next()
        cursor.rewind()
        assert cursor.current() == 1
        assert cursor.replayable

    def test_rewind_does_not_restart_iterators(self):
        """Test that one-shot sources continue where they were."""
        cursor = Cursor(iter([1, 2, 3]))
        cursor.rewind()
        cursor.next()
        cursor.rewind()
        assert cursor.current() == 2
        assert not cursor.replayable

    def test_empty_source(self):
        """Test that an empty source is never valid."""
        cursor = Cursor([])
        cursor.rewind()
        assert not cursor.valid()
