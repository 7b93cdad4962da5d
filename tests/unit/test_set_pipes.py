"""
Unit tests for RiverFlow uniqueness and set operations.
"""

import pytest

from riverflow.pipes import (
    difference,
    intersection,
    symmetric_difference,
    take,
    to_array,
    to_list,
    union,
    uniq,
    uniq_by,
)
from riverflow.runtime.hashing import canonical_hash
from riverflow.utils.errors import InvalidArgument


class CallableList(list):
    """A list that is also callable."""

    def __call__(self, *args):
        return args


class Token:
    def __init__(self, name):
        self.name = name


class TestUniq:
    """Tests for uniq and uniq_by."""

    def test_first_occurrence_keeps_key(self):
        """Test that duplicates are dropped and first keys survive."""
        assert to_array(uniq([1, 2, "2", 1])) == {0: 1, 1: 2, 2: "2"}

    def test_idempotent(self):
        """Test that uniq(uniq(s)) equals uniq(s)."""
        source = {"a": 1, "b": [1], "c": 1, "d": [1], "e": 1.0}
        assert to_array(uniq(uniq(source))) == to_array(uniq(source))

    def test_structures_compare_by_value(self):
        """Test that equal lists and dicts collapse."""
        assert to_list(uniq([[1, 2], [1, 2], {"a": 1}, {"a": 1}])) == [[1, 2], {"a": 1}]

    def test_objects_compare_by_identity(self):
        """Test that distinct instances with equal state are both kept."""
        first, second = Token("a"), Token("a")
        assert to_list(uniq([first, first, second])) == [first, second]

    def test_unhashable_values_are_skipped(self):
        """Test that callables are excluded instead of raising."""
        assert to_array(uniq([len, 1, print, 1])) == {1: 1}

    def test_lazy_on_infinite_source(self, infinite):
        """Test that uniq can be bounded downstream."""
        assert to_list(take(uniq(infinite()), 3)) == [0, 1, 2]

    def test_uniq_by(self):
        """Test uniqueness by a projection."""
        rows = [{"id": 1, "v": "a"}, {"id": 1, "v": "b"}, {"id": 2, "v": "c"}]
        assert [r["v"] for r in to_list(uniq_by(rows, lambda r: r["id"]))] == ["a", "c"]

    def test_uniq_by_flexible_and_curried(self):
        """Test identifier-first and curried invocation."""
        assert to_list(uniq_by(len, ["a", "b", "cc"])) == ["a", "cc"]
        assert to_list(uniq_by(len)(["a", "b", "cc"])) == ["a", "cc"]

    def test_uniq_by_skips_unhashable_identifiers(self):
        """Test that elements whose identifier cannot be hashed are dropped."""
        assert to_list(uniq_by([1, 2], lambda v: (lambda: v) if v == 1 else v)) == [2]


class TestSetAlgebra:
    """Tests for union, intersection, difference and symmetric_difference."""

    def test_union(self):
        """Test that new right-hand elements follow under their own keys."""
        result = to_array(union({"a": 1, "b": 2}, {"b1": 2, "c": 3}))
        assert result == {"a": 1, "b": 2, "c": 3}

    def test_union_curried(self):
        """Test op(right)(left)."""
        assert to_list(union([3, 4])([1, 3])) == [1, 3, 4]

    def test_intersection(self):
        """Test strict membership in the right-hand side."""
        assert to_array(intersection([1, 2, "2"], [2, 3])) == {1: 2}

    def test_intersection_deduplicates(self):
        """Test that repeated left elements are emitted once."""
        assert to_list(intersection([2, 2, 3], [2])) == [2]

    def test_difference(self):
        """Test left elements missing from the right."""
        assert to_array(difference([1, 2, 3, 3], [2])) == {0: 1, 2: 3}

    def test_difference_property(self):
        """Test that every emitted element is in A and not in B."""
        left = [1, "1", 2.0, [1], None, 2]
        right = [2, [1]]
        emitted = to_list(difference(left, right))
        right_ids = {canonical_hash(v) for v in right}
        assert all(canonical_hash(v) not in right_ids for v in emitted)
        assert all(v in left for v in emitted)
        assert emitted == [1, "1", 2.0, None]

    def test_symmetric_difference(self):
        """Test elements found on exactly one side, with their own keys."""
        left = {0: 1, 1: 2, 2: "2", 3: 3, "k": 4}
        right = {"a": 2, "b": 5, "c": "2", "d": 6, "e": 7}
        assert to_array(symmetric_difference(left, right)) == {0: 1, 3: 3, "k": 4, "b": 5, "d": 6, "e": 7}

    def test_symmetric_difference_curried(self):
        """Test op(right)(left)."""
        assert to_list(symmetric_difference([2, 3])([1, 2])) == [1, 3]

    def test_right_side_is_buffered_on_first_pull(self, traced):
        """Test that building the operation reads nothing."""
        right = traced([1, 2])
        stream = difference([1, 2, 3], right)
        assert right.pulled == 0
        assert next(stream) == 3
        assert right.pulled == 2

    def test_unhashable_excluded(self):
        """Test that callables never appear in results."""
        assert to_list(union([len], [1])) == [1]

    def test_rejects_non_sequences(self):
        """Test validation of both operands."""
        with pytest.raises(InvalidArgument, match=r"\[union\] right-hand side must be a sequence"):
            union([1], 5)
        with pytest.raises(InvalidArgument, match="left-hand side must be a sequence"):
            difference([1])("abc")

    def test_rejects_ambiguous_operands(self):
        """Test that an iterable callable is refused on either side."""
        with pytest.raises(InvalidArgument, match=r"\[union\] ambiguous left-hand side"):
            union(CallableList([1]), [2])
        with pytest.raises(InvalidArgument, match=r"\[intersection\] ambiguous right-hand side"):
            intersection(CallableList([1]))

    def test_uniq_rejects_ambiguous_data(self):
        """Test the ambiguous-frame error through a unary operator."""
        with pytest.raises(InvalidArgument, match=r"\[uniq\] ambiguous first argument"):
            uniq(CallableList([1, 1]))
