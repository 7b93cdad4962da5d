"""
Unit tests for RiverFlow eager aggregations.
"""

import pytest

from riverflow.pipes import (
    average,
    contains,
    count,
    count_by,
    every,
    find,
    first,
    group_by,
    is_empty,
    key_by,
    last,
    map,
    max,
    min,
    partition,
    reduce,
    some,
    sort,
    sort_by,
    sort_with,
    split_at,
    split_when,
    sum,
    take,
    to_array,
    to_list,
)
from riverflow.utils.errors import InvalidArgument
from riverflow.utils.functional import ascend, descend


class CallableList(list):
    """A list that is also callable."""

    def __call__(self, *args):
        return args


class TestConversion:
    """Tests for to_list and to_array."""

    def test_to_list_discards_keys(self):
        """Test collecting values only."""
        assert to_list({"a": 1, "b": 2}) == [1, 2]

    def test_to_array_keeps_keys(self):
        """Test collecting a keyed stream."""
        assert to_array(take({"x": 1, "y": 2}, 1)) == {"x": 1}

    def test_round_trip_with_distinct_keys(self):
        """Test that to_list(to_array(s)) equals to_list(s)."""
        source = {"a": 3, "b": 1, "c": 2}
        assert to_list(to_array(source)) == to_list(source)

    def test_to_array_last_key_wins(self, keyed_generator):
        """Test that a repeated key keeps the last value."""
        assert to_array(keyed_generator([("k", 1), ("k", 2)])) == {"k": 2}

    def test_to_list_curried(self):
        """Test the curried form."""
        assert to_list()(map([1], lambda v: v + 1)) == [2]


class TestFolding:
    """Tests for reduce, sum, average, count and is_empty."""

    def test_reduce(self):
        """Test a left fold with an initial value."""
        assert reduce([1, 2, 3, 4], lambda acc, v: acc + v, 0) == 10

    def test_reduce_receives_key(self):
        """Test three-argument reducers."""
        assert reduce({"a": 1, "b": 2}, lambda acc, v, k: acc + [k], []) == ["a", "b"]

    def test_reduce_curried(self):
        """Test the curried form."""
        total = reduce(lambda acc, v: acc + v, 0)
        assert total([5, 6]) == 11

    def test_reduce_empty(self):
        """Test that an empty fold returns the initial value."""
        assert reduce([], lambda acc, v: acc + v, "seed") == "seed"

    def test_sum_coercion(self):
        """Test the numeric coercion table."""
        assert sum([1, 2.5, "3", True, False, None, "x"]) == 7.5
        assert sum([]) == 0

    def test_sum_beyond_int_conversion_limit(self):
        """Test that very long integral strings still coerce instead of raising."""
        assert sum(["1" * 5000]) == float("inf")
        assert sum(["1" * 5000, 1]) == float("inf")

    def test_average_of_huge_integers(self):
        """Test that integer totals too large for a float still average."""
        assert average([10**400, 1]) == (10**400 + 1) // 2

    def test_average(self):
        """Test means, including ignored elements in the denominator."""
        assert average([]) == 0.0
        assert average([2, 4, 6]) == 4.0
        assert average([1, "3", True, None]) == 1.25

    def test_count(self, traced):
        """Test counting a one-shot source."""
        assert count(traced([1, 2, 3])) == 3
        assert count({}) == 0

    def test_is_empty_pulls_one(self, traced):
        """Test that is_empty stops after one element."""
        source = traced([1, 2, 3])
        assert not is_empty(source)
        assert source.pulled == 1
        assert is_empty([])


class TestSearching:
    """Tests for contains, every, some, find, first, last, min and max."""

    def test_contains_is_strict(self):
        """Test that contains never juggles types."""
        assert not contains([1, 2], "1")
        assert contains([1, "1", 2], "1")
        assert not contains([1], True)

    def test_contains_sequence_needle(self):
        """Test looking for a list inside a list of lists."""
        assert contains([[1, 2], [3]], [3])

    def test_contains_curried(self):
        """Test the curried form."""
        assert contains("x")(["a", "x"])
        assert not contains([9])([[1]])

    def test_contains_nan(self):
        """Test that NaN is found."""
        assert contains([float("nan")], float("nan"))

    def test_contains_short_circuits(self, traced):
        """Test that the search stops at the first match."""
        source = traced([1, 2, 3, 4])
        assert contains(source, 2)
        assert source.pulled == 2

    def test_contains_rejects_bad_calls(self):
        """Test argument validation."""
        with pytest.raises(InvalidArgument, match="expected a sequence"):
            contains(5, 1)
        with pytest.raises(InvalidArgument, match="3 arguments"):
            contains([1], 2, 3)

    def test_every_and_some(self):
        """Test universal and existential checks, including empty input."""
        assert every([2, 4], lambda v: v % 2 == 0)
        assert not every([2, 3], lambda v: v % 2 == 0)
        assert every([], lambda v: False)
        assert some([1, 2], lambda v: v > 1)
        assert not some([], lambda v: True)

    def test_find(self):
        """Test the first match and the explicit default."""
        assert find([1, 3, 6, 8], lambda v: v % 2 == 0) == 6
        assert find([1, 3], lambda v: v % 2 == 0, "none") == "none"
        assert find([1, 3], lambda v: v > 5) is None

    def test_find_with_key(self):
        """Test binary predicates."""
        assert find({"a": 1, "b": 2}, lambda v, k: k == "b") == 2

    def test_first_and_last(self):
        """Test the ends of a sequence with defaults."""
        assert first([3, 4]) == 3
        assert last([3, 4]) == 4
        assert first([], "d") == "d"
        assert last([]) is None

    def test_first_on_infinite(self, infinite):
        """Test that first only needs one element."""
        assert first(infinite(5)) == 5

    def test_min_max(self):
        """Test extremes under the default comparison."""
        assert min(["pear", "apple", "banana"]) == "apple"
        assert max([5, "10", 9]) == "10"
        assert min([3, 1, 2]) == 1
        assert min([]) is None
        assert max([]) is None


class TestReshaping:
    """Tests for group_by, key_by, count_by, partition and the splits."""

    def test_group_by_keeps_source_keys(self):
        """Test bucketing with original keys inside each bucket."""
        result = group_by({"k1": "apple", "k2": "avocado", "k3": "banana"}, lambda v: v[0])
        assert result == {"a": {"k1": "apple", "k2": "avocado"}, "b": {"k3": "banana"}}

    def test_group_by_curried(self):
        """Test the curried form."""
        by_parity = group_by(lambda v: "even" if v % 2 == 0 else "odd")
        assert by_parity([1, 2, 3]) == {"odd": {0: 1, 2: 3}, "even": {1: 2}}

    def test_group_by_rejects_unusable_keys(self):
        """Test that groupers must return map keys."""
        with pytest.raises(InvalidArgument, match="grouper must return"):
            group_by([1], lambda v: [v])

    def test_group_by_rejects_ambiguous_first_argument(self):
        """Test that an iterable callable cannot select a call frame."""
        with pytest.raises(InvalidArgument, match=r"\[group_by\] ambiguous first argument"):
            group_by(CallableList([1]), lambda v: v)

    def test_key_by_rejects_unusable_keys(self):
        """Test that keyers must return map keys."""
        with pytest.raises(InvalidArgument, match=r"\[key_by\] keyer must return"):
            key_by([{"id": 1}], lambda r: {"id": r["id"]})

    def test_count_by_rejects_unusable_keys(self):
        """Test that classifiers must return map keys."""
        with pytest.raises(InvalidArgument, match=r"\[count_by\] classifier must return"):
            count_by([1, 2], lambda v: (v,))

    def test_classifier_checked_while_iterating(self, traced):
        """Test that the bad element is found during the pass, not before it."""
        source = traced([1, 2, 3])
        with pytest.raises(InvalidArgument):
            count_by(source, lambda v: v if v < 2 else [v])
        assert source.pulled == 2

    def test_key_by_last_wins(self):
        """Test re-keying with collisions."""
        rows = [{"id": "a", "v": 1}, {"id": "b", "v": 2}, {"id": "a", "v": 3}]
        assert key_by(rows, lambda r: r["id"]) == {"a": {"id": "a", "v": 3}, "b": {"id": "b", "v": 2}}

    def test_count_by(self):
        """Test tallies per classifier."""
        assert count_by(["apple", "apricot", "banana"], lambda s: s[0]) == {"a": 2, "b": 1}

    def test_count_by_flexible(self):
        """Test classifier-first invocation."""
        assert count_by(lambda v: v > 1, [1, 2, 3]) == {False: 1, True: 2}

    def test_partition(self):
        """Test splitting into passing and failing dicts."""
        passing, failing = partition({"a": 1, "b": 3, "c": 2}, lambda v: v % 2 == 0)
        assert passing == {"c": 2}
        assert failing == {"a": 1, "b": 3}

    def test_split_at(self):
        """Test splitting by position."""
        assert split_at([1, 2, 3, 4], 2) == ([1, 2], [3, 4])
        assert split_at([1, 2], -1) == ([], [1, 2])
        assert split_at([1, 2], 5) == ([1, 2], [])

    def test_split_when(self):
        """Test splitting at the first match."""
        assert split_when([1, 2, 3, 4, 1], lambda v: v >= 3) == ([1, 2], [3, 4, 1])
        assert split_when([1, 2], lambda v: v > 5) == ([1, 2], [])


class TestSorting:
    """Tests for sort, sort_by and sort_with."""

    def test_sort_keeps_keys(self):
        """Test ascending sort with original keys."""
        result = sort({"b": 2, "c": 3, "a": 1})
        assert list(result.items()) == [("a", 1), ("b", 2), ("c", 3)]

    def test_sort_mixed_numeric_strings(self):
        """Test that numeric strings sort numerically."""
        assert list(sort([10, "9", 8.5]).values()) == [8.5, "9", 10]

    def test_sort_by_is_stable(self):
        """Test that ties keep input order."""
        rows = {"x": ("b", 1), "y": ("a", 1), "z": ("c", 0)}
        assert list(sort_by(rows, lambda r: r[1])) == ["z", "x", "y"]

    def test_sort_by_rejects_unusable_comparables(self):
        """Test that comparables must be map key types."""
        with pytest.raises(InvalidArgument, match=r"\[sort_by\] comparable must return"):
            sort_by([1, 2], lambda v: [v])

    def test_sort_with_single_comparator(self, people):
        """Test sorting records by one comparator."""
        result = sort_with(people, ascend(lambda p: p["age"]))
        assert list(result) == ["u1", "u2", "u3"]

    def test_sort_with_tie_breaker(self):
        """Test that later comparators break ties."""
        rows = {"k1": {"name": "Bob"}, "k2": {"name": "Al"}, "k3": {"name": "Ann"}, "k4": {"name": "Bo"}}
        result = sort_with(rows, ascend(lambda r: len(r["name"])), ascend(lambda r: r["name"]))
        assert list(result) == ["k2", "k4", "k3", "k1"]

    def test_sort_with_curried(self, people):
        """Test the curried form."""
        by_age = sort_with(ascend(lambda p: p["age"]))
        assert list(by_age(people)) == ["u1", "u2", "u3"]

    def test_sort_with_generator(self, keyed_generator):
        """Test that generator keys are preserved."""
        source = keyed_generator([("b", 2), ("c", 3), ("a", 1)])
        assert sort_with(source, ascend(lambda v: v)) == {"a": 1, "b": 2, "c": 3}

    def test_sort_with_descend(self):
        """Test reverse order."""
        assert list(sort_with({"a": 1, "b": 3, "c": 2}, descend(lambda v: v))) == ["b", "c", "a"]

    def test_sort_with_requires_comparator(self):
        """Test that a direct call without comparators fails."""
        with pytest.raises(InvalidArgument, match="at least one comparator"):
            sort_with({"b": 2, "a": 1})
