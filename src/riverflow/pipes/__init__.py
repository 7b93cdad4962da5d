"""
RiverFlow Pipes Package.

Every sequence operator, importable from one place:

    from riverflow.pipes import filter, map, take, to_list
"""

from riverflow.pipes.aggregate import (
    MAP_KEY_TYPES,
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
    to_array,
    to_list,
)
from riverflow.pipes.combine import (
    append,
    concat,
    concat_with,
    interleave,
    interleave_with,
    prepend,
    transpose,
    unzip,
    zip,
    zip_longest,
    zip_longest_with,
    zip_with,
)
from riverflow.pipes.generators import range, repeat, times
from riverflow.pipes.sets import (
    difference,
    intersection,
    symmetric_difference,
    union,
    uniq,
    uniq_by,
)
from riverflow.pipes.transform import (
    distinct_until_changed,
    drop,
    drop_while,
    filter,
    flat_map,
    flatten,
    init,
    intersperse,
    keys,
    map,
    partition_by,
    pluck,
    reject,
    scan,
    scan_right,
    tail,
    take,
    take_while,
    values,
)
from riverflow.pipes.windows import aperture, chunk, drop_last, pairwise, take_last

__all__ = [
    # Lazy transforms
    "filter",
    "reject",
    "map",
    "pluck",
    "keys",
    "values",
    "take",
    "drop",
    "take_while",
    "drop_while",
    "tail",
    "init",
    "flatten",
    "flat_map",
    "intersperse",
    "distinct_until_changed",
    "partition_by",
    "scan",
    "scan_right",
    # Aggregations
    "to_list",
    "to_array",
    "reduce",
    "sum",
    "average",
    "count",
    "is_empty",
    "contains",
    "every",
    "some",
    "find",
    "first",
    "last",
    "min",
    "max",
    "group_by",
    "key_by",
    "count_by",
    "partition",
    "split_at",
    "split_when",
    "sort",
    "sort_by",
    "sort_with",
    "MAP_KEY_TYPES",
    # Uniqueness and set algebra
    "uniq",
    "uniq_by",
    "union",
    "intersection",
    "difference",
    "symmetric_difference",
    # Windows
    "aperture",
    "pairwise",
    "chunk",
    "drop_last",
    "take_last",
    # Combinators
    "zip",
    "zip_with",
    "zip_longest",
    "zip_longest_with",
    "interleave",
    "interleave_with",
    "concat",
    "concat_with",
    "append",
    "prepend",
    "transpose",
    "unzip",
    # Sources
    "range",
    "repeat",
    "times",
]
