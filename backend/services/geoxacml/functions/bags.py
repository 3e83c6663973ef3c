"""
Bag and set functions over geometries.

Membership uses exact coordinate equality (``GeometryValue.__eq__``), never
the topological equals predicate. Bags are plain lists; set results keep the
order of first occurrence.
"""

from typing import List, Sequence

from ..core.errors import IndeterminateEvaluationError
from ..value import GeometryValue
from ._arguments import FUNCTION_PREFIX_1_0, check_bag, check_geometry

ONE_AND_ONLY_ID = FUNCTION_PREFIX_1_0 + "geometry-one-and-only"
BAG_SIZE_ID = FUNCTION_PREFIX_1_0 + "geometry-bag-size"
IS_IN_ID = FUNCTION_PREFIX_1_0 + "geometry-is-in"
BAG_ID = FUNCTION_PREFIX_1_0 + "geometry-bag"
AT_LEAST_ONE_MEMBER_OF_ID = FUNCTION_PREFIX_1_0 + "geometry-at-least-one-member-of"
INTERSECTION_ID = FUNCTION_PREFIX_1_0 + "geometry-intersection"
UNION_ID = FUNCTION_PREFIX_1_0 + "geometry-union"
SUBSET_ID = FUNCTION_PREFIX_1_0 + "geometry-subset"
SET_EQUALS_ID = FUNCTION_PREFIX_1_0 + "geometry-set-equals"


def _distinct(values: Sequence[GeometryValue]) -> List[GeometryValue]:
    result: List[GeometryValue] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


def one_and_only(bag: Sequence[GeometryValue]) -> GeometryValue:
    values = check_bag(bag, ONE_AND_ONLY_ID)
    if len(values) != 1:
        raise IndeterminateEvaluationError(
            f"Function {ONE_AND_ONLY_ID}: bag must contain exactly one value, got {len(values)}"
        )
    return values[0]


def bag_size(bag: Sequence[GeometryValue]) -> int:
    return len(check_bag(bag, BAG_SIZE_ID))


def is_in(value: GeometryValue, bag: Sequence[GeometryValue]) -> bool:
    check_geometry(value, IS_IN_ID)
    return value in check_bag(bag, IS_IN_ID)


def bag(*values: GeometryValue) -> List[GeometryValue]:
    for value in values:
        check_geometry(value, BAG_ID, position="bag")
    return list(values)


def at_least_one_member_of(bag1: Sequence[GeometryValue], bag2: Sequence[GeometryValue]) -> bool:
    values2 = check_bag(bag2, AT_LEAST_ONE_MEMBER_OF_ID)
    return any(v in values2 for v in check_bag(bag1, AT_LEAST_ONE_MEMBER_OF_ID))


def intersection(bag1: Sequence[GeometryValue], bag2: Sequence[GeometryValue]) -> List[GeometryValue]:
    values2 = check_bag(bag2, INTERSECTION_ID)
    return _distinct([v for v in check_bag(bag1, INTERSECTION_ID) if v in values2])


def union(bag1: Sequence[GeometryValue], bag2: Sequence[GeometryValue]) -> List[GeometryValue]:
    return _distinct(list(check_bag(bag1, UNION_ID)) + list(check_bag(bag2, UNION_ID)))


def subset(bag1: Sequence[GeometryValue], bag2: Sequence[GeometryValue]) -> bool:
    """True if every value of ``bag1`` is in ``bag2``."""
    values2 = check_bag(bag2, SUBSET_ID)
    return all(v in values2 for v in check_bag(bag1, SUBSET_ID))


def set_equals(bag1: Sequence[GeometryValue], bag2: Sequence[GeometryValue]) -> bool:
    """Both bags hold the same values, ignoring order and duplicates."""
    values1 = check_bag(bag1, SET_EQUALS_ID)
    values2 = check_bag(bag2, SET_EQUALS_ID)
    return all(v in values2 for v in values1) and all(v in values1 for v in values2)
