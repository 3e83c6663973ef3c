"""
Topological predicates.

Each predicate takes exactly two GeometryValues. Values in different CRS are
never related: the predicate returns False without consulting shapely.
"""

import logging
from typing import Callable

from shapely.geometry.base import BaseGeometry

from ..value import GeometryValue
from ._arguments import FUNCTION_PREFIX_1_0, check_geometry

logger = logging.getLogger(__name__)

EQUALS_ID = FUNCTION_PREFIX_1_0 + "geometry-equals"
DISJOINT_ID = FUNCTION_PREFIX_1_0 + "geometry-disjoint"
TOUCHES_ID = FUNCTION_PREFIX_1_0 + "geometry-touches"
CROSSES_ID = FUNCTION_PREFIX_1_0 + "geometry-crosses"
WITHIN_ID = FUNCTION_PREFIX_1_0 + "geometry-within"
CONTAINS_ID = FUNCTION_PREFIX_1_0 + "geometry-contains"
OVERLAPS_ID = FUNCTION_PREFIX_1_0 + "geometry-overlaps"
INTERSECTS_ID = FUNCTION_PREFIX_1_0 + "geometry-intersects"


def _evaluate(
    function_id: str,
    v1: GeometryValue,
    v2: GeometryValue,
    predicate: Callable[[BaseGeometry, BaseGeometry], bool],
) -> bool:
    v1 = check_geometry(v1, function_id, "first")
    v2 = check_geometry(v2, function_id, "second")

    if v1.srid != v2.srid:
        logger.debug(f"{function_id}: SRID mismatch {v1.srid} != {v2.srid}")
        return False

    return bool(predicate(v1.geometry, v2.geometry))


def equals(v1: GeometryValue, v2: GeometryValue) -> bool:
    """Topological equality (same point set), unlike ``GeometryValue.__eq__``."""
    return _evaluate(EQUALS_ID, v1, v2, BaseGeometry.equals)


def disjoint(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(DISJOINT_ID, v1, v2, BaseGeometry.disjoint)


def touches(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(TOUCHES_ID, v1, v2, BaseGeometry.touches)


def crosses(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(CROSSES_ID, v1, v2, BaseGeometry.crosses)


def within(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(WITHIN_ID, v1, v2, BaseGeometry.within)


def contains(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(CONTAINS_ID, v1, v2, BaseGeometry.contains)


def overlaps(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(OVERLAPS_ID, v1, v2, BaseGeometry.overlaps)


def intersects(v1: GeometryValue, v2: GeometryValue) -> bool:
    return _evaluate(INTERSECTS_ID, v1, v2, BaseGeometry.intersects)
