"""
Function registry.

Maps every exposed function URN to its implementation and arity. Built once
at import time and shared read-only by all evaluations.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, NamedTuple, Optional

from ..core.errors import IndeterminateEvaluationError
from . import bags, geometry, topological

logger = logging.getLogger(__name__)


class FunctionSpec(NamedTuple):
    function: Callable[..., Any]
    arity: Optional[int]
    """Number of arguments, None for variadic functions"""


def _load_functions() -> Mapping[str, FunctionSpec]:
    functions = {
        # Topological predicates
        topological.EQUALS_ID: FunctionSpec(topological.equals, 2),
        topological.DISJOINT_ID: FunctionSpec(topological.disjoint, 2),
        topological.TOUCHES_ID: FunctionSpec(topological.touches, 2),
        topological.CROSSES_ID: FunctionSpec(topological.crosses, 2),
        topological.WITHIN_ID: FunctionSpec(topological.within, 2),
        topological.CONTAINS_ID: FunctionSpec(topological.contains, 2),
        topological.OVERLAPS_ID: FunctionSpec(topological.overlaps, 2),
        topological.INTERSECTS_ID: FunctionSpec(topological.intersects, 2),
        # Geometry functions
        geometry.FROM_STRING_ID: FunctionSpec(geometry.geometry_from_string, 1),
        geometry.IS_SIMPLE_ID: FunctionSpec(geometry.is_simple, 1),
        geometry.IS_VALID_ID: FunctionSpec(geometry.is_valid, 1),
        geometry.IS_EMPTY_ID: FunctionSpec(geometry.is_empty, 1),
        geometry.IS_CLOSED_ID: FunctionSpec(geometry.is_closed, 1),
        geometry.IS_RECTANGLE_ID: FunctionSpec(geometry.is_rectangle, 1),
        geometry.IS_NULL_ID: FunctionSpec(geometry.is_null, 1),
        geometry.DIMENSION_ID: FunctionSpec(geometry.dimension, 1),
        geometry.TYPE_ID: FunctionSpec(geometry.geometry_type, 1),
        geometry.SRS_ID: FunctionSpec(geometry.srs, 1),
        geometry.SRID_ID: FunctionSpec(geometry.srid, 1),
        geometry.AS_TEXT_ID: FunctionSpec(geometry.as_text, 1),
        # Bag / set functions
        bags.ONE_AND_ONLY_ID: FunctionSpec(bags.one_and_only, 1),
        bags.BAG_SIZE_ID: FunctionSpec(bags.bag_size, 1),
        bags.IS_IN_ID: FunctionSpec(bags.is_in, 2),
        bags.BAG_ID: FunctionSpec(bags.bag, None),
        bags.AT_LEAST_ONE_MEMBER_OF_ID: FunctionSpec(bags.at_least_one_member_of, 2),
        bags.INTERSECTION_ID: FunctionSpec(bags.intersection, 2),
        bags.UNION_ID: FunctionSpec(bags.union, 2),
        bags.SUBSET_ID: FunctionSpec(bags.subset, 2),
        bags.SET_EQUALS_ID: FunctionSpec(bags.set_equals, 2),
    }
    return MappingProxyType(functions)


FUNCTIONS = _load_functions()


def find_function(function_id: str) -> Optional[FunctionSpec]:
    return FUNCTIONS.get(function_id)


def call_function(function_id: str, *args: Any) -> Any:
    """
    Evaluate a function by URN.

    Args:
        function_id: Function URN, e.g. ``urn:ogc:def:function:geoxacml:1.0:geometry-contains``
        *args: Evaluated arguments

    Raises:
        IndeterminateEvaluationError: Unknown function, wrong number of
            arguments, or arguments of the wrong datatype
    """
    spec = find_function(function_id)
    if spec is None:
        raise IndeterminateEvaluationError(f"Unknown function: {function_id}")

    if spec.arity is not None and len(args) != spec.arity:
        raise IndeterminateEvaluationError(
            f"Function {function_id} expects {spec.arity} arguments but given {len(args)}"
        )

    logger.debug(f"Evaluating {function_id}")
    return spec.function(*args)
