"""Argument checks shared by the exposed functions."""

from typing import Any, Sequence

from ..core.errors import IndeterminateEvaluationError
from ..value import GeometryValue

FUNCTION_PREFIX_1_0 = "urn:ogc:def:function:geoxacml:1.0:"
FUNCTION_PREFIX_3_0 = "urn:ogc:def:function:geoxacml:3.0:"


def check_geometry(arg: Any, function_id: str, position: str = "first") -> GeometryValue:
    if not isinstance(arg, GeometryValue):
        raise IndeterminateEvaluationError(
            f"Function {function_id} expects Geometry datatype as {position} argument "
            f"but given {type(arg).__name__}"
        )
    return arg


def check_bag(bag: Any, function_id: str) -> Sequence[GeometryValue]:
    if isinstance(bag, (str, bytes)) or not isinstance(bag, (list, tuple, set, frozenset)):
        raise IndeterminateEvaluationError(
            f"Function {function_id} expects a bag of Geometry but given {type(bag).__name__}"
        )
    values = list(bag)
    for value in values:
        check_geometry(value, function_id, position="bag")
    return values
