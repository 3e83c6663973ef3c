"""
Geometry inspection functions.

Single-argument functions over one GeometryValue (plus geometry-from-string,
which builds one).
"""

import shapely
from shapely.geometry import LinearRing, LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry, BaseMultipartGeometry

from ..core.errors import IndeterminateEvaluationError, InvalidAttributeValueError
from ..dispatcher import decode
from ..value import GeometryValue
from ._arguments import FUNCTION_PREFIX_1_0, FUNCTION_PREFIX_3_0, check_geometry

FROM_STRING_ID = FUNCTION_PREFIX_3_0 + "geometry-from-string"
IS_SIMPLE_ID = FUNCTION_PREFIX_1_0 + "geometry-is-simple"
IS_VALID_ID = FUNCTION_PREFIX_1_0 + "geometry-is-valid"
IS_EMPTY_ID = FUNCTION_PREFIX_1_0 + "geometry-is-empty"
IS_CLOSED_ID = FUNCTION_PREFIX_1_0 + "geometry-is-closed"
IS_RECTANGLE_ID = FUNCTION_PREFIX_1_0 + "geometry-is-rectangle"
IS_NULL_ID = FUNCTION_PREFIX_1_0 + "geometry-is-null"
DIMENSION_ID = FUNCTION_PREFIX_3_0 + "geometry-dimension"
TYPE_ID = FUNCTION_PREFIX_3_0 + "geometry-type"
SRS_ID = FUNCTION_PREFIX_3_0 + "geometry-srs"
SRID_ID = FUNCTION_PREFIX_3_0 + "geometry-srid"
AS_TEXT_ID = FUNCTION_PREFIX_3_0 + "geometry-as-text"


def geometry_from_string(encoding: str) -> GeometryValue:
    """
    Decode a string-typed attribute into a geometry.

    Raises:
        IndeterminateEvaluationError: If the argument is not a string or
            does not decode
    """
    if not isinstance(encoding, str):
        raise IndeterminateEvaluationError(
            f"Function {FROM_STRING_ID} expects String datatype but given {type(encoding).__name__}"
        )
    try:
        return decode(encoding)
    except InvalidAttributeValueError as e:
        raise IndeterminateEvaluationError(f"Function {FROM_STRING_ID}: {e}") from e


def is_simple(value: GeometryValue) -> bool:
    return bool(check_geometry(value, IS_SIMPLE_ID).geometry.is_simple)


def is_valid(value: GeometryValue) -> bool:
    return bool(check_geometry(value, IS_VALID_ID).geometry.is_valid)


def is_empty(value: GeometryValue) -> bool:
    return bool(check_geometry(value, IS_EMPTY_ID).geometry.is_empty)


def _is_closed(geometry: BaseGeometry) -> bool:
    if geometry.is_empty:
        return False
    if isinstance(geometry, (LineString, LinearRing, MultiLineString)):
        return bool(geometry.is_closed)
    if isinstance(geometry, BaseMultipartGeometry):
        return all(_is_closed(g) for g in geometry.geoms)
    # Points have one coordinate, polygon rings are closed by construction
    return True


def is_closed(value: GeometryValue) -> bool:
    """True if the first and last coordinate of every member coincide."""
    return _is_closed(check_geometry(value, IS_CLOSED_ID).geometry)


def _is_rectangle(geometry: BaseGeometry) -> bool:
    # Axis-parallel polygon without holes and with exactly five vertices
    if not isinstance(geometry, Polygon) or geometry.is_empty or geometry.interiors:
        return False

    coords = list(geometry.exterior.coords)
    if len(coords) != 5:
        return False

    minx, miny, maxx, maxy = geometry.bounds
    for x, y, *_ in coords:
        if x not in (minx, maxx) or y not in (miny, maxy):
            return False

    for (x0, y0, *_), (x1, y1, *_) in zip(coords, coords[1:]):
        if (x0 == x1) == (y0 == y1):
            return False
    return True


def is_rectangle(value: GeometryValue) -> bool:
    return _is_rectangle(check_geometry(value, IS_RECTANGLE_ID).geometry)


def is_null(value: GeometryValue) -> bool:
    """True only for values decoded from ``NULL <reason>`` or ``gml:Null``."""
    return check_geometry(value, IS_NULL_ID).is_null


def dimension(value: GeometryValue) -> int:
    """Topological dimension: 0 points, 1 lines, 2 areas, -1 empty collections."""
    return int(shapely.get_dimensions(check_geometry(value, DIMENSION_ID).geometry))


def geometry_type(value: GeometryValue) -> str:
    return check_geometry(value, TYPE_ID).geometry.geom_type


def srs(value: GeometryValue) -> str:
    return check_geometry(value, SRS_ID).srs


def srid(value: GeometryValue) -> int:
    return check_geometry(value, SRID_ID).srid


def as_text(value: GeometryValue) -> str:
    return check_geometry(value, AS_TEXT_ID).to_text()
