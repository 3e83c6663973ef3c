"""
GML parse strategies.

One strategy per recognized GML element (local name, lower-cased). A strategy
is chosen when its element opens and invoked when the element closes: it
receives the closed frame (accumulated text and child fragments) plus the
GeometryFactory of the decode call, and returns exactly one fragment for the
parent frame.

GML 2 and GML 3 share this table; names that exist in only one generation
(coordinates, coord, Box, outerBoundaryIs, ...) simply never occur in the
other.
"""

from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence, Type

from shapely.errors import ShapelyError
from shapely.geometry import LinearRing, LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from ..core.constants import (
    GML_ATTR_DIMENSION,
    GML_ATTR_SRS_DIMENSION,
    GML_BOX,
    GML_CIRCLE_BY_CENTER,
    GML_COORD,
    GML_COORD_X,
    GML_COORD_Y,
    GML_COORD_Z,
    GML_COORDINATES,
    GML_ENVELOPE,
    GML_EXTERIOR,
    GML_GEOMETRY_MEMBER,
    GML_INNER_BOUNDARY_IS,
    GML_INTERIOR,
    GML_LINEARRING,
    GML_LINESTRING,
    GML_LINESTRING_MEMBER,
    GML_LOWER_CORNER,
    GML_MULTI_GEOMETRY,
    GML_MULTI_LINESTRING,
    GML_MULTI_POINT,
    GML_MULTI_POLYGON,
    GML_OUTER_BOUNDARY_IS,
    GML_POINT,
    GML_POINT_MEMBER,
    GML_POLYGON,
    GML_POLYGON_MEMBER,
    GML_POS,
    GML_POS_LIST,
    GML_RADIUS,
    GML_UPPER_CORNER,
    MIN_LINESTRING_COORDINATES,
    MIN_RING_COORDINATES,
)
from ..core.errors import StructuralError
from ..core.factory import GeometryFactory
from ..core.types import Coordinate, CoordinateSequence, ElementFrame, GeometryFragment
from ..parsers.coordinates import parse_dimension, parse_gml2_coordinates, parse_pos, parse_poslist
from ..utils.xml_parser import find_srs_name, local_name

ParseStrategy = Callable[[ElementFrame, GeometryFactory], GeometryFragment]

# Errors the geometry library raises for degenerate coordinate input
_CONSTRUCTION_ERRORS = (ValueError, TypeError, ShapelyError)


def element_srid(attrs: Mapping[str, str], default: int) -> int:
    """
    Resolve the SRID of one geometry-building element.

    Uses the srsName attribute (bare or namespace-qualified) if it is a plain
    integer, or if the part after its last ``#`` is one. Anything else falls
    back to ``default``, the SRID of the enclosing factory context.

    Examples:
        >>> element_srid({"srsName": "4326"}, 0)
        4326
        >>> element_srid({"srsName": "http://www.opengis.net/gml/srs/epsg.xml#4326"}, 0)
        4326
        >>> element_srid({"srsName": "EPSG:4326"}, -4326)
        -4326
    """
    srs = find_srs_name(dict(attrs))
    if srs is None:
        return default

    candidates = [srs]
    if "#" in srs:
        candidates.append(srs[srs.rindex("#") + 1:])

    for candidate in candidates:
        try:
            return int(candidate)
        except ValueError:
            continue
    return default


def _attr(frame: ElementFrame, name: str) -> Optional[str]:
    for key, value in frame.attrs.items():
        if local_name(key) == name:
            return value
    return None


def _require_types(children: Sequence[GeometryFragment], kind: Type, message: str) -> None:
    if not all(isinstance(c, kind) for c in children):
        raise StructuralError(message)


def _tag(frame: ElementFrame, gf: GeometryFactory, geometry: BaseGeometry) -> BaseGeometry:
    return gf.with_srid(geometry, element_srid(frame.attrs, gf.srid))


def _sequence_or_coordinates(children: List[GeometryFragment], message: str) -> list:
    """Coordinates of one sequence child, or of several individual coordinate children."""
    if len(children) == 1:
        if not isinstance(children[0], CoordinateSequence):
            raise StructuralError(message)
        return children[0].as_tuples()

    _require_types(children, Coordinate, message)
    return [c.as_tuple() for c in children]


# ============================================================================
# Primitive Geometries
# ============================================================================

def _parse_point(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a point without exactly one coordinate"
    if len(frame.children) != 1:
        raise StructuralError(message)

    child = frame.children[0]
    if isinstance(child, Coordinate):
        coordinate = child.as_tuple()
    elif isinstance(child, CoordinateSequence) and len(child) == 1:
        coordinate = child.as_tuples()[0]
    else:
        raise StructuralError(message)

    return _tag(frame, gf, gf.create_point(coordinate))


def _parse_line_string(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a linestring without atleast two coordinates or one coordinate sequence"
    if len(frame.children) < 1:
        raise StructuralError(message)

    coordinates = _sequence_or_coordinates(frame.children, message)
    if len(coordinates) < MIN_LINESTRING_COORDINATES:
        raise StructuralError(message)

    try:
        line = gf.create_line_string(coordinates)
    except _CONSTRUCTION_ERRORS as e:
        raise StructuralError(f"{message}: {e}") from e
    return _tag(frame, gf, line)


def _parse_linear_ring(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a linear ring without atleast four coordinates or one coordinate sequence"
    if len(frame.children) != 1 and len(frame.children) < MIN_RING_COORDINATES:
        raise StructuralError(message)

    coordinates = _sequence_or_coordinates(frame.children, message)
    if len(coordinates) < MIN_RING_COORDINATES:
        raise StructuralError(message)
    if coordinates[0] != coordinates[-1]:
        raise StructuralError("Points of LinearRing do not form a closed linestring")

    try:
        ring = gf.create_linear_ring(coordinates)
    except _CONSTRUCTION_ERRORS as e:
        raise StructuralError(f"{message}: {e}") from e
    return _tag(frame, gf, ring)


def _parse_circle_by_center_point(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a circle without atleast one point and a radius"
    if len(frame.children) < 2:
        raise StructuralError(message)

    center, radius = frame.children[0], frame.children[1]
    if isinstance(center, CoordinateSequence) and len(center) == 1:
        center = center.coordinate(0)
    if not isinstance(center, Coordinate) or not isinstance(radius, str):
        raise StructuralError(message)

    try:
        r = float(radius)
    except ValueError as e:
        raise StructuralError(f"Invalid circle radius: {radius!r}") from e

    return _tag(frame, gf, gf.create_circle(center, r))


def _parse_polygon(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a polygon without atleast one linear ring"
    if len(frame.children) < 1:
        raise StructuralError(message)

    _require_types(frame.children, LinearRing, message)
    outer = frame.children[0]
    inner = frame.children[1:]

    try:
        polygon = gf.create_polygon(outer, inner or None)
    except _CONSTRUCTION_ERRORS as e:
        raise StructuralError(f"{message}: {e}") from e
    return _tag(frame, gf, polygon)


def _parse_envelope(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a box without either two coords or one coordinate sequence"
    children = frame.children
    if len(children) < 1 or len(children) > 2:
        raise StructuralError(message)

    if len(children) == 1:
        sequence = children[0]
        if not isinstance(sequence, CoordinateSequence) or len(sequence) != 2:
            raise StructuralError(message)
        lower, upper = sequence.coordinate(0), sequence.coordinate(1)
    else:
        _require_types(children, Coordinate, message)
        lower, upper = children[0], children[1]

    shell = [
        (lower.x, lower.y),
        (upper.x, lower.y),
        (upper.x, upper.y),
        (lower.x, upper.y),
        (lower.x, lower.y),
    ]
    return _tag(frame, gf, gf.create_polygon(shell))


# ============================================================================
# Aggregate Geometries
# ============================================================================

def _parse_multi_point(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a multi-point without atleast one point"
    if len(frame.children) < 1:
        raise StructuralError(message)
    _require_types(frame.children, Point, message)
    return _tag(frame, gf, gf.create_multi_point(frame.children))


def _parse_multi_line_string(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a multi-linestring without atleast one linestring"
    if len(frame.children) < 1:
        raise StructuralError(message)
    _require_types(frame.children, LineString, message)
    return _tag(frame, gf, gf.create_multi_line_string(frame.children))


def _parse_multi_polygon(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a multi-polygon without atleast one polygon"
    if len(frame.children) < 1:
        raise StructuralError(message)
    _require_types(frame.children, Polygon, message)
    return _tag(frame, gf, gf.create_multi_polygon(frame.children))


def _parse_multi_geometry(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    message = "Cannot create a multi-geometry without atleast one geometry"
    if len(frame.children) < 1:
        raise StructuralError(message)
    _require_types(frame.children, BaseGeometry, message)
    return _tag(frame, gf, gf.create_geometry_collection(frame.children))


# ============================================================================
# Coordinates
# ============================================================================

def _parse_pos_list(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    dimension_attr = _attr(frame, GML_ATTR_DIMENSION)
    if dimension_attr is None:
        dimension_attr = _attr(frame, GML_ATTR_SRS_DIMENSION)
    return parse_poslist(frame.text_content, parse_dimension(dimension_attr))


def _parse_pos(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    return parse_pos(frame.text_content, frame.name)


def _parse_radius(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    return frame.text_content.strip()


def _parse_gml2_coordinates(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    return parse_gml2_coordinates(
        frame.text_content,
        decimal=_attr(frame, "decimal") or ".",
        cs=_attr(frame, "cs") or ",",
        ts=_attr(frame, "ts") or " ",
    )


def _parse_gml2_coord(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    # X, then optional Y and Z, each already a float
    if not 1 <= len(frame.children) <= 3:
        raise StructuralError("Cannot create a coordinate without X and optional Y, Z")
    _require_types(frame.children, float, "Cannot create a coordinate from non-numeric ordinates")
    return Coordinate(*frame.children)


def _parse_ordinate(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    text = frame.text_content.strip()
    try:
        return float(text)
    except ValueError as e:
        raise StructuralError(f"Invalid ordinate in {frame.name}: {text!r}") from e


def _parse_member(frame: ElementFrame, gf: GeometryFactory) -> GeometryFragment:
    # Type checking happens in the parent aggregate
    if len(frame.children) != 1:
        raise StructuralError("Geometry Members may only contain one geometry.")
    return frame.children[0]


def _load_strategies() -> Mapping[str, ParseStrategy]:
    strategies = {
        GML_POINT: _parse_point,
        GML_LINESTRING: _parse_line_string,
        GML_LINEARRING: _parse_linear_ring,
        GML_CIRCLE_BY_CENTER: _parse_circle_by_center_point,
        GML_POLYGON: _parse_polygon,
        GML_ENVELOPE: _parse_envelope,
        GML_BOX: _parse_envelope,
        GML_MULTI_POINT: _parse_multi_point,
        GML_MULTI_LINESTRING: _parse_multi_line_string,
        GML_MULTI_POLYGON: _parse_multi_polygon,
        GML_MULTI_GEOMETRY: _parse_multi_geometry,
        GML_POS_LIST: _parse_pos_list,
        GML_POS: _parse_pos,
        GML_LOWER_CORNER: _parse_pos,
        GML_UPPER_CORNER: _parse_pos,
        GML_RADIUS: _parse_radius,
        GML_COORDINATES: _parse_gml2_coordinates,
        GML_COORD: _parse_gml2_coord,
        GML_COORD_X: _parse_ordinate,
        GML_COORD_Y: _parse_ordinate,
        GML_COORD_Z: _parse_ordinate,
        GML_EXTERIOR: _parse_member,
        GML_INTERIOR: _parse_member,
        GML_OUTER_BOUNDARY_IS: _parse_member,
        GML_INNER_BOUNDARY_IS: _parse_member,
        GML_GEOMETRY_MEMBER: _parse_member,
        GML_POINT_MEMBER: _parse_member,
        GML_LINESTRING_MEMBER: _parse_member,
        GML_POLYGON_MEMBER: _parse_member,
    }
    return MappingProxyType({name.lower(): strategy for name, strategy in strategies.items()})


# Built once, shared read-only by all decode calls
STRATEGIES = _load_strategies()


def find_strategy(name: Optional[str]) -> Optional[ParseStrategy]:
    """
    Look up the strategy for an element name.

    Args:
        name: Element name, qualified (``{ns}Point``, ``gml:Point``) or local

    Returns:
        ParseStrategy, or None if the element is not part of the table
    """
    if name is None:
        return None
    return STRATEGIES.get(local_name(name).lower())
