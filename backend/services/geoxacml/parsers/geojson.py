"""
GeoJSON geometry parser.

RFC 7946 fixes the CRS of every GeoJSON geometry to CRS84 with longitude
before latitude, so the result is always tagged with the CRS84 code.
"""

import json

from shapely.errors import ShapelyError
from shapely.geometry import shape

from ..core.constants import CRS84_SRID, DEFAULT_SRS
from ..core.errors import FormatError
from ..core.types import GeometryMetadata
from .wkt import ParseResult


def parse_geojson(encoding: str) -> ParseResult:
    """
    Parse a GeoJSON geometry object (or a Feature wrapping one).

    Raises:
        FormatError: If the text is not JSON or not a GeoJSON geometry
    """
    try:
        obj = json.loads(encoding)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid GeoJSON: {e}") from e

    if not isinstance(obj, dict):
        raise FormatError("Invalid GeoJSON: expected an object")
    if obj.get("type") == "Feature":
        obj = obj.get("geometry")
        if obj is None:
            raise FormatError("Invalid GeoJSON: Feature without geometry")

    try:
        geometry = shape(obj)
    except (ShapelyError, AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
        raise FormatError(f"Invalid GeoJSON geometry: {e}") from e

    return geometry, GeometryMetadata(srid=CRS84_SRID, srs=DEFAULT_SRS)
