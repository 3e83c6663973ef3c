"""
Geometry construction context.

GeometryFactory is the ambient builder handed to every parse strategy: it
knows the default SRID of the document being decoded and the circle
resolution, and creates shapely geometries from coordinate fragments.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import shapely
from shapely.geometry import (
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

from .constants import DEFAULT_QUADRANT_SEGMENTS, NO_SRID
from .types import Coordinate, CoordinateSequence

CoordinateLike = Tuple[float, ...]


@dataclass(frozen=True)
class GeometryFactory:
    """
    Builds geometries for one decode call.

    Attributes:
        srid: Default SRID inherited by elements without their own srsName
        quadrant_segments: Buffer resolution for circles
    """

    srid: int = NO_SRID
    quadrant_segments: int = DEFAULT_QUADRANT_SEGMENTS

    @staticmethod
    def with_srid(geometry: BaseGeometry, srid: int) -> BaseGeometry:
        if shapely.get_srid(geometry) != srid:
            geometry = shapely.set_srid(geometry, srid)
        return geometry

    def create_point(self, coordinate: CoordinateLike) -> Point:
        return Point(coordinate)

    def create_line_string(self, coordinates: Sequence[CoordinateLike]) -> LineString:
        return LineString(coordinates)

    def create_linear_ring(self, coordinates: Sequence[CoordinateLike]) -> LinearRing:
        return LinearRing(coordinates)

    def create_polygon(
        self,
        shell: Sequence[CoordinateLike],
        holes: Optional[Sequence[Sequence[CoordinateLike]]] = None,
    ) -> Polygon:
        return Polygon(shell, holes)

    def create_multi_point(self, points: Sequence[Point]) -> MultiPoint:
        return MultiPoint(list(points))

    def create_multi_line_string(self, lines: Sequence[LineString]) -> MultiLineString:
        return MultiLineString(list(lines))

    def create_multi_polygon(self, polygons: Sequence[Polygon]) -> MultiPolygon:
        return MultiPolygon(list(polygons))

    def create_geometry_collection(self, geometries: Sequence[BaseGeometry]) -> GeometryCollection:
        return GeometryCollection(list(geometries))

    def create_empty(self) -> Point:
        """Null geometries are represented by an empty point."""
        return Point()

    def create_circle(self, center: Coordinate, radius: float) -> Polygon:
        """Approximate a circle by buffering its center point."""
        return Point(center.as_tuple()).buffer(radius, quad_segs=self.quadrant_segments)
