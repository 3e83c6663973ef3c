"""
Immutable geometry value.

GeometryValue is what the decoder hands to the policy engine: one shapely
geometry in canonical (longitude-first) axis order plus its CRS metadata.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import shapely
from shapely.geometry import GeometryCollection, Polygon
from shapely.geometry.base import BaseGeometry, BaseMultipartGeometry

from .core.constants import NO_SRID, NULL_REASON_INAPPLICABLE, NULL_SRS, PREFIX_NULL, PREFIX_SRS
from .core.errors import CRSFormatError
from .core.factory import GeometryFactory
from .core.types import GeometryMetadata
from .crs.axis import normalize_axis_order
from .writers.gml_writer import write_gml

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class GeometryValue:
    """
    A decoded geometry with its CRS metadata.

    Construction applies axis normalization exactly once; after that the
    value is frozen. Equality (``==``, hashing, bag/set membership) is exact
    coordinate equality, not topological equality.

    Attributes:
        geometry: Geometry in canonical axis order, tagged with ``metadata.srid``
        metadata: CRS code/name after normalization, source CRS text, null reason
    """

    geometry: BaseGeometry
    metadata: GeometryMetadata
    _key: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        geometry, metadata = normalize_axis_order(self.geometry, self.metadata)
        geometry = GeometryFactory.with_srid(geometry, metadata.srid)
        object.__setattr__(self, "geometry", geometry)
        object.__setattr__(self, "metadata", metadata)
        object.__setattr__(self, "_key", _exact_key(geometry))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def srid(self) -> int:
        return self.metadata.srid

    @property
    def srs(self) -> str:
        return self.metadata.srs

    @property
    def null_reason(self) -> Optional[str]:
        return self.metadata.null_reason

    @property
    def is_null(self) -> bool:
        return self.metadata.is_null

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def exact_equals(self, other: "GeometryValue") -> bool:
        """
        Coordinate-for-coordinate equality of the two geometry trees.

        Two polygons covering the same area but starting their rings at
        different vertices are NOT exactly equal; use the topological equals
        function for that. All ordinates count, Z included.
        """
        return self._key == other._key

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, GeometryValue):
            return NotImplemented
        return self.exact_equals(other)

    def __hash__(self):
        return hash(self._key)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_text(self) -> str:
        """
        Extended WKT that decodes back to an exactly-equal value.

        Returns:
            ``NULL <reason>`` for null values, bare WKT for values without
            CRS, otherwise ``SRS=<srs>;<wkt>``
        """
        if self.is_null:
            return f"{PREFIX_NULL} {self.null_reason or NULL_REASON_INAPPLICABLE}"
        if self.srid == NO_SRID:
            return self.geometry.wkt
        return f"{PREFIX_SRS}{self.srs};{self.geometry.wkt}"

    def to_xml(self) -> str:
        """GML 3.2 element tagged with the CRS name of this value."""
        if self.geometry.is_empty:
            return write_gml(None, null_reason=self.null_reason or NULL_REASON_INAPPLICABLE)
        return write_gml(self.geometry, srs_name=self.srs)

    def __str__(self):
        return self.to_text()

    # ------------------------------------------------------------------
    # Construction from existing values
    # ------------------------------------------------------------------

    @classmethod
    def from_geometries(cls, values: Iterable["GeometryValue"]) -> "GeometryValue":
        """
        Combine several values into one collection value.

        The result is the most specific collection type (all points give a
        MultiPoint, mixed members a GeometryCollection). The members are
        already in canonical order, so no axis swap happens again.

        Raises:
            CRSFormatError: If the values use different CRS codes
        """
        values = list(values)
        if not values:
            return cls(
                GeometryCollection(),
                GeometryMetadata(
                    srid=NO_SRID,
                    srs=NULL_SRS,
                    null_reason=NULL_REASON_INAPPLICABLE,
                ),
            )

        srids = {v.srid for v in values}
        if len(srids) > 1:
            raise CRSFormatError(f"Cannot combine geometries with different SRIDs: {sorted(srids)}")

        geometry = _build_collection([v.geometry for v in values])
        first = values[0].metadata
        logger.debug(f"Built {geometry.geom_type} from {len(values)} values")
        return cls(geometry, GeometryMetadata(srid=first.srid, srs=first.srs, source_srs=first.source_srs))


def _exact_key(geometry: BaseGeometry) -> tuple:
    """
    Hashable form of a geometry tree for exact equality.

    Keeps the geometry type, Z presence and part structure. Adding 0.0 folds
    -0.0 into 0.0 so that values comparing equal also hash alike.
    """
    if isinstance(geometry, Polygon):
        parts = (_exact_key(geometry.exterior),) + tuple(_exact_key(r) for r in geometry.interiors)
    elif isinstance(geometry, BaseMultipartGeometry):
        parts = tuple(_exact_key(g) for g in geometry.geoms)
    else:
        coords = shapely.get_coordinates(geometry, include_z=geometry.has_z) + 0.0
        parts = tuple(map(tuple, coords.tolist()))
    return (geometry.geom_type, geometry.has_z, parts)


def _build_collection(geometries) -> BaseGeometry:
    gf = GeometryFactory()
    kinds = {g.geom_type for g in geometries}
    if kinds == {"Point"}:
        return gf.create_multi_point(geometries)
    if kinds == {"LineString"}:
        return gf.create_multi_line_string(geometries)
    if kinds == {"Polygon"}:
        return gf.create_multi_polygon(geometries)
    return gf.create_geometry_collection(geometries)
