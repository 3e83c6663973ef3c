"""
GML 3.2 writer.

Serializes a shapely geometry into a GML 3.2 element that the GML reader
decodes back to the same coordinates. Ordinates are written with ``repr``
so every float survives the round trip unchanged.
"""

from typing import Optional
import xml.etree.ElementTree as ET

import numpy as np
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

from ..core.constants import (
    GML_ATTR_SRS_DIMENSION,
    GML_ATTR_SRSNAME,
    GML_EXTERIOR,
    GML_GEOMETRY_MEMBER,
    GML_INTERIOR,
    GML_LINEARRING,
    GML_LINESTRING,
    GML_LINESTRING_MEMBER,
    GML_MULTI_GEOMETRY,
    GML_MULTI_LINESTRING,
    GML_MULTI_POINT,
    GML_MULTI_POLYGON,
    GML_NULL,
    GML_POINT,
    GML_POINT_MEMBER,
    GML_POLYGON,
    GML_POLYGON_MEMBER,
    GML_POS,
    GML_POS_LIST,
    NS,
)

GML_PREFIX = "gml"


def _qname(local: str) -> str:
    return f"{GML_PREFIX}:{local}"


def _format_coordinates(coords: np.ndarray) -> str:
    return " ".join(repr(float(v)) for v in coords.ravel())


def _coordinates_element(parent: ET.Element, tag: str, geometry: BaseGeometry) -> ET.Element:
    if geometry.is_empty:
        raise ValueError(f"Cannot write an empty {geometry.geom_type} as a GML member")

    coords = shapely.get_coordinates(geometry, include_z=geometry.has_z)
    elem = ET.SubElement(parent, _qname(tag))
    elem.set(GML_ATTR_SRS_DIMENSION, str(coords.shape[1]))
    elem.text = _format_coordinates(coords)
    return elem


def _non_empty(geometry: BaseGeometry):
    # GML has no empty geometry element; empty members are left out
    return [g for g in geometry.geoms if not g.is_empty]


def _ring(parent: ET.Element, wrapper: str, ring: LinearRing) -> None:
    member = ET.SubElement(parent, _qname(wrapper))
    ring_elem = ET.SubElement(member, _qname(GML_LINEARRING))
    _coordinates_element(ring_elem, GML_POS_LIST, ring)


def _build(parent: Optional[ET.Element], geometry: BaseGeometry) -> ET.Element:
    """Append the element for ``geometry`` to ``parent`` (or create a root)."""

    def element(local: str) -> ET.Element:
        if parent is None:
            return ET.Element(_qname(local))
        return ET.SubElement(parent, _qname(local))

    # LinearRing is a LineString subclass, check it first
    if isinstance(geometry, LinearRing):
        elem = element(GML_LINEARRING)
        _coordinates_element(elem, GML_POS_LIST, geometry)
    elif isinstance(geometry, Point):
        elem = element(GML_POINT)
        _coordinates_element(elem, GML_POS, geometry)
    elif isinstance(geometry, LineString):
        elem = element(GML_LINESTRING)
        _coordinates_element(elem, GML_POS_LIST, geometry)
    elif isinstance(geometry, Polygon):
        elem = element(GML_POLYGON)
        _ring(elem, GML_EXTERIOR, geometry.exterior)
        for hole in geometry.interiors:
            _ring(elem, GML_INTERIOR, hole)
    elif isinstance(geometry, MultiPoint):
        elem = element(GML_MULTI_POINT)
        for point in _non_empty(geometry):
            _build(ET.SubElement(elem, _qname(GML_POINT_MEMBER)), point)
    elif isinstance(geometry, MultiLineString):
        elem = element(GML_MULTI_LINESTRING)
        for line in _non_empty(geometry):
            _build(ET.SubElement(elem, _qname(GML_LINESTRING_MEMBER)), line)
    elif isinstance(geometry, MultiPolygon):
        elem = element(GML_MULTI_POLYGON)
        for polygon in _non_empty(geometry):
            _build(ET.SubElement(elem, _qname(GML_POLYGON_MEMBER)), polygon)
    elif isinstance(geometry, GeometryCollection):
        elem = element(GML_MULTI_GEOMETRY)
        for member in _non_empty(geometry):
            _build(ET.SubElement(elem, _qname(GML_GEOMETRY_MEMBER)), member)
    else:
        raise ValueError(f"Unsupported geometry type for GML: {geometry.geom_type}")
    return elem


def write_gml(
    geometry: Optional[BaseGeometry],
    srs_name: Optional[str] = None,
    null_reason: Optional[str] = None,
) -> str:
    """
    Serialize a geometry as a GML 3.2 element.

    Empty members of a collection are not written.

    Args:
        geometry: Geometry to write, or None for a ``gml:Null`` element
        srs_name: CRS name written as ``srsName`` on the root element
        null_reason: Text of the ``gml:Null`` element

    Returns:
        XML string with the ``gml`` namespace declared on the root

    Empty members of a collection are not written.
    """
    if geometry is None:
        root = ET.Element(_qname(GML_NULL))
        root.text = null_reason
    else:
        root = _build(None, geometry)
        if srs_name:
            root.set(GML_ATTR_SRSNAME, srs_name)

    root.set(f"xmlns:{GML_PREFIX}", NS["gml"])
    return ET.tostring(root, encoding="unicode")
