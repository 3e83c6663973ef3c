"""
Constants for geometry decoding and CRS normalization.

This module defines all constant values used throughout the decoding pipeline,
including XML namespaces, GML element names, CRS identifiers and the encoding
prefixes of the extended WKT grammar.
"""

# ============================================================================
# XML Namespaces (GML 2 / GML 3.2 / GML 3.3)
# ============================================================================

NS = {
    "gml": "http://www.opengis.net/gml/3.2",
    "gml2": "http://www.opengis.net/gml",
    "gml33": "http://www.opengis.net/gml/3.3",
    "geoxacml": "http://www.opengis.net/geoxacml",
}

GML2_NAMESPACES = (NS["gml2"],)
GML3_NAMESPACES = (NS["gml"], NS["gml33"])

# Out-of-band attributes carrying the CRS of a bare WKT encoding
SRS_ATTRIBUTE = f"{{{NS['geoxacml']}}}srs"
CRS_ATTRIBUTE = f"{{{NS['geoxacml']}}}crs"

# ============================================================================
# Coordinate Reference Systems
# ============================================================================

# GeoJSON default, see RFC 7946 section 4
DEFAULT_SRS = "urn:ogc:def:crs:OGC::CRS84"

# Sentinel code for "geographic, longitude/latitude"
# ⚠️ CRITICAL: The sign encodes the axis order, never compare with abs()
CRS84_SRID = -4326

# Code used for geometries without CRS (GML Null, empty WKT)
NO_SRID = 0

# Last path segment of the CRS reference that maps to CRS84_SRID
CRS84_ALIASES = frozenset({"crs84", "84", "wgs84", DEFAULT_SRS.lower()})

# EPSG codes stored latitude first, mapped to their longitude-first twin
LAT_LON_TWINS = {4326: CRS84_SRID}

# Separators of CRS references (EPSG:4326, http://.../EPSG/0/4326, ...)
SRS_SEPARATORS = r"[/,:]"

# ============================================================================
# Null Geometries
# ============================================================================

# SRS name recorded for GML Null / "NULL <reason>" encodings
NULL_SRS = "NULL"

# Null reasons per GML schema:
#   inapplicable  there is no value
#   missing       the correct value is not readily available to the sender
#   template      the value will be available later
#   unknown       the correct value is not known to the sender
#   withheld      the value is not divulged
#   other:text    other brief explanation
NULL_REASON_INAPPLICABLE = "inapplicable"

# ============================================================================
# Extended WKT Grammar
# ============================================================================

PREFIX_NULL = "NULL"
PREFIX_SRID = "SRID="
PREFIX_SRS = "SRS="
PREFIX_CRS = "CRS="
PREFIX_CIRCLE = "CIRCLE"

WKT_KEYWORDS = (
    "POINT",
    "LINESTRING",
    "LINEARRING",
    "POLYGON",
    "MULTIPOINT",
    "MULTILINESTRING",
    "MULTIPOLYGON",
    "GEOMETRYCOLLECTION",
)

# Segments per quadrant used when buffering a circle center
# ⚠️ CRITICAL: Changing this changes every circle polygon bit-for-bit
DEFAULT_QUADRANT_SEGMENTS = 50

# ============================================================================
# GML Element Names
# ============================================================================

GML_ATTR_SRSNAME = "srsName"
GML_ATTR_DIMENSION = "dimension"
GML_ATTR_SRS_DIMENSION = "srsDimension"

GML_NULL = "Null"

# Associative types
GML_GEOMETRY_MEMBER = "geometryMember"
GML_POINT_MEMBER = "pointMember"
GML_LINESTRING_MEMBER = "lineStringMember"
GML_POLYGON_MEMBER = "polygonMember"
GML_EXTERIOR = "exterior"
GML_INTERIOR = "interior"
GML_OUTER_BOUNDARY_IS = "outerBoundaryIs"
GML_INNER_BOUNDARY_IS = "innerBoundaryIs"

# Primitive geometries
GML_POINT = "Point"
GML_LINESTRING = "LineString"
GML_LINEARRING = "LinearRing"
GML_POLYGON = "Polygon"
GML_ENVELOPE = "Envelope"
GML_BOX = "Box"
GML_CIRCLE_BY_CENTER = "CircleByCenterPoint"
GML_RADIUS = "radius"

# Aggregate geometries
GML_MULTI_GEOMETRY = "MultiGeometry"
GML_MULTI_POINT = "MultiPoint"
GML_MULTI_LINESTRING = "MultiLineString"
GML_MULTI_POLYGON = "MultiPolygon"

# Coordinates
GML_POS_LIST = "posList"
GML_POS = "pos"
GML_LOWER_CORNER = "lowerCorner"
GML_UPPER_CORNER = "upperCorner"
GML_COORDINATES = "coordinates"
GML_COORD = "coord"
GML_COORD_X = "X"
GML_COORD_Y = "Y"
GML_COORD_Z = "Z"

# ============================================================================
# Validation Constants
# ============================================================================

# Minimum number of individual coordinates for a linear ring
MIN_RING_COORDINATES = 4

# Minimum number of individual coordinates for a line string
MIN_LINESTRING_COORDINATES = 2

# Tuple sizes accepted by posList/pos
SUPPORTED_DIMENSIONS = (2, 3)
