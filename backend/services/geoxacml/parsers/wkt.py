"""
Well-Known Text parser with the extended prefix grammar.

Recognized encodings (case-insensitive, in this order):

    NULL <reason>             empty geometry, no CRS
    SRID=<int>;<body>         EPSG code prefix
    SRS=<crsref>;<body>       CRS reference prefix (CRS= is an alias)
    CIRCLE(<x> <y> [<z>], r)  circle shorthand, CRS84
    POINT(...), POLYGON(...)  bare WKT, CRS from out-of-band attribute

``<body>`` is either standard WKT or the CIRCLE shorthand. Standard WKT
tokens are parsed by shapely.
"""

import logging
from typing import Optional, Tuple

import shapely
from shapely.errors import ShapelyError
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from ..config import DEFAULT_CONFIG, DecoderConfig
from ..core.constants import (
    CRS84_SRID,
    DEFAULT_SRS,
    NO_SRID,
    NULL_REASON_INAPPLICABLE,
    NULL_SRS,
    PREFIX_CIRCLE,
    PREFIX_CRS,
    PREFIX_NULL,
    PREFIX_SRID,
    PREFIX_SRS,
    WKT_KEYWORDS,
)
from ..core.errors import FormatError
from ..core.factory import GeometryFactory
from ..core.types import Coordinate, GeometryMetadata
from ..crs.resolver import resolve_srid

logger = logging.getLogger(__name__)

ParseResult = Tuple[BaseGeometry, GeometryMetadata]


def _starts_with(encoding: str, prefix: str) -> bool:
    return encoding[:len(prefix)].upper() == prefix.upper()


def is_wkt_keyword(encoding: str) -> bool:
    """True if ``encoding`` starts with one of the standard WKT keywords."""
    return any(_starts_with(encoding, keyword) for keyword in WKT_KEYWORDS)


def read_wkt(body: str) -> BaseGeometry:
    """
    Parse a standard WKT body.

    Raises:
        FormatError: If shapely rejects the text
    """
    try:
        return shapely.from_wkt(body.strip())
    except (ShapelyError, ValueError) as e:
        raise FormatError(f"WKT syntax error: {e}") from e


def parse_circle(encoding: str, gf: GeometryFactory) -> Polygon:
    """
    Parse the CIRCLE shorthand into a buffered polygon.

    Args:
        encoding: ``CIRCLE(<x> <y> [<z>], <radius>)``
        gf: Factory providing the buffer resolution

    Returns:
        Polygon approximating the circle

    Raises:
        FormatError: If the body is not exactly "center, radius" or the
            center does not have 2 or 3 components

    Example:
        >>> parse_circle("CIRCLE(-77.035278 38.889444, 45)", GeometryFactory()).geom_type
        'Polygon'
    """
    body = encoding.strip()[len(PREFIX_CIRCLE):].strip()
    if not (body.startswith("(") and body.endswith(")")):
        raise FormatError("extended WKT syntax error for CIRCLE: Not in format CIRCLE(X Y,r)?")

    parts = body[1:-1].split(",")
    if len(parts) != 2:
        raise FormatError("extended WKT syntax error for CIRCLE: Not in format CIRCLE(X Y,r)?")

    center_tokens = parts[0].split()
    if len(center_tokens) not in (2, 3):
        raise FormatError(
            "extended WKT syntax error for CIRCLE: Not in format CIRCLE(X Y,r) or CIRCLE(X Y Z,r)?"
        )

    try:
        center = Coordinate(*(float(t) for t in center_tokens))
        radius = float(parts[1].strip())
    except ValueError as e:
        raise FormatError(f"extended WKT syntax error for CIRCLE: {e}") from e

    return gf.create_circle(center, radius)


def _read_body(body: str, gf: GeometryFactory) -> BaseGeometry:
    if _starts_with(body.strip(), PREFIX_CIRCLE):
        return parse_circle(body, gf)
    return read_wkt(body)


def _split_prefixed(encoding: str) -> Tuple[str, str]:
    parts = encoding.split(";")
    if len(parts) != 2:
        raise FormatError("extended WKT syntax error: ';' missing?")
    return parts[0], parts[1]


def parse_extended_wkt(
    encoding: str,
    srs_name: Optional[str] = None,
    config: DecoderConfig = DEFAULT_CONFIG,
) -> ParseResult:
    """
    Parse WKT or extended WKT into a geometry and its CRS metadata.

    Args:
        encoding: Trimmed, non-empty encoding
        srs_name: Out-of-band CRS reference, used for bare WKT only
        config: Decoder configuration (default CRS, circle resolution)

    Returns:
        Tuple of (geometry, metadata). Axis order is not normalized yet.

    Raises:
        FormatError: Unknown encoding or malformed prefix/WKT/CIRCLE
        CRSFormatError: Unresolvable CRS reference
    """
    gf = GeometryFactory(quadrant_segments=config.quadrant_segments)

    if _starts_with(encoding, PREFIX_NULL):
        # NULL<space><reason>; the null geometry is an empty point
        reason = encoding[len(PREFIX_NULL):].strip() or NULL_REASON_INAPPLICABLE
        logger.debug(f"NULL geometry, reason: {reason}")
        return gf.create_empty(), GeometryMetadata(srid=NO_SRID, srs=NULL_SRS, null_reason=reason)

    if _starts_with(encoding, PREFIX_SRID):
        prefix, body = _split_prefixed(encoding)
        srs = f"EPSG:{prefix[len(PREFIX_SRID):].strip()}"
        geometry = _read_body(body, gf)
        return geometry, GeometryMetadata(srid=resolve_srid(srs), srs=srs, source_srs=srs)

    for prefix_name in (PREFIX_SRS, PREFIX_CRS):
        if _starts_with(encoding, prefix_name):
            prefix, body = _split_prefixed(encoding)
            srs = prefix[len(prefix_name):].strip()
            geometry = _read_body(body, gf)
            return geometry, GeometryMetadata(srid=resolve_srid(srs), srs=srs, source_srs=srs)

    if _starts_with(encoding, PREFIX_CIRCLE):
        return parse_circle(encoding, gf), GeometryMetadata(srid=CRS84_SRID, srs=DEFAULT_SRS)

    if is_wkt_keyword(encoding):
        if srs_name is None:
            logger.info(f"Constructing geometry with default SRS: {config.default_srs}")
            srs_name = config.default_srs

        geometry = read_wkt(encoding)
        if geometry.is_empty:
            return geometry, GeometryMetadata(
                srid=NO_SRID,
                srs=config.default_srs,
                null_reason=NULL_REASON_INAPPLICABLE,
            )
        return geometry, GeometryMetadata(srid=resolve_srid(srs_name), srs=srs_name, source_srs=srs_name)

    raise FormatError("unknown geometry encoding")
