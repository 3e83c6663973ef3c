"""
Format dispatcher.

Entry point of the decoder. Inspects a raw attribute value and routes it to
the matching parser:

    str  "{..."          GeoJSON
    str  "<..."          serialized GML
    str  anything else   WKT / extended WKT
    list [str]           as a single string
    list [..., Element]  GML element (Null short-circuits)

Every decode ends in GeometryValue construction, which normalizes the axis
order exactly once.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union
import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG, DecoderConfig
from .core.constants import GML_NULL, NO_SRID, NULL_SRS
from .core.errors import (
    FormatError,
    GeometryDecodeError,
    InvalidAttributeValueError,
    NamespaceError,
    StructuralError,
)
from .core.factory import GeometryFactory
from .core.types import GeometryMetadata
from .crs.resolver import resolve_srid
from .parsers.geojson import parse_geojson
from .parsers.wkt import parse_extended_wkt
from .streaming.reader import GMLReader
from .utils.logging import log
from .utils.xml_parser import find_srs_name, first_text, split_tag
from .value import GeometryValue

logger = logging.getLogger(__name__)

Content = Union[str, ET.Element, Sequence[Any]]


def decode(
    encoding: Content,
    xml_attributes: Optional[Mapping[str, str]] = None,
    config: DecoderConfig = DEFAULT_CONFIG,
) -> GeometryValue:
    """
    Decode an attribute value into a GeometryValue.

    This is the host-facing contract: every decode failure is reported as
    InvalidAttributeValueError, with the detailed error chained as its cause.

    Args:
        encoding: Encoded geometry (string, GML element, or the content list
            of an attribute value)
        xml_attributes: Other XML attributes of the attribute value; the
            out-of-band CRS of a bare WKT value is read from here
        config: Decoder configuration

    Returns:
        Immutable GeometryValue in canonical axis order

    Raises:
        InvalidAttributeValueError: If the encoding cannot be decoded

    Example:
        ```python
        value = decode("SRID=4326;POINT(38.889444 -77.035278)")
        value.srid            # -4326
        value.geometry.x      # -77.035278
        ```
    """
    try:
        return decode_geometry(encoding, xml_attributes, config)
    except GeometryDecodeError as e:
        logger.debug(f"Decode failed: {type(e).__name__}: {e}")
        log(f"decode failed: {type(e).__name__}: {e}")
        raise InvalidAttributeValueError(f"Invalid geometry value: {e}") from e


def decode_geometry(
    encoding: Content,
    xml_attributes: Optional[Mapping[str, str]] = None,
    config: DecoderConfig = DEFAULT_CONFIG,
) -> GeometryValue:
    """
    Same as decode() but raises the detailed GeometryDecodeError subclasses.

    Raises:
        FormatError: Unknown or ambiguous encoding
        StructuralError: Malformed GML structure or coordinates
        CRSFormatError: Unresolvable CRS reference
        NamespaceError: GML element outside the supported namespaces
    """
    if isinstance(encoding, str):
        return _decode_string(encoding, xml_attributes, config)

    if isinstance(encoding, ET.Element):
        return _decode_gml(encoding, config)

    if isinstance(encoding, (list, tuple)):
        return _decode_content(encoding, xml_attributes, config)

    raise FormatError(f"Geometry encoding must be a string or XML content, got: {type(encoding).__name__}")


def find_out_of_band_srs(
    xml_attributes: Optional[Mapping[str, str]],
    config: DecoderConfig = DEFAULT_CONFIG,
) -> Optional[str]:
    """
    Read the CRS of a bare WKT value from the attribute value's XML attributes.

    Args:
        xml_attributes: Mapping of ``{namespace}local`` names to values

    Returns:
        The trimmed CRS reference, or None if none of the configured
        attribute names is present
    """
    if not xml_attributes:
        return None

    for name in config.srs_attribute_names:
        value = xml_attributes.get(name)
        if value and value.strip():
            return value.strip()

    logger.warning(f"Ignoring XML attributes without CRS information: {sorted(xml_attributes)}")
    return None


# ============================================================================
# String encodings
# ============================================================================

def _decode_string(
    encoding: str,
    xml_attributes: Optional[Mapping[str, str]],
    config: DecoderConfig,
) -> GeometryValue:
    encoding = encoding.strip()
    if not encoding:
        raise FormatError("Geometry encoding via String must not be empty")

    if encoding.startswith("{"):
        log("decode: GeoJSON")
        geometry, metadata = parse_geojson(encoding)
    elif encoding.startswith("<"):
        log("decode: GML string")
        try:
            root = ET.fromstring(encoding)
        except ET.ParseError as e:
            raise StructuralError(f"Invalid GML XML: {e}") from e
        return _decode_gml(root, config)
    else:
        log("decode: WKT")
        srs_name = find_out_of_band_srs(xml_attributes, config)
        geometry, metadata = parse_extended_wkt(encoding, srs_name, config)

    return _build_value(geometry, metadata)


# ============================================================================
# XML content
# ============================================================================

def _decode_content(
    content: Sequence[Any],
    xml_attributes: Optional[Mapping[str, str]],
    config: DecoderConfig,
) -> GeometryValue:
    if not content:
        raise FormatError("Invalid content for geometry datatype: empty")

    # <AttributeValue>POINT(1 2)</AttributeValue>
    if len(content) == 1 and isinstance(content[0], str):
        return _decode_string(content[0], xml_attributes, config)

    elements = [item for item in content if isinstance(item, ET.Element)]
    if not elements:
        raise FormatError("Unknown geometry encoding: no GML element in content")
    # Null wins over whatever follows it
    if _is_gml_null(elements[0]):
        return _decode_gml(elements[0], config)
    if len(elements) > 1:
        raise FormatError(f"Geometry content must contain exactly one GML element, found {len(elements)}")

    return _decode_gml(elements[0], config)


def _is_gml_null(elem: ET.Element) -> bool:
    return split_tag(elem.tag)[1].lower() == GML_NULL.lower()


def _decode_gml(elem: ET.Element, config: DecoderConfig) -> GeometryValue:
    namespace, name = split_tag(elem.tag)
    logger.debug(f"GML element: {name}, namespace: {namespace}")

    if _is_gml_null(elem):
        reason = first_text(elem)
        log(f"decode: GML Null ({reason})")
        metadata = GeometryMetadata(srid=NO_SRID, srs=NULL_SRS, null_reason=reason)
        return GeometryValue(GeometryFactory().create_empty(), metadata)

    if namespace in config.gml2_namespaces:
        log(f"decode: GML2 {name}")
    elif namespace in config.gml3_namespaces:
        log(f"decode: GML3 {name}")
    else:
        raise NamespaceError(f"Namespace is neither GML2 nor GML3: {namespace}")

    srs_name = find_srs_name(elem.attrib)
    if srs_name is None:
        srs_name = config.default_srs
        logger.debug(f"srs set to default: {srs_name}")
    else:
        logger.debug(f"srs from GML element: {srs_name}")

    srid = resolve_srid(srs_name)
    gf = GeometryFactory(srid=srid, quadrant_segments=config.quadrant_segments)
    geometry = GMLReader().read(elem, gf)

    return _build_value(geometry, GeometryMetadata(srid=srid, srs=srs_name, source_srs=srs_name))


def _build_value(geometry, metadata: GeometryMetadata) -> GeometryValue:
    value = GeometryValue(geometry, metadata)
    log(
        f"decoded {value.geometry.geom_type}: srid={value.srid} srs={value.srs}"
        f" (source {metadata.srid}, {metadata.srs})"
    )
    return value
