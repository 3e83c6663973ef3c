"""
GeoXACML geometry decoding module.

Decodes geometry attribute values (WKT / extended WKT, GeoJSON, GML 2 and
GML 3) into immutable GeometryValues in one canonical axis order, so that
equality and topology tests agree across mixed input formats.

Public API:
- decode(): host-facing entry point, raises InvalidAttributeValueError
- decode_geometry(): same, with the detailed error taxonomy
- GeometryValue: decoded geometry plus CRS metadata
- call_function(): evaluate an exposed function by URN
"""

from .config import DEFAULT_CONFIG, DecoderConfig, load_decoder_config
from .core.errors import (
    CRSFormatError,
    FormatError,
    GeometryDecodeError,
    IndeterminateEvaluationError,
    InvalidAttributeValueError,
    NamespaceError,
    StructuralError,
)
from .core.types import GeometryMetadata
from .dispatcher import decode, decode_geometry
from .functions import call_function
from .value import GeometryValue

__all__ = [
    "decode",
    "decode_geometry",
    "GeometryValue",
    "GeometryMetadata",
    "call_function",
    "DecoderConfig",
    "DEFAULT_CONFIG",
    "load_decoder_config",
    "GeometryDecodeError",
    "FormatError",
    "StructuralError",
    "CRSFormatError",
    "NamespaceError",
    "InvalidAttributeValueError",
    "IndeterminateEvaluationError",
]
