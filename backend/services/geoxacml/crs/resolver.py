"""
CRS reference resolution.

Maps a CRS/SRS reference string to the signed code used throughout the
decoder. Positive codes are EPSG codes in registry axis order; CRS84_SRID
stands for "geographic, longitude/latitude".
"""

import re
from typing import Optional

from ..core.constants import CRS84_ALIASES, CRS84_SRID, DEFAULT_SRS, SRS_SEPARATORS
from ..core.errors import CRSFormatError

_SEPARATOR_RE = re.compile(SRS_SEPARATORS)
_CODE_RE = re.compile(r"\d+")


def resolve_srid(srs_name: Optional[str]) -> int:
    """
    Resolve a CRS reference to its signed code.

    The reference is split on ``:``, ``/`` and ``,``; only the last token is
    significant.

    Args:
        srs_name: CRS reference such as 'EPSG:4326',
            'urn:ogc:def:crs:OGC::CRS84', 'http://www.opengis.net/def/crs/EPSG/0/4326',
            'WGS84' or '4326'

    Returns:
        CRS84_SRID for the CRS84 family, otherwise the EPSG code

    Raises:
        CRSFormatError: If the last token is neither an alias nor an integer

    Examples:
        >>> resolve_srid("EPSG:4326")
        4326
        >>> resolve_srid("urn:ogc:def:crs:OGC::CRS84")
        -4326
        >>> resolve_srid("84")
        -4326
    """
    if srs_name is None:
        raise CRSFormatError("SRS format exception: missing CRS reference")

    code = _SEPARATOR_RE.split(srs_name.strip())[-1].strip()

    if code.lower() in CRS84_ALIASES:
        return CRS84_SRID

    if _CODE_RE.fullmatch(code):
        return int(code)

    raise CRSFormatError(f"SRS format exception: {srs_name}")


def srs_name_for_srid(srid: int) -> str:
    """
    Build a CRS reference that resolves back to ``srid``.

    Examples:
        >>> srs_name_for_srid(-4326)
        'urn:ogc:def:crs:OGC::CRS84'
        >>> srs_name_for_srid(25832)
        'EPSG:25832'
    """
    if srid == CRS84_SRID:
        return DEFAULT_SRS
    return f"EPSG:{srid}"
