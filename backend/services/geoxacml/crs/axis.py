"""
Axis-order normalization.

All stored coordinates use one canonical order: longitude first, latitude
second (CRS84 / GeoJSON). An encoding tagged with a code stored latitude
first in the EPSG registry is swapped exactly once, when its GeometryValue is
constructed, and re-tagged with the longitude-first twin code.

⚠️ CRITICAL: swap_axes() is its own inverse. Calling it twice on the same
geometry silently restores the non-canonical order; only
normalize_axis_order() (called from GeometryValue construction) may apply it.
"""

import logging
from dataclasses import replace
from typing import Tuple

import shapely
from shapely.geometry.base import BaseGeometry

from ..core.constants import LAT_LON_TWINS
from ..core.types import GeometryMetadata
from .resolver import srs_name_for_srid

logger = logging.getLogger(__name__)


def needs_axis_swap(srid: int) -> bool:
    """True if ``srid`` denotes a latitude-first registry axis order."""
    return srid in LAT_LON_TWINS


def swap_axes(geometry: BaseGeometry) -> BaseGeometry:
    """
    Exchange x and y of every coordinate of every leaf in the tree.

    Z values are kept untouched.

    Args:
        geometry: Any shapely geometry, including nested collections

    Returns:
        New geometry with swapped axes (the input is not modified)
    """
    if geometry.is_empty:
        return geometry
    if geometry.has_z:
        return shapely.transform(geometry, lambda coords: coords[:, [1, 0, 2]], include_z=True)
    return shapely.transform(geometry, lambda coords: coords[:, [1, 0]])


def normalize_axis_order(
    geometry: BaseGeometry,
    metadata: GeometryMetadata,
) -> Tuple[BaseGeometry, GeometryMetadata]:
    """
    Bring a freshly decoded geometry into canonical axis order.

    Args:
        geometry: Geometry as decoded from its encoding
        metadata: Metadata carrying the resolved code of the encoding

    Returns:
        Tuple of (geometry, metadata). If a swap was applied, the metadata
        reports the canonical twin code and CRS name; ``source_srs`` keeps
        the reference text of the encoding.
    """
    if not needs_axis_swap(metadata.srid):
        return geometry, metadata

    canonical_srid = LAT_LON_TWINS[metadata.srid]
    logger.debug(f"Swapping axes: SRID {metadata.srid} -> {canonical_srid}")

    swapped = swap_axes(geometry)
    canonical = replace(
        metadata,
        srid=canonical_srid,
        srs=srs_name_for_srid(canonical_srid),
        source_srs=metadata.source_srs or metadata.srs,
    )
    return swapped, canonical
