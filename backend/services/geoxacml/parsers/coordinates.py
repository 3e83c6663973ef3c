"""
Coordinate parsing utilities for GML coordinate elements.

This module turns the text content of gml:posList, gml:pos,
gml:lowerCorner/upperCorner and GML 2 gml:coordinates into coordinate
fragments. Unlike a lenient reader, every malformed token is an error:
decoding must be a deterministic function of its input.
"""

import re
from typing import List, Optional

import numpy as np

from ..core.constants import SUPPORTED_DIMENSIONS
from ..core.errors import StructuralError
from ..core.types import Coordinate, CoordinateSequence

# Tabs and line breaks are folded into single spaces before tokenizing
_LINE_BREAKS_RE = re.compile(r"[\t\n\r]+")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """
    Collapse tabs, line breaks and space runs into single spaces.

    Examples:
        >>> normalize_whitespace("  1.0\\t2.0\\n 3.0   4.0 ")
        '1.0 2.0 3.0 4.0'
    """
    text = _LINE_BREAKS_RE.sub(" ", text.strip())
    return _WHITESPACE_RE.sub(" ", text)


def _to_floats(tokens: List[str], element: str) -> List[float]:
    try:
        return [float(t) for t in tokens]
    except ValueError as e:
        raise StructuralError(f"Cannot parse {element}: non-numeric token ({e})") from e


def parse_dimension(value: Optional[str], default: int = 2) -> int:
    """
    Parse a dimension / srsDimension attribute value.

    Raises:
        StructuralError: If the value is not 2 or 3
    """
    if value is None or not value.strip():
        return default
    try:
        dimension = int(value.strip())
    except ValueError as e:
        raise StructuralError(f"Invalid coordinate dimension: {value}") from e
    if dimension not in SUPPORTED_DIMENSIONS:
        raise StructuralError(f"Coordinate dimension must be 2 or 3, got: {dimension}")
    return dimension


def parse_poslist(text: Optional[str], dimension: int = 2) -> CoordinateSequence:
    """
    Parse the text of a gml:posList element into a coordinate sequence.

    Args:
        text: Whitespace-separated ordinates
        dimension: Tuple size (2 or 3)

    Returns:
        CoordinateSequence with one row per tuple

    Raises:
        StructuralError: If the text is empty, contains a non-numeric token,
            or its token count is not a multiple of ``dimension``

    Examples:
        >>> parse_poslist("0 0 10 0 10 10 0 0").as_tuples()
        [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 0.0)]

        >>> parse_poslist("1 2 3 4 5 6", dimension=3).as_tuples()
        [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)]
    """
    if text is None or not text.strip():
        raise StructuralError("Cannot create a coordinate sequence without text to parse")

    tokens = normalize_whitespace(text).split(" ")
    if len(tokens) % dimension != 0:
        raise StructuralError(
            f"Cannot create a coordinate sequence: {len(tokens)} ordinates "
            f"do not form tuples of dimension {dimension}"
        )

    values = np.array(_to_floats(tokens, "posList"), dtype=float).reshape(-1, dimension)
    return CoordinateSequence(values)


def parse_pos(text: Optional[str], element: str = "pos") -> Coordinate:
    """
    Parse the text of a gml:pos, gml:lowerCorner or gml:upperCorner element.

    Args:
        text: One to three whitespace-separated numbers
        element: Element name used in error messages

    Returns:
        Coordinate (x, optional y, optional z)

    Raises:
        StructuralError: If the text is empty, has more than three numbers
            or contains a non-numeric token

    Examples:
        >>> parse_pos("38.889444 -77.035278")
        Coordinate(x=38.889444, y=-77.035278, z=None)
    """
    if text is None or not text.strip():
        raise StructuralError(f"Cannot create a coordinate from empty {element}")

    tokens = normalize_whitespace(text).split(" ")
    if len(tokens) > 3:
        raise StructuralError(f"Cannot create a coordinate from {len(tokens)} ordinates in {element}")

    return Coordinate(*_to_floats(tokens, element))


def parse_gml2_coordinates(
    text: Optional[str],
    decimal: str = ".",
    cs: str = ",",
    ts: str = " ",
) -> CoordinateSequence:
    """
    Parse the text of a GML 2 gml:coordinates element.

    Tuples are separated by ``ts`` (any whitespace run when ``ts`` is a
    space), ordinates inside a tuple by ``cs``.

    Raises:
        StructuralError: If tuples are empty, mix dimensions or are not 2D/3D

    Examples:
        >>> parse_gml2_coordinates("0,0 10,0 10,10").as_tuples()
        [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]
    """
    if text is None or not text.strip():
        raise StructuralError("Cannot create a coordinate sequence without text to parse")

    text = text.strip()
    if ts.isspace():
        tuples = _WHITESPACE_RE.split(text)
    else:
        tuples = [t.strip() for t in text.split(ts) if t.strip()]

    rows: List[List[float]] = []
    for item in tuples:
        ordinates = [o.strip().replace(decimal, ".") for o in item.split(cs)]
        rows.append(_to_floats(ordinates, "coordinates"))

    dimensions = {len(row) for row in rows}
    if len(dimensions) != 1 or next(iter(dimensions)) not in SUPPORTED_DIMENSIONS:
        raise StructuralError(f"Inconsistent or unsupported tuple sizes in coordinates: {sorted(dimensions)}")

    return CoordinateSequence(np.array(rows, dtype=float))
