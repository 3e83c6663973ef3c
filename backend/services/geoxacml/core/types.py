"""
Type definitions for the geometry decoding pipeline.

This module provides the core data structures shared by the parsers, the
axis normalizer and the geometry value wrapper.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

import numpy as np
from shapely.geometry.base import BaseGeometry


class Coordinate(NamedTuple):
    """
    One numeric coordinate produced by pos, lowerCorner, upperCorner or coord.

    Missing ordinates follow the geometry-library convention: ``y`` defaults
    to 0.0 and ``z`` is None for 2D coordinates.
    """

    x: float
    y: float = 0.0
    z: Optional[float] = None

    def as_tuple(self) -> Tuple[float, ...]:
        if self.z is None:
            return (self.x, self.y)
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class CoordinateSequence:
    """
    Ordered block of coordinates parsed from a posList or coordinates element.

    Attributes:
        values: Array of shape (N, dimension), dimension is 2 or 3
    """

    values: np.ndarray

    @property
    def dimension(self) -> int:
        return int(self.values.shape[1])

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def coordinate(self, index: int) -> Coordinate:
        row = [float(v) for v in self.values[index]]
        return Coordinate(*row)

    def as_tuples(self) -> List[Tuple[float, ...]]:
        return [tuple(float(v) for v in row) for row in self.values]


# A fragment is the value one closed element hands to its parent frame
GeometryFragment = Union[Coordinate, CoordinateSequence, BaseGeometry, str, float, None]


@dataclass
class ElementFrame:
    """
    Stack record for one open XML element.

    Attributes:
        strategy: Construction strategy chosen on element-open (None for the root)
        name: Local element name as it appeared in the document
        attrs: Read-only snapshot of the element attributes
        text: Accumulated character data
        children: Fragments produced by closed child elements, in order
    """

    strategy: Optional[Callable[["ElementFrame", Any], GeometryFragment]]
    name: str = ""
    attrs: Dict[str, str] = field(default_factory=dict)
    text: List[str] = field(default_factory=list)
    children: List[GeometryFragment] = field(default_factory=list)

    def add_text(self, value: str) -> None:
        self.text.append(value)

    def keep(self, fragment: GeometryFragment) -> None:
        self.children.append(fragment)

    @property
    def text_content(self) -> str:
        return "".join(self.text)


@dataclass(frozen=True)
class GeometryMetadata:
    """
    CRS metadata attached to a decoded geometry.

    Attributes:
        srid: Resolved signed CRS code (sign encodes axis-order convention)
        srs: CRS name the stored coordinates are expressed in
        source_srs: CRS reference text exactly as found in the encoding
        null_reason: Set only for GML Null / empty encodings
    """

    srid: int
    srs: str
    source_srs: Optional[str] = None
    null_reason: Optional[str] = None

    @property
    def is_null(self) -> bool:
        return self.srs.upper() == "NULL"
