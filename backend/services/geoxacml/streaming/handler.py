"""
Stack-driven GML geometry builder.

GMLHandler consumes element-open / text / element-close events and builds
one geometry bottom-up. Each open element owns an ElementFrame; when the
element closes, its strategy turns the frame into exactly one fragment that
is handed to the parent frame. The handler is owned by a single decode call.
"""

import logging
from typing import List, Mapping, Optional

from shapely.geometry.base import BaseGeometry

from ..core.errors import StructuralError
from ..core.factory import GeometryFactory
from ..core.types import ElementFrame
from ..utils.xml_parser import local_name
from .strategies import find_strategy

logger = logging.getLogger(__name__)


class GMLHandler:
    """
    Builds a geometry from a stream of GML parse events.

    Example:
        ```python
        handler = GMLHandler(GeometryFactory(srid=4326))
        handler.start_element("gml:Point", {})
        handler.start_element("gml:pos", {})
        handler.characters("38.889444 -77.035278")
        handler.end_element()
        handler.end_element()
        point = handler.get_geometry()
        ```
    """

    def __init__(self, gf: GeometryFactory):
        self.gf = gf
        # Root frame collects the top-level geometries
        self._stack: List[ElementFrame] = [ElementFrame(strategy=None)]

    @property
    def depth(self) -> int:
        return len(self._stack)

    # ------------------------------------------------------------------
    # Parse events
    # ------------------------------------------------------------------

    def start_element(self, name: str, attrs: Optional[Mapping[str, str]] = None) -> None:
        frame = ElementFrame(
            strategy=find_strategy(name),
            name=local_name(name),
            attrs=dict(attrs or {}),
        )
        self._stack.append(frame)

    def characters(self, text: str) -> None:
        self._stack[-1].add_text(text)

    def ignorable_whitespace(self, text: str) -> None:
        # Keeps neighbouring tokens apart without copying the whitespace run
        self._stack[-1].add_text(" ")

    def end_element(self) -> None:
        if len(self._stack) < 2:
            raise StructuralError("Unbalanced GML: element closed without being opened")

        frame = self._stack.pop()
        if frame.strategy is None:
            raise StructuralError(f"Unsupported GML element: {frame.name}")

        fragment = frame.strategy(frame, self.gf)
        self._stack[-1].keep(fragment)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def is_geometry_complete(self) -> bool:
        """True once every opened element is closed and a geometry was built."""
        return len(self._stack) == 1 and len(self._stack[0].children) > 0

    def get_geometry(self) -> BaseGeometry:
        """
        Return the geometry built from the consumed events.

        Several top-level geometries are combined into a geometry collection.

        Raises:
            StructuralError: If elements are still open, nothing was built,
                or a top-level fragment is not a geometry
        """
        if len(self._stack) > 1:
            raise StructuralError(
                f"Parse did not complete as expected, there are {len(self._stack)} elements on the stack"
            )

        children = self._stack[0].children
        if not children:
            raise StructuralError("No geometry found in GML content")
        if not all(isinstance(c, BaseGeometry) for c in children):
            raise StructuralError("GML content does not describe a geometry")

        if len(children) == 1:
            return children[0]

        logger.debug(f"Combining {len(children)} top-level geometries into a collection")
        return self.gf.create_geometry_collection(children)
