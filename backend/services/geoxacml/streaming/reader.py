"""
GML event sources and reader.

Feeds GMLHandler from either a serialized GML fragment (incremental pull
parsing) or from an element
that the host has already parsed (tree walk). Both sources produce the same
event sequence, so one handler serves both.

Events:
    ("start", name, attrs)  element opened
    ("text", text)          character data of the current element
    ("ignorable", text)     whitespace-only character data
    ("end", name)           element closed
"""

from typing import Iterator, Tuple, Union
import xml.etree.ElementTree as ET

from shapely.geometry.base import BaseGeometry

from ..core.errors import StructuralError
from ..core.factory import GeometryFactory
from .handler import GMLHandler

GMLEvent = Tuple

GMLSource = Union[str, ET.Element]


def _text_event(text: str) -> GMLEvent:
    if text.strip():
        return ("text", text)
    return ("ignorable", text)


def iter_element_events(elem: ET.Element) -> Iterator[GMLEvent]:
    """
    Walk an in-memory element and yield parse events in document order.

    Args:
        elem: Root of the GML geometry (ElementTree element)

    Yields:
        Parse event tuples (see module docstring)
    """
    yield ("start", elem.tag, dict(elem.attrib))
    if elem.text:
        yield _text_event(elem.text)
    for child in elem:
        yield from iter_element_events(child)
        if child.tail:
            yield _text_event(child.tail)
    yield ("end", elem.tag)


def iter_string_events(gml: str) -> Iterator[GMLEvent]:
    """
    Pull-parse a serialized GML fragment and yield parse events.

    Character data is complete only when an element ends, so the text of an
    element (its own text plus the tails of its children) is emitted right
    before its end event.

    Raises:
        StructuralError: If the XML is not well-formed
    """
    parser = ET.XMLPullParser(events=("start", "end"))
    try:
        parser.feed(gml)
        parser.close()
    except ET.ParseError as e:
        raise StructuralError(f"Invalid GML XML: {e}") from e

    for event, elem in parser.read_events():
        if event == "start":
            yield ("start", elem.tag, dict(elem.attrib))
        else:
            if elem.text:
                yield _text_event(elem.text)
            for child in elem:
                if child.tail:
                    yield _text_event(child.tail)
            yield ("end", elem.tag)


def iter_events(source: GMLSource) -> Iterator[GMLEvent]:
    if isinstance(source, ET.Element):
        return iter_element_events(source)
    return iter_string_events(source)


def drive(handler: GMLHandler, events: Iterator[GMLEvent]) -> GMLHandler:
    """Dispatch every event to the handler."""
    for event in events:
        kind = event[0]
        if kind == "start":
            handler.start_element(event[1], event[2])
        elif kind == "text":
            handler.characters(event[1])
        elif kind == "ignorable":
            handler.ignorable_whitespace(event[1])
        else:
            handler.end_element()
    return handler


class GMLReader:
    """
    Reads one GML geometry into a shapely geometry.

    If the source holds several top-level geometries, a geometry collection
    is returned.

    Example:
        ```python
        reader = GMLReader()
        polygon = reader.read(
            '<gml:Polygon xmlns:gml="http://www.opengis.net/gml/3.2">'
            '<gml:exterior><gml:LinearRing>'
            '<gml:posList>0 0 10 0 10 10 0 0</gml:posList>'
            '</gml:LinearRing></gml:exterior></gml:Polygon>'
        )
        ```
    """

    def read(self, source: GMLSource, gf: GeometryFactory = None) -> BaseGeometry:
        """
        Args:
            source: Serialized GML or an ElementTree element
            gf: Factory context; a default (SRID 0) factory when None

        Raises:
            StructuralError: On malformed XML or GML structure
        """
        handler = GMLHandler(gf or GeometryFactory())
        drive(handler, iter_events(source))
        return handler.get_geometry()
