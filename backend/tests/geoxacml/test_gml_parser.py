"""
Unit tests for the GML streaming parser

Tests cover:
1. Stack handler event processing
2. Strategy arity rules for every element
3. GML 2 element names
4. Event sources (pull parser and element walk)
5. Error handling
"""

import pytest
import xml.etree.ElementTree as ET
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from shapely.geometry import Point

from services.geoxacml.core.errors import StructuralError
from services.geoxacml.core.factory import GeometryFactory
from services.geoxacml.streaming import (
    GMLHandler,
    GMLReader,
    STRATEGIES,
    element_srid,
    find_strategy,
    iter_element_events,
    iter_string_events,
)

GML3 = 'xmlns:gml="http://www.opengis.net/gml/3.2"'
GML2 = 'xmlns:gml="http://www.opengis.net/gml"'


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def reader():
    return GMLReader()


@pytest.fixture
def gf():
    return GeometryFactory(srid=25832)


def read(reader, xml):
    return reader.read(xml)


# ============================================================================
# Handler Tests
# ============================================================================

def test_handler_builds_point(gf):
    """Test the handler driven by hand-made events."""
    handler = GMLHandler(gf)
    handler.start_element("gml:Point", {})
    handler.start_element("gml:pos", {})
    handler.characters("38.889444 -77.035278")
    handler.end_element()
    assert not handler.is_geometry_complete()
    handler.end_element()

    assert handler.is_geometry_complete()
    point = handler.get_geometry()
    assert (point.x, point.y) == (38.889444, -77.035278)


def test_handler_ignorable_whitespace_separates_tokens(gf):
    """Test that ignorable whitespace is kept as one space."""
    handler = GMLHandler(gf)
    handler.start_element("posList", {})
    handler.characters("1 2")
    handler.ignorable_whitespace("\n\t  ")
    handler.characters("3 4")
    handler.end_element()

    sequence = handler._stack[0].children[0]
    assert sequence.as_tuples() == [(1.0, 2.0), (3.0, 4.0)]


def test_handler_unbalanced_close(gf):
    """Test closing an element that was never opened."""
    handler = GMLHandler(gf)
    with pytest.raises(StructuralError):
        handler.end_element()


def test_handler_incomplete_parse(gf):
    """Test that open elements at completion are an error."""
    handler = GMLHandler(gf)
    handler.start_element("gml:Point", {})
    assert handler.depth == 2

    with pytest.raises(StructuralError):
        handler.get_geometry()


def test_handler_nothing_built(gf):
    """Test completion without any geometry."""
    with pytest.raises(StructuralError):
        GMLHandler(gf).get_geometry()


def test_handler_unsupported_element(gf):
    """Test that elements outside the strategy table are rejected."""
    handler = GMLHandler(gf)
    handler.start_element("gml:Curve", {})
    with pytest.raises(StructuralError, match="Unsupported GML element"):
        handler.end_element()


def test_handler_combines_top_level_geometries(gf):
    """Test that several top-level geometries become a collection."""
    handler = GMLHandler(gf)
    for text in ("1 2", "3 4"):
        handler.start_element("Point", {})
        handler.start_element("pos", {})
        handler.characters(text)
        handler.end_element()
        handler.end_element()

    geometry = handler.get_geometry()
    assert geometry.geom_type == "GeometryCollection"
    assert len(geometry.geoms) == 2


def test_handler_top_level_coordinate_is_not_a_geometry(gf):
    """Test that a bare pos is not a geometry result."""
    handler = GMLHandler(gf)
    handler.start_element("pos", {})
    handler.characters("1 2")
    handler.end_element()

    with pytest.raises(StructuralError):
        handler.get_geometry()


# ============================================================================
# Strategy Table Tests
# ============================================================================

def test_strategy_lookup_is_namespace_and_case_insensitive():
    """Test qualified and local names select the same strategy."""
    strategy = find_strategy("Point")
    assert strategy is not None
    assert find_strategy("{http://www.opengis.net/gml/3.2}Point") is strategy
    assert find_strategy("gml:POINT") is strategy
    assert find_strategy("Curve") is None
    assert find_strategy(None) is None


def test_strategy_table_is_read_only():
    """Test that the shared table cannot be mutated."""
    with pytest.raises(TypeError):
        STRATEGIES["curve"] = None


@pytest.mark.parametrize("attrs,expected", [
    ({}, 25832),
    ({"srsName": "4326"}, 4326),
    ({"{http://www.opengis.net/gml/3.2}srsName": "31467"}, 31467),
    ({"srsName": "http://www.opengis.net/gml/srs/epsg.xml#4326"}, 4326),
    ({"srsName": "EPSG:4326"}, 25832),
])
def test_element_srid(attrs, expected):
    """Test per-element SRID resolution with fallback to the factory SRID."""
    assert element_srid(attrs, 25832) == expected


# ============================================================================
# Primitive Geometry Tests
# ============================================================================

def test_point_from_pos(reader):
    """Test Point with pos."""
    point = read(reader, f'<gml:Point {GML3}><gml:pos>1 2</gml:pos></gml:Point>')
    assert point.geom_type == "Point"
    assert (point.x, point.y) == (1.0, 2.0)


def test_point_from_3d_pos(reader):
    """Test Point with 3D pos."""
    point = read(reader, f'<gml:Point {GML3}><gml:pos>1 2 3</gml:pos></gml:Point>')
    assert point.has_z
    assert point.z == 3.0


def test_point_with_two_positions(reader):
    """Test that Point takes exactly one coordinate."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:Point {GML3}><gml:pos>1 2</gml:pos><gml:pos>3 4</gml:pos></gml:Point>')


def test_line_string_from_poslist(reader):
    """Test LineString with posList."""
    line = read(reader, f'<gml:LineString {GML3}><gml:posList>0 0 1 1 2 0</gml:posList></gml:LineString>')
    assert list(line.coords) == [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]


def test_line_string_from_positions(reader):
    """Test LineString with individual pos children."""
    line = read(
        reader,
        f'<gml:LineString {GML3}><gml:pos>0 0</gml:pos><gml:pos>5 5</gml:pos></gml:LineString>',
    )
    assert len(line.coords) == 2


def test_line_string_with_single_position(reader):
    """Test that a single pos is not a line."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:LineString {GML3}><gml:pos>0 0</gml:pos></gml:LineString>')


def test_line_string_3d_poslist(reader):
    """Test srsDimension on posList."""
    line = read(
        reader,
        f'<gml:LineString {GML3}><gml:posList srsDimension="3">0 0 0 1 1 1</gml:posList></gml:LineString>',
    )
    assert line.has_z
    assert list(line.coords)[1] == (1.0, 1.0, 1.0)


def test_linear_ring_must_be_closed(reader):
    """Test that an open ring is rejected."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:LinearRing {GML3}><gml:posList>0 0 1 0 1 1 0 1</gml:posList></gml:LinearRing>')


def test_linear_ring_too_few_positions(reader):
    """Test that a ring needs at least four individual positions."""
    with pytest.raises(StructuralError):
        read(
            reader,
            f'<gml:LinearRing {GML3}><gml:pos>0 0</gml:pos><gml:pos>1 0</gml:pos>'
            f'<gml:pos>0 0</gml:pos></gml:LinearRing>',
        )


def test_polygon_with_hole(reader):
    """Test Polygon with exterior and interior rings."""
    polygon = read(reader, f'''<gml:Polygon {GML3}>
      <gml:exterior><gml:LinearRing>
        <gml:posList>0 0 10 0 10 10 0 10 0 0</gml:posList>
      </gml:LinearRing></gml:exterior>
      <gml:interior><gml:LinearRing>
        <gml:posList>2 2 4 2 4 4 2 2</gml:posList>
      </gml:LinearRing></gml:interior>
    </gml:Polygon>''')

    assert polygon.geom_type == "Polygon"
    assert len(polygon.interiors) == 1
    assert polygon.area == 100.0 - 2.0


def test_polygon_without_ring(reader):
    """Test that Polygon needs an exterior."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:Polygon {GML3}></gml:Polygon>')


def test_exterior_with_two_rings(reader):
    """Test that wrappers accept exactly one child."""
    ring = '<gml:LinearRing><gml:posList>0 0 1 0 1 1 0 0</gml:posList></gml:LinearRing>'
    with pytest.raises(StructuralError):
        read(reader, f'<gml:Polygon {GML3}><gml:exterior>{ring}{ring}</gml:exterior></gml:Polygon>')


def test_envelope_from_corners(reader):
    """Test Envelope with lowerCorner/upperCorner."""
    polygon = read(
        reader,
        f'<gml:Envelope {GML3}><gml:lowerCorner>0 0</gml:lowerCorner>'
        f'<gml:upperCorner>10 5</gml:upperCorner></gml:Envelope>',
    )
    assert polygon.geom_type == "Polygon"
    assert polygon.bounds == (0.0, 0.0, 10.0, 5.0)
    assert len(polygon.exterior.coords) == 5


def test_envelope_from_poslist(reader):
    """Test Envelope with a two-position coordinate sequence."""
    polygon = read(reader, f'<gml:Envelope {GML3}><gml:posList>1 2 3 4</gml:posList></gml:Envelope>')
    assert polygon.bounds == (1.0, 2.0, 3.0, 4.0)


@pytest.mark.parametrize("pos_list", ["1 2", "1 2 3 4 5 6"])
def test_envelope_poslist_needs_exactly_two_positions(reader, pos_list):
    """Test that an envelope posList with one or three positions is rejected."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:Envelope {GML3}><gml:posList>{pos_list}</gml:posList></gml:Envelope>')


def test_circle_by_center_point(reader):
    """Test CircleByCenterPoint buffers the center by the radius."""
    circle = read(
        reader,
        f'<gml:CircleByCenterPoint {GML3}><gml:pos>0 0</gml:pos>'
        f'<gml:radius uom="m">10</gml:radius></gml:CircleByCenterPoint>',
    )
    expected = Point(0, 0).buffer(10.0, quad_segs=50)
    assert circle.equals_exact(expected, tolerance=0.0)


def test_circle_without_radius(reader):
    """Test that a circle needs center and radius."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:CircleByCenterPoint {GML3}><gml:pos>0 0</gml:pos></gml:CircleByCenterPoint>')


def test_circle_with_invalid_radius(reader):
    """Test that the radius text must be numeric."""
    with pytest.raises(StructuralError):
        read(
            reader,
            f'<gml:CircleByCenterPoint {GML3}><gml:pos>0 0</gml:pos>'
            f'<gml:radius>ten</gml:radius></gml:CircleByCenterPoint>',
        )


# ============================================================================
# Aggregate Geometry Tests
# ============================================================================

def test_multi_point(reader):
    """Test MultiPoint with pointMember wrappers."""
    multi = read(reader, f'''<gml:MultiPoint {GML3}>
      <gml:pointMember><gml:Point><gml:pos>1 2</gml:pos></gml:Point></gml:pointMember>
      <gml:pointMember><gml:Point><gml:pos>3 4</gml:pos></gml:Point></gml:pointMember>
    </gml:MultiPoint>''')
    assert multi.geom_type == "MultiPoint"
    assert len(multi.geoms) == 2


def test_multi_polygon_rejects_other_members(reader):
    """Test that aggregates must be homogeneous."""
    with pytest.raises(StructuralError):
        read(reader, f'''<gml:MultiPolygon {GML3}>
          <gml:polygonMember><gml:Point><gml:pos>1 2</gml:pos></gml:Point></gml:polygonMember>
        </gml:MultiPolygon>''')


def test_multi_line_string(reader):
    """Test MultiLineString."""
    multi = read(reader, f'''<gml:MultiLineString {GML3}>
      <gml:lineStringMember><gml:LineString><gml:posList>0 0 1 1</gml:posList></gml:LineString></gml:lineStringMember>
    </gml:MultiLineString>''')
    assert multi.geom_type == "MultiLineString"


def test_multi_geometry_mixed_members(reader):
    """Test MultiGeometry with members of different types."""
    collection = read(reader, f'''<gml:MultiGeometry {GML3}>
      <gml:geometryMember><gml:Point><gml:pos>1 2</gml:pos></gml:Point></gml:geometryMember>
      <gml:geometryMember><gml:LineString><gml:posList>0 0 1 1</gml:posList></gml:LineString></gml:geometryMember>
    </gml:MultiGeometry>''')
    assert collection.geom_type == "GeometryCollection"
    assert [g.geom_type for g in collection.geoms] == ["Point", "LineString"]


def test_empty_multi_point(reader):
    """Test that aggregates need at least one member."""
    with pytest.raises(StructuralError):
        read(reader, f'<gml:MultiPoint {GML3}></gml:MultiPoint>')


# ============================================================================
# GML 2 Tests
# ============================================================================

def test_gml2_polygon_with_coordinates(reader):
    """Test GML 2 outerBoundaryIs / innerBoundaryIs with coordinates."""
    polygon = read(reader, f'''<gml:Polygon {GML2}>
      <gml:outerBoundaryIs><gml:LinearRing>
        <gml:coordinates>0,0 10,0 10,10 0,10 0,0</gml:coordinates>
      </gml:LinearRing></gml:outerBoundaryIs>
      <gml:innerBoundaryIs><gml:LinearRing>
        <gml:coordinates>2,2 4,2 4,4 2,2</gml:coordinates>
      </gml:LinearRing></gml:innerBoundaryIs>
    </gml:Polygon>''')
    assert len(polygon.interiors) == 1


def test_gml2_point_with_coord(reader):
    """Test GML 2 coord with X/Y/Z children."""
    point = read(reader, f'<gml:Point {GML2}><gml:coord><gml:X>1</gml:X><gml:Y>2</gml:Y><gml:Z>3</gml:Z></gml:coord></gml:Point>')
    assert tuple(point.coords[0]) == (1.0, 2.0, 3.0)


def test_gml2_box(reader):
    """Test GML 2 Box with two coord children."""
    polygon = read(reader, f'''<gml:Box {GML2}>
      <gml:coord><gml:X>0</gml:X><gml:Y>0</gml:Y></gml:coord>
      <gml:coord><gml:X>2</gml:X><gml:Y>3</gml:Y></gml:coord>
    </gml:Box>''')
    assert polygon.bounds == (0.0, 0.0, 2.0, 3.0)


def test_gml2_coordinates_custom_separators(reader):
    """Test cs/ts attributes on coordinates."""
    line = read(reader, f'<gml:LineString {GML2}><gml:coordinates cs=" " ts=";">0 0;1 1;2 2</gml:coordinates></gml:LineString>')
    assert len(line.coords) == 3


def test_gml2_and_gml3_build_same_geometry(reader):
    """Test that both generations give exactly the same geometry."""
    gml2 = read(reader, f'<gml:LineString {GML2}><gml:coordinates>0,0 1,1</gml:coordinates></gml:LineString>')
    gml3 = read(reader, f'<gml:LineString {GML3}><gml:posList>0 0 1 1</gml:posList></gml:LineString>')
    assert gml2.equals_exact(gml3, tolerance=0.0)


# ============================================================================
# Event Source Tests
# ============================================================================

def test_string_and_element_sources_agree(reader):
    """Test that both event sources build the same geometry."""
    xml = f'''<gml:Polygon {GML3}>
      <gml:exterior><gml:LinearRing><gml:posList>
        0 0 10 0
        10 10 0 0
      </gml:posList></gml:LinearRing></gml:exterior>
    </gml:Polygon>'''

    from_string = reader.read(xml)
    from_element = reader.read(ET.fromstring(xml))
    assert from_string.equals_exact(from_element, tolerance=0.0)


def test_element_events_order():
    """Test the event sequence of the tree walk."""
    elem = ET.fromstring(f'<gml:Point {GML3}><gml:pos>1 2</gml:pos></gml:Point>')
    kinds = [event[0] for event in iter_element_events(elem)]
    assert kinds == ["start", "start", "text", "end", "end"]


def test_string_events_whitespace_is_ignorable():
    """Test that whitespace-only text is reported as ignorable."""
    events = list(iter_string_events(f'<gml:Point {GML3}>\n  <gml:pos>1 2</gml:pos>\n</gml:Point>'))
    kinds = [event[0] for event in events]

    assert "ignorable" in kinds
    assert ("text", "1 2") in events


def test_malformed_xml(reader):
    """Test that XML syntax errors are structural errors."""
    with pytest.raises(StructuralError):
        reader.read(f'<gml:Point {GML3}><gml:pos>1 2</gml:Point>')


def test_reader_uses_factory_srid():
    """Test that geometries inherit the SRID of the factory."""
    import shapely

    point = GMLReader().read(f'<gml:Point {GML3}><gml:pos>1 2</gml:pos></gml:Point>', GeometryFactory(srid=31467))
    assert shapely.get_srid(point) == 31467
