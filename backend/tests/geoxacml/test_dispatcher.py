"""
Unit tests for the format dispatcher

Tests cover:
1. Routing of strings, elements and content lists
2. Cross-format axis-order agreement
3. GML Null and namespace handling
4. Out-of-band CRS attributes
5. Host-facing error contract
6. Decode trace
"""

import io
import logging
import pytest
import xml.etree.ElementTree as ET
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from services.geoxacml import (
    CRSFormatError,
    FormatError,
    GeometryValue,
    InvalidAttributeValueError,
    NamespaceError,
    StructuralError,
    decode,
    decode_geometry,
)
from services.geoxacml.core.constants import CRS84_SRID, CRS_ATTRIBUTE, DEFAULT_SRS, SRS_ATTRIBUTE
from services.geoxacml.utils.logging import close_log_file, get_log_file, set_log_file

WASHINGTON_EWKT = "SRID=4326;POINT(38.889444 -77.035278)"
WASHINGTON_GEOJSON = '{ "type": "Point", "coordinates": [-77.035278, 38.889444] }'

GML3_NS = "http://www.opengis.net/gml/3.2"


def gml(xml):
    return ET.fromstring(xml)


# ============================================================================
# Cross-Format Agreement Tests
# ============================================================================

def test_ewkt_and_geojson_agree():
    """Test that EPSG:4326 (lat/lon) and GeoJSON (lon/lat) give the same value."""
    ewkt = decode(WASHINGTON_EWKT)
    geojson = decode(WASHINGTON_GEOJSON)

    assert ewkt.exact_equals(geojson)
    assert ewkt == geojson
    assert ewkt.srid == geojson.srid == CRS84_SRID


def test_ewkt_is_stored_longitude_first():
    """Test the canonical storage order."""
    value = decode(WASHINGTON_EWKT)

    assert (value.geometry.x, value.geometry.y) == (-77.035278, 38.889444)
    assert value.srs == DEFAULT_SRS
    assert value.metadata.source_srs == "EPSG:4326"


def test_swapped_ewkt_does_not_match():
    """Test that axes swapped relative to the declared CRS do not match."""
    wrong = decode("SRID=4326;POINT(-77.035278 38.889444)")
    assert not wrong.exact_equals(decode(WASHINGTON_GEOJSON))


def test_gml_epsg_4326_matches_ewkt():
    """Test a GML point declared in EPSG:4326 registry order."""
    value = decode([gml(
        f'<gml:Point xmlns:gml="{GML3_NS}" srsName="EPSG:4326">'
        '<gml:pos>38.889444 -77.035278</gml:pos></gml:Point>'
    )])
    assert value.exact_equals(decode(WASHINGTON_EWKT))


def test_gml_epsg_4326_urn_matches_ewkt():
    """Test the URN form of EPSG:4326 on a GML 2 point."""
    value = decode([gml(
        '<gml:Point xmlns:gml="http://www.opengis.net/gml" srsName="urn:ogc:def:crs:EPSG::4326">'
        '<gml:coordinates>38.889444,-77.035278</gml:coordinates></gml:Point>'
    )])
    assert value.exact_equals(decode(WASHINGTON_EWKT))


def test_gml_crs84_matches_geojson():
    """Test a GML point without srsName is CRS84 (lon/lat)."""
    value = decode([gml(
        f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>-77.035278 38.889444</gml:pos></gml:Point>'
    )])
    assert value.srid == CRS84_SRID
    assert value.exact_equals(decode(WASHINGTON_GEOJSON))


def test_gml_swapped_axes_do_not_match():
    """Test that lon/lat coordinates declared as EPSG:4326 do not match."""
    value = decode([gml(
        f'<gml:Point xmlns:gml="{GML3_NS}" srsName="EPSG:4326">'
        '<gml:pos>-77.035278 38.889444</gml:pos></gml:Point>'
    )])
    assert not value.exact_equals(decode(WASHINGTON_EWKT))


def test_projected_crs_is_not_swapped():
    """Test that a projected CRS keeps its axis order."""
    value = decode("SRID=25832;POINT(500000 5700000)")
    assert (value.geometry.x, value.geometry.y) == (500000.0, 5700000.0)
    assert value.srid == 25832


# ============================================================================
# Routing Tests
# ============================================================================

def test_content_list_with_single_string():
    """Test that a one-string content list is decoded as text."""
    assert decode(["POINT(1 2)"]) == decode("POINT(1 2)")


def test_content_list_skips_whitespace_items():
    """Test that text around the GML element is skipped."""
    element = gml(f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>1 2</gml:pos></gml:Point>')
    value = decode(["\n  ", element, "\n"])
    assert value.geometry.geom_type == "Point"


def test_single_element():
    """Test that an element can be passed directly."""
    value = decode(gml(f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>1 2</gml:pos></gml:Point>'))
    assert value.geometry.geom_type == "Point"


def test_serialized_gml_string():
    """Test that serialized GML is routed to the GML parser."""
    value = decode(f'  <gml:Point xmlns:gml="{GML3_NS}" srsName="EPSG:25832"><gml:pos>1 2</gml:pos></gml:Point>')
    assert value.srid == 25832


def test_gml_3_3_namespace():
    """Test the GML 3.3 namespace."""
    value = decode([gml(
        '<gml:LineString xmlns:gml="http://www.opengis.net/gml/3.3">'
        '<gml:posList>0 0 1 1</gml:posList></gml:LineString>'
    )])
    assert value.geometry.geom_type == "LineString"


def test_gml_srs_name_http_uri():
    """Test an http CRS URI on the root element."""
    value = decode([gml(
        f'<gml:Point xmlns:gml="{GML3_NS}" srsName="http://www.opengis.net/def/crs/EPSG/0/25832">'
        '<gml:pos>1 2</gml:pos></gml:Point>'
    )])
    assert value.srid == 25832
    assert value.srs == "http://www.opengis.net/def/crs/EPSG/0/25832"


# ============================================================================
# Null Tests
# ============================================================================

def test_null_text():
    """Test NULL <reason>."""
    value = decode("NULL nothing")

    assert value.geometry.is_empty
    assert value.null_reason == "nothing"
    assert value.is_null
    assert value.srid == 0


def test_gml_null_element():
    """Test that gml:Null short-circuits the parser."""
    value = decode([gml(f'<gml:Null xmlns:gml="{GML3_NS}">withheld</gml:Null>')])

    assert value.geometry.is_empty
    assert value.null_reason == "withheld"
    assert value.srs == "NULL"


def test_gml_null_first_in_content_wins():
    """Test that a leading gml:Null short-circuits before the element count check."""
    content = [
        "\n",
        gml(f'<gml:Null xmlns:gml="{GML3_NS}">withheld</gml:Null>'),
        gml(f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>1 2</gml:pos></gml:Point>'),
    ]
    value = decode(content)

    assert value.is_null
    assert value.null_reason == "withheld"
    assert value.geometry.is_empty


def test_gml_null_element_any_case():
    """Test the case-insensitive Null name."""
    value = decode([gml('<gml:null xmlns:gml="http://www.opengis.net/gml">missing</gml:null>')])
    assert value.null_reason == "missing"


# ============================================================================
# Out-of-Band CRS Tests
# ============================================================================

def test_out_of_band_srs_attribute():
    """Test that a bare WKT value takes its CRS from the srs attribute."""
    value = decode("POINT(38.889444 -77.035278)", {SRS_ATTRIBUTE: "EPSG:4326"})
    assert value.exact_equals(decode(WASHINGTON_GEOJSON))


def test_out_of_band_crs_attribute():
    """Test the crs attribute alias."""
    value = decode("POINT(1 2)", {CRS_ATTRIBUTE: "EPSG:25832"})
    assert value.srid == 25832


def test_out_of_band_srs_ignored_for_prefixed_wkt():
    """Test that an explicit prefix wins over the attribute."""
    value = decode("SRID=25832;POINT(1 2)", {SRS_ATTRIBUTE: "EPSG:4326"})
    assert value.srid == 25832


def test_unrelated_attributes_are_logged(caplog):
    """Test that attributes without CRS are ignored with a warning."""
    caplog.set_level(logging.WARNING, logger="services.geoxacml.dispatcher")
    value = decode("POINT(1 2)", {"{urn:example}color": "red"})

    assert value.srid == CRS84_SRID
    assert "Ignoring XML attributes" in caplog.text


# ============================================================================
# Error Tests
# ============================================================================

def test_two_gml_elements_fail():
    """Test that a content list with two geometries is rejected."""
    point = f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>1 2</gml:pos></gml:Point>'
    with pytest.raises(FormatError):
        decode_geometry([gml(point), gml(point)])


def test_poslist_with_odd_token_count_fails():
    """Test that a leftover posList token is a structural error."""
    element = gml(
        f'<gml:LineString xmlns:gml="{GML3_NS}"><gml:posList>0 0 1 1 2</gml:posList></gml:LineString>'
    )
    with pytest.raises(StructuralError):
        decode_geometry([element])


def test_unsupported_namespace():
    """Test a geometry outside the GML namespaces."""
    element = gml('<x:Point xmlns:x="http://example.com/geometry"><x:pos>1 2</x:pos></x:Point>')
    with pytest.raises(NamespaceError):
        decode_geometry([element])


def test_element_without_namespace():
    """Test that an unqualified element is not GML."""
    with pytest.raises(NamespaceError):
        decode_geometry([gml('<Point><pos>1 2</pos></Point>')])


def test_unresolvable_srs_name():
    """Test an invalid srsName on the root element."""
    element = gml(f'<gml:Point xmlns:gml="{GML3_NS}" srsName="EPSG:foo"><gml:pos>1 2</gml:pos></gml:Point>')
    with pytest.raises(CRSFormatError):
        decode_geometry([element])


@pytest.mark.parametrize("encoding", ["", "   ", [], ["text", "more text"], 42, None])
def test_format_errors(encoding):
    """Test empty and unsupported encodings."""
    with pytest.raises(FormatError):
        decode_geometry(encoding)


def test_malformed_gml_string():
    """Test that broken XML is a structural error."""
    with pytest.raises(StructuralError):
        decode_geometry(f'<gml:Point xmlns:gml="{GML3_NS}"><gml:pos>1 2</gml:Point>')


@pytest.mark.parametrize("encoding", [
    "",
    "FOO(1 2)",
    "SRID=4326POINT(1 2)",
    "SRS=EPSG:abc;POINT(1 2)",
    "{not json",
    [],
])
def test_decode_raises_invalid_attribute_value(encoding):
    """Test that every failure is surfaced uniformly to the host."""
    with pytest.raises(InvalidAttributeValueError) as excinfo:
        decode(encoding)

    assert excinfo.value.__cause__ is not None


def test_invalid_attribute_value_is_value_error():
    """Test that hosts catching ValueError see decode failures."""
    with pytest.raises(ValueError):
        decode("FOO(1 2)")


def test_decode_returns_geometry_value():
    """Test the return type."""
    assert isinstance(decode("POINT(1 2)"), GeometryValue)


# ============================================================================
# Trace Tests
# ============================================================================

def test_decode_trace_written_to_thread_local_file():
    """Test that a registered trace file receives the decode trace."""
    trace = io.StringIO()
    set_log_file(trace)
    try:
        decode(WASHINGTON_EWKT)
        assert get_log_file() is trace
        output = trace.getvalue()
    finally:
        close_log_file()

    assert "decode: WKT" in output
    assert "srid=-4326" in output
    assert get_log_file() is None


def test_trace_records_failures():
    """Test that failures are traced before being raised."""
    trace = io.StringIO()
    set_log_file(trace)
    try:
        with pytest.raises(InvalidAttributeValueError):
            decode("FOO(1 2)")
        output = trace.getvalue()
    finally:
        close_log_file()

    assert "decode failed: FormatError" in output
