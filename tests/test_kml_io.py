import pytest

from travel_map.classify import classify, plan_routes
from travel_map.kml_io import (
    GEOMETRY_COLLECTION,
    LINE_STRING,
    POINT,
    POLYGON,
    KmlParseError,
    load_features,
    parse_kml,
)


def test_parse_sample_features(sample_kml_text):
    features, summary = parse_kml(sample_kml_text)

    assert summary.placemarks_total == 8
    assert summary.features_parsed == 7
    assert summary.placemarks_skipped == 1
    assert [f.geometry.type for f in features] == [POINT] * 4 + [LINE_STRING] * 3

    paris = features[0]
    assert paris.id == "p_paris"
    assert paris.name == "Paris, France"
    assert paris.description == "<b>Visited</b> 07Jun2022"
    assert paris.geometry.coords == ((2.3522, 48.8566),)

    tokyo = features[1]
    assert tokyo.id is None
    assert tokyo.geometry.coords == ((139.6503, 35.6762),)

    assert len(features[4].geometry.coords) == 6


def test_parse_without_namespace_and_nested_description_markup():
    kml = """<kml><Document><Placemark>
      <name>Lima, Peru</name>
      <description>Arrived <b>02Feb2015</b></description>
      <Point><coordinates> -77.04,-12.04 </coordinates></Point>
    </Placemark></Document></kml>"""
    features, _ = parse_kml(kml)
    assert features[0].description == "Arrived 02Feb2015"
    assert features[0].geometry.coords == ((-77.04, -12.04),)


def test_parse_multigeometry_track_polygon_and_extended_data():
    kml = """<?xml version="1.0" encoding="UTF-8"?>
    <kml xmlns="http://www.opengis.net/kml/2.2" xmlns:gx="http://www.google.com/kml/ext/2.2">
    <Document>
      <Placemark id="multi">
        <name>Nadi, Fiji</name>
        <ExtendedData><Data name="trip"><value>Pacific</value></Data></ExtendedData>
        <MultiGeometry>
          <Point><coordinates>177.44,-17.75</coordinates></Point>
          <Point><coordinates>177.50,-17.80</coordinates></Point>
          <LineString><coordinates>177.44,-17.75 -179.0,-16.0</coordinates></LineString>
        </MultiGeometry>
      </Placemark>
      <Placemark>
        <name>tracked</name>
        <gx:Track>
          <when>2020-01-01T00:00:00Z</when>
          <when>2020-01-01T01:00:00Z</when>
          <gx:coord>10 20 100</gx:coord>
          <gx:coord>11 21 120</gx:coord>
        </gx:Track>
      </Placemark>
      <Placemark>
        <name>area</name>
        <Polygon><outerBoundaryIs><LinearRing>
          <coordinates>0,0 1,0 1,1 0,0</coordinates>
        </LinearRing></outerBoundaryIs></Polygon>
      </Placemark>
    </Document></kml>"""
    features, _ = parse_kml(kml.encode("utf-8"))
    multi, track, area = features

    assert multi.geometry.type == GEOMETRY_COLLECTION
    assert multi.properties["trip"] == "Pacific"
    assert [g.type for g in multi.geometry.geometries] == [POINT, POINT, LINE_STRING]
    assert [kind for kind, _ in classify(multi)] == ["location", "skipped", "path"]

    assert track.geometry.type == LINE_STRING
    assert track.geometry.coords == ((10.0, 20.0), (11.0, 21.0))

    assert area.geometry.type == POLYGON
    assert [kind for kind, _ in classify(area)] == ["skipped"]


def test_bad_coordinate_tuples_are_skipped():
    kml = """<kml><Placemark><LineString>
      <coordinates>1,1 oops 2,2 3</coordinates>
    </LineString></Placemark></kml>"""
    features, summary = parse_kml(kml)
    assert features[0].geometry.coords == ((1.0, 1.0), (2.0, 2.0))
    assert summary.coords_skipped == 2


def test_non_finite_coordinates_are_skipped():
    kml = """<kml xmlns:gx="http://www.google.com/kml/ext/2.2"><Document>
      <Placemark><name>Nowhere, Void</name>
        <Point><coordinates>nan,inf</coordinates></Point>
      </Placemark>
      <Placemark><LineString>
        <coordinates>1,1 inf,2 3,-Infinity 4,4</coordinates>
      </LineString></Placemark>
      <Placemark><gx:Track>
        <gx:coord>5 NaN 0</gx:coord>
        <gx:coord>6 6 0</gx:coord>
        <gx:coord>7 7 0</gx:coord>
      </gx:Track></Placemark>
    </Document></kml>"""
    features, summary = parse_kml(kml)
    assert summary.coords_skipped == 4
    # the point has no usable coordinate left
    assert summary.placemarks_skipped == 1
    line, track = features
    assert line.geometry.coords == ((1.0, 1.0), (4.0, 4.0))
    assert track.geometry.coords == ((6.0, 6.0), (7.0, 7.0))


def test_plan_routes_numbers_locations_in_document_order(sample_kml_text):
    features, _ = parse_kml(sample_kml_text)
    routes = plan_routes(features)
    assert [r.kind for r in routes] == ["location"] * 4 + ["path"] * 3
    assert [r.ordinal for r in routes if r.kind == "location"] == [0, 1, 2, 3]


def test_malformed_xml_raises():
    with pytest.raises(KmlParseError):
        parse_kml("<kml><Placemark></kml>")


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_features(tmp_path / "nope.kml")


def test_load_features_from_disk(sample_kml_path):
    features, summary = load_features(sample_kml_path)
    assert summary.features_parsed == len(features) == 7
