"""Tests for the geometry model, GeoJSON parsing and shapely conversion."""

import pytest
from shapely.geometry import LineString as ShapelyLineString
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from geosnap.exceptions import GeometryError, GeometryParseError
from geosnap.geometry.types import (
    GeometryCollection,
    LineString,
    MultiPolygon,
    Point,
    Polygon,
    from_shapely,
    geometry_type,
    parse_feature_geometry,
    parse_geometry,
    to_geojson,
    to_shapely,
)
from tests.utils_geojson import feature, polygon, square_ring


def test_parse_point_truncates_extra_ordinates():
    assert parse_geometry({"type": "Point", "coordinates": [1, 2, 30]}) == Point((1.0, 2.0))


def test_parse_polygon():
    geometry = parse_geometry(polygon(square_ring(0, 0, 2)))

    assert isinstance(geometry, Polygon)
    assert geometry.coordinates[0][0] == (0.0, 0.0)
    assert geometry.coordinates[0][-1] == (0.0, 0.0)
    assert len(geometry.coordinates[0]) == 5


def test_parse_multipolygon():
    geometry = parse_geometry(
        {"type": "MultiPolygon", "coordinates": [[square_ring(0, 0, 1)], [square_ring(5, 5, 1)]]}
    )

    assert isinstance(geometry, MultiPolygon)
    assert len(geometry.coordinates) == 2


def test_parse_collection_drops_malformed_members():
    geometry = parse_geometry(
        {
            "type": "GeometryCollection",
            "geometries": [
                {"type": "Point", "coordinates": [0, 0]},
                {"type": "Point", "coordinates": ["x", 0]},
                {"type": "Curve", "coordinates": []},
            ],
        }
    )

    assert geometry == GeometryCollection((Point((0.0, 0.0)),))


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "Circle", "coordinates": [0, 0]},
        {"type": "LineString"},
        {"type": "LineString", "coordinates": None},
        {"type": "LineString", "coordinates": [[0, 0], [1]]},
        {"type": "Polygon", "coordinates": "0 0 1 1"},
        {"type": "GeometryCollection"},
        [0, 0],
    ],
)
def test_malformed_geometry_degrades_to_none(payload):
    assert parse_geometry(payload) is None


def test_strict_parsing_raises():
    with pytest.raises(GeometryParseError) as excinfo:
        parse_geometry({"type": "Circle", "coordinates": [0, 0]}, strict=True)

    assert isinstance(excinfo.value, GeometryError)
    assert "Circle" in excinfo.value.message


def test_strict_parsing_raises_for_collection_member():
    payload = {"type": "GeometryCollection", "geometries": [{"type": "Point"}]}

    with pytest.raises(GeometryParseError):
        parse_geometry(payload, strict=True)


def test_parse_passes_through_parsed_geometry():
    geometry = Point((1.0, 1.0))

    assert parse_geometry(geometry) is geometry
    assert parse_geometry(None) is None


def test_parse_accepts_geo_interface():
    assert parse_geometry(ShapelyPoint(3, 4)) == Point((3.0, 4.0))


def test_feature_geometry():
    assert parse_feature_geometry(feature({"type": "Point", "coordinates": [1, 1]})) == Point((1.0, 1.0))
    assert parse_feature_geometry(feature(None)) is None
    assert parse_feature_geometry(None) is None


def test_to_geojson_uses_lists():
    geometry = GeometryCollection((LineString(((0.0, 0.0), (1.0, 1.0))), Point((2.0, 2.0))))

    assert to_geojson(geometry) == {
        "type": "GeometryCollection",
        "geometries": [
            {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]},
            {"type": "Point", "coordinates": [2.0, 2.0]},
        ],
    }


def test_geojson_payload_survives_parse_and_serialize():
    payload = polygon(square_ring(0.0, 0.0, 2.0))

    assert to_geojson(parse_geometry(payload)) == payload


def test_shapely_conversion():
    shapely_polygon = ShapelyPolygon([(0, 0), (4, 0), (4, 3), (0, 0)])

    geometry = from_shapely(shapely_polygon)

    assert isinstance(geometry, Polygon)
    assert to_shapely(geometry).equals(shapely_polygon)


def test_empty_shapely_geometry_is_none():
    assert from_shapely(ShapelyLineString()) is None


def test_geometry_type_names():
    assert geometry_type(Point((0.0, 0.0))) == "Point"
    assert geometry_type(GeometryCollection(())) == "GeometryCollection"
