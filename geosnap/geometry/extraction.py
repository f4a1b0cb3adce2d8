"""Vertex and edge extraction from geometries and GeoJSON features."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Sequence, assert_never

from geosnap.geometry.types import (
    Coord,
    Edge,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    parse_feature_geometry,
    parse_geometry,
)


def _paths(geometry: Geometry) -> Iterator[tuple[Coord, ...]]:
    """Yield every coordinate run of a geometry (lines and rings) in order."""
    if isinstance(geometry, (Point, MultiPoint)):
        return
    elif isinstance(geometry, LineString):
        yield geometry.coordinates
    elif isinstance(geometry, (MultiLineString, Polygon)):
        yield from geometry.coordinates
    elif isinstance(geometry, MultiPolygon):
        for polygon in geometry.coordinates:
            yield from polygon
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geometries:
            yield from _paths(member)
    else:
        assert_never(geometry)


def vertices(geometry: Geometry | None) -> list[Coord]:
    """All vertices of a geometry in ring order, then vertex order.

    Closed rings keep their duplicated closing coordinate, so a polygon
    whose exterior ring has ``n`` coordinates contributes ``n`` vertices.
    """
    if geometry is None:
        return []
    if isinstance(geometry, Point):
        return [geometry.coordinates]
    if isinstance(geometry, (MultiPoint, LineString)):
        return list(geometry.coordinates)
    if isinstance(geometry, (MultiLineString, Polygon)):
        return [c for ring in geometry.coordinates for c in ring]
    if isinstance(geometry, MultiPolygon):
        return [c for polygon in geometry.coordinates for ring in polygon for c in ring]
    if isinstance(geometry, GeometryCollection):
        result: list[Coord] = []
        for member in geometry.geometries:
            result.extend(vertices(member))
        return result
    assert_never(geometry)


def edges(geometry: Geometry | None) -> list[Edge]:
    """One edge per consecutive coordinate pair of every line and ring.

    A closed ring of ``n`` coordinates yields ``n - 1`` edges, the closing
    edge included. Points contribute no edges.
    """
    if geometry is None:
        return []
    result: list[Edge] = []
    for path in _paths(geometry):
        for i in range(len(path) - 1):
            result.append((path[i], path[i + 1]))
    return result


def vertices_from_features(features: Iterable[Any]) -> list[Coord]:
    """Concatenated vertices of GeoJSON features; bad geometries contribute nothing."""
    result: list[Coord] = []
    for feature in features:
        result.extend(vertices(parse_feature_geometry(feature)))
    return result


def edges_from_features(features: Iterable[Any]) -> list[Edge]:
    """Concatenated edges of GeoJSON features; bad geometries contribute nothing."""
    result: list[Edge] = []
    for feature in features:
        result.extend(edges(parse_feature_geometry(feature)))
    return result


def tentative_coordinates(geometry: Any) -> list[Coord]:
    """Coordinates drawn so far for a tentative (in-progress) feature.

    Polygons report their exterior ring without the closing duplicate so the
    guide generator sees the last clicked vertex, not the first one again.
    """
    parsed = parse_geometry(geometry)
    if isinstance(parsed, Point):
        return [parsed.coordinates]
    if isinstance(parsed, LineString):
        return list(parsed.coordinates)
    if isinstance(parsed, Polygon):
        if not parsed.coordinates:
            return []
        ring: Sequence[Coord] = parsed.coordinates[0]
        if len(ring) > 1 and ring[0] == ring[-1]:
            return list(ring[:-1])
        return list(ring)
    return []
