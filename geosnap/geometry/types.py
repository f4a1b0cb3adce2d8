"""
Geometry Model

Closed tagged union over the seven GeoJSON geometry kinds. Every consumer
dispatches over all members and ends with ``assert_never`` so that adding a
kind is a type-check error until it is handled everywhere.

Parsing is tolerant by default: a malformed geometry degrades to ``None``
(no snap contribution) instead of aborting snapping for the rest of the
candidate set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union, assert_never

from loguru import logger
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from geosnap.exceptions import GeometryParseError

Coord = tuple[float, float]
Edge = tuple[Coord, Coord]
Ring = tuple[Coord, ...]


@dataclass(frozen=True)
class Point:
    coordinates: Coord


@dataclass(frozen=True)
class MultiPoint:
    coordinates: tuple[Coord, ...]


@dataclass(frozen=True)
class LineString:
    coordinates: tuple[Coord, ...]


@dataclass(frozen=True)
class MultiLineString:
    coordinates: tuple[tuple[Coord, ...], ...]


@dataclass(frozen=True)
class Polygon:
    """Polygon rings; ring 0 is the exterior boundary, the rest are holes."""
    coordinates: tuple[Ring, ...]


@dataclass(frozen=True)
class MultiPolygon:
    coordinates: tuple[tuple[Ring, ...], ...]


@dataclass(frozen=True)
class GeometryCollection:
    geometries: tuple["Geometry", ...]


Geometry = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
]

GEOMETRY_TYPES = (
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
)


def geometry_type(geometry: Geometry) -> str:
    """GeoJSON ``type`` name of a geometry."""
    return type(geometry).__name__


def _position(value: Any) -> Coord:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) < 2:
        raise GeometryParseError(f"Invalid position: {value!r}")
    try:
        return (float(value[0]), float(value[1]))
    except (TypeError, ValueError) as exc:
        raise GeometryParseError(f"Non-numeric position: {value!r}") from exc


def _positions(value: Any) -> tuple[Coord, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise GeometryParseError(f"Expected a list of positions, got {type(value).__name__}")
    return tuple(_position(item) for item in value)


def _position_lists(value: Any) -> tuple[tuple[Coord, ...], ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise GeometryParseError(f"Expected a list of rings, got {type(value).__name__}")
    return tuple(_positions(item) for item in value)


def _parse(obj: Any, strict: bool) -> Geometry:
    if not isinstance(obj, Mapping):
        raise GeometryParseError(f"Geometry must be a mapping, got {type(obj).__name__}")
    kind = obj.get("type")
    if kind == "GeometryCollection":
        members = obj.get("geometries")
        if isinstance(members, (str, bytes)) or not isinstance(members, Sequence):
            raise GeometryParseError("GeometryCollection without a 'geometries' list")
        parsed: list[Geometry] = []
        for member in members:
            try:
                parsed.append(_parse(member, strict))
            except GeometryParseError as exc:
                if strict:
                    raise
                logger.debug("Dropping malformed collection member: {}", exc.message)
        return GeometryCollection(tuple(parsed))

    if "coordinates" not in obj or obj["coordinates"] is None:
        raise GeometryParseError(f"{kind or 'Geometry'} without coordinates")
    coords = obj["coordinates"]

    if kind == "Point":
        return Point(_position(coords))
    if kind == "MultiPoint":
        return MultiPoint(_positions(coords))
    if kind == "LineString":
        return LineString(_positions(coords))
    if kind == "MultiLineString":
        return MultiLineString(_position_lists(coords))
    if kind == "Polygon":
        return Polygon(_position_lists(coords))
    if kind == "MultiPolygon":
        if isinstance(coords, (str, bytes)) or not isinstance(coords, Sequence):
            raise GeometryParseError("MultiPolygon coordinates must be a list of polygons")
        return MultiPolygon(tuple(_position_lists(polygon) for polygon in coords))
    raise GeometryParseError(f"Unsupported geometry type: {kind!r}")


def parse_geometry(obj: Any, strict: bool = False) -> Geometry | None:
    """Build a geometry from a GeoJSON-style mapping.

    Accepts an already-parsed geometry, a GeoJSON mapping or any object
    exposing ``__geo_interface__`` (shapely geometries do). Positions are
    truncated to their first two ordinates.

    Returns ``None`` for ``None`` input and, unless ``strict`` is set, for
    malformed or unsupported input. With ``strict=True`` a
    :class:`GeometryParseError` is raised instead.
    """
    if obj is None:
        return None
    if isinstance(obj, GEOMETRY_TYPES):
        return obj
    if not isinstance(obj, Mapping) and hasattr(obj, "__geo_interface__"):
        obj = obj.__geo_interface__
    try:
        return _parse(obj, strict)
    except GeometryParseError as exc:
        if strict:
            raise
        logger.debug("Skipping malformed geometry: {}", exc.message)
        return None


def parse_feature_geometry(feature: Any) -> Geometry | None:
    """Geometry of a GeoJSON feature, or ``None`` when it has none."""
    if not isinstance(feature, Mapping):
        return None
    return parse_geometry(feature.get("geometry"))


def to_geojson(geometry: Geometry) -> dict[str, Any]:
    """Serialize a geometry back to a GeoJSON mapping (lists, not tuples)."""
    if isinstance(geometry, Point):
        return {"type": "Point", "coordinates": list(geometry.coordinates)}
    if isinstance(geometry, (MultiPoint, LineString)):
        return {
            "type": geometry_type(geometry),
            "coordinates": [list(c) for c in geometry.coordinates],
        }
    if isinstance(geometry, (MultiLineString, Polygon)):
        return {
            "type": geometry_type(geometry),
            "coordinates": [[list(c) for c in ring] for ring in geometry.coordinates],
        }
    if isinstance(geometry, MultiPolygon):
        return {
            "type": "MultiPolygon",
            "coordinates": [
                [[list(c) for c in ring] for ring in polygon]
                for polygon in geometry.coordinates
            ],
        }
    if isinstance(geometry, GeometryCollection):
        return {
            "type": "GeometryCollection",
            "geometries": [to_geojson(member) for member in geometry.geometries],
        }
    assert_never(geometry)


def from_shapely(geom: BaseGeometry, strict: bool = False) -> Geometry | None:
    """Convert a shapely geometry; empty geometries yield ``None``."""
    if geom.is_empty:
        return None
    return parse_geometry(mapping(geom), strict=strict)


def to_shapely(geometry: Geometry) -> BaseGeometry:
    return shape(to_geojson(geometry))
