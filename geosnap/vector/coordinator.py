"""
Unified Snap Coordinator

Combines feature snapping (vertices/edges of existing features) with guide
snapping (drafting guides of the feature being drawn) into a single decision
per query point:

1. no active targets -> the query is returned unchanged;
2. a guide intersection always wins;
3. otherwise the closer of the feature match and the guide-line match wins
   (the feature match on an exact tie).

The coordinator also snaps whole geometries and single addressed vertices,
keeping closed polygon rings closed.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Literal, Sequence, assert_never

import numpy as np
from loguru import logger

from geosnap.exceptions import PositionPathError
from geosnap.geometry.contract import DRAW_MODE_PREFIX, EDIT_MODES, EXTEND_LINE_MODE
from geosnap.geometry.extraction import edges_from_features, vertices_from_features
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
)
from geosnap.vector.guide_snap import find_guide_snap
from geosnap.vector.guides import SnapGuide
from geosnap.vector.snap import SnapMode, find_nearest_snap

SnapSource = Literal["vertex", "edge", "guide", "intersection"]


class EditorMode(str, Enum):
    DRAWING = "drawing"
    EDITING = "editing"
    IDLE = "idle"


def classify_mode(name: str | None) -> EditorMode:
    """Map an editor mode name (``draw-polygon``, ``modify``...) to its snap behaviour."""
    if not name:
        return EditorMode.IDLE
    if name.startswith(DRAW_MODE_PREFIX) or name == EXTEND_LINE_MODE:
        return EditorMode.DRAWING
    if name in EDIT_MODES:
        return EditorMode.EDITING
    return EditorMode.IDLE


@dataclass(frozen=True)
class SnapCandidates:
    """Vertices and edges a query may snap to."""
    vertices: tuple[Coord, ...] = ()
    edges: tuple[Edge, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.vertices) or bool(self.edges)

    @classmethod
    def assemble(
        cls,
        features: Sequence[Any],
        mode: EditorMode | str,
        selected_indexes: Iterable[int] = (),
        reference_features: Sequence[Any] = (),
        snap_enabled: bool = True,
    ) -> "SnapCandidates":
        """
        Collect snap targets for the current editor state.

        Reference features are always targets. While drawing every existing
        feature is a target; while editing the selected features are left
        out so a feature never snaps to itself.
        """
        if not snap_enabled:
            return cls()
        editor_mode = mode if isinstance(mode, EditorMode) else classify_mode(mode)

        sources: list[Any] = list(reference_features)
        if editor_mode is EditorMode.DRAWING:
            sources.extend(features)
        elif editor_mode is EditorMode.EDITING:
            selected = set(selected_indexes)
            sources.extend(f for i, f in enumerate(features) if i not in selected)

        return cls(
            vertices=tuple(vertices_from_features(sources)),
            edges=tuple(edges_from_features(sources)),
        )


@dataclass(frozen=True)
class CombinedSnapResult:
    point: Coord
    distance: float
    source: SnapSource
    edge: Edge | None = None
    guide: SnapGuide | None = None


@dataclass(frozen=True)
class SnapCoordinator:
    """Single snapping entry point for drawing and editing tools."""
    vertices: Sequence[Coord] = ()
    edges: Sequence[Edge] = ()
    guides: Sequence[SnapGuide] = ()
    threshold: float = 0.0
    mode: SnapMode | str = SnapMode.BOTH
    snap_enabled: bool = True
    guides_enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", tuple(self.vertices))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "guides", tuple(self.guides))
        object.__setattr__(self, "threshold", float(self.threshold))
        object.__setattr__(self, "mode", SnapMode(self.mode))

    @classmethod
    def from_candidates(
        cls,
        candidates: SnapCandidates,
        guides: Sequence[SnapGuide],
        threshold: float,
        mode: SnapMode | str = SnapMode.BOTH,
        snap_enabled: bool = True,
        guides_enabled: bool = True,
    ) -> "SnapCoordinator":
        return cls(
            candidates.vertices,
            candidates.edges,
            guides,
            threshold,
            mode,
            snap_enabled=snap_enabled,
            guides_enabled=guides_enabled,
        )

    @property
    def has_feature_targets(self) -> bool:
        return self.snap_enabled and (bool(self.vertices) or bool(self.edges))

    @property
    def has_guide_targets(self) -> bool:
        return self.guides_enabled and bool(self.guides)

    def resolve(self, query: Coord) -> CombinedSnapResult | None:
        """Winning snap target for ``query`` with its source, or None."""
        best: CombinedSnapResult | None = None

        if self.has_feature_targets:
            feature = find_nearest_snap(query, self.vertices, self.edges, self.threshold, self.mode)
            if feature is not None:
                best = CombinedSnapResult(feature.point, feature.distance, feature.kind, edge=feature.edge)

        if self.has_guide_targets:
            guide = find_guide_snap(query, self.guides, self.threshold)
            if guide is not None:
                if guide.kind == "intersection":
                    best = CombinedSnapResult(guide.point, guide.distance, "intersection")
                elif best is None or guide.distance < best.distance:
                    best = CombinedSnapResult(guide.point, guide.distance, "guide", guide=guide.guide)

        return best

    def resolve_snap(self, query: Coord) -> Coord:
        """Snapped point for ``query``; the query itself when nothing qualifies."""
        if not self.has_feature_targets and not self.has_guide_targets:
            return query
        result = self.resolve(query)
        return result.point if result is not None else query

    def _snap_run(self, run: Sequence[Coord]) -> tuple[Coord, ...]:
        return tuple(self.resolve_snap(c) for c in run)

    def resolve_snap_for_geometry(self, geometry: Geometry) -> Geometry:
        """Snap every vertex of ``geometry``, preserving its structure."""
        if isinstance(geometry, Point):
            return Point(self.resolve_snap(geometry.coordinates))
        if isinstance(geometry, MultiPoint):
            return MultiPoint(self._snap_run(geometry.coordinates))
        if isinstance(geometry, LineString):
            return LineString(self._snap_run(geometry.coordinates))
        if isinstance(geometry, MultiLineString):
            return MultiLineString(tuple(self._snap_run(line) for line in geometry.coordinates))
        if isinstance(geometry, Polygon):
            return Polygon(tuple(self._snap_run(ring) for ring in geometry.coordinates))
        if isinstance(geometry, MultiPolygon):
            return MultiPolygon(
                tuple(
                    tuple(self._snap_run(ring) for ring in polygon)
                    for polygon in geometry.coordinates
                )
            )
        if isinstance(geometry, GeometryCollection):
            return GeometryCollection(
                tuple(self.resolve_snap_for_geometry(member) for member in geometry.geometries)
            )
        assert_never(geometry)

    def resolve_snap_for_vertex(
        self,
        geometry: Geometry,
        position_path: Sequence[int],
        strict: bool = False,
    ) -> Geometry:
        """
        Snap the single vertex addressed by ``position_path``.

        Paths: ``[i]`` for LineString/MultiPoint, ``[line, i]`` for
        MultiLineString, ``[ring, i]`` for Polygon, ``[polygon, ring, i]`` for
        MultiPolygon and ``[member, *path]`` for GeometryCollection. A Point
        ignores the path. When the vertex is the first or last position of a
        polygon ring, the duplicated closing coordinate follows it.

        An invalid path leaves the geometry unchanged, or raises
        :class:`PositionPathError` when ``strict`` is set.
        """
        try:
            return self._snap_vertex(geometry, list(position_path))
        except PositionPathError as exc:
            if strict:
                raise
            logger.debug("Vertex snap skipped: {}", exc.message)
            return geometry

    def _snap_vertex(self, geometry: Geometry, path: list[int]) -> Geometry:
        if isinstance(geometry, Point):
            return Point(self.resolve_snap(geometry.coordinates))
        if isinstance(geometry, MultiPoint):
            return MultiPoint(self._snap_in_run(geometry.coordinates, _index(path, 0, geometry.coordinates)))
        if isinstance(geometry, LineString):
            return LineString(self._snap_in_run(geometry.coordinates, _index(path, 0, geometry.coordinates)))
        if isinstance(geometry, MultiLineString):
            lines = list(geometry.coordinates)
            li = _index(path, 0, lines)
            lines[li] = self._snap_in_run(lines[li], _index(path, 1, lines[li]))
            return MultiLineString(tuple(lines))
        if isinstance(geometry, Polygon):
            return Polygon(self._snap_in_rings(geometry.coordinates, path))
        if isinstance(geometry, MultiPolygon):
            polygons = list(geometry.coordinates)
            pi = _index(path, 0, polygons)
            polygons[pi] = self._snap_in_rings(polygons[pi], path[1:])
            return MultiPolygon(tuple(polygons))
        if isinstance(geometry, GeometryCollection):
            members = list(geometry.geometries)
            mi = _index(path, 0, members)
            members[mi] = self._snap_vertex(members[mi], path[1:])
            return GeometryCollection(tuple(members))
        assert_never(geometry)

    def _snap_in_rings(self, rings: Sequence[tuple[Coord, ...]], path: list[int]) -> tuple[tuple[Coord, ...], ...]:
        updated = list(rings)
        ri = _index(path, 0, updated)
        updated[ri] = self._snap_in_run(updated[ri], _index(path, 1, updated[ri]), closed=True)
        return tuple(updated)

    def _snap_in_run(self, run: Sequence[Coord], index: int, closed: bool = False) -> tuple[Coord, ...]:
        updated = list(run)
        updated[index] = self.resolve_snap(updated[index])
        if closed and len(updated) > 1:
            last = len(updated) - 1
            if index == 0:
                updated[last] = updated[0]
            elif index == last:
                updated[0] = updated[last]
        return tuple(updated)


def _index(path: Sequence[int], depth: int, items: Sequence[Any]) -> int:
    if depth >= len(path):
        raise PositionPathError(
            f"Position path {list(path)} is too short",
            {"path": str(list(path))},
        )
    value = path[depth]
    try:
        index = -1 if isinstance(value, (bool, np.bool_)) else operator.index(value)
    except TypeError:
        index = -1
    if not 0 <= index < len(items):
        raise PositionPathError(
            f"Index {value!r} at depth {depth} is out of range (size {len(items)})",
            {"path": str(list(path)), "depth": str(depth)},
        )
    return index
