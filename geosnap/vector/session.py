"""
Snap Session

Wires the engine to an editor's state for one frame: settings, view state,
feature collection, selection, reference features, mode and the coordinates
drawn so far. A session is cheap to build and is rebuilt whenever any of
those inputs change; it holds no state of its own beyond them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

from loguru import logger

from geosnap.geometry.contract import CURSOR_CONNECTOR_RATIO, RIGHT_ANGLE_DRAW_MODE
from geosnap.geometry.types import Coord, Edge, parse_geometry, to_geojson
from geosnap.settings import Settings, SnapSettings, ViewportSettings
from geosnap.vector.coordinator import (
    CombinedSnapResult,
    EditorMode,
    SnapCandidates,
    SnapCoordinator,
    classify_mode,
)
from geosnap.vector.guide_snap import find_guide_snap
from geosnap.vector.guides import (
    GuideSegment,
    SnapGuide,
    find_all_intersections,
    generate_guides,
    guide_segments,
    right_angle_lock,
)
from geosnap.vector.snap import SnapMode, find_nearest_snap
from geosnap.vector.viewport import ViewportBounds, snap_threshold, viewport_bounds


@dataclass(frozen=True)
class ViewState:
    longitude: float
    latitude: float
    zoom: float


@dataclass(frozen=True)
class SnapOverlay:
    """Everything the map needs to draw snap feedback for one pointer position."""
    guide_segments: tuple[GuideSegment, ...] = ()
    intersections: tuple[Coord, ...] = ()
    vertex_markers: tuple[Coord, ...] = ()
    active: CombinedSnapResult | None = None
    highlighted_edge: Edge | None = None
    cursor_connector: tuple[Coord, Coord] | None = None


@dataclass
class SnapSession:
    view: ViewState
    settings: SnapSettings = field(default_factory=SnapSettings)
    viewport: ViewportSettings = field(default_factory=ViewportSettings)
    features: Sequence[Any] = ()
    mode_name: str = ""
    selected_indexes: Sequence[int] = ()
    reference_features: Sequence[Any] = ()
    drawing_coordinates: Sequence[Coord] = ()

    def __post_init__(self) -> None:
        self.editor_mode = classify_mode(self.mode_name)
        self.threshold = snap_threshold(self.view.zoom, self.view.latitude, self.settings.pixels)
        self.bounds: ViewportBounds = viewport_bounds(
            self.view.longitude,
            self.view.latitude,
            self.view.zoom,
            width=self.viewport.width,
            height=self.viewport.height,
            margin_factor=self.viewport.margin_factor,
        )
        self.candidates = SnapCandidates.assemble(
            self.features,
            self.editor_mode,
            selected_indexes=self.selected_indexes,
            reference_features=self.reference_features,
            snap_enabled=self.settings.enabled,
        )
        self.guides: tuple[SnapGuide, ...] = self._build_guides()
        self.coordinator = SnapCoordinator.from_candidates(
            self.candidates,
            self.guides,
            self.threshold,
            self.settings.mode,
            snap_enabled=self.settings.enabled,
            guides_enabled=self.settings.guides_enabled,
        )

    @classmethod
    def from_settings(cls, view: ViewState, settings: Settings, **editor_state: Any) -> "SnapSession":
        return cls(view, settings=settings.snap, viewport=settings.viewport, **editor_state)

    def _build_guides(self) -> tuple[SnapGuide, ...]:
        if (
            not self.settings.guides_enabled
            or self.editor_mode is not EditorMode.DRAWING
            or not self.drawing_coordinates
        ):
            return ()
        guides = generate_guides(self.drawing_coordinates, self.settings.initial_guides)
        logger.debug(
            "Generated {} guides from {} drawn coordinates",
            len(guides),
            len(self.drawing_coordinates),
        )
        return tuple(guides)

    @property
    def right_angle_active(self) -> bool:
        return (
            self.settings.right_angle_lock
            and self.mode_name == RIGHT_ANGLE_DRAW_MODE
            and bool(self.drawing_coordinates)
        )

    def resolve_snap(self, query: Coord) -> Coord:
        """Point a click at ``query`` should place, right-angle lock included."""
        point = self.coordinator.resolve_snap(query) if self.settings.enabled else query
        if self.right_angle_active:
            point = right_angle_lock(point, self.drawing_coordinates[-1])
        return point

    def snap_edit(self, geometry: Any, position_path: Sequence[int] | None = None) -> Any:
        """
        Snap an edited GeoJSON geometry.

        With a position path only the moved vertex is snapped, otherwise every
        vertex is. Geometries that cannot be parsed are returned untouched.
        """
        parsed = parse_geometry(geometry)
        if parsed is None:
            return geometry
        if position_path:
            snapped = self.coordinator.resolve_snap_for_vertex(parsed, position_path)
        else:
            snapped = self.coordinator.resolve_snap_for_geometry(parsed)
        return to_geojson(snapped)

    def build_overlay(self, query: Coord | None) -> SnapOverlay:
        """Renderable snap feedback for the pointer at ``query``."""
        segments = tuple(guide_segments(self.guides, self.bounds)) if self.coordinator.has_guide_targets else ()
        intersections = (
            tuple(find_all_intersections(self.guides))
            if self.coordinator.has_guide_targets and len(self.guides) >= 2
            else ()
        )

        feature_snap = None
        guide_snap = None
        if query is not None and self.coordinator.has_feature_targets:
            feature_snap = find_nearest_snap(
                query,
                self.candidates.vertices,
                self.candidates.edges,
                self.threshold,
                self.settings.mode,
            )
        if query is not None and self.coordinator.has_guide_targets:
            guide_snap = find_guide_snap(query, self.guides, self.threshold)

        markers: tuple[Coord, ...] = ()
        if self.coordinator.has_feature_targets and self.settings.mode is not SnapMode.EDGE:
            if feature_snap is not None and feature_snap.kind == "vertex":
                markers = tuple(v for v in self.candidates.vertices if v != feature_snap.point)
            else:
                markers = self.candidates.vertices

        # guide feedback takes display precedence over feature feedback
        active: CombinedSnapResult | None = None
        if guide_snap is not None:
            active = CombinedSnapResult(guide_snap.point, guide_snap.distance, guide_snap.kind, guide=guide_snap.guide)
        elif feature_snap is not None:
            active = CombinedSnapResult(feature_snap.point, feature_snap.distance, feature_snap.kind, edge=feature_snap.edge)

        connector = None
        if active is not None and query is not None:
            gap = math.hypot(query[0] - active.point[0], query[1] - active.point[1])
            if gap > self.threshold * CURSOR_CONNECTOR_RATIO:
                connector = (query, active.point)

        return SnapOverlay(
            guide_segments=segments,
            intersections=intersections,
            vertex_markers=markers,
            active=active,
            highlighted_edge=feature_snap.edge if feature_snap is not None and feature_snap.kind == "edge" else None,
            cursor_connector=connector,
        )
