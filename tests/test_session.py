"""Tests for the per-frame snap session."""

import pytest

from geosnap.settings import Settings, SnapSettings, ViewportSettings
from geosnap.vector.session import SnapSession, ViewState
from tests.utils_geojson import feature, line, polygon

# zoom 18 at the equator: 12 px is roughly 6.46e-5 degrees
VIEW = ViewState(longitude=0.0, latitude=0.0, zoom=18.0)
ROAD = feature(line((0.0, 0.0), (0.01, 0.0)))
DRAWN = [(1.0, 1.0), (1.001, 1.0)]


def test_threshold_follows_view():
    session = SnapSession(VIEW)

    assert session.threshold == pytest.approx(6.4558e-5, rel=1e-4)
    assert session.bounds.min_lon < 0.0 < session.bounds.max_lon


def test_resolve_snap_to_feature_edge():
    session = SnapSession(VIEW, features=[ROAD], mode_name="modify")

    assert session.resolve_snap((0.005, 0.00003)) == pytest.approx((0.005, 0.0))


def test_disabled_snapping_returns_query():
    session = SnapSession(VIEW, settings=SnapSettings(enabled=False), features=[ROAD], mode_name="modify")

    assert not session.candidates
    assert session.resolve_snap((0.005, 0.00003)) == (0.005, 0.00003)


def test_idle_session_ignores_features():
    session = SnapSession(VIEW, features=[ROAD], mode_name="view")

    assert session.resolve_snap((0.005, 0.00003)) == (0.005, 0.00003)


def test_guides_only_while_drawing():
    drawing = SnapSession(VIEW, mode_name="draw-polygon", drawing_coordinates=DRAWN)
    editing = SnapSession(VIEW, mode_name="modify", drawing_coordinates=DRAWN)
    no_guides = SnapSession(
        VIEW,
        settings=SnapSettings(guides_enabled=False),
        mode_name="draw-polygon",
        drawing_coordinates=DRAWN,
    )

    assert [g.kind for g in drawing.guides] == [
        "horizontal",
        "vertical",
        "parallel",
        "orthogonal",
        "orthogonal",
    ]
    assert editing.guides == ()
    assert no_guides.guides == ()


def test_drawing_snaps_to_guide_intersection():
    session = SnapSession(VIEW, mode_name="draw-polygon", drawing_coordinates=DRAWN)

    assert session.resolve_snap((1.00001, 1.00001)) == pytest.approx((1.0, 1.0))


def test_right_angle_lock():
    session = SnapSession(VIEW, mode_name="draw-90deg-polygon", drawing_coordinates=[(1.0, 1.0)])

    assert session.right_angle_active
    assert session.resolve_snap((1.5, 1.2)) == pytest.approx((1.5, 1.0))
    assert session.resolve_snap((1.1, 1.4)) == pytest.approx((1.0, 1.4))


def test_right_angle_lock_can_be_disabled():
    session = SnapSession(
        VIEW,
        settings=SnapSettings(right_angle_lock=False),
        mode_name="draw-90deg-polygon",
        drawing_coordinates=[(1.0, 1.0)],
    )

    assert not session.right_angle_active
    assert session.resolve_snap((1.5, 1.2)) == (1.5, 1.2)


def test_snap_edit_single_vertex_keeps_ring_closed():
    edited = polygon([[0.00001, 0.00001], [0.02, 0.0], [0.02, 0.02], [0.00001, 0.00001]])
    session = SnapSession(
        VIEW,
        features=[ROAD, feature(edited)],
        mode_name="modify",
        selected_indexes=[1],
    )

    snapped = session.snap_edit(edited, [0, 0])

    ring = snapped["coordinates"][0]
    assert ring[0] == ring[-1] == [0.0, 0.0]
    assert ring[1:3] == [[0.02, 0.0], [0.02, 0.02]]


def test_snap_edit_whole_geometry():
    session = SnapSession(VIEW, features=[ROAD], mode_name="translate")

    snapped = session.snap_edit(line((0.00001, 0.00001), (0.005, 0.00003)))

    assert snapped["type"] == "LineString"
    assert snapped["coordinates"][0] == [0.0, 0.0]
    assert snapped["coordinates"][1] == pytest.approx([0.005, 0.0])


def test_snap_edit_unparseable_geometry_is_returned():
    session = SnapSession(VIEW, features=[ROAD], mode_name="modify")
    garbage = {"type": "Circle", "radius": 3}

    assert session.snap_edit(garbage) is garbage


def test_overlay_for_edge_snap():
    session = SnapSession(VIEW, features=[ROAD], mode_name="modify")

    overlay = session.build_overlay((0.005, 0.00003))

    assert overlay.active is not None
    assert overlay.active.source == "edge"
    assert overlay.highlighted_edge == ((0.0, 0.0), (0.01, 0.0))
    assert overlay.vertex_markers == ((0.0, 0.0), (0.01, 0.0))
    assert overlay.cursor_connector is not None
    assert overlay.guide_segments == ()


def test_overlay_hides_snapped_vertex_marker():
    session = SnapSession(VIEW, features=[ROAD], mode_name="modify")

    overlay = session.build_overlay((0.00001, 0.00001))

    assert overlay.active is not None
    assert overlay.active.source == "vertex"
    assert overlay.highlighted_edge is None
    assert overlay.vertex_markers == ((0.01, 0.0),)


def test_overlay_without_markers_in_edge_mode():
    session = SnapSession(VIEW, settings=SnapSettings(mode="edge"), features=[ROAD], mode_name="modify")

    assert session.build_overlay((0.005, 0.00003)).vertex_markers == ()


def test_overlay_hides_connector_when_on_target():
    session = SnapSession(VIEW, features=[ROAD], mode_name="modify")

    overlay = session.build_overlay((0.005, 0.0))

    assert overlay.active is not None
    assert overlay.cursor_connector is None


def test_overlay_while_drawing():
    session = SnapSession(VIEW, mode_name="draw-polygon", drawing_coordinates=DRAWN)

    overlay = session.build_overlay((1.00001, 1.00001))

    assert len(overlay.guide_segments) == 5
    assert len(overlay.intersections) == 6
    assert (1.0, 1.0) in overlay.intersections
    assert overlay.active is not None
    assert overlay.active.source == "intersection"
    assert overlay.cursor_connector == ((1.00001, 1.00001), overlay.active.point)


def test_overlay_without_query():
    session = SnapSession(VIEW, mode_name="draw-polygon", drawing_coordinates=DRAWN)

    overlay = session.build_overlay(None)

    assert overlay.active is None
    assert overlay.cursor_connector is None
    assert len(overlay.guide_segments) == 5


def test_session_from_settings():
    settings = Settings(snap=SnapSettings(pixels=24.0), viewport=ViewportSettings(width=800, height=600))

    session = SnapSession.from_settings(VIEW, settings, features=[ROAD], mode_name="modify")

    assert session.threshold == pytest.approx(2 * SnapSession(VIEW).threshold)
    assert session.viewport.width == 800
    assert session.resolve_snap((0.005, 0.0001)) == pytest.approx((0.005, 0.0))
