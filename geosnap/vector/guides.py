"""
Drafting Guides

Generates temporary alignment lines while a feature is being drawn, in the
spirit of CAD construction lines:

- horizontal and vertical guides through the first vertex;
- a guide parallel to the last drawn segment, through the last vertex;
- guides orthogonal to the last drawn segment, through the last and the
  first vertex.

Guides are infinite lines (origin + unit direction). They are regenerated
from scratch whenever the drawn coordinates change and are never mutated.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Literal, Sequence

from geosnap.geometry.contract import (
    DEGENERATE_SEGMENT_EPSILON,
    PARALLEL_DET_EPSILON,
    VIEWPORT_EXTENSION_FACTOR,
)
from geosnap.geometry.types import Coord
from geosnap.vector.viewport import ViewportBounds

GuideKind = Literal["horizontal", "vertical", "parallel", "orthogonal"]


@dataclass(frozen=True)
class SnapGuide:
    id: str
    origin: Coord
    direction: Coord
    kind: GuideKind


@dataclass(frozen=True)
class GuideSegment:
    """A guide clipped to a finite segment the caller can draw."""
    id: str
    kind: GuideKind
    source: Coord
    target: Coord


def _guide_id(kind: str, index: int) -> str:
    return f"guide-{kind}-{index}-{uuid.uuid4().hex}"


def _normalize(dx: float, dy: float) -> Coord:
    length = math.hypot(dx, dy)
    if length == 0:
        return (0.0, 0.0)
    return (dx / length, dy / length)


def generate_guides(
    coordinates: Sequence[Coord],
    include_initial_guides: bool = True,
) -> list[SnapGuide]:
    """Guides for the coordinates drawn so far, in a fixed order.

    Order: horizontal, vertical (first vertex), parallel (last vertex),
    orthogonal (last vertex), orthogonal (first vertex). The segment guides
    are skipped when the last segment is degenerate.
    """
    guides: list[SnapGuide] = []
    if not coordinates:
        return guides

    first = (float(coordinates[0][0]), float(coordinates[0][1]))
    last = (float(coordinates[-1][0]), float(coordinates[-1][1]))

    if include_initial_guides:
        guides.append(SnapGuide(_guide_id("horizontal", 0), first, (1.0, 0.0), "horizontal"))
        guides.append(SnapGuide(_guide_id("vertical", 0), first, (0.0, 1.0), "vertical"))

    if len(coordinates) >= 2:
        prev = coordinates[-2]
        dx = last[0] - prev[0]
        dy = last[1] - prev[1]
        if abs(dx) > DEGENERATE_SEGMENT_EPSILON or abs(dy) > DEGENERATE_SEGMENT_EPSILON:
            nx, ny = _normalize(dx, dy)
            normal = (-ny, nx)
            guides.append(SnapGuide(_guide_id("parallel", 0), last, (nx, ny), "parallel"))
            guides.append(SnapGuide(_guide_id("orthogonal", 0), last, normal, "orthogonal"))
            guides.append(SnapGuide(_guide_id("orthogonal", 1), first, normal, "orthogonal"))

    return guides


def line_intersection(
    origin1: Coord,
    dir1: Coord,
    origin2: Coord,
    dir2: Coord,
) -> Coord | None:
    """Intersection of two infinite lines, or None when (near-)parallel.

    Coincident lines are reported as non-intersecting too.
    """
    det = dir1[0] * dir2[1] - dir1[1] * dir2[0]
    if abs(det) < PARALLEL_DET_EPSILON:
        return None
    dx = origin2[0] - origin1[0]
    dy = origin2[1] - origin1[1]
    t = (dx * dir2[1] - dy * dir2[0]) / det
    return (origin1[0] + t * dir1[0], origin1[1] + t * dir1[1])


def nearest_point_on_line(query: Coord, guide: SnapGuide) -> Coord:
    """Perpendicular projection of ``query`` onto the (unclamped) guide line."""
    ox, oy = guide.origin
    ux, uy = guide.direction
    t = (query[0] - ox) * ux + (query[1] - oy) * uy
    return (ox + t * ux, oy + t * uy)


def distance_to_guide(query: Coord, guide: SnapGuide) -> float:
    px, py = nearest_point_on_line(query, guide)
    return math.hypot(query[0] - px, query[1] - py)


def extend_to_viewport(guide: SnapGuide, bounds: ViewportBounds) -> tuple[Coord, Coord]:
    """Finite segment spanning the viewport: origin -/+ 2 * viewport diagonal."""
    reach = bounds.diagonal() * VIEWPORT_EXTENSION_FACTOR
    ox, oy = guide.origin
    ux, uy = guide.direction
    return (ox - ux * reach, oy - uy * reach), (ox + ux * reach, oy + uy * reach)


def guide_segments(guides: Sequence[SnapGuide], bounds: ViewportBounds) -> list[GuideSegment]:
    segments: list[GuideSegment] = []
    for guide in guides:
        source, target = extend_to_viewport(guide, bounds)
        segments.append(GuideSegment(guide.id, guide.kind, source, target))
    return segments


def find_all_intersections(guides: Sequence[SnapGuide]) -> list[Coord]:
    """Pairwise intersections (i < j) in pair order; parallel pairs are skipped."""
    points: list[Coord] = []
    for i in range(len(guides)):
        for j in range(i + 1, len(guides)):
            hit = line_intersection(
                guides[i].origin,
                guides[i].direction,
                guides[j].origin,
                guides[j].direction,
            )
            if hit is not None:
                points.append(hit)
    return points


def right_angle_lock(coord: Coord, previous: Coord) -> Coord:
    """Constrain ``coord`` to the horizontal or vertical through ``previous``.

    The dominant axis of movement wins; ties go to horizontal.
    """
    dx = abs(coord[0] - previous[0])
    dy = abs(coord[1] - previous[1])
    if dx >= dy:
        return (coord[0], previous[1])
    return (previous[0], coord[1])
