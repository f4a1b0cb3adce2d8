from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Sequence

import numpy as np

from geosnap.geometry.contract import (
    EDGE_ONLY_FACTOR,
    EDGE_WIN_FACTOR,
    VERTEX_PRIORITY_RATIO,
)
from geosnap.geometry.types import Coord, Edge


class SnapMode(str, Enum):
    """Which real-geometry targets a query may snap to."""
    VERTEX = "vertex"
    EDGE = "edge"
    BOTH = "both"


@dataclass(frozen=True)
class SnapResult:
    """Outcome of matching a query against real feature geometry."""
    point: Coord
    distance: float
    kind: Literal["vertex", "edge"]
    edge: Edge | None = None


def distance(p: Coord, q: Coord) -> float:
    return math.hypot(p[0] - q[0], p[1] - q[1])


def nearest_point_on_segment(p: Coord, a: Coord, b: Coord) -> Coord:
    """
    Closest point to ``p`` on segment ``[a, b]``.

    The projection parameter is clamped to [0, 1], so the result is either
    the perpendicular foot or the nearer endpoint. A zero-length segment
    returns ``a``.
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    if dx == 0 and dy == 0:
        return a
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return (a[0] + t * dx, a[1] + t * dy)


def _nearest_vertex(query: Coord, vertices: Sequence[Coord], threshold: float) -> SnapResult | None:
    if len(vertices) == 0:
        return None
    # x/y only; extra ordinates (altitude) are ignored
    arr = np.array([(v[0], v[1]) for v in vertices], dtype=float)
    dists = np.hypot(arr[:, 0] - query[0], arr[:, 1] - query[1])
    # non-finite vertices never match
    dists[~np.isfinite(dists)] = np.inf
    # argmin keeps the first vertex on equal distances
    idx = int(np.argmin(dists))
    best = float(dists[idx])
    if not best < threshold:
        return None
    x, y = vertices[idx][0], vertices[idx][1]
    return SnapResult(point=(float(x), float(y)), distance=best, kind="vertex")


def find_nearest_snap(
    query: Coord,
    vertices: Sequence[Coord],
    edges: Sequence[Edge],
    threshold: float,
    mode: SnapMode | str = SnapMode.BOTH,
) -> SnapResult | None:
    """
    Best vertex or edge snap for ``query`` within ``threshold``.

    Vertices and edges compete for the same best distance. In ``both`` mode
    two rules keep corners from flickering between the vertex and the
    neighbouring edges:

    - an edge hit whose projected point lies within
      ``VERTEX_PRIORITY_RATIO * threshold`` of either edge endpoint is ignored;
    - an edge hit replaces the current best only when it is closer than
      ``best.distance * EDGE_WIN_FACTOR``.

    All comparisons against ``threshold`` are strict.
    """
    mode = SnapMode(mode)
    best: SnapResult | None = None

    if mode in (SnapMode.VERTEX, SnapMode.BOTH):
        best = _nearest_vertex(query, vertices, threshold)

    if mode in (SnapMode.EDGE, SnapMode.BOTH):
        factor = EDGE_WIN_FACTOR if mode is SnapMode.BOTH else EDGE_ONLY_FACTOR
        vertex_radius = threshold * VERTEX_PRIORITY_RATIO
        for edge in edges:
            a, b = edge
            foot = nearest_point_on_segment(query, a, b)
            dist = distance(query, foot)

            if mode is SnapMode.BOTH and (
                distance(foot, a) < vertex_radius or distance(foot, b) < vertex_radius
            ):
                continue

            if dist < threshold and (best is None or dist < best.distance * factor):
                best = SnapResult(point=foot, distance=dist, kind="edge", edge=edge)

    return best


def snap_coordinate(
    query: Coord,
    vertices: Sequence[Coord],
    edges: Sequence[Edge],
    threshold: float,
    mode: SnapMode | str = SnapMode.BOTH,
) -> Coord:
    """Snapped point for ``query``, or ``query`` itself when nothing qualifies."""
    result = find_nearest_snap(query, vertices, edges, threshold, mode)
    return result.point if result else query
