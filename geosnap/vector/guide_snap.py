from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Sequence

from geosnap.geometry.contract import INTERSECTION_RADIUS_FACTOR
from geosnap.geometry.types import Coord
from geosnap.vector.guides import SnapGuide, find_all_intersections, nearest_point_on_line


@dataclass(frozen=True)
class GuideSnapResult:
    """Outcome of matching a query against the active drafting guides."""
    point: Coord
    distance: float
    kind: Literal["guide", "intersection"]
    guide: SnapGuide | None = None


def find_guide_snap(
    query: Coord,
    guides: Sequence[SnapGuide],
    threshold: float,
) -> GuideSnapResult | None:
    """
    Best guide snap for ``query``.

    Guide lines match within ``threshold``; guide intersections match within
    ``threshold * INTERSECTION_RADIUS_FACTOR``. A matching intersection is
    returned even when a plain guide line is closer.
    """
    if not guides:
        return None

    best_line: GuideSnapResult | None = None
    for guide in guides:
        foot = nearest_point_on_line(query, guide)
        dist = math.hypot(query[0] - foot[0], query[1] - foot[1])
        if dist < threshold and (best_line is None or dist < best_line.distance):
            best_line = GuideSnapResult(point=foot, distance=dist, kind="guide", guide=guide)

    best_hit: GuideSnapResult | None = None
    radius = threshold * INTERSECTION_RADIUS_FACTOR
    for hit in find_all_intersections(guides):
        dist = math.hypot(query[0] - hit[0], query[1] - hit[1])
        if dist < radius and (best_hit is None or dist < best_hit.distance):
            best_hit = GuideSnapResult(point=hit, distance=dist, kind="intersection")

    if best_hit is not None:
        return best_hit
    return best_line
