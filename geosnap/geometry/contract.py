"""
Snapping Contract

Single source of truth for the tolerances, ratios and projection constants
used by the snapping engine. All modules import from here instead of
hardcoding.
"""

from __future__ import annotations

# Feature snapping (ratios of the snap threshold)
VERTEX_PRIORITY_RATIO = 0.3  # edge hits closer than this to an endpoint defer to the vertex
EDGE_WIN_FACTOR = 0.9  # 'both' mode: edge must beat best distance * factor
EDGE_ONLY_FACTOR = 1.0  # 'edge' mode: plain minimum

# Guides
INTERSECTION_RADIUS_FACTOR = 1.5  # intersections catch at threshold * factor
PARALLEL_DET_EPSILON = 1e-10  # |det| below this means no intersection
DEGENERATE_SEGMENT_EPSILON = 1e-10  # per-axis, last drawn segment
VIEWPORT_EXTENSION_FACTOR = 2.0  # guides extend +/- factor * viewport diagonal
CURSOR_CONNECTOR_RATIO = 0.1  # hide cursor connector when closer than threshold * ratio

# Web-Mercator ground resolution
EQUATOR_METERS_PER_PIXEL = 156543.03392  # at zoom 0
METERS_PER_DEGREE = 111000.0

# Viewport defaults (pixels)
DEFAULT_VIEW_WIDTH = 1920
DEFAULT_VIEW_HEIGHT = 1080
VIEWPORT_MARGIN_FACTOR = 1.5

# Editor mode names
DRAW_MODE_PREFIX = "draw-"
EXTEND_LINE_MODE = "extend-line"
RIGHT_ANGLE_DRAW_MODE = "draw-90deg-polygon"
EDIT_MODES = frozenset(
    {"modify", "translate", "rotate", "scale", "transform", "extrude", "elevation"}
)
