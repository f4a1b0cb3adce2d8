"""
Threshold and viewport math.

Converts an on-screen pixel tolerance into degrees using the Web-Mercator
ground resolution, and approximates the visible coordinate window used to
clip guides. Longitude/latitude are treated as planar apart from the cosine
factor below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from geosnap.geometry.contract import (
    DEFAULT_VIEW_HEIGHT,
    DEFAULT_VIEW_WIDTH,
    EQUATOR_METERS_PER_PIXEL,
    METERS_PER_DEGREE,
    VIEWPORT_MARGIN_FACTOR,
)


@dataclass(frozen=True)
class ViewportBounds:
    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float

    @property
    def width(self) -> float:
        return self.max_lon - self.min_lon

    @property
    def height(self) -> float:
        return self.max_lat - self.min_lat

    def diagonal(self) -> float:
        return math.sqrt(self.width * self.width + self.height * self.height)


def meters_per_pixel(zoom: float, latitude: float) -> float:
    """Ground resolution at ``latitude`` (degrees) for a Web-Mercator zoom level."""
    return EQUATOR_METERS_PER_PIXEL * math.cos(latitude * math.pi / 180) / math.pow(2, zoom)


def snap_threshold(zoom: float, latitude: float, snap_pixels: float) -> float:
    """Snap tolerance in degrees for a tolerance of ``snap_pixels`` on screen."""
    threshold_meters = snap_pixels * meters_per_pixel(zoom, latitude)
    return threshold_meters / METERS_PER_DEGREE


def viewport_bounds(
    longitude: float,
    latitude: float,
    zoom: float,
    width: int = DEFAULT_VIEW_WIDTH,
    height: int = DEFAULT_VIEW_HEIGHT,
    margin_factor: float = VIEWPORT_MARGIN_FACTOR,
) -> ViewportBounds:
    """Approximate visible window around the view centre, padded by ``margin_factor``."""
    lat_rad = latitude * math.pi / 180
    meters_per_degree_lon = METERS_PER_DEGREE * math.cos(lat_rad)
    mpp = meters_per_pixel(zoom, latitude)

    half_width_deg = (width * mpp) / meters_per_degree_lon / 2
    half_height_deg = (height * mpp) / METERS_PER_DEGREE / 2

    return ViewportBounds(
        min_lon=longitude - half_width_deg * margin_factor,
        max_lon=longitude + half_width_deg * margin_factor,
        min_lat=latitude - half_height_deg * margin_factor,
        max_lat=latitude + half_height_deg * margin_factor,
    )
