# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Spherical Web Mercator (EPSG:3857) projection.

The map works in projected metres; everything else in this package works
in (lon, lat) degrees. These helpers are the conversion boundary. The
observer's horizon is drawn as a circle of fixed radius in projected
space, which is not geodesic: its ground size shrinks toward the poles.
"""
import math

import numpy as np

from hamsats.domain.geometry import LonLat

MERCATOR_RADIUS_M = 6_378_137.0
MAX_LATITUDE_DEG = 85.0511287798066


def from_lon_lat(lon_deg: float, lat_deg: float) -> tuple[float, float]:
    """Project (lon, lat) to EPSG:3857 (x, y) metres."""
    lat = max(-MAX_LATITUDE_DEG, min(MAX_LATITUDE_DEG, lat_deg))
    x = MERCATOR_RADIUS_M * math.radians(lon_deg)
    y = MERCATOR_RADIUS_M * math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
    return x, y


def to_lon_lat(x: float, y: float) -> LonLat:
    """Unproject EPSG:3857 (x, y) metres to (lon, lat)."""
    lon = math.degrees(x / MERCATOR_RADIUS_M)
    lat = math.degrees(2 * math.atan(math.exp(y / MERCATOR_RADIUS_M)) - math.pi / 2)
    return lon, lat


def circle_ring(center: LonLat, radius_m: float, num_points: int = 64) -> list[LonLat]:
    """
    Closed lon/lat ring of a circle drawn in projected space.

    Args:
        center: (lon, lat) of the circle centre.
        radius_m: Radius in projected metres.
        num_points: Distinct vertices.

    Returns:
        num_points + 1 (lon, lat) tuples; first equals last.
    """
    cx, cy = from_lon_lat(*center)
    angles = 2 * np.pi * np.arange(num_points) / num_points
    xs = cx + radius_m * np.cos(angles)
    ys = cy + radius_m * np.sin(angles)
    ring = [to_lon_lat(x, y) for x, y in zip(xs.tolist(), ys.tolist())]
    ring.append(ring[0])
    return ring
