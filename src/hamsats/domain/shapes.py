# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Geographic shapes handed to the map renderer.

All coordinates are (lon, lat) in degrees. A CircleShape is the one
exception to geodesic thinking: its radius is in projected map metres.
"""
from dataclasses import dataclass

from hamsats.domain.geometry import LonLat


@dataclass(frozen=True)
class PointShape:
    lon_deg: float
    lat_deg: float

    @property
    def coordinates(self) -> LonLat:
        return self.lon_deg, self.lat_deg


@dataclass(frozen=True)
class LineShape:
    coordinates: tuple[LonLat, ...]


@dataclass(frozen=True)
class PolygonShape:
    """Single closed ring."""
    ring: tuple[LonLat, ...]


@dataclass(frozen=True)
class CircleShape:
    """Circle with a radius in projected (EPSG:3857) metres."""
    center: LonLat
    radius_m: float


Shape = PointShape | LineShape | PolygonShape | CircleShape
