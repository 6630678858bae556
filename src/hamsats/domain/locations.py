# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Geographic point value objects."""
import math
from dataclasses import dataclass

from hamsats.domain.coordinate_frames import normalize_longitude
from hamsats.domain.geometry import LonLat


@dataclass(frozen=True)
class GeoPoint:
    """Sub-satellite point with altitude in km."""
    lat_deg: float
    lon_deg: float
    alt_km: float

    @classmethod
    def from_propagation(cls, lat_deg: float, lon_deg: float, alt_km: float) -> "GeoPoint":
        """
        Build a point from propagator output.

        Raises:
            ValueError: If any component is not finite.
        """
        if not all(math.isfinite(v) for v in (lat_deg, lon_deg, alt_km)):
            raise ValueError(
                f"Non-finite position: lat={lat_deg}, lon={lon_deg}, alt={alt_km}"
            )
        return cls(lat_deg=lat_deg, lon_deg=normalize_longitude(lon_deg), alt_km=alt_km)

    @property
    def lon_lat(self) -> LonLat:
        return self.lon_deg, self.lat_deg


@dataclass(frozen=True)
class ObserverLocation:
    """Ground observer position. Height is supplied separately."""
    lat_deg: float
    lon_deg: float

    @property
    def lon_lat(self) -> LonLat:
        return self.lon_deg, self.lat_deg
