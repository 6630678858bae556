# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Home (observer) location feature.

Draws the observer marker and a horizon circle around it. Moving the
observer does not redraw the horizon: the caller decides when to call
update_horizon with the current observer height.
"""
import logging
import math

from hamsats.domain.geometry import horizon_distance_km
from hamsats.domain.locations import ObserverLocation
from hamsats.domain.shapes import CircleShape, PointShape
from hamsats.ports.rendering import FeatureHandle, MapLayer, MapRenderer, Style


_log = logging.getLogger(__name__)

HOME_STYLE = Style(icon="marker-green", icon_scale=0.5)
HORIZON_STYLE = Style(fill_color="rgba(0, 70, 255, 0.33)", z_index=100)


class HomeLocation:
    """Observer marker plus its horizon circle."""

    def __init__(self, renderer: MapRenderer) -> None:
        self._renderer = renderer
        self._location: ObserverLocation | None = None
        self._home_handle: FeatureHandle | None = None
        self._horizon_handle: FeatureHandle | None = None
        self._horizon_center: ObserverLocation | None = None

    def set_location(self, location: ObserverLocation) -> None:
        """Move the observer. Any drawn horizon stays until update_horizon."""
        self._location = location
        shape = PointShape(lon_deg=location.lon_deg, lat_deg=location.lat_deg)
        if self._home_handle is None:
            self._home_handle = self._renderer.add_feature(MapLayer.VECTOR, shape, HOME_STYLE)
        else:
            self._renderer.update_feature(self._home_handle, shape)
        _log.info("Home location set to %.4f, %.4f", location.lat_deg, location.lon_deg)

    def update_horizon(self, observer_height_m: float) -> None:
        """Redraw the horizon circle for the current location and height."""
        self._remove_horizon()
        if self._location is None:
            return

        distance_km = horizon_distance_km(observer_height_m)
        if not math.isfinite(distance_km):
            _log.warning("Invalid observer height %s m, horizon not drawn", observer_height_m)
            return

        circle = CircleShape(center=self._location.lon_lat, radius_m=distance_km * 1000.0)
        self._horizon_handle = self._renderer.add_feature(
            MapLayer.HORIZON, circle, HORIZON_STYLE,
        )
        self._horizon_center = self._location

    @property
    def horizon_is_current(self) -> bool:
        """True when a horizon is drawn around the current location."""
        return self._horizon_handle is not None and self._horizon_center == self._location

    def get_coordinates(self) -> ObserverLocation | None:
        return self._location

    def _remove_horizon(self) -> None:
        if self._horizon_handle is not None:
            self._renderer.remove_feature(self._horizon_handle)
            self._horizon_handle = None
            self._horizon_center = None

    def remove(self) -> None:
        """Retract the marker and the horizon."""
        if self._home_handle is not None:
            self._renderer.remove_feature(self._home_handle)
            self._home_handle = None
        self._remove_horizon()
