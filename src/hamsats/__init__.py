# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
HamSats

Real-time amateur-radio satellite tracking for web maps. Converts TLE
ephemeris into sub-satellite points, satellite and observer horizons,
curved lines of sight with live look angles, and antimeridian-safe
predicted ground tracks, and keeps them drawn through a pluggable map
renderer on cooperative timers.
"""

from hamsats.config import DEFAULT_TRACKING_CONFIG, TrackingConfig
from hamsats.domain.geometry import (
    EARTH_RADIUS_KM,
    LookAngles,
    curved_line,
    horizon_distance_km,
    is_visible,
    look_angles,
    satellite_horizon_polygon,
    surface_distance_km,
)
from hamsats.domain.ground_track import (
    GroundTrackPoint,
    PathMarker,
    SegmentedTrack,
    sample_ground_track,
    segment_ground_track,
)
from hamsats.domain.locations import GeoPoint, ObserverLocation
from hamsats.domain.tle import (
    TwoLineElement,
    extract_catalog_number,
    parse_tle,
    parse_tle_catalog,
)
from hamsats.features.home_location import HomeLocation
from hamsats.features.nearest_satellites import (
    NearestSatellite,
    NearestSatellitesFeature,
    rank_nearest,
)
from hamsats.features.satellite_track import SatelliteTrack, TrackState

__all__ = [
    "DEFAULT_TRACKING_CONFIG",
    "EARTH_RADIUS_KM",
    "GeoPoint",
    "GroundTrackPoint",
    "HomeLocation",
    "LookAngles",
    "NearestSatellite",
    "NearestSatellitesFeature",
    "ObserverLocation",
    "PathMarker",
    "SatelliteTrack",
    "SegmentedTrack",
    "TrackState",
    "TrackingConfig",
    "TwoLineElement",
    "curved_line",
    "extract_catalog_number",
    "horizon_distance_km",
    "is_visible",
    "look_angles",
    "parse_tle",
    "parse_tle_catalog",
    "rank_nearest",
    "sample_ground_track",
    "satellite_horizon_polygon",
    "segment_ground_track",
    "surface_distance_km",
]
