# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Spherical-Earth observation geometry for map tracking.

Horizon distances, line-of-sight visibility, the curved sight-line drawn
between observer and satellite, topocentric look angles, and the
satellite horizon footprint. All functions are pure and work on a
spherical Earth of radius EARTH_RADIUS_KM; longitudes and latitudes are
in degrees, satellite altitudes in km, observer heights in metres.

Arguments to acos/asin/sqrt are clamped so that degenerate inputs give
a degenerate result (horizon collapsed to a point, "not visible")
instead of NaN.

No external dependencies beyond numpy.
"""
import math
from dataclasses import dataclass

import numpy as np

EARTH_RADIUS_KM = 6371.0
CURVE_HEIGHT_FACTOR = 1.2
HORIZON_COEFFICIENT_KM = 3.57

LonLat = tuple[float, float]


@dataclass(frozen=True)
class LookAngles:
    """Observer-to-satellite look angles."""
    slant_range_km: float
    elevation_deg: float
    azimuth_deg: float


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def _central_angle_rad(
    lat1_rad: float, lon1_rad: float, lat2_rad: float, lon2_rad: float,
) -> float:
    """Haversine central angle between two points on the sphere."""
    d_lat = lat2_rad - lat1_rad
    d_lon = lon2_rad - lon1_rad
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(d_lon / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def surface_distance_km(
    lat1_deg: float, lon1_deg: float, lat2_deg: float, lon2_deg: float,
) -> float:
    """Great-circle distance along the Earth's surface in km."""
    return EARTH_RADIUS_KM * _central_angle_rad(
        math.radians(lat1_deg), math.radians(lon1_deg),
        math.radians(lat2_deg), math.radians(lon2_deg),
    )


def horizon_distance_km(observer_height_m: float) -> float:
    """
    Distance to the visible horizon for an observer at a given height.

    Uses the surveyor's approximation d = 3.57 * sqrt(h).

    Args:
        observer_height_m: Height above ground in metres (>= 0).

    Returns:
        Horizon distance in km, or NaN for a negative height.
    """
    if observer_height_m < 0:
        return math.nan
    return HORIZON_COEFFICIENT_KM * math.sqrt(observer_height_m)


def is_visible(
    observer_lat_deg: float,
    observer_lon_deg: float,
    observer_alt_m: float,
    sat_lat_deg: float,
    sat_lon_deg: float,
    sat_alt_km: float,
) -> bool:
    """
    Check whether a satellite is above the observer's geometric horizon.

    The satellite is visible when the central angle between observer and
    sub-satellite point is strictly less than
    acos((R + h1) / (R + h2)) + acos(R / (R + h1)).

    Args:
        observer_lat_deg: Observer latitude.
        observer_lon_deg: Observer longitude.
        observer_alt_m: Observer altitude in metres.
        sat_lat_deg: Sub-satellite latitude.
        sat_lon_deg: Sub-satellite longitude.
        sat_alt_km: Satellite altitude in km.

    Returns:
        True if the satellite is above the horizon. Always False when the
        satellite is at or below the observer's altitude.
    """
    r = EARTH_RADIUS_KM
    h1 = observer_alt_m / 1000.0
    h2 = sat_alt_km
    if not h2 > h1:
        return False

    central_angle = _central_angle_rad(
        math.radians(observer_lat_deg), math.radians(observer_lon_deg),
        math.radians(sat_lat_deg), math.radians(sat_lon_deg),
    )
    alpha = math.acos(_clamp_unit((r + h1) / (r + h2)))
    beta = math.acos(_clamp_unit(r / (r + h1)))
    return central_angle < alpha + beta


def _to_cartesian(lon_deg: float, lat_deg: float, radius: float) -> np.ndarray:
    lon = math.radians(lon_deg)
    lat = math.radians(lat_deg)
    return radius * np.array([
        math.cos(lat) * math.cos(lon),
        math.cos(lat) * math.sin(lon),
        math.sin(lat),
    ])


def curved_line(
    start: LonLat,
    end: LonLat,
    num_points: int = 50,
) -> list[LonLat]:
    """
    Curved sight-line between two surface points.

    Builds a quadratic Bezier curve in Earth-centred Cartesian space whose
    control point is the chord midpoint pushed out to
    CURVE_HEIGHT_FACTOR * R, then projects every sample back to lon/lat.
    Endpoint altitudes are ignored: this is a drawing aid, not a ray.

    Args:
        start: (lon, lat) of the first endpoint.
        end: (lon, lat) of the second endpoint.
        num_points: Number of intervals; num_points + 1 points are returned.

    Returns:
        List of (lon, lat) tuples from start to end inclusive.
    """
    if num_points < 1:
        raise ValueError(f"num_points must be >= 1, got {num_points}")

    r = EARTH_RADIUS_KM
    p1 = _to_cartesian(start[0], start[1], r)
    p2 = _to_cartesian(end[0], end[1], r)

    mid = (p1 + p2) / 2.0
    mid_len = float(np.linalg.norm(mid))
    if mid_len < 1e-9:
        # Antipodal endpoints: bend through any direction normal to p1.
        axis = np.array([0.0, 0.0, 1.0])
        if abs(float(np.dot(axis, p1))) > 0.99 * r:
            axis = np.array([1.0, 0.0, 0.0])
        mid = np.cross(p1, axis)
        mid_len = float(np.linalg.norm(mid))
    control = mid / mid_len * r * CURVE_HEIGHT_FACTOR

    t = np.linspace(0.0, 1.0, num_points + 1)[:, np.newaxis]
    curve = (1 - t) ** 2 * p1 + 2 * (1 - t) * t * control + t ** 2 * p2

    x, y, z = curve[:, 0], curve[:, 1], curve[:, 2]
    lon = np.degrees(np.arctan2(y, x))
    lat = np.degrees(np.arctan2(z, np.sqrt(x * x + y * y)))
    return list(zip(lon.tolist(), lat.tolist()))


def look_angles(
    observer_lat_deg: float,
    observer_lon_deg: float,
    observer_alt_m: float,
    sat_lat_deg: float,
    sat_lon_deg: float,
    sat_alt_km: float,
) -> LookAngles:
    """
    Slant range, elevation and azimuth from an observer to a satellite.

    Works on the triangle (observer, satellite, Earth centre): slant range
    from the law of cosines on the geocentric radii and the haversine
    central angle, elevation from the angle at the observer between the
    nadir direction and the satellite (elevation = angle - 90 deg), and
    azimuth from the initial great-circle bearing.

    Args:
        observer_lat_deg: Observer latitude.
        observer_lon_deg: Observer longitude.
        observer_alt_m: Observer altitude in metres.
        sat_lat_deg: Sub-satellite latitude.
        sat_lon_deg: Sub-satellite longitude.
        sat_alt_km: Satellite altitude in km.

    Returns:
        LookAngles with azimuth in [0, 360) and elevation in [-90, 90].
    """
    r = EARTH_RADIUS_KM
    lat1 = math.radians(observer_lat_deg)
    lon1 = math.radians(observer_lon_deg)
    lat2 = math.radians(sat_lat_deg)
    lon2 = math.radians(sat_lon_deg)

    c = _central_angle_rad(lat1, lon1, lat2, lon2)
    r1 = r + observer_alt_m / 1000.0
    r2 = r + sat_alt_km

    slant_sq = r2 ** 2 + r1 ** 2 - 2 * r2 * r1 * math.cos(c)
    slant_range = math.sqrt(max(0.0, slant_sq))

    if slant_range > 0.0 and r1 > 0.0:
        nadir_angle = math.acos(_clamp_unit(
            (slant_range ** 2 + r1 ** 2 - r2 ** 2) / (2 * slant_range * r1)
        ))
        elevation = -(90.0 - math.degrees(nadir_angle))
    else:
        # Observer and satellite coincide.
        elevation = 90.0

    d_lon = lon2 - lon1
    y = math.sin(d_lon) * math.cos(lat2)
    x = (
        math.cos(lat1) * math.sin(lat2)
        - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    )
    azimuth = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0

    return LookAngles(
        slant_range_km=slant_range,
        elevation_deg=elevation,
        azimuth_deg=azimuth,
    )


def satellite_horizon_distance_km(sat_alt_km: float) -> float:
    """Surface distance from the sub-satellite point to its horizon."""
    r = EARTH_RADIUS_KM
    if r + sat_alt_km <= 0:
        return 0.0
    return r * math.acos(_clamp_unit(r / (r + sat_alt_km)))


def satellite_horizon_polygon(
    sat_lat_deg: float,
    sat_lon_deg: float,
    sat_alt_km: float,
    num_points: int = 50,
) -> list[LonLat]:
    """
    Closed ring of points where the satellite sits at 0 deg elevation.

    Walks num_points evenly spaced bearings from the sub-satellite point
    with the spherical direct geodesic formula, then repeats the first
    point to close the ring. A non-positive altitude collapses the ring
    onto the sub-satellite point.

    Args:
        sat_lat_deg: Sub-satellite latitude.
        sat_lon_deg: Sub-satellite longitude.
        sat_alt_km: Satellite altitude in km.
        num_points: Distinct vertices on the ring.

    Returns:
        num_points + 1 (lon, lat) tuples; first equals last.
    """
    if num_points < 1:
        raise ValueError(f"num_points must be >= 1, got {num_points}")

    angular = satellite_horizon_distance_km(sat_alt_km) / EARTH_RADIUS_KM
    lat1 = math.radians(sat_lat_deg)
    lon1 = math.radians(sat_lon_deg)

    bearings = 2 * np.pi * np.arange(num_points) / num_points
    sin_lat2 = np.clip(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * np.cos(bearings),
        -1.0, 1.0,
    )
    lat2 = np.arcsin(sin_lat2)
    lon2 = lon1 + np.arctan2(
        np.sin(bearings) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * sin_lat2,
    )

    ring = list(zip(np.degrees(lon2).tolist(), np.degrees(lat2).tolist()))
    ring.append(ring[0])
    return ring
