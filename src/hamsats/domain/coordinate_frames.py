# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Coordinate frame conversions for sub-satellite points.

Pure mathematical transformations from the inertial frame produced by
SGP4 (TEME, treated as ECI) to Earth-fixed and geodetic coordinates.
No external dependencies — only stdlib math/datetime.

Reference frames:
    ECI  — Earth-Centered Inertial (non-rotating)
    ECEF — Earth-Centered Earth-Fixed (rotating with Earth)
    Geodetic — Latitude, Longitude, Altitude (WGS84 ellipsoid)

The ECI→ECEF rotation is a simple Z-axis rotation by the Greenwich
Mean Sidereal Time (GMST) angle. ECEF→Geodetic uses the iterative
Bowring method on the WGS84 ellipsoid.
"""
import math
from datetime import datetime, timezone

WGS84_A = 6_378_137.0            # m — semi-major axis
WGS84_B = 6_356_752.3142         # m — semi-minor axis
WGS84_E_SQUARED = 0.00669437999014

_J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def gmst_rad(epoch: datetime) -> float:
    """
    Compute Greenwich Mean Sidereal Time for a given UTC epoch.

    Uses the IAU formula based on Julian centuries from J2000.0:
        GMST(°) = 280.46061837 + 360.98564736629 * (JD - 2451545.0)
                  + 0.000387933 * T² - T³/38710000

    Args:
        epoch: UTC datetime (naive datetimes are treated as UTC).

    Returns:
        GMST in radians, normalized to [0, 2π).
    """
    if epoch.tzinfo is None:
        epoch = epoch.replace(tzinfo=timezone.utc)

    days = (epoch - _J2000).total_seconds() / 86400.0
    t_centuries = days / 36525.0

    gmst_deg = (
        280.46061837
        + 360.98564736629 * days
        + 0.000387933 * t_centuries**2
        - t_centuries**3 / 38710000.0
    )
    return math.radians(gmst_deg % 360.0)


def eci_to_ecef(
    pos_eci: tuple[float, float, float],
    gmst_angle_rad: float,
) -> tuple[float, float, float]:
    """
    Rotate an ECI position into ECEF about the Z axis by GMST.

        [x_ecef]   [ cos(θ)  sin(θ)  0] [x_eci]
        [y_ecef] = [-sin(θ)  cos(θ)  0] [y_eci]
        [z_ecef]   [   0       0     1] [z_eci]
    """
    cos_t = math.cos(gmst_angle_rad)
    sin_t = math.sin(gmst_angle_rad)
    return (
        cos_t * pos_eci[0] + sin_t * pos_eci[1],
        -sin_t * pos_eci[0] + cos_t * pos_eci[1],
        pos_eci[2],
    )


def normalize_longitude(lon_deg: float) -> float:
    """Wrap a longitude into (-180, 180]."""
    wrapped = math.fmod(lon_deg + 180.0, 360.0)
    if wrapped <= 0.0:
        wrapped += 360.0
    return wrapped - 180.0


def ecef_to_geodetic(
    pos_ecef: tuple[float, float, float],
) -> tuple[float, float, float]:
    """
    Convert ECEF position to geodetic coordinates (WGS84 ellipsoid).

    Uses the iterative Bowring method for latitude convergence.

    Args:
        pos_ecef: Position in ECEF frame (x, y, z) in meters.

    Returns:
        (latitude_deg, longitude_deg, altitude_m)
        Latitude in [-90, 90], longitude in (-180, 180].
    """
    a = WGS84_A
    e2 = WGS84_E_SQUARED

    x, y, z = pos_ecef
    p = math.sqrt(x**2 + y**2)

    lon_rad = math.atan2(y, x)

    # Initial estimate using spherical approximation
    lat_rad = math.atan2(z, p * (1.0 - e2))
    for _ in range(10):
        sin_lat = math.sin(lat_rad)
        n = a / math.sqrt(1.0 - e2 * sin_lat**2)
        lat_rad = math.atan2(z + e2 * n * sin_lat, p)

    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    n = a / math.sqrt(1.0 - e2 * sin_lat**2)

    if abs(cos_lat) > 1e-10:
        alt = p / cos_lat - n
    else:
        alt = abs(z) - WGS84_B

    return math.degrees(lat_rad), normalize_longitude(math.degrees(lon_rad)), alt
