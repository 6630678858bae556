# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for spherical observation geometry."""
import ast
import math

import pytest

from hamsats.domain.geometry import (
    CURVE_HEIGHT_FACTOR,
    EARTH_RADIUS_KM,
    LookAngles,
    curved_line,
    horizon_distance_km,
    is_visible,
    look_angles,
    satellite_horizon_distance_km,
    satellite_horizon_polygon,
    surface_distance_km,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _spherical_ecef(lat_deg, lon_deg, radius_km):
    lat = math.radians(lat_deg)
    lon = math.radians(lon_deg)
    return (
        radius_km * math.cos(lat) * math.cos(lon),
        radius_km * math.cos(lat) * math.sin(lon),
        radius_km * math.sin(lat),
    )


def _enu_reference(obs_lat, obs_lon, obs_alt_m, sat_lat, sat_lon, sat_alt_km):
    """Independent az/el/range via ECEF -> ENU on a spherical Earth."""
    ox, oy, oz = _spherical_ecef(obs_lat, obs_lon, EARTH_RADIUS_KM + obs_alt_m / 1000)
    sx, sy, sz = _spherical_ecef(sat_lat, sat_lon, EARTH_RADIUS_KM + sat_alt_km)
    dx, dy, dz = sx - ox, sy - oy, sz - oz
    lat = math.radians(obs_lat)
    lon = math.radians(obs_lon)
    e = -math.sin(lon) * dx + math.cos(lon) * dy
    n = (-math.sin(lat) * math.cos(lon) * dx - math.sin(lat) * math.sin(lon) * dy
         + math.cos(lat) * dz)
    u = math.cos(lat) * math.cos(lon) * dx + math.cos(lat) * math.sin(lon) * dy + math.sin(lat) * dz
    rng = math.sqrt(e * e + n * n + u * u)
    el = math.degrees(math.atan2(u, math.hypot(e, n)))
    az = math.degrees(math.atan2(e, n)) % 360.0
    return rng, el, az


def _chord_distance(point, a, b):
    """Distance of a lon/lat point from the straight lon/lat segment a-b."""
    (px, py), (ax, ay), (bx, by) = point, a, b
    dx, dy = bx - ax, by - ay
    t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / (dx * dx + dy * dy)))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


# ── Observer horizon distance ────────────────────────────────────────

class TestHorizonDistance:

    def test_hundred_metres(self):
        assert horizon_distance_km(100) == pytest.approx(35.7, abs=0.01)

    def test_zero_height(self):
        assert horizon_distance_km(0) == 0.0

    def test_monotonic_non_decreasing(self):
        heights = [0, 0.5, 1, 2, 10, 100, 1000, 8848]
        distances = [horizon_distance_km(h) for h in heights]
        assert distances == sorted(distances)

    def test_negative_height_does_not_raise(self):
        assert math.isnan(horizon_distance_km(-5))


# ── Visibility ───────────────────────────────────────────────────────

class TestIsVisible:

    def test_overhead_is_visible(self):
        assert is_visible(0.0, 0.0, 0.0, 0.0, 0.0, 500.0) is True

    def test_below_observer_altitude_not_visible(self):
        # Observer at 1000 m, satellite at 0.5 km
        assert is_visible(0.0, 0.0, 1000.0, 0.0, 0.0, 0.5) is False

    def test_equal_altitude_not_visible(self):
        assert is_visible(0.0, 0.0, 2000.0, 0.0, 0.0, 2.0) is False

    def test_far_side_not_visible(self):
        assert is_visible(0.0, 0.0, 0.0, 0.0, 180.0, 500.0) is False

    def test_london_to_far_pacific(self):
        # Central angle ~77 deg vs horizon ~22 deg for a 500 km orbit
        assert is_visible(51.5, -0.12, 0.0, 51.5, 179.9, 500.0) is False

    def test_boundary_follows_horizon_angle(self):
        alpha = math.degrees(math.acos(EARTH_RADIUS_KM / (EARTH_RADIUS_KM + 500.0)))
        assert is_visible(0.0, 0.0, 0.0, 0.0, alpha - 0.1, 500.0) is True
        assert is_visible(0.0, 0.0, 0.0, 0.0, alpha + 0.1, 500.0) is False

    def test_observer_height_extends_horizon(self):
        alpha = math.degrees(math.acos(EARTH_RADIUS_KM / (EARTH_RADIUS_KM + 500.0)))
        lon = alpha + 0.5
        assert is_visible(0.0, 0.0, 0.0, 0.0, lon, 500.0) is False
        assert is_visible(0.0, 0.0, 3000.0, 0.0, lon, 500.0) is True


# ── Curved line of sight ─────────────────────────────────────────────

class TestCurvedLine:

    def test_point_count(self):
        assert len(curved_line((0.0, 0.0), (30.0, 20.0), 50)) == 51
        assert len(curved_line((0.0, 0.0), (30.0, 20.0), 7)) == 8

    def test_default_point_count(self):
        assert len(curved_line((0.0, 0.0), (10.0, 10.0))) == 51

    def test_endpoints(self):
        points = curved_line((-0.12, 51.5), (20.0, 60.0), 50)
        assert points[0] == pytest.approx((-0.12, 51.5), abs=1e-9)
        assert points[-1] == pytest.approx((20.0, 60.0), abs=1e-9)

    def test_midpoint_bulges_poleward(self):
        a, b = (-30.0, 40.0), (30.0, 40.0)
        points = curved_line(a, b, 50)
        mid = points[25]
        assert mid[0] == pytest.approx(0.0, abs=1e-9)
        assert mid[1] > 40.0
        assert _chord_distance(mid, a, b) > _chord_distance(points[0], a, b)
        assert _chord_distance(mid, a, b) > _chord_distance(points[-1], a, b)

    def test_midpoint_direction_matches_chord_midpoint(self):
        # Control point and chord midpoint are colinear with the centre,
        # so the middle sample lies on the great circle between the ends.
        points = curved_line((-30.0, 40.0), (30.0, 40.0), 2)
        expected_lat = math.degrees(math.atan(math.tan(math.radians(40)) / math.cos(math.radians(30))))
        assert points[1][1] == pytest.approx(expected_lat, abs=1e-9)

    def test_deterministic(self):
        assert curved_line((1.0, 2.0), (3.0, 4.0)) == curved_line((1.0, 2.0), (3.0, 4.0))

    def test_same_point(self):
        points = curved_line((10.0, 20.0), (10.0, 20.0), 10)
        for lon, lat in points:
            assert lon == pytest.approx(10.0, abs=1e-9)
            assert lat == pytest.approx(20.0, abs=1e-9)

    def test_antipodal_endpoints_stay_finite(self):
        points = curved_line((0.0, 0.0), (180.0, 0.0), 20)
        assert len(points) == 21
        assert all(math.isfinite(lon) and math.isfinite(lat) for lon, lat in points)

    def test_rejects_zero_points(self):
        with pytest.raises(ValueError):
            curved_line((0.0, 0.0), (1.0, 1.0), 0)

    def test_height_factor(self):
        assert CURVE_HEIGHT_FACTOR == 1.2


# ── Look angles ──────────────────────────────────────────────────────

class TestLookAngles:

    def test_frozen(self):
        angles = LookAngles(slant_range_km=1.0, elevation_deg=2.0, azimuth_deg=3.0)
        with pytest.raises(AttributeError):
            angles.elevation_deg = 10.0

    def test_overhead(self):
        angles = look_angles(0.0, 0.0, 0.0, 0.0, 0.0, 500.0)
        assert angles.elevation_deg == pytest.approx(90.0, abs=1e-6)
        assert angles.slant_range_km == pytest.approx(500.0, abs=1e-6)

    def test_cardinal_azimuths(self):
        assert look_angles(0, 0, 0, 10, 0, 500).azimuth_deg == pytest.approx(0.0, abs=1e-6)
        assert look_angles(0, 0, 0, 0, 10, 500).azimuth_deg == pytest.approx(90.0, abs=1e-6)
        assert look_angles(0, 0, 0, -10, 0, 500).azimuth_deg == pytest.approx(180.0, abs=1e-6)
        assert look_angles(0, 0, 0, 0, -10, 500).azimuth_deg == pytest.approx(270.0, abs=1e-6)

    def test_elevation_zero_at_horizon(self):
        alpha = math.degrees(math.acos(EARTH_RADIUS_KM / (EARTH_RADIUS_KM + 500.0)))
        angles = look_angles(0.0, 0.0, 0.0, 0.0, alpha, 500.0)
        assert angles.elevation_deg == pytest.approx(0.0, abs=1e-6)

    def test_below_horizon_negative(self):
        assert look_angles(0.0, 0.0, 0.0, 0.0, 60.0, 500.0).elevation_deg < 0.0

    @pytest.mark.parametrize("obs, sat", [
        ((51.5, -0.12, 0.0), (55.0, 5.0, 420.0)),
        ((-33.9, 151.2, 50.0), (-20.0, 140.0, 800.0)),
        ((40.0, -105.0, 1600.0), (45.0, -100.0, 550.0)),
        ((0.0, 0.0, 0.0), (3.0, -4.0, 35786.0)),
        ((64.1, -21.9, 10.0), (70.0, 10.0, 600.0)),
    ])
    def test_matches_enu_reference(self, obs, sat):
        """Law-of-cosines angles agree with a topocentric ENU computation."""
        angles = look_angles(*obs, *sat)
        rng, el, az = _enu_reference(*obs, *sat)
        assert angles.slant_range_km == pytest.approx(rng, rel=1e-7)
        assert angles.elevation_deg == pytest.approx(el, abs=1e-6)
        assert angles.azimuth_deg == pytest.approx(az, abs=1e-6)

    def test_london_far_pacific_azimuth_points_north(self):
        # The great circle to 179.9E at the same latitude runs over the pole.
        angles = look_angles(51.5, -0.12, 0.0, 51.5, 179.9, 500.0)
        assert angles.azimuth_deg > 359.0 or angles.azimuth_deg < 1.0
        assert angles.elevation_deg < 0.0

    def test_coincident_points_no_nan(self):
        angles = look_angles(10.0, 20.0, 500_000.0, 10.0, 20.0, 500.0)
        assert angles.slant_range_km == pytest.approx(0.0, abs=1e-6)
        assert angles.elevation_deg == 90.0
        assert not math.isnan(angles.azimuth_deg)

    def test_antipodal_no_nan(self):
        angles = look_angles(0.0, 0.0, 0.0, 0.0, 180.0, 500.0)
        assert all(math.isfinite(v) for v in (
            angles.slant_range_km, angles.elevation_deg, angles.azimuth_deg,
        ))
        assert angles.elevation_deg == pytest.approx(-90.0, abs=1e-6)

    def test_azimuth_range(self):
        for lat, lon in [(50, 10), (45, 20), (40, 10), (45, 0), (50, 20), (40, 0)]:
            az = look_angles(45.0, 10.0, 0.0, lat, lon, 500.0).azimuth_deg
            assert 0.0 <= az < 360.0


# ── Satellite horizon footprint ──────────────────────────────────────

class TestSatelliteHorizonPolygon:

    def test_closed_ring_length(self):
        ring = satellite_horizon_polygon(10.0, 20.0, 500.0, 50)
        assert len(ring) == 51
        assert ring[0] == ring[-1]

    def test_custom_point_count(self):
        ring = satellite_horizon_polygon(0.0, 0.0, 800.0, 12)
        assert len(ring) == 13
        assert ring[0] == ring[-1]

    def test_points_at_horizon_distance(self):
        expected = satellite_horizon_distance_km(500.0)
        for lon, lat in satellite_horizon_polygon(30.0, -40.0, 500.0, 36)[:-1]:
            assert surface_distance_km(30.0, -40.0, lat, lon) == pytest.approx(expected, rel=1e-6)

    def test_horizon_points_have_zero_elevation(self):
        for lon, lat in satellite_horizon_polygon(0.0, 0.0, 500.0, 8)[:-1]:
            angles = look_angles(lat, lon, 0.0, 0.0, 0.0, 500.0)
            assert angles.elevation_deg == pytest.approx(0.0, abs=1e-6)

    def test_first_point_due_north(self):
        ring = satellite_horizon_polygon(0.0, 0.0, 500.0, 4)
        alpha = math.degrees(math.acos(EARTH_RADIUS_KM / (EARTH_RADIUS_KM + 500.0)))
        assert ring[0][0] == pytest.approx(0.0, abs=1e-9)
        assert ring[0][1] == pytest.approx(alpha, abs=1e-9)

    @pytest.mark.parametrize("alt_km", [0.0, -10.0])
    def test_non_positive_altitude_collapses(self, alt_km):
        ring = satellite_horizon_polygon(12.0, 34.0, alt_km, 10)
        assert len(ring) == 11
        for lon, lat in ring:
            assert lon == pytest.approx(34.0, abs=1e-9)
            assert lat == pytest.approx(12.0, abs=1e-9)


class TestSurfaceDistance:

    def test_quarter_circumference(self):
        expected = math.pi / 2 * EARTH_RADIUS_KM
        assert surface_distance_km(0.0, 0.0, 0.0, 90.0) == pytest.approx(expected)

    def test_symmetric(self):
        assert surface_distance_km(10, 20, 30, 40) == pytest.approx(surface_distance_km(30, 40, 10, 20))


# ── Domain purity ────────────────────────────────────────────────────

class TestDomainPurity:

    @pytest.mark.parametrize("module_name", [
        "hamsats.domain.geometry",
        "hamsats.domain.ground_track",
        "hamsats.domain.tle",
        "hamsats.domain.coordinate_frames",
        "hamsats.domain.web_mercator",
        "hamsats.domain.shapes",
        "hamsats.domain.locations",
    ])
    def test_imports_only_stdlib_numpy_and_domain(self, module_name):
        import importlib

        mod = importlib.import_module(module_name)
        allowed = {'math', 'dataclasses', 'typing', 'datetime', 're', 'numpy'}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split('.')[0]
                    assert root in allowed, f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom) and node.level == 0:
                if node.module.startswith('hamsats.domain'):
                    continue
                root = node.module.split('.')[0]
                assert root in allowed, f"Disallowed import from '{node.module}'"
