# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the home location marker and horizon circle."""
import pytest

from hamsats.domain.locations import ObserverLocation
from hamsats.domain.shapes import CircleShape, PointShape
from hamsats.features.home_location import HomeLocation
from hamsats.ports.rendering import MapLayer


LONDON = ObserverLocation(lat_deg=51.5, lon_deg=-0.12)
PARIS = ObserverLocation(lat_deg=48.86, lon_deg=2.35)


@pytest.fixture
def home(renderer):
    return HomeLocation(renderer)


class TestHomeLocation:

    def test_initially_empty(self, home, renderer):
        assert home.get_coordinates() is None
        assert renderer.feature_count() == 0

    def test_set_location_draws_marker(self, home, renderer):
        home.set_location(LONDON)
        markers = renderer.features(MapLayer.VECTOR)
        assert len(markers) == 1
        assert markers[0].shape == PointShape(lon_deg=-0.12, lat_deg=51.5)
        assert home.get_coordinates() == LONDON

    def test_moving_updates_single_marker(self, home, renderer):
        home.set_location(LONDON)
        home.set_location(PARIS)
        markers = renderer.features(MapLayer.VECTOR)
        assert len(markers) == 1
        assert markers[0].shape == PointShape(lon_deg=2.35, lat_deg=48.86)

    def test_horizon_radius_from_height(self, home, renderer):
        home.set_location(LONDON)
        home.update_horizon(100)
        circles = renderer.features(MapLayer.HORIZON)
        assert len(circles) == 1
        shape = circles[0].shape
        assert isinstance(shape, CircleShape)
        assert shape.center == LONDON.lon_lat
        assert shape.radius_m == pytest.approx(35_700.0)
        assert home.horizon_is_current

    def test_moving_leaves_horizon_until_update(self, home, renderer):
        home.set_location(LONDON)
        home.update_horizon(100)
        home.set_location(PARIS)
        assert renderer.features(MapLayer.HORIZON)[0].shape.center == LONDON.lon_lat
        assert not home.horizon_is_current

        home.update_horizon(100)
        circles = renderer.features(MapLayer.HORIZON)
        assert len(circles) == 1
        assert circles[0].shape.center == PARIS.lon_lat
        assert home.horizon_is_current

    def test_horizon_without_location_is_noop(self, home, renderer):
        home.update_horizon(100)
        assert renderer.feature_count() == 0
        assert not home.horizon_is_current

    def test_zero_height_draws_degenerate_circle(self, home, renderer):
        home.set_location(LONDON)
        home.update_horizon(0)
        assert renderer.features(MapLayer.HORIZON)[0].shape.radius_m == 0.0

    def test_negative_height_removes_horizon(self, home, renderer):
        home.set_location(LONDON)
        home.update_horizon(100)
        home.update_horizon(-5)
        assert renderer.feature_count(MapLayer.HORIZON) == 0

    def test_remove_retracts_everything(self, home, renderer):
        home.set_location(LONDON)
        home.update_horizon(50)
        home.remove()
        assert renderer.feature_count() == 0
        home.remove()
