"""Tests for the flat-earth projection helpers."""

from __future__ import annotations

import math

import pytest

from seamark_sectors.geometry.projection import (
    NM_PER_DEGREE,
    arc_bearings,
    arc_step,
    bearing_to_angle,
    project,
)


def distance_nm(lat0: float, lon0: float, lat: float, lon: float) -> float:
    """Planar distance in nm using the same approximation as :func:`project`."""
    dlat = (lat - lat0) * NM_PER_DEGREE
    dlon = (lon - lon0) * NM_PER_DEGREE * math.cos(math.radians(lat0))
    return math.hypot(dlat, dlon)


class TestProject:
    def test_bearing_180_is_drawn_north(self):
        """A light seen on bearing 180° from seaward lies south of the observer."""
        lat, lon = project(0.0, 0.0, 60.0, 180.0)
        assert lat == pytest.approx(1.0)
        assert lon == pytest.approx(0.0, abs=1e-12)

    def test_bearing_0_is_drawn_south(self):
        lat, lon = project(0.0, 0.0, 60.0, 0.0)
        assert lat == pytest.approx(-1.0)
        assert lon == pytest.approx(0.0, abs=1e-12)

    def test_bearing_90_is_drawn_west(self):
        lat, lon = project(0.0, 0.0, 60.0, 90.0)
        assert lat == pytest.approx(0.0, abs=1e-12)
        assert lon == pytest.approx(-1.0)

    def test_longitude_scaled_by_latitude(self):
        """At 60°N one nautical mile east spans twice as many degrees of longitude."""
        lat, lon = project(60.0, 10.0, 60.0, 270.0)
        assert lat == pytest.approx(60.0)
        assert lon == pytest.approx(12.0)

    @pytest.mark.parametrize("bearing", [0.0, 37.5, 123.0, 270.0, 359.9, 420.0])
    def test_distance_equals_radius(self, bearing):
        lat, lon = project(54.2, 7.9, 2.5, bearing)
        assert distance_nm(54.2, 7.9, lat, lon) == pytest.approx(2.5)

    def test_zero_radius_is_anchor(self):
        assert project(54.0, 8.0, 0.0, 77.0) == pytest.approx((54.0, 8.0))

    def test_angle_convention(self):
        assert bearing_to_angle(0.0) == pytest.approx(1.5 * math.pi)
        assert bearing_to_angle(270.0) == pytest.approx(0.0)


class TestArcStep:
    def test_chord_capped_by_arc_max(self):
        """radius 5, arc_div 8 gives a 0.625 nm chord, capped at 0.1 nm."""
        expected = math.degrees(2 * math.asin(0.1 / 10.0))
        assert arc_step(5.0, 0.1, 8.0) == pytest.approx(expected)

    def test_unlimited_arc_max(self):
        expected = math.degrees(2 * math.asin(0.625 / 10.0))
        assert arc_step(5.0, 0.0, 8.0) == pytest.approx(expected)

    def test_small_radius_not_capped(self):
        """radius 0.2 gives a 0.025 nm chord, below the 0.1 nm cap."""
        expected = math.degrees(2 * math.asin(0.025 / 0.4))
        assert arc_step(0.2, 0.1, 8.0) == pytest.approx(expected)

    def test_step_grows_with_divisor_decrease(self):
        assert arc_step(1.0, 0.0, 2.0) > arc_step(1.0, 0.0, 8.0)


class TestArcBearings:
    def test_interior_points_only(self):
        assert arc_bearings(10.0, 50.0, 15.0) == [25.0, 40.0]

    def test_end_is_excluded(self):
        assert arc_bearings(0.0, 30.0, 10.0) == [10.0, 20.0]

    def test_step_wider_than_arc(self):
        assert arc_bearings(10.0, 12.0, 5.0) == []

    def test_non_positive_step(self):
        assert arc_bearings(0.0, 90.0, 0.0) == []

    def test_wrapped_range(self):
        assert arc_bearings(350.0, 380.0, 10.0) == [360.0, 370.0]
