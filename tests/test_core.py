"""Tests for racecourse_planner core module.

Tests: angle helpers, GeoCalculator, Coordinate, Point, CoordinateRegion
Focus: Algebraic contracts shared by both Location types (round-trip
projection, bearing reciprocity, intersection inverse) and region folding.
"""

import math

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from racecourse_planner.constants import GeoConfig
from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.core.coordinate_region import CoordinateRegion, CoordinateSpan
from racecourse_planner.core.geo_calculator import (
    GeoCalculator,
    angular_difference,
    feet_to_meters,
    meters_to_feet,
    normalize_bearing,
)
from racecourse_planner.core.point import Point

bearings = st.floats(min_value=0.0, max_value=359.999, allow_nan=False)
latitudes = st.floats(min_value=-60.0, max_value=60.0, allow_nan=False)
longitudes = st.floats(min_value=-179.0, max_value=179.0, allow_nan=False)


# =============================================================================
# ANGLE HELPERS
# =============================================================================


class TestAngles:
    """normalize_bearing and angular_difference."""

    def test_normalize_bearing_wraps_into_range(self) -> None:
        assert normalize_bearing(0.0) == 0.0
        assert normalize_bearing(360.0) == 0.0
        assert normalize_bearing(-90.0) == 270.0
        assert normalize_bearing(725.0) == 5.0
        assert normalize_bearing(-1e-17) == 0.0

    def test_angular_difference_is_signed_and_short(self) -> None:
        assert angular_difference(350.0, 10.0) == pytest.approx(20.0)
        assert angular_difference(10.0, 350.0) == pytest.approx(-20.0)
        assert angular_difference(0.0, 180.0) == 180.0
        assert angular_difference(180.0, 0.0) == 180.0, "Half turn is +180, never -180"
        assert angular_difference(90.0, 90.0) == 0.0

    @given(a=st.floats(min_value=-1000, max_value=1000), b=st.floats(min_value=-1000, max_value=1000))
    def test_angular_difference_range(self, a: float, b: float) -> None:
        diff = angular_difference(a, b)
        assert -180.0 < diff <= 180.0

    def test_unit_conversions(self) -> None:
        assert meters_to_feet(1.0) == pytest.approx(3.28084, abs=1e-5)
        assert feet_to_meters(meters_to_feet(123.4)) == pytest.approx(123.4)


# =============================================================================
# GEO CALCULATOR
# =============================================================================


class TestGeoCalculator:
    """Spherical formulas against known values."""

    def test_one_degree_of_latitude(self) -> None:
        dist = GeoCalculator.distance_m(lat1=41.0, lon1=-71.0, lat2=42.0, lon2=-71.0)
        assert dist == pytest.approx(GeoConfig.EARTH_METERS_PER_DEGREE, rel=1e-9)

    def test_cardinal_bearings(self) -> None:
        north = GeoCalculator.initial_bearing_deg(lat1=41.0, lon1=-71.0, lat2=41.1, lon2=-71.0)
        east = GeoCalculator.initial_bearing_deg(lat1=41.0, lon1=-71.0, lat2=41.0, lon2=-70.9)
        south = GeoCalculator.initial_bearing_deg(lat1=41.1, lon1=-71.0, lat2=41.0, lon2=-71.0)
        assert north == pytest.approx(0.0, abs=1e-9)
        assert 89.9 < east < 90.1
        assert south == pytest.approx(180.0)

    def test_identical_points_have_zero_distance(self) -> None:
        assert GeoCalculator.distance_m(lat1=41.777, lon1=-71.379, lat2=41.777, lon2=-71.379) == 0.0

    def test_midpoint_on_equator(self) -> None:
        lat, lon = GeoCalculator.midpoint(lat1=0.0, lon1=10.0, lat2=0.0, lon2=20.0)
        assert lat == pytest.approx(0.0, abs=1e-12)
        assert lon == pytest.approx(15.0)

    def test_midpoint_is_not_arithmetic_mean_at_high_latitude(self) -> None:
        """Great-circle midpoint bulges poleward of the mean latitude."""
        lat, _ = GeoCalculator.midpoint(lat1=60.0, lon1=0.0, lat2=60.0, lon2=40.0)
        assert lat > 60.5


# =============================================================================
# COORDINATE
# =============================================================================


class TestCoordinate:
    """Geodetic Location."""

    def test_project_and_measure(self, start_flag: Coordinate) -> None:
        west = start_flag.project(bearing=-90.0, distance=31.425)
        assert start_flag.distance(west) == pytest.approx(31.425, abs=1e-4)
        assert angular_difference(start_flag.bearing(west), 270.0) == pytest.approx(0.0, abs=1e-6)
        assert west.longitude < start_flag.longitude

    def test_distance_is_symmetric(self, start_flag: Coordinate) -> None:
        other = Coordinate(latitude=41.79, longitude=-71.36)
        assert start_flag.distance(other) == pytest.approx(other.distance(start_flag), rel=1e-12)

    def test_midpoint_is_equidistant(self, start_flag: Coordinate) -> None:
        other = start_flag.project(bearing=33.0, distance=800.0)
        mid = start_flag.midpoint(other)
        assert start_flag.distance(mid) == pytest.approx(400.0, abs=1e-3)
        assert other.distance(mid) == pytest.approx(400.0, abs=1e-3)

    def test_intersection_of_perpendicular_rays(self, start_flag: Coordinate) -> None:
        north = start_flag.project(bearing=0.0, distance=200.0)
        east = start_flag.project(bearing=90.0, distance=200.0)
        # North from "east" and east from "north" cross near the NE corner
        corner = east.intersection(bearing=0.0, other=north, other_bearing=90.0)
        assert corner is not None
        assert corner.distance(start_flag) == pytest.approx(200.0 * math.sqrt(2), rel=1e-3)

    def test_intersection_of_coincident_circles_is_none(self, start_flag: Coordinate) -> None:
        ahead = start_flag.project(bearing=0.0, distance=500.0)
        assert start_flag.intersection(bearing=0.0, other=ahead, other_bearing=0.0) is None

    def test_intersection_picks_crossing_near_origin(self) -> None:
        a = Coordinate(latitude=0.0, longitude=0.0)
        b = Coordinate(latitude=0.0, longitude=1.0)
        crossing = a.intersection(bearing=45.0, other=b, other_bearing=315.0)
        assert crossing is not None
        assert a.distance(crossing) < 100_000, "Should not return the antipodal crossing"

    def test_validity(self) -> None:
        assert Coordinate(latitude=41.0, longitude=-71.0).is_valid()
        assert not Coordinate(latitude=91.0, longitude=0.0).is_valid()
        assert not Coordinate(latitude=0.0, longitude=181.0).is_valid()

    def test_dict_roundtrip(self, start_flag: Coordinate) -> None:
        assert Coordinate.from_dict(start_flag.to_dict()) == start_flag

    @given(lat=latitudes, lon=longitudes, bearing=bearings, distance=st.floats(min_value=1.0, max_value=20_000.0))
    @settings(max_examples=200)
    def test_round_trip_projection(self, lat: float, lon: float, bearing: float, distance: float) -> None:
        """p.project(b, d) lies d away from p on bearing b."""
        p = Coordinate(latitude=lat, longitude=lon)
        q = p.project(bearing=bearing, distance=distance)
        assert q.distance(p) == pytest.approx(distance, rel=1e-6, abs=0.01)
        assert angular_difference(p.bearing(q), bearing) == pytest.approx(0.0, abs=1e-4)

    @given(lat=latitudes, lon=longitudes, bearing=bearings, distance=st.floats(min_value=10.0, max_value=5_000.0))
    @settings(max_examples=200)
    def test_bearing_reciprocity(self, lat: float, lon: float, bearing: float, distance: float) -> None:
        """Reverse bearing is the forward bearing plus 180 over race-course distances."""
        p = Coordinate(latitude=lat, longitude=lon)
        q = p.project(bearing=bearing, distance=distance)
        assert angular_difference(p.bearing(q), q.bearing(p) + 180.0) == pytest.approx(0.0, abs=0.1)


# =============================================================================
# POINT
# =============================================================================


class TestPoint:
    """Planar Location (y grows south)."""

    def test_north_is_negative_y(self) -> None:
        p = Point.ZERO.project(bearing=0.0, distance=10.0)
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(-10.0)

    def test_east_is_positive_x(self) -> None:
        p = Point.ZERO.project(bearing=90.0, distance=10.0)
        assert p.x == pytest.approx(10.0)
        assert p.y == pytest.approx(0.0, abs=1e-12)

    def test_bearing_and_distance(self) -> None:
        assert Point.ZERO.bearing(Point(x=0.0, y=10.0)) == pytest.approx(180.0)
        assert Point.ZERO.bearing(Point(x=-10.0, y=0.0)) == pytest.approx(270.0)
        assert Point(x=3.0, y=4.0).distance(Point.ZERO) == 5.0

    def test_midpoint_is_mean(self) -> None:
        assert Point(x=2.0, y=4.0).midpoint(Point(x=4.0, y=8.0)) == Point(x=3.0, y=6.0)

    def test_intersection(self) -> None:
        crossing = Point(x=0.0, y=0.0).intersection(bearing=90.0, other=Point(x=5.0, y=5.0), other_bearing=0.0)
        assert crossing is not None
        assert crossing.x == pytest.approx(5.0)
        assert crossing.y == pytest.approx(0.0, abs=1e-12)

    def test_parallel_intersection_is_none(self) -> None:
        assert Point.ZERO.intersection(bearing=0.0, other=Point(x=5.0, y=0.0), other_bearing=0.0) is None

    def test_dict_roundtrip(self) -> None:
        p = Point(x=1.5, y=-2.5)
        assert Point.from_dict(p.to_dict()) == p

    @given(
        x=st.floats(min_value=-1e4, max_value=1e4),
        y=st.floats(min_value=-1e4, max_value=1e4),
        bearing=bearings,
        distance=st.floats(min_value=1.0, max_value=1e4),
    )
    def test_round_trip_projection(self, x: float, y: float, bearing: float, distance: float) -> None:
        p = Point(x=x, y=y)
        q = p.project(bearing=bearing, distance=distance)
        assert q.distance(p) == pytest.approx(distance, rel=1e-9, abs=1e-9)
        assert angular_difference(p.bearing(q), bearing) == pytest.approx(0.0, abs=1e-6)
        assert angular_difference(p.bearing(q), q.bearing(p) + 180.0) == pytest.approx(0.0, abs=1e-6)


# =============================================================================
# INTERSECTION INVERSE (both Location types)
# =============================================================================


def _crossing_cases(count: int, seed: int) -> list[tuple[float, float, float, float]]:
    """(bearing1, distance1, bearing2, distance2) with bearings 20-160 degrees apart."""
    rng = np.random.default_rng(seed)
    cases = []
    while len(cases) < count:
        b1 = float(rng.uniform(0.0, 360.0))
        b2 = float(rng.uniform(0.0, 360.0))
        if 20.0 <= abs(angular_difference(b1, b2)) <= 160.0:
            cases.append((b1, float(rng.uniform(100.0, 5000.0)), b2, float(rng.uniform(100.0, 5000.0))))
    return cases


class TestIntersectionInverse:
    """Projecting out from a crossing and intersecting back recovers the crossing."""

    def test_coordinates(self) -> None:
        rng = np.random.default_rng(7)
        for b1, d1, b2, d2 in _crossing_cases(count=1000, seed=1):
            crossing = Coordinate(latitude=float(rng.uniform(-60, 60)), longitude=float(rng.uniform(-179, 179)))
            a = crossing.project(bearing=b1, distance=d1)
            b = crossing.project(bearing=b2, distance=d2)
            found = a.intersection(bearing=a.bearing(crossing), other=b, other_bearing=b.bearing(crossing))
            assert found is not None
            assert found.distance(crossing) < 0.01, f"Case {b1:.1f}/{d1:.0f}, {b2:.1f}/{d2:.0f}"

    def test_points(self) -> None:
        rng = np.random.default_rng(11)
        for b1, d1, b2, d2 in _crossing_cases(count=1000, seed=2):
            crossing = Point(x=float(rng.uniform(-1e4, 1e4)), y=float(rng.uniform(-1e4, 1e4)))
            a = crossing.project(bearing=b1, distance=d1)
            b = crossing.project(bearing=b2, distance=d2)
            found = a.intersection(bearing=a.bearing(crossing), other=b, other_bearing=b.bearing(crossing))
            assert found is not None
            assert found.distance(crossing) < 1e-6


# =============================================================================
# COORDINATE REGION
# =============================================================================


class TestCoordinateRegion:
    """Bounding regions and the UNDEFINED identity."""

    def test_undefined_adopts_first_point(self, start_flag: Coordinate) -> None:
        region = CoordinateRegion.UNDEFINED.enclosing(start_flag)
        assert not region.is_undefined
        assert region.center == start_flag
        assert region.span == CoordinateSpan.ZERO

    def test_undefined_adopts_region(self) -> None:
        region = CoordinateRegion.from_corners(latitude1=1.0, longitude1=2.0, latitude2=3.0, longitude2=5.0)
        assert CoordinateRegion.UNDEFINED.enclosing(region) == region
        assert region.enclosing(CoordinateRegion.UNDEFINED) == region

    def test_undefined_is_undefined(self) -> None:
        assert CoordinateRegion.UNDEFINED.is_undefined

    def test_from_corners_in_any_order(self) -> None:
        region = CoordinateRegion.from_corners(latitude1=3.0, longitude1=5.0, latitude2=1.0, longitude2=2.0)
        assert region.center == Coordinate(latitude=2.0, longitude=3.5)
        assert region.span == CoordinateSpan(latitude_delta=2.0, longitude_delta=3.0)
        assert region.min_corner == Coordinate(latitude=1.0, longitude=2.0)
        assert region.max_corner == Coordinate(latitude=3.0, longitude=5.0)

    def test_negative_span_stored_absolute(self) -> None:
        region = CoordinateRegion(
            center=Coordinate(latitude=0.0, longitude=0.0),
            span=CoordinateSpan(latitude_delta=-2.0, longitude_delta=-4.0),
        )
        assert region.span == CoordinateSpan(latitude_delta=2.0, longitude_delta=4.0)

    def test_from_meters(self, start_flag: Coordinate) -> None:
        region = CoordinateRegion.from_meters(center=start_flag, latitudinal_meters=20.0, longitudinal_meters=20.0)
        north_edge = Coordinate(latitude=region.max_latitude, longitude=start_flag.longitude)
        east_edge = Coordinate(latitude=start_flag.latitude, longitude=region.max_longitude)
        assert start_flag.distance(north_edge) == pytest.approx(10.0, rel=1e-3)
        assert start_flag.distance(east_edge) == pytest.approx(10.0, rel=1e-3)

    def test_scaled(self) -> None:
        region = CoordinateRegion.from_corners(latitude1=0.0, longitude1=0.0, latitude2=2.0, longitude2=4.0)
        doubled = region.scaled(2.0)
        assert doubled.center == region.center
        assert doubled.span == CoordinateSpan(latitude_delta=4.0, longitude_delta=8.0)

    @given(
        points=st.lists(st.tuples(latitudes, longitudes), min_size=1, max_size=8),
        seed=st.integers(min_value=0, max_value=1000),
    )
    def test_folding_is_order_independent(self, points: list[tuple[float, float]], seed: int) -> None:
        coords = [Coordinate(latitude=lat, longitude=lon) for lat, lon in points]
        shuffled = list(coords)
        np.random.default_rng(seed).shuffle(shuffled)

        forward = CoordinateRegion.UNDEFINED
        for c in coords:
            forward = forward.enclosing(c)
        backward = CoordinateRegion.UNDEFINED
        for c in shuffled:
            backward = backward.enclosing(c)

        assert forward.is_close(backward, delta=1e-9)
        assert forward.min_latitude == pytest.approx(min(lat for lat, _ in points), abs=1e-9)
        assert forward.max_longitude == pytest.approx(max(lon for _, lon in points), abs=1e-9)
