"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for race course layout:
- Angle helpers (bearing normalization, signed angular difference)
- Distance calculation (Haversine formula)
- Bearing calculation (initial heading between points)
- Destination calculation (endpoint from start, bearing, distance)
- Midpoint and great-circle intersection

All calculations use a spherical Earth approximation (R = 6,372,797.6 m).
"""

from math import asin, atan2, cos, degrees, radians, sin, sqrt

import numpy as np

from racecourse_planner.constants import FEET_PER_METER, GeoConfig

EARTH_RADIUS_M = GeoConfig.EARTH_RADIUS_M


def normalize_bearing(bearing_deg: float) -> float:
    """Wrap a bearing into [0, 360)."""
    wrapped = bearing_deg % 360.0
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def angular_difference(a: float, b: float) -> float:
    """Signed angle from bearing a to bearing b, in (-180, 180].

    Example:
        angular_difference(350, 10) == 20
        angular_difference(10, 350) == -20
    """
    diff = (b - a) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def feet_to_meters(feet: float) -> float:
    return feet / FEET_PER_METER


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def _to_nvector(lat: float, lon: float) -> np.ndarray:
    """Unit vector from Earth's center through (lat, lon)."""
    lat_rad, lon_rad = radians(lat), radians(lon)
    return np.array([cos(lat_rad) * cos(lon_rad), cos(lat_rad) * sin(lon_rad), sin(lat_rad)])


def _great_circle_normal(lat: float, lon: float, bearing_deg: float) -> np.ndarray:
    """Normal of the great circle leaving (lat, lon) on the given bearing."""
    lat_rad, lon_rad, brng = radians(lat), radians(lon), radians(bearing_deg)
    # Closed form of p × d, where d is the unit heading vector at p
    return np.array(
        [
            sin(lon_rad) * cos(brng) - sin(lat_rad) * cos(lon_rad) * sin(brng),
            -cos(lon_rad) * cos(brng) - sin(lat_rad) * sin(lon_rad) * sin(brng),
            cos(lat_rad) * sin(brng),
        ]
    )


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    All methods use a spherical Earth model (R = 6,372,797.6 m).
    Coordinates are in decimal degrees.
    Bearings are in degrees clockwise from North (0-360).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Great-circle distance between two points using the Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate initial bearing from point 1 to point 2.

        The bearing is the compass direction to travel from start to end,
        measured clockwise from true North.

        Returns:
            Bearing in degrees (0-360, clockwise from North).
        """
        lat1_rad, lat2_rad = radians(lat1), radians(lat2)
        dlon = radians(lon2 - lon1)
        y = sin(dlon) * cos(lat2_rad)
        x = cos(lat1_rad) * sin(lat2_rad) - sin(lat1_rad) * cos(lat2_rad) * cos(dlon)
        bearing = degrees(atan2(y, x))
        return bearing + 360 if bearing < 0 else bearing

    @staticmethod
    def destination(
        lat: float,
        lon: float,
        bearing_deg: float,
        distance_m: float,
    ) -> tuple[float, float]:
        """Calculate destination point given start, bearing, and distance.

        Args:
            lat: Latitude of start point (decimal degrees)
            lon: Longitude of start point (decimal degrees)
            bearing_deg: Bearing in degrees (clockwise from North)
            distance_m: Distance to travel in meters

        Returns:
            Tuple (lat, lon) of destination point in decimal degrees.
        """
        brng = radians(bearing_deg)
        lat1 = radians(lat)
        lon1 = radians(lon)
        d_R = distance_m / EARTH_RADIUS_M

        lat2 = asin(sin(lat1) * cos(d_R) + cos(lat1) * sin(d_R) * cos(brng))
        lon2 = lon1 + atan2(
            sin(brng) * sin(d_R) * cos(lat1),
            cos(d_R) - sin(lat1) * sin(lat2),
        )
        return degrees(lat2), degrees(lon2)

    @staticmethod
    def midpoint(lat1: float, lon1: float, lat2: float, lon2: float) -> tuple[float, float]:
        """Point halfway along the great circle between two points.

        Returns:
            Tuple (lat, lon) in decimal degrees.
        """
        lat1_rad, lat2_rad = radians(lat1), radians(lat2)
        lon1_rad = radians(lon1)
        dlon = radians(lon2 - lon1)

        bx = cos(lat2_rad) * cos(dlon)
        by = cos(lat2_rad) * sin(dlon)
        lat_mid = atan2(sin(lat1_rad) + sin(lat2_rad), sqrt((cos(lat1_rad) + bx) ** 2 + by**2))
        lon_mid = lon1_rad + atan2(by, cos(lat1_rad) + bx)
        return degrees(lat_mid), degrees(lon_mid)

    @staticmethod
    def intersection(
        lat1: float,
        lon1: float,
        bearing1_deg: float,
        lat2: float,
        lon2: float,
        bearing2_deg: float,
    ) -> tuple[float, float] | None:
        """Crossing point of two great circles given by start points and bearings.

        Two great circles always cross at a pair of antipodal points; the one
        within 90° of the first start point is returned, so short rays on a
        race course behave like their planar counterparts.

        Returns:
            Tuple (lat, lon), or None if the two great circles coincide.
        """
        normal1 = _great_circle_normal(lat1, lon1, bearing1_deg)
        normal2 = _great_circle_normal(lat2, lon2, bearing2_deg)

        crossing = np.cross(normal1, normal2)
        norm = np.linalg.norm(crossing)
        if norm < GeoConfig.INTERSECTION_EPSILON:
            return None
        crossing = crossing / norm

        if np.dot(crossing, _to_nvector(lat1, lon1)) < 0:
            crossing = -crossing

        lat = degrees(atan2(crossing[2], sqrt(crossing[0] ** 2 + crossing[1] ** 2)))
        lon = degrees(atan2(crossing[1], crossing[0]))
        return lat, lon
