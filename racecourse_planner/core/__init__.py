"""Core geometry for race course layout.

This module provides the mathematical backbone for course planning:
- GeoCalculator: Geodesic calculations (distances, bearings, destinations)
- Location: The five operations shared by every position type
- Coordinate: Geodetic latitude/longitude location
- Point: Planar x/y location (y grows south, like the screen)
- CoordinateRegion: Bounding regions accumulated over a course
"""

from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.core.coordinate_region import CoordinateRegion, CoordinateSpan
from racecourse_planner.core.geo_calculator import (
    GeoCalculator,
    angular_difference,
    feet_to_meters,
    meters_to_feet,
    normalize_bearing,
)
from racecourse_planner.core.location import Location
from racecourse_planner.core.point import Point

__all__ = [
    # Geo calculator
    "GeoCalculator",
    "angular_difference",
    "normalize_bearing",
    "feet_to_meters",
    "meters_to_feet",
    # Locations
    "Location",
    "Coordinate",
    "Point",
    # Regions
    "CoordinateRegion",
    "CoordinateSpan",
]
