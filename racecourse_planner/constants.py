"""Configuration constants for Race Course Planner.

All configurable parameters are centralized here for easy tuning.

Classes:
    GeoConfig: Earth model and angle conventions
    CourseConfig: Default course settings (boats, distances, wind)
    StackConfig: Undo/redo history limits
    SliderConfig: Slider ranges for adjustable distances
    LayoutConfig: Layout geometry factors and zone sizes
"""

from math import pi

# Nautical unit conversion
FEET_PER_METER = 3.280839895013123
YARDS_PER_METER = 1.093613298337708


class GeoConfig:
    """Earth model used by every geodetic calculation."""

    # Mean Earth radius in meters (spherical approximation)
    EARTH_RADIUS_M = 6_372_797.6

    # Length of one degree of latitude (or longitude at the equator)
    EARTH_METERS_PER_DEGREE = 2 * pi * EARTH_RADIUS_M / 360.0

    # Cross products shorter than this mean the great circles coincide
    INTERSECTION_EPSILON = 1e-10


class CourseConfig:
    """Default settings for a freshly created course."""

    DEFAULT_NAME = "New Course"

    # Committee boat anchor for new courses (Narragansett Bay)
    DEFAULT_START_FLAG_LAT = 41.777
    DEFAULT_START_FLAG_LON = -71.379

    DEFAULT_NUMBER_OF_BOATS = 10

    # Sunfish length in meters
    DEFAULT_BOAT_LENGTH_M = 4.19

    # Start line is this many boat lengths per boat
    START_LINE_BOAT_LENGTHS = 1.5

    DEFAULT_ZONE_SIZE = 3
    DEFAULT_TARGET_RADIUS_M = 10.0

    # Seconds for a wind sample's weight to halve; <= 0 uses only the newest sample
    DEFAULT_WIND_HALF_LIFE_S = 600.0

    # Each wind report covers a 6-minute interval
    WIND_SAMPLE_DURATION_S = 360.0

    # Number of wind samples kept for averaging (most recent first)
    WIND_HISTORY_SIZE = 5

    DEFAULT_DISTANCES_M = {
        "upwind": 175.0,
        "downwind": 175.0,
        "width": 100.0,
        "trapezoidDownwind": 100.0,
        "offset": 30.0,
        "gate": 30.0,
        "start": 100.0,
        "finish": 100.0,
        "finishLine": 30.0,
    }


class StackConfig:
    """Undo/redo history limits."""

    # Maximum snapshots kept on each of the undo and redo stacks
    STACK_LIMIT = 20


class SliderConfig:
    """Slider ranges for adjustable distances, as (min, max, step)."""

    LARGE_METERS = (100.0, 300.0, 25.0)
    LARGE_FEET = (300.0, 900.0, 75.0)
    SMALL_METERS = (30.0, 100.0, 10.0)
    SMALL_FEET = (100.0, 300.0, 25.0)


class LayoutConfig:
    """Layout geometry factors and zone sizes."""

    # Mark-exclusion zone radius in boat lengths
    TEAM_RACING_ZONE_SIZE = 2
    FLEET_RACING_ZONE_SIZE = 3

    # Start pin sits a full start line away from the flag; the line center half of that
    START_PIN_FACTOR = 1.5
    START_CENTER_FACTOR = 0.75

    # Leeward mark doubling as the start pin sits this far off the line center
    LEEWARD_PIN_FACTOR = 0.75

    # Spread used by dropRandomMarks around each target, in meters
    RANDOM_MARK_SCATTER_M = 15.0


assert LayoutConfig.START_CENTER_FACTOR * 2 == LayoutConfig.START_PIN_FACTOR, "Line center must be halfway to the pin"
assert CourseConfig.START_LINE_BOAT_LENGTHS == LayoutConfig.START_PIN_FACTOR, "Pin distance must match start line"
assert all(
    low < high
    for low, high, _ in (
        SliderConfig.LARGE_METERS,
        SliderConfig.LARGE_FEET,
        SliderConfig.SMALL_METERS,
        SliderConfig.SMALL_FEET,
    )
), "Slider minimum must be below maximum"
