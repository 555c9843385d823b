"""Shared pytest fixtures for racecourse_planner tests.

COORDINATE SYSTEM:
    Courses are anchored at the default start flag (41.777, -71.379) in
    Narragansett Bay. With no wind and no locked direction the course
    direction is 0, so "windward" is due north and the start line runs
    due west from the flag.

FLEET:
    10 boats x 4.19 m x 1.5 = 62.85 m start line. The start line center
    (0.75 boat lengths per boat) is 31.425 m west of the flag and the pin
    62.85 m west.
"""

from datetime import datetime, timedelta, timezone

import pytest

from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.model.course import Course
from racecourse_planner.model.course_stack import LocalCourseStack
from racecourse_planner.model.course_state import CourseState
from racecourse_planner.model.layout import Layouts
from racecourse_planner.model.wind_information import WeatherStation, WindInformation

START_FLAG = Coordinate(latitude=41.777, longitude=-71.379)
START_LINE_M = 10 * 4.19 * 1.5
BASE_TIME = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_wind(direction: float, minutes_ago: float = 0.0, speed: float = 10.0) -> WindInformation:
    """Wind sample starting the given number of minutes before BASE_TIME."""
    return WindInformation(
        start_time=BASE_TIME - timedelta(minutes=minutes_ago),
        direction=direction,
        speed=speed,
        gusts=speed * 1.4,
        station=WeatherStation(id="8454000", name="Providence", location=START_FLAG),
    )


# =============================================================================
# COURSES
# =============================================================================


@pytest.fixture
def start_flag() -> Coordinate:
    return START_FLAG


@pytest.fixture
def triangle_course() -> Course:
    """Default Triangle course: 10 boats of 4.19 m at the default start flag."""
    return Course(
        start_flag=START_FLAG,
        number_of_boats=10,
        boat_length=4.19,
        layout=Layouts.TRIANGLE,
    )


@pytest.fixture
def triangle_state(triangle_course: Course) -> CourseState:
    """Triangle course with no wind history (course direction 0)."""
    return CourseState(course=triangle_course)


@pytest.fixture
def gate_state() -> CourseState:
    return CourseState(course=Course(start_flag=START_FLAG, layout=Layouts.WINDWARD_LEEWARD_GATE))


@pytest.fixture
def digital_n_state() -> CourseState:
    course = Course(start_flag=START_FLAG)
    course.layout = Layouts.DIGITAL_N
    return CourseState(course=course)


@pytest.fixture
def stack(triangle_course: Course) -> LocalCourseStack:
    return LocalCourseStack(course=triangle_course)
