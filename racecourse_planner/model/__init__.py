"""Data model classes for race course layout.

Layouts describe geometry; courses place it on the water:
- MarkRole: Identity of a position on the course (windward, start pin, ...)
- Distances: Every adjustable distance, with the calculations that read them
- Locus: Node of the tree that positions marks relative to the start flag
- Layout: Named locus tree with a stable id, plus the canonical Layouts
- WindInformation / WindHistory: Six-minute wind samples, most recent first
- Course: Anchor, fleet, layout, distances and dropped marks
- CourseState: Course plus wind history, with target and mark queries
- LocalCourseStack / RemoteCourseStack: Undo/redo history over courses
- UserRoles / UserPermissions: Race committee permission model
"""

from racecourse_planner.model.course import Course
from racecourse_planner.model.course_stack import CourseStack, LocalCourseStack, RemoteCourseStack
from racecourse_planner.model.course_state import CourseState, TargetLocation
from racecourse_planner.model.distance import (
    Adjustable,
    DistanceCalculation,
    DistanceMeasurement,
    Distances,
    DistanceUnit,
    NewDistanceValue,
    SliderSettings,
    TotalBoatLengths,
)
from racecourse_planner.model.layout import (
    Layout,
    LayoutProvider,
    Layouts,
    StaticLayoutProvider,
    default_layout_provider,
)
from racecourse_planner.model.locus import Locus, LocusPosition
from racecourse_planner.model.mark_role import MarkRole
from racecourse_planner.model.user_roles import CourseUser, UserPermissions, UserRoles
from racecourse_planner.model.wind_information import WeatherStation, WindHistory, WindInformation

__all__ = [
    "MarkRole",
    "DistanceUnit",
    "SliderSettings",
    "DistanceMeasurement",
    "Distances",
    "TotalBoatLengths",
    "Adjustable",
    "DistanceCalculation",
    "NewDistanceValue",
    "Locus",
    "LocusPosition",
    "Layout",
    "Layouts",
    "LayoutProvider",
    "StaticLayoutProvider",
    "default_layout_provider",
    "WeatherStation",
    "WindInformation",
    "WindHistory",
    "Course",
    "CourseState",
    "TargetLocation",
    "CourseStack",
    "LocalCourseStack",
    "RemoteCourseStack",
    "UserRoles",
    "UserPermissions",
    "CourseUser",
]
