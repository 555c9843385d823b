"""Applying race committee actions to a course.

- CourseAction: Stable action codes with their required permissions
- CourseActionDispatcher: Applies actions and payloads to a LocalCourseStack
- CourseDirectionMachine: Locks and releases the course direction
"""

from racecourse_planner.control.actions import CourseAction, CourseActionDispatcher
from racecourse_planner.control.state_machine import CourseDirectionContext, CourseDirectionMachine

__all__ = [
    "CourseAction",
    "CourseActionDispatcher",
    "CourseDirectionMachine",
    "CourseDirectionContext",
]
