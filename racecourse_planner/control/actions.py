"""Course actions - the operations a race committee member can request.

CourseAction codes are sent over the wire and stored in logs, so their
integer values are stable. Each action names the permission it requires;
enforcing that is left to the caller.

CourseActionDispatcher applies an action and its payload to a
LocalCourseStack:
    reset                   -
    lockCourseDirection     float (degrees true)
    unlockCourseDirection   -
    setNumberOfBoats        int
    setDistance             NewDistanceValue
    pullAllMarks            -
    dropMark                Coordinate
    pullNearestMark         Coordinate
    setStartFlag            Coordinate
    setFinishFlag           Coordinate
    clearFinishFlag         -
    setWindHalfLife         float (seconds)
    setLayout               Layout
    undo / redo             -
    dropRandomMarks         int seed, or None
    setZoneSize             int (2 or 3)
    setTargetRadius         float (meters)
    setBoatLength           float (meters)
"""

import logging
import random
from collections.abc import Callable
from enum import IntEnum
from typing import Any

from racecourse_planner.constants import LayoutConfig
from racecourse_planner.control.state_machine import CourseDirectionMachine
from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.core.geo_calculator import normalize_bearing
from racecourse_planner.model.course import Course
from racecourse_planner.model.course_stack import LocalCourseStack
from racecourse_planner.model.distance import NewDistanceValue
from racecourse_planner.model.layout import Layout
from racecourse_planner.model.user_roles import UserPermissions

logger = logging.getLogger(__name__)


class CourseAction(IntEnum):
    RESET = 0
    LOCK_COURSE_DIRECTION = 1
    UNLOCK_COURSE_DIRECTION = 2
    SET_NUMBER_OF_BOATS = 3
    SET_DISTANCE = 4
    PULL_ALL_MARKS = 5
    DROP_MARK = 6
    PULL_NEAREST_MARK = 7
    SET_START_FLAG = 8
    SET_FINISH_FLAG = 9
    CLEAR_FINISH_FLAG = 10
    SET_WIND_HALF_LIFE = 11
    SET_LAYOUT = 12
    UNDO = 13
    REDO = 14
    DROP_RANDOM_MARKS = 15  # for testing
    SET_ZONE_SIZE = 16
    SET_TARGET_RADIUS = 17
    SET_BOAT_LENGTH = 18

    @property
    def required_permission(self) -> UserPermissions:
        return _REQUIRED_PERMISSIONS.get(self, UserPermissions.EDIT_LAYOUT)

    @property
    def is_undoable(self) -> bool:
        return self not in (CourseAction.UNDO, CourseAction.REDO)


_REQUIRED_PERMISSIONS: dict[CourseAction, UserPermissions] = {
    CourseAction.PULL_ALL_MARKS: UserPermissions.DROP_MARKS,
    CourseAction.DROP_MARK: UserPermissions.DROP_MARKS,
    CourseAction.PULL_NEAREST_MARK: UserPermissions.DROP_MARKS,
    CourseAction.DROP_RANDOM_MARKS: UserPermissions.DROP_MARKS,
    CourseAction.SET_FINISH_FLAG: UserPermissions.SET_FINISH_FLAG,
    CourseAction.CLEAR_FINISH_FLAG: UserPermissions.SET_FINISH_FLAG,
    CourseAction.UNDO: UserPermissions.UNDO_REDO,
    CourseAction.REDO: UserPermissions.UNDO_REDO,
}


def _require(payload: Any, expected: type | tuple[type, ...], action: CourseAction) -> Any:
    if not isinstance(payload, expected) or isinstance(payload, bool):
        raise TypeError(f"{action.name} expects {expected}, got {type(payload).__name__}")
    return payload


class CourseActionDispatcher:
    """Applies CourseActions to a LocalCourseStack.

    Example:
        dispatcher = CourseActionDispatcher(stack=LocalCourseStack())
        dispatcher.apply(CourseAction.DROP_MARK, Coordinate(latitude=41.78, longitude=-71.38))
        dispatcher.apply(CourseAction.UNDO)

    apply() returns False when the action changed nothing (duplicate mark,
    nothing to undo, refused direction transition). Malformed payloads
    raise TypeError or ValueError before the stack is touched.
    """

    def __init__(self, stack: LocalCourseStack, rng: random.Random | None = None) -> None:
        self.stack = stack
        self.direction = CourseDirectionMachine(stack=stack)
        self.rng = rng or random.Random()
        self._handlers: dict[CourseAction, Callable[[Any], bool]] = {
            CourseAction.RESET: self._reset,
            CourseAction.LOCK_COURSE_DIRECTION: self._lock_course_direction,
            CourseAction.UNLOCK_COURSE_DIRECTION: self._unlock_course_direction,
            CourseAction.SET_NUMBER_OF_BOATS: self._set_number_of_boats,
            CourseAction.SET_DISTANCE: self._set_distance,
            CourseAction.PULL_ALL_MARKS: self._pull_all_marks,
            CourseAction.DROP_MARK: self._drop_mark,
            CourseAction.PULL_NEAREST_MARK: self._pull_nearest_mark,
            CourseAction.SET_START_FLAG: self._set_start_flag,
            CourseAction.SET_FINISH_FLAG: self._set_finish_flag,
            CourseAction.CLEAR_FINISH_FLAG: self._clear_finish_flag,
            CourseAction.SET_WIND_HALF_LIFE: self._set_wind_half_life,
            CourseAction.SET_LAYOUT: self._set_layout,
            CourseAction.UNDO: lambda _: self.stack.undo(),
            CourseAction.REDO: lambda _: self.stack.redo(),
            CourseAction.DROP_RANDOM_MARKS: self._drop_random_marks,
            CourseAction.SET_ZONE_SIZE: self._set_zone_size,
            CourseAction.SET_TARGET_RADIUS: self._set_target_radius,
            CourseAction.SET_BOAT_LENGTH: self._set_boat_length,
        }
        assert set(self._handlers) == set(CourseAction), "Every CourseAction needs a handler"

    def apply(self, action: CourseAction | int, payload: Any = None) -> bool:
        """Apply an action (or its wire code) with its payload.

        Raises:
            ValueError: If the code is unknown or the payload value is out of range.
            TypeError: If the payload has the wrong type.
        """
        action = CourseAction(action)
        applied = self._handlers[action](payload)
        if applied:
            logger.info(f"Applied {action.name}" + (f" ({payload!r})" if payload is not None else ""))
        return applied

    def _set(self, name: str, value: Any) -> bool:
        if getattr(self.stack.course, name) == value:
            return False
        self.stack.modify(lambda course: setattr(course, name, value))
        return True

    # =========================================================================
    # Handlers
    # =========================================================================

    def _reset(self, _: Any) -> bool:
        defaults = self.stack.course.copy()
        defaults.reset()
        if self.stack.course == defaults:
            return False
        self.stack.modify(Course.reset)
        return True

    def _lock_course_direction(self, payload: Any) -> bool:
        direction = float(_require(payload, (int, float), CourseAction.LOCK_COURSE_DIRECTION))
        if normalize_bearing(direction) == self.stack.course.locked_course_direction:
            logger.debug(f"Course direction already locked at {direction}")
            return False
        return self.direction.try_transition("lock", direction=direction)

    def _unlock_course_direction(self, _: Any) -> bool:
        return self.direction.try_transition("unlock")

    def _set_number_of_boats(self, payload: Any) -> bool:
        number = _require(payload, int, CourseAction.SET_NUMBER_OF_BOATS)
        if number < 1:
            raise ValueError(f"Number of boats must be positive, got {number}")
        return self._set("number_of_boats", number)

    def _set_distance(self, payload: Any) -> bool:
        new_value = _require(payload, NewDistanceValue, CourseAction.SET_DISTANCE)
        if new_value.value < 0:
            raise ValueError(f"Distance must not be negative, got {new_value.value}")
        if self.stack.course.distances[new_value.measurement] == new_value.value:
            return False
        self.stack.modify(lambda course: course.set_distance(new_value.measurement, new_value.value))
        return True

    def _pull_all_marks(self, _: Any) -> bool:
        if not self.stack.course.marks and self.stack.course.finish_flag is None:
            return False
        self.stack.modify(Course.pull_all_marks)
        return True

    def _drop_mark(self, payload: Any) -> bool:
        at = _require(payload, Coordinate, CourseAction.DROP_MARK)
        if at in self.stack.course.marks:
            logger.debug(f"Mark already at {at}")
            return False
        self.stack.modify(lambda course: course.drop_mark(at=at))
        return True

    def _pull_nearest_mark(self, payload: Any) -> bool:
        at = _require(payload, Coordinate, CourseAction.PULL_NEAREST_MARK)
        if not self.stack.course.marks:
            return False
        self.stack.modify(lambda course: course.pull_mark(at=at))
        return True

    def _set_start_flag(self, payload: Any) -> bool:
        return self._set("start_flag", _require(payload, Coordinate, CourseAction.SET_START_FLAG))

    def _set_finish_flag(self, payload: Any) -> bool:
        return self._set("finish_flag", _require(payload, Coordinate, CourseAction.SET_FINISH_FLAG))

    def _clear_finish_flag(self, _: Any) -> bool:
        return self._set("finish_flag", None)

    def _set_wind_half_life(self, payload: Any) -> bool:
        half_life = float(_require(payload, (int, float), CourseAction.SET_WIND_HALF_LIFE))
        return self._set("wind_half_life", half_life)

    def _set_layout(self, payload: Any) -> bool:
        layout = _require(payload, Layout, CourseAction.SET_LAYOUT)
        if self.stack.course.layout == layout:
            return False
        self.stack.modify(lambda course: setattr(course, "layout", layout))
        logger.info(f"Layout changed to '{layout.name}'")
        return True

    def _drop_random_marks(self, payload: Any) -> bool:
        """Drop one mark near every mark target, scattered up to RANDOM_MARK_SCATTER_M."""
        rng = self.rng if payload is None else random.Random(_require(payload, int, CourseAction.DROP_RANDOM_MARKS))
        targets = [target for target in self.stack.current.targets() if target.role.is_mark]
        if not targets:
            return False
        scattered = [
            target.location.project(
                bearing=rng.uniform(0.0, 360.0),
                distance=rng.uniform(0.0, LayoutConfig.RANDOM_MARK_SCATTER_M),
            )
            for target in targets
        ]

        def drop_all(course: Course) -> None:
            for location in scattered:
                course.drop_mark(at=location)

        self.stack.modify(drop_all)
        return True

    def _set_zone_size(self, payload: Any) -> bool:
        zone_size = _require(payload, int, CourseAction.SET_ZONE_SIZE)
        if zone_size not in (LayoutConfig.TEAM_RACING_ZONE_SIZE, LayoutConfig.FLEET_RACING_ZONE_SIZE):
            raise ValueError(f"Zone size must be 2 or 3 boat lengths, got {zone_size}")
        return self._set("zone_size", zone_size)

    def _set_target_radius(self, payload: Any) -> bool:
        radius = float(_require(payload, (int, float), CourseAction.SET_TARGET_RADIUS))
        if radius < 0:
            raise ValueError(f"Target radius must not be negative, got {radius}")
        return self._set("target_radius", radius)

    def _set_boat_length(self, payload: Any) -> bool:
        length = float(_require(payload, (int, float), CourseAction.SET_BOAT_LENGTH))
        if length <= 0:
            raise ValueError(f"Boat length must be positive, got {length}")
        return self._set("boat_length", length)
