"""Integration and smoke tests across the whole package.

These tests verify:
1. All module imports work without errors
2. Configuration constants are consistent
3. Courses, states and remote stacks survive a JSON round trip
4. Layout ids resolve through a provider
5. A race committee session works end-to-end through the dispatcher
"""

import json
import uuid

import pytest

from conftest import make_wind
from racecourse_planner.constants import CourseConfig, LayoutConfig, SliderConfig, StackConfig
from racecourse_planner.control import CourseAction, CourseActionDispatcher
from racecourse_planner.core import Coordinate
from racecourse_planner.generators import CourseShape, LayoutSettings, LeewardMarkOption
from racecourse_planner.model import (
    Course,
    CourseState,
    CourseUser,
    DistanceMeasurement,
    LocalCourseStack,
    MarkRole,
    RemoteCourseStack,
    StaticLayoutProvider,
    UserPermissions,
    UserRoles,
)
from racecourse_planner.model.layout import Layouts
from racecourse_planner.model.user_roles import CREATOR_ROLES


def json_roundtrip(data: dict) -> dict:
    return json.loads(json.dumps(data))


# =============================================================================
# SMOKE
# =============================================================================


class TestImports:
    def test_package_imports(self) -> None:
        import racecourse_planner
        import racecourse_planner.control.state_machine
        import racecourse_planner.generators.layout_settings

        assert racecourse_planner.__doc__


class TestConstants:
    """Configuration values are sane."""

    def test_course_defaults(self) -> None:
        assert CourseConfig.DEFAULT_NUMBER_OF_BOATS >= 1
        assert CourseConfig.DEFAULT_BOAT_LENGTH_M > 0
        zone_sizes = (LayoutConfig.TEAM_RACING_ZONE_SIZE, LayoutConfig.FLEET_RACING_ZONE_SIZE)
        assert CourseConfig.DEFAULT_ZONE_SIZE in zone_sizes
        assert all(value >= 0 for value in CourseConfig.DEFAULT_DISTANCES_M.values())

    def test_sliders_and_stack(self) -> None:
        for minimum, maximum, step in (SliderConfig.LARGE_METERS, SliderConfig.SMALL_FEET):
            assert minimum < maximum
            assert step > 0
        assert StackConfig.STACK_LIMIT == 20


# =============================================================================
# SERIALIZATION
# =============================================================================


class TestSerialization:
    """JSON round trips with stable keys."""

    def test_course_roundtrip(self, triangle_course: Course, start_flag: Coordinate) -> None:
        triangle_course.name = "Race 2"
        triangle_course.finish_flag = start_flag.project(bearing=120.0, distance=40.0)
        triangle_course.locked_course_direction = 275.0
        triangle_course.drop_mark(at=start_flag.project(bearing=0.0, distance=175.0))
        restored = Course.from_dict(json_roundtrip(triangle_course.to_dict()))
        assert restored == triangle_course

    def test_course_keys(self, triangle_course: Course) -> None:
        data = triangle_course.to_dict()
        assert data["layout"]["id"] == "ef24bf8b-e5b9-4e7a-9e47-46e8ced73e79"
        assert data["distances"]["finishLine"] == 30.0
        assert data["finish_flag"] is None
        assert data["locked_course_direction"] is None

    def test_digital_n_roundtrip_keeps_persisted_distances(self) -> None:
        course = Course()
        course.layout = Layouts.DIGITAL_N
        course.set_distance(measurement=DistanceMeasurement.START, value=90.0)
        restored = Course.from_dict(json_roundtrip(course.to_dict()))
        assert restored.distances.start == 90.0
        assert restored.layout.is_digital_n

    def test_layout_id_resolution(self, triangle_course: Course) -> None:
        data = json_roundtrip(triangle_course.to_dict())
        del data["layout"]
        data["layout_id"] = str(Layouts.TRIANGLE.id)
        assert Course.from_dict(data).layout is Layouts.TRIANGLE

    def test_generated_layout_id_resolution(self, triangle_course: Course) -> None:
        generated = LayoutSettings(shape=CourseShape.TRAPEZOID, lee=LeewardMarkOption.GATE).generate_layout()
        triangle_course.layout = generated
        data = json_roundtrip(triangle_course.to_dict())
        del data["layout"]
        data["layout_id"] = str(generated.id)

        with pytest.raises(KeyError):
            Course.from_dict(data)

        provider = StaticLayoutProvider()
        provider.register(generated)
        assert Course.from_dict(data, layout_provider=provider).layout == generated

    def test_bad_course_id(self, triangle_course: Course) -> None:
        data = triangle_course.to_dict()
        data["id"] = "course-1"
        with pytest.raises(ValueError):
            Course.from_dict(data)

    def test_course_state_roundtrip(self, triangle_state: CourseState) -> None:
        triangle_state.wind_history.record(make_wind(direction=200.0, minutes_ago=6))
        triangle_state.wind_history.record(make_wind(direction=210.0))
        restored = CourseState.from_dict(json_roundtrip(triangle_state.to_dict()))
        assert restored == triangle_state
        assert restored.course_direction == pytest.approx(triangle_state.course_direction)

    def test_remote_stack_roundtrip(self, stack: LocalCourseStack, start_flag: Coordinate) -> None:
        stack.modify(lambda course: course.drop_mark(at=start_flag.project(bearing=45.0, distance=60.0)))
        stack.record_wind(make_wind(direction=15.0))
        remote = stack.as_remote()
        data = json_roundtrip(remote.to_dict())
        assert data["can_undo"] is True
        assert data["can_redo"] is False
        assert RemoteCourseStack.from_dict(data) == remote

    def test_user_roundtrip(self) -> None:
        user = CourseUser(id=uuid.uuid4(), name="Chris", roles=UserRoles.PRO | UserRoles.MARK_BOAT)
        data = json_roundtrip(user.to_dict())
        assert data["roles"] == 6
        assert CourseUser.from_dict(data) == user


# =============================================================================
# ROLES
# =============================================================================


class TestUserRoles:
    """Permissions are the union over held roles."""

    def test_role_bits_are_stable(self) -> None:
        assert [int(role) for role in (UserRoles.OWNER, UserRoles.PRO, UserRoles.MARK_BOAT)] == [1, 2, 4]
        assert int(UserRoles.FINISH_BOAT) == 8
        assert int(UserRoles.OBSERVER) == 16

    def test_observer_only_views(self) -> None:
        observer = CourseUser(id=uuid.uuid4(), name="Sam")
        assert observer.can(UserPermissions.VIEW_COURSE)
        assert not observer.can(UserPermissions.DROP_MARKS)
        assert observer.permissions == UserPermissions.VIEW_COURSE

    def test_union_of_roles(self) -> None:
        user = CourseUser(id=uuid.uuid4(), name="Alex", roles=UserRoles.MARK_BOAT | UserRoles.FINISH_BOAT)
        assert user.can(UserPermissions.DROP_MARKS)
        assert user.can(UserPermissions.SET_FINISH_FLAG)
        assert not user.can(UserPermissions.EDIT_LAYOUT)

    def test_creator_roles(self) -> None:
        permissions = CREATOR_ROLES.permissions
        for permission in UserPermissions:
            if permission != UserPermissions.NONE:
                assert permission in permissions, permission
        assert UserRoles.OBSERVER not in CREATOR_ROLES

    def test_no_roles_no_permissions(self) -> None:
        assert UserRoles.NONE.permissions == UserPermissions.NONE


# =============================================================================
# END TO END
# =============================================================================


class TestCommitteeSession:
    """PRO sets up the course, the mark boat lays it, wind shifts, PRO locks."""

    def test_session(self, stack: LocalCourseStack) -> None:
        dispatcher = CourseActionDispatcher(stack=stack)
        pro = CourseUser(id=uuid.uuid4(), name="PRO", roles=UserRoles.PRO)
        mark_boat = CourseUser(id=uuid.uuid4(), name="Mark", roles=UserRoles.MARK_BOAT)

        assert pro.can(CourseAction.SET_LAYOUT.required_permission)
        dispatcher.apply(CourseAction.SET_LAYOUT, Layouts.WINDWARD_LEEWARD)
        dispatcher.apply(CourseAction.SET_NUMBER_OF_BOATS, 16)
        state = stack.current

        # Mark boat lays each mark on its target, nearest first
        boat = state.start_flag
        assert mark_boat.can(CourseAction.DROP_MARK.required_permission)
        laid = []
        while (role := state.next_target(mark_boat_location=boat, close_enough=5.0)) is not None:
            target = state.target_coordinate(role=role)
            dispatcher.apply(CourseAction.DROP_MARK, target)
            laid.append(role)
            boat = target
        assert sorted(laid, key=lambda r: r.value) == sorted(state.layout.marks(), key=lambda r: r.value)
        assert all(state.current_role(mark=mark) != MarkRole.GENERIC_MARK for mark in state.marks)

        # A wind shift moves the targets away from the laid marks
        stack.record_wind(make_wind(direction=40.0))
        assert state.current_role(mark=state.marks[0]) in (MarkRole.GENERIC_MARK, laid[0])
        assert state.next_target(mark_boat_location=boat, close_enough=5.0) is not None

        # Locking back to 0 puts every mark on target again
        dispatcher.apply(CourseAction.LOCK_COURSE_DIRECTION, 0.0)
        assert state.next_target(mark_boat_location=boat, close_enough=5.0) is None

        # The mark boat user cannot undo; the PRO can
        assert not mark_boat.can(CourseAction.UNDO.required_permission)
        assert pro.can(CourseAction.UNDO.required_permission)
        assert dispatcher.apply(CourseAction.UNDO)
        assert not dispatcher.direction.is_locked
