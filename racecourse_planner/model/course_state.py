"""CourseState - a Course together with its recent wind history.

The course direction is derived, never stored: a locked direction wins,
otherwise the weighted average of recent wind samples, otherwise 0.

Mark and target queries are all built on the locus traversal, evaluated
from the start flag in geodetic coordinates. position_targets_from lets
callers run the same traversal in any Location space (e.g. screen Points).
"""

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from math import cos, radians
from typing import Any
from uuid import UUID

import numpy as np

from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.core.coordinate_region import CoordinateRegion
from racecourse_planner.core.point import Point
from racecourse_planner.model import locus as locus_tree
from racecourse_planner.model.course import Course
from racecourse_planner.model.distance import DistanceCalculation
from racecourse_planner.model.layout import Layout, LayoutProvider, default_layout_provider
from racecourse_planner.model.locus import L, LocusPosition
from racecourse_planner.model.mark_role import MarkRole
from racecourse_planner.model.wind_information import WindHistory, WindInformation


@dataclass(frozen=True)
class TargetLocation:
    """Where the layout wants a mark of a given role."""

    role: MarkRole
    location: Coordinate


@dataclass
class CourseState:
    """Course plus wind history.

    Example:
        state = CourseState(course=Course())
        state.wind_history.record(sample)
        state.course_direction  # follows the wind unless locked
    """

    course: Course = field(default_factory=Course)
    wind_history: WindHistory = field(default_factory=WindHistory)

    # =========================================================================
    # Course accessors
    # =========================================================================

    @property
    def id(self) -> UUID:
        return self.course.id

    @property
    def start_flag(self) -> Coordinate:
        return self.course.start_flag

    @property
    def marks(self) -> list[Coordinate]:
        return self.course.marks

    @property
    def layout(self) -> Layout:
        return self.course.layout

    # =========================================================================
    # Wind
    # =========================================================================

    @property
    def course_direction(self) -> float:
        """Degrees true: locked direction, else weighted wind direction, else 0."""
        if self.course.locked_course_direction is not None:
            return self.course.locked_course_direction
        wind_direction = self.weighted_average_wind_direction()
        if wind_direction is not None:
            return wind_direction
        return 0.0

    def for_weighted_wind_information(self, action: Callable[[WindInformation, float], None]) -> None:
        """Call action(sample, weight) for each sample that counts toward the average.

        With a non-positive half-life only the most recent sample counts.
        Otherwise each sample's weight halves for every half-life it is older
        than the most recent one.
        """
        half_life = self.course.wind_half_life
        if half_life <= 0.0:
            latest = self.wind_history.latest
            if latest is not None:
                action(latest, 1.0)
            return

        if not self.wind_history:
            return
        most_recent = max(info.start_time for info in self.wind_history)
        for info in self.wind_history:
            age_s = (most_recent - info.start_time).total_seconds()
            action(info, float(np.exp2(-age_s / half_life)))

    def weighted_average_wind_direction(self) -> float | None:
        """Circular weighted mean of the wind directions, or None with no samples.

        Each sample is a vector of length weight; the result is the bearing
        of their sum, so 359 and 1 average to 0 rather than 180.
        """
        total = Point.ZERO
        count = 0

        def accumulate(info: WindInformation, weight: float) -> None:
            nonlocal total, count
            total = total.project(bearing=info.direction, distance=weight)
            count += 1

        self.for_weighted_wind_information(action=accumulate)
        if count == 0:
            return None
        return Point.ZERO.bearing(to=total)

    # =========================================================================
    # Positioning
    # =========================================================================

    def positions(self) -> Iterator[LocusPosition[Coordinate]]:
        """Every locus of the layout evaluated from the start flag, pre-order."""
        return locus_tree.iter_positions(loci=self.course.layout.loci, state=self, origin=self.course.start_flag)

    def position_targets(
        self,
        action: Callable[[MarkRole, Coordinate], None],
        distances: Callable[[DistanceCalculation, Coordinate, Coordinate], None] | None = None,
    ) -> None:
        self.position_targets_from(origin=self.course.start_flag, action=action, distances=distances)

    async def position_targets_async(
        self,
        action: Callable[[MarkRole, Coordinate], Awaitable[None]],
        distances: Callable[[DistanceCalculation, Coordinate, Coordinate], Awaitable[None]] | None = None,
    ) -> None:
        await locus_tree.position_targets_async(
            loci=self.course.layout.loci,
            state=self,
            origin=self.course.start_flag,
            action=action,
            distances=distances,
        )

    def position_targets_from(
        self,
        origin: L,
        action: Callable[[MarkRole, L], None],
        distances: Callable[[DistanceCalculation, L, L], None] | None = None,
    ) -> None:
        """Position the targets from any origin, in that origin's Location space."""
        locus_tree.position_targets(
            loci=self.course.layout.loci,
            state=self,
            origin=origin,
            action=action,
            distances=distances,
        )

    def targets(self) -> list[TargetLocation]:
        """Every target in traversal order."""
        found: list[TargetLocation] = []
        self.position_targets(action=lambda role, location: found.append(TargetLocation(role=role, location=location)))
        return found

    # =========================================================================
    # Target and mark queries
    # =========================================================================

    def target_coordinate(self, role: MarkRole) -> Coordinate | None:
        """Location of the target for a role (the last one if it repeats)."""
        location = None
        for target in self.targets():
            if target.role == role:
                location = target.location
        return location

    @property
    def center(self) -> Coordinate:
        """Visual center of the course; the start flag if the layout names none."""
        center = locus_tree.locate_center(loci=self.course.layout.loci, state=self, origin=self.course.start_flag)
        return center if center is not None else self.course.start_flag

    def nearest_target(self, to: Coordinate) -> TargetLocation | None:
        """Closest mark target (flags excluded); the first one wins ties."""
        nearest = None
        nearest_dist = float("inf")
        for target in self.targets():
            if not target.role.is_mark:
                continue
            dist = to.distance(target.location)
            if dist < nearest_dist:
                nearest = target
                nearest_dist = dist
        return nearest

    def current_role(self, mark: Coordinate) -> MarkRole:
        """Role a dropped mark is filling.

        A mark fills a role only when its nearest target also has this mark
        as its nearest mark. Otherwise it is a generic mark.
        """
        target = self.nearest_target(to=mark)
        if target is None:
            return MarkRole.GENERIC_MARK
        nearest_mark = self.course.nearest_mark(to=target.location)
        if nearest_mark is None or nearest_mark != mark:
            return MarkRole.GENERIC_MARK
        return target.role

    def mark_filling(self, role: MarkRole) -> Coordinate | None:
        """The dropped mark currently filling a role, if any."""
        location = self.target_coordinate(role=role)
        if location is None:
            return None
        nearest_mark = self.course.nearest_mark(to=location)
        if nearest_mark is None:
            return None
        if self.current_role(mark=nearest_mark) == role:
            return nearest_mark
        return None

    def next_target(
        self,
        mark_boat_location: Coordinate,
        close_enough: float,
        extra_mark: Coordinate | None = None,
    ) -> MarkRole | None:
        """Nearest unfilled mark target to the mark boat.

        A target is filled when any existing mark, including extra_mark, is
        within close_enough meters of it. Flags are never returned.
        """
        existing_marks = list(self.course.marks)
        if extra_mark is not None:
            existing_marks.append(extra_mark)

        next_role = None
        next_dist = float("inf")
        for target in self.targets():
            if not target.role.is_mark:
                continue
            if any(mark.distance(target.location) <= close_enough for mark in existing_marks):
                continue
            dist = mark_boat_location.distance(target.location)
            if dist < next_dist:
                next_role = target.role
                next_dist = dist
        return next_role

    paired_target = next_target

    def maximum_projected_distance(self, origin: Coordinate, bearing: float) -> float:
        """Furthest reach of any mark or target along a bearing from origin.

        Used to place chart annotations clear of marks. Angles are measured
        from the start flag; targets are padded by the target radius.
        """
        start_flag = self.course.start_flag
        max_distance = 0.0
        for mark in self.course.marks:
            angle = start_flag.bearing(to=mark) - bearing
            projected = origin.distance(to=mark) * cos(radians(angle))
            max_distance = max(max_distance, projected)
        for target in self.targets():
            angle = start_flag.bearing(to=target.location) - bearing
            projected = origin.distance(to=target.location) * cos(radians(angle)) + self.course.target_radius
            max_distance = max(max_distance, projected)
        return max_distance

    @property
    def enclosing_region(self) -> CoordinateRegion:
        """Region covering both flags, every target zone and every mark."""
        region = CoordinateRegion.UNDEFINED.enclosing(self.course.start_flag)
        if self.course.finish_flag is not None:
            region = region.enclosing(self.course.finish_flag)
        zone_diameter = 2 * self.course.target_radius
        for target in self.targets():
            region = region.enclosing(
                CoordinateRegion.from_meters(
                    center=target.location,
                    latitudinal_meters=zone_diameter,
                    longitudinal_meters=zone_diameter,
                )
            )
        for mark in self.course.marks:
            region = region.enclosing(mark)
        return region

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {"course": self.course.to_dict(), "wind_history": self.wind_history.to_list()}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        layout_provider: LayoutProvider = default_layout_provider,
    ) -> "CourseState":
        return cls(
            course=Course.from_dict(data=data["course"], layout_provider=layout_provider),
            wind_history=WindHistory.from_list(data=data.get("wind_history", [])),
        )
