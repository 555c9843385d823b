"""Locus - a node in the tree that positions marks on the race course.

A Locus is an interesting point on the course. Sometimes there is a mark
at the locus, but often it is just a reference point for its children.
The tree is rooted at the start flag: the committee boat anchors, sets
the flag, and everything else is laid out relative to it.

Positioning is a single pre-order traversal (iter_positions). Each child
is placed relative to the *evaluated* position of its parent, so the
traversal is strictly sequential. The synchronous and asynchronous
entry points both consume the same traversal.
"""

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from racecourse_planner.model.distance import (
    Adjustable,
    DistanceCalculation,
    DistanceMeasurement,
    TotalBoatLengths,
    distance_calculation_from_dict,
)
from racecourse_planner.model.mark_role import MarkRole

if TYPE_CHECKING:
    from racecourse_planner.model.course_state import CourseState

L = TypeVar("L")

MarkAction = Callable[[MarkRole, L], None]
DistanceAction = Callable[[DistanceCalculation, L, L], None]
AsyncMarkAction = Callable[[MarkRole, L], Awaitable[None]]
AsyncDistanceAction = Callable[[DistanceCalculation, L, L], Awaitable[None]]


@dataclass(frozen=True)
class LocusPosition(Generic[L]):
    """One step of the traversal: a locus, where it was measured from, and where it landed."""

    locus: "Locus"
    origin: L
    here: L


@dataclass(frozen=True)
class Locus:
    """A point placed by bearing and distance from its parent locus.

    Attributes:
        bearing: Degrees from the course direction (0 windward, 90 course right,
            -90 course left, 180 leeward)
        distance: How far from the parent, computed from course settings
        mark: Role of the mark placed here, if any
        is_course_center: True for the visual center of the course
        loci: Child loci placed relative to this one

    Example:
        pin = Locus(bearing=-90, distance=TotalBoatLengths(times=1.5), mark=MarkRole.START_PIN)
    """

    bearing: float = 0.0
    distance: DistanceCalculation = TotalBoatLengths(times=0.75)
    mark: MarkRole | None = None
    is_course_center: bool = False
    loci: tuple["Locus", ...] = ()

    def iter_positions(self, state: "CourseState", origin: L) -> Iterator[LocusPosition[L]]:
        """Evaluate this subtree depth-first, pre-order, starting from origin."""
        return self._iter_positions(state=state, direction=state.course_direction, origin=origin)

    def _iter_positions(self, state: "CourseState", direction: float, origin: L) -> Iterator[LocusPosition[L]]:
        here = origin.project(
            bearing=direction + self.bearing,
            distance=self.distance.compute(course=state.course),
        )
        yield LocusPosition(locus=self, origin=origin, here=here)
        for child in self.loci:
            yield from child._iter_positions(state=state, direction=direction, origin=here)

    def position_targets(
        self,
        state: "CourseState",
        origin: L,
        action: MarkAction,
        distances: DistanceAction | None = None,
    ) -> None:
        """Call action(mark, location) for every mark in this subtree.

        The optional distances callback receives (calculation, from, to) for every
        locus before its mark is reported, for drawing distance annotations.
        """
        _dispatch(self.iter_positions(state=state, origin=origin), action=action, distances=distances)

    async def position_targets_async(
        self,
        state: "CourseState",
        origin: L,
        action: AsyncMarkAction,
        distances: AsyncDistanceAction | None = None,
    ) -> None:
        """Same as position_targets, awaiting each callback in order."""
        await _dispatch_async(self.iter_positions(state=state, origin=origin), action=action, distances=distances)

    def for_each_mark(self, action: Callable[[MarkRole], None]) -> None:
        if self.mark is not None:
            action(self.mark)
        for child in self.loci:
            child.for_each_mark(action=action)

    def for_each_distance_measurement(self, action: Callable[[DistanceMeasurement], None]) -> None:
        if isinstance(self.distance, Adjustable):
            action(self.distance.measurement)
        for child in self.loci:
            child.for_each_distance_measurement(action=action)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bearing": self.bearing,
            "distance": self.distance.to_dict(),
            "mark": self.mark.value if self.mark is not None else None,
            "is_course_center": self.is_course_center,
            "loci": [child.to_dict() for child in self.loci],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Locus":
        """Create Locus (and its subtree) from dictionary."""
        mark = data.get("mark")
        return cls(
            bearing=float(data["bearing"]),
            distance=distance_calculation_from_dict(data=data["distance"]),
            mark=MarkRole(mark) if mark is not None else None,
            is_course_center=bool(data.get("is_course_center", False)),
            loci=tuple(cls.from_dict(data=child) for child in data.get("loci", [])),
        )


def _dispatch(
    positions: Iterable[LocusPosition[L]],
    action: MarkAction,
    distances: DistanceAction | None,
) -> None:
    for position in positions:
        if distances is not None:
            distances(position.locus.distance, position.origin, position.here)
        if position.locus.mark is not None:
            action(position.locus.mark, position.here)


async def _dispatch_async(
    positions: Iterable[LocusPosition[L]],
    action: AsyncMarkAction,
    distances: AsyncDistanceAction | None,
) -> None:
    for position in positions:
        if distances is not None:
            await distances(position.locus.distance, position.origin, position.here)
        if position.locus.mark is not None:
            await action(position.locus.mark, position.here)


# =============================================================================
# Forest helpers (a layout's root loci all hang off the start flag)
# =============================================================================


def iter_positions(loci: Iterable[Locus], state: "CourseState", origin: L) -> Iterator[LocusPosition[L]]:
    """Pre-order traversal of every root locus in turn, all measured from origin."""
    for locus in loci:
        yield from locus.iter_positions(state=state, origin=origin)


def position_targets(
    loci: Iterable[Locus],
    state: "CourseState",
    origin: L,
    action: MarkAction,
    distances: DistanceAction | None = None,
) -> None:
    _dispatch(iter_positions(loci=loci, state=state, origin=origin), action=action, distances=distances)


async def position_targets_async(
    loci: Iterable[Locus],
    state: "CourseState",
    origin: L,
    action: AsyncMarkAction,
    distances: AsyncDistanceAction | None = None,
) -> None:
    await _dispatch_async(iter_positions(loci=loci, state=state, origin=origin), action=action, distances=distances)


def locate_center(loci: Iterable[Locus], state: "CourseState", origin: L) -> L | None:
    """Position of the first locus flagged as course center, or None."""
    for position in iter_positions(loci=loci, state=state, origin=origin):
        if position.locus.is_course_center:
            return position.here
    return None


def for_each_mark(loci: Iterable[Locus], action: Callable[[MarkRole], None]) -> None:
    for locus in loci:
        locus.for_each_mark(action=action)
