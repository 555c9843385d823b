"""Course - the mutable aggregate describing one race course.

Holds everything the race committee controls: where the start flag is
anchored, the fleet, the chosen layout and its distances, and the marks
physically dropped on the water.

Changing the layout to Digital N rebalances the start and finish
distances; this happens on every assignment, not only the first.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID, uuid4

from racecourse_planner.constants import CourseConfig
from racecourse_planner.core.coordinate import Coordinate
from racecourse_planner.model.distance import DistanceMeasurement, Distances
from racecourse_planner.model.layout import Layout, LayoutProvider, Layouts, default_layout_provider

logger = logging.getLogger(__name__)


def _default_start_flag() -> Coordinate:
    return Coordinate(latitude=CourseConfig.DEFAULT_START_FLAG_LAT, longitude=CourseConfig.DEFAULT_START_FLAG_LON)


@dataclass
class Course:
    """A race course: anchor, fleet, layout, distances and dropped marks.

    Attributes:
        id: Stable identity of the course
        name: Display name
        start_flag: Committee boat end of the start line (layout root)
        finish_flag: Committee boat end of the finish line, once set
        locked_course_direction: Fixed course direction, or None to follow the wind
        wind_half_life: Seconds for a wind sample's weight to halve
        number_of_boats: Boats racing (sizes the start line)
        boat_length: Meters
        zone_size: Mark zone radius in boat lengths
        target_radius: Radius drawn around each target, in meters
        layout: Locus tree positioning the targets
        distances: Current value of every adjustable distance
        marks: Marks dropped on the water, never containing duplicates

    Example:
        course = Course(number_of_boats=12)
        course.drop_mark(at=Coordinate(latitude=41.78, longitude=-71.38))
    """

    id: UUID = field(default_factory=uuid4)
    name: str = CourseConfig.DEFAULT_NAME
    start_flag: Coordinate = field(default_factory=_default_start_flag)
    finish_flag: Coordinate | None = None
    locked_course_direction: float | None = None
    wind_half_life: float = CourseConfig.DEFAULT_WIND_HALF_LIFE_S
    number_of_boats: int = CourseConfig.DEFAULT_NUMBER_OF_BOATS
    boat_length: float = CourseConfig.DEFAULT_BOAT_LENGTH_M
    zone_size: int = CourseConfig.DEFAULT_ZONE_SIZE
    target_radius: float = CourseConfig.DEFAULT_TARGET_RADIUS_M
    layout: Layout = Layouts.DEFAULT
    distances: Distances = field(default_factory=Distances)
    marks: list[Coordinate] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        # Distances are not assigned yet while __init__ sets the layout, so
        # persisted start/finish values survive construction untouched
        if name == "layout" and "distances" in self.__dict__ and value.is_digital_n:
            self._balance_start_and_finish()

    def _balance_start_and_finish(self) -> None:
        average = (self.distances.upwind + self.distances.downwind) / 2
        self.distances = replace(self.distances, start=average, finish=average)
        logger.info(f"Digital N layout: start and finish distances set to {average:.1f}m")

    @property
    def length_of_start_line(self) -> float:
        """Meters: 1.5 boat lengths per boat."""
        return self.number_of_boats * self.boat_length * CourseConfig.START_LINE_BOAT_LENGTHS

    @property
    def is_course_direction_locked(self) -> bool:
        return self.locked_course_direction is not None

    # =========================================================================
    # Mark Operations
    # =========================================================================

    def drop_mark(self, at: Coordinate) -> bool:
        """Add a mark at the given coordinate.

        Duplicates are pointless and confuse map views, so dropping on an
        existing mark does nothing.

        Returns:
            True if a mark was added.
        """
        if at in self.marks:
            return False
        self.marks.append(at)
        return True

    def pull_mark(self, at: Coordinate) -> Coordinate | None:
        """Remove the mark nearest to the given coordinate.

        Returns:
            The removed mark, or None if there were no marks.
        """
        nearest = self.nearest_mark(to=at)
        if nearest is None:
            return None
        self.marks.remove(nearest)
        return nearest

    def pull_all_marks(self) -> None:
        """Remove every mark and the finish flag."""
        self.marks = []
        self.finish_flag = None

    def clear_all_marks(self) -> None:
        self.marks = []

    def nearest_mark(self, to: Coordinate) -> Coordinate | None:
        """Closest dropped mark; the first one wins ties."""
        best_mark = None
        best_dist = float("inf")
        for mark in self.marks:
            dist = to.distance(mark)
            if dist < best_dist:
                best_dist = dist
                best_mark = mark
        return best_mark

    # =========================================================================
    # Settings
    # =========================================================================

    def set_distance(self, measurement: DistanceMeasurement, value: float) -> None:
        self.distances = self.distances.replacing(measurement, value)

    def reset(self) -> None:
        """Restore default settings, keeping identity, name and start flag."""
        defaults = Course(id=self.id, name=self.name, start_flag=self.start_flag)
        for name, value in defaults.__dict__.items():
            setattr(self, name, value)

    def copy(self) -> "Course":
        """Independent snapshot (used by the undo stack)."""
        return copy.deepcopy(self)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with stable keys."""
        return {
            "id": str(self.id),
            "name": self.name,
            "start_flag": self.start_flag.to_dict(),
            "finish_flag": self.finish_flag.to_dict() if self.finish_flag is not None else None,
            "locked_course_direction": self.locked_course_direction,
            "wind_half_life": self.wind_half_life,
            "number_of_boats": self.number_of_boats,
            "boat_length": self.boat_length,
            "zone_size": self.zone_size,
            "target_radius": self.target_radius,
            "layout": self.layout.to_dict(),
            "distances": self.distances.to_dict(),
            "marks": [mark.to_dict() for mark in self.marks],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        layout_provider: LayoutProvider = default_layout_provider,
    ) -> "Course":
        """Deserialize a course.

        The layout is read from its embedded tree, or resolved through the
        provider when only a "layout_id" is stored.

        Raises:
            ValueError: If an id is not a valid UUID.
            KeyError: If a referenced layout id is unknown to the provider.
        """
        if "layout" in data:
            layout = Layout.from_dict(data=data["layout"])
        else:
            layout_id = UUID(data["layout_id"])
            found = layout_provider.find_layout(layout_id)
            if found is None:
                raise KeyError(f"Unknown layout id {layout_id}")
            layout = found

        finish_flag = data.get("finish_flag")
        locked = data.get("locked_course_direction")
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            start_flag=Coordinate.from_dict(data=data["start_flag"]),
            finish_flag=Coordinate.from_dict(data=finish_flag) if finish_flag is not None else None,
            locked_course_direction=float(locked) if locked is not None else None,
            wind_half_life=float(data["wind_half_life"]),
            number_of_boats=int(data["number_of_boats"]),
            boat_length=float(data["boat_length"]),
            zone_size=int(data["zone_size"]),
            target_radius=float(data["target_radius"]),
            layout=layout,
            distances=Distances.from_dict(data=data["distances"]),
            marks=[Coordinate.from_dict(data=mark) for mark in data["marks"]],
        )

    def __repr__(self) -> str:
        return (
            f"Course({self.name!r}, layout={self.layout.name!r}, boats={self.number_of_boats}, "
            f"marks={len(self.marks)})"
        )
