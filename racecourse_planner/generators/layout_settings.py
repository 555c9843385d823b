"""LayoutSettings - build a course layout from five discrete choices.

The race committee picks, in order:
    1. shape: windward/leeward, triangle, trapezoid or Digital N
    2. start: where the start line sits relative to the marks
    3. finish: where the finish line sits
    4. wind: single windward mark, or mark plus offset
    5. lee: single leeward mark, gate, or mark plus offset

Each choice narrows the valid options for the choices after it. After any
change, revalidate() walks the chain shape -> start -> finish -> wind -> lee
and resets each field to its first valid option if it became invalid. It
is a pure function of the whole tuple, so applying it twice changes nothing.

Layouts are laid out from the committee boat (the start flag), so most of
the tree's structure depends on the start line placement. Digital N is too
irregular for the general rules and returns the canonical tree unchanged.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import TypeVar
from uuid import UUID, uuid5

from racecourse_planner.constants import LayoutConfig
from racecourse_planner.model.distance import Adjustable, DistanceMeasurement, TotalBoatLengths
from racecourse_planner.model.layout import Layout, Layouts
from racecourse_planner.model.locus import Locus
from racecourse_planner.model.mark_role import MarkRole

logger = logging.getLogger(__name__)

# Namespace for deterministic ids of generated layouts
LAYOUT_NAMESPACE = UUID("5A0C7E2B-8F41-4C6D-B3A9-1E7D2F6C8B50")

C = TypeVar("C", bound=Enum)


class CourseShape(Enum):
    """Overall shape, by number of jibe marks."""

    WINDWARD_LEEWARD = "windwardLeeward"
    TRIANGLE = "triangle"
    TRAPEZOID = "trapezoid"
    DIGITAL_N = "digitalN"


class StartLinePlacement(Enum):
    MID_COURSE = "midCourse"  # between the wind and leeward marks
    AT_LEEWARD_MARK = "atLeewardMark"  # leeward mark doubles as the pin
    DOWNWIND = "downwind"  # downwind of the leeward mark


class FinishLinePlacement(Enum):
    SHARED_WITH_START_LINE = "sharedWithStartLine"
    STARBOARD_OF_START_FLAG = "starboardOfStartFlag"
    UPWIND = "upwind"  # upwind of the windward mark
    AT_WIND_MARK = "atWindMark"  # windward mark doubles as the pin
    DOWNWIND_REACH = "downwindReach"  # perpendicular to the last mark, below the course


class WindMarkOption(Enum):
    SINGLE_MARK = "singleMark"
    MARK_AND_OFFSET = "markAndOffset"


class LeewardMarkOption(Enum):
    SINGLE_MARK = "singleMark"
    GATE = "gate"
    MARK_AND_OFFSET = "markAndOffset"


# =============================================================================
# Valid-choice tables (first entry is the fallback when a choice becomes invalid)
# =============================================================================

_STANDARD_STARTS = (
    StartLinePlacement.MID_COURSE,
    StartLinePlacement.AT_LEEWARD_MARK,
    StartLinePlacement.DOWNWIND,
)

_VALID_STARTS: dict[CourseShape, tuple[StartLinePlacement, ...]] = {
    CourseShape.WINDWARD_LEEWARD: _STANDARD_STARTS,
    CourseShape.TRIANGLE: _STANDARD_STARTS,
    CourseShape.TRAPEZOID: (StartLinePlacement.MID_COURSE, StartLinePlacement.DOWNWIND),
    CourseShape.DIGITAL_N: (StartLinePlacement.DOWNWIND,),
}

_VALID_FINISHES: dict[StartLinePlacement, tuple[FinishLinePlacement, ...]] = {
    StartLinePlacement.MID_COURSE: (
        FinishLinePlacement.SHARED_WITH_START_LINE,
        FinishLinePlacement.STARBOARD_OF_START_FLAG,
        FinishLinePlacement.UPWIND,
        FinishLinePlacement.AT_WIND_MARK,
    ),
    StartLinePlacement.AT_LEEWARD_MARK: (
        FinishLinePlacement.STARBOARD_OF_START_FLAG,
        FinishLinePlacement.UPWIND,
        FinishLinePlacement.AT_WIND_MARK,
    ),
    StartLinePlacement.DOWNWIND: (
        FinishLinePlacement.STARBOARD_OF_START_FLAG,
        FinishLinePlacement.UPWIND,
        FinishLinePlacement.AT_WIND_MARK,
        FinishLinePlacement.DOWNWIND_REACH,
    ),
}
_DIGITAL_N_FINISHES = (FinishLinePlacement.DOWNWIND_REACH,)

_STANDARD_WIND_OPTIONS = (WindMarkOption.SINGLE_MARK, WindMarkOption.MARK_AND_OFFSET)
_DIGITAL_N_WIND_OPTIONS = (WindMarkOption.MARK_AND_OFFSET,)

_VALID_LEE_OPTIONS: dict[StartLinePlacement, tuple[LeewardMarkOption, ...]] = {
    StartLinePlacement.MID_COURSE: (LeewardMarkOption.SINGLE_MARK, LeewardMarkOption.GATE),
    # The leeward mark is the pin end of the start line, so it cannot be a gate
    StartLinePlacement.AT_LEEWARD_MARK: (LeewardMarkOption.SINGLE_MARK,),
    StartLinePlacement.DOWNWIND: (LeewardMarkOption.SINGLE_MARK, LeewardMarkOption.GATE),
}
_DIGITAL_N_LEE_OPTIONS = (LeewardMarkOption.MARK_AND_OFFSET,)


def valid_starts(shape: CourseShape) -> tuple[StartLinePlacement, ...]:
    return _VALID_STARTS[shape]


def valid_finishes(shape: CourseShape, start: StartLinePlacement) -> tuple[FinishLinePlacement, ...]:
    if shape == CourseShape.DIGITAL_N:
        return _DIGITAL_N_FINISHES
    return _VALID_FINISHES[start]


def valid_wind_options(shape: CourseShape) -> tuple[WindMarkOption, ...]:
    if shape == CourseShape.DIGITAL_N:
        return _DIGITAL_N_WIND_OPTIONS
    return _STANDARD_WIND_OPTIONS


def valid_lee_options(shape: CourseShape, start: StartLinePlacement) -> tuple[LeewardMarkOption, ...]:
    if shape == CourseShape.DIGITAL_N:
        return _DIGITAL_N_LEE_OPTIONS
    return _VALID_LEE_OPTIONS[start]


def _clamp(choice: C, valid: tuple[C, ...]) -> C:
    return choice if choice in valid else valid[0]


# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class LayoutSettings:
    """Five choices that generate a layout.

    Construct with any combination, then call revalidate() (or use the
    with_* methods, which do it for you) before generating.

    Example:
        settings = LayoutSettings().with_shape(CourseShape.TRAPEZOID)
        layout = settings.generate_layout()
    """

    shape: CourseShape = CourseShape.TRIANGLE
    start: StartLinePlacement = StartLinePlacement.MID_COURSE
    finish: FinishLinePlacement = FinishLinePlacement.SHARED_WITH_START_LINE
    wind: WindMarkOption = WindMarkOption.SINGLE_MARK
    lee: LeewardMarkOption = LeewardMarkOption.SINGLE_MARK

    @property
    def is_valid(self) -> bool:
        return self.revalidate() == self

    def revalidate(self) -> "LayoutSettings":
        """Reset each field, in dependency order, to its first valid choice if invalid."""
        start = _clamp(self.start, valid_starts(self.shape))
        finish = _clamp(self.finish, valid_finishes(self.shape, start))
        wind = _clamp(self.wind, valid_wind_options(self.shape))
        lee = _clamp(self.lee, valid_lee_options(self.shape, start))
        settings = LayoutSettings(shape=self.shape, start=start, finish=finish, wind=wind, lee=lee)
        if settings != self:
            logger.debug(f"Revalidated {self} -> {settings}")
        return settings

    def with_shape(self, shape: CourseShape) -> "LayoutSettings":
        return replace(self, shape=shape).revalidate()

    def with_start(self, start: StartLinePlacement) -> "LayoutSettings":
        return replace(self, start=start).revalidate()

    def with_finish(self, finish: FinishLinePlacement) -> "LayoutSettings":
        return replace(self, finish=finish).revalidate()

    def with_wind(self, wind: WindMarkOption) -> "LayoutSettings":
        return replace(self, wind=wind).revalidate()

    def with_lee(self, lee: LeewardMarkOption) -> "LayoutSettings":
        return replace(self, lee=lee).revalidate()

    # =========================================================================
    # Locus builders
    # =========================================================================

    def leeward_mark_locus(self) -> Locus:
        """Leeward mark, placed relative to the start line center."""
        if self.start == StartLinePlacement.MID_COURSE:
            bearing, distance = 180, Adjustable(measurement=DistanceMeasurement.DOWNWIND)
        elif self.start == StartLinePlacement.AT_LEEWARD_MARK:
            bearing, distance = -90, TotalBoatLengths(times=LayoutConfig.LEEWARD_PIN_FACTOR)
        else:
            bearing, distance = 0, Adjustable(measurement=DistanceMeasurement.START)

        if self.lee == LeewardMarkOption.GATE:
            half_gate = Adjustable(measurement=DistanceMeasurement.GATE, times=0.5)
            return Locus(
                bearing=bearing,
                distance=distance,
                loci=(
                    Locus(bearing=-90, distance=half_gate, mark=MarkRole.LEEWARD_GATE_LEFT),
                    Locus(bearing=90, distance=half_gate, mark=MarkRole.LEEWARD_GATE_RIGHT),
                ),
            )
        if self.lee == LeewardMarkOption.MARK_AND_OFFSET:
            return Locus(
                bearing=bearing,
                distance=distance,
                mark=MarkRole.LEEWARD,
                loci=(
                    Locus(
                        bearing=90,
                        distance=Adjustable(measurement=DistanceMeasurement.OFFSET),
                        mark=MarkRole.LEEWARD_OFFSET,
                    ),
                ),
            )
        return Locus(bearing=bearing, distance=distance, mark=MarkRole.LEEWARD)

    def wind_mark_locus(self) -> Locus:
        """Windward mark, with its offset and any finish line hung off it."""
        children: list[Locus] = []
        if self.wind == WindMarkOption.MARK_AND_OFFSET:
            children.append(
                Locus(
                    bearing=-90,
                    distance=Adjustable(measurement=DistanceMeasurement.OFFSET),
                    mark=MarkRole.WINDWARD_OFFSET,
                )
            )

        if self.finish == FinishLinePlacement.UPWIND:
            half_line = Adjustable(measurement=DistanceMeasurement.FINISH_LINE, times=0.5)
            children.append(
                Locus(
                    bearing=0,
                    distance=Adjustable(measurement=DistanceMeasurement.FINISH),
                    loci=(
                        Locus(bearing=-90, distance=half_line, mark=MarkRole.FINISH_PIN),
                        Locus(bearing=90, distance=half_line, mark=MarkRole.FINISH_FLAG),
                    ),
                )
            )
        elif self.finish == FinishLinePlacement.AT_WIND_MARK:
            children.append(
                Locus(
                    bearing=90,
                    distance=Adjustable(measurement=DistanceMeasurement.FINISH_LINE),
                    mark=MarkRole.FINISH_FLAG,
                )
            )

        return Locus(
            bearing=0,
            distance=Adjustable(measurement=DistanceMeasurement.UPWIND),
            mark=MarkRole.WINDWARD,
            loci=tuple(children),
        )

    def jibe_mark_locus(self) -> Locus | None:
        """Jibe mark(s) for triangle and trapezoid courses, None otherwise."""
        width = Adjustable(measurement=DistanceMeasurement.WIDTH)
        if self.shape == CourseShape.TRIANGLE:
            return Locus(bearing=-90, distance=width, mark=MarkRole.JIBE)
        if self.shape == CourseShape.TRAPEZOID:
            half_reach = Adjustable(measurement=DistanceMeasurement.TRAPEZOID_DOWNWIND, times=0.5)
            return Locus(
                bearing=-90,
                distance=width,
                loci=(
                    Locus(bearing=0, distance=half_reach, mark=MarkRole.WINDWARD_JIBE),
                    Locus(bearing=180, distance=half_reach, mark=MarkRole.LEEWARD_JIBE),
                ),
            )
        return None

    def generate_loci(self) -> tuple[Locus, ...]:
        """Root loci for these settings, all measured from the start flag."""
        if self.shape == CourseShape.DIGITAL_N:
            return Layouts.DIGITAL_N.loci

        wind = self.wind_mark_locus()
        leeward = self.leeward_mark_locus()
        jibe = self.jibe_mark_locus()
        upper = (wind,) if jibe is None else (wind, jibe)

        start_pin = Locus(
            bearing=-90,
            distance=TotalBoatLengths(times=LayoutConfig.START_PIN_FACTOR),
            mark=MarkRole.START_PIN,
        )
        start_center = TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR)

        if self.start == StartLinePlacement.MID_COURSE:
            loci = [
                start_pin,
                Locus(
                    bearing=-90,
                    distance=start_center,
                    is_course_center=True,
                    loci=(wind, leeward) if jibe is None else (wind, leeward, jibe),
                ),
            ]
        elif self.start == StartLinePlacement.AT_LEEWARD_MARK:
            loci = [
                Locus(
                    bearing=-90,
                    distance=start_center,
                    loci=(
                        leeward,
                        Locus(
                            bearing=0,
                            distance=Adjustable(measurement=DistanceMeasurement.DOWNWIND),
                            is_course_center=True,
                            loci=upper,
                        ),
                    ),
                ),
            ]
        else:
            # The leeward locus appears twice: once at the start distance above
            # the start line (carrying the mark), then again at the downwind
            # distance above that as the course center.
            course_center = replace(
                leeward,
                distance=Adjustable(measurement=DistanceMeasurement.DOWNWIND),
                mark=None,
                is_course_center=True,
                loci=upper,
            )
            loci = [
                start_pin,
                Locus(
                    bearing=-90,
                    distance=start_center,
                    loci=(replace(leeward, loci=(*leeward.loci, course_center)),),
                ),
            ]

        if self.finish == FinishLinePlacement.STARBOARD_OF_START_FLAG:
            loci.append(
                Locus(
                    bearing=90,
                    distance=Adjustable(measurement=DistanceMeasurement.FINISH_LINE),
                    mark=MarkRole.FINISH_PIN,
                )
            )
        return tuple(loci)

    @property
    def layout_id(self) -> UUID:
        """Deterministic id: equal settings always generate the same id."""
        key = "/".join(choice.value for choice in (self.shape, self.start, self.finish, self.wind, self.lee))
        return uuid5(LAYOUT_NAMESPACE, key)

    @property
    def name(self) -> str:
        """Display name like "Triangle, start mid-course, finish upwind, leeward gate"."""
        parts = [_SHAPE_NAMES[self.shape], f"start {_START_NAMES[self.start]}", f"finish {_FINISH_NAMES[self.finish]}"]
        if self.wind == WindMarkOption.MARK_AND_OFFSET:
            parts.append("windward offset")
        if self.lee == LeewardMarkOption.GATE:
            parts.append("leeward gate")
        return ", ".join(parts)

    def generate_layout(self) -> Layout:
        """Layout for these settings; Digital N returns the canonical layout unchanged."""
        if self.shape == CourseShape.DIGITAL_N:
            return Layouts.DIGITAL_N
        layout = Layout(id=self.layout_id, name=self.name, loci=self.generate_loci())
        logger.info(f"Generated layout '{layout.name}' ({layout.id})")
        return layout


_SHAPE_NAMES = {
    CourseShape.WINDWARD_LEEWARD: "Windward/Leeward",
    CourseShape.TRIANGLE: "Triangle",
    CourseShape.TRAPEZOID: "Trapezoid",
    CourseShape.DIGITAL_N: "Digital N",
}
_START_NAMES = {
    StartLinePlacement.MID_COURSE: "mid-course",
    StartLinePlacement.AT_LEEWARD_MARK: "at leeward mark",
    StartLinePlacement.DOWNWIND: "downwind",
}
_FINISH_NAMES = {
    FinishLinePlacement.SHARED_WITH_START_LINE: "at start line",
    FinishLinePlacement.STARBOARD_OF_START_FLAG: "starboard of start flag",
    FinishLinePlacement.UPWIND: "upwind",
    FinishLinePlacement.AT_WIND_MARK: "at wind mark",
    FinishLinePlacement.DOWNWIND_REACH: "downwind reach",
}


def all_settings() -> Iterator[LayoutSettings]:
    """Every valid combination of choices."""
    for shape in CourseShape:
        for start in valid_starts(shape):
            for finish in valid_finishes(shape, start):
                for wind in valid_wind_options(shape):
                    for lee in valid_lee_options(shape, start):
                        yield LayoutSettings(shape=shape, start=start, finish=finish, wind=wind, lee=lee)


def revalidate(settings: LayoutSettings) -> LayoutSettings:
    return settings.revalidate()
