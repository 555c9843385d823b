"""Distance model - named adjustable distances and how loci use them.

- DistanceMeasurement: The closed set of distances a race committee can adjust
- Distances: A total record holding one value per measurement
- DistanceCalculation: How a locus derives its distance (boat lengths or adjustable)
- DistanceUnit / SliderSettings: Display units and slider ranges for the UI
- NewDistanceValue: Payload for changing one measurement
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from racecourse_planner.constants import FEET_PER_METER, YARDS_PER_METER, CourseConfig, SliderConfig

if TYPE_CHECKING:
    from racecourse_planner.model.course import Course


class DistanceUnit(Enum):
    """Display unit, valued as units per meter."""

    METERS = 1.0
    FEET = FEET_PER_METER
    YARDS = YARDS_PER_METER

    def from_meters(self, meters: float) -> float:
        return meters * self.value

    def to_meters(self, amount: float) -> float:
        return amount / self.value


@dataclass(frozen=True)
class SliderSettings:
    """Range and step of a distance slider, in display units."""

    min: float
    max: float
    step: float


_LARGE_METER_SLIDER = SliderSettings(*SliderConfig.LARGE_METERS)
_LARGE_FOOT_SLIDER = SliderSettings(*SliderConfig.LARGE_FEET)
_SMALL_METER_SLIDER = SliderSettings(*SliderConfig.SMALL_METERS)
_SMALL_FOOT_SLIDER = SliderSettings(*SliderConfig.SMALL_FEET)


class DistanceMeasurement(Enum):
    """Adjustable distances. Values are persisted and must stay stable."""

    # From the center of the course to the windward marks
    UPWIND = "upwind"
    # From the center of the course to the leeward marks
    DOWNWIND = "downwind"
    # Separation between the jibe mark(s) and the main upwind/downwind axis
    WIDTH = "width"
    # Length of the short downwind leg of a trapezoid course
    TRAPEZOID_DOWNWIND = "trapezoidDownwind"
    # From a mark to its offset
    OFFSET = "offset"
    # Between the two marks of a gate
    GATE = "gate"
    # From the start line to the main course
    START = "start"
    # From the main course to the finish line
    FINISH = "finish"
    # Length of the finish line
    FINISH_LINE = "finishLine"

    @property
    def is_leg(self) -> bool:
        """Long course legs use the large slider, short spacings the small one."""
        return self not in (DistanceMeasurement.OFFSET, DistanceMeasurement.GATE, DistanceMeasurement.FINISH_LINE)

    def slider_settings(self, unit: DistanceUnit) -> SliderSettings:
        feet = unit is DistanceUnit.FEET
        if self.is_leg:
            return _LARGE_FOOT_SLIDER if feet else _LARGE_METER_SLIDER
        return _SMALL_FOOT_SLIDER if feet else _SMALL_METER_SLIDER


@dataclass(frozen=True)
class Distances:
    """One value in meters for every DistanceMeasurement.

    Indexed by measurement rather than by name, so a lookup can never miss.

    Example:
        distances = Distances()
        distances[DistanceMeasurement.UPWIND]  # 175.0
        longer = distances.replacing(DistanceMeasurement.UPWIND, 250.0)
    """

    upwind: float = CourseConfig.DEFAULT_DISTANCES_M["upwind"]
    downwind: float = CourseConfig.DEFAULT_DISTANCES_M["downwind"]
    width: float = CourseConfig.DEFAULT_DISTANCES_M["width"]
    trapezoid_downwind: float = CourseConfig.DEFAULT_DISTANCES_M["trapezoidDownwind"]
    offset: float = CourseConfig.DEFAULT_DISTANCES_M["offset"]
    gate: float = CourseConfig.DEFAULT_DISTANCES_M["gate"]
    start: float = CourseConfig.DEFAULT_DISTANCES_M["start"]
    finish: float = CourseConfig.DEFAULT_DISTANCES_M["finish"]
    finish_line: float = CourseConfig.DEFAULT_DISTANCES_M["finishLine"]

    def __getitem__(self, measurement: DistanceMeasurement) -> float:
        return getattr(self, _FIELD_NAMES[measurement])

    def replacing(self, measurement: DistanceMeasurement, value: float) -> "Distances":
        """Copy with one measurement changed."""
        return replace(self, **{_FIELD_NAMES[measurement]: float(value)})

    def to_dict(self) -> dict[str, float]:
        """Serialize keyed by measurement value (e.g. "finishLine")."""
        return {measurement.value: self[measurement] for measurement in DistanceMeasurement}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Distances":
        """Create Distances from dictionary.

        Raises:
            KeyError: If any measurement is missing.
        """
        return cls(**{_FIELD_NAMES[m]: float(data[m.value]) for m in DistanceMeasurement})


_FIELD_NAMES: dict[DistanceMeasurement, str] = {
    DistanceMeasurement.UPWIND: "upwind",
    DistanceMeasurement.DOWNWIND: "downwind",
    DistanceMeasurement.WIDTH: "width",
    DistanceMeasurement.TRAPEZOID_DOWNWIND: "trapezoid_downwind",
    DistanceMeasurement.OFFSET: "offset",
    DistanceMeasurement.GATE: "gate",
    DistanceMeasurement.START: "start",
    DistanceMeasurement.FINISH: "finish",
    DistanceMeasurement.FINISH_LINE: "finish_line",
}
assert set(_FIELD_NAMES) == set(DistanceMeasurement), "Every measurement needs a Distances field"
assert set(_FIELD_NAMES.values()) == {f.name for f in fields(Distances)}, "Every Distances field needs a measurement"


@dataclass(frozen=True)
class TotalBoatLengths:
    """A multiple of the total length of all boats in the regatta."""

    times: float

    def compute(self, course: "Course") -> float:
        return self.times * course.number_of_boats * course.boat_length

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "totalBoatLengths", "times": self.times}


@dataclass(frozen=True)
class Adjustable:
    """A distance the race committee adjusts at race time, optionally scaled.

    Loci sharing a measurement move together under a single slider.
    """

    measurement: DistanceMeasurement
    times: float = 1.0

    def compute(self, course: "Course") -> float:
        return course.distances[self.measurement] * self.times

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "adjustable", "measurement": self.measurement.value, "times": self.times}


DistanceCalculation = TotalBoatLengths | Adjustable


def distance_calculation_from_dict(data: dict[str, Any]) -> DistanceCalculation:
    """Create a DistanceCalculation from its tagged dictionary.

    Raises:
        ValueError: If the kind tag or measurement name is unknown.
    """
    kind = data["kind"]
    if kind == "totalBoatLengths":
        return TotalBoatLengths(times=float(data["times"]))
    if kind == "adjustable":
        return Adjustable(
            measurement=DistanceMeasurement(data["measurement"]),
            times=float(data.get("times", 1.0)),
        )
    raise ValueError(f"Unknown distance calculation kind: {kind!r}")


@dataclass(frozen=True)
class NewDistanceValue:
    """A request to set one measurement to a new value in meters."""

    measurement: DistanceMeasurement
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"measurement": self.measurement.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewDistanceValue":
        return cls(measurement=DistanceMeasurement(data["measurement"]), value=float(data["value"]))
