"""Layout - the geometry of a race course, independent of position and size.

A Layout specifies where the marks go relative to the start flag and the
course direction. Distances are resolved at runtime from course settings,
so a single layout fits any fleet size or wind direction.

Canonical layouts are immutable constants in Layouts. A LayoutProvider
resolves persisted layout ids back into trees; StaticLayoutProvider is
the in-memory implementation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

from racecourse_planner.constants import LayoutConfig
from racecourse_planner.model.distance import (
    Adjustable,
    DistanceMeasurement,
    Distances,
    TotalBoatLengths,
)
from racecourse_planner.model.locus import Locus, for_each_mark
from racecourse_planner.model.mark_role import MarkRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layout:
    """A named tree of loci with a stable identity.

    Attributes:
        id: Immutable ID, stable even if the name changes
        name: Short name suitable for a picker
        description: Longer explanation of the layout
        zone_size: Mark zone radius in boat lengths (2 for team racing, 3 otherwise)
        loci: Root loci, positioned relative to the start flag
        sample_distances: Distances that show the layout off well in previews
    """

    id: UUID
    name: str
    loci: tuple[Locus, ...]
    description: str = ""
    zone_size: int = LayoutConfig.FLEET_RACING_ZONE_SIZE
    sample_distances: Distances = field(default_factory=Distances)

    @property
    def is_digital_n(self) -> bool:
        return self.id == DIGITAL_N_ID

    def marks(self) -> list[MarkRole]:
        """Mark roles in traversal order."""
        roles: list[MarkRole] = []
        for_each_mark(loci=self.loci, action=roles.append)
        return roles

    def distance_measurements(self) -> list[DistanceMeasurement]:
        """Adjustable measurements used by this layout, in first-seen order.

        The UI shows one slider per measurement.
        """
        measurements: list[DistanceMeasurement] = []

        def collect(measurement: DistanceMeasurement) -> None:
            if measurement not in measurements:
                measurements.append(measurement)

        for locus in self.loci:
            locus.for_each_distance_measurement(action=collect)
        return measurements

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "zone_size": self.zone_size,
            "loci": [locus.to_dict() for locus in self.loci],
            "sample_distances": self.sample_distances.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Layout":
        """Create Layout from dictionary.

        Raises:
            ValueError: If the id is not a valid UUID.
        """
        sample = data.get("sample_distances")
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            description=data.get("description", ""),
            zone_size=int(data.get("zone_size", LayoutConfig.FLEET_RACING_ZONE_SIZE)),
            loci=tuple(Locus.from_dict(data=locus) for locus in data["loci"]),
            sample_distances=Distances.from_dict(data=sample) if sample is not None else Distances(),
        )

    def __repr__(self) -> str:
        return f"Layout({self.name!r}, marks={[role.value for role in self.marks()]})"


# =============================================================================
# Canonical Layouts
# =============================================================================

TRIANGLE_ID = UUID("EF24BF8B-E5B9-4E7A-9E47-46E8CED73E79")
WINDWARD_LEEWARD_ID = UUID("3538DD08-F2A2-489F-957F-FE429684CDD0")
WINDWARD_LEEWARD_GATE_ID = UUID("6F1E2C7A-93B4-4D25-8A61-0C5D7E9B3F42")
DIGITAL_N_ID = UUID("B2C4D6E8-1A3F-4B5D-9C7E-2F4A6B8D0E13")

_START_PIN = Locus(
    bearing=-90,
    distance=TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR),
    mark=MarkRole.START_PIN,
)
_WINDWARD = Locus(bearing=0, distance=Adjustable(measurement=DistanceMeasurement.UPWIND), mark=MarkRole.WINDWARD)
_LEEWARD = Locus(bearing=180, distance=Adjustable(measurement=DistanceMeasurement.DOWNWIND), mark=MarkRole.LEEWARD)
_WINDWARD_OFFSET = Locus(
    bearing=-90,
    distance=Adjustable(measurement=DistanceMeasurement.OFFSET),
    mark=MarkRole.WINDWARD_OFFSET,
)

_DIGITAL_N_UPWIND = 250.0
_DIGITAL_N_DOWNWIND = 200.0


class Layouts:
    """Predefined course layouts."""

    TRIANGLE = Layout(
        id=TRIANGLE_ID,
        name="Triangle",
        description="A simple triangle course with a combined start/finish line in the middle of the course.",
        loci=(
            Locus(
                bearing=-90,
                distance=TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR),
                is_course_center=True,
                loci=(
                    _START_PIN,
                    _WINDWARD,
                    Locus(bearing=-90, distance=Adjustable(measurement=DistanceMeasurement.WIDTH), mark=MarkRole.JIBE),
                    _LEEWARD,
                ),
            ),
        ),
    )

    WINDWARD_LEEWARD = Layout(
        id=WINDWARD_LEEWARD_ID,
        name="Windward/Leeward",
        description="A simple windward/leeward course with a combined start/finish line in the middle of the course.",
        loci=(
            Locus(
                bearing=-90,
                distance=TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR),
                is_course_center=True,
                loci=(_START_PIN, _WINDWARD, _LEEWARD),
            ),
        ),
    )

    WINDWARD_LEEWARD_GATE = Layout(
        id=WINDWARD_LEEWARD_GATE_ID,
        name="Windward/Leeward with Gate",
        description="A windward/leeward course with an offset mark at the top and a gate at the bottom.",
        loci=(
            Locus(
                bearing=-90,
                distance=TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR),
                is_course_center=True,
                loci=(
                    _START_PIN,
                    Locus(
                        bearing=0,
                        distance=Adjustable(measurement=DistanceMeasurement.UPWIND),
                        mark=MarkRole.WINDWARD,
                        loci=(_WINDWARD_OFFSET,),
                    ),
                    Locus(
                        bearing=180,
                        distance=Adjustable(measurement=DistanceMeasurement.DOWNWIND),
                        loci=(
                            Locus(
                                bearing=-90,
                                distance=Adjustable(measurement=DistanceMeasurement.GATE, times=0.5),
                                mark=MarkRole.LEEWARD_GATE_LEFT,
                            ),
                            Locus(
                                bearing=90,
                                distance=Adjustable(measurement=DistanceMeasurement.GATE, times=0.5),
                                mark=MarkRole.LEEWARD_GATE_RIGHT,
                            ),
                        ),
                    ),
                ),
            ),
        ),
    )

    # Start line downwind of the course, windward and leeward marks with offsets,
    # and a reaching finish to starboard of the course center.
    DIGITAL_N = Layout(
        id=DIGITAL_N_ID,
        name="Digital N",
        description="Start downwind, two laps with offset marks at both ends, and a reaching finish.",
        loci=(
            Locus(
                bearing=-90,
                distance=TotalBoatLengths(times=LayoutConfig.START_PIN_FACTOR),
                mark=MarkRole.START_PIN,
            ),
            Locus(
                bearing=-90,
                distance=TotalBoatLengths(times=LayoutConfig.START_CENTER_FACTOR),
                loci=(
                    Locus(
                        bearing=0,
                        distance=Adjustable(measurement=DistanceMeasurement.START),
                        is_course_center=True,
                        loci=(
                            Locus(
                                bearing=0,
                                distance=Adjustable(measurement=DistanceMeasurement.UPWIND),
                                mark=MarkRole.WINDWARD,
                                loci=(_WINDWARD_OFFSET,),
                            ),
                            Locus(
                                bearing=180,
                                distance=Adjustable(measurement=DistanceMeasurement.DOWNWIND),
                                mark=MarkRole.LEEWARD,
                                loci=(
                                    Locus(
                                        bearing=90,
                                        distance=Adjustable(measurement=DistanceMeasurement.OFFSET),
                                        mark=MarkRole.LEEWARD_OFFSET,
                                    ),
                                ),
                            ),
                            Locus(
                                bearing=90,
                                distance=Adjustable(measurement=DistanceMeasurement.FINISH),
                                loci=(
                                    Locus(
                                        bearing=0,
                                        distance=Adjustable(measurement=DistanceMeasurement.FINISH_LINE, times=0.5),
                                        mark=MarkRole.FINISH_PIN,
                                    ),
                                    Locus(
                                        bearing=180,
                                        distance=Adjustable(measurement=DistanceMeasurement.FINISH_LINE, times=0.5),
                                        mark=MarkRole.FINISH_FLAG,
                                    ),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        ),
        sample_distances=Distances(
            upwind=_DIGITAL_N_UPWIND,
            downwind=_DIGITAL_N_DOWNWIND,
            start=(_DIGITAL_N_UPWIND + _DIGITAL_N_DOWNWIND) / 2,
            finish=(_DIGITAL_N_UPWIND + _DIGITAL_N_DOWNWIND) / 2,
            finish_line=50.0,
        ),
    )

    ALL: tuple[Layout, ...] = (TRIANGLE, WINDWARD_LEEWARD, WINDWARD_LEEWARD_GATE, DIGITAL_N)

    DEFAULT = TRIANGLE


assert len({layout.id for layout in Layouts.ALL}) == len(Layouts.ALL), "Layout ids must be unique"


# =============================================================================
# Layout Providers
# =============================================================================


class LayoutProvider(Protocol):
    """Resolves persisted layout ids. May be backed by a table or a database."""

    def find_layout(self, id: UUID) -> Layout | None: ...


class StaticLayoutProvider:
    """LayoutProvider backed by an in-memory table.

    Example:
        provider = StaticLayoutProvider()
        provider.find_layout(TRIANGLE_ID)  # Layouts.TRIANGLE
    """

    def __init__(self, layouts: tuple[Layout, ...] = Layouts.ALL) -> None:
        self._layouts: dict[UUID, Layout] = {layout.id: layout for layout in layouts}

    def find_layout(self, id: UUID) -> Layout | None:
        return self._layouts.get(id)

    def register(self, layout: Layout) -> None:
        """Add or replace a layout (e.g. one produced by LayoutSettings)."""
        if layout.id in self._layouts:
            logger.info(f"Replacing layout {layout.id} ({self._layouts[layout.id].name} -> {layout.name})")
        self._layouts[layout.id] = layout

    def __len__(self) -> int:
        return len(self._layouts)


default_layout_provider = StaticLayoutProvider()
