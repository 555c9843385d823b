"""Wind information - six-minute wind samples and the recent history of them.

- WeatherStation: Where a sample came from
- WindInformation: Direction, speed and gusts over one six-minute interval
- WindHistory: Most-recent-first list of samples, bounded in length
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from racecourse_planner.constants import CourseConfig
from racecourse_planner.core.coordinate import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherStation:
    """A station reporting wind data.

    Attributes:
        id: 7-digit station identifier
        name: Display name
        location: Where the station is
    """

    id: str = ""
    name: str = ""
    location: Coordinate = field(default_factory=Coordinate)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "location": self.location.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeatherStation":
        return cls(id=data["id"], name=data["name"], location=Coordinate.from_dict(data=data["location"]))


@dataclass(frozen=True)
class WindInformation:
    """Wind over one six-minute interval.

    Attributes:
        start_time: Start of the interval (timezone-aware, UTC)
        direction: Degrees from true north the wind blows from
        speed: Knots
        gusts: Knots
        station: Reporting station, if known
    """

    start_time: datetime
    direction: float = 0.0
    speed: float = 0.0
    gusts: float = 0.0
    station: WeatherStation | None = None

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=CourseConfig.WIND_SAMPLE_DURATION_S)

    def to_dict(self) -> dict[str, Any]:
        return {
            "station": self.station.to_dict() if self.station is not None else None,
            "start_time": self.start_time.isoformat(),
            "direction": self.direction,
            "speed": self.speed,
            "gusts": self.gusts,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindInformation":
        """Create WindInformation from dictionary.

        Naive timestamps are read as UTC.
        """
        start_time = datetime.fromisoformat(data["start_time"])
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        station = data.get("station")
        return cls(
            station=WeatherStation.from_dict(data=station) if station is not None else None,
            start_time=start_time,
            direction=float(data["direction"]),
            speed=float(data["speed"]),
            gusts=float(data["gusts"]),
        )


class WindHistory:
    """Recent wind samples, most recent first, at most WIND_HISTORY_SIZE of them.

    Example:
        history = WindHistory()
        history.record(sample)  # True if newer than anything recorded
        history.latest          # the sample just recorded
    """

    def __init__(
        self,
        samples: list[WindInformation] | None = None,
        capacity: int = CourseConfig.WIND_HISTORY_SIZE,
    ) -> None:
        self.capacity = capacity
        self._samples: list[WindInformation] = list(samples or [])[:capacity]

    def record(self, info: WindInformation) -> bool:
        """Insert a sample at the front if it is newer than the latest one.

        Returns:
            True if recorded, False if the sample was stale or a duplicate.
        """
        if self._samples and info.start_time <= self._samples[0].start_time:
            logger.debug(f"Ignoring wind sample from {info.start_time.isoformat()} (not newer than latest)")
            return False
        self._samples.insert(0, info)
        del self._samples[self.capacity :]
        return True

    @property
    def latest(self) -> WindInformation | None:
        return self._samples[0] if self._samples else None

    @property
    def samples(self) -> tuple[WindInformation, ...]:
        return tuple(self._samples)

    def clear(self) -> None:
        self._samples = []

    def __iter__(self) -> Iterator[WindInformation]:
        return iter(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return bool(self._samples)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WindHistory):
            return NotImplemented
        return self._samples == other._samples

    def to_list(self) -> list[dict[str, Any]]:
        return [info.to_dict() for info in self._samples]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> "WindHistory":
        return cls(samples=[WindInformation.from_dict(data=item) for item in data])

    def __repr__(self) -> str:
        directions = [f"{info.direction:.0f}" for info in self._samples]
        return f"WindHistory({directions})"
