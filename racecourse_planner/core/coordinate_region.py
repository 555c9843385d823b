"""CoordinateRegion - a latitude/longitude bounding box.

Regions are accumulated over flags, targets and marks to decide how much
of the map to show. The UNDEFINED region (all NaN) is the identity for
that accumulation: enclosing anything in it simply adopts the argument.
"""

from dataclasses import dataclass
from math import cos, isclose, nan, radians
from typing import ClassVar

import numpy as np

from racecourse_planner.constants import GeoConfig
from racecourse_planner.core.coordinate import Coordinate


@dataclass(frozen=True)
class CoordinateSpan:
    """Height and width of a region, in degrees."""

    latitude_delta: float = 0.0
    longitude_delta: float = 0.0

    ZERO: ClassVar["CoordinateSpan"]


CoordinateSpan.ZERO = CoordinateSpan(latitude_delta=0.0, longitude_delta=0.0)


@dataclass(frozen=True)
class CoordinateRegion:
    """A region on the globe given by its center and span.

    Spans are stored as absolute values.

    Example:
        region = CoordinateRegion.UNDEFINED
        region = region.enclosing(flag).enclosing(pin)
    """

    center: Coordinate
    span: CoordinateSpan = CoordinateSpan.ZERO

    UNDEFINED: ClassVar["CoordinateRegion"]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "span",
            CoordinateSpan(
                latitude_delta=abs(self.span.latitude_delta),
                longitude_delta=abs(self.span.longitude_delta),
            ),
        )

    @classmethod
    def from_corners(
        cls,
        latitude1: float,
        longitude1: float,
        latitude2: float,
        longitude2: float,
    ) -> "CoordinateRegion":
        """Smallest region containing both corners, in any order."""
        min_lat, max_lat = min(latitude1, latitude2), max(latitude1, latitude2)
        min_lon, max_lon = min(longitude1, longitude2), max(longitude1, longitude2)
        return cls(
            center=Coordinate(latitude=(min_lat + max_lat) / 2.0, longitude=(min_lon + max_lon) / 2.0),
            span=CoordinateSpan(latitude_delta=max_lat - min_lat, longitude_delta=max_lon - min_lon),
        )

    @classmethod
    def from_meters(
        cls,
        center: Coordinate,
        latitudinal_meters: float,
        longitudinal_meters: float,
    ) -> "CoordinateRegion":
        """Region of the given north-south and east-west extent around a center."""
        meters_per_degree = GeoConfig.EARTH_METERS_PER_DEGREE
        return cls(
            center=center,
            span=CoordinateSpan(
                latitude_delta=latitudinal_meters / meters_per_degree,
                longitude_delta=longitudinal_meters / (cos(radians(center.latitude)) * meters_per_degree),
            ),
        )

    @property
    def is_undefined(self) -> bool:
        return bool(
            np.isnan(
                [
                    self.center.latitude,
                    self.center.longitude,
                    self.span.latitude_delta,
                    self.span.longitude_delta,
                ]
            ).any()
        )

    @property
    def min_latitude(self) -> float:
        return self.center.latitude - self.span.latitude_delta / 2.0

    @property
    def max_latitude(self) -> float:
        return self.center.latitude + self.span.latitude_delta / 2.0

    @property
    def min_longitude(self) -> float:
        return self.center.longitude - self.span.longitude_delta / 2.0

    @property
    def max_longitude(self) -> float:
        return self.center.longitude + self.span.longitude_delta / 2.0

    @property
    def min_corner(self) -> Coordinate:
        return Coordinate(latitude=self.min_latitude, longitude=self.min_longitude)

    @property
    def max_corner(self) -> Coordinate:
        return Coordinate(latitude=self.max_latitude, longitude=self.max_longitude)

    def enclosing(self, other: "Coordinate | CoordinateRegion") -> "CoordinateRegion":
        """Smallest region containing both this region and a coordinate or region."""
        if isinstance(other, Coordinate):
            if self.is_undefined:
                return CoordinateRegion(center=other, span=CoordinateSpan.ZERO)
            return CoordinateRegion.from_corners(
                latitude1=min(self.min_latitude, other.latitude),
                longitude1=min(self.min_longitude, other.longitude),
                latitude2=max(self.max_latitude, other.latitude),
                longitude2=max(self.max_longitude, other.longitude),
            )

        if self.is_undefined:
            return other
        if other.is_undefined:
            return self
        return CoordinateRegion.from_corners(
            latitude1=min(self.min_latitude, other.min_latitude),
            longitude1=min(self.min_longitude, other.min_longitude),
            latitude2=max(self.max_latitude, other.max_latitude),
            longitude2=max(self.max_longitude, other.max_longitude),
        )

    def scaled(self, factor: float) -> "CoordinateRegion":
        """Same center, span multiplied by factor."""
        return CoordinateRegion(
            center=self.center,
            span=CoordinateSpan(
                latitude_delta=self.span.latitude_delta * factor,
                longitude_delta=self.span.longitude_delta * factor,
            ),
        )

    def is_close(self, other: "CoordinateRegion", delta: float = 1e-5) -> bool:
        """Approximate equality of center and span."""
        return all(
            isclose(a, b, rel_tol=0.0, abs_tol=delta)
            for a, b in (
                (self.center.latitude, other.center.latitude),
                (self.center.longitude, other.center.longitude),
                (self.span.latitude_delta, other.span.latitude_delta),
                (self.span.longitude_delta, other.span.longitude_delta),
            )
        )


CoordinateRegion.UNDEFINED = CoordinateRegion(
    center=Coordinate(latitude=nan, longitude=nan),
    span=CoordinateSpan(latitude_delta=nan, longitude_delta=nan),
)
