"""Location - the capability shared by geodetic and planar positions.

Any type implementing these five operations can anchor a locus tree,
so the positioning algorithm runs unchanged on latitude/longitude
coordinates (for the water) and on screen points (for diagrams).
"""

from typing import Protocol, TypeVar

LocationT = TypeVar("LocationT", bound="Location")


class Location(Protocol):
    """Bearings are degrees clockwise from north; distances are in the type's unit."""

    def bearing(self: LocationT, to: LocationT) -> float: ...

    def project(self: LocationT, bearing: float, distance: float) -> LocationT: ...

    def distance(self: LocationT, to: LocationT) -> float: ...

    def intersection(self: LocationT, bearing: float, other: LocationT, other_bearing: float) -> LocationT | None: ...

    def midpoint(self: LocationT, to: LocationT) -> LocationT: ...
