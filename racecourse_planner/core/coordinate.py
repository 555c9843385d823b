"""Coordinate - a latitude/longitude position on the globe.

The geodetic implementation of Location. Every operation follows the
great-circle formulas in GeoCalculator.
"""

from dataclasses import dataclass
from typing import Any

from racecourse_planner.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class Coordinate:
    """A location on the globe in decimal degrees.

    Attributes:
        latitude: Degrees north of the equator (-90 to 90)
        longitude: Degrees east of Greenwich (-180 to 180)

    Example:
        flag = Coordinate(latitude=41.777, longitude=-71.379)
        pin = flag.project(bearing=270.0, distance=62.85)
    """

    latitude: float = 0.0
    longitude: float = 0.0

    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.latitude, self.longitude)

    def bearing(self, to: "Coordinate") -> float:
        """The initial bearing from this coordinate to another, in degrees from true north."""
        return GeoCalculator.initial_bearing_deg(
            lat1=self.latitude,
            lon1=self.longitude,
            lat2=to.latitude,
            lon2=to.longitude,
        )

    def project(self, bearing: float, distance: float) -> "Coordinate":
        """A new coordinate at the given bearing and distance (meters) from this one."""
        lat, lon = GeoCalculator.destination(
            lat=self.latitude,
            lon=self.longitude,
            bearing_deg=bearing,
            distance_m=distance,
        )
        return Coordinate(latitude=lat, longitude=lon)

    def distance(self, to: "Coordinate") -> float:
        """Great-circle distance to another coordinate in meters."""
        return GeoCalculator.distance_m(
            lat1=self.latitude,
            lon1=self.longitude,
            lat2=to.latitude,
            lon2=to.longitude,
        )

    def intersection(self, bearing: float, other: "Coordinate", other_bearing: float) -> "Coordinate | None":
        """Where the ray leaving here on `bearing` crosses the ray leaving `other` on `other_bearing`.

        Returns None when the two great circles coincide.
        """
        crossing = GeoCalculator.intersection(
            lat1=self.latitude,
            lon1=self.longitude,
            bearing1_deg=bearing,
            lat2=other.latitude,
            lon2=other.longitude,
            bearing2_deg=other_bearing,
        )
        if crossing is None:
            return None
        return Coordinate(latitude=crossing[0], longitude=crossing[1])

    def midpoint(self, to: "Coordinate") -> "Coordinate":
        lat, lon = GeoCalculator.midpoint(
            lat1=self.latitude,
            lon1=self.longitude,
            lat2=to.latitude,
            lon2=to.longitude,
        )
        return Coordinate(latitude=lat, longitude=lon)

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coordinate":
        """Create Coordinate from dictionary."""
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))

    def __repr__(self) -> str:
        return f"Coordinate(lat={self.latitude:.6f}, lon={self.longitude:.6f})"
