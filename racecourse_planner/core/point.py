"""Point - a position on a flat two-dimensional plane.

The planar implementation of Location, used for course diagrams and
screen-space drawing. Y grows downward ("south") to match screen
coordinates, so bearing 0 points toward negative y.
"""

from dataclasses import dataclass
from math import atan2, cos, degrees, radians, sin, sqrt
from typing import Any, ClassVar


@dataclass(frozen=True)
class Point:
    """A point in a two-dimensional coordinate system.

    Attributes:
        x: Horizontal position, growing east
        y: Vertical position, growing south
    """

    x: float = 0.0
    y: float = 0.0

    ZERO: ClassVar["Point"]

    def bearing(self, to: "Point") -> float:
        dx = to.x - self.x
        dy = self.y - to.y
        b = degrees(atan2(dx, dy))
        return b + 360.0 if b < 0 else b

    def project(self, bearing: float, distance: float) -> "Point":
        b = radians(bearing)
        return Point(x=self.x + distance * sin(b), y=self.y - distance * cos(b))

    def distance(self, to: "Point") -> float:
        dx = self.x - to.x
        dy = self.y - to.y
        return sqrt(dx * dx + dy * dy)

    def intersection(self, bearing: float, other: "Point", other_bearing: float) -> "Point | None":
        """Where the line through here on `bearing` crosses the line through `other`.

        Returns None when the lines are parallel.
        """
        angle1 = radians(bearing)
        angle2 = radians(other_bearing)

        # Direction vectors (y increases south)
        dir1_x, dir1_y = sin(angle1), -cos(angle1)
        dir2_x, dir2_y = sin(angle2), -cos(angle2)

        denominator = dir1_x * dir2_y - dir1_y * dir2_x
        if denominator == 0:
            return None

        dx = other.x - self.x
        dy = other.y - self.y
        t = (dx * dir2_y - dy * dir2_x) / denominator

        return Point(x=self.x + t * dir1_x, y=self.y + t * dir1_y)

    def midpoint(self, to: "Point") -> "Point":
        return Point(x=(self.x + to.x) / 2, y=(self.y + to.y) / 2)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        return cls(x=float(data["x"]), y=float(data["y"]))

    def __repr__(self) -> str:
        return f"Point(x={self.x:.3f}, y={self.y:.3f})"


Point.ZERO = Point(x=0.0, y=0.0)
