"""
Geometric Primitives for the planar particle domain.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Union, Sequence, Tuple, TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector:
    """
    A vector in the plane representing direction and magnitude.
    """
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0.0: raise ZeroDivisionError("Cannot divide a Vector by zero.")
        return Vector(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0: return Vector(0.0, 0.0)
        return self / mag

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector) -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def rotate(self, angle_rad: float) -> Vector:
        """Rotate vector counter-clockwise around the origin."""
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Vector(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a
        )

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    def angle_to(self, other: Vector) -> float:
        """Returns the unsigned angle in radians between this vector and another."""
        return math.atan2(abs(self.cross(other)), self.dot(other))


@dataclass(frozen=True)
class Point:
    """A simple geometric point in the plane."""
    x: float
    y: float

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Union[Vector, Point]) -> Union[Vector, Point]:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    @classmethod
    def from_sequence(cls, xy: Sequence[float]) -> Point:
        return cls(float(xy[0]), float(xy[1]))


@dataclass(frozen=True)
class Segment:
    """A straight border edge between two points."""
    first: Point
    second: Point

    def to_vector(self) -> Vector:
        return self.second - self.first

    @property
    def length(self) -> float:
        return self.first.distance_to(self.second)

    @property
    def midpoint(self) -> Point:
        return Point((self.first.x + self.second.x) / 2, (self.first.y + self.second.y) / 2)


@dataclass
class Polygon:
    """
    A closed loop of corners. Edge `i` runs from corner `i` to corner `i + 1`,
    the last edge closes the loop back to the first corner.
    """
    corners: List[Point] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.corners = [c if isinstance(c, Point) else Point.from_sequence(c) for c in self.corners]
        # A repeated closing corner would create a zero-length edge
        if len(self.corners) > 1 and self.corners[0].distance_to(self.corners[-1]) < 1e-12:
            self.corners.pop()

    def __len__(self) -> int:
        return len(self.corners)

    @property
    def edges(self) -> List[Segment]:
        n = len(self.corners)
        return [Segment(self.corners[i], self.corners[(i + 1) % n]) for i in range(n)]

    @property
    def signed_area(self) -> float:
        """Shoelace area, positive for counter-clockwise corner order."""
        pts = self.to_array()
        x, y = pts[:, 0], pts[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))

    def outward_normal(self, index: int) -> Vector:
        """Unit normal of edge `index` pointing out of the polygon, for either corner order."""
        edge = self.edges[index].to_vector()
        normal = Vector(edge.y, -edge.x).normalize()
        return normal if self.signed_area > 0.0 else -normal

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(x_min, y_min, x_max, y_max)"""
        pts = self.to_array()
        return float(pts[:, 0].min()), float(pts[:, 1].min()), float(pts[:, 0].max()), float(pts[:, 1].max())

    def contains(self, point: Point) -> bool:
        """Even-odd ray casting test. Points on an edge may fall either way."""
        inside = False
        for edge in self.edges:
            a, b = edge.first, edge.second
            if (a.y > point.y) != (b.y > point.y):
                x_cross = a.x + (point.y - a.y) * (b.x - a.x) / (b.y - a.y)
                if point.x < x_cross:
                    inside = not inside
        return inside

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([c.to_array() for c in self.corners], dtype=np.float64).reshape(-1, 2)
