from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from math import pi, degrees, radians
import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt

from vicsek.config import GEOMETRY_EPS
from vicsek.model.geometry_primitives import Point, Vector


def deg2rad(angle: float) -> float:
    return angle * pi / 180

def rad2deg(angle: float) -> float:
    return angle * 180 / pi


def angle_between(v1: Vector, v2: Vector) -> float:
    """
    Unsigned angle between two vectors in degrees, in the range [0, 180].

    Raises:
        ValueError: If either vector has zero length.
    """
    if v1.magnitude < GEOMETRY_EPS or v2.magnitude < GEOMETRY_EPS:
        raise ValueError(f"Angle is undefined for a zero-length vector: {v1}, {v2}.")
    return degrees(v1.angle_to(v2))


def is_counter_clockwise(v1: Vector, v2: Vector) -> bool:
    """
    True when the line along `v2` lies counter-clockwise of `v1` by an acute angle.

    The orientation of `v2` does not matter: `v2` and `-v2` give the same answer.
    Perpendicular and parallel vectors return False.
    """
    return v1.cross(v2) * v1.dot(v2) > 0.0


def rotate_vector(vector: Vector, angle_deg: float) -> Vector:
    """Rotate a vector about the origin, counter-clockwise for positive angles."""
    return vector.rotate(radians(angle_deg))


def rotate_point(pivot: Point, point: Point, angle_deg: float) -> Point:
    """Rotate `point` about `pivot`, counter-clockwise for positive angles."""
    return pivot + rotate_vector(point - pivot, angle_deg)


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point, eps=1e-12) -> Optional[Point]:
    """
    Intersection of two infinite 2D lines:
      L1 through p1->p2, L2 through p3->p4.
    Returns a Point if they intersect in a single point, otherwise None (parallel / coincident).
    """
    params = _intersection_params(p1, p2, p3, p4, eps)
    if params is None:
        return None
    t, _ = params
    return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))


def segment_intersection(
    p1: Point,
    p2: Point,
    p3: Point,
    p4: Point,
    *,
    eps: float = GEOMETRY_EPS
    ) -> Optional[Point]:
    """
    Intersection of the segments p1->p2 and p3->p4.

    Args:
        p1, p2: Endpoints of the first segment (travel of a particle).
        p3, p4: Endpoints of the second segment (border edge).
        eps: Tolerance for the parallel test and for inclusive endpoint checks.

    Returns:
        The single intersection point, or None when the segments are parallel,
        collinear or do not reach each other.
    """
    params = _intersection_params(p1, p2, p3, p4, eps)
    if params is None:
        return None
    t, u = params
    if not (-eps <= t <= 1.0 + eps and -eps <= u <= 1.0 + eps):
        return None
    return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))


def segment_intersection_param(p1: Point, p2: Point, p3: Point, p4: Point, *, eps: float = GEOMETRY_EPS) -> Optional[float]:
    """Position of the segment intersection along p1->p2 as a fraction in [0, 1], or None."""
    params = _intersection_params(p1, p2, p3, p4, eps)
    if params is None:
        return None
    t, u = params
    if not (-eps <= t <= 1.0 + eps and -eps <= u <= 1.0 + eps):
        return None
    return t


def _intersection_params(p1: Point, p2: Point, p3: Point, p4: Point, eps: float) -> Optional[tuple[float, float]]:
    # Solve using cross products: p1 + t*r == p3 + u*s
    r = p2 - p1
    s = p4 - p3
    rxs = r.cross(s)

    if abs(rxs) < eps:
        # parallel (including possibly collinear)
        return None

    q_p = p3 - p1
    t = q_p.cross(s) / rxs  # parameter on L1
    u = q_p.cross(r) / rxs  # parameter on L2
    return t, u


def rectangle_corners(width: float, height: float, origin: Point = Point(0.0, 0.0)) -> list[Point]:
    """Counter-clockwise corners of an axis-aligned rectangle starting at `origin`."""
    if width <= 0.0 or height <= 0.0:
        raise ValueError(f"Rectangle needs positive dimensions, got {width} x {height}.")
    return [
        origin,
        Point(origin.x + width, origin.y),
        Point(origin.x + width, origin.y + height),
        Point(origin.x, origin.y + height),
    ]


def regular_polygon_corners(center: Point, radius: float, n_corners: int) -> list[Point]:
    """
    Discretize a circle into a regular polygon (counter-clockwise).

    Args:
        center: Center of the circumscribed circle.
        radius: Circumradius.
        n_corners: Number of corners, at least 3.

    Returns:
        The polygon corners.
    """
    if n_corners < 3:
        raise ValueError(f"A polygon needs at least 3 corners, got {n_corners}.")
    theta = np.linspace(0.0, 2.0 * np.pi, n_corners, endpoint=False)
    pts: npt.NDArray[np.float64] = np.c_[center.x + radius * np.cos(theta), center.y + radius * np.sin(theta)]
    return [Point(float(x), float(y)) for x, y in pts]
