import math

import pytest

from vicsek.model.geometry_primitives import Point, Vector
from vicsek.model.geometry_utils import (
    angle_between,
    deg2rad,
    is_counter_clockwise,
    line_intersection,
    rad2deg,
    rectangle_corners,
    regular_polygon_corners,
    rotate_point,
    rotate_vector,
    segment_intersection,
    segment_intersection_param,
)


def test_degree_conversions():
    assert deg2rad(180.0) == pytest.approx(math.pi)
    assert rad2deg(math.pi / 2) == pytest.approx(90.0)


@pytest.mark.parametrize("v1, v2, expected", [
    (Vector(1, 0), Vector(0, 1), 90.0),
    (Vector(1, 0), Vector(0, -3), 90.0),
    (Vector(1, 0), Vector(-1, 0), 180.0),
    (Vector(2, 0), Vector(5, 0), 0.0),
    (Vector(1, -1), Vector(1, 0), 45.0),
    (Vector(-1, -1), Vector(1, 0), 135.0),
])
def test_angle_between(v1, v2, expected):
    assert angle_between(v1, v2) == pytest.approx(expected)


def test_angle_between_zero_vector():
    with pytest.raises(ValueError):
        angle_between(Vector(0, 0), Vector(1, 0))


@pytest.mark.parametrize("v1, v2, expected", [
    (Vector(1, -1), Vector(1, 0), True),
    (Vector(1, -1), Vector(-1, 0), True),
    (Vector(1, 1), Vector(1, 0), False),
    (Vector(0, 1), Vector(1, 0), False),
    (Vector(1, 0), Vector(1, 0), False),
])
def test_is_counter_clockwise(v1, v2, expected):
    assert is_counter_clockwise(v1, v2) is expected


def test_rotate_vector_counter_clockwise():
    rotated = rotate_vector(Vector(1.0, 0.0), 90.0)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(1.0)


def test_rotate_point_about_pivot():
    rotated = rotate_point(Point(1.0, 1.0), Point(2.0, 1.0), 180.0)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(1.0)


def test_rotate_point_onto_pivot_is_fixed():
    assert rotate_point(Point(1.0, 0.0), Point(1.0, 0.0), -180.0) == Point(1.0, 0.0)


def test_segment_intersection_crossing():
    p = segment_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
    assert p.x == pytest.approx(1.0)
    assert p.y == pytest.approx(1.0)


def test_segment_intersection_touching_endpoint():
    p = segment_intersection(Point(0, 0), Point(1, 0), Point(1, -1), Point(1, 1))
    assert p == Point(1.0, 0.0)


def test_segment_intersection_parallel():
    assert segment_intersection(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1)) is None


def test_segment_intersection_collinear():
    assert segment_intersection(Point(0, 0), Point(2, 0), Point(1, 0), Point(3, 0)) is None


def test_segment_intersection_short_of_border():
    assert segment_intersection(Point(0, 0), Point(0.5, 0), Point(1, -1), Point(1, 1)) is None


def test_segment_intersection_param():
    t = segment_intersection_param(Point(0, 0), Point(4, 0), Point(1, -1), Point(1, 1))
    assert t == pytest.approx(0.25)


def test_line_intersection_beyond_segments():
    p = line_intersection(Point(0, 0), Point(1, 1), Point(3, 0), Point(3, 1))
    assert p.x == pytest.approx(3.0)
    assert p.y == pytest.approx(3.0)


def test_line_intersection_parallel():
    assert line_intersection(Point(0, 0), Point(1, 1), Point(0, 1), Point(1, 2)) is None


def test_rectangle_corners():
    corners = rectangle_corners(4.0, 2.0, origin=Point(1.0, 1.0))
    assert corners == [Point(1.0, 1.0), Point(5.0, 1.0), Point(5.0, 3.0), Point(1.0, 3.0)]


def test_rectangle_corners_invalid():
    with pytest.raises(ValueError):
        rectangle_corners(0.0, 1.0)


def test_regular_polygon_corners():
    center = Point(1.0, -1.0)
    corners = regular_polygon_corners(center, 3.0, 6)

    assert len(corners) == 6
    for c in corners:
        assert c.distance_to(center) == pytest.approx(3.0)


def test_regular_polygon_needs_three_corners():
    with pytest.raises(ValueError):
        regular_polygon_corners(Point(0, 0), 1.0, 2)
