"""
Tests for curve flattening.
"""

import math

import pytest

from plotcraft.core.data_types import Point
from plotcraft.plotprep.flatten import MAX_DEPTH, flatten_arc, flatten_cubic, flatten_quadratic


def cubic_at(p0, p1, p2, p3, t):
    mt = 1 - t
    x = mt**3 * p0.x + 3 * mt**2 * t * p1.x + 3 * mt * t**2 * p2.x + t**3 * p3.x
    y = mt**3 * p0.y + 3 * mt**2 * t * p1.y + 3 * mt * t**2 * p2.y + t**3 * p3.y
    return Point(x, y)


def distance_to_polyline(p, points):
    best = math.inf
    for a, b in zip(points, points[1:]):
        dx, dy = b.x - a.x, b.y - a.y
        length_sq = dx * dx + dy * dy
        t = 0.0 if length_sq == 0 else max(0.0, min(1.0, ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq))
        best = min(best, math.hypot(p.x - (a.x + t * dx), p.y - (a.y + t * dy)))
    return best


class TestFlattenCubic:
    P = (Point(0, 0), Point(0, 50), Point(100, 50), Point(100, 0))

    def test_endpoints(self):
        points = flatten_cubic(*self.P, 0.1)
        assert points[0] == self.P[0]
        assert points[-1] == self.P[3]

    def test_within_tolerance(self):
        tolerance = 0.2
        points = flatten_cubic(*self.P, tolerance)
        for i in range(101):
            sample = cubic_at(*self.P, i / 100)
            # Allow slight overshoot past chord ends
            assert distance_to_polyline(sample, points) <= tolerance * 1.5

    def test_tighter_tolerance_adds_points(self):
        coarse = flatten_cubic(*self.P, 1.0)
        fine = flatten_cubic(*self.P, 0.01)
        assert len(fine) > len(coarse)

    def test_straight_curve_is_one_segment(self):
        points = flatten_cubic(Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0), 0.1)
        assert points == [Point(0, 0), Point(3, 0)]

    def test_depth_is_bounded(self):
        points = flatten_cubic(*self.P, 0.0)
        assert len(points) <= 2**MAX_DEPTH + 1


class TestFlattenQuadratic:
    def test_endpoints_and_bend(self):
        points = flatten_quadratic(Point(0, 0), Point(50, 100), Point(100, 0), 0.1)
        assert points[0] == Point(0, 0)
        assert points[-1] == Point(100, 0)
        assert max(p.y for p in points) == pytest.approx(50, abs=0.5)


class TestFlattenArc:
    def test_points_on_circle(self):
        points = flatten_arc(Point(0, 0), 10, 0, math.pi, 0.1)
        for p in points:
            assert math.hypot(p.x, p.y) == pytest.approx(10)
        assert points[0].x == pytest.approx(10)
        assert points[-1].x == pytest.approx(-10)

    def test_minimum_segments(self):
        assert len(flatten_arc(Point(0, 0), 0, 0, 1, 0.1)) == 3
