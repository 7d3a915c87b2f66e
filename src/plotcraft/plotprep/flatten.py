"""
Curve flattening - Convert Bezier curves and arcs to polylines.

Curves are split with de Casteljau subdivision at t=0.5 until the
control polygon lies within the tolerance of the chord. Subdivision
depth is capped so degenerate input terminates quickly.
"""

from __future__ import annotations

import math

from plotcraft.core.data_types import Point

MAX_DEPTH = 16


def _mid(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def flatten_quadratic(p0: Point, p1: Point, p2: Point, tolerance: float) -> list[Point]:
    """
    Flatten a quadratic Bezier to a polyline.

    The result starts with p0 and ends with p2.
    """
    result = [p0]
    _flatten_quadratic(p0, p1, p2, tolerance, result, 0)
    return result


def _flatten_quadratic(
    p0: Point, p1: Point, p2: Point, tolerance: float, result: list[Point], depth: int
) -> None:
    dx = p2.x - p0.x
    dy = p2.y - p0.y
    d = abs((p1.x - p2.x) * dy - (p1.y - p2.y) * dx)
    length_sq = dx * dx + dy * dy

    if d * d <= tolerance * tolerance * length_sq or depth >= MAX_DEPTH:
        result.append(p2)
        return

    mid01 = _mid(p0, p1)
    mid12 = _mid(p1, p2)
    mid = _mid(mid01, mid12)
    _flatten_quadratic(p0, mid01, mid, tolerance, result, depth + 1)
    _flatten_quadratic(mid, mid12, p2, tolerance, result, depth + 1)


def flatten_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float
) -> list[Point]:
    """
    Flatten a cubic Bezier to a polyline.

    The result starts with p0 and ends with p3.
    """
    result = [p0]
    _flatten_cubic(p0, p1, p2, p3, tolerance, result, 0)
    return result


def _flatten_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point,
    tolerance: float, result: list[Point], depth: int,
) -> None:
    dx = p3.x - p0.x
    dy = p3.y - p0.y
    length_sq = dx * dx + dy * dy

    # Control point distances from the chord, scaled by its length
    d1 = abs((p1.x - p0.x) * dy - (p1.y - p0.y) * dx)
    d2 = abs((p2.x - p0.x) * dy - (p2.y - p0.y) * dx)
    d = max(d1, d2)

    if (
        d * d <= tolerance * tolerance * length_sq
        or length_sq < 0.0001
        or depth >= MAX_DEPTH
    ):
        result.append(p3)
        return

    mid01 = _mid(p0, p1)
    mid12 = _mid(p1, p2)
    mid23 = _mid(p2, p3)
    mid012 = _mid(mid01, mid12)
    mid123 = _mid(mid12, mid23)
    mid0123 = _mid(mid012, mid123)

    _flatten_cubic(p0, mid01, mid012, mid0123, tolerance, result, depth + 1)
    _flatten_cubic(mid0123, mid123, mid23, p3, tolerance, result, depth + 1)


def flatten_arc(
    center: Point,
    radius: float,
    start_angle: float,
    end_angle: float,
    tolerance: float,
) -> list[Point]:
    """Sample a circular arc so the sagitta stays within tolerance."""
    arc_length = abs(end_angle - start_angle) * radius
    if radius > 0 and tolerance > 0:
        segments = max(2, math.ceil(arc_length / math.sqrt(8 * tolerance * radius)))
    else:
        segments = 2

    result = []
    for i in range(segments + 1):
        t = i / segments
        angle = start_angle + (end_angle - start_angle) * t
        result.append(
            Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)
        )
    return result
