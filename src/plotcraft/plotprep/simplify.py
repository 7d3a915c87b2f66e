"""
Path simplification with the Ramer-Douglas-Peucker algorithm.
"""

from __future__ import annotations

import math

from plotcraft.core.data_types import Layer, Path, Point


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from a point to the infinite line through two points."""
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        pdx = point.x - line_start.x
        pdy = point.y - line_start.y
        return math.sqrt(pdx * pdx + pdy * pdy)

    numerator = abs(
        dy * point.x - dx * point.y + line_end.x * line_start.y - line_end.y * line_start.x
    )
    return numerator / math.sqrt(length_sq)


def rdp_simplify(points: list[Point], epsilon: float) -> list[Point]:
    """
    Drop points that lie within epsilon of the simplified polyline.

    Endpoints are always kept. Lists shorter than 3 are returned as is.
    """
    if len(points) < 3:
        return points

    start = points[0]
    end = points[-1]
    max_distance = 0.0
    max_index = 0

    for i in range(1, len(points) - 1):
        dist = perpendicular_distance(points[i], start, end)
        if dist > max_distance:
            max_distance = dist
            max_index = i

    if max_distance > epsilon:
        left = rdp_simplify(points[: max_index + 1], epsilon)
        right = rdp_simplify(points[max_index:], epsilon)
        # The split point is shared by both halves
        return left[:-1] + right

    return [start, end]


def simplify_path(path: Path, epsilon: float) -> Path:
    if len(path.points) < 3:
        return path
    return Path(points=rdp_simplify(path.points, epsilon), closed=path.closed)


def simplify_layers(layers: list[Layer], epsilon: float) -> list[Layer]:
    """Simplify every path, dropping paths left with fewer than 2 points."""
    if epsilon < 0:
        raise ValueError("Simplify tolerance must be non-negative")
    result = []
    for layer in layers:
        paths = [simplify_path(p, epsilon) for p in layer.paths]
        result.append(Layer(id=layer.id, paths=[p for p in paths if len(p.points) >= 2]))
    return result
