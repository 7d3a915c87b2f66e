"""
Subdivide Modifier - Insert evenly spaced points along each segment.

Subdividing does not change a path's shape; it gives later deforming
modifiers (jitter, noise) more points to move.
"""

from __future__ import annotations

import math
from typing import Any

from plotcraft.core.data_types import Layer, Path, Point
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition


def segment_divisions(
    length: float, mode: str, divisions: int, min_segment_length: float, max_divisions: int
) -> int:
    """Number of pieces to split one segment into."""
    if mode != "adaptive":
        return divisions
    pieces = math.floor(length / min_segment_length) if min_segment_length > 0 else max_divisions
    return max(1, min(max_divisions, pieces))


def _interior_points(p0: Point, p1: Point, pieces: int) -> list[Point]:
    dx = p1.x - p0.x
    dy = p1.y - p0.y
    return [Point(p0.x + dx * j / pieces, p0.y + dy * j / pieces) for j in range(1, pieces)]


def subdivide_path(
    path: Path,
    divisions: int = 5,
    mode: str = "uniform",
    min_segment_length: float = 1,
    max_divisions: int = 20,
) -> Path:
    """
    Subdivide every segment of a path.

    Closed paths also subdivide the implicit closing segment; its
    interior points are appended after the last point.
    """
    points = path.points
    if len(points) < 2:
        return path

    def pieces(p0: Point, p1: Point) -> int:
        length = math.hypot(p1.x - p0.x, p1.y - p0.y)
        return segment_divisions(length, mode, divisions, min_segment_length, max_divisions)

    result: list[Point] = []
    for p0, p1 in zip(points, points[1:]):
        result.append(p0)
        result.extend(_interior_points(p0, p1, pieces(p0, p1)))
    result.append(points[-1])

    if path.closed:
        last, first = points[-1], points[0]
        result.extend(_interior_points(last, first, pieces(last, first)))

    return Path(points=result, closed=path.closed)


def subdivide_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    divisions = max(1, int(params.get("divisions", 5)))
    mode = params.get("mode", "uniform")
    min_segment_length = params.get("minSegmentLength", 1)
    max_divisions = int(params.get("maxDivisions", 20))

    return [
        Layer(
            id=layer.id,
            paths=[
                subdivide_path(path, divisions, mode, min_segment_length, max_divisions)
                for path in layer.paths
            ],
        )
        for layer in input_layers
    ]


SUBDIVIDE_MODULE = ModuleDefinition(
    id="subdivide",
    name="Subdivide",
    kind=ModuleKind.MODIFIER,
    description="Add points along path segments",
    execute=subdivide_execute,
    parameters=[
        ParameterDefinition.number(
            "divisions", "Divisions per Segment", default=5, min_value=1, max_value=50, step=1
        ),
        ParameterDefinition.select(
            "mode", "Mode", options=[("uniform", "Uniform"), ("adaptive", "Adaptive (by length)")]
        ),
        ParameterDefinition.number(
            "minSegmentLength", "Min Segment Length (mm)", default=1, min_value=0.5, max_value=10, step=0.5,
            show_when=("mode", "adaptive"),
        ),
        ParameterDefinition.number(
            "maxDivisions", "Max Divisions (adaptive)", default=20, min_value=1, max_value=100, step=1,
            show_when=("mode", "adaptive"),
        ),
    ],
)
