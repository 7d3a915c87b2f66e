"""
Pattern Generators - Grids, circles and spirals.

- grid: Lines, crosses or dots on a rows x columns lattice
- concentricCircles: Evenly spaced rings around a center
- spiral: A single Archimedean spiral
"""

from __future__ import annotations

import math
from typing import Any

from plotcraft.core.data_types import Layer, Path, Point
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.geometry import create_circle_path, create_line_path
from plotcraft.nodes.generators.placement import anchor, placement_parameters

DOT_SEGMENTS = 16


# --- Grid ---

def grid_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    rows = max(1, int(params.get("rows", 10)))
    cols = max(1, int(params.get("cols", 10)))
    grid_width = params.get("gridWidth", 150)
    grid_height = params.get("gridHeight", 150)
    style = params.get("style", "lines")
    cross_size = params.get("crossSize", 5)

    cx, cy = anchor(params, context.canvas)
    offset_x = cx - grid_width / 2
    offset_y = cy - grid_height / 2

    def node_x(c: int) -> float:
        return offset_x + (c / cols) * grid_width

    def node_y(r: int) -> float:
        return offset_y + (r / rows) * grid_height

    paths: list[Path] = []
    if style == "lines":
        for r in range(rows + 1):
            paths.append(create_line_path(offset_x, node_y(r), offset_x + grid_width, node_y(r)))
        for c in range(cols + 1):
            paths.append(create_line_path(node_x(c), offset_y, node_x(c), offset_y + grid_height))
    elif style == "crosses":
        half = cross_size / 2
        for r in range(rows + 1):
            for c in range(cols + 1):
                x, y = node_x(c), node_y(r)
                paths.append(create_line_path(x - half, y, x + half, y))
                paths.append(create_line_path(x, y - half, x, y + half))
    elif style == "dots":
        for r in range(rows + 1):
            for c in range(cols + 1):
                paths.append(create_circle_path(node_x(c), node_y(r), cross_size / 2, DOT_SEGMENTS))

    return [Layer(id="grid", paths=paths)]


GRID_MODULE = ModuleDefinition(
    id="grid",
    name="Grid",
    kind=ModuleKind.GENERATOR,
    description="A lattice of lines, crosses or dots",
    execute=grid_execute,
    parameters=[
        ParameterDefinition.number("rows", "Rows", default=10, min_value=1, max_value=500, step=1),
        ParameterDefinition.number("cols", "Columns", default=10, min_value=1, max_value=500, step=1),
        ParameterDefinition.number("gridWidth", "Width", default=150, min_value=10, max_value=800, step=5),
        ParameterDefinition.number("gridHeight", "Height", default=150, min_value=10, max_value=800, step=5),
        ParameterDefinition.select(
            "style",
            "Style",
            options=[("lines", "Lines"), ("crosses", "Crosses"), ("dots", "Dots (circles)")],
        ),
        ParameterDefinition.number("crossSize", "Cross/Dot Size", default=5, min_value=1, max_value=50, step=0.5),
        *placement_parameters(),
    ],
)


# --- Concentric Circles ---

def concentric_circles_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """Radii are spread evenly from min to max; a single circle sits halfway."""
    count = int(params.get("count", 20))
    min_radius = params.get("minRadius", 10)
    max_radius = params.get("maxRadius", 100)
    segments = max(3, int(params.get("segments", 64)))
    cx, cy = anchor(params, context.canvas)

    paths: list[Path] = []
    for i in range(count):
        t = 0.5 if count == 1 else i / (count - 1)
        radius = min_radius + t * (max_radius - min_radius)
        paths.append(create_circle_path(cx, cy, radius, segments))

    return [Layer(id="concentric", paths=paths)]


CONCENTRIC_CIRCLES_MODULE = ModuleDefinition(
    id="concentricCircles",
    name="Concentric Circles",
    kind=ModuleKind.GENERATOR,
    description="Evenly spaced rings around a shared center",
    execute=concentric_circles_execute,
    parameters=[
        ParameterDefinition.number("count", "Number of Circles", default=20, min_value=1, max_value=5000, step=1),
        ParameterDefinition.number("minRadius", "Min Radius", default=10, min_value=1, max_value=200, step=1),
        ParameterDefinition.number("maxRadius", "Max Radius", default=100, min_value=10, max_value=500, step=5),
        ParameterDefinition.number("segments", "Segments", default=64, min_value=8, max_value=360, step=8),
        *placement_parameters(),
    ],
)


# --- Spiral ---

def spiral_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """Archimedean spiral: the radius grows by ``expansion`` each turn."""
    turns = params.get("turns", 5)
    expansion = params.get("expansion", 10)
    points_per_turn = max(1, int(params.get("pointsPerTurn", 64)))
    cx, cy = anchor(params, context.canvas)

    total = math.floor(turns * points_per_turn)
    points = []
    for i in range(total + 1):
        progress = i / points_per_turn
        angle = progress * math.pi * 2
        radius = progress * expansion
        points.append(Point(cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))

    return [Layer(id="spiral", paths=[Path(points=points, closed=False)])]


SPIRAL_MODULE = ModuleDefinition(
    id="spiral",
    name="Spiral",
    kind=ModuleKind.GENERATOR,
    description="An Archimedean spiral",
    execute=spiral_execute,
    parameters=[
        ParameterDefinition.number("turns", "Turns", default=5, min_value=0.5, max_value=50, step=0.5),
        ParameterDefinition.number("expansion", "Expansion (spacing)", default=10, min_value=1, max_value=50, step=0.5),
        ParameterDefinition.number("pointsPerTurn", "Points per Turn", default=64, min_value=8, max_value=1000, step=8),
        *placement_parameters(),
    ],
)
