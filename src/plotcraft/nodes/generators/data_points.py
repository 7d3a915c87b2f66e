"""
Data Points Generator - Plot a number series.

Reads a ``numberArray`` from its ``data`` input (for example the Bitcoin
price history) and draws it as a connected line, a row of dots or bars.

Values are scaled to [0, 1] before layout: with ``normalize`` the
series minimum maps to 0 and its maximum to 1 (a flat series sits at
0.5); without it values are divided by the largest magnitude so bars
keep a zero baseline.
"""

from __future__ import annotations

import math
from typing import Any

from plotcraft.core.data_types import DataType, Layer, Path, Point, is_number
from plotcraft.core.modules import ModuleDefinition, ModuleInput, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.geometry import create_circle_path, create_line_path

LAYER_ID = "dataPoints"
DOT_SEGMENTS = 16
# Inner radius of the circular layout as a fraction of the outer radius
INNER_RADIUS_RATIO = 0.25


def normalize_values(values: list[float], normalize: bool) -> list[float]:
    if not values:
        return []
    if normalize:
        low, high = min(values), max(values)
        if high == low:
            return [0.5] * len(values)
        return [(v - low) / (high - low) for v in values]
    peak = max(abs(v) for v in values)
    if peak == 0:
        return [0.0] * len(values)
    return [v / peak for v in values]


def data_points_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    data = context.inputs.get("data") or []
    values = [v for v in data if is_number(v)] if isinstance(data, list) else []
    if not values:
        return [Layer(id=LAYER_ID)]

    scaled = normalize_values(values, params.get("normalize", True) is not False)
    canvas = context.canvas
    margin = params.get("margin", 10)
    area_w = (params.get("width", 80) / 100) * canvas.width - 2 * margin
    area_h = (params.get("height", 60) / 100) * canvas.height - 2 * margin
    left = (canvas.width - area_w) / 2
    top = (canvas.height - area_h) / 2
    bottom = top + area_h
    layout = params.get("layout", "horizontal")
    count = len(scaled)

    # (point, baseline) per value
    placed: list[tuple[Point, Point]] = []
    if layout == "circular":
        cx, cy = canvas.width / 2, canvas.height / 2
        outer = min(area_w, area_h) / 2
        inner = outer * INNER_RADIUS_RATIO
        for i, v in enumerate(scaled):
            angle = (i / count) * math.pi * 2
            radius = inner + v * (outer - inner)
            cos, sin = math.cos(angle), math.sin(angle)
            placed.append((
                Point(cx + cos * radius, cy + sin * radius),
                Point(cx + cos * inner, cy + sin * inner),
            ))
    else:
        for i, v in enumerate(scaled):
            t = i / (count - 1) if count > 1 else 0.5
            if layout == "vertical":
                y = top + t * area_h
                placed.append((Point(left + v * area_w, y), Point(left, y)))
            else:
                x = left + t * area_w
                placed.append((Point(x, bottom - v * area_h), Point(x, bottom)))

    mode = params.get("mode", "line")
    paths: list[Path] = []
    if mode == "points":
        radius = params.get("pointSize", 2) / 2
        for point, _ in placed:
            paths.append(create_circle_path(point.x, point.y, radius, DOT_SEGMENTS))
    elif mode == "bars":
        for point, base in placed:
            paths.append(create_line_path(base.x, base.y, point.x, point.y))
    elif count >= 2:
        paths.append(Path(points=[point for point, _ in placed], closed=layout == "circular"))

    return [Layer(id=LAYER_ID, paths=paths)]


DATA_POINTS_MODULE = ModuleDefinition(
    id="dataPoints",
    name="Data Points",
    kind=ModuleKind.GENERATOR,
    description="Plots a number series as a line, points or bars",
    execute=data_points_execute,
    additional_inputs=[ModuleInput("data", DataType.NUMBER_ARRAY, optional=True, label="Data")],
    parameters=[
        ParameterDefinition.select(
            "layout",
            "Layout",
            options=[("horizontal", "Horizontal"), ("vertical", "Vertical"), ("circular", "Circular")],
        ),
        ParameterDefinition.select(
            "mode",
            "Mode",
            options=[("line", "Connected Line"), ("points", "Points"), ("bars", "Bars")],
        ),
        ParameterDefinition.boolean("normalize", "Normalize", default=True),
        ParameterDefinition.number("width", "Width %", default=80, min_value=10, max_value=100, step=1),
        ParameterDefinition.number("height", "Height %", default=60, min_value=10, max_value=100, step=1),
        ParameterDefinition.number("pointSize", "Point Size", default=2, min_value=0.5, max_value=10, step=0.5),
        ParameterDefinition.number("margin", "Margin", default=10, min_value=0, max_value=50, step=1),
    ],
)
