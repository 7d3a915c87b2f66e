"""
Transform Modifiers - Rotate and scale about a canvas point.

Both honour the shared radial falloff: each point moves toward its
transformed position in proportion to the falloff strength there.
"""

from __future__ import annotations

import math
from typing import Any, Callable

from plotcraft.core.data_types import Layer, Path, Point
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.falloff import (
    FALLOFF_PARAMETERS,
    Falloff,
    calculate_falloff,
    lerp_with_falloff,
)


def map_points(
    layers: list[Layer],
    transform: Callable[[Point], Point],
    falloff: Falloff,
    canvas: Any,
) -> list[Layer]:
    """Move every point toward ``transform(point)`` by its falloff strength."""

    def move(p: Point) -> Point:
        target = transform(p)
        strength = calculate_falloff(p, falloff, canvas)
        return Point(
            lerp_with_falloff(p.x, target.x, strength),
            lerp_with_falloff(p.y, target.y, strength),
        )

    return [
        Layer(
            id=layer.id,
            paths=[Path([move(p) for p in path.points], path.closed) for path in layer.paths],
        )
        for layer in layers
    ]


def _center(params: dict[str, Any], canvas: Any) -> tuple[float, float]:
    return (
        (params.get("centerX", 50) / 100) * canvas.width,
        (params.get("centerY", 50) / 100) * canvas.height,
    )


def _center_parameters() -> list[ParameterDefinition]:
    return [
        ParameterDefinition.number("centerX", "Center X (%)", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("centerY", "Center Y (%)", default=50, min_value=0, max_value=100, step=1),
    ]


# --- Rotate ---

def rotate_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    angle = math.radians(params.get("angle", 0))
    cx, cy = _center(params, context.canvas)
    cos, sin = math.cos(angle), math.sin(angle)

    def rotate(p: Point) -> Point:
        dx, dy = p.x - cx, p.y - cy
        return Point(cx + dx * cos - dy * sin, cy + dx * sin + dy * cos)

    return map_points(input_layers, rotate, Falloff.from_params(params), context.canvas)


ROTATE_MODULE = ModuleDefinition(
    id="rotate",
    name="Rotate",
    kind=ModuleKind.MODIFIER,
    description="Rotate paths about a point",
    execute=rotate_execute,
    parameters=[
        ParameterDefinition.number("angle", "Angle (degrees)", default=0, min_value=-360, max_value=360, step=1),
        *_center_parameters(),
        *FALLOFF_PARAMETERS,
    ],
)


# --- Scale ---

def scale_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """Uniform scaling uses ``scaleX`` on both axes."""
    scale_x = params.get("scaleX", 1)
    scale_y = scale_x if params.get("uniform") is not False else params.get("scaleY", 1)
    cx, cy = _center(params, context.canvas)

    def scale(p: Point) -> Point:
        return Point(cx + (p.x - cx) * scale_x, cy + (p.y - cy) * scale_y)

    return map_points(input_layers, scale, Falloff.from_params(params), context.canvas)


SCALE_MODULE = ModuleDefinition(
    id="scale",
    name="Scale",
    kind=ModuleKind.MODIFIER,
    description="Scale paths about a point",
    execute=scale_execute,
    parameters=[
        ParameterDefinition.number("scaleX", "Scale X", default=1, min_value=0.1, max_value=5, step=0.1),
        ParameterDefinition.number("scaleY", "Scale Y", default=1, min_value=0.1, max_value=5, step=0.1),
        ParameterDefinition.boolean("uniform", "Uniform Scale", default=True),
        *_center_parameters(),
        *FALLOFF_PARAMETERS,
    ],
)
