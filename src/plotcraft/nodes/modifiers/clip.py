"""
Clip Modifiers - Keep the parts of paths inside (or outside) a shape.

Clipping splits a path wherever it crosses the boundary, so one input
path may become several output paths.
"""

from __future__ import annotations

from typing import Any

from plotcraft.core.data_types import Layer, Point
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.geometry import clip_path_to_circle, clip_path_to_rect


def clip_rect_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """The rectangle is given in percent of the canvas."""
    canvas = context.canvas
    rx = (params.get("x", 10) / 100) * canvas.width
    ry = (params.get("y", 10) / 100) * canvas.height
    rw = (params.get("width", 80) / 100) * canvas.width
    rh = (params.get("height", 80) / 100) * canvas.height

    return [
        Layer(
            id=layer.id,
            paths=[piece for path in layer.paths for piece in clip_path_to_rect(path, rx, ry, rw, rh)],
        )
        for layer in input_layers
    ]


CLIP_RECT_MODULE = ModuleDefinition(
    id="clipRect",
    name="Clip Rectangle",
    kind=ModuleKind.MODIFIER,
    description="Keep only the parts of paths inside a rectangle",
    execute=clip_rect_execute,
    parameters=[
        ParameterDefinition.number("x", "X (%)", default=10, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("y", "Y (%)", default=10, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("width", "Width (%)", default=80, min_value=1, max_value=100, step=1),
        ParameterDefinition.number("height", "Height (%)", default=80, min_value=1, max_value=100, step=1),
    ],
)


def clip_circle_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    canvas = context.canvas
    center = Point(
        (params.get("centerX", 50) / 100) * canvas.width,
        (params.get("centerY", 50) / 100) * canvas.height,
    )
    radius = params.get("radius", 80)
    invert = params.get("invert") is True

    return [
        Layer(
            id=layer.id,
            paths=[
                piece
                for path in layer.paths
                for piece in clip_path_to_circle(path, center, radius, invert)
            ],
        )
        for layer in input_layers
    ]


CLIP_CIRCLE_MODULE = ModuleDefinition(
    id="clipCircle",
    name="Clip Circle",
    kind=ModuleKind.MODIFIER,
    description="Keep only the parts of paths inside (or outside) a circle",
    execute=clip_circle_execute,
    parameters=[
        ParameterDefinition.number("centerX", "Center X (%)", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("centerY", "Center Y (%)", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("radius", "Radius", default=80, min_value=10, max_value=500, step=5),
        ParameterDefinition.boolean("invert", "Invert (keep outside)", default=False),
    ],
)
