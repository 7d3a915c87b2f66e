"""
Displacement Modifiers - Random jitter and noise-field displacement.

Both work in one of two transform modes:
- deform: every point moves independently
- translate: each path moves rigidly by the offset at its centroid
"""

from __future__ import annotations

from typing import Any

from plotcraft.core.data_types import Layer, Path, Point
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.falloff import (
    FALLOFF_PARAMETERS,
    Falloff,
    calculate_falloff,
    lerp_with_falloff,
)
from plotcraft.engine.geometry import noise2d, path_centroid

# Sample offset between the x and y noise channels
NOISE_CHANNEL_OFFSET = 100

TRANSFORM_MODE = ParameterDefinition.select(
    "transformMode",
    "Transform Mode",
    options=[("deform", "Deform"), ("translate", "Translate")],
    default="deform",
)


def _shift(path: Path, dx: float, dy: float, strength: float) -> Path:
    return Path([Point(p.x + dx * strength, p.y + dy * strength) for p in path.points], path.closed)


def _toward(p: Point, target: Point, strength: float) -> Point:
    return Point(lerp_with_falloff(p.x, target.x, strength), lerp_with_falloff(p.y, target.y, strength))


# --- Jitter ---

def jitter_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """Offsets are uniform in [-amount, amount) on each axis."""
    amount_x = params.get("amountX", 5)
    amount_y = params.get("amountY", 5)
    translate = params.get("transformMode", "deform") == "translate"
    falloff = Falloff.from_params(params)
    rng = context.rng
    canvas = context.canvas

    result: list[Layer] = []
    for layer in input_layers:
        paths: list[Path] = []
        for path in layer.paths:
            if translate:
                centroid = path_centroid(path)
                dx = (rng() - 0.5) * 2 * amount_x
                dy = (rng() - 0.5) * 2 * amount_y
                paths.append(_shift(path, dx, dy, calculate_falloff(centroid, falloff, canvas)))
                continue
            points = []
            for p in path.points:
                target = Point(
                    p.x + (rng() - 0.5) * 2 * amount_x,
                    p.y + (rng() - 0.5) * 2 * amount_y,
                )
                points.append(_toward(p, target, calculate_falloff(p, falloff, canvas)))
            paths.append(Path(points, path.closed))
        result.append(Layer(id=layer.id, paths=paths))
    return result


JITTER_MODULE = ModuleDefinition(
    id="jitter",
    name="Jitter",
    kind=ModuleKind.MODIFIER,
    description="Randomly offset points or whole paths",
    execute=jitter_execute,
    parameters=[
        ParameterDefinition.number("amountX", "Amount X", default=5, min_value=0, max_value=50, step=0.5),
        ParameterDefinition.number("amountY", "Amount Y", default=5, min_value=0, max_value=50, step=0.5),
        TRANSFORM_MODE,
        *FALLOFF_PARAMETERS,
    ],
)


# --- Noise Displace ---

def displace_point(p: Point, amount: float, scale: float, octaves: int, seed: float) -> Point:
    """Offset a point by fractal noise, up to ``amount`` mm per axis."""
    nx = 0.0
    ny = 0.0
    amplitude = 1.0
    frequency = scale
    for _ in range(octaves):
        nx += (noise2d(p.x * frequency, p.y * frequency, seed) - 0.5) * 2 * amplitude
        ny += (
            noise2d(
                p.x * frequency + NOISE_CHANNEL_OFFSET,
                p.y * frequency + NOISE_CHANNEL_OFFSET,
                seed,
            )
            - 0.5
        ) * 2 * amplitude
        amplitude *= 0.5
        frequency *= 2
    return Point(p.x + nx * amount, p.y + ny * amount)


def noise_displace_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    amount = params.get("amount", 10)
    scale = params.get("scale", 0.02)
    octaves = int(params.get("octaves", 1))
    translate = params.get("transformMode", "deform") == "translate"
    falloff = Falloff.from_params(params)
    seed = context.seed
    canvas = context.canvas

    result: list[Layer] = []
    for layer in input_layers:
        paths: list[Path] = []
        for path in layer.paths:
            if translate:
                centroid = path_centroid(path)
                moved = displace_point(centroid, amount, scale, octaves, seed)
                strength = calculate_falloff(centroid, falloff, canvas)
                paths.append(_shift(path, moved.x - centroid.x, moved.y - centroid.y, strength))
                continue
            paths.append(Path(
                [
                    _toward(p, displace_point(p, amount, scale, octaves, seed), calculate_falloff(p, falloff, canvas))
                    for p in path.points
                ],
                path.closed,
            ))
        result.append(Layer(id=layer.id, paths=paths))
    return result


NOISE_DISPLACE_MODULE = ModuleDefinition(
    id="noiseDisplace",
    name="Noise Displace",
    kind=ModuleKind.MODIFIER,
    description="Displace points through a smooth noise field",
    execute=noise_displace_execute,
    parameters=[
        ParameterDefinition.number("amount", "Amount", default=10, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("scale", "Noise Scale", default=0.02, min_value=0.001, max_value=0.2, step=0.001),
        ParameterDefinition.number("octaves", "Octaves", default=1, min_value=1, max_value=4, step=1),
        TRANSFORM_MODE,
        *FALLOFF_PARAMETERS,
    ],
)
