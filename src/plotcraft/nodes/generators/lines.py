"""
Line Generators - Rows of horizontal and vertical strokes.
"""

from __future__ import annotations

import math
from typing import Any

from plotcraft.core.data_types import Layer, Path
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.geometry import create_line_path, fbm_noise
from plotcraft.nodes.generators.placement import placement_parameters

# Seed offset for the alignment noise field
ALIGNMENT_SEED_OFFSET = 500


# --- Horizontal Lines ---

def horizontal_lines_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    line_count = int(params.get("lineCount", 20))
    spacing = params.get("spacing", 5)
    width = params.get("width", 150)
    line_mode = params.get("lineMode", "uniform")
    random_offset = params.get("randomOffset", 10)
    wave_amplitude = params.get("waveAmplitude", 20)
    wave_frequency = params.get("waveFrequency", 2)
    converge_strength = params.get("convergeStrength", 50) / 100

    canvas = context.canvas
    base_x = (params.get("centerX", 50) / 100) * canvas.width
    base_y = (params.get("startY", 10) / 100) * canvas.height

    paths: list[Path] = []
    for i in range(line_count):
        y = base_y + i * spacing
        x1 = base_x - width / 2
        x2 = base_x + width / 2

        if line_mode == "random-offset":
            offset = (context.rng() - 0.5) * 2 * random_offset
            x1 += offset
            x2 += offset
        elif line_mode == "wave":
            phase = (i / line_count) * math.pi * 2 * wave_frequency
            offset = math.sin(phase) * wave_amplitude
            x1 += offset
            x2 += offset
        elif line_mode == "converge":
            # Lines shorten toward the vertical middle of the block
            normalized = i / (line_count - 1) if line_count > 1 else 0.5
            edge_distance = abs(normalized - 0.5) * 2
            new_width = width * (1 - (1 - edge_distance) * converge_strength)
            x1 = base_x - new_width / 2
            x2 = base_x + new_width / 2

        paths.append(create_line_path(x1, y, x2, y))

    return [Layer(id="horizontalLines", paths=paths)]


HORIZONTAL_LINES_MODULE = ModuleDefinition(
    id="horizontalLines",
    name="Horizontal Lines",
    kind=ModuleKind.GENERATOR,
    description="Stacked horizontal strokes with optional offset patterns",
    execute=horizontal_lines_execute,
    parameters=[
        ParameterDefinition.number("lineCount", "Line Count", default=20, min_value=2, max_value=500, step=1),
        ParameterDefinition.number("spacing", "Spacing", default=5, min_value=1, max_value=50, step=0.5),
        ParameterDefinition.number("width", "Width", default=150, min_value=10, max_value=500, step=5),
        ParameterDefinition.number("startY", "Start Y (%)", default=10, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("centerX", "Center X (%)", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.select(
            "lineMode",
            "Line Mode",
            options=[
                ("uniform", "Uniform"),
                ("random-offset", "Random Offset"),
                ("wave", "Wave"),
                ("converge", "Converge to Center"),
            ],
        ),
        ParameterDefinition.number(
            "randomOffset", "Random Offset", default=10, min_value=0, max_value=50, step=1,
            show_when=("lineMode", "random-offset"),
        ),
        ParameterDefinition.number(
            "waveAmplitude", "Wave Amplitude", default=20, min_value=0, max_value=100, step=1,
            show_when=("lineMode", "wave"),
        ),
        ParameterDefinition.number(
            "waveFrequency", "Wave Frequency", default=2, min_value=0.5, max_value=10, step=0.5,
            show_when=("lineMode", "wave"),
        ),
        ParameterDefinition.number(
            "convergeStrength", "Converge Strength", default=50, min_value=0, max_value=100, step=5,
            show_when=("lineMode", "converge"),
        ),
    ],
)


# --- Vertical Lines ---

def height_factor(params: dict[str, Any], t: float, x: float, seed: float, rng) -> float:
    """Line height as a fraction of the min..max range, in [0, 1]."""
    mode = params.get("heightMode", "uniform")
    if mode == "random":
        return rng()
    if mode == "gradient":
        direction = params.get("gradientDirection", "left-right")
        if direction == "right-left":
            return 1 - t
        if direction == "center-out":
            return abs(t - 0.5) * 2
        if direction == "edges-in":
            return 1 - abs(t - 0.5) * 2
        return t
    if mode == "wave":
        phase = math.radians(params.get("wavePhase", 0))
        value = math.sin(t * math.pi * 2 * params.get("waveFrequency", 2) + phase)
        return (value + 1) / 2
    if mode == "noise":
        return fbm_noise(x, 0, params.get("noiseScale", 0.02), int(params.get("noiseOctaves", 2)), seed)
    return 1.0


def alignment_offset(params: dict[str, Any], t: float, x: float, seed: float, rng) -> float:
    """Vertical displacement in mm for the random, wave and noise alignments."""
    alignment = params.get("alignment", "center")
    if alignment == "random":
        # Random alignment shares the wave amplitude
        return (rng() - 0.5) * 2 * params.get("alignmentWaveAmp", 20)
    if alignment == "wave":
        return math.sin(t * math.pi * 2 * params.get("alignmentWaveFreq", 2)) * params.get("alignmentWaveAmp", 20)
    if alignment == "noise":
        value = fbm_noise(x, 100, params.get("alignmentNoiseScale", 0.02), 2, seed)
        return (value - 0.5) * 2 * params.get("alignmentNoiseAmp", 20)
    return 0.0


def height_falloff(
    x: float, y: float, center_x: float, center_y: float, radius: float, curve: str, invert: bool
) -> float:
    """Strength fading from 1 at the center to 0 at the radius."""
    n = min(1.0, math.hypot(x - center_x, y - center_y) / radius) if radius else 1.0
    if curve == "ease-in":
        strength = 1 - n * n
    elif curve == "ease-out":
        strength = (1 - n) * (1 - n)
    elif curve == "ease-in-out":
        strength = 1 - 2 * n * n if n < 0.5 else 2 * (1 - n) * (1 - n)
    else:
        strength = 1 - n
    return 1 - strength if invert else strength


def vertical_lines_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    """
    A row of vertical strokes whose heights and vertical positions vary.

    Bottom alignment grows lines upward from the base, top alignment
    grows them downward, every other alignment centers them on the
    base plus an offset.
    """
    line_count = int(params.get("lineCount", 20))
    spacing = params.get("spacing", 10)
    height_min = params.get("heightMin", 50)
    height_max = params.get("heightMax", 100)
    alignment = params.get("alignment", "center")

    canvas = context.canvas
    seed = context.seed
    total_width = (line_count - 1) * spacing
    if params.get("centered") is not False:
        start_x = (canvas.width - total_width) / 2
    else:
        start_x = (params.get("positionX", 50) / 100) * canvas.width - total_width / 2
    base_y = (params.get("alignmentBase", 50) / 100) * canvas.height

    falloff_enabled = params.get("enableHeightFalloff") is True
    falloff_cx = (params.get("falloffCenterX", 50) / 100) * canvas.width
    falloff_cy = (params.get("falloffCenterY", 50) / 100) * canvas.height

    paths: list[Path] = []
    for i in range(line_count):
        x = start_x + i * spacing
        t = i / (line_count - 1) if line_count > 1 else 0.5

        factor = height_factor(params, t, x, seed, context.rng)
        if falloff_enabled:
            factor *= height_falloff(
                x, base_y, falloff_cx, falloff_cy,
                params.get("falloffRadius", 100),
                params.get("falloffCurve", "linear"),
                params.get("invertFalloff") is True,
            )
        line_height = height_min + factor * (height_max - height_min)

        if alignment == "bottom":
            y1, y2 = base_y, base_y - line_height
        elif alignment == "top":
            y1, y2 = base_y, base_y + line_height
        else:
            offset = alignment_offset(params, t, x, seed + ALIGNMENT_SEED_OFFSET, context.rng)
            y1 = base_y - line_height / 2 + offset
            y2 = base_y + line_height / 2 + offset

        paths.append(create_line_path(x, y1, x, y2))

    return [Layer(id="verticalLines", paths=paths)]


VERTICAL_LINES_MODULE = ModuleDefinition(
    id="verticalLines",
    name="Vertical Lines",
    kind=ModuleKind.GENERATOR,
    description="A row of vertical strokes with varying heights and alignment",
    execute=vertical_lines_execute,
    parameters=[
        ParameterDefinition.number("lineCount", "Line Count", default=20, min_value=1, max_value=5000, step=1),
        ParameterDefinition.number("spacing", "Spacing", default=10, min_value=1, max_value=100, step=0.5),
        *placement_parameters(vertical=False),
        # Height
        ParameterDefinition.select(
            "heightMode",
            "Height Mode",
            options=[
                ("uniform", "Uniform"),
                ("random", "Random"),
                ("gradient", "Gradient"),
                ("wave", "Wave"),
                ("noise", "Noise"),
            ],
        ),
        ParameterDefinition.number("heightMin", "Min Height (mm)", default=50, min_value=1, max_value=500, step=1),
        ParameterDefinition.number("heightMax", "Max Height (mm)", default=100, min_value=1, max_value=500, step=1),
        ParameterDefinition.select(
            "gradientDirection",
            "Gradient Direction",
            options=[
                ("left-right", "Left → Right"),
                ("right-left", "Right → Left"),
                ("center-out", "Center → Out"),
                ("edges-in", "Edges → In"),
            ],
            show_when=("heightMode", "gradient"),
        ),
        ParameterDefinition.number(
            "waveFrequency", "Wave Frequency", default=2, min_value=0.5, max_value=10, step=0.5,
            show_when=("heightMode", "wave"),
        ),
        ParameterDefinition.number(
            "wavePhase", "Wave Phase (°)", default=0, min_value=0, max_value=360, step=15,
            show_when=("heightMode", "wave"),
        ),
        ParameterDefinition.number(
            "noiseScale", "Noise Scale", default=0.02, min_value=0.001, max_value=0.1, step=0.001,
            show_when=("heightMode", "noise"),
        ),
        ParameterDefinition.number(
            "noiseOctaves", "Noise Octaves", default=2, min_value=1, max_value=4, step=1,
            show_when=("heightMode", "noise"),
        ),
        # Vertical position
        ParameterDefinition.select(
            "alignment",
            "Vertical Alignment",
            options=[
                ("bottom", "Bottom"),
                ("top", "Top"),
                ("center", "Center"),
                ("random", "Random"),
                ("wave", "Wave"),
                ("noise", "Noise"),
            ],
            default="center",
        ),
        ParameterDefinition.number(
            "alignmentBase", "Base Y Position (%)", default=50, min_value=0, max_value=100, step=1
        ),
        ParameterDefinition.number(
            "alignmentWaveFreq", "Align Wave Frequency", default=2, min_value=0.5, max_value=10, step=0.5,
            show_when=("alignment", "wave"),
        ),
        ParameterDefinition.number(
            "alignmentWaveAmp", "Align Wave Amplitude (mm)", default=20, min_value=0, max_value=100, step=5,
            show_when=("alignment", "wave"),
        ),
        ParameterDefinition.number(
            "alignmentNoiseScale", "Align Noise Scale", default=0.02, min_value=0.001, max_value=0.1, step=0.001,
            show_when=("alignment", "noise"),
        ),
        ParameterDefinition.number(
            "alignmentNoiseAmp", "Align Noise Amplitude (mm)", default=20, min_value=0, max_value=100, step=5,
            show_when=("alignment", "noise"),
        ),
        # Height falloff
        ParameterDefinition.boolean("enableHeightFalloff", "Enable Height Falloff", default=False),
        ParameterDefinition.number(
            "falloffCenterX", "Falloff Center X (%)", default=50, min_value=0, max_value=100, step=1,
            show_when=("enableHeightFalloff", True),
        ),
        ParameterDefinition.number(
            "falloffCenterY", "Falloff Center Y (%)", default=50, min_value=0, max_value=100, step=1,
            show_when=("enableHeightFalloff", True),
        ),
        ParameterDefinition.number(
            "falloffRadius", "Falloff Radius (mm)", default=100, min_value=10, max_value=500, step=10,
            show_when=("enableHeightFalloff", True),
        ),
        ParameterDefinition.select(
            "falloffCurve",
            "Falloff Curve",
            options=[
                ("linear", "Linear"),
                ("ease-in", "Ease In"),
                ("ease-out", "Ease Out"),
                ("ease-in-out", "Ease In-Out"),
            ],
            show_when=("enableHeightFalloff", True),
        ),
        ParameterDefinition.boolean(
            "invertFalloff", "Invert Falloff", default=False, show_when=("enableHeightFalloff", True)
        ),
    ],
)
