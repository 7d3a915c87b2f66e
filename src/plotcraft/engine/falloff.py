"""
Radial falloff shared by the point modifiers.

A falloff centers on a point given as a percentage of the canvas and
fades a modifier's effect from full strength at the center to none at
the radius. The parameter group is spliced into each modifier's schema.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from plotcraft.core.data_types import CanvasSettings, Point
from plotcraft.core.node_types import ParameterDefinition

_SHOWN = ("enableFalloff", True)

FALLOFF_PARAMETERS: list[ParameterDefinition] = [
    ParameterDefinition.boolean("enableFalloff", "Enable Falloff", default=False),
    ParameterDefinition.number(
        "falloffX", "Falloff X (%)", default=50, min_value=0, max_value=100, step=1,
        show_when=_SHOWN,
    ),
    ParameterDefinition.number(
        "falloffY", "Falloff Y (%)", default=50, min_value=0, max_value=100, step=1,
        show_when=_SHOWN,
    ),
    ParameterDefinition.number(
        "falloffRadius", "Falloff Radius (mm)", default=100, min_value=5, max_value=500,
        step=5, show_when=_SHOWN,
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
        default="linear",
        show_when=_SHOWN,
    ),
    ParameterDefinition.boolean(
        "invertFalloff", "Invert Falloff", default=False, show_when=_SHOWN,
    ),
]


@dataclass
class Falloff:
    """Falloff settings extracted from a resolved parameter record."""
    enabled: bool = False
    x: float = 50
    y: float = 50
    radius: float = 100
    curve: str = "linear"
    invert: bool = False

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> Falloff:
        return cls(
            enabled=params.get("enableFalloff") is True,
            x=params.get("falloffX", 50),
            y=params.get("falloffY", 50),
            radius=params.get("falloffRadius", 100),
            curve=params.get("falloffCurve", "linear"),
            invert=params.get("invertFalloff") is True,
        )


def apply_curve(t: float, curve: str) -> float:
    """Ease a normalized value; unknown curves are linear."""
    t = max(0.0, min(1.0, t))
    if curve == "ease-in":
        return t * t
    if curve == "ease-out":
        return 1 - (1 - t) * (1 - t)
    if curve == "ease-in-out":
        return 2 * t * t if t < 0.5 else 1 - math.pow(-2 * t + 2, 2) / 2
    return t


def calculate_falloff(point: Point, falloff: Falloff, canvas: CanvasSettings) -> float:
    """Strength in [0, 1] at a point; 1 when falloff is disabled."""
    if not falloff.enabled:
        return 1.0

    center_x = (falloff.x / 100) * canvas.width
    center_y = (falloff.y / 100) * canvas.height
    dx = point.x - center_x
    dy = point.y - center_y
    dist = math.sqrt(dx * dx + dy * dy)

    normalized = min(1.0, dist / falloff.radius) if falloff.radius else 1.0
    strength = apply_curve(1 - normalized, falloff.curve)
    if falloff.invert:
        strength = 1 - strength
    return strength


def lerp_with_falloff(original: float, modified: float, strength: float) -> float:
    return original + (modified - original) * strength
