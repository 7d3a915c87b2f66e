"""Shared placement parameters for generators that sit on the canvas."""

from __future__ import annotations

from typing import Any

from plotcraft.core.data_types import CanvasSettings
from plotcraft.core.node_types import ParameterDefinition

_OFF_CENTER = ("centered", False)


def placement_parameters(vertical: bool = True) -> list[ParameterDefinition]:
    """``centered`` plus percentage position parameters shown when it is off."""
    params = [
        ParameterDefinition.boolean("centered", "Center on Canvas", default=True),
        ParameterDefinition.number(
            "positionX", "Position X (%)", default=50, min_value=0, max_value=100, step=1,
            show_when=_OFF_CENTER,
        ),
    ]
    if vertical:
        params.append(
            ParameterDefinition.number(
                "positionY", "Position Y (%)", default=50, min_value=0, max_value=100, step=1,
                show_when=_OFF_CENTER,
            )
        )
    return params


def anchor(params: dict[str, Any], canvas: CanvasSettings) -> tuple[float, float]:
    """Canvas center, or the percentage position when not centered."""
    if params.get("centered") is not False:
        return canvas.width / 2, canvas.height / 2
    return (
        (params.get("positionX", 50) / 100) * canvas.width,
        (params.get("positionY", 50) / 100) * canvas.height,
    )
