"""
Plot preparation - Turn evaluated layers into plotter-ready paths.

The pipeline runs three independently toggled stages:
simplify (RDP), join (merge touching endpoints) and order
(nearest-neighbor travel reduction), then computes statistics.
"""

from __future__ import annotations

import logging

from plotcraft.core.data_types import Layer, OutputLayer
from plotcraft.plotprep.join import join_layers
from plotcraft.plotprep.order import order_layers
from plotcraft.plotprep.simplify import simplify_layers
from plotcraft.plotprep.stats import calculate_stats
from plotcraft.plotprep.types import (
    OptimizationResult,
    OptimizationSettings,
    OutputOptimizationResult,
    PlotStats,
)

logger = logging.getLogger(__name__)

DEFAULT_PLOT_SPEED = 50.0  # mm/s


def _run_stages(layers: list[Layer], settings: OptimizationSettings) -> list[Layer]:
    result = layers
    if settings.simplify_enabled:
        result = simplify_layers(result, settings.simplify_tolerance)
    if settings.join_enabled:
        result = join_layers(result, settings.join_tolerance)
    if settings.order_enabled:
        result = order_layers(result)
    return result


def optimize_layers(
    layers: list[Layer],
    settings: OptimizationSettings | None = None,
    plot_speed: float = DEFAULT_PLOT_SPEED,
) -> OptimizationResult:
    """Run the optimization stages over plain layers."""
    settings = settings or OptimizationSettings()
    result = _run_stages(layers, settings)
    return OptimizationResult(layers=result, stats=calculate_stats(layers, result, plot_speed))


def optimize_output_layers(
    output_layers: list[OutputLayer],
    settings: OptimizationSettings | None = None,
    plot_speed: float = DEFAULT_PLOT_SPEED,
) -> OutputOptimizationResult:
    """
    Optimize pen-tagged layers.

    Result layers are mapped back onto the source layers by index.
    Ordering merges everything into one layer, which then carries the
    first pen's metadata.
    """
    settings = settings or OptimizationSettings()
    layers = [ol.to_layer() for ol in output_layers]
    result = _run_stages(layers, settings)
    stats = calculate_stats(layers, result, plot_speed)

    optimized: list[OutputLayer] = []
    for index, layer in enumerate(result):
        original = output_layers[index] if index < len(output_layers) else None
        optimized.append(
            OutputLayer(
                id=(original.id if original else "") or layer.id,
                name=(original.name if original else "") or "Layer",
                color=(original.color if original else "") or "#000000",
                pen_number=(original.pen_number if original else 0) or index + 1,
                enabled=original.enabled if original else True,
                paths=layer.paths,
            )
        )

    logger.debug(
        "Optimized %d layer(s): %d -> %d paths",
        len(output_layers), stats.path_count_before, stats.path_count_after,
    )
    return OutputOptimizationResult(output_layers=optimized, stats=stats)


def optimize_per_pen(
    output_layers: list[OutputLayer],
    settings: OptimizationSettings | None = None,
    plot_speed: float = DEFAULT_PLOT_SPEED,
) -> OutputOptimizationResult:
    """
    Optimize each pen's layer on its own so ordering never mixes pens.

    Travel is measured per pen from the origin, matching a plotter that
    parks between pen changes.
    """
    settings = settings or OptimizationSettings()
    optimized: list[OutputLayer] = []
    totals = PlotStats()

    for output in output_layers:
        single = optimize_output_layers([output], settings, plot_speed)
        s = single.stats
        totals.path_count_before += s.path_count_before
        totals.path_count_after += s.path_count_after
        totals.point_count_before += s.point_count_before
        totals.point_count_after += s.point_count_after
        totals.draw_distance += s.draw_distance
        totals.travel_distance += s.travel_distance
        totals.estimated_time += s.estimated_time

        paths = [p for layer in single.output_layers for p in layer.paths]
        optimized.append(
            OutputLayer(
                id=output.id,
                name=output.name,
                color=output.color,
                pen_number=output.pen_number,
                enabled=output.enabled,
                paths=paths,
            )
        )

    return OutputOptimizationResult(output_layers=optimized, stats=totals)


__all__ = [
    "DEFAULT_PLOT_SPEED",
    "OptimizationResult",
    "OptimizationSettings",
    "OutputOptimizationResult",
    "PlotStats",
    "optimize_layers",
    "optimize_output_layers",
    "optimize_per_pen",
]
