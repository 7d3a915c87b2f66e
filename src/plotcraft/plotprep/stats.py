"""
Plot statistics - Distances, counts and time estimate.
"""

from __future__ import annotations

import numpy as np

from plotcraft.core.data_types import Layer, Path, flatten_layers
from plotcraft.plotprep.types import PlotStats


def _points_array(path: Path) -> np.ndarray:
    return np.array([(p.x, p.y) for p in path.points], dtype=np.float64).reshape(-1, 2)


def calculate_draw_distance(paths: list[Path]) -> float:
    """Total pen-down length of all paths."""
    total = 0.0
    for path in paths:
        if len(path.points) < 2:
            continue
        segments = np.diff(_points_array(path), axis=0)
        total += float(np.hypot(segments[:, 0], segments[:, 1]).sum())
    return total


def calculate_travel_distance(paths: list[Path]) -> float:
    """Total pen-up length drawing paths in order from the origin."""
    starts = []
    ends = [(0.0, 0.0)]
    for path in paths:
        if not path.points:
            continue
        starts.append((path.start.x, path.start.y))
        ends.append((path.end.x, path.end.y))
    if not starts:
        return 0.0
    hops = np.array(starts) - np.array(ends[:-1])
    return float(np.hypot(hops[:, 0], hops[:, 1]).sum())


def count_points(paths: list[Path]) -> int:
    return sum(len(p.points) for p in paths)


def count_paths(layers: list[Layer]) -> int:
    return sum(len(layer.paths) for layer in layers)


def calculate_stats(before: list[Layer], after: list[Layer], plot_speed: float) -> PlotStats:
    """
    Compare layers before and after optimization.

    Args:
        before: Layers as produced by evaluation
        after: Optimized layers
        plot_speed: Plotter speed in mm/s, must be positive
    """
    if plot_speed <= 0:
        raise ValueError("Plot speed must be positive")

    paths_before = flatten_layers(before)
    paths_after = flatten_layers(after)

    draw = calculate_draw_distance(paths_after)
    travel = calculate_travel_distance(paths_after)

    return PlotStats(
        path_count_before=len(paths_before),
        path_count_after=len(paths_after),
        point_count_before=count_points(paths_before),
        point_count_after=count_points(paths_after),
        draw_distance=draw,
        travel_distance=travel,
        estimated_time=(draw + travel) / plot_speed,
    )
