"""
Path ordering - Greedy nearest-neighbor ordering to cut pen-up travel.
"""

from __future__ import annotations

import math

from plotcraft.core.data_types import Layer, Path, Point, flatten_layers
from plotcraft.engine.geometry import distance

ORDERED_LAYER_ID = "optimized"


def order_paths(paths: list[Path]) -> list[Path]:
    """
    Order paths starting from the origin, always drawing the nearest
    remaining path next and reversing it when its end is closer.

    Ties keep the first candidate found, checking each path's start
    before its end.
    """
    if len(paths) <= 1:
        return paths

    remaining = [p for p in paths if p.points]
    ordered: list[Path] = []
    position = Point(0.0, 0.0)

    while remaining:
        best_index = 0
        best_distance = math.inf
        should_reverse = False

        for i, path in enumerate(remaining):
            start_dist = distance(position, path.start)
            end_dist = distance(position, path.end)
            if start_dist < best_distance:
                best_distance = start_dist
                best_index = i
                should_reverse = False
            if end_dist < best_distance:
                best_distance = end_dist
                best_index = i
                should_reverse = True

        path = remaining.pop(best_index)
        if should_reverse:
            path = path.reversed()
        ordered.append(path)
        position = path.end

    return ordered


def order_layers(layers: list[Layer]) -> list[Layer]:
    """Order all paths of all layers together into one layer."""
    all_paths = flatten_layers(layers)
    if not all_paths:
        return []
    return [Layer(id=ORDERED_LAYER_ID, paths=order_paths(all_paths))]
