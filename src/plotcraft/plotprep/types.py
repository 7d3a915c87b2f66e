"""
Plot preparation types - Settings and results of the optimization pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from plotcraft.core.data_types import Layer, OutputLayer


@dataclass
class OptimizationSettings:
    """
    Toggles and tolerances for the optimization stages.

    Attributes:
        simplify_enabled: Run RDP simplification
        simplify_tolerance: RDP epsilon in mm
        join_enabled: Merge paths whose endpoints touch
        join_tolerance: Endpoint distance treated as touching, in mm
        order_enabled: Reorder paths to minimize pen-up travel
        flatten_tolerance: Curve flattening tolerance in mm
    """
    simplify_enabled: bool = True
    simplify_tolerance: float = 0.1
    join_enabled: bool = True
    join_tolerance: float = 0.5
    order_enabled: bool = True
    flatten_tolerance: float = 0.2

    def __post_init__(self) -> None:
        for name in ("simplify_tolerance", "join_tolerance", "flatten_tolerance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "simplify_enabled": self.simplify_enabled,
            "simplify_tolerance": self.simplify_tolerance,
            "join_enabled": self.join_enabled,
            "join_tolerance": self.join_tolerance,
            "order_enabled": self.order_enabled,
            "flatten_tolerance": self.flatten_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OptimizationSettings:
        return cls(
            simplify_enabled=data.get("simplify_enabled", True),
            simplify_tolerance=data.get("simplify_tolerance", 0.1),
            join_enabled=data.get("join_enabled", True),
            join_tolerance=data.get("join_tolerance", 0.5),
            order_enabled=data.get("order_enabled", True),
            flatten_tolerance=data.get("flatten_tolerance", 0.2),
        )


@dataclass
class PlotStats:
    """Before/after counts and the plot time estimate."""
    path_count_before: int = 0
    path_count_after: int = 0
    point_count_before: int = 0
    point_count_after: int = 0
    draw_distance: float = 0.0      # mm
    travel_distance: float = 0.0    # mm
    estimated_time: float = 0.0     # seconds


@dataclass
class OptimizationResult:
    layers: list[Layer] = field(default_factory=list)
    stats: PlotStats = field(default_factory=PlotStats)


@dataclass
class OutputOptimizationResult:
    output_layers: list[OutputLayer] = field(default_factory=list)
    stats: PlotStats = field(default_factory=PlotStats)
