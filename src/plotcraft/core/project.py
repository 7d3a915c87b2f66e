"""
Project Model - Project structure and settings.

This module defines the project data structure that contains
all the information needed to save/load a complete project:
the node graph plus canvas, seed and plot preparation settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from plotcraft.core.data_types import CanvasSettings, DataType
from plotcraft.core.graph import Node, NodeGraph, Point2D
from plotcraft.engine.rng import random_seed
from plotcraft.plotprep.types import OptimizationSettings


@dataclass
class ProjectSettings:
    """
    Project-level settings.

    These settings affect the entire project and are saved with it.
    """
    canvas: CanvasSettings = field(default_factory=CanvasSettings)
    seed: int = 0
    plot_speed: float = 50.0  # mm/s, for time estimates
    optimization: OptimizationSettings = field(default_factory=OptimizationSettings)

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            "canvas": self.canvas.to_dict(),
            "seed": self.seed,
            "plot_speed": self.plot_speed,
            "optimization": self.optimization.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectSettings:
        """Create settings from dictionary."""
        return cls(
            canvas=CanvasSettings.from_dict(data.get("canvas", {})),
            seed=int(data.get("seed", 0)),
            plot_speed=data.get("plot_speed", 50.0),
            optimization=OptimizationSettings.from_dict(data.get("optimization", {})),
        )


def create_starter_graph(name: str = "Untitled") -> NodeGraph:
    """A grid wired into a single output, the default for new projects."""
    graph = NodeGraph(name=name)
    grid = Node.create("grid", Point2D(100, 150), {"rows": 10, "cols": 10})
    output = Node.create(
        "output",
        Point2D(400, 180),
        {"layerName": "Layer 1", "layerColor": "#000000", "penNumber": 1, "enabled": True},
    )
    graph.add_node(grid)
    graph.add_node(output)
    graph.connect(grid.id, "paths", output.id, "paths", DataType.PATHS)
    return graph


@dataclass
class Project:
    """
    A complete project containing the node graph and settings.

    Projects can be saved to and loaded from disk.
    """
    id: str
    name: str
    graph: NodeGraph
    settings: ProjectSettings = field(default_factory=ProjectSettings)

    # File location (None for unsaved projects)
    path: Path | None = None

    # Timestamps
    created_at: datetime = field(default_factory=datetime.now)
    modified_at: datetime = field(default_factory=datetime.now)

    # State
    is_modified: bool = False

    @classmethod
    def create(cls, name: str = "Untitled", starter: bool = True) -> Project:
        """Create a new project with a fresh seed."""
        graph = create_starter_graph(name) if starter else NodeGraph(name=name)
        return cls(
            id=str(uuid4()),
            name=name,
            graph=graph,
            settings=ProjectSettings(seed=random_seed()),
        )

    def mark_modified(self) -> None:
        """Mark the project as having unsaved changes."""
        self.is_modified = True
        self.modified_at = datetime.now()

    def mark_saved(self, path: Path | None = None) -> None:
        """Mark the project as saved."""
        self.is_modified = False
        if path:
            self.path = path

    @property
    def display_name(self) -> str:
        """Get the display name with modified indicator."""
        modified = "* " if self.is_modified else ""
        return f"{modified}{self.name}"
