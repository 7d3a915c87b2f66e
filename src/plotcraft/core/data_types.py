"""
Data Types - Core data structures for plotter geometry and node values.

This module defines the data types that flow through the node graph:
- DataType: Enum of all supported connection types
- Point / Vector: 2D coordinates and vector values
- Path / Layer / OutputLayer: Polyline geometry grouped for pens
- CanvasSettings: Document size in millimeters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class DataType(Enum):
    """
    Enumeration of data types that can flow through node connections.

    Each input/output socket has a DataType that determines what
    kinds of connections are valid.
    """
    PATHS = "paths"                 # list[Layer]
    NUMBER = "number"               # float
    VECTOR = "vector"               # Vector
    BOOLEAN = "boolean"             # True/False
    NUMBER_ARRAY = "numberArray"    # list[float]


# Type alias for parameter values
ParameterValue: TypeAlias = str | int | float | bool | list | dict | None


@dataclass(frozen=True)
class Point:
    """A 2D coordinate in millimeters (document space)."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Vector:
    """A 2D vector value carried on vector ports."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Path:
    """
    An ordered polyline.

    A path with fewer than two points is degenerate and is dropped
    before optimization.

    Attributes:
        points: Ordered points, owned exclusively by this path
        closed: Whether the last point connects back to the first
    """
    points: list[Point] = field(default_factory=list)
    closed: bool = False

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def reversed(self) -> Path:
        """Return a copy with the point order reversed."""
        return Path(points=self.points[::-1], closed=self.closed)

    def copy(self) -> Path:
        return Path(points=list(self.points), closed=self.closed)

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class Layer:
    """A collection of paths produced by one node or module execution."""
    id: str
    paths: list[Path] = field(default_factory=list)


@dataclass
class OutputLayer:
    """
    A layer tagged with plotter pen metadata.

    One OutputLayer is produced per enabled Output node. Pen numbers
    impose the final draw order.
    """
    id: str
    name: str = "Layer 1"
    color: str = "#000000"
    pen_number: float = 1
    enabled: bool = True
    paths: list[Path] = field(default_factory=list)

    def to_layer(self) -> Layer:
        return Layer(id=self.id, paths=self.paths)


@dataclass(frozen=True)
class CanvasSettings:
    """Document size in millimeters."""
    width: float = 210.0
    height: float = 297.0
    units: str = "mm"

    def __post_init__(self) -> None:
        if not self.width > 0 or not self.height > 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def preset(cls, name: str) -> CanvasSettings:
        """Get a named canvas preset (A4, A3, Letter, ...)."""
        try:
            return CANVAS_PRESETS[name]
        except KeyError:
            raise ValueError(f"Unknown canvas preset: {name}") from None

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "height": self.height, "units": self.units}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CanvasSettings:
        return cls(
            width=float(data.get("width", 210.0)),
            height=float(data.get("height", 297.0)),
        )


CANVAS_PRESETS: dict[str, CanvasSettings] = {
    "A4": CanvasSettings(210, 297),
    "A3": CanvasSettings(297, 420),
    "Letter": CanvasSettings(216, 279),
    "24x36": CanvasSettings(610, 914),
    "12x12": CanvasSettings(305, 305),
    "8x10": CanvasSettings(203, 254),
}

DEFAULT_LAYER_COLORS = [
    "#000000",  # Black
    "#E53935",  # Red
    "#1E88E5",  # Blue
    "#43A047",  # Green
    "#FB8C00",  # Orange
    "#8E24AA",  # Purple
    "#00ACC1",  # Cyan
    "#F4511E",  # Deep Orange
]


def is_number(value: Any) -> bool:
    """True for int/float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_layer_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, Layer) for v in value)


def infer_data_type(value: Any) -> DataType | None:
    """
    Infer the DataType of a runtime value.

    Returns None for values that do not match any connection type.
    """
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if is_number(value):
        return DataType.NUMBER
    if isinstance(value, Vector):
        return DataType.VECTOR
    if isinstance(value, list):
        if all(isinstance(v, Layer) for v in value):
            return DataType.PATHS
        if all(is_number(v) for v in value):
            return DataType.NUMBER_ARRAY
    return None


def flatten_layers(layers: list[Layer]) -> list[Path]:
    """Collect all paths from a list of layers into a single list."""
    paths: list[Path] = []
    for layer in layers:
        paths.extend(layer.paths)
    return paths
