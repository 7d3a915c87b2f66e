"""
Generator modules package.

Generators create geometry from their parameters alone (plus optional
extra inputs such as a data series).
"""

from plotcraft.nodes.generators.data_points import DATA_POINTS_MODULE
from plotcraft.nodes.generators.import_svg import IMPORT_SVG_MODULE
from plotcraft.nodes.generators.lines import HORIZONTAL_LINES_MODULE, VERTICAL_LINES_MODULE
from plotcraft.nodes.generators.patterns import (
    CONCENTRIC_CIRCLES_MODULE,
    GRID_MODULE,
    SPIRAL_MODULE,
)

GENERATOR_MODULES = [
    GRID_MODULE,
    CONCENTRIC_CIRCLES_MODULE,
    HORIZONTAL_LINES_MODULE,
    VERTICAL_LINES_MODULE,
    SPIRAL_MODULE,
    IMPORT_SVG_MODULE,
    DATA_POINTS_MODULE,
]

__all__ = [
    "CONCENTRIC_CIRCLES_MODULE",
    "DATA_POINTS_MODULE",
    "GENERATOR_MODULES",
    "GRID_MODULE",
    "HORIZONTAL_LINES_MODULE",
    "IMPORT_SVG_MODULE",
    "SPIRAL_MODULE",
    "VERTICAL_LINES_MODULE",
]
