"""
Export package - Serialize evaluated layers for plotting.
"""

from plotcraft.export.svg import (
    build_svg,
    build_svg_for_layer,
    build_svg_per_layer,
    fmt,
    path_to_d,
)


__all__ = [
    "build_svg",
    "build_svg_for_layer",
    "build_svg_per_layer",
    "fmt",
    "path_to_d",
]
