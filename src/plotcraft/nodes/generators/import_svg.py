"""
SVG Import Generator - Bring an existing drawing onto the canvas.

The ``svgFile`` parameter holds the document text. Imported geometry is
already in millimetres; it is scaled by ``scale`` percent about the
origin and optionally centered on the canvas.
"""

from __future__ import annotations

from typing import Any

from plotcraft.core.data_types import Layer
from plotcraft.core.modules import ModuleDefinition, ModuleKind
from plotcraft.core.node_types import ParameterDefinition
from plotcraft.engine.geometry import paths_bounds, scale_path, translate_path
from plotcraft.engine.svg_parser import SvgParseOptions, parse_svg

LAYER_ID = "importSvg"


def import_svg_execute(params: dict[str, Any], input_layers: list[Layer], context: Any) -> list[Layer]:
    content = params.get("svgFile") or ""
    if not content:
        return [Layer(id=LAYER_ID)]

    result = parse_svg(
        content,
        SvgParseOptions(
            convert_shapes=params.get("convertShapes", True) is not False,
            ignore_fills=params.get("ignoreFills", True) is not False,
            flatten_transforms=params.get("flattenTransforms", True) is not False,
        ),
    )
    paths = result.paths
    if not paths:
        return [Layer(id=LAYER_ID)]

    scale = params.get("scale", 100) / 100
    if scale != 1:
        paths = [scale_path(path, scale, scale) for path in paths]

    if params.get("center", True) is not False:
        bounds = paths_bounds(paths)
        if bounds is not None:
            min_x, min_y, max_x, max_y = bounds
            dx = context.canvas.width / 2 - (min_x + max_x) / 2
            dy = context.canvas.height / 2 - (min_y + max_y) / 2
            paths = [translate_path(path, dx, dy) for path in paths]

    return [Layer(id=LAYER_ID, paths=paths)]


IMPORT_SVG_MODULE = ModuleDefinition(
    id="importSvg",
    name="Import SVG",
    kind=ModuleKind.GENERATOR,
    description="Paths imported from an SVG document",
    execute=import_svg_execute,
    parameters=[
        ParameterDefinition.file("svgFile", "SVG File", file_filter=".svg"),
        ParameterDefinition.number("scale", "Scale (%)", default=100, min_value=1, max_value=500, step=1),
        ParameterDefinition.boolean("center", "Center on Canvas", default=True),
        ParameterDefinition.boolean("flattenTransforms", "Flatten Transforms", default=True),
        ParameterDefinition.boolean("convertShapes", "Convert Shapes", default=True),
        ParameterDefinition.boolean("ignoreFills", "Ignore Fills", default=True),
    ],
)
