"""
Output Nodes - Pen layers and path merging.

Each Layer Output node becomes one OutputLayer in the evaluated result;
its parameters carry the layer's name, preview colour and pen number.
"""

from __future__ import annotations

from typing import Any

from plotcraft.core.data_types import DEFAULT_LAYER_COLORS, DataType, Layer, is_layer_list
from plotcraft.core.node_types import (
    InputDefinition,
    NodeCategory,
    NodeRegistry,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
)

MERGE_INPUTS = ["paths1", "paths2", "paths3", "paths4"]
MERGED_LAYER_ID = "merged"

LAYER_NAME_OPTIONS = [
    (name, name)
    for name in ("Layer 1", "Layer 2", "Layer 3", "Layer 4", "Black", "Red", "Blue", "Green")
]

COLOR_NAMES = ["Black", "Red", "Blue", "Green", "Orange", "Purple", "Cyan", "Deep Orange"]


def output_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """Pass paths through; pen metadata is read by the evaluator."""
    paths = inputs.get("paths")
    return {"paths": paths if is_layer_list(paths) else []}


def merge_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """Concatenate every path from the connected inputs into one layer."""
    paths = []
    for name in MERGE_INPUTS:
        layers = inputs.get(name)
        if not is_layer_list(layers):
            continue
        for layer in layers:
            paths.extend(layer.paths)
    return {"paths": [Layer(id=MERGED_LAYER_ID, paths=paths)]}


OUTPUT_NODE = NodeType(
    id="output",
    name="Layer Output",
    description="Output layer - each Output node represents one pen/layer",
    category=NodeCategory.OUTPUT,
    inputs=[InputDefinition("paths", "Paths", DataType.PATHS, required=False)],
    outputs=[],
    parameters=[
        # Select parameters are not promotable
        ParameterDefinition.select(
            "layerName", "Layer Name", options=LAYER_NAME_OPTIONS, default="Layer 1"
        ),
        ParameterDefinition.select(
            "layerColor",
            "Preview Color",
            options=list(zip(DEFAULT_LAYER_COLORS, COLOR_NAMES)),
            default="#000000",
        ),
        ParameterDefinition.number("penNumber", "Pen Number", default=1, min_value=1, max_value=10, step=1),
        ParameterDefinition.boolean("enabled", "Enabled", default=True),
    ],
    executor=output_executor,
)

MERGE_NODE = NodeType(
    id="merge",
    name="Merge",
    description="Combines multiple path inputs into one",
    category=NodeCategory.MODIFIER,
    inputs=[
        InputDefinition(name, f"Paths {i}", DataType.PATHS, required=False)
        for i, name in enumerate(MERGE_INPUTS, start=1)
    ],
    outputs=[OutputDefinition("paths", "Paths", DataType.PATHS)],
    executor=merge_executor,
)


def register_output_nodes(registry: NodeRegistry) -> None:
    """Register the layer output and merge nodes."""
    registry.register(OUTPUT_NODE)
    registry.register(MERGE_NODE)
