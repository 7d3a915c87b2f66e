"""
Output Nodes package.

Pen layer outputs and the merge node.
"""

from plotcraft.nodes.output.layer_output import (
    MERGE_NODE,
    OUTPUT_NODE,
    merge_executor,
    output_executor,
    register_output_nodes,
)

__all__ = [
    "MERGE_NODE",
    "OUTPUT_NODE",
    "merge_executor",
    "output_executor",
    "register_output_nodes",
]
