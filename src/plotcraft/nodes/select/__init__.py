"""
Select Nodes package.

Nodes that split paths into selected and unselected streams.
"""

from plotcraft.nodes.select.selection import (
    INDEX_SELECT_NODE,
    NOISE_SELECT_NODE,
    RANDOM_SELECT_NODE,
    REGION_SELECT_NODE,
    path_matches,
    register_select_nodes,
    split_layers,
)

__all__ = [
    "INDEX_SELECT_NODE",
    "NOISE_SELECT_NODE",
    "RANDOM_SELECT_NODE",
    "REGION_SELECT_NODE",
    "path_matches",
    "register_select_nodes",
    "split_layers",
]
