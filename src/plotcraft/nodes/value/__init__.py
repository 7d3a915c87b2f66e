"""
Value Nodes package.

Numbers, vectors and booleans for driving promoted parameters.
"""

from plotcraft.nodes.value.values import (
    BOOLEAN_NODE,
    MAP_RANGE_NODE,
    MATH_NODE,
    NUMBER_NODE,
    RANDOM_NODE,
    VECTOR_NODE,
    apply_math,
    map_range,
    register_value_nodes,
)

__all__ = [
    "BOOLEAN_NODE",
    "MAP_RANGE_NODE",
    "MATH_NODE",
    "NUMBER_NODE",
    "RANDOM_NODE",
    "VECTOR_NODE",
    "apply_math",
    "map_range",
    "register_value_nodes",
]
