"""
Nodes package - All node implementations.

This package contains node implementations organized by category:
- value: Number, Random, Math, Vector, Boolean, Map Range
- data: Live Bitcoin, weather and earthquake data
- select: Random, index, region and noise selection
- generators: Grid, circles, lines, spiral, SVG import, data points
- modifiers: Rotate, scale, jitter, noise, clipping, subdivision
- output: Layer output and merge
"""

from __future__ import annotations

from plotcraft.core.modules import ModuleRegistry, module_to_node_type
from plotcraft.core.node_types import NodeRegistry
from plotcraft.nodes.data import DataSources, register_data_nodes
from plotcraft.nodes.generators import GENERATOR_MODULES
from plotcraft.nodes.modifiers import MODIFIER_MODULES
from plotcraft.nodes.output import register_output_nodes
from plotcraft.nodes.select import register_select_nodes
from plotcraft.nodes.value import register_value_nodes


def create_module_registry() -> ModuleRegistry:
    """Registry of every built-in generator and modifier module."""
    modules = ModuleRegistry()
    for module in GENERATOR_MODULES + MODIFIER_MODULES:
        modules.register(module)
    return modules


def register_module_nodes(registry: NodeRegistry, modules: ModuleRegistry) -> None:
    """Expose every module as a graph node type."""
    for module in modules.get_all():
        registry.register(module_to_node_type(module))


def register_all_nodes(
    registry: NodeRegistry,
    data_sources: DataSources | None = None,
    modules: ModuleRegistry | None = None,
) -> DataSources:
    """
    Register all built-in nodes.

    Returns:
        The data source caches used by the data nodes
    """
    register_value_nodes(registry)
    sources = register_data_nodes(registry, data_sources)
    register_select_nodes(registry)
    register_module_nodes(registry, modules or create_module_registry())
    register_output_nodes(registry)
    return sources


def create_node_registry(data_sources: DataSources | None = None) -> NodeRegistry:
    """A fresh registry holding every built-in node type."""
    registry = NodeRegistry()
    register_all_nodes(registry, data_sources)
    return registry


__all__ = [
    "create_module_registry",
    "create_node_registry",
    "register_all_nodes",
    "register_module_nodes",
]
