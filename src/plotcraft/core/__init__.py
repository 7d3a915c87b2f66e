"""
Core module - Data structures, graph evaluation, and project management.

This module provides the fundamental building blocks for PlotCraft:
- Graph: Node graph data structures
- Data Types: Paths, layers and port value types
- Node Types: Node definitions and registry
- Execution: Memoized graph evaluator
- Modules / Pipeline: Generator and modifier plugins, flat module stack

Project settings and workspace persistence live in plotcraft.core.project
and plotcraft.core.workspace; they depend on plot preparation and are
imported directly.
"""

from plotcraft.core.graph import (
    Connection,
    ConnectionId,
    InputSocket,
    Node,
    NodeError,
    NodeGraph,
    NodeId,
    OutputSocket,
    Point2D,
    new_connection_id,
    new_node_id,
    param_port,
)

from plotcraft.core.data_types import (
    CanvasSettings,
    DataType,
    Layer,
    OutputLayer,
    ParameterValue,
    Path,
    Point,
    Vector,
)

from plotcraft.core.errors import (
    DataFetchError,
    PlotCraftError,
    WorkspaceError,
)

from plotcraft.core.node_types import (
    InputDefinition,
    NodeCategory,
    NodeExecutor,
    NodeRegistry,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
    ParameterType,
)

from plotcraft.core.execution import (
    ExecutionContext,
    GraphEvaluator,
    coerce_value,
)

from plotcraft.core.modules import (
    ModuleDefinition,
    ModuleInput,
    ModuleKind,
    ModuleRegistry,
    module_to_node_type,
)

from plotcraft.core.pipeline import (
    ModuleInstance,
    hash_string,
    run_pipeline,
)


__all__ = [
    # graph.py
    "Connection",
    "ConnectionId",
    "InputSocket",
    "Node",
    "NodeError",
    "NodeGraph",
    "NodeId",
    "OutputSocket",
    "Point2D",
    "new_connection_id",
    "new_node_id",
    "param_port",
    # data_types.py
    "CanvasSettings",
    "DataType",
    "Layer",
    "OutputLayer",
    "ParameterValue",
    "Path",
    "Point",
    "Vector",
    # errors.py
    "DataFetchError",
    "PlotCraftError",
    "WorkspaceError",
    # node_types.py
    "InputDefinition",
    "NodeCategory",
    "NodeExecutor",
    "NodeRegistry",
    "NodeType",
    "OutputDefinition",
    "ParameterDefinition",
    "ParameterType",
    # execution.py
    "ExecutionContext",
    "GraphEvaluator",
    "coerce_value",
    # modules.py
    "ModuleDefinition",
    "ModuleInput",
    "ModuleKind",
    "ModuleRegistry",
    "module_to_node_type",
    # pipeline.py
    "ModuleInstance",
    "hash_string",
    "run_pipeline",
]
