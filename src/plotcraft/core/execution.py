"""
Execution Engine - Memoized pull-based graph evaluation.

This module evaluates node graphs recursively from their Output nodes:
- Each node runs at most once per execution generation
- Cycles are broken by tracking the nodes on the active call path
- Promoted parameters are driven by connections with type coercion
- Failing or unknown nodes produce no output instead of aborting
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from plotcraft.core.data_types import (
    CanvasSettings,
    DataType,
    OutputLayer,
    Vector,
    flatten_layers,
    infer_data_type,
    is_number,
)
from plotcraft.core.graph import Node, NodeError, NodeGraph, NodeId, param_port
from plotcraft.core.node_types import NodeRegistry, NodeType
from plotcraft.engine.rng import Mulberry32, create_rng

logger = logging.getLogger(__name__)

OUTPUT_NODE_TYPE = "output"


@dataclass
class ExecutionContext:
    """
    Context passed to node executors during evaluation.

    Attributes:
        canvas: Document size in mm
        seed: Global seed of this evaluation
        rng: Random stream shared by all nodes of one evaluation pass
        node_id: Node currently executing
        inputs: Additional named path inputs for plugin modules
    """
    canvas: CanvasSettings
    seed: int
    rng: Mulberry32
    node_id: NodeId | None = None
    inputs: dict[str, Any] = field(default_factory=dict)


def coerce_value(value: Any, data_type: DataType) -> Any | None:
    """
    Coerce a connected value to a promoted parameter's type.

    Returns None when no coercion applies; the parameter then keeps
    its literal value.
    """
    if value is None:
        return None
    if data_type == DataType.NUMBER:
        # bool is an int subclass, so check it first
        if isinstance(value, bool):
            return 1 if value else 0
        if is_number(value):
            return value
        if isinstance(value, Vector):
            return value.x
        return None
    if data_type == DataType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if is_number(value):
            return value != 0
        return None
    if data_type == DataType.VECTOR:
        return value if isinstance(value, Vector) else None
    if data_type in (DataType.PATHS, DataType.NUMBER_ARRAY):
        return value if infer_data_type(value) == data_type else None
    return None


def select_output(result: dict[str, Any], output_name: str) -> Any | None:
    """Pick a named output, falling back to the only output if there is one."""
    if output_name in result:
        return result[output_name]
    if len(result) == 1:
        return next(iter(result.values()))
    return None


class GraphEvaluator:
    """
    Evaluates node graphs into pen layers.

    Results are memoized per node for one (graph, generation, seed,
    canvas) combination. Any change to these discards the cache.
    """

    def __init__(self, registry: NodeRegistry):
        self.registry = registry
        self._cache: dict[NodeId, dict[str, Any]] = {}
        self._cache_key: tuple | None = None
        self.errors: dict[NodeId, NodeError] = {}

    def clear_cache(self) -> None:
        self._cache.clear()
        self._cache_key = None
        self.errors.clear()

    def _prepare(self, graph: NodeGraph, canvas: CanvasSettings, seed: int) -> None:
        key = (graph.id, graph.generation, seed, canvas)
        if key != self._cache_key:
            self._cache.clear()
            self.errors.clear()
            self._cache_key = key

    # --- Public API ---

    def evaluate(
        self, graph: NodeGraph, canvas: CanvasSettings, seed: int
    ) -> list[OutputLayer]:
        """
        Evaluate every enabled Output node.

        Returns:
            One OutputLayer per enabled Output node, sorted by pen number
        """
        self._prepare(graph, canvas, seed)
        context = ExecutionContext(canvas=canvas, seed=seed, rng=create_rng(seed))
        output_type = self.registry.get(OUTPUT_NODE_TYPE)

        layers: list[OutputLayer] = []
        for node in graph.nodes.values():
            if node.type_id != OUTPUT_NODE_TYPE:
                continue

            if output_type is not None:
                params = self._resolve_parameters(graph, node, output_type, context, frozenset())
            else:
                params = dict(node.parameters)
            if params.get("enabled") is False:
                continue

            result = self._execute(graph, node, context, frozenset())
            layers.append(
                OutputLayer(
                    id=node.id,
                    name=params.get("layerName") or "Layer 1",
                    color=params.get("layerColor") or "#000000",
                    pen_number=params.get("penNumber") or 1,
                    enabled=True,
                    paths=flatten_layers(result.get("paths") or []),
                )
            )

        layers.sort(key=lambda layer: layer.pen_number)
        logger.debug(
            f"Evaluated {len(layers)} output layer(s) at generation {graph.generation}"
        )
        return layers

    def evaluate_node_output(
        self,
        graph: NodeGraph,
        node_id: NodeId,
        output_name: str,
        canvas: CanvasSettings,
        seed: int,
    ) -> Any | None:
        """Evaluate one node and return a single named output."""
        node = graph.get_node(node_id)
        if node is None:
            return None
        self._prepare(graph, canvas, seed)
        context = ExecutionContext(canvas=canvas, seed=seed, rng=create_rng(seed))
        result = self._execute(graph, node, context, frozenset())
        return select_output(result, output_name)

    # --- Internals ---

    def _record_error(self, node: Node, message: str, details: str | None = None) -> None:
        self.errors[node.id] = NodeError(message=message, details=details)

    def _pull(
        self,
        graph: NodeGraph,
        node: Node,
        port: str,
        context: ExecutionContext,
        visiting: frozenset[NodeId],
    ) -> Any | None:
        """Evaluate the source feeding a port and extract its value."""
        conn = graph.get_input_connection(node.id, port)
        if conn is None:
            return None
        source = graph.get_node(conn.source.node_id)
        if source is None:
            return None
        result = self._execute(graph, source, context, visiting)
        return select_output(result, conn.source.output_name)

    def _resolve_parameters(
        self,
        graph: NodeGraph,
        node: Node,
        node_type: NodeType,
        context: ExecutionContext,
        visiting: frozenset[NodeId],
    ) -> dict[str, Any]:
        """Merge defaults, stored values and connected promoted parameters."""
        params = node_type.resolve_parameters(node.parameters)
        for param in node_type.parameters:
            if param.data_type is None:
                continue
            value = self._pull(graph, node, param_port(param.name), context, visiting)
            coerced = coerce_value(value, param.data_type)
            if coerced is not None:
                params[param.name] = coerced
        return params

    def _execute(
        self,
        graph: NodeGraph,
        node: Node,
        context: ExecutionContext,
        visiting: frozenset[NodeId],
    ) -> dict[str, Any]:
        if node.id in self._cache:
            return self._cache[node.id]

        if node.id in visiting:
            logger.warning(f"Cycle detected at node {node.id}")
            self._record_error(node, "Cycle detected")
            return {}
        visiting = visiting | {node.id}

        node_type = self.registry.get(node.type_id)
        if node_type is None:
            logger.warning(f"Unknown node type: {node.type_id}")
            self._record_error(node, f"Unknown node type: {node.type_id}")
            return {}

        inputs: dict[str, Any] = {}
        for input_def in node_type.inputs:
            value = self._pull(graph, node, input_def.name, context, visiting)
            if value is not None:
                inputs[input_def.name] = value
            elif input_def.default_value is not None:
                inputs[input_def.name] = input_def.default_value

        params = self._resolve_parameters(graph, node, node_type, context, visiting)

        result: dict[str, Any] = {}
        if node_type.executor is not None:
            node_context = replace(context, node_id=node.id, inputs={})
            try:
                result = node_type.executor(inputs, params, node_context) or {}
            except Exception as e:
                logger.exception(f"Error executing node {node.id} ({node.type_id})")
                self._record_error(node, str(e), details=type(e).__name__)
                result = {}

        self._cache[node.id] = result
        return result
