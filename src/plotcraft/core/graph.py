"""
Node Graph Model - Core data structures for the node-based workflow.

This module defines the fundamental building blocks:
- Node: A single processing unit with parameters and promoted parameter ports
- Connection: A typed link between a node output and a node input
- NodeGraph: The complete graph with its execution generation counter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, NewType
from uuid import uuid4

from plotcraft.core.data_types import DataType


# Type aliases for clarity
NodeId = NewType("NodeId", str)
ConnectionId = NewType("ConnectionId", str)

# Input port name prefix for promoted parameters
PARAM_PORT_PREFIX = "param:"


def new_node_id() -> NodeId:
    """Generate a new unique node ID."""
    return NodeId(str(uuid4()))


def new_connection_id() -> ConnectionId:
    """Generate a new unique connection ID."""
    return ConnectionId(str(uuid4()))


def param_port(name: str) -> str:
    """Input port name for a promoted parameter."""
    return f"{PARAM_PORT_PREFIX}{name}"


@dataclass
class Point2D:
    """2D point for node positioning on the editor canvas."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class OutputSocket:
    """Reference to an output socket on a node."""
    node_id: NodeId
    output_name: str


@dataclass
class InputSocket:
    """Reference to an input socket on a node."""
    node_id: NodeId
    input_name: str


@dataclass
class Connection:
    """
    A connection (wire) between two nodes.

    Connects an output socket of one node to an input socket of another.
    Promoted parameters are targeted as ``param:<name>`` inputs.
    """
    id: ConnectionId
    source: OutputSocket
    target: InputSocket
    data_type: DataType = DataType.PATHS

    @classmethod
    def create(
        cls,
        source_node: NodeId,
        source_output: str,
        target_node: NodeId,
        target_input: str,
        data_type: DataType = DataType.PATHS,
    ) -> Connection:
        """Factory method to create a new connection."""
        return cls(
            id=new_connection_id(),
            source=OutputSocket(source_node, source_output),
            target=InputSocket(target_node, target_input),
            data_type=data_type,
        )

    def same_sockets(self, other: Connection) -> bool:
        return self.source == other.source and self.target == other.target


@dataclass
class NodeError:
    """Error information from a failed node execution."""
    message: str
    details: str | None = None


@dataclass
class Node:
    """
    A single node in the processing graph.

    Nodes have:
    - A unique ID
    - A type (references a NodeType in the registry)
    - Position on the editor canvas (ignored by evaluation)
    - Stored parameter overrides
    - Names of parameters promoted to input ports
    """
    id: NodeId
    type_id: str  # References NodeType.id in the registry
    position: Point2D = field(default_factory=Point2D)

    # User-configured parameters
    parameters: dict[str, Any] = field(default_factory=dict)
    promoted_params: set[str] = field(default_factory=set)

    # Set by the owning graph
    _on_change: Callable[[], None] | None = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def create(
        cls,
        type_id: str,
        position: Point2D | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Node:
        """Factory method to create a new node."""
        return cls(
            id=new_node_id(),
            type_id=type_id,
            position=position or Point2D(),
            parameters=dict(parameters or {}),
        )

    def set_parameter(self, name: str, value: Any) -> None:
        """Set a parameter value, notifying the owning graph on change."""
        if name in self.parameters and self.parameters[name] == value:
            return
        self.parameters[name] = value
        if self._on_change is not None:
            self._on_change()

    def get_parameter(self, name: str, default: Any = None) -> Any:
        """Get a parameter value."""
        return self.parameters.get(name, default)

    def is_promoted(self, name: str) -> bool:
        return name in self.promoted_params


class NodeGraph:
    """
    The complete node graph for a project.

    Contains nodes and the connections between them. Every structural
    or parameter change bumps ``generation``; evaluation caches are
    only valid for the generation they were computed in.
    """

    def __init__(self, name: str = "Untitled"):
        self.id: str = str(uuid4())
        self.name: str = name
        self._nodes: dict[NodeId, Node] = {}
        self._connections: list[Connection] = []
        self._generation: int = 0

    # --- Generation ---

    @property
    def generation(self) -> int:
        return self._generation

    def bump_generation(self) -> None:
        """Invalidate evaluation caches (e.g. after fresh external data)."""
        self._generation += 1

    # --- Node operations ---

    @property
    def nodes(self) -> dict[NodeId, Node]:
        """Get all nodes in insertion order (read-only view)."""
        return self._nodes.copy()

    def add_node(self, node: Node) -> None:
        """Add a node to the graph."""
        node._on_change = self.bump_generation
        self._nodes[node.id] = node
        self.bump_generation()

    def remove_node(self, node_id: NodeId) -> Node | None:
        """
        Remove a node and all its connections.

        Returns the removed node, or None if not found.
        """
        node = self._nodes.pop(node_id, None)
        if node:
            node._on_change = None
            self._connections = [
                conn for conn in self._connections
                if conn.source.node_id != node_id and conn.target.node_id != node_id
            ]
            self.bump_generation()
        return node

    def get_node(self, node_id: NodeId) -> Node | None:
        """Get a node by ID."""
        return self._nodes.get(node_id)

    def get_nodes_of_type(self, type_id: str) -> list[Node]:
        return [n for n in self._nodes.values() if n.type_id == type_id]

    def set_parameter(self, node_id: NodeId, name: str, value: Any) -> bool:
        """Set a parameter on a node. Returns False if the node is missing."""
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node.set_parameter(name, value)
        return True

    # --- Promoted parameters ---

    def promote_parameter(self, node_id: NodeId, name: str) -> bool:
        """Expose a parameter as a ``param:<name>`` input port."""
        node = self._nodes.get(node_id)
        if node is None or name in node.promoted_params:
            return False
        node.promoted_params.add(name)
        self.bump_generation()
        return True

    def demote_parameter(self, node_id: NodeId, name: str) -> bool:
        """Remove a parameter port along with any connection into it."""
        node = self._nodes.get(node_id)
        if node is None or name not in node.promoted_params:
            return False
        node.promoted_params.discard(name)
        port = param_port(name)
        self._connections = [
            conn for conn in self._connections
            if not (conn.target.node_id == node_id and conn.target.input_name == port)
        ]
        self.bump_generation()
        return True

    # --- Connection operations ---

    @property
    def connections(self) -> list[Connection]:
        """Get all connections (read-only copy)."""
        return self._connections.copy()

    def add_connection(self, connection: Connection) -> bool:
        """
        Add a connection to the graph.

        Returns False if either node doesn't exist or the same
        connection is already present. An existing connection into
        the same input is replaced. Cycles are not rejected here; the
        evaluator tolerates them.
        """
        if connection.source.node_id not in self._nodes:
            return False
        if connection.target.node_id not in self._nodes:
            return False
        if any(conn.same_sockets(connection) for conn in self._connections):
            return False

        # Inputs can only have one connection
        self._connections = [
            conn for conn in self._connections
            if conn.target != connection.target
        ]
        self._connections.append(connection)
        self.bump_generation()
        return True

    def connect(
        self,
        source_node: NodeId,
        source_output: str,
        target_node: NodeId,
        target_input: str,
        data_type: DataType = DataType.PATHS,
    ) -> Connection | None:
        """Create and add a connection; returns it, or None if rejected."""
        connection = Connection.create(
            source_node, source_output, target_node, target_input, data_type
        )
        return connection if self.add_connection(connection) else None

    def remove_connection(self, connection_id: ConnectionId) -> Connection | None:
        """Remove a connection by ID."""
        for i, conn in enumerate(self._connections):
            if conn.id == connection_id:
                removed = self._connections.pop(i)
                self.bump_generation()
                return removed
        return None

    def get_input_connection(
        self, node_id: NodeId, input_name: str
    ) -> Connection | None:
        """Get the connection feeding into a specific input."""
        for conn in self._connections:
            if conn.target.node_id == node_id and conn.target.input_name == input_name:
                return conn
        return None

    def get_output_connections(
        self, node_id: NodeId, output_name: str
    ) -> list[Connection]:
        """Get all connections from a specific output."""
        return [
            conn for conn in self._connections
            if conn.source.node_id == node_id and conn.source.output_name == output_name
        ]

    # --- Graph analysis ---

    def get_downstream_nodes(self, node_id: NodeId) -> set[NodeId]:
        """Get all nodes that depend on this node (directly or indirectly)."""
        downstream: set[NodeId] = set()
        to_visit = [node_id]

        while to_visit:
            current = to_visit.pop()
            for conn in self._connections:
                if conn.source.node_id == current:
                    target_id = conn.target.node_id
                    if target_id not in downstream:
                        downstream.add(target_id)
                        to_visit.append(target_id)

        return downstream

    def would_create_cycle(self, connection: Connection) -> bool:
        """Check if adding this connection would create a cycle."""
        source = connection.source.node_id
        target = connection.target.node_id
        if source == target:
            return True
        # A path from target back to source closes a loop
        return source in self.get_downstream_nodes(target)

    # --- Utility ---

    def clear(self) -> None:
        """Remove all nodes and connections."""
        for node in self._nodes.values():
            node._on_change = None
        self._nodes.clear()
        self._connections.clear()
        self.bump_generation()

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: NodeId) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self._nodes
