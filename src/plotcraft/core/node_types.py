"""
Node Type System - Definitions and registry for node types.

This module defines how node types are specified:
- InputDefinition: Describes an input socket
- OutputDefinition: Describes an output socket
- ParameterDefinition: Describes a configurable (optionally promotable) parameter
- NodeType: Complete definition of a node type
- NodeRegistry: Lookup table from type id to node type
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from plotcraft.core.data_types import DataType, ParameterValue


class ParameterType(Enum):
    """Types of node parameters (determines the editing widget)."""
    NUMBER = "number"       # Numeric field/slider with bounds
    SELECT = "select"       # Dropdown
    BOOLEAN = "boolean"     # Checkbox
    FILE = "file"           # File contents (e.g. SVG text)
    BUTTON = "button"       # Action trigger, value is a counter


class NodeCategory(Enum):
    """Categories for organizing nodes in the library."""
    GENERATOR = "generator"
    MODIFIER = "modifier"
    SELECT = "select"
    VALUE = "value"
    DATA = "data"
    OUTPUT = "output"


CATEGORY_COLORS: dict[NodeCategory, str] = {
    NodeCategory.GENERATOR: "#10B981",
    NodeCategory.MODIFIER: "#F59E0B",
    NodeCategory.SELECT: "#F59E0B",
    NodeCategory.VALUE: "#8B5CF6",
    NodeCategory.DATA: "#0EA5E9",
    NodeCategory.OUTPUT: "#EF4444",
}


@dataclass
class InputDefinition:
    """
    Definition of an input socket on a node.

    Attributes:
        name: Socket identifier (used in code)
        label: Display label in UI
        data_type: Type of data accepted
        required: If False, the node runs without this input
        default_value: Value to use if not connected
    """
    name: str
    label: str
    data_type: DataType
    required: bool = True
    default_value: Any = None
    description: str = ""


@dataclass
class OutputDefinition:
    """
    Definition of an output socket on a node.

    Attributes:
        name: Socket identifier (used in code)
        label: Display label in UI
        data_type: Type of data produced
    """
    name: str
    label: str
    data_type: DataType
    description: str = ""


@dataclass
class EnumOption:
    """A single option in a select parameter."""
    value: str
    label: str
    description: str = ""


@dataclass
class ParameterDefinition:
    """
    Definition of a configurable parameter on a node.

    Parameters are user-editable values that affect node behavior.
    A parameter with a data_type can be promoted to an input port
    named ``param:<name>`` and driven by a connection.

    Attributes:
        name: Parameter identifier
        label: Display label
        param_type: Type of parameter (determines widget)
        default: Default value
        min_value: Minimum value (for numeric types)
        max_value: Maximum value (for numeric types)
        step: Step size (for numeric types)
        options: List of options (for select type)
        show_when: (parameter name, value) pair gating visibility
        data_type: Port type when promoted; None if not promotable
        description: Tooltip/description text
    """
    name: str
    label: str
    param_type: ParameterType
    default: ParameterValue = None
    min_value: float | None = None
    max_value: float | None = None
    step: float | None = None
    options: list[EnumOption] = field(default_factory=list)
    file_filter: str = ""  # e.g., ".svg"
    show_when: tuple[str, Any] | None = None
    data_type: DataType | None = None
    description: str = ""

    @property
    def promotable(self) -> bool:
        return self.data_type is not None

    def is_visible(self, values: dict[str, Any]) -> bool:
        """Check the show_when condition against resolved values."""
        if self.show_when is None:
            return True
        other, expected = self.show_when
        return values.get(other) == expected

    @classmethod
    def number(
        cls,
        name: str,
        label: str,
        default: float = 0,
        min_value: float | None = None,
        max_value: float | None = None,
        step: float | None = None,
        show_when: tuple[str, Any] | None = None,
        description: str = "",
    ) -> ParameterDefinition:
        """Factory for a promotable number parameter."""
        return cls(
            name=name,
            label=label,
            param_type=ParameterType.NUMBER,
            default=default,
            min_value=min_value,
            max_value=max_value,
            step=step,
            show_when=show_when,
            data_type=DataType.NUMBER,
            description=description,
        )

    @classmethod
    def boolean(
        cls,
        name: str,
        label: str,
        default: bool = False,
        show_when: tuple[str, Any] | None = None,
        description: str = "",
    ) -> ParameterDefinition:
        """Factory for a promotable boolean parameter."""
        return cls(
            name=name,
            label=label,
            param_type=ParameterType.BOOLEAN,
            default=default,
            show_when=show_when,
            data_type=DataType.BOOLEAN,
            description=description,
        )

    @classmethod
    def select(
        cls,
        name: str,
        label: str,
        options: list[tuple[str, str]],  # [(value, label), ...]
        default: str | None = None,
        show_when: tuple[str, Any] | None = None,
        description: str = "",
    ) -> ParameterDefinition:
        """Factory for select (dropdown) parameter."""
        enum_options = [EnumOption(v, l) for v, l in options]
        return cls(
            name=name,
            label=label,
            param_type=ParameterType.SELECT,
            default=default or (options[0][0] if options else None),
            options=enum_options,
            show_when=show_when,
            description=description,
        )

    @classmethod
    def file(
        cls,
        name: str,
        label: str,
        file_filter: str = "",
        default: str = "",
        description: str = "",
    ) -> ParameterDefinition:
        """Factory for file parameter (value is the file's text content)."""
        return cls(
            name=name,
            label=label,
            param_type=ParameterType.FILE,
            default=default,
            file_filter=file_filter,
            description=description,
        )

    @classmethod
    def button(
        cls,
        name: str,
        label: str,
        description: str = "",
    ) -> ParameterDefinition:
        """Factory for an action button; the stored value is a press counter."""
        return cls(
            name=name,
            label=label,
            param_type=ParameterType.BUTTON,
            default=0,
            description=description,
        )


@runtime_checkable
class NodeExecutor(Protocol):
    """Protocol for node execution functions."""

    def __call__(
        self,
        inputs: dict[str, Any],
        parameters: dict[str, Any],
        context: Any,
    ) -> dict[str, Any]:
        """
        Execute the node.

        Args:
            inputs: Connected input values by name
            parameters: Fully resolved parameter values by name
            context: ExecutionContext with canvas, seed and rng

        Returns:
            Dictionary of output values by name
        """
        ...


@dataclass
class NodeType:
    """
    Complete definition of a node type.

    NodeTypes are templates that define what a node does, its inputs,
    outputs, and parameters. Actual nodes in a graph reference a
    NodeType by its id.
    """
    id: str  # Unique identifier, e.g., "concentricCircles"
    name: str  # Display name, e.g., "Concentric Circles"
    category: NodeCategory
    description: str = ""

    inputs: list[InputDefinition] = field(default_factory=list)
    outputs: list[OutputDefinition] = field(default_factory=list)
    parameters: list[ParameterDefinition] = field(default_factory=list)

    # The actual execution function
    executor: NodeExecutor | None = None

    # UI hints
    color: str = ""  # Header color, defaults to the category color

    def __post_init__(self) -> None:
        if not self.color:
            self.color = CATEGORY_COLORS.get(self.category, "#4a5568")

    def get_input(self, name: str) -> InputDefinition | None:
        """Get an input definition by name."""
        for inp in self.inputs:
            if inp.name == name:
                return inp
        return None

    def get_output(self, name: str) -> OutputDefinition | None:
        """Get an output definition by name."""
        for out in self.outputs:
            if out.name == name:
                return out
        return None

    def get_parameter(self, name: str) -> ParameterDefinition | None:
        """Get a parameter definition by name."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def get_default_parameters(self) -> dict[str, ParameterValue]:
        """Get default values for all parameters."""
        return {p.name: p.default for p in self.parameters}

    def resolve_parameters(self, stored: dict[str, Any]) -> dict[str, Any]:
        """
        Merge declared defaults with stored overrides.

        Stored values for names the type does not declare are kept,
        so older workspaces round-trip without loss.
        """
        resolved = self.get_default_parameters()
        resolved.update(stored)
        return resolved


class NodeRegistry:
    """
    Registry of available node types.

    Nodes register themselves with a registry instance and the
    evaluator dispatches through it by type id. Registration order
    has no effect on behavior.
    """

    def __init__(self):
        self._types: dict[str, NodeType] = {}

    def register(self, node_type: NodeType) -> None:
        """Register a node type."""
        self._types[node_type.id] = node_type

    def get(self, type_id: str) -> NodeType | None:
        """Get a node type by ID."""
        return self._types.get(type_id)

    def get_all(self) -> list[NodeType]:
        """Get all registered node types."""
        return list(self._types.values())

    def list_by_category(self, category: NodeCategory) -> list[NodeType]:
        """Get all node types in a category."""
        return [t for t in self._types.values() if t.category == category]

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._types
