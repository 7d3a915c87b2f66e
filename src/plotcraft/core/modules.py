"""
Module System - The generator/modifier plugin contract.

A module is a plain function over layers:

    execute(parameters, input_layers, context) -> list[Layer]

Generators ignore ``input_layers`` and create geometry; modifiers
transform the layers they are given. Modules run both in the flat
module stack (see pipeline.py) and as graph nodes through
``module_to_node_type``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from plotcraft.core.data_types import DataType, Layer
from plotcraft.core.node_types import (
    InputDefinition,
    NodeCategory,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
)

ModuleExecute = Callable[[dict[str, Any], list[Layer], Any], list[Layer]]


class ModuleKind(Enum):
    GENERATOR = "generator"
    MODIFIER = "modifier"


@dataclass
class ModuleInput:
    """An additional named input a module reads from ``context.inputs``."""
    name: str
    type: DataType = DataType.PATHS
    optional: bool = True
    label: str = ""


@dataclass
class ModuleDefinition:
    """
    A generator or modifier plugin.

    Attributes:
        id: Type tag, shared with the graph node built from it
        name: Display name
        kind: Generator or modifier
        execute: The module function
        parameters: Parameter schema, in display order
        additional_inputs: Extra named path inputs beyond the main stream
    """
    id: str
    name: str
    kind: ModuleKind
    execute: ModuleExecute
    parameters: list[ParameterDefinition] = field(default_factory=list)
    additional_inputs: list[ModuleInput] = field(default_factory=list)
    description: str = ""

    @property
    def is_generator(self) -> bool:
        return self.kind == ModuleKind.GENERATOR

    def default_parameters(self) -> dict[str, Any]:
        return {p.name: p.default for p in self.parameters}


class ModuleRegistry:
    """Lookup table of available modules by id."""

    def __init__(self):
        self._modules: dict[str, ModuleDefinition] = {}

    def register(self, module: ModuleDefinition) -> None:
        self._modules[module.id] = module

    def get(self, module_id: str) -> ModuleDefinition | None:
        return self._modules.get(module_id)

    def get_all(self) -> list[ModuleDefinition]:
        return list(self._modules.values())

    def get_generators(self) -> list[ModuleDefinition]:
        return [m for m in self._modules.values() if m.kind == ModuleKind.GENERATOR]

    def get_modifiers(self) -> list[ModuleDefinition]:
        return [m for m in self._modules.values() if m.kind == ModuleKind.MODIFIER]

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._modules


def module_to_node_type(module: ModuleDefinition) -> NodeType:
    """
    Wrap a module as a graph node type.

    Modifiers get a ``paths`` input; every module gets its additional
    inputs and a single ``paths`` output.
    """
    inputs: list[InputDefinition] = []
    if not module.is_generator:
        inputs.append(InputDefinition("paths", "Paths", DataType.PATHS, required=True))
    for extra in module.additional_inputs:
        inputs.append(
            InputDefinition(
                extra.name, extra.label or extra.name, extra.type, required=not extra.optional
            )
        )

    def executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
        input_layers = [] if module.is_generator else (inputs.get("paths") or [])
        context.inputs = {
            extra.name: inputs[extra.name]
            for extra in module.additional_inputs
            if extra.name in inputs
        }
        return {"paths": module.execute(parameters, input_layers, context)}

    return NodeType(
        id=module.id,
        name=module.name,
        category=NodeCategory.GENERATOR if module.is_generator else NodeCategory.MODIFIER,
        description=module.description,
        inputs=inputs,
        outputs=[OutputDefinition("paths", "Paths", DataType.PATHS)],
        parameters=list(module.parameters),
        executor=executor,
    )
