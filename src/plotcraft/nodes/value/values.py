"""
Value Nodes - Scalar sources and arithmetic.

These nodes produce numbers, vectors and booleans that drive promoted
parameters on other nodes:
- Number / Boolean: Constant values
- Random: Uniform draw from the evaluation's random stream
- Math: Binary arithmetic on two numbers
- Vector: Pack two numbers into a vector
- Map Range: Linear remap between two intervals
"""

from __future__ import annotations

import math
from typing import Any

from plotcraft.core.data_types import DataType, Vector, is_number
from plotcraft.core.node_types import (
    InputDefinition,
    NodeCategory,
    NodeRegistry,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
)

MATH_OPERATIONS = [
    ("add", "Add"),
    ("subtract", "Subtract"),
    ("multiply", "Multiply"),
    ("divide", "Divide"),
    ("min", "Min"),
    ("max", "Max"),
    ("modulo", "Modulo"),
    ("power", "Power"),
]


def _number_input(inputs: dict[str, Any], name: str, fallback: float) -> float:
    value = inputs.get(name)
    return value if is_number(value) else fallback


def apply_math(operation: str, a: float, b: float) -> float:
    """
    Apply a math operation.

    Division and modulo by zero yield 0. Modulo keeps the sign of the
    dividend. Zero raised to a negative power is infinite. Unknown
    operations return ``a``.
    """
    if operation == "add":
        return a + b
    if operation == "subtract":
        return a - b
    if operation == "multiply":
        return a * b
    if operation == "divide":
        return a / b if b != 0 else 0
    if operation == "min":
        return min(a, b)
    if operation == "max":
        return max(a, b)
    if operation == "modulo":
        return math.fmod(a, b) if b != 0 else 0
    if operation == "power":
        if a == 0 and b < 0:
            # Odd integer exponents keep the sign of zero
            odd = float(b).is_integer() and b % 2 == 1
            return math.copysign(math.inf, a) if odd else math.inf
        try:
            return math.pow(a, b)
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan
    return a


def map_range(
    value: float,
    input_min: float,
    input_max: float,
    output_min: float,
    output_max: float,
    clamp: bool = True,
) -> float:
    """Remap a value linearly; a zero-width input range maps to output_min."""
    if input_max == input_min:
        return output_min
    t = (value - input_min) / (input_max - input_min)
    if clamp:
        t = max(0.0, min(1.0, t))
    return output_min + t * (output_max - output_min)


# --- Executors ---

def number_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    return {"value": parameters.get("value", 0)}


def random_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """Draw one value in [min, max) from the shared random stream."""
    low = parameters.get("min", 0)
    high = parameters.get("max", 100)
    return {"value": low + context.rng() * (high - low)}


def math_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """Connected inputs override the A/B defaults."""
    a = _number_input(inputs, "a", parameters.get("aDefault", 0))
    b = _number_input(inputs, "b", parameters.get("bDefault", 0))
    return {"result": apply_math(parameters.get("operation", "add"), a, b)}


def vector_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    x = _number_input(inputs, "x", parameters.get("x", 0))
    y = _number_input(inputs, "y", parameters.get("y", 0))
    return {"vector": Vector(x, y)}


def boolean_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    return {"value": bool(parameters.get("value", True))}


def map_range_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    value = _number_input(inputs, "inputValue", parameters.get("inputValue", 0))
    result = map_range(
        value,
        parameters.get("inputMin", 0),
        parameters.get("inputMax", 100),
        parameters.get("outputMin", 0),
        parameters.get("outputMax", 100),
        clamp=parameters.get("clamp", True) is not False,
    )
    return {"result": result}


# --- Node Types ---

NUMBER_NODE = NodeType(
    id="number",
    name="Number",
    description="A constant number",
    category=NodeCategory.VALUE,
    outputs=[OutputDefinition("value", "Value", DataType.NUMBER)],
    parameters=[
        ParameterDefinition.number("value", "Value", default=50, min_value=-1000, max_value=1000, step=1),
    ],
    executor=number_executor,
)

RANDOM_NODE = NodeType(
    id="random",
    name="Random",
    description="A random number between min and max, fixed by the seed",
    category=NodeCategory.VALUE,
    outputs=[OutputDefinition("value", "Value", DataType.NUMBER)],
    parameters=[
        ParameterDefinition.number("min", "Minimum", default=0, min_value=-1000, max_value=1000, step=1),
        ParameterDefinition.number("max", "Maximum", default=100, min_value=-1000, max_value=1000, step=1),
    ],
    executor=random_executor,
)

MATH_NODE = NodeType(
    id="math",
    name="Math",
    description="Combine two numbers",
    category=NodeCategory.VALUE,
    inputs=[
        InputDefinition("a", "A", DataType.NUMBER, required=False),
        InputDefinition("b", "B", DataType.NUMBER, required=False),
    ],
    outputs=[OutputDefinition("result", "Result", DataType.NUMBER)],
    parameters=[
        ParameterDefinition.select("operation", "Operation", options=MATH_OPERATIONS, default="add"),
        ParameterDefinition.number("aDefault", "A (default)", default=0, min_value=-1000, max_value=1000),
        ParameterDefinition.number("bDefault", "B (default)", default=0, min_value=-1000, max_value=1000),
    ],
    executor=math_executor,
)

VECTOR_NODE = NodeType(
    id="vector",
    name="Vector",
    description="Combine X and Y into a vector",
    category=NodeCategory.VALUE,
    inputs=[
        InputDefinition("x", "X", DataType.NUMBER, required=False),
        InputDefinition("y", "Y", DataType.NUMBER, required=False),
    ],
    outputs=[OutputDefinition("vector", "Vector", DataType.VECTOR)],
    parameters=[
        ParameterDefinition.number("x", "X", default=0, min_value=-1000, max_value=1000),
        ParameterDefinition.number("y", "Y", default=0, min_value=-1000, max_value=1000),
    ],
    executor=vector_executor,
)

BOOLEAN_NODE = NodeType(
    id="boolean",
    name="Boolean",
    description="A true/false value",
    category=NodeCategory.VALUE,
    outputs=[OutputDefinition("value", "Value", DataType.BOOLEAN)],
    parameters=[ParameterDefinition.boolean("value", "Value", default=True)],
    executor=boolean_executor,
)

MAP_RANGE_NODE = NodeType(
    id="mapRange",
    name="Map Range",
    description="Remap a number from one range to another",
    category=NodeCategory.VALUE,
    inputs=[InputDefinition("inputValue", "Value", DataType.NUMBER, required=False)],
    outputs=[OutputDefinition("result", "Result", DataType.NUMBER)],
    parameters=[
        ParameterDefinition.number("inputValue", "Input Value", default=0, min_value=-10000, max_value=10000),
        ParameterDefinition.number("inputMin", "Input Min", default=0, min_value=-10000, max_value=10000),
        ParameterDefinition.number("inputMax", "Input Max", default=100, min_value=-10000, max_value=10000),
        ParameterDefinition.number("outputMin", "Output Min", default=0, min_value=-10000, max_value=10000),
        ParameterDefinition.number("outputMax", "Output Max", default=100, min_value=-10000, max_value=10000),
        ParameterDefinition.boolean("clamp", "Clamp", default=True),
    ],
    executor=map_range_executor,
)

VALUE_NODES = [NUMBER_NODE, RANDOM_NODE, MATH_NODE, VECTOR_NODE, BOOLEAN_NODE, MAP_RANGE_NODE]


def register_value_nodes(registry: NodeRegistry) -> None:
    """Register all value nodes."""
    for node_type in VALUE_NODES:
        registry.register(node_type)
