"""
Tests for the value nodes.
"""

import math

import pytest

from plotcraft.core.data_types import Vector
from plotcraft.nodes.value import (
    BOOLEAN_NODE,
    MAP_RANGE_NODE,
    MATH_NODE,
    NUMBER_NODE,
    RANDOM_NODE,
    VECTOR_NODE,
    apply_math,
    map_range,
)


def execute(node_type, context, inputs=None, **params):
    resolved = node_type.resolve_parameters(params)
    return node_type.executor(inputs or {}, resolved, context)


class TestApplyMath:
    @pytest.mark.parametrize(
        "operation, a, b, expected",
        [
            ("add", 2, 3, 5),
            ("subtract", 2, 3, -1),
            ("multiply", 2, 3, 6),
            ("divide", 3, 2, 1.5),
            ("min", 2, 3, 2),
            ("max", 2, 3, 3),
            ("modulo", 7, 3, 1),
            ("power", 2, 10, 1024),
        ],
    )
    def test_operations(self, operation, a, b, expected):
        assert apply_math(operation, a, b) == expected

    def test_divide_by_zero(self):
        assert apply_math("divide", 5, 0) == 0
        assert apply_math("modulo", 5, 0) == 0

    def test_modulo_keeps_dividend_sign(self):
        assert apply_math("modulo", -7, 3) == -1
        assert apply_math("modulo", 7, -3) == 1

    def test_power_overflow(self):
        assert apply_math("power", 10, 1000) == math.inf

    def test_power_of_zero_with_negative_exponent(self):
        assert apply_math("power", 0, -1) == math.inf
        assert apply_math("power", 0, -2.5) == math.inf
        assert apply_math("power", -0.0, -3) == -math.inf
        assert apply_math("power", -0.0, -2) == math.inf

    def test_power_domain_error(self):
        assert math.isnan(apply_math("power", -8, 0.5))

    def test_unknown_operation(self):
        assert apply_math("sqrt", 9, 2) == 9


class TestMapRange:
    def test_linear(self):
        assert map_range(50, 0, 100, 0, 10) == 5
        assert map_range(25, 0, 100, 10, 20) == 12.5

    def test_clamped(self):
        assert map_range(150, 0, 100, 0, 10) == 10
        assert map_range(-50, 0, 100, 0, 10) == 0

    def test_unclamped(self):
        assert map_range(150, 0, 100, 0, 10, clamp=False) == 15

    def test_inverted_output(self):
        assert map_range(25, 0, 100, 10, 0) == 7.5

    def test_zero_width_input(self):
        assert map_range(5, 3, 3, 7, 9) == 7


class TestExecutors:
    def test_number(self, context):
        assert execute(NUMBER_NODE, context) == {"value": 50}
        assert execute(NUMBER_NODE, context, value=-3) == {"value": -3}

    def test_boolean(self, context):
        assert execute(BOOLEAN_NODE, context) == {"value": True}
        assert execute(BOOLEAN_NODE, context, value=False) == {"value": False}

    def test_random_in_range(self, context):
        for _ in range(20):
            value = execute(RANDOM_NODE, context, min=10, max=20)["value"]
            assert 10 <= value < 20

    def test_random_uses_shared_stream(self, context):
        first = execute(RANDOM_NODE, context)["value"]
        second = execute(RANDOM_NODE, context)["value"]
        assert first != second

    def test_math_defaults(self, context):
        result = execute(MATH_NODE, context, operation="multiply", aDefault=4, bDefault=5)
        assert result == {"result": 20}

    def test_math_inputs_override_defaults(self, context):
        result = execute(MATH_NODE, context, {"a": 10}, operation="subtract", aDefault=4, bDefault=3)
        assert result == {"result": 7}

    def test_math_ignores_non_numbers(self, context):
        result = execute(MATH_NODE, context, {"a": True, "b": "x"}, aDefault=1, bDefault=2)
        assert result == {"result": 3}

    def test_vector(self, context):
        assert execute(VECTOR_NODE, context, {"y": 4}, x=1, y=2) == {"vector": Vector(1, 4)}

    def test_map_range(self, context):
        result = execute(MAP_RANGE_NODE, context, {"inputValue": 0.5}, inputMax=1, outputMax=200)
        assert result == {"result": 100}
