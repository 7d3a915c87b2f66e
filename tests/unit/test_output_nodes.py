"""
Tests for the layer output and merge nodes.
"""

from plotcraft.core.data_types import Layer
from plotcraft.engine.geometry import create_line_path
from plotcraft.nodes.output import MERGE_NODE, OUTPUT_NODE, merge_executor, output_executor


class TestOutputNode:
    def test_passes_layers_through(self, context):
        layers = [Layer("a", [create_line_path(0, 0, 1, 1)])]
        assert output_executor({"paths": layers}, {}, context) == {"paths": layers}

    def test_ignores_non_layers(self, context):
        assert output_executor({"paths": 42}, {}, context) == {"paths": []}
        assert output_executor({}, {}, context) == {"paths": []}

    def test_schema(self):
        assert OUTPUT_NODE.outputs == []
        assert OUTPUT_NODE.get_default_parameters()["penNumber"] == 1
        assert OUTPUT_NODE.get_parameter("layerName").promotable is False


class TestMergeNode:
    def test_concatenates_inputs_in_order(self, context):
        a = create_line_path(0, 0, 1, 0)
        b = create_line_path(0, 1, 1, 1)
        c = create_line_path(0, 2, 1, 2)
        result = merge_executor(
            {"paths3": [Layer("z", [c])], "paths1": [Layer("x", [a]), Layer("y", [b])]},
            {},
            context,
        )
        assert len(result["paths"]) == 1
        assert result["paths"][0].id == "merged"
        assert result["paths"][0].paths == [a, b, c]

    def test_skips_invalid_inputs(self, context):
        result = merge_executor({"paths2": "nope"}, {}, context)
        assert result["paths"][0].paths == []

    def test_four_optional_inputs(self):
        assert [i.name for i in MERGE_NODE.inputs] == ["paths1", "paths2", "paths3", "paths4"]
        assert not any(i.required for i in MERGE_NODE.inputs)
