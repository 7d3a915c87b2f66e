"""
Tests for the module contract and the flat module stack.
"""

from plotcraft.core.data_types import CanvasSettings, DataType, Layer
from plotcraft.core.modules import ModuleDefinition, ModuleKind, ModuleRegistry, module_to_node_type
from plotcraft.core.node_types import NodeCategory
from plotcraft.core.pipeline import ModuleInstance, hash_string, run_pipeline
from plotcraft.nodes import create_module_registry
from plotcraft.nodes.generators import DATA_POINTS_MODULE, GRID_MODULE
from plotcraft.nodes.modifiers import ROTATE_MODULE

CANVAS = CanvasSettings(200, 200)


class TestHashString:
    def test_known_values(self):
        assert hash_string("") == 0
        assert hash_string("a") == 97
        assert hash_string("ab") == 97 * 31 + 98

    def test_utf16_code_units(self):
        # Astral characters hash as their surrogate pair
        assert hash_string("\U0001F600") == 0xD83D * 31 + 0xDE00

    def test_non_negative(self):
        for text in ("grid-1", "a much longer module instance id", "zzzzzzzzzzzz"):
            assert hash_string(text) >= 0


class TestModuleRegistry:
    def test_builtin_modules(self):
        registry = create_module_registry()
        generators = {m.id for m in registry.get_generators()}
        modifiers = {m.id for m in registry.get_modifiers()}
        assert generators == {
            "grid", "concentricCircles", "horizontalLines", "verticalLines",
            "spiral", "importSvg", "dataPoints",
        }
        assert modifiers == {
            "rotate", "scale", "jitter", "noiseDisplace", "clipRect", "clipCircle", "subdivide",
        }
        assert "grid" in registry
        assert len(registry) == 14

    def test_defaults(self):
        assert GRID_MODULE.default_parameters()["rows"] == 10
        assert GRID_MODULE.is_generator


class TestModuleToNodeType:
    def test_generator_has_no_path_input(self):
        node_type = module_to_node_type(GRID_MODULE)
        assert node_type.category == NodeCategory.GENERATOR
        assert node_type.inputs == []
        assert [o.name for o in node_type.outputs] == ["paths"]

    def test_modifier_has_path_input(self):
        node_type = module_to_node_type(ROTATE_MODULE)
        assert node_type.category == NodeCategory.MODIFIER
        assert node_type.get_input("paths").data_type == DataType.PATHS

    def test_additional_inputs(self):
        node_type = module_to_node_type(DATA_POINTS_MODULE)
        data = node_type.get_input("data")
        assert data.data_type == DataType.NUMBER_ARRAY
        assert data.required is False

    def test_executor_passes_additional_inputs(self, context):
        seen = {}

        def execute(params, input_layers, ctx):
            seen.update(ctx.inputs)
            return [Layer("x")]

        module = ModuleDefinition(
            id="recorder", name="Recorder", kind=ModuleKind.GENERATOR, execute=execute,
            additional_inputs=[DATA_POINTS_MODULE.additional_inputs[0]],
        )
        result = module_to_node_type(module).executor({"data": [1, 2]}, {}, context)
        assert seen == {"data": [1, 2]}
        assert result == {"paths": [Layer("x")]}


class TestRunPipeline:
    def registry(self) -> ModuleRegistry:
        return create_module_registry()

    def test_generators_append(self):
        stack = [
            ModuleInstance("a", "grid", {"rows": 1, "cols": 1}),
            ModuleInstance("b", "spiral"),
        ]
        layers = run_pipeline(stack, CANVAS, 1, self.registry())
        # Evaluated bottom-up: the last instance runs first
        assert [layer.id for layer in layers] == ["spiral", "grid"]

    def test_modifier_applies_to_everything_below(self):
        stack = [
            ModuleInstance("clip", "clipRect", {"x": 0, "y": 0, "width": 50, "height": 100}),
            ModuleInstance("grid", "grid", {"rows": 2, "cols": 2, "gridWidth": 180, "gridHeight": 180}),
        ]
        layers = run_pipeline(stack, CANVAS, 1, self.registry())
        for layer in layers:
            for path in layer.paths:
                assert all(p.x <= 100 + 1e-9 for p in path.points)

    def test_modifier_below_generators_sees_nothing(self):
        stack = [
            ModuleInstance("grid", "grid"),
            ModuleInstance("rot", "rotate", {"angle": 45}),
        ]
        layers = run_pipeline(stack, CANVAS, 1, self.registry())
        assert [layer.id for layer in layers] == ["grid"]

    def test_disabled_and_unknown_skipped(self):
        stack = [
            ModuleInstance("x", "noSuchModule"),
            ModuleInstance("g", "grid", enabled=False),
            ModuleInstance("s", "spiral"),
        ]
        layers = run_pipeline(stack, CANVAS, 1, self.registry())
        assert [layer.id for layer in layers] == ["spiral"]

    def test_failing_module_skipped(self):
        def explode(params, input_layers, context):
            raise ValueError("bad")

        registry = self.registry()
        registry.register(ModuleDefinition("boom", "Boom", ModuleKind.GENERATOR, explode))
        stack = [ModuleInstance("b", "boom"), ModuleInstance("s", "spiral")]
        layers = run_pipeline(stack, CANVAS, 1, registry)
        assert [layer.id for layer in layers] == ["spiral"]

    def test_instance_streams_are_independent(self):
        jitter = ModuleInstance("jit", "jitter", {"amountX": 5, "amountY": 5})
        grid = ModuleInstance("grid", "grid", {"rows": 2, "cols": 2})
        spiral = ModuleInstance("sp", "spiral")

        with_spiral = run_pipeline([jitter, spiral, grid], CANVAS, 3, self.registry())
        without = run_pipeline([jitter, grid], CANVAS, 3, self.registry())

        # The grid layer is jittered identically whether or not another module runs
        assert with_spiral[0].paths == without[0].paths

    def test_deterministic(self):
        stack = [ModuleInstance("j", "jitter"), ModuleInstance("g", "grid")]
        first = run_pipeline(stack, CANVAS, 9, self.registry())
        second = run_pipeline(stack, CANVAS, 9, self.registry())
        assert first == second
