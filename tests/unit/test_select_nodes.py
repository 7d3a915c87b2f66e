"""
Tests for the select nodes.
"""

from plotcraft.core.data_types import Layer, Path, Point
from plotcraft.engine.geometry import create_line_path
from plotcraft.nodes.select import (
    INDEX_SELECT_NODE,
    NOISE_SELECT_NODE,
    RANDOM_SELECT_NODE,
    REGION_SELECT_NODE,
    path_matches,
    split_layers,
)


def lines(count: int, x: float = 0) -> list[Path]:
    return [create_line_path(x, i, x + 1, i) for i in range(count)]


def execute(node_type, context, layers, **params):
    resolved = node_type.resolve_parameters(params)
    return node_type.executor({"paths": layers}, resolved, context)


def count(layers: list[Layer]) -> int:
    return sum(len(layer.paths) for layer in layers)


class TestSplitLayers:
    def test_preserves_layer_ids(self):
        layers = [Layer("a", lines(2)), Layer("b", lines(1))]
        result = split_layers(layers, lambda path, i: False)
        assert [layer.id for layer in result["selected"]] == ["a", "b"]
        assert count(result["selected"]) == 0
        assert count(result["unselected"]) == 3

    def test_index_is_global(self):
        layers = [Layer("a", lines(2)), Layer("b", lines(2))]
        seen = []
        split_layers(layers, lambda path, i: seen.append(i) or True)
        assert seen == [0, 1, 2, 3]

    def test_invert(self):
        layers = [Layer("a", lines(3))]
        result = split_layers(layers, lambda path, i: i == 0, invert=True)
        assert count(result["selected"]) == 2

    def test_partition(self):
        layers = [Layer("a", lines(5))]
        result = split_layers(layers, lambda path, i: i % 2 == 1)
        assert count(result["selected"]) + count(result["unselected"]) == 5


class TestPathMatches:
    PATH = Path([Point(0, 0), Point(10, 0)])

    def test_modes(self):
        def left(p):
            return p.x < 5

        assert path_matches(self.PATH, left, "any")
        assert not path_matches(self.PATH, left, "all")
        # Centroid is (5, 0)
        assert not path_matches(self.PATH, left, "center")

    def test_empty_path(self):
        assert not path_matches(Path(), lambda p: True, "any")


class TestIndexSelect:
    LAYERS = [Layer("a", lines(4)), Layer("b", lines(4))]

    def selected_count(self, context, **params):
        return count(execute(INDEX_SELECT_NODE, context, self.LAYERS, **params)["selected"])

    def test_every_nth(self, context):
        assert self.selected_count(context, mode="everyNth", nValue=3) == 3

    def test_first_and_last(self, context):
        assert self.selected_count(context, mode="firstN", nValueFirstN=5) == 5
        result = execute(INDEX_SELECT_NODE, context, self.LAYERS, mode="lastN", nValueLastN=3)
        assert [len(layer.paths) for layer in result["selected"]] == [0, 3]

    def test_range_inclusive(self, context):
        assert self.selected_count(context, mode="range", rangeStart=2, rangeEnd=4) == 3

    def test_even_odd(self, context):
        assert self.selected_count(context, mode="even") == 4
        assert self.selected_count(context, mode="odd") == 4

    def test_invert(self, context):
        assert self.selected_count(context, mode="firstN", nValueFirstN=2, invert=True) == 6

    def test_non_path_input(self, context):
        result = INDEX_SELECT_NODE.executor({"paths": 5}, INDEX_SELECT_NODE.resolve_parameters({}), context)
        assert result == {"selected": [], "unselected": []}


class TestRandomSelect:
    LAYERS = [Layer("a", lines(50))]

    def test_extremes(self, context):
        assert count(execute(RANDOM_SELECT_NODE, context, self.LAYERS, percentage=0)["selected"]) == 0
        assert count(execute(RANDOM_SELECT_NODE, context, self.LAYERS, percentage=100)["selected"]) == 50

    def test_deterministic_and_independent_of_shared_stream(self, context):
        first = execute(RANDOM_SELECT_NODE, context, self.LAYERS)
        context.rng()
        second = execute(RANDOM_SELECT_NODE, context, self.LAYERS)
        assert first == second

    def test_seed_changes_selection(self, context):
        first = execute(RANDOM_SELECT_NODE, context, self.LAYERS, selectSeed=1)
        second = execute(RANDOM_SELECT_NODE, context, self.LAYERS, selectSeed=2)
        assert first != second

    def test_points_mode_splits_runs(self, context):
        path = Path([Point(i, 0) for i in range(40)])
        result = execute(RANDOM_SELECT_NODE, context, [Layer("a", [path])], mode="points")
        for layer in result["selected"] + result["unselected"]:
            assert all(len(p.points) >= 2 for p in layer.paths)
            assert all(not p.closed for p in layer.paths)


class TestRegionSelect:
    # Canvas is 200 x 100: the default circle has a 50 mm radius at (100, 50)
    def test_circle(self, context):
        near = create_line_path(95, 50, 105, 50)
        far = create_line_path(0, 0, 2, 0)
        result = execute(REGION_SELECT_NODE, context, [Layer("a", [near, far])])
        assert result["selected"][0].paths == [near]
        assert result["unselected"][0].paths == [far]

    def test_rectangle(self, context):
        inside = create_line_path(90, 45, 110, 55)
        outside = create_line_path(150, 50, 160, 50)
        result = execute(
            REGION_SELECT_NODE, context, [Layer("a", [inside, outside])],
            shape="rectangle", regionWidth=20, regionHeight=20,
        )
        assert result["selected"][0].paths == [inside]

    def test_select_by_all(self, context):
        crossing = create_line_path(100, 50, 190, 50)
        result = execute(REGION_SELECT_NODE, context, [Layer("a", [crossing])], selectBy="all")
        assert result["selected"][0].paths == []

    def test_falloff_band(self, context):
        # 20 mm beyond the edge, inside a 40 mm band: kept some of the time
        paths = [create_line_path(170, 50, 170, 50.5) for _ in range(200)]
        result = execute(REGION_SELECT_NODE, context, [Layer("a", paths)], falloff=20)
        assert 0 < count(result["selected"]) < 200


class TestNoiseSelect:
    LAYERS = [Layer("a", [create_line_path(x, y, x + 1, y) for x in range(0, 200, 13) for y in range(0, 100, 11)])]

    def test_threshold_extremes(self, context):
        total = count(self.LAYERS)
        low = execute(NOISE_SELECT_NODE, context, self.LAYERS, threshold=-10)
        high = execute(NOISE_SELECT_NODE, context, self.LAYERS, threshold=10)
        assert count(low["selected"]) == total
        assert count(high["selected"]) == 0

    def test_invert_swaps(self, context):
        plain = execute(NOISE_SELECT_NODE, context, self.LAYERS)
        inverted = execute(NOISE_SELECT_NODE, context, self.LAYERS, invert=True)
        assert plain["selected"] == inverted["unselected"]
        assert plain["unselected"] == inverted["selected"]
