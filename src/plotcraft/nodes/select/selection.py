"""
Select Nodes - Split a path stream in two.

Every select node routes each input path to either its ``selected`` or
its ``unselected`` output. Layer ids are preserved on both sides, so a
layer that loses all its paths to one side still appears (empty) there.
The ``invert`` parameter swaps the two outputs.
"""

from __future__ import annotations

import math
from typing import Any, Callable

from plotcraft.core.data_types import DataType, Layer, Path, Point, is_layer_list
from plotcraft.core.node_types import (
    InputDefinition,
    NodeCategory,
    NodeRegistry,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
)
from plotcraft.engine.geometry import noise2d, path_centroid
from plotcraft.engine.rng import create_rng

PointTest = Callable[[Point], bool]

SELECT_BY_OPTIONS = [("center", "Center Point"), ("any", "Any Point"), ("all", "All Points")]


# --- Helpers ---

def _input_layers(inputs: dict[str, Any]) -> list[Layer]:
    layers = inputs.get("paths")
    return layers if is_layer_list(layers) else []


def split_layers(
    layers: list[Layer],
    predicate: Callable[[Path, int], bool],
    invert: bool = False,
) -> dict[str, list[Layer]]:
    """
    Route paths by a predicate over (path, global index).

    The index counts paths across all layers in order.
    """
    selected: list[Layer] = []
    unselected: list[Layer] = []
    index = 0
    for layer in layers:
        chosen: list[Path] = []
        rest: list[Path] = []
        for path in layer.paths:
            if predicate(path, index) != invert:
                chosen.append(path)
            else:
                rest.append(path)
            index += 1
        selected.append(Layer(id=layer.id, paths=chosen))
        unselected.append(Layer(id=layer.id, paths=rest))
    return {"selected": selected, "unselected": unselected}


def path_matches(path: Path, inside: PointTest, select_by: str) -> bool:
    """Apply a point test to a path by centroid, any point or all points."""
    if not path.points:
        return False
    if select_by == "any":
        return any(inside(p) for p in path.points)
    if select_by == "all":
        return all(inside(p) for p in path.points)
    return inside(path_centroid(path))


def _point_runs(path: Path, chosen: list[bool], want: bool) -> list[Path]:
    """Maximal runs of consecutive points whose flag equals ``want``."""
    runs: list[Path] = []
    current: list[Point] = []
    for point, flag in zip(path.points, chosen):
        if flag == want:
            current.append(point)
        elif current:
            runs.append(Path(points=current))
            current = []
    if current:
        runs.append(Path(points=current))
    return [run for run in runs if len(run.points) >= 2]


# --- Random Select ---

def random_select_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Select a percentage of paths (or points) at random.

    The draw uses its own stream seeded by the global seed plus the
    node's seed, so it does not consume the shared stream.
    """
    percentage = parameters.get("percentage", 50)
    rng = create_rng(context.seed + int(parameters.get("selectSeed", 12345)))
    layers = _input_layers(inputs)

    if parameters.get("mode") != "points":
        return split_layers(layers, lambda path, _index: rng() * 100 < percentage)

    selected: list[Layer] = []
    unselected: list[Layer] = []
    for layer in layers:
        chosen_paths: list[Path] = []
        rest_paths: list[Path] = []
        for path in layer.paths:
            flags = [rng() * 100 < percentage for _ in path.points]
            chosen_paths.extend(_point_runs(path, flags, True))
            rest_paths.extend(_point_runs(path, flags, False))
        selected.append(Layer(id=layer.id, paths=chosen_paths))
        unselected.append(Layer(id=layer.id, paths=rest_paths))
    return {"selected": selected, "unselected": unselected}


# --- Index Select ---

def index_predicate(parameters: dict[str, Any], total: int) -> Callable[[Path, int], bool]:
    """Build the index test for one of the index selection modes."""
    mode = parameters.get("mode", "everyNth")
    if mode == "everyNth":
        n = max(1, int(parameters.get("nValue", 2)))
        return lambda _path, i: i % n == 0
    if mode == "firstN":
        n = int(parameters.get("nValueFirstN", 2))
        return lambda _path, i: i < n
    if mode == "lastN":
        n = int(parameters.get("nValueLastN", 2))
        return lambda _path, i: i >= total - n
    if mode == "range":
        start = int(parameters.get("rangeStart", 0))
        end = int(parameters.get("rangeEnd", 10))
        return lambda _path, i: start <= i <= end
    if mode == "even":
        return lambda _path, i: i % 2 == 0
    if mode == "odd":
        return lambda _path, i: i % 2 == 1
    return lambda _path, _i: False


def index_select_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    layers = _input_layers(inputs)
    total = sum(len(layer.paths) for layer in layers)
    return split_layers(
        layers,
        index_predicate(parameters, total),
        invert=parameters.get("invert") is True,
    )


# --- Region Select ---

def region_test(parameters: dict[str, Any], canvas: Any, rng: Callable[[], float]) -> PointTest:
    """
    Point-in-region test for a circle or rectangle.

    Sizes are percentages: radius, width and falloff of the canvas
    width, height of the canvas height. Points inside the falloff band
    just outside the region are kept with a probability that fades
    linearly to zero across the band.
    """
    cx = (parameters.get("centerX", 50) / 100) * canvas.width
    cy = (parameters.get("centerY", 50) / 100) * canvas.height
    band = (parameters.get("falloff", 0) / 100) * canvas.width

    if parameters.get("shape") == "rectangle":
        half_w = (parameters.get("regionWidth", 30) / 100) * canvas.width / 2
        half_h = (parameters.get("regionHeight", 30) / 100) * canvas.height / 2

        def outside_distance(p: Point) -> float:
            dx = max(abs(p.x - cx) - half_w, 0.0)
            dy = max(abs(p.y - cy) - half_h, 0.0)
            return math.hypot(dx, dy)
    else:
        radius = (parameters.get("regionRadius", 25) / 100) * canvas.width

        def outside_distance(p: Point) -> float:
            return math.hypot(p.x - cx, p.y - cy) - radius

    def inside(p: Point) -> bool:
        d = outside_distance(p)
        if d <= 0:
            return True
        if band > 0 and d < band:
            return rng() < 1 - d / band
        return False

    return inside


def region_select_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    inside = region_test(parameters, context.canvas, context.rng)
    select_by = parameters.get("selectBy", "center")
    return split_layers(
        _input_layers(inputs),
        lambda path, _index: path_matches(path, inside, select_by),
        invert=parameters.get("invert") is True,
    )


# --- Noise Select ---

def noise_select_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
    """Select where gradient noise sampled at the path reaches the threshold."""
    threshold = parameters.get("threshold", 0.5)
    scale = parameters.get("noiseScale", 50) or 1
    seed = parameters.get("noiseSeed", 12345)
    offset_x = parameters.get("offsetX", 0)
    offset_y = parameters.get("offsetY", 0)

    def inside(p: Point) -> bool:
        value = noise2d((p.x + offset_x) / scale, (p.y + offset_y) / scale, seed)
        return value >= threshold

    select_by = parameters.get("selectBy", "center")
    return split_layers(
        _input_layers(inputs),
        lambda path, _index: path_matches(path, inside, select_by),
        invert=parameters.get("invert") is True,
    )


# --- Node Types ---

def _select_node(node_id: str, name: str, description: str, parameters, executor) -> NodeType:
    return NodeType(
        id=node_id,
        name=name,
        description=description,
        category=NodeCategory.SELECT,
        inputs=[InputDefinition("paths", "Paths", DataType.PATHS)],
        outputs=[
            OutputDefinition("selected", "Selected", DataType.PATHS),
            OutputDefinition("unselected", "Unselected", DataType.PATHS),
        ],
        parameters=parameters,
        executor=executor,
    )


RANDOM_SELECT_NODE = _select_node(
    "randomSelect",
    "Random Select",
    "Randomly selects a percentage of paths",
    [
        ParameterDefinition.number("percentage", "Percentage", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("selectSeed", "Seed", default=12345, min_value=0, max_value=99999, step=1),
        ParameterDefinition.select("mode", "Mode", options=[("paths", "Paths"), ("points", "Points")]),
    ],
    random_select_executor,
)

INDEX_SELECT_NODE = _select_node(
    "indexSelect",
    "Index Select",
    "Selects paths based on their index position",
    [
        ParameterDefinition.select(
            "mode",
            "Mode",
            options=[
                ("everyNth", "Every Nth"),
                ("range", "Range"),
                ("firstN", "First N"),
                ("lastN", "Last N"),
                ("even", "Even"),
                ("odd", "Odd"),
            ],
        ),
        ParameterDefinition.number(
            "nValue", "N Value", default=2, min_value=1, max_value=100, step=1,
            show_when=("mode", "everyNth"),
        ),
        ParameterDefinition.number(
            "nValueFirstN", "N Value", default=2, min_value=1, max_value=100, step=1,
            show_when=("mode", "firstN"),
        ),
        ParameterDefinition.number(
            "nValueLastN", "N Value", default=2, min_value=1, max_value=100, step=1,
            show_when=("mode", "lastN"),
        ),
        ParameterDefinition.number(
            "rangeStart", "Range Start", default=0, min_value=0, max_value=1000, step=1,
            show_when=("mode", "range"),
        ),
        ParameterDefinition.number(
            "rangeEnd", "Range End", default=10, min_value=0, max_value=1000, step=1,
            show_when=("mode", "range"),
        ),
        ParameterDefinition.boolean("invert", "Invert", default=False),
    ],
    index_select_executor,
)

REGION_SELECT_NODE = _select_node(
    "regionSelect",
    "Region Select",
    "Selects paths inside a circle or rectangle",
    [
        ParameterDefinition.select("shape", "Shape", options=[("circle", "Circle"), ("rectangle", "Rectangle")]),
        ParameterDefinition.number("centerX", "Center X %", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number("centerY", "Center Y %", default=50, min_value=0, max_value=100, step=1),
        ParameterDefinition.number(
            "regionRadius", "Radius %", default=25, min_value=1, max_value=100, step=1,
            show_when=("shape", "circle"),
        ),
        ParameterDefinition.number(
            "regionWidth", "Width %", default=30, min_value=1, max_value=100, step=1,
            show_when=("shape", "rectangle"),
        ),
        ParameterDefinition.number(
            "regionHeight", "Height %", default=30, min_value=1, max_value=100, step=1,
            show_when=("shape", "rectangle"),
        ),
        ParameterDefinition.number("falloff", "Falloff %", default=0, min_value=0, max_value=50, step=1),
        ParameterDefinition.boolean("invert", "Invert", default=False),
        ParameterDefinition.select("selectBy", "Select By", options=SELECT_BY_OPTIONS),
    ],
    region_select_executor,
)

NOISE_SELECT_NODE = _select_node(
    "noiseSelect",
    "Noise Select",
    "Selects paths where a noise field exceeds a threshold",
    [
        ParameterDefinition.number("threshold", "Threshold", default=0.5, min_value=0, max_value=1, step=0.01),
        ParameterDefinition.number("noiseScale", "Scale", default=50, min_value=1, max_value=500, step=1),
        ParameterDefinition.number("noiseSeed", "Seed", default=12345, min_value=0, max_value=99999, step=1),
        ParameterDefinition.number("offsetX", "Offset X", default=0, min_value=-1000, max_value=1000, step=1),
        ParameterDefinition.number("offsetY", "Offset Y", default=0, min_value=-1000, max_value=1000, step=1),
        ParameterDefinition.boolean("invert", "Invert", default=False),
        ParameterDefinition.select("selectBy", "Select By", options=SELECT_BY_OPTIONS),
    ],
    noise_select_executor,
)

SELECT_NODES = [RANDOM_SELECT_NODE, INDEX_SELECT_NODE, REGION_SELECT_NODE, NOISE_SELECT_NODE]


def register_select_nodes(registry: NodeRegistry) -> None:
    """Register all select nodes."""
    for node_type in SELECT_NODES:
        registry.register(node_type)
