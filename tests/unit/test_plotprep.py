"""
Tests for the plot preparation stages: simplify, join, order, stats.
"""

import pytest

from plotcraft.core.data_types import Layer, OutputLayer, Path, Point
from plotcraft.plotprep import optimize_layers, optimize_output_layers, optimize_per_pen
from plotcraft.plotprep.join import check_if_closed, join_layers, join_paths
from plotcraft.plotprep.order import ORDERED_LAYER_ID, order_layers, order_paths
from plotcraft.plotprep.simplify import perpendicular_distance, rdp_simplify, simplify_layers
from plotcraft.plotprep.stats import (
    calculate_draw_distance,
    calculate_stats,
    calculate_travel_distance,
)
from plotcraft.plotprep.types import OptimizationSettings


def line(*coords: float) -> Path:
    pts = [Point(coords[i], coords[i + 1]) for i in range(0, len(coords), 2)]
    return Path(points=pts)


class TestSimplify:
    def test_perpendicular_distance(self):
        assert perpendicular_distance(Point(5, 3), Point(0, 0), Point(10, 0)) == 3

    def test_degenerate_line_uses_point_distance(self):
        assert perpendicular_distance(Point(3, 4), Point(0, 0), Point(0, 0)) == 5

    def test_collinear_points_removed(self):
        points = [Point(i, 0) for i in range(10)]
        assert rdp_simplify(points, 0.1) == [Point(0, 0), Point(9, 0)]

    def test_corner_kept(self):
        points = [Point(0, 0), Point(5, 5), Point(10, 0)]
        assert rdp_simplify(points, 0.1) == points

    def test_short_lists_unchanged(self):
        points = [Point(0, 0), Point(1, 1)]
        assert rdp_simplify(points, 10) is points

    def test_idempotent(self):
        points = [Point(i, (i % 3) * 0.4) for i in range(30)]
        once = rdp_simplify(points, 0.5)
        assert rdp_simplify(once, 0.5) == once

    def test_monotonic_in_epsilon(self):
        points = [Point(i, (i * 7 % 5) * 0.3) for i in range(40)]
        counts = [len(rdp_simplify(points, eps)) for eps in (0.0, 0.2, 0.5, 1.0, 2.0)]
        assert counts == sorted(counts, reverse=True)

    def test_endpoints_preserved(self):
        points = [Point(i, (i % 2) * 0.01) for i in range(20)]
        result = rdp_simplify(points, 1)
        assert result[0] == points[0]
        assert result[-1] == points[-1]

    def test_layers_drop_degenerate_paths(self):
        layers = [Layer("a", [line(0, 0, 1, 1), Path([Point(0, 0)])])]
        result = simplify_layers(layers, 0.1)
        assert len(result[0].paths) == 1

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError):
            simplify_layers([], -1)


class TestJoin:
    def test_end_to_start(self):
        result = join_paths([line(0, 0, 1, 0), line(1, 0, 2, 0)], 0.5)
        assert len(result) == 1
        assert result[0].points == [Point(0, 0), Point(1, 0), Point(2, 0)]

    def test_end_to_end_reverses_candidate(self):
        result = join_paths([line(0, 0, 1, 0), line(2, 0, 1, 0)], 0.5)
        assert result[0].points == [Point(0, 0), Point(1, 0), Point(2, 0)]

    def test_prepend(self):
        result = join_paths([line(1, 0, 2, 0), line(0, 0, 1, 0)], 0.5)
        assert result[0].points == [Point(0, 0), Point(1, 0), Point(2, 0)]

    def test_start_to_start(self):
        result = join_paths([line(1, 0, 2, 0), line(1, 0, 0, 0)], 0.5)
        assert result[0].points == [Point(0, 0), Point(1, 0), Point(2, 0)]

    def test_far_paths_untouched(self):
        result = join_paths([line(0, 0, 1, 0), line(5, 5, 6, 6)], 0.5)
        assert len(result) == 2

    def test_closure_detected(self):
        square = [line(0, 0, 10, 0), line(10, 0, 10, 10), line(10, 10, 0, 10), line(0, 10, 0, 0)]
        result = join_paths(square, 0.1)
        assert len(result) == 1
        assert result[0].closed is True
        assert len(result[0].points) == 4

    def test_check_if_closed_needs_three_points(self):
        path = line(0, 0, 0, 0)
        assert check_if_closed(path, 1) is path

    def test_empty_paths_skipped(self):
        assert join_paths([Path(), line(0, 0, 1, 1)], 0.1) == [line(0, 0, 1, 1)]

    def test_layers_stay_separate(self):
        layers = [Layer("a", [line(0, 0, 1, 0)]), Layer("b", [line(1, 0, 2, 0)])]
        result = join_layers(layers, 0.5)
        assert [len(layer.paths) for layer in result] == [1, 1]

    def test_negative_tolerance_rejected(self):
        with pytest.raises(ValueError):
            join_layers([], -0.1)


class TestOrder:
    def test_trivial(self):
        path = line(5, 5, 6, 6)
        assert order_paths([path]) == [path]

    def test_nearest_first(self):
        far = line(50, 50, 60, 60)
        near = line(1, 1, 2, 2)
        assert order_paths([far, near]) == [near, far]

    def test_reverses_when_end_is_closer(self):
        result = order_paths([line(10, 10, 1, 1)])
        assert result[0].points[0] == Point(10, 10)
        result = order_paths([line(10, 10, 1, 1), line(20, 20, 30, 30)])
        assert result[0].points[0] == Point(1, 1)

    def test_ties_keep_first_found(self):
        a = line(1, 0, 5, 0)
        b = line(0, 1, 0, 5)
        assert order_paths([a, b])[0] is a

    def test_layers_merge_into_one(self):
        layers = [Layer("a", [line(9, 9, 10, 10)]), Layer("b", [line(0, 0, 1, 1)])]
        result = order_layers(layers)
        assert len(result) == 1
        assert result[0].id == ORDERED_LAYER_ID
        assert result[0].paths[0].points[0] == Point(0, 0)

    def test_empty_layers(self):
        assert order_layers([Layer("a")]) == []


class TestStats:
    def test_draw_distance(self):
        assert calculate_draw_distance([line(0, 0, 3, 4, 3, 0)]) == pytest.approx(9)

    def test_travel_distance_from_origin(self):
        paths = [line(3, 4, 10, 4), line(10, 0, 20, 0)]
        assert calculate_travel_distance(paths) == pytest.approx(5 + 4)

    def test_travel_empty(self):
        assert calculate_travel_distance([]) == 0.0

    def test_stats_counts_and_time(self):
        before = [Layer("a", [line(0, 0, 1, 0, 2, 0), line(2, 0, 4, 0)])]
        after = [Layer("a", [line(0, 0, 4, 0)])]
        stats = calculate_stats(before, after, plot_speed=2)
        assert stats.path_count_before == 2
        assert stats.path_count_after == 1
        assert stats.point_count_before == 5
        assert stats.point_count_after == 2
        assert stats.draw_distance == pytest.approx(4)
        assert stats.travel_distance == pytest.approx(0)
        assert stats.estimated_time == pytest.approx(2)

    def test_non_positive_speed_rejected(self):
        with pytest.raises(ValueError):
            calculate_stats([], [], 0)


class TestPipeline:
    def test_settings_defaults(self):
        settings = OptimizationSettings()
        assert settings.to_dict() == {
            "simplify_enabled": True,
            "simplify_tolerance": 0.1,
            "join_enabled": True,
            "join_tolerance": 0.5,
            "order_enabled": True,
            "flatten_tolerance": 0.2,
        }

    def test_settings_reject_negative_tolerance(self):
        with pytest.raises(ValueError):
            OptimizationSettings(join_tolerance=-1)

    def test_settings_round_trip(self):
        settings = OptimizationSettings(simplify_enabled=False, join_tolerance=1.5)
        assert OptimizationSettings.from_dict(settings.to_dict()) == settings

    def test_all_stages_disabled_is_identity(self):
        layers = [Layer("a", [line(5, 5, 0, 0), line(0, 0, 1, 1, 2, 2)])]
        settings = OptimizationSettings(
            simplify_enabled=False, join_enabled=False, order_enabled=False
        )
        result = optimize_layers(layers, settings)
        assert result.layers == layers

    def test_full_pipeline(self):
        layers = [Layer("a", [line(0, 0, 1, 0, 2, 0), line(2, 0, 3, 0)])]
        result = optimize_layers(layers)
        assert len(result.layers) == 1
        # Simplify runs before join, so the shared vertex survives
        assert result.layers[0].paths[0].points == [Point(0, 0), Point(2, 0), Point(3, 0)]
        assert result.stats.path_count_before == 2
        assert result.stats.path_count_after == 1

    def test_output_layers_keep_pen_metadata(self):
        output = OutputLayer("n1", "Red", "#E53935", 2, True, [line(0, 0, 1, 1)])
        result = optimize_output_layers([output])
        assert result.output_layers[0].name == "Red"
        assert result.output_layers[0].pen_number == 2

    def test_per_pen_never_mixes_pens(self):
        pen1 = OutputLayer("n1", "A", "#000000", 1, True, [line(50, 50, 60, 60)])
        pen2 = OutputLayer("n2", "B", "#E53935", 2, True, [line(0, 0, 1, 1)])
        result = optimize_per_pen([pen1, pen2])
        assert [layer.name for layer in result.output_layers] == ["A", "B"]
        assert result.output_layers[0].paths[0].points[0] == Point(50, 50)
        assert result.stats.path_count_before == 2
