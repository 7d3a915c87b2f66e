"""
Tests for SVG export.
"""

from plotcraft.core.data_types import CanvasSettings, OutputLayer, Path, Point
from plotcraft.export import build_svg, build_svg_for_layer, build_svg_per_layer, fmt, path_to_d
from plotcraft.export.svg import layer_file_stem, pen_label, safe_id

CANVAS = CanvasSettings(210, 297)


def layer(name: str = "Layer 1", pen: int = 1, color: str = "#E53935", paths=None) -> OutputLayer:
    if paths is None:
        paths = [Path([Point(0, 0), Point(10, 10)])]
    return OutputLayer(id=name, name=name, color=color, pen_number=pen, paths=paths)


class TestFormatting:
    def test_trailing_zeros_trimmed(self):
        assert fmt(10.0) == "10"
        assert fmt(1.5) == "1.5"
        assert fmt(0.1234) == "0.123"

    def test_negative_zero(self):
        assert fmt(-0.0001) == "0"

    def test_path_data(self):
        path = Path([Point(0, 0), Point(1.25, 2), Point(3, 4.5)])
        assert path_to_d(path) == "M0 0L1.25 2L3 4.5"

    def test_closed_path_data(self):
        path = Path([Point(0, 0), Point(1, 0), Point(1, 1)], closed=True)
        assert path_to_d(path).endswith("Z")

    def test_degenerate_path(self):
        assert path_to_d(Path([Point(1, 1)])) == ""

    def test_safe_id(self):
        assert safe_id("Pen 1 (red)") == "Pen-1--red-"


class TestBuildSvg:
    def test_preview_uses_layer_color(self):
        svg = build_svg([layer()], CANVAS)
        assert 'stroke="#E53935"' in svg
        assert 'width="100%"' in svg
        assert 'viewBox="0 0 210 297"' in svg

    def test_export_is_black_at_physical_size(self):
        svg = build_svg([layer()], CANVAS, for_export=True)
        assert 'stroke="black"' in svg
        assert 'width="210mm" height="297mm"' in svg

    def test_groups_tagged_with_pen(self):
        svg = build_svg([layer("A", 1), layer("B", 3)], CANVAS)
        assert 'data-pen="pen-1"' in svg
        assert 'data-pen="pen-3"' in svg
        assert svg.index('id="A"') < svg.index('id="B"')

    def test_empty_layers_skipped(self):
        svg = build_svg([layer("Empty", paths=[])], CANVAS)
        assert "<g" not in svg
        assert svg.endswith("</svg>")

    def test_paths_unfilled(self):
        svg = build_svg([layer()], CANVAS)
        assert 'fill="none"' in svg
        assert 'stroke-width="0.3"' in svg


class TestPerLayer:
    def test_single_layer_by_name(self):
        svg = build_svg_for_layer([layer("A"), layer("B")], "B", CANVAS)
        assert 'id="B"' in svg
        assert 'id="A"' not in svg
        assert "data-pen" not in svg

    def test_missing_or_empty_layer(self):
        assert build_svg_for_layer([layer("A")], "Z", CANVAS) is None
        assert build_svg_for_layer([layer("A", paths=[])], "A", CANVAS) is None

    def test_per_layer_mapping(self):
        result = build_svg_per_layer([layer("A", 1), layer("B", 2), layer("C", 3, paths=[])], CANVAS)
        assert set(result) == {"A", "B"}
        svg, source = result["B"]
        assert source.pen_number == 2
        assert 'stroke="black"' in svg

    def test_layers_sharing_a_name_kept_apart(self):
        first = OutputLayer(id="out-a", name="Layer 1", pen_number=1, paths=[Path([Point(0, 0), Point(5, 5)])])
        second = OutputLayer(id="out-b", name="Layer 1", pen_number=2, paths=[Path([Point(0, 0), Point(5, 5)])])
        result = build_svg_per_layer([first, second], CANVAS)
        assert set(result) == {"out-a", "out-b"}
        assert [layer_file_stem(source) for _, source in result.values()] == ["pen1-Layer-1", "pen2-Layer-1"]


class TestPenLabel:
    def test_integral_float_drops_decimal(self):
        assert pen_label(2.0) == "2"
        assert pen_label(3) == "3"

    def test_fractional_pen_kept(self):
        assert pen_label(1.5) == "1.5"

    def test_group_tag_uses_label(self):
        svg = build_svg([layer("A", 2.0)], CANVAS)
        assert 'data-pen="pen-2"' in svg
