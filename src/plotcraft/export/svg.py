"""
SVG Export - Serialize output layers as plotter-ready SVG.

Coordinates are written in millimetres: the viewBox spans the canvas
and exported documents carry ``mm`` width/height, so one user unit is
one millimetre on paper.
"""

from __future__ import annotations

import re

from plotcraft.core.data_types import CanvasSettings, OutputLayer, Path

DEFAULT_STROKE_WIDTH = 0.3
SVG_NAMESPACE = "http://www.w3.org/2000/svg"

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")


def fmt(value: float) -> str:
    """Format a coordinate with three decimals, trailing zeros trimmed."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def path_to_d(path: Path) -> str:
    """Path data for a polyline, empty for fewer than two points."""
    if len(path.points) < 2:
        return ""

    first = path.points[0]
    parts = [f"M{fmt(first.x)} {fmt(first.y)}"]
    parts.extend(f"L{fmt(p.x)} {fmt(p.y)}" for p in path.points[1:])
    if path.closed:
        parts.append("Z")
    return "".join(parts)


def safe_id(name: str) -> str:
    """Layer name reduced to characters valid in an XML id."""
    return _UNSAFE_ID_CHARS.sub("-", name)


def pen_label(pen_number: float) -> str:
    """Pen number as written in tags and filenames: 2.0 becomes "2"."""
    return fmt(float(pen_number))


def layer_file_stem(layer: OutputLayer) -> str:
    """Filename stem for a single-layer export, e.g. ``pen2-Layer-1``."""
    return f"pen{pen_label(layer.pen_number)}-{safe_id(layer.name)}"


def _open_svg(canvas: CanvasSettings, for_export: bool) -> str:
    width, height = fmt(canvas.width), fmt(canvas.height)
    if for_export:
        size = f'width="{width}mm" height="{height}mm"'
    else:
        size = 'width="100%" height="100%"'
    return (
        f'<svg xmlns="{SVG_NAMESPACE}" {size} '
        f'viewBox="0 0 {width} {height}" preserveAspectRatio="xMidYMid meet">\n'
    )


def _group(layer: OutputLayer, color: str, stroke_width: float, pen_tag: bool) -> str:
    pen = f' data-pen="pen-{pen_label(layer.pen_number)}"' if pen_tag else ""
    lines = [f'  <g id="{safe_id(layer.name)}"{pen}>\n']
    for path in layer.paths:
        d = path_to_d(path)
        if d:
            lines.append(
                f'    <path d="{d}" fill="none" stroke="{color}" '
                f'stroke-width="{fmt(stroke_width)}"/>\n'
            )
    lines.append("  </g>\n")
    return "".join(lines)


def build_svg(
    output_layers: list[OutputLayer],
    canvas: CanvasSettings,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
    for_export: bool = False,
) -> str:
    """
    Build one SVG document holding every non-empty output layer.

    Each layer becomes a ``<g>`` tagged with ``data-pen="pen-N"``. Preview
    documents stroke each layer in its colour and fill their container;
    export documents stroke in black at physical size.

    Args:
        output_layers: Layers to write, in pen order
        canvas: Document size in mm
        stroke_width: Stroke width in mm
        for_export: Physical size and black strokes when True

    Returns:
        SVG document text
    """
    svg = _open_svg(canvas, for_export)
    for layer in output_layers:
        if not layer.paths:
            continue
        color = "black" if for_export else layer.color
        svg += _group(layer, color, stroke_width, pen_tag=True)
    return svg + "</svg>"


def build_svg_for_layer(
    output_layers: list[OutputLayer],
    layer_name: str,
    canvas: CanvasSettings,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> str | None:
    """Export document for the first layer named ``layer_name``, None if absent or empty."""
    layer = next((lay for lay in output_layers if lay.name == layer_name), None)
    if layer is None or not layer.paths:
        return None
    return _single_layer_svg(layer, canvas, stroke_width)


def build_svg_per_layer(
    output_layers: list[OutputLayer],
    canvas: CanvasSettings,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> dict[str, tuple[str, OutputLayer]]:
    """
    Build a separate export document for each non-empty layer.

    Returns:
        Mapping of layer id to (svg text, layer). Layers sharing a name
        each keep their own entry.
    """
    result: dict[str, tuple[str, OutputLayer]] = {}
    for layer in output_layers:
        if not layer.paths:
            continue
        result[layer.id] = (_single_layer_svg(layer, canvas, stroke_width), layer)
    return result


def _single_layer_svg(layer: OutputLayer, canvas: CanvasSettings, stroke_width: float) -> str:
    return _open_svg(canvas, for_export=True) + _group(
        layer, "black", stroke_width, pen_tag=False
    ) + "</svg>"
