"""
SVG Import - Parse SVG documents into millimeter polylines.

Supports:
- <path> data with M/L/H/V/C/S/Q/T/A/Z (absolute and relative)
- Basic shapes: rect (incl. rounded), circle, ellipse, line, polyline, polygon
- Nested transforms: matrix, translate, scale, rotate, skewX, skewY
- viewBox mapping and unit-aware width/height (px, mm, cm, in, pt)
- Filtering of fill-only elements and non-rendered subtrees

Curves are flattened with the plot preparation flattener. Unparseable
documents yield an empty result rather than raising.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from plotcraft.core.data_types import Path, Point
from plotcraft.plotprep.flatten import flatten_cubic, flatten_quadratic

logger = logging.getLogger(__name__)

CURVE_TOLERANCE = 0.5

PX_TO_MM = 25.4 / 96

UNIT_TO_MM = {
    "px": PX_TO_MM,
    "mm": 1.0,
    "cm": 10.0,
    "in": 25.4,
    "pt": 25.4 / 72,
}

SKIPPED_TAGS = {
    "defs", "clippath", "mask", "style", "text", "symbol", "metadata", "title", "desc",
}

# Argument count per path command
ARG_COUNTS = {
    "M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0,
}

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_NUMBER_RE = re.compile(_NUMBER)
_LEADING_NUMBER_RE = re.compile(r"\s*(" + _NUMBER + ")")
_COMMAND_RE = re.compile(
    r"([MmZzLlHhVvCcSsQqTtAa])\s*((?:" + _NUMBER + r"[\s,]*)*)"
)
_TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]+)\)")

Matrix = tuple[float, float, float, float, float, float]  # (a, b, c, d, e, f)

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


@dataclass
class SvgParseOptions:
    """
    Import filters.

    Attributes:
        convert_shapes: Import rect/circle/ellipse elements
        ignore_fills: Skip elements that are filled but not stroked
        flatten_transforms: Apply element and group transforms
    """
    convert_shapes: bool = True
    ignore_fills: bool = True
    flatten_transforms: bool = True


@dataclass
class ViewBox:
    x: float
    y: float
    width: float
    height: float


@dataclass
class SvgParseResult:
    """Imported paths in millimeters plus document dimensions (mm)."""
    paths: list[Path] = field(default_factory=list)
    view_box: ViewBox | None = None
    width: float = 0.0
    height: float = 0.0


# --- Transform matrices ---

def multiply_matrix(a: Matrix, b: Matrix) -> Matrix:
    return (
        a[0] * b[0] + a[2] * b[1],
        a[1] * b[0] + a[3] * b[1],
        a[0] * b[2] + a[2] * b[3],
        a[1] * b[2] + a[3] * b[3],
        a[0] * b[4] + a[2] * b[5] + a[4],
        a[1] * b[4] + a[3] * b[5] + a[5],
    )


def apply_matrix(m: Matrix, p: Point) -> Point:
    return Point(m[0] * p.x + m[2] * p.y + m[4], m[1] * p.x + m[3] * p.y + m[5])


def _parse_numbers(text: str) -> list[float]:
    """Split on whitespace/commas, dropping tokens that are not numbers."""
    numbers = []
    for token in re.split(r"[\s,]+", text.strip()):
        try:
            numbers.append(float(token))
        except ValueError:
            continue
    return numbers


def parse_transform(attr: str) -> Matrix:
    """Compose every transform function in a transform attribute."""
    result = IDENTITY
    for match in _TRANSFORM_RE.finditer(attr):
        kind = match.group(1)
        args = _parse_numbers(match.group(2))
        if not args:
            continue

        m = IDENTITY
        if kind == "matrix":
            if len(args) >= 6:
                m = (args[0], args[1], args[2], args[3], args[4], args[5])
        elif kind == "translate":
            m = (1.0, 0.0, 0.0, 1.0, args[0], args[1] if len(args) > 1 else 0.0)
        elif kind == "scale":
            sx = args[0]
            sy = args[1] if len(args) > 1 else sx
            m = (sx, 0.0, 0.0, sy, 0.0, 0.0)
        elif kind == "rotate":
            angle = math.radians(args[0])
            cos = math.cos(angle)
            sin = math.sin(angle)
            if len(args) >= 3:
                cx, cy = args[1], args[2]
                m = (cos, sin, -sin, cos, cx - cos * cx + sin * cy, cy - sin * cx - cos * cy)
            else:
                m = (cos, sin, -sin, cos, 0.0, 0.0)
        elif kind == "skewX":
            m = (1.0, 0.0, math.tan(math.radians(args[0])), 1.0, 0.0, 0.0)
        elif kind == "skewY":
            m = (1.0, math.tan(math.radians(args[0])), 0.0, 1.0, 0.0, 0.0)

        result = multiply_matrix(result, m)
    return result


# --- Path data ---

def tokenize_path_data(d: str) -> list[tuple[str, list[float]]]:
    """
    Split path data into (command, args) pairs.

    Repeated argument groups expand into repeated commands; extra pairs
    after a moveto become lineto. Incomplete groups are dropped.
    """
    commands: list[tuple[str, list[float]]] = []
    for match in _COMMAND_RE.finditer(d):
        cmd = match.group(1)
        args = [float(n) for n in _NUMBER_RE.findall(match.group(2))]
        count = ARG_COUNTS[cmd.upper()]

        if count == 0:
            commands.append((cmd, []))
            continue

        for i in range(0, len(args), count):
            chunk = args[i:i + count]
            if len(chunk) < count:
                break
            if i > 0 and cmd in "Mm":
                commands.append(("L" if cmd == "M" else "l", chunk))
            else:
                commands.append((cmd, chunk))
    return commands


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    dot = ux * vx + uy * vy
    length = math.sqrt(ux * ux + uy * uy) * math.sqrt(vx * vx + vy * vy)
    if length == 0:
        return 0.0
    angle = math.acos(max(-1.0, min(1.0, dot / length)))
    if ux * vy - uy * vx < 0:
        angle = -angle
    return angle


def arc_to_points(
    x1: float, y1: float,
    rx: float, ry: float,
    x_axis_rotation: float,
    large_arc: bool,
    sweep: bool,
    x2: float, y2: float,
) -> list[Point]:
    """
    Sample an elliptical arc given in endpoint form.

    Converts to center form, scaling the radii up when they cannot span
    the endpoints, and samples at least 4 segments.
    """
    if rx == 0 or ry == 0:
        return [Point(x1, y1), Point(x2, y2)]

    rx = abs(rx)
    ry = abs(ry)
    phi = math.radians(x_axis_rotation)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    dx = (x1 - x2) / 2
    dy = (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    rx_sq = rx * rx
    ry_sq = ry * ry
    x1p_sq = x1p * x1p
    y1p_sq = y1p * y1p

    lam = x1p_sq / rx_sq + y1p_sq / ry_sq
    if lam > 1:
        root = math.sqrt(lam)
        rx *= root
        ry *= root
        rx_sq = rx * rx
        ry_sq = ry * ry

    denom = rx_sq * y1p_sq + ry_sq * x1p_sq
    if denom == 0:
        return [Point(x1, y1), Point(x2, y2)]
    sq = max(0.0, (rx_sq * ry_sq - rx_sq * y1p_sq - ry_sq * x1p_sq) / denom)
    sign = -1 if large_arc == sweep else 1
    coeff = sign * math.sqrt(sq)
    cxp = coeff * (rx * y1p / ry)
    cyp = coeff * -(ry * x1p / rx)

    ccx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    ccy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = _vector_angle(1, 0, (x1p - cxp) / rx, (y1p - cyp) / ry)
    dtheta = _vector_angle(
        (x1p - cxp) / rx, (y1p - cyp) / ry,
        (-x1p - cxp) / rx, (-y1p - cyp) / ry,
    )
    if not sweep and dtheta > 0:
        dtheta -= 2 * math.pi
    if sweep and dtheta < 0:
        dtheta += 2 * math.pi

    segments = max(4, math.ceil(abs(dtheta) / (math.pi / 8)))
    points = [Point(x1, y1)]
    for i in range(1, segments + 1):
        angle = theta1 + dtheta * (i / segments)
        px = rx * math.cos(angle)
        py = ry * math.sin(angle)
        points.append(
            Point(cos_phi * px - sin_phi * py + ccx, sin_phi * px + cos_phi * py + ccy)
        )
    return points


class _PathBuilder:
    """Executes tokenized path commands, tracking pen state."""

    def __init__(self):
        self.paths: list[Path] = []
        self.points: list[Point] = []
        self.cx = 0.0
        self.cy = 0.0
        self.sx = 0.0
        self.sy = 0.0
        self.last_control = Point(0.0, 0.0)
        self.last_cmd = ""

    def flush(self, closed: bool) -> None:
        if len(self.points) >= 2:
            self.paths.append(Path(points=self.points, closed=closed))
        self.points = []

    def move_to(self, x: float, y: float) -> None:
        self.flush(False)
        self.cx, self.cy = x, y
        self.sx, self.sy = x, y
        self.points.append(Point(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._begin()
        self.cx, self.cy = x, y
        self.points.append(Point(x, y))

    def extend(self, curve: list[Point]) -> None:
        self._begin()
        # The first point repeats the current point
        self.points.extend(curve[1:])

    def _begin(self) -> None:
        # Drawing after a closepath restarts at the subpath start
        if not self.points:
            self.points.append(Point(self.cx, self.cy))

    def reflected_control(self, smooth_after: str) -> Point:
        if self.last_cmd and self.last_cmd in smooth_after:
            return Point(2 * self.cx - self.last_control.x, 2 * self.cy - self.last_control.y)
        return Point(self.cx, self.cy)

    def run(self, commands: list[tuple[str, list[float]]]) -> list[Path]:
        for cmd, args in commands:
            self.execute(cmd, args)
            self.last_cmd = cmd
        self.flush(False)
        return self.paths

    def execute(self, cmd: str, args: list[float]) -> None:
        relative = cmd.islower()
        ox, oy = (self.cx, self.cy) if relative else (0.0, 0.0)
        op = cmd.upper()
        current = Point(self.cx, self.cy)

        if op == "M":
            self.move_to(ox + args[0], oy + args[1])
        elif op == "L":
            self.line_to(ox + args[0], oy + args[1])
        elif op == "H":
            self.line_to(ox + args[0], self.cy)
        elif op == "V":
            self.line_to(self.cx, oy + args[0])
        elif op == "C":
            c1 = Point(ox + args[0], oy + args[1])
            c2 = Point(ox + args[2], oy + args[3])
            end = Point(ox + args[4], oy + args[5])
            self.extend(flatten_cubic(current, c1, c2, end, CURVE_TOLERANCE))
            self.last_control = c2
            self.cx, self.cy = end.x, end.y
        elif op == "S":
            c1 = self.reflected_control("CcSs")
            c2 = Point(ox + args[0], oy + args[1])
            end = Point(ox + args[2], oy + args[3])
            self.extend(flatten_cubic(current, c1, c2, end, CURVE_TOLERANCE))
            self.last_control = c2
            self.cx, self.cy = end.x, end.y
        elif op == "Q":
            c = Point(ox + args[0], oy + args[1])
            end = Point(ox + args[2], oy + args[3])
            self.extend(flatten_quadratic(current, c, end, CURVE_TOLERANCE))
            self.last_control = c
            self.cx, self.cy = end.x, end.y
        elif op == "T":
            c = self.reflected_control("QqTt")
            end = Point(ox + args[0], oy + args[1])
            self.extend(flatten_quadratic(current, c, end, CURVE_TOLERANCE))
            self.last_control = c
            self.cx, self.cy = end.x, end.y
        elif op == "A":
            end_x = ox + args[5]
            end_y = oy + args[6]
            self.extend(
                arc_to_points(
                    self.cx, self.cy, args[0], args[1], args[2],
                    args[3] != 0, args[4] != 0, end_x, end_y,
                )
            )
            self.cx, self.cy = end_x, end_y
        elif op == "Z":
            self.cx, self.cy = self.sx, self.sy
            self.flush(True)


def parse_path_data(d: str) -> list[Path]:
    """Convert path data to polylines, one per subpath."""
    return _PathBuilder().run(tokenize_path_data(d))


# --- Shapes ---

def _attr_float(attrs: dict[str, str], name: str, default: float = 0.0) -> float:
    """Leading number of an attribute value, ignoring any unit suffix."""
    value = attrs.get(name)
    if not value:
        return default
    match = _LEADING_NUMBER_RE.match(value)
    return float(match.group(1)) if match else default


def parse_line(attrs: dict[str, str]) -> list[Path]:
    return [
        Path(
            points=[
                Point(_attr_float(attrs, "x1"), _attr_float(attrs, "y1")),
                Point(_attr_float(attrs, "x2"), _attr_float(attrs, "y2")),
            ],
            closed=False,
        )
    ]


def parse_polyline(attrs: dict[str, str], closed: bool = False) -> list[Path]:
    nums = [float(n) for n in _NUMBER_RE.findall(attrs.get("points", ""))]
    points = [Point(nums[i], nums[i + 1]) for i in range(0, len(nums) - 1, 2)]
    if len(points) < 2:
        return []
    return [Path(points=points, closed=closed)]


def parse_rect(attrs: dict[str, str]) -> list[Path]:
    x = _attr_float(attrs, "x")
    y = _attr_float(attrs, "y")
    w = _attr_float(attrs, "width")
    h = _attr_float(attrs, "height")
    rx = _attr_float(attrs, "rx")
    ry = _attr_float(attrs, "ry", rx)

    if w <= 0 or h <= 0:
        return []

    if rx > 0 or ry > 0:
        r = min(rx or ry, w / 2, h / 2)
        d = (
            f"M{x + r},{y} H{x + w - r} A{r},{r} 0 0 1 {x + w},{y + r} "
            f"V{y + h - r} A{r},{r} 0 0 1 {x + w - r},{y + h} "
            f"H{x + r} A{r},{r} 0 0 1 {x},{y + h - r} "
            f"V{y + r} A{r},{r} 0 0 1 {x + r},{y} Z"
        )
        return parse_path_data(d)

    return [
        Path(
            points=[Point(x, y), Point(x + w, y), Point(x + w, y + h), Point(x, y + h)],
            closed=True,
        )
    ]


def _ellipse_points(cx: float, cy: float, rx: float, ry: float, segments: int) -> list[Point]:
    points = []
    for i in range(segments):
        angle = (i / segments) * math.pi * 2
        points.append(Point(cx + math.cos(angle) * rx, cy + math.sin(angle) * ry))
    return points


def parse_circle(attrs: dict[str, str]) -> list[Path]:
    r = _attr_float(attrs, "r")
    if r <= 0:
        return []
    segments = max(16, math.ceil(2 * math.pi * r / 2))
    points = _ellipse_points(_attr_float(attrs, "cx"), _attr_float(attrs, "cy"), r, r, segments)
    return [Path(points=points, closed=True)]


def parse_ellipse(attrs: dict[str, str]) -> list[Path]:
    rx = _attr_float(attrs, "rx")
    ry = _attr_float(attrs, "ry")
    if rx <= 0 or ry <= 0:
        return []
    segments = max(16, math.ceil(math.pi * (rx + ry) / 2))
    points = _ellipse_points(_attr_float(attrs, "cx"), _attr_float(attrs, "cy"), rx, ry, segments)
    return [Path(points=points, closed=True)]


# --- Document ---

def _local_name(tag: str) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


def has_stroke(attrs: dict[str, str]) -> bool:
    stroke = attrs.get("stroke")
    style = attrs.get("style", "")
    if stroke and stroke != "none":
        return True
    return "stroke:" in style and "stroke:none" not in style and "stroke: none" not in style


def has_fill(attrs: dict[str, str]) -> bool:
    # Unspecified fill renders black
    if attrs.get("fill") == "none":
        return False
    style = attrs.get("style", "")
    return "fill:none" not in style and "fill: none" not in style


def _should_import(attrs: dict[str, str], options: SvgParseOptions) -> bool:
    if not options.ignore_fills:
        return True
    return has_stroke(attrs) or not has_fill(attrs)


def _element_paths(tag: str, attrs: dict[str, str], options: SvgParseOptions) -> list[Path]:
    if tag in ("rect", "circle", "ellipse") and not options.convert_shapes:
        return []
    if tag == "path" and not attrs.get("d"):
        return []
    if tag not in ("path", "line", "polyline", "polygon", "rect", "circle", "ellipse"):
        return []
    if not _should_import(attrs, options):
        return []

    if tag == "path":
        return parse_path_data(attrs["d"])
    if tag == "line":
        return parse_line(attrs)
    if tag == "polyline":
        return parse_polyline(attrs)
    if tag == "polygon":
        return parse_polyline(attrs, closed=True)
    if tag == "rect":
        return parse_rect(attrs)
    if tag == "circle":
        return parse_circle(attrs)
    return parse_ellipse(attrs)


def _extract_paths(
    element: ET.Element,
    parent_transform: Matrix,
    options: SvgParseOptions,
) -> list[Path]:
    local = parent_transform
    if options.flatten_transforms and element.get("transform"):
        local = multiply_matrix(parent_transform, parse_transform(element.get("transform")))

    tag = _local_name(element.tag)
    if tag in SKIPPED_TAGS:
        return []

    attrs = dict(element.attrib)
    paths = []
    for path in _element_paths(tag, attrs, options):
        path.points = [apply_matrix(local, p) for p in path.points]
        paths.append(path)

    for child in element:
        paths.extend(_extract_paths(child, local, options))
    return paths


def parse_length(value: str | None) -> float:
    """Length attribute in millimeters; 0 when missing or malformed."""
    if not value:
        return 0.0
    match = _LEADING_NUMBER_RE.match(value)
    if not match:
        return 0.0
    num = float(match.group(1))
    unit = value.strip()[-2:]
    return num * UNIT_TO_MM.get(unit, PX_TO_MM)


def _find_svg_root(root: ET.Element) -> ET.Element | None:
    if _local_name(root.tag) == "svg":
        return root
    for element in root.iter():
        if _local_name(element.tag) == "svg":
            return element
    return None


def parse_svg(svg_content: str, options: SvgParseOptions | None = None) -> SvgParseResult:
    """
    Parse an SVG document into polylines in millimeters.

    The viewBox is mapped onto the document's width/height. Without a
    viewBox, user units are CSS pixels.

    Args:
        svg_content: SVG document text
        options: Import filters (defaults: all enabled)

    Returns:
        SvgParseResult; empty when the document cannot be parsed
    """
    options = options or SvgParseOptions()
    try:
        root = ET.fromstring(svg_content)
    except ET.ParseError as e:
        logger.warning(f"Could not parse SVG: {e}")
        return SvgParseResult()

    svg = _find_svg_root(root)
    if svg is None:
        logger.warning("SVG document has no <svg> element")
        return SvgParseResult()

    view_box = None
    raw_view_box = svg.get("viewBox") or svg.get("viewbox")
    if raw_view_box:
        vb = _parse_numbers(raw_view_box)
        if len(vb) == 4 and vb[2] > 0 and vb[3] > 0:
            view_box = ViewBox(vb[0], vb[1], vb[2], vb[3])

    width = (
        parse_length(svg.get("width"))
        or (view_box.width * PX_TO_MM if view_box else 0)
        or 100 * PX_TO_MM
    )
    height = (
        parse_length(svg.get("height"))
        or (view_box.height * PX_TO_MM if view_box else 0)
        or 100 * PX_TO_MM
    )

    if view_box:
        sx = width / view_box.width
        sy = height / view_box.height
        base: Matrix = (sx, 0.0, 0.0, sy, -view_box.x * sx, -view_box.y * sy)
    else:
        base = (PX_TO_MM, 0.0, 0.0, PX_TO_MM, 0.0, 0.0)

    paths = _extract_paths(svg, base, options)
    logger.debug(f"Imported {len(paths)} path(s) from SVG ({width:.1f}x{height:.1f}mm)")
    return SvgParseResult(paths=paths, view_box=view_box, width=width, height=height)
