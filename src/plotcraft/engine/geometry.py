"""
Geometry Kernel - Point and path primitives used by every node.

Provides:
- Construction helpers (lines, circles, rectangles)
- Affine helpers (translate, rotate, scale about a center)
- Segment intersection and clipping against rectangles and circles
- Path bounds and centroids
- A seeded 2D gradient noise function

All coordinates are millimeters. Degenerate inputs (zero-length
segments, parallel lines) return "no intersection" instead of
propagating NaN.
"""

from __future__ import annotations

import math

import numpy as np

from plotcraft.core.data_types import Path, Point

# Tolerances for degenerate intersection math
PARALLEL_EPSILON = 0.0001
MIN_EDGE_DISTANCE = 0.001


# --- Construction ---

def create_point(x: float, y: float) -> Point:
    return Point(x, y)


def create_path(points: list[Point], closed: bool = False) -> Path:
    return Path(points=list(points), closed=closed)


def create_line_path(x1: float, y1: float, x2: float, y2: float) -> Path:
    return Path(points=[Point(x1, y1), Point(x2, y2)], closed=False)


def create_circle_path(cx: float, cy: float, r: float, segments: int = 64) -> Path:
    """Circle as segments + 1 points, the last repeating the first."""
    points = []
    for i in range(segments + 1):
        angle = (i / segments) * math.pi * 2
        points.append(Point(cx + math.cos(angle) * r, cy + math.sin(angle) * r))
    return Path(points=points, closed=True)


def create_rect_path(x: float, y: float, w: float, h: float) -> Path:
    return Path(
        points=[
            Point(x, y),
            Point(x + w, y),
            Point(x + w, y + h),
            Point(x, y + h),
            Point(x, y),
        ],
        closed=True,
    )


# --- Scalar helpers ---

def distance(p1: Point, p2: Point) -> float:
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    return math.sqrt(dx * dx + dy * dy)


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# --- Transforms ---

def translate_point(p: Point, dx: float, dy: float) -> Point:
    return Point(p.x + dx, p.y + dy)


def rotate_point(p: Point, angle: float, cx: float = 0.0, cy: float = 0.0) -> Point:
    """Rotate a point by angle (radians) about (cx, cy)."""
    cos = math.cos(angle)
    sin = math.sin(angle)
    dx = p.x - cx
    dy = p.y - cy
    return Point(cx + dx * cos - dy * sin, cy + dx * sin + dy * cos)


def scale_point(p: Point, sx: float, sy: float, cx: float = 0.0, cy: float = 0.0) -> Point:
    return Point(cx + (p.x - cx) * sx, cy + (p.y - cy) * sy)


def translate_path(path: Path, dx: float, dy: float) -> Path:
    return Path([translate_point(p, dx, dy) for p in path.points], path.closed)


def rotate_path(path: Path, angle: float, cx: float = 0.0, cy: float = 0.0) -> Path:
    return Path([rotate_point(p, angle, cx, cy) for p in path.points], path.closed)


def scale_path(
    path: Path, sx: float, sy: float, cx: float = 0.0, cy: float = 0.0
) -> Path:
    return Path([scale_point(p, sx, sy, cx, cy) for p in path.points], path.closed)


# --- Measurement ---

def path_centroid(path: Path) -> Point:
    """Average of the path's points; origin for an empty path."""
    if not path.points:
        return Point(0.0, 0.0)
    sum_x = 0.0
    sum_y = 0.0
    for p in path.points:
        sum_x += p.x
        sum_y += p.y
    n = len(path.points)
    return Point(sum_x / n, sum_y / n)


def paths_bounds(paths: list[Path]) -> tuple[float, float, float, float] | None:
    """
    Axis-aligned bounds of all points as (min_x, min_y, max_x, max_y).

    Returns None when there are no points.
    """
    coords = [(p.x, p.y) for path in paths for p in path.points]
    if not coords:
        return None
    arr = np.asarray(coords, dtype=np.float64)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


# --- Intersection & clipping ---

def line_intersection(
    x1: float, y1: float, x2: float, y2: float,
    x3: float, y3: float, x4: float, y4: float,
) -> Point | None:
    """
    Intersection of segments (x1,y1)-(x2,y2) and (x3,y3)-(x4,y4).

    Returns None for parallel or non-overlapping segments.
    """
    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPSILON:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0 <= t <= 1 and 0 <= u <= 1:
        return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def _split_by_region(path: Path, inside, intersect) -> list[Path]:
    """
    Walk a path segment by segment, keeping the runs that lie inside
    a region. Boundary crossings are replaced with intersection points.
    """
    result: list[Path] = []
    current: list[Point] = []
    prev: Point | None = None
    prev_in = False

    for curr in path.points:
        curr_in = inside(curr)
        if curr_in:
            if prev is not None and not prev_in:
                crossing = intersect(prev, curr)
                if crossing is not None:
                    current.append(crossing)
            current.append(curr)
        elif prev is not None and prev_in:
            crossing = intersect(prev, curr)
            if crossing is not None:
                current.append(crossing)
            if len(current) >= 2:
                result.append(Path(points=current, closed=False))
            current = []
        prev = curr
        prev_in = curr_in

    if len(current) >= 2:
        result.append(Path(points=current, closed=False))
    return result


def clip_path_to_rect(path: Path, rx: float, ry: float, rw: float, rh: float) -> list[Path]:
    """
    Clip a path to an axis-aligned rectangle.

    Each inside run becomes its own open path. Bounds are inclusive.
    """
    edges = [
        (rx, ry, rx + rw, ry),              # top
        (rx + rw, ry, rx + rw, ry + rh),    # right
        (rx, ry + rh, rx + rw, ry + rh),    # bottom
        (rx, ry, rx, ry + rh),              # left
    ]

    def inside(p: Point) -> bool:
        return rx <= p.x <= rx + rw and ry <= p.y <= ry + rh

    def intersect(p1: Point, p2: Point) -> Point | None:
        closest: Point | None = None
        min_dist = math.inf
        for ex1, ey1, ex2, ey2 in edges:
            pt = line_intersection(p1.x, p1.y, p2.x, p2.y, ex1, ey1, ex2, ey2)
            if pt is not None:
                d = distance(p1, pt)
                if MIN_EDGE_DISTANCE < d < min_dist:
                    min_dist = d
                    closest = pt
        return closest

    return _split_by_region(path, inside, intersect)


def circle_intersection(p1: Point, p2: Point, center: Point, radius: float) -> Point | None:
    """
    Point where segment p1-p2 crosses a circle.

    Prefers a solution inside the segment; otherwise the nearest
    clamped solution. Returns None when the line misses the circle.
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    fx = p1.x - center.x
    fy = p1.y - center.y

    a = dx * dx + dy * dy
    if a == 0:
        return None
    b = 2 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None

    sqrt_disc = math.sqrt(discriminant)
    t1 = (-b - sqrt_disc) / (2 * a)
    t2 = (-b + sqrt_disc) / (2 * a)

    if 0 <= t1 <= 1:
        t = t1
    elif 0 <= t2 <= 1:
        t = t2
    else:
        d1 = min(abs(t1), abs(t1 - 1))
        d2 = min(abs(t2), abs(t2 - 1))
        t = clamp(t1, 0, 1) if d1 < d2 else clamp(t2, 0, 1)

    return Point(p1.x + t * dx, p1.y + t * dy)


def clip_path_to_circle(
    path: Path, center: Point, radius: float, invert: bool = False
) -> list[Path]:
    """Clip a path to the inside of a circle, or the outside when inverted."""

    def inside(p: Point) -> bool:
        d = distance(p, center)
        return d > radius if invert else d <= radius

    def intersect(p1: Point, p2: Point) -> Point | None:
        return circle_intersection(p1, p2, center, radius)

    return _split_by_region(path, inside, intersect)


# --- Noise ---

def _to_int32(value: float | int) -> int:
    """Wrap a number to a signed 32-bit integer (truncating floats)."""
    n = int(value) & 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def _noise_hash(xi: int, yi: int, seed: float) -> int:
    h = seed + xi * 374761393 + yi * 668265263
    h32 = _to_int32(h)
    # The multiply runs in double precision before wrapping
    h = float(h32 ^ (h32 >> 13)) * 1274126177.0
    h32 = _to_int32(h)
    return h32 ^ (h32 >> 16)


def _grad(hash_value: int, dx: float, dy: float) -> float:
    h = hash_value & 7
    u = dx if h < 4 else dy
    v = dy if h < 4 else dx
    return (-u if h & 1 else u) + (-2 * v if h & 2 else 2 * v)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def noise2d(x: float, y: float, seed: float) -> float:
    """
    Seeded 2D gradient noise.

    Hashed integer lattice, quintic fade and per-corner gradient
    selection. Output is centered on 0.5.
    """
    xi = math.floor(x)
    yi = math.floor(y)
    xf = x - xi
    yf = y - yi

    u = _fade(xf)
    v = _fade(yf)

    n00 = _grad(_noise_hash(xi, yi, seed), xf, yf)
    n10 = _grad(_noise_hash(xi + 1, yi, seed), xf - 1, yf)
    n01 = _grad(_noise_hash(xi, yi + 1, seed), xf, yf - 1)
    n11 = _grad(_noise_hash(xi + 1, yi + 1, seed), xf - 1, yf - 1)

    nx0 = lerp(n00, n10, u)
    nx1 = lerp(n01, n11, u)

    return lerp(nx0, nx1, v) * 0.5 + 0.5


def fbm_noise(x: float, y: float, scale: float, octaves: int, seed: float) -> float:
    """Fractal sum of noise2d octaves, normalized back to [0, 1]."""
    value = 0.0
    amplitude = 1.0
    frequency = scale
    max_value = 0.0
    for i in range(int(octaves)):
        value += noise2d(x * frequency, y * frequency, seed + i * 100) * amplitude
        max_value += amplitude
        amplitude *= 0.5
        frequency *= 2
    return value / max_value if max_value else 0.0
