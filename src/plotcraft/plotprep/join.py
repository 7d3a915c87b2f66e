"""
Path joining - Merge paths whose endpoints touch within a tolerance.

Joining removes pen lifts between consecutive strokes. Joined paths
whose ends meet are marked closed.
"""

from __future__ import annotations

from plotcraft.core.data_types import Layer, Path
from plotcraft.engine.geometry import distance


def concatenate_paths(path1: Path, path2: Path) -> Path:
    """Append path2 to path1, dropping path2's first point."""
    return Path(
        points=path1.points + path2.points[1:],
        closed=path1.closed or path2.closed,
    )


def check_if_closed(path: Path, tolerance: float) -> Path:
    """Mark a path closed when its ends meet, removing the duplicate end."""
    if len(path.points) < 3:
        return path
    if distance(path.start, path.end) <= tolerance:
        return Path(points=path.points[:-1], closed=True)
    return path


def join_paths(paths: list[Path], tolerance: float) -> list[Path]:
    """
    Join paths within one layer.

    Each path is grown greedily. Candidates are tried in list order and
    the first matching orientation wins:

    1. current end to candidate start
    2. current end to candidate end (candidate reversed)
    3. candidate end to current start (candidate prepended)
    4. candidate start to current start (candidate reversed and prepended)
    """
    working = [p.copy() for p in paths if p.points]
    used: set[int] = set()
    result: list[Path] = []

    for i, path in enumerate(working):
        if i in used:
            continue
        current = path
        used.add(i)
        changed = True

        while changed:
            changed = False
            current_start = current.start
            current_end = current.end

            for j, candidate in enumerate(working):
                if j in used:
                    continue
                if distance(current_end, candidate.start) <= tolerance:
                    current = concatenate_paths(current, candidate)
                elif distance(current_end, candidate.end) <= tolerance:
                    current = concatenate_paths(current, candidate.reversed())
                elif distance(candidate.end, current_start) <= tolerance:
                    current = concatenate_paths(candidate, current)
                elif distance(candidate.start, current_start) <= tolerance:
                    current = concatenate_paths(candidate.reversed(), current)
                else:
                    continue
                used.add(j)
                changed = True
                break

        result.append(check_if_closed(current, tolerance))

    return result


def join_layers(layers: list[Layer], tolerance: float) -> list[Layer]:
    if tolerance < 0:
        raise ValueError("Join tolerance must be non-negative")
    return [Layer(id=layer.id, paths=join_paths(layer.paths, tolerance)) for layer in layers]
