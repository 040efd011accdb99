"""
Grid Constants and Geometry Primitives

Grid snapping, pin position resolution and point/segment tests. All
functions are pure; points are ``(x, y)`` tuples and wire polylines are
flat coordinate lists ``[x1, y1, x2, y2, ...]``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from .library import ComponentLibrary
    from .models import ComponentInstance

# Default grid unit for committed geometry
GRID_SIZE = 20

# Exact (cos, sin) for the quarter turns so pin positions stay on the grid
_QUARTER_TURNS = {
    0: (1, 0),
    90: (0, 1),
    180: (-1, 0),
    270: (0, -1),
}


def snap_to_grid(value: float, grid: float = GRID_SIZE) -> float:
    """Snap a coordinate to the nearest grid point.

    Args:
        value: Coordinate value in model units
        grid: Grid spacing (default: 20)

    Returns:
        Nearest multiple of ``grid``; halfway values round up
    """
    return math.floor(value / grid + 0.5) * grid


def snap_point(point: tuple[float, float], grid: float = GRID_SIZE) -> tuple[float, float]:
    """Snap a point (x, y) to the nearest grid intersection."""
    return (snap_to_grid(point[0], grid), snap_to_grid(point[1], grid))


def is_on_grid(value: float, grid: float = GRID_SIZE, tolerance: float = 0.001) -> bool:
    """Check if a coordinate is on the grid.

    Args:
        value: Coordinate value to check
        grid: Grid spacing
        tolerance: Allowed deviation from grid

    Returns:
        True if value is within tolerance of a grid point
    """
    remainder = abs(value % grid)
    return remainder < tolerance or (grid - remainder) < tolerance


def point_on_segment(
    point: tuple[float, float], seg_start: tuple[float, float], seg_end: tuple[float, float]
) -> bool:
    """Check if a point lies on a line segment.

    Bounding-box pre-check with one unit of slack, then a cross-product
    collinearity test with a tolerance below one unit. Endpoints count as
    on the segment.
    """
    px, py = point
    x1, y1 = seg_start
    x2, y2 = seg_end

    if px < min(x1, x2) - 1 or px > max(x1, x2) + 1:
        return False
    if py < min(y1, y2) - 1 or py > max(y1, y2) + 1:
        return False
    return abs((y2 - y1) * (px - x1) - (x2 - x1) * (py - y1)) < 1


def rotate_offset(dx: float, dy: float, rotation: float) -> tuple[float, float]:
    """Rotate an offset clockwise on screen (Y-down) by ``rotation`` degrees."""
    quarter = _QUARTER_TURNS.get(int(rotation) % 360) if float(rotation).is_integer() else None
    if quarter is not None:
        cos_r, sin_r = quarter
    else:
        rad = math.radians(rotation)
        cos_r, sin_r = math.cos(rad), math.sin(rad)
    return (dx * cos_r - dy * sin_r, dx * sin_r + dy * cos_r)


def absolute_pin_position(
    component: ComponentInstance, pin_id: str, library: ComponentLibrary | None = None
) -> tuple[float, float]:
    """Get the canvas position of a component pin.

    The local pin offset is taken relative to the bounding-box centre,
    mirrored (X negated) when the instance is mirrored, rotated, and then
    translated back by the centre and the instance origin.

    Unknown types or pins fall back to the component origin. Use
    :meth:`ComponentLibrary.resolve_pin` when the caller needs to tell the
    fallback apart from a real position.

    Args:
        component: Placed component instance
        pin_id: Pin identifier within the component's type
        library: Type library (default: the built-in library)

    Returns:
        (x, y) tuple of the absolute pin position
    """
    if library is None:
        from .library import default_library

        library = default_library()

    definition = library.get(component.type)
    if definition is None:
        return (component.x, component.y)
    pin = definition.pin(pin_id)
    if pin is None:
        return (component.x, component.y)

    cx = definition.width / 2
    cy = definition.height / 2
    scale_x = -1 if component.mirrored else 1
    rx, ry = rotate_offset((pin.x - cx) * scale_x, pin.y - cy, component.rotation)
    return (component.x + cx + rx, component.y + cy + ry)


def iter_points(points: list[float]) -> Iterator[tuple[float, float]]:
    """Iterate a flat coordinate list as (x, y) tuples."""
    for i in range(0, len(points) - 1, 2):
        yield (points[i], points[i + 1])


def iter_segments(
    points: list[float],
) -> Iterator[tuple[int, tuple[float, float], tuple[float, float]]]:
    """Iterate a flat polyline as ``(index, start, end)`` runs.

    ``index`` is the position of the run's first coordinate in ``points``.
    """
    for i in range(0, len(points) - 3, 2):
        yield i, (points[i], points[i + 1]), (points[i + 2], points[i + 3])


def start_point(points: list[float]) -> tuple[float, float]:
    """First vertex of a flat polyline."""
    return (points[0], points[1])


def end_point(points: list[float]) -> tuple[float, float]:
    """Last vertex of a flat polyline."""
    return (points[-2], points[-1])


def is_orthogonal(points: list[float]) -> bool:
    """True if every run of the polyline is horizontal or vertical."""
    for _, (x1, y1), (x2, y2) in iter_segments(points):
        if x1 != x2 and y1 != y2:
            return False
    return True
