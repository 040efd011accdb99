"""
Wire Canonicalization

Keeps wire polylines minimal: no zero-length runs, no redundant collinear
vertices, no wires with fewer than two distinct points. Also inserts
T-junction vertices into existing wires and turns transient diagonal runs
back into orthogonal corners.

Connection anchors are the points other geometry attaches to (wire
endpoints, component pins). A collinear vertex sitting on an anchor is a
T-junction and survives canonicalization.
"""

from __future__ import annotations

import logging
from typing import Collection, Iterable, Optional

from .geometry import end_point, iter_points, iter_segments, point_on_segment, start_point
from .models import WireSegment

logger = logging.getLogger(__name__)


def merge_collinear(
    points: list[float], anchors: Collection[tuple[float, float]] = ()
) -> list[float]:
    """Reduce a flat polyline to its minimal vertex list.

    Repeatedly drops points that duplicate their predecessor and vertices
    that continue the horizontal or vertical line of the run before them,
    until nothing changes. The first and last points are never dropped.

    An anchor vertex is kept only while it lies strictly between its two
    collinear neighbours. A vertex where the wire doubles back on itself is
    always dropped, anchor or not.

    Args:
        points: Flat coordinate list
        anchors: Vertices that are kept even when collinear

    Returns:
        New flat coordinate list
    """
    if len(points) < 4:
        return list(points)

    current = list(points)
    changed = True
    while changed:
        changed = False
        merged = [current[0], current[1]]
        for x, y in iter_points(current[2:]):
            lx, ly = merged[-2], merged[-1]

            if x == lx and y == ly:
                changed = True
                continue

            if len(merged) >= 4:
                px, py = merged[-4], merged[-3]
                if py == ly == y:
                    keep = (lx, ly) in anchors and _strictly_between(px, lx, x)
                elif px == lx == x:
                    keep = (lx, ly) in anchors and _strictly_between(py, ly, y)
                else:
                    keep = True
                if not keep:
                    merged[-2] = x
                    merged[-1] = y
                    changed = True
                    continue

            merged.extend((x, y))
        current = merged
    return current


def _strictly_between(a: float, value: float, b: float) -> bool:
    return min(a, b) < value < max(a, b)


def has_distinct_points(points: list[float]) -> bool:
    """True if the polyline has at least two distinct points."""
    first = start_point(points) if len(points) >= 2 else None
    return any(p != first for p in iter_points(points))


def connection_anchors(wires: Iterable[WireSegment]) -> set[tuple[float, float]]:
    """Start and end points of every wire."""
    anchors: set[tuple[float, float]] = set()
    for wire in wires:
        if len(wire.points) >= 2:
            anchors.add(start_point(wire.points))
            anchors.add(end_point(wire.points))
    return anchors


def canonicalize_all(
    wires: Iterable[WireSegment], anchors: Optional[Collection[tuple[float, float]]] = None
) -> list[WireSegment]:
    """Merge collinear runs in every wire and drop degenerate wires.

    Args:
        wires: Wires to normalize; they are not modified
        anchors: Vertices to keep; defaults to the endpoints of ``wires``

    Returns:
        New list of wire copies, each with at least two distinct points
    """
    wires = list(wires)
    if anchors is None:
        anchors = connection_anchors(wires)

    result: list[WireSegment] = []
    for wire in wires:
        points = merge_collinear(wire.points, anchors)
        if len(points) < 4:
            logger.debug(f"Dropped degenerate wire {wire.id}")
            continue
        clean = wire.copy()
        clean.points = points
        result.append(clean)
    return result


def split_at(wires: Iterable[WireSegment], point: tuple[float, float]) -> list[WireSegment]:
    """Insert ``point`` as a vertex of the first wire it lies strictly inside.

    Wires that already have ``point`` as a vertex are skipped. The split
    wire keeps its id and every other vertex; only the run containing the
    point becomes two collinear runs.

    Returns:
        New list with the split wire replaced by a modified copy
    """
    result = list(wires)
    for i, wire in enumerate(result):
        if point in wire.vertices:
            continue
        for index, seg_start, seg_end in iter_segments(wire.points):
            if point_on_segment(point, seg_start, seg_end):
                split = wire.copy()
                head, tail = wire.points[: index + 2], wire.points[index + 2 :]
                split.points = head + [point[0], point[1]] + tail
                result[i] = split
                logger.debug(f"Split wire {wire.id} at {point}")
                return result
    return result


def normalize_orthogonal(points: list[float]) -> list[float]:
    """Replace every diagonal run with a horizontal-then-vertical corner."""
    if len(points) < 2:
        return list(points)
    normalized = [points[0], points[1]]
    for x, y in iter_points(points[2:]):
        lx, ly = normalized[-2], normalized[-1]
        if x != lx and y != ly:
            normalized.extend((x, ly))
        normalized.extend((x, y))
    return normalized


def is_zero_length(wire: WireSegment) -> bool:
    """True if every point of the wire coincides."""
    return not has_distinct_points(wire.points)


def prune_zero_length(wires: Iterable[WireSegment]) -> list[WireSegment]:
    """Drop wires that collapse to a single point (e.g. unused abutment seeds)."""
    kept = []
    for wire in wires:
        if is_zero_length(wire):
            logger.debug(f"Pruned zero-length wire {wire.id}")
            continue
        kept.append(wire)
    return kept
