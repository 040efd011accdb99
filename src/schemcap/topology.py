"""
Topology Maintenance

Keeps wires attached and orthogonal while the geometry they connect to
moves:

- rubber-banding: wire endpoints follow moved pins through an inserted
  orthogonal corner
- abutment seeding: zero-length wires created where a dragged component's
  pins already touch something, so the drag stretches a connection
- sliding contacts: dragging a wire run moves the whole line, and wire
  endpoints lying on that line within the run's span slide with it
- endpoint drags: a dragged endpoint may go diagonal until release, then
  the wire is squared off

Functions here return new wire lists and never modify their inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Collection, Iterable, Optional, Sequence

from .canonical import connection_anchors, merge_collinear, normalize_orthogonal
from .geometry import GRID_SIZE, end_point, snap_to_grid, start_point
from .models import ComponentInstance, SnapTarget, SnapType, WireSegment
from .snap import SnapResolver

logger = logging.getLogger(__name__)

# Pins that moved less than this are treated as stationary
MOVE_EPSILON = 0.1

PinMove = tuple[tuple[float, float], tuple[float, float]]


def reroute_endpoint(
    points: list[float], at_start: bool, new_pos: tuple[float, float]
) -> list[float]:
    """Move one end of a wire to ``new_pos`` through a new corner vertex.

    The old endpoint is replaced by ``new_pos`` and a corner is inserted so
    both affected runs stay axis-aligned:

    - start: ``[new, (p2.x, new.y), p2, ...]``
    - end: ``[..., prev, (prev.x, new.y), new]``
    """
    nx, ny = new_pos
    if at_start:
        x2, y2 = points[2], points[3]
        return [nx, ny, x2, ny, x2, y2] + points[4:]
    px = points[-4]
    return points[:-2] + [px, ny, nx, ny]


def _find_move(point: tuple[float, float], moves: Sequence[PinMove]) -> Optional[PinMove]:
    for move in moves:
        if move[0] == point:
            return move
    return None


def rubber_band(
    wires: Iterable[WireSegment],
    moves: Sequence[PinMove],
    exempt: Collection[str] = (),
    anchors: Collection[tuple[float, float]] = (),
) -> list[WireSegment]:
    """Reroute wire endpoints that sat on moved pins.

    Only start and end points are matched, exactly, against the old pin
    positions. All matches are taken from the wires as they were before
    any move, so pins that trade places (a 180 degree rotation) do not drag
    each other's wires back. A zero-length wire sitting on a moved pin
    (an abutment seed) moves only its start; its end stays on whatever the
    pin was touching.

    Args:
        wires: Current wires
        moves: (old_position, new_position) per pin
        exempt: Wire ids that must not be rerouted (selected wires that
            translate rigidly with the selection)
        anchors: Extra connection points (pin positions) to keep as vertices
            when tidying rerouted wires

    Returns:
        New wire list; the number of wires never changes
    """
    moves = [
        (old, new)
        for old, new in moves
        if abs(old[0] - new[0]) >= MOVE_EPSILON or abs(old[1] - new[1]) >= MOVE_EPSILON
    ]
    result = list(wires)
    if not moves:
        return result

    rerouted: set[int] = set()
    for i, wire in enumerate(result):
        if wire.id in exempt or len(wire.points) < 4:
            continue
        start_move = _find_move(start_point(wire.points), moves)
        end_move = _find_move(end_point(wire.points), moves)
        if start_move is None and end_move is None:
            continue

        is_seed = all(p == wire.start for p in wire.vertices)
        if is_seed and start_move is not None:
            end_move = None

        points = list(wire.points)
        if start_move is not None:
            points = reroute_endpoint(points, True, start_move[1])
        if end_move is not None:
            points = reroute_endpoint(points, False, end_move[1])

        moved = wire.copy()
        moved.points = points
        result[i] = moved
        rerouted.add(i)
        logger.debug(f"Rubber-banded wire {wire.id}")

    keep = connection_anchors(result) | set(anchors)
    for i in rerouted:
        points = merge_collinear(result[i].points, keep)
        if len(points) < 4:
            points = points + points[-2:]
        result[i].points = points
    return result


def seed_abutments(
    component: ComponentInstance,
    components: Sequence[ComponentInstance],
    wires: Sequence[WireSegment],
    resolver: SnapResolver,
) -> list[WireSegment]:
    """Zero-length wires for every pin that already touches something.

    A pin is seeded when it coincides with another component's pin or lies
    on a wire run. The component's own pins are ignored.

    Contacts with a wire endpoint (a JUNCTION snap) are deliberately not
    seeded, although they count as touching: that endpoint is rubber-banded
    along with the pin, and a seed there would be stretched into a dangling
    stub back to the vacated point.

    Returns:
        The new seed wires (not yet added to ``wires``)
    """
    seeds = []
    for pin_id, pos in resolver.library.pin_positions(component).items():
        target: SnapTarget = resolver.resolve(pos, components, wires, exclude={component.id})
        if target.type not in (SnapType.PIN, SnapType.WIRE) or target.position != pos:
            continue
        seed = WireSegment(points=[pos[0], pos[1], pos[0], pos[1]])
        seeds.append(seed)
        logger.debug(
            f"Seeded abutment wire {seed.id} at {pos} "
            f"({component.id}.{pin_id} touches {target.type.value})"
        )
    return seeds


@dataclass
class SegmentDrag:
    """A wire line being dragged perpendicular to itself.

    The dragged line is the grabbed run plus every consecutive run of the
    same wire on the same line (runs split at a T-junction), so the whole
    line moves and the wire stays orthogonal. ``first``/``last`` are the
    flat indices of the line's outer vertices.

    ``base_wires`` is the wire set at drag start; every update is computed
    from it so a continuous drag never loses its sliding contacts.
    """

    wire_id: str
    index: int
    is_horizontal: bool
    start_pos: tuple[float, float]
    original_constant: float
    span: tuple[float, float]
    first: int = 0
    last: int = 0
    base_wires: list[WireSegment] = field(default_factory=list)

    @classmethod
    def begin(
        cls,
        wires: Sequence[WireSegment],
        wire_id: str,
        index: int,
        pos: tuple[float, float],
    ) -> Optional["SegmentDrag"]:
        """Start dragging the line through the run at flat ``index`` of ``wire_id``.

        Returns None when the wire or run does not exist.
        """
        wire = next((w for w in wires if w.id == wire_id), None)
        if wire is None or index < 0 or index % 2 or index + 3 >= len(wire.points):
            return None
        points = wire.points
        is_horizontal = abs(points[index + 1] - points[index + 3]) < 0.1
        axis = 1 if is_horizontal else 0
        constant = points[index + axis]

        first, last = index, index + 2
        while first >= 2 and abs(points[first - 2 + axis] - constant) < 0.1:
            first -= 2
        while last + 2 < len(points) and abs(points[last + 2 + axis] - constant) < 0.1:
            last += 2
        along = points[first + 1 - axis : last + 2 : 2]

        return cls(
            wire_id=wire_id,
            index=index,
            is_horizontal=is_horizontal,
            start_pos=pos,
            original_constant=constant,
            span=(min(along), max(along)),
            first=first,
            last=last,
            base_wires=[w.copy() for w in wires],
        )

    def target_constant(self, pos: tuple[float, float], grid: float = GRID_SIZE) -> float:
        """Grid-snapped perpendicular coordinate for pointer ``pos``."""
        return snap_to_grid(pos[1] if self.is_horizontal else pos[0], grid)

    def _slides(self, point: tuple[float, float]) -> bool:
        along, across = (point[0], point[1]) if self.is_horizontal else (point[1], point[0])
        return across == self.original_constant and self.span[0] <= along <= self.span[1]

    def apply(self, pos: tuple[float, float], grid: float = GRID_SIZE) -> list[WireSegment]:
        """Wire set with the line moved to the grid line under ``pos``.

        Endpoints of other wires on the original line, within the line's
        span (bounds inclusive), slide along. Moving to the original line
        returns the wires as they were at drag start.
        """
        new_val = self.target_constant(pos, grid)
        result = [w.copy() for w in self.base_wires]
        if new_val == self.original_constant:
            return result

        axis = 1 if self.is_horizontal else 0
        for wire in result:
            if wire.id == self.wire_id:
                for idx in range(self.first, self.last + 2, 2):
                    wire.points[idx + axis] = new_val
                continue
            slid = False
            for idx in (0, len(wire.points) - 2):
                if self._slides((wire.points[idx], wire.points[idx + 1])):
                    wire.points[idx + axis] = new_val
                    slid = True
                    logger.debug(f"Slid contact of wire {wire.id} to {new_val}")
            if slid:
                # A run that lay along the dragged line now needs a corner
                wire.points = normalize_orthogonal(wire.points)
        return result


@dataclass
class EndpointDrag:
    """A wire start or end point following the pointer."""

    wire_id: str
    index: int

    @classmethod
    def begin(
        cls, wires: Sequence[WireSegment], wire_id: str, index: int
    ) -> Optional["EndpointDrag"]:
        """Start dragging the endpoint at flat ``index`` (0 or len - 2)."""
        wire = next((w for w in wires if w.id == wire_id), None)
        if wire is None or index not in (0, len(wire.points) - 2):
            return None
        return cls(wire_id=wire_id, index=index)

    def apply(self, wires: Sequence[WireSegment], target: SnapTarget) -> list[WireSegment]:
        """Move the endpoint onto ``target``; runs may go diagonal."""
        result = list(wires)
        for i, wire in enumerate(result):
            if wire.id != self.wire_id:
                continue
            moved = wire.copy()
            moved.points[self.index] = target.x
            moved.points[self.index + 1] = target.y
            result[i] = moved
        return result

    def release(self, wires: Sequence[WireSegment]) -> list[WireSegment]:
        """Square off the dragged wire's diagonal runs."""
        result = list(wires)
        for i, wire in enumerate(result):
            if wire.id == self.wire_id:
                squared = wire.copy()
                squared.points = normalize_orthogonal(wire.points)
                result[i] = squared
        return result


def translate_wires(
    wires: Iterable[WireSegment], ids: Collection[str], dx: float, dy: float
) -> list[WireSegment]:
    """Rigidly move the wires in ``ids`` by (dx, dy)."""
    result = []
    for wire in wires:
        if wire.id in ids:
            wire = wire.copy()
            wire.translate(dx, dy)
        result.append(wire)
    return result
