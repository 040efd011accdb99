"""
Wire Drawing State Machine

Lifecycle of the wire the user is actively drawing::

    IDLE --start--> DRAWING --finish--> COMMITTED --> IDLE
                            --cancel--> CANCELLED --> IDLE

While drawing, the polyline is the committed vertices plus one transient
tail point. Pointer moves replace only the tail; an explicit click freezes
the tail by duplicating it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .canonical import has_distinct_points, merge_collinear
from .models import SnapTarget, WireSegment

logger = logging.getLogger(__name__)


class DrawingState(Enum):
    """Drawing lifecycle states."""

    IDLE = "idle"
    DRAWING = "drawing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


def orthogonal_tail(
    last: tuple[float, float], target: tuple[float, float]
) -> tuple[float, float]:
    """Corner of the L-shape from ``last`` towards ``target``.

    Horizontal first when ``|dx| > |dy|``, vertical first otherwise
    (including ties).
    """
    lx, ly = last
    tx, ty = target
    if abs(tx - lx) > abs(ty - ly):
        return (tx, ly)
    return (lx, ty)


class WireDrawing:
    """Drives one wire from the first click to commit or cancel."""

    def __init__(self):
        self.state = DrawingState.IDLE
        self.wire: Optional[WireSegment] = None
        # How the previous gesture ended (COMMITTED or CANCELLED)
        self.outcome: Optional[DrawingState] = None

    @property
    def active(self) -> bool:
        return self.state is DrawingState.DRAWING

    def start(self, target: SnapTarget) -> WireSegment:
        """Begin a wire with a zero-length polyline at ``target``.

        Starting while already drawing discards the previous wire.
        """
        if self.active:
            self.cancel()
        self.wire = WireSegment(points=[target.x, target.y, target.x, target.y])
        self.state = DrawingState.DRAWING
        self.outcome = None
        logger.debug(f"Started wire {self.wire.id} at ({target.x}, {target.y})")
        return self.wire

    def update(self, target: SnapTarget) -> None:
        """Point the transient tail at ``target`` along an L-shape."""
        if not self.active or self.wire is None or len(self.wire.points) < 4:
            return
        points = self.wire.points
        last = (points[-4], points[-3])
        tail = orthogonal_tail(last, target.position)
        self.wire.points = points[:-2] + [tail[0], tail[1]]

    def add_point(self) -> None:
        """Freeze the current tail as a permanent vertex."""
        if not self.active or self.wire is None:
            return
        self.wire.points = self.wire.points + self.wire.points[-2:]

    def finish(self) -> Optional[WireSegment]:
        """Canonicalize the drawn polyline and leave the DRAWING state.

        Returns:
            The wire to commit, or None when fewer than two distinct points
            remain (nothing is committed in that case)
        """
        if not self.active or self.wire is None:
            return None

        wire = self.wire
        points = merge_collinear(wire.points)
        self.wire = None
        self.state = DrawingState.IDLE

        if len(points) < 4 or not has_distinct_points(points):
            logger.debug(f"Discarded degenerate wire {wire.id}")
            self.outcome = DrawingState.CANCELLED
            return None

        wire.points = points
        self.outcome = DrawingState.COMMITTED
        return wire

    def cancel(self) -> None:
        """Discard the in-progress wire."""
        if not self.active:
            return
        logger.debug(f"Cancelled wire {self.wire.id if self.wire else '?'}")
        self.wire = None
        self.state = DrawingState.IDLE
        self.outcome = DrawingState.CANCELLED
