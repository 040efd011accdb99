"""
Editor Wiring Mixin

Drawing new wires and dragging existing ones. A finished wire tees into
the wires its ends land on; every release leaves the wire set canonical.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..canonical import canonicalize_all, connection_anchors, prune_zero_length, split_at
from ..logging import format_points, log_gesture
from ..models import ToolMode, WireSegment
from ..topology import EndpointDrag, SegmentDrag

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


class EditorWiringMixin:
    """Mixin providing wire drawing and wire dragging for the Editor class."""

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def start_wire(self: Editor, pos: tuple[float, float]) -> None:
        """Begin drawing at the snap target under ``pos``."""
        self._abandon_drags()
        self._drawing.start(self.resolve_snap(pos))
        self._tool_mode = ToolMode.WIRE
        self._selected = []
        self._notify()

    def update_drawing_wire(self: Editor, pos: tuple[float, float]) -> None:
        """Aim the preview tail at ``pos``."""
        if not self._drawing.active:
            return
        self._drawing.update(self.resolve_snap(pos))
        self._notify()

    def add_wire_point(self: Editor, pos: Optional[tuple[float, float]] = None) -> None:
        """Fix the current tail as a vertex, after aiming it at ``pos`` if given."""
        if not self._drawing.active:
            return
        if pos is not None:
            self._drawing.update(self.resolve_snap(pos))
        self._drawing.add_point()
        self._notify()

    def finish_wire(self: Editor) -> Optional[str]:
        """Commit the drawn wire.

        Its start and end split any wire run they land inside, then the
        whole wire set is canonicalized. A wire without two distinct points
        is dropped and nothing is recorded.

        Returns:
            The committed wire's id, or None
        """
        if not self._drawing.active:
            return None
        wire = self._drawing.finish()
        self._tool_mode = ToolMode.SELECT
        if wire is None:
            self._notify()
            return None

        self.push_history()
        wires = split_at(self._wires, wire.start)
        wires = split_at(wires, wire.end)
        wires.append(wire)
        self._wires = canonicalize_all(wires, self._anchors(wires))
        self._selected = []
        log_gesture("wire commit", wire=wire.id, points=format_points(wire.points))
        self._notify()
        return wire.id

    def cancel_wire(self: Editor) -> None:
        """Discard the wire being drawn."""
        if not self._drawing.active:
            return
        self._drawing.cancel()
        self._tool_mode = ToolMode.SELECT
        self._notify()

    # ------------------------------------------------------------------
    # Endpoint drag
    # ------------------------------------------------------------------

    def start_wire_end_drag(self: Editor, wire_id: str, index: int) -> None:
        """Grab the start (index 0) or end (index len - 2) of a wire."""
        drag = EndpointDrag.begin(self._wires, wire_id, index)
        if drag is None:
            logger.debug(f"Ignored endpoint drag of {wire_id}[{index}]")
            return
        self._drawing.cancel()
        self._abandon_drags()
        self._drag_snapshot = self.snapshot()
        self._endpoint_drag = drag

    def update_wire_end_drag(self: Editor, pos: tuple[float, float]) -> None:
        """Move the grabbed endpoint to the snap target under ``pos``."""
        drag = self._endpoint_drag
        if drag is None:
            return
        target = self.resolver.resolve(pos, self._components, self._wires, exclude={drag.wire_id})
        self._wires = drag.apply(self._wires, target)
        self._notify()

    def end_wire_end_drag(self: Editor) -> None:
        """Release the endpoint and square off the dragged wire."""
        drag = self._endpoint_drag
        if drag is None:
            return
        wires = drag.release(self._wires)
        self._endpoint_drag = None
        wires = canonicalize_all(wires, self._anchors(wires))
        self._commit_drag("endpoint drag", drag.wire_id, wires)

    # ------------------------------------------------------------------
    # Segment drag
    # ------------------------------------------------------------------

    def start_segment_drag(
        self: Editor, wire_id: str, index: int, pos: tuple[float, float]
    ) -> None:
        """Grab the line through the run starting at flat ``index`` of a wire."""
        drag = SegmentDrag.begin(self._wires, wire_id, index, pos)
        if drag is None:
            logger.debug(f"Ignored segment drag of {wire_id}[{index}]")
            return
        self._drawing.cancel()
        self._abandon_drags()
        self._drag_snapshot = self.snapshot()
        self._segment_drag = drag

    def update_segment_drag(self: Editor, pos: tuple[float, float]) -> None:
        """Move the grabbed line to the grid line under ``pos``."""
        drag = self._segment_drag
        if drag is None:
            return
        self._wires = drag.apply(pos, self.grid)
        self._notify()

    def end_segment_drag(self: Editor) -> None:
        """Release the grabbed line and canonicalize the wire set."""
        drag = self._segment_drag
        if drag is None:
            return
        self._segment_drag = None
        wires = canonicalize_all(self._wires, self._anchors(self._wires))
        self._commit_drag("segment drag", drag.wire_id, wires)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def prune_zero_length_wires(self: Editor) -> int:
        """Delete wires that collapsed to a point, such as unused abutment seeds.

        Returns:
            Number of wires removed
        """
        kept = prune_zero_length(self._wires)
        removed = len(self._wires) - len(kept)
        if not removed:
            return 0
        self.push_history()
        kept_ids = {w.id for w in kept}
        self._selected = [
            i for i in self._selected if i in kept_ids or self._find_component(i) is not None
        ]
        self._wires = kept
        log_gesture("prune", wires=removed)
        self._notify()
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _anchors(self: Editor, wires: list[WireSegment]) -> set[tuple[float, float]]:
        return connection_anchors(wires) | self._pin_anchors()

    def _commit_drag(self: Editor, gesture: str, wire_id: str, wires: list[WireSegment]) -> None:
        """Install the released wire set; record history if anything changed."""
        before = self._drag_snapshot
        self._drag_snapshot = None
        self._wires = wires
        if before is not None and _wire_state(before.wires) != _wire_state(wires):
            self.push_history(before)
            log_gesture(gesture, wire=wire_id)
        self._notify()

    def _abandon_drags(self: Editor) -> None:
        """Drop any wire drag in progress and put the wires back."""
        if self._drag_snapshot is not None and (self._segment_drag or self._endpoint_drag):
            self._wires = [w.copy() for w in self._drag_snapshot.wires]
        self._segment_drag = None
        self._endpoint_drag = None
        self._drag_snapshot = None


def _wire_state(wires) -> list[tuple[str, list[float]]]:
    return [(w.id, list(w.points)) for w in wires]
