"""
Schematic Editor

The owned editor state: components, wires, selection, tool mode, the wire
being drawn, the clipboard and the undo history. Collaborators read through
the read-only properties and change state only through the operations,
which never raise. Invalid ids, unknown types and boundary conditions are
logged and ignored.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ..config import Config
from ..connectivity import ConnectivityMap
from ..drawing import WireDrawing
from ..erc import ERCReport, run_erc
from ..history import History
from ..library import ComponentLibrary, default_library
from ..logging import enable_verbose
from ..models import ComponentInstance, EditorStateSnapshot, SnapTarget, ToolMode, WireSegment
from ..netlist import Net, extract_nets, generate_netlist
from ..snap import SnapResolver
from ..topology import EndpointDrag, SegmentDrag
from .history_mixin import EditorHistoryMixin
from .placement_mixin import EditorPlacementMixin
from .selection_mixin import EditorSelectionMixin
from .wiring_mixin import EditorWiringMixin

logger = logging.getLogger(__name__)

Subscriber = Callable[["Editor"], None]


class Editor(
    EditorPlacementMixin,
    EditorSelectionMixin,
    EditorWiringMixin,
    EditorHistoryMixin,
):
    """Interactive schematic editing state.

    Args:
        config: Grid, snap and history settings (defaults when omitted)
        library: Component types (the built-in library when omitted)

    Example:
        editor = Editor()
        editor.set_placement_mode("resistor")
        editor.place_component((130, 110))
        editor.start_wire((100, 110))
        editor.update_drawing_wire((40, 110))
        editor.finish_wire()
    """

    def __init__(self, config: Optional[Config] = None, library: Optional[ComponentLibrary] = None):
        self.config = config or Config()
        self.library = library if library is not None else default_library()
        self.grid = self.config.grid.size
        self.resolver = SnapResolver(
            tolerance=self.config.snap.tolerance, grid=self.grid, library=self.library
        )

        self._components: list[ComponentInstance] = []
        self._wires: list[WireSegment] = []
        self._selected: list[str] = []
        self._tool_mode = ToolMode.SELECT
        self._active_type: Optional[str] = None
        self._clipboard: list[ComponentInstance] = []
        self._history = History(self.config.history.depth)

        self._drawing = WireDrawing()
        self._segment_drag: Optional[SegmentDrag] = None
        self._endpoint_drag: Optional[EndpointDrag] = None
        # State before the current wire drag, pushed on release if it changed
        self._drag_snapshot: Optional[EditorStateSnapshot] = None

        self._subscribers: list[Subscriber] = []

        if self.config.logging.verbose:
            enable_verbose(self.config.logging.level)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def components(self) -> tuple[ComponentInstance, ...]:
        return tuple(c.copy() for c in self._components)

    @property
    def wires(self) -> tuple[WireSegment, ...]:
        return tuple(w.copy() for w in self._wires)

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return tuple(self._selected)

    @property
    def tool_mode(self) -> ToolMode:
        return self._tool_mode

    @property
    def active_type(self) -> Optional[str]:
        """Component type placed by the next click in PLACE mode."""
        return self._active_type

    @property
    def drawing_wire(self) -> Optional[WireSegment]:
        """In-progress wire for preview, or None."""
        wire = self._drawing.wire
        return wire.copy() if wire is not None else None

    @property
    def clipboard(self) -> tuple[ComponentInstance, ...]:
        return tuple(c.copy() for c in self._clipboard)

    @property
    def is_dragging(self) -> bool:
        return self._segment_drag is not None or self._endpoint_drag is not None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> None:
        """Call ``callback(editor)`` after every state change."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    # ------------------------------------------------------------------
    # Tools and snapping
    # ------------------------------------------------------------------

    def set_tool_mode(self, mode: Union[ToolMode, str]) -> None:
        """Switch tools, abandoning any drawing or drag in progress."""
        try:
            mode = ToolMode(mode)
        except ValueError:
            logger.debug(f"Ignored unknown tool mode {mode!r}")
            return
        self._drawing.cancel()
        self._abandon_drags()
        self._tool_mode = mode
        self._selected = []
        self._active_type = None
        self._notify()

    def set_placement_mode(self, type_name: str) -> None:
        """Arm placement of ``type_name``."""
        if type_name not in self.library:
            logger.debug(f"Ignored placement mode for unknown type '{type_name}'")
            return
        self._drawing.cancel()
        self._abandon_drags()
        self._tool_mode = ToolMode.PLACE
        self._active_type = type_name
        self._selected = []
        self._notify()

    def resolve_snap(self, pos: tuple[float, float]) -> SnapTarget:
        """What ``pos`` attaches to in the current scene."""
        return self.resolver.resolve(pos, self._components, self._wires)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def connectivity(self) -> ConnectivityMap:
        return ConnectivityMap.build(self._components, self._wires, self.library)

    def connection_counts(self) -> dict[tuple[int, int], int]:
        """Location -> number of pins and wire ends there."""
        return self.connectivity().counts

    def junctions(self) -> list[tuple[int, int]]:
        """Locations where a junction dot is drawn."""
        return self.connectivity().junctions()

    def open_points(self) -> list[tuple[int, int]]:
        """Locations of unconnected pins and dangling wire ends."""
        return [point.position for point in self.connectivity().open_points()]

    def erc(self) -> ERCReport:
        """Open-connection warnings and off-grid errors for the committed scene."""
        return run_erc(self._components, self._wires, self.library, grid=self.grid)

    def nets(self) -> list[Net]:
        return extract_nets(self._components, self._wires, self.library)

    def netlist(self, title: str = "schemcap netlist") -> str:
        """SPICE netlist of the committed scene."""
        return generate_netlist(self._components, self._wires, self.library, title=title)

    def snapshot(self) -> EditorStateSnapshot:
        """By-value copy of the committed components and wires."""
        return EditorStateSnapshot.capture(self._components, self._wires)

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _find_component(self, component_id: str) -> Optional[ComponentInstance]:
        for comp in self._components:
            if comp.id == component_id:
                return comp
        return None

    def _pin_anchors(self) -> set[tuple[float, float]]:
        """Every pin position in the scene."""
        anchors: set[tuple[float, float]] = set()
        for comp in self._components:
            anchors.update(self.library.pin_positions(comp).values())
        return anchors

    def __repr__(self) -> str:
        return (
            f"Editor(components={len(self._components)}, wires={len(self._wires)}, "
            f"tool={self._tool_mode.value})"
        )
