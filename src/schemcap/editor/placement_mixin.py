"""
Editor Placement Mixin

Placing, moving, rotating and mirroring components, with rubber-banding of
attached wires, plus the component clipboard.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..geometry import snap_to_grid
from ..logging import log_gesture
from ..models import ComponentInstance, new_id
from ..topology import rubber_band, seed_abutments, translate_wires

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


class EditorPlacementMixin:
    """Mixin providing component operations for the Editor class."""

    def place_component(self: Editor, pos: tuple[float, float]) -> Optional[str]:
        """Place the active component type centred on the snapped ``pos``.

        The bounding box is centred on the snap point and the origin is then
        snapped to the grid.

        Returns:
            The new component's id, or None when no type is armed
        """
        type_name = self._active_type
        definition = self.library.get(type_name) if type_name else None
        if definition is None:
            logger.debug(f"Ignored placement without a valid type ({type_name!r})")
            return None

        self.push_history()
        snap = self.resolve_snap(pos)
        comp = ComponentInstance(
            type=definition.type,
            x=snap_to_grid(snap.x - definition.width / 2, self.grid),
            y=snap_to_grid(snap.y - definition.height / 2, self.grid),
            properties=dict(definition.default_properties),
        )
        self._components.append(comp)
        log_gesture("place", type=comp.type, component=comp.id, at=f"({comp.x:g}, {comp.y:g})")
        self._notify()
        return comp.id

    def update_component(
        self: Editor,
        component_id: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
        rotation: Optional[int] = None,
        mirrored: Optional[bool] = None,
        properties: Optional[dict[str, str]] = None,
    ) -> None:
        """Change a component and reroute the wires attached to its pins.

        Does not record history; commands and drag starts do that.
        """
        comp = self._find_component(component_id)
        if comp is None:
            logger.debug(f"Ignored update of unknown component {component_id}")
            return
        if rotation is not None and rotation % 90:
            logger.debug(f"Ignored rotation {rotation} for {component_id}")
            rotation = None

        old_pins = self.library.pin_positions(comp)
        if x is not None:
            comp.x = x
        if y is not None:
            comp.y = y
        if rotation is not None:
            comp.rotation = int(rotation) % 360
        if mirrored is not None:
            comp.mirrored = bool(mirrored)
        if properties is not None:
            comp.properties = dict(properties)
        new_pins = self.library.pin_positions(comp)

        moves = [(old_pins[pin_id], new_pins[pin_id]) for pin_id in old_pins]
        self._wires = rubber_band(
            self._wires,
            moves,
            exempt=set(self._selected),
            anchors=self._pin_anchors(),
        )
        self._notify()

    def begin_component_drag(self: Editor, component_id: str) -> None:
        """Record history and seed wires where the component's pins touch something."""
        comp = self._find_component(component_id)
        if comp is None:
            return
        self.push_history()
        seeds = seed_abutments(comp, self._components, self._wires, self.resolver)
        log_gesture("component drag", component=component_id, seeds=len(seeds) or None)
        if seeds:
            self._wires = self._wires + seeds
            self._notify()

    def move_component(self: Editor, component_id: str, x: float, y: float) -> None:
        """Move a component's origin during a drag."""
        self.update_component(component_id, x=x, y=y)

    def move_selection(self: Editor, dx: float, dy: float) -> None:
        """Translate the selection as one command.

        Selected wires move rigidly; unselected wires attached to selected
        components are rubber-banded.
        """
        selected = set(self._selected)
        comp_ids = [c.id for c in self._components if c.id in selected]
        wire_ids = {w.id for w in self._wires if w.id in selected}
        if not comp_ids and not wire_ids:
            return
        if dx == 0 and dy == 0:
            return

        self.push_history()
        self._wires = translate_wires(self._wires, wire_ids, dx, dy)
        for component_id in comp_ids:
            comp = self._find_component(component_id)
            self.update_component(component_id, x=comp.x + dx, y=comp.y + dy)
        log_gesture("move", items=len(comp_ids) + len(wire_ids), by=f"({dx:g}, {dy:g})")
        self._notify()

    def rotate_selection(self: Editor) -> None:
        """Rotate every selected component a quarter turn."""
        self._transform_selection("rotate", lambda comp: {"rotation": (comp.rotation + 90) % 360})

    def mirror_selection(self: Editor) -> None:
        """Toggle mirroring of every selected component."""
        self._transform_selection("mirror", lambda comp: {"mirrored": not comp.mirrored})

    def _transform_selection(self: Editor, gesture: str, change) -> None:
        targets = [c.id for c in self._components if c.id in self._selected]
        if not targets:
            return
        self.push_history()
        for component_id in targets:
            comp = self._find_component(component_id)
            self.update_component(component_id, **change(comp))
        log_gesture(gesture, components=len(targets))

    def copy(self: Editor) -> None:
        """Copy the selected components to the clipboard."""
        selected = [c.copy() for c in self._components if c.id in self._selected]
        if selected:
            self._clipboard = selected

    def paste(self: Editor) -> list[str]:
        """Paste the clipboard one grid step down and right.

        Returns:
            Ids of the pasted components, which become the selection
        """
        if not self._clipboard:
            return []
        self.push_history()
        pasted = []
        for comp in self._clipboard:
            clone = comp.copy()
            clone.id = new_id()
            clone.x += self.grid
            clone.y += self.grid
            pasted.append(clone)
        self._components = self._components + pasted
        self._selected = [c.id for c in pasted]
        log_gesture("paste", components=len(pasted))
        self._notify()
        return list(self._selected)
