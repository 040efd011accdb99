"""
Editor Selection Mixin

Click and box selection, and deletion of the selected items.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..logging import log_gesture

if TYPE_CHECKING:
    from .editor import Editor


class EditorSelectionMixin:
    """Mixin providing selection operations for the Editor class."""

    def select_item(self: Editor, item_id: Optional[str], multi: bool = False) -> None:
        """Select a component or wire.

        With ``multi`` the item is toggled in the current selection;
        otherwise it replaces it. ``None`` clears the selection.
        """
        if item_id is None:
            self.clear_selection()
            return
        if multi:
            if item_id in self._selected:
                self._selected = [i for i in self._selected if i != item_id]
            else:
                self._selected = self._selected + [item_id]
        else:
            self._selected = [item_id]
        self._notify()

    def select_box(
        self: Editor, start: tuple[float, float], current: tuple[float, float]
    ) -> list[str]:
        """Select everything inside the rectangle spanned by two corners.

        A component is inside when its bounding-box centre is; a wire only
        when its whole bounding box is. Edges count as inside.

        Returns:
            The new selection
        """
        x1, x2 = sorted((start[0], current[0]))
        y1, y2 = sorted((start[1], current[1]))

        selected = []
        for comp in self._components:
            definition = self.library.get(comp.type)
            if definition is None:
                continue
            cx = comp.x + definition.width / 2
            cy = comp.y + definition.height / 2
            if x1 <= cx <= x2 and y1 <= cy <= y2:
                selected.append(comp.id)

        for wire in self._wires:
            if len(wire.points) < 2:
                continue
            min_x, min_y, max_x, max_y = wire.bounds()
            if min_x >= x1 and max_x <= x2 and min_y >= y1 and max_y <= y2:
                selected.append(wire.id)

        self._selected = selected
        self._notify()
        return list(selected)

    def clear_selection(self: Editor) -> None:
        self._selected = []
        self._notify()

    def delete_selection(self: Editor) -> None:
        """Remove every selected component and wire."""
        if not self._selected:
            return
        self.push_history()
        doomed = set(self._selected)
        self._components = [c for c in self._components if c.id not in doomed]
        self._wires = [w for w in self._wires if w.id not in doomed]
        self._selected = []
        log_gesture("delete", items=len(doomed))
        self._notify()
