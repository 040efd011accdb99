"""
Editor History Mixin

Undo/redo over full (components, wires) snapshots. Every discrete command
pushes the state it is about to change; a continuous drag pushes once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..logging import log_gesture
from ..models import EditorStateSnapshot

if TYPE_CHECKING:
    from .editor import Editor


class EditorHistoryMixin:
    """Mixin providing undo/redo for the Editor class."""

    @property
    def can_undo(self: Editor) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self: Editor) -> bool:
        return self._history.can_redo

    def push_history(self: Editor, snapshot: Optional[EditorStateSnapshot] = None) -> None:
        """Record the current state (or ``snapshot``) and clear the redo stack."""
        self._history.push(snapshot or self.snapshot())

    def undo(self: Editor) -> None:
        """Restore the state before the last recorded command."""
        self._finish_transients()
        previous = self._history.undo(self.snapshot())
        if previous is None:
            return
        self._restore(previous)
        log_gesture("undo", remaining=len(self._history.past))

    def redo(self: Editor) -> None:
        """Re-apply the last undone command."""
        self._finish_transients()
        following = self._history.redo(self.snapshot())
        if following is None:
            return
        self._restore(following)
        log_gesture("redo", remaining=len(self._history.future))

    def _finish_transients(self: Editor) -> None:
        # Drawing and drags never outlive a history jump
        self._drawing.cancel()
        self._abandon_drags()

    def _restore(self: Editor, snapshot: EditorStateSnapshot) -> None:
        self._components, self._wires = snapshot.restore()
        live = {c.id for c in self._components} | {w.id for w in self._wires}
        self._selected = [i for i in self._selected if i in live]
        self._notify()
