"""
Undo/Redo History

Bounded stacks of full editor snapshots. A push records the state before
a mutation; undo and redo trade the current state against the stacks.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import EditorStateSnapshot

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DEPTH = 20


class History:
    """Past and future snapshot stacks.

    Args:
        depth: Maximum number of past snapshots; the oldest are dropped
    """

    def __init__(self, depth: int = DEFAULT_HISTORY_DEPTH):
        self.depth = max(1, depth)
        self.past: list[EditorStateSnapshot] = []
        self.future: list[EditorStateSnapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def push(self, snapshot: EditorStateSnapshot) -> None:
        """Record ``snapshot`` as the latest past state and clear the future."""
        self.past.append(snapshot)
        if len(self.past) > self.depth:
            del self.past[: len(self.past) - self.depth]
        self.future.clear()

    def undo(self, current: EditorStateSnapshot) -> Optional[EditorStateSnapshot]:
        """Swap ``current`` for the latest past state.

        Returns:
            The state to restore, or None when there is nothing to undo
        """
        if not self.past:
            return None
        previous = self.past.pop()
        self.future.append(current)
        logger.debug(f"Undo ({len(self.past)} left)")
        return previous

    def redo(self, current: EditorStateSnapshot) -> Optional[EditorStateSnapshot]:
        """Swap ``current`` for the latest undone state."""
        if not self.future:
            return None
        following = self.future.pop()
        self.past.append(current)
        logger.debug(f"Redo ({len(self.future)} left)")
        return following

    def clear(self) -> None:
        self.past.clear()
        self.future.clear()
