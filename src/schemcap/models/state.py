"""
Editor State Models

Snap targets, tool modes and the undo/redo snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .elements import ComponentInstance, WireSegment


class SnapType(Enum):
    """What a pointer position attached to, highest priority first."""

    PIN = "pin"
    JUNCTION = "junction"
    WIRE = "wire"
    GRID = "grid"


@dataclass(frozen=True)
class SnapTarget:
    """Result of one snap query.

    ``target_id`` is the component id (pins) or wire id (junctions and
    wire segments); ``sub_id`` is the pin id, or "start"/"end" for wire
    endpoints.
    """

    type: SnapType
    x: float
    y: float
    target_id: Optional[str] = None
    sub_id: Optional[str] = None

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def is_attachment(self) -> bool:
        """True for anything other than the bare grid."""
        return self.type is not SnapType.GRID


class ToolMode(Enum):
    """Active editor tool."""

    SELECT = "select"
    WIRE = "wire"
    PAN = "pan"
    PLACE = "place"


@dataclass(frozen=True)
class EditorStateSnapshot:
    """By-value capture of the (components, wires) pair.

    Both capture and restore copy, so neither the live state nor a restored
    state can alias the stored snapshot.
    """

    components: tuple[ComponentInstance, ...]
    wires: tuple[WireSegment, ...]

    @classmethod
    def capture(
        cls, components: Iterable[ComponentInstance], wires: Iterable[WireSegment]
    ) -> "EditorStateSnapshot":
        return cls(
            components=tuple(c.copy() for c in components),
            wires=tuple(w.copy() for w in wires),
        )

    def restore(self) -> tuple[list[ComponentInstance], list[WireSegment]]:
        """Fresh mutable copies of the captured state."""
        return [c.copy() for c in self.components], [w.copy() for w in self.wires]
