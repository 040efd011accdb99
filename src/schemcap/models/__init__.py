"""
Schematic Models

Re-exports all model classes for convenient importing.
"""

from .elements import ComponentInstance, WireSegment, new_id
from .state import EditorStateSnapshot, SnapTarget, SnapType, ToolMode

__all__ = [
    # Elements
    "ComponentInstance",
    "WireSegment",
    "new_id",
    # Editor state
    "SnapType",
    "SnapTarget",
    "ToolMode",
    "EditorStateSnapshot",
]
