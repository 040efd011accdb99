"""Interactive schematic editor state."""

from .editor import Editor

__all__ = ["Editor"]
