"""
Custom exception hierarchy for schemcap.

Provides consistent error handling with context and suggestions. The editor
itself never raises across its public operations; these exceptions come
from library-level helpers that a caller opts into (strict library lookups,
type registration, configuration loading).

Example::

    from schemcap.exceptions import UnknownComponentTypeError

    raise UnknownComponentTypeError(
        "resistr",
        available=["resistor", "capacitor"],
        suggestions=["resistor"],
    )
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SchemcapError(Exception):
    """
    Base exception for all schemcap errors.

    Attributes:
        context: Dictionary of contextual information (type, pin, file, ...)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class UnknownComponentTypeError(SchemcapError, KeyError):
    """Raised when a component type is not present in the library."""

    def __init__(
        self,
        type_name: str,
        available: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.type_name = type_name
        self.available = available or []
        hints = [f"Did you mean '{s}'?" for s in suggestions or []]
        super().__init__(
            f"Component type '{type_name}' not found in library",
            context={"available": ", ".join(self.available)} if self.available else None,
            suggestions=hints,
        )


class DuplicateComponentTypeError(SchemcapError, ValueError):
    """Raised when registering a type name that already exists."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(
            f"Component type '{type_name}' is already registered",
            suggestions=["Pass replace=True to overwrite the existing definition"],
        )


class ConfigError(SchemcapError):
    """Configuration-related errors."""
