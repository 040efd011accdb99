"""
Component Type Library

A registry of component types. Each type owns its bounding box, its pin
definitions (local offsets shared by every instance of the type), default
instance properties, and the SPICE line template consumed by netlist
generation.

Usage:
    from schemcap.library import default_library

    library = default_library()
    resistor = library.get("resistor")
    lookup = library.resolve_pin(component, "1")
    if not lookup.ok:
        ...  # lookup.error is PinLookupError.UNKNOWN_TYPE or UNKNOWN_PIN
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from difflib import get_close_matches
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional

from .exceptions import DuplicateComponentTypeError, UnknownComponentTypeError

if TYPE_CHECKING:
    from .models import ComponentInstance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinDefinition:
    """A pin of a component type, offset from the bounding-box origin."""

    id: str
    x: float
    y: float
    label: str | None = None

    def __repr__(self) -> str:
        return f"PinDefinition({self.id!r}, x={self.x}, y={self.y})"


@dataclass
class ComponentDefinition:
    """A component type: geometry, pins, default properties and template."""

    type: str
    name: str
    category: str
    width: float
    height: float
    pins: tuple[PinDefinition, ...]
    default_properties: dict[str, str] = field(default_factory=dict)
    template: str = ""

    def pin(self, pin_id: str) -> Optional[PinDefinition]:
        """Find a pin by id, or None."""
        for pin in self.pins:
            if pin.id == pin_id:
                return pin
        return None

    @property
    def pin_ids(self) -> list[str]:
        """Pin ids in definition order."""
        return [pin.id for pin in self.pins]

    @property
    def center(self) -> tuple[float, float]:
        """Bounding-box centre in local coordinates."""
        return (self.width / 2, self.height / 2)


class PinLookupError(Enum):
    """Why a pin lookup fell back to the component origin."""

    UNKNOWN_TYPE = "unknown_type"
    UNKNOWN_PIN = "unknown_pin"


@dataclass(frozen=True)
class PinLookup:
    """Result of resolving a pin position.

    ``position`` is always usable: on error it is the component origin, the
    same value the silent lookup returns.
    """

    position: tuple[float, float]
    error: PinLookupError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


BUILTIN_DEFINITIONS: tuple[ComponentDefinition, ...] = (
    ComponentDefinition(
        type="resistor",
        name="Resistor",
        category="Passive",
        width=60,
        height=20,
        pins=(PinDefinition("1", 0, 10), PinDefinition("2", 60, 10)),
        default_properties={"value": "10k", "name": "R1"},
        template="R{{name}} {{1}} {{2}} {{value}}",
    ),
    ComponentDefinition(
        type="capacitor",
        name="Capacitor",
        category="Passive",
        width=40,
        height=40,
        pins=(PinDefinition("1", 20, 0), PinDefinition("2", 20, 40)),
        default_properties={"value": "1uF", "name": "C1"},
        template="C{{name}} {{1}} {{2}} {{value}}",
    ),
    ComponentDefinition(
        type="voltage_source",
        name="Voltage Src",
        category="Sources",
        width=40,
        height=60,
        pins=(PinDefinition("p", 20, 0, "+"), PinDefinition("n", 20, 60, "-")),
        default_properties={"value": "5V", "name": "V1"},
        template="V{{name}} {{p}} {{n}} {{value}}",
    ),
    ComponentDefinition(
        type="gnd",
        name="Ground",
        category="Power",
        width=20,
        height=20,
        pins=(PinDefinition("1", 10, 0),),
        default_properties={"name": "GND"},
        template="",
    ),
    ComponentDefinition(
        type="opamp",
        name="OpAmp",
        category="Active",
        width=60,
        height=60,
        pins=(
            PinDefinition("in_n", 0, 10, "-"),
            PinDefinition("in_p", 0, 50, "+"),
            PinDefinition("out", 60, 30),
        ),
        default_properties={"name": "X1", "model": "LM741"},
        template="X{{name}} {{in_p}} {{in_n}} {{out}} {{model}}",
    ),
)


class ComponentLibrary:
    """Registry of component types keyed by type name."""

    def __init__(self, definitions: Optional[list[ComponentDefinition]] = None):
        self._definitions: dict[str, ComponentDefinition] = {}
        for definition in definitions if definitions is not None else BUILTIN_DEFINITIONS:
            self.register(definition)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._definitions

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def types(self) -> list[str]:
        """Registered type names in registration order."""
        return list(self._definitions)

    def register(self, definition: ComponentDefinition, replace: bool = False) -> None:
        """Add a component type.

        Raises:
            DuplicateComponentTypeError: If the type exists and ``replace`` is False
        """
        if definition.type in self._definitions and not replace:
            raise DuplicateComponentTypeError(definition.type)
        self._definitions[definition.type] = definition

    def get(self, type_name: str, strict: bool = False) -> Optional[ComponentDefinition]:
        """Look up a component type.

        Args:
            type_name: Type name, e.g. "resistor"
            strict: Raise instead of returning None for unknown types

        Raises:
            UnknownComponentTypeError: If ``strict`` and the type is unknown,
                with close matches as suggestions
        """
        definition = self._definitions.get(type_name)
        if definition is None and strict:
            raise UnknownComponentTypeError(
                type_name,
                available=self.types,
                suggestions=get_close_matches(type_name, self.types, n=3, cutoff=0.6),
            )
        return definition

    def resolve_pin(self, component: ComponentInstance, pin_id: str) -> PinLookup:
        """Resolve a pin position, reporting why a fallback was used."""
        from .geometry import absolute_pin_position

        origin = (component.x, component.y)
        definition = self._definitions.get(component.type)
        if definition is None:
            logger.warning(f"Unknown component type '{component.type}' on {component.id}")
            return PinLookup(origin, PinLookupError.UNKNOWN_TYPE)
        if definition.pin(pin_id) is None:
            logger.warning(f"Unknown pin '{pin_id}' on {component.type} {component.id}")
            return PinLookup(origin, PinLookupError.UNKNOWN_PIN)
        return PinLookup(absolute_pin_position(component, pin_id, self))

    def pin_positions(self, component: ComponentInstance) -> dict[str, tuple[float, float]]:
        """Absolute positions of every pin of a component, keyed by pin id.

        Components of unknown type have no pins.
        """
        from .geometry import absolute_pin_position

        definition = self._definitions.get(component.type)
        if definition is None:
            return {}
        return {pin.id: absolute_pin_position(component, pin.id, self) for pin in definition.pins}


_default_library: Optional[ComponentLibrary] = None


def default_library() -> ComponentLibrary:
    """The shared library holding the built-in component types."""
    global _default_library
    if _default_library is None:
        _default_library = ComponentLibrary()
    return _default_library
