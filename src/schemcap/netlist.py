"""
Netlist Extraction

Groups pins into nets by shared coordinates and renders one SPICE line per
component from its type's template.

Two points are on the same net when a wire run connects them. Wire
endpoints that land on another wire's interior (T-junctions) are split
into that wire before the extraction, so shared coordinates are enough.
Ground pins name their net ``0``; other nets are numbered ``N001``,
``N002``, ... in the order their first pin is encountered.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .connectivity import location_key
from .library import ComponentLibrary, default_library
from .models import ComponentInstance, WireSegment

GROUND_NET = "0"
GROUND_TYPES = frozenset({"gnd"})

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


@dataclass(frozen=True)
class PinRef:
    """A component pin."""

    component_id: str
    pin_id: str

    def __str__(self) -> str:
        return f"{self.component_id}.{self.pin_id}"


@dataclass
class Net:
    """A group of electrically connected pins."""

    name: str
    pins: list[PinRef] = field(default_factory=list)
    points: set[tuple[int, int]] = field(default_factory=set)


def extract_nets(
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    library: Optional[ComponentLibrary] = None,
) -> list[Net]:
    """Group every pin into a net.

    Unconnected pins get a net of their own.
    """
    library = library if library is not None else default_library()
    components = list(components)
    parent: dict[tuple[int, int], tuple[int, int]] = {}

    def find(p):
        """Find root of point p with path compression."""
        if p not in parent:
            parent[p] = p
        if parent[p] != p:
            parent[p] = find(parent[p])
        return parent[p]

    def union(p1, p2):
        r1, r2 = find(p1), find(p2)
        if r1 != r2:
            parent[r1] = r2

    for wire in wires:
        keys = [location_key(x, y) for x, y in wire.vertices]
        for a, b in zip(keys, keys[1:]):
            union(a, b)
        if keys:
            find(keys[0])

    grounded: set[tuple[int, int]] = set()
    root_pins: dict[tuple[int, int], list[PinRef]] = {}
    root_points: dict[tuple[int, int], set[tuple[int, int]]] = {}
    for comp in components:
        for pin_id, (x, y) in library.pin_positions(comp).items():
            key = location_key(x, y)
            root = find(key)
            root_pins.setdefault(root, []).append(PinRef(comp.id, pin_id))
            if comp.type in GROUND_TYPES:
                grounded.add(root)

    for point in parent:
        root_points.setdefault(find(point), set()).add(point)

    nets = []
    counter = 0
    for root, pins in root_pins.items():
        if root in grounded:
            name = GROUND_NET
        else:
            counter += 1
            name = f"N{counter:03d}"
        nets.append(Net(name=name, pins=pins, points=root_points.get(root, {root})))
    return nets


def pin_net_map(nets: Iterable[Net]) -> dict[PinRef, str]:
    """PinRef -> net name."""
    return {pin: net.name for net in nets for pin in net.pins}


def render_template(template: str, values: dict[str, str]) -> str:
    """Substitute ``{{key}}`` placeholders; unknown keys become ``?``."""
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), "?"), template)


def generate_netlist(
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    library: Optional[ComponentLibrary] = None,
    title: str = "schemcap netlist",
) -> str:
    """Render a SPICE netlist for the scene.

    Components without a template (ground symbols) and components of
    unknown type produce no line.
    """
    library = library if library is not None else default_library()
    components = list(components)
    nets = pin_net_map(extract_nets(components, wires, library))

    lines = [f"* {title}"]
    for comp in components:
        definition = library.get(comp.type)
        if definition is None or not definition.template:
            continue
        values = dict(definition.default_properties)
        values.update(comp.properties)
        for pin_id in definition.pin_ids:
            values[pin_id] = nets.get(PinRef(comp.id, pin_id), "?")
        lines.append(render_template(definition.template, values))
    lines.append(".end")
    return "\n".join(lines) + "\n"
