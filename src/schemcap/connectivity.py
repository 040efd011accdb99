"""
Connectivity Aggregation

Counts connection occurrences per location across the whole scene. Each
component pin contributes one; each wire contributes its start and its end.
Interior vertices (including T-junction split vertices) are not terminals
and are not counted.

- count >= 3: junction dot
- count == 1: open / dangling connection

The map is rebuilt from scratch on every call and never fed back into the
model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .geometry import end_point, start_point
from .library import ComponentLibrary, default_library
from .models import ComponentInstance, WireSegment

JUNCTION_MIN_COUNT = 3


def location_key(x: float, y: float) -> tuple[int, int]:
    """Integer location key for a point."""
    return (round(x), round(y))


@dataclass
class ConnectionPoint:
    """Everything that terminates at one location."""

    x: int
    y: int
    pins: list[tuple[str, str]] = field(default_factory=list)  # (component_id, pin_id)
    wire_ends: list[tuple[str, str]] = field(default_factory=list)  # (wire_id, "start"|"end")

    @property
    def count(self) -> int:
        return len(self.pins) + len(self.wire_ends)

    @property
    def is_junction(self) -> bool:
        return self.count >= JUNCTION_MIN_COUNT

    @property
    def is_open(self) -> bool:
        return self.count == 1

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)


class ConnectivityMap:
    """Connection points of a scene, keyed by rounded location."""

    def __init__(self, points: Optional[dict[tuple[int, int], ConnectionPoint]] = None):
        self.points: dict[tuple[int, int], ConnectionPoint] = points or {}

    @classmethod
    def build(
        cls,
        components: Iterable[ComponentInstance],
        wires: Iterable[WireSegment],
        library: Optional[ComponentLibrary] = None,
    ) -> "ConnectivityMap":
        """Scan all pins and wire endpoints once."""
        library = library if library is not None else default_library()
        points: dict[tuple[int, int], ConnectionPoint] = {}

        def at(x: float, y: float) -> ConnectionPoint:
            key = location_key(x, y)
            if key not in points:
                points[key] = ConnectionPoint(x=key[0], y=key[1])
            return points[key]

        for comp in components:
            for pin_id, (x, y) in library.pin_positions(comp).items():
                at(x, y).pins.append((comp.id, pin_id))

        for wire in wires:
            if len(wire.points) < 2:
                continue
            at(*start_point(wire.points)).wire_ends.append((wire.id, "start"))
            at(*end_point(wire.points)).wire_ends.append((wire.id, "end"))

        return cls(points)

    @property
    def counts(self) -> dict[tuple[int, int], int]:
        """Location -> number of terminals there."""
        return {key: point.count for key, point in self.points.items()}

    def count_at(self, x: float, y: float) -> int:
        point = self.points.get(location_key(x, y))
        return point.count if point else 0

    def junctions(self) -> list[tuple[int, int]]:
        """Locations where three or more terminals meet."""
        return [key for key, point in self.points.items() if point.is_junction]

    def open_points(self) -> list[ConnectionPoint]:
        """Locations with a single, unconnected terminal."""
        return [point for point in self.points.values() if point.is_open]


def connection_counts(
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    library: Optional[ComponentLibrary] = None,
) -> dict[tuple[int, int], int]:
    """Location -> connection count for a scene."""
    return ConnectivityMap.build(components, wires, library).counts
