"""
Schematic Element Models

ComponentInstance and WireSegment classes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

from ..geometry import end_point, iter_points, start_point


def new_id() -> str:
    """Fresh unique id for a component or wire."""
    return str(uuid.uuid4())


@dataclass
class ComponentInstance:
    """A placed component.

    ``x``/``y`` is the bounding-box origin; pins are resolved through the
    type's definition in the component library.
    """

    type: str
    x: float
    y: float
    rotation: int = 0  # Degrees: 0, 90, 180, 270
    mirrored: bool = False
    properties: dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def copy(self) -> "ComponentInstance":
        """Structurally independent copy (same id)."""
        return ComponentInstance(
            type=self.type,
            x=self.x,
            y=self.y,
            rotation=self.rotation,
            mirrored=self.mirrored,
            properties=dict(self.properties),
            id=self.id,
        )

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class WireSegment:
    """An orthogonal polyline stored as a flat coordinate list.

    Committed wires have at least two distinct points; every consecutive
    pair of points is a horizontal or vertical run.
    """

    points: list[float]
    net_name: Optional[str] = None
    id: str = field(default_factory=new_id)

    @classmethod
    def through(cls, *vertices: tuple[float, float], **kwargs) -> "WireSegment":
        """Create a wire through the given (x, y) vertices."""
        points: list[float] = []
        for x, y in vertices:
            points.extend((x, y))
        return cls(points=points, **kwargs)

    def copy(self) -> "WireSegment":
        """Structurally independent copy (same id)."""
        return WireSegment(points=list(self.points), net_name=self.net_name, id=self.id)

    @property
    def start(self) -> tuple[float, float]:
        return start_point(self.points)

    @property
    def end(self) -> tuple[float, float]:
        return end_point(self.points)

    @property
    def vertices(self) -> list[tuple[float, float]]:
        return list(iter_points(self.points))

    @property
    def vertex_count(self) -> int:
        return len(self.points) // 2

    def translate(self, dx: float, dy: float) -> None:
        """Move every vertex by (dx, dy)."""
        self.points = [v + (dx if i % 2 == 0 else dy) for i, v in enumerate(self.points)]

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the polyline."""
        xs = self.points[0::2]
        ys = self.points[1::2]
        return (min(xs), min(ys), max(xs), max(ys))
