"""
Snap Resolution

Decides what a raw pointer position attaches to. Tiers are tried in a
fixed order and the first hit wins; within a tier the first candidate in
iteration order wins, not the nearest one:

1. component pin
2. wire endpoint (junction)
3. point on a wire segment (the projection, for mid-wire tee-offs)
4. nearest grid point (always succeeds)

Every query is a linear scan over the scene.
"""

from __future__ import annotations

from typing import Collection, Iterable, Optional

from .geometry import GRID_SIZE, end_point, iter_segments, snap_to_grid, start_point
from .library import ComponentLibrary, default_library
from .models import ComponentInstance, SnapTarget, SnapType, WireSegment

# Attachment tolerance in model units
SNAP_TOLERANCE = 10


class SnapResolver:
    """Resolve pointer positions against components and wires.

    Args:
        tolerance: Half-width of the square attachment box
        grid: Grid spacing for the fallback tier
        library: Component type library used to locate pins
    """

    def __init__(
        self,
        tolerance: float = SNAP_TOLERANCE,
        grid: float = GRID_SIZE,
        library: Optional[ComponentLibrary] = None,
    ):
        self.tolerance = tolerance
        self.grid = grid
        self.library = library if library is not None else default_library()

    def _near(self, pos: tuple[float, float], x: float, y: float) -> bool:
        return abs(pos[0] - x) < self.tolerance and abs(pos[1] - y) < self.tolerance

    def resolve(
        self,
        pos: tuple[float, float],
        components: Iterable[ComponentInstance],
        wires: Iterable[WireSegment],
        exclude: Collection[str] = (),
    ) -> SnapTarget:
        """Return the highest-priority target for ``pos``.

        Args:
            pos: Pointer position in model units
            components: Components to test, in priority order
            wires: Wires to test, in priority order
            exclude: Component/wire ids that must not be snapped to

        Returns:
            A fresh SnapTarget; GRID when nothing else is in range
        """
        wires = [w for w in wires if w.id not in exclude and len(w.points) >= 4]

        hit = (
            self.find_pin(pos, components, exclude)
            or self.find_endpoint(pos, wires)
            or self.find_segment(pos, wires)
        )
        if hit is not None:
            return hit
        return SnapTarget(
            SnapType.GRID, snap_to_grid(pos[0], self.grid), snap_to_grid(pos[1], self.grid)
        )

    def find_pin(
        self,
        pos: tuple[float, float],
        components: Iterable[ComponentInstance],
        exclude: Collection[str] = (),
    ) -> Optional[SnapTarget]:
        """First component pin within tolerance."""
        for comp in components:
            if comp.id in exclude:
                continue
            for pin_id, (x, y) in self.library.pin_positions(comp).items():
                if self._near(pos, x, y):
                    return SnapTarget(SnapType.PIN, x, y, target_id=comp.id, sub_id=pin_id)
        return None

    def find_endpoint(
        self, pos: tuple[float, float], wires: Iterable[WireSegment]
    ) -> Optional[SnapTarget]:
        """First wire start or end point within tolerance."""
        for wire in wires:
            x, y = start_point(wire.points)
            if self._near(pos, x, y):
                return SnapTarget(SnapType.JUNCTION, x, y, target_id=wire.id, sub_id="start")
            x, y = end_point(wire.points)
            if self._near(pos, x, y):
                return SnapTarget(SnapType.JUNCTION, x, y, target_id=wire.id, sub_id="end")
        return None

    def find_segment(
        self, pos: tuple[float, float], wires: Iterable[WireSegment]
    ) -> Optional[SnapTarget]:
        """First wire run whose projection of ``pos`` is within tolerance.

        A run narrower than one unit in X is treated as vertical, any other
        run as horizontal; the projection is clamped to the run's extent.
        """
        px, py = pos
        for wire in wires:
            for _, (x1, y1), (x2, y2) in iter_segments(wire.points):
                if abs(x1 - x2) < 1:
                    proj_x = x1
                    proj_y = max(min(y1, y2), min(max(y1, y2), py))
                else:
                    proj_y = y1
                    proj_x = max(min(x1, x2), min(max(x1, x2), px))
                if self._near(pos, proj_x, proj_y):
                    return SnapTarget(SnapType.WIRE, proj_x, proj_y, target_id=wire.id)
        return None


def resolve_snap(
    pos: tuple[float, float],
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    tolerance: float = SNAP_TOLERANCE,
    grid: float = GRID_SIZE,
    library: Optional[ComponentLibrary] = None,
    exclude: Collection[str] = (),
) -> SnapTarget:
    """Resolve ``pos`` with a one-off :class:`SnapResolver`."""
    resolver = SnapResolver(tolerance=tolerance, grid=grid, library=library)
    return resolver.resolve(pos, components, wires, exclude=exclude)
