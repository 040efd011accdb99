"""Connection ERC: open connections and off-grid connection points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..connectivity import ConnectivityMap
from ..geometry import GRID_SIZE, is_on_grid, snap_point
from ..library import ComponentLibrary, default_library
from ..models import ComponentInstance, WireSegment
from .violation import ERCViolation, ERCViolationType, Severity


@dataclass
class ERCReport:
    """Result of one or more ERC checks."""

    violations: list[ERCViolation] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def error_count(self) -> int:
        """Number of error-level violations."""
        return sum(1 for v in self.violations if v.is_error)

    @property
    def warning_count(self) -> int:
        """Number of warning-level violations."""
        return sum(1 for v in self.violations if v.severity == Severity.WARNING)

    @property
    def passed(self) -> bool:
        return not self.violations

    def by_type(self, vtype: ERCViolationType) -> list[ERCViolation]:
        """Get violations of a specific type."""
        return [v for v in self.violations if v.type == vtype]

    def summary(self) -> dict:
        """Generate a summary of the report."""
        by_type: dict[str, int] = {}
        for v in self.violations:
            by_type[v.type.value] = by_type.get(v.type.value, 0) + 1
        return {
            "total_violations": self.violation_count,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "by_type": by_type,
        }

    def to_dict(self) -> dict:
        """Convert report to dictionary."""
        return {
            "summary": self.summary(),
            "violations": [v.to_dict() for v in self.violations],
        }


def check_open_connections(connectivity: ConnectivityMap) -> ERCReport:
    """One warning per location with a single terminal.

    A lone pin is reported as an unconnected pin, a lone wire end as a
    dangling wire.
    """
    violations = []
    for point in connectivity.open_points():
        if point.pins:
            comp_id, pin_id = point.pins[0]
            violations.append(
                ERCViolation(
                    type=ERCViolationType.PIN_NOT_CONNECTED,
                    severity=Severity.WARNING,
                    description=f"Pin {pin_id} of {comp_id} is not connected",
                    pos_x=point.x,
                    pos_y=point.y,
                    items=[f"{comp_id}.{pin_id}"],
                )
            )
        else:
            wire_id, end = point.wire_ends[0]
            violations.append(
                ERCViolation(
                    type=ERCViolationType.WIRE_DANGLING,
                    severity=Severity.WARNING,
                    description=f"Wire {wire_id} {end} is not connected",
                    pos_x=point.x,
                    pos_y=point.y,
                    items=[f"{wire_id}:{end}"],
                )
            )
    return ERCReport(violations=violations)


def check_off_grid(
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    library: Optional[ComponentLibrary] = None,
    grid: float = GRID_SIZE,
) -> ERCReport:
    """One error per pin or wire end off the connection grid.

    Pins sit at half-grid offsets from grid-snapped origins, so every
    reachable connection point lies on the half grid. A point off it (a
    component moved to an unsnapped origin, a wire teed onto a run at an
    arbitrary projection) can never be hit exactly by grid-snapped drawing.
    """
    library = library if library is not None else default_library()
    pitch = grid / 2
    violations = []

    def off_grid(x: float, y: float, label: str, item: str) -> None:
        if is_on_grid(x, pitch) and is_on_grid(y, pitch):
            return
        nx, ny = snap_point((x, y), pitch)
        violations.append(
            ERCViolation(
                type=ERCViolationType.OFF_GRID,
                severity=Severity.ERROR,
                description=f"{label} is off the connection grid (nearest {nx:g}, {ny:g})",
                pos_x=x,
                pos_y=y,
                items=[item],
            )
        )

    for comp in components:
        for pin_id, (x, y) in library.pin_positions(comp).items():
            off_grid(x, y, f"Pin {pin_id} of {comp.id}", f"{comp.id}.{pin_id}")
    for wire in wires:
        if len(wire.points) < 4:
            continue
        off_grid(*wire.start, f"Wire {wire.id} start", f"{wire.id}:start")
        off_grid(*wire.end, f"Wire {wire.id} end", f"{wire.id}:end")
    return ERCReport(violations=violations)


def run_erc(
    components: Iterable[ComponentInstance],
    wires: Iterable[WireSegment],
    library: Optional[ComponentLibrary] = None,
    grid: float = GRID_SIZE,
) -> ERCReport:
    """Run every check on a scene: open connections, then off-grid points."""
    components = list(components)
    wires = list(wires)
    report = check_open_connections(ConnectivityMap.build(components, wires, library))
    report.violations.extend(check_off_grid(components, wires, library, grid).violations)
    return report
