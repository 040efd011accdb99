"""ERC violation data structures."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """Violation severity level."""

    ERROR = "error"
    WARNING = "warning"


class ERCViolationType(Enum):
    """Connection checks run on the scene."""

    PIN_NOT_CONNECTED = "pin_not_connected"
    WIRE_DANGLING = "wire_dangling"
    OFF_GRID = "off_grid"


# Human-readable descriptions for each type
ERC_TYPE_DESCRIPTIONS = {
    "pin_not_connected": "Unconnected pin",
    "wire_dangling": "Wire not connected at both ends",
    "off_grid": "Connection point off the connection grid",
}


@dataclass
class ERCViolation:
    """A single ERC marker."""

    type: ERCViolationType
    severity: Severity
    description: str
    pos_x: float = 0
    pos_y: float = 0
    items: list[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        """Check if this is an error (vs warning)."""
        return self.severity == Severity.ERROR

    @property
    def type_description(self) -> str:
        """Get human-readable description of the violation type."""
        return ERC_TYPE_DESCRIPTIONS.get(self.type.value, self.type.value.replace("_", " ").title())

    @property
    def position(self) -> tuple[float, float]:
        return (self.pos_x, self.pos_y)

    @property
    def location_str(self) -> str:
        """Format location for display."""
        return f"({self.pos_x:.1f}, {self.pos_y:.1f})"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "type_description": self.type_description,
            "severity": self.severity.value,
            "description": self.description,
            "position": {"x": self.pos_x, "y": self.pos_y},
            "items": self.items,
        }

    def __str__(self) -> str:
        return f"[{self.type.value}]: {self.description} at {self.location_str}"
