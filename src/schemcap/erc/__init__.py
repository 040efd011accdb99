"""ERC (Electrical Rules Check) for connection points.

Warns at every location where a single pin or wire end sits with nothing
attached to it, and reports an error for every pin or wire end that lies
off the connection grid.

Example:
    >>> from schemcap.erc import run_erc
    >>> report = run_erc(components, wires)
    >>> for v in report.violations:
    ...     print(v)
"""

from .report import ERCReport, check_off_grid, check_open_connections, run_erc
from .violation import (
    ERC_TYPE_DESCRIPTIONS,
    ERCViolation,
    ERCViolationType,
    Severity,
)

__all__ = [
    # Violation types
    "ERCViolation",
    "ERCViolationType",
    "Severity",
    "ERC_TYPE_DESCRIPTIONS",
    # Checks
    "ERCReport",
    "check_open_connections",
    "check_off_grid",
    "run_erc",
]
