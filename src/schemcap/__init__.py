"""
schemcap: topology and routing engine for interactive schematic capture.

Users place components on a grid and draw orthogonal wires between them;
the engine keeps the drawing electrically consistent while it is edited.

Modules:
    geometry: grid snapping, pin positions, point-on-segment tests
    library: component types (geometry, pins, SPICE templates)
    snap: pointer snap resolution (pin > junction > wire > grid)
    canonical: collinear merging, T-junction splitting
    drawing: the wire drawing state machine
    topology: rubber-banding, abutment seeding, sliding contacts
    connectivity: junction and open-point aggregation
    erc: open-connection checks
    netlist: net extraction and SPICE rendering
    history: undo/redo snapshots
    editor: the Editor tying it all together

Quick Start::

    from schemcap import Editor

    editor = Editor()
    editor.set_placement_mode("resistor")
    editor.place_component((130, 110))   # pins at (100, 110) and (160, 110)

    editor.start_wire((160, 110))
    editor.update_drawing_wire((220, 110))
    editor.finish_wire()

    print(editor.junctions(), editor.open_points())
    print(editor.netlist())
"""

__version__ = "0.1.0"

from schemcap.config import Config
from schemcap.connectivity import ConnectivityMap, connection_counts
from schemcap.editor import Editor
from schemcap.erc import ERCReport, run_erc
from schemcap.exceptions import (
    ConfigError,
    SchemcapError,
    UnknownComponentTypeError,
)
from schemcap.library import ComponentLibrary, default_library
from schemcap.logging import disable_verbose, enable_verbose
from schemcap.models import (
    ComponentInstance,
    EditorStateSnapshot,
    SnapTarget,
    SnapType,
    ToolMode,
    WireSegment,
)
from schemcap.netlist import generate_netlist

__all__ = [
    # Editor
    "Editor",
    "Config",
    # Models
    "ComponentInstance",
    "WireSegment",
    "SnapTarget",
    "SnapType",
    "ToolMode",
    "EditorStateSnapshot",
    # Library
    "ComponentLibrary",
    "default_library",
    # Derived views
    "ConnectivityMap",
    "connection_counts",
    "ERCReport",
    "run_erc",
    "generate_netlist",
    # Logging
    "enable_verbose",
    "disable_verbose",
    # Exceptions
    "SchemcapError",
    "UnknownComponentTypeError",
    "ConfigError",
]
