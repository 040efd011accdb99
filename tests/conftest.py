"""Pytest fixtures for schemcap tests."""

import pytest

from schemcap.editor import Editor
from schemcap.library import ComponentLibrary, default_library
from schemcap.models import ComponentInstance, WireSegment


@pytest.fixture
def library() -> ComponentLibrary:
    """The built-in component library."""
    return default_library()


@pytest.fixture
def editor() -> Editor:
    """An empty editor with default settings."""
    return Editor()


@pytest.fixture
def resistor() -> ComponentInstance:
    """A resistor at (100, 100): pins at (100, 110) and (160, 110)."""
    return ComponentInstance(type="resistor", x=100, y=100, id="R1")


@pytest.fixture
def l_wire() -> WireSegment:
    """An L-shaped wire (0,0) -> (40,0) -> (40,40)."""
    return WireSegment.through((0, 0), (40, 0), (40, 40), id="W1")


def place(editor: Editor, type_name: str, x: float, y: float) -> str:
    """Place a component and move its origin to exactly (x, y)."""
    editor.set_placement_mode(type_name)
    component_id = editor.place_component((x, y))
    editor.update_component(component_id, x=x, y=y)
    return component_id


def draw(editor: Editor, *vertices: tuple[float, float]) -> str | None:
    """Draw a wire through ``vertices`` with one click per vertex."""
    editor.start_wire(vertices[0])
    for vertex in vertices[1:]:
        editor.add_wire_point(vertex)
    return editor.finish_wire()


def wire_by_id(editor: Editor, wire_id: str) -> WireSegment:
    return next(w for w in editor.wires if w.id == wire_id)


def component_by_id(editor: Editor, component_id: str) -> ComponentInstance:
    return next(c for c in editor.components if c.id == component_id)
