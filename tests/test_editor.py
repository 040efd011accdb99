"""Tests for the Editor operations."""

import pytest
from conftest import component_by_id, draw, place, wire_by_id

from schemcap.config import Config
from schemcap.editor import Editor
from schemcap.erc import ERCViolationType
from schemcap.geometry import is_orthogonal
from schemcap.library import ComponentLibrary
from schemcap.models import SnapType, ToolMode


def assert_all_orthogonal(editor):
    for wire in editor.wires:
        assert is_orthogonal(wire.points), wire.points


def assert_no_reversals(editor):
    """Collinear vertices only ever sit strictly between their neighbours."""
    for wire in editor.wires:
        vertices = wire.vertices
        for (ax, ay), (bx, by), (cx, cy) in zip(vertices, vertices[1:], vertices[2:]):
            if ax == bx == cx:
                assert min(ay, cy) < by < max(ay, cy), wire.points
            elif ay == by == cy:
                assert min(ax, cx) < bx < max(ax, cx), wire.points


def wired_resistor(editor):
    """A resistor at (100, 100) with an L-shaped wire leaving pin 2."""
    r = place(editor, "resistor", 100, 100)
    w = draw(editor, (160, 110), (200, 110), (200, 160))
    return r, w


class TestPlacement:
    """Test component placement."""

    def test_place_centres_on_snap_point(self, editor):
        """The bounding box is centred on the snap point, then grid-snapped."""
        editor.set_placement_mode("resistor")
        component_id = editor.place_component((140, 100))
        comp = component_by_id(editor, component_id)
        assert (comp.x, comp.y) == (120, 100)
        assert comp.rotation == 0
        assert comp.mirrored is False
        assert comp.properties == {"value": "10k", "name": "R1"}

    def test_place_records_history(self, editor):
        editor.set_placement_mode("capacitor")
        editor.place_component((0, 0))
        assert editor.can_undo
        editor.undo()
        assert editor.components == ()

    def test_place_without_type_is_noop(self, editor):
        assert editor.place_component((0, 0)) is None
        assert editor.components == ()
        assert not editor.can_undo

    def test_unknown_placement_type_ignored(self, editor):
        editor.set_placement_mode("tube")
        assert editor.tool_mode is ToolMode.SELECT
        assert editor.active_type is None

    def test_placement_mode(self, editor):
        editor.set_placement_mode("opamp")
        assert editor.tool_mode is ToolMode.PLACE
        assert editor.active_type == "opamp"

    def test_pin_positions_after_place(self, editor):
        """A resistor at (100,100) has pins at (100,110) and (160,110)."""
        place(editor, "resistor", 100, 100)
        assert set(editor.connection_counts()) == {(100, 110), (160, 110)}


class TestDrawing:
    """Test wire drawing through the editor."""

    def test_l_shaped_wire(self, editor):
        """Drawing (0,0) -> (40,0) -> (40,40) commits one corner."""
        wire_id = draw(editor, (0, 0), (40, 0), (40, 40))
        assert wire_by_id(editor, wire_id).points == [0, 0, 40, 0, 40, 40]
        assert editor.tool_mode is ToolMode.SELECT
        assert editor.drawing_wire is None

    def test_tee_splits_existing_wire(self, editor):
        """A wire starting inside another's run inserts a vertex there."""
        first = draw(editor, (0, 0), (40, 0), (40, 40))
        second = draw(editor, (20, 0), (20, -20))
        assert wire_by_id(editor, first).points == [0, 0, 20, 0, 40, 0, 40, 40]
        assert wire_by_id(editor, second).points == [20, 0, 20, -20]
        assert len(editor.wires) == 2

    def test_split_keeps_endpoints(self, editor):
        first = draw(editor, (0, 0), (40, 0), (40, 40))
        before = wire_by_id(editor, first)
        draw(editor, (40, 20), (80, 20))
        after = wire_by_id(editor, first)
        assert after.vertex_count == before.vertex_count + 1
        assert (after.start, after.end) == (before.start, before.end)

    def test_preview_follows_pointer(self, editor):
        editor.start_wire((0, 0))
        assert editor.tool_mode is ToolMode.WIRE
        editor.update_drawing_wire((40, 10))
        assert editor.drawing_wire.points == [0, 0, 40, 0]
        editor.update_drawing_wire((20, 20))
        assert editor.drawing_wire.points == [0, 0, 0, 20]

    def test_degenerate_wire_is_noop(self, editor):
        """Finishing without two distinct points commits nothing."""
        editor.start_wire((0, 0))
        assert editor.finish_wire() is None
        assert editor.wires == ()
        assert not editor.can_undo

    def test_cancel(self, editor):
        editor.start_wire((0, 0))
        editor.update_drawing_wire((60, 0))
        editor.cancel_wire()
        assert editor.drawing_wire is None
        assert editor.wires == ()
        assert not editor.can_undo

    def test_tool_switch_cancels(self, editor):
        editor.start_wire((0, 0))
        editor.update_drawing_wire((60, 0))
        editor.set_tool_mode(ToolMode.PAN)
        assert editor.drawing_wire is None
        assert editor.tool_mode is ToolMode.PAN

    def test_wire_snaps_to_pin(self, editor):
        """A wire started near a pin starts exactly on it."""
        place(editor, "resistor", 100, 100)
        wire_id = draw(editor, (163, 106), (220, 110))
        assert wire_by_id(editor, wire_id).start == (160, 110)

    def test_undo_removes_wire(self, editor):
        draw(editor, (0, 0), (40, 0))
        editor.undo()
        assert editor.wires == ()
        editor.redo()
        assert len(editor.wires) == 1


class TestComponentTransforms:
    """Test moves, rotation and mirroring with rubber-banding."""

    def test_move_reroutes_attached_wire(self, editor):
        r, w = wired_resistor(editor)
        editor.begin_component_drag(r)
        editor.move_component(r, 100, 140)
        assert wire_by_id(editor, w).points == [160, 150, 200, 150, 200, 160]
        assert len(editor.wires) == 1
        assert_all_orthogonal(editor)

    def test_drag_undoes_in_one_step(self, editor):
        r, w = wired_resistor(editor)
        before = editor.snapshot()
        editor.begin_component_drag(r)
        editor.move_component(r, 100, 140)
        editor.move_component(r, 100, 180)
        editor.undo()
        assert editor.snapshot() == before

    def test_abutment_drag_creates_connection(self, editor):
        """Dragging a component away from an abutting pin stretches a seed wire."""
        r1 = place(editor, "resistor", 100, 100)
        r2 = place(editor, "resistor", 160, 100)
        editor.begin_component_drag(r2)
        assert [w.points for w in editor.wires] == [[160, 110, 160, 110]]
        editor.move_component(r2, 160, 140)
        assert [w.points for w in editor.wires] == [[160, 150, 160, 110]]
        nets = {str(p): n.name for n in editor.nets() for p in n.pins}
        assert nets[f"{r1}.2"] == nets[f"{r2}.1"]

    def test_rotate_selection(self, editor):
        r, w = wired_resistor(editor)
        editor.select_item(r)
        editor.rotate_selection()
        comp = component_by_id(editor, r)
        assert comp.rotation == 90
        # Pin 2 moved from (160, 110) to (130, 140)
        assert wire_by_id(editor, w).start == (130, 140)
        assert_all_orthogonal(editor)

    def test_rotate_wraps(self, editor):
        r = place(editor, "resistor", 100, 100)
        editor.select_item(r)
        for _ in range(4):
            editor.rotate_selection()
        assert component_by_id(editor, r).rotation == 0

    def test_half_turn_keeps_wires_on_their_pins(self, editor):
        r = place(editor, "resistor", 100, 100)
        left = draw(editor, (100, 110), (60, 110))
        right = draw(editor, (160, 110), (200, 110))
        editor.select_item(r)
        editor.rotate_selection()
        editor.rotate_selection()
        assert wire_by_id(editor, left).start == (160, 110)
        assert wire_by_id(editor, right).start == (100, 110)

    def test_mirror_selection(self, editor):
        r, w = wired_resistor(editor)
        editor.select_item(r)
        editor.mirror_selection()
        assert component_by_id(editor, r).mirrored is True
        assert wire_by_id(editor, w).start == (100, 110)

    def test_rotate_without_selection_is_noop(self, editor):
        place(editor, "resistor", 100, 100)
        editor.clear_selection()
        count = len(editor._history.past)
        editor.rotate_selection()
        assert len(editor._history.past) == count

    def test_move_selection_rigid_wires(self, editor):
        """Selected wires translate; unselected attached wires rubber-band."""
        r, w = wired_resistor(editor)
        editor.select_item(r)
        editor.move_selection(0, 40)
        assert component_by_id(editor, r).position == (100, 140)
        assert wire_by_id(editor, w).start == (160, 150)

        editor.select_item(w, multi=True)
        editor.move_selection(20, 0)
        assert component_by_id(editor, r).position == (120, 140)
        assert wire_by_id(editor, w).start == (180, 150)

    def test_update_unknown_component_is_noop(self, editor):
        editor.update_component("missing", x=10)
        assert editor.components == ()

    def test_update_properties(self, editor):
        r = place(editor, "resistor", 100, 100)
        editor.update_component(r, properties={"name": "9", "value": "1M"})
        assert component_by_id(editor, r).properties == {"name": "9", "value": "1M"}


class TestSelection:
    """Test selection operations."""

    def test_select_item(self, editor):
        editor.select_item("a")
        editor.select_item("b")
        assert editor.selected_ids == ("b",)
        editor.select_item("a", multi=True)
        assert editor.selected_ids == ("b", "a")
        editor.select_item("b", multi=True)
        assert editor.selected_ids == ("a",)
        editor.select_item(None)
        assert editor.selected_ids == ()

    def test_select_box(self, editor):
        """Components by centre, wires by full bounding box."""
        r = place(editor, "resistor", 100, 100)  # centre (130, 110)
        inside = draw(editor, (0, 0), (40, 0))
        draw(editor, (0, 200), (400, 200))
        selected = editor.select_box((200, 150), (-10, -10))
        assert set(selected) == {r, inside}
        assert set(editor.selected_ids) == {r, inside}

    def test_select_box_edges_inclusive(self, editor):
        wire = draw(editor, (0, 0), (40, 0))
        assert editor.select_box((0, 0), (40, 0)) == [wire]

    def test_delete_selection(self, editor):
        r, _ = wired_resistor(editor)
        editor.select_item(r)
        editor.delete_selection()
        assert editor.components == ()
        assert len(editor.wires) == 1
        assert editor.selected_ids == ()
        editor.undo()
        assert len(editor.components) == 1

    def test_delete_nothing_is_noop(self, editor):
        editor.delete_selection()
        assert not editor.can_undo


class TestClipboard:
    """Test copy and paste."""

    def test_copy_paste(self, editor):
        r = place(editor, "resistor", 100, 100)
        editor.select_item(r)
        editor.copy()
        pasted = editor.paste()
        assert len(pasted) == 1
        assert pasted[0] != r
        clone = component_by_id(editor, pasted[0])
        assert clone.position == (120, 120)
        assert editor.selected_ids == tuple(pasted)

    def test_paste_empty_is_noop(self, editor):
        assert editor.paste() == []
        assert not editor.can_undo

    def test_copy_ignores_wires(self, editor):
        w = draw(editor, (0, 0), (40, 0))
        editor.select_item(w)
        editor.copy()
        assert editor.clipboard == ()

    def test_clipboard_is_by_value(self, editor):
        r = place(editor, "resistor", 100, 100)
        editor.select_item(r)
        editor.copy()
        editor.update_component(r, x=300)
        assert editor.clipboard[0].x == 100


class TestWireDrags:
    """Test endpoint and segment drags through the editor."""

    def test_segment_drag_slides_contacts(self, editor):
        main = draw(editor, (0, 0), (40, 0))
        branch = draw(editor, (0, -40), (0, 0))
        editor.start_segment_drag(main, 0, (20, 0))
        editor.update_segment_drag((20, 20))
        editor.end_segment_drag()
        assert wire_by_id(editor, main).points == [0, 20, 40, 20]
        assert wire_by_id(editor, branch).points == [0, -40, 0, 20]
        editor.undo()
        assert wire_by_id(editor, main).points == [0, 0, 40, 0]

    def test_segment_drag_to_same_line_is_noop(self, editor):
        main = draw(editor, (0, 0), (40, 0))
        count = len(editor._history.past)
        editor.start_segment_drag(main, 0, (20, 0))
        editor.update_segment_drag((25, 4))
        editor.end_segment_drag()
        assert len(editor._history.past) == count
        assert wire_by_id(editor, main).points == [0, 0, 40, 0]

    def test_segment_drag_bad_index_ignored(self, editor):
        main = draw(editor, (0, 0), (40, 0))
        editor.start_segment_drag(main, 6, (20, 0))
        assert not editor.is_dragging

    def test_endpoint_drag_squares_off(self, editor):
        w = draw(editor, (0, 0), (40, 0))
        editor.start_wire_end_drag(w, 2)
        editor.update_wire_end_drag((60, 41))
        assert wire_by_id(editor, w).points == [0, 0, 60, 40]
        editor.end_wire_end_drag()
        assert wire_by_id(editor, w).points == [0, 0, 60, 0, 60, 40]
        assert editor.can_undo

    def test_endpoint_drag_snaps_to_pin(self, editor):
        place(editor, "resistor", 100, 100)
        w = draw(editor, (0, 100), (40, 100))
        editor.start_wire_end_drag(w, 2)
        editor.update_wire_end_drag((96, 113))
        editor.end_wire_end_drag()
        assert wire_by_id(editor, w).points == [0, 100, 100, 100, 100, 110]
        assert (100, 110) not in editor.open_points()

    def test_segment_drag_of_split_wire_stays_orthogonal(self, editor):
        """Both runs of a T-split line move together."""
        main = draw(editor, (0, 0), (40, 0), (40, 40))
        branch = draw(editor, (20, 0), (20, -20))
        editor.start_segment_drag(main, 0, (10, 0))
        editor.update_segment_drag((10, 20))
        editor.end_segment_drag()
        assert wire_by_id(editor, main).points == [0, 20, 20, 20, 40, 20, 40, 40]
        assert wire_by_id(editor, branch).points == [20, 20, 20, -20]
        assert_all_orthogonal(editor)
        assert_no_reversals(editor)

    def test_endpoint_drag_does_not_double_back(self, editor):
        """A release that would fold a wire over itself collapses the fold."""
        main = draw(editor, (0, 0), (40, 0), (40, 40))
        side = draw(editor, (40, 0), (80, 0))
        editor.start_wire_end_drag(main, 0)
        editor.update_wire_end_drag((20, 20))
        editor.end_wire_end_drag()
        assert wire_by_id(editor, main).points == [20, 20, 40, 20, 40, 40]
        assert wire_by_id(editor, side).points == [40, 0, 80, 0]
        assert_all_orthogonal(editor)
        assert_no_reversals(editor)
        assert (40, 0) in editor.open_points()

    def test_tool_switch_abandons_drag(self, editor):
        main = draw(editor, (0, 0), (40, 0))
        editor.start_segment_drag(main, 0, (20, 0))
        editor.update_segment_drag((20, 40))
        editor.set_tool_mode("select")
        assert wire_by_id(editor, main).points == [0, 0, 40, 0]
        assert not editor.is_dragging


class TestHistory:
    """Test undo/redo symmetry."""

    def test_undo_redo_symmetry(self, editor):
        r = place(editor, "resistor", 100, 100)
        draw(editor, (160, 110), (220, 110))
        editor.select_item(r)
        before_rotate = editor.snapshot()
        editor.rotate_selection()
        after_rotate = editor.snapshot()

        editor.undo()
        assert editor.snapshot() == before_rotate
        editor.redo()
        assert editor.snapshot() == after_rotate

    def test_boundaries_are_noops(self, editor):
        editor.undo()
        editor.redo()
        assert editor.components == ()

    def test_history_depth_from_config(self):
        config = Config()
        config.history.depth = 2
        editor = Editor(config=config)
        for x in (0, 100, 200):
            draw(editor, (x, 0), (x + 40, 0))
        editor.undo()
        editor.undo()
        editor.undo()
        assert len(editor.wires) == 1


class TestDerivedViews:
    """Test connectivity, ERC and netlist views."""

    def test_junction_and_open_points(self, editor):
        draw(editor, (0, 0), (40, 0))
        draw(editor, (40, 0), (40, 40))
        draw(editor, (80, 0), (40, 0))
        assert editor.junctions() == [(40, 0)]
        assert set(editor.open_points()) == {(0, 0), (40, 40), (80, 0)}

    def test_erc(self, editor):
        place(editor, "gnd", 100, 100)
        report = editor.erc()
        assert [v.type for v in report.violations] == [ERCViolationType.PIN_NOT_CONNECTED]

    def test_erc_reports_off_grid_tee(self, editor):
        """A wire teed at an unsnapped projection is flagged as an error."""
        draw(editor, (0, 0), (40, 0))
        tee = draw(editor, (23, 3), (23, -40))
        report = editor.erc()
        off_grid = report.by_type(ERCViolationType.OFF_GRID)
        assert {v.items[0] for v in off_grid} == {f"{tee}:start", f"{tee}:end"}
        assert report.error_count == 2

    def test_netlist(self, editor):
        r = place(editor, "resistor", 100, 100)
        editor.update_component(r, properties={"name": "1", "value": "220"})
        assert editor.netlist() == "* schemcap netlist\nR1 N001 N002 220\n.end\n"

    def test_views_are_copies(self, editor):
        """Mutating returned objects does not touch editor state."""
        w = draw(editor, (0, 0), (40, 0))
        editor.wires[0].points.append(1)
        assert wire_by_id(editor, w).points == [0, 0, 40, 0]


class TestMaintenance:
    """Test the explicit zero-length prune."""

    def test_prune_unused_seeds(self, editor):
        place(editor, "resistor", 100, 100)
        r2 = place(editor, "resistor", 160, 100)
        editor.begin_component_drag(r2)
        assert len(editor.wires) == 1
        assert editor.prune_zero_length_wires() == 1
        assert editor.wires == ()
        assert editor.prune_zero_length_wires() == 0


class TestSubscriptions:
    """Test change notification."""

    def test_subscribers_called(self, editor):
        calls = []
        editor.subscribe(calls.append)
        draw(editor, (0, 0), (40, 0))
        assert calls and all(c is editor for c in calls)

        editor.unsubscribe(calls.append)
        count = len(calls)
        editor.select_item(None)
        assert len(calls) == count


class TestConfiguration:
    def test_custom_library(self):
        editor = Editor(library=ComponentLibrary([]))
        editor.set_placement_mode("resistor")
        assert editor.active_type is None

    def test_snap_tolerance_from_config(self):
        config = Config()
        config.snap.tolerance = 2
        editor = Editor(config=config)
        draw(editor, (0, 0), (40, 0))
        target = editor.resolve_snap((3, 0))
        assert target.type is SnapType.WIRE
        assert target.position == (3, 0)

    @pytest.mark.parametrize("mode", ["bogus", 42])
    def test_bad_tool_mode_ignored(self, editor, mode):
        editor.set_tool_mode(mode)
        assert editor.tool_mode is ToolMode.SELECT
