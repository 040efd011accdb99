"""Tests for the connection ERC."""

from schemcap.connectivity import ConnectivityMap
from schemcap.erc import (
    ERC_TYPE_DESCRIPTIONS,
    ERCReport,
    ERCViolation,
    ERCViolationType,
    Severity,
    check_off_grid,
    check_open_connections,
    run_erc,
)
from schemcap.models import ComponentInstance, WireSegment


class TestERCViolationType:
    """Test ERCViolationType enum."""

    def test_every_type_described(self):
        for vtype in ERCViolationType:
            assert vtype.value in ERC_TYPE_DESCRIPTIONS


class TestERCViolation:
    """Test ERCViolation dataclass."""

    def _violation(self):
        return ERCViolation(
            type=ERCViolationType.PIN_NOT_CONNECTED,
            severity=Severity.WARNING,
            description="Pin 1 of G is not connected",
            pos_x=110,
            pos_y=100,
            items=["G.1"],
        )

    def test_properties(self):
        v = self._violation()
        assert not v.is_error
        assert v.type_description == "Unconnected pin"
        assert v.location_str == "(110.0, 100.0)"
        assert v.position == (110, 100)

    def test_to_dict(self):
        d = self._violation().to_dict()
        assert d["type"] == "pin_not_connected"
        assert d["severity"] == "warning"
        assert d["position"] == {"x": 110, "y": 100}
        assert d["items"] == ["G.1"]

    def test_str(self):
        assert str(self._violation()) == (
            "[pin_not_connected]: Pin 1 of G is not connected at (110.0, 100.0)"
        )


class TestRunERC:
    """Test checks over scenes."""

    def test_lone_pin(self):
        """A single unconnected pin is reported."""
        ground = ComponentInstance(type="gnd", x=100, y=100, id="G")
        report = run_erc([ground], [])
        assert report.violation_count == 1
        violation = report.violations[0]
        assert violation.type is ERCViolationType.PIN_NOT_CONNECTED
        assert violation.position == (110, 100)
        assert violation.items == ["G.1"]

    def test_dangling_wire(self, l_wire):
        """Both ends of a free wire dangle."""
        report = run_erc([], [l_wire])
        assert len(report.by_type(ERCViolationType.WIRE_DANGLING)) == 2
        assert {v.items[0] for v in report.violations} == {"W1:start", "W1:end"}

    def test_wired_pins_pass(self):
        """Pins joined by a wire are not reported."""
        r1 = ComponentInstance(type="resistor", x=100, y=100, id="R1")
        r2 = ComponentInstance(type="resistor", x=220, y=100, id="R2")
        link = WireSegment.through((160, 110), (220, 110))
        report = run_erc([r1, r2], [link])
        assert {v.position for v in report.violations} == {(100, 110), (280, 110)}
        assert report.by_type(ERCViolationType.WIRE_DANGLING) == []

    def test_empty_scene_passes(self):
        report = run_erc([], [])
        assert report.passed
        assert report.summary()["total_violations"] == 0

    def test_check_open_connections(self, l_wire):
        """The check runs on a prebuilt connectivity map."""
        report = check_open_connections(ConnectivityMap.build([], [l_wire]))
        assert report.warning_count == 2
        assert report.error_count == 0


class TestERCReport:
    """Test ERCReport aggregation."""

    def test_summary(self, l_wire):
        ground = ComponentInstance(type="gnd", x=100, y=100)
        report = run_erc([ground], [l_wire])
        summary = report.summary()
        assert summary["total_violations"] == 3
        assert summary["warnings"] == 3
        assert summary["by_type"] == {"pin_not_connected": 1, "wire_dangling": 2}

    def test_to_dict(self):
        report = ERCReport()
        assert report.to_dict() == {
            "summary": {"total_violations": 0, "errors": 0, "warnings": 0, "by_type": {}},
            "violations": [],
        }


class TestOffGrid:
    """Test the off-grid connection point check."""

    def test_on_grid_scene_passes(self, resistor, l_wire):
        """Pins at half-grid offsets are on the connection grid."""
        assert check_off_grid([resistor], [l_wire]).passed

    def test_teed_wire_off_grid(self):
        """A wire teed onto a run at an arbitrary point is an error."""
        tee = WireSegment.through((23, 0), (23, -40), id="T")
        report = check_off_grid([], [tee])
        assert report.error_count == 2
        assert {v.items[0] for v in report.violations} == {"T:start", "T:end"}
        violation = report.violations[0]
        assert violation.is_error
        assert violation.type is ERCViolationType.OFF_GRID
        assert violation.description == (
            "Wire T start is off the connection grid (nearest 20, 0)"
        )

    def test_unsnapped_component(self):
        """A component origin off the grid puts its pins off the connection grid."""
        moved = ComponentInstance(type="resistor", x=103, y=100, id="R9")
        report = check_off_grid([moved], [])
        assert [v.items[0] for v in report.violations] == ["R9.1", "R9.2"]
        assert report.violations[0].position == (103, 110)

    def test_custom_grid(self):
        """The connection grid is half the given grid."""
        wire = WireSegment.through((0, 0), (25, 0), id="W")
        assert check_off_grid([], [wire], grid=50).passed
        assert not check_off_grid([], [wire]).passed

    def test_run_erc_includes_errors(self):
        tee = WireSegment.through((23, 0), (23, -40), id="T")
        summary = run_erc([], [tee]).summary()
        assert summary["errors"] == 2
        assert summary["warnings"] == 2
        assert summary["by_type"] == {"wire_dangling": 2, "off_grid": 2}
