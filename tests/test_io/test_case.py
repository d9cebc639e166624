"""Tests for case directory access and time selection."""

import math

import pytest

from wallshear.config.schema import TimeSelection
from wallshear.errors import ConfigError, MissingCaseDataError
from wallshear.io.case import Case, Instant, parse_time_spec


@pytest.fixture
def time_case(tmp_path):
    """Case with time directories 0, 0.5, 1, 1e-01 and 10, plus clutter."""
    for name in ["0", "0.5", "1", "1e-01", "10", "constant", "system", "VTK"]:
        (tmp_path / name).mkdir()
    (tmp_path / "2").write_text("a file, not a time directory")
    return Case(tmp_path)


class TestTimes:

    def test_numeric_directories_in_order(self, time_case):
        names = [t.name for t in time_case.times()]

        assert names == ["0", "1e-01", "0.5", "1", "10"]

    def test_default_selects_everything(self, time_case):
        assert len(time_case.select_times(TimeSelection())) == 5

    def test_no_zero(self, time_case):
        selected = time_case.select_times(TimeSelection(no_zero=True))

        assert [t.name for t in selected] == ["1e-01", "0.5", "1", "10"]

    def test_latest_time(self, time_case):
        selected = time_case.select_times(TimeSelection(latest_time=True))

        assert selected == [Instant(10.0, "10")]

    def test_explicit_times_and_ranges(self, time_case):
        selected = time_case.select_times(TimeSelection(time="0.1,0.5:1"))

        assert [t.name for t in selected] == ["1e-01", "0.5", "1"]

    def test_open_ranges(self, time_case):
        assert [t.name for t in time_case.select_times(TimeSelection(time=":0.1"))] == ["0", "1e-01"]
        assert [t.name for t in time_case.select_times(TimeSelection(time="1:"))] == ["1", "10"]

    def test_nothing_selected_is_fatal(self, time_case):
        with pytest.raises(MissingCaseDataError):
            time_case.select_times(TimeSelection(time="3:4"))

    def test_no_time_directories_is_fatal(self, tmp_path):
        (tmp_path / "constant").mkdir()

        with pytest.raises(MissingCaseDataError):
            Case(tmp_path).select_times(TimeSelection())

    def test_missing_case_is_fatal(self, tmp_path):
        with pytest.raises(MissingCaseDataError):
            Case(tmp_path / "absent").times()

    def test_equal_time_values_are_fatal(self, tmp_path):
        for name in ["1", "1.0", "2"]:
            (tmp_path / name).mkdir()

        with pytest.raises(MissingCaseDataError, match="same time"):
            Case(tmp_path).times()

    @pytest.mark.parametrize("name", ["1_0", "inf", "nan", "1e", "0x10", " 1"])
    def test_non_time_names_are_ignored(self, tmp_path, name):
        for entry in ["1", name]:
            (tmp_path / entry).mkdir(exist_ok=True)

        assert [t.name for t in Case(tmp_path).times()] == ["1"]


class TestTimeSpec:

    def test_single_and_range(self):
        assert parse_time_spec("0.5, 1:2") == [(0.5, 0.5), (1.0, 2.0)]

    def test_open_bounds(self):
        lo, hi = parse_time_spec(":3")[0]
        assert lo == -math.inf and hi == 3.0

    @pytest.mark.parametrize("spec", ["", "abc", "2:1", "1:x"])
    def test_invalid(self, spec):
        with pytest.raises(ConfigError):
            parse_time_spec(spec)


class TestPaths:

    def test_region_paths(self, tmp_path):
        case = Case(tmp_path, region="fluid")
        instant = Instant(0.5, "0.5")

        assert case.constant_path == tmp_path / "constant" / "fluid"
        assert case.time_path(instant) == tmp_path / "0.5" / "fluid"
        assert case.boundary_candidates(instant) == [
            tmp_path / "0.5" / "fluid" / "boundary.npz",
            tmp_path / "constant" / "fluid" / "boundary.npz",
        ]

    def test_constant_dict(self, tmp_path):
        (tmp_path / "constant").mkdir()
        (tmp_path / "constant" / "transport.yaml").write_text("rho: 1000\nnu: 1.0e-6\n")
        case = Case(tmp_path)

        assert case.read_constant_dict("transport.yaml") == {"rho": 1000, "nu": 1.0e-6}
        assert case.read_constant_dict("thermo.yaml", required=False) == {}
        with pytest.raises(MissingCaseDataError):
            case.read_constant_dict("thermo.yaml")

    def test_malformed_constant_dict(self, tmp_path):
        (tmp_path / "constant").mkdir()
        (tmp_path / "constant" / "transport.yaml").write_text("rho: [1000\n")

        with pytest.raises(MissingCaseDataError, match="Cannot parse"):
            Case(tmp_path).read_constant_dict("transport.yaml")
