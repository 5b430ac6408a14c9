"""
Tests for the HB calibration job.
"""

import math

import pytest
import yaml

from domain import CalibrationConfig, GoodHBConfig
from services.calibration import (
    HBCalibrator,
    load_hot_counts,
    parse_hot_counts,
    write_good_hb_config,
)
from services.filters import GoodHBFilter

from conftest import eb_tower, hb_tower


HOT_BIN = 10


def phi_center(iphi: int) -> float:
    return (iphi + 0.5) * 2 * math.pi / 72


def calibration_entries():
    """
    Two entries in the ieta = 0 bin: a flat phi distribution at 2 GeV and
    a low energy excess in one phi bin.
    """
    flat = [
        hb_tower(eta=0.04, phi=phi_center(iphi), energy=2.0)
        for iphi in range(-36, 36)
        for _ in range(10)
    ]
    flat.append(eb_tower(eta=0.04, phi=phi_center(HOT_BIN), energy=50.0))
    excess = [hb_tower(eta=0.04, phi=phi_center(HOT_BIN), energy=0.5) for _ in range(200)]
    return [flat, excess]


def hot_counts(count: int, pvalue: float = 0.01) -> CalibrationConfig:
    counts = [0] * 34
    counts[17] = count
    return CalibrationConfig(pvalue=pvalue, hot_counts=tuple(counts))


class TestParseHotCounts:
    """Tests for the hot count file reader."""

    def test_parse_valid_file(self):
        config = parse_hot_counts([
            "# hot cells per eta bin",
            "",
            "pvalue 0.05",
            "-17 2   # edge",
            "0 1",
        ])
        assert config.pvalue == 0.05
        assert config.numhot(-17) == 2
        assert config.numhot(0) == 1
        assert config.numhot(5) == 0

    def test_default_pvalue(self):
        assert parse_hot_counts([]).pvalue == 0.01

    @pytest.mark.parametrize("line,message", [
        ("pvalue", "line 1: incomplete statement"),
        ("1 2 3", "line 1: incomplete statement"),
        ("pvalue abc", "line 1: cannot interpret 'abc' as a number"),
        ("pvalue 1.5", "line 1: pvalue must be in"),
        ("energy 2", "line 1: unknown parameter 'energy'"),
        ("17 2", "line 1: ieta out of bounds"),
        ("0 x", "line 1: cannot interpret 'x' as a number"),
        ("0 -1", "line 1: value must be positive"),
    ])
    def test_errors_report_line(self, line, message):
        with pytest.raises(ValueError, match=message):
            parse_hot_counts([line])

    def test_error_line_number(self):
        with pytest.raises(ValueError, match="line 3"):
            parse_hot_counts(["# header", "0 1", "0"])

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "hotcells.txt"
        path.write_text("pvalue 0.1\n3 4\n")
        config = load_hot_counts(str(path))
        assert config.pvalue == 0.1
        assert config.numhot(3) == 4


class TestHBCalibrator:
    """Tests for HBCalibrator."""

    def test_collect_counts_hb_towers(self, make_tower_set):
        tower_set = make_tower_set(calibration_entries())
        calibrator = HBCalibrator(hot_counts(0), show_progress=False)
        assert calibrator.collect(tower_set) == 720 + 200

    def test_threshold_removes_low_energy_excess(self, make_tower_set):
        """Test that the threshold lands between the excess and the flat towers."""
        tower_set = make_tower_set(calibration_entries())
        calibrator = HBCalibrator(hot_counts(0), show_progress=False)
        calibrator.collect(tower_set)

        result = calibrator.calibrate_bin(17)

        assert result.ieta == 0
        assert result.hot_cells == ()
        assert 0.5 < result.energy <= 2.0
        assert result.pvalue >= 0.01

    def test_hot_cell_removal_makes_bin_flat(self, make_tower_set):
        tower_set = make_tower_set(calibration_entries())
        calibrator = HBCalibrator(hot_counts(1), show_progress=False)
        calibrator.collect(tower_set)

        result = calibrator.calibrate_bin(17)

        assert result.hot_cells == (HOT_BIN,)
        assert result.energy == 0.0

    def test_empty_bins_get_no_threshold(self, make_tower_set):
        tower_set = make_tower_set(calibration_entries())
        calibrator = HBCalibrator(hot_counts(0), show_progress=False)
        calibrator.collect(tower_set)

        config, results = calibrator.calibrate()

        assert len(results) == 34
        assert results[0].tower_count == 0
        assert config.energies[0] == 0.0
        assert config.energies[17] > 0.5

    def test_calibrated_filter_rejects_excess(self, make_tower_set):
        """Test that the produced configuration drives GoodHBFilter."""
        entries = calibration_entries()
        tower_set = make_tower_set(entries)
        calibrator = HBCalibrator(hot_counts(0), show_progress=False)
        calibrator.collect(tower_set)
        config, _ = calibrator.calibrate()

        good = GoodHBFilter(config)
        tower_set.load(1)
        assert list(tower_set.select(good)) == []
        tower_set.load(0)
        assert sum(1 for _ in tower_set.select(good)) == 720

    def test_write_config(self, tmp_path):
        hot_cells = [()] * 34
        hot_cells[17] = (HOT_BIN,)
        config = GoodHBConfig(energies=(1.5,) * 34, hot_cells=tuple(hot_cells))
        path = tmp_path / "goodhb.yaml"

        write_good_hb_config(config, str(path))

        loaded = yaml.safe_load(path.read_text())
        assert loaded["filters"]["goodhb"]["hot_cells"] == {0: [HOT_BIN]}
        assert GoodHBConfig.from_dict(loaded["filters"]["goodhb"]) == config
