"""
Tests for detector comparison pipelines, result tables and the CLI.
"""

import numpy as np
import pandas as pd
import pytest

from conftest import make_grid
from config import get_default_config
from eval import DetectionMetrics, EstimationResult, GroupOrder
from evaluate_detection import main as evaluate_main
from pipelines import detector_point_sets, run_configured_batch, run_detection_comparison, run_region_batch
from utils import build_comparison_df, summarize_by_detector, setup_logging, log_message

POS = "SCC (Pathological > Control)"
NEG = "SCC (Control > Pathological)"
BIN = "Binary mask"


def scc_bounds():
    """4x4 grid: (1,1) and (2,2) positive, (4,4) negative, rest spans zero."""
    grid = make_grid(np.arange(1, 5), np.arange(1, 5))
    bounds = np.tile([-0.1, 0.1], (16, 1))
    for (x, y), pair in (((1, 1), [0.2, 0.4]), ((2, 2), [0.1, 0.3]), ((4, 4), [-0.5, -0.2])):
        bounds[(x - 1) * 4 + (y - 1)] = pair
    return grid, bounds


@pytest.fixture
def scc_result():
    grid, bounds = scc_bounds()
    return EstimationResult(grid, np.arange(1, 17), bounds)


@pytest.fixture
def config():
    cfg = get_default_config()
    cfg["CONFIDENCE_LEVEL_INDEX"] = 0
    cfg["SHOW_PROGRESS"] = False
    return cfg


class TestDetectionComparison:
    """Tests for run_detection_comparison."""

    def test_table_rows(self, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        table = run_detection_comparison(scc_result, mask, roi, config, "Region2")
        assert table["detector"].tolist() == [POS, NEG, BIN]
        assert table["region"].tolist() == [f"Region2: {POS}", f"Region2: {NEG}", f"Region2: {BIN}"]

    def test_scores(self, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        table = run_detection_comparison(scc_result, mask, roi, config, "Region2").set_index("detector")

        assert table.loc[POS, ["TP", "FP", "FN", "TN"]].tolist() == [1, 1, 1, 13]
        assert table.loc[POS, "specificity"] == pytest.approx(92.86, abs=0.01)
        assert table.loc[NEG, ["TP", "FP", "FN", "TN"]].tolist() == [1, 0, 1, 14]
        assert table.loc[NEG, "PPV"] == pytest.approx(100.0)
        assert table.loc[BIN, ["TP", "FP", "FN", "TN"]].tolist() == [1, 2, 1, 12]
        assert table.loc[BIN, "NPV"] == pytest.approx(92.31, abs=0.01)

    def test_explicit_group_order_labels(self, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        table = run_detection_comparison(scc_result, mask, roi, config, "R",
                                         group_order=GroupOrder("AD", "CN"))
        assert table["detector"].tolist()[:2] == ["SCC (AD > CN)", "SCC (CN > AD)"]

    def test_confidence_level_must_be_chosen(self, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        config["CONFIDENCE_LEVEL_INDEX"] = None
        with pytest.raises(ValueError, match="No confidence level selected"):
            run_detection_comparison(scc_result, mask, roi, config, "R")

    def test_argument_overrides_config_level(self, voxel_tables, config):
        mask, _ = voxel_tables
        grid, bounds = scc_bounds()
        two_levels = np.stack([bounds, np.tile([-0.1, 0.1], (16, 1))], axis=2)
        result = EstimationResult(grid, np.arange(1, 17), two_levels)
        sets = detector_point_sets(result, mask, config, confidence_level_index=1)
        assert sets[POS].empty and sets[NEG].empty
        assert len(detector_point_sets(result, mask, config)[POS]) == 2


class TestRegionBatch:
    """Tests for run_region_batch."""

    def test_batch_concatenates_regions(self, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        empty_roi = roi.assign(pet=0.0)
        table = run_region_batch(scc_result, mask, {"Region2": roi, "Region3": empty_roi}, config)
        assert len(table) == 6
        region3 = table[table["region"].str.startswith("Region3")]
        assert region3["sensitivity"].isna().all()

    def test_empty_batch_raises(self, scc_result, voxel_tables, config):
        mask, _ = voxel_tables
        with pytest.raises(ValueError, match="No ROI tables"):
            run_region_batch(scc_result, mask, {}, config)

    def test_configured_batch_loads_roi_tables(self, tmp_path, scc_result, voxel_tables, config):
        mask, roi = voxel_tables
        roi.to_csv(tmp_path / "ROItable_Region2_18.csv", index=False)
        roi.assign(pet=0.0).to_csv(tmp_path / "ROItable_Region3_18.csv", index=False)
        config.update(ROI_TABLE_DIR=str(tmp_path), REGIONS=["Region2", "Region3"], ROI_NUMBERS=["18"])

        table = run_configured_batch(scc_result, mask, config)

        assert len(table) == 6
        assert table["region"].tolist()[:3] == [f"Region2_numberC18: {name}" for name in (POS, NEG, BIN)]
        region2 = table[table["region"].str.startswith("Region2")].set_index("detector")
        assert region2.loc[BIN, ["TP", "FP", "FN", "TN"]].tolist() == [1, 2, 1, 12]
        assert table[table["region"].str.startswith("Region3")]["sensitivity"].isna().all()

    def test_configured_batch_missing_table(self, tmp_path, scc_result, voxel_tables, config):
        mask, _ = voxel_tables
        config.update(ROI_TABLE_DIR=str(tmp_path), REGIONS=["Region9"], ROI_NUMBERS=["1"])
        with pytest.raises(FileNotFoundError):
            run_configured_batch(scc_result, mask, config)


class TestResults:
    """Tests for result table helpers."""

    def test_build_comparison_df_missing_rates_are_nan(self):
        metrics = {"A": DetectionMetrics("r", None, 90.0, None, 80.0, tp=0, fp=0, fn=1, tn=9)}
        df = build_comparison_df(metrics, decimals=1)
        assert df.loc[0, "detector"] == "A"
        assert np.isnan(df.loc[0, "sensitivity"])
        assert df.loc[0, "NPV"] == pytest.approx(80.0)

    def test_build_comparison_df_empty(self):
        assert build_comparison_df({}).empty

    def test_summarize_by_detector(self):
        df = pd.DataFrame({
            "detector": ["A", "A", "B"],
            "sensitivity": [50.0, np.nan, 10.0],
            "specificity": [90.0, 70.0, 20.0],
            "PPV": [1.0, 3.0, 5.0],
            "NPV": [2.0, 4.0, 6.0],
            "TP": [1, 2, 3], "FP": [0, 1, 0], "FN": [1, 1, 1], "TN": [5, 5, 5],
        })
        summary = summarize_by_detector(df).set_index("detector")
        assert summary.loc["A", "sensitivity"] == pytest.approx(50.0)
        assert summary.loc["A", "specificity"] == pytest.approx(80.0)
        assert summary.loc["A", "TP"] == 3
        assert summary.loc["A", "n_regions"] == 2
        assert summary.loc["B", "n_regions"] == 1

    def test_summarize_requires_columns(self):
        with pytest.raises(ValueError, match="Missing columns"):
            summarize_by_detector(pd.DataFrame({"detector": ["A"]}))


class TestLoggingAndConfig:
    """Tests for run directories, logging and defaults."""

    def test_setup_logging(self, tmp_path):
        paths = setup_logging(str(tmp_path))
        assert paths["run_dir"].is_dir()
        assert paths["table_dir"].is_dir()
        log_message("hello", paths["log_file"])
        assert "hello" in open(paths["log_file"], encoding="utf-8").read()

    def test_default_config_has_no_confidence_level(self):
        config = get_default_config()
        assert config["CONFIDENCE_LEVEL_INDEX"] is None
        assert config["INDEX_BASE"] == 1
        assert len(config["GROUP_ORDER"]) == 2


class TestCommandLine:
    """End-to-end run of evaluate_detection.py."""

    def test_main_writes_metrics(self, tmp_path, voxel_tables):
        mask, roi = voxel_tables
        grid, bounds = scc_bounds()
        np.savez(tmp_path / "scc.npz", Z_band=grid, ind_inside_cover=np.arange(1, 17), scc=bounds)
        mask.to_csv(tmp_path / "binary.csv", index=False)
        roi.to_csv(tmp_path / "ROItable_Region2_18.csv", index=False)

        df = evaluate_main([
            "--scc", str(tmp_path / "scc.npz"),
            "--mask", str(tmp_path / "binary.csv"),
            "--roi", str(tmp_path / "ROItable_Region2_18.csv"),
            "--level", "0",
            "--first-group", "AD", "--second-group", "CN",
            "--output-dir", str(tmp_path / "runs"),
        ])

        assert df["detector"].tolist() == ["SCC (AD > CN)", "SCC (CN > AD)", BIN]
        assert df["region"].str.startswith("ROItable_Region2_18").all()
        written = list((tmp_path / "runs").glob("run_*/tables/metrics.csv"))
        assert len(written) == 1
        assert len(pd.read_csv(written[0])) == 3

    def test_main_batch_mode(self, tmp_path, voxel_tables):
        mask, roi = voxel_tables
        grid, bounds = scc_bounds()
        np.savez(tmp_path / "scc.npz", Z_band=grid, ind_inside_cover=np.arange(1, 17), scc=bounds)
        mask.to_csv(tmp_path / "binary.csv", index=False)
        roi_dir = tmp_path / "roiTables"
        roi_dir.mkdir()
        for number in ("18", "19"):
            roi.to_csv(roi_dir / f"ROItable_Region2_{number}.csv", index=False)

        df = evaluate_main([
            "--scc", str(tmp_path / "scc.npz"),
            "--mask", str(tmp_path / "binary.csv"),
            "--roi-dir", str(roi_dir),
            "--regions", "Region2",
            "--numbers", "18", "19",
            "--level", "0",
            "--output-dir", str(tmp_path / "runs"),
        ])

        assert len(df) == 6
        assert df["region"].str.split(":").str[0].unique().tolist() == [
            "Region2_numberC18", "Region2_numberC19",
        ]

    def test_level_is_required(self, tmp_path):
        with pytest.raises(SystemExit):
            evaluate_main(["--roi", str(tmp_path / "roi.csv")])
