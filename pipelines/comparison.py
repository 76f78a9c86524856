"""
Detector comparison pipelines.

Scores SCC significance sets (both directions) and a binary-mask detector
against the same ground-truth ROI and coordinate universe, so the methods
can be compared side by side.
"""

from typing import Dict, Mapping, Optional

import pandas as pd
from tqdm import tqdm

from eval import (
    GroupOrder,
    extract_significant_points,
    extract_binary_detected_points,
    extract_ground_truth_points,
    get_dimensions,
    calculate_metrics,
    collect_roi_tables,
    split_roi_groups,
)
from utils import log_message, build_comparison_df

BINARY_DETECTOR = "Binary mask"


def resolve_confidence_level(config, confidence_level_index: Optional[int] = None) -> int:
    """Explicit argument first, then config; never falls back to a built-in level."""
    level = confidence_level_index
    if level is None:
        level = config.get("CONFIDENCE_LEVEL_INDEX")
    if level is None:
        raise ValueError(
            "No confidence level selected: pass confidence_level_index or set CONFIDENCE_LEVEL_INDEX"
        )
    return level


def resolve_group_order(config, group_order: Optional[GroupOrder] = None) -> GroupOrder:
    if group_order is not None:
        return group_order
    first, second = config["GROUP_ORDER"]
    return GroupOrder(first=str(first), second=str(second))


def detector_point_sets(estimation_result, mask_table: pd.DataFrame, config,
                        confidence_level_index: Optional[int] = None,
                        group_order: Optional[GroupOrder] = None,
                        log_file: Optional[str] = None) -> Dict[str, pd.DataFrame]:
    """
    Extracts the detected point set of every detector for the configured slice.

    Returns:
        Ordered mapping of detector name -> (x, y) DataFrame:
        SCC positive direction, SCC negative direction, binary mask
    """
    level = resolve_confidence_level(config, confidence_level_index)
    order = resolve_group_order(config, group_order)

    points = extract_significant_points(estimation_result, level, group_order=order, log_file=log_file)
    binary_points = extract_binary_detected_points(
        mask_table, config["SLICE_INDEX"], detected_value=config.get("DETECTED_VALUE", 1)
    )

    return {
        f"SCC ({order.describe('positive')})": points.positive_points,
        f"SCC ({order.describe('negative')})": points.negative_points,
        BINARY_DETECTOR: binary_points,
    }


def _region_truth(roi_table: pd.DataFrame, config) -> pd.DataFrame:
    slice_index = config["SLICE_INDEX"] if "z" in roi_table.columns else None
    return extract_ground_truth_points(roi_table, slice_index=slice_index, roi_value=config.get("ROI_VALUE", 1))


def score_detectors(point_sets: Mapping[str, pd.DataFrame], roi_table: pd.DataFrame, universe,
                    region_name: str, config, log_file: Optional[str] = None) -> pd.DataFrame:
    """
    Scores each detector's points against one region's ground truth.

    Returns:
        Comparison DataFrame, one row per detector
    """
    truth = _region_truth(roi_table, config)
    if truth.empty:
        log_message(f"Warning: ground truth for {region_name} is empty on slice {config['SLICE_INDEX']}", log_file)

    metrics_by_detector = {}
    for detector, detected in point_sets.items():
        label = f"{region_name}: {detector}"
        metrics = calculate_metrics(detected, truth, universe, label, roi_value=config.get("ROI_VALUE", 1))
        metrics_by_detector[detector] = metrics
        if log_file:
            log_message(
                f"  {label}: TP={metrics.tp} FP={metrics.fp} FN={metrics.fn} TN={metrics.tn}",
                log_file,
            )

    return build_comparison_df(metrics_by_detector, decimals=config.get("METRIC_DECIMALS"))


def run_detection_comparison(estimation_result, mask_table: pd.DataFrame, roi_table: pd.DataFrame,
                             config, region_name: str, confidence_level_index: Optional[int] = None,
                             group_order: Optional[GroupOrder] = None, dimensions=None,
                             log_file: Optional[str] = None) -> pd.DataFrame:
    """
    Compares SCC and binary-mask detection for one region.

    Args:
        estimation_result: SCC EstimationResult
        mask_table: Binary-mask voxel table (z, x, y, pet)
        roi_table: Ground-truth ROI voxel table
        config: Configuration dictionary
        region_name: Region label used in the output
        confidence_level_index: Confidence level (overrides config)
        group_order: Group order passed to the estimator (overrides config)
        dimensions: Universe description; inferred from ``roi_table`` if None
        log_file: Optional log file path

    Returns:
        pd.DataFrame with one row per detector
    """
    if log_file:
        log_message(f"Comparing detectors for {region_name} (slice z={config['SLICE_INDEX']})", log_file)

    point_sets = detector_point_sets(
        estimation_result, mask_table, config,
        confidence_level_index=confidence_level_index, group_order=group_order, log_file=log_file,
    )
    universe = dimensions if dimensions is not None else get_dimensions(roi_table)
    return score_detectors(point_sets, roi_table, universe, region_name, config, log_file)


def run_region_batch(estimation_result, mask_table: pd.DataFrame, roi_tables: Mapping[str, pd.DataFrame],
                     config, confidence_level_index: Optional[int] = None,
                     group_order: Optional[GroupOrder] = None, dimensions=None,
                     log_file: Optional[str] = None) -> pd.DataFrame:
    """
    Runs the detector comparison over several ground-truth regions.

    Detector point sets are extracted once; each region is then scored
    against them and the per-region tables are concatenated.

    Args:
        roi_tables: Mapping of region name -> ROI voxel table
        (other arguments as in run_detection_comparison)

    Returns:
        pd.DataFrame with one row per (region, detector)
    """
    if not roi_tables:
        raise ValueError("No ROI tables supplied for batch comparison.")

    point_sets = detector_point_sets(
        estimation_result, mask_table, config,
        confidence_level_index=confidence_level_index, group_order=group_order, log_file=log_file,
    )

    frames = []
    items = tqdm(roi_tables.items(), desc="Scoring regions", total=len(roi_tables),
                 disable=not config.get("SHOW_PROGRESS", True))
    for region_name, roi_table in items:
        universe = dimensions if dimensions is not None else get_dimensions(roi_table)
        frames.append(score_detectors(point_sets, roi_table, universe, region_name, config, log_file))

    return pd.concat(frames, ignore_index=True)


def run_configured_batch(estimation_result, mask_table: pd.DataFrame, config,
                         confidence_level_index: Optional[int] = None,
                         group_order: Optional[GroupOrder] = None, dimensions=None,
                         log_file: Optional[str] = None) -> pd.DataFrame:
    """
    Runs the batch comparison over the ROI tables named in the config.

    Loads ``ROItable_<region>_<number>.csv`` for every entry of ``REGIONS``
    and ``ROI_NUMBERS`` under ``ROI_TABLE_DIR`` and scores each one as its
    own region, labelled ``<region>_numberC<number>``.

    Returns:
        pd.DataFrame with one row per (region table, detector)
    """
    stacked = collect_roi_tables(
        config["ROI_TABLE_DIR"], config["REGIONS"], config["ROI_NUMBERS"], log_file=log_file
    )
    roi_tables = split_roi_groups(stacked)
    if log_file:
        log_message(f"Loaded {len(roi_tables)} ROI table(s) from {config['ROI_TABLE_DIR']}", log_file)

    return run_region_batch(
        estimation_result, mask_table, roi_tables, config,
        confidence_level_index=confidence_level_index, group_order=group_order,
        dimensions=dimensions, log_file=log_file,
    )
