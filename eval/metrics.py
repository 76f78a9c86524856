"""
Detection performance metrics for SCC or binary-mask detections.

Compares a detected voxel set against a ground-truth ROI over a known
coordinate universe and reports sensitivity, specificity, PPV and NPV.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import pandas as pd
from sklearn.metrics import confusion_matrix

from .points import composite_keys, to_point_frame
from .universe import resolve_universe


@dataclass(frozen=True)
class DetectionMetrics:
    """
    Detection summary for one region/detector.

    Rates are percentages in [0, 100], or None when their denominator is zero.
    """

    region: str
    sensitivity: Optional[float]
    specificity: Optional[float]
    ppv: Optional[float]
    npv: Optional[float]
    tp: int = 0
    fp: int = 0
    fn: int = 0
    tn: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "PPV": self.ppv,
            "NPV": self.npv,
            "TP": self.tp,
            "FP": self.fp,
            "FN": self.fn,
            "TN": self.tn,
        }


def _rate(numerator: int, denominator: int) -> Optional[float]:
    return (numerator / denominator) * 100 if denominator > 0 else None


def _truth_points(truth: pd.DataFrame, roi_value: float) -> pd.DataFrame:
    # Voxel tables carry the ROI indicator; plain point sets are taken as-is
    if isinstance(truth, pd.DataFrame) and "pet" in truth.columns:
        truth = truth[truth["pet"].fillna(0) == roi_value]
    return to_point_frame(truth, "truth")


def compute_confusion_counts(detected: pd.DataFrame, truth: pd.DataFrame, universe,
                             roi_value: float = 1) -> Tuple[int, int, int, int]:
    """
    Counts TP, FP, FN and TN for a detected set against the ground truth.

    Every point is encoded as one integer key, and membership of each
    universe voxel in the detected and truth sets is resolved with hashed
    lookups. The two membership vectors are then tabulated with
    ``confusion_matrix``; since both sets must lie inside the universe this
    equals the set algebra

        TP = |D & T|, FP = |D - T|, FN = |T - D|, TN = |(U - T) & (U - D)|

    Args:
        detected: (x, y) coordinates flagged by a detector
        truth: Ground-truth (x, y) coordinates, or a voxel table with ``pet``
        universe: Dimensions, mapping with ``xDim``/``yDim``, or coordinate DataFrame
        roi_value: Indicator value for ROI voxels when ``truth`` has ``pet``

    Returns:
        Tuple (tp, fp, fn, tn)

    Raises:
        ValueError: On malformed inputs or points outside the universe
    """
    detected_pts = to_point_frame(detected, "detected")
    truth_pts = _truth_points(truth, roi_value)
    universe_pts = resolve_universe(universe)

    universe_keys, detected_keys, truth_keys = composite_keys(universe_pts, detected_pts, truth_pts)

    for name, keys, pts in (("detected", detected_keys, detected_pts), ("truth", truth_keys, truth_pts)):
        outside = ~keys.isin(universe_keys)
        if outside.any():
            first = pts[outside].iloc[0]
            raise ValueError(
                f"{int(outside.sum())} '{name}' point(s) lie outside the coordinate universe, "
                f"e.g. (x={first['x']}, y={first['y']})"
            )

    universe_keys = universe_keys.unique()
    in_detected = universe_keys.isin(detected_keys)
    in_truth = universe_keys.isin(truth_keys)

    cm = confusion_matrix(in_truth, in_detected, labels=[False, True])
    tn, fp, fn, tp = (int(v) for v in cm.ravel())
    return tp, fp, fn, tn


def calculate_metrics(detected: pd.DataFrame, truth: pd.DataFrame, universe, region_name: str,
                      roi_value: float = 1) -> DetectionMetrics:
    """
    Evaluates a detected voxel set against the ground-truth ROI.

    Args:
        detected: Detected (x, y) coordinates (SCC significance set or
            binary-mask detections)
        truth: Ground-truth (x, y) coordinates or ROI voxel table
        universe: Full slice grid (Dimensions, ``{'xDim', 'yDim'}`` mapping,
            or coordinate DataFrame)
        region_name: Label for the output record

    Returns:
        DetectionMetrics with rates in percent (None for 0/0)

    Example:
        >>> m = calculate_metrics(points.positive_points, roi, dims, "Region2_SCC")
        >>> m.sensitivity, m.ppv
    """
    if not isinstance(region_name, str) or not region_name:
        raise ValueError("'region_name' must be a non-empty string")

    tp, fp, fn, tn = compute_confusion_counts(detected, truth, universe, roi_value=roi_value)

    return DetectionMetrics(
        region=region_name,
        sensitivity=_rate(tp, tp + fn),
        specificity=_rate(tn, tn + fp),
        ppv=_rate(tp, tp + fp),
        npv=_rate(tn, tn + fn),
        tp=tp,
        fp=fp,
        fn=fn,
        tn=tn,
    )
