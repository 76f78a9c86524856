"""
Evaluation module for SCC-based detection.

Provides significance extraction from SCC estimation results, extraction of
binary-mask and ground-truth point sets, and detection performance metrics.
"""

from .errors import EstimationContractError
from .estimation import EstimationResult
from .significance import (
    GroupOrder,
    DenseSignificanceGrid,
    SignificantPoints,
    reconstruct_dense_grid,
    extract_significant_points,
)
from .binary_detection import extract_binary_detected_points
from .ground_truth import extract_ground_truth_points, collect_roi_tables, split_roi_groups
from .universe import Dimensions, coordinate_universe, get_dimensions
from .metrics import DetectionMetrics, compute_confusion_counts, calculate_metrics

__all__ = [
    'EstimationContractError',
    'EstimationResult',
    'GroupOrder',
    'DenseSignificanceGrid',
    'SignificantPoints',
    'reconstruct_dense_grid',
    'extract_significant_points',
    'extract_binary_detected_points',
    'extract_ground_truth_points',
    'collect_roi_tables',
    'split_roi_groups',
    'Dimensions',
    'coordinate_universe',
    'get_dimensions',
    'DetectionMetrics',
    'compute_confusion_counts',
    'calculate_metrics',
]
