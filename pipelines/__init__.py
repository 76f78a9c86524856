"""
Pipeline orchestration module for SCC detection evaluation.

Provides end-to-end comparisons of SCC and binary-mask detectors against
ground-truth regions.
"""

from .comparison import (
    detector_point_sets,
    score_detectors,
    run_detection_comparison,
    run_region_batch,
    run_configured_batch,
)

__all__ = [
    'detector_point_sets',
    'score_detectors',
    'run_detection_comparison',
    'run_region_batch',
    'run_configured_batch',
]
