"""
Points flagged by an independently computed binary detection mask (e.g. SPM).

The output has the same (x, y) layout as the SCC significance sets so both
detectors can be scored by the same evaluator.
"""

import pandas as pd

from .points import require_columns, to_point_frame

VOXEL_COLUMNS = ["z", "x", "y", "pet"]


def extract_binary_detected_points(mask_table: pd.DataFrame, slice_index: int,
                                   detected_value: float = 1) -> pd.DataFrame:
    """
    Extracts the voxels of one slice where the binary mask equals ``detected_value``.

    Args:
        mask_table: Flattened voxel table with ``z``, ``x``, ``y``, ``pet`` columns
        slice_index: Z slice to keep
        detected_value: Indicator value meaning "detected"

    Returns:
        DataFrame of unique detected (x, y) coordinates

    Raises:
        ValueError: If columns are missing or the slice has no rows at all
    """
    require_columns(mask_table, VOXEL_COLUMNS, "mask_table")

    slice_rows = mask_table[mask_table["z"] == slice_index]
    if slice_rows.empty:
        raise ValueError(f"Slice z={slice_index} has no rows in the binary mask table")

    detected = slice_rows[slice_rows["pet"] == detected_value]
    return to_point_frame(detected, "mask_table")
