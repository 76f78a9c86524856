"""
Ground-truth region-of-interest points.

ROI voxel tables mark region membership in the ``pet`` indicator column;
voxels outside the region are 0 or NaN.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional

import pandas as pd

from .points import require_columns, to_point_frame
from utils.logging_utils import log_message


def roi_table_path(table_dir, region: str, number) -> Path:
    return Path(table_dir) / f"ROItable_{region}_{number}.csv"


def extract_ground_truth_points(roi_table: pd.DataFrame, slice_index: Optional[int] = None,
                                roi_value: float = 1) -> pd.DataFrame:
    """
    Returns the unique (x, y) coordinates flagged as ROI.

    Args:
        roi_table: Voxel table with ``x``, ``y``, ``pet`` (and ``z`` when
            ``slice_index`` is given)
        slice_index: Optional Z slice to restrict to
        roi_value: Indicator value meaning "inside the ROI"
    """
    required = ["x", "y", "pet"] if slice_index is None else ["z", "x", "y", "pet"]
    require_columns(roi_table, required, "roi_table")

    table = roi_table
    if slice_index is not None:
        table = table[table["z"] == slice_index]
    indicator = table["pet"].fillna(0)
    return to_point_frame(table[indicator == roi_value], "roi_table")


def collect_roi_tables(table_dir, regions: Iterable[str], numbers: Iterable,
                       log_file: Optional[str] = None) -> pd.DataFrame:
    """
    Loads and stacks ROI voxel tables for every region/subject combination.

    Each table is read from ``ROItable_<region>_<number>.csv`` and tagged with
    a ``group`` column ``<region>_numberC<number>``. Missing indicators are
    set to 0.

    Raises:
        FileNotFoundError: If any expected table is missing
    """
    from data.loaders import load_voxel_table

    frames = []
    for region in regions:
        for number in numbers:
            path = roi_table_path(table_dir, region, number)
            if log_file:
                log_message(f"Loading ROI table for region {region} and number C{number}", log_file)
            table = load_voxel_table(path)
            table["pet"] = table["pet"].fillna(0)
            table.insert(0, "group", f"{region}_numberC{number}")
            frames.append(table)

    if not frames:
        return pd.DataFrame(columns=["group", "z", "x", "y", "pet"])
    return pd.concat(frames, ignore_index=True)


def split_roi_groups(stacked: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """
    Splits a table from ``collect_roi_tables`` into one ROI table per group.

    Groups keep the order in which they were loaded.
    """
    require_columns(stacked, ["group"], "stacked")
    return {
        str(group): table.drop(columns="group").reset_index(drop=True)
        for group, table in stacked.groupby("group", sort=False)
    }
