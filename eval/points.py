"""
Coordinate point-set helpers.

Detected points, ground truth points and coordinate universes are all carried
as pandas DataFrames with ``x`` and ``y`` columns, one row per unique voxel.
"""

import numpy as np
import pandas as pd

POINT_COLUMNS = ["x", "y"]


def empty_points() -> pd.DataFrame:
    """Returns an empty point set with integer ``x``/``y`` columns."""
    return pd.DataFrame({"x": pd.Series([], dtype=np.int64), "y": pd.Series([], dtype=np.int64)})


def require_columns(table: pd.DataFrame, columns, name: str) -> None:
    """Raises ValueError if ``table`` is not a DataFrame holding ``columns``."""
    if not isinstance(table, pd.DataFrame):
        raise ValueError(f"'{name}' must be a pandas DataFrame, got {type(table).__name__}")
    missing = [col for col in columns if col not in table.columns]
    if missing:
        raise ValueError(f"'{name}' must contain columns {list(columns)}; missing {missing}")


def to_point_frame(points: pd.DataFrame, name: str) -> pd.DataFrame:
    """
    Normalizes a coordinate table to a unique, integer (x, y) point set.

    Args:
        points: DataFrame with at least ``x`` and ``y`` columns
        name: Argument name used in error messages

    Returns:
        DataFrame with int64 ``x``/``y`` columns and no duplicate rows

    Raises:
        ValueError: If columns are missing or coordinates are not whole numbers
    """
    require_columns(points, POINT_COLUMNS, name)
    if points.empty:
        return empty_points()

    coords = points[POINT_COLUMNS]
    values = coords.to_numpy(dtype=np.float64)
    if np.isnan(values).any() or np.any(np.mod(values, 1) != 0):
        raise ValueError(f"'{name}' must hold whole-number voxel coordinates")

    return coords.astype(np.int64).drop_duplicates().reset_index(drop=True)


def composite_keys(*point_sets: pd.DataFrame):
    """
    Encodes each (x, y) pair as a single integer key, shared across sets.

    The key ``(x - x_min) * y_span + (y - y_min)`` is a bijection over the
    bounding box of all sets passed in, so membership tests on keys are
    exact and can use hashed lookups.

    Returns:
        List of pandas Index objects, one per input point set
    """
    non_empty = [p for p in point_sets if not p.empty]
    if not non_empty:
        return [pd.Index([], dtype=np.int64) for _ in point_sets]

    x_min = min(int(p["x"].min()) for p in non_empty)
    y_min = min(int(p["y"].min()) for p in non_empty)
    y_max = max(int(p["y"].max()) for p in non_empty)
    y_span = y_max - y_min + 1

    keys = []
    for p in point_sets:
        x = p["x"].to_numpy(dtype=np.int64)
        y = p["y"].to_numpy(dtype=np.int64)
        keys.append(pd.Index((x - x_min) * y_span + (y - y_min), dtype=np.int64))
    return keys
