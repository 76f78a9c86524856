"""
Shared fixtures for detection evaluation tests.
"""

import numpy as np
import pandas as pd
import pytest

from eval import EstimationResult


def make_grid(x_values, y_values):
    """Grid positions with axis 2 varying fastest, as the engine lays them out."""
    xs, ys = np.meshgrid(x_values, y_values, indexing="ij")
    return np.column_stack([xs.ravel(), ys.ravel()]).astype(float)


def points(*pairs):
    return pd.DataFrame(list(pairs), columns=["x", "y"])


@pytest.fixture
def scenario_a_result():
    """2x2 grid, all cells covered, one confidence level."""
    bounds = np.array([
        [0.1, 0.5],
        [-0.3, -0.05],
        [-0.1, 0.2],
        [0.05, 0.4],
    ])
    return EstimationResult(
        grid_positions=make_grid([1, 2], [1, 2]),
        inside_cover_index=[1, 2, 3, 4],
        confidence_bounds=bounds,
    )


@pytest.fixture
def voxel_tables():
    """4x4 slice z=35 plus one other slice, with binary mask and ROI tables."""
    xs, ys = np.meshgrid(np.arange(1, 5), np.arange(1, 5), indexing="ij")
    slice_35 = pd.DataFrame({"z": 35, "x": xs.ravel(), "y": ys.ravel()})
    slice_36 = slice_35.assign(z=36)
    voxels = pd.concat([slice_35, slice_36], ignore_index=True)

    detected = {(1, 1), (2, 2), (3, 3)}
    roi = {(2, 2), (4, 4)}
    in_detected = [(x, y) in detected for x, y in zip(voxels["x"], voxels["y"])]
    in_roi = [(x, y) in roi for x, y in zip(voxels["x"], voxels["y"])]

    mask = voxels.assign(pet=np.where(in_detected, 1.0, 0.0))
    # Other slice flags everything; must never leak into z=35 results
    mask.loc[mask["z"] == 36, "pet"] = 1.0
    roi_table = voxels.assign(pet=np.where(in_roi, 1.0, np.nan))
    return mask, roi_table
