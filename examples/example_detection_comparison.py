"""
Example: SCC vs. binary-mask detection on a toy slice.

Builds a small synthetic SCC result, binary mask and ROI in memory and
scores both detectors against the ROI.
"""

import numpy as np
import pandas as pd

from config import get_default_config
from eval import (
    EstimationResult,
    GroupOrder,
    Dimensions,
    extract_significant_points,
    extract_binary_detected_points,
    extract_ground_truth_points,
    calculate_metrics,
)
from pipelines import run_detection_comparison


def make_toy_inputs(x_dim=6, y_dim=6, slice_index=35):
    """Toy 6x6 slice with a 2x2 hypoactive region at x, y in {3, 4}."""
    xs, ys = np.meshgrid(np.arange(1, x_dim + 1), np.arange(1, y_dim + 1), indexing="ij")
    grid = np.column_stack([xs.ravel(), ys.ravel()]).astype(float)

    # Border voxels lie outside the triangulation
    inside = (grid[:, 0] > 1) & (grid[:, 0] < x_dim) & (grid[:, 1] > 1) & (grid[:, 1] < y_dim)
    cover_index = np.flatnonzero(inside) + 1

    centre = np.isin(grid[inside, 0], [3, 4]) & np.isin(grid[inside, 1], [3, 4])
    lower = np.where(centre, 0.2, -0.1)
    upper = np.where(centre, 0.6, 0.1)
    bounds = np.stack([lower, upper], axis=1)[:, :, np.newaxis].repeat(3, axis=2)

    result = EstimationResult(grid_positions=grid, inside_cover_index=cover_index,
                              confidence_bounds=bounds, alpha=[0.10, 0.05, 0.01])

    voxels = pd.DataFrame({"z": slice_index, "x": xs.ravel(), "y": ys.ravel()})
    roi = voxels.assign(pet=(np.isin(voxels["x"], [3, 4]) & np.isin(voxels["y"], [3, 4])).astype(float))
    mask = voxels.assign(pet=((voxels["x"] == 3) & (voxels["y"].between(2, 4))).astype(float))
    return result, mask, roi, Dimensions(x_dim, y_dim)


def main():
    config = get_default_config()
    config["CONFIDENCE_LEVEL_INDEX"] = 1

    print("=" * 70)
    print("SCC Detection - Comparison Example")
    print("=" * 70)

    result, mask, roi, dims = make_toy_inputs(slice_index=config["SLICE_INDEX"])
    group_order = GroupOrder(first="Control", second="Pathological")

    # Step by step
    print("\n1. Extracting significant SCC points...")
    points = extract_significant_points(result, config["CONFIDENCE_LEVEL_INDEX"], group_order)
    print(f"   Control > Pathological: {len(points.points_where_greater('Control'))} voxels")
    print(f"   Pathological > Control: {len(points.points_where_greater('Pathological'))} voxels")

    print("\n2. Extracting binary-mask detections and ground truth...")
    detected_binary = extract_binary_detected_points(mask, config["SLICE_INDEX"])
    truth = extract_ground_truth_points(roi, slice_index=config["SLICE_INDEX"])
    print(f"   Binary detections: {len(detected_binary)}, ROI voxels: {len(truth)}")

    print("\n3. Scoring...")
    for label, detected in (("Toy_SCC", points.positive_points), ("Toy_SPM", detected_binary)):
        metrics = calculate_metrics(detected, truth, dims, label)
        print(f"   {metrics.to_dict()}")

    # Whole pipeline in one call
    print("\n4. Pipeline comparison table:")
    table = run_detection_comparison(result, mask, roi, config, "Toy", group_order=group_order, dimensions=dims)
    print(table.to_string(index=False))

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
