"""
Significance extraction from SCC estimation results.

Rebuilds the dense evaluation grid from the sparse, triangulation-restricted
confidence bands and classifies each covered cell by the sign of its interval:

    lower bound > 0  ->  positive (first group > second group)
    upper bound < 0  ->  negative (second group > first group)

Which group is "first" is fixed by the order in which the two groups were
passed to the estimation engine. That order cannot be recovered from the
result, so callers tag it explicitly with a GroupOrder.
"""

import warnings
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .errors import EstimationContractError
from .estimation import EstimationResult, level_index
from .points import empty_points
from utils.logging_utils import log_message


@dataclass(frozen=True)
class GroupOrder:
    """Names of the groups in the order they were supplied to the estimator."""

    first: str
    second: str

    def describe(self, direction: str) -> str:
        if direction == "positive":
            return f"{self.first} > {self.second}"
        if direction == "negative":
            return f"{self.second} > {self.first}"
        raise ValueError(f"direction must be 'positive' or 'negative', got {direction!r}")


@dataclass(frozen=True)
class DenseSignificanceGrid:
    """
    Dense (n2, n1) grid of confidence bounds.

    Rows follow axis-2 values (``z2``), columns follow axis-1 values (``z1``).
    Unset cells hold NaN in both ``lower`` and ``upper``; ``covered`` marks
    cells that received an interval from the estimator.
    """

    z1: np.ndarray
    z2: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    covered: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return self.lower.shape

    def positive_mask(self) -> np.ndarray:
        with np.errstate(invalid="ignore"):
            lower = np.where(self.lower < 0, np.nan, self.lower)
            return lower > 0

    def negative_mask(self) -> np.ndarray:
        with np.errstate(invalid="ignore"):
            upper = np.where(self.upper > 0, np.nan, self.upper)
            return upper < 0

    def bound_limits(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        """
        (min lower, max upper) over covered cells, used as a colour scale range.

        Either limit is None when every bound on that side is missing.
        """
        if not self.covered.any():
            return None
        lower = None if np.isnan(self.lower).all() else float(np.nanmin(self.lower))
        upper = None if np.isnan(self.upper).all() else float(np.nanmax(self.upper))
        return lower, upper


@dataclass(frozen=True)
class SignificantPoints:
    """Coordinates of significant cells for one confidence level."""

    positive_points: pd.DataFrame
    negative_points: pd.DataFrame
    confidence_level_index: int
    bound_limits: Optional[Tuple[Optional[float], Optional[float]]] = None
    group_order: Optional[GroupOrder] = None

    @property
    def is_empty(self) -> bool:
        return self.positive_points.empty and self.negative_points.empty

    def points_where_greater(self, group: str) -> pd.DataFrame:
        """
        Returns the points where ``group`` shows the stronger signal.

        Requires ``group_order`` so that direction is never assumed.
        """
        if self.group_order is None:
            raise ValueError("group_order is required to select points by group name")
        if group == self.group_order.first:
            return self.positive_points
        if group == self.group_order.second:
            return self.negative_points
        raise ValueError(
            f"Unknown group {group!r}; expected {self.group_order.first!r} or {self.group_order.second!r}"
        )


def _axis_values(values: np.ndarray) -> np.ndarray:
    # Distinct values in order of first appearance
    return pd.unique(values)


def _as_coordinates(values: np.ndarray) -> np.ndarray:
    if values.size and np.all(np.mod(values, 1) == 0):
        return values.astype(np.int64)
    return values


def _cover_rows(result: EstimationResult, bounds: Optional[np.ndarray], n_cells: int) -> np.ndarray:
    """0-based grid rows of the covered cells, checked against the bounds and grid size."""
    index = result.inside_cover_index
    if bounds is not None and index.size != bounds.shape[0]:
        raise EstimationContractError(
            "inside_cover_index",
            f"length {index.size} does not match {bounds.shape[0]} rows of confidence_bounds",
        )

    rows = index - result.index_base
    if rows.size and (rows.min() < 0 or rows.max() >= n_cells):
        raise EstimationContractError(
            "inside_cover_index",
            f"indices must lie in [{result.index_base}, {n_cells - 1 + result.index_base}]",
        )
    if np.unique(rows).size != rows.size:
        raise EstimationContractError("inside_cover_index", "contains duplicate indices")
    return rows


def reconstruct_dense_grid(result: EstimationResult, confidence_level_index: int) -> DenseSignificanceGrid:
    """
    Rebuilds the dense bound grid from a sparse estimation result.

    Algorithm:
        1. Take the distinct axis-1 (z1, n1) and axis-2 (z2, n2) values
        2. Allocate an (n1 * n2, 2) array of unset (NaN) cells
        3. Copy the chosen level's (lower, upper) pairs into the rows listed
           by ``inside_cover_index``
        4. Reshape each column column-major into (n2, n1)

    Args:
        result: Sparse SCC estimation result
        confidence_level_index: 0-based index into the confidence levels

    Returns:
        DenseSignificanceGrid for the chosen confidence level

    Raises:
        EstimationContractError: If the cover index does not match the bound
            rows, indexes outside the grid, or the level does not exist
    """
    bounds = result.bounds_at(confidence_level_index)

    z1 = _axis_values(result.grid_positions[:, 0])
    z2 = _axis_values(result.grid_positions[:, 1])
    n1, n2 = len(z1), len(z2)
    rows = _cover_rows(result, bounds, n1 * n2)

    scc = np.full((n1 * n2, 2), np.nan)
    scc[rows, :] = bounds
    covered = np.zeros(n1 * n2, dtype=bool)
    covered[rows] = True

    return DenseSignificanceGrid(
        z1=z1,
        z2=z2,
        lower=scc[:, 0].reshape((n2, n1), order="F"),
        upper=scc[:, 1].reshape((n2, n1), order="F"),
        covered=covered.reshape((n2, n1), order="F"),
    )


def _mask_to_points(mask: np.ndarray, grid: DenseSignificanceGrid) -> pd.DataFrame:
    rows, cols = np.nonzero(mask)
    if rows.size == 0:
        return empty_points()
    points = pd.DataFrame({
        "x": _as_coordinates(np.asarray(grid.z1)[cols]),
        "y": _as_coordinates(np.asarray(grid.z2)[rows]),
    })
    return points.sort_values(["x", "y"]).reset_index(drop=True)


def _no_evaluable_points(confidence_level_index, group_order, reason, log_file):
    message = f"No evaluable SCC points ({reason}); returning empty significance sets."
    warnings.warn(message, RuntimeWarning, stacklevel=3)
    if log_file:
        log_message(f"Warning: {message}", log_file)
    return SignificantPoints(
        positive_points=empty_points(),
        negative_points=empty_points(),
        confidence_level_index=confidence_level_index,
        bound_limits=None,
        group_order=group_order,
    )


def extract_significant_points(
    result: EstimationResult,
    confidence_level_index: int,
    group_order: Optional[GroupOrder] = None,
    log_file: Optional[str] = None,
) -> SignificantPoints:
    """
    Extracts positive and negative significant coordinates from an SCC result.

    There is no default confidence level: the engine fits several (e.g.
    alpha = 0.10, 0.05, 0.01) and the choice is a study decision.

    Args:
        result: Sparse SCC estimation result
        confidence_level_index: 0-based index into the confidence levels
        group_order: Which group was passed first/second to the estimator
        log_file: Optional log file path

    Returns:
        SignificantPoints with ``positive_points`` (first group stronger) and
        ``negative_points`` (second group stronger) as (x, y) DataFrames

    Example:
        >>> points = extract_significant_points(result, 1, GroupOrder("Pathological", "Control"))
        >>> points.points_where_greater("Pathological").head()
    """
    if not isinstance(result, EstimationResult):
        raise EstimationContractError("result", f"expected EstimationResult, got {type(result).__name__}")
    confidence_level_index = level_index(confidence_level_index)
    bounds = None if result.confidence_bounds is None else result.bounds_at(confidence_level_index)

    n_cells = len(_axis_values(result.grid_positions[:, 0])) * len(_axis_values(result.grid_positions[:, 1]))
    _cover_rows(result, bounds, n_cells)

    if bounds is None:
        return _no_evaluable_points(confidence_level_index, group_order, "confidence bounds absent", log_file)
    if np.isnan(bounds).all():
        return _no_evaluable_points(confidence_level_index, group_order, "all confidence bounds missing", log_file)

    grid = reconstruct_dense_grid(result, confidence_level_index)
    positive = _mask_to_points(grid.positive_mask(), grid)
    negative = _mask_to_points(grid.negative_mask(), grid)

    if log_file:
        log_message(
            f"SCC level {confidence_level_index}: grid {grid.shape[1]}x{grid.shape[0]}, "
            f"{int(grid.covered.sum())} covered, {len(positive)} positive, {len(negative)} negative",
            log_file,
        )

    return SignificantPoints(
        positive_points=positive,
        negative_points=negative,
        confidence_level_index=confidence_level_index,
        bound_limits=grid.bound_limits(),
        group_order=group_order,
    )
