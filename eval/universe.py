"""
Coordinate universe and slice dimensions.

The universe is the full rectangular grid of voxels in a slice; it supplies
the complement needed to count true negatives.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .points import require_columns, to_point_frame


@dataclass(frozen=True)
class Dimensions:
    """Voxel extents of an image; ``dim`` is the voxel count of one slice."""

    x_dim: int
    y_dim: int
    z_dim: Optional[int] = None

    @property
    def dim(self) -> int:
        return self.x_dim * self.y_dim

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Dimensions":
        """Accepts ``xDim``/``yDim``/``zDim`` or ``x_dim``/``y_dim``/``z_dim`` keys."""
        def pick(*keys):
            for key in keys:
                if key in mapping:
                    return mapping[key]
            return None

        x_dim = pick("xDim", "x_dim")
        y_dim = pick("yDim", "y_dim")
        if x_dim is None or y_dim is None:
            raise ValueError("Dimensions mapping must contain 'xDim' and 'yDim'")
        z_dim = pick("zDim", "z_dim")
        return cls(int(x_dim), int(y_dim), None if z_dim is None else int(z_dim))


def coordinate_universe(x_extent: int, y_extent: int) -> pd.DataFrame:
    """
    Builds every (x, y) pair for x in [1, x_extent] and y in [1, y_extent].

    Args:
        x_extent: Number of voxels along X
        y_extent: Number of voxels along Y

    Returns:
        DataFrame with ``x_extent * y_extent`` rows and int64 ``x``/``y`` columns

    Example:
        >>> coordinate_universe(4, 4).shape
        (16, 2)
    """
    if int(x_extent) < 1 or int(y_extent) < 1:
        raise ValueError(f"Axis extents must be positive, got ({x_extent}, {y_extent})")

    xs = np.arange(1, int(x_extent) + 1, dtype=np.int64)
    ys = np.arange(1, int(y_extent) + 1, dtype=np.int64)
    return pd.DataFrame({
        "x": np.repeat(xs, ys.size),
        "y": np.tile(ys, xs.size),
    })


def resolve_universe(universe: Union[Dimensions, Mapping[str, Any], pd.DataFrame]) -> pd.DataFrame:
    """
    Turns any accepted universe description into an (x, y) point set.

    Accepts a Dimensions, a mapping with ``xDim``/``yDim``, or an explicit
    coordinate DataFrame.
    """
    if isinstance(universe, Dimensions):
        return coordinate_universe(universe.x_dim, universe.y_dim)
    if isinstance(universe, pd.DataFrame):
        frame = to_point_frame(universe, "universe")
        if frame.empty:
            raise ValueError("'universe' must contain at least one coordinate")
        return frame
    if isinstance(universe, Mapping):
        dims = Dimensions.from_mapping(universe)
        return coordinate_universe(dims.x_dim, dims.y_dim)
    raise ValueError(
        "'universe' must expose its axis extents (Dimensions, mapping with 'xDim'/'yDim', "
        f"or coordinate DataFrame), got {type(universe).__name__}"
    )


def get_dimensions(voxel_table: pd.DataFrame) -> Dimensions:
    """
    Derives image extents from a flattened voxel table.

    Voxel tables enumerate every voxel with 1-based ``x``, ``y`` and (when
    present) ``z`` columns, so the extents are the column maxima.
    """
    require_columns(voxel_table, ["x", "y"], "voxel_table")
    if voxel_table.empty:
        raise ValueError("'voxel_table' is empty; cannot infer dimensions")

    z_dim = int(voxel_table["z"].max()) if "z" in voxel_table.columns else None
    return Dimensions(
        x_dim=int(voxel_table["x"].max()),
        y_dim=int(voxel_table["y"].max()),
        z_dim=z_dim,
    )
