"""
Estimation result container for simultaneous confidence corridor (SCC) output.

The confidence bands are fitted by an external estimation engine. This module
only holds its output in a validated, read-only form so that the significance
extraction never has to guess at field names or array layouts.
"""

import operator
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np

from .errors import EstimationContractError


# Engine field names (dotted) and their snake_case equivalents
FIELD_ALIASES = {
    "grid_positions": ("grid_positions", "Z.band", "Z_band"),
    "inside_cover_index": ("inside_cover_index", "ind.inside.cover", "ind_inside_cover"),
    "confidence_bounds": ("confidence_bounds", "scc"),
    "alpha": ("alpha", "alpha.grid", "alpha_grid"),
}


def level_index(confidence_level_index) -> int:
    """Normalises a confidence level selector to a non-negative integer."""
    try:
        level = operator.index(confidence_level_index)
    except TypeError:
        raise EstimationContractError(
            "confidence_bounds",
            f"confidence level index must be an integer, got {confidence_level_index!r}",
        ) from None
    if level < 0:
        raise EstimationContractError(
            "confidence_bounds", f"confidence level index must be non-negative, got {level}"
        )
    return level


def _lookup(mapping: Mapping[str, Any], field: str, required: bool = True):
    for key in FIELD_ALIASES[field]:
        if key in mapping:
            return True, mapping[key]
    if required:
        raise EstimationContractError(field, "missing from estimation result")
    return False, None


@dataclass(frozen=True)
class EstimationResult:
    """
    Sparse SCC result as produced by the estimation engine.

    Attributes:
        grid_positions: (n, 2) array of evaluation points (axis 1, axis 2),
            including points outside the triangulated domain
        inside_cover_index: Row indices into ``grid_positions`` that carry a
            confidence interval
        confidence_bounds: (m, 2, L) array of (lower, upper) bounds per covered
            point and confidence level, or None when the engine produced none
        alpha: Optional confidence levels, one per slice of the last axis
        index_base: Base of ``inside_cover_index`` (1 for engine output)
    """

    grid_positions: np.ndarray
    inside_cover_index: np.ndarray
    confidence_bounds: Optional[np.ndarray]
    alpha: Optional[np.ndarray] = None
    index_base: int = 1

    def __post_init__(self):
        grid = np.asarray(self.grid_positions, dtype=np.float64)
        if grid.ndim == 1 and grid.size % 2 == 0:
            # Engine stores the band grid column-major: all axis-1 values first
            grid = grid.reshape((-1, 2), order="F")
        if grid.ndim != 2 or grid.shape[1] != 2:
            raise EstimationContractError(
                "grid_positions", f"expected an (n, 2) array, got shape {grid.shape}"
            )

        index = np.asarray(self.inside_cover_index).ravel()
        if index.size and not np.issubdtype(index.dtype, np.number):
            raise EstimationContractError("inside_cover_index", "must hold integer row indices")
        if index.size and np.any(np.mod(index, 1) != 0):
            raise EstimationContractError("inside_cover_index", "must hold integer row indices")
        index = index.astype(np.int64)

        bounds = self.confidence_bounds
        if bounds is not None:
            bounds = np.asarray(bounds, dtype=np.float64)
            if bounds.size == 0:
                bounds = None
            elif bounds.ndim == 2 and bounds.shape[1] == 2:
                bounds = bounds[:, :, np.newaxis]
            elif bounds.ndim != 3 or bounds.shape[1] != 2:
                raise EstimationContractError(
                    "confidence_bounds",
                    f"expected an (m, 2) or (m, 2, L) array, got shape {bounds.shape}",
                )

        alpha = None if self.alpha is None else np.asarray(self.alpha, dtype=np.float64).ravel()

        if self.index_base not in (0, 1):
            raise EstimationContractError("index_base", f"must be 0 or 1, got {self.index_base!r}")

        object.__setattr__(self, "grid_positions", grid)
        object.__setattr__(self, "inside_cover_index", index)
        object.__setattr__(self, "confidence_bounds", bounds)
        object.__setattr__(self, "alpha", alpha)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], index_base: int = 1) -> "EstimationResult":
        """
        Builds a result from a dict-like engine output.

        Accepts the engine's dotted names (``Z.band``, ``ind.inside.cover``,
        ``scc``, ``alpha``) as well as the snake_case attribute names.
        ``confidence_bounds`` must be present as a key but may be None.

        Raises:
            EstimationContractError: If a required field is missing
        """
        _, grid = _lookup(mapping, "grid_positions")
        _, index = _lookup(mapping, "inside_cover_index")
        _, bounds = _lookup(mapping, "confidence_bounds")
        _, alpha = _lookup(mapping, "alpha", required=False)
        return cls(
            grid_positions=grid,
            inside_cover_index=index,
            confidence_bounds=bounds,
            alpha=alpha,
            index_base=index_base,
        )

    @property
    def n_levels(self) -> int:
        return 0 if self.confidence_bounds is None else int(self.confidence_bounds.shape[2])

    def bounds_at(self, confidence_level_index: int) -> np.ndarray:
        """Returns the (m, 2) lower/upper bounds for one confidence level."""
        if self.confidence_bounds is None:
            raise EstimationContractError("confidence_bounds", "no bounds available")
        level = level_index(confidence_level_index)
        if level >= self.n_levels:
            raise EstimationContractError(
                "confidence_bounds",
                f"confidence level index {level} out of range for {self.n_levels} level(s)",
            )
        return self.confidence_bounds[:, :, level]
