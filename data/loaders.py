"""
Data loading utilities.

Provides loaders for SCC estimation results exported by the estimation
engine (.npz) and for flattened voxel tables (CSV), with caching support
for tables reused across many region comparisons.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from functools import lru_cache

from eval.estimation import EstimationResult, FIELD_ALIASES

VOXEL_COLUMNS = ["z", "x", "y", "pet"]


def load_estimation_result(path: Path, *, index_base: int = 1) -> EstimationResult:
    """
    Loads an SCC estimation result saved as a NumPy archive.

    The archive must hold the grid positions, the inside-cover index and the
    confidence bounds, under either snake_case names or the engine's names
    with dots replaced by underscores (``Z_band``, ``ind_inside_cover``, ``scc``).

    Args:
        path: Path to the .npz archive
        index_base: Base of the stored cover indices (1 for engine output)

    Returns:
        EstimationResult

    Raises:
        FileNotFoundError: If the archive does not exist
        EstimationContractError: If a required field is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"SCC result not found: {path}")

    known_keys = {key for aliases in FIELD_ALIASES.values() for key in aliases}
    with np.load(path, allow_pickle=False) as archive:
        fields = {key: archive[key] for key in archive.files if key in known_keys}

    return EstimationResult.from_mapping(fields, index_base=index_base)


def load_voxel_table(path: Path) -> pd.DataFrame:
    """
    Loads a flattened voxel table (one row per voxel: z, x, y, pet).

    Args:
        path: Path to the CSV table

    Returns:
        DataFrame with at least the z, x, y and pet columns

    Raises:
        FileNotFoundError: If the table does not exist
        ValueError: If required columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Voxel table not found: {path}")

    table = pd.read_csv(path)
    missing = [col for col in VOXEL_COLUMNS if col not in table.columns]
    if missing:
        raise ValueError(f"Voxel table {path} is missing columns {missing}")
    return table


@lru_cache(maxsize=32)
def _load_voxel_table_cached(path_str: str) -> pd.DataFrame:
    return load_voxel_table(Path(path_str))


def load_voxel_table_cached(path_str: str) -> pd.DataFrame:
    """
    Cached version of voxel table loading.

    Returns a copy so callers may modify the table without touching the cache.
    """
    return _load_voxel_table_cached(str(path_str)).copy()
