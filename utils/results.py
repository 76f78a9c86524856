"""
Results aggregation and processing utilities.

Provides functions for building and summarizing detection metric DataFrames.
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

RATE_COLUMNS = ['sensitivity', 'specificity', 'PPV', 'NPV']
COUNT_COLUMNS = ['TP', 'FP', 'FN', 'TN']


def build_comparison_df(metrics_by_detector: Dict[str, object], decimals: Optional[int] = None) -> pd.DataFrame:
    """
    Stacks per-detector metric records into one comparison table.

    Args:
        metrics_by_detector: Mapping of detector name -> DetectionMetrics
        decimals: Optional rounding for the rate columns

    Returns:
        pd.DataFrame with a 'detector' column followed by the metric columns.
        Rates that were undefined (0/0) are NaN.
    """
    rows = []
    for detector, metrics in metrics_by_detector.items():
        row = {'detector': detector}
        row.update(metrics.to_dict())
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=['detector', 'region'] + RATE_COLUMNS + COUNT_COLUMNS)

    df = pd.DataFrame(rows)
    df[RATE_COLUMNS] = df[RATE_COLUMNS].astype(np.float64)
    if decimals is not None:
        df[RATE_COLUMNS] = df[RATE_COLUMNS].round(decimals)
    return df


def summarize_by_detector(results_df: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregates a multi-region comparison table per detector.

    Count columns (TP, FP, FN, TN) are summed, while rates are averaged over
    the regions where they are defined.

    Args:
        results_df: DataFrame as returned by build_comparison_df, possibly
            concatenated over several regions

    Returns:
        pd.DataFrame with one row per detector
    """
    if results_df.empty:
        return pd.DataFrame()

    missing_cols = [col for col in RATE_COLUMNS + COUNT_COLUMNS if col not in results_df.columns]
    if missing_cols:
        raise ValueError(f"Missing columns in results_df: {missing_cols}")

    # Use mean aggregation for rates (NaN-aware)
    rate_aggs = {col: 'mean' for col in RATE_COLUMNS}

    # Use sum aggregation for count columns
    count_aggs = {col: 'sum' for col in COUNT_COLUMNS}

    agg_dict = {**rate_aggs, **count_aggs}

    if 'detector' in results_df.columns:
        summary_df = results_df.groupby('detector', sort=False).agg(agg_dict).reset_index()
    else:
        summary_df = pd.DataFrame([results_df.agg(agg_dict)])
        summary_df['detector'] = 'overall'

    summary_df['n_regions'] = (
        results_df.groupby('detector', sort=False).size().to_numpy()
        if 'detector' in results_df.columns else len(results_df)
    )

    for count_col in COUNT_COLUMNS:
        summary_df[count_col] = summary_df[count_col].fillna(0).astype(int)

    return summary_df
