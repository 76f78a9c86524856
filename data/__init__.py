"""
Data handling module for SCC detection evaluation.

This module provides loaders for estimation results and voxel tables.
"""

from .loaders import load_estimation_result, load_voxel_table, load_voxel_table_cached

__all__ = [
    'load_estimation_result',
    'load_voxel_table',
    'load_voxel_table_cached',
]
