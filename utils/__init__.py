"""
Utility functions for SCC detection evaluation.

This module provides logging, run-directory setup and result table helpers.
"""

from .logging_utils import log_message, setup_logging, create_dir_with_permissions
from .results import build_comparison_df, summarize_by_detector

__all__ = [
    'log_message',
    'setup_logging',
    'create_dir_with_permissions',
    'build_comparison_df',
    'summarize_by_detector',
]
