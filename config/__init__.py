"""
Configuration module for SCC detection evaluation.

This module provides centralized configuration management for paths,
slice selection and evaluation conventions.
"""

from .config import get_default_config

__all__ = ['get_default_config']
