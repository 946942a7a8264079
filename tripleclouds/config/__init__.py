"""
Configuration management for tripleclouds.

This module provides:
- SolverConfig: Options of the flux calculation
- load_case: Loading and validation of case files
"""

from tripleclouds.config.settings import SolverConfig
from tripleclouds.config.manager import (
    LoadedCase,
    load_case,
    create_example_case,
    save_example_case,
)

__all__ = [
    "SolverConfig",
    "LoadedCase",
    "load_case",
    "create_example_case",
    "save_example_case",
]
