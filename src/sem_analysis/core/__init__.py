"""
Core shared types and utilities.

This module provides foundational components used across the package:
response data containers, CSV loading, error types and random number
helpers shared by the estimation engine and the simulation layer.
"""

from sem_analysis.core.utils import get_rng, softmax

__all__ = [
    "get_rng",
    "softmax",
]
