"""
IRT (Item Response Theory) module.

This module provides:
- Partial Credit Model item parameters with compute_probabilities methods
- Sampling functions for generating responses
- Trait estimation (weighted likelihood) with standard errors
"""

from sem_analysis.irt.estimation import (
    EstimationConfig,
    ItemSet,
    PCMItemParameters,
    estimate_abilities,
    load_items,
)
from sem_analysis.irt.sampling import (
    sample_response,
    sample_responses_batch,
)

__all__ = [
    "EstimationConfig",
    "ItemSet",
    "PCMItemParameters",
    "estimate_abilities",
    "load_items",
    "sample_response",
    "sample_responses_batch",
]
