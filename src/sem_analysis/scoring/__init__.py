"""
Sum score to trait score conversion.

This module provides:
- build_scoring_table: Ordinal sum score -> logit score lookup with SEs
- information_curve: Test information and SEM over a theta grid
"""

from sem_analysis.scoring.data_models import ScoringTable, ScoringTableRow
from sem_analysis.scoring.table import (
    build_scoring_table,
    information_curve,
    representative_pattern,
)

__all__ = [
    "ScoringTable",
    "ScoringTableRow",
    "build_scoring_table",
    "information_curve",
    "representative_pattern",
]
