"""
Evaluation module for measuring the quality of trait estimates.

This module provides tools for:
- Confidence interval coverage of theta estimates and their SEs
- Point estimate recovery metrics (bias, MAE, RMSE, correlation)
- Running simulation studies across multiple replications
"""

from sem_analysis.evaluation.coverage import (
    critical_multiplier,
    evaluate_coverage,
    summarize_coverage,
)
from sem_analysis.evaluation.data_models import (
    CoverageLevelResult,
    CoverageReport,
    RecoveryMetrics,
    SimulationStudyResult,
)
from sem_analysis.evaluation.metrics import (
    compute_recovery_metrics,
    pool_coverage,
)
from sem_analysis.evaluation.runner import (
    run_replications,
    run_simulation_study,
)

__all__ = [
    # Data models
    "CoverageLevelResult",
    "CoverageReport",
    "RecoveryMetrics",
    "SimulationStudyResult",
    # Coverage
    "critical_multiplier",
    "evaluate_coverage",
    "summarize_coverage",
    # Metrics
    "compute_recovery_metrics",
    "pool_coverage",
    # Runner
    "run_replications",
    "run_simulation_study",
]
