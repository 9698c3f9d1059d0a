"""
Metrics computation for evaluation.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike

from sem_analysis.evaluation.data_models import (
    CoverageLevelResult,
    CoverageReport,
    RecoveryMetrics,
    SimulationStudyResult,
)


def compute_recovery_metrics(
    true_theta: ArrayLike, estimated_theta: ArrayLike
) -> RecoveryMetrics:
    """Point estimate accuracy against the true trait values.

    Persons whose estimate is not finite (failed estimation) are left out.

    Args:
        true_theta: True trait values, shape (n,).
        estimated_theta: Estimates aligned with true_theta.

    Returns:
        RecoveryMetrics over the persons with a finite estimate.

    Raises:
        ValueError: If the lengths differ or no estimate is finite.
    """
    truth = np.asarray(true_theta, dtype=np.float64)
    estimate = np.asarray(estimated_theta, dtype=np.float64)
    if truth.shape != estimate.shape:
        raise ValueError(
            f"shape mismatch: {truth.shape} true values vs "
            f"{estimate.shape} estimates"
        )

    finite = np.isfinite(estimate)
    if not finite.any():
        raise ValueError("no finite estimates to evaluate")
    truth = truth[finite]
    estimate = estimate[finite]
    error = estimate - truth

    # Correlation is undefined when either side is constant
    if np.std(truth) == 0.0 or np.std(estimate) == 0.0:
        correlation = float("nan")
    else:
        correlation = float(np.corrcoef(truth, estimate)[0, 1])

    return RecoveryMetrics(
        bias=float(np.mean(error)),
        mean_absolute_error=float(np.mean(np.abs(error))),
        rmse=float(np.sqrt(np.mean(error**2))),
        correlation=correlation,
        n=len(error),
    )


def pool_coverage(
    results: Sequence[SimulationStudyResult],
) -> CoverageReport:
    """Pool coverage counts across replications.

    Sums covered and evaluated counts per confidence level, so every person
    in every replication carries equal weight.

    Args:
        results: Replications evaluated at the same confidence levels.

    Returns:
        A single CoverageReport with summed counts.

    Raises:
        ValueError: If results is empty or the levels differ.
    """
    if not results:
        raise ValueError("Cannot pool empty results")

    first = results[0].coverage
    levels = [r.confidence_level for r in first.levels]
    covered = [0] * len(levels)
    evaluated = [0] * len(levels)
    n_persons = 0
    n_excluded = 0
    for result in results:
        report = result.coverage
        if [r.confidence_level for r in report.levels] != levels:
            raise ValueError("Cannot pool reports with different levels")
        for k, level_result in enumerate(report.levels):
            covered[k] += level_result.n_covered
            evaluated[k] += level_result.n_evaluated
        n_persons += report.n_persons
        n_excluded += report.n_excluded

    return CoverageReport(
        levels=tuple(
            CoverageLevelResult(
                confidence_level=level_result.confidence_level,
                critical_value=level_result.critical_value,
                n_covered=covered[k],
                n_evaluated=evaluated[k],
            )
            for k, level_result in enumerate(first.levels)
        ),
        n_persons=n_persons,
        n_excluded=n_excluded,
    )
