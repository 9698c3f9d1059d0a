"""
Confidence interval coverage of trait estimates.

A person is covered at level c when the true trait value lies strictly
inside θ̂ ± z(c)·SE, with z(c) the two-sided standard normal critical
value.
Well-calibrated standard errors give observed coverage close to c.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from sem_analysis.evaluation.data_models import (
    CoverageLevelResult,
    CoverageReport,
)
from sem_analysis.irt.estimation.data_models import AbilityEstimates
from sem_analysis.synthetic_data.data_models import SimulatedDataset


def critical_multiplier(confidence_level: float) -> float:
    """
    Two-sided standard normal critical value, Φ⁻¹((1 + c) / 2).

    Args:
        confidence_level: Nominal coverage c in (0, 1).

    Returns:
        z such that P(|Z| < z) = c. About 1.96 for c = 0.95.

    Raises:
        ValueError: If confidence_level is outside (0, 1).
    """
    if not (0.0 < confidence_level < 1.0):
        raise ValueError(
            f"confidence level must be in (0, 1), got {confidence_level}"
        )
    return float(stats.norm.ppf((1.0 + confidence_level) / 2.0))


def _aligned_arrays(
    dataset: SimulatedDataset, estimates: AbilityEstimates
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    if dataset.n_persons != estimates.n_persons:
        raise ValueError(
            f"dataset has {dataset.n_persons} persons but "
            f"{estimates.n_persons} estimates were given"
        )
    evaluable = np.isfinite(estimates.theta) & ~np.isnan(estimates.se)
    return (
        dataset.abilities[evaluable],
        estimates.theta[evaluable],
        estimates.se[evaluable],
    )


def summarize_coverage(
    dataset: SimulatedDataset,
    estimates: AbilityEstimates,
    confidence_levels: Sequence[float],
) -> CoverageReport:
    """
    Coverage of θ̂ ± z·SE intervals at each confidence level.

    Persons without a point estimate are excluded from the denominator. An
    infinite SE gives an unbounded interval, which always covers.

    Args:
        dataset: Simulated data holding the true trait values.
        estimates: Estimates aligned with the dataset rows.
        confidence_levels: Nominal levels, each in (0, 1).

    Returns:
        CoverageReport with one entry per level, in the order given.

    Raises:
        ValueError: If a level is outside (0, 1) or the lengths differ.
    """
    truth, theta_hat, se = _aligned_arrays(dataset, estimates)
    abs_error = np.abs(theta_hat - truth)

    levels = []
    for level in confidence_levels:
        z = critical_multiplier(level)
        covered = abs_error < z * se
        levels.append(
            CoverageLevelResult(
                confidence_level=level,
                critical_value=z,
                n_covered=int(np.sum(covered)),
                n_evaluated=len(truth),
            )
        )

    return CoverageReport(
        levels=tuple(levels),
        n_persons=dataset.n_persons,
        n_excluded=dataset.n_persons - len(truth),
    )


def evaluate_coverage(
    dataset: SimulatedDataset,
    estimates: AbilityEstimates,
    confidence_levels: Sequence[float],
) -> dict[float, float]:
    """
    Observed coverage fraction per confidence level.

    See summarize_coverage for the counting rules.

    Returns:
        Mapping from nominal level to observed coverage. NaN when no person
        has a point estimate.
    """
    return summarize_coverage(dataset, estimates, confidence_levels).as_dict()
