"""
Point estimation of the trait location for one response pattern.

Two estimators share the same root-finding machinery:

- WLE (Warm, 1989): root of score(θ) + J(θ) / I(θ), the weighted
  likelihood estimating equation. Removes the first-order bias of the MLE.
- MLE: root of score(θ).

Roots are found with Brent's bracketing method on the configured theta
range. Under the PCM both estimating functions decrease in θ over the
range of interest, so a sign change between the bounds brackets the
unique root.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import brentq

from sem_analysis.core.constants import MISSING_VALUE
from sem_analysis.core.exceptions import (
    DegenerateResponseError,
    NonConvergenceError,
)
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.enums import (
    EstimateStatus,
    ExtremeScorePolicy,
)
from sem_analysis.irt.estimation.likelihood import (
    evaluate,
    validated_pattern,
)
from sem_analysis.irt.estimation.parameters import ItemSet

logger = logging.getLogger(__name__)


class ExtremeScore(str, Enum):
    MINIMUM = "minimum"
    MAXIMUM = "maximum"


@dataclass(frozen=True)
class ThetaSolution:
    """
    Result of theta estimation for one response pattern.

    Attributes:
        theta: Point estimate (or the range bound for boundary cases).
        status: CONVERGED, or LOWER_BOUND / UPPER_BOUND when the estimate
            was clamped to the theta range.
        n_iterations: Root-finder iterations (0 when no search was run).
    """

    theta: float
    status: EstimateStatus
    n_iterations: int

    @property
    def at_boundary(self) -> bool:
        return self.status in (
            EstimateStatus.LOWER_BOUND,
            EstimateStatus.UPPER_BOUND,
        )


def extreme_score(
    item_set: ItemSet, responses: NDArray[np.integer]
) -> ExtremeScore | None:
    """
    Classify a pattern whose answered items all sit at one end of the scale.

    Args:
        item_set: Calibrated items.
        responses: Response pattern aligned with item_set.

    Returns:
        MINIMUM if every answered item is in category 0, MAXIMUM if every
        answered item is in its highest category, otherwise None (also None
        when nothing was answered).
    """
    pattern = np.asarray(responses, dtype=np.int64)
    valid = pattern != MISSING_VALUE
    if not valid.any():
        return None
    answered = pattern[valid]
    if np.all(answered == 0):
        return ExtremeScore.MINIMUM
    if np.all(answered == item_set.max_scores[valid]):
        return ExtremeScore.MAXIMUM
    return None


def estimate_theta(
    item_set: ItemSet,
    responses: NDArray[np.integer],
    config: EstimationConfig | None = None,
) -> ThetaSolution:
    """
    Estimate the trait location of one response pattern.

    Extreme patterns (all minimum or all maximum categories) are handled by
    config.extreme_score_policy: BOUNDARY returns the corresponding bound of
    config.theta_range, ESTIMATE solves the estimating equation anyway and
    RAISE raises DegenerateResponseError. Other patterns whose estimating
    function does not change sign on the range are clamped to the nearer
    bound.

    Args:
        item_set: Calibrated items.
        responses: Response pattern aligned with item_set, shape (n_items,).
            Missing responses are MISSING_VALUE.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        ThetaSolution with the estimate and how it was obtained.

    Raises:
        DegenerateResponseError: If no item was answered, or the pattern is
            extreme and the policy is RAISE.
        NonConvergenceError: If the root finder hits config.max_iterations.
        ValueError: If the pattern does not match item_set.
    """
    if config is None:
        config = EstimationConfig()

    pattern = validated_pattern(item_set, responses)
    if not np.any(pattern != MISSING_VALUE):
        raise DegenerateResponseError("response pattern has no answered items")

    lower, upper = config.theta_range
    extreme = extreme_score(item_set, pattern)
    if (
        extreme is not None
        and config.extreme_score_policy != ExtremeScorePolicy.ESTIMATE
    ):
        bound = lower if extreme == ExtremeScore.MINIMUM else upper
        if config.extreme_score_policy == ExtremeScorePolicy.RAISE:
            raise DegenerateResponseError(
                f"{extreme.value} score has no interior root", bound=bound
            )
        return _boundary_solution(bound, extreme == ExtremeScore.MINIMUM)

    def objective(theta: float) -> float:
        terms = evaluate(item_set, pattern, theta)
        return terms.estimating_function(config.method)

    f_lower = objective(lower)
    f_upper = objective(upper)

    # Estimating function already negative at the lower bound: root below
    if f_lower < 0:
        logger.debug(f"No sign change on {config.theta_range}; clamped low")
        return _boundary_solution(lower, at_lower=True)
    # Still positive at the upper bound: root above
    if f_upper > 0:
        logger.debug(f"No sign change on {config.theta_range}; clamped high")
        return _boundary_solution(upper, at_lower=False)

    root, result = brentq(
        objective,
        lower,
        upper,
        xtol=config.tolerance,
        maxiter=config.max_iterations,
        full_output=True,
        disp=False,
    )
    if not result.converged:
        raise NonConvergenceError(result.iterations, config.tolerance)

    return ThetaSolution(
        theta=float(root),
        status=EstimateStatus.CONVERGED,
        n_iterations=int(result.iterations),
    )


def _boundary_solution(bound: float, at_lower: bool) -> ThetaSolution:
    return ThetaSolution(
        theta=float(bound),
        status=(
            EstimateStatus.LOWER_BOUND
            if at_lower
            else EstimateStatus.UPPER_BOUND
        ),
        n_iterations=0,
    )
