"""
Standard errors of trait estimates.

SE(θ̂) = 1 / sqrt(I*(θ̂)), where I* is either

- the curvature of the estimating function (SEMethod.CORRECTED). For WLE
  this is I - d/dθ [J / I], the information adjusted for the
  bias-correction term; for MLE it equals the Fisher information.
- the Fisher information of the answered items (SEMethod.FISHER).

An undefined standard error is reported as +inf, never as 0 or a large
finite number.
"""

import math

import numpy as np
from numpy.typing import NDArray

from sem_analysis.core.exceptions import UndefinedStandardError
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.enums import ExtremeScorePolicy, SEMethod
from sem_analysis.irt.estimation.likelihood import (
    evaluate,
    validated_pattern,
)
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.irt.estimation.theta import extreme_score

UNDEFINED_SE = math.inf


def estimate_se(
    item_set: ItemSet,
    responses: NDArray[np.integer],
    theta_hat: float,
    config: EstimationConfig | None = None,
    strict: bool = False,
) -> float:
    """
    Standard error of a trait estimate.

    An estimate on either bound of config.theta_range is not a root of the
    estimating equation but a clamp, so it has no standard error. The same
    holds for an extreme pattern under the boundary policy.

    Args:
        item_set: Calibrated items.
        responses: Response pattern the estimate was computed from.
        theta_hat: Trait estimate.
        config: Estimation configuration (method, SE method, theta range
            and information floor). Uses defaults if None.
        strict: Raise UndefinedStandardError instead of returning +inf.

    Returns:
        The standard error, or UNDEFINED_SE (+inf) when theta_hat sits on
        a range bound, the pattern is extreme under the boundary policy,
        or the information at theta_hat does not exceed
        config.min_information.

    Raises:
        UndefinedStandardError: If strict and the SE is undefined.
        ValueError: If the pattern does not match item_set.
    """
    if config is None:
        config = EstimationConfig()

    pattern = validated_pattern(item_set, responses)
    lower, upper = config.theta_range
    clamped = theta_hat <= lower or theta_hat >= upper
    boundary = config.extreme_score_policy == ExtremeScorePolicy.BOUNDARY
    if clamped or (boundary and extreme_score(item_set, pattern) is not None):
        if strict:
            raise UndefinedStandardError(0.0)
        return UNDEFINED_SE

    terms = evaluate(item_set, pattern, theta_hat)
    if config.se_method == SEMethod.FISHER:
        info = terms.information
    else:
        info = terms.corrected_information(config.method)

    if not math.isfinite(info) or info <= config.min_information:
        if strict:
            raise UndefinedStandardError(info)
        return UNDEFINED_SE

    return 1.0 / math.sqrt(info)
