"""
Trait estimation for batches of response patterns.

Each response pattern is scored independently (point estimate, then
standard error), so a batch is a task-parallel map over rows. Results are
collected by index and always come back in input order, ready to be joined
against the input trait values.

Per-pattern failures do not abort the batch: they are recorded as
TraitEstimate objects with a failure status and counted in the summary.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from functools import partial

import numpy as np
from numpy.typing import NDArray

from sem_analysis.core.data_models import ResponseMatrix
from sem_analysis.core.exceptions import (
    DegenerateResponseError,
    NonConvergenceError,
)
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.data_models import (
    AbilityEstimates,
    TraitEstimate,
)
from sem_analysis.irt.estimation.enums import EstimateStatus
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.irt.estimation.standard_error import estimate_se
from sem_analysis.irt.estimation.theta import estimate_theta

logger = logging.getLogger(__name__)


def estimate_trait(
    item_set: ItemSet,
    responses: NDArray[np.integer],
    config: EstimationConfig | None = None,
) -> TraitEstimate:
    """
    Estimate theta and its standard error for one response pattern.

    Never raises for estimation problems: non-convergence and degenerate
    patterns are returned as failed TraitEstimates.

    Args:
        item_set: Calibrated items.
        responses: Response pattern aligned with item_set.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        TraitEstimate for the pattern.
    """
    if config is None:
        config = EstimationConfig()

    try:
        solution = estimate_theta(item_set, responses, config)
    except NonConvergenceError as e:
        return TraitEstimate(
            theta=math.nan,
            se=math.nan,
            status=EstimateStatus.NON_CONVERGED,
            n_iterations=e.n_iterations,
            message=str(e),
        )
    except DegenerateResponseError as e:
        return TraitEstimate(
            theta=math.nan,
            se=math.nan,
            status=EstimateStatus.DEGENERATE,
            message=str(e),
        )

    if solution.at_boundary:
        return TraitEstimate(
            theta=solution.theta,
            se=math.inf,
            status=solution.status,
            n_iterations=solution.n_iterations,
            message="estimate clamped to the theta range",
        )

    se = estimate_se(item_set, responses, solution.theta, config)
    if math.isinf(se):
        return TraitEstimate(
            theta=solution.theta,
            se=se,
            status=EstimateStatus.SE_UNDEFINED,
            n_iterations=solution.n_iterations,
            message="information at the estimate is not positive",
        )

    return TraitEstimate(
        theta=solution.theta,
        se=se,
        status=solution.status,
        n_iterations=solution.n_iterations,
    )


def _as_response_matrix(
    item_set: ItemSet, data: ResponseMatrix | NDArray[np.integer]
) -> ResponseMatrix:
    if isinstance(data, ResponseMatrix):
        if data.n_categories != item_set.n_categories:
            raise ValueError(
                "response matrix categories do not match the item set: "
                f"{data.n_categories} vs {item_set.n_categories}"
            )
        return data
    return ResponseMatrix(
        responses=np.asarray(data, dtype=np.int8),
        n_categories=item_set.n_categories,
    )


def estimate_trait_batch(
    item_set: ItemSet,
    data: ResponseMatrix | NDArray[np.integer],
    config: EstimationConfig | None = None,
) -> list[TraitEstimate]:
    """
    Estimate every row of a response matrix.

    Args:
        item_set: Calibrated items.
        data: Response matrix (or raw int array) aligned with item_set.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        One TraitEstimate per row, in row order.
    """
    if config is None:
        config = EstimationConfig()

    matrix = _as_response_matrix(item_set, data)
    rows = [matrix.row(i) for i in range(matrix.n_persons)]
    task = partial(estimate_trait, item_set, config=config)

    if config.n_workers == 1 or len(rows) <= 1:
        return [task(row) for row in rows]

    # executor.map yields results in submission order
    with ThreadPoolExecutor(max_workers=config.n_workers) as executor:
        return list(executor.map(task, rows))


def estimate_abilities(
    item_set: ItemSet,
    data: ResponseMatrix | NDArray[np.integer],
    config: EstimationConfig | None = None,
) -> AbilityEstimates:
    """
    Estimate theta and SE for every person in a response matrix.

    Args:
        item_set: Calibrated items.
        data: Response matrix (or raw int array) aligned with item_set.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        AbilityEstimates aligned with the rows of data.
    """
    estimates = estimate_trait_batch(item_set, data, config)
    result = AbilityEstimates.from_estimates(estimates)

    counts = result.status_counts()
    summary = ", ".join(
        f"{status.value}={n}" for status, n in sorted(counts.items())
    )
    logger.info(f"Estimated {result.n_persons} response patterns: {summary}")
    if result.n_failed:
        logger.warning(
            f"{result.n_failed} of {result.n_persons} response patterns "
            "have no estimate"
        )

    return result
