"""
Scoring table construction.

Under the Partial Credit Model the raw sum score is a sufficient statistic
for θ: all complete response patterns with the same sum score have the same
likelihood up to a constant, and therefore the same trait estimate. The
table scores one representative pattern per sum score.
"""

import logging

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from sem_analysis.core.data_models import ResponseMatrix
from sem_analysis.irt.estimation.abilities import estimate_trait_batch
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.likelihood import total_information
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.scoring.data_models import ScoringTable, ScoringTableRow

logger = logging.getLogger(__name__)

DEFAULT_THETA_GRID = np.linspace(-6.0, 6.0, 121)


def representative_pattern(
    item_set: ItemSet, sum_score: int
) -> NDArray[np.int8]:
    """
    Response pattern with the given sum score.

    Items are filled in order up to their highest category until the score
    is used up.

    Args:
        item_set: Calibrated items.
        sum_score: Target sum score in [0, item_set.max_sum_score].

    Returns:
        Complete response pattern of shape (n_items,).
    """
    if not (0 <= sum_score <= item_set.max_sum_score):
        raise ValueError(
            f"sum score {sum_score} outside [0, {item_set.max_sum_score}]"
        )
    pattern = np.zeros(item_set.n_items, dtype=np.int8)
    remaining = sum_score
    for i, item in enumerate(item_set.items):
        pattern[i] = min(item.max_score, remaining)
        remaining -= int(pattern[i])
    return pattern


def build_scoring_table(
    item_set: ItemSet,
    score_range: tuple[int, int] | None = None,
    config: EstimationConfig | None = None,
) -> ScoringTable:
    """
    Build the sum score to trait score lookup table.

    Args:
        item_set: Calibrated items.
        score_range: Inclusive (lo, hi) sum scores. Defaults to every
            achievable sum score.
        config: Estimation configuration. Uses defaults if None.

    Returns:
        ScoringTable with one row per sum score in increasing order. The
        extreme sum scores are reported according to
        config.extreme_score_policy.

    Raises:
        ValueError: If score_range is empty or not achievable.
    """
    if config is None:
        config = EstimationConfig()

    if score_range is None:
        score_range = (0, item_set.max_sum_score)
    lo, hi = score_range
    if lo > hi:
        raise ValueError(f"empty score range: ({lo}, {hi})")
    if lo < 0 or hi > item_set.max_sum_score:
        raise ValueError(
            f"score range ({lo}, {hi}) outside achievable scores "
            f"[0, {item_set.max_sum_score}]"
        )

    sum_scores = list(range(lo, hi + 1))
    patterns = np.stack(
        [representative_pattern(item_set, s) for s in sum_scores]
    )
    estimates = estimate_trait_batch(
        item_set,
        ResponseMatrix(responses=patterns, n_categories=item_set.n_categories),
        config,
    )

    rows = tuple(
        ScoringTableRow(
            sum_score=s,
            theta=estimate.theta,
            se=estimate.se,
            status=estimate.status,
            pattern=tuple(int(k) for k in pattern),
        )
        for s, pattern, estimate in zip(
            sum_scores, patterns, estimates, strict=True
        )
    )

    is_monotone = True
    scored = [r for r in rows if np.isfinite(r.theta)]
    for previous, current in zip(scored, scored[1:], strict=False):
        if current.theta < previous.theta:
            is_monotone = False
            logger.warning(
                f"Scoring table not monotone: sum score {current.sum_score} "
                f"has theta {current.theta:.4f} below "
                f"{previous.theta:.4f} at sum score {previous.sum_score}"
            )

    failed = [r.sum_score for r in rows if r.status.is_failure]
    if failed:
        logger.warning(f"No estimate for sum scores {failed}")

    return ScoringTable(
        rows=rows,
        theta_range=config.theta_range,
        is_monotone=is_monotone,
    )


def information_curve(
    item_set: ItemSet,
    theta_grid: NDArray[np.float64] | None = None,
) -> pd.DataFrame:
    """
    Test information and standard error of measurement over a theta grid.

    Args:
        item_set: Calibrated items.
        theta_grid: Theta values. Defaults to 121 points on [-6, 6].

    Returns:
        DataFrame with columns theta, information and sem (1 / sqrt(I)).
    """
    if theta_grid is None:
        theta_grid = DEFAULT_THETA_GRID
    grid = np.asarray(theta_grid, dtype=np.float64)

    info = np.array(
        [total_information(item_set, float(t)) for t in grid],
        dtype=np.float64,
    )
    with np.errstate(divide="ignore"):
        sem = np.where(info > 0, 1.0 / np.sqrt(info), np.inf)

    return pd.DataFrame({"theta": grid, "information": info, "sem": sem})
