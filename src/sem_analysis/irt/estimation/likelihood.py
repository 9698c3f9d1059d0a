"""
Likelihood and information of a PCM response pattern.

For a response pattern x (missing items excluded) and trait value θ:

    log L(θ)  = Σ_i log P_i(x_i | θ)
    score(θ)  = d log L / dθ = Σ_i (x_i - E_i[k | θ])
    I(θ)      = Σ_i Var_i(k | θ)                      (Fisher information)

Warm's (1989) weighted likelihood adds the bias-correction term

    J(θ) = ½ Σ_i Σ_k P'_ik P''_ik / P_ik = ½ Σ_i κ3_i(θ)

(for the PCM, P'_k = P_k (k - μ) and P''_k = P_k ((k - μ)² - σ²), so the
inner sum collapses to the third central moment of the category index).
The WL estimate solves score(θ) + J(θ) / I(θ) = 0.

Items with a missing response contribute neither to the score nor to the
information; a pattern with every item missing has zero information.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from sem_analysis.core.constants import MISSING_VALUE
from sem_analysis.irt.estimation.enums import EstimationMethod
from sem_analysis.irt.estimation.kernels import (
    FOURTH_CUMULANT,
    MEAN,
    THIRD_CUMULANT,
    VARIANCE,
    pcm_category_probabilities,
    pcm_item_cumulants,
)
from sem_analysis.irt.estimation.parameters import ItemSet


@dataclass(frozen=True)
class LikelihoodTerms:
    """
    Likelihood quantities of one response pattern at one θ.

    Attributes:
        theta: Trait value the terms were evaluated at.
        score: First derivative of the log-likelihood.
        information: Fisher information I(θ) of the answered items.
        bias_correction: Warm's term J(θ).
        information_derivative: dI/dθ.
        bias_correction_derivative: dJ/dθ.
    """

    theta: float
    score: float
    information: float
    bias_correction: float
    information_derivative: float
    bias_correction_derivative: float

    def estimating_function(self, method: EstimationMethod) -> float:
        """Value of the estimating equation whose root is the estimate."""
        if method == EstimationMethod.MLE or self.information <= 0.0:
            return self.score
        return self.score + self.bias_correction / self.information

    def corrected_information(self, method: EstimationMethod) -> float:
        """
        Negative derivative of the estimating function.

        For WLE this is I - d/dθ (J / I) = I - (J' I - J I') / I²; for MLE
        it is the Fisher information.
        """
        if method == EstimationMethod.MLE or self.information <= 0.0:
            return self.information
        i = self.information
        adjustment = (
            self.bias_correction_derivative * i
            - self.bias_correction * self.information_derivative
        ) / (i * i)
        return i - adjustment


def validated_pattern(
    item_set: ItemSet, responses: NDArray[np.integer]
) -> NDArray[np.int64]:
    """
    Response pattern as int64, checked against the item set.

    Raises:
        ValueError: If the shape does not match the item set, or a response
            is neither MISSING_VALUE nor a category of its item.
    """
    pattern = np.asarray(responses, dtype=np.int64)
    if pattern.shape != (item_set.n_items,):
        raise ValueError(
            f"response pattern must have shape ({item_set.n_items},), "
            f"got {pattern.shape}"
        )
    answered = pattern != MISSING_VALUE
    invalid = answered & ((pattern < 0) | (pattern > item_set.max_scores))
    if np.any(invalid):
        col = int(np.flatnonzero(invalid)[0])
        raise ValueError(
            f"Response {pattern[col]} for item {item_set.item_ids[col]} is "
            f"outside its {item_set.n_categories[col]} categories and is "
            f"not {MISSING_VALUE} (missing)"
        )
    return pattern


def answered_mask(
    item_set: ItemSet, responses: NDArray[np.integer]
) -> NDArray[np.bool_]:
    """Boolean mask of the items with a non-missing response."""
    result: NDArray[np.bool_] = (
        validated_pattern(item_set, responses) != MISSING_VALUE
    )
    return result


def _cumulants(item_set: ItemSet, theta: float) -> NDArray[np.float64]:
    result: NDArray[np.float64] = pcm_item_cumulants(
        float(theta), item_set.threshold_matrix, item_set.threshold_counts
    )
    return result


def log_likelihood(
    item_set: ItemSet, responses: NDArray[np.integer], theta: float
) -> float:
    """
    Log-likelihood of a response pattern at θ.

    Args:
        item_set: Calibrated items.
        responses: Response pattern aligned with item_set, shape (n_items,).
        theta: Trait value.

    Returns:
        Sum of log category probabilities over answered items.
    """
    pattern = validated_pattern(item_set, responses)
    valid = pattern != MISSING_VALUE
    probs = pcm_category_probabilities(
        float(theta), item_set.threshold_matrix, item_set.threshold_counts
    )
    item_idx = np.flatnonzero(valid)
    selected = probs[item_idx, pattern[item_idx]]
    return float(np.sum(np.log(selected + 1e-300)))


def score(
    item_set: ItemSet, responses: NDArray[np.integer], theta: float
) -> float:
    """First derivative of the log-likelihood with respect to θ."""
    pattern = validated_pattern(item_set, responses)
    valid = pattern != MISSING_VALUE
    cumulants = _cumulants(item_set, theta)
    return float(np.sum(pattern[valid] - cumulants[valid, MEAN]))


def information(
    item_set: ItemSet, responses: NDArray[np.integer], theta: float
) -> float:
    """Fisher information of the answered items at θ."""
    valid = answered_mask(item_set, responses)
    cumulants = _cumulants(item_set, theta)
    return float(np.sum(cumulants[valid, VARIANCE]))


def bias_correction(
    item_set: ItemSet, responses: NDArray[np.integer], theta: float
) -> float:
    """Warm's bias-correction term J(θ) of the answered items."""
    valid = answered_mask(item_set, responses)
    cumulants = _cumulants(item_set, theta)
    return float(0.5 * np.sum(cumulants[valid, THIRD_CUMULANT]))


def evaluate(
    item_set: ItemSet, responses: NDArray[np.integer], theta: float
) -> LikelihoodTerms:
    """
    Evaluate every likelihood term needed by the estimators at one θ.

    Uses a single kernel call, so root finding pays for one pass over the
    items per iteration.
    """
    pattern = validated_pattern(item_set, responses)
    valid = pattern != MISSING_VALUE
    cumulants = _cumulants(item_set, theta)[valid]

    return LikelihoodTerms(
        theta=float(theta),
        score=float(np.sum(pattern[valid] - cumulants[:, MEAN])),
        information=float(np.sum(cumulants[:, VARIANCE])),
        bias_correction=float(0.5 * np.sum(cumulants[:, THIRD_CUMULANT])),
        information_derivative=float(np.sum(cumulants[:, THIRD_CUMULANT])),
        bias_correction_derivative=float(
            0.5 * np.sum(cumulants[:, FOURTH_CUMULANT])
        ),
    )


def total_information(item_set: ItemSet, theta: float) -> float:
    """Information of the complete item set (every item answered) at θ."""
    cumulants = _cumulants(item_set, theta)
    return float(np.sum(cumulants[:, VARIANCE]))
