"""
Compiled PCM kernels.

All kernels take the padded threshold matrix of an ItemSet (shape
(n_items, max_thresholds)) together with the number of thresholds per item,
and evaluate every item at a single trait value θ.

For item i with m thresholds the cumulative logits are

    η_0 = 0,    η_k = η_{k-1} + (θ - δ_k),    k = 1..m

and P(X=k | θ) = exp(η_k - max η) / Σ_h exp(η_h - max η). Subtracting the
per-item maximum keeps the exponentials finite for any θ.

Because the PCM is an exponential family in θ with sufficient statistic k,
the derivatives of the per-item log-normaliser are the cumulants of the
category index:

    d/dθ E[k]   = κ2  (item information)
    d/dθ κ2     = κ3
    d/dθ κ3     = κ4
"""

import numpy as np
from numba import njit  # type: ignore
from numpy.typing import NDArray

# Columns of the cumulant matrix returned by pcm_item_cumulants
MEAN = 0
VARIANCE = 1
THIRD_CUMULANT = 2
FOURTH_CUMULANT = 3


@njit(nogil=True)  # type: ignore
def pcm_category_probabilities(
    theta: float,
    thresholds: NDArray[np.float64],
    n_thresholds: NDArray[np.int64],
) -> NDArray[np.float64]:
    """
    Category probabilities for every item at one θ.

    Args:
        theta: Trait value.
        thresholds: Padded thresholds, shape (n_items, max_thresholds).
        n_thresholds: Thresholds per item, shape (n_items,).

    Returns:
        Probabilities, shape (n_items, max_thresholds + 1). Cells past an
        item's last category are zero.
    """
    n_items, max_thresholds = thresholds.shape
    probs = np.zeros((n_items, max_thresholds + 1))
    logits = np.empty(max_thresholds + 1)

    for i in range(n_items):
        m = n_thresholds[i]
        logits[0] = 0.0
        max_logit = 0.0
        for k in range(1, m + 1):
            logits[k] = logits[k - 1] + theta - thresholds[i, k - 1]
            if logits[k] > max_logit:
                max_logit = logits[k]

        total = 0.0
        for k in range(m + 1):
            p = np.exp(logits[k] - max_logit)
            probs[i, k] = p
            total += p
        for k in range(m + 1):
            probs[i, k] /= total

    return probs


@njit(nogil=True)  # type: ignore
def pcm_item_cumulants(
    theta: float,
    thresholds: NDArray[np.float64],
    n_thresholds: NDArray[np.int64],
) -> NDArray[np.float64]:
    """
    Mean and cumulants κ2..κ4 of the category index for every item at one θ.

    Args:
        theta: Trait value.
        thresholds: Padded thresholds, shape (n_items, max_thresholds).
        n_thresholds: Thresholds per item, shape (n_items,).

    Returns:
        Array of shape (n_items, 4) with columns MEAN, VARIANCE,
        THIRD_CUMULANT, FOURTH_CUMULANT.
    """
    probs = pcm_category_probabilities(theta, thresholds, n_thresholds)
    n_items = probs.shape[0]
    out = np.zeros((n_items, 4))

    for i in range(n_items):
        m = n_thresholds[i]
        mean = 0.0
        for k in range(m + 1):
            mean += k * probs[i, k]

        m2 = 0.0
        m3 = 0.0
        m4 = 0.0
        for k in range(m + 1):
            d = k - mean
            d2 = d * d
            p = probs[i, k]
            m2 += p * d2
            m3 += p * d2 * d
            m4 += p * d2 * d2

        out[i, MEAN] = mean
        out[i, VARIANCE] = m2
        out[i, THIRD_CUMULANT] = m3
        out[i, FOURTH_CUMULANT] = m4 - 3.0 * m2 * m2

    return out
