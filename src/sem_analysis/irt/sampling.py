"""
Response sampling for PCM items.

This module provides functions to sample item responses given trait values
and calibrated item parameters. No missing responses are generated.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from sem_analysis.core.utils import get_rng
from sem_analysis.irt.estimation.parameters import ItemSet, PCMItemParameters


def sample_response(
    ability: float,
    item_params: PCMItemParameters,
    rng: Generator | None = None,
) -> int:
    """
    Sample a single response given a trait value and item parameters.

    Args:
        ability: Person's latent trait value.
        item_params: PCM item parameters.
        rng: Random number generator.

    Returns:
        Index of the sampled category (0-based).
    """
    if rng is None:
        rng = get_rng()

    theta = np.array([ability], dtype=np.float64)
    probs = item_params.compute_probabilities(theta)[0]
    return int(rng.choice(item_params.n_categories, p=probs))


def sample_responses_batch(
    abilities: NDArray[np.float64],
    item_set: ItemSet,
    rng: Generator | None = None,
) -> NDArray[np.int8]:
    """
    Sample responses for all persons and items.

    Uses vectorized probability computation and inverse-CDF sampling:
    one uniform draw per person and item, drawn item by item. The same
    generator state therefore always yields the same responses.

    Args:
        abilities: Array of shape (n_persons,) with trait values.
        item_set: Calibrated items; columns follow its order.
        rng: Random number generator.

    Returns:
        Array of shape (n_persons, n_items) with category indices.
    """
    if rng is None:
        rng = get_rng()

    abilities = np.asarray(abilities, dtype=np.float64)
    n_persons = len(abilities)
    responses = np.empty((n_persons, item_set.n_items), dtype=np.int8)

    for j, item_params in enumerate(item_set.items):
        # Probabilities for all persons at once
        probs = item_params.compute_probabilities(abilities)
        n_choices = item_params.n_categories

        # Vectorized sampling using cumulative probabilities
        cumprobs = np.cumsum(probs, axis=1)
        u = rng.random(n_persons)

        # Number of cumulative probabilities below u is the sampled category
        responses[:, j] = np.minimum(
            (cumprobs < u[:, np.newaxis]).sum(axis=1), n_choices - 1
        )

    return responses
