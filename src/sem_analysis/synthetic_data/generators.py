"""
Orchestration layer for response simulation.

This module ties together trait draws, item calibrations and the PCM
response sampler to generate complete simulated datasets.
"""

import logging
from pathlib import Path

import numpy as np
from numpy.random import Generator
from numpy.typing import ArrayLike

from sem_analysis.core.data_models import ResponseMatrix
from sem_analysis.core.utils import get_rng
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.irt.sampling import sample_responses_batch
from sem_analysis.synthetic_data.config import SimulationConfig
from sem_analysis.synthetic_data.data_models import SimulatedDataset
from sem_analysis.synthetic_data.presets import get_item_preset
from sem_analysis.synthetic_data.sampling import draw_sample

logger = logging.getLogger(__name__)


def simulate(
    item_set: ItemSet,
    trait_values: ArrayLike,
    seed: int | None = None,
    rng: Generator | None = None,
) -> SimulatedDataset:
    """
    Simulate PCM responses for persons with known trait values.

    The same seed and inputs always give identical responses. No missing
    responses are generated.

    Args:
        item_set: Calibrated items.
        trait_values: True trait value per person, shape (n_persons,).
        seed: Random seed. Ignored when rng is given.
        rng: Random number generator to draw from.

    Returns:
        SimulatedDataset holding the trait values and responses.

    Raises:
        ValueError: If trait_values is empty, not 1D or not finite, or if
            both seed and rng are given.
    """
    if seed is not None and rng is not None:
        raise ValueError("pass either seed or rng, not both")

    abilities = np.asarray(trait_values, dtype=np.float64)
    if abilities.ndim != 1 or len(abilities) == 0:
        raise ValueError(
            f"trait_values must be a non-empty 1D array, "
            f"got shape {abilities.shape}"
        )
    if not np.all(np.isfinite(abilities)):
        raise ValueError("trait_values must be finite")

    if rng is None:
        rng = get_rng(seed)

    raw_responses = sample_responses_batch(
        abilities=abilities,
        item_set=item_set,
        rng=rng,
    )

    return SimulatedDataset(
        abilities=abilities,
        responses=ResponseMatrix(
            responses=raw_responses, n_categories=item_set.n_categories
        ),
        item_ids=item_set.item_ids,
        seed=seed,
    )


def generate_dataset(
    config: SimulationConfig,
    item_set: ItemSet | None = None,
    seed: int | None = None,
) -> SimulatedDataset:
    """
    Generate a simulated dataset from a simulation configuration.

    Trait values and responses are drawn from one generator:
        1. Sample trait values from config.ability
        2. Simulate responses to the items

    Args:
        config: Simulation configuration.
        item_set: Calibrated items. Loaded from config.item_preset if None.
        seed: Overrides config.random_seed.

    Returns:
        SimulatedDataset for config.n_persons persons.
    """
    if item_set is None:
        item_set = get_item_preset(config.item_preset)
    if seed is None:
        seed = config.random_seed

    rng = get_rng(seed)

    # Step 1: Sample trait values
    abilities = draw_sample(
        n=config.n_persons,
        distribution_name=config.ability.distribution,
        distribution_params=dict(config.ability.params),
        rng=rng,
    )

    # Step 2: Generate responses
    dataset = simulate(item_set, abilities, rng=rng)
    logger.debug(
        f"Simulated {config.n_persons} persons on {item_set.n_items} items "
        f"(seed={seed})"
    )

    return SimulatedDataset(
        abilities=dataset.abilities,
        responses=dataset.responses,
        item_ids=dataset.item_ids,
        seed=seed,
    )


def to_csv(data: SimulatedDataset, path: Path) -> None:
    """
    Write a SimulatedDataset to a CSV file.

    Args:
        data: Simulated data.
        path: Output file path.
    """
    data.to_dataframe().to_csv(path, index=False)
