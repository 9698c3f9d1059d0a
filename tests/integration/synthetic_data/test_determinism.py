import numpy as np
import pytest

from sem_analysis.evaluation.runner import run_replications
from sem_analysis.irt.estimation import EstimationConfig, ItemSet
from sem_analysis.synthetic_data.config import SimulationConfig
from sem_analysis.synthetic_data.generators import simulate
from sem_analysis.synthetic_data.presets import get_item_preset


@pytest.fixture
def pss7() -> ItemSet:
    return get_item_preset("pss7")


def test_simulate_byte_identical(pss7: ItemSet) -> None:
    theta = np.random.default_rng(0).normal(0.57, 1.5, size=2000)

    first = simulate(pss7, theta, seed=1234)
    second = simulate(pss7, theta, seed=1234)

    assert (
        first.responses.responses.tobytes()
        == second.responses.responses.tobytes()
    )


def test_estimates_independent_of_worker_count(pss7: ItemSet) -> None:
    config = SimulationConfig(n_persons=300, random_seed=5)

    (serial,) = run_replications(
        pss7, config, 1, 9, estimation_config=EstimationConfig(n_workers=1)
    )
    (parallel,) = run_replications(
        pss7, config, 1, 9, estimation_config=EstimationConfig(n_workers=8)
    )

    np.testing.assert_array_equal(
        serial.estimates.theta, parallel.estimates.theta
    )
    np.testing.assert_array_equal(serial.estimates.se, parallel.estimates.se)
    assert serial.estimates.status == parallel.estimates.status
