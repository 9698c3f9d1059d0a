"""
Tests for PCM response sampling.
"""

import numpy as np
import pytest

from sem_analysis.core.utils import get_rng
from sem_analysis.irt import (
    ItemSet,
    PCMItemParameters,
    sample_response,
    sample_responses_batch,
)
from sem_analysis.synthetic_data.presets import get_item_preset


@pytest.fixture
def pss7() -> ItemSet:
    return get_item_preset("pss7")


class TestSampleResponse:
    def test_returns_valid_category(self) -> None:
        item = PCMItemParameters(item_id="a", thresholds=(-1.0, 0.0, 1.0))
        rng = get_rng(0)

        for _ in range(50):
            assert 0 <= sample_response(0.0, item, rng) < 4

    def test_frequencies_match_probabilities(self) -> None:
        item = PCMItemParameters(item_id="a", thresholds=(-0.5, 0.8))
        rng = get_rng(11)

        draws = [sample_response(0.3, item, rng) for _ in range(5000)]

        observed = np.bincount(draws, minlength=3) / 5000
        expected = item.compute_probabilities(np.array([0.3]))[0]
        np.testing.assert_allclose(observed, expected, atol=0.03)


class TestSampleResponsesBatch:
    def test_shape_and_dtype(self, pss7: ItemSet) -> None:
        abilities = np.linspace(-3.0, 3.0, 25)

        responses = sample_responses_batch(abilities, pss7, get_rng(1))

        assert responses.shape == (25, 7)
        assert responses.dtype == np.int8
        assert responses.min() >= 0
        assert responses.max() <= 4

    def test_reproducible_with_same_seed(self, pss7: ItemSet) -> None:
        abilities = np.zeros(100)

        first = sample_responses_batch(abilities, pss7, get_rng(5))
        second = sample_responses_batch(abilities, pss7, get_rng(5))

        np.testing.assert_array_equal(first, second)

    def test_category_frequencies_match_model(self, pss7: ItemSet) -> None:
        n = 20000
        theta = 0.5
        responses = sample_responses_batch(np.full(n, theta), pss7, get_rng(2))

        for j, item in enumerate(pss7.items):
            observed = np.bincount(responses[:, j], minlength=5) / n
            expected = item.compute_probabilities(np.array([theta]))[0]
            np.testing.assert_allclose(observed, expected, atol=0.015)

    def test_higher_trait_gives_higher_scores(self, pss7: ItemSet) -> None:
        rng = get_rng(3)
        low = sample_responses_batch(np.full(500, -1.5), pss7, rng)
        high = sample_responses_batch(np.full(500, 1.5), pss7, rng)

        assert low.sum(axis=1).mean() < high.sum(axis=1).mean()

    def test_mixed_category_counts(self) -> None:
        item_set = ItemSet(
            items=(
                PCMItemParameters(item_id="a", thresholds=(0.0,)),
                PCMItemParameters(item_id="b", thresholds=(-1.0, 0.0, 1.0)),
            )
        )

        responses = sample_responses_batch(
            np.linspace(-5.0, 5.0, 200), item_set, get_rng(4)
        )

        assert set(np.unique(responses[:, 0])) <= {0, 1}
        assert set(np.unique(responses[:, 1])) <= {0, 1, 2, 3}
