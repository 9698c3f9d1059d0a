"""
Tests for point estimation of theta.
"""

import numpy as np
import pytest

from sem_analysis.core.constants import MISSING_VALUE
from sem_analysis.core.exceptions import (
    DegenerateResponseError,
    NonConvergenceError,
)
from sem_analysis.irt.estimation.config import EstimationConfig
from sem_analysis.irt.estimation.enums import (
    EstimateStatus,
    EstimationMethod,
    ExtremeScorePolicy,
)
from sem_analysis.irt.estimation.likelihood import evaluate
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.irt.estimation.theta import (
    ExtremeScore,
    estimate_theta,
    extreme_score,
)
from sem_analysis.synthetic_data.presets import get_item_preset


@pytest.fixture
def pss7() -> ItemSet:
    return get_item_preset("pss7")


class TestExtremeScore:
    def test_classification(self, pss7: ItemSet) -> None:
        zeros = np.zeros(7, dtype=np.int8)
        maxes = np.full(7, 4, dtype=np.int8)
        mixed = np.array([0, 0, 0, 0, 0, 0, 1], dtype=np.int8)

        assert extreme_score(pss7, zeros) == ExtremeScore.MINIMUM
        assert extreme_score(pss7, maxes) == ExtremeScore.MAXIMUM
        assert extreme_score(pss7, mixed) is None

    def test_missing_items_are_ignored(self, pss7: ItemSet) -> None:
        pattern = np.array(
            [4, MISSING_VALUE, 4, 4, MISSING_VALUE, 4, 4], dtype=np.int8
        )

        assert extreme_score(pss7, pattern) == ExtremeScore.MAXIMUM

    def test_all_missing_is_not_extreme(self, pss7: ItemSet) -> None:
        pattern = np.full(7, MISSING_VALUE, dtype=np.int8)

        assert extreme_score(pss7, pattern) is None


class TestEstimateTheta:
    def test_solves_weighted_likelihood_equation(self, pss7: ItemSet) -> None:
        pattern = np.array([2, 1, 3, 2, 0, 4, 1], dtype=np.int8)

        solution = estimate_theta(pss7, pattern)

        assert solution.status == EstimateStatus.CONVERGED
        terms = evaluate(pss7, pattern, solution.theta)
        assert abs(
            terms.estimating_function(EstimationMethod.WLE)
        ) == pytest.approx(0.0, abs=1e-4)

    def test_mle_solves_score_equation(self, pss7: ItemSet) -> None:
        pattern = np.array([2, 1, 3, 2, 0, 4, 1], dtype=np.int8)
        config = EstimationConfig(method=EstimationMethod.MLE)

        solution = estimate_theta(pss7, pattern, config)

        terms = evaluate(pss7, pattern, solution.theta)
        assert terms.score == pytest.approx(0.0, abs=1e-4)

    def test_wle_is_less_extreme_than_mle(self, pss7: ItemSet) -> None:
        high = np.array([4, 4, 3, 4, 3, 3, 3], dtype=np.int8)
        low = np.array([1, 0, 1, 0, 1, 0, 1], dtype=np.int8)
        mle = EstimationConfig(method=EstimationMethod.MLE)

        assert (
            estimate_theta(pss7, high).theta
            < estimate_theta(pss7, high, mle).theta
        )
        assert (
            estimate_theta(pss7, low).theta
            > estimate_theta(pss7, low, mle).theta
        )

    def test_estimate_increases_with_sum_score(self, pss7: ItemSet) -> None:
        low = np.array([1, 1, 1, 1, 1, 1, 1], dtype=np.int8)
        high = np.array([1, 1, 1, 1, 1, 1, 2], dtype=np.int8)

        assert estimate_theta(pss7, low).theta < estimate_theta(
            pss7, high
        ).theta

    def test_same_sum_score_same_estimate(self, pss7: ItemSet) -> None:
        """The sum score is sufficient for complete patterns."""
        a = np.array([4, 4, 4, 2, 0, 0, 0], dtype=np.int8)
        b = np.array([2, 2, 2, 2, 2, 2, 2], dtype=np.int8)

        assert estimate_theta(pss7, a).theta == pytest.approx(
            estimate_theta(pss7, b).theta, abs=1e-5
        )

    def test_missing_items_equal_reduced_item_set(
        self, pss7: ItemSet
    ) -> None:
        pattern = np.array(
            [2, MISSING_VALUE, 3, 1, MISSING_VALUE, 2, 1], dtype=np.int8
        )
        keep = [0, 2, 3, 5, 6]
        reduced = ItemSet(items=tuple(pss7.items[i] for i in keep))

        full = estimate_theta(pss7, pattern)
        subset = estimate_theta(reduced, pattern[keep])

        assert full.theta == pytest.approx(subset.theta, abs=1e-5)

    def test_all_minimum_returns_lower_bound(self, pss7: ItemSet) -> None:
        solution = estimate_theta(pss7, np.zeros(7, dtype=np.int8))

        assert solution.theta == -10.0
        assert solution.status == EstimateStatus.LOWER_BOUND
        assert solution.at_boundary

    def test_all_maximum_returns_upper_bound(self, pss7: ItemSet) -> None:
        config = EstimationConfig(theta_range=(-6.0, 6.0))

        solution = estimate_theta(pss7, np.full(7, 4, dtype=np.int8), config)

        assert solution.theta == 6.0
        assert solution.status == EstimateStatus.UPPER_BOUND

    def test_estimate_policy_gives_finite_wle(self, pss7: ItemSet) -> None:
        config = EstimationConfig(
            extreme_score_policy=ExtremeScorePolicy.ESTIMATE
        )

        solution = estimate_theta(pss7, np.zeros(7, dtype=np.int8), config)

        assert solution.status == EstimateStatus.CONVERGED
        assert -10.0 < solution.theta < -2.0

    def test_raise_policy(self, pss7: ItemSet) -> None:
        config = EstimationConfig(
            extreme_score_policy=ExtremeScorePolicy.RAISE
        )

        with pytest.raises(DegenerateResponseError) as exc_info:
            estimate_theta(pss7, np.full(7, 4, dtype=np.int8), config)

        assert exc_info.value.bound == 10.0

    def test_all_missing_raises(self, pss7: ItemSet) -> None:
        pattern = np.full(7, MISSING_VALUE, dtype=np.int8)

        with pytest.raises(DegenerateResponseError, match="no answered"):
            estimate_theta(pss7, pattern)

    def test_iteration_cap_raises(self, pss7: ItemSet) -> None:
        pattern = np.array([2, 1, 3, 2, 0, 4, 1], dtype=np.int8)
        config = EstimationConfig(max_iterations=1, tolerance=1e-12)

        with pytest.raises(NonConvergenceError):
            estimate_theta(pss7, pattern, config)

    def test_wrong_shape_raises(self, pss7: ItemSet) -> None:
        with pytest.raises(ValueError, match="shape"):
            estimate_theta(pss7, np.zeros(3, dtype=np.int8))

    @pytest.mark.parametrize("code", [9, -2])
    def test_code_outside_categories_raises(
        self, pss7: ItemSet, code: int
    ) -> None:
        pattern = np.array([code, 1, 1, 1, 1, 1, 1], dtype=np.int8)

        with pytest.raises(ValueError, match="outside"):
            estimate_theta(pss7, pattern)

    def test_no_sign_change_is_clamped(self) -> None:
        """A narrow range that excludes the root clamps to the bound."""
        item_set = get_item_preset("pss7")
        pattern = np.array([4, 4, 4, 4, 4, 4, 3], dtype=np.int8)
        config = EstimationConfig(theta_range=(-1.0, 1.0))

        solution = estimate_theta(item_set, pattern, config)

        assert solution.theta == 1.0
        assert solution.status == EstimateStatus.UPPER_BOUND
