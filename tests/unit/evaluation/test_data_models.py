"""Tests for evaluation data models."""

import numpy as np
import pytest
from pydantic import ValidationError

from sem_analysis.core.data_models import ResponseMatrix
from sem_analysis.evaluation.data_models import (
    CoverageLevelResult,
    CoverageReport,
    RecoveryMetrics,
    SimulationStudyResult,
)
from sem_analysis.irt.estimation.data_models import AbilityEstimates
from sem_analysis.irt.estimation.enums import EstimateStatus
from sem_analysis.synthetic_data.data_models import SimulatedDataset


class TestCoverageLevelResult:
    def test_observed_and_deviation(self) -> None:
        result = CoverageLevelResult(
            confidence_level=0.9,
            critical_value=1.645,
            n_covered=85,
            n_evaluated=100,
        )

        assert result.observed == pytest.approx(0.85)
        assert result.deviation == pytest.approx(-0.05)

    def test_nothing_evaluated_gives_nan(self) -> None:
        result = CoverageLevelResult(
            confidence_level=0.9,
            critical_value=1.645,
            n_covered=0,
            n_evaluated=0,
        )

        assert np.isnan(result.observed)

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValidationError):
            CoverageLevelResult(
                confidence_level=1.0,
                critical_value=1.0,
                n_covered=0,
                n_evaluated=0,
            )

    def test_negative_count_raises(self) -> None:
        with pytest.raises(ValidationError):
            CoverageLevelResult(
                confidence_level=0.5,
                critical_value=0.67,
                n_covered=-1,
                n_evaluated=0,
            )

    def test_immutable(self) -> None:
        result = CoverageLevelResult(
            confidence_level=0.9,
            critical_value=1.645,
            n_covered=1,
            n_evaluated=2,
        )

        with pytest.raises(ValidationError):
            result.n_covered = 2  # type: ignore[misc]


class TestCoverageReport:
    @pytest.fixture
    def report(self) -> CoverageReport:
        return CoverageReport(
            levels=(
                CoverageLevelResult(
                    confidence_level=0.95,
                    critical_value=1.96,
                    n_covered=19,
                    n_evaluated=20,
                ),
                CoverageLevelResult(
                    confidence_level=0.75,
                    critical_value=1.15,
                    n_covered=15,
                    n_evaluated=20,
                ),
            ),
            n_persons=21,
            n_excluded=1,
        )

    def test_as_dict(self, report: CoverageReport) -> None:
        assert report.as_dict() == {0.95: 0.95, 0.75: 0.75}

    def test_to_dataframe(self, report: CoverageReport) -> None:
        df = report.to_dataframe()

        assert list(df["confidence_level"]) == [0.95, 0.75]
        assert list(df["n_covered"]) == [19, 15]
        assert list(df["observed"]) == pytest.approx([0.95, 0.75])


class TestRecoveryMetrics:
    def test_valid(self) -> None:
        metrics = RecoveryMetrics(
            bias=-0.1, mean_absolute_error=0.3, rmse=0.4, correlation=0.9, n=5
        )
        assert metrics.n == 5

    def test_negative_mae_raises(self) -> None:
        with pytest.raises(ValueError, match="mean_absolute_error"):
            RecoveryMetrics(
                bias=0.0,
                mean_absolute_error=-0.1,
                rmse=0.0,
                correlation=1.0,
                n=1,
            )

    def test_negative_rmse_raises(self) -> None:
        with pytest.raises(ValueError, match="rmse"):
            RecoveryMetrics(
                bias=0.0,
                mean_absolute_error=0.0,
                rmse=-1.0,
                correlation=1.0,
                n=1,
            )


def test_study_result_to_dataframe() -> None:
    dataset = SimulatedDataset(
        abilities=np.array([0.5, -0.5]),
        responses=ResponseMatrix(
            responses=np.array([[1], [0]], dtype=np.int8), n_categories=(2,)
        ),
        item_ids=("a",),
    )
    estimates = AbilityEstimates(
        theta=np.array([0.7, -10.0]),
        se=np.array([0.9, np.inf]),
        status=(EstimateStatus.CONVERGED, EstimateStatus.LOWER_BOUND),
    )
    result = SimulationStudyResult(
        run_index=0,
        seed=1,
        dataset=dataset,
        estimates=estimates,
        coverage=CoverageReport(levels=(), n_persons=2, n_excluded=0),
        recovery=RecoveryMetrics(
            bias=0.0, mean_absolute_error=0.0, rmse=0.0, correlation=1.0, n=2
        ),
    )

    df = result.to_dataframe()

    assert list(df.columns) == ["theta", "theta_hat", "se", "status"]
    assert df["theta"].tolist() == [0.5, -0.5]
    assert df["status"].tolist() == ["converged", "lower_bound"]
