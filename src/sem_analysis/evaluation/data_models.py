"""
Data models for evaluation of trait estimates against simulated truth.
"""

from dataclasses import dataclass

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from sem_analysis.irt.estimation.data_models import AbilityEstimates
from sem_analysis.synthetic_data.data_models import SimulatedDataset


class CoverageLevelResult(BaseModel):
    """Observed coverage of θ̂ ± z·SE intervals at one nominal level."""

    confidence_level: float = Field(..., gt=0.0, lt=1.0)
    critical_value: float
    n_covered: int = Field(..., ge=0)
    n_evaluated: int = Field(..., ge=0)
    model_config = ConfigDict(frozen=True)

    @property
    def observed(self) -> float:
        """Fraction of evaluated persons whose interval holds the truth.

        Returns NaN if no person was evaluated.
        """
        if self.n_evaluated == 0:
            return float("nan")
        return self.n_covered / self.n_evaluated

    @property
    def deviation(self) -> float:
        """Observed minus nominal coverage."""
        return self.observed - self.confidence_level


class CoverageReport(BaseModel):
    """Coverage at every requested confidence level."""

    levels: tuple[CoverageLevelResult, ...]
    n_persons: int = Field(..., ge=0)
    n_excluded: int = Field(..., ge=0)
    model_config = ConfigDict(frozen=True)

    def as_dict(self) -> dict[float, float]:
        """Observed coverage keyed by nominal confidence level."""
        return {r.confidence_level: r.observed for r in self.levels}

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "confidence_level": [r.confidence_level for r in self.levels],
                "critical_value": [r.critical_value for r in self.levels],
                "observed": [r.observed for r in self.levels],
                "n_covered": [r.n_covered for r in self.levels],
                "n_evaluated": [r.n_evaluated for r in self.levels],
            }
        )


@dataclass(frozen=True)
class RecoveryMetrics:
    """Accuracy of point estimates against the true trait values.

    Attributes:
        bias: Mean of (estimate - truth).
        mean_absolute_error: Mean of |estimate - truth|.
        rmse: Root mean squared error.
        correlation: Pearson correlation of estimates with the truth. NaN
            when either side has zero variance.
        n: Number of persons with a finite estimate.
    """

    bias: float
    mean_absolute_error: float
    rmse: float
    correlation: float
    n: int

    def __post_init__(self) -> None:
        if self.n < 0:
            raise ValueError(f"n must be >= 0, got {self.n}")
        if self.mean_absolute_error < 0:
            raise ValueError(
                "mean_absolute_error must be >= 0, "
                f"got {self.mean_absolute_error}"
            )
        if self.rmse < 0:
            raise ValueError(f"rmse must be >= 0, got {self.rmse}")


@dataclass(frozen=True)
class SimulationStudyResult:
    """Result from a single simulation study run.

    Attributes:
        run_index: Position of the run among replications.
        seed: Seed the dataset was generated from.
        dataset: Simulated responses and true trait values.
        estimates: Trait estimates aligned with the dataset rows.
        coverage: Coverage at each confidence level.
        recovery: Point estimate accuracy.
    """

    run_index: int
    seed: int
    dataset: SimulatedDataset
    estimates: AbilityEstimates
    coverage: CoverageReport
    recovery: RecoveryMetrics

    def to_dataframe(self) -> pd.DataFrame:
        """Per-person table of true theta, estimate, SE and status."""
        df = self.estimates.to_dataframe()
        df = df.rename(columns={"theta": "theta_hat"})
        df.insert(0, "theta", self.dataset.abilities)
        return df
