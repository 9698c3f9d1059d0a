from collections import Counter
from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from sem_analysis.irt.estimation.enums import EstimateStatus


class TraitEstimate(BaseModel):
    """
    Trait estimate for one response pattern.

    Attributes:
        theta: Point estimate. NaN when estimation failed.
        se: Standard error. +inf when undefined, NaN when estimation failed.
        status: How the estimate was obtained (or why it is missing).
        n_iterations: Root-finder iterations used.
        message: Failure or boundary detail, if any.
    """

    model_config = ConfigDict(frozen=True)

    theta: float
    se: float
    status: EstimateStatus
    n_iterations: int = 0
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether a point estimate was produced."""
        return not self.status.is_failure


@dataclass(frozen=True)
class AbilityEstimates:
    """
    Trait estimates for a batch of response patterns, in input order.

    Attributes:
        theta: Point estimates, shape (n_persons,). NaN for failures.
        se: Standard errors, shape (n_persons,). +inf when undefined.
        status: Estimate status per person.
    """

    theta: NDArray[np.float64]
    se: NDArray[np.float64]
    status: tuple[EstimateStatus, ...]

    def __post_init__(self) -> None:
        if not (len(self.theta) == len(self.se) == len(self.status)):
            raise ValueError(
                "theta, se and status must have the same length, got "
                f"{len(self.theta)}, {len(self.se)}, {len(self.status)}"
            )

    @classmethod
    def from_estimates(
        cls, estimates: list[TraitEstimate]
    ) -> "AbilityEstimates":
        return cls(
            theta=np.array([e.theta for e in estimates], dtype=np.float64),
            se=np.array([e.se for e in estimates], dtype=np.float64),
            status=tuple(e.status for e in estimates),
        )

    @property
    def n_persons(self) -> int:
        """Number of persons."""
        return len(self.theta)

    @property
    def succeeded_mask(self) -> NDArray[np.bool_]:
        """Boolean mask of persons with a point estimate."""
        return np.array([not s.is_failure for s in self.status], dtype=bool)

    @property
    def n_failed(self) -> int:
        """Number of persons without a point estimate."""
        return int(np.sum(~self.succeeded_mask))

    def status_counts(self) -> dict[EstimateStatus, int]:
        """Number of persons per estimate status."""
        return dict(Counter(self.status))

    def to_dataframe(self) -> pd.DataFrame:
        """Per-person table of (theta, se, status), in input order."""
        return pd.DataFrame(
            {
                "theta": self.theta,
                "se": self.se,
                "status": [s.value for s in self.status],
            }
        )
