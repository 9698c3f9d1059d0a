import math

import pandas as pd
from pydantic import BaseModel, ConfigDict

from sem_analysis.irt.estimation.enums import EstimateStatus


class ScoringTableRow(BaseModel):
    """
    Trait score for one ordinal sum score.

    Attributes:
        sum_score: Ordinal sum score.
        theta: Trait estimate (logits) for the sum score.
        se: Standard error. +inf when undefined.
        status: How the estimate was obtained.
        pattern: Representative response pattern with this sum score.
    """

    model_config = ConfigDict(frozen=True)

    sum_score: int
    theta: float
    se: float
    status: EstimateStatus
    pattern: tuple[int, ...]


class ScoringTable(BaseModel):
    """
    Lookup table from ordinal sum scores to trait scores.

    Attributes:
        rows: One row per sum score, in increasing sum score order.
        theta_range: Theta range the estimates were searched on.
        is_monotone: Whether theta is non-decreasing in the sum score.
    """

    model_config = ConfigDict(frozen=True)

    rows: tuple[ScoringTableRow, ...]
    theta_range: tuple[float, float]
    is_monotone: bool

    def lookup(self, sum_score: int) -> ScoringTableRow:
        """Row for a sum score."""
        for row in self.rows:
            if row.sum_score == sum_score:
                return row
        raise KeyError(f"sum score {sum_score} is not in the table")

    def to_dataframe(self) -> pd.DataFrame:
        """Table as a DataFrame, with patterns joined as "2-1-0"."""
        return pd.DataFrame(
            {
                "sum_score": [r.sum_score for r in self.rows],
                "theta": [r.theta for r in self.rows],
                "se": [r.se for r in self.rows],
                "status": [r.status.value for r in self.rows],
                "pattern": [
                    "-".join(str(k) for k in r.pattern) for r in self.rows
                ],
            }
        )

    @property
    def finite_rows(self) -> tuple[ScoringTableRow, ...]:
        """Rows with a finite standard error."""
        return tuple(r for r in self.rows if math.isfinite(r.se))
