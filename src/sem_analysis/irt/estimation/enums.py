from enum import Enum


class EstimationMethod(str, Enum):
    WLE = "wle"
    MLE = "mle"


class SEMethod(str, Enum):
    CORRECTED = "corrected"
    FISHER = "fisher"


class ExtremeScorePolicy(str, Enum):
    BOUNDARY = "boundary"
    ESTIMATE = "estimate"
    RAISE = "raise"


class EstimateStatus(str, Enum):
    CONVERGED = "converged"
    LOWER_BOUND = "lower_bound"
    UPPER_BOUND = "upper_bound"
    SE_UNDEFINED = "se_undefined"
    NON_CONVERGED = "non_converged"
    DEGENERATE = "degenerate"

    @property
    def is_failure(self) -> bool:
        """Whether no point estimate was produced."""
        return self in (
            EstimateStatus.NON_CONVERGED,
            EstimateStatus.DEGENERATE,
        )
