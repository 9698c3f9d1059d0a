"""
Configuration dataclasses for trait estimation.

This module defines the configuration parameters for:
- The theta search range and root-finding convergence criteria
- The estimation method (WLE or MLE) and standard error method
- The handling of extreme (all-minimum / all-maximum) response patterns
- Batch parallelism
"""

from dataclasses import dataclass, field
from functools import cache
from importlib.metadata import PackageNotFoundError, version

import toml

from sem_analysis.core.exceptions import ProjectRootNotFound
from sem_analysis.core.paths import get_project_root_dir
from sem_analysis.irt.estimation.enums import (
    EstimationMethod,
    ExtremeScorePolicy,
    SEMethod,
)

# Default theta search range (logits)
DEFAULT_THETA_RANGE = (-10.0, 10.0)

# Default convergence settings
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100

# Information at or below this value makes the standard error undefined
DEFAULT_MIN_INFORMATION = 1e-10

DEFAULT_N_WORKERS = 4


@cache
def _get_project_version() -> str:
    try:
        root_dir = get_project_root_dir()
    except ProjectRootNotFound:
        # Installed without a source tree
        try:
            return version("sem-analysis")
        except PackageNotFoundError:
            return "unknown"

    with open(root_dir / "pyproject.toml") as f:
        data = toml.load(f)

    project_version = data.get("project", {}).get("version")

    if not project_version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(project_version, str)
    return project_version


@dataclass(frozen=True)
class EstimationConfig:
    """
    Master configuration for trait estimation.

    Attributes:
        theta_range: (lower, upper) bounds of the root search. Extreme
            patterns under the boundary policy are assigned these bounds.
        tolerance: Absolute tolerance on theta for the root finder.
        max_iterations: Hard iteration cap per response pattern. Exceeding
            it is reported as non-convergence for that pattern only.
        method: WLE (Warm's weighted likelihood) or plain MLE.
        se_method: CORRECTED uses the curvature of the estimating function
            at the estimate; FISHER uses the test information alone.
        extreme_score_policy: How all-minimum / all-maximum patterns are
            scored (boundary, estimate, or raise).
        min_information: Information at or below this value yields an
            undefined (infinite) standard error.
        n_workers: Thread pool size for batch estimation. 1 runs inline.
        model_version: Version string for reproducibility tracking.
    """

    theta_range: tuple[float, float] = DEFAULT_THETA_RANGE
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    method: EstimationMethod = EstimationMethod.WLE
    se_method: SEMethod = SEMethod.CORRECTED
    extreme_score_policy: ExtremeScorePolicy = ExtremeScorePolicy.BOUNDARY
    min_information: float = DEFAULT_MIN_INFORMATION
    n_workers: int = DEFAULT_N_WORKERS
    model_version: str = field(default_factory=_get_project_version)

    def __post_init__(self) -> None:
        lower, upper = self.theta_range
        if not lower < upper:
            raise ValueError(
                "theta_range must satisfy lower < upper, "
                f"got {self.theta_range}"
            )
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )
        if self.min_information < 0:
            raise ValueError(
                f"min_information must be >= 0, got {self.min_information}"
            )
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")

    @property
    def lower_bound(self) -> float:
        return self.theta_range[0]

    @property
    def upper_bound(self) -> float:
        return self.theta_range[1]


def default_config() -> EstimationConfig:
    """Create a default estimation configuration."""
    return EstimationConfig()
