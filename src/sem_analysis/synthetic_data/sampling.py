"""
Sampling of true trait values.

This module contains the registry of trait distributions used by simulation
studies. Continuous distributions wrap scipy.stats; "fixed" places every
person at the same trait value for recovery studies.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import stats

from sem_analysis.core.utils import get_rng


class FrozenRV(Protocol):
    def cdf(self, x: Any) -> NDArray[np.floating[Any]]: ...
    def rvs(
        self, size: Any, random_state: Any
    ) -> NDArray[np.floating[Any]]: ...
    def mean(self) -> float: ...


class Distribution(ABC):
    """Abstract base class for trait distributions."""

    @abstractmethod
    def sample(self, n: int, rng: Generator) -> NDArray[np.float64]:
        """
        Sample n values.

        Args:
            n: Number of samples.
            rng: Random number generator.

        Returns:
            Array of shape (n,) with sampled values.
        """
        ...

    @abstractmethod
    def cdf(self, x: float) -> float:
        """Probability P(X <= x)."""
        ...

    @property
    @abstractmethod
    def mean(self) -> float:
        """Population mean of the trait."""
        ...


@dataclass
class ScipyDistribution(Distribution):
    """
    Wrapper for any scipy.stats distribution.

    Examples:
        >>> dist = ScipyDistribution(stats.norm(loc=0.57, scale=1.5))
        >>> dist = ScipyDistribution(stats.skewnorm(a=4, loc=0, scale=1))
    """

    dist: FrozenRV

    def sample(self, n: int, rng: Generator) -> NDArray[np.float64]:
        samples: NDArray[np.float64] = np.asarray(
            self.dist.rvs(size=n, random_state=rng), dtype=np.float64
        )
        return samples

    def cdf(self, x: float) -> float:
        return float(self.dist.cdf(x))

    @property
    def mean(self) -> float:
        return float(self.dist.mean())


@dataclass
class PointMass(Distribution):
    """Every person has the same trait value."""

    value: float

    def sample(self, n: int, rng: Generator) -> NDArray[np.float64]:
        return np.full(n, self.value, dtype=np.float64)

    def cdf(self, x: float) -> float:
        return 1.0 if x >= self.value else 0.0

    @property
    def mean(self) -> float:
        return self.value


####################################################################
# Registry
####################################################################


DistributionGenerator = Callable[..., Distribution]


class SamplerRegistry:
    def __init__(self) -> None:
        self._samplers: dict[str, DistributionGenerator] = {}

    def register(
        self, name: str
    ) -> Callable[[DistributionGenerator], DistributionGenerator]:
        def decorator(
            func: DistributionGenerator,
        ) -> DistributionGenerator:
            self._samplers[name] = func
            return func

        return decorator

    @property
    def names(self) -> list[str]:
        return sorted(self._samplers)

    def get_sampler(
        self, name: str, params: dict[str, float | None]
    ) -> Distribution:
        if name not in self._samplers:
            raise ValueError(
                f"Sampler {name} not registered. Available: {self.names}"
            )
        try:
            return self._samplers[name](**params)
        except TypeError as e:
            raise ValueError(
                f"Invalid parameters for {name}: {params}"
            ) from e


registry = SamplerRegistry()


@registry.register("fixed")
def fixed(*, value: float = 0.0) -> PointMass:
    """Degenerate distribution at a single trait value."""
    return PointMass(value=float(value))


@registry.register("normal")
def normal(*, mean: float = 0.0, std: float = 1.0) -> ScipyDistribution:
    """Normal distribution."""
    if std <= 0:
        raise ValueError(f"std must be > 0, got {std}")
    return ScipyDistribution(stats.norm(loc=mean, scale=std))


@registry.register("skew_normal")
def skew_normal(
    *, a: float, loc: float = 0.0, scale: float = 1.0
) -> ScipyDistribution:
    """
    Skew-normal distribution.

    Args:
        a: Shape parameter controlling skewness. a > 0 gives right skew.
        loc: Location parameter.
        scale: Scale parameter.
    """
    return ScipyDistribution(stats.skewnorm(a=a, loc=loc, scale=scale))


@registry.register("uniform")
def uniform(*, low: float = -1.0, high: float = 1.0) -> ScipyDistribution:
    """Uniform distribution."""
    if high <= low:
        raise ValueError(f"high must exceed low, got [{low}, {high}]")
    return ScipyDistribution(stats.uniform(loc=low, scale=high - low))


@registry.register("truncated_normal")
def truncated_normal(
    *,
    mean: float = 0.0,
    std: float = 1.0,
    lower: float | None = None,
    upper: float | None = None,
) -> ScipyDistribution:
    """
    Truncated normal distribution.

    Args:
        mean: Mean of the underlying normal distribution.
        std: Standard deviation of the underlying normal distribution.
        lower: Lower bound (None = unbounded).
        upper: Upper bound (None = unbounded).
    """
    # Convert bounds to standardized form for scipy.stats.truncnorm
    a_std = (lower - mean) / std if lower is not None else -np.inf
    b_std = (upper - mean) / std if upper is not None else np.inf
    return ScipyDistribution(
        stats.truncnorm(a_std, b_std, loc=mean, scale=std)
    )


def draw_sample(
    n: int,
    distribution_name: str = "normal",
    distribution_params: dict[str, float | None] | None = None,
    rng: Generator | None = None,
) -> NDArray[np.float64]:
    """
    Sample trait values from a registered distribution.

    Args:
        n: Number of values.
        distribution_name: Name of the distribution to sample from.
        distribution_params: Parameters passed to the distribution factory.
        rng: Random number generator.

    Returns:
        Array of shape (n,) with sampled values.
    """
    if rng is None:
        rng = get_rng()

    if distribution_params is None:
        distribution_params = {}

    distribution = registry.get_sampler(distribution_name, distribution_params)

    return distribution.sample(n, rng)
