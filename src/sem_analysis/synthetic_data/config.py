from dataclasses import dataclass, field

from omegaconf import MISSING

DEFAULT_CONFIDENCE_LEVELS = [0.95, 0.90, 0.75]


@dataclass
class DistributionConfig:
    """Configuration for the trait distribution of simulated persons.

    Attributes:
        distribution: Distribution type ("normal", "truncated_normal",
            "uniform", "skew_normal", "fixed")
        params: Distribution parameters (mean, std, lower, upper, etc.)
    """

    distribution: str = MISSING
    params: dict[str, float | None] = MISSING


def _default_ability() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


def _default_confidence_levels() -> list[float]:
    return list(DEFAULT_CONFIDENCE_LEVELS)


@dataclass
class SimulationConfig:
    """Complete configuration for one simulation study.

    Attributes:
        n_persons: Number of simulated persons.
        random_seed: Seed for trait draws and response simulation.
        ability: Distribution of true trait values.
        item_preset: Name of the item calibration in synthetic_data/items.
        confidence_levels: Nominal levels at which coverage is evaluated.
    """

    n_persons: int

    # Reproducibility
    random_seed: int = MISSING

    ability: DistributionConfig = field(default_factory=_default_ability)
    item_preset: str = "pss7"
    confidence_levels: list[float] = field(
        default_factory=_default_confidence_levels
    )

    def __post_init__(self) -> None:
        if self.n_persons < 1:
            raise ValueError("Must have at least 1 person")
        if not self.confidence_levels:
            raise ValueError("Must have at least 1 confidence level")
        for level in self.confidence_levels:
            if not (0.0 < level < 1.0):
                raise ValueError(
                    f"confidence levels must be in (0, 1), got {level}"
                )
