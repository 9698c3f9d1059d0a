"""
Simulation configuration loading.

This module provides:
- The distribution factory backed by the sampling registry
- Config loading from YAML files using OmegaConf
"""

from pathlib import Path

from omegaconf import OmegaConf

from sem_analysis.synthetic_data.config import (
    DistributionConfig,
    SimulationConfig,
)
from sem_analysis.synthetic_data.sampling import Distribution, registry


def create_distribution(config: DistributionConfig) -> Distribution:
    """Create a Distribution from configuration using the registry.

    Args:
        config: Distribution configuration

    Returns:
        Distribution object that supports .sample() and .cdf()

    Raises:
        ValueError: If distribution type is unknown
    """
    return registry.get_sampler(
        name=config.distribution,
        params=dict(config.params),
    )


def load_config(yaml_path: Path | None) -> SimulationConfig:
    """Load and validate a simulation config from YAML.

    Args:
        yaml_path: Path to YAML config file

    Returns:
        Validated SimulationConfig

    Raises:
        ValueError: If values fail validation
        FileNotFoundError: If yaml_path doesn't exist
    """
    # Create schema from dataclass
    schema = OmegaConf.structured(SimulationConfig)

    if yaml_path is not None:
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        user_config = OmegaConf.load(yaml_path)
        config = OmegaConf.merge(schema, user_config)
    else:
        config = schema

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, SimulationConfig)

    return result
