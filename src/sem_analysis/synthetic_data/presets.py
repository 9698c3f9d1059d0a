"""
Preset simulation profiles and item calibrations.

Simulation presets live in params/*.yaml; item calibrations live in
items/*.csv (one row per item, columns item_id, d1, d2, ...).
"""

from pathlib import Path

from sem_analysis.core.data import load_item_parameters_csv
from sem_analysis.irt.estimation.parameters import ItemSet
from sem_analysis.synthetic_data.config import SimulationConfig
from sem_analysis.synthetic_data.parameters import load_config

PARAMS_DIR = Path(__file__).parent / "params"
ITEMS_DIR = Path(__file__).parent / "items"


def get_available_presets() -> list[str]:
    return sorted(x.stem for x in PARAMS_DIR.glob("*.yaml"))


def get_available_item_presets() -> list[str]:
    return sorted(x.stem for x in ITEMS_DIR.glob("*.csv"))


def get_preset(name: str) -> SimulationConfig:
    """Get a preset simulation configuration by name."""
    config_path = PARAMS_DIR / f"{name}.yaml"
    if not config_path.exists():
        available_presets = get_available_presets()
        raise ValueError(
            f"Unknown preset: {name}. Available presets: {available_presets}"
        )
    return load_config(config_path)


def get_item_preset(name: str) -> ItemSet:
    """Get a preset item calibration by name."""
    items_path = ITEMS_DIR / f"{name}.csv"
    if not items_path.exists():
        available = get_available_item_presets()
        raise ValueError(
            f"Unknown item preset: {name}. Available presets: {available}"
        )
    return load_item_parameters_csv(items_path)
