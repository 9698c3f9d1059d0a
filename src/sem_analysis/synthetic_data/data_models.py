"""
Data structures for simulated response data.

Only contracts are defined here; generation logic lives in generators.py.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from sem_analysis.core.data_models import ResponseMatrix


@dataclass(frozen=True)
class SimulatedDataset:
    """
    Simulated responses together with the true trait values behind them.

    Attributes:
        abilities: True trait values, shape (n_persons,). Read-only.
        responses: Simulated responses, one row per person.
        item_ids: Item ids in column order.
        seed: Seed the data was generated from, if any.
    """

    abilities: NDArray[np.float64]
    responses: ResponseMatrix
    item_ids: tuple[str, ...]
    seed: int | None = None

    def __post_init__(self) -> None:
        abilities = np.array(self.abilities, dtype=np.float64, copy=True)
        if abilities.ndim != 1:
            raise ValueError(
                f"abilities must be 1D, got shape {abilities.shape}"
            )
        if len(abilities) != self.responses.n_persons:
            raise ValueError(
                f"{len(abilities)} abilities for "
                f"{self.responses.n_persons} response rows"
            )
        if len(self.item_ids) != self.responses.n_items:
            raise ValueError(
                f"{len(self.item_ids)} item ids for "
                f"{self.responses.n_items} response columns"
            )
        abilities.setflags(write=False)
        object.__setattr__(self, "abilities", abilities)
        object.__setattr__(self, "item_ids", tuple(self.item_ids))

    @property
    def n_persons(self) -> int:
        return len(self.abilities)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per person: the true theta, then one column per item."""
        df = pd.DataFrame(
            np.asarray(self.responses.responses), columns=list(self.item_ids)
        )
        df.insert(0, "theta", self.abilities)
        return df
