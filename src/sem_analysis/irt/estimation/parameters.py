"""
PCM item parameter representation.

The Partial Credit Model (Masters, 1982) parameterization for an item with
thresholds δ_1..δ_m (m + 1 ordered categories 0..m):

    P(X=k | θ) = exp(Σ_{j<=k} (θ - δ_j)) / Σ_h exp(Σ_{j<=h} (θ - δ_j))

with δ_0 := 0 and the empty sum for category 0. Threshold δ_k is the
location on the latent continuum where categories k-1 and k are equally
probable.

Thresholds are not required to be increasing: disordered thresholds are a
legitimate calibration outcome under the PCM and are reported, not rejected.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from functools import cached_property
from typing import Any

import numpy as np
from numpy.typing import NDArray
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)

from sem_analysis.core.constants import MISSING_VALUE
from sem_analysis.core.exceptions import ParseError
from sem_analysis.core.utils import softmax

logger = logging.getLogger(__name__)


class PCMItemParameters(BaseModel):
    """
    Parameters for one item under the Partial Credit Model.

    Attributes:
        item_id: Unique identifier for the item.
        thresholds: Category threshold locations (δ_1..δ_m). The item has
            len(thresholds) + 1 response categories.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str
    thresholds: tuple[float, ...]

    @field_validator("thresholds")
    @classmethod
    def _validate_thresholds(
        cls, thresholds: tuple[float, ...]
    ) -> tuple[float, ...]:
        if len(thresholds) < 1:
            raise ValueError("an item needs at least one threshold")
        if not all(math.isfinite(t) for t in thresholds):
            raise ValueError(f"thresholds must be finite, got {thresholds}")
        return thresholds

    @property
    def n_thresholds(self) -> int:
        """Number of thresholds (m)."""
        return len(self.thresholds)

    @property
    def n_categories(self) -> int:
        """Number of response categories (m + 1)."""
        return len(self.thresholds) + 1

    @property
    def max_score(self) -> int:
        """Highest category index."""
        return len(self.thresholds)

    @property
    def is_ordered(self) -> bool:
        """Whether thresholds are strictly increasing."""
        return all(
            a < b
            for a, b in zip(self.thresholds, self.thresholds[1:], strict=False)
        )

    def compute_probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """
        Compute PCM category probabilities at given theta values.

        Args:
            theta: Trait values, shape (n_theta,).

        Returns:
            Probabilities, shape (n_theta, n_categories).
        """
        theta = np.atleast_1d(np.asarray(theta, dtype=np.float64))
        thresholds = np.array(self.thresholds, dtype=np.float64)

        # Cumulative logits Σ_{j<=k} (θ - δ_j), category 0 fixed at 0
        # Shape: (n_theta, n_categories)
        steps = theta[:, np.newaxis] - thresholds[np.newaxis, :]
        logits = np.concatenate(
            [np.zeros((len(theta), 1)), np.cumsum(steps, axis=1)], axis=1
        )
        return softmax(logits, axis=1)


class ItemSet(BaseModel):
    """
    Ordered collection of PCM items sharing one calibration.

    The order of items defines the column order of response patterns.

    Attributes:
        items: Item parameters, in response column order.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[PCMItemParameters, ...]

    @model_validator(mode="after")
    def _validate_items(self) -> "ItemSet":
        if len(self.items) == 0:
            raise ValueError("an item set needs at least one item")
        seen: set[str] = set()
        for item in self.items:
            if item.item_id in seen:
                raise ValueError(f"duplicate item id: {item.item_id}")
            seen.add(item.item_id)
        return self

    @property
    def n_items(self) -> int:
        """Number of items."""
        return len(self.items)

    @property
    def item_ids(self) -> tuple[str, ...]:
        return tuple(item.item_id for item in self.items)

    @property
    def n_categories(self) -> tuple[int, ...]:
        """Number of response categories per item."""
        return tuple(item.n_categories for item in self.items)

    @property
    def max_scores(self) -> NDArray[np.int64]:
        """Highest category index per item."""
        return np.array(
            [item.max_score for item in self.items], dtype=np.int64
        )

    @property
    def max_sum_score(self) -> int:
        """Highest achievable sum score when every item is answered."""
        return sum(item.max_score for item in self.items)

    @property
    def disordered_items(self) -> tuple[str, ...]:
        """Ids of items whose thresholds are not strictly increasing."""
        return tuple(
            item.item_id for item in self.items if not item.is_ordered
        )

    @cached_property
    def threshold_matrix(self) -> NDArray[np.float64]:
        """
        Thresholds padded to a rectangular array for the numba kernels.

        Shape (n_items, max_thresholds); cells past an item's own thresholds
        are zero and never read (see threshold_counts).
        """
        max_thresholds = max(item.n_thresholds for item in self.items)
        matrix = np.zeros((self.n_items, max_thresholds), dtype=np.float64)
        for i, item in enumerate(self.items):
            matrix[i, : item.n_thresholds] = item.thresholds
        matrix.setflags(write=False)
        return matrix

    @cached_property
    def threshold_counts(self) -> NDArray[np.int64]:
        """Number of thresholds per item, shape (n_items,)."""
        counts = np.array(
            [item.n_thresholds for item in self.items], dtype=np.int64
        )
        counts.setflags(write=False)
        return counts

    def index_of(self, item_id: str) -> int:
        """Column index of an item."""
        for i, item in enumerate(self.items):
            if item.item_id == item_id:
                return i
        raise ValueError(f"unknown item id: {item_id}")

    def pattern_from_mapping(
        self, mapping: Mapping[str, int | None]
    ) -> NDArray[np.int8]:
        """
        Build a response pattern aligned with this item set.

        Items absent from the mapping, or mapped to None, are missing.

        Args:
            mapping: Item id to observed category index (or None).

        Returns:
            Response vector of shape (n_items,), MISSING_VALUE for missing.

        Raises:
            ValueError: If the mapping names an item outside this item set,
                or a category outside the item's range.
        """
        pattern = np.full(self.n_items, MISSING_VALUE, dtype=np.int8)
        for item_id, category in mapping.items():
            idx = self.index_of(item_id)
            if category is None:
                continue
            if not (0 <= category < self.items[idx].n_categories):
                raise ValueError(
                    f"category {category} out of range for item {item_id} "
                    f"with {self.items[idx].n_categories} categories"
                )
            pattern[idx] = category
        return pattern


def _is_missing_cell(cell: Any) -> bool:
    if cell is None:
        return True
    if isinstance(cell, str) and cell.strip() == "":
        return True
    if isinstance(cell, float | np.floating) and math.isnan(cell):
        return True
    return False


def _parse_threshold_row(
    row: Sequence[Any], row_idx: int
) -> tuple[float, ...]:
    """Parse one ragged row; trailing missing cells are allowed."""
    values: list[float] = []
    seen_missing = False
    for col_idx, cell in enumerate(row):
        if _is_missing_cell(cell):
            seen_missing = True
            continue
        if seen_missing:
            raise ParseError(
                "threshold follows a missing cell", row=row_idx, column=col_idx
            )
        if isinstance(cell, bool):
            raise ParseError(
                f"non-numeric threshold {cell!r}", row=row_idx, column=col_idx
            )
        try:
            value = float(cell)
        except (TypeError, ValueError) as e:
            raise ParseError(
                f"non-numeric threshold {cell!r}", row=row_idx, column=col_idx
            ) from e
        if not math.isfinite(value):
            raise ParseError(
                f"threshold must be finite, got {value}",
                row=row_idx,
                column=col_idx,
            )
        values.append(value)

    if not values:
        raise ParseError("item has no thresholds", row=row_idx)
    return tuple(values)


def load_items(
    raw_matrix: Sequence[Sequence[Any]] | NDArray[Any],
    item_ids: Sequence[str] | None = None,
) -> ItemSet:
    """
    Parse a ragged threshold table into an ItemSet.

    Each row holds one item's thresholds; items with fewer categories leave
    trailing cells empty (None, NaN or blank).

    Args:
        raw_matrix: One row per item, one column per threshold.
        item_ids: Item identifiers, one per row. Defaults to
            "item_1", "item_2", ...

    Returns:
        Validated ItemSet.

    Raises:
        ParseError: If a row has no thresholds, a threshold is non-numeric
            or non-finite, a value follows a missing cell, or the ids are
            invalid.
    """
    rows = [list(row) for row in raw_matrix]
    if not rows:
        raise ParseError("item parameter table is empty")

    if item_ids is None:
        item_ids = [f"item_{i + 1}" for i in range(len(rows))]
    elif len(item_ids) != len(rows):
        raise ParseError(
            f"got {len(item_ids)} item ids for {len(rows)} threshold rows"
        )

    items = [
        PCMItemParameters(
            item_id=str(item_id), thresholds=_parse_threshold_row(row, i)
        )
        for i, (item_id, row) in enumerate(zip(item_ids, rows, strict=True))
    ]

    try:
        item_set = ItemSet(items=tuple(items))
    except ValidationError as e:
        raise ParseError(f"invalid item set: {e}") from e

    if item_set.disordered_items:
        logger.warning(
            "Disordered thresholds for items: "
            f"{list(item_set.disordered_items)}"
        )

    return item_set
