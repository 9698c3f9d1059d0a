"""
Data models for response data.

This module defines the data structures for:
- ResponseMatrix: Item responses for a group of persons, aligned with an
  item set (one column per item, in item set order)
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from sem_analysis.core.constants import MISSING_VALUE


@dataclass(frozen=True)
class ResponseMatrix:
    """
    Response data for scoring and simulation.

    The responses array is copied on construction and made read-only, so a
    ResponseMatrix can be shared freely between estimation tasks.

    Attributes:
        responses: Array of shape (n_persons, n_items) containing category
            indices (0-indexed). Missing responses are MISSING_VALUE.
        n_categories: Number of response categories for each item.
    """

    responses: NDArray[np.int8]
    n_categories: tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate response matrix."""
        responses = np.array(self.responses, dtype=np.int8, copy=True)
        if responses.ndim != 2:
            raise ValueError(
                f"responses must be 2D, got shape {responses.shape}"
            )
        if responses.shape[1] != len(self.n_categories):
            raise ValueError(
                f"responses have {responses.shape[1]} columns but "
                f"{len(self.n_categories)} items were given"
            )
        if any(k < 2 for k in self.n_categories):
            raise ValueError(
                f"every item needs >= 2 categories, got {self.n_categories}"
            )

        # Validate response values are in valid range per item
        upper = np.array(self.n_categories, dtype=np.int64)[np.newaxis, :]
        valid = responses != MISSING_VALUE
        if np.any(valid & (responses < 0)):
            raise ValueError(
                f"Response values must be >= 0 or {MISSING_VALUE} (missing)"
            )
        too_large = valid & (responses >= upper)
        if np.any(too_large):
            row, col = np.argwhere(too_large)[0]
            raise ValueError(
                f"Response {responses[row, col]} at row {row}, item {col} "
                f"exceeds the item's {self.n_categories[col]} categories"
            )

        responses.setflags(write=False)
        object.__setattr__(self, "responses", responses)
        object.__setattr__(self, "n_categories", tuple(self.n_categories))

    @property
    def n_persons(self) -> int:
        """Number of persons (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]

    @property
    def missing_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates missing response."""
        result: NDArray[np.bool_] = self.responses == MISSING_VALUE
        return result

    @property
    def valid_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates valid (non-missing) response."""
        result: NDArray[np.bool_] = self.responses != MISSING_VALUE
        return result

    def row(self, person_idx: int) -> NDArray[np.int8]:
        """Response pattern of one person."""
        result: NDArray[np.int8] = self.responses[person_idx]
        return result

    def sum_scores(self) -> NDArray[np.int64]:
        """Ordinal sum score per person, missing responses excluded."""
        valid = np.where(self.valid_mask, self.responses, 0)
        result: NDArray[np.int64] = valid.sum(axis=1).astype(np.int64)
        return result

    def item_response_counts(self, item_idx: int) -> NDArray[np.int64]:
        """
        Count responses for each category of an item (excluding missing).

        Args:
            item_idx: Index of the item.

        Returns:
            Array of shape (n_categories[item_idx],) with counts per category.
        """
        item_responses = self.responses[:, item_idx]
        valid = item_responses[item_responses != MISSING_VALUE]
        counts = np.bincount(
            valid.astype(np.int64), minlength=self.n_categories[item_idx]
        )
        return counts.astype(np.int64)
