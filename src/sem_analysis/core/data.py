"""
CSV loading utilities for item parameters and response data.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from sem_analysis.core.constants import MISSING_MARKERS, MISSING_VALUE
from sem_analysis.core.data_models import ResponseMatrix
from sem_analysis.core.exceptions import ParseError
from sem_analysis.irt.estimation.parameters import ItemSet, load_items


def load_item_parameters_csv(
    path: Path, id_column: str = "item_id"
) -> ItemSet:
    """Load a CSV file of PCM thresholds into an ItemSet.

    Expected CSV columns:
        - item_id: unique identifier for each item (optional; items are
          named item_1, item_2, ... when the column is absent)
        - one column per threshold, in order; items with fewer categories
          leave their trailing threshold cells empty

    Raises:
        ParseError: If a threshold row is malformed.
    """
    df = pd.read_csv(
        path, dtype={id_column: str}, na_values=list(MISSING_MARKERS)
    )

    item_ids: list[str] | None = None
    if id_column in df.columns:
        item_ids = df[id_column].tolist()
    threshold_columns = [c for c in df.columns if c != id_column]
    if not threshold_columns:
        raise ParseError("CSV has no threshold columns")

    # Keep raw cells: non-numeric values are reported by load_items
    raw = df[threshold_columns].to_numpy(dtype=object)
    return load_items(raw, item_ids=item_ids)


def load_response_csv(
    path: Path,
    item_set: ItemSet,
    id_column: str | None = None,
) -> tuple[list[str], ResponseMatrix]:
    """Load a CSV file of item responses into a ResponseMatrix.

    Columns are matched to items by header, so their order in the file
    does not matter. Empty cells and the usual NA markers are missing.

    Args:
        path: CSV file with one column per item id.
        item_set: Items the responses belong to.
        id_column: Optional person id column. Row numbers are used as ids
            when it is None.

    Returns:
        Tuple of (person_ids, ResponseMatrix).

    Raises:
        ValueError: If item columns are missing or a cell is not a valid
            category for its item.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    missing_columns = [i for i in item_set.item_ids if i not in df.columns]
    if missing_columns:
        raise ValueError(f"CSV is missing item columns: {missing_columns}")

    if id_column is None:
        person_ids = [str(i) for i in range(len(df))]
    else:
        if id_column not in df.columns:
            raise ValueError(f"CSV must have '{id_column}' column")
        person_ids = df[id_column].tolist()

    responses = np.full(
        (len(df), item_set.n_items), MISSING_VALUE, dtype=np.int8
    )
    for j, item in enumerate(item_set.items):
        for i, cell in enumerate(df[item.item_id]):
            cell = cell.strip()
            if cell in MISSING_MARKERS:
                continue
            try:
                category = int(cell)
            except ValueError as e:
                raise ValueError(
                    f"Invalid response {cell!r} for item {item.item_id} "
                    f"in row {i}"
                ) from e
            if not (0 <= category < item.n_categories):
                raise ValueError(
                    f"Response {category} out of range for item "
                    f"{item.item_id} with {item.n_categories} categories"
                )
            responses[i, j] = category

    return person_ids, ResponseMatrix(
        responses=responses, n_categories=item_set.n_categories
    )
