"""Recover the original types of integer indices.

Model code sees categorical data as 1-based integer codes (see
``compose_data``). ``recover_types`` remembers, for each column of the
original data, either its ordered labels or that it was numeric, so that
``spread_samples`` can turn indices back into labels.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from tidydraws.data.store import NUMERIC, SampleStore


def column_levels(values: pd.Series) -> list[Any] | str:
    """Return the ordered labels of a column, or NUMERIC.

    Categorical columns keep their category order; other non-numeric
    columns use their sorted unique values.
    """
    if isinstance(values.dtype, pd.CategoricalDtype):
        return list(values.cat.categories)
    if is_numeric_dtype(values.dtype) and not is_bool_dtype(values.dtype):
        return NUMERIC
    return sorted(values.dropna().unique())


def recover_types(
    store: SampleStore,
    *sources: pd.DataFrame | Mapping[str, Sequence[Any] | str],
) -> SampleStore:
    """Attach a type-recovery map to a store.

    Args:
        store: The fitted model's samples
        *sources: DataFrames whose columns supply levels, or mappings of
            index name -> labels (or NUMERIC). Later sources win.

    Returns:
        A new SampleStore carrying the combined levels

    """
    levels: dict[str, Sequence[Any] | str] = {}
    for source in sources:
        if isinstance(source, pd.DataFrame):
            levels.update({str(name): column_levels(source[name]) for name in source.columns})
        else:
            levels.update(
                {
                    name: value if isinstance(value, str) else list(value)
                    for name, value in source.items()
                }
            )
    return store.with_levels(levels)
